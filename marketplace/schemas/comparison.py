from typing import Dict, List, Optional

from marketplace.schemas.common import CamelModel


class CompareRequest(CamelModel):
    listing_ids: List[int]


class ComparisonField(CamelModel):
    field_name: str
    values: Dict[str, str]


class ComparisonHeader(CamelModel):
    id: int
    title: str
    price: str
    city: str
    district: str
    image_url: Optional[str] = None


class ComparisonResponse(CamelModel):
    category: str
    fields: List[ComparisonField]
    listings: Dict[str, ComparisonHeader]
