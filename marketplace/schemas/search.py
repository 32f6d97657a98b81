from datetime import datetime
from decimal import Decimal
from typing import Any, Dict, Optional

from pydantic import AliasChoices, ConfigDict, Field, field_validator

from marketplace.models.enums import ListingStatus
from marketplace.schemas.common import CamelModel


class AdvancedSearchRequest(CamelModel):
    # unknown keys are dropped so saved criteria maps can be replayed as-is
    model_config = ConfigDict(extra="ignore")

    query: Optional[str] = None
    city: Optional[str] = None
    district: Optional[str] = None
    latitude: Optional[float] = Field(None, alias="lat", ge=-90, le=90)
    longitude: Optional[float] = Field(None, alias="lng", ge=-180, le=180)
    radius_km: Optional[float] = Field(
        None, validation_alias=AliasChoices("radius", "radiusKm", "radius_km"), serialization_alias="radius", gt=0
    )
    category_slug: Optional[str] = None
    status: Optional[ListingStatus] = None
    min_price: Optional[Decimal] = None
    max_price: Optional[Decimal] = None
    sort_by: Optional[str] = None
    sort_order: Optional[str] = None

    @field_validator("*", mode="before")
    @classmethod
    def blank_is_absent(cls, value):
        if isinstance(value, str) and not value.strip():
            return None
        return value

    @property
    def has_point(self) -> bool:
        return self.latitude is not None and self.longitude is not None


class SearchSuggestion(CamelModel):
    value: str
    type: str
    count: int


class SavedSearchRequest(CamelModel):
    name: str = Field(min_length=1, max_length=100)
    search_criteria: Dict[str, Any] = Field(default_factory=dict)
    notification_enabled: bool = False


class SavedSearchResponse(CamelModel):
    id: int
    name: str
    search_criteria: Dict[str, Any]
    notification_enabled: bool
    created_at: datetime
    updated_at: datetime
