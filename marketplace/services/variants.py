"""Registry of the four listing variants, keyed by their discriminator."""
from dataclasses import dataclass
from typing import Mapping, Type

from pydantic import BaseModel

from marketplace.models.enums import ListingType
from marketplace.schemas import filters, listing as schemas
from marketplace.services.predicates import (
    LAND_FIELDS,
    REAL_ESTATE_FIELDS,
    VEHICLE_FIELDS,
    WORKPLACE_FIELDS,
    Operator,
)


@dataclass(frozen=True)
class Variant:
    listing_type: ListingType
    prefix: str
    label: str
    root_slug: str
    root_name: str
    details_schema: Type[BaseModel]
    create_schema: Type[BaseModel]
    update_schema: Type[BaseModel]
    filter_schema: Type[BaseModel]
    filter_fields: Mapping[str, tuple[str, Operator]]
    # detail field a similar listing must share, besides city and district
    similar_field: str

    @property
    def detail_fields(self) -> tuple[str, ...]:
        return tuple(self.details_schema.model_fields)


VARIANTS = {
    ListingType.REAL_ESTATE: Variant(
        listing_type=ListingType.REAL_ESTATE,
        prefix="real-estates",
        label="Real estate",
        root_slug="emlak",
        root_name="Emlak",
        details_schema=schemas.RealEstateDetailsData,
        create_schema=schemas.RealEstateCreateRequest,
        update_schema=schemas.RealEstateUpdateRequest,
        filter_schema=filters.RealEstateFilter,
        filter_fields=REAL_ESTATE_FIELDS,
        similar_field="real_estate_type",
    ),
    ListingType.VEHICLE: Variant(
        listing_type=ListingType.VEHICLE,
        prefix="vehicles",
        label="Vehicle",
        root_slug="arac",
        root_name="Araç",
        details_schema=schemas.VehicleDetailsData,
        create_schema=schemas.VehicleCreateRequest,
        update_schema=schemas.VehicleUpdateRequest,
        filter_schema=filters.VehicleFilter,
        filter_fields=VEHICLE_FIELDS,
        similar_field="brand",
    ),
    ListingType.LAND: Variant(
        listing_type=ListingType.LAND,
        prefix="lands",
        label="Land",
        root_slug="arsa",
        root_name="Arsa",
        details_schema=schemas.LandDetailsData,
        create_schema=schemas.LandCreateRequest,
        update_schema=schemas.LandUpdateRequest,
        filter_schema=filters.LandFilter,
        filter_fields=LAND_FIELDS,
        similar_field="land_type",
    ),
    ListingType.WORKPLACE: Variant(
        listing_type=ListingType.WORKPLACE,
        prefix="workplaces",
        label="Workplace",
        root_slug="is-yeri",
        root_name="İş Yeri",
        details_schema=schemas.WorkplaceDetailsData,
        create_schema=schemas.WorkplaceCreateRequest,
        update_schema=schemas.WorkplaceUpdateRequest,
        filter_schema=filters.WorkplaceFilter,
        filter_fields=WORKPLACE_FIELDS,
        similar_field="workplace_type",
    ),
}

ROOT_SLUGS = {variant.root_slug: variant.listing_type for variant in VARIANTS.values()}
