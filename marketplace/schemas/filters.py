from decimal import Decimal
from typing import Optional

from pydantic import field_validator

from marketplace.models.enums import (
    FuelType,
    HeatingType,
    LandType,
    ListingStatus,
    RealEstateType,
    Transmission,
    WorkplaceType,
)
from marketplace.schemas.common import CamelModel


class FilterBase(CamelModel):
    """Every field is optional; None means "no constraint"."""
    city: Optional[str] = None
    district: Optional[str] = None
    category_slug: Optional[str] = None
    status: Optional[ListingStatus] = None
    min_price: Optional[Decimal] = None
    max_price: Optional[Decimal] = None
    owner_id: Optional[int] = None

    @field_validator("*", mode="before")
    @classmethod
    def blank_is_absent(cls, value):
        if isinstance(value, str) and not value.strip():
            return None
        return value


class GeneralFilter(FilterBase):
    pass


class RealEstateFilter(FilterBase):
    real_estate_type: Optional[RealEstateType] = None
    room_count: Optional[str] = None
    min_square_meter: Optional[int] = None
    max_square_meter: Optional[int] = None
    min_building_age: Optional[int] = None
    max_building_age: Optional[int] = None
    min_floor: Optional[int] = None
    max_floor: Optional[int] = None
    heating_type: Optional[HeatingType] = None
    furnished: Optional[bool] = None


class VehicleFilter(FilterBase):
    brand: Optional[str] = None
    model: Optional[str] = None
    min_year: Optional[int] = None
    max_year: Optional[int] = None
    fuel_type: Optional[FuelType] = None
    transmission: Optional[Transmission] = None
    min_kilometer: Optional[int] = None
    max_kilometer: Optional[int] = None
    engine_volume: Optional[str] = None


class LandFilter(FilterBase):
    land_type: Optional[LandType] = None
    min_square_meter: Optional[int] = None
    max_square_meter: Optional[int] = None


class WorkplaceFilter(FilterBase):
    workplace_type: Optional[WorkplaceType] = None
    min_square_meter: Optional[int] = None
    max_square_meter: Optional[int] = None
    min_floor_count: Optional[int] = None
    max_floor_count: Optional[int] = None
    furnished: Optional[bool] = None
