from datetime import datetime
from decimal import Decimal
from typing import Optional, Union

from pydantic import Field

from marketplace.models.enums import (
    BodyType,
    Currency,
    FuelType,
    HeatingType,
    LandType,
    ListingFrom,
    ListingStatus,
    ListingType,
    OfferType,
    RealEstateType,
    TitleStatus,
    TractionType,
    Transmission,
    VehicleStatus,
    WorkplaceType,
    YesNo,
)
from marketplace.schemas.common import CamelModel


# Variant payloads. Used as the ``details`` block of a response and mixed into create requests.

class RealEstateDetailsData(CamelModel):
    real_estate_type: RealEstateType
    room_count: Optional[str] = Field(None, max_length=20)
    square_meter: Optional[int] = Field(None, gt=0)
    building_age: Optional[int] = Field(None, ge=0)
    floor: Optional[int] = None
    heating_type: Optional[HeatingType] = None
    furnished: bool = False


class VehicleDetailsData(CamelModel):
    brand: str = Field(max_length=50)
    model: str = Field(max_length=50)
    year: int = Field(ge=1900, le=2100)
    fuel_type: FuelType
    transmission: Transmission
    kilometer: int = Field(ge=0)
    engine_volume: Optional[str] = Field(None, max_length=20)
    series: Optional[str] = Field(None, max_length=50)
    vehicle_status: Optional[VehicleStatus] = None
    body_type: Optional[BodyType] = None
    engine_power: Optional[str] = Field(None, max_length=20)
    traction_type: Optional[TractionType] = None
    color: Optional[str] = Field(None, max_length=30)
    warranty: Optional[bool] = None
    heavy_damage: Optional[bool] = None
    plate_nationality: Optional[str] = Field(None, max_length=50)
    from_who: Optional[ListingFrom] = None
    exchange: Optional[bool] = None


class LandDetailsData(CamelModel):
    land_type: LandType
    square_meter: int = Field(gt=0)
    zoning_status: Optional[str] = Field(None, max_length=100)
    parcel_number: int
    island_number: int


class WorkplaceDetailsData(CamelModel):
    workplace_type: WorkplaceType
    square_meter: int = Field(gt=0)
    floor_count: int = Field(ge=0)
    furnished: bool = False
    heating_type: Optional[HeatingType] = None
    building_age: Optional[int] = Field(None, ge=0)
    dues: Optional[Decimal] = Field(None, ge=0)
    credit_eligibility: Optional[YesNo] = None
    deed_status: Optional[TitleStatus] = None
    listing_from: Optional[ListingFrom] = None
    exchange: Optional[YesNo] = None


DetailsData = Union[RealEstateDetailsData, VehicleDetailsData, LandDetailsData, WorkplaceDetailsData]


class ListingCreateBase(CamelModel):
    title: str = Field(min_length=1, max_length=150)
    description: Optional[str] = None
    price: Decimal = Field(gt=0, max_digits=12, decimal_places=2)
    currency: Currency
    offer_type: OfferType = OfferType.FOR_SALE
    city: str = Field(min_length=1, max_length=50)
    district: str = Field(min_length=1, max_length=50)
    latitude: Optional[float] = Field(None, ge=-90, le=90)
    longitude: Optional[float] = Field(None, ge=-180, le=180)
    category_slug: str


class RealEstateCreateRequest(ListingCreateBase, RealEstateDetailsData):
    pass


class VehicleCreateRequest(ListingCreateBase, VehicleDetailsData):
    pass


class LandCreateRequest(ListingCreateBase, LandDetailsData):
    pass


class WorkplaceCreateRequest(ListingCreateBase, WorkplaceDetailsData):
    pass


class ListingUpdateBase(CamelModel):
    """Partial patch: a field left out (or sent as null) keeps its stored value."""
    title: Optional[str] = Field(None, min_length=1, max_length=150)
    description: Optional[str] = None
    price: Optional[Decimal] = Field(None, gt=0, max_digits=12, decimal_places=2)
    currency: Optional[Currency] = None
    status: Optional[ListingStatus] = None
    offer_type: Optional[OfferType] = None
    city: Optional[str] = Field(None, min_length=1, max_length=50)
    district: Optional[str] = Field(None, min_length=1, max_length=50)
    latitude: Optional[float] = Field(None, ge=-90, le=90)
    longitude: Optional[float] = Field(None, ge=-180, le=180)
    category_slug: Optional[str] = None


class RealEstateUpdateRequest(ListingUpdateBase):
    real_estate_type: Optional[RealEstateType] = None
    room_count: Optional[str] = Field(None, max_length=20)
    square_meter: Optional[int] = Field(None, gt=0)
    building_age: Optional[int] = Field(None, ge=0)
    floor: Optional[int] = None
    heating_type: Optional[HeatingType] = None
    furnished: Optional[bool] = None


class VehicleUpdateRequest(ListingUpdateBase):
    brand: Optional[str] = Field(None, max_length=50)
    model: Optional[str] = Field(None, max_length=50)
    year: Optional[int] = Field(None, ge=1900, le=2100)
    fuel_type: Optional[FuelType] = None
    transmission: Optional[Transmission] = None
    kilometer: Optional[int] = Field(None, ge=0)
    engine_volume: Optional[str] = Field(None, max_length=20)
    series: Optional[str] = Field(None, max_length=50)
    vehicle_status: Optional[VehicleStatus] = None
    body_type: Optional[BodyType] = None
    engine_power: Optional[str] = Field(None, max_length=20)
    traction_type: Optional[TractionType] = None
    color: Optional[str] = Field(None, max_length=30)
    warranty: Optional[bool] = None
    heavy_damage: Optional[bool] = None
    plate_nationality: Optional[str] = Field(None, max_length=50)
    from_who: Optional[ListingFrom] = None
    exchange: Optional[bool] = None


class LandUpdateRequest(ListingUpdateBase):
    land_type: Optional[LandType] = None
    square_meter: Optional[int] = Field(None, gt=0)
    zoning_status: Optional[str] = Field(None, max_length=100)
    parcel_number: Optional[int] = None
    island_number: Optional[int] = None


class WorkplaceUpdateRequest(ListingUpdateBase):
    workplace_type: Optional[WorkplaceType] = None
    square_meter: Optional[int] = Field(None, gt=0)
    floor_count: Optional[int] = Field(None, ge=0)
    furnished: Optional[bool] = None
    heating_type: Optional[HeatingType] = None
    building_age: Optional[int] = Field(None, ge=0)
    dues: Optional[Decimal] = Field(None, ge=0)
    credit_eligibility: Optional[YesNo] = None
    deed_status: Optional[TitleStatus] = None
    listing_from: Optional[ListingFrom] = None
    exchange: Optional[YesNo] = None


class ListingSummary(CamelModel):
    """Shape shared by the feed, search results and the favorite/notification consumers."""
    id: int
    listing_type: ListingType
    title: str
    description: Optional[str] = None
    price: Decimal
    currency: Currency
    city: str
    district: str
    category_slug: str
    category_name: str
    status: ListingStatus
    created_at: datetime
    updated_at: datetime
    created_by_username: Optional[str] = None
    image_url: Optional[str] = None
    view_count: int = 0
    favorite_count: int = 0

    @classmethod
    def _core(cls, listing, image_url: Optional[str]) -> dict:
        return dict(
            id=listing.id,
            listing_type=listing.listing_type,
            title=listing.title,
            description=listing.description,
            price=listing.price,
            currency=listing.currency,
            city=listing.city,
            district=listing.district,
            category_slug=listing.category.slug,
            category_name=listing.category.name,
            status=listing.status,
            created_at=listing.created_at,
            updated_at=listing.updated_at,
            created_by_username=listing.owner.username if listing.owner else None,
            image_url=image_url,
            view_count=listing.view_count or 0,
            favorite_count=listing.favorite_count or 0,
        )

    @classmethod
    def from_listing(cls, listing, image_url: Optional[str] = None) -> "ListingSummary":
        return cls(**cls._core(listing, image_url))


class ListingDetail(ListingSummary):
    offer_type: OfferType
    latitude: Optional[float] = None
    longitude: Optional[float] = None
    details: DetailsData

    @classmethod
    def from_listing(cls, listing, image_url: Optional[str] = None, details_schema=None) -> "ListingDetail":
        return cls(
            **cls._core(listing, image_url),
            offer_type=listing.offer_type,
            latitude=listing.latitude,
            longitude=listing.longitude,
            details=details_schema.model_validate(listing.details),
        )


class CategoryStats(CamelModel):
    slug: str
    name: str
    listing_type: ListingType
    count: int
