from sqlalchemy import (
    Boolean,
    Column,
    DateTime,
    Enum,
    Float,
    ForeignKey,
    Integer,
    Numeric,
    String,
    Text,
)
from sqlalchemy.orm import relationship, selectinload

from marketplace.models.base import Base, utcnow
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


def _enum(enum_cls, length=30):
    return Enum(enum_cls, native_enum=False, length=length, validate_strings=True)


class Category(Base):
    __tablename__ = "categories"
    id = Column(Integer, primary_key=True)
    name = Column(String(100), nullable=False)
    slug = Column(String(100), nullable=False, unique=True, index=True)
    active = Column(Boolean, nullable=False, default=True)


class User(Base):
    """Local mirror of listing owners; identities are managed by the user service."""
    __tablename__ = "users"
    id = Column(Integer, primary_key=True, autoincrement=False)
    username = Column(String(50), nullable=False)


class Listing(Base):
    """Core row shared by every variant; ``listing_type`` selects the detail row."""
    __tablename__ = "listings"
    id = Column(Integer, primary_key=True)
    listing_type = Column(_enum(ListingType, 20), nullable=False, index=True)
    title = Column(String(150), nullable=False)
    description = Column(Text)
    price = Column(Numeric(12, 2), nullable=False)
    currency = Column(_enum(Currency, 10), nullable=False)
    status = Column(_enum(ListingStatus, 20), nullable=False, default=ListingStatus.ACTIVE)
    offer_type = Column(_enum(OfferType, 20), nullable=False, default=OfferType.FOR_SALE)
    city = Column(String(50), nullable=False, index=True)
    district = Column(String(50), nullable=False)
    latitude = Column(Float)
    longitude = Column(Float)
    category_id = Column(Integer, ForeignKey("categories.id"), nullable=False)
    created_by_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    created_at = Column(DateTime, nullable=False, default=utcnow)
    updated_at = Column(DateTime, nullable=False, default=utcnow, onupdate=utcnow)
    view_count = Column(Integer, nullable=False, default=0)
    favorite_count = Column(Integer, nullable=False, default=0)
    search_document = Column(Text, nullable=False, default="")

    category = relationship("Category")
    owner = relationship("User")
    real_estate = relationship("RealEstateDetails", uselist=False, cascade="all, delete-orphan", passive_deletes=True)
    vehicle = relationship("VehicleDetails", uselist=False, cascade="all, delete-orphan", passive_deletes=True)
    land = relationship("LandDetails", uselist=False, cascade="all, delete-orphan", passive_deletes=True)
    workplace = relationship("WorkplaceDetails", uselist=False, cascade="all, delete-orphan", passive_deletes=True)

    @property
    def details(self):
        return getattr(self, DETAIL_ATTRS[self.listing_type])

    def refresh_search_document(self):
        parts = (self.title, self.description, self.city, self.district)
        self.search_document = " ".join(p for p in parts if p).lower()


class RealEstateDetails(Base):
    __tablename__ = "real_estate_details"
    listing_id = Column(Integer, ForeignKey("listings.id", ondelete="CASCADE"), primary_key=True)
    real_estate_type = Column(_enum(RealEstateType), nullable=False)
    room_count = Column(String(20))
    square_meter = Column(Integer)
    building_age = Column(Integer)
    floor = Column(Integer)
    heating_type = Column(_enum(HeatingType))
    furnished = Column(Boolean, nullable=False, default=False)


class VehicleDetails(Base):
    __tablename__ = "vehicle_details"
    listing_id = Column(Integer, ForeignKey("listings.id", ondelete="CASCADE"), primary_key=True)
    brand = Column(String(50), nullable=False)
    model = Column(String(50), nullable=False)
    year = Column("production_year", Integer, nullable=False)
    fuel_type = Column(_enum(FuelType, 20), nullable=False)
    transmission = Column(_enum(Transmission, 20), nullable=False)
    kilometer = Column(Integer, nullable=False)
    engine_volume = Column(String(20))
    series = Column(String(50))
    vehicle_status = Column(_enum(VehicleStatus, 20))
    body_type = Column(_enum(BodyType, 20))
    engine_power = Column(String(20))
    traction_type = Column(_enum(TractionType, 20))
    color = Column(String(30))
    warranty = Column(Boolean)
    heavy_damage = Column(Boolean)
    plate_nationality = Column(String(50))
    from_who = Column(_enum(ListingFrom))
    exchange = Column(Boolean)


class LandDetails(Base):
    __tablename__ = "land_details"
    listing_id = Column(Integer, ForeignKey("listings.id", ondelete="CASCADE"), primary_key=True)
    land_type = Column(_enum(LandType), nullable=False)
    square_meter = Column(Integer, nullable=False)
    zoning_status = Column(String(100))
    parcel_number = Column(Integer, nullable=False)
    island_number = Column(Integer, nullable=False)


class WorkplaceDetails(Base):
    __tablename__ = "workplace_details"
    listing_id = Column(Integer, ForeignKey("listings.id", ondelete="CASCADE"), primary_key=True)
    workplace_type = Column(_enum(WorkplaceType), nullable=False)
    square_meter = Column(Integer, nullable=False)
    floor_count = Column(Integer, nullable=False)
    furnished = Column(Boolean, nullable=False, default=False)
    heating_type = Column(_enum(HeatingType))
    building_age = Column(Integer)
    dues = Column(Numeric(10, 2))
    credit_eligibility = Column(_enum(YesNo, 10))
    deed_status = Column(_enum(TitleStatus))
    listing_from = Column(_enum(ListingFrom))
    exchange = Column(_enum(YesNo, 10))


DETAIL_ATTRS = {
    ListingType.REAL_ESTATE: "real_estate",
    ListingType.VEHICLE: "vehicle",
    ListingType.LAND: "land",
    ListingType.WORKPLACE: "workplace",
}

DETAIL_MODELS = {
    ListingType.REAL_ESTATE: RealEstateDetails,
    ListingType.VEHICLE: VehicleDetails,
    ListingType.LAND: LandDetails,
    ListingType.WORKPLACE: WorkplaceDetails,
}

# eager loads for summaries; async sessions cannot lazy load
SUMMARY_LOAD = (selectinload(Listing.category), selectinload(Listing.owner))
FULL_LOAD = SUMMARY_LOAD + tuple(selectinload(getattr(Listing, attr)) for attr in DETAIL_ATTRS.values())
