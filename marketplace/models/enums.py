import enum


class ListingType(str, enum.Enum):
    REAL_ESTATE = "REAL_ESTATE"
    VEHICLE = "VEHICLE"
    LAND = "LAND"
    WORKPLACE = "WORKPLACE"


# concatenation order of the aggregated feed
FEED_ORDER = (ListingType.REAL_ESTATE, ListingType.LAND, ListingType.VEHICLE, ListingType.WORKPLACE)


class Currency(str, enum.Enum):
    TRY = "TRY"
    USD = "USD"
    EUR = "EUR"


class ListingStatus(str, enum.Enum):
    ACTIVE = "ACTIVE"
    PASSIVE = "PASSIVE"
    SOLD = "SOLD"
    DELETED = "DELETED"


class OfferType(str, enum.Enum):
    FOR_SALE = "FOR_SALE"
    FOR_RENT = "FOR_RENT"


class RealEstateType(str, enum.Enum):
    APARTMENT = "APARTMENT"
    HOUSE = "HOUSE"
    VILLA = "VILLA"
    RESIDENCE = "RESIDENCE"


class HeatingType(str, enum.Enum):
    NATURAL_GAS = "NATURAL_GAS"
    CENTRAL_HEATING = "CENTRAL_HEATING"
    STOVE_HEATING = "STOVE_HEATING"
    FLOOR_HEATING = "FLOOR_HEATING"
    AIR_CONDITIONING = "AIR_CONDITIONING"


class FuelType(str, enum.Enum):
    GASOLINE = "GASOLINE"
    DIESEL = "DIESEL"
    ELECTRIC = "ELECTRIC"
    LPG = "LPG"
    HYBRID = "HYBRID"


class Transmission(str, enum.Enum):
    MANUAL = "MANUAL"
    AUTOMATIC = "AUTOMATIC"
    SEMI_AUTOMATIC = "SEMI_AUTOMATIC"


class VehicleStatus(str, enum.Enum):
    ZERO = "ZERO"
    SECOND_HAND = "SECOND_HAND"


class BodyType(str, enum.Enum):
    SEDAN = "SEDAN"
    HATCHBACK = "HATCHBACK"
    STATION_WAGON = "STATION_WAGON"
    CABRIO = "CABRIO"
    SUV = "SUV"
    PICKUP = "PICKUP"
    MINIVAN = "MINIVAN"
    PANELVAN = "PANELVAN"
    COUPE = "COUPE"


class TractionType(str, enum.Enum):
    FWD = "FWD"
    RWD = "RWD"
    AWD = "AWD"


class ListingFrom(str, enum.Enum):
    OWNER = "OWNER"
    GALLERY = "GALLERY"
    AUTHORIZED_DEALER = "AUTHORIZED_DEALER"
    BANK = "BANK"


class LandType(str, enum.Enum):
    LAND = "LAND"
    FIELD = "FIELD"
    VINEYARD = "VINEYARD"
    GARDEN = "GARDEN"


class WorkplaceType(str, enum.Enum):
    SHOP = "SHOP"
    OFFICE = "OFFICE"
    FACTORY = "FACTORY"
    WAREHOUSE = "WAREHOUSE"


class YesNo(str, enum.Enum):
    YES = "YES"
    NO = "NO"


class TitleStatus(str, enum.Enum):
    CONDOMINIUM = "CONDOMINIUM"
    CONSTRUCTION_SERVITUDE = "CONSTRUCTION_SERVITUDE"
    SHARED_TITLE = "SHARED_TITLE"
    DETACHED_TITLE = "DETACHED_TITLE"
