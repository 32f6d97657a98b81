from typing import Callable, Sequence

from sqlalchemy.ext.asyncio import AsyncSession
from structlog import get_logger

from marketplace.exceptions import InvalidComparison, NotFound
from marketplace.models.enums import ListingType
from marketplace.models.listing import Listing
from marketplace.schemas.comparison import ComparisonField, ComparisonHeader, ComparisonResponse
from marketplace.services.formatting import (
    PLACEHOLDER,
    format_number,
    format_price,
    language,
    text,
    translate_enum,
    with_unit,
    yes_no,
)
from marketplace.services.images import ImageStore
from marketplace.services.store import ListingStore

logger = get_logger()

MIN_LISTINGS = 2
MAX_LISTINGS = 3

Extractor = Callable[[Listing], str]


def _detail(attr: str, fmt: Callable = text) -> Extractor:
    return lambda listing: fmt(getattr(listing.details, attr))


def _enum(attr: str, domain: str | None = None) -> Extractor:
    return _detail(attr, lambda value: translate_enum(domain or attr, value))


def _unit(attr: str, unit: str) -> Extractor:
    return _detail(attr, lambda value: with_unit(value, unit))


COMMON_FIELDS: list[tuple[str, Extractor]] = [
    ("Price", lambda listing: format_price(listing.price, listing.currency)),
    ("City", lambda listing: text(listing.city)),
    ("District", lambda listing: text(listing.district)),
]

FIELD_TABLES: dict[ListingType, list[tuple[str, Extractor]]] = {
    ListingType.VEHICLE: [
        ("Brand", _detail("brand")),
        ("Series", _detail("series")),
        ("Model", _detail("model")),
        ("Year", _detail("year")),
        ("Fuel Type", _enum("fuel_type")),
        ("Transmission", _enum("transmission")),
        ("Vehicle Status", _enum("vehicle_status")),
        ("Kilometer", _unit("kilometer", "km")),
        ("Body Type", _enum("body_type")),
        ("Engine Power", _unit("engine_power", "hp")),
        ("Engine Volume", _unit("engine_volume", "cc")),
        ("Traction", _enum("traction_type")),
        ("Color", _detail("color")),
        ("Warranty", _detail("warranty", yes_no)),
        ("Heavy Damage Record", _detail("heavy_damage", yes_no)),
        ("Plate / Nationality", _detail("plate_nationality")),
        ("From", _enum("from_who", "listing_from")),
        ("Exchange", _detail("exchange", yes_no)),
    ],
    ListingType.REAL_ESTATE: [
        ("Real Estate Type", _enum("real_estate_type")),
        ("Room Count", _detail("room_count")),
        ("Square Meters", _unit("square_meter", "m²")),
        ("Building Age", _unit("building_age", "years")),
        ("Floor", _detail("floor")),
        ("Heating", _enum("heating_type")),
        ("Furnished", _detail("furnished", yes_no)),
    ],
    ListingType.LAND: [
        ("Land Type", _enum("land_type")),
        ("Square Meters", _unit("square_meter", "m²")),
        ("Zoning Status", _detail("zoning_status")),
        ("Parcel No", _detail("parcel_number")),
        ("Island No", _detail("island_number")),
    ],
    ListingType.WORKPLACE: [
        ("Workplace Type", _enum("workplace_type")),
        ("Square Meters", _unit("square_meter", "m²")),
        ("Floor Count", _detail("floor_count")),
        ("Furnished", _detail("furnished", yes_no)),
        ("Heating", _enum("heating_type")),
        ("Building Age", _unit("building_age", "years")),
        ("Dues", _detail("dues", format_number)),
        ("Credit Eligibility", _enum("credit_eligibility", "yes_no")),
        ("Deed Status", _enum("deed_status", "title_status")),
        ("Listing From", _enum("listing_from")),
        ("Exchange", _enum("exchange", "yes_no")),
    ],
}

# translations of the English field names used in the tables above
FIELD_NAMES = {
    "tr": {
        "Price": "Fiyat",
        "City": "Şehir",
        "District": "İlçe",
        "Brand": "Marka",
        "Series": "Seri",
        "Model": "Model",
        "Year": "Yıl",
        "Fuel Type": "Yakıt Tipi",
        "Transmission": "Vites",
        "Vehicle Status": "Araç Durumu",
        "Kilometer": "KM",
        "Body Type": "Kasa Tipi",
        "Engine Power": "Motor Gücü",
        "Engine Volume": "Motor Hacmi",
        "Traction": "Çekiş",
        "Color": "Renk",
        "Warranty": "Garanti",
        "Heavy Damage Record": "Ağır Hasar Kayıtlı",
        "Plate / Nationality": "Plaka / Uyruk",
        "From": "Kimden",
        "Exchange": "Takas",
        "Real Estate Type": "Emlak Tipi",
        "Room Count": "Oda Sayısı",
        "Square Meters": "Metrekare",
        "Building Age": "Bina Yaşı",
        "Floor": "Kat",
        "Heating": "Isıtma",
        "Furnished": "Eşyalı",
        "Land Type": "Arsa Tipi",
        "Zoning Status": "İmar Durumu",
        "Parcel No": "Parsel No",
        "Island No": "Ada No",
        "Workplace Type": "İşyeri Tipi",
        "Floor Count": "Kat Sayısı",
        "Dues": "Aidat",
        "Credit Eligibility": "Krediye Uygunluk",
        "Deed Status": "Tapu Durumu",
        "Listing From": "Kimden",
    },
}


def field_label(name: str, locale: str | None = None) -> str:
    return FIELD_NAMES.get(language(locale), {}).get(name, name)


def validate_selection(listing_ids: Sequence[int] | None) -> list[int]:
    ids = list(listing_ids or [])
    if not MIN_LISTINGS <= len(ids) <= MAX_LISTINGS or len(set(ids)) != len(ids):
        raise InvalidComparison()
    return ids


class ComparisonEngine:
    def __init__(self, session: AsyncSession):
        self.session = session

    def build_fields(self, listing_type: ListingType, listings: Sequence[Listing]) -> list[ComparisonField]:
        fields = []
        for name, extract in COMMON_FIELDS + FIELD_TABLES[listing_type]:
            values = {str(listing.id): extract(listing) or PLACEHOLDER for listing in listings}
            fields.append(ComparisonField(field_name=field_label(name), values=values))
        return fields

    async def compare(self, listing_ids: Sequence[int] | None) -> ComparisonResponse:
        ids = validate_selection(listing_ids)

        found = {listing.id: listing for listing in await ListingStore(self.session).find_by_ids(ids)}
        missing = [listing_id for listing_id in ids if listing_id not in found]
        if missing:
            raise NotFound(f"Listings not found: {', '.join(str(i) for i in missing)}")
        listings = [found[listing_id] for listing_id in ids]

        slugs = {listing.category.slug for listing in listings}
        types = {listing.listing_type for listing in listings}
        if len(slugs) != 1 or len(types) != 1:
            logger.warning("Comparison rejected", listing_ids=ids, categories=sorted(slugs))
            raise InvalidComparison("Only listings of the same category can be compared")
        category = slugs.pop()
        listing_type = types.pop()

        urls = await ImageStore(self.session).for_listings(listings)
        headers = {
            str(listing.id): ComparisonHeader(
                id=listing.id,
                title=listing.title,
                price=format_price(listing.price, listing.currency),
                city=listing.city,
                district=listing.district,
                image_url=urls.get(listing.id),
            )
            for listing in listings
        }
        logger.info("Compared listings", listing_ids=ids, category=category)
        return ComparisonResponse(
            category=category,
            fields=self.build_fields(listing_type, listings),
            listings=headers,
        )
