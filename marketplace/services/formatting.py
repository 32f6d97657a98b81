"""Display formatting for comparison tables.

Labels follow ``NUMBER_LOCALE``: ``tr_TR`` renders Turkish labels, anything
else English, so a table never mixes Turkish grouping with English words.
"""
from decimal import ROUND_HALF_EVEN, Decimal

from marketplace.config import settings

PLACEHOLDER = "—"

# (grouping, decimal) separators
SEPARATORS = {
    "tr_TR": (".", ","),
    "en_US": (",", "."),
}

CURRENCY_SYMBOLS = {
    "TRY": "₺",
    "USD": "$",
    "EUR": "€",
}

LABELS = {
    "en": {
        "fuel_type": {
            "GASOLINE": "Gasoline",
            "DIESEL": "Diesel",
            "LPG": "LPG",
            "ELECTRIC": "Electric",
            "HYBRID": "Hybrid",
        },
        "transmission": {
            "MANUAL": "Manual",
            "AUTOMATIC": "Automatic",
            "SEMI_AUTOMATIC": "Semi-automatic",
        },
        "vehicle_status": {
            "ZERO": "Brand new",
            "SECOND_HAND": "Second hand",
        },
        "body_type": {
            "SEDAN": "Sedan",
            "HATCHBACK": "Hatchback",
            "STATION_WAGON": "Station wagon",
            "CABRIO": "Cabrio",
            "SUV": "SUV",
            "PICKUP": "Pickup",
            "MINIVAN": "Minivan",
            "PANELVAN": "Panel van",
            "COUPE": "Coupe",
        },
        "traction_type": {
            "FWD": "Front-wheel drive",
            "RWD": "Rear-wheel drive",
            "AWD": "All-wheel drive (AWD)",
        },
        "listing_from": {
            "OWNER": "Owner",
            "GALLERY": "Gallery",
            "AUTHORIZED_DEALER": "Authorized dealer",
            "BANK": "Bank",
        },
        "real_estate_type": {
            "APARTMENT": "Apartment",
            "HOUSE": "House",
            "VILLA": "Villa",
            "RESIDENCE": "Residence",
        },
        "heating_type": {
            "NATURAL_GAS": "Natural gas",
            "CENTRAL_HEATING": "Central heating",
            "STOVE_HEATING": "Stove",
            "FLOOR_HEATING": "Floor heating",
            "AIR_CONDITIONING": "Air conditioning",
        },
        "land_type": {
            "LAND": "Plot",
            "FIELD": "Field",
            "VINEYARD": "Vineyard",
            "GARDEN": "Garden",
        },
        "workplace_type": {
            "SHOP": "Shop",
            "OFFICE": "Office",
            "FACTORY": "Factory",
            "WAREHOUSE": "Warehouse",
        },
        "title_status": {
            "CONDOMINIUM": "Condominium",
            "CONSTRUCTION_SERVITUDE": "Construction servitude",
            "SHARED_TITLE": "Shared title",
            "DETACHED_TITLE": "Detached title",
        },
        "yes_no": {
            "YES": "Yes",
            "NO": "No",
        },
    },
    "tr": {
        "fuel_type": {
            "GASOLINE": "Benzin",
            "DIESEL": "Dizel",
            "LPG": "LPG",
            "ELECTRIC": "Elektrik",
            "HYBRID": "Hibrit",
        },
        "transmission": {
            "MANUAL": "Manuel",
            "AUTOMATIC": "Otomatik",
            "SEMI_AUTOMATIC": "Yarı Otomatik",
        },
        "vehicle_status": {
            "ZERO": "Sıfır",
            "SECOND_HAND": "İkinci El",
        },
        "body_type": {
            "SEDAN": "Sedan",
            "HATCHBACK": "Hatchback",
            "STATION_WAGON": "Station Wagon",
            "CABRIO": "Cabrio",
            "SUV": "SUV",
            "PICKUP": "Kamyonet",
            "MINIVAN": "Minivan",
            "PANELVAN": "Panelvan",
            "COUPE": "Coupe",
        },
        "traction_type": {
            "FWD": "Önden Çekiş",
            "RWD": "Arkadan İtiş",
            "AWD": "4 Çeker (AWD)",
        },
        "listing_from": {
            "OWNER": "Sahibinden",
            "GALLERY": "Galeriden",
            "AUTHORIZED_DEALER": "Yetkili Bayiden",
            "BANK": "Bankadan",
        },
        "real_estate_type": {
            "APARTMENT": "Daire",
            "HOUSE": "Ev",
            "VILLA": "Villa",
            "RESIDENCE": "Rezidans",
        },
        "heating_type": {
            "NATURAL_GAS": "Doğalgaz",
            "CENTRAL_HEATING": "Merkezi Isıtma",
            "STOVE_HEATING": "Soba",
            "FLOOR_HEATING": "Yerden Isıtma",
            "AIR_CONDITIONING": "Klima",
        },
        "land_type": {
            "LAND": "Arsa",
            "FIELD": "Tarla",
            "VINEYARD": "Bağ",
            "GARDEN": "Bahçe",
        },
        "workplace_type": {
            "SHOP": "Dükkan",
            "OFFICE": "Ofis",
            "FACTORY": "Fabrika",
            "WAREHOUSE": "Depo",
        },
        "title_status": {
            "CONDOMINIUM": "Kat Mülkiyeti",
            "CONSTRUCTION_SERVITUDE": "Kat İrtifakı",
            "SHARED_TITLE": "Hisseli Tapu",
            "DETACHED_TITLE": "Müstakil Tapu",
        },
        "yes_no": {
            "YES": "Evet",
            "NO": "Hayır",
        },
    },
}

UNITS = {
    "tr": {"years": "yıl"},
}


def language(locale: str | None = None) -> str:
    return "tr" if (locale or settings.NUMBER_LOCALE).startswith("tr") else "en"


def translate_enum(domain: str, raw, locale: str | None = None) -> str:
    """Display label for an enum value; values without a label pass through unchanged."""
    if raw is None:
        return PLACEHOLDER
    value = getattr(raw, "value", raw)
    return LABELS[language(locale)].get(domain, {}).get(value, str(value))


def format_number(value, locale: str | None = None) -> str:
    """Locale-grouped number with at most three fraction digits: 1250000.50 -> "1.250.000,5"."""
    if value is None:
        return PLACEHOLDER
    group, decimal = SEPARATORS.get(locale or settings.NUMBER_LOCALE, SEPARATORS["tr_TR"])
    amount = Decimal(str(value)).quantize(Decimal("0.001"), rounding=ROUND_HALF_EVEN)
    integer, _, fraction = f"{amount:,}".partition(".")
    integer = integer.replace(",", group)
    fraction = fraction.rstrip("0")
    return f"{integer}{decimal}{fraction}" if fraction else integer


def format_price(price, currency, locale: str | None = None) -> str:
    if price is None:
        return PLACEHOLDER
    code = getattr(currency, "value", currency)
    return f"{format_number(price, locale)} {CURRENCY_SYMBOLS.get(code, code)}"


def with_unit(value, unit: str, locale: str | None = None) -> str:
    if value is None:
        return PLACEHOLDER
    number = format_number(value, locale) if isinstance(value, (int, float, Decimal)) else str(value)
    return f"{number} {UNITS.get(language(locale), {}).get(unit, unit)}"


def yes_no(value, locale: str | None = None) -> str:
    if value is None:
        return PLACEHOLDER
    return translate_enum("yes_no", "YES" if value else "NO", locale)


def text(value) -> str:
    if value is None or (isinstance(value, str) and not value.strip()):
        return PLACEHOLDER
    return str(value)
