from decimal import Decimal

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from marketplace.db import database
from marketplace.dependencies.auth import get_current_user
from marketplace.main import app
from marketplace.models.enums import ListingType
from marketplace.schemas.user import CurrentUser
from marketplace.services.categories import ensure_default_categories
from marketplace.services.listings import ListingService
from marketplace.services.variants import VARIANTS

OWNER = CurrentUser(id=1, username="ayse", roles=["USER"])
OTHER = CurrentUser(id=2, username="mehmet", roles=["USER"])
ADMIN = CurrentUser(id=99, username="admin", roles=["ADMIN"])

ISTANBUL = (41.0082, 28.9784)
# one kilometer of latitude, in degrees
KM = 1 / 111.195

DEFAULTS = {
    ListingType.REAL_ESTATE: {
        "category_slug": "emlak",
        "real_estate_type": "APARTMENT",
        "room_count": "3+1",
        "square_meter": 120,
        "building_age": 5,
        "floor": 3,
        "heating_type": "NATURAL_GAS",
        "furnished": False,
    },
    ListingType.VEHICLE: {
        "category_slug": "arac",
        "brand": "Renault",
        "model": "Clio",
        "year": 2019,
        "fuel_type": "GASOLINE",
        "transmission": "MANUAL",
        "kilometer": 45000,
        "engine_volume": "1461",
    },
    ListingType.LAND: {
        "category_slug": "arsa",
        "land_type": "FIELD",
        "square_meter": 1500,
        "parcel_number": 12,
        "island_number": 104,
    },
    ListingType.WORKPLACE: {
        "category_slug": "is-yeri",
        "workplace_type": "OFFICE",
        "square_meter": 80,
        "floor_count": 2,
    },
}


def listing_payload(listing_type: ListingType, **overrides) -> dict:
    payload = {
        "title": f"{listing_type.value.title()} listing",
        "description": "Well kept, close to transport",
        "price": Decimal("250000.00"),
        "currency": "TRY",
        "city": "Istanbul",
        "district": "Kadikoy",
        **DEFAULTS[listing_type],
    }
    payload.update(overrides)
    return payload


@pytest_asyncio.fixture
async def engine(tmp_path):
    await database.dispose_engine()
    engine = database.init_engine(f"sqlite+aiosqlite:///{tmp_path / 'marketplace.db'}")
    await database.init_db()
    async with database.get_sessionmaker()() as session:
        await ensure_default_categories(session)
    yield engine
    await database.dispose_engine()


@pytest_asyncio.fixture
async def session(engine):
    async with database.get_sessionmaker()() as session:
        yield session


@pytest.fixture
def create_listing(session):
    """Create a listing through the service layer, as OWNER unless ``user`` is given."""

    async def _create(listing_type: ListingType, user: CurrentUser = OWNER, **overrides):
        variant = VARIANTS[listing_type]
        request = variant.create_schema(**listing_payload(listing_type, **overrides))
        return await ListingService(session, variant).create(request, user)

    return _create


@pytest.fixture
def current_user():
    holder = {"user": OWNER}
    app.dependency_overrides[get_current_user] = lambda: holder["user"]
    yield holder
    app.dependency_overrides.pop(get_current_user, None)


@pytest_asyncio.fixture
async def client(engine, current_user):
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
        yield client
