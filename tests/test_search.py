from decimal import Decimal
from unittest.mock import AsyncMock

import pytest

from marketplace.exceptions import NotFound
from marketplace.models.enums import ListingType
from marketplace.schemas.common import PageRequest
from marketplace.schemas.search import AdvancedSearchRequest, SavedSearchRequest
from marketplace.services.saved_search import SavedSearchService
from marketplace.services.search import AdvancedSearchEngine
from tests.conftest import ISTANBUL, KM, OTHER, OWNER

PAGE = PageRequest(page=0, size=20)


def ids(page):
    return [item.id for item in page.items]


@pytest.mark.asyncio
async def test_radius_search_keeps_only_points_inside(session, create_listing):
    lat, lng = ISTANBUL
    near = await create_listing(ListingType.REAL_ESTATE, latitude=lat + 2 * KM, longitude=lng)
    await create_listing(ListingType.REAL_ESTATE, latitude=lat + 8 * KM, longitude=lng)
    await create_listing(ListingType.REAL_ESTATE)  # no coordinates

    request = AdvancedSearchRequest.model_validate({"lat": lat, "lng": lng, "radius": 5})
    page = await AdvancedSearchEngine(session).search(request, PAGE)

    assert ids(page) == [near.id]
    assert page.total == 1


@pytest.mark.asyncio
async def test_nearby_orders_by_distance(session, create_listing):
    lat, lng = ISTANBUL
    far = await create_listing(ListingType.LAND, latitude=lat + 4 * KM, longitude=lng)
    close = await create_listing(ListingType.VEHICLE, latitude=lat + 1 * KM, longitude=lng)
    await create_listing(ListingType.WORKPLACE, latitude=lat + 30 * KM, longitude=lng)

    page = await AdvancedSearchEngine(session).nearby(lat, lng, None, PAGE)

    assert ids(page) == [close.id, far.id]


@pytest.mark.asyncio
async def test_distance_sort_puts_listings_without_coordinates_last(session, create_listing):
    lat, lng = ISTANBUL
    far = await create_listing(ListingType.REAL_ESTATE, latitude=lat + 8 * KM, longitude=lng)
    close = await create_listing(ListingType.REAL_ESTATE, latitude=lat + 2 * KM, longitude=lng)
    unplaced = await create_listing(ListingType.REAL_ESTATE)

    request = AdvancedSearchRequest.model_validate({"lat": lat, "lng": lng, "sortBy": "distance"})
    page = await AdvancedSearchEngine(session).search(request, PAGE)

    assert ids(page) == [close.id, far.id, unplaced.id]


@pytest.mark.parametrize("key", ["radius", "radiusKm", "radius_km"])
def test_radius_accepts_every_criteria_spelling(key):
    request = AdvancedSearchRequest.model_validate({"lat": 41.0, "lng": 29.0, key: 3})

    assert request.radius_km == 3


@pytest.mark.asyncio
async def test_full_text_requires_every_token(session, create_listing):
    both = await create_listing(ListingType.REAL_ESTATE, title="Deniz manzarali daire")
    await create_listing(ListingType.REAL_ESTATE, title="Bahceli daire")
    await create_listing(ListingType.LAND, title="Deniz kenari arsa")

    page = await AdvancedSearchEngine(session).search(AdvancedSearchRequest(query="daire  DENIZ"), PAGE)

    assert ids(page) == [both.id]


@pytest.mark.asyncio
async def test_query_wildcards_are_literal(session, create_listing):
    await create_listing(ListingType.REAL_ESTATE, title="Sunny flat")

    page = await AdvancedSearchEngine(session).search(AdvancedSearchRequest(query="%"), PAGE)

    assert page.total == 0


@pytest.mark.asyncio
async def test_combined_criteria_and_price_sort(session, create_listing):
    cheap = await create_listing(ListingType.VEHICLE, city="Ankara", price=Decimal("400000"))
    pricey = await create_listing(ListingType.LAND, city="Ankara", price=Decimal("900000"))
    await create_listing(ListingType.LAND, city="Ankara", price=Decimal("5000000"))
    await create_listing(ListingType.LAND, city="Izmir", price=Decimal("500000"))

    request = AdvancedSearchRequest(city="ankara", max_price=Decimal("1000000"), sort_by="price", sort_order="desc")
    page = await AdvancedSearchEngine(session).search(request, PAGE)

    assert ids(page) == [pricey.id, cheap.id]


@pytest.mark.asyncio
async def test_category_slug_narrows_advanced_search(session, create_listing):
    vehicle = await create_listing(ListingType.VEHICLE)
    await create_listing(ListingType.LAND)

    page = await AdvancedSearchEngine(session).search(AdvancedSearchRequest(category_slug="arac"), PAGE)

    assert ids(page) == [vehicle.id]


@pytest.mark.asyncio
@pytest.mark.parametrize("text", [None, "", "a", " i "])
async def test_short_suggestion_query_never_touches_store(text):
    session = AsyncMock()

    assert await AdvancedSearchEngine(session).suggestions(text) == []
    session.execute.assert_not_called()


@pytest.mark.asyncio
async def test_suggestions_rank_cities_and_districts_by_count(session, create_listing):
    for city, district in (("Istanbul", "Kadikoy"), ("Istanbul", "Sisli"), ("Isparta", "Merkez"), ("Ankara", "Cankaya")):
        await create_listing(ListingType.VEHICLE, city=city, district=district)

    suggestions = await AdvancedSearchEngine(session).suggestions("is")

    assert [(s.value, s.type, s.count) for s in suggestions] == [
        ("Istanbul", "city", 2),
        ("Isparta", "city", 1),
        ("Sisli", "district", 1),
    ]


@pytest.mark.asyncio
async def test_suggestions_use_cache_when_available(session, create_listing):
    await create_listing(ListingType.VEHICLE, city="Istanbul")
    redis = AsyncMock()
    redis.get.return_value = None

    first = await AdvancedSearchEngine(session, redis).suggestions("ist")
    redis.get.return_value = '[{"value": "Cached", "type": "city", "count": 9}]'
    second = await AdvancedSearchEngine(session, redis).suggestions("ist")

    assert [s.value for s in first] == ["Istanbul"]
    assert redis.setex.await_count == 1
    assert [s.value for s in second] == ["Cached"]


@pytest.mark.asyncio
async def test_saved_search_replay_matches_direct_search(session, create_listing):
    await create_listing(ListingType.REAL_ESTATE, title="Genis daire", city="Istanbul")
    await create_listing(ListingType.REAL_ESTATE, title="Genis daire", city="Ankara")
    await create_listing(ListingType.REAL_ESTATE, title="Villa", city="Istanbul")
    criteria = {"query": "daire", "city": "Istanbul", "color": "ignored"}
    saved_searches = SavedSearchService(session)

    saved = await saved_searches.create(SavedSearchRequest(name="Flats", search_criteria=criteria), OWNER)
    replayed = await saved_searches.execute(saved.id, OWNER, PAGE)
    direct = await AdvancedSearchEngine(session).search(AdvancedSearchRequest(query="daire", city="Istanbul"), PAGE)

    assert ids(replayed) == ids(direct)
    assert replayed.total == direct.total == 1


@pytest.mark.asyncio
async def test_saved_searches_are_owner_scoped(session, engine):
    saved_searches = SavedSearchService(session)
    saved = await saved_searches.create(SavedSearchRequest(name="Cars", search_criteria={"city": "Izmir"}), OWNER)

    assert [s.id for s in await saved_searches.find_all(OWNER)] == [saved.id]
    assert await saved_searches.find_all(OTHER) == []
    with pytest.raises(NotFound):
        await saved_searches.get(saved.id, OTHER)
    with pytest.raises(NotFound):
        await saved_searches.delete(saved.id, OTHER)

    updated = await saved_searches.update(
        saved.id, SavedSearchRequest(name="Cheap cars", search_criteria={"maxPrice": 300000}, notification_enabled=True), OWNER
    )
    assert updated.name == "Cheap cars"
    assert updated.notification_enabled is True

    await saved_searches.delete(saved.id, OWNER)
    with pytest.raises(NotFound):
        await saved_searches.get(saved.id, OWNER)
