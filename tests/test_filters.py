from decimal import Decimal

import pytest

from marketplace.models.enums import ListingStatus, ListingType
from marketplace.schemas.common import PageRequest
from marketplace.schemas.filters import LandFilter, RealEstateFilter, VehicleFilter, WorkplaceFilter
from marketplace.schemas.listing import VehicleUpdateRequest
from marketplace.services.listings import ListingService
from marketplace.services.store import ListingStore
from marketplace.services.variants import VARIANTS
from tests.conftest import OTHER, OWNER

PAGE = PageRequest(page=0, size=50)


def service(session, listing_type):
    return ListingService(session, VARIANTS[listing_type])


@pytest.mark.asyncio
async def test_istanbul_price_range_returns_only_match(session, create_listing):
    match = await create_listing(ListingType.REAL_ESTATE, city="Istanbul", price=Decimal("250000"))
    await create_listing(ListingType.REAL_ESTATE, city="Ankara", price=Decimal("250000"))

    filters = RealEstateFilter.model_validate({"city": "Istanbul", "minPrice": "100000", "maxPrice": "500000"})
    page = await service(session, ListingType.REAL_ESTATE).search(filters, PAGE)

    assert page.total == 1
    assert [item.id for item in page.items] == [match.id]


@pytest.mark.asyncio
async def test_string_filters_ignore_case(session, create_listing):
    match = await create_listing(ListingType.VEHICLE, brand="BMW", city="Izmir")
    await create_listing(ListingType.VEHICLE, brand="Fiat", city="Izmir")

    page = await service(session, ListingType.VEHICLE).search(VehicleFilter(brand="bmw", city="IZMIR"), PAGE)

    assert [item.id for item in page.items] == [match.id]


@pytest.mark.asyncio
async def test_empty_filter_equals_find_all(session, create_listing):
    for price in ("100000", "200000", "300000"):
        await create_listing(ListingType.LAND, price=Decimal(price))
    await create_listing(ListingType.VEHICLE)

    page = await service(session, ListingType.LAND).search(LandFilter(), PAGE)
    everything = await ListingStore(session, ListingType.LAND).find_all()

    assert page.total == len(everything) == 3
    assert sorted(item.id for item in page.items) == sorted(listing.id for listing in everything)


@pytest.mark.asyncio
async def test_range_filters_hold_for_every_result(session, create_listing):
    for km, year in ((10000, 2021), (60000, 2018), (120000, 2012), (200000, 2008)):
        await create_listing(ListingType.VEHICLE, kilometer=km, year=year)

    filters = VehicleFilter(min_kilometer=50000, max_kilometer=150000, min_year=2010)
    page = await service(session, ListingType.VEHICLE).search(filters, PAGE)
    rows = await ListingStore(session, ListingType.VEHICLE).find_by_ids([item.id for item in page.items])

    assert page.total == 2
    for row in rows:
        assert 50000 <= row.details.kilometer <= 150000
        assert row.details.year >= 2010


@pytest.mark.asyncio
async def test_status_and_owner_filters(session, create_listing):
    mine = await create_listing(ListingType.VEHICLE)
    sold = await create_listing(ListingType.VEHICLE)
    await create_listing(ListingType.VEHICLE, user=OTHER)
    await service(session, ListingType.VEHICLE).update(sold.id, VehicleUpdateRequest(status=ListingStatus.SOLD), OWNER)

    page = await service(session, ListingType.VEHICLE).search(
        VehicleFilter(owner_id=OWNER.id, status=ListingStatus.ACTIVE), PAGE
    )

    assert [item.id for item in page.items] == [mine.id]


@pytest.mark.asyncio
async def test_filter_pages_are_cut_in_the_database(session, create_listing):
    for _ in range(5):
        await create_listing(ListingType.WORKPLACE)

    page = await service(session, ListingType.WORKPLACE).search(WorkplaceFilter(), PageRequest(page=2, size=2))

    assert page.total == 5
    assert page.total_pages == 3
    assert len(page.items) == 1
