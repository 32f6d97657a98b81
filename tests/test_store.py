from decimal import Decimal

import pytest
from sqlalchemy import select

from marketplace.exceptions import AccessDenied, NotFound, ValidationFailed
from marketplace.models.activity_log import ActivityLog
from marketplace.models.enums import ListingStatus, ListingType, OfferType
from marketplace.models.listing import VehicleDetails
from marketplace.schemas.common import PageRequest, SortOrder
from marketplace.schemas.listing import RealEstateUpdateRequest, VehicleUpdateRequest
from marketplace.services.listings import ListingService
from marketplace.services.store import ListingStore
from marketplace.services.variants import VARIANTS
from tests.conftest import ADMIN, OTHER, OWNER


@pytest.mark.asyncio
async def test_create_then_fetch_round_trip(session, create_listing):
    created = await create_listing(ListingType.VEHICLE, title="Clio 1.5 dCi", price=Decimal("725000.50"), series="Joy")

    fetched = await ListingService(session, VARIANTS[ListingType.VEHICLE]).get(created.id)

    assert fetched.listing_type == ListingType.VEHICLE
    assert fetched.title == "Clio 1.5 dCi"
    assert fetched.price == Decimal("725000.50")
    assert fetched.status == ListingStatus.ACTIVE
    assert fetched.offer_type == OfferType.FOR_SALE
    assert fetched.category_slug == "arac"
    assert fetched.created_by_username == OWNER.username
    assert fetched.details.model_dump() == created.details.model_dump()
    assert fetched.details.series == "Joy"


@pytest.mark.asyncio
async def test_ids_are_unique_across_variants(create_listing):
    ids = [
        (await create_listing(listing_type)).id
        for listing_type in (ListingType.REAL_ESTATE, ListingType.VEHICLE, ListingType.LAND, ListingType.WORKPLACE)
    ]

    assert len(set(ids)) == 4


@pytest.mark.asyncio
async def test_variant_store_does_not_see_other_variants(session, create_listing):
    land = await create_listing(ListingType.LAND)

    with pytest.raises(NotFound):
        await ListingStore(session, ListingType.VEHICLE).find_by_id(land.id)


@pytest.mark.asyncio
async def test_create_writes_activity_log(session, create_listing):
    listing = await create_listing(ListingType.REAL_ESTATE)

    entries = (await session.execute(select(ActivityLog))).scalars().all()

    assert [(e.action, e.entity_id, e.username) for e in entries] == [("LISTING_CREATED", listing.id, OWNER.username)]


@pytest.mark.asyncio
async def test_partial_update_only_touches_given_fields(session, create_listing):
    created = await create_listing(ListingType.REAL_ESTATE, title="Sea view flat", floor=4)
    service = ListingService(session, VARIANTS[ListingType.REAL_ESTATE])

    updated = await service.update(created.id, RealEstateUpdateRequest(price=Decimal("300000"), furnished=True), OWNER)

    assert updated.price == Decimal("300000")
    assert updated.details.furnished is True
    assert updated.title == "Sea view flat"
    assert updated.details.floor == 4
    assert updated.city == created.city
    assert updated.updated_at >= created.updated_at


@pytest.mark.asyncio
async def test_update_refreshes_search_document(session, create_listing):
    created = await create_listing(ListingType.VEHICLE, title="Clio")
    service = ListingService(session, VARIANTS[ListingType.VEHICLE])

    await service.update(created.id, VehicleUpdateRequest(title="Megane Sedan"), OWNER)

    listing = await ListingStore(session, ListingType.VEHICLE).find_by_id(created.id)
    assert "megane sedan" in listing.search_document
    assert "clio" not in listing.search_document.split()


@pytest.mark.asyncio
async def test_update_by_stranger_is_denied(session, create_listing):
    created = await create_listing(ListingType.VEHICLE)
    service = ListingService(session, VARIANTS[ListingType.VEHICLE])

    with pytest.raises(AccessDenied):
        await service.update(created.id, VehicleUpdateRequest(title="Mine now"), OTHER)


@pytest.mark.asyncio
async def test_admin_may_delete_any_listing(session, create_listing):
    created = await create_listing(ListingType.VEHICLE)
    service = ListingService(session, VARIANTS[ListingType.VEHICLE])

    await service.delete(created.id, ADMIN)

    with pytest.raises(NotFound):
        await ListingStore(session, ListingType.VEHICLE).find_by_id(created.id)
    details = (await session.execute(select(VehicleDetails))).scalars().all()
    assert details == []
    actions = (await session.execute(select(ActivityLog.action))).scalars().all()
    assert sorted(actions) == ["LISTING_CREATED", "LISTING_DELETED"]


@pytest.mark.asyncio
async def test_delete_by_stranger_is_denied(session, create_listing):
    created = await create_listing(ListingType.LAND)
    service = ListingService(session, VARIANTS[ListingType.LAND])

    with pytest.raises(AccessDenied):
        await service.delete(created.id, OTHER)


@pytest.mark.asyncio
async def test_view_count_is_incremented_in_place(session, create_listing):
    created = await create_listing(ListingType.WORKPLACE)
    service = ListingService(session, VARIANTS[ListingType.WORKPLACE])

    first = await service.get(created.id)
    second = await service.get(created.id)

    assert first.view_count == 1
    assert second.view_count == 2
    assert second.updated_at == created.updated_at


@pytest.mark.asyncio
async def test_view_count_of_missing_listing_is_not_found(session, engine):
    with pytest.raises(NotFound):
        await ListingStore(session, ListingType.LAND).increment_view_count(12345)


@pytest.mark.asyncio
async def test_unknown_sort_field_is_rejected(session, engine):
    page = PageRequest(page=0, size=10, sort=(SortOrder("password"),))

    with pytest.raises(ValidationFailed):
        await ListingStore(session, ListingType.LAND).search([], page)


@pytest.mark.asyncio
async def test_find_page_sorts_and_pages(session, create_listing):
    for price in ("300000", "100000", "200000"):
        await create_listing(ListingType.LAND, price=Decimal(price))
    store = ListingStore(session, ListingType.LAND)

    rows, total = await store.find_page(PageRequest(page=0, size=2, sort=(SortOrder("price", descending=True),)))

    assert total == 3
    assert [row.price for row in rows] == [Decimal("300000"), Decimal("200000")]


@pytest.mark.asyncio
async def test_similar_listings_share_location_and_sub_type(session, create_listing):
    source = await create_listing(ListingType.REAL_ESTATE)
    matches = [(await create_listing(ListingType.REAL_ESTATE, title=f"Flat {n}")).id for n in range(4)]
    await create_listing(ListingType.REAL_ESTATE, real_estate_type="VILLA")
    await create_listing(ListingType.REAL_ESTATE, district="Besiktas")
    await create_listing(ListingType.LAND)

    similar = await ListingService(session, VARIANTS[ListingType.REAL_ESTATE]).similar(source.id)

    assert [item.id for item in similar] == [matches[3], matches[2], matches[1]]


@pytest.mark.asyncio
async def test_similar_vehicles_match_on_brand(session, create_listing):
    source = await create_listing(ListingType.VEHICLE, brand="Fiat")
    same_brand = await create_listing(ListingType.VEHICLE, brand="fiat")
    await create_listing(ListingType.VEHICLE, brand="Renault")

    similar = await ListingService(session, VARIANTS[ListingType.VEHICLE]).similar(source.id)

    assert [item.id for item in similar] == [same_brand.id]


@pytest.mark.asyncio
async def test_similar_of_missing_listing_is_not_found(session, engine):
    with pytest.raises(NotFound):
        await ListingService(session, VARIANTS[ListingType.LAND]).similar(4242)
