"""Cross-category feed.

Pages of the feed are cut from the concatenation REAL_ESTATE, LAND, VEHICLE,
WORKPLACE (each category ordered by the requested sort, then id). The total is
the sum of the per-category counts, so a page may straddle two categories.
``FEED_PAGINATION=memory`` builds the concatenation in process; ``store`` asks
the database for the same slice with one ordered LIMIT/OFFSET query.
"""
from sqlalchemy import case
from sqlalchemy.ext.asyncio import AsyncSession
from structlog import get_logger

from marketplace.config import settings
from marketplace.models.enums import FEED_ORDER
from marketplace.models.listing import Listing
from marketplace.schemas.common import Page, PageRequest
from marketplace.schemas.filters import GeneralFilter
from marketplace.schemas.listing import CategoryStats, ListingSummary
from marketplace.services.listings import summarize
from marketplace.services.predicates import COMMON_FIELDS, Operator, Predicate, build_predicates
from marketplace.services.store import ListingStore
from marketplace.services.variants import ROOT_SLUGS, VARIANTS

logger = get_logger()

NEWEST_FIRST = (Listing.created_at.desc(), Listing.id.desc())


class ListingAggregator:
    def __init__(self, session: AsyncSession):
        self.session = session

    async def _concatenated(self, sort=()) -> list[Listing]:
        rows: list[Listing] = []
        for listing_type in FEED_ORDER:
            rows.extend(await ListingStore(self.session, listing_type).find_all(sort=sort))
        return rows

    async def total(self) -> int:
        return sum([await ListingStore(self.session, listing_type).count() for listing_type in FEED_ORDER])

    async def feed(self, sort=()) -> list[ListingSummary]:
        rows = await self._concatenated(sort)
        logger.info("Fetched feed", total=len(rows))
        return await summarize(self.session, rows)

    async def feed_page(self, page: PageRequest) -> Page[ListingSummary]:
        total = await self.total()
        if settings.FEED_PAGINATION == "store":
            rows = await self._store_slice(page)
        else:
            rows = (await self._concatenated(page.sort))[page.offset:page.offset + page.size]
        logger.info(
            "Fetched feed page",
            mode=settings.FEED_PAGINATION,
            total=total,
            page=page.page,
            size=page.size,
        )
        return Page.of(await summarize(self.session, rows), total, page)

    async def _store_slice(self, page: PageRequest) -> list[Listing]:
        store = ListingStore(self.session)
        ordinal = case({listing_type: index for index, listing_type in enumerate(FEED_ORDER)}, value=Listing.listing_type)
        order_by = [ordinal, *store.sort_clauses(page.sort)]
        rows, _ = await store.search([], page, order_by=order_by)
        return rows

    async def search(self, filter_obj: GeneralFilter, page: PageRequest) -> Page[ListingSummary]:
        """Search every category at once, newest first.

        A top-level slug (emlak, arac, arsa, is-yeri) narrows the search to its
        listing type instead of matching the category column.
        """
        predicates = []
        listing_type = ROOT_SLUGS.get(filter_obj.category_slug) if filter_obj.category_slug else None
        if listing_type is not None:
            filter_obj = filter_obj.model_copy(update={"category_slug": None})
            predicates.append(Predicate("listing_type", Operator.EQ, listing_type))
        predicates.extend(build_predicates(filter_obj, COMMON_FIELDS))
        rows, total = await ListingStore(self.session).search(predicates, page, order_by=NEWEST_FIRST)
        logger.info("General search", predicates=len(predicates), total=total, page=page.page)
        return Page.of(await summarize(self.session, rows), total, page)

    async def stats(self) -> list[CategoryStats]:
        stats = []
        for variant in VARIANTS.values():
            count = await ListingStore(self.session, variant.listing_type).count()
            stats.append(CategoryStats(
                slug=variant.root_slug,
                name=variant.root_name,
                listing_type=variant.listing_type,
                count=count,
            ))
        return stats

    async def owner_listings(self, owner_id: int) -> list[ListingSummary]:
        rows = await ListingStore(self.session).find_all(
            [Predicate("owner_id", Operator.EQ, owner_id)],
            order_by=NEWEST_FIRST,
        )
        logger.info("Fetched owner listings", owner_id=owner_id, total=len(rows))
        return await summarize(self.session, rows)
