from typing import Iterable

from sqlalchemy.ext.asyncio import AsyncSession
from structlog import get_logger

from marketplace.exceptions import AccessDenied
from marketplace.models.listing import Listing, User
from marketplace.schemas.common import Page, PageRequest
from marketplace.schemas.listing import ListingDetail, ListingSummary
from marketplace.schemas.user import CurrentUser
from marketplace.services.activity import LISTING_CREATED, LISTING_DELETED, record_activity
from marketplace.services.categories import get_category_by_slug
from marketplace.services.images import ImageStore
from marketplace.services.predicates import Operator, Predicate, build_predicates
from marketplace.services.store import ListingStore
from marketplace.services.variants import VARIANTS, Variant

logger = get_logger()

SIMILAR_LIMIT = 3


async def summarize(session: AsyncSession, listings: Iterable[Listing]) -> list[ListingSummary]:
    """Map rows to the shared summary shape, attaching first-image URLs in one lookup."""
    listings = list(listings)
    urls = await ImageStore(session).for_listings(listings)
    return [ListingSummary.from_listing(listing, urls.get(listing.id)) for listing in listings]


def to_detail(listing: Listing, image_url: str | None = None) -> ListingDetail:
    return ListingDetail.from_listing(listing, image_url, VARIANTS[listing.listing_type].details_schema)


async def upsert_owner(session: AsyncSession, user: CurrentUser) -> User:
    owner = await session.get(User, user.id)
    if owner is None:
        owner = User(id=user.id, username=user.username)
        session.add(owner)
    elif owner.username != user.username:
        owner.username = user.username
    return owner


class ListingService:
    """Filtered search and lifecycle of one listing variant."""

    def __init__(self, session: AsyncSession, variant: Variant):
        self.session = session
        self.variant = variant
        self.store = ListingStore(session, variant.listing_type)

    def _split(self, data: dict) -> tuple[dict, dict]:
        details = {key: data.pop(key) for key in self.variant.detail_fields if key in data}
        return data, details

    def _check_owner(self, listing: Listing, user: CurrentUser, action: str):
        if listing.created_by_id != user.id and not user.is_admin:
            logger.warning(
                "Listing access denied",
                listing_id=listing.id,
                user_id=user.id,
                action=action,
            )
            raise AccessDenied(f"You are not allowed to {action} this listing")

    async def search(self, filter_obj, page: PageRequest) -> Page[ListingSummary]:
        predicates = build_predicates(filter_obj, self.variant.filter_fields)
        rows, total = await self.store.search(predicates, page)
        logger.info(
            "Filtered listings",
            listing_type=self.variant.listing_type.value,
            predicates=len(predicates),
            total=total,
            page=page.page,
        )
        return Page.of(await summarize(self.session, rows), total, page)

    async def get(self, listing_id: int) -> ListingDetail:
        await self.store.increment_view_count(listing_id)
        await self.session.commit()
        listing = await self.store.find_by_id(listing_id)
        url = await ImageStore(self.session).first_image_url(listing.id, listing.listing_type)
        return to_detail(listing, url)

    async def similar(self, listing_id: int) -> list[ListingSummary]:
        """Up to three newest listings sharing city, district and the variant's sub-type."""
        listing = await self.store.find_by_id(listing_id)
        column, match = self.variant.filter_fields[self.variant.similar_field]
        shared = [
            ("city", Operator.IEQ, listing.city),
            ("district", Operator.IEQ, listing.district),
            (column, match, getattr(listing.details, self.variant.similar_field)),
        ]
        predicates = [Predicate(col, op, value) for col, op, value in shared if value is not None]
        predicates.append(Predicate("id", Operator.NE, listing.id))
        rows, _ = await self.store.search(
            predicates,
            PageRequest(size=SIMILAR_LIMIT),
            order_by=[Listing.created_at.desc(), Listing.id.desc()],
        )
        logger.info("Similar listings", listing_id=listing_id, found=len(rows))
        return await summarize(self.session, rows)

    async def create(self, request, user: CurrentUser) -> ListingDetail:
        data = request.model_dump()
        category = await get_category_by_slug(self.session, data.pop("category_slug"))
        core, details = self._split(data)
        owner = await upsert_owner(self.session, user)
        listing = await self.store.create(core, details, category, owner)
        await record_activity(
            self.session,
            user.username,
            LISTING_CREATED,
            f"{self.variant.label} listing created: {listing.title}",
            entity_id=listing.id,
            details={"listingType": self.variant.listing_type.value},
        )
        await self.session.commit()
        logger.info("Listing created", listing_id=listing.id, listing_type=self.variant.listing_type.value, user_id=user.id)
        return to_detail(listing)

    async def update(self, listing_id: int, request, user: CurrentUser) -> ListingDetail:
        listing = await self.store.find_by_id(listing_id)
        self._check_owner(listing, user, "update")
        patch = request.model_dump(exclude_none=True)
        slug = patch.pop("category_slug", None)
        category = await get_category_by_slug(self.session, slug) if slug else None
        core, details = self._split(patch)
        await self.store.update(listing, core, details, category)
        await self.session.commit()
        logger.info("Listing updated", listing_id=listing_id, fields=sorted(core) + sorted(details))
        url = await ImageStore(self.session).first_image_url(listing.id, listing.listing_type)
        return to_detail(listing, url)

    async def delete(self, listing_id: int, user: CurrentUser) -> None:
        listing = await self.store.find_by_id(listing_id)
        self._check_owner(listing, user, "delete")
        await record_activity(
            self.session,
            user.username,
            LISTING_DELETED,
            f"{self.variant.label} listing deleted: {listing.title}",
            entity_id=listing.id,
        )
        await self.store.delete(listing)
        await self.session.commit()
        logger.info("Listing deleted", listing_id=listing_id, user_id=user.id)
