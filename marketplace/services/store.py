from typing import Iterable, Sequence

from sqlalchemy import Float, and_, func, select, update
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload
from structlog import get_logger

from marketplace.config import settings
from marketplace.exceptions import NotFound, ValidationFailed
from marketplace.models.base import utcnow
from marketplace.models.enums import ListingType
from marketplace.models.listing import (
    DETAIL_ATTRS,
    DETAIL_MODELS,
    FULL_LOAD,
    SUMMARY_LOAD,
    Category,
    Listing,
)
from marketplace.schemas.common import PageRequest, SortOrder
from marketplace.services.predicates import GeoRadius, Operator, Predicate, search_tokens

logger = get_logger()

EARTH_RADIUS_M = 6371000.0

CORE_COLUMNS = {
    "id": Listing.id,
    "listing_type": Listing.listing_type,
    "title": Listing.title,
    "price": Listing.price,
    "currency": Listing.currency,
    "status": Listing.status,
    "offer_type": Listing.offer_type,
    "city": Listing.city,
    "district": Listing.district,
    "owner_id": Listing.created_by_id,
    "category_slug": Category.slug,
    "created_at": Listing.created_at,
    "updated_at": Listing.updated_at,
    "view_count": Listing.view_count,
    "favorite_count": Listing.favorite_count,
    "search_document": Listing.search_document,
}

SORTABLE = {
    "id": Listing.id,
    "title": Listing.title,
    "price": Listing.price,
    "city": Listing.city,
    "created_at": Listing.created_at,
    "createdAt": Listing.created_at,
    "updated_at": Listing.updated_at,
    "updatedAt": Listing.updated_at,
    "view_count": Listing.view_count,
    "viewCount": Listing.view_count,
    "favorite_count": Listing.favorite_count,
    "favoriteCount": Listing.favorite_count,
}

_LIKE_ESCAPE = "\\"


def escape_like(term: str) -> str:
    return term.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


def distance_meters(latitude: float, longitude: float):
    """Haversine distance from the given point to the listing's coordinates."""
    dlat = func.radians(Listing.latitude - latitude)
    dlng = func.radians(Listing.longitude - longitude)
    half_dlat = func.sin(dlat / 2)
    half_dlng = func.sin(dlng / 2)
    a = half_dlat * half_dlat + (
        func.cos(func.radians(latitude)) * func.cos(func.radians(Listing.latitude)) * half_dlng * half_dlng
    )
    return 2 * EARTH_RADIUS_M * func.asin(func.sqrt(a), type_=Float)


def _tsvector():
    return func.to_tsvector(settings.FULLTEXT_CONFIG, Listing.search_document)


def _tsquery(tsquery: str):
    return func.to_tsquery(settings.FULLTEXT_CONFIG, tsquery)


def text_match(tsquery: str, dialect: str):
    if dialect == "postgresql":
        return _tsvector().op("@@")(_tsquery(tsquery))
    # search_document is stored lower-cased
    return and_(*[
        Listing.search_document.like(f"%{escape_like(token.lower())}%", escape=_LIKE_ESCAPE)
        for token in search_tokens(tsquery)
    ])


def text_rank(tsquery: str):
    return func.ts_rank(_tsvector(), _tsquery(tsquery))


class ListingStore:
    """Persistence for one listing variant, or for every variant when ``listing_type`` is None."""

    def __init__(self, session: AsyncSession, listing_type: ListingType | None = None):
        self.session = session
        self.listing_type = listing_type
        self.detail_model = DETAIL_MODELS[listing_type] if listing_type else None

    @property
    def dialect(self) -> str:
        return self.session.get_bind().dialect.name

    def _label(self) -> str:
        return self.listing_type.value.replace("_", " ").capitalize() if self.listing_type else "Listing"

    def _base(self, stmt):
        stmt = stmt.join(Category, Listing.category_id == Category.id)
        if self.listing_type is not None:
            stmt = stmt.join(self.detail_model, self.detail_model.listing_id == Listing.id)
            stmt = stmt.where(Listing.listing_type == self.listing_type)
        return stmt

    def _options(self):
        if self.listing_type is None:
            return FULL_LOAD
        return SUMMARY_LOAD + (selectinload(getattr(Listing, DETAIL_ATTRS[self.listing_type])),)

    def column(self, name: str):
        if name in CORE_COLUMNS:
            return CORE_COLUMNS[name]
        if self.detail_model is not None and name in self.detail_model.__mapper__.attrs:
            return getattr(self.detail_model, name)
        raise ValueError(f"Unknown column '{name}' for {self._label()} store")

    def render(self, predicate: Predicate):
        if predicate.op is Operator.MATCH:
            return text_match(predicate.value, self.dialect)
        if predicate.op is Operator.WITHIN:
            radius: GeoRadius = predicate.value
            return and_(
                Listing.latitude.is_not(None),
                Listing.longitude.is_not(None),
                distance_meters(radius.latitude, radius.longitude) <= radius.meters,
            )
        col = self.column(predicate.column)
        if predicate.op is Operator.EQ:
            return col == predicate.value
        if predicate.op is Operator.NE:
            return col != predicate.value
        if predicate.op is Operator.IEQ:
            return func.lower(col) == func.lower(predicate.value)
        if predicate.op is Operator.GTE:
            return col >= predicate.value
        if predicate.op is Operator.LTE:
            return col <= predicate.value
        if predicate.op is Operator.IN:
            return col.in_(list(predicate.value))
        raise ValueError(f"Unsupported operator {predicate.op}")

    def where(self, stmt, predicates: Iterable[Predicate]):
        clauses = [self.render(p) for p in predicates]
        return stmt.where(*clauses) if clauses else stmt

    def sort_clauses(self, sort: Sequence[SortOrder]) -> list:
        clauses = []
        for order in sort:
            col = SORTABLE.get(order.field)
            if col is None:
                raise ValidationFailed(errors={"sort": f"Cannot sort by '{order.field}'"})
            clauses.append(col.desc() if order.descending else col.asc())
        if not any(order.field == "id" for order in sort):
            clauses.append(Listing.id.asc())
        return clauses

    async def find_by_id(self, listing_id: int) -> Listing:
        stmt = (
            self._base(select(Listing))
            .where(Listing.id == listing_id)
            .options(*self._options())
            .execution_options(populate_existing=True)
        )
        listing = (await self.session.execute(stmt)).scalars().first()
        if listing is None:
            raise NotFound(f"{self._label()} not found with id: {listing_id}")
        return listing

    async def find_by_ids(self, listing_ids: Sequence[int]) -> list[Listing]:
        stmt = self._base(select(Listing)).where(Listing.id.in_(list(listing_ids))).options(*self._options())
        return list((await self.session.execute(stmt)).scalars().all())

    async def find_all(self, predicates: Iterable[Predicate] = (), sort: Sequence[SortOrder] = (), order_by=None) -> list[Listing]:
        stmt = self.where(self._base(select(Listing)), predicates)
        stmt = stmt.order_by(*(order_by if order_by is not None else self.sort_clauses(sort)))
        return list((await self.session.execute(stmt.options(*self._options()))).scalars().all())

    async def count(self, predicates: Iterable[Predicate] = ()) -> int:
        stmt = self.where(self._base(select(func.count(Listing.id)).select_from(Listing)), predicates)
        return (await self.session.execute(stmt)).scalar_one()

    async def search(self, predicates: Sequence[Predicate], page: PageRequest, order_by=None) -> tuple[list[Listing], int]:
        """Filter and page in the database; the count query shares the WHERE clause but not the ORDER BY."""
        predicates = list(predicates)
        total = await self.count(predicates)
        stmt = self.where(self._base(select(Listing)), predicates)
        stmt = stmt.order_by(*(order_by if order_by is not None else self.sort_clauses(page.sort)))
        stmt = stmt.offset(page.offset).limit(page.size).options(*self._options())
        rows = list((await self.session.execute(stmt)).scalars().all())
        return rows, total

    async def find_page(self, page: PageRequest) -> tuple[list[Listing], int]:
        return await self.search([], page)

    async def create(self, core: dict, details: dict, category: Category, owner) -> Listing:
        listing = Listing(listing_type=self.listing_type, category=category, owner=owner, **core)
        setattr(listing, DETAIL_ATTRS[self.listing_type], self.detail_model(**details))
        listing.refresh_search_document()
        self.session.add(listing)
        await self.session.flush()
        logger.info("Listing row inserted", listing_id=listing.id, listing_type=self.listing_type.value)
        return listing

    async def update(self, listing: Listing, core: dict, details: dict, category: Category | None = None) -> Listing:
        """Apply only the given fields; callers pass the non-null subset of a patch."""
        for key, value in core.items():
            setattr(listing, key, value)
        if category is not None:
            listing.category = category
        for key, value in details.items():
            setattr(listing.details, key, value)
        if core.keys() & {"title", "description", "city", "district"}:
            listing.refresh_search_document()
        listing.updated_at = utcnow()
        await self.session.flush()
        return listing

    async def delete(self, listing: Listing) -> None:
        await self.session.delete(listing)
        await self.session.flush()

    async def increment_view_count(self, listing_id: int) -> None:
        stmt = (
            update(Listing)
            .where(Listing.id == listing_id)
            .values(view_count=Listing.view_count + 1, updated_at=Listing.updated_at)
            .execution_options(synchronize_session=False)
        )
        if self.listing_type is not None:
            stmt = stmt.where(Listing.listing_type == self.listing_type)
        result = await self.session.execute(stmt)
        if result.rowcount == 0:
            raise NotFound(f"{self._label()} not found with id: {listing_id}")
