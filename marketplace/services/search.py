import json
from typing import Any, Mapping

from pydantic import ValidationError
from redis.asyncio import Redis
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession
from structlog import get_logger

from marketplace.config import settings
from marketplace.exceptions import ValidationFailed, validation_errors
from marketplace.models.listing import Listing
from marketplace.schemas.common import Page, PageRequest
from marketplace.schemas.listing import ListingSummary
from marketplace.schemas.search import AdvancedSearchRequest, SearchSuggestion
from marketplace.services.aggregator import NEWEST_FIRST
from marketplace.services.listings import summarize
from marketplace.services.predicates import GeoRadius, Operator, Predicate, format_search_query
from marketplace.services.store import ListingStore, distance_meters, escape_like, text_rank

logger = get_logger()

DEFAULT_NEARBY_RADIUS_KM = 5.0
SUGGESTION_LIMIT = 5
MIN_SUGGESTION_LENGTH = 2


def search_predicates(request: AdvancedSearchRequest) -> list[Predicate]:
    predicates = []
    tsquery = format_search_query(request.query)
    if tsquery:
        predicates.append(Predicate("search_document", Operator.MATCH, tsquery))
    if request.city:
        predicates.append(Predicate("city", Operator.IEQ, request.city.strip()))
    if request.district:
        predicates.append(Predicate("district", Operator.IEQ, request.district.strip()))
    if request.category_slug:
        predicates.append(Predicate("category_slug", Operator.EQ, request.category_slug))
    if request.status is not None:
        predicates.append(Predicate("status", Operator.EQ, request.status))
    if request.min_price is not None:
        predicates.append(Predicate("price", Operator.GTE, request.min_price))
    if request.max_price is not None:
        predicates.append(Predicate("price", Operator.LTE, request.max_price))
    if request.has_point and request.radius_km is not None:
        radius = GeoRadius(request.latitude, request.longitude, request.radius_km * 1000)
        predicates.append(Predicate("location", Operator.WITHIN, radius))
    return predicates


class AdvancedSearchEngine:
    """Full-text, radius and multi-criteria search across every listing type."""

    def __init__(self, session: AsyncSession, redis: Redis | None = None):
        self.session = session
        self.redis = redis
        self.store = ListingStore(session)

    def _order_by(self, request: AdvancedSearchRequest) -> list:
        sort_by = (request.sort_by or "").lower()
        descending = (request.sort_order or "").lower() == "desc"
        if sort_by == "price":
            return [Listing.price.desc() if descending else Listing.price.asc(), Listing.id.asc()]
        if sort_by == "distance" and request.has_point:
            return [distance_meters(request.latitude, request.longitude).asc().nulls_last(), Listing.id.asc()]
        tsquery = format_search_query(request.query)
        if sort_by == "relevance" and tsquery and self.store.dialect == "postgresql":
            return [text_rank(tsquery).desc(), *NEWEST_FIRST]
        return list(NEWEST_FIRST)

    async def search(self, request: AdvancedSearchRequest, page: PageRequest) -> Page[ListingSummary]:
        predicates = search_predicates(request)
        rows, total = await self.store.search(predicates, page, order_by=self._order_by(request))
        logger.info(
            "Advanced search",
            query=request.query,
            predicates=[p.column for p in predicates],
            sort_by=request.sort_by,
            total=total,
            page=page.page,
        )
        return Page.of(await summarize(self.session, rows), total, page)

    async def nearby(self, latitude: float, longitude: float, radius_km: float | None, page: PageRequest) -> Page[ListingSummary]:
        request = AdvancedSearchRequest(
            latitude=latitude,
            longitude=longitude,
            radius_km=radius_km or DEFAULT_NEARBY_RADIUS_KM,
            sort_by="distance",
        )
        return await self.search(request, page)

    async def replay(self, criteria: Mapping[str, Any], page: PageRequest) -> Page[ListingSummary]:
        """Run a stored criteria map; keys the search does not know are ignored."""
        try:
            request = AdvancedSearchRequest.model_validate(dict(criteria))
        except ValidationError as exc:
            raise ValidationFailed("Saved search criteria are invalid", validation_errors(exc.errors())) from exc
        return await self.search(request, page)

    async def _distinct_matches(self, column, term: str, kind: str) -> list[SearchSuggestion]:
        count = func.count(Listing.id)
        stmt = (
            select(column, count)
            .where(func.lower(column).like(f"%{escape_like(term.lower())}%", escape="\\"))
            .group_by(column)
            .order_by(count.desc(), column)
            .limit(SUGGESTION_LIMIT)
        )
        rows = (await self.session.execute(stmt)).all()
        return [SearchSuggestion(value=value, type=kind, count=cnt) for value, cnt in rows]

    async def suggestions(self, text: str | None) -> list[SearchSuggestion]:
        term = (text or "").strip()
        if len(term) < MIN_SUGGESTION_LENGTH:
            return []
        cache_key = f"suggestions:{term.lower()}"
        if self.redis is not None:
            cached = await self.redis.get(cache_key)
            if cached:
                return [SearchSuggestion(**item) for item in json.loads(cached)]
        suggestions = await self._distinct_matches(Listing.city, term, "city")
        suggestions += await self._distinct_matches(Listing.district, term, "district")
        if self.redis is not None:
            payload = json.dumps([s.model_dump() for s in suggestions])
            await self.redis.setex(cache_key, settings.SUGGESTION_CACHE_TTL, payload)
        logger.info("Suggestions computed", term=term, count=len(suggestions))
        return suggestions
