from typing import List, Optional

from fastapi import APIRouter, Depends, Query, Response
from redis.asyncio import Redis
from sqlalchemy.ext.asyncio import AsyncSession

from marketplace.config import settings
from marketplace.db.database import get_session
from marketplace.dependencies.auth import get_current_user
from marketplace.dependencies.cache import get_redis_client, rate_limit
from marketplace.dependencies.pagination import page_request
from marketplace.dependencies.query import query_model
from marketplace.schemas.common import Page, PageRequest
from marketplace.schemas.listing import ListingSummary
from marketplace.schemas.search import (
    AdvancedSearchRequest,
    SavedSearchRequest,
    SavedSearchResponse,
    SearchSuggestion,
)
from marketplace.schemas.user import CurrentUser
from marketplace.services.saved_search import SavedSearchService
from marketplace.services.search import AdvancedSearchEngine

router = APIRouter(prefix="/api/v1/search", tags=["search"])

_limited = [Depends(rate_limit(times=settings.SEARCH_RATE_LIMIT, seconds=60))]


@router.get("/advanced", response_model=Page[ListingSummary], dependencies=_limited)
async def advanced_search(
    criteria: AdvancedSearchRequest = Depends(query_model(AdvancedSearchRequest)),
    page: PageRequest = Depends(page_request),
    session: AsyncSession = Depends(get_session),
):
    return await AdvancedSearchEngine(session).search(criteria, page)


@router.get("/suggestions", response_model=List[SearchSuggestion], dependencies=_limited)
async def suggestions(
    q: Optional[str] = None,
    session: AsyncSession = Depends(get_session),
    redis: Optional[Redis] = Depends(get_redis_client),
):
    return await AdvancedSearchEngine(session, redis).suggestions(q)


@router.get("/nearby", response_model=Page[ListingSummary], dependencies=_limited)
async def nearby(
    lat: float = Query(..., ge=-90, le=90),
    lng: float = Query(..., ge=-180, le=180),
    radius: Optional[float] = Query(None, gt=0),
    page: PageRequest = Depends(page_request),
    session: AsyncSession = Depends(get_session),
):
    return await AdvancedSearchEngine(session).nearby(lat, lng, radius, page)


@router.post("/saved", response_model=SavedSearchResponse, status_code=201)
async def create_saved_search(
    payload: SavedSearchRequest,
    user: CurrentUser = Depends(get_current_user),
    session: AsyncSession = Depends(get_session),
):
    return await SavedSearchService(session).create(payload, user)


@router.get("/saved", response_model=List[SavedSearchResponse])
async def list_saved_searches(
    user: CurrentUser = Depends(get_current_user),
    session: AsyncSession = Depends(get_session),
):
    return await SavedSearchService(session).find_all(user)


@router.get("/saved/{search_id}", response_model=SavedSearchResponse)
async def get_saved_search(
    search_id: int,
    user: CurrentUser = Depends(get_current_user),
    session: AsyncSession = Depends(get_session),
):
    return await SavedSearchService(session).get(search_id, user)


@router.put("/saved/{search_id}", response_model=SavedSearchResponse)
async def update_saved_search(
    search_id: int,
    payload: SavedSearchRequest,
    user: CurrentUser = Depends(get_current_user),
    session: AsyncSession = Depends(get_session),
):
    return await SavedSearchService(session).update(search_id, payload, user)


@router.delete("/saved/{search_id}", status_code=204)
async def delete_saved_search(
    search_id: int,
    user: CurrentUser = Depends(get_current_user),
    session: AsyncSession = Depends(get_session),
):
    await SavedSearchService(session).delete(search_id, user)
    return Response(status_code=204)


@router.get("/saved/{search_id}/execute", response_model=Page[ListingSummary])
async def execute_saved_search(
    search_id: int,
    page: PageRequest = Depends(page_request),
    user: CurrentUser = Depends(get_current_user),
    session: AsyncSession = Depends(get_session),
):
    return await SavedSearchService(session).execute(search_id, user, page)
