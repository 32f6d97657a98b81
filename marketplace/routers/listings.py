from typing import List, Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession
from structlog import get_logger

from marketplace.db.database import get_session
from marketplace.dependencies.auth import get_current_user
from marketplace.dependencies.pagination import page_request, parse_sort
from marketplace.dependencies.query import query_model
from marketplace.schemas.common import Page, PageRequest
from marketplace.schemas.filters import GeneralFilter
from marketplace.schemas.listing import CategoryStats, ListingSummary
from marketplace.schemas.user import CurrentUser
from marketplace.services.aggregator import ListingAggregator

logger = get_logger()
router = APIRouter(prefix="/api/v1/listings", tags=["listings"])


@router.get("", response_model=List[ListingSummary])
async def get_feed(
    sort: Optional[List[str]] = Query(None),
    session: AsyncSession = Depends(get_session),
):
    """Every listing of every category: real estate, land, vehicles, then workplaces."""
    return await ListingAggregator(session).feed(parse_sort(sort))


@router.get("/page", response_model=Page[ListingSummary])
async def get_feed_page(
    page: PageRequest = Depends(page_request),
    session: AsyncSession = Depends(get_session),
):
    return await ListingAggregator(session).feed_page(page)


@router.get("/search", response_model=Page[ListingSummary])
async def search_listings(
    filters: GeneralFilter = Depends(query_model(GeneralFilter)),
    page: PageRequest = Depends(page_request),
    session: AsyncSession = Depends(get_session),
):
    return await ListingAggregator(session).search(filters, page)


@router.get("/stats", response_model=List[CategoryStats])
async def get_stats(session: AsyncSession = Depends(get_session)):
    return await ListingAggregator(session).stats()


@router.get("/mine", response_model=List[ListingSummary])
async def get_my_listings(
    user: CurrentUser = Depends(get_current_user),
    session: AsyncSession = Depends(get_session),
):
    return await ListingAggregator(session).owner_listings(user.id)
