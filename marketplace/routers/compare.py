from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from marketplace.db.database import get_session
from marketplace.schemas.comparison import CompareRequest, ComparisonResponse
from marketplace.services.comparison import ComparisonEngine

router = APIRouter(prefix="/api/v1/compare", tags=["compare"])


@router.post("", response_model=ComparisonResponse, response_model_exclude_none=True)
async def compare_listings(payload: CompareRequest, session: AsyncSession = Depends(get_session)):
    """Side-by-side table for 2 or 3 listings of the same category."""
    return await ComparisonEngine(session).compare(payload.listing_ids)
