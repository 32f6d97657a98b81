from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from structlog import get_logger

from marketplace.exceptions import NotFound
from marketplace.models.base import utcnow
from marketplace.models.saved_search import SavedSearch
from marketplace.schemas.common import Page, PageRequest
from marketplace.schemas.listing import ListingSummary
from marketplace.schemas.search import SavedSearchRequest, SavedSearchResponse
from marketplace.schemas.user import CurrentUser
from marketplace.services.listings import upsert_owner
from marketplace.services.search import AdvancedSearchEngine

logger = get_logger()


class SavedSearchService:
    """Saved searches belong to one user; other users' searches read as missing."""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def _owned(self, search_id: int, user: CurrentUser) -> SavedSearch:
        stmt = select(SavedSearch).where(SavedSearch.id == search_id, SavedSearch.user_id == user.id)
        saved = (await self.session.execute(stmt)).scalars().first()
        if saved is None:
            raise NotFound(f"Saved search not found with id: {search_id}")
        return saved

    async def create(self, request: SavedSearchRequest, user: CurrentUser) -> SavedSearchResponse:
        await upsert_owner(self.session, user)
        saved = SavedSearch(
            user_id=user.id,
            name=request.name,
            search_criteria=request.search_criteria,
            notification_enabled=request.notification_enabled,
        )
        self.session.add(saved)
        await self.session.commit()
        logger.info("Saved search created", search_id=saved.id, user_id=user.id)
        return SavedSearchResponse.model_validate(saved)

    async def find_all(self, user: CurrentUser) -> list[SavedSearchResponse]:
        stmt = select(SavedSearch).where(SavedSearch.user_id == user.id).order_by(SavedSearch.created_at.desc(), SavedSearch.id.desc())
        rows = (await self.session.execute(stmt)).scalars().all()
        return [SavedSearchResponse.model_validate(row) for row in rows]

    async def get(self, search_id: int, user: CurrentUser) -> SavedSearchResponse:
        return SavedSearchResponse.model_validate(await self._owned(search_id, user))

    async def update(self, search_id: int, request: SavedSearchRequest, user: CurrentUser) -> SavedSearchResponse:
        saved = await self._owned(search_id, user)
        saved.name = request.name
        saved.search_criteria = request.search_criteria
        saved.notification_enabled = request.notification_enabled
        saved.updated_at = utcnow()
        await self.session.commit()
        logger.info("Saved search updated", search_id=search_id, user_id=user.id)
        return SavedSearchResponse.model_validate(saved)

    async def delete(self, search_id: int, user: CurrentUser) -> None:
        saved = await self._owned(search_id, user)
        await self.session.delete(saved)
        await self.session.commit()
        logger.info("Saved search deleted", search_id=search_id, user_id=user.id)

    async def execute(self, search_id: int, user: CurrentUser, page: PageRequest) -> Page[ListingSummary]:
        saved = await self._owned(search_id, user)
        return await AdvancedSearchEngine(self.session).replay(saved.search_criteria or {}, page)
