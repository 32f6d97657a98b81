from sqlalchemy import insert
from sqlalchemy.ext.asyncio import AsyncSession
from structlog import get_logger

from marketplace.models.activity_log import ActivityLog

logger = get_logger()

LISTING_CREATED = "LISTING_CREATED"
LISTING_DELETED = "LISTING_DELETED"


async def record_activity(
    session: AsyncSession,
    username: str,
    action: str,
    description: str,
    entity_id: int | None = None,
    details: dict | None = None,
):
    # no commit here; the entry belongs to the caller's transaction
    stmt = insert(ActivityLog).values(
        username=username,
        action=action,
        description=description,
        entity_id=entity_id,
        details=details,
    )
    await session.execute(stmt)
    logger.info("Activity recorded", action=action, username=username, entity_id=entity_id)
