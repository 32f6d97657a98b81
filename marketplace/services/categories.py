from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from structlog import get_logger

from marketplace.exceptions import NotFound
from marketplace.models.listing import Category
from marketplace.services.variants import VARIANTS

logger = get_logger()


async def get_category_by_slug(session: AsyncSession, slug: str) -> Category:
    category = (await session.execute(select(Category).where(Category.slug == slug))).scalars().first()
    if category is None:
        raise NotFound(f"Category not found with slug: {slug}")
    return category


async def ensure_default_categories(session: AsyncSession) -> None:
    """Seed the top-level categories if they are missing; safe to call on every startup."""
    existing = set((await session.execute(select(Category.slug))).scalars().all())
    created = []
    for variant in VARIANTS.values():
        if variant.root_slug not in existing:
            session.add(Category(name=variant.root_name, slug=variant.root_slug, active=True))
            created.append(variant.root_slug)
    if created:
        await session.commit()
        logger.info("Seeded default categories", slugs=created)
