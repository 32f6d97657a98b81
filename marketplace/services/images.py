from typing import Iterable

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from marketplace.config import settings
from marketplace.models.image import Image
from marketplace.models.listing import Listing


def image_url(image_id: int) -> str:
    return f"{settings.IMAGE_BASE_URL.rstrip('/')}/{image_id}"


class ImageStore:
    """Read side of the image collaborator: the first (lowest display order) image of a listing."""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def first_image_url(self, listing_id: int, listing_type) -> str | None:
        urls = await self.first_image_urls([(listing_id, listing_type)])
        return urls.get(listing_id)

    async def first_image_urls(self, keys: Iterable[tuple[int, object]]) -> dict[int, str]:
        keys = {(listing_id, getattr(listing_type, "value", listing_type)) for listing_id, listing_type in keys}
        if not keys:
            return {}
        stmt = (
            select(Image.id, Image.listing_id, Image.listing_type)
            .where(Image.listing_id.in_({listing_id for listing_id, _ in keys}))
            .order_by(Image.listing_id, Image.display_order, Image.id)
        )
        urls: dict[int, str] = {}
        for image_id, listing_id, listing_type in (await self.session.execute(stmt)).all():
            if (listing_id, listing_type) in keys and listing_id not in urls:
                urls[listing_id] = image_url(image_id)
        return urls

    async def for_listings(self, listings: Iterable[Listing]) -> dict[int, str]:
        return await self.first_image_urls((listing.id, listing.listing_type) for listing in listings)
