"""Per-category routes, one router per listing variant."""
from typing import List

from fastapi import APIRouter, Depends, Response
from sqlalchemy.ext.asyncio import AsyncSession

from marketplace.db.database import get_session
from marketplace.dependencies.auth import get_current_user
from marketplace.dependencies.pagination import page_request
from marketplace.dependencies.query import query_model
from marketplace.schemas.common import Page, PageRequest
from marketplace.schemas.listing import ListingDetail, ListingSummary
from marketplace.schemas.user import CurrentUser
from marketplace.services.listings import ListingService
from marketplace.services.variants import VARIANTS, Variant


def build_router(variant: Variant) -> APIRouter:
    router = APIRouter(prefix=f"/api/v1/{variant.prefix}", tags=[variant.prefix])
    filter_schema = variant.filter_schema
    create_schema = variant.create_schema
    update_schema = variant.update_schema

    @router.get("", response_model=Page[ListingSummary])
    async def search(
        filters: filter_schema = Depends(query_model(filter_schema)),
        page: PageRequest = Depends(page_request),
        session: AsyncSession = Depends(get_session),
    ):
        return await ListingService(session, variant).search(filters, page)

    @router.post("", response_model=ListingDetail, status_code=201)
    async def create(
        payload: create_schema,
        user: CurrentUser = Depends(get_current_user),
        session: AsyncSession = Depends(get_session),
    ):
        return await ListingService(session, variant).create(payload, user)

    @router.get("/{listing_id}", response_model=ListingDetail)
    async def get_one(listing_id: int, session: AsyncSession = Depends(get_session)):
        return await ListingService(session, variant).get(listing_id)

    @router.get("/{listing_id}/similar", response_model=List[ListingSummary])
    async def similar(listing_id: int, session: AsyncSession = Depends(get_session)):
        return await ListingService(session, variant).similar(listing_id)

    @router.put("/{listing_id}", response_model=ListingDetail)
    async def update(
        listing_id: int,
        payload: update_schema,
        user: CurrentUser = Depends(get_current_user),
        session: AsyncSession = Depends(get_session),
    ):
        return await ListingService(session, variant).update(listing_id, payload, user)

    @router.delete("/{listing_id}", status_code=204)
    async def delete(
        listing_id: int,
        user: CurrentUser = Depends(get_current_user),
        session: AsyncSession = Depends(get_session),
    ):
        await ListingService(session, variant).delete(listing_id, user)
        return Response(status_code=204)

    return router


routers = [build_router(variant) for variant in VARIANTS.values()]
