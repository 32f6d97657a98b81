from typing import List, Optional

from fastapi import Query

from marketplace.config import settings
from marketplace.exceptions import ValidationFailed
from marketplace.schemas.common import PageRequest, SortOrder


def parse_sort(values: Optional[List[str]]) -> tuple[SortOrder, ...]:
    """``["price,desc", "id"]`` -> (SortOrder("price", True), SortOrder("id"))."""
    orders = []
    for value in values or []:
        field, _, direction = value.partition(",")
        field = field.strip()
        direction = direction.strip().lower() or "asc"
        if not field:
            continue
        if direction not in ("asc", "desc"):
            raise ValidationFailed(errors={"sort": f"Unknown sort direction '{direction}'"})
        orders.append(SortOrder(field, direction == "desc"))
    return tuple(orders)


def page_request(
    page: int = Query(0, ge=0),
    size: Optional[int] = Query(None, ge=1),
    sort: Optional[List[str]] = Query(None),
) -> PageRequest:
    size = min(size or settings.DEFAULT_PAGE_SIZE, settings.MAX_PAGE_SIZE)
    return PageRequest(page=page, size=size, sort=parse_sort(sort))
