from typing import Type, TypeVar

from fastapi import Request
from pydantic import BaseModel, ValidationError

from marketplace.exceptions import ValidationFailed, validation_errors

M = TypeVar("M", bound=BaseModel)

# query keys consumed by page_request rather than the filter model
PAGING_KEYS = {"page", "size", "sort"}


def query_model(model: Type[M]):
    """Dependency that validates the query string into ``model`` (camelCase or snake_case keys)."""

    async def dependency(request: Request) -> M:
        params = {key: value for key, value in request.query_params.items() if key not in PAGING_KEYS}
        try:
            return model.model_validate(params)
        except ValidationError as exc:
            raise ValidationFailed(errors=validation_errors(exc.errors())) from exc

    return dependency
