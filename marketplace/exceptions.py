from datetime import datetime, timezone

from fastapi import Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from structlog import get_logger

logger = get_logger()


class MarketplaceError(Exception):
    status_code = 500
    default_message = "Unexpected error"

    def __init__(self, message: str | None = None, errors: dict[str, str] | None = None):
        self.message = message or self.default_message
        self.errors = errors
        super().__init__(self.message)


class NotFound(MarketplaceError):
    status_code = 404
    default_message = "Entity not found"


class InvalidComparison(MarketplaceError):
    status_code = 400
    default_message = "Select 2 or 3 listings of the same category"


class ValidationFailed(MarketplaceError):
    status_code = 400
    default_message = "Validation failed"


class AccessDenied(MarketplaceError):
    status_code = 403
    default_message = "Access denied"


def error_body(status_code: int, message: str, errors: dict[str, str] | None = None) -> dict:
    return {
        "status": status_code,
        "message": message,
        "errors": errors,
        "timestamp": datetime.now(timezone.utc).isoformat(),
    }


def validation_errors(exc_errors) -> dict[str, str]:
    """Flatten pydantic error entries into {field: message}."""
    errors = {}
    for err in exc_errors:
        loc = [str(part) for part in err.get("loc", ()) if part not in ("body", "query", "path")]
        field = ".".join(loc) or "request"
        errors.setdefault(field, err.get("msg", "Invalid value"))
    return errors


async def marketplace_error_handler(request: Request, exc: MarketplaceError):
    if exc.status_code < 500:
        logger.warning("Request rejected", path=request.url.path, status_code=exc.status_code, reason=exc.message)
    return JSONResponse(status_code=exc.status_code, content=error_body(exc.status_code, exc.message, exc.errors))


async def request_validation_handler(request: Request, exc: RequestValidationError):
    errors = validation_errors(exc.errors())
    logger.warning("Request validation failed", path=request.url.path, errors=errors)
    return JSONResponse(status_code=400, content=error_body(400, ValidationFailed.default_message, errors))
