from fastapi import Depends, HTTPException
from fastapi.security import OAuth2PasswordBearer
from httpx import AsyncClient, HTTPError
from pydantic import ValidationError
from structlog import get_logger

from marketplace.config import settings
from marketplace.schemas.user import CurrentUser

# Build the verify URL whether USER_MANAGEMENT_URL already includes '/api/v1' or not
_um_base = settings.USER_MANAGEMENT_URL.rstrip("/")
_has_v1 = _um_base.endswith("/api/v1")
_verify_path = "/auth/verify" if _has_v1 else "/api/v1/auth/verify"
_login_path = "/auth/login" if _has_v1 else "/api/v1/auth/login"

oauth2_scheme = OAuth2PasswordBearer(tokenUrl=f"{_um_base}{_login_path}")
logger = get_logger()

_RETRY_ON = (400, 404, 405, 415, 422)


def _normalize_user(data: dict) -> dict:
    """Accept {user: {...}} or a flat payload; map common id and role spellings."""
    user = dict(data.get("user", data))
    uid = user.get("id") or user.get("_id") or user.get("user_id") or user.get("sub") or user.get("uid")
    if uid is not None:
        user["id"] = uid
    user["username"] = user.get("username") or user.get("email") or str(uid)
    roles = user.get("roles")
    if roles is None:
        roles = [user["role"]] if user.get("role") else []
    elif isinstance(roles, str):
        roles = [roles]
    user["roles"] = [str(role.get("name", "")) if isinstance(role, dict) else str(role) for role in roles]
    return user


async def get_current_user(token: str = Depends(oauth2_scheme)) -> CurrentUser:
    """Verify the bearer token with the user management service."""
    url = f"{_um_base}{_verify_path}"
    try:
        async with AsyncClient(timeout=10.0) as client:
            # 1) Preferred: POST JSON {"token": token}
            resp = await client.post(url, json={"token": token})
            logger.info("Verify attempt JSON", upstream=url, status_code=resp.status_code)
            # 2) Some deployments only read the Authorization header
            if resp.status_code in _RETRY_ON:
                resp = await client.get(url, headers={"Authorization": f"Bearer {token}"})
                logger.info("Verify attempt GET Bearer", upstream=url, status_code=resp.status_code)
    except HTTPError as exc:
        logger.warning("Verify request failed", upstream=url, error=str(exc))
        raise HTTPException(status_code=401, detail="Could not verify token") from exc

    if resp.status_code != 200:
        logger.warning("Verify failed", upstream=url, status_code=resp.status_code)
        raise HTTPException(status_code=401, detail="Invalid token")
    try:
        return CurrentUser.model_validate(_normalize_user(resp.json()))
    except (ValueError, ValidationError) as exc:
        logger.warning("Verify returned an unusable payload", upstream=url, error=str(exc))
        raise HTTPException(status_code=401, detail="Invalid token") from exc
