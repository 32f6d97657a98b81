import httpx
import pytest
from fastapi import HTTPException

from marketplace.dependencies import auth


def patch_upstream(monkeypatch, handler):
    real_client = httpx.AsyncClient

    def client_factory(**kwargs):
        return real_client(transport=httpx.MockTransport(handler), **kwargs)

    monkeypatch.setattr(auth, "AsyncClient", client_factory)


@pytest.mark.asyncio
async def test_verified_token_becomes_current_user(monkeypatch):
    def handler(request):
        assert request.url.path.endswith("/auth/verify")
        return httpx.Response(200, json={"user": {"user_id": 7, "username": "ayse", "roles": ["ROLE_USER"]}})

    patch_upstream(monkeypatch, handler)

    user = await auth.get_current_user(token="jwt")

    assert (user.id, user.username, user.roles) == (7, "ayse", ["ROLE_USER"])
    assert user.is_admin is False


@pytest.mark.asyncio
async def test_bearer_header_fallback(monkeypatch):
    def handler(request):
        if request.method == "POST":
            return httpx.Response(405)
        assert request.headers["Authorization"] == "Bearer jwt"
        return httpx.Response(200, json={"id": 1, "username": "root", "role": "ADMIN"})

    patch_upstream(monkeypatch, handler)

    user = await auth.get_current_user(token="jwt")

    assert user.is_admin is True


@pytest.mark.asyncio
async def test_rejected_token_is_401(monkeypatch):
    patch_upstream(monkeypatch, lambda request: httpx.Response(401, json={"detail": "expired"}))

    with pytest.raises(HTTPException) as exc:
        await auth.get_current_user(token="jwt")

    assert exc.value.status_code == 401


@pytest.mark.asyncio
async def test_unreachable_upstream_is_401(monkeypatch):
    def handler(request):
        raise httpx.ConnectError("connection refused", request=request)

    patch_upstream(monkeypatch, handler)

    with pytest.raises(HTTPException) as exc:
        await auth.get_current_user(token="jwt")

    assert exc.value.status_code == 401
