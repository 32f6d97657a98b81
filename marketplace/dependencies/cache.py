from fastapi import Request, Response
from fastapi_limiter import FastAPILimiter
from fastapi_limiter.depends import RateLimiter
from redis.asyncio import Redis

from marketplace.config import settings

# Initialize Redis client lazily and reuse it; None when REDIS_URL is not configured
redis_client: Redis | None = None


async def get_redis_client() -> Redis | None:
    global redis_client
    if redis_client is None and settings.REDIS_URL:
        redis_client = Redis.from_url(settings.REDIS_URL, encoding="utf-8", decode_responses=True)
    return redis_client


async def close_redis_client() -> None:
    global redis_client
    if redis_client is not None:
        await redis_client.close()
    redis_client = None


def rate_limit(times: int, seconds: int = 60):
    """RateLimiter that stays inactive until FastAPILimiter has been given a Redis connection."""
    limiter = RateLimiter(times=times, seconds=seconds)

    async def dependency(request: Request, response: Response):
        if FastAPILimiter.redis is None:
            return
        await limiter(request, response)

    return dependency
