from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi_limiter import FastAPILimiter
from structlog import get_logger

from marketplace.config import settings
from marketplace.db.database import dispose_engine, get_sessionmaker, init_db, init_engine
from marketplace.dependencies.cache import close_redis_client, get_redis_client
from marketplace.exceptions import MarketplaceError, marketplace_error_handler, request_validation_handler
from marketplace.logging_config import configure_logging
from marketplace.routers import catalog, compare, listings, search
from marketplace.services.categories import ensure_default_categories

configure_logging(settings.LOG_LEVEL, json_output=settings.LOG_JSON)
logger = get_logger()

app = FastAPI(title="Marketplace Listing Service")
app.add_middleware(CORSMiddleware, allow_origins=["*"], allow_credentials=True, allow_methods=["*"], allow_headers=["*"])
app.add_exception_handler(MarketplaceError, marketplace_error_handler)
app.add_exception_handler(RequestValidationError, request_validation_handler)


@app.on_event("startup")
async def startup_event():
    init_engine(settings.DATABASE_URL)
    if settings.CREATE_SCHEMA_ON_STARTUP:
        await init_db()
    async with get_sessionmaker()() as session:
        await ensure_default_categories(session)
    redis = await get_redis_client()
    if redis is not None:
        await FastAPILimiter.init(redis)
    logger.info("Marketplace service started", rate_limited=redis is not None, feed_pagination=settings.FEED_PAGINATION)


@app.on_event("shutdown")
async def shutdown_event():
    # FastAPILimiter shares this connection
    await close_redis_client()
    await dispose_engine()


app.include_router(listings.router)
for router in catalog.routers:
    app.include_router(router)
app.include_router(search.router)
app.include_router(compare.router)


@app.get("/health")
async def root_health():
    return "ok"
