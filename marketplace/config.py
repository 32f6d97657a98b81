from pydantic_settings import BaseSettings

class Settings(BaseSettings):
    DATABASE_URL: str = "sqlite+aiosqlite:///./marketplace.db"
    REDIS_URL: str | None = None
    USER_MANAGEMENT_URL: str = "http://localhost:8001"
    IMAGE_BASE_URL: str = "/api/images/view"

    # "memory" concatenates every category before slicing a page, "store" lets the database page
    FEED_PAGINATION: str = "memory"
    FULLTEXT_CONFIG: str = "turkish"
    DEFAULT_PAGE_SIZE: int = 20
    MAX_PAGE_SIZE: int = 100
    SUGGESTION_CACHE_TTL: int = 300
    SEARCH_RATE_LIMIT: int = 60
    NUMBER_LOCALE: str = "tr_TR"
    LOG_LEVEL: str = "INFO"
    LOG_JSON: bool = False
    # alembic owns the schema in production
    CREATE_SCHEMA_ON_STARTUP: bool = True

    class Config:
        env_file = ".env"

settings = Settings()
