from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
    )

    # MongoDB (defaults match a local mongod for dev)
    MONGODB_URL: str = "mongodb://localhost:27017"
    MONGODB_DB: str = "finance_tracker"
    MONGODB_MAX_POOL_SIZE: int = 10
    MONGODB_SERVER_SELECTION_TIMEOUT_MS: int = 10_000

    # JWT: no default, MUST be set in .env
    JWT_SECRET: str
    JWT_ALGORITHM: str = "HS256"

    # In-process caches: size in entries, TTL in seconds
    CATEGORIES_CACHE_MAX_SIZE: int = 1000
    CATEGORIES_CACHE_TTL_SECONDS: float = 600.0  # categories rarely change
    USER_CACHE_MAX_SIZE: int = 500
    USER_CACHE_TTL_SECONDS: float = 900.0
    AGGREGATION_CACHE_MAX_SIZE: int = 200
    AGGREGATION_CACHE_TTL_SECONDS: float = 120.0  # reports must stay fresh
    GENERAL_CACHE_MAX_SIZE: int = 500
    GENERAL_CACHE_TTL_SECONDS: float = 300.0
    CACHE_SWEEP_INTERVAL_SECONDS: float = 60.0

    # Slow-operation thresholds for performance logging
    SLOW_DB_MS: int = 200
    SLOW_API_MS: int = 1000

    # App
    APP_NAME: str = "Finance Tracker"
    DEBUG: bool = False  # Safe default for production; set DEBUG=True in .env for local dev
    LOG_LEVEL: str = "INFO"


settings = Settings()
