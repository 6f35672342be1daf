"""Application configuration settings."""

from functools import lru_cache

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # Application
    APP_NAME: str = "Ticket Inventory API"
    APP_VERSION: str = "1.0.0"
    DEBUG: bool = False
    CORS_ALLOW_ORIGINS: list[str] = ["*"]

    # Database
    DB_HOST: str = "localhost"
    DB_PORT: int = 3306
    DB_USER: str = "root"
    DB_PASSWORD: str = ""
    DB_NAME: str = "event_tickets"
    DB_POOL_SIZE: int = 10
    DB_POOL_RECYCLE_SECONDS: int = 1800
    DATABASE_URL: str | None = None
    DB_CREATE_TABLES: bool = False

    # Empty string leaves the store default in place
    TRANSACTION_ISOLATION_LEVEL: str = "READ COMMITTED"

    # Hold settings
    HOLD_WINDOW_SECONDS: int = 120  # 2 minutes
    DEFAULT_MAX_PER_ORDER: int = 10
    MAX_ITEMS_PER_HOLD: int = 10

    @property
    def database_url(self) -> str:
        """Get async database URL."""
        if self.DATABASE_URL:
            return self.DATABASE_URL
        return (
            f"mysql+aiomysql://{self.DB_USER}:{self.DB_PASSWORD}"
            f"@{self.DB_HOST}:{self.DB_PORT}/{self.DB_NAME}"
        )

    @property
    def isolation_level(self) -> str | None:
        """Isolation level applied to hold and finalize transactions."""
        return self.TRANSACTION_ISOLATION_LEVEL or None

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
