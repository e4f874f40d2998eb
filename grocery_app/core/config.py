# grocery_app/core/config.py
from functools import lru_cache
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Centralized application settings loaded from environment.

    Every value has a default, so the app runs with an empty .env:
      - DATABASE_URL defaults to a SQLite file next to the process
      - PRODUCT_LOOKUP_URL points at the public Open Food Facts API

    Optional overrides (.env):
      - DATABASE_URL (any SQLAlchemy URL; the driver must be installed)
      - REMINDER_THRESHOLD_DAYS / REMINDER_LATCH_TIMEOUT_SECONDS / DUE_SOON_DAYS
      - PRODUCT_LOOKUP_TIMEOUT (seconds; unset = wait indefinitely)
    """

    PROJECT_NAME: str = "Grocery Cart Assistant"
    API_V1_STR: str = "/api/v1"

    # Embedded database
    DATABASE_URL: str = "sqlite:///./grocery.db"
    SQL_ECHO: bool = False

    # Cart reminders
    REMINDER_THRESHOLD_DAYS: int = 7
    # An unacknowledged reminder batch stops blocking new ones after this long
    REMINDER_LATCH_TIMEOUT_SECONDS: int = 300
    DUE_SOON_DAYS: int = 7

    # Barcode lookup (Open Food Facts)
    PRODUCT_LOOKUP_URL: str = "https://world.openfoodfacts.org/api/v0/product"
    PRODUCT_LOOKUP_TIMEOUT: float | None = None

    CORS_ORIGINS: list[str] = [
        "http://localhost:3000",
        "http://127.0.0.1:3000",
    ]

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")


@lru_cache
def get_settings() -> Settings:
    """
    Cached settings loader.
    Ensures we don't re-parse .env on every import / request.
    """
    return Settings()
