"""
Application configuration.
Values come from environment variables, falling back to a local .env file
and then to the defaults below.
"""
import logging
from pydantic_settings import BaseSettings

logger = logging.getLogger(__name__)


class Settings(BaseSettings):
    APP_ENV: str = "development"
    LOG_LEVEL: str = "INFO"

    # Viewing times are stored as naive wall-clock values in this zone;
    # timezone-aware input is converted into it first
    TIMEZONE: str = "UTC"

    # Demo data shown on an empty dashboard
    SEED_DEMO_DATA: bool = True

    # Operators written into appointment history
    DEFAULT_OPERATOR: str = "admin"
    SYSTEM_OPERATOR: str = "system"

    # Appointment numbers look like YY20250315001
    APPOINTMENT_NUMBER_PREFIX: str = "YY"

    # Listing
    DEFAULT_PAGE_SIZE: int = 10
    MAX_PAGE_SIZE: int = 100

    class Config:
        env_file = ".env"


settings = Settings()

if settings.DEFAULT_PAGE_SIZE > settings.MAX_PAGE_SIZE:
    raise ValueError(
        f"DEFAULT_PAGE_SIZE ({settings.DEFAULT_PAGE_SIZE}) must not exceed "
        f"MAX_PAGE_SIZE ({settings.MAX_PAGE_SIZE})."
    )
