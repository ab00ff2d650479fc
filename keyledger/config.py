# keyledger/config.py

from decimal import Decimal
from typing import Optional

from dotenv import load_dotenv
from pydantic_settings import BaseSettings

load_dotenv(".env")


class Settings(BaseSettings):
    DATABASE_URL: str = "sqlite:///db.sqlite"  # file in project root
    TAX_RATE: Decimal = Decimal("0.0875")
    TIMEZONE: str = "America/New_York"
    CRON_SECRET_TOKEN: Optional[str] = None
    VIN_API_BASE_URL: str = "https://vpic.nhtsa.dot.gov/api/vehicles/DecodeVinValues"
    VIN_CACHE_TTL_SECONDS: float = 300.0
    VIN_CACHE_MAX_ENTRIES: int = 100
    BUSINESS_NAME: str = "KeyLedger Locksmith"
    LOG_LEVEL: str = "INFO"


settings = Settings()


def get_settings() -> Settings:
    return settings
