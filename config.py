from pydantic_settings import BaseSettings
from functools import lru_cache


class Settings(BaseSettings):
    # AstrologyAPI credentials (Basic auth: user id / API key)
    ASTROLOGY_API_USER_ID: str = ""
    ASTROLOGY_API_KEY: str = ""

    ASTROLOGY_API_BASE_URL: str = "https://json.astrologyapi.com/v1"
    ASTROLOGY_API_TIMEOUT: float = 30.0  # seconds

    LOG_LEVEL: str = "INFO"

    # Where check_availability.py writes its report
    AVAILABILITY_REPORT_FILE: str = "API_Availability_Report.md"

    class Config:
        env_file = ".env"
        extra = "allow"


@lru_cache()
def get_settings() -> Settings:
    return Settings()
