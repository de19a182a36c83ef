from zoneinfo import ZoneInfo

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    # App
    ENV: str = "development"
    DEBUG: bool = True

    # Schedule service
    SCHEDULE_API_URL: str = "http://localhost:3000/api"
    SCHEDULE_API_TOKEN: str = ""
    REQUEST_TIMEOUT_SECONDS: float = 30.0
    READ_RETRIES: int = 2

    # Calendar
    TIMEZONE: str = "UTC"

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
    )


settings = Settings()


def local_timezone() -> ZoneInfo:
    """Zone that week boundaries and day cells are computed in."""
    return ZoneInfo(settings.TIMEZONE)
