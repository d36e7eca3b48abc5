"""Language Center configuration settings."""

from functools import lru_cache
from typing import Any, Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class IntegrationSettings(BaseSettings):
    """Base class for external integration settings.

    All integration settings should inherit from this class to ensure
    consistent configuration behavior (env file loading, case sensitivity).
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        case_sensitive=True,
        extra="ignore",
    )


class LanguageCenterSettings(IntegrationSettings):
    """Remote translation service configuration.

    Environment Variables:
        LANGUAGECENTER_URL: Base API URL (required to build a client)
        LANGUAGECENTER_USERNAME: Basic auth username
        LANGUAGECENTER_PASSWORD: Basic auth password
        LANGUAGECENTER_PLATFORM: Default platform (default: web)
        LANGUAGECENTER_UPDATE_AFTER: Seconds before re-checking remote
            staleness (default: 60). Empty or "null" disables periodic checks.
        LANGUAGECENTER_TIMEOUT: Default HTTP timeout in seconds (default: 10)
        LANGUAGECENTER_CACHE_PREFIX: Durable cache key prefix
        LANGUAGECENTER_REDIS_URL: Redis URL for the shared cache store
            (takes precedence over CACHE_DIR)
        LANGUAGECENTER_CACHE_DIR: Directory for the single-host file cache
            store. With neither set, an in-process memory store is used.
        LANGUAGECENTER_LANG_PATH: Directory holding static YAML string tables
        LANGUAGECENTER_WARM_PLATFORMS: JSON list of platforms warmed by the
            batch job (default: ["web"])

    Example:
        ```python
        from languagecenter.core.config import get_settings

        settings = get_settings()
        url = settings.languagecenter.URL
        ```
    """

    URL: str = Field(default="", alias="LANGUAGECENTER_URL")
    USERNAME: str = Field(default="", alias="LANGUAGECENTER_USERNAME")
    PASSWORD: str = Field(default="", alias="LANGUAGECENTER_PASSWORD")
    PLATFORM: str = Field(default="web", alias="LANGUAGECENTER_PLATFORM")
    UPDATE_AFTER: Optional[int] = Field(default=60, alias="LANGUAGECENTER_UPDATE_AFTER")
    TIMEOUT: float = Field(default=10.0, alias="LANGUAGECENTER_TIMEOUT")
    CACHE_PREFIX: str = Field(
        default="languagecenter", alias="LANGUAGECENTER_CACHE_PREFIX"
    )
    REDIS_URL: str = Field(default="", alias="LANGUAGECENTER_REDIS_URL")
    CACHE_DIR: str = Field(default="", alias="LANGUAGECENTER_CACHE_DIR")
    LANG_PATH: str = Field(default="", alias="LANGUAGECENTER_LANG_PATH")
    WARM_PLATFORMS: list[str] = Field(
        default_factory=lambda: ["web"], alias="LANGUAGECENTER_WARM_PLATFORMS"
    )

    @field_validator("UPDATE_AFTER", mode="before")
    @classmethod
    def _parse_update_after(cls, value: Any) -> Any:
        if isinstance(value, str) and value.strip().lower() in ("", "null", "none"):
            return None
        return value


class Settings(BaseSettings):
    """Application settings - main aggregator.

    Environment Variables:
        PREFIX: Environment prefix (empty means production)
        LOG_LEVEL: Logging level (DEBUG, INFO, WARNING, ERROR)
        LOCALE: Default application locale
        FALLBACK_LOCALE: Default fallback locale
    """

    PREFIX: str = ""
    LOG_LEVEL: str = "INFO"
    LOCALE: str = "en"
    FALLBACK_LOCALE: str = "en"

    languagecenter: LanguageCenterSettings

    @property
    def is_production(self) -> bool:
        """Check if the application is running in production.

        Returns:
            True if PREFIX is empty (production), False otherwise.
        """
        return not bool(self.PREFIX)

    def __init__(self, **kwargs):
        if "languagecenter" not in kwargs:
            kwargs["languagecenter"] = LanguageCenterSettings()

        super().__init__(**kwargs)

    model_config = SettingsConfigDict(
        env_file=".env",
        case_sensitive=True,
        extra="ignore",
    )


@lru_cache
def get_settings() -> Settings:
    """Get the process-wide settings singleton.

    Returns:
        Settings: Cached settings instance loaded from environment.
    """
    return Settings()
