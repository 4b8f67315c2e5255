import logging
import sys
from functools import lru_cache
from typing import Literal

from pydantic import field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

logger = logging.getLogger(__name__)

FALLBACK_APP_URL = "https://fc-aniversary-v3.vercel.app"
DEV_APP_URL = "http://localhost:3001"


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Airstack social graph
    AIRSTACK_API_KEY: str = ""
    AIRSTACK_API_URL: str = "https://api.airstack.xyz/gql"

    # Farcaster fname registry
    FNAME_REGISTRY_URL: str = "https://fnames.farcaster.xyz"

    # Public URL of this deployment
    APP_URL: str | None = None
    VERCEL_URL: str | None = None

    # App config
    CORS_ORIGINS: list[str] = ["*"]
    DEBUG: bool = False
    HTTP_TIMEOUT_SECONDS: float = 10.0

    # Image rendering
    RENDER_BACKEND: Literal["pillow", "svg"] = "pillow"
    RENDER_FONT_PATH: str | None = None

    # Optional profile cache
    CACHE_BACKEND: Literal["none", "memory", "redis"] = "none"
    CACHE_TTL_SECONDS: int = 300

    # Upstash Redis (only when CACHE_BACKEND=redis)
    UPSTASH_REDIS_REST_URL: str | None = None
    UPSTASH_REDIS_REST_TOKEN: str | None = None

    @field_validator("HTTP_TIMEOUT_SECONDS")
    @classmethod
    def validate_timeout(cls, v: float) -> float:
        if v <= 0:
            raise ValueError("HTTP_TIMEOUT_SECONDS must be positive")
        return v

    @field_validator("UPSTASH_REDIS_REST_URL")
    @classmethod
    def validate_redis_url(cls, v: str | None) -> str | None:
        if v is not None and not v.startswith("https://"):
            raise ValueError("UPSTASH_REDIS_REST_URL must be a valid HTTPS URL")
        return v

    @model_validator(mode="after")
    def validate_redis_cache(self) -> "Settings":
        if self.CACHE_BACKEND == "redis":
            if not self.UPSTASH_REDIS_REST_URL:
                raise ValueError("UPSTASH_REDIS_REST_URL is required when CACHE_BACKEND=redis")
            if not self.UPSTASH_REDIS_REST_TOKEN or not self.UPSTASH_REDIS_REST_TOKEN.strip():
                raise ValueError("UPSTASH_REDIS_REST_TOKEN cannot be empty when CACHE_BACKEND=redis")
        return self

    @property
    def app_url(self) -> str:
        """Public base URL used for image references and share links."""
        if self.APP_URL:
            url = self.APP_URL.rstrip("/")
            return url if url.startswith("http") else f"https://{url}"
        if self.VERCEL_URL:
            return f"https://{self.VERCEL_URL.rstrip('/')}"
        if self.DEBUG:
            return DEV_APP_URL
        logger.warning("Unable to determine app URL, using fallback %s", FALLBACK_APP_URL)
        return FALLBACK_APP_URL


def configure_logging(debug: bool = False) -> None:
    """Configure logging for the application."""
    log_level = logging.DEBUG if debug else logging.INFO
    log_format = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

    logging.basicConfig(
        level=log_level,
        format=log_format,
        handlers=[logging.StreamHandler(sys.stdout)],
    )

    # Reduce noise from third-party libraries
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)
    logging.getLogger("PIL").setLevel(logging.WARNING)


@lru_cache
def get_settings() -> Settings:
    settings = Settings()
    configure_logging(settings.DEBUG)
    logger.info("Settings loaded successfully")
    logger.debug("App URL: %s", settings.app_url)
    logger.debug("Render backend: %s, cache backend: %s", settings.RENDER_BACKEND, settings.CACHE_BACKEND)
    if not settings.AIRSTACK_API_KEY:
        logger.warning("AIRSTACK_API_KEY is not set; display names will not be resolved")
    return settings
