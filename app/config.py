# app/config.py
import logging
from functools import lru_cache
from typing import List, Literal, Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict
from rich.logging import RichHandler

logger = logging.getLogger(__name__)


class Settings(BaseSettings):
    """Values loaded from ADMIN_PANEL_* environment variables and .env files."""

    model_config = SettingsConfigDict(
        env_prefix="ADMIN_PANEL_",
        env_file=".env",
        env_file_encoding="utf-8",
        env_ignore_empty=True,
        extra="ignore",
    )

    # "memory" serves the seeded in-memory catalog, "shopify" talks to a real shop
    backend: Literal["shopify", "memory"] = Field(default="memory")
    shop_domain: Optional[str] = Field(default=None)
    access_token: Optional[str] = Field(default=None)
    api_version: str = Field(default="2024-10")
    upstream_timeout: float = Field(default=10.0)

    log_level: str = Field(default="INFO")
    expose_error_details: bool = Field(default=True)
    cors_origins: List[str] = Field(default_factory=lambda: ["*"])


@lru_cache
def get_settings() -> Settings:
    return Settings()


def configure_logging(level: str = "INFO") -> None:
    logging.basicConfig(
        level=level.upper(),
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(rich_tracebacks=True, show_path=False)],
        force=True,
    )
    # httpx logs every request at INFO
    logging.getLogger("httpx").setLevel(logging.WARNING)
