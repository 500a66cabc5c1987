"""Application configuration helpers.

Two sources feed a run:

- environment settings (credentials, store URL, browser mode), loaded with
  pydantic-settings from ``NAUKRI_*`` variables or a local ``.env`` file;
- the scrape configuration file (``config.json``), which lists keywords,
  skills, the experience filter and scraping options.
"""

from __future__ import annotations

import json
import logging
import math
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Literal, Optional

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    ValidationError,
    ValidationInfo,
    ValidatorFunctionWrapHandler,
    field_validator,
)
from pydantic_settings import BaseSettings, SettingsConfigDict

from .errors import ConfigError

logger = logging.getLogger(__name__)

DEFAULT_PAGES_PER_KEYWORD = 3
DEFAULT_DELAY_BETWEEN_KEYWORDS_MS = 5000

LogLevel = Literal["CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG"]


@dataclass(frozen=True)
class Credentials:
    """Naukri account credentials."""

    email: str
    password: str


class Settings(BaseSettings):
    """Typed configuration loaded from environment variables."""

    email: Optional[str] = None
    password: Optional[str] = None
    database_url: Optional[str] = None
    config_path: Path = Path("config.json")
    headless: bool = True
    log_level: LogLevel = "INFO"

    model_config = SettingsConfigDict(env_prefix="NAUKRI_", env_file=".env", env_file_encoding="utf-8", extra="ignore")

    @field_validator("log_level", mode="before")
    @classmethod
    def _upper_level(cls, value: Any) -> Any:
        return value.strip().upper() if isinstance(value, str) else value

    def credentials(self) -> Optional[Credentials]:
        """Return credentials, or None when either half is missing."""
        if not self.email or not self.password:
            return None
        return Credentials(email=self.email, password=self.password)

    def require_database_url(self) -> str:
        if not self.database_url:
            raise ConfigError(
                "NAUKRI_DATABASE_URL is not defined. Set it in the environment or a .env file "
                "(e.g. NAUKRI_DATABASE_URL=sqlite:///jobs.db)."
            )
        return self.database_url


def get_settings() -> Settings:
    """Return a fresh settings instance.

    Raises:
        ConfigError: If an environment value does not validate.
    """
    try:
        return Settings()
    except ValidationError as e:
        raise ConfigError(f"Invalid NAUKRI_* environment settings: {e}") from e


class LenientModel(BaseModel):
    """Model whose invalid field values fall back to that field's default.

    One bad value in ``config.json`` is logged and replaced; the rest of the
    file is still used.
    """

    @field_validator("*", mode="wrap")
    @classmethod
    def _default_invalid(cls, value: Any, handler: ValidatorFunctionWrapHandler, info: ValidationInfo) -> Any:
        try:
            return handler(value)
        except ValidationError as e:
            default = cls.model_fields[info.field_name].get_default(call_default_factory=True)
            logger.warning(
                "Invalid config value for %s (%r), using %r: %s",
                info.field_name,
                value,
                default,
                e.errors()[0]["msg"],
            )
            return default


class ExperienceRange(LenientModel):
    """Experience bounds, in years, applied to the search itself.

    Fractional bounds widen to whole years (floor for ``min``, ceiling for
    ``max``).
    """

    min: Optional[int] = None
    max: Optional[int] = None

    @field_validator("min", "max", mode="before")
    @classmethod
    def _whole_years(cls, value: Any, info: ValidationInfo) -> Any:
        if isinstance(value, float) and math.isfinite(value):
            return math.floor(value) if info.field_name == "min" else math.ceil(value)
        return value

    def label(self) -> str:
        low = self.min if self.min else 0
        high = self.max if self.max else "any"
        return f"{low}-{high} years"


class ScrapingOptions(LenientModel):
    """Per-run scraping options."""

    model_config = ConfigDict(populate_by_name=True)

    pages_per_keyword: int = Field(default=DEFAULT_PAGES_PER_KEYWORD, alias="pagesPerKeyword", ge=1)
    delay_between_keywords: int = Field(
        default=DEFAULT_DELAY_BETWEEN_KEYWORDS_MS, alias="delayBetweenKeywords", ge=0
    )
    scrape_job_details: bool = Field(default=True, alias="scrapeJobDetails")


class SelectorOverrides(LenientModel):
    """Replacement selector chains, keyed by field name."""

    listing: dict[str, list[str]] = Field(default_factory=dict)
    detail: dict[str, list[str]] = Field(default_factory=dict)


class ScrapeConfig(LenientModel):
    """Contents of ``config.json``."""

    keywords: list[str] = Field(default_factory=list)
    skills: list[str] = Field(default_factory=list)
    experience: Optional[ExperienceRange] = None
    scraping: ScrapingOptions = Field(default_factory=ScrapingOptions)
    selectors: SelectorOverrides = Field(default_factory=SelectorOverrides)


def load_scrape_config(path: Path) -> ScrapeConfig:
    """Load the scrape configuration file.

    A missing file means "use defaults". A file that cannot be read or is not
    a JSON object is logged and also falls back to defaults. Within a valid
    file, each invalid value falls back to its own default.
    """
    if not path.exists():
        logger.info("No config file at %s, using defaults", path)
        return ScrapeConfig()
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
        return ScrapeConfig.model_validate(data)
    except (OSError, ValueError) as e:
        logger.error("Error loading %s: %s", path, e)
        return ScrapeConfig()
