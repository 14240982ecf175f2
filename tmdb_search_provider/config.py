from __future__ import annotations

import re
from pathlib import Path

from pydantic import AliasChoices, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from .common.validation import require_positive

DEFAULT_LANGUAGE = "en"
DEFAULT_USER_AGENT = "tmdb-search-provider (+https://www.themoviedb.org/)"

_LANGUAGE_RE = re.compile(r"^([a-zA-Z]{2})(?:[_.@-]|$)")


def _default_cache_dir() -> Path:
    return Path.home() / ".cache" / "tmdb-search-provider"


class Settings(BaseSettings):
    """Application configuration settings."""

    tmdb_api_key: str | None = Field(default=None, validation_alias="TMDB_API_KEY")
    tmdb_base_url: str = Field(
        default="https://api.themoviedb.org/3", validation_alias="TMDB_BASE_URL"
    )
    tmdb_image_base_url: str = Field(
        default="https://image.tmdb.org/t/p", validation_alias="TMDB_IMAGE_BASE_URL"
    )
    poster_size: str = Field(default="w185", validation_alias="TMDB_POSTER_SIZE")
    language: str = Field(
        default=DEFAULT_LANGUAGE,
        validation_alias=AliasChoices("TMDB_LANGUAGE", "LANG"),
    )
    include_adult: bool = Field(default=False, validation_alias="TMDB_INCLUDE_ADULT")
    result_limit: int = Field(default=10, validation_alias="RESULT_LIMIT")
    debounce_seconds: float = Field(default=1.0, validation_alias="DEBOUNCE_SECONDS")
    http_timeout: float = Field(default=10.0, validation_alias="HTTP_TIMEOUT")
    user_agent: str = Field(
        default=DEFAULT_USER_AGENT, validation_alias="TMDB_USER_AGENT"
    )
    trigger_prefix: str = Field(default="mv", validation_alias="TRIGGER_PREFIX")
    cache_dir: Path = Field(
        default_factory=_default_cache_dir, validation_alias="TMDB_CACHE_DIR"
    )
    imdb_url: str = Field(
        default="https://www.imdb.com/title/", validation_alias="IMDB_URL"
    )
    provider_url: str = Field(
        default="https://www.themoviedb.org/", validation_alias="PROVIDER_URL"
    )

    @field_validator("language", mode="before")
    @classmethod
    def _parse_language(cls, value: object) -> str:
        # Accepts bare codes ("de") as well as locales ("de_DE.UTF-8").
        if value in (None, ""):
            return DEFAULT_LANGUAGE
        match = _LANGUAGE_RE.match(str(value).strip())
        if match is None:
            return DEFAULT_LANGUAGE
        return match.group(1).lower()

    @field_validator("result_limit")
    @classmethod
    def _check_limit(cls, value: int) -> int:
        return require_positive(value, name="result_limit")

    @field_validator("debounce_seconds", "http_timeout")
    @classmethod
    def _check_non_negative(cls, value: float) -> float:
        if value < 0:
            raise ValueError("delays and timeouts must be non-negative")
        return value

    @field_validator("trigger_prefix")
    @classmethod
    def _check_prefix(cls, value: str) -> str:
        if len(value) != 2 or value.isspace():
            raise ValueError("TRIGGER_PREFIX must be exactly two characters")
        return value

    @field_validator("cache_dir", mode="after")
    @classmethod
    def _expand_cache_dir(cls, value: Path) -> Path:
        return value.expanduser()

    model_config = SettingsConfigDict(case_sensitive=False, populate_by_name=True)
