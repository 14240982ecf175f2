"""Type definitions for TMDb payloads and provider descriptors."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Awaitable, Callable, List, Optional, TypeAlias

from pydantic import BaseModel, ConfigDict, Field, field_validator


ResultId: TypeAlias = int | str
IconLoader: TypeAlias = Callable[[], Awaitable[Optional[Path]]]


class TMDBMovie(BaseModel):
    """Movie record as returned by ``search/movie``."""

    model_config = ConfigDict(frozen=True)

    id: ResultId
    title: str
    overview: str = ""
    release_date: str = ""
    poster_path: str = ""

    @field_validator("overview", "release_date", "poster_path", mode="before")
    @classmethod
    def _none_to_empty(cls, value: object) -> object:
        """TMDb sends ``null`` for missing text fields."""

        return "" if value is None else value


class TMDBMovieDetail(BaseModel):
    """Subset of ``movie/{id}`` needed to open an external reference."""

    id: ResultId
    imdb_id: Optional[str] = None

    @field_validator("imdb_id", mode="before")
    @classmethod
    def _blank_to_none(cls, value: object) -> object:
        if isinstance(value, str) and not value.strip():
            return None
        return value


class TMDBSearchPage(BaseModel):
    page: int = 1
    results: List[TMDBMovie] = Field(default_factory=list)
    total_results: int = 0
    total_pages: int = 0


async def _no_icon() -> Optional[Path]:
    return None


@dataclass(frozen=True, slots=True)
class ResultMeta:
    """Display descriptor handed to the host for a single result row."""

    id: ResultId
    name: str
    description: str
    icon_loader: IconLoader = field(default=_no_icon, repr=False, compare=False)

    async def create_icon(self) -> Optional[Path]:
        """Return the local poster path for this row, fetching it if needed."""

        return await self.icon_loader()


@dataclass(frozen=True, slots=True)
class ProviderInfo:
    """Name and icon the host shows for this provider."""

    name: str
    icon_name: str


__all__ = [
    "ResultId",
    "IconLoader",
    "TMDBMovie",
    "TMDBMovieDetail",
    "TMDBSearchPage",
    "ResultMeta",
    "ProviderInfo",
]
