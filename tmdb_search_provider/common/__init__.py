"""Shared utilities for the client and provider packages."""

from __future__ import annotations

from .errors import CacheMissError, RemoteError, TMDBSearchError
from .types import ProviderInfo, ResultMeta, TMDBMovie, TMDBMovieDetail
from .validation import require_non_negative, require_positive

__all__ = [
    "CacheMissError",
    "RemoteError",
    "TMDBSearchError",
    "ProviderInfo",
    "ResultMeta",
    "TMDBMovie",
    "TMDBMovieDetail",
    "require_non_negative",
    "require_positive",
]
