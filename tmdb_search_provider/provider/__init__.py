"""Search session coordination: debouncing, stale-response guarding, caches."""

from __future__ import annotations

from .debounce import RequestDebouncer
from .entity_cache import EntityCache
from .guard import GenerationGuard
from .host import PROVIDER_INFO, SearchProvider, open_external
from .image_cache import ImageCache
from .session import (
    ERROR_ID,
    LOADING_ID,
    SENTINEL_METAS,
    SearchBackend,
    SearchSessionController,
    is_sentinel,
)

__all__ = [
    "RequestDebouncer",
    "EntityCache",
    "GenerationGuard",
    "ImageCache",
    "SearchProvider",
    "SearchSessionController",
    "SearchBackend",
    "PROVIDER_INFO",
    "open_external",
    "ERROR_ID",
    "LOADING_ID",
    "SENTINEL_METAS",
    "is_sentinel",
]
