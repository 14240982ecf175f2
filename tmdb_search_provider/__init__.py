"""tmdb-search-provider package."""

from __future__ import annotations

from .provider import SearchProvider, SearchSessionController

__all__ = ["SearchProvider", "SearchSessionController"]
