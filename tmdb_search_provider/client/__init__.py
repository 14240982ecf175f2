"""HTTP client for TheMovieDB REST API."""

from __future__ import annotations

from .api import TMDBClient, build_poster_url

__all__ = ["TMDBClient", "build_poster_url"]
