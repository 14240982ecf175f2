"""Async TMDb client used by the search provider."""

from __future__ import annotations

import logging
from collections.abc import AsyncIterator, Mapping
from typing import Any

import httpx
from pydantic import ValidationError

from ..common.errors import RemoteError
from ..common.types import ResultId, TMDBMovie, TMDBMovieDetail, TMDBSearchPage
from ..config import DEFAULT_LANGUAGE, DEFAULT_USER_AGENT, Settings


LOGGER = logging.getLogger(__name__)


def build_poster_url(base_url: str, size: str, poster_path: str) -> str:
    """Join the image CDN base, size bucket and poster path without doubled slashes."""

    return f"{base_url.rstrip('/')}/{size.strip('/')}/{poster_path.lstrip('/')}"


def _mask_key(params: Mapping[str, Any]) -> dict[str, Any]:
    return {key: ("***" if key == "api_key" else value) for key, value in params.items()}


class TMDBClient:
    """Thin wrapper around :class:`httpx.AsyncClient` for the endpoints we need.

    Every public coroutine raises :class:`RemoteError` on transport errors,
    non-success statuses, and payloads that fail validation.
    """

    def __init__(
        self,
        *,
        api_key: str,
        base_url: str = "https://api.themoviedb.org/3",
        language: str = DEFAULT_LANGUAGE,
        include_adult: bool = False,
        timeout: float = 10.0,
        user_agent: str = DEFAULT_USER_AGENT,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        if not api_key:
            raise ValueError("TMDB_API_KEY must be provided")
        self._api_key = str(api_key)
        self._base_url = base_url.rstrip("/")
        self.language = language or DEFAULT_LANGUAGE
        self._include_adult = include_adult
        self._owns_client = client is None
        self._client = client or httpx.AsyncClient(
            timeout=timeout,
            headers={"User-Agent": user_agent},
            follow_redirects=True,
        )

    @classmethod
    def from_settings(
        cls, settings: Settings, *, client: httpx.AsyncClient | None = None
    ) -> "TMDBClient":
        if not settings.tmdb_api_key:
            raise RuntimeError("TMDB_API_KEY must be provided")
        return cls(
            api_key=settings.tmdb_api_key,
            base_url=settings.tmdb_base_url,
            language=settings.language,
            include_adult=settings.include_adult,
            timeout=settings.http_timeout,
            user_agent=settings.user_agent,
            client=client,
        )

    async def __aenter__(self) -> "TMDBClient":
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        """Close the underlying HTTP client if this instance created it."""

        if self._owns_client:
            await self._client.aclose()

    async def _get_json(self, path: str, params: Mapping[str, Any] | None = None) -> Any:
        url = f"{self._base_url}/{path.lstrip('/')}"
        query: dict[str, Any] = {"api_key": self._api_key, "language": self.language}
        if params:
            query.update(params)
        LOGGER.debug("GET %s params=%s", url, _mask_key(query))
        try:
            response = await self._client.get(url, params=query)
        except httpx.HTTPError as exc:
            raise RemoteError(f"HTTP error requesting {path}: {exc}") from exc
        if not response.is_success:
            raise RemoteError(
                f"TMDb returned status {response.status_code} for {path}",
                status_code=response.status_code,
            )
        try:
            return response.json()
        except ValueError as exc:
            raise RemoteError(f"Invalid JSON body for {path}") from exc

    async def search_movies(self, query: str) -> list[TMDBMovie]:
        """Return the first page of ``search/movie`` results for *query*."""

        data = await self._get_json(
            "search/movie",
            {"query": query, "include_adult": "true" if self._include_adult else "false"},
        )
        try:
            page = TMDBSearchPage.model_validate(data)
        except ValidationError as exc:
            raise RemoteError(f"Unexpected search payload for {query!r}") from exc
        LOGGER.debug(
            "Search %r returned %d result(s) of %d",
            query,
            len(page.results),
            page.total_results,
        )
        return list(page.results)

    async def fetch_detail(self, movie_id: ResultId) -> TMDBMovieDetail:
        """Fetch ``movie/{id}`` for the external IMDb reference."""

        data = await self._get_json(f"movie/{movie_id}")
        try:
            return TMDBMovieDetail.model_validate(data)
        except ValidationError as exc:
            raise RemoteError(f"Unexpected detail payload for movie {movie_id}") from exc

    async def stream_bytes(self, url: str) -> AsyncIterator[bytes]:
        """Yield the body of *url* chunk by chunk as it arrives."""

        LOGGER.debug("Streaming %s", url)
        if self._client.is_closed:
            raise RemoteError(f"HTTP client is closed; cannot stream {url}")
        try:
            async with self._client.stream("GET", url) as response:
                if not response.is_success:
                    raise RemoteError(
                        f"Image request returned status {response.status_code}",
                        status_code=response.status_code,
                    )
                async for chunk in response.aiter_bytes():
                    yield chunk
        except httpx.HTTPError as exc:
            raise RemoteError(f"HTTP error streaming {url}: {exc}") from exc


__all__ = ["TMDBClient", "build_poster_url"]
