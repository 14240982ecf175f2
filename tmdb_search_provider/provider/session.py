"""Search session controller.

Coordinates one provider instance's asynchronous work: debounced TMDb
searches whose responses are accepted only while their generation token is
current, an entity cache that backs result descriptors, detail lookups for
activation, and poster downloads through :class:`ImageCache`.

Every entry point is a plain method called from the event loop; network work
runs in tasks owned by the controller so :meth:`SearchSessionController.aclose`
can cancel whatever is still outstanding.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable, Callable, Sequence
from pathlib import Path
from typing import Any, Optional, Protocol

from ..common.errors import CacheMissError, RemoteError
from ..common.text import build_query, display_name, is_triggered
from ..common.types import IconLoader, ResultId, ResultMeta, TMDBMovie, TMDBMovieDetail
from ..common.validation import require_positive
from .debounce import RequestDebouncer
from .entity_cache import EntityCache
from .guard import GenerationGuard
from .image_cache import ImageCache


LOADING_ID = "__loading__"
ERROR_ID = "__error__"
PROVIDER_LABEL = "TheMovieDB"

SENTINEL_METAS: dict[str, ResultMeta] = {
    LOADING_ID: ResultMeta(
        id=LOADING_ID,
        name=PROVIDER_LABEL,
        description="Loading items from TheMovieDB, please wait...",
    ),
    ERROR_ID: ResultMeta(
        id=ERROR_ID,
        name=PROVIDER_LABEL,
        description="Oops, an error occurred while searching.",
    ),
}

ResultsCallback = Callable[[list[ResultId]], object]
DoneCallback = Callable[[Optional[str]], object]
Opener = Callable[[str], object]


class SearchBackend(Protocol):
    """Remote calls the controller depends on (see :class:`TMDBClient`)."""

    async def search_movies(self, query: str) -> list[TMDBMovie]: ...

    async def fetch_detail(self, movie_id: ResultId) -> TMDBMovieDetail: ...


def is_sentinel(result_id: object) -> bool:
    return isinstance(result_id, str) and result_id in SENTINEL_METAS


class SearchSessionController:
    """Own the search lifecycle for a single provider instance."""

    def __init__(
        self,
        *,
        backend: SearchBackend,
        image_cache: ImageCache,
        opener: Opener,
        trigger_prefix: str = "mv",
        debounce_seconds: float = 1.0,
        result_limit: int = 10,
        imdb_url: str = "https://www.imdb.com/title/",
        logger: logging.Logger | None = None,
    ) -> None:
        if not trigger_prefix:
            raise ValueError("trigger_prefix must not be empty")
        self._backend = backend
        self._image_cache = image_cache
        self._opener = opener
        self._trigger_prefix = trigger_prefix
        self._result_limit = require_positive(int(result_limit), name="result_limit")
        self._imdb_url = imdb_url
        self._debouncer = RequestDebouncer(debounce_seconds)
        self._guard = GenerationGuard()
        self._entities = EntityCache()
        self._tasks: set[asyncio.Task[Any]] = set()
        self._disposed = False
        self._logger = logger or logging.getLogger(
            "tmdb_search_provider.provider.session"
        )

    @property
    def logger(self) -> logging.Logger:
        return self._logger

    @property
    def entities(self) -> EntityCache:
        return self._entities

    @property
    def result_limit(self) -> int:
        return self._result_limit

    @property
    def disposed(self) -> bool:
        return self._disposed

    @property
    def search_pending(self) -> bool:
        """Whether a debounced search is armed and has not fired yet."""

        return self._debouncer.pending

    def search(self, terms: Sequence[str], on_results: ResultsCallback) -> None:
        """Start (or restart) a debounced search for *terms*.

        *on_results* first receives ``[LOADING_ID]`` and later either the ids
        of the matching movies, ``[]`` for no matches, or ``[ERROR_ID]``.
        Terms without the trigger prefix yield ``[]`` immediately and still
        supersede any earlier search.
        """

        self._ensure_open()
        terms = list(terms)
        self._debouncer.cancel_pending()
        token = self._guard.mint_token()
        if not is_triggered(terms, self._trigger_prefix):
            on_results([])
            return

        on_results([LOADING_ID])
        query = build_query(terms)
        self._logger.debug("Scheduling search %d for %r.", token, query)
        self._debouncer.schedule(
            lambda: self._spawn(self._run_search(token, query, on_results))
        )

    async def _run_search(
        self, token: int, query: str, on_results: ResultsCallback
    ) -> None:
        self._logger.info("Searching TMDb for %r (generation %d).", query, token)
        try:
            movies = await self._backend.search_movies(query)
        except Exception as exc:
            if not self._guard.is_current(token):
                self._logger.debug("Dropping failure of stale search %d.", token)
                return
            if isinstance(exc, RemoteError):
                self._logger.warning("TMDb search for %r failed: %s", query, exc)
            else:
                self._logger.exception("Unexpected error searching TMDb for %r.", query)
            on_results([ERROR_ID])
            return

        if not self._guard.is_current(token):
            self._logger.debug(
                "Discarding %d result(s) of stale search %d (current=%d).",
                len(movies),
                token,
                self._guard.current,
            )
            return

        ids: list[ResultId] = []
        for movie in movies:
            self._entities.put(movie)
            ids.append(movie.id)
        self._logger.info("Search %d returned %d result(s).", token, len(ids))
        on_results(ids)

    def resolve_result_meta(self, result_id: ResultId) -> ResultMeta:
        """Return the display descriptor for *result_id*.

        Raises :class:`CacheMissError` for ids that no search has surfaced.
        """

        if is_sentinel(result_id):
            return SENTINEL_METAS[result_id]  # type: ignore[index]
        movie = self._entities.get(result_id)
        if movie is None:
            raise CacheMissError(result_id)
        return ResultMeta(
            id=movie.id,
            name=display_name(movie.title, movie.release_date),
            description=movie.overview,
            icon_loader=self._icon_loader(movie.poster_path),
        )

    def _icon_loader(self, poster_path: str) -> IconLoader:
        async def load() -> Optional[Path]:
            if not poster_path or self._disposed:
                return None
            try:
                return await self._image_cache.fetch_if_absent(poster_path)
            except (RemoteError, OSError) as exc:
                self._logger.warning(
                    "Could not cache poster %s: %s", poster_path, exc
                )
                return None

        return load

    def activate(self, result_id: ResultId, on_done: DoneCallback | None = None) -> None:
        """Look up the IMDb id for *result_id* and open it externally."""

        self._ensure_open()
        if is_sentinel(result_id):
            return
        movie = self._entities.get(result_id)
        if movie is None:
            raise CacheMissError(result_id)
        self._spawn(self._run_activation(movie.id, on_done))

    async def _run_activation(
        self, movie_id: ResultId, on_done: DoneCallback | None
    ) -> None:
        try:
            detail = await self._backend.fetch_detail(movie_id)
        except Exception as exc:
            if self._disposed:
                return
            self._logger.warning(
                "Detail lookup for movie %s failed: %s",
                movie_id,
                exc,
                exc_info=not isinstance(exc, RemoteError),
            )
            if on_done is not None:
                on_done(None)
            return

        if self._disposed:
            self._logger.debug(
                "Dropping detail for movie %s after disposal.", movie_id
            )
            return

        url: Optional[str] = None
        if detail.imdb_id:
            url = f"{self._imdb_url}{detail.imdb_id}/"
            self._logger.info("Opening %s for movie %s.", url, movie_id)
            self._opener(url)
        else:
            self._logger.info("Movie %s has no IMDb reference.", movie_id)
        if on_done is not None:
            on_done(url)

    def filter_results(
        self, ids: Sequence[ResultId], max_results: int | None = None
    ) -> list[ResultId]:
        """Trim *ids* to the configured result limit.

        The host-supplied *max_results* is ignored in favour of the configured
        limit.
        """

        if max_results is not None and max_results != self._result_limit:
            self._logger.debug(
                "Ignoring requested max of %s; using result limit %d.",
                max_results,
                self._result_limit,
            )
        return list(ids[: self._result_limit])

    def dispose(self) -> None:
        """Cancel pending work and make every in-flight response stale."""

        if self._disposed:
            return
        self._disposed = True
        self._debouncer.close()
        self._guard.invalidate()
        self._entities.clear()
        self._logger.debug(
            "Search session disposed with %d task(s) outstanding.", len(self._tasks)
        )

    async def aclose(self) -> None:
        """Dispose and cancel outstanding background tasks and downloads."""

        self.dispose()
        tasks = list(self._tasks)
        for task in tasks:
            task.cancel()
        if tasks:
            await asyncio.gather(*tasks, return_exceptions=True)
        await self._image_cache.aclose()

    def _ensure_open(self) -> None:
        if self._disposed:
            raise RuntimeError("search session has been disposed")

    def _spawn(self, coro: Awaitable[None]) -> asyncio.Task[None]:
        task = asyncio.ensure_future(coro)
        self._tasks.add(task)
        task.add_done_callback(self._task_done)
        return task

    def _task_done(self, task: asyncio.Task[Any]) -> None:
        self._tasks.discard(task)
        if task.cancelled():
            return
        exc = task.exception()
        if exc is not None:
            self._logger.error(
                "Background search task failed.", exc_info=exc
            )


__all__ = [
    "SearchSessionController",
    "SearchBackend",
    "LOADING_ID",
    "ERROR_ID",
    "SENTINEL_METAS",
    "is_sentinel",
]
