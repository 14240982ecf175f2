"""Host-facing search provider built from :class:`Settings`."""

from __future__ import annotations

import logging
import webbrowser
from collections.abc import Callable, Sequence

import httpx

from ..client.api import TMDBClient
from ..common.types import ProviderInfo, ResultId, ResultMeta
from ..config import Settings
from .image_cache import ImageCache
from .session import DoneCallback, Opener, ResultsCallback, SearchSessionController


LOGGER = logging.getLogger(__name__)

PROVIDER_INFO = ProviderInfo(name="TheMovieDB Search Provider", icon_name="video-x-generic")


def open_external(url: str) -> bool:
    """Open *url* with the desktop's default handler."""

    LOGGER.debug("Launching %s", url)
    return webbrowser.open(url)


class SearchProvider:
    """Search provider lifecycle as seen by the host shell.

    The host constructs one instance when the provider is enabled and closes it
    when disabled; every call is forwarded to the owned
    :class:`SearchSessionController`.
    """

    def __init__(
        self,
        controller: SearchSessionController,
        *,
        provider_url: str = "https://www.themoviedb.org/",
        opener: Opener = open_external,
        client: TMDBClient | None = None,
        info: ProviderInfo = PROVIDER_INFO,
    ) -> None:
        self._controller = controller
        self._provider_url = provider_url
        self._opener = opener
        self._client = client
        self.info = info

    @classmethod
    def from_settings(
        cls,
        settings: Settings | None = None,
        *,
        opener: Opener = open_external,
        http_client: httpx.AsyncClient | None = None,
    ) -> "SearchProvider":
        settings = settings or Settings()
        client = TMDBClient.from_settings(settings, client=http_client)
        image_cache = ImageCache(
            settings.cache_dir,
            base_url=settings.tmdb_image_base_url,
            size=settings.poster_size,
            fetch_bytes=client.stream_bytes,
        )
        controller = SearchSessionController(
            backend=client,
            image_cache=image_cache,
            opener=opener,
            trigger_prefix=settings.trigger_prefix,
            debounce_seconds=settings.debounce_seconds,
            result_limit=settings.result_limit,
            imdb_url=settings.imdb_url,
        )
        LOGGER.info(
            "TMDb search provider ready (language=%s, cache=%s).",
            settings.language,
            settings.cache_dir,
        )
        return cls(
            controller,
            provider_url=settings.provider_url,
            opener=opener,
            client=client,
        )

    @property
    def controller(self) -> SearchSessionController:
        return self._controller

    async def __aenter__(self) -> "SearchProvider":
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()

    def get_initial_result_set(
        self, terms: Sequence[str], on_results: ResultsCallback
    ) -> None:
        self._controller.search(terms, on_results)

    def get_subset_result_search(
        self,
        previous_results: Sequence[ResultId],
        terms: Sequence[str],
        on_results: ResultsCallback,
    ) -> None:
        # Refinements re-query TMDb rather than filtering previous_results.
        self._controller.search(terms, on_results)

    def get_result_metas(
        self,
        ids: Sequence[ResultId],
        on_metas: Callable[[list[ResultMeta]], object],
    ) -> None:
        on_metas([self._controller.resolve_result_meta(result_id) for result_id in ids])

    def activate_result(
        self,
        result_id: ResultId,
        terms: Sequence[str] | None = None,
        timestamp: int | None = None,
        on_done: DoneCallback | None = None,
    ) -> None:
        self._controller.activate(result_id, on_done)

    def filter_results(
        self, ids: Sequence[ResultId], max_results: int | None = None
    ) -> list[ResultId]:
        return self._controller.filter_results(ids, max_results)

    def launch_search(self) -> None:
        """Open TheMovieDB home page."""

        self._opener(self._provider_url)

    async def aclose(self) -> None:
        await self._controller.aclose()
        if self._client is not None:
            await self._client.aclose()


__all__ = ["SearchProvider", "PROVIDER_INFO", "open_external"]
