"""On-disk poster cache keyed by the TMDb image path."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import AsyncIterator, Callable
from pathlib import Path, PurePosixPath
from typing import TypeAlias

from ..client.api import build_poster_url


LOGGER = logging.getLogger(__name__)

ByteFetcher: TypeAlias = Callable[[str], AsyncIterator[bytes]]
ReadyCallback: TypeAlias = Callable[[Path], object]


class ImageCache:
    """Fetch-once store for poster images.

    A file at :meth:`path_for` *is* the cache entry; nothing is kept in memory
    apart from downloads currently in flight, which concurrent callers for the
    same key share.
    """

    def __init__(
        self,
        root: Path,
        *,
        base_url: str = "https://image.tmdb.org/t/p",
        size: str = "w185",
        fetch_bytes: ByteFetcher | None = None,
    ) -> None:
        self.root = Path(root)
        self._base_url = base_url
        self._size = size
        self._fetch_bytes = fetch_bytes
        self._inflight: dict[str, asyncio.Task[Path]] = {}

    def path_for(self, relative_path: str) -> Path:
        """Return the local file for *relative_path* (its final path segment)."""

        name = PurePosixPath(relative_path.strip()).name
        if not name or name in {".", ".."}:
            raise ValueError(f"invalid image path: {relative_path!r}")
        return self.root / name

    def url_for(self, relative_path: str) -> str:
        return build_poster_url(self._base_url, self._size, relative_path)

    @property
    def inflight(self) -> int:
        """Number of downloads currently running."""

        return sum(1 for task in self._inflight.values() if not task.done())

    async def fetch_if_absent(
        self,
        relative_path: str,
        fetch_bytes: ByteFetcher | None = None,
        on_ready: ReadyCallback | None = None,
    ) -> Path:
        """Ensure the image for *relative_path* is on disk and return its path.

        *on_ready* is invoked with the path once the file exists, immediately on
        a cache hit. Errors from the fetcher or the filesystem propagate to
        every caller waiting on the download and leave no file behind.
        """

        path = self.path_for(relative_path)
        if path.exists():
            LOGGER.debug("Image cache hit for %s", path.name)
            if on_ready is not None:
                on_ready(path)
            return path

        key = path.name
        task = self._inflight.get(key)
        if task is None or task.done():
            fetcher = fetch_bytes or self._fetch_bytes
            if fetcher is None:
                raise ValueError("no byte fetcher configured for image cache")
            task = asyncio.ensure_future(
                self._download(fetcher, self.url_for(relative_path), path)
            )
            self._inflight[key] = task
            task.add_done_callback(lambda done, key=key: self._forget(key, done))
        else:
            LOGGER.debug("Joining in-flight download for %s", key)

        result = await asyncio.shield(task)
        if on_ready is not None:
            on_ready(result)
        return result

    async def aclose(self) -> None:
        """Cancel downloads still in flight; their partial files are removed."""

        tasks = [task for task in self._inflight.values() if not task.done()]
        for task in tasks:
            task.cancel()
        if tasks:
            LOGGER.debug("Cancelling %d in-flight image download(s)", len(tasks))
            await asyncio.gather(*tasks, return_exceptions=True)

    def _forget(self, key: str, task: asyncio.Task[Path]) -> None:
        if self._inflight.get(key) is task:
            del self._inflight[key]
        if not task.cancelled():
            # Mark the error retrieved; waiters receive it through shield().
            task.exception()

    async def _download(self, fetcher: ByteFetcher, url: str, path: Path) -> Path:
        path.parent.mkdir(parents=True, exist_ok=True)
        partial = path.with_name(path.name + ".part")
        written = 0
        try:
            with partial.open("wb", buffering=0) as handle:
                async for chunk in fetcher(url):
                    handle.write(chunk)
                    written += len(chunk)
            partial.replace(path)
        except BaseException:
            partial.unlink(missing_ok=True)
            raise
        LOGGER.debug("Cached %d byte(s) from %s at %s", written, url, path)
        return path


__all__ = ["ImageCache", "ByteFetcher", "ReadyCallback"]
