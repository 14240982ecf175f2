"""Exception hierarchy shared by the client and provider packages."""

from __future__ import annotations


class TMDBSearchError(Exception):
    """Base class for errors raised by the search provider."""


class RemoteError(TMDBSearchError):
    """A TMDb request failed in transport, returned an error status, or was unparsable."""

    def __init__(self, message: str, *, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class CacheMissError(TMDBSearchError, KeyError):
    """A result id was requested that no search has surfaced."""

    def __init__(self, result_id: object) -> None:
        super().__init__(result_id)
        self.result_id = result_id

    def __str__(self) -> str:
        return f"result {self.result_id!r} is not in the entity cache"


__all__ = ["TMDBSearchError", "RemoteError", "CacheMissError"]
