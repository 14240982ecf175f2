"""Generation tokens for discarding superseded responses."""

from __future__ import annotations


class GenerationGuard:
    """Monotonic token counter where only the newest token is current."""

    def __init__(self) -> None:
        self._current = 0
        self._invalidated = False

    @property
    def current(self) -> int:
        return self._current

    @property
    def invalidated(self) -> bool:
        return self._invalidated

    def mint_token(self) -> int:
        """Return a token greater than every token minted before."""

        if self._invalidated:
            raise RuntimeError("guard has been invalidated")
        self._current += 1
        return self._current

    def is_current(self, token: int) -> bool:
        return not self._invalidated and token == self._current

    def invalidate(self) -> None:
        """Make every outstanding and future check fail."""

        self._invalidated = True


__all__ = ["GenerationGuard"]
