"""Text helpers for search terms and result labels."""

from __future__ import annotations

from typing import Sequence

__all__ = ["is_triggered", "build_query", "release_year", "display_name"]


def is_triggered(terms: Sequence[str], prefix: str) -> bool:
    """Return ``True`` when *terms* address this provider and carry a query.

    The first token must start with *prefix* (``mv``, ``mv-en`` ...) and at
    least one more token must follow it.
    """

    return len(terms) >= 2 and terms[0][: len(prefix)] == prefix


def build_query(terms: Sequence[str]) -> str:
    """Join every token after the trigger with single spaces."""

    return " ".join(terms[1:])


def release_year(release_date: str | None) -> str:
    """Return the year component of a ``YYYY-MM-DD`` date, or ``""``."""

    if not release_date:
        return ""
    return release_date.split("-", 1)[0].strip()


def display_name(title: str, release_date: str | None) -> str:
    """Format ``"Title (YYYY)"``, dropping the parenthesis when the year is unknown."""

    year = release_year(release_date)
    if not year:
        return title
    return f"{title} ({year})"
