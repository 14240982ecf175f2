"""Allow ``python -m tmdb_search_provider`` to run the search CLI."""

from .cli import main


if __name__ == "__main__":  # pragma: no cover - exercised via CLI
    main()
