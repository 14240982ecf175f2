"""Command-line interface for running a single provider search."""

from __future__ import annotations

import asyncio
import logging
from pathlib import Path
from typing import Any, Sequence

import click

from .common.types import ResultId, ResultMeta
from .config import Settings
from .provider import ERROR_ID, LOADING_ID, SearchProvider
from .provider.host import open_external
from .provider.session import Opener


async def run_search(
    settings: Settings,
    query: Sequence[str],
    *,
    open_first: bool = False,
    fetch_posters: bool = True,
    opener: Opener = open_external,
) -> int:
    """Search TMDb for *query* through a provider session and print the rows."""

    loop = asyncio.get_running_loop()
    results: asyncio.Future[list[ResultId]] = loop.create_future()

    def on_results(ids: list[ResultId]) -> None:
        if ids == [LOADING_ID] or results.done():
            return
        results.set_result(ids)

    terms = [settings.trigger_prefix, *query]
    async with SearchProvider.from_settings(settings, opener=opener) as provider:
        provider.get_initial_result_set(terms, on_results)
        ids = await results
        if ids == [ERROR_ID]:
            click.echo("Search failed; see the log for details.", err=True)
            return 1
        ids = provider.filter_results(ids, settings.result_limit)
        if not ids:
            click.echo("No results.")
            return 0

        metas: list[ResultMeta] = []
        provider.get_result_metas(ids, metas.extend)
        for meta in metas:
            line = meta.name
            if fetch_posters:
                icon = await meta.create_icon()
                if icon is not None:
                    line = f"{line}\t{icon}"
            click.echo(line)

        if open_first:
            opened: asyncio.Future[str | None] = loop.create_future()

            def on_done(url: str | None) -> None:
                if not opened.done():
                    opened.set_result(url)

            provider.activate_result(ids[0], terms, None, on_done)
            if await opened is None:
                click.echo(f"No IMDb page found for {metas[0].name}.", err=True)
    return 0


@click.command()
@click.argument("query", nargs=-1, required=True)
@click.option(
    "--api-key",
    envvar="TMDB_API_KEY",
    show_envvar=True,
    required=True,
    help="TMDb API key",
)
@click.option(
    "--language",
    envvar="TMDB_LANGUAGE",
    show_envvar=True,
    default=None,
    help="Two-letter result language (defaults to LANG)",
)
@click.option(
    "--limit",
    envvar="RESULT_LIMIT",
    show_envvar=True,
    type=click.IntRange(min=1),
    default=10,
    show_default=True,
    help="Maximum number of results to print",
)
@click.option(
    "--debounce",
    type=click.FloatRange(min=0.0),
    default=0.0,
    show_default=True,
    help="Seconds to wait before querying TMDb",
)
@click.option(
    "--cache-dir",
    envvar="TMDB_CACHE_DIR",
    show_envvar=True,
    type=click.Path(file_okay=False, path_type=Path),
    default=None,
    help="Directory for cached poster images",
)
@click.option(
    "--posters/--no-posters",
    default=True,
    show_default=True,
    help="Download and print cached poster paths",
)
@click.option(
    "--open",
    "open_first",
    is_flag=True,
    default=False,
    help="Open the IMDb page of the first result",
)
@click.option(
    "--log-level",
    envvar="LOG_LEVEL",
    show_envvar=True,
    type=click.Choice(
        ["critical", "error", "warning", "info", "debug", "notset"],
        case_sensitive=False,
    ),
    default="warning",
    show_default=True,
    help="Logging level for console output",
)
def main(
    query: tuple[str, ...],
    api_key: str,
    language: str | None,
    limit: int,
    debounce: float,
    cache_dir: Path | None,
    posters: bool,
    open_first: bool,
    log_level: str,
) -> None:
    """Entry-point for the ``tmdb-search`` script."""

    logging.basicConfig(level=getattr(logging, log_level.upper(), logging.INFO))

    overrides: dict[str, Any] = {
        "tmdb_api_key": api_key,
        "result_limit": limit,
        "debounce_seconds": debounce,
    }
    if language:
        overrides["language"] = language
    if cache_dir is not None:
        overrides["cache_dir"] = cache_dir
    settings = Settings(**overrides)

    exit_code = asyncio.run(
        run_search(settings, query, open_first=open_first, fetch_posters=posters)
    )
    if exit_code:
        raise SystemExit(exit_code)


if __name__ == "__main__":
    main()
