import asyncio
from pathlib import Path

import pytest

from tmdb_search_provider.common.types import ResultMeta
from tmdb_search_provider.config import Settings
from tmdb_search_provider.provider import (
    ERROR_ID,
    LOADING_ID,
    PROVIDER_INFO,
    SearchProvider,
)


def make_settings(tmp_path: Path, **overrides) -> Settings:
    values = {
        "tmdb_api_key": "key",
        "debounce_seconds": 0.01,
        "cache_dir": tmp_path / "cache",
        "result_limit": 1,
    }
    values.update(overrides)
    return Settings(**values)


@pytest.fixture
def opened() -> list[str]:
    return []


@pytest.fixture
def make_provider(tmp_path, opened, tmdb_http_client):
    def factory(**overrides) -> SearchProvider:
        return SearchProvider.from_settings(
            make_settings(tmp_path, **overrides),
            opener=opened.append,
            http_client=tmdb_http_client(),
        )

    return factory


def test_provider_end_to_end(tmp_path: Path, opened, make_provider):
    async def scenario():
        async with make_provider() as provider:
            emitted: list[list] = []
            provider.get_initial_result_set(["mv", "the", "matrix"], emitted.append)
            await asyncio.sleep(0.05)

            metas: list[ResultMeta] = []
            provider.get_result_metas(emitted[-1], metas.extend)
            icon = await metas[0].create_icon()

            done: list = []
            provider.activate_result(603, ["mv", "the", "matrix"], 0, done.append)
            await asyncio.sleep(0.05)
            provider.launch_search()
            filtered = provider.filter_results(emitted[-1], 5)
            return emitted, metas, icon, done, filtered

    emitted, metas, icon, done, filtered = asyncio.run(scenario())
    assert emitted == [[LOADING_ID], [603, 604]]
    assert [meta.name for meta in metas] == [
        "The Matrix (1999)",
        "The Matrix Reloaded (2003)",
    ]
    assert icon == tmp_path / "cache" / "matrix.jpg"
    assert icon.read_bytes() == b"\x89PNG-matrix"
    assert done == ["https://www.imdb.com/title/tt0133093/"]
    assert opened == [
        "https://www.imdb.com/title/tt0133093/",
        "https://www.themoviedb.org/",
    ]
    assert filtered == [603]


def test_subset_search_requeries(make_provider):
    async def scenario() -> list[list]:
        async with make_provider() as provider:
            emitted: list[list] = []
            provider.get_subset_result_search([1, 2], ["mv", "fail"], emitted.append)
            await asyncio.sleep(0.05)
            return emitted

    assert asyncio.run(scenario()) == [[LOADING_ID], [ERROR_ID]]


def test_get_result_metas_with_sentinels(make_provider):
    async def scenario() -> list[ResultMeta]:
        async with make_provider() as provider:
            metas: list[ResultMeta] = []
            provider.get_result_metas([LOADING_ID, ERROR_ID], metas.extend)
            return metas

    metas = asyncio.run(scenario())
    assert [meta.id for meta in metas] == [LOADING_ID, ERROR_ID]
    assert metas[0].description.startswith("Loading items from TheMovieDB")


def test_provider_info(make_provider):
    assert PROVIDER_INFO.name == "TheMovieDB Search Provider"
    assert make_provider().info is PROVIDER_INFO


def test_from_settings_requires_api_key(tmp_path: Path):
    with pytest.raises(RuntimeError, match="TMDB_API_KEY must be provided"):
        SearchProvider.from_settings(make_settings(tmp_path, tmdb_api_key=None))


def test_aclose_disposes_controller(make_provider):
    async def scenario() -> SearchProvider:
        provider = make_provider()
        await provider.aclose()
        return provider

    provider = asyncio.run(scenario())
    assert provider.controller.disposed


def test_icon_after_aclose_is_none(tmp_path: Path, make_provider):
    async def scenario():
        provider = make_provider()
        emitted: list[list] = []
        provider.get_initial_result_set(["mv", "the", "matrix"], emitted.append)
        await asyncio.sleep(0.05)
        metas: list[ResultMeta] = []
        provider.get_result_metas([603], metas.extend)
        await provider.aclose()
        return await metas[0].create_icon()

    assert asyncio.run(scenario()) is None
    assert not (tmp_path / "cache" / "matrix.jpg").exists()
