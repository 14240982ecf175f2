import sys
from pathlib import Path

import httpx
import pytest

# Ensure package root is importable when tests are executed directly
ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))


_SETTINGS_ENV = (
    "TMDB_API_KEY",
    "TMDB_BASE_URL",
    "TMDB_IMAGE_BASE_URL",
    "TMDB_POSTER_SIZE",
    "TMDB_LANGUAGE",
    "LANG",
    "TMDB_INCLUDE_ADULT",
    "RESULT_LIMIT",
    "DEBOUNCE_SECONDS",
    "HTTP_TIMEOUT",
    "TMDB_USER_AGENT",
    "TRIGGER_PREFIX",
    "TMDB_CACHE_DIR",
    "IMDB_URL",
    "PROVIDER_URL",
    "LOG_LEVEL",
)


@pytest.fixture(autouse=True)
def _isolate_settings_env(monkeypatch):
    """Keep the developer's environment out of Settings()."""

    for name in _SETTINGS_ENV:
        monkeypatch.delenv(name, raising=False)


def _tmdb_handler(request: httpx.Request) -> httpx.Response:
    path = request.url.path
    if path == "/3/search/movie":
        if request.url.params["query"] == "fail":
            return httpx.Response(503)
        return httpx.Response(
            200,
            json={
                "page": 1,
                "results": [
                    {
                        "id": 603,
                        "title": "The Matrix",
                        "overview": "A hacker learns the truth.",
                        "release_date": "1999-03-30",
                        "poster_path": "/matrix.jpg",
                    },
                    {
                        "id": 604,
                        "title": "The Matrix Reloaded",
                        "overview": "",
                        "release_date": "2003-05-15",
                        "poster_path": None,
                    },
                ],
                "total_results": 2,
                "total_pages": 1,
            },
        )
    if path == "/3/movie/603":
        return httpx.Response(200, json={"id": 603, "imdb_id": "tt0133093"})
    if path == "/t/p/w185/matrix.jpg":
        return httpx.Response(200, content=b"\x89PNG-matrix")
    return httpx.Response(404)


@pytest.fixture
def tmdb_http_client():
    """Factory for AsyncClients backed by a canned TMDb responder."""

    def factory() -> httpx.AsyncClient:
        return httpx.AsyncClient(transport=httpx.MockTransport(_tmdb_handler))

    return factory
