import pytest

from tmdb_search_provider.provider.guard import GenerationGuard


def test_tokens_are_strictly_increasing():
    guard = GenerationGuard()
    tokens = [guard.mint_token() for _ in range(5)]
    assert tokens == sorted(set(tokens))
    assert guard.current == tokens[-1]


def test_only_latest_token_is_current():
    guard = GenerationGuard()
    first = guard.mint_token()
    assert guard.is_current(first)
    second = guard.mint_token()
    assert not guard.is_current(first)
    assert guard.is_current(second)


def test_invalidate_makes_every_token_stale():
    guard = GenerationGuard()
    token = guard.mint_token()
    guard.invalidate()
    assert guard.invalidated
    assert not guard.is_current(token)
    with pytest.raises(RuntimeError, match="invalidated"):
        guard.mint_token()
