"""In-memory store of the latest movie payload per TMDb id."""

from __future__ import annotations

from ..common.types import ResultId, TMDBMovie


class EntityCache:
    """Unbounded id -> movie mapping; later puts overwrite earlier ones."""

    def __init__(self) -> None:
        self._entities: dict[ResultId, TMDBMovie] = {}

    def put(self, entity: TMDBMovie) -> None:
        self._entities[entity.id] = entity

    def get(self, entity_id: ResultId) -> TMDBMovie | None:
        return self._entities.get(entity_id)

    def clear(self) -> None:
        """Remove all cached entries."""

        self._entities.clear()

    def __contains__(self, entity_id: object) -> bool:
        return entity_id in self._entities

    def __len__(self) -> int:
        return len(self._entities)


__all__ = ["EntityCache"]
