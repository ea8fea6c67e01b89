"""Content store lookup used to resolve numeric report identities."""

from collections.abc import Mapping
from typing import Protocol


class ContentStore(Protocol):
    """Lookup of content entities by numeric id.

    Implemented by the host (e.g. over its page table).
    """

    def find_by_id(self, numeric_id: int) -> str | None:
        """Return the entity's type name, or None if no such entity exists."""
        ...


class InMemoryContentStore:
    """ContentStore backed by a dict of ``{id: type_name}``."""

    def __init__(self, entities: Mapping[int, str] | None = None):
        self._entities: dict[int, str] = dict(entities or {})

    def add(self, numeric_id: int, type_name: str) -> None:
        self._entities[numeric_id] = type_name

    def find_by_id(self, numeric_id: int) -> str | None:
        return self._entities.get(numeric_id)

    def __len__(self) -> int:
        return len(self._entities)
