"""In-process storage for the saved-item collection."""

import copy
from dataclasses import dataclass, field

from foodwise.services.inventory import CollectionBackend


@dataclass
class MemoryBackend(CollectionBackend):
    """Keeps the collection in memory; nothing survives a restart."""

    rows: list[dict[str, object]] = field(default_factory=list)

    def load(self) -> list[dict[str, object]]:
        return copy.deepcopy(self.rows)

    def store(self, rows: list[dict[str, object]]) -> None:
        self.rows = copy.deepcopy(rows)

    def change_marker(self) -> object | None:
        return None
