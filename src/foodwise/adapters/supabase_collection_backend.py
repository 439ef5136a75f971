"""Supabase storage for the saved-item collection."""

from dataclasses import dataclass

from supabase import Client

from foodwise.domain.errors import StorageReadError, StorageWriteError
from foodwise.services.inventory import CollectionBackend


@dataclass
class SupabaseCollectionBackend(CollectionBackend):
    """Stores the whole collection as one JSON value in the ``app_state`` table."""

    client: Client
    key: str = "foodwise_items"
    table: str = "app_state"

    def load(self) -> list[dict[str, object]]:
        """Return the stored collection for the key."""
        try:
            response = (
                self.client.table(self.table)
                .select("value")
                .eq("key", self.key)
                .limit(1)
                .execute()
            )
        except Exception as exc:
            raise StorageReadError(f"Failed to load {self.key}: {exc}") from exc
        if not response.data:
            return []
        value = response.data[0].get("value")
        if value is None:
            return []
        if not isinstance(value, list):
            raise StorageReadError(f"Stored value for {self.key} is not a list")
        return value

    def store(self, rows: list[dict[str, object]]) -> None:
        """Replace the stored collection for the key."""
        try:
            self.client.table(self.table).upsert(
                {"key": self.key, "value": rows}, on_conflict="key"
            ).execute()
        except Exception as exc:
            raise StorageWriteError(f"Failed to store {self.key}: {exc}") from exc

    def change_marker(self) -> object | None:
        return None
