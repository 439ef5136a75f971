"""JSON file storage for the saved-item collection."""

import json
import os
import tempfile
from dataclasses import dataclass
from pathlib import Path

from foodwise.domain.errors import StorageReadError, StorageWriteError
from foodwise.services.inventory import CollectionBackend


@dataclass
class JsonFileBackend(CollectionBackend):
    """Stores the whole collection as one JSON array in ``<data_dir>/<key>.json``."""

    data_dir: Path
    key: str = "foodwise_items"

    @property
    def path(self) -> Path:
        return self.data_dir / f"{self.key}.json"

    def load(self) -> list[dict[str, object]]:
        """Read the collection; a missing file is an empty collection."""
        try:
            raw = self.path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return []
        except OSError as exc:
            raise StorageReadError(f"Cannot read {self.path}: {exc}") from exc
        if not raw.strip():
            return []
        try:
            payload = json.loads(raw)
        except json.JSONDecodeError as exc:
            raise StorageReadError(f"Invalid JSON in {self.path}: {exc}") from exc
        if not isinstance(payload, list):
            raise StorageReadError(f"Expected a JSON array in {self.path}")
        return payload

    def store(self, rows: list[dict[str, object]]) -> None:
        """Atomically replace the collection file."""
        try:
            self.data_dir.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(
                dir=self.data_dir, prefix=f".{self.key}.", suffix=".tmp"
            )
            try:
                with os.fdopen(fd, "w", encoding="utf-8") as handle:
                    json.dump(rows, handle, indent=2)
                os.replace(tmp_name, self.path)
            except BaseException:
                Path(tmp_name).unlink(missing_ok=True)
                raise
        except OSError as exc:
            raise StorageWriteError(f"Cannot write {self.path}: {exc}") from exc

    def change_marker(self) -> object | None:
        """Return the file's identity and modification time, or None when absent."""
        try:
            stat = self.path.stat()
        except OSError:
            return None
        return (stat.st_ino, stat.st_mtime_ns, stat.st_size)
