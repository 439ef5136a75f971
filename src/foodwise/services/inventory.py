"""Persisted inventory of saved food predictions."""

import logging
import math
import threading
from collections.abc import Callable
from dataclasses import asdict, dataclass, field
from datetime import UTC, datetime, timedelta
from typing import Protocol
from uuid import uuid4

from foodwise.domain.errors import StorageReadError
from foodwise.domain.food import (
    FoodAttributes,
    FoodItemDraft,
    PredictionResult,
    SavedFoodItem,
)

logger = logging.getLogger(__name__)

DEFAULT_EXPIRING_THRESHOLD_DAYS = 3
_ONE_DAY = timedelta(days=1)

ChangeListener = Callable[[], None]


class CollectionBackend(Protocol):
    """Persistence interface holding the whole item collection under one key."""

    def load(self) -> list[dict[str, object]]:
        """Return every stored row, raising StorageReadError if unreadable."""

    def store(self, rows: list[dict[str, object]]) -> None:
        """Replace the stored collection, raising StorageWriteError on failure."""

    def change_marker(self) -> object | None:
        """Return a value that changes when another writer touches the data."""


def utc_now() -> datetime:
    return datetime.now(tz=UTC)


def days_until(expiry_date: datetime, now: datetime) -> int:
    """Whole days until expiry, rounded up (negative once expired)."""
    return math.ceil((expiry_date - now) / _ONE_DAY)


@dataclass
class InventoryStore:
    """Owns the saved-item collection and notifies subscribers on change."""

    backend: CollectionBackend
    clock: Callable[[], datetime] = utc_now
    _listeners: list[ChangeListener] = field(default_factory=list, init=False)
    _lock: threading.Lock = field(default_factory=threading.Lock, init=False)
    _last_marker: object | None = field(default=None, init=False)

    def list_items(self) -> list[SavedFoodItem]:
        """Return all readable items, or an empty list if storage is unreadable."""
        try:
            rows = self.backend.load()
        except StorageReadError:
            logger.warning("Stored food items are unreadable; treating as empty")
            return []
        return _parse_rows(rows)

    def item_ids(self) -> set[str]:
        """Return the ids of every stored row, raising StorageReadError."""
        return {str(row["id"]) for row in self.backend.load() if _has_id(row)}

    def save(self, draft: FoodItemDraft) -> SavedFoodItem:
        """Persist a new item with a fresh id and creation timestamp."""
        item = SavedFoodItem(
            id=str(uuid4()),
            created_at=self.clock(),
            **asdict(draft),
        )
        with self._lock:
            rows = self.backend.load()
            rows.append(_serialize_item(item))
            self._write(rows)
        logger.info("Saved food item %s (%s)", item.id, item.name)
        self._notify()
        return item

    def save_prediction(
        self, attrs: FoodAttributes, result: PredictionResult
    ) -> SavedFoodItem:
        """Save a prediction with its expiry date projected from now."""
        draft = FoodItemDraft(
            name=attrs.name,
            category=attrs.category,
            expiry_date=self.clock() + timedelta(days=result.days),
            expiry_days=result.days,
            temperature=attrs.temperature,
            humidity=attrs.humidity,
            packaging=attrs.packaging,
        )
        return self.save(draft)

    def delete(self, item_id: str) -> None:
        """Remove an item by id; unknown ids leave storage untouched."""
        with self._lock:
            rows = self.backend.load()
            remaining = [
                row for row in rows if not (_has_id(row) and str(row["id"]) == item_id)
            ]
            if len(remaining) == len(rows):
                logger.info("Food item %s not found for delete", item_id)
                return
            self._write(remaining)
        self._notify()

    def clear(self) -> None:
        """Remove every saved item."""
        with self._lock:
            self._write([])
        logger.info("Cleared all food items")
        self._notify()

    def expiring_soon(
        self, threshold_days: int = DEFAULT_EXPIRING_THRESHOLD_DAYS
    ) -> list[SavedFoodItem]:
        """Return items expiring within the threshold, excluding expired ones."""
        now = self.clock()
        return [
            item
            for item in self.list_items()
            if 0 <= days_until(item.expiry_date, now) <= threshold_days
        ]

    def subscribe(self, listener: ChangeListener) -> None:
        """Register a callback invoked after every mutation."""
        if listener not in self._listeners:
            self._listeners.append(listener)

    def unsubscribe(self, listener: ChangeListener) -> None:
        """Remove a previously registered callback."""
        if listener in self._listeners:
            self._listeners.remove(listener)

    def check_external_change(self) -> bool:
        """Notify subscribers if another writer changed the stored data."""
        marker = self.backend.change_marker()
        if marker is None or marker == self._last_marker:
            return False
        self._last_marker = marker
        logger.info("Detected external change to stored food items")
        self._notify()
        return True

    def _write(self, rows: list[dict[str, object]]) -> None:
        self.backend.store(rows)
        self._last_marker = self.backend.change_marker()

    def _notify(self) -> None:
        for listener in list(self._listeners):
            try:
                listener()
            except Exception:
                logger.exception("Inventory change listener failed")


def _has_id(row: object) -> bool:
    return isinstance(row, dict) and "id" in row


def _parse_rows(rows: list[dict[str, object]]) -> list[SavedFoodItem]:
    """Parse stored rows, skipping malformed ones so the rest stay usable."""
    items: list[SavedFoodItem] = []
    for index, row in enumerate(rows):
        try:
            items.append(_parse_item(row))
        except (AttributeError, KeyError, TypeError, ValueError) as exc:
            logger.warning("Skipping malformed food item at index %d: %s", index, exc)
    return items


def _serialize_item(item: SavedFoodItem) -> dict[str, object]:
    """Serialize an item into the persisted camelCase layout."""
    return {
        "id": item.id,
        "name": item.name,
        "category": item.category,
        "expiryDate": item.expiry_date.isoformat(),
        "expiryDays": item.expiry_days,
        "temperature": item.temperature,
        "humidity": item.humidity,
        "packaging": item.packaging,
        "createdAt": item.created_at.isoformat(),
    }


def _parse_item(row: dict[str, object]) -> SavedFoodItem:
    """Parse a persisted row into a domain model."""
    return SavedFoodItem(
        id=str(row["id"]),
        name=str(row["name"]),
        category=str(row.get("category", "")),
        expiry_date=_parse_timestamp(row["expiryDate"]),
        expiry_days=float(row["expiryDays"]),
        temperature=float(row.get("temperature", 0.0)),
        humidity=float(row.get("humidity", 0.0)),
        packaging=str(row.get("packaging", "")),
        created_at=_parse_timestamp(row["createdAt"]),
    )


def _parse_timestamp(raw: object) -> datetime:
    if not isinstance(raw, str):
        raise TypeError(f"Expected ISO timestamp, got {type(raw).__name__}")
    # Browser-style ISO strings end in "Z".
    parsed = datetime.fromisoformat(raw.replace("Z", "+00:00"))
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=UTC)
    return parsed
