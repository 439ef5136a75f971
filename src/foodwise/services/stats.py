"""Statistics over the saved inventory."""

from collections import Counter
from dataclasses import dataclass

from foodwise.services.inventory import DEFAULT_EXPIRING_THRESHOLD_DAYS, InventoryStore


@dataclass(frozen=True)
class InventorySummary:
    """Aggregated item counts."""

    total: int
    by_category: dict[str, int]
    expired: int
    expiring_soon: int
    safe: int


@dataclass
class StatsService:
    """Service for counting saved items by category and expiry status."""

    store: InventoryStore
    threshold_days: int = DEFAULT_EXPIRING_THRESHOLD_DAYS

    def summarize(self) -> InventorySummary:
        """Return category and status counts for the current inventory."""
        now = self.store.clock()
        items = self.store.list_items()
        expired = sum(1 for item in items if item.expiry_date < now)
        expiring_soon = sum(
            1
            for item in self.store.expiring_soon(self.threshold_days)
            if item.expiry_date >= now
        )
        return InventorySummary(
            total=len(items),
            by_category=dict(Counter(item.category for item in items)),
            expired=expired,
            expiring_soon=expiring_soon,
            safe=len(items) - expired - expiring_soon,
        )
