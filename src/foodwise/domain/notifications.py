"""Domain models for expiry notifications."""

from dataclasses import dataclass, field
from datetime import datetime
from enum import StrEnum

from foodwise.domain.food import SavedFoodItem


class AlertSeverity(StrEnum):
    """Severity of an expiring-item notification."""

    CRITICAL = "critical"
    WARNING = "warning"


class ItemStatus(StrEnum):
    """Freshness status of a saved item."""

    EXPIRED = "expired"
    CRITICAL = "critical"
    WARNING = "warning"
    FRESH = "fresh"


@dataclass(frozen=True)
class ExpiryAlert:
    """An item nearing expiry with its whole-day countdown."""

    item: SavedFoodItem
    days_left: int
    severity: AlertSeverity

    @property
    def message(self) -> str:
        if self.days_left <= 0:
            when = "today"
        elif self.days_left == 1:
            when = "tomorrow"
        else:
            when = f"in {self.days_left} days"
        return (
            f"{self.item.name} is expiring soon! Use it before "
            f"{self.item.expiry_date:%b} {self.item.expiry_date.day} ({when})."
        )


@dataclass(frozen=True)
class NotificationSnapshot:
    """Classification of the expiring-soon set at a point in time."""

    generated_at: datetime
    critical: list[ExpiryAlert] = field(default_factory=list)
    warning: list[ExpiryAlert] = field(default_factory=list)

    @property
    def total(self) -> int:
        return len(self.critical) + len(self.warning)
