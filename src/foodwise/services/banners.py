"""Presentation-level banner tiers for a fresh prediction and item statuses.

Banner thresholds are independent of the prediction engine risk tiers.
"""

from dataclasses import dataclass
from datetime import datetime
from enum import StrEnum

from foodwise.domain.food import SavedFoodItem
from foodwise.domain.notifications import ItemStatus
from foodwise.services.inventory import days_until

STATUS_CRITICAL_MAX_DAYS = 2
STATUS_WARNING_MAX_DAYS = 5


class BannerTier(StrEnum):
    """Severity of the banner shown next to a prediction."""

    CRITICAL = "critical"
    WARNING = "warning"
    INFO = "info"


@dataclass(frozen=True)
class BannerThresholds:
    """Upper bounds (exclusive) in days for each banner tier."""

    critical_below: float = 2
    warning_below: float = 4


@dataclass(frozen=True)
class Banner:
    """Alert banner content for a prediction."""

    tier: BannerTier
    title: str
    description: str


def banner_for(
    name: str, days: float, thresholds: BannerThresholds | None = None
) -> Banner:
    """Choose the banner for a predicted lifetime."""
    resolved = thresholds or BannerThresholds()
    if days < resolved.critical_below:
        return Banner(
            tier=BannerTier.CRITICAL,
            title="Critical: Expiring Very Soon",
            description=(
                f"{name} will expire within {resolved.critical_below:g} days! "
                "Consume immediately."
            ),
        )
    if days < resolved.warning_below:
        return Banner(
            tier=BannerTier.WARNING,
            title="Warning: Expiring Soon",
            description=(
                f"{name} will expire in {round(days)} days. Plan to use it soon."
            ),
        )
    return Banner(
        tier=BannerTier.INFO,
        title="Good Condition",
        description=f"{name} is in good condition and will last for a while.",
    )


def item_status(item: SavedFoodItem, now: datetime) -> ItemStatus:
    """Classify a saved item's freshness for listing."""
    days_left = days_until(item.expiry_date, now)
    if days_left < 0:
        return ItemStatus.EXPIRED
    if days_left <= STATUS_CRITICAL_MAX_DAYS:
        return ItemStatus.CRITICAL
    if days_left <= STATUS_WARNING_MAX_DAYS:
        return ItemStatus.WARNING
    return ItemStatus.FRESH
