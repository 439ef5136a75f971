"""Derive expiry notifications from the inventory and deliver critical alerts."""

import asyncio
import logging
import threading
from dataclasses import dataclass, field
from datetime import datetime, timedelta
from typing import Protocol

from foodwise.domain.errors import StorageReadError
from foodwise.domain.food import SavedFoodItem
from foodwise.domain.notifications import (
    AlertSeverity,
    ExpiryAlert,
    NotificationSnapshot,
)
from foodwise.services.inventory import (
    DEFAULT_EXPIRING_THRESHOLD_DAYS,
    InventoryStore,
    days_until,
)

logger = logging.getLogger(__name__)

CRITICAL_MAX_DAYS = 1
WARNING_MAX_DAYS = 3


class AlertSink(Protocol):
    """Delivery channel for one-shot critical alerts."""

    def send(self, alert: ExpiryAlert) -> None:
        """Deliver a single alert."""


def derive_notifications(
    items: list[SavedFoodItem], now: datetime
) -> NotificationSnapshot:
    """Split expiring items into critical and warning alerts.

    Items more than WARNING_MAX_DAYS away are not alerted on.
    """
    critical: list[ExpiryAlert] = []
    warning: list[ExpiryAlert] = []
    for item in items:
        days_left = days_until(item.expiry_date, now)
        if days_left <= CRITICAL_MAX_DAYS:
            critical.append(ExpiryAlert(item, days_left, AlertSeverity.CRITICAL))
        elif days_left <= WARNING_MAX_DAYS:
            warning.append(ExpiryAlert(item, days_left, AlertSeverity.WARNING))
    return NotificationSnapshot(generated_at=now, critical=critical, warning=warning)


@dataclass
class NotificationService:
    """Keeps the latest notification snapshot current for the inventory."""

    store: InventoryStore
    sink: AlertSink
    threshold_days: int = DEFAULT_EXPIRING_THRESHOLD_DAYS
    latest: NotificationSnapshot | None = field(default=None, init=False)
    _alerted_ids: set[str] = field(default_factory=set, init=False)
    _rescan_lock: threading.Lock = field(default_factory=threading.Lock, init=False)

    def attach(self) -> None:
        """Rescan whenever the inventory changes."""
        self.store.subscribe(self._on_store_change)

    def detach(self) -> None:
        self.store.unsubscribe(self._on_store_change)

    def rescan(self) -> NotificationSnapshot:
        """Reclassify expiring items, coalescing overlapping invocations."""
        if not self._rescan_lock.acquire(blocking=False):
            logger.debug("Rescan already in progress; returning cached snapshot")
            return self.latest or NotificationSnapshot(generated_at=self.store.clock())
        try:
            now = self.store.clock()
            expiring = self.store.expiring_soon(self.threshold_days)
            snapshot = derive_notifications(expiring, now)
            self.latest = snapshot
            self._forget_removed_items()
            self._send_critical(snapshot.critical)
            return snapshot
        finally:
            self._rescan_lock.release()

    def _on_store_change(self) -> None:
        self.rescan()

    def _forget_removed_items(self) -> None:
        if not self._alerted_ids:
            return
        try:
            stored_ids = self.store.item_ids()
        except StorageReadError:
            logger.warning("Cannot read stored items; keeping alert history")
            return
        self._alerted_ids &= stored_ids

    def _send_critical(self, alerts: list[ExpiryAlert]) -> None:
        for alert in alerts:
            if alert.item.id in self._alerted_ids:
                continue
            try:
                self.sink.send(alert)
            except Exception:
                logger.exception("Failed to deliver alert for %s", alert.item.id)
                continue
            self._alerted_ids.add(alert.item.id)


@dataclass
class RescanScheduler:
    """Periodically rescans notifications and watches for external changes."""

    service: NotificationService
    interval: timedelta = timedelta(hours=1)
    poll_seconds: float = 30
    _last_rescan_at: datetime | None = field(default=None, init=False)

    def tick(self, now: datetime | None = None) -> bool:
        """Run one poll step; return True when a periodic rescan happened."""
        store = self.service.store
        resolved_now = now or store.clock()
        if store.check_external_change():
            self._last_rescan_at = resolved_now
            return False
        if (
            self._last_rescan_at is not None
            and resolved_now - self._last_rescan_at < self.interval
        ):
            return False
        self.service.rescan()
        self._last_rescan_at = resolved_now
        return True

    async def run(self) -> None:
        """Poll forever until cancelled."""
        while True:
            try:
                await asyncio.to_thread(self.tick)
            except Exception:
                logger.exception("Scheduled notification rescan failed")
            await asyncio.sleep(self.poll_seconds)
