"""Shared test fixtures."""

import logging
from collections.abc import Iterator
from dataclasses import dataclass, field
from datetime import UTC, datetime, timedelta
from pathlib import Path

import pytest

from foodwise.adapters.memory_backend import MemoryBackend
from foodwise.config import Settings
from foodwise.containers import AppContainer
from foodwise.domain.errors import StorageReadError, StorageWriteError
from foodwise.domain.food import FoodItemDraft
from foodwise.domain.notifications import ExpiryAlert
from foodwise.services.banners import BannerThresholds
from foodwise.services.inventory import InventoryStore
from foodwise.services.notifications import (
    AlertSink,
    NotificationService,
    RescanScheduler,
)
from foodwise.services.stats import StatsService

FIXED_NOW = datetime(2024, 6, 1, 12, 0, tzinfo=UTC)


@dataclass
class FakeClock:
    """Controllable clock for time-dependent tests."""

    now: datetime = FIXED_NOW

    def __call__(self) -> datetime:
        return self.now

    def advance(self, delta: timedelta) -> None:
        self.now = self.now + delta


@dataclass
class RecordingAlertSink(AlertSink):
    """Alert sink that records delivered alerts."""

    alerts: list[ExpiryAlert] = field(default_factory=list)
    fail: bool = False

    def send(self, alert: ExpiryAlert) -> None:
        if self.fail:
            raise RuntimeError("delivery failed")
        self.alerts.append(alert)


@dataclass
class CountingBackend(MemoryBackend):
    """Memory backend that counts writes."""

    writes: int = 0

    def store(self, rows: list[dict[str, object]]) -> None:
        self.writes += 1
        super().store(rows)


@dataclass
class UnreadableBackend(MemoryBackend):
    """Backend whose stored collection cannot be read."""

    def load(self) -> list[dict[str, object]]:
        raise StorageReadError("corrupt")


@dataclass
class FlakyBackend(CountingBackend):
    """Backend whose next loads fail, as a dropped connection would."""

    failing_loads: int = 0

    def load(self) -> list[dict[str, object]]:
        if self.failing_loads:
            self.failing_loads -= 1
            raise StorageReadError("connection reset")
        return super().load()


@dataclass
class FullBackend(MemoryBackend):
    """Backend that rejects every write."""

    def store(self, rows: list[dict[str, object]]) -> None:
        raise StorageWriteError("quota exceeded")


def make_draft(
    clock: FakeClock,
    name: str = "Milk",
    category: str = "dairy",
    expires_in: timedelta = timedelta(days=2),
    expiry_days: float = 2.0,
) -> FoodItemDraft:
    return FoodItemDraft(
        name=name,
        category=category,
        expiry_date=clock() + expires_in,
        expiry_days=expiry_days,
        temperature=4,
        humidity=40,
        packaging="plastic",
    )


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def backend() -> CountingBackend:
    return CountingBackend()


@pytest.fixture
def store(backend: CountingBackend, clock: FakeClock) -> InventoryStore:
    return InventoryStore(backend, clock=clock)


@pytest.fixture
def alert_sink() -> RecordingAlertSink:
    return RecordingAlertSink()


@pytest.fixture
def settings(tmp_path: Path) -> Settings:
    return Settings(storage_backend="memory", data_dir=tmp_path)


@pytest.fixture
def container(
    settings: Settings,
    store: InventoryStore,
    alert_sink: RecordingAlertSink,
) -> AppContainer:
    notification_service = NotificationService(store=store, sink=alert_sink)
    notification_service.attach()

    def close_resources() -> None:
        notification_service.detach()

    return AppContainer(
        settings=settings,
        inventory_store=store,
        notification_service=notification_service,
        rescan_scheduler=RescanScheduler(service=notification_service),
        stats_service=StatsService(store=store),
        banner_thresholds=BannerThresholds(),
        close_resources=close_resources,
    )


@pytest.fixture(autouse=True)
def _propagate_app_logs() -> Iterator[None]:
    logger = logging.getLogger("foodwise")
    logger.propagate = True
    yield
    logger.propagate = True
