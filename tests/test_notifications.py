"""Tests for expiry notification derivation and scheduling."""

from datetime import timedelta

from foodwise.domain.notifications import AlertSeverity
from foodwise.services.inventory import InventoryStore
from foodwise.services.notifications import (
    NotificationService,
    RescanScheduler,
    derive_notifications,
)
from tests.conftest import (
    FIXED_NOW,
    CountingBackend,
    FakeClock,
    FlakyBackend,
    RecordingAlertSink,
    make_draft,
)


def test_derive_splits_critical_and_warning(
    store: InventoryStore, clock: FakeClock
) -> None:
    today = store.save(make_draft(clock, name="today", expires_in=timedelta(hours=2)))
    soon = store.save(make_draft(clock, name="soon", expires_in=timedelta(hours=23)))
    two = store.save(make_draft(clock, name="two", expires_in=timedelta(days=2)))
    three = store.save(
        make_draft(clock, name="three", expires_in=timedelta(days=2, hours=12))
    )

    snapshot = derive_notifications(store.expiring_soon(), FIXED_NOW)

    assert [alert.item.id for alert in snapshot.critical] == [today.id, soon.id]
    assert [alert.days_left for alert in snapshot.critical] == [1, 1]
    assert [alert.item.id for alert in snapshot.warning] == [two.id, three.id]
    assert [alert.days_left for alert in snapshot.warning] == [2, 3]
    assert all(a.severity is AlertSeverity.WARNING for a in snapshot.warning)
    assert snapshot.total == 4


def test_alert_message_mentions_countdown(
    store: InventoryStore, clock: FakeClock
) -> None:
    store.save(make_draft(clock, name="Milk", expires_in=timedelta(hours=5)))

    [alert] = derive_notifications(store.expiring_soon(), FIXED_NOW).critical

    assert alert.message == "Milk is expiring soon! Use it before Jun 1 (tomorrow)."


def test_rescan_sends_one_shot_critical_alerts(
    store: InventoryStore, clock: FakeClock, alert_sink: RecordingAlertSink
) -> None:
    service = NotificationService(store=store, sink=alert_sink)
    critical = store.save(make_draft(clock, expires_in=timedelta(hours=12)))
    store.save(make_draft(clock, expires_in=timedelta(days=3)))

    first = service.rescan()
    second = service.rescan()

    assert len(first.critical) == 1
    assert len(second.critical) == 1
    assert [alert.item.id for alert in alert_sink.alerts] == [critical.id]
    assert service.latest is second


def test_rescan_retries_after_sink_failure(
    store: InventoryStore, clock: FakeClock
) -> None:
    sink = RecordingAlertSink(fail=True)
    service = NotificationService(store=store, sink=sink)
    store.save(make_draft(clock, expires_in=timedelta(hours=12)))

    service.rescan()
    sink.fail = False
    service.rescan()

    assert len(sink.alerts) == 1


def test_derive_ignores_items_beyond_warning_window(
    store: InventoryStore, clock: FakeClock
) -> None:
    store.save(make_draft(clock, name="three", expires_in=timedelta(days=3)))
    store.save(make_draft(clock, name="five", expires_in=timedelta(days=5)))
    service = NotificationService(
        store=store, sink=RecordingAlertSink(), threshold_days=7
    )

    snapshot = service.rescan()

    assert [alert.item.name for alert in snapshot.warning] == ["three"]
    assert snapshot.critical == []
    assert len(store.expiring_soon(7)) == 2


def test_rescan_forgets_alerts_for_removed_items(
    store: InventoryStore,
    backend: CountingBackend,
    clock: FakeClock,
    alert_sink: RecordingAlertSink,
) -> None:
    service = NotificationService(store=store, sink=alert_sink)
    item = store.save(make_draft(clock, expires_in=timedelta(hours=6)))
    service.rescan()
    saved_rows = list(backend.rows)

    store.delete(item.id)
    service.rescan()
    backend.rows = saved_rows
    service.rescan()

    assert [alert.item.id for alert in alert_sink.alerts] == [item.id, item.id]


def test_rescan_keeps_alert_history_when_storage_unreadable(
    clock: FakeClock, alert_sink: RecordingAlertSink
) -> None:
    backend = FlakyBackend()
    store = InventoryStore(backend, clock=clock)
    service = NotificationService(store=store, sink=alert_sink)
    store.save(make_draft(clock, expires_in=timedelta(hours=6)))
    service.rescan()

    backend.failing_loads = 2
    assert service.rescan().total == 0
    service.rescan()

    assert len(alert_sink.alerts) == 1


def test_attached_service_rescans_on_mutation(
    store: InventoryStore, clock: FakeClock, alert_sink: RecordingAlertSink
) -> None:
    service = NotificationService(store=store, sink=alert_sink)
    service.attach()

    item = store.save(make_draft(clock, expires_in=timedelta(hours=6)))

    assert service.latest is not None
    assert [alert.item.id for alert in service.latest.critical] == [item.id]
    assert len(alert_sink.alerts) == 1

    store.delete(item.id)
    assert service.latest.total == 0

    service.detach()
    store.save(make_draft(clock, expires_in=timedelta(hours=6)))
    assert service.latest.total == 0


def test_rescan_does_not_write_to_store(clock: FakeClock) -> None:
    backend = CountingBackend()
    store = InventoryStore(backend, clock=clock)
    store.save(make_draft(clock, expires_in=timedelta(hours=6)))
    service = NotificationService(store=store, sink=RecordingAlertSink())

    service.rescan()

    assert backend.writes == 1


def test_overlapping_rescan_returns_cached_snapshot(
    store: InventoryStore, clock: FakeClock, alert_sink: RecordingAlertSink
) -> None:
    service = NotificationService(store=store, sink=alert_sink)
    cached = service.rescan()
    store.save(make_draft(clock, expires_in=timedelta(hours=6)))

    service._rescan_lock.acquire()
    try:
        overlapping = service.rescan()
    finally:
        service._rescan_lock.release()

    assert overlapping is cached
    assert alert_sink.alerts == []


def test_scheduler_rescans_hourly(
    store: InventoryStore, clock: FakeClock, alert_sink: RecordingAlertSink
) -> None:
    service = NotificationService(store=store, sink=alert_sink)
    scheduler = RescanScheduler(service=service, interval=timedelta(hours=1))

    assert scheduler.tick(FIXED_NOW) is True
    assert scheduler.tick(FIXED_NOW + timedelta(minutes=30)) is False
    assert scheduler.tick(FIXED_NOW + timedelta(minutes=61)) is True


def test_scheduler_picks_up_items_crossing_into_critical(
    store: InventoryStore, clock: FakeClock, alert_sink: RecordingAlertSink
) -> None:
    service = NotificationService(store=store, sink=alert_sink)
    scheduler = RescanScheduler(service=service)
    store.save(make_draft(clock, expires_in=timedelta(days=2, hours=12)))

    scheduler.tick()
    assert alert_sink.alerts == []

    clock.advance(timedelta(days=1, hours=13))
    scheduler.tick()

    assert len(alert_sink.alerts) == 1
