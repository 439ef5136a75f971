"""Dependency container wiring for the application."""

from collections.abc import Callable
from dataclasses import dataclass
from datetime import timedelta

from supabase import create_client

from foodwise.adapters.alert_sinks import HttpxTelegramAlertSink, LoggingAlertSink
from foodwise.adapters.json_file_backend import JsonFileBackend
from foodwise.adapters.memory_backend import MemoryBackend
from foodwise.adapters.supabase_collection_backend import SupabaseCollectionBackend
from foodwise.config import Settings, telegram_alerts_enabled
from foodwise.services.banners import BannerThresholds
from foodwise.services.inventory import CollectionBackend, InventoryStore
from foodwise.services.notifications import (
    AlertSink,
    NotificationService,
    RescanScheduler,
)
from foodwise.services.stats import StatsService


@dataclass
class AppContainer:
    """Holds application-wide dependencies."""

    settings: Settings
    inventory_store: InventoryStore
    notification_service: NotificationService
    rescan_scheduler: RescanScheduler
    stats_service: StatsService
    banner_thresholds: BannerThresholds
    close_resources: Callable[[], None]


def build_backend(settings: Settings) -> CollectionBackend:
    """Create the persistence backend selected in settings."""
    backend = settings.storage_backend.strip().lower()
    if backend == "memory":
        return MemoryBackend()
    if backend == "supabase":
        if not settings.supabase_url or not settings.supabase_service_key:
            raise ValueError("Supabase storage requires URL and service key")
        client = create_client(settings.supabase_url, settings.supabase_service_key)
        return SupabaseCollectionBackend(client, key=settings.storage_key)
    if backend == "json":
        return JsonFileBackend(settings.data_dir, key=settings.storage_key)
    raise ValueError(f"Unknown storage backend: {settings.storage_backend}")


def build_container(settings: Settings | None = None) -> AppContainer:
    """Create the default dependency container."""
    resolved_settings = settings or Settings()
    inventory_store = InventoryStore(build_backend(resolved_settings))

    sink: AlertSink
    telegram_sink: HttpxTelegramAlertSink | None = None
    if telegram_alerts_enabled(resolved_settings):
        telegram_sink = HttpxTelegramAlertSink.create(
            bot_token=resolved_settings.telegram_bot_token or "",
            chat_id=resolved_settings.telegram_alert_chat_id or 0,
        )
        sink = telegram_sink
    else:
        sink = LoggingAlertSink()

    notification_service = NotificationService(
        store=inventory_store,
        sink=sink,
        threshold_days=resolved_settings.expiring_threshold_days,
    )
    notification_service.attach()
    rescan_scheduler = RescanScheduler(
        service=notification_service,
        interval=timedelta(seconds=resolved_settings.rescan_interval_seconds),
        poll_seconds=resolved_settings.storage_poll_seconds,
    )
    stats_service = StatsService(
        store=inventory_store,
        threshold_days=resolved_settings.expiring_threshold_days,
    )
    banner_thresholds = BannerThresholds(
        critical_below=resolved_settings.banner_critical_below_days,
        warning_below=resolved_settings.banner_warning_below_days,
    )

    def close_resources() -> None:
        notification_service.detach()
        if telegram_sink is not None:
            telegram_sink.close()

    return AppContainer(
        settings=resolved_settings,
        inventory_store=inventory_store,
        notification_service=notification_service,
        rescan_scheduler=rescan_scheduler,
        stats_service=stats_service,
        banner_thresholds=banner_thresholds,
        close_resources=close_resources,
    )
