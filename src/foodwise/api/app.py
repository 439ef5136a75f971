"""FastAPI application factory."""

import asyncio
import contextlib
import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from datetime import datetime, timedelta

from fastapi import FastAPI, Query, Request, Response, status
from fastapi.responses import JSONResponse

from foodwise.api.models import (
    BannerOut,
    CatalogOut,
    CategoryOut,
    ExpiryAlertOut,
    FoodAttributesIn,
    NotificationsOut,
    PredictionOut,
    SavedFoodItemOut,
    StatsOut,
)
from foodwise.app_logging import configure_logging
from foodwise.containers import AppContainer
from foodwise.domain.errors import (
    StorageReadError,
    StorageWriteError,
    ValidationError,
)
from foodwise.domain.food import FoodAttributes, Packaging, SavedFoodItem
from foodwise.domain.notifications import ExpiryAlert, NotificationSnapshot
from foodwise.services.banners import banner_for, item_status
from foodwise.services.prediction import (
    CATEGORY_EXAMPLES,
    predict,
    validate_attributes,
)


def create_app(container: AppContainer) -> FastAPI:  # noqa: PLR0915
    """Create a FastAPI app configured with dependencies."""
    configure_logging(container.settings.log_level)
    logger = logging.getLogger(__name__)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        scheduler = app.state.container.rescan_scheduler
        await asyncio.to_thread(scheduler.tick)
        task = asyncio.create_task(scheduler.run())
        yield
        task.cancel()
        with contextlib.suppress(asyncio.CancelledError):
            await task
        app.state.container.close_resources()

    app = FastAPI(lifespan=lifespan)
    app.state.container = container

    @app.exception_handler(ValidationError)
    async def validation_error_handler(
        request: Request, exc: ValidationError
    ) -> JSONResponse:
        return JSONResponse(
            status_code=422,
            content={"detail": exc.message, "field": exc.field},
        )

    @app.exception_handler(StorageWriteError)
    async def storage_write_error_handler(
        request: Request, exc: StorageWriteError
    ) -> JSONResponse:
        logger.error("Failed to persist food items: %s", exc)
        return JSONResponse(
            status_code=status.HTTP_507_INSUFFICIENT_STORAGE,
            content={"detail": "Failed to save food item"},
        )

    @app.exception_handler(StorageReadError)
    async def storage_read_error_handler(
        request: Request, exc: StorageReadError
    ) -> JSONResponse:
        logger.error("Refusing to modify unreadable food items: %s", exc)
        return JSONResponse(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            content={"detail": "Stored food items are unreadable"},
        )

    @app.get("/health")
    def health() -> dict[str, str]:
        """Simple health check endpoint."""
        return {"status": "ok"}

    @app.get("/categories")
    def categories() -> CatalogOut:
        """Return selectable categories with examples and packaging types."""
        return CatalogOut(
            categories=[
                CategoryOut(value=str(value), examples=examples)
                for value, examples in CATEGORY_EXAMPLES.items()
            ],
            packaging=[entry.value for entry in Packaging],
        )

    @app.post("/predictions")
    def create_prediction(
        payload: FoodAttributesIn, request: Request
    ) -> PredictionOut:
        """Predict shelf life without saving."""
        state_container: AppContainer = request.app.state.container
        attrs = _to_attributes(payload)
        result = predict(attrs)
        now = state_container.inventory_store.clock()
        banner = _banner(state_container, attrs.name, result.days)
        return PredictionOut(
            days=result.days,
            risk=result.risk.value,
            expiry_date=now + timedelta(days=result.days),
            banner=banner,
        )

    @app.get("/items")
    def list_items(request: Request) -> list[SavedFoodItemOut]:
        """Return all saved items with their freshness status."""
        state_container: AppContainer = request.app.state.container
        store = state_container.inventory_store
        now = store.clock()
        return [_item_out(item, now) for item in store.list_items()]

    @app.post("/items", status_code=status.HTTP_201_CREATED)
    def save_item(payload: FoodAttributesIn, request: Request) -> SavedFoodItemOut:
        """Predict shelf life and save the result to the inventory."""
        state_container: AppContainer = request.app.state.container
        store = state_container.inventory_store
        attrs = _to_attributes(payload)
        item = store.save_prediction(attrs, predict(attrs))
        return _item_out(item, store.clock())

    @app.get("/items/expiring")
    def expiring_items(
        request: Request, days: int = Query(default=3, ge=0)
    ) -> list[SavedFoodItemOut]:
        """Return items expiring within the given number of days."""
        state_container: AppContainer = request.app.state.container
        store = state_container.inventory_store
        now = store.clock()
        return [_item_out(item, now) for item in store.expiring_soon(days)]

    @app.delete("/items/{item_id}", status_code=status.HTTP_204_NO_CONTENT)
    def delete_item(item_id: str, request: Request) -> Response:
        """Delete a saved item; unknown ids succeed silently."""
        state_container: AppContainer = request.app.state.container
        state_container.inventory_store.delete(item_id)
        return Response(status_code=status.HTTP_204_NO_CONTENT)

    @app.get("/notifications")
    def notifications(request: Request) -> NotificationsOut:
        """Return the current expiry notification snapshot."""
        state_container: AppContainer = request.app.state.container
        snapshot = state_container.notification_service.rescan()
        return _notifications_out(snapshot)

    @app.get("/stats")
    def stats(request: Request) -> StatsOut:
        """Return inventory counts by category and status."""
        state_container: AppContainer = request.app.state.container
        summary = state_container.stats_service.summarize()
        return StatsOut(
            total=summary.total,
            by_category=summary.by_category,
            expired=summary.expired,
            expiring_soon=summary.expiring_soon,
            safe=summary.safe,
        )

    return app


def _to_attributes(payload: FoodAttributesIn) -> FoodAttributes:
    return validate_attributes(
        name=payload.name,
        category=payload.category,
        temperature=payload.temperature,
        humidity=payload.humidity,
        packaging=payload.packaging,
    )


def _banner(container: AppContainer, name: str, days: float) -> BannerOut:
    banner = banner_for(name, days, container.banner_thresholds)
    return BannerOut(
        tier=banner.tier.value, title=banner.title, description=banner.description
    )


def _item_out(item: SavedFoodItem, now: datetime) -> SavedFoodItemOut:
    return SavedFoodItemOut(
        id=item.id,
        name=item.name,
        category=item.category,
        expiry_date=item.expiry_date,
        expiry_days=item.expiry_days,
        temperature=item.temperature,
        humidity=item.humidity,
        packaging=item.packaging,
        created_at=item.created_at,
        status=item_status(item, now).value,
    )


def _alert_out(alert: ExpiryAlert) -> ExpiryAlertOut:
    return ExpiryAlertOut(
        id=alert.item.id,
        name=alert.item.name,
        expiry_date=alert.item.expiry_date,
        days_left=alert.days_left,
        severity=alert.severity.value,
        message=alert.message,
    )


def _notifications_out(snapshot: NotificationSnapshot) -> NotificationsOut:
    return NotificationsOut(
        generated_at=snapshot.generated_at,
        total=snapshot.total,
        critical=[_alert_out(alert) for alert in snapshot.critical],
        warning=[_alert_out(alert) for alert in snapshot.warning],
    )
