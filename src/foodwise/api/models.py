"""Pydantic models for API payloads."""

from datetime import datetime

from pydantic import BaseModel, Field


class FoodAttributesIn(BaseModel):
    """Food attributes submitted for prediction."""

    name: str = ""
    category: str | None = None
    temperature: float = Field(default=4, ge=-10, le=40)
    humidity: float = Field(default=50, ge=0, le=100)
    packaging: str = "none"


class BannerOut(BaseModel):
    """Alert banner for a prediction."""

    tier: str
    title: str
    description: str


class PredictionOut(BaseModel):
    """Prediction result with projected expiry."""

    days: float
    risk: str
    expiry_date: datetime
    banner: BannerOut


class SavedFoodItemOut(BaseModel):
    """Saved inventory item with its current status."""

    id: str
    name: str
    category: str
    expiry_date: datetime
    expiry_days: float
    temperature: float
    humidity: float
    packaging: str
    created_at: datetime
    status: str


class ExpiryAlertOut(BaseModel):
    """An expiring item in a notification snapshot."""

    id: str
    name: str
    expiry_date: datetime
    days_left: int
    severity: str
    message: str


class NotificationsOut(BaseModel):
    """Latest notification snapshot."""

    generated_at: datetime
    total: int
    critical: list[ExpiryAlertOut]
    warning: list[ExpiryAlertOut]


class StatsOut(BaseModel):
    """Inventory counts by category and status."""

    total: int
    by_category: dict[str, int]
    expired: int
    expiring_soon: int
    safe: int


class CategoryOut(BaseModel):
    """A selectable food category with example names."""

    value: str
    examples: list[str]


class CatalogOut(BaseModel):
    """Options for building the prediction form."""

    categories: list[CategoryOut]
    packaging: list[str]
