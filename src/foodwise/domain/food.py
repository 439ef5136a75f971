"""Domain models for food items and shelf-life predictions."""

from dataclasses import dataclass
from datetime import datetime
from enum import StrEnum


class Category(StrEnum):
    """Food categories understood by the prediction engine."""

    FRUITS = "fruits"
    VEGETABLES = "vegetables"
    DAIRY = "dairy"
    MEAT = "meat"
    BAKERY = "bakery"
    OTHER = "other"


class Packaging(StrEnum):
    """Packaging types understood by the prediction engine."""

    NONE = "none"
    PLASTIC = "plastic"
    PAPER = "paper"
    GLASS = "glass"
    VACUUM = "vacuum"


class RiskLevel(StrEnum):
    """Coarse spoilage risk tier."""

    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


@dataclass(frozen=True)
class FoodAttributes:
    """Storage conditions and identity of a food item to predict."""

    name: str
    category: str
    temperature: float
    humidity: float
    packaging: str


@dataclass(frozen=True)
class PredictionResult:
    """Predicted remaining shelf life."""

    days: float
    risk: RiskLevel


@dataclass(frozen=True)
class FoodItemDraft:
    """A saved item before the store assigns identity and timestamps."""

    name: str
    category: str
    expiry_date: datetime
    expiry_days: float
    temperature: float
    humidity: float
    packaging: str


@dataclass(frozen=True)
class SavedFoodItem:
    """A persisted prediction tracked in the inventory."""

    id: str
    name: str
    category: str
    expiry_date: datetime
    expiry_days: float
    temperature: float
    humidity: float
    packaging: str
    created_at: datetime
