"""Rule-based shelf-life prediction engine.

The engine starts from a per-category base lifetime, lets well-known item
names override it, then scales the result by storage temperature, humidity
deviation and packaging before rounding to one decimal place.
"""

import math

from foodwise.domain.errors import ValidationError
from foodwise.domain.food import (
    Category,
    FoodAttributes,
    Packaging,
    PredictionResult,
    RiskLevel,
)

DEFAULT_BASE_DAYS = 3.0
DEFAULT_OPTIMAL_HUMIDITY = 70.0

HIGH_RISK_BELOW_DAYS = 1.5
MEDIUM_RISK_BELOW_DAYS = 3.0

BASE_DAYS: dict[str, float] = {
    Category.FRUITS: 5,
    Category.VEGETABLES: 4,
    Category.DAIRY: 4,
    Category.MEAT: 2,
    Category.BAKERY: 3,
}

OPTIMAL_HUMIDITY: dict[str, float] = {
    Category.FRUITS: 90,
    Category.VEGETABLES: 95,
    Category.DAIRY: 40,
    Category.MEAT: 70,
    Category.BAKERY: 60,
}

# (threshold, multiplier), the first threshold strictly exceeded wins.
TEMPERATURE_TIERS: tuple[tuple[float, float], ...] = (
    (30, 0.2),
    (25, 0.4),
    (20, 0.6),
    (10, 0.8),
    (5, 1.0),
    (0, 1.3),
)
FREEZING_MULTIPLIER = 1.8

HUMIDITY_DEVIATION_TIERS: tuple[tuple[float, float], ...] = (
    (30, 0.6),
    (20, 0.7),
    (10, 0.85),
)

PACKAGING_MULTIPLIERS: dict[str, float] = {
    Packaging.VACUUM: 1.7,
    Packaging.PLASTIC: 1.2,
    Packaging.GLASS: 1.3,
    Packaging.PAPER: 0.9,
    Packaging.NONE: 0.7,
}

CATEGORY_EXAMPLES: dict[str, list[str]] = {
    Category.FRUITS: ["Apple", "Banana", "Orange", "Grapes", "Berries"],
    Category.VEGETABLES: ["Lettuce", "Tomato", "Cucumber", "Carrot", "Broccoli"],
    Category.DAIRY: ["Milk", "Cheese", "Yogurt", "Butter", "Cream"],
    Category.MEAT: ["Chicken", "Beef", "Pork", "Fish", "Turkey"],
    Category.BAKERY: ["Bread", "Pastry", "Cake", "Cookie", "Muffin"],
    Category.OTHER: [],
}


def predict(attrs: FoodAttributes) -> PredictionResult:
    """Predict remaining shelf life in days and classify spoilage risk."""
    days = _name_override(attrs.name)
    if days is None:
        days = BASE_DAYS.get(attrs.category, DEFAULT_BASE_DAYS)
    days *= _temperature_multiplier(attrs.temperature)
    days *= _humidity_multiplier(attrs.category, attrs.humidity)
    days *= PACKAGING_MULTIPLIERS.get(attrs.packaging, 1.0)
    days = round_days(days)
    return PredictionResult(days=days, risk=classify_risk(days))


def classify_risk(days: float) -> RiskLevel:
    """Map a predicted lifetime to a risk tier."""
    if days < HIGH_RISK_BELOW_DAYS:
        return RiskLevel.HIGH
    if days < MEDIUM_RISK_BELOW_DAYS:
        return RiskLevel.MEDIUM
    return RiskLevel.LOW


def round_days(days: float) -> float:
    """Round half-up to one decimal place."""
    return math.floor(days * 10 + 0.5) / 10


def validate_attributes(
    name: str | None,
    category: str | None,
    temperature: float,
    humidity: float,
    packaging: str,
) -> FoodAttributes:
    """Build attributes from user input, rejecting missing name or category."""
    cleaned_name = (name or "").strip()
    if not cleaned_name:
        raise ValidationError("name", "Please enter a food name")
    cleaned_category = (category or "").strip().lower()
    if not cleaned_category:
        raise ValidationError("category", "Please select a food category")
    return FoodAttributes(
        name=cleaned_name,
        category=cleaned_category,
        temperature=float(temperature),
        humidity=float(humidity),
        packaging=(packaging or "").strip().lower(),
    )


def _name_override(name: str) -> float | None:
    lowered = name.lower()
    if "milk" in lowered:
        return 3.0
    if "yogurt" in lowered:
        return 5.0
    if "cottage cheese" in lowered:
        return 4.0
    if "cheese" in lowered and "cottage" not in lowered:
        return 7.0
    if any(word in lowered for word in ("leafy", "lettuce", "spinach")):
        return 2.0
    if "berries" in lowered:
        return 2.0
    if "bread" in lowered:
        return 3.0
    return None


def _temperature_multiplier(temperature: float) -> float:
    for threshold, multiplier in TEMPERATURE_TIERS:
        if temperature > threshold:
            return multiplier
    return FREEZING_MULTIPLIER


def _humidity_multiplier(category: str, humidity: float) -> float:
    optimal = OPTIMAL_HUMIDITY.get(category, DEFAULT_OPTIMAL_HUMIDITY)
    deviation = abs(humidity - optimal)
    for threshold, multiplier in HUMIDITY_DEVIATION_TIERS:
        if deviation > threshold:
            return multiplier
    return 1.0
