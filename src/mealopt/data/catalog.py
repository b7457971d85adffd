"""Food catalog loading and the built-in sample catalog.

Catalog files are YAML or JSON. Either a top-level list of food mappings
or a mapping with a ``foods`` key is accepted. Each food uses the keys:

    id, name, calories, protein, carbs, fat      (required)
    fiber, price, dietary, allergens, meal_type,
    restaurant, description                      (optional)
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, Union

import yaml

from mealopt.optimizer.models import MEAL_LABELS, CatalogError, FoodItem

REQUIRED_KEYS = ("id", "name", "calories", "protein", "carbs", "fat")


def food_from_dict(data: dict[str, Any]) -> FoodItem:
    """Build a FoodItem from a catalog mapping.

    Raises:
        CatalogError: If a required key is missing or a number is malformed.
    """
    missing = [key for key in REQUIRED_KEYS if key not in data]
    if missing:
        raise CatalogError(
            f"Food {data.get('id', '<unknown>')!r} is missing keys: {', '.join(missing)}"
        )

    meal_types = data.get("meal_type") or list(MEAL_LABELS)
    if isinstance(meal_types, str):
        meal_types = [meal_types]

    try:
        return FoodItem(
            id=str(data["id"]),
            name=str(data["name"]),
            calories=float(data["calories"]),
            protein_grams=float(data["protein"]),
            carbs_grams=float(data["carbs"]),
            fat_grams=float(data["fat"]),
            fiber_grams=float(data.get("fiber", 0) or 0),
            price=float(data.get("price", 0) or 0),
            dietary_tags=frozenset(data.get("dietary") or ()),
            allergen_tags=frozenset(data.get("allergens") or ()),
            eligible_meal_slots=frozenset(meal_types),
            restaurant=data.get("restaurant"),
            description=data.get("description"),
        )
    except (TypeError, ValueError) as e:
        raise CatalogError(f"Food {data['id']!r} has invalid values: {e}") from e


def parse_catalog(data: Any) -> list[FoodItem]:
    """Parse already-loaded catalog data."""
    if isinstance(data, dict):
        data = data.get("foods")
    if not isinstance(data, list):
        raise CatalogError("Catalog must be a list of foods or a mapping with 'foods'")
    return [food_from_dict(entry) for entry in data]


def load_catalog(path: Union[str, Path]) -> list[FoodItem]:
    """Load a catalog from a YAML or JSON file.

    JSON is a subset of YAML, so one parser handles both.
    """
    path = Path(path)
    if not path.exists():
        raise CatalogError(f"Catalog file not found: {path}")

    with open(path) as f:
        try:
            data = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise CatalogError(f"Could not parse catalog {path}: {e}") from e

    return parse_catalog(data)


# Restaurant menu used for demos and tests
SAMPLE_FOODS: list[dict[str, Any]] = [
    {
        "id": "f1",
        "name": "Quinoa Power Bowl",
        "restaurant": "GreenEats",
        "description": "Quinoa, roasted vegetables, chickpeas, tahini dressing",
        "calories": 450,
        "protein": 18,
        "carbs": 65,
        "fat": 12,
        "fiber": 8,
        "price": 14.99,
        "dietary": ["vegetarian", "vegan", "gluten_free"],
        "allergens": ["sesame"],
        "meal_type": ["lunch", "dinner"],
    },
    {
        "id": "f2",
        "name": "Grilled Chicken & Sweet Potato",
        "restaurant": "FitFuel",
        "description": "Herb-grilled chicken breast, roasted sweet potato, steamed broccoli",
        "calories": 380,
        "protein": 35,
        "carbs": 28,
        "fat": 8,
        "fiber": 6,
        "price": 16.99,
        "dietary": ["high_protein", "paleo"],
        "allergens": [],
        "meal_type": ["lunch", "dinner"],
    },
    {
        "id": "f3",
        "name": "Overnight Oats Bowl",
        "restaurant": "Morning Fresh",
        "description": "Steel-cut oats, berries, almond butter, chia seeds",
        "calories": 320,
        "protein": 12,
        "carbs": 45,
        "fat": 11,
        "fiber": 9,
        "price": 9.99,
        "dietary": ["vegetarian", "high_fiber"],
        "allergens": ["nuts"],
        "meal_type": ["breakfast"],
    },
    {
        "id": "f4",
        "name": "Salmon & Avocado Salad",
        "restaurant": "Ocean Fresh",
        "description": "Wild-caught salmon, mixed greens, avocado, olive oil dressing",
        "calories": 420,
        "protein": 32,
        "carbs": 12,
        "fat": 28,
        "fiber": 7,
        "price": 18.99,
        "dietary": ["keto", "high_protein", "omega3"],
        "allergens": ["fish"],
        "meal_type": ["lunch", "dinner"],
    },
    {
        "id": "f5",
        "name": "Greek Yogurt Parfait",
        "restaurant": "Morning Fresh",
        "description": "Greek yogurt, granola, fresh berries, honey drizzle",
        "calories": 280,
        "protein": 20,
        "carbs": 35,
        "fat": 6,
        "fiber": 4,
        "price": 8.99,
        "dietary": ["vegetarian", "high_protein"],
        "allergens": ["dairy", "gluten"],
        "meal_type": ["breakfast"],
    },
]


def sample_catalog() -> list[FoodItem]:
    """Return the built-in sample catalog as FoodItems."""
    return parse_catalog(SAMPLE_FOODS)
