"""Data models for meal-plan optimization requests and results."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional, Protocol

# Label cycle for meal slots. Slot indices past the end wrap around.
MEAL_LABELS: tuple[str, ...] = ("breakfast", "lunch", "dinner")

# A candidate solution: one tuple of candidate indices per meal slot.
Slot = tuple[int, ...]
Individual = tuple[Slot, ...]


class RandomSource(Protocol):
    """Source of randomness for the search.

    ``random.Random`` satisfies this protocol, so a seeded instance
    reproduces a run exactly.
    """

    def random(self) -> float: ...

    def randrange(self, stop: int) -> int: ...


@dataclass(frozen=True)
class FoodItem:
    """A catalog entry. Nutrition values are per serving."""

    id: str
    name: str
    calories: float
    protein_grams: float
    carbs_grams: float
    fat_grams: float
    fiber_grams: float = 0.0
    price: float = 0.0  # dollars
    dietary_tags: frozenset[str] = frozenset()
    allergen_tags: frozenset[str] = frozenset()
    eligible_meal_slots: frozenset[str] = frozenset(MEAL_LABELS)
    restaurant: Optional[str] = None
    description: Optional[str] = None

    def to_dict(self) -> dict:
        """Convert to a JSON-friendly dict."""
        return {
            "id": self.id,
            "name": self.name,
            "restaurant": self.restaurant,
            "description": self.description,
            "calories": self.calories,
            "protein": self.protein_grams,
            "carbs": self.carbs_grams,
            "fat": self.fat_grams,
            "fiber": self.fiber_grams,
            "price": self.price,
            "dietary": sorted(self.dietary_tags),
            "allergens": sorted(self.allergen_tags),
            "meal_type": [m for m in MEAL_LABELS if m in self.eligible_meal_slots],
        }


@dataclass
class UserProfile:
    """Dietary profile of the user being planned for.

    Only ``allergies`` and ``dietary_restrictions`` affect the optimizer.
    The biometric fields feed the target calculator in
    ``mealopt.profiles.targets``.
    """

    allergies: set[str] = field(default_factory=set)
    dietary_restrictions: set[str] = field(default_factory=set)
    age: Optional[int] = None
    weight_kg: Optional[float] = None
    height_cm: Optional[float] = None
    gender: Optional[str] = None
    activity_level: Optional[str] = None
    goal: Optional[str] = None
    meals_per_day: Optional[int] = None
    target_calories: Optional[float] = None
    target_protein: Optional[float] = None
    budget_per_meal: Optional[float] = None


@dataclass(frozen=True)
class OptimizationConstraints:
    """Daily nutrition and budget targets.

    ``max_budget`` is the total across all meals of the day.
    """

    target_calories: float
    target_protein_grams: float
    target_carbs_grams: float
    target_fat_grams: float
    meals_per_day: int = 3
    max_budget: float = 100.0

    def validate(self) -> None:
        """Raise InvalidConstraintsError if any target would divide by zero."""
        targets = {
            "target_calories": self.target_calories,
            "target_protein_grams": self.target_protein_grams,
            "target_carbs_grams": self.target_carbs_grams,
            "target_fat_grams": self.target_fat_grams,
            "max_budget": self.max_budget,
        }
        invalid = [name for name, value in targets.items() if not value > 0]
        if invalid:
            raise InvalidConstraintsError(
                f"Targets must be positive: {', '.join(invalid)}"
            )
        if self.meals_per_day < 1:
            raise InvalidConstraintsError(
                f"meals_per_day must be at least 1, got {self.meals_per_day}"
            )


@dataclass(frozen=True)
class SearchParameters:
    """Tuning knobs for the genetic search."""

    population_size: int = 50
    generations: int = 100
    mutation_rate: float = 0.10
    elitism_fraction: float = 0.20
    tournament_size: int = 3
    min_candidates: int = 3
    initial_items_per_slot: int = 3
    max_items_per_slot: int = 4


@dataclass(frozen=True)
class NutritionTotals:
    """Aggregated nutrition for a set of foods."""

    calories: float = 0.0
    protein: float = 0.0
    carbs: float = 0.0
    fat: float = 0.0
    cost: float = 0.0

    def to_dict(self) -> dict[str, float]:
        return {
            "calories": self.calories,
            "protein": self.protein,
            "carbs": self.carbs,
            "fat": self.fat,
            "cost": self.cost,
        }


@dataclass(frozen=True)
class SearchOutcome:
    """Best individual found by a search run plus its trajectory."""

    best: Individual
    best_fitness: float
    history: tuple[float, ...]  # best-ever fitness after each generation


@dataclass(frozen=True)
class MealPlanResult:
    """Complete output of one optimization call."""

    daily_plan: dict[str, tuple[FoodItem, ...]]
    actual_nutrition: NutritionTotals
    optimization_score: float
    used_fallback: bool = False
    fallback_reason: Optional[str] = None
    generations_run: int = 0
    best_fitness_history: tuple[float, ...] = ()

    @property
    def is_empty(self) -> bool:
        """True when no meal slot received any food."""
        return not any(self.daily_plan.values())


# Custom exceptions


class MealPlanError(Exception):
    """Base exception for mealopt errors."""

    pass


class InvalidConstraintsError(MealPlanError):
    """Raised when a target is not positive or meals_per_day < 1."""

    pass


class InsufficientCandidatesError(MealPlanError):
    """Raised when too few foods survive the compatibility filter."""

    def __init__(self, message: str, available: int = 0, required: int = 3):
        super().__init__(message)
        self.available = available
        self.required = required


class CatalogError(MealPlanError):
    """Raised when a catalog file cannot be parsed into food items."""

    pass
