"""Optimization engine for daily meal plans."""

from mealopt.optimizer.engine import optimize_meal_plan
from mealopt.optimizer.filters import filter_compatible
from mealopt.optimizer.genetic import GeneticSearch, optimize
from mealopt.optimizer.models import (
    FoodItem,
    InsufficientCandidatesError,
    InvalidConstraintsError,
    MealPlanError,
    MealPlanResult,
    NutritionTotals,
    OptimizationConstraints,
    SearchParameters,
    UserProfile,
)
from mealopt.optimizer.plan import format_meal_plan, greedy_fallback

__all__ = [
    "FoodItem",
    "UserProfile",
    "OptimizationConstraints",
    "SearchParameters",
    "NutritionTotals",
    "MealPlanResult",
    "MealPlanError",
    "InvalidConstraintsError",
    "InsufficientCandidatesError",
    "GeneticSearch",
    "filter_compatible",
    "optimize",
    "format_meal_plan",
    "greedy_fallback",
    "optimize_meal_plan",
]
