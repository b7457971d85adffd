"""Calorie and macro targets from user profiles."""

from mealopt.profiles.targets import NutritionTargets, calculate_targets

__all__ = ["NutritionTargets", "calculate_targets"]
