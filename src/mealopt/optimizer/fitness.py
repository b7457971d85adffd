"""Nutrition aggregation and fitness scoring for candidate meal plans.

Fitness starts at 100 and subtracts weighted relative errors against the
daily targets. Calorie accuracy and protein sufficiency dominate; protein
and budget are only penalized in one direction (shortfall and overrun).
A variety bonus rewards using many distinct candidates.
"""

from __future__ import annotations

from typing import Sequence

import numpy as np

from mealopt.optimizer.models import (
    FoodItem,
    Individual,
    NutritionTotals,
    OptimizationConstraints,
)

# Penalty weights per relative error
CALORIE_WEIGHT = 40.0
PROTEIN_WEIGHT = 30.0
CARBS_WEIGHT = 15.0
FAT_WEIGHT = 10.0
BUDGET_WEIGHT = 20.0
VARIETY_WEIGHT = 10.0

BASE_FITNESS = 100.0

# Column order of the nutrient table
COLUMNS = ("calories", "protein", "carbs", "fat", "cost")


class NutrientTable:
    """Per-candidate nutrition facts as a dense matrix.

    Row ``i`` holds calories, protein, carbs, fat and price of
    ``candidates[i]``.
    """

    def __init__(self, candidates: Sequence[FoodItem]):
        self.size = len(candidates)
        self.matrix = np.array(
            [
                [f.calories, f.protein_grams, f.carbs_grams, f.fat_grams, f.price]
                for f in candidates
            ],
            dtype=float,
        ).reshape(self.size, len(COLUMNS))

    def valid_indices(self, individual: Individual) -> list[int]:
        """Flatten an individual, dropping indices outside the table."""
        return [i for slot in individual for i in slot if 0 <= i < self.size]

    def totals(self, individual: Individual) -> NutritionTotals:
        """Sum nutrition over every selected item, duplicates included."""
        indices = self.valid_indices(individual)
        sums = self.matrix[indices].sum(axis=0)
        return NutritionTotals(**{name: float(v) for name, v in zip(COLUMNS, sums)})


def sum_nutrition(foods: Sequence[FoodItem]) -> NutritionTotals:
    """Aggregate nutrition over an explicit list of foods."""
    return NutrientTable(foods).totals((tuple(range(len(foods))),))


def score_totals(
    nutrition: NutritionTotals,
    constraints: OptimizationConstraints,
    variety_bonus: float,
) -> float:
    """Compute fitness from aggregated nutrition. Never negative."""
    calorie_error = (
        abs(nutrition.calories - constraints.target_calories)
        / constraints.target_calories
    )
    protein_error = max(
        0.0,
        (constraints.target_protein_grams - nutrition.protein)
        / constraints.target_protein_grams,
    )
    carbs_error = (
        abs(nutrition.carbs - constraints.target_carbs_grams)
        / constraints.target_carbs_grams
    )
    fat_error = (
        abs(nutrition.fat - constraints.target_fat_grams) / constraints.target_fat_grams
    )
    budget_error = max(
        0.0, (nutrition.cost - constraints.max_budget) / constraints.max_budget
    )

    penalty = (
        calorie_error * CALORIE_WEIGHT
        + protein_error * PROTEIN_WEIGHT
        + carbs_error * CARBS_WEIGHT
        + fat_error * FAT_WEIGHT
        + budget_error * BUDGET_WEIGHT
    )
    fitness = BASE_FITNESS - penalty + variety_bonus * VARIETY_WEIGHT
    return max(0.0, fitness)


def variety_bonus(individual: Individual, candidate_count: int) -> float:
    """Fraction of the candidate list used at least once."""
    if candidate_count <= 0:
        return 0.0
    distinct = {i for slot in individual for i in slot}
    return len(distinct) / candidate_count


def calculate_fitness(
    individual: Individual,
    table: NutrientTable,
    constraints: OptimizationConstraints,
) -> float:
    """Score an individual against the daily targets (higher is better)."""
    nutrition = table.totals(individual)
    return score_totals(nutrition, constraints, variety_bonus(individual, table.size))
