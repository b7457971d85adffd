"""Turn search results into daily meal plans, with a greedy fallback."""

from __future__ import annotations

from typing import Optional, Sequence

from mealopt.optimizer.fitness import (
    NutrientTable,
    calculate_fitness,
    score_totals,
    sum_nutrition,
    variety_bonus,
)
from mealopt.optimizer.models import (
    MEAL_LABELS,
    FoodItem,
    Individual,
    MealPlanResult,
    OptimizationConstraints,
    SearchOutcome,
)

# Foods kept per meal by the greedy fallback
FALLBACK_FOODS_PER_MEAL = 2


def meal_label(slot_index: int, meals_per_day: int) -> str:
    """Label for a slot position. Positions past "dinner" wrap to "breakfast"."""
    return MEAL_LABELS[(slot_index % meals_per_day) % len(MEAL_LABELS)]


def has_numeric_nutrition(food: FoodItem) -> bool:
    """True if every value the fallback sums converts to float."""
    try:
        for value in (
            food.calories,
            food.protein_grams,
            food.carbs_grams,
            food.fat_grams,
            food.price,
        ):
            float(value)
    except (TypeError, ValueError):
        return False
    return True


def format_meal_plan(
    best: Individual,
    candidates: Sequence[FoodItem],
    constraints: OptimizationConstraints,
    outcome: Optional[SearchOutcome] = None,
) -> MealPlanResult:
    """Resolve an individual's indices into a labelled daily plan.

    Slots that wrap onto an existing label are appended to it in slot
    order. Indices outside the candidate list are dropped.

    Args:
        best: Individual to format
        candidates: Candidate list the individual indexes into
        constraints: Daily targets, used for labels and the score
        outcome: Search outcome, if available, for trajectory metadata

    Returns:
        MealPlanResult scored against ``constraints``.
    """
    table = NutrientTable(candidates)
    plan: dict[str, list[FoodItem]] = {}

    for slot_index, slot in enumerate(best):
        label = meal_label(slot_index, constraints.meals_per_day)
        foods = [candidates[i] for i in slot if 0 <= i < len(candidates)]
        plan.setdefault(label, []).extend(foods)

    return MealPlanResult(
        daily_plan={label: tuple(foods) for label, foods in plan.items()},
        actual_nutrition=table.totals(best),
        optimization_score=calculate_fitness(best, table, constraints),
        generations_run=len(outcome.history) if outcome else 0,
        best_fitness_history=outcome.history if outcome else (),
    )


def greedy_fallback(
    candidates: Sequence[FoodItem],
    constraints: OptimizationConstraints,
    reason: Optional[str] = None,
) -> MealPlanResult:
    """Deterministic plan built from calorie closeness alone.

    For each meal label, eligible foods are ranked by how close their
    calories are to an even per-meal split and the top two are kept.
    Labels without eligible foods are left out; an empty candidate list
    yields an empty plan rather than an error. Foods with non-numeric
    nutrition values are skipped.
    """
    calories_per_meal = constraints.target_calories / constraints.meals_per_day
    labels = MEAL_LABELS[: min(constraints.meals_per_day, len(MEAL_LABELS))]
    usable = [f for f in candidates if has_numeric_nutrition(f)]

    plan: dict[str, tuple[FoodItem, ...]] = {}
    for label in labels:
        eligible = [f for f in usable if label in f.eligible_meal_slots]
        if not eligible:
            continue
        ranked = sorted(
            eligible,
            key=lambda f: 1 - abs(float(f.calories) - calories_per_meal) / calories_per_meal,
            reverse=True,
        )
        plan[label] = tuple(ranked[:FALLBACK_FOODS_PER_MEAL])

    chosen = [food for foods in plan.values() for food in foods]
    nutrition = sum_nutrition(chosen)

    score = 0.0
    if chosen:
        positions = {id(food): i for i, food in enumerate(usable)}
        as_individual: Individual = (tuple(positions[id(f)] for f in chosen),)
        bonus = variety_bonus(as_individual, len(usable))
        score = score_totals(nutrition, constraints, bonus)

    return MealPlanResult(
        daily_plan=plan,
        actual_nutrition=nutrition,
        optimization_score=score,
        used_fallback=True,
        fallback_reason=reason,
    )
