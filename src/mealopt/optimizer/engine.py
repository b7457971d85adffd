"""Top-level optimization entry point: filter, search, format."""

from __future__ import annotations

import logging
import random
from typing import Iterable, Optional

from mealopt.optimizer.filters import filter_compatible, require_candidates
from mealopt.optimizer.genetic import GeneticSearch
from mealopt.optimizer.models import (
    FoodItem,
    MealPlanResult,
    OptimizationConstraints,
    RandomSource,
    SearchParameters,
    UserProfile,
)
from mealopt.optimizer.plan import format_meal_plan, greedy_fallback

logger = logging.getLogger(__name__)


def optimize_meal_plan(
    catalog: Iterable[FoodItem],
    profile: UserProfile,
    constraints: OptimizationConstraints,
    rng: Optional[RandomSource] = None,
    params: Optional[SearchParameters] = None,
) -> MealPlanResult:
    """Build the best daily meal plan the genetic search can find.

    Args:
        catalog: Full food catalog
        profile: User allergies and dietary restrictions
        constraints: Daily nutrition and budget targets
        rng: Random source. Pass a seeded ``random.Random`` to reproduce a run.
        params: Search parameters

    Returns:
        MealPlanResult. If the search itself fails, the greedy fallback plan
        is returned with ``used_fallback=True``.

    Raises:
        InvalidConstraintsError: If a target is not positive or
            meals_per_day < 1.
        InsufficientCandidatesError: If fewer than ``params.min_candidates``
            foods are compatible with the profile.
    """
    params = params or SearchParameters()
    rng = rng if rng is not None else random.Random()

    constraints.validate()
    candidates = filter_compatible(catalog, profile)
    require_candidates(candidates, params.min_candidates)

    try:
        outcome = GeneticSearch(candidates, constraints, rng, params).run()
        return format_meal_plan(outcome.best, candidates, constraints, outcome)
    except Exception as e:
        logger.warning(
            "Optimization failed, falling back to greedy plan: %s", e, exc_info=True
        )
        return greedy_fallback(
            candidates, constraints, reason=f"optimization failed: {e}"
        )
