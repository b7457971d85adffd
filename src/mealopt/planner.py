"""Profile-level meal planning: derive targets, optimize, degrade gracefully."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Iterable, Optional

from mealopt.optimizer.engine import optimize_meal_plan
from mealopt.optimizer.filters import filter_compatible
from mealopt.optimizer.models import (
    FoodItem,
    InsufficientCandidatesError,
    MealPlanResult,
    RandomSource,
    SearchParameters,
    UserProfile,
)
from mealopt.optimizer.plan import greedy_fallback
from mealopt.profiles.targets import NutritionTargets, calculate_targets

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PlanResponse:
    """A meal plan together with the targets it was built for."""

    targets: NutritionTargets
    result: MealPlanResult

    @property
    def target_calories(self) -> int:
        return round(self.targets.calories)

    @property
    def meals_per_day(self) -> int:
        return self.targets.meals_per_day

    @property
    def nutrition_goals(self) -> dict[str, int]:
        return self.targets.nutrition_goals()


def generate_meal_plan(
    profile: UserProfile,
    catalog: Iterable[FoodItem],
    rng: Optional[RandomSource] = None,
    params: Optional[SearchParameters] = None,
) -> Optional[PlanResponse]:
    """Plan a day of meals for a user profile.

    When too few foods are compatible for the genetic search, the greedy
    fallback runs over whatever is compatible. That plan may be empty.

    Returns:
        PlanResponse, or None if the profile lacks the data to compute
        targets.

    Raises:
        InvalidConstraintsError: If the derived targets are not positive.
    """
    targets = calculate_targets(profile)
    if targets is None:
        logger.debug("Profile incomplete, cannot compute targets")
        return None

    constraints = targets.to_constraints()
    catalog = list(catalog)

    try:
        result = optimize_meal_plan(catalog, profile, constraints, rng, params)
    except InsufficientCandidatesError as e:
        logger.warning("Falling back to greedy plan: %s", e)
        candidates = filter_compatible(catalog, profile)
        result = greedy_fallback(candidates, constraints, reason=str(e))

    return PlanResponse(targets=targets, result=result)
