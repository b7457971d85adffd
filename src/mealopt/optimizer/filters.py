"""Allergy and dietary-restriction filtering of the food catalog."""

from __future__ import annotations

import logging
from typing import Iterable

from mealopt.optimizer.models import (
    FoodItem,
    InsufficientCandidatesError,
    UserProfile,
)

logger = logging.getLogger(__name__)

# Keto allows at most this many grams of carbs per item
KETO_MAX_CARBS = 10.0


def is_compatible(food: FoodItem, profile: UserProfile) -> bool:
    """Check a single food against the profile's allergies and restrictions.

    Every active restriction must hold. Restrictions with no rule
    (e.g. "paleo") impose nothing.
    """
    if food.allergen_tags & set(profile.allergies):
        return False

    restrictions = set(profile.dietary_restrictions)
    tags = food.dietary_tags

    if "vegetarian" in restrictions and not tags & {"vegetarian", "vegan"}:
        return False

    if "vegan" in restrictions and "vegan" not in tags:
        return False

    if "keto" in restrictions and food.carbs_grams > KETO_MAX_CARBS:
        return False

    if "gluten_free" in restrictions and "gluten_free" not in tags:
        return False

    return True


def filter_compatible(
    catalog: Iterable[FoodItem], profile: UserProfile
) -> list[FoodItem]:
    """Return catalog items compatible with the profile, in catalog order."""
    catalog = list(catalog)
    compatible = [food for food in catalog if is_compatible(food, profile)]
    logger.debug(
        "Filtered catalog: %d of %d foods compatible", len(compatible), len(catalog)
    )
    return compatible


def require_candidates(candidates: list[FoodItem], minimum: int = 3) -> None:
    """Raise InsufficientCandidatesError if fewer than ``minimum`` foods remain.

    The search cannot produce meaningful variety below this threshold.
    """
    if len(candidates) < minimum:
        raise InsufficientCandidatesError(
            f"Not enough compatible foods available: "
            f"found {len(candidates)}, need at least {minimum}",
            available=len(candidates),
            required=minimum,
        )
