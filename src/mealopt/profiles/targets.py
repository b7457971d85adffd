"""Daily calorie and macro targets derived from a user profile.

Uses the Mifflin-St Jeor equation for BMR, an activity multiplier for
TDEE, and a goal factor for the calorie target. Macro targets follow the
calorie target: keto plans get 5% of calories from carbs with fat filling
the remainder, everything else gets 45% carbs and 30% fat.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional

from mealopt.optimizer.models import OptimizationConstraints, UserProfile


class ActivityLevel(Enum):
    """Activity level used for the TDEE multiplier."""
    SEDENTARY = "sedentary"
    LIGHT = "light"
    MODERATE = "moderate"
    HIGH = "high"
    ATHLETE = "athlete"


class Goal(Enum):
    """Body composition goal."""
    MAINTAIN = "maintain"
    LOSE_WEIGHT = "lose_weight"
    GAIN_WEIGHT = "gain_weight"
    MUSCLE_GAIN = "muscle_gain"


ACTIVITY_MULTIPLIERS = {
    ActivityLevel.SEDENTARY: 1.2,
    ActivityLevel.LIGHT: 1.375,
    ActivityLevel.MODERATE: 1.55,
    ActivityLevel.HIGH: 1.725,
    ActivityLevel.ATHLETE: 1.9,
}
# Used when the activity level is missing or unrecognized
DEFAULT_ACTIVITY_MULTIPLIER = 1.5

GOAL_FACTORS = {
    Goal.LOSE_WEIGHT: 0.8,
    Goal.GAIN_WEIGHT: 1.2,
    Goal.MUSCLE_GAIN: 1.1,
    Goal.MAINTAIN: 1.0,
}

# Protein in grams per kg body weight
PROTEIN_PER_KG = {
    Goal.MUSCLE_GAIN: 2.2,
    Goal.LOSE_WEIGHT: 1.8,
}
DEFAULT_PROTEIN_PER_KG = 1.6

DEFAULT_MEALS_PER_DAY = 3
DEFAULT_DAILY_BUDGET = 100.0

# Keto fat fills the calories left after protein and carbs; never below this
MIN_FAT_GRAMS = 1.0

# Fields that make a profile complete enough to plan from
ESSENTIAL_FIELDS = (
    "age",
    "weight_kg",
    "height_cm",
    "gender",
    "activity_level",
    "goal",
    "meals_per_day",
)


@dataclass(frozen=True)
class NutritionTargets:
    """Calculated daily targets for one profile."""

    calories: float
    protein_grams: float
    carbs_grams: float
    fat_grams: float
    meals_per_day: int
    max_budget: float
    bmr: Optional[float] = None
    tdee: Optional[float] = None

    def to_constraints(self) -> OptimizationConstraints:
        """Convert to optimizer constraints."""
        return OptimizationConstraints(
            target_calories=self.calories,
            target_protein_grams=self.protein_grams,
            target_carbs_grams=self.carbs_grams,
            target_fat_grams=self.fat_grams,
            meals_per_day=self.meals_per_day,
            max_budget=self.max_budget,
        )

    def nutrition_goals(self) -> dict[str, int]:
        """Rounded macro goals for display."""
        return {
            "protein": round(self.protein_grams),
            "carbs": round(self.carbs_grams),
            "fat": round(self.fat_grams),
        }


def _parse_goal(goal: Optional[str]) -> Goal:
    try:
        return Goal((goal or "").lower())
    except ValueError:
        return Goal.MAINTAIN


def calculate_bmr(age: float, weight_kg: float, height_cm: float, gender: Optional[str]) -> float:
    """Basal Metabolic Rate (Mifflin-St Jeor). Anything but "male" uses the female offset."""
    base = 10 * weight_kg + 6.25 * height_cm - 5 * age
    if (gender or "").lower() == "male":
        return base + 5
    return base - 161


def calculate_tdee(bmr: float, activity_level: Optional[str]) -> float:
    """Total Daily Energy Expenditure."""
    try:
        multiplier = ACTIVITY_MULTIPLIERS[ActivityLevel((activity_level or "").lower())]
    except ValueError:
        multiplier = DEFAULT_ACTIVITY_MULTIPLIER
    return bmr * multiplier


def calculate_target_calories(tdee: float, goal: Optional[str]) -> float:
    return tdee * GOAL_FACTORS[_parse_goal(goal)]


def calculate_protein_target(weight_kg: float, goal: Optional[str]) -> float:
    return weight_kg * PROTEIN_PER_KG.get(_parse_goal(goal), DEFAULT_PROTEIN_PER_KG)


def calculate_macro_targets(
    calories: float, protein_grams: float, keto: bool = False
) -> tuple[float, float]:
    """Return (carbs_grams, fat_grams) for a calorie and protein target."""
    if keto:
        carbs = calories * 0.05 / 4
        fat = max(MIN_FAT_GRAMS, (calories - protein_grams * 4 - carbs * 4) / 9)
    else:
        carbs = calories * 0.45 / 4
        fat = calories * 0.30 / 9
    return carbs, fat


def has_biometrics(profile: UserProfile) -> bool:
    return all(
        v is not None for v in (profile.age, profile.weight_kg, profile.height_cm)
    )


def calculate_targets(profile: UserProfile) -> Optional[NutritionTargets]:
    """Calculate daily targets for a profile.

    Explicit ``target_calories`` and ``target_protein`` on the profile win
    over calculated values.

    Returns:
        NutritionTargets, or None if the profile has neither biometrics
        nor explicit calorie and protein targets.
    """
    bmr = tdee = None
    if has_biometrics(profile):
        bmr = calculate_bmr(
            profile.age, profile.weight_kg, profile.height_cm, profile.gender
        )
        tdee = calculate_tdee(bmr, profile.activity_level)

    if profile.target_calories is not None:
        calories = float(profile.target_calories)
    elif tdee is not None:
        calories = calculate_target_calories(tdee, profile.goal)
    else:
        return None

    if profile.target_protein is not None:
        protein = float(profile.target_protein)
    elif profile.weight_kg is not None:
        protein = calculate_protein_target(profile.weight_kg, profile.goal)
    else:
        return None

    keto = "keto" in profile.dietary_restrictions
    carbs, fat = calculate_macro_targets(calories, protein, keto=keto)

    meals_per_day = (
        profile.meals_per_day
        if profile.meals_per_day is not None
        else DEFAULT_MEALS_PER_DAY
    )
    if profile.budget_per_meal is not None:
        max_budget = profile.budget_per_meal * meals_per_day
    else:
        max_budget = DEFAULT_DAILY_BUDGET

    return NutritionTargets(
        calories=calories,
        protein_grams=protein,
        carbs_grams=carbs,
        fat_grams=fat,
        meals_per_day=meals_per_day,
        max_budget=max_budget,
        bmr=bmr,
        tdee=tdee,
    )


def profile_completeness(profile: UserProfile) -> float:
    """Fraction of essential profile fields that are filled in."""
    filled = [f for f in ESSENTIAL_FIELDS if getattr(profile, f) is not None]
    return len(filled) / len(ESSENTIAL_FIELDS)


def targets_to_dict(targets: NutritionTargets) -> dict:
    """Convert NutritionTargets to dict for JSON output."""
    return {
        "target_calories": round(targets.calories),
        "meals_per_day": targets.meals_per_day,
        "max_budget": targets.max_budget,
        "nutrition_goals": targets.nutrition_goals(),
        "reference": {
            "bmr": round(targets.bmr) if targets.bmr is not None else None,
            "tdee": round(targets.tdee) if targets.tdee is not None else None,
        },
    }
