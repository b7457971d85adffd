"""Tests for the allergy and dietary-restriction filter."""

from __future__ import annotations

import pytest

from mealopt.optimizer.filters import (
    filter_compatible,
    is_compatible,
    require_candidates,
)
from mealopt.optimizer.models import (
    FoodItem,
    InsufficientCandidatesError,
    UserProfile,
)


def _names(foods):
    return [f.name for f in foods]


class TestIsCompatible:
    """Tests for single-food compatibility rules."""

    def test_no_restrictions_accepts_everything(self, catalog):
        """An empty profile should accept every food."""
        profile = UserProfile()
        assert all(is_compatible(f, profile) for f in catalog)

    def test_allergy_rejects(self, catalog):
        """Any allergen overlap should reject the food."""
        profile = UserProfile(allergies={"fish"})
        compatible = filter_compatible(catalog, profile)
        assert "Salmon & Avocado Salad" not in _names(compatible)
        assert len(compatible) == 4

    def test_vegan_counts_as_vegetarian(self):
        """Vegetarian restriction should accept vegan-only tagged foods."""
        food = FoodItem(
            id="x", name="Tofu", calories=200, protein_grams=20,
            carbs_grams=5, fat_grams=10, dietary_tags=frozenset({"vegan"}),
        )
        assert is_compatible(food, UserProfile(dietary_restrictions={"vegetarian"}))

    def test_keto_uses_carbs_not_tag(self, catalog):
        """Keto should filter on carbs <= 10g, ignoring the keto tag."""
        compatible = filter_compatible(catalog, UserProfile(dietary_restrictions={"keto"}))
        # The salmon salad is tagged keto but has 12g carbs
        assert compatible == []

    def test_keto_boundary(self):
        """Exactly 10g carbs should pass keto."""
        food = FoodItem(
            id="x", name="Eggs", calories=150, protein_grams=12,
            carbs_grams=10, fat_grams=10,
        )
        assert is_compatible(food, UserProfile(dietary_restrictions={"keto"}))

    def test_gluten_free(self, catalog):
        """Gluten-free should require the gluten_free tag."""
        compatible = filter_compatible(
            catalog, UserProfile(dietary_restrictions={"gluten_free"})
        )
        assert _names(compatible) == ["Quinoa Power Bowl"]

    def test_unknown_restriction_is_ignored(self, catalog):
        """Restrictions without a rule should not exclude anything."""
        compatible = filter_compatible(catalog, UserProfile(dietary_restrictions={"paleo"}))
        assert len(compatible) == len(catalog)

    def test_restrictions_combine(self, catalog):
        """All active restrictions and allergies must hold at once."""
        profile = UserProfile(
            allergies={"dairy"}, dietary_restrictions={"vegetarian"}
        )
        compatible = filter_compatible(catalog, profile)
        assert _names(compatible) == ["Quinoa Power Bowl", "Overnight Oats Bowl"]


class TestFilterProperties:
    """Every surviving item satisfies every active rule."""

    @pytest.mark.parametrize(
        "allergies,restrictions",
        [
            (set(), {"vegetarian"}),
            ({"nuts"}, set()),
            ({"sesame", "gluten"}, {"vegetarian"}),
            (set(), {"vegan", "gluten_free"}),
            ({"dairy"}, {"keto"}),
        ],
    )
    def test_surviving_items_obey_rules(self, catalog, allergies, restrictions):
        profile = UserProfile(allergies=allergies, dietary_restrictions=restrictions)
        for food in filter_compatible(catalog, profile):
            assert not food.allergen_tags & allergies
            if "vegetarian" in restrictions:
                assert food.dietary_tags & {"vegetarian", "vegan"}
            if "vegan" in restrictions:
                assert "vegan" in food.dietary_tags
            if "keto" in restrictions:
                assert food.carbs_grams <= 10
            if "gluten_free" in restrictions:
                assert "gluten_free" in food.dietary_tags

    def test_preserves_catalog_order(self, catalog):
        compatible = filter_compatible(catalog, UserProfile())
        assert [f.id for f in compatible] == [f.id for f in catalog]


class TestSampleScenarios:
    """The vegetarian / vegan scenarios from the sample restaurant menu."""

    def test_vegetarian_leaves_three(self, catalog, vegetarian_profile):
        """Vegetarian should drop the chicken and salmon dishes."""
        compatible = filter_compatible(catalog, vegetarian_profile)
        names = _names(compatible)
        assert len(compatible) == 3
        assert "Grilled Chicken & Sweet Potato" not in names
        assert "Salmon & Avocado Salad" not in names
        # Exactly at the threshold: must not raise
        require_candidates(compatible, 3)

    def test_vegan_leaves_one_and_raises(self, catalog):
        """Adding vegan leaves only the quinoa bowl, below the threshold."""
        profile = UserProfile(dietary_restrictions={"vegetarian", "vegan"})
        compatible = filter_compatible(catalog, profile)
        assert _names(compatible) == ["Quinoa Power Bowl"]

        with pytest.raises(InsufficientCandidatesError) as exc_info:
            require_candidates(compatible, 3)
        assert exc_info.value.available == 1
        assert exc_info.value.required == 3
