"""Pytest fixtures for mealopt tests."""

from __future__ import annotations

import random

import pytest

from mealopt.data.catalog import sample_catalog
from mealopt.optimizer.models import (
    FoodItem,
    OptimizationConstraints,
    SearchParameters,
    UserProfile,
)


@pytest.fixture
def catalog():
    """The five-item sample restaurant catalog."""
    return sample_catalog()


@pytest.fixture
def vegetarian_profile():
    return UserProfile(dietary_restrictions={"vegetarian"})


@pytest.fixture
def constraints():
    """Typical daily targets for the sample catalog."""
    return OptimizationConstraints(
        target_calories=1800,
        target_protein_grams=100,
        target_carbs_grams=200,
        target_fat_grams=60,
        meals_per_day=3,
        max_budget=40,
    )


@pytest.fixture
def small_params():
    """Fast search parameters for tests that don't need full runs."""
    return SearchParameters(population_size=20, generations=15)


@pytest.fixture
def rng():
    return random.Random(42)


@pytest.fixture
def simple_foods():
    """Foods with round numbers, all eligible for every meal."""
    return [
        FoodItem(
            id="a", name="Rice bowl", calories=500, protein_grams=20,
            carbs_grams=80, fat_grams=10, price=8.0,
        ),
        FoodItem(
            id="b", name="Chicken plate", calories=600, protein_grams=50,
            carbs_grams=30, fat_grams=20, price=12.0,
        ),
        FoodItem(
            id="c", name="Salad", calories=200, protein_grams=5,
            carbs_grams=15, fat_grams=12, price=6.0,
        ),
        FoodItem(
            id="d", name="Smoothie", calories=300, protein_grams=25,
            carbs_grams=40, fat_grams=5, price=5.0,
        ),
    ]
