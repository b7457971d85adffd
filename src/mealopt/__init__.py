"""Meal-plan optimization: genetic search over a food catalog."""

__version__ = "0.1.0"
