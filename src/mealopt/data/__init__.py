"""Food catalog data."""

from mealopt.data.catalog import load_catalog, sample_catalog

__all__ = ["load_catalog", "sample_catalog"]
