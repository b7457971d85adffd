"""Application settings and configuration management."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

import yaml

from mealopt.optimizer.models import SearchParameters


def _default_config_dir() -> Path:
    """Return the default configuration directory."""
    return Path.home() / ".mealopt"


@dataclass
class OptimizationConfig:
    """Genetic search configuration."""

    population_size: int = 50
    generations: int = 100
    mutation_rate: float = 0.10
    elitism_fraction: float = 0.20
    tournament_size: int = 3
    min_candidates: int = 3
    seed: Optional[int] = None

    def to_parameters(self) -> SearchParameters:
        """Convert to SearchParameters for the optimizer."""
        return SearchParameters(
            population_size=self.population_size,
            generations=self.generations,
            mutation_rate=self.mutation_rate,
            elitism_fraction=self.elitism_fraction,
            tournament_size=self.tournament_size,
            min_candidates=self.min_candidates,
        )


@dataclass
class DefaultsConfig:
    """Default values for various operations."""

    meals_per_day: int = 3
    max_budget: float = 100.0
    output_format: str = "table"  # "table" or "json"
    catalog_path: Optional[Path] = None  # None uses the built-in sample catalog


@dataclass
class Settings:
    """Main application settings."""

    optimization: OptimizationConfig = field(default_factory=OptimizationConfig)
    defaults: DefaultsConfig = field(default_factory=DefaultsConfig)

    @classmethod
    def load(cls, config_path: Optional[Path] = None) -> "Settings":
        """Load settings from YAML file or return defaults.

        Args:
            config_path: Path to config.yaml. If None, uses ~/.mealopt/config.yaml

        Returns:
            Settings instance
        """
        if config_path is None:
            config_path = _default_config_dir() / "config.yaml"

        if not config_path.exists():
            return cls()

        with open(config_path) as f:
            data = yaml.safe_load(f) or {}

        settings = cls()

        # Parse optimization config
        if "optimization" in data:
            opt_data = data["optimization"] or {}
            opt = settings.optimization
            for key in ("population_size", "generations", "tournament_size", "min_candidates"):
                if key in opt_data:
                    setattr(opt, key, int(opt_data[key]))
            for key in ("mutation_rate", "elitism_fraction"):
                if key in opt_data:
                    setattr(opt, key, float(opt_data[key]))
            if opt_data.get("seed") is not None:
                opt.seed = int(opt_data["seed"])

        # Parse defaults
        if "defaults" in data:
            def_data = data["defaults"] or {}
            if "meals_per_day" in def_data:
                settings.defaults.meals_per_day = int(def_data["meals_per_day"])
            if "max_budget" in def_data:
                settings.defaults.max_budget = float(def_data["max_budget"])
            if "output_format" in def_data:
                settings.defaults.output_format = def_data["output_format"]
            if def_data.get("catalog_path"):
                settings.defaults.catalog_path = Path(def_data["catalog_path"]).expanduser()

        return settings

    def save(self, config_path: Optional[Path] = None) -> None:
        """Save current settings to YAML file.

        Args:
            config_path: Path to save config.yaml. If None, uses ~/.mealopt/config.yaml
        """
        if config_path is None:
            config_path = _default_config_dir() / "config.yaml"

        config_path.parent.mkdir(parents=True, exist_ok=True)

        with open(config_path, "w") as f:
            yaml.dump(self.to_dict(), f, default_flow_style=False, sort_keys=False)

    def to_dict(self) -> dict:
        return {
            "optimization": {
                "population_size": self.optimization.population_size,
                "generations": self.optimization.generations,
                "mutation_rate": self.optimization.mutation_rate,
                "elitism_fraction": self.optimization.elitism_fraction,
                "tournament_size": self.optimization.tournament_size,
                "min_candidates": self.optimization.min_candidates,
                "seed": self.optimization.seed,
            },
            "defaults": {
                "meals_per_day": self.defaults.meals_per_day,
                "max_budget": self.defaults.max_budget,
                "output_format": self.defaults.output_format,
                "catalog_path": (
                    str(self.defaults.catalog_path) if self.defaults.catalog_path else None
                ),
            },
        }


# Global settings instance (lazy loaded)
_settings: Optional[Settings] = None


def get_settings() -> Settings:
    """Get the global settings instance, loading from disk if needed."""
    global _settings
    if _settings is None:
        _settings = Settings.load()
    return _settings


def reload_settings() -> Settings:
    """Force reload settings from disk."""
    global _settings
    _settings = Settings.load()
    return _settings
