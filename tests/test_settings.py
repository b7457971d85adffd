"""Tests for YAML settings."""

from __future__ import annotations

from pathlib import Path

from mealopt.config.settings import Settings


class TestSettings:
    def test_missing_file_gives_defaults(self, tmp_path):
        settings = Settings.load(tmp_path / "config.yaml")
        assert settings.optimization.population_size == 50
        assert settings.optimization.generations == 100
        assert settings.defaults.output_format == "table"
        assert settings.defaults.catalog_path is None

    def test_partial_file(self, tmp_path):
        path = tmp_path / "config.yaml"
        path.write_text(
            "optimization:\n  generations: 25\n  mutation_rate: 0.2\n  seed: 7\n"
            "defaults:\n  catalog_path: ~/menu.yaml\n"
        )
        settings = Settings.load(path)
        assert settings.optimization.generations == 25
        assert settings.optimization.mutation_rate == 0.2
        assert settings.optimization.seed == 7
        assert settings.optimization.population_size == 50
        assert settings.defaults.catalog_path == Path("~/menu.yaml").expanduser()

    def test_save_and_load(self, tmp_path):
        path = tmp_path / "nested" / "config.yaml"
        settings = Settings()
        settings.optimization.tournament_size = 5
        settings.defaults.meals_per_day = 2
        settings.save(path)

        loaded = Settings.load(path)
        assert loaded.optimization.tournament_size == 5
        assert loaded.defaults.meals_per_day == 2
        assert loaded.optimization.seed is None

    def test_to_parameters(self):
        settings = Settings()
        settings.optimization.elitism_fraction = 0.1
        params = settings.optimization.to_parameters()
        assert params.elitism_fraction == 0.1
        assert params.tournament_size == 3
