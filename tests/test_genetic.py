"""Tests for the genetic meal-plan search."""

from __future__ import annotations

import random

import pytest

from mealopt.optimizer.genetic import GeneticSearch, optimize
from mealopt.optimizer.models import OptimizationConstraints, SearchParameters


class ScriptedRandom:
    """Random source that replays fixed values."""

    def __init__(self, floats=(), ints=()):
        self.floats = list(floats)
        self.ints = list(ints)

    def random(self) -> float:
        return self.floats.pop(0)

    def randrange(self, stop: int) -> int:
        value = self.ints.pop(0)
        assert 0 <= value < stop
        return value


@pytest.fixture
def search_for(simple_foods, constraints):
    def make(rng, params=None):
        return GeneticSearch(simple_foods, constraints, rng, params)
    return make


class TestInitialization:
    """Tests for random individual generation."""

    def test_shape(self, search_for):
        search = search_for(random.Random(1))
        for _ in range(50):
            individual = search.random_individual()
            assert len(individual) == 3
            for slot in individual:
                assert 1 <= len(slot) <= 3
                assert all(0 <= i < 4 for i in slot)

    def test_individuals_are_tuples(self, search_for):
        individual = search_for(random.Random(1)).random_individual()
        assert isinstance(individual, tuple)
        assert all(isinstance(slot, tuple) for slot in individual)


class TestCrossover:
    """Tests for slot-wise crossover."""

    @pytest.mark.parametrize(
        "len1,len2", [(3, 3), (1, 4), (4, 1), (2, 5), (0, 2)]
    )
    def test_child_length_is_max_of_parents(self, search_for, len1, len2):
        search = search_for(random.Random(7))
        parent1 = tuple((0,) for _ in range(len1))
        parent2 = tuple((1,) for _ in range(len2))
        for _ in range(20):
            child = search.crossover(parent1, parent2)
            assert len(child) == max(len1, len2)

    def test_heads_takes_parent1(self, search_for):
        search = search_for(ScriptedRandom(floats=[0.1, 0.9]))
        child = search.crossover(((0,), (0,)), ((1,), (1,)))
        assert child == ((0,), (1,))

    def test_missing_slot_falls_back(self, search_for):
        """Positions only one parent has come from that parent."""
        search = search_for(ScriptedRandom(floats=[0.9, 0.1, 0.9]))
        child = search.crossover(((0,), (0,), (0, 2)), ((1,),))
        assert child == ((1,), (0,), (0, 2))


class TestMutation:
    """Tests for mutation."""

    def test_zero_rate_is_identity(self, search_for):
        search = search_for(random.Random(3), SearchParameters(mutation_rate=0.0))
        individual = ((0, 1), (2,), (3, 3, 3))
        assert search.mutate(individual) == individual

    def test_does_not_modify_input(self, search_for):
        search = search_for(random.Random(3), SearchParameters(mutation_rate=1.0))
        individual = ((0, 1), (2,), (3, 3, 3))
        snapshot = tuple(tuple(slot) for slot in individual)
        search.mutate(individual)
        assert individual == snapshot

    def test_slot_sizes_stay_in_bounds(self, search_for):
        search = search_for(random.Random(5), SearchParameters(mutation_rate=1.0))
        individual = ((0,), (1, 2, 3, 0), (2, 2))
        for _ in range(200):
            individual = search.mutate(individual)
            assert all(1 <= len(slot) <= 4 for slot in individual)

    def test_full_slot_cannot_grow(self, search_for):
        """A 4-item slot losing the removal coin flip stays at 4."""
        # index draws (all keep), slot gate passes, removal coin fails
        floats = [0.9, 0.9, 0.9, 0.9, 0.0, 0.9]
        search = search_for(ScriptedRandom(floats=floats), SearchParameters(mutation_rate=0.5))
        assert search.mutate(((0, 1, 2, 3),)) == ((0, 1, 2, 3),)

    def test_single_item_slot_grows(self, search_for):
        """A one-item slot can only grow, without drawing the removal coin."""
        floats = [0.9, 0.0]
        search = search_for(
            ScriptedRandom(floats=floats, ints=[2]), SearchParameters(mutation_rate=0.5)
        )
        assert search.mutate(((1,),)) == ((1, 2),)


class TestTournament:
    """Tests for tournament selection."""

    def test_keeps_fittest_of_sample(self, search_for):
        search = search_for(ScriptedRandom(ints=[0, 2, 1]))
        population = [((0,),), ((1,),), ((2,),)]
        scores = [1.0, 5.0, 3.0]
        assert search.tournament_select(population, scores) == ((1,),)

    def test_ties_keep_first_draw(self, search_for):
        search = search_for(ScriptedRandom(ints=[2, 0, 1]))
        population = [((0,),), ((1,),), ((2,),)]
        scores = [4.0, 4.0, 4.0]
        assert search.tournament_select(population, scores) == ((2,),)


class TestElitism:
    """Tests for generation replacement."""

    def test_elite_count_rounds_up(self, search_for):
        search = search_for(random.Random(0), SearchParameters(population_size=11))
        assert search.elite_count() == 3  # ceil(2.2)

    def test_elites_copied_in_rank_order(self, search_for):
        params = SearchParameters(population_size=5, mutation_rate=0.0)
        search = search_for(random.Random(0), params)
        population = [((0,),), ((1,),), ((2,),), ((3,),), ((0, 1),)]
        scores = [1.0, 9.0, 5.0, 9.0, 2.0]
        new_population = search.next_generation(population, scores)
        assert len(new_population) == 5
        # ceil(5 * 0.2) == 1 elite; tie at 9.0 goes to the earlier individual
        assert new_population[0] == ((1,),)


class TestRun:
    """Tests for the full generational loop."""

    def test_deterministic_with_seed(self, simple_foods, constraints, small_params):
        """Same seed should produce the same individual."""
        first = optimize(simple_foods, constraints, random.Random(42), small_params)
        second = optimize(simple_foods, constraints, random.Random(42), small_params)
        assert first == second

    def test_default_parameters_deterministic(self, catalog, constraints):
        first = GeneticSearch(catalog, constraints, random.Random(9)).run()
        second = GeneticSearch(catalog, constraints, random.Random(9)).run()
        assert first == second
        assert len(first.history) == 100

    def test_best_fitness_is_monotonic(self, simple_foods, constraints):
        params = SearchParameters(population_size=10, generations=40, mutation_rate=0.3)
        outcome = GeneticSearch(simple_foods, constraints, random.Random(11), params).run()
        history = outcome.history
        assert len(history) == 40
        assert all(a <= b for a, b in zip(history, history[1:]))
        assert outcome.best_fitness == history[-1]

    def test_returned_best_matches_fitness(self, simple_foods, constraints, small_params):
        search = GeneticSearch(simple_foods, constraints, random.Random(2), small_params)
        outcome = search.run()
        assert search.fitness(outcome.best) == outcome.best_fitness

    def test_best_has_meals_per_day_slots(self, simple_foods, constraints, small_params):
        best = optimize(simple_foods, constraints, random.Random(4), small_params)
        assert len(best) == constraints.meals_per_day

    def test_never_worse_than_initial_population(self, simple_foods):
        """The best-ever individual is at least as fit as any starting one."""
        constraints = OptimizationConstraints(1800, 120, 200, 60, 3, 40)
        outcome = GeneticSearch(simple_foods, constraints, random.Random(8)).run()

        # A fresh search with the same seed rebuilds the same initial population
        replay = GeneticSearch(simple_foods, constraints, random.Random(8))
        initial = [replay.random_individual() for _ in range(50)]
        assert outcome.best_fitness >= max(replay.fitness(ind) for ind in initial)

    def test_empty_candidates_raise(self, constraints):
        with pytest.raises(ValueError):
            GeneticSearch([], constraints, random.Random(0)).run()
