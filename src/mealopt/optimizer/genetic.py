"""Genetic search over daily meal-plan assignments.

An individual assigns a short list of candidate indices to each meal slot.
Each generation keeps the top individuals unchanged (elitism) and fills
the rest of the population with mutated crossovers of tournament-selected
parents. The run length is a fixed number of generations, and the best
individual ever seen is returned rather than the last generation's best.

Individuals are tuples of tuples, so elites, parents and children never
share mutable storage.
"""

from __future__ import annotations

import logging
import math
import random
from typing import Optional, Sequence

from mealopt.optimizer.fitness import NutrientTable, calculate_fitness
from mealopt.optimizer.models import (
    FoodItem,
    Individual,
    OptimizationConstraints,
    RandomSource,
    SearchOutcome,
    SearchParameters,
)

logger = logging.getLogger(__name__)


class GeneticSearch:
    """One run of the genetic search.

    All state (population, candidates, random source) belongs to the
    instance, so independent runs can proceed on separate threads.
    """

    def __init__(
        self,
        candidates: Sequence[FoodItem],
        constraints: OptimizationConstraints,
        rng: RandomSource,
        params: Optional[SearchParameters] = None,
    ):
        """Initialize the search.

        Args:
            candidates: Filtered foods; individuals index into this list
            constraints: Daily targets used for scoring
            rng: Random source (seeded ``random.Random`` for reproducibility)
            params: Search parameters. Defaults to SearchParameters().
        """
        self.candidates = list(candidates)
        self.constraints = constraints
        self.rng = rng
        self.params = params or SearchParameters()
        self.table = NutrientTable(self.candidates)

    # ------------------------------------------------------------------
    # Operators
    # ------------------------------------------------------------------

    def random_index(self) -> int:
        return self.rng.randrange(len(self.candidates))

    def random_individual(self) -> Individual:
        """Build one individual with 1 to ``initial_items_per_slot`` foods per slot."""
        slots = []
        for _ in range(self.constraints.meals_per_day):
            count = self.rng.randrange(self.params.initial_items_per_slot) + 1
            slots.append(tuple(self.random_index() for _ in range(count)))
        return tuple(slots)

    def fitness(self, individual: Individual) -> float:
        return calculate_fitness(individual, self.table, self.constraints)

    def tournament_select(
        self, population: Sequence[Individual], scores: Sequence[float]
    ) -> Individual:
        """Sample ``tournament_size`` individuals and keep the fittest.

        Sampling is with replacement; ties keep the earliest draw.
        """
        best = self.rng.randrange(len(population))
        for _ in range(1, self.params.tournament_size):
            challenger = self.rng.randrange(len(population))
            if scores[challenger] > scores[best]:
                best = challenger
        return population[best]

    def crossover(self, parent1: Individual, parent2: Individual) -> Individual:
        """Uniform slot-wise crossover.

        The child has as many slots as the longer parent. A coin is drawn
        for every slot position; parent1 wins heads when it has that slot,
        otherwise parent2's slot is taken, falling back to parent1.
        """
        child = []
        for i in range(max(len(parent1), len(parent2))):
            heads = self.rng.random() < 0.5
            if heads and i < len(parent1):
                child.append(parent1[i])
            elif i < len(parent2):
                child.append(parent2[i])
            elif i < len(parent1):
                child.append(parent1[i])
        return tuple(child)

    def mutate(self, individual: Individual) -> Individual:
        """Return a mutated copy of ``individual``.

        Each index is replaced with probability ``mutation_rate``. Then, with
        the same probability per slot, one food is either removed (slots with
        more than one food, on a coin flip) or appended (slots below the
        maximum size).
        """
        rate = self.params.mutation_rate
        mutated = []
        for slot in individual:
            foods = [
                self.random_index() if self.rng.random() < rate else index
                for index in slot
            ]

            if self.rng.random() < rate:
                if len(foods) > 1 and self.rng.random() < 0.5:
                    del foods[self.rng.randrange(len(foods))]
                elif len(foods) < self.params.max_items_per_slot:
                    foods.append(self.random_index())

            mutated.append(tuple(foods))
        return tuple(mutated)

    # ------------------------------------------------------------------
    # Generational loop
    # ------------------------------------------------------------------

    def elite_count(self) -> int:
        count = math.ceil(self.params.population_size * self.params.elitism_fraction)
        return min(count, self.params.population_size)

    def next_generation(
        self, population: list[Individual], scores: list[float]
    ) -> list[Individual]:
        """Build the next population from the scored current one."""
        # Stable sort: equal scores keep population order
        ranked = sorted(range(len(population)), key=lambda i: -scores[i])
        new_population = [population[i] for i in ranked[: self.elite_count()]]

        while len(new_population) < self.params.population_size:
            parent1 = self.tournament_select(population, scores)
            parent2 = self.tournament_select(population, scores)
            child = self.mutate(self.crossover(parent1, parent2))
            new_population.append(child)

        return new_population

    def run(self) -> SearchOutcome:
        """Evolve the population and return the best individual ever seen."""
        if not self.candidates:
            raise ValueError("Cannot search an empty candidate list")

        population = [
            self.random_individual() for _ in range(self.params.population_size)
        ]
        best: Optional[Individual] = None
        best_fitness = -math.inf
        history: list[float] = []

        for _ in range(self.params.generations):
            scores = [self.fitness(ind) for ind in population]

            # First maximal individual wins; ties never replace the best
            leader = max(range(len(scores)), key=scores.__getitem__)
            if scores[leader] > best_fitness:
                best_fitness = scores[leader]
                best = population[leader]
            history.append(best_fitness)

            population = self.next_generation(population, scores)

        if best is None:
            # Zero generations requested: score the initial population once
            scores = [self.fitness(ind) for ind in population]
            leader = max(range(len(scores)), key=scores.__getitem__)
            best, best_fitness = population[leader], scores[leader]

        logger.debug(
            "Genetic search finished: %d generations, best fitness %.3f",
            self.params.generations,
            best_fitness,
        )
        return SearchOutcome(best=best, best_fitness=best_fitness, history=tuple(history))


def optimize(
    candidates: Sequence[FoodItem],
    constraints: OptimizationConstraints,
    rng: Optional[RandomSource] = None,
    params: Optional[SearchParameters] = None,
) -> Individual:
    """Search for the meal assignment that best fits the targets.

    Args:
        candidates: Filtered foods to choose from
        constraints: Daily targets
        rng: Random source. If None, an unseeded ``random.Random`` is used.
        params: Search parameters

    Returns:
        The best individual found.
    """
    rng = rng if rng is not None else random.Random()
    return GeneticSearch(candidates, constraints, rng, params).run().best
