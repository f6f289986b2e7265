# luckyfive/evolution.py
"""
Generational refinement of a candidate pool: elitism, crossover and mutation.
"""
from dataclasses import dataclass, field
from typing import Callable, List, Sequence, Tuple

import numpy as np

from .infrastructure.logging import get_logger
from .utils.error_handling import check_cancelled

logger = get_logger(__name__)

Candidate = Tuple[int, ...]


@dataclass
class EvolutionResult:
    """Final population (deduplicated, best first) and per-generation best fitness."""
    population: List[Candidate] = field(default_factory=list)
    best_fitness_history: List[float] = field(default_factory=list)


def rank_population(population: Sequence[Candidate], score_fn) -> List[Tuple[Candidate, float]]:
    """Sort by fitness descending; equal fitness falls back to ascending candidate."""
    scored = [(c, score_fn(c)) for c in population]
    scored.sort(key=lambda cs: (-cs[1], cs[0]))
    return scored


def dedupe(population: Sequence[Candidate]) -> List[Candidate]:
    """Drop repeated value-sets, keeping first occurrence order."""
    seen = set()
    unique = []
    for c in population:
        key = tuple(sorted(c))
        if key not in seen:
            seen.add(key)
            unique.append(key)
    return unique


class PopulationEvolver:
    """
    Evolves a population for a fixed number of generations.

    The top elite_count candidates of each generation survive unchanged, so
    the best fitness never decreases from one generation to the next.
    """
    def __init__(self, score_fn: Callable[[Sequence[int]], float], pick_count: int, max_num: int,
                 generations: int, rng: np.random.Generator,
                 elite_fraction: float = 0.2, mutate_prob: float = 0.1):
        self.score_fn = score_fn
        self.pick_count = pick_count
        self.max_num = max_num
        self.generations = generations
        self.rng = rng
        self.elite_fraction = elite_fraction
        self.mutate_prob = mutate_prob

    def elite_count(self, population_size: int) -> int:
        return min(population_size, max(1, int(round(population_size * self.elite_fraction))))

    def crossover(self, parent_a: Candidate, parent_b: Candidate) -> List[int]:
        """Alternate elements of both parents, skip repeats, then pad or truncate."""
        child = []
        for i in range(max(len(parent_a), len(parent_b))):
            for parent in (parent_a, parent_b):
                if i < len(parent) and parent[i] not in child:
                    child.append(parent[i])
        child = child[:self.pick_count]
        while len(child) < self.pick_count:
            n = int(self.rng.integers(1, self.max_num + 1))
            if n not in child:
                child.append(n)
        return child

    def mutate(self, child: List[int]) -> List[int]:
        """With probability mutate_prob, replace one element by a fresh number."""
        if self.rng.random() >= self.mutate_prob or len(child) >= self.max_num:
            return child
        pos = int(self.rng.integers(len(child)))
        while True:
            n = int(self.rng.integers(1, self.max_num + 1))
            if n not in child:
                child[pos] = n
                return child

    def evolve(self, population: Sequence[Sequence[int]], cancel_event=None) -> EvolutionResult:
        population = [tuple(sorted(c)) for c in population]
        if not population:
            return EvolutionResult()

        size = len(population)
        elite_count = self.elite_count(size)
        history = []

        for generation in range(self.generations):
            check_cancelled(cancel_event, "evolution")
            ranked = rank_population(population, self.score_fn)
            history.append(ranked[0][1])

            next_population = [c for c, _ in ranked[:elite_count]]
            parent_pool = max(1, len(ranked) // 2)
            while len(next_population) < size:
                a = ranked[int(self.rng.integers(parent_pool))][0]
                b = ranked[int(self.rng.integers(parent_pool))][0]
                child = self.mutate(self.crossover(a, b))
                next_population.append(tuple(sorted(child)))
            population = next_population

        ranked = rank_population(dedupe(population), self.score_fn)
        history.append(ranked[0][1])
        logger.debug(
            f"Evolved {size} candidates over {self.generations} generations; "
            f"best fitness {history[0]:.4f} -> {history[-1]:.4f}"
        )
        return EvolutionResult(population=[c for c, _ in ranked], best_fitness_history=history)
