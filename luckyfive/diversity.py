# luckyfive/diversity.py
from typing import List, Sequence, Tuple

import numpy as np

Candidate = Tuple[int, ...]


class DiversitySelector:
    """
    Greedy final selection that rewards coverage of unclaimed probability mass.

    Each round picks the remaining candidate whose numbers not yet taken carry
    the most marginal probability. Ties go to the higher fitness, then to the
    earlier position in the ranked pool.
    """
    def __init__(self, marginal: np.ndarray):
        self.marginal = marginal

    def uncovered_mass(self, candidate: Sequence[int], taken: set) -> float:
        return float(sum(self.marginal[n] for n in candidate if n not in taken))

    def select(self, ranked_pool: Sequence[Tuple[Candidate, float]], limit: int) -> List[Candidate]:
        """
        Args:
            ranked_pool: (candidate, fitness) pairs, deduplicated, best first
            limit: maximum number of candidates to return

        Returns:
            Selected candidates in pick order; fewer than `limit` when the
            pool runs out.
        """
        remaining = list(ranked_pool)
        taken = set()
        selected = []

        while remaining and len(selected) < limit:
            best_idx = 0
            best_key = None
            for idx, (candidate, fitness) in enumerate(remaining):
                key = (self.uncovered_mass(candidate, taken), fitness)
                if best_key is None or key > best_key:
                    best_idx, best_key = idx, key

            candidate, _ = remaining.pop(best_idx)
            selected.append(candidate)
            taken.update(candidate)

        return selected
