# luckyfive/local_search.py
from typing import Callable, Sequence, Tuple

import numpy as np

Candidate = Tuple[int, ...]


class LocalSearchRefiner:
    """
    Single-candidate hill climbing.

    Each iteration replaces a random position with a random number not
    already in the candidate and keeps the change only on a strict score
    improvement. The whole iteration budget is always consumed, so the number
    of RNG draws does not depend on the scores seen.
    """
    def __init__(self, score_fn: Callable[[Sequence[int]], float], max_num: int,
                 iterations: int, rng: np.random.Generator):
        self.score_fn = score_fn
        self.max_num = max_num
        self.iterations = iterations
        self.rng = rng

    def refine(self, candidate: Sequence[int]) -> Candidate:
        """Return a candidate whose score is >= the input's score."""
        current = tuple(sorted(candidate))
        if self.iterations <= 0:
            return current

        best_score = self.score_fn(current)
        pick_count = len(current)
        free_count = self.max_num - pick_count
        if free_count <= 0:
            return current

        for _ in range(self.iterations):
            pos = int(self.rng.integers(pick_count))
            replacement = self._kth_free_number(current, int(self.rng.integers(free_count)))

            trial = list(current)
            trial[pos] = replacement
            trial = tuple(sorted(trial))
            trial_score = self.score_fn(trial)
            if trial_score > best_score:
                current, best_score = trial, trial_score

        return current

    def _kth_free_number(self, candidate: Candidate, k: int) -> int:
        """k-th (0-based) number in ascending order that is not in candidate."""
        members = set(candidate)
        for n in range(1, self.max_num + 1):
            if n in members:
                continue
            if k == 0:
                return n
            k -= 1
        raise IndexError("no free number left")
