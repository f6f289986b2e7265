# luckyfive/scorer.py
from typing import Sequence

import numpy as np

from .statistics_model import StatisticsModel


class CombinationScorer:
    """
    Fitness function for a candidate combination.

    score = alpha * pairwise co-occurrence (both directions)
          + beta  * normalized frequency
          + gamma * normalized positional frequency
          - cluster_penalty * numbers sharing a decade beyond the first

    The scorer is pure: it reads the fitted tables and never mutates them, so
    the same candidate always scores the same within one call.
    """
    def __init__(self, stats: StatisticsModel, params):
        self.stats = stats
        self.alpha = float(params.alpha)
        self.beta = float(params.beta)
        self.gamma = float(params.gamma)
        self.cluster_penalty = float(params.cluster_penalty)
        self._freq_share = stats.frequency.astype(np.float64) / stats.total_frequency

    def cooccurrence_term(self, candidate: Sequence[int]) -> float:
        cond = self.stats.conditional
        total = 0.0
        for i in range(len(candidate)):
            a = candidate[i]
            for j in range(i + 1, len(candidate)):
                b = candidate[j]
                total += cond[a, b] + cond[b, a]
        return total

    def clustering_term(self, candidate: Sequence[int]) -> int:
        """Count of numbers sharing a decade (n // 10) with an earlier one."""
        decades = {}
        for n in candidate:
            decades[n // 10] = decades.get(n // 10, 0) + 1
        return sum(max(0, count - 1) for count in decades.values())

    def score(self, candidate: Sequence[int]) -> float:
        """Scores a single combination. Higher is better."""
        idx = list(candidate)
        marginal_term = float(self._freq_share[idx].sum())
        positional_term = float(self.stats.positional_sum[idx].sum())
        return (
            self.alpha * self.cooccurrence_term(candidate)
            + self.beta * marginal_term
            + self.gamma * positional_term
            - self.cluster_penalty * self.clustering_term(candidate)
        )

    def __call__(self, candidate: Sequence[int]) -> float:
        return self.score(candidate)
