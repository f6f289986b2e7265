# luckyfive/candidate_seeder.py
"""
Raw candidate generation: weighted seeding followed by greedy conditional
extension, with occasional random picks to avoid stagnation.
"""
from typing import List, Optional, Tuple

import numpy as np

from .infrastructure.logging import get_logger
from .statistics_model import StatisticsModel
from .utils.error_handling import check_cancelled
from .utils.safe_math import safe_normalize

logger = get_logger(__name__)

Candidate = Tuple[int, ...]


def roulette_select(weights: np.ndarray, rng: np.random.Generator) -> int:
    """
    Cumulative-weight roulette over an array indexed by number.

    Numbers are visited in ascending order, so ties always resolve the same
    way. A zero total falls back to a uniform pick over the non-excluded
    entries (entries set to -1 are excluded).
    """
    usable = np.where(weights[1:] > 0, weights[1:], 0.0)
    total = usable.sum()
    if total <= 0:
        available = np.flatnonzero(weights[1:] >= 0) + 1
        return int(available[rng.integers(len(available))])

    cumulative = np.cumsum(usable)
    r = rng.random() * total
    idx = int(np.searchsorted(cumulative, r, side='right'))
    if idx >= len(usable) or usable[idx] <= 0:
        # r landed on the upper edge; take the last positive weight
        idx = int(np.flatnonzero(usable)[-1])
    return idx + 1


def uniform_pick(max_num: int, excluded, rng: np.random.Generator) -> int:
    """Uniform pick among numbers not in `excluded`, in ascending order."""
    available = [n for n in range(1, max_num + 1) if n not in excluded]
    return available[int(rng.integers(len(available)))]


class CandidateSeeder:
    """
    Produces raw candidates from the fitted statistics.

    Seed number: roulette over per-number weights
        freq[n] * exp(-lambda * contests_ago[n]) * boost(n)
    where boost(n) = hot_cold_boost for numbers absent from the hot window,
    normalized to sum to 1 over 1..max_num.

    Extension: the number maximizing the product of conditional probabilities
    against the already selected numbers, tilted by marginal probability.
    """
    def __init__(self, stats: StatisticsModel, params, search, rng: np.random.Generator):
        self.stats = stats
        self.params = params
        self.search = search
        self.rng = rng
        self.weights = self.seed_weights()

    def seed_weights(self) -> np.ndarray:
        stats, params = self.stats, self.params
        weights = stats.frequency.astype(np.float64) * np.exp(
            -params.recency_lambda * stats.contests_ago.astype(np.float64)
        )
        boost = np.where(stats.hot, 1.0, params.hot_cold_boost)
        normalized = np.zeros(stats.max_num + 1, dtype=np.float64)
        # empty or degenerate history: uniform over 1..max_num
        normalized[1:] = safe_normalize((weights * boost)[1:])
        return normalized

    def oversample_count(self) -> int:
        count = self.params.num_predictions * self.params.cands_mult
        if self.params.use_smart_filters:
            count *= self.search.smart_filter_oversample
        return count

    def greedy_extension(self, selected: List[int]) -> int:
        cond = self.stats.conditional
        values = np.prod(cond[selected, 1:], axis=0)
        values = values * (1.0 + self.search.marginal_tilt * self.stats.marginal[1:])
        values[[n - 1 for n in selected]] = -np.inf
        return int(np.argmax(values)) + 1

    def weighted_extension(self, selected: List[int]) -> int:
        weights = self.weights.copy()
        weights[selected] = -1.0
        return roulette_select(weights, self.rng)

    def generate_one(self) -> Candidate:
        """Build one ascending candidate of pick_count distinct numbers."""
        pick_count, max_num = self.params.pick_count, self.params.max_num
        selected = [roulette_select(self.weights, self.rng)]

        while len(selected) < pick_count:
            r = self.rng.random()
            if r < self.search.uniform_fallback_prob:
                nxt = uniform_pick(max_num, set(selected), self.rng)
            elif r < self.search.uniform_fallback_prob + self.search.weighted_fallback_prob:
                nxt = self.weighted_extension(selected)
            else:
                nxt = self.greedy_extension(selected)
            if nxt in selected:
                continue
            selected.append(nxt)

        return tuple(sorted(selected))

    def generate(self, count: Optional[int] = None, cancel_event=None, on_candidate=None) -> List[Candidate]:
        """
        Generate `count` raw candidates (default: the oversample count).

        The cancellation event is polled once per candidate. `on_candidate`,
        when given, maps each raw candidate before it is stored; the engine
        uses it to refine candidates inside the same polled loop.
        """
        count = self.oversample_count() if count is None else count
        candidates = []
        for _ in range(count):
            check_cancelled(cancel_event, "candidate generation")
            candidate = self.generate_one()
            if on_candidate is not None:
                candidate = on_candidate(candidate)
            candidates.append(candidate)

        logger.debug(f"Seeded {len(candidates)} raw candidates ({len(set(candidates))} distinct)")
        return candidates
