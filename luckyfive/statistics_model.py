# luckyfive/statistics_model.py
"""
Statistical tables derived from a historical draw series.

Every table is a numpy array indexed directly by number (index 0 unused), so
iteration over the domain is always in ascending number order.
"""
from dataclasses import dataclass
from typing import Sequence

import numpy as np

from .infrastructure.logging import get_logger
from .utils.safe_math import safe_divide

logger = get_logger(__name__)

Draw = Sequence[int]


def compute_frequency(draws: Sequence[Draw], max_num: int) -> np.ndarray:
    """Per-number occurrence count over all draws."""
    freq = np.zeros(max_num + 1, dtype=np.int64)
    for draw in draws:
        for n in draw:
            freq[n] += 1
    return freq


def compute_positional_frequency(draws: Sequence[Draw], positions: int, max_num: int) -> np.ndarray:
    """
    Counts by slot index as stored (not by sorted rank).

    Returns an array of shape (positions, max_num + 1).
    """
    table = np.zeros((positions, max_num + 1), dtype=np.int64)
    for draw in draws:
        for pos, n in enumerate(draw[:positions]):
            table[pos, n] += 1
    return table


def compute_marginal_probability(
    draws: Sequence[Draw],
    recency_lambda: float,
    max_num: int,
    pick_count: int = 5
) -> np.ndarray:
    """
    Recency-weighted relative frequency of each number.

    Draw i (0 = oldest) carries weight exp(-lambda * (D - 1 - i)). The table is
    normalized so its domain sum equals pick_count. An empty history yields an
    all-zero table.
    """
    marginal = np.zeros(max_num + 1, dtype=np.float64)
    total_draws = len(draws)
    if total_draws == 0:
        return marginal

    for i, draw in enumerate(draws):
        weight = np.exp(-recency_lambda * (total_draws - 1 - i))
        for n in draw:
            marginal[n] += weight

    total = marginal.sum()
    if total <= 0:
        return np.zeros(max_num + 1, dtype=np.float64)
    return marginal * (pick_count / total)


def compute_pairwise_conditional(
    draws: Sequence[Draw],
    max_num: int,
    smoothing: float = 1.0,
    window: int = 0
) -> np.ndarray:
    """
    Smoothed probability of b co-occurring given a.

    cond[a][b] = (co(a, b) + s) / (freq[a] + s * max_num), computed over the
    most recent `window` draws (0 means all draws). The table is asymmetric
    because the denominator depends on a; the diagonal is zero.
    """
    if window > 0:
        draws = draws[-window:]

    co_occurrence = np.zeros((max_num + 1, max_num + 1), dtype=np.float64)
    freq = np.zeros(max_num + 1, dtype=np.float64)
    for draw in draws:
        numbers = sorted(draw)
        for n in numbers:
            freq[n] += 1
        for i in range(len(numbers)):
            for j in range(i + 1, len(numbers)):
                a, b = numbers[i], numbers[j]
                co_occurrence[a, b] += 1
                co_occurrence[b, a] += 1

    denominator = freq + smoothing * max_num
    cond = (co_occurrence + smoothing) / denominator[:, np.newaxis]
    cond[0, :] = 0.0
    cond[:, 0] = 0.0
    np.fill_diagonal(cond, 0.0)
    return cond


def compute_contests_ago(draws: Sequence[Draw], max_num: int) -> np.ndarray:
    """Contests since each number last appeared; len(draws) if never seen."""
    total_draws = len(draws)
    contests_ago = np.full(max_num + 1, total_draws, dtype=np.int64)
    seen = np.zeros(max_num + 1, dtype=bool)
    for i in range(total_draws - 1, -1, -1):
        for n in draws[i]:
            if not seen[n]:
                seen[n] = True
                contests_ago[n] = total_draws - 1 - i
    return contests_ago


def compute_hot_numbers(draws: Sequence[Draw], hot_window: int, max_num: int) -> np.ndarray:
    """Boolean mask of numbers drawn within the last hot_window draws."""
    hot = np.zeros(max_num + 1, dtype=bool)
    if hot_window <= 0:
        return hot
    for draw in draws[-hot_window:]:
        for n in draw:
            hot[n] = True
    return hot


@dataclass(frozen=True)
class StatisticsModel:
    """All tables the engine needs, built fresh for one call."""
    max_num: int
    pick_count: int
    num_draws: int
    frequency: np.ndarray
    positional_frequency: np.ndarray
    positional_sum: np.ndarray
    marginal: np.ndarray
    conditional: np.ndarray
    contests_ago: np.ndarray
    hot: np.ndarray

    @property
    def total_frequency(self) -> int:
        """Sum of the frequency table, or 1 when the table is empty."""
        total = int(self.frequency.sum())
        return total if total > 0 else 1

    @classmethod
    def fit(cls, history: Sequence[Draw], params) -> "StatisticsModel":
        """Build every table from a validated oldest-to-newest history."""
        max_num, pick_count = params.max_num, params.pick_count

        frequency = compute_frequency(history, max_num)
        positional = compute_positional_frequency(history, pick_count, max_num)
        positional_sum = safe_divide(
            positional.sum(axis=0).astype(np.float64),
            float(positional.sum()) or 1.0
        )

        model = cls(
            max_num=max_num,
            pick_count=pick_count,
            num_draws=len(history),
            frequency=frequency,
            positional_frequency=positional,
            positional_sum=positional_sum,
            marginal=compute_marginal_probability(history, params.recency_lambda, max_num, pick_count),
            conditional=compute_pairwise_conditional(
                history, max_num, smoothing=params.smoothing, window=params.cooc_window
            ),
            contests_ago=compute_contests_ago(history, max_num),
            hot=compute_hot_numbers(history, params.hot_window, max_num),
        )
        logger.debug(
            f"Statistics fitted on {model.num_draws} draws "
            f"(nonzero numbers: {int((frequency[1:] > 0).sum())})"
        )
        return model
