# luckyfive/filters.py
from typing import Sequence

from .infrastructure.config.settings import FilterConfig


def count_odd(candidate: Sequence[int]) -> int:
    return sum(1 for n in candidate if n % 2 == 1)


def count_adjacent_pairs(candidate: Sequence[int]) -> int:
    """Pairs of consecutive integers in the sorted candidate."""
    ordered = sorted(candidate)
    return sum(1 for i in range(len(ordered) - 1) if ordered[i + 1] - ordered[i] == 1)


class FilterGate:
    """
    Topological validity predicate applied when smart filters are enabled.

    A candidate passes when its sum lies in [sum_min, sum_max], it mixes odd
    and even numbers, and it has at most max_adjacent_pairs consecutive pairs.
    """
    def __init__(self, config: FilterConfig = None, enabled: bool = True):
        self.config = config or FilterConfig()
        self.enabled = enabled

    def passes(self, candidate: Sequence[int]) -> bool:
        if not self.enabled:
            return True
        total = sum(candidate)
        if total < self.config.sum_min or total > self.config.sum_max:
            return False
        odd = count_odd(candidate)
        if odd == 0 or odd == len(candidate):
            return False
        return count_adjacent_pairs(candidate) <= self.config.max_adjacent_pairs

    def __call__(self, candidate: Sequence[int]) -> bool:
        return self.passes(candidate)
