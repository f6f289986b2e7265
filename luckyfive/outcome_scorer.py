# luckyfive/outcome_scorer.py
"""
Grades a finished prediction set against one actual draw.

Tier names follow the Quina prize tiers: quina (all numbers), quadra (one
short) and terno (two short).
"""
from dataclasses import dataclass, field, asdict
from typing import Dict, List, Sequence, Tuple


@dataclass
class OutcomeScore:
    """Hit statistics for one prediction set against one draw."""
    hits: List[int] = field(default_factory=list)
    best_hits: int = 0
    best_index: int = -1
    best_prediction: Tuple[int, ...] = ()
    matched_numbers: Tuple[int, ...] = ()
    quina_count: int = 0
    quadra_count: int = 0
    terno_count: int = 0
    histogram: Dict[int, int] = field(default_factory=dict)

    def to_dict(self) -> dict:
        return asdict(self)


class OutcomeScorer:
    """Pure grading of predictions; O(predictions * pick_count)."""

    def __init__(self, pick_count: int = 5):
        self.pick_count = pick_count

    def score(self, predictions: Sequence[Sequence[int]], actual: Sequence[int]) -> OutcomeScore:
        actual_set = set(actual)
        result = OutcomeScore(histogram={k: 0 for k in range(self.pick_count + 1)})

        for idx, prediction in enumerate(predictions):
            matched = sorted(actual_set.intersection(prediction))
            hits = len(matched)
            result.hits.append(hits)
            result.histogram[hits] = result.histogram.get(hits, 0) + 1

            if hits > result.best_hits or result.best_index == -1:
                result.best_hits = hits
                result.best_index = idx
                result.best_prediction = tuple(prediction)
                result.matched_numbers = tuple(matched)

            if hits == self.pick_count:
                result.quina_count += 1
            elif hits == self.pick_count - 1:
                result.quadra_count += 1
            elif hits == self.pick_count - 2:
                result.terno_count += 1

        return result
