"""
Tests for single-candidate hill climbing.
"""
import numpy as np
import pytest

from luckyfive.infrastructure.config import EngineParams
from luckyfive.local_search import LocalSearchRefiner
from luckyfive.scorer import CombinationScorer
from luckyfive.statistics_model import StatisticsModel


class TestLocalSearchRefiner:
    """Test LocalSearchRefiner."""

    def test_score_never_decreases(self):
        rng = np.random.default_rng(5)
        refiner = LocalSearchRefiner(sum, 80, 100, rng)

        for start in [(1, 2, 3, 4, 5), (10, 20, 30, 40, 50), (76, 77, 78, 79, 80)]:
            refined = refiner.refine(start)
            assert sum(refined) >= sum(start)

    @pytest.mark.parametrize("start", [
        (1, 2, 3, 4, 5),
        (11, 12, 13, 14, 15),
        (7, 23, 41, 58, 76),
        (76, 77, 78, 79, 80),
    ])
    def test_combination_score_never_decreases(self, synthetic_history, start):
        params = EngineParams()
        scorer = CombinationScorer(StatisticsModel.fit(synthetic_history, params), params)
        refiner = LocalSearchRefiner(scorer, 80, 100, np.random.default_rng(3))

        refined = refiner.refine(start)

        assert scorer(refined) >= scorer(start)
        assert len(set(refined)) == 5
        assert all(1 <= n <= 80 for n in refined)

    def test_improves_toward_objective(self):
        refiner = LocalSearchRefiner(sum, 80, 200, np.random.default_rng(1))

        refined = refiner.refine((1, 2, 3, 4, 5))

        assert sum(refined) > sum((1, 2, 3, 4, 5))
        assert list(refined) == sorted(refined)
        assert len(set(refined)) == 5

    def test_zero_budget_returns_input(self):
        refiner = LocalSearchRefiner(sum, 80, 0, np.random.default_rng(0))

        assert refiner.refine((5, 4, 3, 2, 1)) == (1, 2, 3, 4, 5)

    def test_full_domain_returns_input(self):
        refiner = LocalSearchRefiner(sum, 5, 10, np.random.default_rng(0))

        assert refiner.refine((1, 2, 3, 4, 5)) == (1, 2, 3, 4, 5)

    def test_strict_improvement_only(self):
        # Constant objective: nothing is ever strictly better
        refiner = LocalSearchRefiner(lambda c: 1.0, 80, 50, np.random.default_rng(0))

        assert refiner.refine((7, 8, 9, 10, 11)) == (7, 8, 9, 10, 11)

    def test_kth_free_number(self):
        refiner = LocalSearchRefiner(sum, 10, 1, np.random.default_rng(0))

        assert refiner._kth_free_number((1, 2, 3, 4, 5), 0) == 6
        assert refiner._kth_free_number((1, 3, 5, 7, 9), 2) == 6

    def test_deterministic_for_seed(self):
        a = LocalSearchRefiner(sum, 80, 30, np.random.default_rng(11)).refine((1, 2, 3, 4, 5))
        b = LocalSearchRefiner(sum, 80, 30, np.random.default_rng(11)).refine((1, 2, 3, 4, 5))

        assert a == b
