"""
Tests for the backtest driver.
"""
import threading

import pytest

from luckyfive.backtest import history_before, run_backtest
from luckyfive.data_loader import ContestDraw
from luckyfive.utils.error_handling import CancelledError, InvalidConfigurationError


@pytest.fixture
def draws(synthetic_history):
    return [ContestDraw(contest=i + 1, numbers=numbers) for i, numbers in enumerate(synthetic_history[:60])]


class TestHistoryBefore:

    def test_strictly_before_and_capped(self, draws):
        history = history_before(draws, 11, max_history=4)

        assert history == [d.numbers for d in draws[6:10]]

    def test_first_contest_has_no_history(self, draws):
        assert history_before(draws, 1, max_history=100) == []


class TestRunBacktest:
    """Test run_backtest aggregation."""

    def test_summary_counts(self, draws, fast_params):
        result = run_backtest(draws, 51, 55, fast_params)
        summary = result.summary

        assert summary.total_contests == 5
        assert [r.contest for r in result.contest_results] == [51, 52, 53, 54, 55]
        assert summary.total_hits == sum(r.best_hits for r in result.contest_results)
        assert summary.average_hits == pytest.approx(summary.total_hits / 5)
        assert 0.0 <= summary.hit_rate_terno <= 1.0
        assert result.duration_ms >= 0

    def test_contest_results_carry_predictions(self, draws, fast_params):
        result = run_backtest(draws, 58, 58, fast_params)
        contest = result.contest_results[0]

        assert contest.actual_numbers == draws[57].numbers
        assert 0 < len(contest.predictions) <= fast_params.num_predictions
        assert sum(contest.histogram.values()) == len(contest.predictions)
        assert contest.best_prediction in contest.predictions

    def test_reproducible(self, draws, fast_params):
        first = run_backtest(draws, 51, 53, fast_params)
        second = run_backtest(draws, 51, 53, fast_params)

        assert [r.predictions for r in first.contest_results] == \
            [r.predictions for r in second.contest_results]

    def test_missing_contests_skipped(self, draws, fast_params):
        sparse = [d for d in draws if d.contest != 53]

        result = run_backtest(sparse, 51, 55, fast_params)

        assert result.summary.total_contests == 4
        assert 53 not in [r.contest for r in result.contest_results]

    def test_end_before_start_raises(self, draws, fast_params):
        with pytest.raises(InvalidConfigurationError):
            run_backtest(draws, 55, 51, fast_params)

    def test_cancellation(self, draws, fast_params):
        event = threading.Event()
        event.set()

        with pytest.raises(CancelledError):
            run_backtest(draws, 51, 55, fast_params, cancel_event=event)

    def test_to_dict(self, draws, fast_params):
        data = run_backtest(draws, 60, 60, fast_params).to_dict()

        assert data['summary']['total_contests'] == 1
        assert data['params']['seed'] == fast_params.seed
