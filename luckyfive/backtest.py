# luckyfive/backtest.py
"""
Backtest driver: replays a contest range, predicting each contest from the
draws that precede it and grading the predictions against the real result.
"""
import time
from dataclasses import dataclass, field, asdict
from typing import Dict, List, Optional, Sequence, Tuple

from tqdm import tqdm

from .data_loader import ContestDraw
from .infrastructure.config.settings import EngineParams, FilterConfig, SearchConstants
from .infrastructure.logging import get_logger
from .outcome_scorer import OutcomeScorer
from .prediction_engine import generate
from .utils.error_handling import InvalidConfigurationError, check_cancelled

logger = get_logger(__name__)


@dataclass
class ContestResult:
    contest: int
    actual_numbers: Tuple[int, ...]
    best_hits: int
    best_prediction: Tuple[int, ...]
    best_prediction_index: int
    predictions: List[Tuple[int, ...]]
    histogram: Dict[int, int]


@dataclass
class BacktestSummary:
    total_contests: int = 0
    quina_hits: int = 0
    quadra_hits: int = 0
    terno_hits: int = 0
    total_hits: int = 0
    average_hits: float = 0.0
    hit_rate_quina: float = 0.0
    hit_rate_quadra: float = 0.0
    hit_rate_terno: float = 0.0

    def finalize(self) -> "BacktestSummary":
        if self.total_contests > 0:
            self.hit_rate_quina = self.quina_hits / self.total_contests
            self.hit_rate_quadra = self.quadra_hits / self.total_contests
            self.hit_rate_terno = self.terno_hits / self.total_contests
            self.average_hits = self.total_hits / self.total_contests
        return self


@dataclass
class BacktestResult:
    contest_results: List[ContestResult] = field(default_factory=list)
    summary: BacktestSummary = field(default_factory=BacktestSummary)
    params: Optional[EngineParams] = None
    duration_ms: int = 0

    def to_dict(self) -> dict:
        return asdict(self)


def history_before(draws: Sequence[ContestDraw], contest: int, max_history: int) -> List[Tuple[int, ...]]:
    """Numbers of the last `max_history` draws strictly before `contest`, oldest first."""
    prior = [d.numbers for d in draws if d.contest < contest]
    return prior[-max_history:]


def run_backtest(
    draws: Sequence[ContestDraw],
    start_contest: int,
    end_contest: int,
    params: Optional[EngineParams] = None,
    search: Optional[SearchConstants] = None,
    filters: Optional[FilterConfig] = None,
    cancel_event=None,
    show_progress: bool = False
) -> BacktestResult:
    """
    Predict and grade every contest in [start_contest, end_contest].

    Contest c is predicted with seed params.seed + c, so a backtest is
    reproducible for any base seed. Contests missing from `draws` are skipped.
    """
    params = (params or EngineParams()).validate()
    if end_contest < start_contest:
        raise InvalidConfigurationError(
            f"end_contest ({end_contest}) must not be before start_contest ({start_contest})."
        )

    started = time.perf_counter()
    by_contest = {d.contest: d for d in draws}
    ordered = sorted(draws, key=lambda d: d.contest)
    outcome_scorer = OutcomeScorer(params.pick_count)
    result = BacktestResult(params=params)
    summary = result.summary

    contests = range(start_contest, end_contest + 1)
    for contest in tqdm(contests, desc="Backtesting", disable=not show_progress):
        check_cancelled(cancel_event, f"backtest contest {contest}")
        actual = by_contest.get(contest)
        if actual is None:
            logger.debug(f"Contest {contest} not in history, skipping")
            continue

        history = history_before(ordered, contest, params.max_history)
        predictions = generate(
            history, params, seed=params.seed + contest, cancel_event=cancel_event,
            search=search, filters=filters
        )
        score = outcome_scorer.score(predictions.predictions, actual.numbers)

        result.contest_results.append(ContestResult(
            contest=contest,
            actual_numbers=actual.numbers,
            best_hits=score.best_hits,
            best_prediction=score.best_prediction,
            best_prediction_index=score.best_index,
            predictions=list(predictions.predictions),
            histogram=score.histogram,
        ))

        summary.total_contests += 1
        summary.quina_hits += score.quina_count
        summary.quadra_hits += score.quadra_count
        summary.terno_hits += score.terno_count
        summary.total_hits += score.best_hits

    summary.finalize()
    result.duration_ms = int((time.perf_counter() - started) * 1000)
    logger.info(
        f"Backtest {start_contest}-{end_contest}: {summary.total_contests} contests, "
        f"avg best hits {summary.average_hits:.3f}, quina {summary.quina_hits}, "
        f"quadra {summary.quadra_hits}, terno {summary.terno_hits}"
    )
    return result
