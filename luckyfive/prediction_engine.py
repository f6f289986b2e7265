# luckyfive/prediction_engine.py
"""
Prediction engine entry point.

generate() wires the pipeline for one call:

    StatisticsModel -> CandidateSeeder (+ LocalSearchRefiner per candidate)
        -> PopulationEvolver -> FilterGate -> DiversitySelector

Every call builds its own tables and its own numpy Generator from the seed,
so independent calls never share state and may run concurrently.
"""
import time
from dataclasses import dataclass
from typing import Iterator, Optional, Sequence, Tuple

import numpy as np

from .candidate_seeder import CandidateSeeder
from .diversity import DiversitySelector
from .evolution import PopulationEvolver, dedupe, rank_population
from .filters import FilterGate
from .infrastructure.config.settings import EngineParams, FilterConfig, SearchConstants
from .infrastructure.logging import get_logger, log_with_context
from .local_search import LocalSearchRefiner
from .scorer import CombinationScorer
from .statistics_model import StatisticsModel
from .utils.error_handling import check_cancelled
from .utils.input_validation import validate_history

logger = get_logger(__name__)

Candidate = Tuple[int, ...]


@dataclass(frozen=True)
class PredictionSet:
    """Immutable, ordered, deduplicated engine output."""
    predictions: Tuple[Candidate, ...] = ()
    fitness: Tuple[float, ...] = ()
    seed: int = 0

    def __len__(self) -> int:
        return len(self.predictions)

    def __iter__(self) -> Iterator[Candidate]:
        return iter(self.predictions)

    def __getitem__(self, idx) -> Candidate:
        return self.predictions[idx]

    def to_lists(self):
        return [list(c) for c in self.predictions]


def resolve_seed(seed: int) -> int:
    """Seed 0 means: derive a fresh, non-deterministic seed from the clock."""
    if seed:
        return seed
    derived = time.time_ns() & 0x7FFFFFFFFFFFFFFF
    return derived or 1


def top_up_pool(pool, needed: int, params: EngineParams, search: SearchConstants,
                gate: FilterGate, rng: np.random.Generator, cancel_event=None):
    """Add random filter-passing combinations until `needed` are present or attempts run out."""
    present = set(pool)
    attempts = needed * search.top_up_attempts_per_slot
    while len(pool) < needed and attempts > 0:
        attempts -= 1
        check_cancelled(cancel_event, "pool top-up")
        drawn = rng.choice(params.max_num, size=params.pick_count, replace=False) + 1
        candidate = tuple(sorted(int(n) for n in drawn))
        if candidate in present or not gate(candidate):
            continue
        present.add(candidate)
        pool.append(candidate)
    return pool


def generate(
    history: Sequence[Sequence[int]],
    params: Optional[EngineParams] = None,
    seed: Optional[int] = None,
    cancel_event=None,
    search: Optional[SearchConstants] = None,
    filters: Optional[FilterConfig] = None
) -> PredictionSet:
    """
    Propose up to params.num_predictions combinations from an oldest-to-newest history.

    Args:
        history: past draws, oldest first
        params: tuning parameters (defaults when omitted)
        seed: overrides params.seed when given; 0 derives one from the clock
        cancel_event: threading.Event-like object; when set, the call raises
            CancelledError and returns nothing
        search: greedy-extension constants
        filters: smart-filter bounds

    Raises:
        InvalidConfigurationError: bad parameters or history, before any
            randomness is consumed
        CancelledError: cancellation observed mid-call
    """
    params = params or EngineParams()
    if seed is not None:
        params = params.with_overrides(seed=seed)
    search = search or SearchConstants()
    filters = filters or FilterConfig()

    params = params.validate()
    search = search.validate()
    filters = filters.validate()
    draws = validate_history(history, params.pick_count, params.max_num)
    check_cancelled(cancel_event, "setup")

    if params.num_predictions == 0:
        return PredictionSet(seed=params.seed)

    call_seed = resolve_seed(params.seed)
    rng = np.random.default_rng(call_seed)
    started = time.perf_counter()

    stats = StatisticsModel.fit(draws, params)
    scorer = CombinationScorer(stats, params)
    seeder = CandidateSeeder(stats, params, search, rng)
    refiner = LocalSearchRefiner(scorer, params.max_num, params.hill_iter, rng)

    raw = seeder.generate(cancel_event=cancel_event, on_candidate=refiner.refine)

    if params.enable_evolution and params.generations > 0:
        evolver = PopulationEvolver(
            scorer, params.pick_count, params.max_num, params.generations, rng,
            elite_fraction=params.elite_fraction, mutate_prob=params.mutate_prob
        )
        pool = evolver.evolve(raw, cancel_event=cancel_event).population
    else:
        pool = dedupe(raw)
    check_cancelled(cancel_event, "filtering")

    gate = FilterGate(filters, enabled=params.use_smart_filters)
    pool = [c for c in pool if gate(c)]
    if len(pool) < params.num_predictions:
        filtered_size = len(pool)
        pool = top_up_pool(pool, params.num_predictions, params, search, gate, rng, cancel_event)
        logger.debug(f"Pool topped up from {filtered_size} to {len(pool)} candidates")

    ranked = rank_population(pool, scorer)
    selected = DiversitySelector(stats.marginal).select(ranked, params.num_predictions)
    check_cancelled(cancel_event, "selection")

    fitness = {c: f for c, f in ranked}
    result = PredictionSet(
        predictions=tuple(selected),
        fitness=tuple(fitness[c] for c in selected),
        seed=call_seed,
    )

    log_with_context(
        logger,
        seed=call_seed,
        history=len(draws),
        raw=len(raw),
        pool=len(pool),
        returned=len(result),
        elapsed_ms=round((time.perf_counter() - started) * 1000, 1),
    ).debug("Generated prediction set")
    return result
