"""
luckyfive: heuristic candidate generation and backtesting for the
5-of-80 Quina lottery.
"""
from .infrastructure.config import EngineParams, FilterConfig, SearchConstants
from .outcome_scorer import OutcomeScore, OutcomeScorer
from .prediction_engine import PredictionSet, generate
from .utils.error_handling import (
    CancelledError,
    DataError,
    InvalidConfigurationError,
    InvalidDrawError,
    LuckyFiveError
)

__version__ = "1.0.0"

__all__ = [
    'EngineParams',
    'FilterConfig',
    'SearchConstants',
    'OutcomeScore',
    'OutcomeScorer',
    'PredictionSet',
    'generate',
    'CancelledError',
    'DataError',
    'InvalidConfigurationError',
    'InvalidDrawError',
    'LuckyFiveError'
]
