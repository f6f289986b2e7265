"""
Shared utilities for the luckyfive prediction engine.
"""
from .error_handling import (
    LuckyFiveError,
    InvalidConfigurationError,
    InvalidDrawError,
    CancelledError,
    DataError,
    safe_file_operation,
    check_cancelled
)
from .input_validation import (
    InputValidator,
    ValidationError,
    validate_history
)
from .safe_math import safe_divide, safe_normalize

__all__ = [
    'LuckyFiveError',
    'InvalidConfigurationError',
    'InvalidDrawError',
    'CancelledError',
    'DataError',
    'safe_file_operation',
    'check_cancelled',
    'InputValidator',
    'ValidationError',
    'validate_history',
    'safe_divide',
    'safe_normalize'
]
