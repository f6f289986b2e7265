"""
Error types and error handling helpers for the luckyfive prediction engine.
Configuration problems are raised before any randomness is consumed, so a bad
call fails the same way every time.
"""
import os
from contextlib import contextmanager
from typing import Optional


class LuckyFiveError(Exception):
    """Base exception for luckyfive-specific errors."""
    pass


class InvalidConfigurationError(LuckyFiveError, ValueError):
    """Raised when engine parameters or configuration values are invalid."""
    pass


class InvalidDrawError(InvalidConfigurationError):
    """Raised when a historical or actual draw violates the domain rules."""

    def __init__(self, message: str, index: Optional[int] = None):
        if index is not None:
            message = f"draw #{index}: {message}"
        super().__init__(message)
        self.index = index


class CancelledError(LuckyFiveError):
    """Raised when a generation call is cancelled; no partial output is kept."""
    pass


class DataError(LuckyFiveError):
    """Raised when history data is missing, unreadable or malformed."""
    pass


@contextmanager
def safe_file_operation(file_path: str, operation: str = "read"):
    """Context manager for file operations that maps OS errors to DataError."""
    try:
        if operation in ["write", "append"]:
            parent = os.path.dirname(file_path)
            if parent:
                os.makedirs(parent, exist_ok=True)

        yield

    except FileNotFoundError as e:
        raise DataError(f"File not found: {file_path}") from e
    except PermissionError as e:
        raise DataError(f"Permission denied accessing file: {file_path}") from e
    except OSError as e:
        raise DataError(f"File operation failed for {file_path}: {e}") from e


def check_cancelled(cancel_event, stage: str = "") -> None:
    """Raise CancelledError if the caller's cancellation event is set."""
    if cancel_event is not None and cancel_event.is_set():
        where = f" during {stage}" if stage else ""
        raise CancelledError(f"generation cancelled{where}")
