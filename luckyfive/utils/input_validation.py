"""
Validation of engine parameters and draws.

Parameters may come from YAML, the CLI or Python callers, so scalar
validators accept numeric strings as well as numbers. Draws must already be
integer sequences.
"""
from collections.abc import Sequence as SequenceABC
from numbers import Integral, Real
from typing import Callable, List, Optional, Sequence, Tuple, Union

import numpy as np

from .error_handling import InvalidConfigurationError, InvalidDrawError


class ValidationError(InvalidConfigurationError):
    """Raised when a single parameter value fails validation."""
    pass


def _parse_text(value, name: str, parse: Callable, kind: str, default):
    """Parse a string parameter; blank strings fall back to `default`."""
    text = value.strip()
    if not text:
        if default is None:
            raise ValidationError(f"{name} cannot be empty.")
        return default
    try:
        return parse(text)
    except ValueError:
        raise ValidationError(f"{name} must be a valid {kind}, got {value!r}.")


def _check_bounds(value, name: str, min_val, max_val, exclusive_min: bool = False):
    if exclusive_min and value <= min_val:
        raise ValidationError(f"{name} must be greater than {min_val}, got {value}.")
    if value < min_val:
        raise ValidationError(f"{name} must be at least {min_val}, got {value}.")
    if max_val is not None and value > max_val:
        raise ValidationError(f"{name} must not exceed {max_val}, got {value}.")
    return value


class InputValidator:
    """Validation helpers shared by the config layer and the engine."""

    @staticmethod
    def validate_positive_integer(
        value: Union[str, int],
        name: str,
        min_val: int = 1,
        max_val: Optional[int] = None,
        default: Optional[int] = None
    ) -> int:
        """Integer in [min_val, max_val]; bools are rejected even though they are ints."""
        if isinstance(value, str):
            value = _parse_text(value, name, int, "integer", default)
        if isinstance(value, bool) or not isinstance(value, Integral):
            raise ValidationError(f"{name} must be an integer, got {type(value).__name__}.")
        return _check_bounds(int(value), name, min_val, max_val)

    @staticmethod
    def validate_float_range(
        value: Union[str, float],
        name: str,
        min_val: float = 0.0,
        max_val: Optional[float] = None,
        default: Optional[float] = None,
        exclusive_min: bool = False
    ) -> float:
        if isinstance(value, str):
            value = _parse_text(value, name, float, "number", default)
        if isinstance(value, bool) or not isinstance(value, Real):
            raise ValidationError(f"{name} must be a number, got {type(value).__name__}.")
        value = float(value)
        if value != value:
            raise ValidationError(f"{name} must not be NaN.")
        return _check_bounds(value, name, min_val, max_val, exclusive_min)

    @staticmethod
    def validate_number_combination(
        numbers: Sequence[int],
        pick_count: int = 5,
        max_num: int = 80,
        index: Optional[int] = None
    ) -> Tuple[int, ...]:
        """Check one draw against the domain and return it sorted ascending."""
        if isinstance(numbers, np.ndarray):
            if numbers.ndim != 1:
                raise InvalidDrawError(f"expected a flat row, got an array of shape {numbers.shape}", index)
            numbers = numbers.tolist()
        elif isinstance(numbers, (str, bytes)) or not isinstance(numbers, SequenceABC):
            raise InvalidDrawError(f"expected a sequence of numbers, got {type(numbers).__name__}", index)
        if len(numbers) != pick_count:
            raise InvalidDrawError(f"expected {pick_count} numbers, got {len(numbers)}", index)
        if any(isinstance(n, bool) or not isinstance(n, Integral) for n in numbers):
            raise InvalidDrawError(f"numbers must be integers: {list(numbers)}", index)
        if len(set(numbers)) != pick_count:
            raise InvalidDrawError(f"numbers must be distinct: {list(numbers)}", index)
        out_of_range = [n for n in numbers if not 1 <= n <= max_num]
        if out_of_range:
            raise InvalidDrawError(f"numbers outside 1..{max_num}: {out_of_range}", index)
        return tuple(sorted(int(n) for n in numbers))


def validate_history(history, pick_count: int, max_num: int) -> List[Tuple[int, ...]]:
    """
    Validate a whole draw history.

    Slot order of each draw is preserved because positional frequency is
    counted by slot as stored.
    """
    validated = []
    for i, draw in enumerate(history):
        InputValidator.validate_number_combination(draw, pick_count, max_num, index=i)
        validated.append(tuple(int(n) for n in draw))
    return validated
