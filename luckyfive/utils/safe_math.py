"""
Safe numerical operations for the luckyfive prediction engine.
Degenerate inputs (zero totals, empty histories) fall back to uniform values
instead of raising, so the engine always produces full combinations.
"""
import numpy as np
from typing import Union


def safe_divide(
    numerator: Union[np.ndarray, float],
    denominator: Union[np.ndarray, float],
    eps: float = 1e-12,
    default_value: float = 0.0
) -> Union[np.ndarray, float]:
    """
    Perform division with protection against division by zero.

    Args:
        numerator: The numerator
        denominator: The denominator
        eps: Magnitude below which the denominator is treated as zero
        default_value: Value returned where the denominator is zero

    Returns:
        Result of safe division
    """
    if isinstance(denominator, np.ndarray):
        numerator = np.asarray(numerator, dtype=np.float64)
        out = np.full(np.broadcast(numerator, denominator).shape, default_value, dtype=np.float64)
        mask = np.abs(denominator) >= eps
        np.divide(numerator, denominator, out=out, where=mask)
        return out

    if abs(denominator) < eps:
        return default_value
    return numerator / denominator


def safe_normalize(weights: np.ndarray, target_sum: float = 1.0) -> np.ndarray:
    """
    Scale non-negative weights so they sum to target_sum.

    An all-zero (or non-finite) weight vector becomes uniform.
    """
    weights = np.asarray(weights, dtype=np.float64)
    if weights.size == 0:
        return weights
    weights = np.where(np.isfinite(weights) & (weights > 0), weights, 0.0)
    total = weights.sum()
    if total <= 0:
        return np.full(weights.shape, target_sum / weights.size)
    return weights * (target_sum / total)
