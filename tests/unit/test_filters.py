"""
Tests for the topological filter gate.
"""
import pytest

from luckyfive.filters import FilterGate, count_adjacent_pairs, count_odd
from luckyfive.infrastructure.config import FilterConfig


class TestFilterHelpers:

    def test_count_odd(self):
        assert count_odd((1, 2, 3, 4, 5)) == 3
        assert count_odd((2, 4, 6, 8, 10)) == 0

    def test_count_adjacent_pairs_ignores_input_order(self):
        assert count_adjacent_pairs((5, 1, 3, 2, 4)) == 4
        assert count_adjacent_pairs((10, 20, 30, 40, 50)) == 0


class TestFilterGate:
    """Test FilterGate pass/fail rules."""

    @pytest.mark.parametrize("candidate,expected", [
        ((10, 21, 30, 41, 50), True),     # sum 152, mixed parity
        ((1, 2, 3, 4, 5), False),         # sum below range
        ((70, 75, 76, 79, 80), False),    # sum above range
        ((20, 22, 30, 40, 60), False),    # all even
        ((21, 23, 31, 41, 61), False),    # all odd
        ((30, 31, 32, 33, 50), False),    # three adjacent pairs
        ((30, 31, 32, 45, 50), True),     # two adjacent pairs allowed
    ])
    def test_default_bounds(self, candidate, expected):
        assert FilterGate().passes(candidate) is expected

    def test_sum_bounds_inclusive(self):
        gate = FilterGate(FilterConfig(sum_min=152, sum_max=152))

        assert gate((10, 21, 30, 41, 50))

    def test_custom_adjacency(self):
        gate = FilterGate(FilterConfig(max_adjacent_pairs=3))

        assert gate((30, 31, 32, 33, 50))

    def test_disabled_gate_passes_everything(self):
        gate = FilterGate(enabled=False)

        assert gate((1, 2, 3, 4, 5))
        assert gate((2, 4, 6, 8, 10))
