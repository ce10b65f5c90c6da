"""
Unit tests for moving-average crossover detection.
"""

import pytest

from advisor_chart.core.types import SignalType
from advisor_chart.indicators.crossover import Crossover, detect_crossovers
from advisor_chart.indicators.sma import moving_average
from tests.fixtures.sample_data import (
    ZIGZAG_VALUES,
    create_price_points,
    create_trending_values,
)


class TestDetectCrossovers:
    """Test suite for detect_crossovers."""

    def test_zigzag_sell_then_buy(self):
        """Fast=2/slow=4 on the zigzag crosses down at 6 and up at 10."""
        fast = moving_average(ZIGZAG_VALUES, 2)
        slow = moving_average(ZIGZAG_VALUES, 4)

        crossovers = detect_crossovers(fast, slow)

        assert crossovers == [
            Crossover(6, SignalType.SELL),
            Crossover(10, SignalType.BUY),
        ]

    def test_single_buy_over_flat_slow_line(self):
        fast = [1.0, 2.0, 3.0, 4.0]
        slow = [2.5, 2.5, 2.5, 2.5]

        assert detect_crossovers(fast, slow) == [Crossover(2, SignalType.BUY)]

    def test_single_sell_under_flat_slow_line(self):
        fast = [4.0, 3.0, 2.0, 1.0]
        slow = [2.5, 2.5, 2.5, 2.5]

        assert detect_crossovers(fast, slow) == [Crossover(2, SignalType.SELL)]

    def test_touch_is_not_a_cross(self):
        """Meeting the slow line and turning back gives no signal."""
        fast = [1.0, 2.0, 1.0]
        slow = [2.0, 2.0, 2.0]

        assert detect_crossovers(fast, slow) == []

    def test_tie_counts_as_prior_state(self):
        """A cross that passes through equality fires on the strict session."""
        fast = [1.0, 2.0, 3.0]
        slow = [2.0, 2.0, 2.0]

        assert detect_crossovers(fast, slow) == [Crossover(2, SignalType.BUY)]

    def test_tie_between_up_and_down(self):
        fast = [3.0, 2.0, 1.0, 2.0, 3.0]
        slow = [2.0, 2.0, 2.0, 2.0, 2.0]

        assert detect_crossovers(fast, slow) == [
            Crossover(2, SignalType.SELL),
            Crossover(4, SignalType.BUY),
        ]

    def test_missing_values_are_skipped(self):
        fast = [None, 1.0, 3.0, None, 1.0]
        slow = [None, 2.0, 2.0, 2.0, 2.0]

        # index 3 has no fast value, so neither 3 nor 4 can be compared
        assert detect_crossovers(fast, slow) == [Crossover(2, SignalType.BUY)]

    def test_first_index_never_fires(self):
        fast = [5.0, 1.0]
        slow = [1.0, 5.0]

        result = detect_crossovers(fast, slow)

        assert [c.index for c in result] == [1]

    def test_monotonic_trend_has_no_crossovers(self):
        values = create_trending_values(100, trend="bull")
        fast = moving_average(values, 5)
        slow = moving_average(values, 20)

        assert detect_crossovers(fast, slow) == []

    def test_signals_alternate_direction(self):
        closes = [p.close for p in create_price_points(periods=300)]
        crossovers = detect_crossovers(moving_average(closes, 5), moving_average(closes, 20))

        assert crossovers, "random walk should cross at least once"
        for previous, current in zip(crossovers, crossovers[1:]):
            assert previous.index < current.index
            assert previous.type is not current.type

    def test_empty_and_single_value(self):
        assert detect_crossovers([], []) == []
        assert detect_crossovers([1.0], [2.0]) == []

    def test_length_mismatch_raises(self):
        with pytest.raises(ValueError, match="aligned"):
            detect_crossovers([1.0, 2.0], [1.0])
