"""Tests for decimal precision normalization."""

import pytest

from dexcore.constants import UINT128_MAX
from dexcore.errors import ArithmeticOverflow
from dexcore.math import (
    adjust_precision,
    denormalize_amounts,
    greatest_precision,
    normalize_amounts,
)


class TestAdjustPrecision:
    """Tests for adjust_precision."""

    def test_scale_up(self):
        """Scaling up multiplies exactly."""
        assert adjust_precision(1, 6, 18) == 10**12
        assert adjust_precision(1_500_000, 6, 8) == 150_000_000

    def test_scale_down_floors(self):
        """Scaling down floors, never rounds up."""
        assert adjust_precision(1_999_999, 6, 0) == 1
        assert adjust_precision(999, 6, 3) == 0

    def test_same_precision_is_identity(self):
        assert adjust_precision(123_456, 6, 6) == 123_456

    def test_zero(self):
        assert adjust_precision(0, 0, 18) == 0

    def test_overflow_raises(self):
        """A scaled value above uint128 raises ArithmeticOverflow."""
        with pytest.raises(ArithmeticOverflow):
            adjust_precision(UINT128_MAX, 0, 1)

    def test_max_value_same_precision(self):
        assert adjust_precision(UINT128_MAX, 18, 18) == UINT128_MAX

    def test_negative_precision_raises(self):
        with pytest.raises(ValueError):
            adjust_precision(1, -1, 6)


class TestNormalizeAmounts:
    """Tests for normalizing amounts across assets."""

    def test_greatest_precision(self):
        assert greatest_precision([6, 18, 8]) == 18

    def test_greatest_precision_empty_raises(self):
        with pytest.raises(ValueError):
            greatest_precision([])

    def test_normalize(self):
        """Each amount is scaled from its own precision to the target."""
        amounts = normalize_amounts([1_000_000, 10**18], [6, 18], 18)
        assert amounts == [10**18, 10**18]

    def test_denormalize_floors(self):
        """Projection back to an asset's precision drops the extra digits."""
        amounts = denormalize_amounts([1_234_567_891_234_567_891, 10**18], [6, 18], 18)
        assert amounts == [1_234_567, 10**18]

    @pytest.mark.parametrize("amount", [0, 1, 999_999, 123_456_789, 10**20])
    def test_round_trip_never_overstates(self, amount):
        """normalize then denormalize returns at most the original amount."""
        normalized = normalize_amounts([amount], [6], 18)
        assert denormalize_amounts(normalized, [6], 18) == [amount]

        # And the reverse direction floors
        projected = denormalize_amounts([amount], [6], 18)
        assert normalize_amounts(projected, [6], 18)[0] <= amount

    def test_length_mismatch_raises(self):
        with pytest.raises(ValueError):
            normalize_amounts([1, 2], [6], 18)
        with pytest.raises(ValueError):
            denormalize_amounts([1], [6, 18], 18)
