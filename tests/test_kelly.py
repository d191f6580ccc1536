"""
Tests for Kelly stake sizing
Run with: pytest tests/test_kelly.py -v
"""

import pytest

from backend.core.errors import InvalidOdds
from backend.core.kelly import kelly_fraction, stake


class TestKellyFraction:

    def test_no_edge_is_exactly_zero(self):
        # B·P == Q: 1.0 × 0.5 == 0.5
        assert kelly_fraction(0.5, 1.0) == 0.0
        # 3.0 × 0.25 == 0.75
        assert kelly_fraction(0.25, 3.0) == 0.0

    @pytest.mark.parametrize("payout", [0.1, 0.5, 1.0, 2.5, 40.0])
    def test_certain_win_bets_full_bankroll(self, payout):
        assert kelly_fraction(1.0, payout) == 1.0

    def test_positive_edge(self):
        assert kelly_fraction(0.55, 1.0) == pytest.approx(0.10)

    def test_negative_edge_is_reported_not_clipped(self):
        assert kelly_fraction(0.40, 1.0) == pytest.approx(-0.20)

    def test_rejects_bad_inputs(self):
        with pytest.raises(ValueError):
            kelly_fraction(1.2, 1.0)
        with pytest.raises(ValueError):
            kelly_fraction(0.5, 0.0)


class TestStake:

    def test_quarter_kelly_percent(self):
        result = stake(0.55, +100)
        assert result.net_payout == 1.0
        assert result.kelly_fraction == pytest.approx(0.10)
        assert result.quarter_kelly_percent == pytest.approx(2.5)
        assert result.has_edge

    def test_negative_quote(self):
        # -150 → B = 250/150 − 1 = 2/3; P = 0.7 → f* = (0.4667 − 0.3) / 0.6667 = 0.25
        result = stake(0.7, -150)
        assert result.net_payout == pytest.approx(2 / 3)
        assert result.kelly_fraction == pytest.approx(0.25)
        assert result.quarter_kelly_percent == pytest.approx(6.25)

    def test_overpriced_quote_has_no_edge(self):
        result = stake(0.30, -150)
        assert result.kelly_fraction < 0
        assert result.quarter_kelly_percent < 0
        assert not result.has_edge

    def test_custom_divisor(self):
        result = stake(0.55, +100, kelly_divisor=2.0)
        assert result.quarter_kelly_percent == pytest.approx(5.0)

    def test_zero_quote_is_invalid(self):
        with pytest.raises(InvalidOdds) as exc_info:
            stake(0.5, 0)
        assert exc_info.value.odds == 0

    @pytest.mark.parametrize("quote", [float("inf"), float("-inf"), float("nan")])
    def test_non_finite_quote_is_invalid(self, quote):
        with pytest.raises(InvalidOdds):
            stake(0.6, quote)

    def test_implied_probability_of_quote(self):
        result = stake(0.7, -150)
        assert result.implied_probability == pytest.approx(0.6)
        assert result.has_edge

    def test_certain_win(self):
        result = stake(1.0, -300)
        assert result.kelly_fraction == 1.0
        assert result.quarter_kelly_percent == 25.0

    def test_rejects_non_positive_divisor(self):
        with pytest.raises(ValueError):
            stake(0.5, +100, kelly_divisor=0)


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
