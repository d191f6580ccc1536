"""Tests for per-game rate estimation."""

from datetime import date

import pytest

from backend.core.errors import InsufficientData
from backend.core.interfaces import GameLogEntry
from backend.core.rates import estimate_rates, field_mean, usable_values


def _entry(orb, drb, rebs=None, day=1):
    return GameLogEntry(game_date=date(2025, 1, day), orb=orb, drb=drb, rebs=rebs)


class TestEstimateRates:

    def test_sample_means(self):
        log = [_entry(3, 6, day=1), _entry(4, 7, day=2), _entry(5, 8, day=3)]
        rates = estimate_rates(log)
        assert rates.lambda_orb == 4.0
        assert rates.lambda_drb == 7.0
        assert rates.lambda_trb == 11.0

    def test_missing_values_dropped_per_field(self):
        # Game 2 has no orb but its drb still counts
        log = [_entry(2, 6, day=1), _entry(None, 9, day=2), _entry(4, None, day=3)]
        rates = estimate_rates(log)
        assert rates.lambda_orb == pytest.approx(3.0)   # (2 + 4) / 2
        assert rates.lambda_drb == pytest.approx(7.5)   # (6 + 9) / 2

    def test_nan_treated_as_missing(self):
        log = [_entry(float("nan"), 5, day=1), _entry(1, 5, day=2)]
        assert estimate_rates(log).lambda_orb == 1.0

    def test_zero_rebounds_is_a_valid_rate(self):
        log = [_entry(0, 0, day=1), _entry(0, 0, day=2)]
        rates = estimate_rates(log)
        assert rates.lambda_orb == 0.0
        assert rates.lambda_drb == 0.0

    def test_all_orb_missing_raises(self):
        log = [_entry(None, 5, day=1), _entry(None, 6, day=2)]
        with pytest.raises(InsufficientData) as exc_info:
            estimate_rates(log, athlete="No Boards")
        assert exc_info.value.field == "orb"
        assert exc_info.value.athlete == "No Boards"

    def test_all_drb_missing_raises(self):
        log = [_entry(1, None, day=1)]
        with pytest.raises(InsufficientData) as exc_info:
            estimate_rates(log)
        assert exc_info.value.field == "drb"

    def test_empty_log_raises(self):
        with pytest.raises(InsufficientData):
            estimate_rates([])

    def test_insufficient_data_is_a_value_error(self):
        with pytest.raises(ValueError):
            field_mean([], "rebs")


def test_usable_values_drops_none_and_nan():
    assert usable_values([1, None, 2.5, float("nan"), 0]) == [1.0, 2.5, 0.0]
