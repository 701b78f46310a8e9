#!/usr/bin/env python3
"""Tests for readiness and trend calculations."""

from datetime import datetime, timedelta, timezone

import pytest

from models import (
    FuelLogEntry,
    HealthStatus,
    OilStatus,
    Trend,
    calc_average_mpg,
    calc_fleet_efficiency_trend,
    calc_fleet_score,
    calc_health_score,
    calc_miles_until_oil_change,
    calc_mpg,
    calc_trip_miles,
    calc_vehicle_mpg_trend,
    check_oil_status,
    health_status_for,
    is_data_stale,
    parse_timestamp,
)
from models.calculations import percent_difference, round_half_up

NOW = datetime(2024, 6, 15, 12, 0, tzinfo=timezone.utc)


def _log(trip_miles=None, gallons=None):
    return FuelLogEntry(
        "x", "rig1", "2024-06-01T00:00:00+00:00", 1000, gallons, None, trip_miles
    )


class TestParseTimestamp:
    """Tests for parse_timestamp."""

    def test_naive_is_utc(self):
        assert parse_timestamp("2024-06-01T12:00:00") == datetime(
            2024, 6, 1, 12, 0, tzinfo=timezone.utc
        )

    def test_offset_preserved(self):
        dt = parse_timestamp("2024-06-01T12:00:00-05:00")
        assert dt == datetime(2024, 6, 1, 17, 0, tzinfo=timezone.utc)

    def test_datetime_passthrough(self):
        assert parse_timestamp(NOW) is NOW


class TestOilChange:
    """Tests for calc_miles_until_oil_change and check_oil_status."""

    def test_miles_until(self):
        assert calc_miles_until_oil_change(100000, 98000, 5000) == 3000

    def test_miles_until_overdue_is_negative(self):
        assert calc_miles_until_oil_change(50000, 44500, 5000) == -500

    def test_fresh_oil_change(self):
        """Interval 5000 with no miles since the change is GOOD."""
        miles = calc_miles_until_oil_change(20000, 20000, 5000)
        assert miles == 5000
        assert check_oil_status(miles) == OilStatus.GOOD

    @pytest.mark.parametrize(
        "miles,expected",
        [
            (-1, OilStatus.OVERDUE),
            (0, OilStatus.WARNING),
            (999, OilStatus.WARNING),
            (1000, OilStatus.GOOD),
        ],
    )
    def test_thresholds(self, miles, expected):
        assert check_oil_status(miles) == expected


class TestIsDataStale:
    """Tests for is_data_stale."""

    def test_no_log_is_stale(self):
        assert is_data_stale(None, NOW) is True

    def test_exactly_fourteen_days_is_fresh(self):
        assert is_data_stale(NOW - timedelta(days=14), NOW) is False

    def test_just_over_fourteen_days_is_stale(self):
        assert is_data_stale(NOW - timedelta(days=14, seconds=1), NOW) is True

    def test_accepts_string(self):
        assert is_data_stale("2024-06-14T12:00:00Z", NOW) is False


class TestHealthScore:
    """Tests for calc_health_score and health_status_for."""

    @pytest.mark.parametrize(
        "oil,stale,expected",
        [
            (OilStatus.GOOD, False, 100),
            (OilStatus.WARNING, False, 70),
            (OilStatus.OVERDUE, False, 0),
            (OilStatus.GOOD, True, 50),
            (OilStatus.WARNING, True, 50),
            (OilStatus.OVERDUE, True, 0),
        ],
    )
    def test_score(self, oil, stale, expected):
        assert calc_health_score(oil, stale) == expected

    def test_staleness_never_raises_score(self):
        for oil in OilStatus:
            assert calc_health_score(oil, True) <= calc_health_score(oil, False)

    @pytest.mark.parametrize(
        "score,expected",
        [
            (100, HealthStatus.COMBAT_READY),
            (80, HealthStatus.COMBAT_READY),
            (79, HealthStatus.MAINTENANCE_REQUIRED),
            (50, HealthStatus.MAINTENANCE_REQUIRED),
            (49, HealthStatus.GROUNDED),
            (0, HealthStatus.GROUNDED),
        ],
    )
    def test_status_buckets(self, score, expected):
        assert health_status_for(score) == expected


class TestFleetScore:
    """Tests for calc_fleet_score."""

    def test_empty_is_zero(self):
        assert calc_fleet_score([]) == 0

    def test_mean(self):
        assert calc_fleet_score([100, 0]) == 50

    def test_rounds_to_nearest(self):
        assert calc_fleet_score([100, 70, 0]) == 57

    def test_half_rounds_up(self):
        assert round_half_up(70.5) == 71
        assert calc_fleet_score([70, 71]) == 71


class TestFleetEfficiencyTrend:
    """Tests for calc_fleet_efficiency_trend."""

    def test_up(self):
        assert calc_fleet_efficiency_trend([10, 10, 10, 20, 20, 20]) == Trend.UP

    def test_down(self):
        assert calc_fleet_efficiency_trend([20, 20, 20, 10, 10, 10]) == Trend.DOWN

    def test_within_threshold_is_stable(self):
        assert (
            calc_fleet_efficiency_trend([10, 10, 10, 10.2, 10.2, 10.2]) == Trend.STABLE
        )

    def test_too_few_samples_is_stable(self):
        assert calc_fleet_efficiency_trend([10, 20]) == Trend.STABLE

    def test_odd_count_splits_at_floor(self):
        """[10] vs [10, 11]: newer mean 10.5 is +5%."""
        assert calc_fleet_efficiency_trend([10, 10, 11]) == Trend.UP

    def test_zero_older_mean_is_stable(self):
        assert calc_fleet_efficiency_trend([0, 0, 5, 5]) == Trend.STABLE

    def test_percent_difference(self):
        assert percent_difference(10, 11) == pytest.approx(10.0)
        assert percent_difference(0, 5) is None


class TestVehicleMpgTrend:
    """Tests for calc_vehicle_mpg_trend."""

    def test_no_samples_resets_to_stable(self):
        assert calc_vehicle_mpg_trend([], previous=Trend.UP) == Trend.STABLE

    def test_too_few_samples_keeps_previous(self):
        assert calc_vehicle_mpg_trend([10, 12], previous=Trend.DOWN) == Trend.DOWN

    def test_no_older_window_keeps_previous(self):
        assert calc_vehicle_mpg_trend([10, 10, 10], previous=Trend.UP) == Trend.UP

    def test_up(self):
        assert calc_vehicle_mpg_trend([10, 10, 10, 11, 11, 11]) == Trend.UP

    def test_down(self):
        assert calc_vehicle_mpg_trend([20, 20, 20, 18, 18, 18]) == Trend.DOWN

    def test_within_five_percent_is_stable(self):
        assert calc_vehicle_mpg_trend([10, 10, 10, 10.4, 10.4, 10.4]) == Trend.STABLE

    def test_only_last_six_samples_count(self):
        assert calc_vehicle_mpg_trend([100, 10, 10, 10, 10, 10, 10]) == Trend.STABLE


class TestFuelMath:
    """Tests for calc_trip_miles, calc_mpg and calc_average_mpg."""

    def test_first_log_has_no_trip(self):
        assert calc_trip_miles(99000, None) is None

    def test_trip_miles(self):
        assert calc_trip_miles(99500, 99000) == 500

    def test_mpg(self):
        assert calc_mpg(500, 50) == pytest.approx(10.0)

    @pytest.mark.parametrize("trip,gallons", [(500, None), (None, 50), (500, 0)])
    def test_mpg_unavailable(self, trip, gallons):
        assert calc_mpg(trip, gallons) is None

    def test_average_mpg_is_total_over_total(self):
        logs = [_log(None, 40), _log(500, 50), _log(300, 50)]
        assert calc_average_mpg(logs) == pytest.approx(800 / 100)

    def test_average_mpg_skips_odometer_only_miles(self):
        """An odometer-only reading between fills does not inflate the average."""
        logs = [_log(None, 10), _log(300, None), _log(300, 30)]
        assert calc_average_mpg(logs) == pytest.approx(10.0)

    def test_average_mpg_first_fill_only(self):
        assert calc_average_mpg([_log(None, 40)]) is None

    def test_average_mpg_no_gallons(self):
        assert calc_average_mpg([_log(500, None)]) is None

    def test_average_mpg_no_logs(self):
        assert calc_average_mpg([]) is None
