#!/usr/bin/env python3
"""Tests for per-vehicle analytics and mission quotes."""

import pytest

from models import (
    Mission,
    MissionStatus,
    Trend,
    build_vehicle_analytics,
    calc_cost_per_mile,
    calc_fuel_log_stats,
    calc_mission_stats,
    load_fleet,
    quote_mission,
)


class TestFuelLogStats:
    """Tests for calc_fuel_log_stats."""

    def test_no_logs(self):
        assert calc_fuel_log_stats([]) is None

    def test_totals(self, fleet_file):
        logs = load_fleet(fleet_file).get_fuel_logs("rig1")
        stats = calc_fuel_log_stats(logs)
        assert stats.total_logs == 3
        assert stats.total_cost == pytest.approx(410)
        assert stats.average_mpg == pytest.approx(10.0)

    def test_no_mpg_averages_zero(self, fleet_file):
        logs = load_fleet(fleet_file).get_fuel_logs("rig2")
        assert calc_fuel_log_stats(logs).average_mpg == 0


class TestMissionStats:
    """Tests for calc_mission_stats."""

    def test_only_finished_missions_count(self, fleet_file):
        missions = load_fleet(fleet_file).get_missions("rig1")
        stats = calc_mission_stats(missions)
        assert stats.total_missions == 2
        assert stats.total_miles == 600
        assert stats.total_earnings == 1600
        assert stats.earnings_per_mile == pytest.approx(1600 / 600)

    def test_none_finished(self):
        missions = [Mission("m1", "rig1", "A", "B", 100)]
        assert calc_mission_stats(missions) is None

    def test_zero_miles(self):
        missions = [Mission("m1", "rig1", "A", "B", 100, MissionStatus.COMPLETED)]
        assert calc_mission_stats(missions).earnings_per_mile == 0


class TestCostPerMile:
    """Tests for calc_cost_per_mile."""

    def test_cpm(self, fleet_file):
        fleet = load_fleet(fleet_file)
        cpm = calc_cost_per_mile(fleet.get_fuel_logs("rig1"), fleet.get_missions("rig1"))
        assert cpm.total_fuel_cost == pytest.approx(410)
        assert cpm.total_miles == 600
        assert cpm.cpm == pytest.approx(410 / 600)

    def test_no_miles(self, fleet_file):
        fleet = load_fleet(fleet_file)
        assert calc_cost_per_mile(fleet.get_fuel_logs("rig2"), []) is None


class TestQuoteMission:
    """Tests for quote_mission."""

    def test_quote(self):
        quote = quote_mission(1850, 260, 3.9, 6.5)
        assert quote.fuel_cost == pytest.approx(156.0)
        assert quote.net_profit == pytest.approx(1694.0)
        assert quote.cpm == pytest.approx(0.6)
        assert quote.is_profitable is True

    def test_default_mpg(self):
        assert quote_mission(1000, 130, 4.0).mpg == 6.5

    @pytest.mark.parametrize("mpg", [None, 0, -3])
    def test_invalid_mpg_falls_back(self, mpg):
        assert quote_mission(1000, 130, 4.0, mpg).mpg == 6.5

    def test_unprofitable(self):
        quote = quote_mission(50, 260, 4.0, 6.5)
        assert quote.is_profitable is False

    def test_zero_miles(self):
        quote = quote_mission(100, 0, 4.0)
        assert quote.fuel_cost == 0
        assert quote.cpm == 0


class TestBuildVehicleAnalytics:
    """Tests for build_vehicle_analytics."""

    def test_rig1(self, fleet_file):
        analytics = build_vehicle_analytics(load_fleet(fleet_file), "rig1")
        assert analytics.vehicle_id == "rig1"
        assert [log.id for log in analytics.mpg_series] == ["l2", "l3"]
        assert analytics.trend == Trend.STABLE
        assert analytics.cost_per_mile.cpm == pytest.approx(410 / 600)
        assert analytics.fuel_stats.total_logs == 3
        assert analytics.mission_stats.total_missions == 2
        assert [log.id for log in analytics.recent_fuel_logs] == ["l3", "l2", "l1"]
        assert [m.id for m in analytics.recent_missions] == ["m1-completed", "m3-history"]
        assert [e.id for e in analytics.recent_expenses] == ["e2", "e1"]

    def test_too_few_samples_keeps_previous_trend(self, fleet_file):
        analytics = build_vehicle_analytics(
            load_fleet(fleet_file), "rig1", previous_trend=Trend.DOWN
        )
        assert analytics.trend == Trend.DOWN

    def test_vehicle_without_data(self, fleet_file):
        analytics = build_vehicle_analytics(load_fleet(fleet_file), "rig2")
        assert analytics.mpg_series == []
        assert analytics.trend == Trend.STABLE
        assert analytics.cost_per_mile is None
        assert analytics.mission_stats is None
