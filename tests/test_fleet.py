#!/usr/bin/env python3
"""Tests for Fleet queries."""

from datetime import timedelta

from models import Fleet, MissionStatus, ReportStatus, load_fleet


class TestFleet:
    """Tests for Fleet class."""

    def test_empty(self):
        fleet = Fleet("alpha-user")
        assert fleet.vehicles == []
        assert fleet.fuel_logs == []
        assert fleet.display_name == "alpha-user"

    def test_display_name_prefers_callsign(self, fleet_file):
        assert load_fleet(fleet_file).display_name == "Alpha Haulers"

    def test_get_vehicle(self, fleet_file):
        fleet = load_fleet(fleet_file)
        assert fleet.get_vehicle("rig2").name == "Old Yeller"
        assert fleet.get_vehicle("nope") is None


class TestFuelLogQueries:
    """Tests for fuel log lookups."""

    def test_sorted_oldest_first(self, fleet_file):
        fleet = load_fleet(fleet_file)
        assert [log.id for log in fleet.get_fuel_logs("rig1")] == ["l1", "l2", "l3"]

    def test_all_vehicles(self, fleet_file):
        fleet = load_fleet(fleet_file)
        assert [log.id for log in fleet.get_fuel_logs()] == ["l4", "l1", "l2", "l3"]

    def test_last_fuel_log(self, fleet_file):
        fleet = load_fleet(fleet_file)
        assert fleet.get_last_fuel_log("rig1").id == "l3"
        assert fleet.get_last_fuel_log("nope") is None

    def test_recent_mpg_logs(self, fleet_file, now):
        fleet = load_fleet(fleet_file)
        assert [log.id for log in fleet.get_recent_mpg_logs(now, 7)] == ["l2", "l3"]
        assert [log.id for log in fleet.get_recent_mpg_logs(now, 3)] == ["l3"]

    def test_recent_mpg_logs_window_is_inclusive(self, fleet_file, now):
        fleet = load_fleet(fleet_file)
        logs = fleet.get_recent_mpg_logs(now - timedelta(days=1), 4)
        assert [log.id for log in logs] == ["l2", "l3"]

    def test_mpg_series_skips_logs_without_mpg(self, fleet_file):
        fleet = load_fleet(fleet_file)
        assert [log.id for log in fleet.get_mpg_series("rig1")] == ["l2", "l3"]
        assert fleet.get_mpg_series("rig2") == []


class TestMissionQueries:
    """Tests for mission lookups."""

    def test_newest_first(self, fleet_file):
        fleet = load_fleet(fleet_file)
        assert [m.id for m in fleet.get_missions("rig1")] == [
            "m2-active",
            "m1-completed",
            "m3-history",
        ]

    def test_status_filter(self, fleet_file):
        fleet = load_fleet(fleet_file)
        active = fleet.get_missions(statuses=[MissionStatus.ACTIVE])
        assert [m.id for m in active] == ["m2-active"]

    def test_finished(self, fleet_file):
        fleet = load_fleet(fleet_file)
        assert [m.id for m in fleet.get_finished_missions("rig1")] == [
            "m1-completed",
            "m3-history",
        ]
        assert fleet.get_finished_missions("rig2") == []


class TestOtherQueries:
    """Tests for expense and field report lookups."""

    def test_expenses_newest_first(self, fleet_file):
        fleet = load_fleet(fleet_file)
        assert [e.id for e in fleet.get_expenses("rig1")] == ["e2", "e1"]

    def test_field_reports_by_status(self, fleet_file):
        fleet = load_fleet(fleet_file)
        assert [r.id for r in fleet.get_field_reports(ReportStatus.PENDING)] == ["r1"]
        assert fleet.get_field_reports(ReportStatus.PUBLISHED) == []
