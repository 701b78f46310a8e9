"""
Fleet tracking models.

This package provides data models and calculations for VextorGrid:
- Status enums: OilStatus, HealthStatus, Trend, MissionStatus, ReportStatus
- Vehicle, FuelLogEntry, Mission, Expense, FieldReport: stored rows
- Fleet: one user's rows plus simple filtered queries
- Session: the acting user and reference time
- score_vehicle / score_fleet: vehicle readiness scoring
- Analytics: fuel, mission, cost-per-mile stats and mission quotes
"""

from .status import OilStatus, HealthStatus, Trend, MissionStatus, ReportStatus
from .vehicle import Vehicle
from .fuel_log import FuelLogEntry, validate_fuel_input
from .mission import Mission
from .expense import Expense
from .field_report import FieldReport, make_slug
from .fleet import Fleet
from .session import Session
from .calculations import (
    calc_miles_until_oil_change,
    check_oil_status,
    is_data_stale,
    calc_health_score,
    health_status_for,
    calc_fleet_score,
    calc_fleet_efficiency_trend,
    calc_vehicle_mpg_trend,
    calc_trip_miles,
    calc_mpg,
    calc_average_mpg,
    parse_timestamp,
)
from .readiness import VehicleReadiness, FleetReadiness, score_vehicle, score_fleet
from .analytics import (
    FuelLogStats,
    MissionStats,
    CostPerMile,
    MissionQuote,
    VehicleAnalytics,
    calc_fuel_log_stats,
    calc_mission_stats,
    calc_cost_per_mile,
    quote_mission,
    build_vehicle_analytics,
)
from .loader import (
    load_fleet,
    load_fleet_or_empty,
    create_fleet,
    add_vehicle,
    update_vehicle_odometer,
    record_oil_change,
    delete_vehicle,
    save_fuel_log,
    update_fuel_log,
    delete_fuel_log,
    add_mission,
    complete_mission,
    submit_proof_of_delivery,
    archive_mission,
    set_mission_paid,
    delete_mission,
    save_expense,
    delete_expense,
    submit_field_report,
    publish_field_report,
    hold_field_report,
)

__all__ = [
    "OilStatus",
    "HealthStatus",
    "Trend",
    "MissionStatus",
    "ReportStatus",
    "Vehicle",
    "FuelLogEntry",
    "validate_fuel_input",
    "Mission",
    "Expense",
    "FieldReport",
    "make_slug",
    "Fleet",
    "Session",
    "calc_miles_until_oil_change",
    "check_oil_status",
    "is_data_stale",
    "calc_health_score",
    "health_status_for",
    "calc_fleet_score",
    "calc_fleet_efficiency_trend",
    "calc_vehicle_mpg_trend",
    "calc_trip_miles",
    "calc_mpg",
    "calc_average_mpg",
    "parse_timestamp",
    "VehicleReadiness",
    "FleetReadiness",
    "score_vehicle",
    "score_fleet",
    "FuelLogStats",
    "MissionStats",
    "CostPerMile",
    "MissionQuote",
    "VehicleAnalytics",
    "calc_fuel_log_stats",
    "calc_mission_stats",
    "calc_cost_per_mile",
    "quote_mission",
    "build_vehicle_analytics",
    "load_fleet",
    "load_fleet_or_empty",
    "create_fleet",
    "add_vehicle",
    "update_vehicle_odometer",
    "record_oil_change",
    "delete_vehicle",
    "save_fuel_log",
    "update_fuel_log",
    "delete_fuel_log",
    "add_mission",
    "complete_mission",
    "submit_proof_of_delivery",
    "archive_mission",
    "set_mission_paid",
    "delete_mission",
    "save_expense",
    "delete_expense",
    "submit_field_report",
    "publish_field_report",
    "hold_field_report",
]
