#!/usr/bin/env python3
"""
Unified CLI for VextorGrid fleet tracking.

Commands:
  readiness         - Fleet health score, efficiency trend and per-vehicle status
  vehicles          - List vehicles
  add-vehicle       - Add a vehicle
  oil-change        - Record an oil change
  fuel              - List fuel logs
  log-fuel          - Add a fuel log (or odometer-only reading)
  missions          - List missions
  add-mission       - Create an active mission
  complete-mission  - Complete a mission from the final odometer
  pod               - Attach proof of delivery to a pending mission
  archive-mission   - Move a completed mission into history
  expense           - Log an expense
  analytics         - MPG trend, cost per mile and earnings for a vehicle
  quote             - Estimate fuel cost and profit for a mission offer
  report            - Submit a field report for review
"""

import argparse
import logging
import os
import sys
from datetime import date
from pathlib import Path
from typing import List, Optional

import yaml
from tabulate import tabulate

from models import (
    MissionStatus,
    OilStatus,
    Session,
    Trend,
    Vehicle,
    VehicleReadiness,
    FuelLogEntry,
    Mission,
    load_fleet,
    load_fleet_or_empty,
    score_fleet,
    build_vehicle_analytics,
    quote_mission,
    validate_fuel_input,
    add_vehicle,
    record_oil_change,
    save_fuel_log,
    add_mission,
    complete_mission,
    submit_proof_of_delivery,
    archive_mission,
    save_expense,
    submit_field_report,
)

logger = logging.getLogger("vextor")

# =============================================================================
# Formatting helpers
# =============================================================================


def format_miles(miles: Optional[float]) -> str:
    """Format mileage for display."""
    return f"{miles:,.0f}" if miles is not None else "-"


def format_cost(cost: Optional[float]) -> str:
    """Format cost for display."""
    return f"${cost:,.2f}" if cost is not None else "-"


def format_mpg(mpg: Optional[float]) -> str:
    return f"{mpg:.1f}" if mpg is not None else "N/A"


def format_oil(status: OilStatus) -> str:
    """Oil status as shown on the readiness board."""
    return {
        OilStatus.OVERDUE: "OVERDUE",
        OilStatus.WARNING: "Due Soon",
        OilStatus.GOOD: "OK",
    }[status]


def format_trend(trend: Trend) -> str:
    return trend.value.upper()


def format_timestamp(value: Optional[str]) -> str:
    """Show the date part of an ISO timestamp."""
    if not value:
        return "-"
    return value[:10]


def truncate(text: Optional[str], max_len: int = 30) -> str:
    """Truncate text with ellipsis if too long."""
    if text is None:
        return "-"
    if len(text) <= max_len:
        return text
    return text[: max_len - 3] + "..."


# =============================================================================
# Readiness command
# =============================================================================


def make_readiness_table(vehicles: List[VehicleReadiness]) -> List[List[str]]:
    """Convert vehicle readiness list to table rows."""
    rows = []
    for r in vehicles:
        rows.append(
            [
                r.vehicle.id,
                r.vehicle.display_name,
                f"{r.health_score}%",
                r.health_status.label,
                format_mpg(r.avg_mpg),
                format_oil(r.oil_status),
                format_miles(r.miles_until_oil_change),
                "STALE" if r.is_stale else "-",
            ]
        )
    return rows


def cmd_readiness(args):
    """Show fleet health score, efficiency trend and per-vehicle readiness."""
    fleet = load_fleet_or_empty(args.fleet_file, args.user or "")
    session = Session(user_id=args.user or fleet.owner_id)
    readiness = score_fleet(fleet, session)

    print(f"Fleet: {fleet.display_name}")
    if not readiness.has_vehicles:
        print("NO VEHICLES CONFIGURED")
        print("Add vehicles to track readiness")
        return 0

    print(f"Fleet health score: {readiness.fleet_score}% ({readiness.fleet_status.label})")
    print(f"7-day efficiency trend: {format_trend(readiness.efficiency_trend)}")
    print()

    # Worst first
    vehicles = sorted(
        readiness.vehicles, key=lambda r: (r.health_status.value, r.vehicle.id)
    )
    headers = ["ID", "Vehicle", "Health", "Status", "MPG", "Oil", "Oil (mi left)", "Intel"]
    print(tabulate(make_readiness_table(vehicles), headers=headers, tablefmt="simple"))

    stale = [r for r in vehicles if r.is_stale]
    if stale:
        print()
        print("STALE INTEL - update fuel logs for:")
        for r in stale:
            print(f"  {r.vehicle.display_name}")

    return 0


# =============================================================================
# Vehicle commands
# =============================================================================


def cmd_vehicles(args):
    """List vehicles."""
    fleet = load_fleet(args.fleet_file)

    print(f"Fleet: {fleet.display_name}")
    print(f"Vehicles: {len(fleet.vehicles)}")
    print()

    if not fleet.vehicles:
        print("No vehicles found.")
        return 0

    rows = [
        [
            v.id,
            v.display_name,
            v.vehicle_type or "-",
            format_miles(v.current_odometer),
            format_miles(v.oil_change_interval),
            format_miles(v.last_oil_change_odometer),
        ]
        for v in sorted(fleet.vehicles, key=lambda v: v.id)
    ]
    headers = ["ID", "Vehicle", "Type", "Odometer", "Oil Interval", "Last Oil Change"]
    print(tabulate(rows, headers=headers, tablefmt="simple"))
    return 0


def cmd_add_vehicle(args):
    """Add a vehicle."""
    last_oil = args.last_oil_change if args.last_oil_change is not None else args.odometer
    vehicle = Vehicle(
        id=args.vehicle_id,
        name=args.name or args.vehicle_id,
        year=args.year,
        make=args.make,
        model=args.model,
        current_odometer=args.odometer,
        oil_change_interval=args.oil_interval,
        last_oil_change_odometer=last_oil,
        vehicle_type=args.type,
    )

    print(f"Adding vehicle to {args.fleet_file}:")
    print(f"  ID:       {vehicle.id}")
    print(f"  Vehicle:  {vehicle.display_name}")
    print(f"  Odometer: {vehicle.current_odometer:,}")
    print(f"  Oil:      every {vehicle.oil_change_interval:,} mi, last at {last_oil:,}")
    print()

    if args.dry_run:
        print("(dry run - no changes made)")
        return 0

    add_vehicle(args.fleet_file, vehicle)
    print("Vehicle saved.")
    return 0


def cmd_oil_change(args):
    """Record an oil change."""
    odometer = record_oil_change(args.fleet_file, args.vehicle_id, args.odometer)
    print(f"Oil change recorded for {args.vehicle_id} at {odometer:,} mi.")
    return 0


# =============================================================================
# Fuel commands
# =============================================================================


def make_fuel_table(logs: List[FuelLogEntry]) -> List[List[str]]:
    """Convert fuel logs to table rows."""
    rows = []
    for log in logs:
        rows.append(
            [
                format_timestamp(log.created_at),
                log.vehicle_id,
                format_miles(log.odometer_reading),
                f"{log.gallons_added:.2f}" if log.gallons_added is not None else "-",
                format_cost(log.total_cost),
                format_miles(log.trip_miles),
                format_mpg(log.mpg),
                truncate(log.merchant),
            ]
        )
    return rows


def cmd_fuel(args):
    """List fuel logs, newest first."""
    fleet = load_fleet(args.fleet_file)
    logs = list(reversed(fleet.get_fuel_logs(args.vehicle)))

    print(f"Fleet: {fleet.display_name}")
    print(f"Fuel logs: {len(logs)}")
    total_cost = sum(log.total_cost for log in logs if log.total_cost is not None)
    if total_cost > 0:
        print(f"Total cost: ${total_cost:,.2f}")
    print()

    if not logs:
        print("No fuel logs found.")
        return 0

    headers = ["Date", "Vehicle", "Odometer", "Gallons", "Cost", "Trip (mi)", "MPG", "Merchant"]
    print(tabulate(make_fuel_table(logs), headers=headers, tablefmt="simple"))
    return 0


def cmd_log_fuel(args):
    """Add a fuel log."""
    error = validate_fuel_input(args.odometer, args.gallons, args.cost, args.odometer_only)
    if error:
        print(f"Error: {error}")
        return 1

    gallons = None if args.odometer_only else args.gallons
    cost = None if args.odometer_only else args.cost

    print(f"Adding fuel log to {args.fleet_file}:")
    print(f"  Vehicle:  {args.vehicle_id}")
    print(f"  Odometer: {args.odometer:,}")
    if gallons is not None:
        print(f"  Gallons:  {gallons:.2f}")
    if cost is not None:
        print(f"  Cost:     ${cost:.2f}")
    if args.merchant:
        print(f"  Merchant: {args.merchant}")
    print()

    if args.dry_run:
        print("(dry run - no changes made)")
        return 0

    entry = save_fuel_log(
        args.fleet_file,
        args.vehicle_id,
        args.odometer,
        gallons,
        cost,
        merchant=args.merchant,
        notes=args.notes,
    )
    if entry.mpg is not None:
        print(f"Trip: {entry.trip_miles:,} mi at {entry.mpg:.1f} MPG")
    print("Odometer reading logged." if args.odometer_only else "Fuel log saved.")
    return 0


# =============================================================================
# Mission commands
# =============================================================================


def make_mission_table(missions: List[Mission]) -> List[List[str]]:
    """Convert missions to table rows."""
    rows = []
    for m in missions:
        rows.append(
            [
                m.id[:8],
                format_timestamp(m.created_at),
                m.vehicle_id,
                truncate(m.route, 40),
                format_cost(m.offer_amount),
                format_miles(m.estimated_miles),
                format_miles(m.actual_miles),
                m.status.value,
                "yes" if m.is_paid else "no",
            ]
        )
    return rows


def cmd_missions(args):
    """List missions."""
    fleet = load_fleet(args.fleet_file)
    statuses = [MissionStatus(args.status)] if args.status else None
    missions = fleet.get_missions(args.vehicle, statuses)

    print(f"Fleet: {fleet.display_name}")
    print(f"Missions: {len(missions)}")
    print()

    if not missions:
        print("No missions found.")
        return 0

    headers = ["ID", "Created", "Vehicle", "Route", "Offer", "Est (mi)", "Actual (mi)", "Status", "Paid"]
    print(tabulate(make_mission_table(missions), headers=headers, tablefmt="simple"))
    return 0


def cmd_add_mission(args):
    """Create an active mission."""
    mission = add_mission(
        args.fleet_file,
        args.vehicle_id,
        args.origin,
        args.destination,
        args.offer,
        estimated_miles=args.miles,
        pod_required=args.pod,
    )
    print(f"Mission {mission.id} created: {mission.route} for {format_cost(mission.offer_amount)}")
    return 0


def _resolve_mission_id(fleet_file: Path, prefix: str) -> str:
    """Expand a mission id prefix as shown in the missions table."""
    fleet = load_fleet(fleet_file)
    matches = [m.id for m in fleet.missions if m.id.startswith(prefix)]
    if len(matches) != 1:
        raise LookupError(
            f"Mission '{prefix}' not found"
            if not matches
            else f"Mission id '{prefix}' is ambiguous"
        )
    return matches[0]


def cmd_complete_mission(args):
    """Complete a mission."""
    mission_id = _resolve_mission_id(args.fleet_file, args.mission_id)
    actual = complete_mission(args.fleet_file, mission_id, args.final_odometer)
    mission = load_fleet(args.fleet_file).get_mission(mission_id)
    print(f"Mission completed: {actual:,.0f} mi driven.")
    if mission.status == MissionStatus.PENDING_POD:
        print("Proof of delivery required - use the 'pod' command to attach it.")
    return 0


def cmd_pod(args):
    """Attach proof of delivery."""
    mission_id = _resolve_mission_id(args.fleet_file, args.mission_id)
    submit_proof_of_delivery(args.fleet_file, mission_id, args.url)
    print("Proof of delivery saved. Mission completed.")
    return 0


def cmd_archive_mission(args):
    mission_id = _resolve_mission_id(args.fleet_file, args.mission_id)
    archive_mission(args.fleet_file, mission_id)
    print("Mission moved to history.")
    return 0


# =============================================================================
# Expense command
# =============================================================================


def cmd_expense(args):
    """Log an expense."""
    expense = save_expense(
        args.fleet_file,
        args.vehicle_id,
        args.category,
        args.amount,
        expense_date=args.date or date.today().isoformat(),
        notes=args.notes,
    )
    print(f"Expense saved: {expense.category} {format_cost(expense.amount)} on {expense.expense_date}")
    return 0


# =============================================================================
# Analytics command
# =============================================================================


def cmd_analytics(args):
    """Show MPG trend, cost per mile, fuel and mission stats for a vehicle."""
    fleet = load_fleet(args.fleet_file)
    vehicle = fleet.get_vehicle(args.vehicle_id)
    if vehicle is None:
        print(f"Error: Unknown vehicle '{args.vehicle_id}'")
        return 1

    analytics = build_vehicle_analytics(fleet, vehicle.id)

    print(f"Vehicle: {vehicle.display_name}")
    print(f"MPG samples: {len(analytics.mpg_series)}")
    if len(analytics.mpg_series) >= 3:
        print(f"MPG trend: {format_trend(analytics.trend)}")
        if analytics.trend == Trend.DOWN:
            print("  Check maintenance - inspect tire pressure, air filter and engine performance.")
    print()

    rows = []
    if analytics.cost_per_mile:
        cpm = analytics.cost_per_mile
        rows.append(["Fuel cost per mile", f"${cpm.cpm:.3f}"])
        rows.append(["Fuel spend", format_cost(cpm.total_fuel_cost)])
    if analytics.fuel_stats:
        stats = analytics.fuel_stats
        rows.append(["Fuel logs", str(stats.total_logs)])
        rows.append(["Average MPG", f"{stats.average_mpg:.1f}"])
    if analytics.mission_stats:
        stats = analytics.mission_stats
        rows.append(["Missions completed", str(stats.total_missions)])
        rows.append(["Miles driven", format_miles(stats.total_miles)])
        rows.append(["Earnings", format_cost(stats.total_earnings)])
        rows.append(["Earnings per mile", f"${stats.earnings_per_mile:.2f}"])

    if not rows:
        print("No MPG data available yet. Start logging fuel to see efficiency trends.")
        return 0

    print(tabulate(rows, tablefmt="simple"))

    if analytics.recent_expenses:
        print()
        print("Recent expenses:")
        expense_rows = [
            [e.expense_date, e.category, format_cost(e.amount), truncate(e.notes)]
            for e in analytics.recent_expenses
        ]
        print(tabulate(expense_rows, headers=["Date", "Category", "Amount", "Notes"], tablefmt="simple"))

    return 0


# =============================================================================
# Quote command
# =============================================================================


def cmd_quote(args):
    """Estimate fuel cost and profit for a mission offer."""
    quote = quote_mission(args.offer, args.miles, args.fuel_price, args.mpg)
    rows = [
        ["Offer", format_cost(quote.offer_amount)],
        ["Miles", format_miles(quote.total_miles)],
        ["MPG", f"{quote.mpg:.1f}"],
        ["Fuel cost", format_cost(quote.fuel_cost)],
        ["Net profit", format_cost(quote.net_profit)],
        ["Fuel cost per mile", f"${quote.cpm:.3f}"],
    ]
    print(tabulate(rows, tablefmt="simple"))
    print()
    print("PROFITABLE" if quote.is_profitable else "NOT PROFITABLE")
    return 0


# =============================================================================
# Field report command
# =============================================================================


def cmd_report(args):
    """Submit a field report."""
    report = submit_field_report(args.fleet_file, args.image_url, args.caption or "")
    print(f"Field report {report.id} submitted for review ({report.status.value}).")
    return 0


# =============================================================================
# Main
# =============================================================================


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="VextorGrid fleet tracker",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  %(prog)s fleets/alpha.yaml readiness
  %(prog)s fleets/alpha.yaml add-vehicle rig1 --year 2019 --make Freightliner \\
      --model Cascadia --odometer 412000 --oil-interval 15000
  %(prog)s fleets/alpha.yaml log-fuel rig1 412650 --gallons 98.2 --cost 371.40
  %(prog)s fleets/alpha.yaml log-fuel rig1 412900 --odometer-only
  %(prog)s fleets/alpha.yaml add-mission rig1 Dallas Tulsa 1850 --miles 260 --pod
  %(prog)s fleets/alpha.yaml complete-mission 3f2a9c1e 413170
  %(prog)s fleets/alpha.yaml analytics rig1
  %(prog)s fleets/alpha.yaml quote --offer 1850 --miles 260 --fuel-price 3.89
""",
    )
    parser.add_argument(
        "fleet_file",
        type=Path,
        help="Path to fleet YAML file",
    )

    subparsers = parser.add_subparsers(dest="command", required=True)

    # Readiness
    readiness_parser = subparsers.add_parser(
        "readiness", help="Fleet health score, efficiency trend and vehicle status"
    )
    readiness_parser.add_argument(
        "--user",
        type=str,
        help="Acting user id (default: the fleet owner)",
    )

    # Vehicles
    subparsers.add_parser("vehicles", help="List vehicles")

    add_vehicle_parser = subparsers.add_parser("add-vehicle", help="Add a vehicle")
    add_vehicle_parser.add_argument("vehicle_id", type=str, help="Short vehicle id (e.g., 'rig1')")
    add_vehicle_parser.add_argument("--name", type=str, help="Nickname")
    add_vehicle_parser.add_argument("--year", type=int)
    add_vehicle_parser.add_argument("--make", type=str)
    add_vehicle_parser.add_argument("--model", type=str)
    add_vehicle_parser.add_argument("--type", type=str, help="Vehicle type (e.g., 'semi', 'box truck')")
    add_vehicle_parser.add_argument("--odometer", type=int, required=True, help="Current odometer")
    add_vehicle_parser.add_argument(
        "--oil-interval", type=int, default=5000, help="Miles between oil changes (default: 5000)"
    )
    add_vehicle_parser.add_argument(
        "--last-oil-change", type=int, help="Odometer at last oil change (default: current odometer)"
    )
    add_vehicle_parser.add_argument(
        "--dry-run", action="store_true", help="Show what would be added without saving"
    )

    oil_parser = subparsers.add_parser("oil-change", help="Record an oil change")
    oil_parser.add_argument("vehicle_id", type=str)
    oil_parser.add_argument("--odometer", type=int, help="Odometer at oil change (default: current)")

    # Fuel
    fuel_parser = subparsers.add_parser("fuel", help="List fuel logs")
    fuel_parser.add_argument("--vehicle", type=str, help="Only show logs for this vehicle")

    log_fuel_parser = subparsers.add_parser("log-fuel", help="Add a fuel log")
    log_fuel_parser.add_argument("vehicle_id", type=str)
    log_fuel_parser.add_argument("odometer", type=int, help="Odometer reading at fill-up")
    log_fuel_parser.add_argument("--gallons", type=float, help="Gallons added")
    log_fuel_parser.add_argument("--cost", type=float, help="Total cost")
    log_fuel_parser.add_argument("--merchant", type=str)
    log_fuel_parser.add_argument("--notes", type=str)
    log_fuel_parser.add_argument(
        "--odometer-only", action="store_true", help="Log an odometer reading without fuel"
    )
    log_fuel_parser.add_argument(
        "--dry-run", action="store_true", help="Show what would be added without saving"
    )

    # Missions
    missions_parser = subparsers.add_parser("missions", help="List missions")
    missions_parser.add_argument("--vehicle", type=str)
    missions_parser.add_argument(
        "--status", choices=[s.value for s in MissionStatus], help="Filter by status"
    )

    add_mission_parser = subparsers.add_parser("add-mission", help="Create an active mission")
    add_mission_parser.add_argument("vehicle_id", type=str)
    add_mission_parser.add_argument("origin", type=str)
    add_mission_parser.add_argument("destination", type=str)
    add_mission_parser.add_argument("offer", type=float, help="Offer amount")
    add_mission_parser.add_argument("--miles", type=float, help="Estimated miles")
    add_mission_parser.add_argument(
        "--pod", action="store_true", help="Proof of delivery required"
    )

    complete_parser = subparsers.add_parser("complete-mission", help="Complete a mission")
    complete_parser.add_argument("mission_id", type=str, help="Mission id (or unique prefix)")
    complete_parser.add_argument("final_odometer", type=int)

    pod_parser = subparsers.add_parser("pod", help="Attach proof of delivery")
    pod_parser.add_argument("mission_id", type=str)
    pod_parser.add_argument("url", type=str, help="Proof of delivery image URL")

    archive_parser = subparsers.add_parser("archive-mission", help="Move a completed mission to history")
    archive_parser.add_argument("mission_id", type=str)

    # Expense
    expense_parser = subparsers.add_parser("expense", help="Log an expense")
    expense_parser.add_argument("vehicle_id", type=str)
    expense_parser.add_argument("category", type=str, help="e.g., 'Maintenance', 'Tolls'")
    expense_parser.add_argument("amount", type=float)
    expense_parser.add_argument("--date", type=str, help="Expense date YYYY-MM-DD (default: today)")
    expense_parser.add_argument("--notes", type=str)

    # Analytics
    analytics_parser = subparsers.add_parser("analytics", help="Vehicle analytics")
    analytics_parser.add_argument("vehicle_id", type=str)

    # Quote
    quote_parser = subparsers.add_parser("quote", help="Estimate mission profit")
    quote_parser.add_argument("--offer", type=float, required=True)
    quote_parser.add_argument("--miles", type=float, required=True)
    quote_parser.add_argument("--fuel-price", type=float, required=True, help="Price per gallon")
    quote_parser.add_argument("--mpg", type=float, default=6.5, help="Truck MPG (default: 6.5)")

    # Field report
    report_parser = subparsers.add_parser("report", help="Submit a field report")
    report_parser.add_argument("image_url", type=str)
    report_parser.add_argument("--caption", type=str)

    return parser


COMMANDS = {
    "readiness": cmd_readiness,
    "vehicles": cmd_vehicles,
    "add-vehicle": cmd_add_vehicle,
    "oil-change": cmd_oil_change,
    "fuel": cmd_fuel,
    "log-fuel": cmd_log_fuel,
    "missions": cmd_missions,
    "add-mission": cmd_add_mission,
    "complete-mission": cmd_complete_mission,
    "pod": cmd_pod,
    "archive-mission": cmd_archive_mission,
    "expense": cmd_expense,
    "analytics": cmd_analytics,
    "quote": cmd_quote,
    "report": cmd_report,
}


def main(argv: Optional[List[str]] = None):
    logging.basicConfig(level=os.environ.get("VEXTOR_LOG_LEVEL", "WARNING").upper())
    args = build_parser().parse_args(argv)

    # Validate fleet file exists (quote works without one)
    if args.command != "quote" and not args.fleet_file.exists():
        print(f"Error: File not found: {args.fleet_file}")
        return 1

    try:
        return COMMANDS[args.command](args)
    except (LookupError, ValueError, OSError, yaml.YAMLError) as e:
        logger.debug("Command %s failed", args.command, exc_info=True)
        print(f"Error: {e}")
        return 1


if __name__ == "__main__":
    sys.exit(main() or 0)
