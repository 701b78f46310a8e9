"""YAML loading and saving utilities for fleet data."""

import json
import logging
import uuid
from datetime import date, datetime, timedelta, timezone
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

import yaml

from .calculations import calc_mpg, calc_trip_miles, parse_timestamp
from .expense import Expense
from .field_report import WEEKLY_PUBLISH_LIMIT, FieldReport, make_slug
from .fleet import Fleet
from .fuel_log import FuelLogEntry
from .mission import Mission
from .status import MissionStatus, ReportStatus
from .vehicle import Vehicle

logger = logging.getLogger(__name__)


def _parse_object(
    dct: Dict[str, Any]
) -> Union[Vehicle, FuelLogEntry, Mission, Expense, FieldReport, Fleet, dict]:
    """Parse dictionary into appropriate object type."""
    # Vehicle
    if "oilChangeInterval" in dct:
        return Vehicle(
            dct["id"],
            dct.get("name") or dct["id"],
            dct.get("year"),
            dct.get("make"),
            dct.get("model"),
            dct.get("currentOdometer"),
            dct.get("oilChangeInterval"),
            dct.get("lastOilChangeOdometer"),
            dct.get("vehicleType"),
            dct.get("createdAt"),
        )
    # Fuel log
    elif "odometerReading" in dct:
        return FuelLogEntry(
            dct["id"],
            dct["vehicleId"],
            dct["createdAt"],
            dct["odometerReading"],
            dct.get("gallonsAdded"),
            dct.get("totalCost"),
            dct.get("tripMiles"),
            dct.get("mpg"),
            dct.get("merchant"),
            dct.get("notes"),
        )
    # Mission
    elif "offerAmount" in dct:
        return Mission(
            dct["id"],
            dct["vehicleId"],
            dct["origin"],
            dct["destination"],
            dct["offerAmount"],
            MissionStatus(dct.get("status") or "active"),
            dct.get("estimatedMiles"),
            dct.get("actualMiles"),
            dct.get("podRequired"),
            dct.get("proofImageUrl"),
            dct.get("isPaid"),
            dct.get("createdAt"),
            dct.get("completedAt"),
        )
    # Expense
    elif "category" in dct and "amount" in dct:
        return Expense(
            dct["id"],
            dct["vehicleId"],
            dct["category"],
            dct["amount"],
            dct["expenseDate"],
            dct.get("notes"),
            dct.get("createdAt"),
        )
    # Field report
    elif "caption" in dct and "imageUrl" in dct:
        return FieldReport(
            dct["id"],
            dct["userId"],
            dct["imageUrl"],
            dct["caption"],
            ReportStatus(dct.get("status") or "PENDING"),
            dct.get("adminNotes"),
            dct.get("slug"),
            dct.get("seoTitle"),
            dct.get("createdAt"),
            dct.get("publishedAt"),
        )
    # Top-level fleet object
    elif "owner" in dct:
        owner = dct["owner"] or {}
        return Fleet(
            owner["userId"],
            dct.get("vehicles"),
            dct.get("fuelLogs"),
            dct.get("missions"),
            dct.get("expenses"),
            dct.get("fieldReports"),
            owner.get("callsign"),
        )
    else:
        # Return dict as-is for unknown structures (like 'owner')
        return dct


def _json_default(value: Any) -> str:
    # Unquoted YAML timestamps load as date/datetime objects
    if isinstance(value, (date, datetime)):
        return value.isoformat()
    raise TypeError(f"Cannot serialize {type(value).__name__}")


def load_fleet(filename: Union[str, Path]) -> Fleet:
    """Load a fleet from a YAML file."""
    with open(filename, "rb") as fp:
        json_data = json.dumps(
            yaml.load(fp, Loader=yaml.SafeLoader), indent=4, default=_json_default
        )
    fleet = json.loads(json_data, object_hook=_parse_object)
    if not isinstance(fleet, Fleet):
        raise ValueError(f"{filename} is not a fleet file (missing 'owner')")
    return fleet


def load_fleet_or_empty(filename: Union[str, Path], user_id: str) -> Fleet:
    """
    Load a fleet, treating any read failure as "no data".

    The failure is logged and an empty fleet owned by user_id is returned,
    so readiness renders with default values instead of an error.
    """
    try:
        return load_fleet(filename)
    except (OSError, yaml.YAMLError, ValueError, KeyError, TypeError):
        logger.exception("Error loading fleet file %s", filename)
        return Fleet(user_id)


def _now_iso(now: Optional[datetime] = None) -> str:
    return parse_timestamp(now or datetime.now(timezone.utc)).isoformat()


def _new_id() -> str:
    return uuid.uuid4().hex


def _load_raw(filename: Union[str, Path]) -> Dict[str, Any]:
    """Load the raw YAML data (not parsed into objects)."""
    with open(filename, "r") as fp:
        return yaml.load(fp, Loader=yaml.SafeLoader) or {}


def _dump_raw(filename: Union[str, Path], data: Dict[str, Any]) -> None:
    with open(filename, "w") as fp:
        yaml.dump(
            data,
            fp,
            default_flow_style=False,
            allow_unicode=True,
            sort_keys=False,
            width=120,
        )


def _rows(data: Dict[str, Any], key: str) -> List[Dict[str, Any]]:
    """Get a list section, creating it if missing."""
    if data.get(key) is None:
        data[key] = []
    return data[key]


def _find_row(rows: List[Dict[str, Any]], row_id: str, kind: str) -> Dict[str, Any]:
    for row in rows:
        if row.get("id") == row_id:
            return row
    raise LookupError(f"{kind} '{row_id}' not found")


def _compact(d: Dict[str, Any]) -> Dict[str, Any]:
    """Omit None values for cleaner YAML."""
    return {k: v for k, v in d.items() if v is not None}


# =============================================================================
# Fleet and vehicles
# =============================================================================


def create_fleet(
    filename: Union[str, Path], user_id: str, callsign: Optional[str] = None
) -> None:
    """Create a new, empty fleet YAML file for a user."""
    data: Dict[str, Any] = {
        "owner": _compact({"userId": user_id, "callsign": callsign}),
        "vehicles": [],
        "fuelLogs": [],
        "missions": [],
        "expenses": [],
        "fieldReports": [],
    }
    _dump_raw(filename, data)


def _vehicle_to_dict(vehicle: Vehicle) -> Dict[str, Any]:
    """Serialize a Vehicle to the YAML dict format (camelCase keys)."""
    return _compact(
        {
            "id": vehicle.id,
            "name": vehicle.name,
            "year": vehicle.year,
            "make": vehicle.make,
            "model": vehicle.model,
            "vehicleType": vehicle.vehicle_type,
            "currentOdometer": vehicle.current_odometer,
            "oilChangeInterval": vehicle.oil_change_interval,
            "lastOilChangeOdometer": vehicle.last_oil_change_odometer,
            "createdAt": vehicle.created_at or _now_iso(),
        }
    )


def add_vehicle(filename: Union[str, Path], vehicle: Vehicle) -> None:
    """Append a vehicle to a fleet file. Vehicle ids must be unique."""
    data = _load_raw(filename)
    vehicles = _rows(data, "vehicles")
    if any(v.get("id") == vehicle.id for v in vehicles):
        raise ValueError(f"Vehicle '{vehicle.id}' already exists")
    vehicles.append(_vehicle_to_dict(vehicle))
    _dump_raw(filename, data)


def update_vehicle_odometer(
    filename: Union[str, Path], vehicle_id: str, odometer: int
) -> None:
    """Set a vehicle's current odometer."""
    data = _load_raw(filename)
    vehicle = _find_row(_rows(data, "vehicles"), vehicle_id, "Vehicle")
    vehicle["currentOdometer"] = odometer
    _dump_raw(filename, data)


def record_oil_change(
    filename: Union[str, Path], vehicle_id: str, odometer: Optional[int] = None
) -> int:
    """
    Record an oil change at the given odometer (default: current odometer).

    Returns the odometer value stored as the last oil change.
    """
    data = _load_raw(filename)
    vehicle = _find_row(_rows(data, "vehicles"), vehicle_id, "Vehicle")
    if odometer is None:
        odometer = vehicle.get("currentOdometer") or 0
    vehicle["lastOilChangeOdometer"] = odometer
    if odometer > (vehicle.get("currentOdometer") or 0):
        vehicle["currentOdometer"] = odometer
    _dump_raw(filename, data)
    return odometer


def delete_vehicle(filename: Union[str, Path], vehicle_id: str) -> None:
    """Remove a vehicle and every row that references it."""
    data = _load_raw(filename)
    vehicles = _rows(data, "vehicles")
    vehicle = _find_row(vehicles, vehicle_id, "Vehicle")
    vehicles.remove(vehicle)
    for key in ("fuelLogs", "missions", "expenses"):
        data[key] = [r for r in _rows(data, key) if r.get("vehicleId") != vehicle_id]
    _dump_raw(filename, data)


# =============================================================================
# Fuel logs
# =============================================================================


def _vehicle_logs(data: Dict[str, Any], vehicle_id: str) -> List[Dict[str, Any]]:
    """Raw fuel log rows for a vehicle, oldest first."""
    logs = [r for r in _rows(data, "fuelLogs") if r.get("vehicleId") == vehicle_id]
    return sorted(logs, key=lambda r: parse_timestamp(str(r["createdAt"])))


def save_fuel_log(
    filename: Union[str, Path],
    vehicle_id: str,
    odometer: int,
    gallons: Optional[float] = None,
    cost: Optional[float] = None,
    merchant: Optional[str] = None,
    notes: Optional[str] = None,
    created_at: Optional[datetime] = None,
) -> FuelLogEntry:
    """
    Append a fuel log and move the vehicle's odometer forward.

    Trip miles are measured from the vehicle's previous log; MPG is only
    stored when gallons were recorded. The first log of a vehicle has
    neither.
    """
    data = _load_raw(filename)
    vehicle = _find_row(_rows(data, "vehicles"), vehicle_id, "Vehicle")

    previous = _vehicle_logs(data, vehicle_id)
    previous_odometer = previous[-1]["odometerReading"] if previous else None
    if previous_odometer is not None and odometer <= previous_odometer:
        raise ValueError(
            "Odometer reading must be greater than the previous reading "
            f"({previous_odometer:,})"
        )

    trip_miles = calc_trip_miles(odometer, previous_odometer)
    entry = FuelLogEntry(
        id=_new_id(),
        vehicle_id=vehicle_id,
        created_at=_now_iso(created_at),
        odometer_reading=odometer,
        gallons_added=gallons,
        total_cost=cost,
        trip_miles=trip_miles,
        mpg=calc_mpg(trip_miles, gallons),
        merchant=merchant or None,
        notes=notes or None,
    )
    _rows(data, "fuelLogs").append(_fuel_log_to_dict(entry))
    vehicle["currentOdometer"] = odometer

    _dump_raw(filename, data)
    return entry


def _fuel_log_to_dict(entry: FuelLogEntry) -> Dict[str, Any]:
    """Serialize a FuelLogEntry to the YAML dict format (camelCase keys)."""
    d: Dict[str, Any] = {
        "id": entry.id,
        "vehicleId": entry.vehicle_id,
        "createdAt": entry.created_at,
        "odometerReading": entry.odometer_reading,
    }
    if entry.gallons_added is not None:
        d["gallonsAdded"] = entry.gallons_added
    if entry.total_cost is not None:
        d["totalCost"] = entry.total_cost
    if entry.trip_miles is not None:
        d["tripMiles"] = entry.trip_miles
    if entry.mpg is not None:
        d["mpg"] = entry.mpg
    if entry.merchant is not None:
        d["merchant"] = entry.merchant
    if entry.notes is not None:
        d["notes"] = entry.notes
    return d


def update_fuel_log(
    filename: Union[str, Path],
    log_id: str,
    odometer: int,
    gallons: Optional[float] = None,
    cost: Optional[float] = None,
) -> None:
    """
    Correct a fuel log's odometer, gallons and cost.

    The odometer must stay strictly between the neighbouring logs of the
    same vehicle. Trip miles and MPG are recomputed against the preceding
    log.
    """
    data = _load_raw(filename)
    row = _find_row(_rows(data, "fuelLogs"), log_id, "Fuel log")

    logs = _vehicle_logs(data, row["vehicleId"])
    position = logs.index(row)
    before = logs[position - 1] if position > 0 else None
    after = logs[position + 1] if position + 1 < len(logs) else None

    if after is not None and odometer >= after["odometerReading"]:
        raise ValueError("Odometer cannot be greater than the next fuel log reading")
    if before is not None and odometer <= before["odometerReading"]:
        raise ValueError("Odometer must be greater than the previous fuel log reading")

    trip_miles = calc_trip_miles(odometer, before["odometerReading"] if before else None)
    mpg = calc_mpg(trip_miles, gallons)

    row["odometerReading"] = odometer
    for key, value in (
        ("gallonsAdded", gallons),
        ("totalCost", cost),
        ("tripMiles", trip_miles),
        ("mpg", mpg),
    ):
        if value is None:
            row.pop(key, None)
        else:
            row[key] = value

    _dump_raw(filename, data)


def delete_fuel_log(filename: Union[str, Path], log_id: str) -> None:
    """Remove a fuel log by id."""
    data = _load_raw(filename)
    logs = _rows(data, "fuelLogs")
    logs.remove(_find_row(logs, log_id, "Fuel log"))
    _dump_raw(filename, data)


# =============================================================================
# Missions
# =============================================================================


def add_mission(
    filename: Union[str, Path],
    vehicle_id: str,
    origin: str,
    destination: str,
    offer_amount: float,
    estimated_miles: Optional[float] = None,
    pod_required: bool = False,
    created_at: Optional[datetime] = None,
) -> Mission:
    """Create an active mission for a vehicle."""
    data = _load_raw(filename)
    _find_row(_rows(data, "vehicles"), vehicle_id, "Vehicle")
    if offer_amount < 0:
        raise ValueError("Offer amount cannot be negative")

    mission = Mission(
        id=_new_id(),
        vehicle_id=vehicle_id,
        origin=origin,
        destination=destination,
        offer_amount=offer_amount,
        status=MissionStatus.ACTIVE,
        estimated_miles=estimated_miles,
        pod_required=pod_required,
        created_at=_now_iso(created_at),
    )
    _rows(data, "missions").append(
        _compact(
            {
                "id": mission.id,
                "vehicleId": mission.vehicle_id,
                "origin": mission.origin,
                "destination": mission.destination,
                "offerAmount": mission.offer_amount,
                "estimatedMiles": mission.estimated_miles,
                "status": mission.status.value,
                "podRequired": mission.pod_required,
                "isPaid": mission.is_paid,
                "createdAt": mission.created_at,
            }
        )
    )
    _dump_raw(filename, data)
    return mission


def _mission_row(data: Dict[str, Any], mission_id: str) -> Dict[str, Any]:
    return _find_row(_rows(data, "missions"), mission_id, "Mission")


def _require_status(row: Dict[str, Any], expected: MissionStatus) -> None:
    status = row.get("status") or MissionStatus.ACTIVE.value
    if status != expected.value:
        raise ValueError(
            f"Mission '{row['id']}' is {status}, expected {expected.value}"
        )


def complete_mission(
    filename: Union[str, Path],
    mission_id: str,
    final_odometer: int,
    now: Optional[datetime] = None,
) -> float:
    """
    Complete an active mission from the vehicle's final odometer.

    Actual miles are the odometer delta. Missions that require proof of
    delivery move to pending_pod instead of completed. Returns actual miles.
    """
    data = _load_raw(filename)
    row = _mission_row(data, mission_id)
    _require_status(row, MissionStatus.ACTIVE)
    vehicle = _find_row(_rows(data, "vehicles"), row["vehicleId"], "Vehicle")

    current = vehicle.get("currentOdometer") or 0
    if final_odometer <= current:
        raise ValueError(
            f"Odometer must be greater than current reading ({current:,})"
        )

    actual_miles = final_odometer - current
    status = (
        MissionStatus.PENDING_POD if row.get("podRequired") else MissionStatus.COMPLETED
    )
    row["status"] = status.value
    row["actualMiles"] = actual_miles
    row["completedAt"] = _now_iso(now)
    vehicle["currentOdometer"] = final_odometer

    _dump_raw(filename, data)
    return actual_miles


def submit_proof_of_delivery(
    filename: Union[str, Path], mission_id: str, proof_image_url: str
) -> None:
    """Attach proof of delivery and complete a pending_pod mission."""
    if not proof_image_url:
        raise ValueError("Proof of delivery URL is required")
    data = _load_raw(filename)
    row = _mission_row(data, mission_id)
    _require_status(row, MissionStatus.PENDING_POD)
    row["proofImageUrl"] = proof_image_url
    row["status"] = MissionStatus.COMPLETED.value
    _dump_raw(filename, data)


def archive_mission(filename: Union[str, Path], mission_id: str) -> None:
    """Move a completed mission into history."""
    data = _load_raw(filename)
    row = _mission_row(data, mission_id)
    _require_status(row, MissionStatus.COMPLETED)
    row["status"] = MissionStatus.HISTORY.value
    _dump_raw(filename, data)


def set_mission_paid(filename: Union[str, Path], mission_id: str, paid: bool) -> None:
    data = _load_raw(filename)
    _mission_row(data, mission_id)["isPaid"] = paid
    _dump_raw(filename, data)


def delete_mission(filename: Union[str, Path], mission_id: str) -> None:
    data = _load_raw(filename)
    missions = _rows(data, "missions")
    missions.remove(_mission_row(data, mission_id))
    _dump_raw(filename, data)


# =============================================================================
# Expenses
# =============================================================================


def save_expense(
    filename: Union[str, Path],
    vehicle_id: str,
    category: str,
    amount: float,
    expense_date: Optional[str] = None,
    notes: Optional[str] = None,
    created_at: Optional[datetime] = None,
) -> Expense:
    """Append an expense for a vehicle."""
    if amount is None or amount <= 0:
        raise ValueError("Amount must be greater than zero")
    data = _load_raw(filename)
    _find_row(_rows(data, "vehicles"), vehicle_id, "Vehicle")

    expense = Expense(
        id=_new_id(),
        vehicle_id=vehicle_id,
        category=category,
        amount=amount,
        expense_date=expense_date or date.today().isoformat(),
        notes=notes or None,
        created_at=_now_iso(created_at),
    )
    _rows(data, "expenses").append(
        _compact(
            {
                "id": expense.id,
                "vehicleId": expense.vehicle_id,
                "category": expense.category,
                "amount": expense.amount,
                "expenseDate": expense.expense_date,
                "notes": expense.notes,
                "createdAt": expense.created_at,
            }
        )
    )
    _dump_raw(filename, data)
    return expense


def delete_expense(filename: Union[str, Path], expense_id: str) -> None:
    data = _load_raw(filename)
    expenses = _rows(data, "expenses")
    expenses.remove(_find_row(expenses, expense_id, "Expense"))
    _dump_raw(filename, data)


# =============================================================================
# Field reports
# =============================================================================


def submit_field_report(
    filename: Union[str, Path],
    image_url: str,
    caption: str,
    created_at: Optional[datetime] = None,
) -> FieldReport:
    """Submit a field report for review. It starts out PENDING."""
    if not image_url:
        raise ValueError("An image URL is required")
    data = _load_raw(filename)
    user_id = (data.get("owner") or {})["userId"]

    report = FieldReport(
        id=_new_id(),
        user_id=user_id,
        image_url=image_url,
        caption=caption,
        status=ReportStatus.PENDING,
        created_at=_now_iso(created_at),
    )
    _rows(data, "fieldReports").append(
        {
            "id": report.id,
            "userId": report.user_id,
            "imageUrl": report.image_url,
            "caption": report.caption,
            "status": report.status.value,
            "createdAt": report.created_at,
        }
    )
    _dump_raw(filename, data)
    return report


def count_recent_publications(
    reports: List[FieldReport], user_id: str, now: datetime, days: float = 7
) -> int:
    """Reports by user_id published within `days` before `now`."""
    since = parse_timestamp(now) - timedelta(days=days)
    return sum(
        1
        for r in reports
        if r.user_id == user_id
        and r.status == ReportStatus.PUBLISHED
        and r.published_at
        and parse_timestamp(r.published_at) >= since
    )


def publish_field_report(
    filename: Union[str, Path],
    report_id: str,
    caption: Optional[str] = None,
    seo_title: Optional[str] = None,
    admin_notes: Optional[str] = None,
    slug: Optional[str] = None,
    override_limit: bool = False,
    now: Optional[datetime] = None,
) -> str:
    """
    Publish a field report, returning its slug.

    A user may have at most WEEKLY_PUBLISH_LIMIT reports published in a
    rolling 7 days unless override_limit is set.
    """
    now = parse_timestamp(now or datetime.now(timezone.utc))
    fleet = load_fleet(filename)
    report = fleet.get_field_report(report_id)
    if report is None:
        raise LookupError(f"Field report '{report_id}' not found")

    published = count_recent_publications(fleet.field_reports, report.user_id, now)
    if published >= WEEKLY_PUBLISH_LIMIT and not override_limit:
        raise ValueError(
            f"User {report.user_id} already has {published} reports published "
            "this week"
        )

    taken = [r.slug for r in fleet.field_reports if r.slug and r.id != report_id]
    if slug:
        slug = make_slug(slug, taken)
    elif seo_title:
        slug = make_slug(seo_title, taken)

    data = _load_raw(filename)
    row = _find_row(_rows(data, "fieldReports"), report_id, "Field report")
    if caption is not None:
        row["caption"] = caption
    for key, value in (
        ("seoTitle", seo_title),
        ("slug", slug),
        ("adminNotes", admin_notes),
    ):
        if value:
            row[key] = value
    row["status"] = ReportStatus.PUBLISHED.value
    row["publishedAt"] = now.isoformat()

    _dump_raw(filename, data)
    return row.get("slug")


def hold_field_report(
    filename: Union[str, Path], report_id: str, admin_notes: Optional[str] = None
) -> None:
    """Put a field report on hold."""
    data = _load_raw(filename)
    row = _find_row(_rows(data, "fieldReports"), report_id, "Field report")
    row["status"] = ReportStatus.HOLD.value
    if admin_notes:
        row["adminNotes"] = admin_notes
    _dump_raw(filename, data)
