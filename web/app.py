"""Flask web application for the VextorGrid dashboard."""

import logging
import os
from pathlib import Path
from typing import Optional

from flask import (
    Flask,
    abort,
    flash,
    jsonify,
    redirect,
    render_template,
    request,
    url_for,
)

from models import (
    HealthStatus,
    MissionStatus,
    OilStatus,
    ReportStatus,
    Session,
    Trend,
    build_vehicle_analytics,
    complete_mission,
    health_status_for,
    hold_field_report,
    load_fleet_or_empty,
    publish_field_report,
    save_fuel_log,
    score_fleet,
    validate_fuel_input,
)
from models.loader import count_recent_publications

logger = logging.getLogger(__name__)

app = Flask(__name__)
app.secret_key = os.environ.get("SECRET_KEY", "dev-secret-key-change-in-prod")

# Directory of fleet files (one per user), relative to project root by default
app.config["FLEETS_DIR"] = Path(
    os.environ.get("VEXTOR_FLEETS_DIR", Path(__file__).parent.parent / "fleets")
)

logging.basicConfig(level=os.environ.get("VEXTOR_LOG_LEVEL", "WARNING").upper())


def get_fleet_files():
    """Get all fleet YAML files."""
    return sorted(Path(app.config["FLEETS_DIR"]).glob("*.yaml"))


def get_fleet_path(fleet_id: str) -> Path:
    """Get full path for a fleet ID (filename without extension)."""
    return Path(app.config["FLEETS_DIR"]) / f"{fleet_id}.yaml"


def require_fleet_path(fleet_id: str) -> Path:
    path = get_fleet_path(fleet_id)
    if not path.exists():
        abort(404)
    return path


def fleet_session(fleet) -> Session:
    # The web UI acts as the fleet owner; authentication is out of scope.
    return Session(user_id=fleet.owner_id)


def parse_float(value: Optional[str]) -> Optional[float]:
    """Parse an optional numeric form field."""
    if value is None or value.strip() == "":
        return None
    return float(value)


# =============================================================================
# Template filters
# =============================================================================


def format_miles(miles):
    """Format miles with comma separator."""
    if miles is None:
        return "—"
    return f"{miles:,.0f}"


def format_mpg(mpg):
    if mpg is None:
        return "N/A"
    return f"{mpg:.1f}"


def format_cost(cost):
    if cost is None:
        return "—"
    return f"${cost:,.2f}"


def health_color(score) -> str:
    """Get Tailwind text color for a health score or status."""
    status = score if isinstance(score, HealthStatus) else health_status_for(score)
    return {
        HealthStatus.COMBAT_READY: "text-green-500",
        HealthStatus.MAINTENANCE_REQUIRED: "text-yellow-500",
        HealthStatus.GROUNDED: "text-red-500",
    }[status]


def oil_label(status: OilStatus) -> str:
    return {
        OilStatus.OVERDUE: "OVERDUE",
        OilStatus.WARNING: "Due Soon",
        OilStatus.GOOD: "OK",
    }.get(status, "—")


def oil_color(status: OilStatus) -> str:
    return {
        OilStatus.OVERDUE: "text-red-500",
        OilStatus.WARNING: "text-orange-500",
        OilStatus.GOOD: "text-green-500",
    }.get(status, "text-gray-400")


def trend_color(trend: Trend) -> str:
    return {
        Trend.UP: "text-green-500",
        Trend.DOWN: "text-red-500",
        Trend.STABLE: "text-gray-400",
    }.get(trend, "text-gray-400")


# Register template filters
app.jinja_env.filters["format_miles"] = format_miles
app.jinja_env.filters["format_mpg"] = format_mpg
app.jinja_env.filters["format_cost"] = format_cost
app.jinja_env.filters["health_color"] = health_color
app.jinja_env.filters["oil_label"] = oil_label
app.jinja_env.filters["oil_color"] = oil_color
app.jinja_env.filters["trend_color"] = trend_color


# =============================================================================
# Readiness
# =============================================================================


@app.route("/")
def index():
    """All fleets with their health score."""
    fleets = []
    for path in get_fleet_files():
        fleet = load_fleet_or_empty(path, path.stem)
        readiness = score_fleet(fleet, fleet_session(fleet))
        fleets.append({
            "id": path.stem,
            "fleet": fleet,
            "readiness": readiness,
        })

    return render_template("index.html", fleets=fleets)


@app.route("/fleet/<fleet_id>")
def fleet_readiness(fleet_id: str):
    """Fleet readiness dashboard."""
    path = get_fleet_path(fleet_id)
    if not path.exists():
        flash(f"Fleet '{fleet_id}' not found", "error")
        return redirect(url_for("index"))

    fleet = load_fleet_or_empty(path, fleet_id)
    readiness = score_fleet(fleet, fleet_session(fleet))

    # Worst first
    vehicles = sorted(
        readiness.vehicles, key=lambda r: (r.health_status.value, r.vehicle.id)
    )

    return render_template(
        "fleet.html",
        fleet_id=fleet_id,
        fleet=fleet,
        readiness=readiness,
        vehicles=vehicles,
        active_missions=fleet.get_missions(
            statuses=[MissionStatus.ACTIVE, MissionStatus.PENDING_POD]
        ),
    )


@app.route("/fleet/<fleet_id>/readiness.json")
def fleet_readiness_json(fleet_id: str):
    """Readiness as JSON, for periodic polling."""
    path = require_fleet_path(fleet_id)
    fleet = load_fleet_or_empty(path, fleet_id)
    readiness = score_fleet(fleet, fleet_session(fleet))

    return jsonify({
        "fleetScore": readiness.fleet_score if readiness.has_vehicles else None,
        "fleetStatus": readiness.fleet_status.name if readiness.has_vehicles else None,
        "efficiencyTrend": readiness.efficiency_trend.value,
        "vehicles": [
            {
                "id": r.vehicle.id,
                "name": r.vehicle.display_name,
                "healthScore": r.health_score,
                "healthStatus": r.health_status.name,
                "oilStatus": r.oil_status.name,
                "milesUntilOilChange": r.miles_until_oil_change,
                "avgMpg": r.avg_mpg,
                "isStale": r.is_stale,
                "lastFuelLogAt": (
                    r.last_fuel_log_at.isoformat() if r.last_fuel_log_at else None
                ),
            }
            for r in readiness.vehicles
        ],
    })


# =============================================================================
# Vehicle analytics
# =============================================================================


@app.route("/fleet/<fleet_id>/vehicle/<vehicle_id>")
def vehicle_analytics(fleet_id: str, vehicle_id: str):
    """Per-vehicle MPG trend, cost per mile and recent activity."""
    path = require_fleet_path(fleet_id)
    fleet = load_fleet_or_empty(path, fleet_id)
    vehicle = fleet.get_vehicle(vehicle_id)
    if vehicle is None:
        flash(f"Vehicle '{vehicle_id}' not found", "error")
        return redirect(url_for("fleet_readiness", fleet_id=fleet_id))

    analytics = build_vehicle_analytics(fleet, vehicle_id)

    return render_template(
        "vehicle.html",
        fleet_id=fleet_id,
        vehicle=vehicle,
        analytics=analytics,
        Trend=Trend,
    )


@app.route("/fleet/<fleet_id>/fuel", methods=["POST"])
def log_fuel(fleet_id: str):
    """Handle fuel log form submission."""
    path = require_fleet_path(fleet_id)

    vehicle_id = request.form.get("vehicle_id")
    odometer_only = request.form.get("odometer_only") == "on"

    try:
        odometer = parse_float(request.form.get("odometer"))
        gallons = parse_float(request.form.get("gallons"))
        cost = parse_float(request.form.get("cost"))
    except ValueError:
        flash("Invalid number in fuel log", "error")
        return redirect(url_for("fleet_readiness", fleet_id=fleet_id))

    if not vehicle_id:
        flash("Please select a vehicle", "error")
        return redirect(url_for("fleet_readiness", fleet_id=fleet_id))

    error = validate_fuel_input(odometer, gallons, cost, odometer_only)
    if error:
        flash(error, "error")
        return redirect(url_for("fleet_readiness", fleet_id=fleet_id))

    try:
        save_fuel_log(
            path,
            vehicle_id,
            int(odometer),
            None if odometer_only else gallons,
            None if odometer_only else cost,
            merchant=request.form.get("merchant") or None,
            notes=request.form.get("notes") or None,
        )
    except (LookupError, ValueError) as e:
        logger.info("Rejected fuel log for %s in %s: %s", vehicle_id, fleet_id, e)
        flash(str(e), "error")
        return redirect(url_for("fleet_readiness", fleet_id=fleet_id))

    flash(
        "Odometer reading logged" if odometer_only else "Fuel log added",
        "success",
    )
    return redirect(url_for("fleet_readiness", fleet_id=fleet_id))


@app.route("/fleet/<fleet_id>/missions/<mission_id>/complete", methods=["POST"])
def complete_mission_view(fleet_id: str, mission_id: str):
    """Handle complete-mission form submission."""
    path = require_fleet_path(fleet_id)

    try:
        final_odometer = parse_float(request.form.get("final_odometer"))
    except ValueError:
        final_odometer = None
    if final_odometer is None:
        flash("Please enter a valid odometer reading", "error")
        return redirect(url_for("fleet_readiness", fleet_id=fleet_id))

    try:
        actual = complete_mission(path, mission_id, int(final_odometer))
    except (LookupError, ValueError) as e:
        flash(str(e), "error")
        return redirect(url_for("fleet_readiness", fleet_id=fleet_id))

    flash(f"Mission completed: {actual:,.0f} mi", "success")
    return redirect(url_for("fleet_readiness", fleet_id=fleet_id))


# =============================================================================
# Intel Command (field report moderation)
# =============================================================================


@app.route("/intel")
def intel_command():
    """Pending field reports across all fleets, oldest first."""
    pending = []
    for path in get_fleet_files():
        fleet = load_fleet_or_empty(path, path.stem)
        for report in fleet.get_field_reports(ReportStatus.PENDING):
            pending.append({
                "fleet_id": path.stem,
                "fleet": fleet,
                "report": report,
                "weekly_count": count_recent_publications(
                    fleet.field_reports, report.user_id, fleet_session(fleet).now
                ),
            })
    pending.sort(key=lambda p: p["report"].created_at or "")

    return render_template("intel.html", pending=pending)


@app.route("/intel/<fleet_id>/<report_id>/publish", methods=["POST"])
def publish_report(fleet_id: str, report_id: str):
    path = require_fleet_path(fleet_id)
    try:
        slug = publish_field_report(
            path,
            report_id,
            caption=request.form.get("caption"),
            seo_title=request.form.get("seo_title") or None,
            admin_notes=request.form.get("admin_notes") or None,
            slug=request.form.get("slug") or None,
            override_limit=request.form.get("override_limit") == "on",
        )
    except (LookupError, ValueError) as e:
        flash(str(e), "error")
        return redirect(url_for("intel_command"))

    flash(f"Report published{f' as {slug}' if slug else ''}", "success")
    return redirect(url_for("intel_command"))


@app.route("/intel/<fleet_id>/<report_id>/hold", methods=["POST"])
def hold_report(fleet_id: str, report_id: str):
    path = require_fleet_path(fleet_id)
    try:
        hold_field_report(path, report_id, request.form.get("admin_notes") or None)
    except LookupError as e:
        flash(str(e), "error")
        return redirect(url_for("intel_command"))

    flash("Report placed on hold", "success")
    return redirect(url_for("intel_command"))


if __name__ == "__main__":
    # Using 5001 to avoid conflict with macOS AirPlay Receiver on 5000
    app.run(debug=True, host="0.0.0.0", port=5001)
