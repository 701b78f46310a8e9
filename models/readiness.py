"""Vehicle readiness scoring for a single vehicle and a whole fleet."""

import logging
from dataclasses import dataclass, field
from datetime import datetime
from typing import List, Optional, Sequence, TYPE_CHECKING

from .calculations import (
    FLEET_TREND_WINDOW_DAYS,
    calc_average_mpg,
    calc_fleet_efficiency_trend,
    calc_fleet_score,
    calc_health_score,
    calc_miles_until_oil_change,
    check_oil_status,
    health_status_for,
    is_data_stale,
)
from .status import HealthStatus, OilStatus, Trend

if TYPE_CHECKING:
    from .fleet import Fleet
    from .fuel_log import FuelLogEntry
    from .session import Session
    from .vehicle import Vehicle

logger = logging.getLogger(__name__)


@dataclass
class VehicleReadiness:
    """Calculated readiness for one vehicle."""

    vehicle: "Vehicle"
    oil_status: OilStatus
    miles_until_oil_change: int
    health_score: int
    health_status: HealthStatus
    is_stale: bool
    avg_mpg: Optional[float] = None
    last_fuel_log_at: Optional[datetime] = None


@dataclass
class FleetReadiness:
    """Calculated readiness for a fleet plus the 7-day efficiency trend."""

    vehicles: List[VehicleReadiness] = field(default_factory=list)
    fleet_score: int = 0
    efficiency_trend: Trend = Trend.STABLE

    @property
    def has_vehicles(self) -> bool:
        return bool(self.vehicles)

    @property
    def fleet_status(self) -> HealthStatus:
        return health_status_for(self.fleet_score)


def score_vehicle(
    vehicle: "Vehicle", fuel_logs: Sequence["FuelLogEntry"], now: datetime
) -> VehicleReadiness:
    """
    Score one vehicle from its oil-change state and fuel log freshness.

    Args:
        fuel_logs: The vehicle's fuel logs ordered oldest first.
        now: Reference time for the staleness check.
    """
    avg_mpg = calc_average_mpg(fuel_logs)
    last_fuel_log_at = fuel_logs[-1].timestamp if fuel_logs else None

    miles_until = calc_miles_until_oil_change(
        vehicle.current_odometer,
        vehicle.last_oil_change_odometer,
        vehicle.oil_change_interval,
    )
    oil_status = check_oil_status(miles_until)
    stale = is_data_stale(last_fuel_log_at, now)
    score = calc_health_score(oil_status, stale)

    return VehicleReadiness(
        vehicle=vehicle,
        oil_status=oil_status,
        miles_until_oil_change=miles_until,
        health_score=score,
        health_status=health_status_for(score),
        is_stale=stale,
        avg_mpg=avg_mpg,
        last_fuel_log_at=last_fuel_log_at,
    )


def score_fleet(fleet: "Fleet", session: "Session") -> FleetReadiness:
    """
    Score every vehicle in a fleet and compute the 7-day efficiency trend.

    A fleet that does not belong to the session user yields no rows.
    """
    if fleet.owner_id != session.user_id:
        logger.warning(
            "Fleet owned by %s requested by %s; returning no data",
            fleet.owner_id,
            session.user_id,
        )
        return FleetReadiness()

    vehicles = [
        score_vehicle(vehicle, fleet.get_fuel_logs(vehicle.id), session.now)
        for vehicle in fleet.vehicles
    ]
    recent = fleet.get_recent_mpg_logs(session.now, FLEET_TREND_WINDOW_DAYS)
    trend = calc_fleet_efficiency_trend([log.mpg for log in recent])

    return FleetReadiness(
        vehicles=vehicles,
        fleet_score=calc_fleet_score([v.health_score for v in vehicles]),
        efficiency_trend=trend,
    )
