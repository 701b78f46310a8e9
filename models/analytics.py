"""Per-vehicle cost, earnings and efficiency analytics."""

from dataclasses import dataclass, field
from typing import List, Optional, Sequence, TYPE_CHECKING

from .calculations import calc_vehicle_mpg_trend
from .status import Trend

if TYPE_CHECKING:
    from .expense import Expense
    from .fleet import Fleet
    from .fuel_log import FuelLogEntry
    from .mission import Mission

DEFAULT_QUOTE_MPG = 6.5


@dataclass
class FuelLogStats:
    total_logs: int
    total_cost: float
    average_mpg: float


@dataclass
class MissionStats:
    total_missions: int
    total_miles: float
    total_earnings: float
    earnings_per_mile: float


@dataclass
class CostPerMile:
    total_fuel_cost: float
    total_miles: float
    cpm: float


@dataclass
class MissionQuote:
    """Estimated fuel cost and profit for a mission offer."""

    offer_amount: float
    total_miles: float
    mpg: float
    fuel_price: float
    fuel_cost: float
    net_profit: float
    cpm: float

    @property
    def is_profitable(self) -> bool:
        return self.net_profit > 0


@dataclass
class VehicleAnalytics:
    """Everything shown on a vehicle's analytics page."""

    vehicle_id: str
    mpg_series: List["FuelLogEntry"] = field(default_factory=list)
    trend: Trend = Trend.STABLE
    cost_per_mile: Optional[CostPerMile] = None
    fuel_stats: Optional[FuelLogStats] = None
    mission_stats: Optional[MissionStats] = None
    recent_fuel_logs: List["FuelLogEntry"] = field(default_factory=list)
    recent_missions: List["Mission"] = field(default_factory=list)
    recent_expenses: List["Expense"] = field(default_factory=list)


def calc_fuel_log_stats(logs: Sequence["FuelLogEntry"]) -> Optional[FuelLogStats]:
    """Count, total cost and mean MPG over a vehicle's fuel logs."""
    if not logs:
        return None
    total_cost = sum(log.total_cost or 0 for log in logs)
    mpgs = [log.mpg for log in logs if log.mpg is not None]
    average_mpg = sum(mpgs) / len(mpgs) if mpgs else 0
    return FuelLogStats(len(logs), total_cost, average_mpg)


def calc_mission_stats(missions: Sequence["Mission"]) -> Optional[MissionStats]:
    """Totals over completed and archived missions."""
    finished = [m for m in missions if m.is_finished]
    if not finished:
        return None
    total_miles = sum(m.actual_miles or 0 for m in finished)
    total_earnings = sum(m.offer_amount or 0 for m in finished)
    earnings_per_mile = total_earnings / total_miles if total_miles > 0 else 0
    return MissionStats(len(finished), total_miles, total_earnings, earnings_per_mile)


def calc_cost_per_mile(
    logs: Sequence["FuelLogEntry"], missions: Sequence["Mission"]
) -> Optional[CostPerMile]:
    """Fuel spend divided by miles driven on finished missions."""
    total_fuel_cost = sum(log.total_cost or 0 for log in logs)
    total_miles = sum(m.actual_miles or 0 for m in missions if m.is_finished)
    if total_miles <= 0:
        return None
    return CostPerMile(total_fuel_cost, total_miles, total_fuel_cost / total_miles)


def quote_mission(
    offer_amount: float,
    total_miles: float,
    fuel_price: float,
    mpg: Optional[float] = DEFAULT_QUOTE_MPG,
) -> MissionQuote:
    """Estimate fuel cost, net profit and CPM for an offered mission."""
    if not mpg or mpg <= 0:
        mpg = DEFAULT_QUOTE_MPG
    fuel_cost = (total_miles / mpg) * fuel_price
    cpm = fuel_cost / total_miles if total_miles > 0 else 0
    return MissionQuote(
        offer_amount=offer_amount,
        total_miles=total_miles,
        mpg=mpg,
        fuel_price=fuel_price,
        fuel_cost=fuel_cost,
        net_profit=offer_amount - fuel_cost,
        cpm=cpm,
    )


def build_vehicle_analytics(
    fleet: "Fleet", vehicle_id: str, previous_trend: Trend = Trend.STABLE
) -> VehicleAnalytics:
    """Gather the analytics page data for one vehicle."""
    logs = fleet.get_fuel_logs(vehicle_id)
    missions = fleet.get_finished_missions(vehicle_id)
    mpg_series = fleet.get_mpg_series(vehicle_id)

    return VehicleAnalytics(
        vehicle_id=vehicle_id,
        mpg_series=mpg_series,
        trend=calc_vehicle_mpg_trend([log.mpg for log in mpg_series], previous_trend),
        cost_per_mile=calc_cost_per_mile(logs, missions),
        fuel_stats=calc_fuel_log_stats(logs),
        mission_stats=calc_mission_stats(missions),
        recent_fuel_logs=list(reversed(logs))[:5],
        recent_missions=missions[:10],
        recent_expenses=fleet.get_expenses(vehicle_id)[:10],
    )
