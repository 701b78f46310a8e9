"""Fleet class - the aggregate of one user's vehicles and logged rows."""

from datetime import datetime, timedelta
from typing import Iterable, List, Optional

from .vehicle import Vehicle
from .fuel_log import FuelLogEntry
from .mission import Mission
from .expense import Expense
from .field_report import FieldReport
from .status import MissionStatus, ReportStatus
from .calculations import parse_timestamp


class Fleet:
    """Everything one user has stored: vehicles, fuel logs, missions, etc."""

    def __init__(
        self,
        owner_id: str,
        vehicles: Optional[List[Vehicle]] = None,
        fuel_logs: Optional[List[FuelLogEntry]] = None,
        missions: Optional[List[Mission]] = None,
        expenses: Optional[List[Expense]] = None,
        field_reports: Optional[List[FieldReport]] = None,
        callsign: Optional[str] = None,
    ):
        self.owner_id = owner_id
        self.callsign = callsign
        self.vehicles = vehicles or []
        self.fuel_logs = fuel_logs or []
        self.missions = missions or []
        self.expenses = expenses or []
        self.field_reports = field_reports or []

    @property
    def display_name(self) -> str:
        return self.callsign or self.owner_id

    def get_vehicle(self, vehicle_id: str) -> Optional[Vehicle]:
        """Find a vehicle by id."""
        for vehicle in self.vehicles:
            if vehicle.id == vehicle_id:
                return vehicle
        return None

    def get_mission(self, mission_id: str) -> Optional[Mission]:
        for mission in self.missions:
            if mission.id == mission_id:
                return mission
        return None

    def get_field_report(self, report_id: str) -> Optional[FieldReport]:
        for report in self.field_reports:
            if report.id == report_id:
                return report
        return None

    def get_fuel_logs(self, vehicle_id: Optional[str] = None) -> List[FuelLogEntry]:
        """Fuel logs oldest first, optionally for a single vehicle."""
        logs = self.fuel_logs
        if vehicle_id is not None:
            logs = [log for log in logs if log.vehicle_id == vehicle_id]
        return sorted(logs, key=lambda log: log.timestamp)

    def get_last_fuel_log(self, vehicle_id: str) -> Optional[FuelLogEntry]:
        """Most recent fuel log for a vehicle."""
        logs = self.get_fuel_logs(vehicle_id)
        return logs[-1] if logs else None

    def get_recent_mpg_logs(
        self, now: datetime, days: float, vehicle_id: Optional[str] = None
    ) -> List[FuelLogEntry]:
        """MPG-bearing logs created within `days` before `now`, oldest first."""
        since = parse_timestamp(now) - timedelta(days=days)
        return [
            log
            for log in self.get_fuel_logs(vehicle_id)
            if log.mpg is not None and log.timestamp >= since
        ]

    def get_mpg_series(self, vehicle_id: str) -> List[FuelLogEntry]:
        """All MPG-bearing logs for a vehicle, oldest first."""
        return [log for log in self.get_fuel_logs(vehicle_id) if log.mpg is not None]

    def get_missions(
        self,
        vehicle_id: Optional[str] = None,
        statuses: Optional[Iterable[MissionStatus]] = None,
    ) -> List[Mission]:
        """Missions filtered by vehicle and/or status, newest first."""
        missions = self.missions
        if vehicle_id is not None:
            missions = [m for m in missions if m.vehicle_id == vehicle_id]
        if statuses is not None:
            wanted = set(statuses)
            missions = [m for m in missions if m.status in wanted]
        return sorted(missions, key=lambda m: m.created_at or "", reverse=True)

    def get_finished_missions(self, vehicle_id: Optional[str] = None) -> List[Mission]:
        return self.get_missions(
            vehicle_id, [MissionStatus.COMPLETED, MissionStatus.HISTORY]
        )

    def get_expenses(self, vehicle_id: Optional[str] = None) -> List[Expense]:
        """Expenses newest first by expense date."""
        expenses = self.expenses
        if vehicle_id is not None:
            expenses = [e for e in expenses if e.vehicle_id == vehicle_id]
        return sorted(expenses, key=lambda e: e.expense_date, reverse=True)

    def get_field_reports(
        self, status: Optional[ReportStatus] = None
    ) -> List[FieldReport]:
        """Field reports oldest first, optionally with a given status."""
        reports = self.field_reports
        if status is not None:
            reports = [r for r in reports if r.status == status]
        return sorted(reports, key=lambda r: r.created_at or "")
