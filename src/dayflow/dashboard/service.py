from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import Optional

from ..attendance.model import AttendanceRow, TodayAttendance
from ..attendance.service import AttendanceService
from ..core.enums import AttendanceStatus
from ..employees.repository import EmployeeRepository
from ..leaves.model import LeaveBalance, LeaveRequestRow
from ..leaves.service import LeaveService


@dataclass(frozen=True)
class EmployeeDashboard:
    today: TodayAttendance
    hours_worked: Optional[float]
    balances: list[LeaveBalance]
    recent_leaves: list[LeaveRequestRow]


@dataclass(frozen=True)
class AdminDashboard:
    total_employees: int
    present_today: int
    absent_today: int
    attendance_rate: int
    pending_leaves: list[LeaveRequestRow]
    today_attendance: list[AttendanceRow]


class DashboardService:
    """Read-only aggregates for the two landing pages."""

    def __init__(self, employees: EmployeeRepository, attendance: AttendanceService, leaves: LeaveService):
        self._employees = employees
        self._attendance = attendance
        self._leaves = leaves

    def for_employee(self, employee_id: int, *, today: date | None = None) -> EmployeeDashboard:
        today = today or date.today()
        state = self._attendance.today_state(employee_id, today)
        return EmployeeDashboard(
            today=state,
            hours_worked=state.record.hours_worked if state.record else None,
            balances=self._leaves.balances(employee_id, today.year),
            recent_leaves=self._leaves.recent_requests(employee_id),
        )

    def for_admin(self, *, today: date | None = None) -> AdminDashboard:
        today = today or date.today()
        total = len(self._employees.list_all(active_only=True))
        rows = self._attendance.rows_for_day(today)
        present = sum(1 for r in rows if r.status == AttendanceStatus.PRESENT)
        rate = round(present / total * 100) if total else 0
        return AdminDashboard(
            total_employees=total,
            present_today=present,
            absent_today=max(total - present, 0),
            attendance_rate=rate,
            pending_leaves=self._leaves.pending_requests(),
            today_attendance=rows,
        )
