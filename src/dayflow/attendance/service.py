from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date, datetime, timedelta
from typing import Optional, Sequence

from mysql.connector.errors import IntegrityError

from ..common.datetime_utils import now_local, week_bounds
from ..core.enums import AttendanceStatus
from ..core.exceptions import NotFoundError, ValidationError
from ..database.mysql_base import is_duplicate_key
from ..employees.repository import EmployeeRepository
from .model import AttendanceRecord, AttendanceRow, DayState, TodayAttendance
from .repository import AttendanceRepository

logger = logging.getLogger(__name__)

ALREADY_CHECKED_IN = "Already checked in today"


@dataclass(frozen=True)
class WeekDay:
    date: date
    record: Optional[AttendanceRecord]


@dataclass(frozen=True)
class EmployeeWeek:
    start: date
    end: date
    days: list[WeekDay]


@dataclass(frozen=True)
class AdminWeek:
    start: date
    end: date
    rows: list[AttendanceRow]
    counts: dict[str, int]


def status_counts(statuses: Sequence[AttendanceStatus]) -> dict[str, int]:
    counts = {s.value: 0 for s in AttendanceStatus}
    for s in statuses:
        counts[s.value] += 1
    return counts


class AttendanceService:
    def __init__(self, attendance: AttendanceRepository, employees: EmployeeRepository):
        self._attendance = attendance
        self._employees = employees

    def today_state(self, employee_id: int, today: date) -> TodayAttendance:
        record = self._attendance.get_for_employee_and_date(int(employee_id), today)
        if record is None:
            return TodayAttendance(state=DayState.NO_RECORD, record=None)
        if record.check_out is None:
            return TodayAttendance(state=DayState.CHECKED_IN, record=record)
        return TodayAttendance(state=DayState.CHECKED_OUT, record=record)

    def check_in(self, employee_id: int, *, now: datetime | None = None) -> AttendanceRecord:
        now = now or now_local()
        today = now.date()

        employee = self._employees.get_by_id(int(employee_id))
        if not employee or not employee.is_active:
            raise NotFoundError("Employee not found")

        if self._attendance.get_for_employee_and_date(employee.id, today):
            raise ValidationError(ALREADY_CHECKED_IN)

        try:
            self._attendance.create_checkin(
                employee_id=employee.id,
                work_date=today,
                check_in=now,
                status=AttendanceStatus.PRESENT,
            )
        except IntegrityError as e:
            # Unique (employee_id, date) caught a double submit.
            if is_duplicate_key(e):
                raise ValidationError(ALREADY_CHECKED_IN)
            raise

        logger.info("check-in employee=%s date=%s", employee.employee_id, today)
        return self._attendance.get_for_employee_and_date(employee.id, today)

    def check_out(self, employee_id: int, *, now: datetime | None = None) -> AttendanceRecord:
        now = now or now_local()
        today = now.date()

        record = self._attendance.get_for_employee_and_date(int(employee_id), today)
        if not record:
            raise ValidationError("You have not checked in today")
        if record.check_out is not None:
            raise ValidationError("Already checked out today")
        if record.check_in is not None and now < record.check_in:
            raise ValidationError("Check-out time cannot be before check-in time")

        if not self._attendance.update_checkout(attendance_id=record.id, check_out=now):
            raise ValidationError("Already checked out today")

        logger.info("check-out employee_pk=%s date=%s", employee_id, today)
        return self._attendance.get_for_employee_and_date(int(employee_id), today)

    def week_for_employee(self, employee_id: int, anchor: date) -> EmployeeWeek:
        start, end = week_bounds(anchor)
        by_date = {
            r.date: r
            for r in self._attendance.list_for_employee(int(employee_id), start_date=start, end_date=end)
        }
        days = [WeekDay(date=d, record=by_date.get(d)) for d in (start + timedelta(days=i) for i in range(7))]
        return EmployeeWeek(start=start, end=end, days=days)

    def admin_week(self, anchor: date, *, employee_id: Optional[int] = None, q: Optional[str] = None) -> AdminWeek:
        start, end = week_bounds(anchor)
        rows = list(self._attendance.list_rows(start_date=start, end_date=end, employee_id=employee_id))
        # Counts cover the whole week; the text filter only narrows the listing.
        counts = status_counts([r.status for r in rows])

        needle = (q or "").strip().lower()
        if needle:
            rows = [
                r
                for r in rows
                if needle in r.first_name.lower() or needle in r.last_name.lower() or needle in r.employee_code.lower()
            ]
        return AdminWeek(start=start, end=end, rows=rows, counts=counts)

    def rows_for_day(self, day: date) -> list[AttendanceRow]:
        return list(self._attendance.list_rows(start_date=day, end_date=day))
