from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from enum import Enum
from typing import Optional

from ..core.enums import AttendanceStatus


def hours_between(check_in: Optional[datetime], check_out: Optional[datetime]) -> Optional[float]:
    """Hours worked rounded to one decimal; None when either timestamp is missing."""
    if check_in is None or check_out is None:
        return None
    return round((check_out - check_in).total_seconds() / 3600, 1)


@dataclass(frozen=True)
class AttendanceRecord:
    """Domain entity: one employee's attendance for one day."""

    id: int
    employee_id: int
    date: date
    check_in: Optional[datetime]
    check_out: Optional[datetime]
    status: AttendanceStatus
    notes: Optional[str] = None
    created_at: Optional[datetime] = None

    @property
    def hours_worked(self) -> Optional[float]:
        return hours_between(self.check_in, self.check_out)


@dataclass(frozen=True)
class AttendanceRow:
    """Read-model for admin listings (joined with the employee)."""

    id: int
    employee_id: int
    employee_code: str
    first_name: str
    last_name: str
    date: date
    check_in: Optional[datetime]
    check_out: Optional[datetime]
    status: AttendanceStatus
    notes: Optional[str] = None

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}".strip()

    @property
    def hours_worked(self) -> Optional[float]:
        return hours_between(self.check_in, self.check_out)


class DayState(str, Enum):
    """Check-in/out state machine for the current day."""

    NO_RECORD = "no-record"
    CHECKED_IN = "checked-in"
    CHECKED_OUT = "checked-out"


@dataclass(frozen=True)
class TodayAttendance:
    state: DayState
    record: Optional[AttendanceRecord]

    @property
    def can_check_in(self) -> bool:
        return self.state == DayState.NO_RECORD

    @property
    def can_check_out(self) -> bool:
        return self.state == DayState.CHECKED_IN
