from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from typing import Optional

from ..core.enums import LeaveStatus

# pending -> approved | rejected; both terminal.
TRANSITIONS: dict[LeaveStatus, frozenset[LeaveStatus]] = {
    LeaveStatus.PENDING: frozenset({LeaveStatus.APPROVED, LeaveStatus.REJECTED}),
    LeaveStatus.APPROVED: frozenset(),
    LeaveStatus.REJECTED: frozenset(),
}


@dataclass(frozen=True)
class LeaveType:
    id: int
    name: str
    description: Optional[str]
    max_days_per_year: int
    is_paid: bool


@dataclass(frozen=True)
class LeaveRequest:
    id: int
    employee_id: int
    leave_type_id: int
    start_date: date
    end_date: date
    total_days: int
    reason: Optional[str]
    status: LeaveStatus
    created_at: Optional[datetime] = None
    reviewed_by: Optional[int] = None
    review_comment: Optional[str] = None
    reviewed_at: Optional[datetime] = None


@dataclass(frozen=True)
class LeaveRequestRow:
    """Read-model: request joined with leave type and employee names."""

    request: LeaveRequest
    leave_type_name: str
    employee_code: str
    first_name: str
    last_name: str

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}".strip()


@dataclass(frozen=True)
class LeaveBalance:
    id: int
    employee_id: int
    leave_type_id: int
    year: int
    total_days: int
    used_days: int
    remaining_days: int
    leave_type: Optional[LeaveType] = None
