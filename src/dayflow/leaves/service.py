from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date, datetime
from typing import Any, Optional, Sequence

from ..common.datetime_utils import inclusive_days, now_local, parse_optional_date
from ..common.validators import optional_text
from ..core.constants import RECENT_LEAVES_LIMIT
from ..core.enums import LeaveStatus
from ..core.exceptions import AuthorizationError, NotFoundError, ValidationError
from ..employees.repository import EmployeeRepository
from .model import TRANSITIONS, LeaveBalance, LeaveRequest, LeaveRequestRow, LeaveType
from .repository import LeaveRepository

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AdminLeaveList:
    rows: list[LeaveRequestRow]
    counts: dict[str, int]


def allowed_transitions(status: LeaveStatus) -> frozenset[LeaveStatus]:
    return TRANSITIONS.get(LeaveStatus(status), frozenset())


def _as_date(value: Any, field_name: str) -> Optional[date]:
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    try:
        return parse_optional_date(value)
    except ValueError:
        raise ValidationError(f"{field_name} must be YYYY-MM-DD")


class LeaveService:
    """Leave requests (submit/review) and the per-year leave balances."""

    def __init__(self, leaves: LeaveRepository, employees: EmployeeRepository):
        self._leaves = leaves
        self._employees = employees

    def list_leave_types(self) -> Sequence[LeaveType]:
        return list(self._leaves.list_types())

    def submit(
        self,
        *,
        employee_id: int,
        leave_type_id: Any,
        start_date: Any,
        end_date: Any,
        reason: Optional[str] = None,
    ) -> LeaveRequest:
        start = _as_date(start_date, "Start date")
        end = _as_date(end_date, "End date")
        if not leave_type_id or start is None or end is None:
            raise ValidationError("Please fill all required fields")

        try:
            leave_type = self._leaves.get_type(int(leave_type_id))
        except (TypeError, ValueError):
            leave_type = None
        if leave_type is None:
            raise ValidationError("Unknown leave type")

        total_days = inclusive_days(start, end)
        if total_days <= 0:
            raise ValidationError("End date must be after start date")

        request_id = self._leaves.create_request(
            employee_id=int(employee_id),
            leave_type_id=leave_type.id,
            start_date=start,
            end_date=end,
            total_days=total_days,
            reason=optional_text(reason),
        )
        logger.info("leave submitted request=%s employee_pk=%s days=%s", request_id, employee_id, total_days)
        return self._get(request_id)

    def review(
        self,
        *,
        reviewer_id: int,
        request_id: int,
        status: Any,
        comment: Optional[str] = None,
        now: datetime | None = None,
    ) -> LeaveRequest:
        reviewer = self._employees.get_by_id(int(reviewer_id))
        if not reviewer or not reviewer.is_active or not reviewer.is_admin:
            raise AuthorizationError("Only admin or HR can review leave requests")

        try:
            decision = LeaveStatus(status)
        except ValueError:
            raise ValidationError("Status must be approved or rejected")

        current = self._get(request_id)
        if decision not in allowed_transitions(current.status):
            if current.status != LeaveStatus.PENDING:
                raise ValidationError("Leave request has already been reviewed")
            raise ValidationError("Status must be approved or rejected")

        reviewed_at = now or now_local()
        if decision == LeaveStatus.APPROVED:
            leave_type = self._leaves.get_type(current.leave_type_id)
            # Status change and balance usage commit together or not at all.
            decided = self._leaves.approve_request(
                request_id=current.id,
                reviewed_by=reviewer.id,
                review_comment=optional_text(comment),
                reviewed_at=reviewed_at,
                employee_id=current.employee_id,
                leave_type_id=current.leave_type_id,
                year=current.start_date.year,
                days=current.total_days,
                allocation=leave_type.max_days_per_year if leave_type else 0,
            )
        else:
            decided = self._leaves.decide_request(
                request_id=current.id,
                status=decision,
                reviewed_by=reviewer.id,
                review_comment=optional_text(comment),
                reviewed_at=reviewed_at,
            )
        if not decided:
            # Someone else reviewed it between our read and write.
            raise ValidationError("Leave request has already been reviewed")

        logger.info("leave %s request=%s by=%s", decision.value, current.id, reviewer.employee_id)
        return self._get(current.id)

    def approve(self, *, reviewer_id: int, request_id: int, comment: Optional[str] = None) -> LeaveRequest:
        return self.review(reviewer_id=reviewer_id, request_id=request_id, status=LeaveStatus.APPROVED, comment=comment)

    def reject(self, *, reviewer_id: int, request_id: int, comment: Optional[str] = None) -> LeaveRequest:
        return self.review(reviewer_id=reviewer_id, request_id=request_id, status=LeaveStatus.REJECTED, comment=comment)

    def balances(self, employee_id: int, year: int) -> list[LeaveBalance]:
        """Balances for the year; leave types without a row yet are allocated on read."""
        employee_id, year = int(employee_id), int(year)
        rows = list(self._leaves.list_balances(employee_id=employee_id, year=year))
        have = {b.leave_type_id for b in rows}
        missing = [t for t in self._leaves.list_types() if t.id not in have]
        if not missing:
            return rows

        for t in missing:
            self._leaves.create_balance(
                employee_id=employee_id,
                leave_type_id=t.id,
                year=year,
                total_days=t.max_days_per_year,
            )
        logger.info("leave balances allocated employee_pk=%s year=%s types=%s", employee_id, year, len(missing))
        return list(self._leaves.list_balances(employee_id=employee_id, year=year))

    def my_requests(self, employee_id: int, *, limit: Optional[int] = None) -> list[LeaveRequestRow]:
        return list(self._leaves.list_requests(employee_id=int(employee_id), limit=limit))

    def recent_requests(self, employee_id: int) -> list[LeaveRequestRow]:
        return self.my_requests(employee_id, limit=RECENT_LEAVES_LIMIT)

    def pending_requests(self) -> list[LeaveRequestRow]:
        return list(self._leaves.list_requests(status=LeaveStatus.PENDING))

    def admin_requests(self, *, status: Any = None) -> AdminLeaveList:
        all_rows = list(self._leaves.list_requests())
        counts = {s.value: 0 for s in LeaveStatus}
        for r in all_rows:
            counts[r.request.status.value] += 1

        if status in (None, "", "all"):
            return AdminLeaveList(rows=all_rows, counts=counts)
        try:
            wanted = LeaveStatus(status)
        except ValueError:
            raise ValidationError("Unknown status filter")
        return AdminLeaveList(rows=[r for r in all_rows if r.request.status == wanted], counts=counts)

    def _get(self, request_id: int) -> LeaveRequest:
        req = self._leaves.get_request(int(request_id))
        if not req:
            raise NotFoundError("Leave request not found")
        return req
