from __future__ import annotations

from datetime import date, datetime
from typing import Optional, Protocol, Sequence

from ..core.enums import LeaveStatus
from .model import LeaveBalance, LeaveRequest, LeaveRequestRow, LeaveType


class LeaveRepository(Protocol):
    # Leave types
    def list_types(self) -> Sequence[LeaveType]:
        raise NotImplementedError

    def get_type(self, leave_type_id: int) -> Optional[LeaveType]:
        raise NotImplementedError

    # Leave requests
    def create_request(
        self,
        *,
        employee_id: int,
        leave_type_id: int,
        start_date: date,
        end_date: date,
        total_days: int,
        reason: Optional[str],
    ) -> int:
        raise NotImplementedError

    def get_request(self, request_id: int) -> Optional[LeaveRequest]:
        raise NotImplementedError

    def list_requests(
        self,
        *,
        employee_id: Optional[int] = None,
        status: Optional[LeaveStatus] = None,
        limit: Optional[int] = None,
    ) -> Sequence[LeaveRequestRow]:
        """Newest first, joined with leave type and employee."""

        raise NotImplementedError

    def decide_request(
        self,
        *,
        request_id: int,
        status: LeaveStatus,
        reviewed_by: int,
        review_comment: Optional[str],
        reviewed_at: datetime,
    ) -> bool:
        """Only a pending request is updated; False otherwise."""

        raise NotImplementedError

    def approve_request(
        self,
        *,
        request_id: int,
        reviewed_by: int,
        review_comment: Optional[str],
        reviewed_at: datetime,
        employee_id: int,
        leave_type_id: int,
        year: int,
        days: int,
        allocation: int,
    ) -> bool:
        """Approve a pending request and apply its days to the year's balance in one transaction.

        The balance row is allocated with ``allocation`` days when missing.
        Returns False (nothing written) when the request is no longer pending.
        """

        raise NotImplementedError

    # Leave balances
    def list_balances(self, *, employee_id: int, year: int) -> Sequence[LeaveBalance]:
        raise NotImplementedError

    def create_balance(self, *, employee_id: int, leave_type_id: int, year: int, total_days: int) -> int:
        raise NotImplementedError
