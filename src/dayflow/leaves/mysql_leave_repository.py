from __future__ import annotations

from datetime import date, datetime
from typing import Optional, Sequence

from ..core.enums import LeaveStatus
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, where_clause
from .model import LeaveBalance, LeaveRequest, LeaveRequestRow, LeaveType
from .repository import LeaveRepository

_REQUEST_COLUMNS = """
    r.id, r.employee_id, r.leave_type_id, r.start_date, r.end_date, r.total_days,
    r.reason, r.status, r.created_at, r.reviewed_by, r.review_comment, r.reviewed_at
"""

_DECIDE_SQL = """
    UPDATE leave_requests
    SET status=%s, reviewed_by=%s, review_comment=%s, reviewed_at=%s
    WHERE id=%s AND status=%s
"""

# IGNORE: a concurrent first read may have allocated the same row.
_ALLOCATE_SQL = """
    INSERT IGNORE INTO leave_balance(employee_id, leave_type_id, year, total_days, used_days, remaining_days)
    VALUES(%s,%s,%s,%s,0,%s)
"""

# MySQL assigns left to right, so remaining_days sees the new used_days.
_USAGE_SQL = """
    UPDATE leave_balance
    SET used_days = used_days + %s,
        remaining_days = total_days - used_days
    WHERE employee_id=%s AND leave_type_id=%s AND year=%s
"""


def _to_type(r: dict, prefix: str = "") -> LeaveType:
    return LeaveType(
        id=int(r[f"{prefix}id"]),
        name=r[f"{prefix}name"],
        description=r.get(f"{prefix}description"),
        max_days_per_year=int(r.get(f"{prefix}max_days_per_year") or 0),
        is_paid=bool(r.get(f"{prefix}is_paid", True)),
    )


def _to_request(r: dict) -> LeaveRequest:
    return LeaveRequest(
        id=int(r["id"]),
        employee_id=int(r["employee_id"]),
        leave_type_id=int(r["leave_type_id"]),
        start_date=r["start_date"],
        end_date=r["end_date"],
        total_days=int(r["total_days"]),
        reason=r.get("reason"),
        status=LeaveStatus(r["status"]),
        created_at=r.get("created_at"),
        reviewed_by=r.get("reviewed_by"),
        review_comment=r.get("review_comment"),
        reviewed_at=r.get("reviewed_at"),
    )


class MySQLLeaveRepository(LeaveRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    # -------- Leave types --------
    def list_types(self) -> Sequence[LeaveType]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT id, name, description, max_days_per_year, is_paid FROM leave_types ORDER BY name")
            return [_to_type(r) for r in fetchall(cur)]

    def get_type(self, leave_type_id: int) -> Optional[LeaveType]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "SELECT id, name, description, max_days_per_year, is_paid FROM leave_types WHERE id=%s",
                (int(leave_type_id),),
            )
            r = fetchone(cur)
            return _to_type(r) if r else None

    # -------- Leave requests --------
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
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO leave_requests(employee_id, leave_type_id, start_date, end_date, total_days, reason, status)
                VALUES(%s,%s,%s,%s,%s,%s,%s)
                """,
                (
                    int(employee_id),
                    int(leave_type_id),
                    start_date,
                    end_date,
                    int(total_days),
                    reason,
                    LeaveStatus.PENDING.value,
                ),
            )
            return int(cur.lastrowid)

    def get_request(self, request_id: int) -> Optional[LeaveRequest]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_REQUEST_COLUMNS} FROM leave_requests r WHERE r.id=%s", (int(request_id),))
            r = fetchone(cur)
            return _to_request(r) if r else None

    def list_requests(
        self,
        *,
        employee_id: Optional[int] = None,
        status: Optional[LeaveStatus] = None,
        limit: Optional[int] = None,
    ) -> Sequence[LeaveRequestRow]:
        clauses: list[str] = []
        params: list[object] = []

        if employee_id is not None:
            clauses.append("r.employee_id=%s")
            params.append(int(employee_id))
        if status is not None:
            clauses.append("r.status=%s")
            params.append(status.value)

        limit_sql = ""
        if limit is not None:
            limit_sql = "LIMIT %s"
            params.append(int(limit))

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_REQUEST_COLUMNS},
                       t.name AS leave_type_name,
                       e.employee_id AS employee_code, e.first_name, e.last_name
                FROM leave_requests r
                JOIN leave_types t ON t.id = r.leave_type_id
                JOIN employees e ON e.id = r.employee_id
                WHERE {where_clause(clauses)}
                ORDER BY r.created_at DESC, r.id DESC
                {limit_sql}
                """,
                tuple(params),
            )
            return [
                LeaveRequestRow(
                    request=_to_request(r),
                    leave_type_name=r["leave_type_name"],
                    employee_code=r["employee_code"],
                    first_name=r["first_name"],
                    last_name=r["last_name"],
                )
                for r in fetchall(cur)
            ]

    def decide_request(
        self,
        *,
        request_id: int,
        status: LeaveStatus,
        reviewed_by: int,
        review_comment: Optional[str],
        reviewed_at: datetime,
    ) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                _DECIDE_SQL,
                (
                    status.value,
                    int(reviewed_by),
                    review_comment,
                    reviewed_at,
                    int(request_id),
                    LeaveStatus.PENDING.value,
                ),
            )
            return cur.rowcount > 0

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
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                _DECIDE_SQL,
                (
                    LeaveStatus.APPROVED.value,
                    int(reviewed_by),
                    review_comment,
                    reviewed_at,
                    int(request_id),
                    LeaveStatus.PENDING.value,
                ),
            )
            if cur.rowcount == 0:
                return False
            cur.execute(_ALLOCATE_SQL, (int(employee_id), int(leave_type_id), int(year), int(allocation), int(allocation)))
            cur.execute(_USAGE_SQL, (int(days), int(employee_id), int(leave_type_id), int(year)))
            return True

    # -------- Leave balances --------
    def list_balances(self, *, employee_id: int, year: int) -> Sequence[LeaveBalance]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT b.id, b.employee_id, b.leave_type_id, b.year,
                       b.total_days, b.used_days, b.remaining_days,
                       t.id AS t_id, t.name AS t_name, t.description AS t_description,
                       t.max_days_per_year AS t_max_days_per_year, t.is_paid AS t_is_paid
                FROM leave_balance b
                JOIN leave_types t ON t.id = b.leave_type_id
                WHERE b.employee_id=%s AND b.year=%s
                ORDER BY t.name
                """,
                (int(employee_id), int(year)),
            )
            return [
                LeaveBalance(
                    id=int(r["id"]),
                    employee_id=int(r["employee_id"]),
                    leave_type_id=int(r["leave_type_id"]),
                    year=int(r["year"]),
                    total_days=int(r["total_days"]),
                    used_days=int(r["used_days"]),
                    remaining_days=int(r["remaining_days"]),
                    leave_type=_to_type(r, prefix="t_"),
                )
                for r in fetchall(cur)
            ]

    def create_balance(self, *, employee_id: int, leave_type_id: int, year: int, total_days: int) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(_ALLOCATE_SQL, (int(employee_id), int(leave_type_id), int(year), int(total_days), int(total_days)))
            return int(cur.lastrowid or 0)
