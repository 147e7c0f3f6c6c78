from __future__ import annotations

from datetime import date, datetime
from typing import Optional, Sequence

from ..core.enums import AttendanceStatus
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, where_clause
from .model import AttendanceRecord, AttendanceRow
from .repository import AttendanceRepository


def _to_record(r: dict) -> AttendanceRecord:
    return AttendanceRecord(
        id=int(r["id"]),
        employee_id=int(r["employee_id"]),
        date=r["date"],
        check_in=r.get("check_in"),
        check_out=r.get("check_out"),
        status=AttendanceStatus(r["status"]),
        notes=r.get("notes"),
        created_at=r.get("created_at"),
    )


class MySQLAttendanceRepository(AttendanceRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_for_employee_and_date(self, employee_id: int, work_date: date) -> Optional[AttendanceRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT id, employee_id, date, check_in, check_out, status, notes, created_at
                FROM attendance
                WHERE employee_id=%s AND date=%s
                """,
                (int(employee_id), work_date),
            )
            r = fetchone(cur)
            return _to_record(r) if r else None

    def list_for_employee(self, employee_id: int, *, start_date: date, end_date: date) -> Sequence[AttendanceRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT id, employee_id, date, check_in, check_out, status, notes, created_at
                FROM attendance
                WHERE employee_id=%s AND date BETWEEN %s AND %s
                ORDER BY date ASC
                """,
                (int(employee_id), start_date, end_date),
            )
            return [_to_record(r) for r in fetchall(cur)]

    def create_checkin(
        self,
        *,
        employee_id: int,
        work_date: date,
        check_in: datetime,
        status: AttendanceStatus,
    ) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO attendance(employee_id, date, check_in, status)
                VALUES(%s,%s,%s,%s)
                """,
                (int(employee_id), work_date, check_in, status.value),
            )
            return int(cur.lastrowid)

    def update_checkout(self, *, attendance_id: int, check_out: datetime) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE attendance
                SET check_out=%s
                WHERE id=%s AND check_out IS NULL
                """,
                (check_out, int(attendance_id)),
            )
            return cur.rowcount > 0

    def list_rows(
        self,
        *,
        start_date: date,
        end_date: date,
        employee_id: Optional[int] = None,
    ) -> Sequence[AttendanceRow]:
        clauses = ["a.date BETWEEN %s AND %s"]
        params: list[object] = [start_date, end_date]
        if employee_id is not None:
            clauses.append("a.employee_id=%s")
            params.append(int(employee_id))

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT a.id, a.employee_id, e.employee_id AS employee_code,
                       e.first_name, e.last_name,
                       a.date, a.check_in, a.check_out, a.status, a.notes
                FROM attendance a
                JOIN employees e ON e.id = a.employee_id
                WHERE {where_clause(clauses)}
                ORDER BY a.date DESC, e.first_name ASC
                """,
                tuple(params),
            )
            return [
                AttendanceRow(
                    id=int(r["id"]),
                    employee_id=int(r["employee_id"]),
                    employee_code=r["employee_code"],
                    first_name=r["first_name"],
                    last_name=r["last_name"],
                    date=r["date"],
                    check_in=r.get("check_in"),
                    check_out=r.get("check_out"),
                    status=AttendanceStatus(r["status"]),
                    notes=r.get("notes"),
                )
                for r in fetchall(cur)
            ]
