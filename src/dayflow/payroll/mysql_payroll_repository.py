from __future__ import annotations

from datetime import date
from decimal import Decimal
from typing import Mapping, Optional, Sequence

from ..core.enums import PaymentStatus
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, to_decimal
from .model import AMOUNT_FIELDS, PayrollRecord, PayrollRow, SalaryStructure
from .repository import PayrollRepository

_SALARY_COLUMNS = "id, employee_id, " + ", ".join(AMOUNT_FIELDS) + ", effective_date, created_at, updated_at"

_PAYROLL_COLUMNS = """
    p.id, p.employee_id, p.month, p.year, p.basic_salary, p.allowances, p.deductions,
    p.bonus, p.net_salary, p.payment_status, p.payment_date, p.notes
"""


def _to_salary(r: dict) -> SalaryStructure:
    return SalaryStructure(
        id=int(r["id"]),
        employee_id=int(r["employee_id"]),
        **{name: to_decimal(r.get(name)) for name in AMOUNT_FIELDS},
        effective_date=r["effective_date"],
        created_at=r.get("created_at"),
        updated_at=r.get("updated_at"),
    )


def _to_payroll(r: dict) -> PayrollRecord:
    return PayrollRecord(
        id=int(r["id"]),
        employee_id=int(r["employee_id"]),
        month=int(r["month"]),
        year=int(r["year"]),
        basic_salary=to_decimal(r.get("basic_salary")),
        allowances=to_decimal(r.get("allowances")),
        deductions=to_decimal(r.get("deductions")),
        bonus=to_decimal(r.get("bonus")),
        net_salary=to_decimal(r.get("net_salary")),
        payment_status=PaymentStatus(r["payment_status"]),
        payment_date=r.get("payment_date"),
        notes=r.get("notes"),
    )


class MySQLPayrollRepository(PayrollRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    # -------- Salary structures --------
    def get_salary(self, employee_id: int) -> Optional[SalaryStructure]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_SALARY_COLUMNS} FROM salary_structure WHERE employee_id=%s", (int(employee_id),))
            r = fetchone(cur)
            return _to_salary(r) if r else None

    def list_salaries(self, employee_ids: Sequence[int]) -> Sequence[SalaryStructure]:
        ids = [int(i) for i in employee_ids]
        if not ids:
            return []
        placeholders = ",".join(["%s"] * len(ids))
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_SALARY_COLUMNS} FROM salary_structure WHERE employee_id IN ({placeholders})",
                tuple(ids),
            )
            return [_to_salary(r) for r in fetchall(cur)]

    def insert_salary(self, *, employee_id: int, amounts: Mapping[str, Decimal], effective_date: date) -> int:
        cols = ", ".join(AMOUNT_FIELDS)
        placeholders = ",".join(["%s"] * (len(AMOUNT_FIELDS) + 2))
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"INSERT INTO salary_structure(employee_id, {cols}, effective_date) VALUES({placeholders})",
                (int(employee_id), *[amounts[n] for n in AMOUNT_FIELDS], effective_date),
            )
            return int(cur.lastrowid)

    def update_salary(self, *, salary_id: int, amounts: Mapping[str, Decimal], effective_date: date) -> bool:
        assignments = ", ".join(f"{n}=%s" for n in AMOUNT_FIELDS)
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"UPDATE salary_structure SET {assignments}, effective_date=%s WHERE id=%s",
                (*[amounts[n] for n in AMOUNT_FIELDS], effective_date, int(salary_id)),
            )
            return True

    # -------- Payroll snapshots --------
    def list_payroll_for_employee(self, employee_id: int) -> Sequence[PayrollRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_PAYROLL_COLUMNS}
                FROM payroll p
                WHERE p.employee_id=%s
                ORDER BY p.year DESC, p.month DESC
                """,
                (int(employee_id),),
            )
            return [_to_payroll(r) for r in fetchall(cur)]

    def list_recent_payroll(self, *, limit: int) -> Sequence[PayrollRow]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_PAYROLL_COLUMNS},
                       e.employee_id AS employee_code, e.first_name, e.last_name
                FROM payroll p
                JOIN employees e ON e.id = p.employee_id
                ORDER BY p.year DESC, p.month DESC, p.id DESC
                LIMIT %s
                """,
                (int(limit),),
            )
            return [
                PayrollRow(
                    record=_to_payroll(r),
                    employee_code=r["employee_code"],
                    first_name=r["first_name"],
                    last_name=r["last_name"],
                )
                for r in fetchall(cur)
            ]
