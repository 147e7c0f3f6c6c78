from __future__ import annotations

from typing import Any, Mapping, Optional, Sequence

from ..core.constants import DEFAULT_EMPLOYMENT_TYPE
from ..core.enums import Role
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from .model import Employee, NewEmployee
from .repository import EmployeeRepository

_COLUMNS = """
    id, employee_id, email, password_hash, role, first_name, last_name,
    phone, address, city, state, zip_code, profile_picture, department, designation,
    join_date, employment_type, is_active, is_verified, created_at, updated_at
"""

# Columns an update may touch; anything else is ignored.
_UPDATABLE = frozenset(
    {
        "employee_id",
        "email",
        "password_hash",
        "role",
        "first_name",
        "last_name",
        "phone",
        "address",
        "city",
        "state",
        "zip_code",
        "department",
        "designation",
        "join_date",
        "employment_type",
        "is_active",
        "is_verified",
    }
)


def _row_to_employee(r: dict) -> Employee:
    return Employee(
        id=int(r["id"]),
        employee_id=r["employee_id"],
        email=r["email"],
        password_hash=r["password_hash"],
        role=Role(r["role"]),
        first_name=r["first_name"],
        last_name=r["last_name"],
        phone=r.get("phone"),
        address=r.get("address"),
        city=r.get("city"),
        state=r.get("state"),
        zip_code=r.get("zip_code"),
        profile_picture=r.get("profile_picture"),
        department=r.get("department"),
        designation=r.get("designation"),
        join_date=r.get("join_date"),
        employment_type=r.get("employment_type") or DEFAULT_EMPLOYMENT_TYPE,
        is_active=bool(r.get("is_active", True)),
        is_verified=bool(r.get("is_verified", False)),
        created_at=r.get("created_at"),
        updated_at=r.get("updated_at"),
    )


class MySQLEmployeeRepository(EmployeeRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, employee_pk: int) -> Optional[Employee]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM employees WHERE id=%s", (int(employee_pk),))
            row = fetchone(cur)
            return _row_to_employee(row) if row else None

    def get_by_email(self, email: str) -> Optional[Employee]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM employees WHERE email=%s", (email,))
            row = fetchone(cur)
            return _row_to_employee(row) if row else None

    def find_by_email_or_code(self, *, email: str, employee_id: str) -> Sequence[Employee]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_COLUMNS} FROM employees WHERE email=%s OR employee_id=%s",
                (email, employee_id),
            )
            return [_row_to_employee(r) for r in fetchall(cur)]

    def create(self, data: NewEmployee) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO employees(
                    employee_id, email, password_hash, role, first_name, last_name,
                    phone, department, designation, join_date, is_active
                )
                VALUES(%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,1)
                """,
                (
                    data.employee_id,
                    data.email,
                    data.password_hash,
                    data.role.value,
                    data.first_name,
                    data.last_name,
                    data.phone,
                    data.department,
                    data.designation,
                    data.join_date,
                ),
            )
            return int(cur.lastrowid)

    def update_fields(self, employee_pk: int, fields: Mapping[str, Any]) -> bool:
        cols = [k for k in fields if k in _UPDATABLE]
        if not cols:
            return False

        params: list[object] = []
        for k in cols:
            v = fields[k]
            params.append(v.value if isinstance(v, Role) else v)

        assignments = ", ".join(f"{k}=%s" for k in cols)
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"UPDATE employees SET {assignments} WHERE id=%s",
                tuple(params + [int(employee_pk)]),
            )
            # rowcount is 0 when values are unchanged, so existence is checked by the service.
            return True

    def set_active(self, employee_pk: int, *, is_active: bool) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("UPDATE employees SET is_active=%s WHERE id=%s", (1 if is_active else 0, int(employee_pk)))
            return cur.rowcount > 0

    def delete_by_id(self, employee_pk: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM employees WHERE id=%s", (int(employee_pk),))
            return cur.rowcount > 0

    def list_all(self, *, active_only: bool = False) -> Sequence[Employee]:
        where = "WHERE is_active=1" if active_only else ""
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM employees {where} ORDER BY created_at DESC, id DESC")
            return [_row_to_employee(r) for r in fetchall(cur)]
