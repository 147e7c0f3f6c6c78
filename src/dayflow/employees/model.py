from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from typing import Optional

from ..core.constants import DEFAULT_EMPLOYMENT_TYPE
from ..core.enums import ADMIN_ROLES, Role


@dataclass(frozen=True)
class Employee:
    """Domain entity: Employee.

    ``id`` is the database key referenced by every other table;
    ``employee_id`` is the human-facing code (e.g. ``EMP001``).
    """

    id: int
    employee_id: str
    email: str
    password_hash: str
    role: Role
    first_name: str
    last_name: str
    phone: Optional[str] = None
    address: Optional[str] = None
    city: Optional[str] = None
    state: Optional[str] = None
    zip_code: Optional[str] = None
    profile_picture: Optional[str] = None
    department: Optional[str] = None
    designation: Optional[str] = None
    join_date: Optional[date] = None
    employment_type: str = DEFAULT_EMPLOYMENT_TYPE
    is_active: bool = True
    is_verified: bool = False
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}".strip()

    @property
    def is_admin(self) -> bool:
        return self.role in ADMIN_ROLES


@dataclass(frozen=True)
class NewEmployee:
    """Validated input for an employee insert (password already hashed)."""

    employee_id: str
    email: str
    password_hash: str
    role: Role
    first_name: str
    last_name: str
    phone: Optional[str] = None
    department: Optional[str] = None
    designation: Optional[str] = None
    join_date: Optional[date] = None


CONTACT_FIELDS = ("phone", "address", "city", "state", "zip_code")
