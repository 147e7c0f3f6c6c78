"""Authenticated-employee snapshot kept in the (signed cookie) session.

``SessionStore`` wraps any mutable mapping so it works with Flask's
``session`` at runtime and a plain dict in tests.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass, fields
from datetime import date
from typing import Any, MutableMapping, Optional

from ..core.constants import SESSION_KEY
from ..core.enums import ADMIN_ROLES, Role
from .model import CONTACT_FIELDS, Employee


@dataclass(frozen=True)
class SessionEmployee:
    """What we store into the session after login (never the password hash)."""

    id: int
    employee_id: str
    email: str
    role: Role
    first_name: str
    last_name: str
    phone: Optional[str] = None
    address: Optional[str] = None
    city: Optional[str] = None
    state: Optional[str] = None
    zip_code: Optional[str] = None
    department: Optional[str] = None
    designation: Optional[str] = None
    join_date: Optional[str] = None

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}".strip()

    @property
    def is_admin(self) -> bool:
        return self.role in ADMIN_ROLES

    @classmethod
    def from_employee(cls, employee: Employee) -> "SessionEmployee":
        join_date = employee.join_date.isoformat() if isinstance(employee.join_date, date) else employee.join_date
        return cls(
            id=employee.id,
            employee_id=employee.employee_id,
            email=employee.email,
            role=employee.role,
            first_name=employee.first_name,
            last_name=employee.last_name,
            phone=employee.phone,
            address=employee.address,
            city=employee.city,
            state=employee.state,
            zip_code=employee.zip_code,
            department=employee.department,
            designation=employee.designation,
            join_date=join_date,
        )

    def to_dict(self) -> dict:
        data = asdict(self)
        data["role"] = self.role.value
        return data

    @classmethod
    def from_dict(cls, data: MutableMapping[str, Any]) -> "SessionEmployee":
        known = {f.name for f in fields(cls)}
        values = {k: v for k, v in data.items() if k in known}
        values["role"] = Role(values["role"])
        values["id"] = int(values["id"])
        return cls(**values)


class SessionStore:
    """Explicit auth context: load on request, save on login, clear on logout."""

    def __init__(self, storage: MutableMapping[str, Any], *, key: str = SESSION_KEY):
        self._storage = storage
        self._key = key

    def load(self) -> Optional[SessionEmployee]:
        raw = self._storage.get(self._key)
        if not raw:
            return None
        try:
            return SessionEmployee.from_dict(raw)
        except (KeyError, TypeError, ValueError):
            # Stale or tampered snapshot: treat as logged out.
            self.clear()
            return None

    def save(self, employee: Employee) -> SessionEmployee:
        snapshot = SessionEmployee.from_employee(employee)
        self._storage[self._key] = snapshot.to_dict()
        return snapshot

    def refresh(self, **changes: Optional[str]) -> Optional[SessionEmployee]:
        """Merge edited contact fields into the stored snapshot."""
        current = self.load()
        if current is None:
            return None
        data = current.to_dict()
        data.update({k: v for k, v in changes.items() if k in CONTACT_FIELDS})
        self._storage[self._key] = data
        return SessionEmployee.from_dict(data)

    def clear(self) -> None:
        self._storage.pop(self._key, None)
