from __future__ import annotations

from typing import Any, Mapping, Optional, Protocol, Sequence

from .model import Employee, NewEmployee


class EmployeeRepository(Protocol):
    """Repository interface for Employee.

    Note (DIP): services depend on this interface, not on a concrete database.
    """

    def get_by_id(self, employee_pk: int) -> Optional[Employee]:
        raise NotImplementedError

    def get_by_email(self, email: str) -> Optional[Employee]:
        raise NotImplementedError

    def find_by_email_or_code(self, *, email: str, employee_id: str) -> Sequence[Employee]:
        """All employees owning either the email or the employee code."""

        raise NotImplementedError

    def create(self, data: NewEmployee) -> int:
        raise NotImplementedError

    def update_fields(self, employee_pk: int, fields: Mapping[str, Any]) -> bool:
        raise NotImplementedError

    def set_active(self, employee_pk: int, *, is_active: bool) -> bool:
        raise NotImplementedError

    def delete_by_id(self, employee_pk: int) -> bool:
        raise NotImplementedError

    def list_all(self, *, active_only: bool = False) -> Sequence[Employee]:
        """Newest first."""

        raise NotImplementedError
