from __future__ import annotations

import logging
from datetime import date
from typing import Any, Optional, Sequence

from mysql.connector.errors import IntegrityError
from werkzeug.security import check_password_hash, generate_password_hash

from ..common.datetime_utils import parse_optional_date
from ..common.validators import optional_text, require_min_length, require_non_empty
from ..core.constants import MIN_PASSWORD_LENGTH
from ..core.enums import ADMIN_ROLES, Role
from ..core.exceptions import AuthenticationError, AuthorizationError, ConflictError, NotFoundError, ValidationError
from ..database.mysql_base import is_duplicate_key
from .model import CONTACT_FIELDS, Employee, NewEmployee
from .repository import EmployeeRepository

logger = logging.getLogger(__name__)

INVALID_CREDENTIALS = "Invalid email or password"
DUPLICATE_EMPLOYEE = "Email or Employee ID already exists"


def is_admin(employee: Optional[Any]) -> bool:
    """True iff the employee (or session snapshot) has role admin or hr."""
    if employee is None:
        return False
    try:
        return Role(getattr(employee, "role", None)) in ADMIN_ROLES
    except ValueError:
        return False


def _parse_role(value: Any) -> Role:
    try:
        return Role(value or Role.EMPLOYEE.value)
    except ValueError:
        raise ValidationError("Invalid role")


def _parse_join_date(value: Any) -> Optional[date]:
    if value is None or isinstance(value, date):
        return value
    try:
        return parse_optional_date(str(value))
    except ValueError:
        raise ValidationError("Join date must be YYYY-MM-DD")


class AuthService:
    """Use cases: login and self-registration."""

    def __init__(self, employees: EmployeeRepository):
        self._employees = employees

    def login(self, email: str, password: str) -> Employee:
        employee = self._employees.get_by_email((email or "").strip())
        if not employee or not employee.is_active:
            raise AuthenticationError(INVALID_CREDENTIALS)

        try:
            ok = check_password_hash(employee.password_hash, password or "")
        except (TypeError, ValueError):
            # e.g. placeholder hashes or corrupted values
            ok = False

        if not ok:
            raise AuthenticationError(INVALID_CREDENTIALS)

        logger.info("login ok employee=%s", employee.employee_id)
        return employee

    def register(
        self,
        *,
        employee_id: str,
        email: str,
        password: str,
        first_name: str,
        last_name: str,
        confirm_password: Optional[str] = None,
        role: Any = Role.EMPLOYEE,
    ) -> Employee:
        if confirm_password is not None and password != confirm_password:
            raise ValidationError("Passwords do not match")

        # Self-registration never grants access to the admin area.
        if _parse_role(role) in ADMIN_ROLES:
            raise AuthorizationError("Admin and HR accounts must be created by an administrator")

        return create_employee_record(
            self._employees,
            employee_id=employee_id,
            email=email,
            password=password,
            first_name=first_name,
            last_name=last_name,
            role=Role.EMPLOYEE,
        )


def create_employee_record(
    employees: EmployeeRepository,
    *,
    employee_id: str,
    email: str,
    password: str,
    first_name: str,
    last_name: str,
    role: Role,
    phone: Optional[str] = None,
    department: Optional[str] = None,
    designation: Optional[str] = None,
    join_date: Optional[date] = None,
) -> Employee:
    """Shared insert path for registration and admin-add."""
    employee_id = require_non_empty(employee_id, "Employee ID")
    email = require_non_empty(email, "Email").lower()
    first_name = require_non_empty(first_name, "First name")
    last_name = require_non_empty(last_name, "Last name")
    if not password:
        raise ValidationError("Password is required for new employees")
    require_min_length(password, "Password", MIN_PASSWORD_LENGTH)

    if employees.find_by_email_or_code(email=email, employee_id=employee_id):
        raise ConflictError(DUPLICATE_EMPLOYEE)

    data = NewEmployee(
        employee_id=employee_id,
        email=email,
        password_hash=generate_password_hash(password),
        role=role,
        first_name=first_name,
        last_name=last_name,
        phone=optional_text(phone),
        department=optional_text(department),
        designation=optional_text(designation),
        join_date=join_date,
    )
    try:
        new_pk = employees.create(data)
    except IntegrityError as e:
        # Lost a race against another insert with the same email/code.
        if is_duplicate_key(e):
            raise ConflictError(DUPLICATE_EMPLOYEE)
        raise

    created = employees.get_by_id(new_pk)
    if not created:
        raise NotFoundError("Employee was not saved")
    logger.info("employee created employee=%s role=%s", created.employee_id, created.role.value)
    return created


class EmployeeService:
    """Use cases: manage employee records (admin) and self-service profile."""

    def __init__(self, employees: EmployeeRepository):
        self._employees = employees

    def get(self, employee_pk: int) -> Employee:
        employee = self._employees.get_by_id(int(employee_pk))
        if not employee:
            raise NotFoundError("Employee not found")
        return employee

    def list_employees(self, *, active_only: bool = False, q: Optional[str] = None) -> Sequence[Employee]:
        rows = self._employees.list_all(active_only=active_only)
        needle = (q or "").strip().lower()
        if not needle:
            return list(rows)
        return [
            e
            for e in rows
            if needle in e.first_name.lower()
            or needle in e.last_name.lower()
            or needle in e.employee_id.lower()
            or needle in e.email.lower()
        ]

    def create_employee(
        self,
        *,
        employee_id: str,
        email: str,
        password: str,
        first_name: str,
        last_name: str,
        role: Any = Role.EMPLOYEE,
        phone: Optional[str] = None,
        department: Optional[str] = None,
        designation: Optional[str] = None,
        join_date: Any = None,
    ) -> Employee:
        return create_employee_record(
            self._employees,
            employee_id=employee_id,
            email=email,
            password=password,
            first_name=first_name,
            last_name=last_name,
            role=_parse_role(role),
            phone=phone,
            department=department,
            designation=designation,
            join_date=_parse_join_date(join_date),
        )

    def update_employee(
        self,
        employee_pk: int,
        *,
        employee_id: str,
        email: str,
        first_name: str,
        last_name: str,
        role: Any = None,
        actor_pk: Optional[int] = None,
        password: Optional[str] = None,
        phone: Optional[str] = None,
        department: Optional[str] = None,
        designation: Optional[str] = None,
        join_date: Any = None,
    ) -> Employee:
        current = self.get(employee_pk)
        # Omitted role keeps the current one.
        new_role = current.role if role in (None, "") else _parse_role(role)
        if actor_pk is not None and current.id == int(actor_pk) and new_role != current.role:
            raise ValidationError("You cannot change your own role")

        employee_id = require_non_empty(employee_id, "Employee ID")
        email = require_non_empty(email, "Email").lower()
        fields: dict[str, Any] = {
            "employee_id": employee_id,
            "email": email,
            "first_name": require_non_empty(first_name, "First name"),
            "last_name": require_non_empty(last_name, "Last name"),
            "role": new_role,
            "phone": optional_text(phone),
            "department": optional_text(department),
            "designation": optional_text(designation),
            "join_date": _parse_join_date(join_date),
        }
        # Blank password keeps the stored hash.
        if password:
            require_min_length(password, "Password", MIN_PASSWORD_LENGTH)
            fields["password_hash"] = generate_password_hash(password)

        owners = self._employees.find_by_email_or_code(email=email, employee_id=employee_id)
        if any(o.id != current.id for o in owners):
            raise ConflictError(DUPLICATE_EMPLOYEE)

        try:
            self._employees.update_fields(current.id, fields)
        except IntegrityError as e:
            if is_duplicate_key(e):
                raise ConflictError(DUPLICATE_EMPLOYEE)
            raise
        return self.get(current.id)

    def deactivate_employee(self, *, actor_pk: int, employee_pk: int) -> None:
        target = self.get(employee_pk)
        if target.id == int(actor_pk):
            raise ValidationError("You cannot deactivate your own account")
        self._employees.set_active(target.id, is_active=False)
        logger.info("employee deactivated employee=%s", target.employee_id)

    def delete_employee(self, *, actor_pk: int, employee_pk: int) -> None:
        target = self.get(employee_pk)
        if target.id == int(actor_pk):
            raise ValidationError("You cannot delete your own account")
        if not self._employees.delete_by_id(target.id):
            raise NotFoundError("Employee not found")
        logger.info("employee deleted employee=%s", target.employee_id)

    def update_profile(self, employee_pk: int, **contact: Optional[str]) -> Employee:
        """Self-service edit; only contact fields are writable."""
        current = self.get(employee_pk)
        fields = {k: optional_text(contact.get(k)) for k in CONTACT_FIELDS if k in contact}
        if fields:
            self._employees.update_fields(current.id, fields)
        return self.get(current.id)
