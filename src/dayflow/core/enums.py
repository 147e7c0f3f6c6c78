from __future__ import annotations

from enum import Enum


class Role(str, Enum):
    """Employee role; admin and hr share the admin area."""

    ADMIN = "admin"
    HR = "hr"
    EMPLOYEE = "employee"


class AttendanceStatus(str, Enum):
    """Attendance status as stored in the database."""

    PRESENT = "present"
    ABSENT = "absent"
    HALF_DAY = "half-day"
    LEAVE = "leave"


class LeaveStatus(str, Enum):
    """Leave request review state."""

    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"


class PaymentStatus(str, Enum):
    PENDING = "pending"
    PROCESSED = "processed"
    PAID = "paid"


ADMIN_ROLES = frozenset({Role.ADMIN, Role.HR})
