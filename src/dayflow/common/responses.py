from __future__ import annotations

import dataclasses
from datetime import date, datetime
from decimal import Decimal
from enum import Enum
from typing import Any

from flask import jsonify

from ..core.exceptions import (
    AuthenticationError,
    AuthorizationError,
    ConflictError,
    DomainError,
    NotFoundError,
    ValidationError,
)

_STATUS_BY_ERROR = (
    (ValidationError, 400),
    (AuthenticationError, 401),
    (AuthorizationError, 403),
    (NotFoundError, 404),
    (ConflictError, 409),
)

# Never leaves the server, whatever object it sits on.
_HIDDEN_FIELDS = frozenset({"password_hash"})


def jsonable(value: Any) -> Any:
    """Convert domain objects (dataclasses, enums, dates, Decimal) into JSON values."""
    if dataclasses.is_dataclass(value) and not isinstance(value, type):
        out = {f.name: jsonable(getattr(value, f.name)) for f in dataclasses.fields(value) if f.name not in _HIDDEN_FIELDS}
        for prop in ("full_name", "hours_worked", "remaining_days"):
            if prop not in out and hasattr(type(value), prop):
                out[prop] = jsonable(getattr(value, prop))
        return out
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, datetime):
        return value.isoformat(timespec="seconds")
    if isinstance(value, date):
        return value.isoformat()
    if isinstance(value, Decimal):
        return str(value.quantize(Decimal("0.01")))
    if isinstance(value, dict):
        return {str(k): jsonable(v) for k, v in value.items() if k not in _HIDDEN_FIELDS}
    if isinstance(value, (list, tuple, set, frozenset)):
        return [jsonable(v) for v in value]
    return value


def ok(status: int = 200, **data: Any):
    return jsonify({"success": True, **jsonable(data)}), status


def fail(message: str, status: int = 400):
    return jsonify({"success": False, "message": message}), status


def domain_error(e: DomainError):
    for exc_type, status in _STATUS_BY_ERROR:
        if isinstance(e, exc_type):
            return fail(str(e), status)
    return fail(str(e), 400)
