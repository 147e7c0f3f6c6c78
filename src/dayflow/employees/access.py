"""Area gating shared by every controller.

Two areas exist: ``admin`` (roles admin/hr) and ``employee``. A missing
session goes to login; a session in the wrong area goes to its own area.
"""

from __future__ import annotations

from functools import wraps
from typing import Optional

from flask import g, jsonify, redirect, request, session, url_for

from .session import SessionEmployee, SessionStore

AREA_ADMIN = "admin"
AREA_EMPLOYEE = "employee"
LOGIN = "login"

_AREA_ENDPOINTS = {
    LOGIN: "login",
    AREA_ADMIN: "admin_dashboard",
    AREA_EMPLOYEE: "dashboard",
}


def area_redirect(current: Optional[SessionEmployee], area: Optional[str]) -> Optional[str]:
    """Where to send ``current`` when it asks for ``area``; None means allowed."""
    if current is None:
        return LOGIN
    if area == AREA_ADMIN and not current.is_admin:
        return AREA_EMPLOYEE
    if area == AREA_EMPLOYEE and current.is_admin:
        return AREA_ADMIN
    return None


def home_area(current: Optional[SessionEmployee]) -> str:
    if current is None:
        return LOGIN
    return AREA_ADMIN if current.is_admin else AREA_EMPLOYEE


def current_store() -> SessionStore:
    return SessionStore(session)


def current_employee() -> Optional[SessionEmployee]:
    return getattr(g, "current_employee", None)


def _gate(area: Optional[str]):
    def decorator(view):
        @wraps(view)
        def wrapper(*args, **kwargs):
            me = current_store().load()
            target = area_redirect(me, area)
            if target is not None:
                if target == LOGIN and request.method != "GET":
                    return jsonify({"success": False, "message": "Please sign in to continue"}), 401
                return redirect(url_for(_AREA_ENDPOINTS[target]))
            g.current_employee = me
            return view(*args, **kwargs)

        return wrapper

    return decorator


login_required = _gate(None)
admin_area = _gate(AREA_ADMIN)
employee_area = _gate(AREA_EMPLOYEE)


def endpoint_for(area: str) -> str:
    return _AREA_ENDPOINTS[area]
