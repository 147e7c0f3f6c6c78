from __future__ import annotations

from flask import Flask

from ..common.responses import ok
from ..container import Container
from ..employees.access import admin_area, current_employee, employee_area
from ..leaves.controller import leave_row_json


def register(app: Flask, container: Container) -> None:
    @app.route("/dashboard", methods=["GET"], endpoint="dashboard")
    @employee_area
    def dashboard():
        me = current_employee()
        data = container.dashboard_service.for_employee(me.id)
        return ok(
            employee=me,
            today=data.today.record,
            state=data.today.state,
            can_check_in=data.today.can_check_in,
            can_check_out=data.today.can_check_out,
            hours_worked=data.hours_worked,
            balances=data.balances,
            recent_leaves=[leave_row_json(r) for r in data.recent_leaves],
        )

    @app.route("/admin/dashboard", methods=["GET"], endpoint="admin_dashboard")
    @admin_area
    def admin_dashboard():
        data = container.dashboard_service.for_admin()
        return ok(
            total_employees=data.total_employees,
            present_today=data.present_today,
            absent_today=data.absent_today,
            attendance_rate=data.attendance_rate,
            pending_leaves=[leave_row_json(r) for r in data.pending_leaves],
            today_attendance=data.today_attendance,
        )
