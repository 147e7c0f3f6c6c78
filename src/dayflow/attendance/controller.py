from __future__ import annotations

from datetime import date

from flask import Flask, request

from ..common.datetime_utils import parse_optional_date
from ..common.responses import domain_error, fail, ok
from ..core.exceptions import DomainError
from ..container import Container
from ..employees.access import admin_area, current_employee, employee_area


def register(app: Flask, container: Container) -> None:
    def _week_anchor() -> date:
        try:
            return parse_optional_date(request.args.get("week")) or date.today()
        except ValueError:
            return date.today()

    @app.route("/dashboard/attendance", methods=["GET"], endpoint="my_attendance")
    @employee_area
    def my_attendance():
        me = current_employee()
        today = container.attendance_service.today_state(me.id, date.today())
        week = container.attendance_service.week_for_employee(me.id, _week_anchor())
        return ok(
            today=today.record,
            state=today.state,
            can_check_in=today.can_check_in,
            can_check_out=today.can_check_out,
            week=week,
        )

    @app.route("/dashboard/attendance/check-in", methods=["POST"], endpoint="checkin")
    @employee_area
    def checkin():
        try:
            record = container.attendance_service.check_in(current_employee().id)
            return ok(record=record, message="Checked in successfully")
        except DomainError as e:
            return domain_error(e)
        except Exception:
            app.logger.exception("check-in failed")
            return fail("System error while checking in", 500)

    @app.route("/dashboard/attendance/check-out", methods=["POST"], endpoint="checkout")
    @employee_area
    def checkout():
        try:
            record = container.attendance_service.check_out(current_employee().id)
            return ok(record=record, message="Checked out successfully")
        except DomainError as e:
            return domain_error(e)
        except Exception:
            app.logger.exception("check-out failed")
            return fail("System error while checking out", 500)

    @app.route("/admin/attendance", methods=["GET"], endpoint="admin_attendance")
    @admin_area
    def admin_attendance():
        employee_arg = request.args.get("employee")
        employee_id = int(employee_arg) if employee_arg and employee_arg.isdigit() else None
        week = container.attendance_service.admin_week(_week_anchor(), employee_id=employee_id, q=request.args.get("q"))
        employees = container.employee_service.list_employees(active_only=True)
        return ok(
            start=week.start,
            end=week.end,
            rows=week.rows,
            counts=week.counts,
            employees=[{"id": e.id, "employee_id": e.employee_id, "full_name": e.full_name} for e in employees],
        )
