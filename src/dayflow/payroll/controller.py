from __future__ import annotations

from flask import Flask

from ..common.datetime_utils import parse_optional_date
from ..common.request_data import payload
from ..common.responses import domain_error, fail, ok
from ..core.exceptions import DomainError, ValidationError
from ..container import Container
from ..employees.access import admin_area, current_employee, employee_area
from .service import month_name


def _history_json(record) -> dict:
    return {**vars(record), "month_name": month_name(record.month)}


def register(app: Flask, container: Container) -> None:
    @app.route("/dashboard/payroll", methods=["GET"], endpoint="my_payroll")
    @employee_area
    def my_payroll():
        me = current_employee()
        try:
            return ok(
                salary=container.payroll_service.salary_for(me.id),
                history=[_history_json(r) for r in container.payroll_service.history_for(me.id)],
            )
        except Exception:
            app.logger.exception("payroll page load failed")
            return fail("Failed to load payroll", 500)

    @app.route("/admin/payroll", methods=["GET"], endpoint="admin_payroll")
    @admin_area
    def admin_payroll():
        try:
            overview = container.payroll_service.admin_overview()
        except Exception:
            app.logger.exception("payroll overview failed")
            return fail("Failed to load payroll", 500)
        return ok(
            employees=overview.lines,
            total_payroll=overview.total_payroll,
            average_salary=overview.average_salary,
            recent_payroll=[
                {
                    **_history_json(row.record),
                    "employee_code": row.employee_code,
                    "employee_name": row.full_name,
                }
                for row in overview.recent_payroll
            ],
        )

    @app.route("/admin/payroll/<int:employee_pk>/salary", methods=["PUT", "POST"], endpoint="save_salary")
    @admin_area
    def save_salary(employee_pk: int):
        data = payload()
        try:
            try:
                effective = parse_optional_date(data.get("effective_date"))
            except ValueError:
                raise ValidationError("Effective date must be YYYY-MM-DD")
            view = container.payroll_service.save_salary(employee_pk, data, effective_date=effective)
            return ok(salary=view, message="Salary saved successfully")
        except DomainError as e:
            return domain_error(e)
        except Exception:
            app.logger.exception("salary save failed")
            return fail("Failed to save salary", 500)
