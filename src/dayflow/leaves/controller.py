from __future__ import annotations

from datetime import date

from flask import Flask, request

from ..common.request_data import payload
from ..common.responses import domain_error, fail, ok
from ..core.exceptions import DomainError
from ..container import Container
from ..employees.access import admin_area, current_employee, employee_area


def leave_row_json(row) -> dict:
    return {
        **{k: v for k, v in vars(row.request).items()},
        "leave_type_name": row.leave_type_name,
        "employee_code": row.employee_code,
        "employee_name": row.full_name,
    }


def register(app: Flask, container: Container) -> None:
    @app.route("/dashboard/leaves", methods=["GET"], endpoint="my_leaves")
    @employee_area
    def my_leaves():
        me = current_employee()
        try:
            return ok(
                leave_types=container.leave_service.list_leave_types(),
                balances=container.leave_service.balances(me.id, date.today().year),
                requests=[leave_row_json(r) for r in container.leave_service.my_requests(me.id)],
            )
        except DomainError as e:
            return domain_error(e)
        except Exception:
            app.logger.exception("leave page load failed")
            return fail("Failed to load leave requests", 500)

    @app.route("/dashboard/leaves", methods=["POST"], endpoint="new_leave")
    @employee_area
    def new_leave():
        data = payload()
        try:
            leave = container.leave_service.submit(
                employee_id=current_employee().id,
                leave_type_id=data.get("leave_type_id"),
                start_date=data.get("start_date"),
                end_date=data.get("end_date"),
                reason=data.get("reason"),
            )
            return ok(201, request=leave, message="Leave request submitted successfully")
        except DomainError as e:
            return domain_error(e)
        except Exception:
            app.logger.exception("leave submission failed")
            return fail("Failed to submit leave request", 500)

    @app.route("/admin/leaves", methods=["GET"], endpoint="admin_leaves")
    @admin_area
    def admin_leaves():
        try:
            data = container.leave_service.admin_requests(status=request.args.get("status"))
            return ok(requests=[leave_row_json(r) for r in data.rows], counts=data.counts)
        except DomainError as e:
            return domain_error(e)
        except Exception:
            app.logger.exception("admin leave list failed")
            return fail("Failed to load leave requests", 500)

    @app.route("/admin/leaves/<int:request_id>/review", methods=["POST"], endpoint="review_leave")
    @admin_area
    def review_leave(request_id: int):
        data = payload()
        try:
            leave = container.leave_service.review(
                reviewer_id=current_employee().id,
                request_id=request_id,
                status=data.get("status"),
                comment=data.get("comment"),
            )
            return ok(request=leave, message=f"Leave request {leave.status.value}")
        except DomainError as e:
            return domain_error(e)
        except Exception:
            app.logger.exception("leave review failed")
            return fail("Failed to update leave request", 500)
