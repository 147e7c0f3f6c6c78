from __future__ import annotations

from flask import Flask, redirect, request, session, url_for

from ..common.request_data import flag, payload, text
from ..common.responses import domain_error, fail, ok
from ..core.exceptions import DomainError
from ..container import Container
from .access import admin_area, current_employee, current_store, employee_area, endpoint_for, home_area, login_required
from .model import CONTACT_FIELDS


def register(app: Flask, container: Container) -> None:
    @app.route("/", methods=["GET"], endpoint="index")
    def index():
        return redirect(url_for(endpoint_for(home_area(current_store().load()))))

    @app.route("/auth/login", methods=["GET", "POST"], endpoint="login")
    def login():
        store = current_store()
        if request.method == "GET":
            me = store.load()
            if me is not None:
                return redirect(url_for(endpoint_for(home_area(me))))
            return ok(authenticated=False)

        data = payload()
        try:
            employee = container.auth_service.login(text(data, "email"), text(data, "password"))
            session.permanent = flag(data, "remember_me")
            snapshot = store.save(employee)
            return ok(employee=snapshot, redirect=url_for(endpoint_for(home_area(snapshot))))
        except DomainError as e:
            return domain_error(e)
        except Exception:
            app.logger.exception("login failed")
            return fail("System error while signing in", 500)

    @app.route("/auth/register", methods=["POST"], endpoint="register")
    def register_employee():
        data = payload()
        try:
            employee = container.auth_service.register(
                employee_id=text(data, "employee_id"),
                email=text(data, "email"),
                password=text(data, "password"),
                confirm_password=data.get("confirm_password"),
                first_name=text(data, "first_name"),
                last_name=text(data, "last_name"),
                role=data.get("role") or "employee",
            )
            snapshot = current_store().save(employee)
            return ok(201, employee=snapshot, redirect=url_for(endpoint_for(home_area(snapshot))))
        except DomainError as e:
            return domain_error(e)
        except Exception:
            app.logger.exception("registration failed")
            return fail("Registration failed", 500)

    @app.route("/auth/logout", methods=["POST"], endpoint="logout")
    def logout():
        current_store().clear()
        return ok(redirect=url_for("login"))

    @app.route("/auth/me", methods=["GET"], endpoint="me")
    @login_required
    def me():
        return ok(employee=current_employee())

    # -------- Admin: employee records --------
    @app.route("/admin/employees", methods=["GET"], endpoint="admin_employees")
    @admin_area
    def admin_employees():
        active_only = request.args.get("active") in {"1", "true"}
        employees = container.employee_service.list_employees(active_only=active_only, q=request.args.get("q"))
        return ok(employees=employees, count=len(employees))

    @app.route("/admin/employees", methods=["POST"], endpoint="add_employee")
    @admin_area
    def add_employee():
        data = payload()
        try:
            employee = container.employee_service.create_employee(
                employee_id=text(data, "employee_id"),
                email=text(data, "email"),
                password=text(data, "password"),
                first_name=text(data, "first_name"),
                last_name=text(data, "last_name"),
                role=data.get("role") or "employee",
                phone=data.get("phone"),
                department=data.get("department"),
                designation=data.get("designation"),
                join_date=data.get("join_date"),
            )
            return ok(201, employee=employee, message="Employee added successfully")
        except DomainError as e:
            return domain_error(e)
        except Exception:
            app.logger.exception("add employee failed")
            return fail("Failed to add employee", 500)

    @app.route("/admin/employees/<int:employee_pk>", methods=["PUT", "POST"], endpoint="edit_employee")
    @admin_area
    def edit_employee(employee_pk: int):
        data = payload()
        try:
            employee = container.employee_service.update_employee(
                employee_pk,
                employee_id=text(data, "employee_id"),
                email=text(data, "email"),
                first_name=text(data, "first_name"),
                last_name=text(data, "last_name"),
                role=data.get("role"),
                actor_pk=current_employee().id,
                password=data.get("password"),
                phone=data.get("phone"),
                department=data.get("department"),
                designation=data.get("designation"),
                join_date=data.get("join_date"),
            )
            return ok(employee=employee, message="Employee updated successfully")
        except DomainError as e:
            return domain_error(e)
        except Exception:
            app.logger.exception("update employee failed")
            return fail("Failed to update employee", 500)

    @app.route("/admin/employees/<int:employee_pk>/deactivate", methods=["POST"], endpoint="deactivate_employee")
    @admin_area
    def deactivate_employee(employee_pk: int):
        try:
            container.employee_service.deactivate_employee(actor_pk=current_employee().id, employee_pk=employee_pk)
            return ok(message="Employee deactivated")
        except DomainError as e:
            return domain_error(e)
        except Exception:
            app.logger.exception("deactivate employee failed")
            return fail("Failed to deactivate employee", 500)

    @app.route("/admin/employees/<int:employee_pk>", methods=["DELETE"], endpoint="delete_employee")
    @admin_area
    def delete_employee(employee_pk: int):
        try:
            container.employee_service.delete_employee(actor_pk=current_employee().id, employee_pk=employee_pk)
            return ok(message="Employee deleted")
        except DomainError as e:
            return domain_error(e)
        except Exception:
            app.logger.exception("delete employee failed")
            return fail("Failed to delete employee", 500)

    # -------- Self-service profile --------
    @app.route("/dashboard/profile", methods=["GET"], endpoint="profile")
    @employee_area
    def profile():
        me = current_employee()
        try:
            employee = container.employee_service.get(me.id)
            salary = container.payroll_service.salary_for(me.id)
            return ok(employee=employee, salary=salary)
        except DomainError as e:
            return domain_error(e)
        except Exception:
            app.logger.exception("profile load failed")
            return fail("Failed to load profile", 500)

    @app.route("/dashboard/profile", methods=["PUT", "POST"], endpoint="update_profile")
    @employee_area
    def update_profile():
        data = payload()
        contact = {k: data.get(k) for k in CONTACT_FIELDS if k in data}
        try:
            employee = container.employee_service.update_profile(current_employee().id, **contact)
            snapshot = current_store().refresh(
                phone=employee.phone,
                address=employee.address,
                city=employee.city,
                state=employee.state,
                zip_code=employee.zip_code,
            )
            return ok(employee=snapshot, message="Profile updated successfully")
        except DomainError as e:
            return domain_error(e)
        except Exception:
            app.logger.exception("profile update failed")
            return fail("Failed to update profile", 500)
