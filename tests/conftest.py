from datetime import datetime

import pytest

from dayflow.container import wire
from dayflow.core.enums import Role
from dayflow.main import create_app

from .fakes import CASUAL, SICK, FakeAttendanceRepo, FakeEmployeesRepo, FakeLeavesRepo, FakePayrollRepo, make_employee


@pytest.fixture
def fixed_now():
    return datetime(2026, 3, 4, 9, 0, 0)


@pytest.fixture
def admin():
    return make_employee(1, role=Role.ADMIN, first_name="Ada", last_name="Admin")


@pytest.fixture
def worker():
    return make_employee(3, first_name="John", last_name="Doe")


@pytest.fixture
def employees_repo(admin, worker):
    return FakeEmployeesRepo(admin, worker)


@pytest.fixture
def attendance_repo(employees_repo):
    return FakeAttendanceRepo(employees_repo)


@pytest.fixture
def leaves_repo(employees_repo):
    return FakeLeavesRepo(employees_repo, SICK, CASUAL)


@pytest.fixture
def payroll_repo(employees_repo):
    return FakePayrollRepo(employees_repo)


@pytest.fixture
def container(employees_repo, attendance_repo, leaves_repo, payroll_repo):
    return wire(
        employees_repo=employees_repo,
        attendance_repo=attendance_repo,
        leaves_repo=leaves_repo,
        payroll_repo=payroll_repo,
    )


@pytest.fixture
def app(container):
    return create_app(container, settings_module="dayflow.config.testing")


@pytest.fixture
def client(app):
    return app.test_client()
