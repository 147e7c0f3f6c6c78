from datetime import date, datetime

import pytest

from dayflow.attendance.model import DayState
from dayflow.container import wire
from dayflow.core.enums import AttendanceStatus

from .fakes import FakeAttendanceRepo, FakeEmployeesRepo, FakeLeavesRepo, FakePayrollRepo, make_employee

TODAY = date(2026, 3, 4)


def test_employee_dashboard_before_check_in(container, worker):
    data = container.dashboard_service.for_employee(worker.id, today=TODAY)
    assert data.today.state == DayState.NO_RECORD
    assert data.hours_worked is None
    assert len(data.balances) == 2
    assert data.recent_leaves == []


def test_employee_dashboard_after_check_out(container, attendance_repo, worker):
    attendance_repo.add(
        employee_id=worker.id,
        work_date=TODAY,
        check_in=datetime(2026, 3, 4, 9, 0),
        check_out=datetime(2026, 3, 4, 17, 45),
    )
    data = container.dashboard_service.for_employee(worker.id, today=TODAY)
    assert data.today.state == DayState.CHECKED_OUT
    assert data.hours_worked == 8.8


def test_admin_dashboard_counts(container, employees_repo, attendance_repo, worker):
    employees_repo.add(make_employee(4))
    employees_repo.add(make_employee(5, is_active=False))
    attendance_repo.add(employee_id=worker.id, work_date=TODAY, check_in=datetime(2026, 3, 4, 9, 0))
    attendance_repo.add(employee_id=4, work_date=TODAY, status=AttendanceStatus.HALF_DAY)
    container.leave_service.submit(employee_id=worker.id, leave_type_id=1, start_date="2026-03-09", end_date="2026-03-09")

    data = container.dashboard_service.for_admin(today=TODAY)

    assert data.total_employees == 3
    assert data.present_today == 1
    assert data.absent_today == 2
    assert data.attendance_rate == 33
    assert len(data.pending_leaves) == 1
    assert len(data.today_attendance) == 2


@pytest.mark.parametrize("present,total,rate", [(0, 1, 0), (1, 2, 50), (2, 3, 67)])
def test_attendance_rate_rounding(present, total, rate):
    employees = FakeEmployeesRepo(*(make_employee(i) for i in range(1, total + 1)))
    attendance = FakeAttendanceRepo(employees)
    for i in range(1, present + 1):
        attendance.add(employee_id=i, work_date=TODAY)
    container = wire(
        employees_repo=employees,
        attendance_repo=attendance,
        leaves_repo=FakeLeavesRepo(employees),
        payroll_repo=FakePayrollRepo(employees),
    )

    data = container.dashboard_service.for_admin(today=TODAY)

    assert data.attendance_rate == rate
    assert data.absent_today == total - present


def test_admin_dashboard_with_no_employees():
    employees = FakeEmployeesRepo()
    container = wire(
        employees_repo=employees,
        attendance_repo=FakeAttendanceRepo(employees),
        leaves_repo=FakeLeavesRepo(employees),
        payroll_repo=FakePayrollRepo(employees),
    )
    data = container.dashboard_service.for_admin(today=TODAY)
    assert data.total_employees == 0
    assert data.attendance_rate == 0
    assert data.absent_today == 0
