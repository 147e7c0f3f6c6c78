from datetime import date, datetime, timedelta

import pytest

from dayflow.attendance.model import DayState, hours_between
from dayflow.attendance.service import AttendanceService, status_counts
from dayflow.core.enums import AttendanceStatus
from dayflow.core.exceptions import NotFoundError, ValidationError

from ..fakes import FakeAttendanceRepo, FakeEmployeesRepo, make_employee


@pytest.fixture
def employees():
    return FakeEmployeesRepo(
        make_employee(1, first_name="Ada", last_name="Lovelace"),
        make_employee(2, first_name="Bob", last_name="Builder"),
        make_employee(3, is_active=False),
    )


@pytest.fixture
def repo(employees):
    return FakeAttendanceRepo(employees)


@pytest.fixture
def svc(repo, employees):
    return AttendanceService(repo, employees)


def test_day_state_machine(svc, fixed_now):
    today = fixed_now.date()
    assert svc.today_state(1, today).state == DayState.NO_RECORD
    assert svc.today_state(1, today).can_check_in

    svc.check_in(1, now=fixed_now)
    state = svc.today_state(1, today)
    assert state.state == DayState.CHECKED_IN
    assert state.can_check_out and not state.can_check_in

    svc.check_out(1, now=fixed_now + timedelta(hours=8, minutes=30))
    state = svc.today_state(1, today)
    assert state.state == DayState.CHECKED_OUT
    assert not state.can_check_in and not state.can_check_out
    assert state.record.hours_worked == 8.5


def test_check_in_creates_present_row(svc, fixed_now):
    record = svc.check_in(1, now=fixed_now)
    assert record.status == AttendanceStatus.PRESENT
    assert record.check_in == fixed_now
    assert record.check_out is None
    assert record.date == fixed_now.date()


def test_second_check_in_same_day_rejected(svc, fixed_now):
    svc.check_in(1, now=fixed_now)
    with pytest.raises(ValidationError, match="Already checked in today"):
        svc.check_in(1, now=fixed_now + timedelta(hours=1))


def test_check_in_next_day_allowed(svc, fixed_now):
    svc.check_in(1, now=fixed_now)
    svc.check_in(1, now=fixed_now + timedelta(days=1))


def test_inactive_or_unknown_employee_cannot_check_in(svc, fixed_now):
    with pytest.raises(NotFoundError):
        svc.check_in(3, now=fixed_now)
    with pytest.raises(NotFoundError):
        svc.check_in(42, now=fixed_now)


def test_check_out_without_check_in(svc, fixed_now):
    with pytest.raises(ValidationError, match="not checked in"):
        svc.check_out(1, now=fixed_now)


def test_double_check_out_rejected(svc, fixed_now):
    svc.check_in(1, now=fixed_now)
    svc.check_out(1, now=fixed_now + timedelta(hours=2))
    with pytest.raises(ValidationError, match="Already checked out today"):
        svc.check_out(1, now=fixed_now + timedelta(hours=3))


def test_check_out_before_check_in_rejected(svc, fixed_now):
    svc.check_in(1, now=fixed_now)
    with pytest.raises(ValidationError):
        svc.check_out(1, now=fixed_now - timedelta(minutes=5))


def test_hours_between():
    start = datetime(2026, 3, 4, 9, 0)
    assert hours_between(start, start + timedelta(hours=7, minutes=20)) == 7.3
    assert hours_between(start, None) is None
    assert hours_between(None, start) is None


def test_week_for_employee_has_seven_days(svc, repo):
    repo.add(employee_id=1, work_date=date(2026, 3, 2), check_in=datetime(2026, 3, 2, 9), check_out=datetime(2026, 3, 2, 17))
    repo.add(employee_id=1, work_date=date(2026, 3, 9), check_in=datetime(2026, 3, 9, 9))

    week = svc.week_for_employee(1, date(2026, 3, 4))

    assert week.start == date(2026, 3, 2)
    assert week.end == date(2026, 3, 8)
    assert [d.date.weekday() for d in week.days] == list(range(7))
    assert week.days[0].record.hours_worked == 8.0
    assert all(d.record is None for d in week.days[1:])


def test_admin_week_counts_cover_all_rows_before_search(svc, repo):
    repo.add(employee_id=1, work_date=date(2026, 3, 2))
    repo.add(employee_id=2, work_date=date(2026, 3, 2), status=AttendanceStatus.ABSENT)
    repo.add(employee_id=2, work_date=date(2026, 3, 3), status=AttendanceStatus.HALF_DAY)
    repo.add(employee_id=2, work_date=date(2026, 2, 27))

    week = svc.admin_week(date(2026, 3, 5), q="ada")

    assert [r.employee_id for r in week.rows] == [1]
    assert week.counts == {"present": 1, "absent": 1, "half-day": 1, "leave": 0}


def test_admin_week_employee_filter(svc, repo):
    repo.add(employee_id=1, work_date=date(2026, 3, 2))
    repo.add(employee_id=2, work_date=date(2026, 3, 3))

    week = svc.admin_week(date(2026, 3, 2), employee_id=2)

    assert [r.employee_code for r in week.rows] == ["EMP002"]
    assert week.rows[0].full_name == "Bob Builder"


def test_status_counts_zero_fill():
    assert status_counts([]) == {"present": 0, "absent": 0, "half-day": 0, "leave": 0}


def test_check_in_defaults_to_local_clock(svc, fixed_now, monkeypatch):
    monkeypatch.setattr("dayflow.attendance.service.now_local", lambda: fixed_now)
    record = svc.check_in(1)
    assert record.check_in == fixed_now
    assert record.date == fixed_now.date()
