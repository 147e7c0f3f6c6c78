"""In-memory repositories used in place of the MySQL ones."""

from __future__ import annotations

from dataclasses import replace
from datetime import date, datetime
from decimal import Decimal
from typing import Any, Mapping, Optional

from werkzeug.security import generate_password_hash

from dayflow.attendance.model import AttendanceRecord, AttendanceRow
from dayflow.core.constants import SESSION_KEY
from dayflow.core.enums import AttendanceStatus, LeaveStatus, PaymentStatus, Role
from dayflow.employees.model import Employee, NewEmployee
from dayflow.employees.session import SessionEmployee
from dayflow.leaves.model import LeaveBalance, LeaveRequest, LeaveRequestRow, LeaveType
from dayflow.payroll.model import AMOUNT_FIELDS, PayrollRecord, PayrollRow, SalaryStructure


def make_employee(
    pk: int,
    *,
    role: Role = Role.EMPLOYEE,
    password: str = "secret123",
    is_active: bool = True,
    first_name: str = "Test",
    last_name: Optional[str] = None,
) -> Employee:
    return Employee(
        id=pk,
        employee_id=f"EMP{pk:03d}",
        email=f"user{pk}@dayflow.com",
        password_hash=generate_password_hash(password),
        role=role,
        first_name=first_name,
        last_name=last_name or f"User{pk}",
        department="Engineering",
        is_active=is_active,
    )


class FakeEmployeesRepo:
    def __init__(self, *employees: Employee):
        self.rows: dict[int, Employee] = {e.id: e for e in employees}
        self._next_id = max(self.rows, default=0) + 1

    def add(self, employee: Employee) -> Employee:
        self.rows[employee.id] = employee
        self._next_id = max(self._next_id, employee.id + 1)
        return employee

    def get_by_id(self, employee_pk: int) -> Optional[Employee]:
        return self.rows.get(int(employee_pk))

    def get_by_email(self, email: str) -> Optional[Employee]:
        return next((e for e in self.rows.values() if e.email == email), None)

    def find_by_email_or_code(self, *, email: str, employee_id: str):
        return [e for e in self.rows.values() if e.email == email or e.employee_id == employee_id]

    def create(self, data: NewEmployee) -> int:
        pk = self._next_id
        self._next_id += 1
        self.rows[pk] = Employee(
            id=pk,
            employee_id=data.employee_id,
            email=data.email,
            password_hash=data.password_hash,
            role=data.role,
            first_name=data.first_name,
            last_name=data.last_name,
            phone=data.phone,
            department=data.department,
            designation=data.designation,
            join_date=data.join_date,
        )
        return pk

    def update_fields(self, employee_pk: int, fields: Mapping[str, Any]) -> bool:
        current = self.rows.get(int(employee_pk))
        if not current:
            return False
        self.rows[current.id] = replace(current, **fields)
        return True

    def set_active(self, employee_pk: int, *, is_active: bool) -> bool:
        return self.update_fields(employee_pk, {"is_active": is_active})

    def delete_by_id(self, employee_pk: int) -> bool:
        return self.rows.pop(int(employee_pk), None) is not None

    def list_all(self, *, active_only: bool = False):
        items = [e for e in self.rows.values() if e.is_active or not active_only]
        return sorted(items, key=lambda e: e.id, reverse=True)


class FakeAttendanceRepo:
    def __init__(self, employees: FakeEmployeesRepo):
        self._employees = employees
        self.rows: dict[tuple[int, date], AttendanceRecord] = {}
        self._next_id = 1

    def add(self, *, employee_id: int, work_date: date, check_in=None, check_out=None, status=AttendanceStatus.PRESENT):
        rec = AttendanceRecord(
            id=self._next_id,
            employee_id=employee_id,
            date=work_date,
            check_in=check_in,
            check_out=check_out,
            status=status,
        )
        self._next_id += 1
        self.rows[(employee_id, work_date)] = rec
        return rec

    def get_for_employee_and_date(self, employee_id: int, work_date: date):
        return self.rows.get((int(employee_id), work_date))

    def list_for_employee(self, employee_id: int, *, start_date: date, end_date: date):
        items = [r for r in self.rows.values() if r.employee_id == employee_id and start_date <= r.date <= end_date]
        return sorted(items, key=lambda r: r.date)

    def create_checkin(self, *, employee_id: int, work_date: date, check_in: datetime, status: AttendanceStatus) -> int:
        return self.add(employee_id=employee_id, work_date=work_date, check_in=check_in, status=status).id

    def update_checkout(self, *, attendance_id: int, check_out: datetime) -> bool:
        for key, rec in self.rows.items():
            if rec.id == attendance_id and rec.check_out is None:
                self.rows[key] = replace(rec, check_out=check_out)
                return True
        return False

    def list_rows(self, *, start_date: date, end_date: date, employee_id: Optional[int] = None):
        out = []
        for rec in self.rows.values():
            if not (start_date <= rec.date <= end_date):
                continue
            if employee_id is not None and rec.employee_id != employee_id:
                continue
            emp = self._employees.get_by_id(rec.employee_id)
            out.append(
                AttendanceRow(
                    id=rec.id,
                    employee_id=rec.employee_id,
                    employee_code=emp.employee_id,
                    first_name=emp.first_name,
                    last_name=emp.last_name,
                    date=rec.date,
                    check_in=rec.check_in,
                    check_out=rec.check_out,
                    status=rec.status,
                    notes=rec.notes,
                )
            )
        return sorted(out, key=lambda r: r.date, reverse=True)


class FakeLeavesRepo:
    def __init__(self, employees: FakeEmployeesRepo, *types: LeaveType):
        self._employees = employees
        self.types: dict[int, LeaveType] = {t.id: t for t in types}
        self.requests: dict[int, LeaveRequest] = {}
        self.balances: dict[tuple[int, int, int], LeaveBalance] = {}
        self._next_id = 1

    def list_types(self):
        return sorted(self.types.values(), key=lambda t: t.name)

    def get_type(self, leave_type_id: int):
        return self.types.get(int(leave_type_id))

    def create_request(self, *, employee_id, leave_type_id, start_date, end_date, total_days, reason) -> int:
        rid = self._next_id
        self._next_id += 1
        self.requests[rid] = LeaveRequest(
            id=rid,
            employee_id=employee_id,
            leave_type_id=leave_type_id,
            start_date=start_date,
            end_date=end_date,
            total_days=total_days,
            reason=reason,
            status=LeaveStatus.PENDING,
            created_at=datetime(2026, 3, 1, 9, rid % 60),
        )
        return rid

    def get_request(self, request_id: int):
        return self.requests.get(int(request_id))

    def list_requests(self, *, employee_id=None, status=None, limit=None):
        items = [
            r
            for r in self.requests.values()
            if (employee_id is None or r.employee_id == employee_id) and (status is None or r.status == status)
        ]
        items.sort(key=lambda r: r.id, reverse=True)
        if limit is not None:
            items = items[:limit]
        rows = []
        for r in items:
            emp = self._employees.get_by_id(r.employee_id)
            rows.append(
                LeaveRequestRow(
                    request=r,
                    leave_type_name=self.types[r.leave_type_id].name,
                    employee_code=emp.employee_id,
                    first_name=emp.first_name,
                    last_name=emp.last_name,
                )
            )
        return rows

    def decide_request(self, *, request_id, status, reviewed_by, review_comment, reviewed_at) -> bool:
        req = self.requests.get(int(request_id))
        if not req or req.status != LeaveStatus.PENDING:
            return False
        self.requests[req.id] = replace(
            req,
            status=status,
            reviewed_by=reviewed_by,
            review_comment=review_comment,
            reviewed_at=reviewed_at,
        )
        return True

    def approve_request(
        self,
        *,
        request_id,
        reviewed_by,
        review_comment,
        reviewed_at,
        employee_id,
        leave_type_id,
        year,
        days,
        allocation,
    ) -> bool:
        req = self.requests.get(int(request_id))
        if not req or req.status != LeaveStatus.PENDING:
            return False
        requests, balances = dict(self.requests), dict(self.balances)
        try:
            self.decide_request(
                request_id=request_id,
                status=LeaveStatus.APPROVED,
                reviewed_by=reviewed_by,
                review_comment=review_comment,
                reviewed_at=reviewed_at,
            )
            self.create_balance(employee_id=employee_id, leave_type_id=leave_type_id, year=year, total_days=allocation)
            self.apply_usage(employee_id=employee_id, leave_type_id=leave_type_id, year=year, days=days)
        except Exception:
            # Same outcome as a rolled back transaction.
            self.requests, self.balances = requests, balances
            raise
        return True

    def list_balances(self, *, employee_id: int, year: int):
        items = [b for (e, _, y), b in self.balances.items() if e == employee_id and y == year]
        return [replace(b, leave_type=self.types[b.leave_type_id]) for b in sorted(items, key=lambda b: b.leave_type_id)]

    def create_balance(self, *, employee_id: int, leave_type_id: int, year: int, total_days: int) -> int:
        key = (employee_id, leave_type_id, year)
        if key in self.balances:
            return 0
        bid = len(self.balances) + 1
        self.balances[key] = LeaveBalance(
            id=bid,
            employee_id=employee_id,
            leave_type_id=leave_type_id,
            year=year,
            total_days=total_days,
            used_days=0,
            remaining_days=total_days,
        )
        return bid

    def apply_usage(self, *, employee_id: int, leave_type_id: int, year: int, days: int) -> bool:
        key = (employee_id, leave_type_id, year)
        b = self.balances.get(key)
        if not b:
            return False
        used = b.used_days + days
        self.balances[key] = replace(b, used_days=used, remaining_days=b.total_days - used)
        return True


class FakePayrollRepo:
    def __init__(self, employees: FakeEmployeesRepo):
        self._employees = employees
        self.salaries: dict[int, SalaryStructure] = {}
        self.records: list[PayrollRecord] = []
        self.inserts = 0
        self.updates = 0

    def get_salary(self, employee_id: int):
        return self.salaries.get(int(employee_id))

    def list_salaries(self, employee_ids):
        return [self.salaries[i] for i in employee_ids if i in self.salaries]

    def insert_salary(self, *, employee_id: int, amounts: Mapping[str, Decimal], effective_date: date) -> int:
        self.inserts += 1
        sid = len(self.salaries) + 1
        self.salaries[employee_id] = SalaryStructure(
            id=sid,
            employee_id=employee_id,
            effective_date=effective_date,
            **{n: amounts[n] for n in AMOUNT_FIELDS},
        )
        return sid

    def update_salary(self, *, salary_id: int, amounts: Mapping[str, Decimal], effective_date: date) -> bool:
        self.updates += 1
        for emp_id, s in self.salaries.items():
            if s.id == salary_id:
                self.salaries[emp_id] = replace(s, effective_date=effective_date, **{n: amounts[n] for n in AMOUNT_FIELDS})
                return True
        return False

    def add_record(self, *, employee_id: int, month: int, year: int, net: str, status=PaymentStatus.PAID) -> PayrollRecord:
        rec = PayrollRecord(
            id=len(self.records) + 1,
            employee_id=employee_id,
            month=month,
            year=year,
            basic_salary=Decimal("50000.00"),
            allowances=Decimal("8000.00"),
            deductions=Decimal("6000.00"),
            bonus=Decimal("0.00"),
            net_salary=Decimal(net),
            payment_status=status,
        )
        self.records.append(rec)
        return rec

    def list_payroll_for_employee(self, employee_id: int):
        items = [r for r in self.records if r.employee_id == employee_id]
        return sorted(items, key=lambda r: (r.year, r.month), reverse=True)

    def list_recent_payroll(self, *, limit: int):
        items = sorted(self.records, key=lambda r: (r.year, r.month, r.id), reverse=True)[:limit]
        out = []
        for r in items:
            emp = self._employees.get_by_id(r.employee_id)
            out.append(PayrollRow(record=r, employee_code=emp.employee_id, first_name=emp.first_name, last_name=emp.last_name))
        return out


SICK = LeaveType(id=1, name="Sick Leave", description=None, max_days_per_year=12, is_paid=True)
CASUAL = LeaveType(id=2, name="Casual Leave", description=None, max_days_per_year=10, is_paid=True)


def sign_in(client, employee: Employee) -> None:
    """Put a session snapshot in place without going through /auth/login."""
    with client.session_transaction() as sess:
        sess[SESSION_KEY] = SessionEmployee.from_employee(employee).to_dict()
