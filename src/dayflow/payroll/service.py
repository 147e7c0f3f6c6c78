from __future__ import annotations

import calendar
import logging
from dataclasses import dataclass
from datetime import date
from decimal import ROUND_HALF_UP, Decimal
from typing import Any, Mapping, Optional

from mysql.connector.errors import IntegrityError

from ..common.validators import require_amount
from ..core.constants import RECENT_PAYROLL_LIMIT
from ..core.exceptions import NotFoundError, ValidationError
from ..database.mysql_base import is_duplicate_key
from ..employees.repository import EmployeeRepository
from .calculator.base import NetPayCalculator
from .calculator.standard_calculator import StandardNetPayCalculator
from .model import AMOUNT_FIELDS, PayrollRecord, PayrollRow, SalaryStructure
from .repository import PayrollRepository

logger = logging.getLogger(__name__)

_LABELS = {
    "basic_salary": "Basic salary",
    "housing_allowance": "Housing allowance",
    "transport_allowance": "Transport allowance",
    "medical_allowance": "Medical allowance",
    "other_allowances": "Other allowances",
    "tax_deduction": "Tax deduction",
    "insurance_deduction": "Insurance deduction",
    "other_deductions": "Other deductions",
}


@dataclass(frozen=True)
class SalaryView:
    salary: Optional[SalaryStructure]
    total_allowances: Decimal
    total_deductions: Decimal
    net_salary: Decimal


@dataclass(frozen=True)
class EmployeeSalaryLine:
    employee_pk: int
    employee_id: str
    full_name: str
    department: Optional[str]
    salary: SalaryView


@dataclass(frozen=True)
class PayrollOverview:
    lines: list[EmployeeSalaryLine]
    total_payroll: Decimal
    average_salary: Decimal
    recent_payroll: list[PayrollRow]


def month_name(month: int) -> str:
    return calendar.month_name[int(month)]


class PayrollService:
    """Salary structures (live) and payroll snapshots (historical, read-only)."""

    def __init__(
        self,
        payroll: PayrollRepository,
        employees: EmployeeRepository,
        *,
        calculator: Optional[NetPayCalculator] = None,
    ):
        self._payroll = payroll
        self._employees = employees
        self._calculator = calculator or StandardNetPayCalculator()

    def view(self, salary: Optional[SalaryStructure]) -> SalaryView:
        return SalaryView(
            salary=salary,
            total_allowances=self._calculator.total_allowances(salary),
            total_deductions=self._calculator.total_deductions(salary),
            net_salary=self._calculator.net(salary),
        )

    def salary_for(self, employee_id: int) -> SalaryView:
        return self.view(self._payroll.get_salary(int(employee_id)))

    def save_salary(
        self,
        employee_id: int,
        amounts: Mapping[str, Any],
        *,
        effective_date: Optional[date] = None,
    ) -> SalaryView:
        """Insert the structure if missing, otherwise update it in place (last write wins)."""
        employee = self._employees.get_by_id(int(employee_id))
        if not employee:
            raise NotFoundError("Employee not found")

        clean = {name: require_amount(amounts.get(name), _LABELS[name]) for name in AMOUNT_FIELDS}
        effective = effective_date or date.today()

        existing = self._payroll.get_salary(employee.id)
        if existing:
            self._payroll.update_salary(salary_id=existing.id, amounts=clean, effective_date=effective)
            logger.info("salary updated employee=%s", employee.employee_id)
        else:
            try:
                self._payroll.insert_salary(employee_id=employee.id, amounts=clean, effective_date=effective)
            except IntegrityError as e:
                # Another admin inserted first; apply ours over it.
                if not is_duplicate_key(e):
                    raise
                existing = self._payroll.get_salary(employee.id)
                if not existing:
                    raise ValidationError("Failed to save salary structure")
                self._payroll.update_salary(salary_id=existing.id, amounts=clean, effective_date=effective)
            logger.info("salary created employee=%s", employee.employee_id)

        return self.salary_for(employee.id)

    def history_for(self, employee_id: int) -> list[PayrollRecord]:
        return list(self._payroll.list_payroll_for_employee(int(employee_id)))

    def admin_overview(self) -> PayrollOverview:
        employees = list(self._employees.list_all(active_only=True))
        salaries = {s.employee_id: s for s in self._payroll.list_salaries([e.id for e in employees])}

        lines = [
            EmployeeSalaryLine(
                employee_pk=e.id,
                employee_id=e.employee_id,
                full_name=e.full_name,
                department=e.department,
                salary=self.view(salaries.get(e.id)),
            )
            for e in employees
        ]
        total = sum((line.salary.net_salary for line in lines), Decimal("0"))
        average = Decimal("0")
        if lines:
            average = (total / len(lines)).quantize(Decimal("1"), rounding=ROUND_HALF_UP)

        return PayrollOverview(
            lines=lines,
            total_payroll=total,
            average_salary=average,
            recent_payroll=list(self._payroll.list_recent_payroll(limit=RECENT_PAYROLL_LIMIT)),
        )
