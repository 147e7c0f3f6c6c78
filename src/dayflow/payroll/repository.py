from __future__ import annotations

from datetime import date
from decimal import Decimal
from typing import Mapping, Optional, Protocol, Sequence

from .model import PayrollRecord, PayrollRow, SalaryStructure


class PayrollRepository(Protocol):
    # Salary structures
    def get_salary(self, employee_id: int) -> Optional[SalaryStructure]:
        raise NotImplementedError

    def list_salaries(self, employee_ids: Sequence[int]) -> Sequence[SalaryStructure]:
        raise NotImplementedError

    def insert_salary(self, *, employee_id: int, amounts: Mapping[str, Decimal], effective_date: date) -> int:
        raise NotImplementedError

    def update_salary(self, *, salary_id: int, amounts: Mapping[str, Decimal], effective_date: date) -> bool:
        raise NotImplementedError

    # Payroll snapshots (read-only here)
    def list_payroll_for_employee(self, employee_id: int) -> Sequence[PayrollRecord]:
        """Newest period first (year desc, month desc)."""

        raise NotImplementedError

    def list_recent_payroll(self, *, limit: int) -> Sequence[PayrollRow]:
        raise NotImplementedError
