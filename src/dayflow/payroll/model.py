from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from decimal import Decimal
from typing import Optional

from ..core.enums import PaymentStatus

ALLOWANCE_FIELDS = ("housing_allowance", "transport_allowance", "medical_allowance", "other_allowances")
DEDUCTION_FIELDS = ("tax_deduction", "insurance_deduction", "other_deductions")
AMOUNT_FIELDS = ("basic_salary",) + ALLOWANCE_FIELDS + DEDUCTION_FIELDS


@dataclass(frozen=True)
class SalaryStructure:
    id: int
    employee_id: int
    basic_salary: Decimal
    housing_allowance: Decimal
    transport_allowance: Decimal
    medical_allowance: Decimal
    other_allowances: Decimal
    tax_deduction: Decimal
    insurance_deduction: Decimal
    other_deductions: Decimal
    effective_date: date
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


@dataclass(frozen=True)
class PayrollRecord:
    """Monthly payroll snapshot; totals are frozen at creation time."""

    id: int
    employee_id: int
    month: int
    year: int
    basic_salary: Decimal
    allowances: Decimal
    deductions: Decimal
    bonus: Decimal
    net_salary: Decimal
    payment_status: PaymentStatus
    payment_date: Optional[date] = None
    notes: Optional[str] = None


@dataclass(frozen=True)
class PayrollRow:
    """Read-model: payroll snapshot joined with employee names."""

    record: PayrollRecord
    employee_code: str
    first_name: str
    last_name: str

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}".strip()
