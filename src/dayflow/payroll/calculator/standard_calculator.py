from __future__ import annotations

from decimal import Decimal
from typing import Optional

from ..model import ALLOWANCE_FIELDS, DEDUCTION_FIELDS, SalaryStructure
from .base import NetPayCalculator


def _sum(salary: Optional[SalaryStructure], names: tuple[str, ...]) -> Decimal:
    if salary is None:
        return Decimal("0")
    return sum((getattr(salary, n) or Decimal("0") for n in names), Decimal("0"))


class StandardNetPayCalculator(NetPayCalculator):
    """Standard rule: basic + 4 allowances - 3 deductions; missing amounts count as 0."""

    def total_allowances(self, salary: Optional[SalaryStructure]) -> Decimal:
        return _sum(salary, ALLOWANCE_FIELDS)

    def total_deductions(self, salary: Optional[SalaryStructure]) -> Decimal:
        return _sum(salary, DEDUCTION_FIELDS)
