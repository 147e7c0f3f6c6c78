from __future__ import annotations

from abc import ABC, abstractmethod
from decimal import Decimal
from typing import Optional

from ..model import SalaryStructure


class NetPayCalculator(ABC):
    """Calculator interface (Strategy Pattern for net pay)."""

    @abstractmethod
    def total_allowances(self, salary: Optional[SalaryStructure]) -> Decimal:
        raise NotImplementedError

    @abstractmethod
    def total_deductions(self, salary: Optional[SalaryStructure]) -> Decimal:
        raise NotImplementedError

    def net(self, salary: Optional[SalaryStructure]) -> Decimal:
        if salary is None:
            return Decimal("0")
        basic = salary.basic_salary or Decimal("0")
        return basic + self.total_allowances(salary) - self.total_deductions(salary)
