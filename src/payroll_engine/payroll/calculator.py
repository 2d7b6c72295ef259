from __future__ import annotations

from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from typing import Any, Optional

from .exceptions import InvalidEmployeeData

CENT = Decimal("0.01")
HUNDRED = Decimal("100")
MAX_TAX_PERCENT = HUNDRED


def to_money(value: Any) -> Decimal:
    """Quantize an amount to cents, rounding half up."""
    return Decimal(str(value)).quantize(CENT, rounding=ROUND_HALF_UP)


def calc_tax(gross: Decimal, tax_percent: Decimal) -> Decimal:
    return Decimal(gross) * Decimal(tax_percent) / HUNDRED


@dataclass(frozen=True)
class SalaryBreakdown:
    basic: Decimal
    hra: Decimal
    bonus: Decimal
    gross: Decimal
    tax: Decimal
    net: Decimal


class SalaryCalculator:
    """Derives HRA, bonus, gross, tax and net pay from an employee's stored rates.

    Gross is quantized to cents before tax is applied, and net is the exact
    difference of the two stored amounts.
    """

    @staticmethod
    def _decimal(employee: Any, attribute: str, period: Optional[str]) -> Decimal:
        employee_id = getattr(employee, "id", None)
        raw = getattr(employee, attribute, None)
        if raw is None:
            raise InvalidEmployeeData(employee_id, f"{attribute} is missing", period=period)
        try:
            value = Decimal(str(raw))
        except InvalidOperation as exc:
            raise InvalidEmployeeData(employee_id, f"{attribute} is not a number: {raw!r}", period=period) from exc
        if not value.is_finite():
            raise InvalidEmployeeData(employee_id, f"{attribute} is not a finite number", period=period)
        return value

    def _validated_rates(self, employee: Any, period: Optional[str]) -> tuple[Decimal, Decimal, Decimal, Decimal]:
        employee_id = getattr(employee, "id", None)
        basic = self._decimal(employee, "basic_salary", period)
        if basic <= 0:
            raise InvalidEmployeeData(employee_id, f"basic_salary must be positive, got {basic}", period=period)

        rates = []
        for attribute in ("hra_percent", "bonus_percent", "tax_percent"):
            rate = self._decimal(employee, attribute, period)
            if rate < 0:
                raise InvalidEmployeeData(employee_id, f"{attribute} must not be negative, got {rate}", period=period)
            rates.append(rate)
        hra_percent, bonus_percent, tax_percent = rates
        if tax_percent > MAX_TAX_PERCENT:
            raise InvalidEmployeeData(employee_id, f"tax_percent must not exceed 100, got {tax_percent}", period=period)
        return basic, hra_percent, bonus_percent, tax_percent

    def compute(self, employee: Any, period: Optional[str] = None) -> SalaryBreakdown:
        basic, hra_percent, bonus_percent, tax_percent = self._validated_rates(employee, period)

        hra = basic * hra_percent / HUNDRED
        bonus = basic * bonus_percent / HUNDRED
        gross = to_money(basic + hra + bonus)
        tax = to_money(calc_tax(gross, tax_percent))
        net = gross - tax

        return SalaryBreakdown(
            basic=basic,
            hra=to_money(hra),
            bonus=to_money(bonus),
            gross=gross,
            tax=tax,
            net=net,
        )


def compute(employee: Any, period: Optional[str] = None) -> SalaryBreakdown:
    return SalaryCalculator().compute(employee, period=period)
