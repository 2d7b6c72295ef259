from decimal import Decimal
from types import SimpleNamespace

import pytest

from payroll_engine.payroll.calculator import SalaryCalculator, calc_tax, compute, to_money
from payroll_engine.payroll.exceptions import InvalidEmployeeData


def build_employee(basic="50000", hra="30", bonus="10", tax="10", emp_id=1):
    return SimpleNamespace(
        id=emp_id,
        basic_salary=Decimal(basic) if basic is not None else None,
        hra_percent=Decimal(hra),
        bonus_percent=Decimal(bonus),
        tax_percent=Decimal(tax),
    )


def test_calc_tax_is_flat_percentage_of_gross():
    assert calc_tax(Decimal("70000"), Decimal("10")) == Decimal("7000")
    assert calc_tax(Decimal("0"), Decimal("10")) == 0
    assert calc_tax(Decimal("-1000"), Decimal("10")) == Decimal("-100")


def test_default_rates_example():
    breakdown = compute(build_employee())

    assert breakdown.hra == Decimal("15000")
    assert breakdown.bonus == Decimal("5000")
    assert breakdown.gross == Decimal("70000")
    assert breakdown.tax == Decimal("7000")
    assert breakdown.net == Decimal("63000")


def test_custom_hra_and_bonus_example():
    breakdown = compute(build_employee(basic="60000", hra="40", bonus="15"))

    assert breakdown.gross == Decimal("93000")
    assert breakdown.tax == Decimal("9300")
    assert breakdown.net == Decimal("83700")


def test_amounts_are_quantized_to_cents_without_losing_net():
    breakdown = compute(build_employee(basic="33333.33", hra="33.33", bonus="7.77", tax="12.5"))

    assert breakdown.gross == to_money(Decimal("33333.33") * (1 + Decimal("0.3333") + Decimal("0.0777")))
    assert breakdown.gross.as_tuple().exponent == -2
    assert breakdown.tax == to_money(breakdown.gross * Decimal("12.5") / 100)
    assert breakdown.net == breakdown.gross - breakdown.tax


def test_zero_rates_leave_basic_untaxed():
    breakdown = compute(build_employee(basic="1000", hra="0", bonus="0", tax="0"))

    assert breakdown.gross == Decimal("1000.00")
    assert breakdown.tax == Decimal("0.00")
    assert breakdown.net == Decimal("1000.00")


@pytest.mark.parametrize(
    "overrides, message",
    [
        ({"basic": "0"}, "basic_salary must be positive"),
        ({"basic": "-10"}, "basic_salary must be positive"),
        ({"basic": None}, "basic_salary is missing"),
        ({"hra": "-1"}, "hra_percent must not be negative"),
        ({"bonus": "-0.5"}, "bonus_percent must not be negative"),
        ({"tax": "101"}, "tax_percent must not exceed 100"),
    ],
)
def test_invalid_employee_data_is_rejected(overrides, message):
    employee = build_employee(emp_id=7, **overrides)

    with pytest.raises(InvalidEmployeeData) as excinfo:
        SalaryCalculator().compute(employee, period="2025-12")

    assert message in str(excinfo.value)
    assert excinfo.value.employee_id == 7
    assert excinfo.value.period == "2025-12"
    assert "2025-12" in str(excinfo.value)
