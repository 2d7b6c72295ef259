from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from typing import Optional

from sqlalchemy.orm import sessionmaker

from payroll_engine.core.logging import get_logger
from payroll_engine.db.session import session_scope
from payroll_engine.db.store import PayrollStore

from .calculator import SalaryCalculator
from .exceptions import EmployeeNotFound

logger = get_logger(__name__)


@dataclass(frozen=True)
class ProcessedPayslip:
    payslip_id: int
    employee_id: int
    period: str
    gross: Decimal
    tax: Decimal
    net: Decimal
    processed_at: datetime

    def confirmation(self) -> str:
        return f"Salary processed for Employee ID {self.employee_id} | Net Salary: {self.net}"


class PeriodProcessor:
    """Computes one employee's pay and upserts the payslip for a period.

    Lookup, calculation and upsert share one transaction: if the employee is
    missing or its data is invalid nothing is written.
    """

    def __init__(self, session_factory: sessionmaker, calculator: Optional[SalaryCalculator] = None):
        self.session_factory = session_factory
        self.calculator = calculator or SalaryCalculator()

    def process(self, employee_id: int, period: str) -> ProcessedPayslip:
        with session_scope(self.session_factory) as session:
            store = PayrollStore(session)
            employee = store.get_employee(employee_id)
            if employee is None:
                raise EmployeeNotFound(employee_id, period)

            breakdown = self.calculator.compute(employee, period=period)
            payslip = store.upsert_payslip(
                employee_id,
                period,
                gross=breakdown.gross,
                tax=breakdown.tax,
                net=breakdown.net,
            )
            result = ProcessedPayslip(
                payslip_id=payslip.id,
                employee_id=employee_id,
                period=period,
                gross=breakdown.gross,
                tax=breakdown.tax,
                net=breakdown.net,
                processed_at=payslip.processed_at,
            )

        logger.info(
            "payslip_processed",
            employee_id=employee_id,
            period=period,
            gross=str(result.gross),
            tax=str(result.tax),
            net_salary=str(result.net),
        )
        return result
