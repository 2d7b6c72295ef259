from __future__ import annotations

from decimal import Decimal
from typing import List, Optional

from sqlalchemy.orm import sessionmaker

from payroll_engine.core.config import get_settings
from payroll_engine.db.session import get_session_factory
from payroll_engine.db.store import PayrollStore
from payroll_engine.models import Payslip

from .batch import BatchResult, BatchRunner
from .processor import PeriodProcessor, ProcessedPayslip
from .reports import DepartmentReport


class PayrollService:
    """Entry points for running payroll and reading its results."""

    def __init__(self, session_factory: Optional[sessionmaker] = None, halt_on_error: Optional[bool] = None):
        self.session_factory = session_factory or get_session_factory()
        if halt_on_error is None:
            halt_on_error = get_settings().batch_halt_on_error
        self.processor = PeriodProcessor(self.session_factory)
        self.batch_runner = BatchRunner(self.processor, self.session_factory, halt_on_error=halt_on_error)

    def process(self, employee_id: int, period: str) -> ProcessedPayslip:
        return self.processor.process(employee_id, period)

    def calculate_salary(self, employee_id: int, period: str) -> Decimal:
        return self.processor.process(employee_id, period).net

    def generate_monthly_payslip(self, period: str, halt_on_error: Optional[bool] = None) -> BatchResult:
        return self.batch_runner.generate_monthly(period, halt_on_error=halt_on_error)

    def department_report(self, period: str) -> DepartmentReport:
        return DepartmentReport(self.session_factory, period)

    def get_payslip(self, employee_id: int, period: str) -> Optional[Payslip]:
        session = self.session_factory()
        try:
            payslip = PayrollStore(session).get_payslip(employee_id, period)
            if payslip is not None:
                session.expunge(payslip)
            return payslip
        finally:
            session.close()

    def list_payslips(self, period: str) -> List[Payslip]:
        session = self.session_factory()
        try:
            payslips = PayrollStore(session).list_payslips(period)
            session.expunge_all()
            return payslips
        finally:
            session.close()


def calculate_salary(employee_id: int, period: str) -> Decimal:
    return PayrollService().calculate_salary(employee_id, period)


def generate_monthly_payslip(period: str, halt_on_error: Optional[bool] = None) -> BatchResult:
    return PayrollService().generate_monthly_payslip(period, halt_on_error=halt_on_error)


def department_report(period: str) -> DepartmentReport:
    return PayrollService().department_report(period)
