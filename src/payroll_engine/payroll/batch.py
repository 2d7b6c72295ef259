from __future__ import annotations

from dataclasses import dataclass, field
from decimal import Decimal
from typing import List, Optional

import sentry_sdk
import structlog
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import sessionmaker

from payroll_engine.core.logging import get_logger
from payroll_engine.core.observability import get_meter, get_tracer
from payroll_engine.db.store import PayrollStore

from .exceptions import BatchFailed, PayrollError
from .processor import PeriodProcessor, ProcessedPayslip

logger = get_logger(__name__)
tracer = get_tracer(__name__)
meter = get_meter(__name__)

payslips_processed = meter.create_counter(
    "payroll.payslips_processed",
    unit="1",
    description="Payslips written by monthly payroll runs",
)
payslips_failed = meter.create_counter(
    "payroll.payslips_failed",
    unit="1",
    description="Employees whose payslip could not be processed",
)


@dataclass(frozen=True)
class EmployeeOutcome:
    employee_id: int
    payslip: Optional[ProcessedPayslip] = None
    error: Optional[Exception] = None

    @property
    def ok(self) -> bool:
        return self.error is None


@dataclass
class BatchResult:
    period: str
    outcomes: List[EmployeeOutcome] = field(default_factory=list)

    @property
    def succeeded(self) -> List[EmployeeOutcome]:
        return [outcome for outcome in self.outcomes if outcome.ok]

    @property
    def failed(self) -> List[EmployeeOutcome]:
        return [outcome for outcome in self.outcomes if not outcome.ok]

    @property
    def total_net(self) -> Decimal:
        return sum((outcome.payslip.net for outcome in self.succeeded), Decimal("0.00"))

    @property
    def ok(self) -> bool:
        return not self.failed

    def raise_for_failures(self) -> None:
        if self.failed:
            raise BatchFailed(self.period, [(outcome.employee_id, outcome.error) for outcome in self.failed])


class BatchRunner:
    """Runs the period processor over every employee in the directory.

    By default a failing employee is recorded and the run continues; the
    caller inspects the returned BatchResult. With halt_on_error the first
    failure propagates and later employees are not processed.
    """

    def __init__(self, processor: PeriodProcessor, session_factory: sessionmaker, halt_on_error: bool = False):
        self.processor = processor
        self.session_factory = session_factory
        self.halt_on_error = halt_on_error

    def _employee_ids(self) -> List[int]:
        session = self.session_factory()
        try:
            return PayrollStore(session).list_employee_ids()
        finally:
            session.close()

    def generate_monthly(self, period: str, halt_on_error: Optional[bool] = None) -> BatchResult:
        halt = self.halt_on_error if halt_on_error is None else halt_on_error
        result = BatchResult(period=period)

        with structlog.contextvars.bound_contextvars(period=period), tracer.start_as_current_span(
            "payroll.generate_monthly"
        ) as span:
            employee_ids = self._employee_ids()
            span.set_attribute("payroll.period", period)
            span.set_attribute("payroll.employee_count", len(employee_ids))
            logger.info("payroll_batch_started", employees=len(employee_ids), halt_on_error=halt)

            for employee_id in employee_ids:
                try:
                    payslip = self.processor.process(employee_id, period)
                except (PayrollError, SQLAlchemyError) as exc:
                    payslips_failed.add(1, {"period": period})
                    if halt:
                        logger.error("payroll_batch_halted", employee_id=employee_id, error=str(exc))
                        raise
                    sentry_sdk.capture_exception(exc)
                    logger.warning("payslip_failed", employee_id=employee_id, error=str(exc))
                    result.outcomes.append(EmployeeOutcome(employee_id=employee_id, error=exc))
                    continue
                payslips_processed.add(1, {"period": period})
                result.outcomes.append(EmployeeOutcome(employee_id=employee_id, payslip=payslip))

            span.set_attribute("payroll.failed_count", len(result.failed))
            logger.info(
                "payroll_batch_completed",
                processed=len(result.succeeded),
                failed=len(result.failed),
                total_net=str(result.total_net),
            )
        return result
