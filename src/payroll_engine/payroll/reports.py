from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from typing import Iterator, List

from sqlalchemy.orm import sessionmaker

from payroll_engine.db.store import PayrollStore

from .calculator import to_money


@dataclass(frozen=True)
class DepartmentReportRow:
    dept_name: str
    employee_count: int
    total_net: Decimal
    avg_net: Decimal


class DepartmentReport:
    """Net pay per department for one period, largest total first.

    Each iteration opens its own session and streams rows from a fresh query,
    so the report can be re-run and closing the iterator early releases the
    session. Departments without payslips in the period are not listed.
    """

    def __init__(self, session_factory: sessionmaker, period: str):
        self.session_factory = session_factory
        self.period = period

    def __iter__(self) -> Iterator[DepartmentReportRow]:
        session = self.session_factory()
        try:
            for row in PayrollStore(session).dept_report_query(self.period):
                yield DepartmentReportRow(
                    dept_name=row.dept_name,
                    employee_count=int(row.employee_count),
                    total_net=to_money(row.total_net),
                    avg_net=to_money(row.avg_net),
                )
        finally:
            session.close()

    def rows(self) -> List[DepartmentReportRow]:
        return list(self)
