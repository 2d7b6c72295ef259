from __future__ import annotations

from decimal import Decimal
from typing import Iterator, List, Optional

from sqlalchemy import Numeric, distinct, func, select
from sqlalchemy.engine import Row
from sqlalchemy.orm import Session

from payroll_engine.models import Department, Employee, Payslip
from payroll_engine.models.payslip import utcnow
from payroll_engine.payroll.exceptions import UnsupportedDatabase


def _dialect_insert(dialect_name: str):
    if dialect_name == "postgresql":
        from sqlalchemy.dialects.postgresql import insert
    elif dialect_name == "sqlite":
        from sqlalchemy.dialects.sqlite import insert
    else:
        raise UnsupportedDatabase(dialect_name)
    return insert


class PayrollStore:
    """Storage operations the payroll engine needs, bound to one session.

    The store never commits; transaction boundaries belong to the caller.
    """

    def __init__(self, session: Session):
        self.session = session

    def get_employee(self, employee_id: int) -> Optional[Employee]:
        return self.session.get(Employee, employee_id)

    def list_employees(self) -> List[Employee]:
        return list(self.session.scalars(select(Employee).order_by(Employee.id)))

    def list_employee_ids(self) -> List[int]:
        return list(self.session.scalars(select(Employee.id).order_by(Employee.id)))

    def get_payslip(self, employee_id: int, period: str) -> Optional[Payslip]:
        stmt = select(Payslip).where(Payslip.employee_id == employee_id, Payslip.period == period)
        return self.session.scalars(stmt).one_or_none()

    def list_payslips(self, period: str) -> List[Payslip]:
        stmt = select(Payslip).where(Payslip.period == period).order_by(Payslip.employee_id)
        return list(self.session.scalars(stmt))

    def count_payslips(self, employee_id: int) -> int:
        stmt = select(func.count(Payslip.id)).where(Payslip.employee_id == employee_id)
        return self.session.scalar(stmt) or 0

    def upsert_payslip(
        self,
        employee_id: int,
        period: str,
        gross: Decimal,
        tax: Decimal,
        net: Decimal,
    ) -> Payslip:
        """Insert the payslip for (employee_id, period) or overwrite it in place.

        A single INSERT ... ON CONFLICT DO UPDATE statement against the unique
        (employee_id, period) constraint, so concurrent writers cannot both insert.
        """
        insert = _dialect_insert(self.session.get_bind().dialect.name)
        processed_at = utcnow()
        stmt = insert(Payslip).values(
            employee_id=employee_id,
            period=period,
            gross_salary=gross,
            tax_deducted=tax,
            net_salary=net,
            processed_at=processed_at,
        )
        stmt = stmt.on_conflict_do_update(
            index_elements=["employee_id", "period"],
            set_={
                "gross_salary": stmt.excluded.gross_salary,
                "tax_deducted": stmt.excluded.tax_deducted,
                "net_salary": stmt.excluded.net_salary,
                "processed_at": stmt.excluded.processed_at,
            },
        )
        self.session.execute(stmt)

        reload = (
            select(Payslip)
            .where(Payslip.employee_id == employee_id, Payslip.period == period)
            .execution_options(populate_existing=True)
        )
        return self.session.scalars(reload).one()

    def dept_report_query(self, period: str) -> Iterator[Row]:
        total_net = func.sum(Payslip.net_salary).label("total_net")
        stmt = (
            select(
                Department.name.label("dept_name"),
                func.count(distinct(Employee.id)).label("employee_count"),
                total_net,
                func.avg(Payslip.net_salary, type_=Numeric(14, 4)).label("avg_net"),
            )
            .join(Employee, Employee.dept_id == Department.id)
            .join(Payslip, Payslip.employee_id == Employee.id)
            .where(Payslip.period == period)
            .group_by(Department.name)
            .order_by(total_net.desc(), Department.name.asc())
        )
        return iter(self.session.execute(stmt))
