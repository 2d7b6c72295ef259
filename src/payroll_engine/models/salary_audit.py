from sqlalchemy import Column, DateTime, Integer, Numeric, String

from payroll_engine.db.session import Base
from payroll_engine.models.payslip import utcnow


class SalaryAudit(Base):
    """One row per changed salary component of an employee."""

    __tablename__ = "salary_audits"

    id = Column(Integer, primary_key=True, index=True)
    # no foreign key: audit rows outlive the employee they describe
    employee_id = Column(Integer, nullable=False, index=True)
    field = Column(String(30), nullable=False)
    old_value = Column(Numeric(12, 2), nullable=True)
    new_value = Column(Numeric(12, 2), nullable=False)
    changed_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)
