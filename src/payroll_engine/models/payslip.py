from datetime import datetime, timezone

from sqlalchemy import Column, DateTime, ForeignKey, Integer, Numeric, String, UniqueConstraint
from sqlalchemy.orm import relationship

from payroll_engine.db.session import Base


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Payslip(Base):
    __tablename__ = "payslips"
    __table_args__ = (UniqueConstraint("employee_id", "period", name="uq_payslips_employee_period"),)

    id = Column(Integer, primary_key=True, index=True)
    employee_id = Column(Integer, ForeignKey("employees.id"), nullable=False)
    period = Column(String(7), nullable=False)  # YYYY-MM
    gross_salary = Column(Numeric(12, 2), nullable=False)
    tax_deducted = Column(Numeric(12, 2), nullable=False)
    net_salary = Column(Numeric(12, 2), nullable=False)
    processed_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)

    employee = relationship("Employee")
