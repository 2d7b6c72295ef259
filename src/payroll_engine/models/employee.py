from datetime import date
from decimal import Decimal

from sqlalchemy import CheckConstraint, Column, Date, ForeignKey, Integer, Numeric, String
from sqlalchemy.orm import relationship

from payroll_engine.db.session import Base

DEFAULT_HRA_PERCENT = Decimal("30")
DEFAULT_BONUS_PERCENT = Decimal("10")
DEFAULT_TAX_PERCENT = Decimal("10")


class Employee(Base):
    __tablename__ = "employees"
    __table_args__ = (CheckConstraint("basic_salary > 0", name="ck_employees_basic_positive"),)

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(100), nullable=False)
    dept_id = Column(Integer, ForeignKey("departments.id"), nullable=True)

    basic_salary = Column(Numeric(10, 2), nullable=False)
    # Rates are percentages of basic (HRA, bonus) or of gross (tax).
    hra_percent = Column(Numeric(5, 2), nullable=False, default=DEFAULT_HRA_PERCENT)
    bonus_percent = Column(Numeric(5, 2), nullable=False, default=DEFAULT_BONUS_PERCENT)
    tax_percent = Column(Numeric(5, 2), nullable=False, default=DEFAULT_TAX_PERCENT)

    join_date = Column(Date, nullable=False, default=date.today)

    department = relationship("Department", back_populates="employees")
