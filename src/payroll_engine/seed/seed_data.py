from datetime import date
from decimal import Decimal

from sqlalchemy.orm import Session

from payroll_engine.models import Department, Employee


def seed(session: Session) -> None:
    it = Department(name="IT")
    hr = Department(name="HR")
    sales = Department(name="Sales")
    session.add_all([it, hr, sales])
    session.flush()

    joined = date(2025, 1, 1)
    employees = [
        Employee(name="Amit Sharma", dept_id=it.id, basic_salary=Decimal("50000"), join_date=joined),
        Employee(
            name="Priya Singh",
            dept_id=it.id,
            basic_salary=Decimal("60000"),
            hra_percent=Decimal("40"),
            bonus_percent=Decimal("15"),
            join_date=joined,
        ),
        Employee(name="Rahul Kumar", dept_id=hr.id, basic_salary=Decimal("45000"), join_date=joined),
        Employee(name="Neha Gupta", dept_id=sales.id, basic_salary=Decimal("55000"), join_date=joined),
    ]
    session.add_all(employees)
    session.commit()
