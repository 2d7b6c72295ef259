from __future__ import annotations

from datetime import date
from decimal import Decimal

import pytest
from sqlalchemy import func, select
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from payroll_engine.db.session import Base, build_engine, init_db
from payroll_engine.models import Department, Employee, Payslip
from payroll_engine.seed.seed_data import seed


@pytest.fixture
def engine():
    engine = build_engine("sqlite://", poolclass=StaticPool)
    init_db(engine)
    yield engine
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture
def session(session_factory):
    db = session_factory()
    try:
        yield db
    finally:
        db.close()


@pytest.fixture
def seeded(session):
    """The demo data: IT (2 employees), HR (1) and Sales (1)."""
    seed(session)
    ids = {name: emp_id for emp_id, name in session.execute(select(Employee.id, Employee.name))}
    return ids


def add_department(session, name: str) -> Department:
    department = Department(name=name)
    session.add(department)
    session.commit()
    return department


def add_employee(session, name: str, basic: str, dept: Department | None = None, **rates) -> Employee:
    employee = Employee(
        name=name,
        dept_id=dept.id if dept else None,
        basic_salary=Decimal(basic),
        join_date=date(2025, 1, 1),
        **{key: Decimal(value) for key, value in rates.items()},
    )
    session.add(employee)
    session.commit()
    return employee


def payslip_count(session_factory, **filters) -> int:
    db = session_factory()
    try:
        stmt = select(func.count(Payslip.id)).where(
            *[getattr(Payslip, column) == value for column, value in filters.items()]
        )
        return db.scalar(stmt)
    finally:
        db.close()
