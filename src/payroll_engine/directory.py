from __future__ import annotations

from datetime import date
from decimal import Decimal
from typing import Dict, List, Optional

from sqlalchemy import func, select
from sqlalchemy.orm import Session

from payroll_engine.core.logging import get_logger
from payroll_engine.db.store import PayrollStore
from payroll_engine.models import Department, Employee, SalaryAudit
from payroll_engine.models.employee import DEFAULT_BONUS_PERCENT, DEFAULT_HRA_PERCENT, DEFAULT_TAX_PERCENT
from payroll_engine.payroll.exceptions import (
    DepartmentNotFound,
    DuplicateDepartment,
    EmployeeHasPayslips,
    EmployeeNotFound,
    InvalidEmployeeData,
)

logger = get_logger(__name__)

SALARY_COMPONENTS = ("basic_salary", "hra_percent", "bonus_percent", "tax_percent")
MAX_RATE_PERCENT = Decimal("999.99")


def validate_salary_components(values: Dict[str, Decimal], employee_id: Optional[int] = None) -> None:
    for name, value in values.items():
        if value is not None and not value.is_finite():
            raise InvalidEmployeeData(employee_id, f"{name} is not a finite number: {value}")
    basic = values.get("basic_salary")
    if basic is not None and basic <= 0:
        raise InvalidEmployeeData(employee_id, f"basic_salary must be positive, got {basic}")
    for name in ("hra_percent", "bonus_percent", "tax_percent"):
        rate = values.get(name)
        if rate is None:
            continue
        if rate < 0:
            raise InvalidEmployeeData(employee_id, f"{name} must not be negative, got {rate}")
        if rate > MAX_RATE_PERCENT:
            raise InvalidEmployeeData(employee_id, f"{name} must not exceed {MAX_RATE_PERCENT}, got {rate}")
    tax = values.get("tax_percent")
    if tax is not None and tax > 100:
        raise InvalidEmployeeData(employee_id, f"tax_percent must not exceed 100, got {tax}")


class EmployeeDirectory:
    """Departments and employees as maintained by HR."""

    def __init__(self, session: Session):
        self.session = session

    def list_departments(self) -> List[Department]:
        return list(self.session.scalars(select(Department).order_by(Department.name.asc())))

    def create_department(self, name: str) -> Department:
        name = name.strip()
        existing = self.session.scalars(
            select(Department).where(func.lower(Department.name) == name.lower())
        ).one_or_none()
        if existing:
            raise DuplicateDepartment(name)

        department = Department(name=name)
        self.session.add(department)
        self.session.commit()
        self.session.refresh(department)
        logger.info("department_created", dept_id=department.id, name=name)
        return department

    def list_employees(self) -> List[Employee]:
        return PayrollStore(self.session).list_employees()

    def get_employee(self, employee_id: int) -> Employee:
        employee = PayrollStore(self.session).get_employee(employee_id)
        if employee is None:
            raise EmployeeNotFound(employee_id)
        return employee

    def create_employee(
        self,
        name: str,
        basic_salary: Decimal,
        dept_id: Optional[int] = None,
        hra_percent: Decimal = DEFAULT_HRA_PERCENT,
        bonus_percent: Decimal = DEFAULT_BONUS_PERCENT,
        tax_percent: Decimal = DEFAULT_TAX_PERCENT,
        join_date: Optional[date] = None,
    ) -> Employee:
        components = {
            "basic_salary": Decimal(str(basic_salary)),
            "hra_percent": Decimal(str(hra_percent)),
            "bonus_percent": Decimal(str(bonus_percent)),
            "tax_percent": Decimal(str(tax_percent)),
        }
        validate_salary_components(components)
        if dept_id is not None and self.session.get(Department, dept_id) is None:
            raise DepartmentNotFound(dept_id)

        employee = Employee(
            name=name.strip(),
            dept_id=dept_id,
            join_date=join_date or date.today(),
            **components,
        )
        self.session.add(employee)
        self.session.commit()
        self.session.refresh(employee)
        logger.info("employee_created", employee_id=employee.id, dept_id=dept_id)
        return employee

    def update_salary_components(self, employee_id: int, **changes: Optional[Decimal]) -> Employee:
        unknown = set(changes) - set(SALARY_COMPONENTS)
        if unknown:
            raise TypeError(f"Unknown salary components: {', '.join(sorted(unknown))}")

        employee = self.get_employee(employee_id)
        updates = {name: Decimal(str(value)) for name, value in changes.items() if value is not None}
        validate_salary_components(updates, employee_id=employee_id)

        old_basic = employee.basic_salary
        changed_fields = []
        for name, new_value in updates.items():
            old_value = getattr(employee, name)
            if old_value is not None and Decimal(old_value) == new_value:
                continue
            setattr(employee, name, new_value)
            self.session.add(
                SalaryAudit(employee_id=employee_id, field=name, old_value=old_value, new_value=new_value)
            )
            changed_fields.append(name)

        if changed_fields:
            self.session.commit()
            self.session.refresh(employee)
            logger.info(
                "salary_components_updated",
                employee_id=employee_id,
                old_basic=str(old_basic),
                new_basic=str(employee.basic_salary),
                fields=changed_fields,
            )
        return employee

    def list_salary_audits(self, employee_id: int) -> List[SalaryAudit]:
        stmt = select(SalaryAudit).where(SalaryAudit.employee_id == employee_id).order_by(SalaryAudit.id)
        return list(self.session.scalars(stmt))

    def delete_employee(self, employee_id: int) -> None:
        employee = self.get_employee(employee_id)
        if PayrollStore(self.session).count_payslips(employee_id):
            raise EmployeeHasPayslips(employee_id)
        self.session.delete(employee)
        self.session.commit()
        logger.info("employee_deleted", employee_id=employee_id)
