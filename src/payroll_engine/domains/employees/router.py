from datetime import date
from decimal import Decimal

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel, Field
from sqlalchemy.orm import Session

from payroll_engine.db.session import get_session
from payroll_engine.directory import EmployeeDirectory
from payroll_engine.models.employee import (
    DEFAULT_BONUS_PERCENT,
    DEFAULT_HRA_PERCENT,
    DEFAULT_TAX_PERCENT,
    Employee,
)
from payroll_engine.payroll.exceptions import (
    DepartmentNotFound,
    EmployeeHasPayslips,
    EmployeeNotFound,
    InvalidEmployeeData,
)

router = APIRouter(prefix="/employees", tags=["employees"])


class EmployeeBase(BaseModel):
    name: str = Field(..., min_length=1, max_length=100)
    dept_id: int | None = None
    basic_salary: Decimal = Field(..., gt=0, max_digits=10, decimal_places=2)
    hra_percent: Decimal = Field(default=DEFAULT_HRA_PERCENT, ge=0, max_digits=5, decimal_places=2)
    bonus_percent: Decimal = Field(default=DEFAULT_BONUS_PERCENT, ge=0, max_digits=5, decimal_places=2)
    tax_percent: Decimal = Field(default=DEFAULT_TAX_PERCENT, ge=0, le=100, max_digits=5, decimal_places=2)
    join_date: date | None = None


class EmployeeCreate(EmployeeBase):
    pass


class EmployeeOut(EmployeeBase):
    id: int


class SalaryUpdate(BaseModel):
    basic_salary: Decimal | None = Field(default=None, gt=0, max_digits=10, decimal_places=2)
    hra_percent: Decimal | None = Field(default=None, ge=0, max_digits=5, decimal_places=2)
    bonus_percent: Decimal | None = Field(default=None, ge=0, max_digits=5, decimal_places=2)
    tax_percent: Decimal | None = Field(default=None, ge=0, le=100, max_digits=5, decimal_places=2)


def _to_out(row: Employee) -> EmployeeOut:
    return EmployeeOut(
        id=row.id,
        name=row.name,
        dept_id=row.dept_id,
        basic_salary=row.basic_salary,
        hra_percent=row.hra_percent,
        bonus_percent=row.bonus_percent,
        tax_percent=row.tax_percent,
        join_date=row.join_date,
    )


@router.get("", response_model=list[EmployeeOut])
def list_employees(db: Session = Depends(get_session)):
    return [_to_out(row) for row in EmployeeDirectory(db).list_employees()]


@router.post("", response_model=EmployeeOut, status_code=201)
def create_employee(payload: EmployeeCreate, db: Session = Depends(get_session)):
    try:
        row = EmployeeDirectory(db).create_employee(**payload.model_dump())
    except InvalidEmployeeData as exc:
        raise HTTPException(status_code=422, detail=str(exc)) from exc
    except DepartmentNotFound as exc:
        raise HTTPException(status_code=422, detail=str(exc)) from exc
    return _to_out(row)


@router.patch("/{employee_id}/salary", response_model=EmployeeOut)
def update_salary(employee_id: int, payload: SalaryUpdate, db: Session = Depends(get_session)):
    try:
        row = EmployeeDirectory(db).update_salary_components(employee_id, **payload.model_dump(exclude_none=True))
    except EmployeeNotFound as exc:
        raise HTTPException(status_code=404, detail=str(exc)) from exc
    except InvalidEmployeeData as exc:
        raise HTTPException(status_code=422, detail=str(exc)) from exc
    return _to_out(row)


@router.delete("/{employee_id}", status_code=204)
def delete_employee(employee_id: int, db: Session = Depends(get_session)):
    try:
        EmployeeDirectory(db).delete_employee(employee_id)
    except EmployeeNotFound as exc:
        raise HTTPException(status_code=404, detail=str(exc)) from exc
    except EmployeeHasPayslips as exc:
        raise HTTPException(status_code=409, detail=str(exc)) from exc
    return None
