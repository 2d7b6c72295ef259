from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel, Field
from sqlalchemy.orm import Session

from payroll_engine.db.session import get_session
from payroll_engine.directory import EmployeeDirectory
from payroll_engine.payroll.exceptions import DuplicateDepartment

router = APIRouter(prefix="/departments", tags=["departments"])


class DepartmentCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=50)


class DepartmentOut(BaseModel):
    id: int
    name: str


@router.get("", response_model=list[DepartmentOut])
def list_departments(db: Session = Depends(get_session)) -> list[DepartmentOut]:
    return [DepartmentOut(id=row.id, name=row.name) for row in EmployeeDirectory(db).list_departments()]


@router.post("", response_model=DepartmentOut, status_code=201)
def create_department(payload: DepartmentCreate, db: Session = Depends(get_session)) -> DepartmentOut:
    try:
        department = EmployeeDirectory(db).create_department(payload.name)
    except DuplicateDepartment as exc:
        raise HTTPException(status_code=409, detail=str(exc)) from exc
    return DepartmentOut(id=department.id, name=department.name)
