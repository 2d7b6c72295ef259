from datetime import datetime
from decimal import Decimal
from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, Path, Query
from pydantic import BaseModel
from sqlalchemy.orm import sessionmaker

from payroll_engine.db.session import get_session_factory
from payroll_engine.payroll.exceptions import EmployeeNotFound, InvalidEmployeeData
from payroll_engine.payroll.service import PayrollService

router = APIRouter(prefix="/payroll", tags=["payroll"])

Period = Annotated[str, Path(pattern=r"^\d{4}-\d{2}$", description="Pay period as YYYY-MM")]


class PayslipOut(BaseModel):
    id: int
    employee_id: int
    period: str
    gross_salary: Decimal
    tax_deducted: Decimal
    net_salary: Decimal
    processed_at: datetime


class FailureOut(BaseModel):
    employee_id: int
    error: str


class BatchRunOut(BaseModel):
    period: str
    processed: int
    failed: int
    total_net: Decimal
    failures: list[FailureOut]


def get_payroll_service(factory: sessionmaker = Depends(get_session_factory)) -> PayrollService:
    return PayrollService(factory)


@router.post("/{period}/run", response_model=BatchRunOut)
def run_monthly(
    period: Period,
    halt_on_error: bool | None = Query(default=None),
    service: PayrollService = Depends(get_payroll_service),
) -> BatchRunOut:
    try:
        result = service.generate_monthly_payslip(period, halt_on_error=halt_on_error)
    except EmployeeNotFound as exc:
        raise HTTPException(status_code=404, detail=str(exc)) from exc
    except InvalidEmployeeData as exc:
        raise HTTPException(status_code=422, detail=str(exc)) from exc

    return BatchRunOut(
        period=period,
        processed=len(result.succeeded),
        failed=len(result.failed),
        total_net=result.total_net,
        failures=[FailureOut(employee_id=o.employee_id, error=str(o.error)) for o in result.failed],
    )


@router.post("/{period}/employees/{employee_id}", response_model=PayslipOut)
def calculate_salary(
    period: Period,
    employee_id: int,
    service: PayrollService = Depends(get_payroll_service),
) -> PayslipOut:
    try:
        processed = service.process(employee_id, period)
    except EmployeeNotFound as exc:
        raise HTTPException(status_code=404, detail=str(exc)) from exc
    except InvalidEmployeeData as exc:
        raise HTTPException(status_code=422, detail=str(exc)) from exc

    return PayslipOut(
        id=processed.payslip_id,
        employee_id=processed.employee_id,
        period=processed.period,
        gross_salary=processed.gross,
        tax_deducted=processed.tax,
        net_salary=processed.net,
        processed_at=processed.processed_at,
    )


@router.get("/{period}/payslips", response_model=list[PayslipOut])
def list_payslips(period: Period, service: PayrollService = Depends(get_payroll_service)) -> list[PayslipOut]:
    return [
        PayslipOut(
            id=row.id,
            employee_id=row.employee_id,
            period=row.period,
            gross_salary=row.gross_salary,
            tax_deducted=row.tax_deducted,
            net_salary=row.net_salary,
            processed_at=row.processed_at,
        )
        for row in service.list_payslips(period)
    ]


@router.get("/{period}/employees/{employee_id}", response_model=PayslipOut)
def get_payslip(
    period: Period,
    employee_id: int,
    service: PayrollService = Depends(get_payroll_service),
) -> PayslipOut:
    row = service.get_payslip(employee_id, period)
    if row is None:
        raise HTTPException(status_code=404, detail=f"No payslip for employee {employee_id} in {period}")
    return PayslipOut(
        id=row.id,
        employee_id=row.employee_id,
        period=row.period,
        gross_salary=row.gross_salary,
        tax_deducted=row.tax_deducted,
        net_salary=row.net_salary,
        processed_at=row.processed_at,
    )
