from decimal import Decimal

from fastapi import APIRouter, Depends
from pydantic import BaseModel

from payroll_engine.domains.payroll.router import Period, get_payroll_service
from payroll_engine.payroll.service import PayrollService

router = APIRouter(prefix="/reports", tags=["reporting"])


class DepartmentReportOut(BaseModel):
    dept_name: str
    employee_count: int
    total_net: Decimal
    avg_net: Decimal


@router.get("/departments/{period}", response_model=list[DepartmentReportOut])
def department_report(period: Period, service: PayrollService = Depends(get_payroll_service)):
    return [
        DepartmentReportOut(
            dept_name=row.dept_name,
            employee_count=row.employee_count,
            total_net=row.total_net,
            avg_net=row.avg_net,
        )
        for row in service.department_report(period)
    ]
