from __future__ import annotations

from typing import Iterable

from payroll_engine.models import Payslip
from payroll_engine.payroll.reports import DepartmentReportRow

RULE = "-" * 57


def format_department_report(rows: Iterable[DepartmentReportRow], period: str) -> str:
    lines = [
        f"=== Department-wise Salary Report - {period} ===",
        f"{'Department':<15}{'Employees':<12}{'Total Net':<15}Avg Net",
        RULE,
    ]
    count = 0
    for row in rows:
        lines.append(f"{row.dept_name:<15}{row.employee_count:<12}{str(row.total_net):<15}{row.avg_net}")
        count += 1
    if not count:
        lines.append("No payslips processed for this period")
    return "\n".join(lines)


def format_payslips(payslips: Iterable[Payslip], period: str) -> str:
    lines = [
        f"Payslips {period}",
        f"{'Employee':<10}{'Gross':>14}{'Tax':>14}{'Net':>14}  Processed",
    ]
    for payslip in payslips:
        lines.append(
            f"{payslip.employee_id:<10}{str(payslip.gross_salary):>14}{str(payslip.tax_deducted):>14}"
            f"{str(payslip.net_salary):>14}  {payslip.processed_at.isoformat(timespec='seconds')}"
        )
    return "\n".join(lines)
