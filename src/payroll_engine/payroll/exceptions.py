from __future__ import annotations

from typing import Sequence


class PayrollError(Exception):
    """Base class for every error raised by the payroll engine."""


class EmployeeNotFound(PayrollError):
    def __init__(self, employee_id: int, period: str | None = None):
        self.employee_id = employee_id
        self.period = period
        message = f"Employee {employee_id} not found"
        if period:
            message += f" (period {period})"
        super().__init__(message)


class InvalidEmployeeData(PayrollError):
    def __init__(self, employee_id: int | None, reason: str, period: str | None = None):
        self.employee_id = employee_id
        self.reason = reason
        self.period = period
        subject = f"Employee {employee_id}" if employee_id is not None else "Employee"
        message = f"{subject} has invalid payroll data: {reason}"
        if period:
            message += f" (period {period})"
        super().__init__(message)


class DepartmentNotFound(PayrollError):
    def __init__(self, dept_id: int):
        self.dept_id = dept_id
        super().__init__(f"Department {dept_id} not found")


class EmployeeHasPayslips(PayrollError):
    def __init__(self, employee_id: int):
        self.employee_id = employee_id
        super().__init__(f"Employee {employee_id} has processed payslips and cannot be deleted")


class DuplicateDepartment(PayrollError):
    def __init__(self, name: str):
        self.name = name
        super().__init__(f"Department {name!r} already exists")


class UnsupportedDatabase(PayrollError):
    def __init__(self, dialect: str):
        self.dialect = dialect
        super().__init__(f"Payslip upsert is not supported on the {dialect!r} dialect")


class BatchFailed(PayrollError):
    def __init__(self, period: str, failures: Sequence[tuple[int, Exception]]):
        self.period = period
        self.failures = list(failures)
        details = "; ".join(f"employee {employee_id}: {error}" for employee_id, error in self.failures)
        super().__init__(f"Payroll run for {period} failed for {len(self.failures)} employee(s): {details}")
