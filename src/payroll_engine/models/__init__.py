from .department import Department
from .employee import Employee
from .payslip import Payslip
from .salary_audit import SalaryAudit

__all__ = ["Department", "Employee", "Payslip", "SalaryAudit"]
