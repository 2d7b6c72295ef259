"""Monthly payroll calculation, payslip processing and department reporting."""

__version__ = "0.1.0"
