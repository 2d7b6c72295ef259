from __future__ import annotations

import argparse
import sys
from decimal import Decimal
from pathlib import Path

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError

from payroll_engine.core.config import settings
from payroll_engine.core.logging import configure_logging
from payroll_engine.core.monitoring import configure_error_monitoring
from payroll_engine.db.session import SessionLocal, init_db
from payroll_engine.directory import EmployeeDirectory
from payroll_engine.exporter import export_report_csv
from payroll_engine.models import Department
from payroll_engine.payroll.exceptions import PayrollError
from payroll_engine.payroll.service import PayrollService
from payroll_engine.seed.seed_data import seed
from payroll_engine.views import format_department_report, format_payslips


def build_service() -> PayrollService:
    return PayrollService(SessionLocal)


def cmd_init_db(args: argparse.Namespace) -> None:
    session = SessionLocal()
    try:
        init_db(session.get_bind())
    finally:
        session.close()
    print("Database tables created")


def cmd_seed(args: argparse.Namespace) -> None:
    session = SessionLocal()
    try:
        init_db(session.get_bind())
        if session.scalars(select(Department.id).limit(1)).first() is not None:
            print("Database already contains departments, skipping seed")
            return
        seed(session)
    finally:
        session.close()
    print("Seeded 3 departments and 4 employees")


def cmd_generate(args: argparse.Namespace) -> None:
    service = build_service()
    print(f"=== Generating Payslips for {args.period} ===")
    result = service.generate_monthly_payslip(args.period, halt_on_error=args.halt_on_error or None)
    for outcome in result.outcomes:
        if outcome.ok:
            print(outcome.payslip.confirmation())
        else:
            print(f"FAILED Employee ID {outcome.employee_id}: {outcome.error}")
    result.raise_for_failures()
    print("Monthly payslip generation completed!")


def cmd_calculate(args: argparse.Namespace) -> None:
    processed = build_service().process(args.employee_id, args.period)
    print(processed.confirmation())


def cmd_report(args: argparse.Namespace) -> None:
    report = build_service().department_report(args.period)
    if args.output:
        output_path = export_report_csv(report, Path(args.output))
        print(f"Report exported to {output_path}")
    else:
        print(format_department_report(report, args.period))


def cmd_payslips(args: argparse.Namespace) -> None:
    payslips = build_service().list_payslips(args.period)
    print(format_payslips(payslips, args.period))


def cmd_update_salary(args: argparse.Namespace) -> None:
    session = SessionLocal()
    try:
        employee = EmployeeDirectory(session).update_salary_components(
            args.employee_id,
            basic_salary=args.basic,
            hra_percent=args.hra,
            bonus_percent=args.bonus,
            tax_percent=args.tax,
        )
        print(
            f"Updated Employee ID {employee.id}: basic {employee.basic_salary}, "
            f"HRA {employee.hra_percent}%, bonus {employee.bonus_percent}%, tax {employee.tax_percent}%"
        )
    finally:
        session.close()


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Monthly payroll processing")
    sub = parser.add_subparsers(dest="command", required=True)

    init = sub.add_parser("init-db", help="Create database tables")
    init.set_defaults(func=cmd_init_db)

    seed_cmd = sub.add_parser("seed", help="Load demo departments and employees")
    seed_cmd.set_defaults(func=cmd_seed)

    generate = sub.add_parser("generate", help="Generate payslips for every employee")
    generate.add_argument("period", help="Pay period as YYYY-MM")
    generate.add_argument("--halt-on-error", action="store_true", help="Stop at the first failing employee")
    generate.set_defaults(func=cmd_generate)

    calculate = sub.add_parser("calculate", help="Calculate one employee's payslip")
    calculate.add_argument("employee_id", type=int)
    calculate.add_argument("period")
    calculate.set_defaults(func=cmd_calculate)

    report = sub.add_parser("report", help="Department-wise salary report")
    report.add_argument("period")
    report.add_argument("--output", help="Write the report to a CSV file")
    report.set_defaults(func=cmd_report)

    payslips = sub.add_parser("payslips", help="List payslips for a period")
    payslips.add_argument("period")
    payslips.set_defaults(func=cmd_payslips)

    update = sub.add_parser("update-salary", help="Change an employee's salary components")
    update.add_argument("employee_id", type=int)
    update.add_argument("--basic", type=Decimal)
    update.add_argument("--hra", type=Decimal)
    update.add_argument("--bonus", type=Decimal)
    update.add_argument("--tax", type=Decimal)
    update.set_defaults(func=cmd_update_salary)

    return parser


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    configure_logging(settings.log_level)
    configure_error_monitoring()
    try:
        args.func(args)
    except PayrollError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1
    except SQLAlchemyError as exc:
        print(f"Database error: {exc}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
