from decimal import Decimal

import pytest
from sqlalchemy.exc import OperationalError

from conftest import add_department, add_employee, payslip_count
from payroll_engine.models import Employee
from payroll_engine.payroll import batch
from payroll_engine.payroll.exceptions import BatchFailed, EmployeeNotFound, InvalidEmployeeData
from payroll_engine.payroll.service import PayrollService


def test_monthly_run_processes_every_employee(session, session_factory):
    it = add_department(session, "IT")
    hr = add_department(session, "HR")
    add_employee(session, "Amit Sharma", "50000", it)
    add_employee(session, "Priya Singh", "60000", it, hra_percent="40", bonus_percent="15")
    add_employee(session, "Rahul Kumar", "45000", hr)
    add_employee(session, "Meera Iyer", "40000", hr)
    service = PayrollService(session_factory, halt_on_error=False)

    result = service.generate_monthly_payslip("2025-12")

    assert result.ok
    assert len(result.succeeded) == 4
    assert payslip_count(session_factory, period="2025-12") == 4
    assert len(service.department_report("2025-12").rows()) == 2
    assert result.total_net == Decimal("63000") + Decimal("83700") + Decimal("56700") + Decimal("50400")


def test_rerunning_a_month_does_not_duplicate_payslips(seeded, session_factory):
    service = PayrollService(session_factory, halt_on_error=False)

    service.generate_monthly_payslip("2025-12")
    service.generate_monthly_payslip("2025-12")

    assert payslip_count(session_factory) == 4


def test_empty_directory_yields_empty_result(session_factory):
    result = PayrollService(session_factory, halt_on_error=False).generate_monthly_payslip("2025-12")

    assert result.outcomes == []
    assert result.ok
    assert result.total_net == 0


def test_failures_are_collected_and_the_run_continues(session, session_factory):
    first = add_employee(session, "Amit Sharma", "50000")
    broken = add_employee(session, "Broken Rates", "40000", hra_percent="-10")
    last = add_employee(session, "Neha Gupta", "55000")
    service = PayrollService(session_factory, halt_on_error=False)

    result = service.generate_monthly_payslip("2025-12")

    assert [o.employee_id for o in result.succeeded] == [first.id, last.id]
    assert [o.employee_id for o in result.failed] == [broken.id]
    assert isinstance(result.failed[0].error, InvalidEmployeeData)
    assert payslip_count(session_factory, employee_id=broken.id) == 0
    assert payslip_count(session_factory) == 2

    with pytest.raises(BatchFailed) as excinfo:
        result.raise_for_failures()

    assert excinfo.value.period == "2025-12"
    assert f"employee {broken.id}" in str(excinfo.value)


def test_halt_on_error_stops_at_first_failure(session, session_factory):
    first = add_employee(session, "Amit Sharma", "50000")
    broken = add_employee(session, "Broken Rates", "40000", tax_percent="150")
    last = add_employee(session, "Neha Gupta", "55000")
    service = PayrollService(session_factory, halt_on_error=False)

    with pytest.raises(InvalidEmployeeData) as excinfo:
        service.generate_monthly_payslip("2025-12", halt_on_error=True)

    assert excinfo.value.employee_id == broken.id
    assert payslip_count(session_factory, employee_id=first.id) == 1
    assert payslip_count(session_factory, employee_id=last.id) == 0


def test_halt_on_error_default_comes_from_settings(session, session_factory, monkeypatch):
    from payroll_engine.core.config import get_settings

    add_employee(session, "Broken Rates", "40000", bonus_percent="-1")
    monkeypatch.setattr(get_settings(), "batch_halt_on_error", True)

    with pytest.raises(InvalidEmployeeData):
        PayrollService(session_factory).generate_monthly_payslip("2025-12")


def remove_after_snapshot(monkeypatch, service, session_factory, employee_id):
    """Delete an employee between the id snapshot and its processing."""
    runner = service.batch_runner
    snapshot = runner._employee_ids

    def ids_then_delete():
        ids = snapshot()
        db = session_factory()
        try:
            db.delete(db.get(Employee, employee_id))
            db.commit()
        finally:
            db.close()
        return ids

    monkeypatch.setattr(runner, "_employee_ids", ids_then_delete)


def test_employee_removed_mid_run_is_recorded_and_run_continues(session, session_factory, monkeypatch):
    first = add_employee(session, "Amit Sharma", "50000")
    gone = add_employee(session, "Rahul Kumar", "45000")
    last = add_employee(session, "Neha Gupta", "55000")
    gone_id = gone.id
    captured = []
    monkeypatch.setattr(batch.sentry_sdk, "capture_exception", captured.append)
    service = PayrollService(session_factory, halt_on_error=False)
    remove_after_snapshot(monkeypatch, service, session_factory, gone_id)

    result = service.generate_monthly_payslip("2025-12")

    assert [o.employee_id for o in result.succeeded] == [first.id, last.id]
    assert [o.employee_id for o in result.failed] == [gone_id]
    error = result.failed[0].error
    assert isinstance(error, EmployeeNotFound)
    assert error.period == "2025-12"
    assert captured == [error]
    assert payslip_count(session_factory) == 2


def test_halt_on_error_reraises_missing_employee(session, session_factory, monkeypatch):
    first = add_employee(session, "Amit Sharma", "50000")
    gone = add_employee(session, "Rahul Kumar", "45000")
    last = add_employee(session, "Neha Gupta", "55000")
    gone_id = gone.id
    captured = []
    monkeypatch.setattr(batch.sentry_sdk, "capture_exception", captured.append)
    service = PayrollService(session_factory, halt_on_error=True)
    remove_after_snapshot(monkeypatch, service, session_factory, gone_id)

    with pytest.raises(EmployeeNotFound) as excinfo:
        service.generate_monthly_payslip("2025-12")

    assert excinfo.value.employee_id == gone_id
    assert captured == []
    assert payslip_count(session_factory, employee_id=first.id) == 1
    assert payslip_count(session_factory, employee_id=last.id) == 0


def test_database_errors_are_collected_per_employee(session, session_factory, monkeypatch):
    first = add_employee(session, "Amit Sharma", "50000")
    flaky = add_employee(session, "Rahul Kumar", "45000")
    flaky_id = flaky.id
    last = add_employee(session, "Neha Gupta", "55000")
    captured = []
    monkeypatch.setattr(batch.sentry_sdk, "capture_exception", captured.append)
    service = PayrollService(session_factory, halt_on_error=False)
    process = service.processor.process

    def fail_for_flaky(employee_id, period):
        if employee_id == flaky_id:
            raise OperationalError("INSERT INTO payslips", {}, Exception("database is locked"))
        return process(employee_id, period)

    monkeypatch.setattr(service.processor, "process", fail_for_flaky)

    result = service.generate_monthly_payslip("2025-12")

    assert [o.employee_id for o in result.succeeded] == [first.id, last.id]
    assert [o.employee_id for o in result.failed] == [flaky_id]
    assert isinstance(result.failed[0].error, OperationalError)
    assert captured == [result.failed[0].error]
    assert payslip_count(session_factory, employee_id=flaky_id) == 0

    with pytest.raises(BatchFailed, match="database is locked"):
        result.raise_for_failures()
