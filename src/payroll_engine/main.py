from fastapi import FastAPI

from payroll_engine.api.routes import health
from payroll_engine.core.config import settings
from payroll_engine.core.logging import configure_logging, get_logger
from payroll_engine.core.monitoring import configure_error_monitoring
from payroll_engine.core.observability import configure_observability
from payroll_engine.domains.departments.router import router as departments_router
from payroll_engine.domains.employees.router import router as employee_router
from payroll_engine.domains.payroll.router import router as payroll_router
from payroll_engine.domains.reporting.router import router as reporting_router

configure_logging(settings.log_level)
configure_observability()
configure_error_monitoring()
logger = get_logger(__name__)

app = FastAPI(title=settings.app_name)

app.include_router(health.router)
app.include_router(departments_router)
app.include_router(employee_router)
app.include_router(payroll_router)
app.include_router(reporting_router)


@app.on_event("startup")
def startup_event() -> None:
    logger.info("startup_complete", env=settings.env)


@app.get("/")
def root() -> dict[str, str]:
    return {"message": "Payroll engine running", "environment": settings.env}
