"""Schengen Compliance – FastAPI application."""
# Load .env before any app code that might read config
from dotenv import load_dotenv
from pathlib import Path
load_dotenv(Path(__file__).resolve().parent.parent / ".env")

import logging

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from app.config import get_settings
from app.database import Base, engine
# Import models so Base.metadata has all tables before create_all (schema source of truth)
from app.models import Company, CompanySettings, Employee, Trip, AuditLog  # noqa: F401
from app.routers import employees, trips, compliance, settings as settings_router, reports, notifications
from app.services.errors import (
    EmployeeExemptError,
    InputError,
    InvalidConfigError,
    TripOverlapError,
)

settings = get_settings()
logging.basicConfig(level=settings.log_level.upper(), format="%(asctime)s %(levelname)s %(name)s: %(message)s")
log = logging.getLogger("uvicorn.error")

app = FastAPI(title=settings.app_name, debug=settings.debug)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(employees.router)
app.include_router(trips.router)
app.include_router(compliance.router)
app.include_router(settings_router.router)
app.include_router(reports.router)
app.include_router(notifications.router)


@app.exception_handler(InputError)
def input_error_handler(request: Request, exc: InputError):
    return JSONResponse(status_code=400, content={"detail": str(exc)})


@app.exception_handler(TripOverlapError)
def overlap_error_handler(request: Request, exc: TripOverlapError):
    log.info("Rejected trip write on %s: %s", request.url.path, exc)
    return JSONResponse(
        status_code=409,
        content={
            "detail": str(exc),
            "conflicting_trip": exc.conflicting_trip.model_dump(mode="json"),
        },
    )


@app.exception_handler(InvalidConfigError)
def config_error_handler(request: Request, exc: InvalidConfigError):
    return JSONResponse(status_code=422, content={"detail": str(exc), "field": exc.config_key})


@app.exception_handler(EmployeeExemptError)
def exempt_error_handler(request: Request, exc: EmployeeExemptError):
    return JSONResponse(status_code=409, content={"detail": str(exc)})


@app.on_event("startup")
def startup():
    try:
        Base.metadata.create_all(bind=engine)
    except Exception as e:
        log.warning("Database startup failed (tables skipped). Check DATABASE_URL and network. Error: %s", e)

    if not settings.alert_cron_enabled:
        return
    try:
        from apscheduler.schedulers.background import BackgroundScheduler
        from app.services.compliance_alerts import run_compliance_alert_job
        scheduler = BackgroundScheduler()
        scheduler.add_job(run_compliance_alert_job, "cron", hour=settings.alert_cron_hour, minute=0)
        scheduler.start()
    except Exception:
        log.exception("Compliance alert scheduler failed to start")


@app.get("/")
def root():
    return {"app": settings.app_name, "status": "ok"}


@app.get("/health")
def health():
    return {"status": "healthy"}
