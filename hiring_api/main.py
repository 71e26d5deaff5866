# ==============================================================
# 📁 hiring_api/main.py — Hiring API (careers, applications,
#    services catalog, statistics, auth) + orphan-sweep scheduler
# ==============================================================
import logging
import sys

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pydantic import ValidationError as PydanticValidationError
from sqlalchemy.exc import SQLAlchemyError
from starlette.exceptions import HTTPException as StarletteHTTPException

from .config import settings
from .db import check_connection, create_db_and_tables
from .errors import AppError
from .logging_config import setup_logging

# Routers
from .routers import applications, auth, careers, services, statistics, users

# Scheduler
from apscheduler.schedulers.background import BackgroundScheduler

from .services.sweeper import run_orphan_sweep

logger = logging.getLogger(__name__)


# 🚀 App Init
app = FastAPI(title=settings.APP_NAME)


# 🌐 CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# 🔌 Routers
app.include_router(auth.router,         prefix="/auth",         tags=["auth"])
app.include_router(users.router,        prefix="/users",        tags=["users"])
app.include_router(careers.router,      prefix="/careers",      tags=["careers"])
app.include_router(applications.router, prefix="/applications", tags=["applications"])
app.include_router(services.router,     prefix="/services",     tags=["services"])
app.include_router(statistics.router,   prefix="/statistics",   tags=["statistics"])


# ======================= Error envelope ======================= #
def _error(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"success": False, "message": message})


def _first_error(errors) -> str:
    if not errors:
        return "Invalid request"
    err = errors[0]
    loc = ".".join(str(p) for p in err.get("loc", ()) if p not in ("body", "query", "path"))
    return f"{loc}: {err.get('msg')}" if loc else str(err.get("msg"))


@app.exception_handler(AppError)
async def app_error_handler(request: Request, exc: AppError):
    return _error(exc.status_code, exc.message)


@app.exception_handler(StarletteHTTPException)
async def http_error_handler(request: Request, exc: StarletteHTTPException):
    return _error(exc.status_code, str(exc.detail))


@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError):
    return _error(400, _first_error(exc.errors()))


@app.exception_handler(PydanticValidationError)
async def model_validation_handler(request: Request, exc: PydanticValidationError):
    return _error(400, _first_error(exc.errors()))


@app.exception_handler(SQLAlchemyError)
async def database_error_handler(request: Request, exc: SQLAlchemyError):
    logger.exception("Database error on %s %s", request.method, request.url.path)
    return _error(500, "Database error")


# 💡 Health Check
@app.get("/health")
def health():
    return {"status": "ok"}


@app.get("/")
def root():
    return {"message": f"{settings.APP_NAME} is running"}


# ======================= Scheduler ======================= #

def start_scheduler():
    """Env toggles:
      - ENABLE_ORPHAN_SWEEP=1            ➜ delete CVs no application owns
      - ORPHAN_SWEEP_INTERVAL_HOURS=24   ➜ interval hours
    """
    if not settings.ENABLE_ORPHAN_SWEEP:
        logger.info("[SCHED] Orphan sweep disabled (ENABLE_ORPHAN_SWEEP=0)")
        return

    every_hours = settings.ORPHAN_SWEEP_INTERVAL_HOURS
    if every_hours <= 0:
        every_hours = 24.0

    scheduler = BackgroundScheduler()
    scheduler.add_job(run_orphan_sweep, "interval", hours=every_hours, id="orphan-sweep", max_instances=1)
    scheduler.start()
    app.state.scheduler = scheduler
    logger.info("[SCHED] Orphan sweep started (interval=%sh)", every_hours)


@app.on_event("startup")
def on_startup():
    setup_logging(settings.LOG_LEVEL, settings.LOG_FORMAT)
    try:
        check_connection()
    except SQLAlchemyError:
        # nothing works without the database
        sys.exit(1)
    create_db_and_tables()
    start_scheduler()


@app.on_event("shutdown")
def on_shutdown():
    sch = getattr(app.state, "scheduler", None)
    if sch:
        sch.shutdown(wait=False)
        logger.info("[SCHED] Stopped.")
