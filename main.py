"""
FitGenius Hub API entry point
Run: python main.py [uvicorn options...]
Seeding is manual: python tools/seed_admin.py && python tools/seed_catalog.py
"""
import logging
import subprocess
import sys
import uuid
from contextlib import asynccontextmanager
from datetime import datetime
from pathlib import Path
from typing import List, Optional

import uvicorn
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from config import settings
from database import init_database, test_connections
from api import auth, blog, chatbot, contact, nutrition, users, workouts
from services.scheduler import Scheduler, register_default_jobs
from services.task_executor import TaskExecutor, set_task_executor

APP_NAME = "FitGenius Hub"
APP_VERSION = "1.0.0"


# Build info
def _get_git_sha() -> str:
    try:
        out = subprocess.check_output(["git", "rev-parse", "--short", "HEAD"], stderr=subprocess.DEVNULL)
        return out.decode().strip()
    except (OSError, subprocess.CalledProcessError):
        return "unknown"


BUILD_INFO = {
    "git_sha": _get_git_sha(),
    "build_time": datetime.utcnow().isoformat(),
}


# Logger - Structured logging with request tracking
class RequestIDFilter(logging.Filter):
    """Add request_id to all log records"""
    def filter(self, record):
        if not hasattr(record, "request_id"):
            record.request_id = "startup"
        return True


logging.basicConfig(
    level=logging.DEBUG if settings.DEBUG else logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - [%(request_id)s] %(message)s",
)
for _handler in logging.getLogger().handlers:
    _handler.addFilter(RequestIDFilter())
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Composition root: database, task executor and scheduler"""
    logger.info(f"Starting {APP_NAME} API ({settings.ENVIRONMENT})")
    app.state.status = "starting"

    # Fatal on failure: uvicorn aborts startup
    init_database()

    connections = test_connections()
    logger.info(f"Database: {'ok' if connections.get('database') else 'unreachable'}")
    logger.info(f"Redis: {'disabled' if connections.get('redis') is None else connections.get('redis')}")

    executor = TaskExecutor(
        enabled=settings.ENABLE_ASYNC,
        max_workers=settings.ASYNC_POOL_SIZE,
        thread_name_prefix="fitgenius-async",
    )
    executor.start()
    set_task_executor(executor)
    app.state.task_executor = executor

    scheduler = Scheduler(executor=executor, enabled=settings.ENABLE_SCHEDULER)
    register_default_jobs(scheduler, settings.MEMBERSHIP_SWEEP_MINUTES, settings.RATING_REFRESH_MINUTES)
    scheduler.start()
    app.state.scheduler = scheduler

    app.state.status = "running"
    app.state.started_at = datetime.utcnow()
    logger.info(f"{APP_NAME} API running")

    try:
        yield
    finally:
        logger.info(f"Shutting down {APP_NAME} API")
        app.state.status = "stopping"
        await scheduler.stop()
        executor.shutdown(wait=True)
        set_task_executor(None)


app = FastAPI(
    title=f"{APP_NAME} API",
    description="Fitness platform backend: workouts, nutrition, chatbot, blog and contact",
    version=APP_VERSION,
    docs_url="/docs" if settings.DEBUG else None,
    redoc_url="/redoc" if settings.DEBUG else None,
    lifespan=lifespan,
)


# ==================== ERROR HANDLERS ====================


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    """HTTP errors use the {success, message} envelope"""
    message = exc.detail
    if exc.status_code == 404 and exc.detail == "Not Found":
        message = "Route not found"
    return JSONResponse(
        status_code=exc.status_code,
        content={"success": False, "message": message},
        headers=getattr(exc, "headers", None),
    )


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    errors = [
        {
            "field": ".".join(str(part) for part in err.get("loc", ()) if part != "body"),
            "message": err.get("msg"),
            "type": err.get("type"),
        }
        for err in exc.errors()
    ]
    return JSONResponse(
        status_code=400,
        content={"success": False, "message": "Validation error", "errors": errors},
    )


@app.exception_handler(Exception)
async def general_exception_handler(request: Request, exc: Exception):
    """Handle unexpected exceptions gracefully"""
    request_id = getattr(request.state, "request_id", "unknown")
    logger.error(f"Unhandled exception: {exc}", exc_info=True, extra={"request_id": request_id})
    return JSONResponse(
        status_code=500,
        content={"success": False, "message": "Something went wrong!"},
    )


# Request ID middleware with logging context
@app.middleware("http")
async def add_request_id_header(request: Request, call_next):
    request_id = request.headers.get("X-Request-Id") or str(uuid.uuid4())
    request.state.request_id = request_id
    log_ctx = {"request_id": request_id}
    logger.info(f"{request.method} {request.url.path}", extra=log_ctx)
    response = await call_next(request)
    response.headers["X-Request-Id"] = request_id
    logger.info(f"Response: {response.status_code}", extra=log_ctx)
    return response


# Middlewares
origins = settings.cors_origins_list or ["*"]
app.add_middleware(
    CORSMiddleware,
    allow_origins=origins,
    allow_credentials=origins != ["*"],
    allow_methods=["*"],
    allow_headers=["*"],
)

# Routers
app.include_router(auth.router, prefix="/api/auth")
app.include_router(users.router, prefix="/api/users")
app.include_router(workouts.router, prefix="/api/workouts")
app.include_router(nutrition.router, prefix="/api/nutrition")
app.include_router(chatbot.router, prefix="/api/chatbot")
app.include_router(blog.router, prefix="/api/blog")
app.include_router(contact.router, prefix="/api/contact")


# ==================== SYSTEM ====================


@app.get("/", tags=["System"])
async def root():
    return {
        "success": True,
        "message": f"{APP_NAME} API",
        "version": APP_VERSION,
        "environment": settings.ENVIRONMENT,
        "timestamp": datetime.utcnow().isoformat(),
        "endpoints": {
            "health": "/api/health",
            "docs": "/docs" if settings.DEBUG else None,
            "auth": "/api/auth",
            "users": "/api/users",
            "workouts": "/api/workouts",
            "nutrition": "/api/nutrition",
            "chatbot": "/api/chatbot",
            "blog": "/api/blog",
            "contact": "/api/contact",
        },
    }


@app.get("/api/health", tags=["System"])
async def health_check(request: Request):
    connections = test_connections()
    redis_state = connections.get("redis")
    scheduler = getattr(request.app.state, "scheduler", None)
    executor = getattr(request.app.state, "task_executor", None)

    status = getattr(request.app.state, "status", "starting")
    if status == "running" and not connections.get("database"):
        status = "degraded"

    return {
        "success": True,
        "message": "FitSphere API is running",
        "timestamp": datetime.utcnow().isoformat(),
        "status": status,
        "services": {
            "database": "healthy" if connections.get("database") else "unhealthy",
            "redis": "disabled" if redis_state is None else ("healthy" if redis_state else "unavailable"),
            "email": "configured" if settings.email_enabled else "disabled",
            "scheduler": "running" if scheduler is not None and scheduler.is_running else "stopped",
            "async_executor": "running" if executor is not None and executor.is_running else "inline",
        },
    }


@app.get("/version", tags=["System"])
async def version():
    """Return build info including git sha, build time, and environment"""
    return {
        "app": APP_NAME,
        "version": APP_VERSION,
        "git_sha": BUILD_INFO.get("git_sha"),
        "build_time": BUILD_INFO.get("build_time"),
        "environment": settings.ENVIRONMENT,
        "debug": settings.DEBUG,
    }


def main(argv: Optional[List[str]] = None) -> None:
    """
    Start the server through uvicorn's command line.

    Host, port and log level default to configuration; any option passed in
    argv is appended after the defaults and wins.
    """
    args = list(sys.argv[1:] if argv is None else argv)
    defaults = [
        "--app-dir", str(Path(__file__).resolve().parent),
        "--host", settings.API_HOST,
        "--port", str(settings.API_PORT),
        "--log-level", "debug" if settings.DEBUG else "info",
    ]
    logger.info(f"Starting on {settings.API_HOST}:{settings.API_PORT}")
    uvicorn.main(args=["main:app", *defaults, *args], prog_name="main.py")


if __name__ == "__main__":
    main()
