import logging
import traceback
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from fastapi.middleware.cors import CORSMiddleware
from starlette.exceptions import HTTPException as StarletteHTTPException

from task_tracker.config import settings
from task_tracker.database import engine, init_models
from task_tracker.errors import AppError
from task_tracker.logging_setup import setup_logging
from task_tracker.schemas.common import ErrorResponse
from task_tracker.routers.auth import router as auth_router
from task_tracker.routers.tasks import router as tasks_router
from task_tracker.routers.users import router as users_router

logger = logging.getLogger(__name__)


def warn_if_default_secrets(config) -> None:
    if config.is_development:
        return
    for name in config.default_secrets:
        logger.warning("%s is still the default placeholder; set it in the environment", name)


@asynccontextmanager
async def lifespan(app: FastAPI):
    setup_logging(log_dir=settings.LOG_DIR, console_level=settings.LOG_LEVEL.upper())
    warn_if_default_secrets(settings)
    await init_models()
    logger.info("Task Tracker API started (environment=%s)", settings.ENVIRONMENT)

    yield

    await engine.dispose()
    logger.info("Task Tracker API stopped")


app = FastAPI(
    lifespan=lifespan,
    title="Task Tracker API",
    description="Task management with per-user access and refresh tokens",
    version="1.0.0",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


def error_response(status_code: int, message: str, error: str | None = None, **extra) -> JSONResponse:
    content = ErrorResponse(message=message, error=error).model_dump(exclude_none=True)
    content.update(extra)
    return JSONResponse(status_code=status_code, content=content)


@app.exception_handler(AppError)
async def app_error_handler(request: Request, exc: AppError):
    headers = {"WWW-Authenticate": "Bearer"} if exc.status_code == 401 else None
    response = error_response(exc.status_code, exc.message, exc.error)
    if headers:
        response.headers.update(headers)
    return response


@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError):
    errors = exc.errors()
    message = "Invalid request"
    if errors:
        first = errors[0]
        field = ".".join(str(part) for part in first.get("loc", ()) if part not in ("body", "query", "path"))
        message = f"{field}: {first.get('msg')}" if field else str(first.get("msg"))
    return error_response(400, message)


@app.exception_handler(StarletteHTTPException)
async def http_error_handler(request: Request, exc: StarletteHTTPException):
    if exc.status_code == 404:
        return error_response(404, f"Not Found - {request.url.path}")
    return error_response(exc.status_code, str(exc.detail))


# Global exception handler to ensure CORS headers on failure
@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    logger.error("Unhandled error on %s %s", request.method, request.url.path, exc_info=exc)

    extra = {}
    if settings.is_development:
        extra = {"error": str(exc), "trace": "".join(traceback.format_exception(exc))}
    response = error_response(500, "Internal Server Error", **extra)
    response.headers.update({
        "Access-Control-Allow-Origin": "*",
        "Access-Control-Allow-Credentials": "true",
    })
    return response


app.include_router(auth_router)
app.include_router(users_router)
app.include_router(tasks_router)


@app.get("/health")
def health():
    return {"success": True, "message": "Task Tracker API is running"}
