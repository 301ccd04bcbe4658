import logging
import time

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy import text

from app.api.router import api_router
from app.core.config import settings
from app.core.errors import AppError
from app.core.logging_config import configure_logging
from app.db.base import Base
from app.db.seed import seed_questions
from app.db.session import SessionLocal, engine
from app import models  # noqa: F401

logger = logging.getLogger("app.main")

app = FastAPI(title=settings.app_name)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)
app.add_middleware(GZipMiddleware, minimum_size=1000)


@app.middleware("http")
async def log_requests(request: Request, call_next):
    started = time.perf_counter()
    response = await call_next(request)
    elapsed_ms = (time.perf_counter() - started) * 1000
    logger.info("%s %s %s %.1fms", request.method, request.url.path, response.status_code, elapsed_ms)
    return response


@app.exception_handler(AppError)
async def app_error_handler(request: Request, exc: AppError) -> JSONResponse:
    if exc.status_code >= 500:
        logger.error(
            "%s on %s %s: %s (details=%s)",
            exc.error_code, request.method, request.url.path, exc.message, exc.details,
        )
    else:
        logger.warning("%s on %s %s: %s", exc.error_code, request.method, request.url.path, exc.message)
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict())


@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    errors = exc.errors()
    first_error = errors[0] if errors else None
    message = "Request validation failed"
    if first_error:
        field = ".".join(str(part) for part in first_error.get("loc", ()) if part != "body")
        message = f"{field}: {first_error.get('msg', message)}" if field else first_error.get("msg", message)
    logger.warning("VALIDATION_ERROR on %s %s: %s", request.method, request.url.path, message)
    return JSONResponse(
        status_code=400,
        content={"status_code": 400, "message": message, "error_code": "VALIDATION_ERROR"},
    )


@app.exception_handler(Exception)
async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return JSONResponse(
        status_code=500,
        content={"status_code": 500, "message": "An unexpected error occurred", "error_code": "INTERNAL_ERROR"},
    )


@app.on_event("startup")
def on_startup():
    configure_logging()
    logger.info("Using database: %s", "Postgres" if settings.is_production else "SQLite")
    Base.metadata.create_all(bind=engine)
    if settings.seed_questions_on_startup:
        db = SessionLocal()
        try:
            seed_questions(db)
        finally:
            db.close()


@app.get("/health")
def health():
    return {"status": "ok"}


@app.get("/health/db")
def health_db():
    db = SessionLocal()
    try:
        db.execute(text("SELECT 1"))
        return {"status": "ok", "database": "connected"}
    except Exception as exc:
        logger.error("Database health check failed: %s", exc)
        return JSONResponse(status_code=503, content={"status": "error", "database": "unavailable"})
    finally:
        db.close()


app.include_router(api_router, prefix=settings.api_prefix)
