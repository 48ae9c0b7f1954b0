"""Entrypoint for the Jobly API service."""

from __future__ import annotations

import time
from collections.abc import Awaitable, Callable
from datetime import UTC, datetime

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse, Response
from sqlalchemy.exc import SQLAlchemyError
from starlette.exceptions import HTTPException as StarletteHTTPException

from jobly_common.config import get_config
from jobly_common.errors import JoblyError

from . import SERVICE_NAME, __version__
from .companies import router as companies_router
from .jobs import router as jobs_router
from .logger import log_event

_STARTED_AT_ISO = datetime.now(UTC).isoformat()

app = FastAPI(title="Jobly API", version=__version__)
app.include_router(companies_router)
app.include_router(jobs_router)


def _error_body(message: str | list[str], status_code: int) -> dict[str, object]:
    return {"error": {"message": message, "status": status_code}}


@app.on_event("startup")
async def on_startup() -> None:
    log_event("INFO", "starting", started_at=_STARTED_AT_ISO, **get_config().log_summary())


@app.on_event("shutdown")
async def on_shutdown() -> None:
    log_event("INFO", "stopping")


@app.middleware("http")
async def request_logger(
    request: Request, call_next: Callable[[Request], Awaitable[Response]]
) -> Response:
    start = time.perf_counter()
    response = await call_next(request)
    duration_ms = (time.perf_counter() - start) * 1000
    log_event(
        "INFO",
        "request",
        method=request.method,
        path=request.url.path,
        status_code=response.status_code,
        duration_ms=round(duration_ms, 2),
    )
    return response


@app.exception_handler(JoblyError)
async def jobly_error_handler(request: Request, exc: JoblyError) -> JSONResponse:
    if exc.status_code >= 500:
        # Contract errors are programming defects; keep the details in the log.
        log_event("ERROR", "internal_error", path=request.url.path, error=str(exc))
        body = _error_body("Internal Server Error", exc.status_code)
    else:
        body = exc.to_dict()
    return JSONResponse(status_code=exc.status_code, content=body)


@app.exception_handler(StarletteHTTPException)
async def http_error_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    return JSONResponse(
        status_code=exc.status_code,
        content=_error_body(str(exc.detail), exc.status_code),
        headers=exc.headers,
    )


@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    errors = [
        f"{'.'.join(str(part) for part in error['loc'])}: {error['msg']}" for error in exc.errors()
    ]
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content=_error_body(errors, status.HTTP_400_BAD_REQUEST),
    )


@app.exception_handler(SQLAlchemyError)
async def database_error_handler(request: Request, exc: SQLAlchemyError) -> JSONResponse:
    log_event(
        "ERROR",
        "database_error",
        path=request.url.path,
        error_type=type(exc).__name__,
        error=str(exc).splitlines()[0] if str(exc) else "",
    )
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content=_error_body("Internal Server Error", status.HTTP_500_INTERNAL_SERVER_ERROR),
    )


@app.get("/healthz", response_class=JSONResponse)
async def healthz() -> JSONResponse:
    payload = {
        "ok": True,
        "service": SERVICE_NAME,
        "version": __version__,
        "env": get_config().environment,
        "started_at": _STARTED_AT_ISO,
    }
    return JSONResponse(content=payload)
