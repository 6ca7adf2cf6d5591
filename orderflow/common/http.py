"""HTTP boundary helpers shared by both FastAPI apps.

Request middleware (trace id + Prometheus), translation of the domain error
taxonomy into JSON `{message}` responses, and the database health probe.
"""

from time import perf_counter
from uuid import uuid4

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from sqlalchemy import text

from orderflow.common.config import settings
from orderflow.common.db import utcnow
from orderflow.common.errors import DomainError
from orderflow.common.logging import logger, trace_id_ctx
from orderflow.common.metrics import http_request_duration_seconds, http_requests_total


def install_request_middleware(app: FastAPI) -> None:
    """Bind a trace id to every request and record count/latency metrics."""

    @app.middleware("http")
    async def request_context(request: Request, call_next):
        trace_id = request.headers.get("x-trace-id") or str(uuid4())
        token = trace_id_ctx.set(trace_id)
        start = perf_counter()
        route = request.url.path
        method = request.method
        status_code = 500
        try:
            response = await call_next(request)
            status_code = response.status_code
            route_obj = request.scope.get("route")
            if route_obj is not None and getattr(route_obj, "path", None):
                route = route_obj.path
            response.headers["x-trace-id"] = trace_id
            return response
        finally:
            elapsed = max(0.0, perf_counter() - start)
            http_request_duration_seconds.labels(
                service=settings.service_name,
                route=route,
                method=method,
            ).observe(elapsed)
            http_requests_total.labels(
                service=settings.service_name,
                route=route,
                method=method,
                status_code=str(status_code),
            ).inc()
            trace_id_ctx.reset(token)


def _first_error_message(exc: RequestValidationError) -> str:
    errors = exc.errors()
    if not errors:
        return "Invalid request"
    first = errors[0]
    location = ".".join(str(part) for part in first.get("loc", ()) if part != "body")
    return f"{location}: {first.get('msg')}" if location else str(first.get("msg"))


def register_exception_handlers(app: FastAPI) -> None:
    """Translate domain errors into status codes with a `{message}` body."""

    @app.exception_handler(DomainError)
    async def domain_error_handler(_: Request, exc: DomainError):
        if exc.status_code >= 500:
            logger.error("dependency failure: %s", exc.message)
        return JSONResponse(status_code=exc.status_code, content={"message": exc.message})

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(_: Request, exc: RequestValidationError):
        return JSONResponse(status_code=400, content={"message": _first_error_message(exc)})

    @app.exception_handler(Exception)
    async def unhandled_error_handler(request: Request, exc: Exception):
        logger.error(
            "unhandled error on %s %s", request.method, request.url.path, exc_info=exc
        )
        return JSONResponse(status_code=500, content={"message": "Internal server error"})


def database_health(session_factory) -> JSONResponse:
    """Ping the database and report liveness for container probes."""

    timestamp = utcnow().isoformat()
    try:
        with session_factory() as db:
            db.execute(text("SELECT 1"))
    except Exception as exc:
        logger.warning("health check failed: %s", exc)
        return JSONResponse(
            status_code=503,
            content={"ok": False, "status": "unhealthy", "timestamp": timestamp},
        )
    return JSONResponse(content={"ok": True, "status": "healthy", "timestamp": timestamp})
