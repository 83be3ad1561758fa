"""TerangaBuild JSON API."""

from __future__ import annotations

from contextlib import asynccontextmanager
from uuid import uuid4

import structlog
from fastapi import FastAPI, HTTPException, Request
from fastapi.responses import JSONResponse
from prometheus_fastapi_instrumentator import Instrumentator
from starlette.middleware.base import BaseHTTPMiddleware

from terangabuild import __version__
from terangabuild.core.logging import configure_logging
from terangabuild.web.dependencies import close_service
from terangabuild.web.routes import checklist, expenses, health, projects, users

# Initialize structured logging
configure_logging()
logger = structlog.get_logger()


@asynccontextmanager
async def lifespan(app: FastAPI):
    yield
    await close_service()


app = FastAPI(
    title="TerangaBuild API",
    description="Construction project tracking: progress, schedule delay, checklist and expenses",
    version=__version__,
    docs_url="/docs",
    redoc_url="/redoc",
    lifespan=lifespan,
)


# Request Logging Middleware
class RequestLoggingMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next):
        structlog.contextvars.clear_contextvars()

        request_id = request.headers.get("X-Request-ID", str(uuid4()))
        structlog.contextvars.bind_contextvars(request_id=request_id)

        logger.info(
            "request_started",
            method=request.method,
            path=request.url.path,
            client_ip=request.client.host if request.client else None,
        )

        try:
            response = await call_next(request)
        except Exception as exc:
            logger.error("request_failed", error=str(exc))
            raise

        logger.info("request_completed", status_code=response.status_code)
        response.headers["X-Request-ID"] = request_id
        return response


app.add_middleware(RequestLoggingMiddleware)

# Prometheus Metrics
Instrumentator().instrument(app).expose(app)


@app.exception_handler(HTTPException)
async def http_exception_handler(request: Request, exc: HTTPException):
    return JSONResponse(status_code=exc.status_code, content={"detail": exc.detail})


# Include Routers
app.include_router(health.router)
app.include_router(projects.router)
app.include_router(checklist.router)
app.include_router(expenses.router)
app.include_router(users.router)
