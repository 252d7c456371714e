"""FastAPI application factory"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from prometheus_client import generate_latest, CONTENT_TYPE_LATEST
from starlette.responses import Response

from khata_ledger.api.dependencies import get_request_id
from khata_ledger.api.middleware import RequestIDMiddleware, MetricsMiddleware
from khata_ledger.api.v1 import auth, ledger
from khata_ledger.config import settings
from khata_ledger.domain.exceptions import DomainException, Forbidden, InternalFailure
from khata_ledger.infrastructure.database.session import create_tables
from khata_ledger.infrastructure.observability.logging import log_denial, setup_logging
from khata_ledger.infrastructure.observability.metrics import authorization_denied_counter

# Setup structured logging
setup_logging(settings.log_level, settings.service_name)


@asynccontextmanager
async def lifespan(app: FastAPI):
    create_tables()
    yield


async def domain_exception_handler(request: Request, exc: DomainException) -> JSONResponse:
    """Render domain failures as {"error": ...} with the status they carry"""
    request_id = get_request_id(request)

    if isinstance(exc, Forbidden):
        route = request.scope.get("route")
        operation = getattr(route, "name", "unknown")
        authorization_denied_counter.labels(operation=operation).inc()
        log_denial(request_id, getattr(request.state, "caller", "unknown"), operation, request.url.path)
    elif isinstance(exc, InternalFailure):
        logging.error(f"Internal failure: {exc.__cause__!r}", extra={"request_id": request_id})

    return JSONResponse(status_code=exc.status_code, content={"error": exc.message})


async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Malformed bodies and query parameters are client errors (400)"""
    errors = exc.errors()
    if errors:
        first = errors[0]
        location = ".".join(str(part) for part in first.get("loc", ()) if part != "body")
        message = f"Invalid {location}: {first.get('msg')}" if location else first.get("msg")
    else:
        message = "Invalid request"
    return JSONResponse(status_code=400, content={"error": message})


async def unexpected_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Anything the domain did not anticipate becomes an opaque 500"""
    logging.error(f"Unexpected error: {exc!r}", extra={"request_id": get_request_id(request)})
    return JSONResponse(status_code=500, content={"error": InternalFailure.default_message})


def create_app() -> FastAPI:
    """Create and configure FastAPI application"""
    app = FastAPI(
        title="Khata Ledger",
        description="Credit and payment ledger between businesses and their customers",
        version="0.1.0",
        docs_url="/docs",
        redoc_url="/redoc",
        lifespan=lifespan,
    )

    # Add middleware (order matters: last added = first executed)
    app.add_middleware(MetricsMiddleware)
    app.add_middleware(RequestIDMiddleware)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.add_exception_handler(DomainException, domain_exception_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)
    app.add_exception_handler(Exception, unexpected_exception_handler)

    # Health check endpoint
    @app.get("/health")
    def health_check():
        return {"status": "ok", "service": settings.service_name}

    # Prometheus metrics endpoint
    @app.get("/metrics")
    def metrics():
        return Response(content=generate_latest(), media_type=CONTENT_TYPE_LATEST)

    # Register API routers
    app.include_router(auth.router, prefix="/api", tags=["auth"])
    app.include_router(ledger.router, prefix="/api", tags=["ledger"])

    return app


app = create_app()
