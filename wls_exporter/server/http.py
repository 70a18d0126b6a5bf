"""HTTP server exposing the probe endpoint via FastAPI.

``GET /metrics`` runs one probe against the configured WebLogic instance and
renders the result in the Prometheus text format. A failed probe still
answers 200 with ``weblogic_probe_success 0`` and no other samples, so
Prometheus records the failure instead of a scrape error.
"""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from pathlib import Path
from typing import Any, Dict, List, Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse, Response
from prometheus_client import CONTENT_TYPE_LATEST
from pydantic import BaseModel, Field
from starlette.exceptions import HTTPException as StarletteHTTPException

from .. import __version__
from ..config.models import EnvSettings, ExporterConfig
from ..domain.models import Gauge
from ..errors import ProbeError
from ..observability import setup_logging
from ..utils.correlation import new_probe_id
from .app import WebLogicExporter
from .error_registry import ProbeErrorRegistry
from .exposition import render_metrics

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_PATH = "config.yaml"

__all__ = ["create_app", "load_exporter_config"]


class HealthResponse(BaseModel):
    """Simple health/readiness response model."""

    status: str


class ErrorResponse(BaseModel):
    """Structured JSON error response for HTTP endpoints.

    Fields
    ------
    detail: str
        Human-readable explanation of the error.
    error_type: str
        Machine-readable error classification.
    """

    detail: str = Field(..., description="Human-readable error detail")
    error_type: str = Field(..., description="Machine-readable error type")


def load_exporter_config(
    settings: EnvSettings, path: Optional[Path] = None
) -> ExporterConfig:
    """Load the exporter file and fill credentials from the environment.

    The file path is ``path`` if given, else ``WLS_EXPORTER_CONFIG``, else
    ``config.yaml`` in the working directory.
    """
    cfg_path = path or Path(settings.config or DEFAULT_CONFIG_PATH)
    config = ExporterConfig.load(cfg_path)
    updates: Dict[str, Any] = {}
    if not config.username and settings.username:
        updates["username"] = settings.username
    if not config.password and settings.password:
        updates["password"] = settings.password
    return config.model_copy(update=updates) if updates else config


def _register_health(app: FastAPI) -> None:
    """Register health and readiness endpoints."""

    @app.get(
        "/health",
        response_model=HealthResponse,
        summary="Liveness probe",
    )
    async def health() -> HealthResponse:
        return HealthResponse(status="ok")

    @app.get(
        "/ready",
        response_model=HealthResponse,
        summary="Readiness probe",
    )
    async def ready() -> HealthResponse:
        return HealthResponse(status="ready")


def _register_query(app: FastAPI, exporter: WebLogicExporter) -> None:
    """Register the search request diagnostics endpoint."""

    @app.get("/query", summary="Search request sent to WebLogic")
    async def query() -> Dict[str, Any]:
        return exporter.request_payload()


def _register_metrics(
    app: FastAPI, exporter: WebLogicExporter, registry: ProbeErrorRegistry
) -> None:
    """Register the probe endpoint."""

    @app.get("/metrics", summary="Probe WebLogic and expose its metrics")
    async def metrics() -> Response:
        probe_id = new_probe_id()
        gauges: List[Gauge] = []
        try:
            gauges = await exporter.probe()
        except ProbeError as exc:
            logger.debug(
                "probe.failed",
                extra={"probe_id": probe_id, "error_type": type(exc).__name__},
            )
            registry.record_failure(exporter.target, exc)
            body = render_metrics([], success=False)
        else:
            registry.record_success(exporter.target)
            body = render_metrics(gauges, success=True)
        return Response(content=body, media_type=CONTENT_TYPE_LATEST)


def create_app(
    config: Optional[ExporterConfig] = None,
    *,
    exporter: Optional[WebLogicExporter] = None,
) -> FastAPI:
    """Create and configure the FastAPI application.

    Parameters
    ----------
    config: Optional[ExporterConfig]
        Exporter configuration. Loaded from the environment-selected YAML
        file when neither ``config`` nor ``exporter`` is given.
    exporter: Optional[WebLogicExporter]
        Pre-built exporter (tests inject one with a mock transport).

    Raises
    ------
    ConfigurationError
        If the configuration cannot be loaded or is empty.
    """
    settings = EnvSettings()
    # Respect prior logging configuration from CLI; otherwise use env setting
    if not logging.getLogger().hasHandlers():
        setup_logging(settings.log_level)

    if exporter is None:
        exporter = WebLogicExporter(config or load_exporter_config(settings))
    error_registry = ProbeErrorRegistry()

    @asynccontextmanager
    async def lifespan(_app: FastAPI):
        logger.info("http.startup", extra={"target": exporter.target})
        await exporter.start()
        try:
            yield
        finally:
            logger.info("http.shutdown")
            await exporter.stop()

    app = FastAPI(title="WebLogic Exporter", version=__version__, lifespan=lifespan)
    app.state.exporter = exporter
    app.state.error_registry = error_registry

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(_request: Request, exc: Exception):
        err = ErrorResponse(detail=str(exc), error_type="validation_error")
        return JSONResponse(status_code=400, content={"detail": err.model_dump()})

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(_request: Request, exc: StarletteHTTPException):
        err = ErrorResponse(
            detail=str(exc.detail) or "HTTP error", error_type="http_error"
        )
        return JSONResponse(
            status_code=exc.status_code, content={"detail": err.model_dump()}
        )

    @app.exception_handler(Exception)
    async def unhandled_exception_handler(_request: Request, exc: Exception):
        # Avoid leaking internals; log server-side, return generic error
        logger.error("http.unhandled_exception", exc_info=exc)
        err = ErrorResponse(
            detail="Internal error. See server logs.",
            error_type="internal_server_error",
        )
        return JSONResponse(status_code=500, content={"detail": err.model_dump()})

    # Mark handlers as intentionally used (registered via decorators)
    _ = (
        validation_exception_handler,
        http_exception_handler,
        unhandled_exception_handler,
    )

    _register_health(app)
    _register_query(app, exporter)
    _register_metrics(app, exporter, error_registry)
    return app
