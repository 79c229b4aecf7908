"""
FastAPI application entry point.

Cron expression converter: describe expressions, preview their next
executions, and keep a registry of named expressions.

Optional API key authentication on /api/* (API_AUTH_ENABLED=true), checked
per request.
"""

import logging
import time
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import Depends, FastAPI, Request
from fastapi.responses import PlainTextResponse
from fastapi.routing import APIRoute
from fastapi.staticfiles import StaticFiles
from starlette.routing import Match

from cronops import __version__
from cronops.infra import metrics
from cronops.infra.settings import get_all_settings, get_static_dir, should_seed_presets
from cronops.registry import close_registry, init_registry

from .routers import convert, expressions
from .dependencies.auth import verify_api_key

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan manager.

    Opens the expression registry at startup and closes it at shutdown.
    """
    logger.debug(f"[API] Settings: {get_all_settings()}")
    registry = init_registry(seed_presets=should_seed_presets())
    existing = registry.count()
    if existing:
        metrics.cron_expressions_total.inc(existing)
    logger.info(f"[API] Registry ready with {existing} expressions")

    yield

    close_registry()


# Tag metadata for Swagger UI
tags_metadata = [
    {
        "name": "convert",
        "description": "Describe a cron expression and preview its next executions",
    },
    {
        "name": "expressions",
        "description": "Registry of named cron expressions - list, create, update, delete",
    },
]

app = FastAPI(
    title="Cron Expression Converter API",
    lifespan=lifespan,
    description="""
## Cron Expression Converter API

Turns five-field cron expressions (minute hour day-of-month month day-of-week)
into English descriptions and upcoming execution times.

### Authentication
When `API_AUTH_ENABLED=true`, all `/api/*` endpoints require an `X-API-Key`
header matching the `API_KEY` environment variable. `/health` and `/metrics`
are never authenticated.

### Usage
```bash
# Start server
uvicorn cronops.api.main:app --host 127.0.0.1 --port 8080

# Convert an expression
curl -X POST http://localhost:8080/api/convert \\
  -H "Content-Type: application/json" \\
  -d '{"expression": "0 9 * * 1-5"}'
```
    """,
    version=__version__,
    docs_url="/docs",
    redoc_url="/redoc",
    openapi_tags=tags_metadata,
)


def route_template(request: Request) -> Optional[str]:
    """Path template of the /api route serving this request, None for anything else."""
    for route in request.app.router.routes:
        if not isinstance(route, APIRoute) or not route.path.startswith("/api"):
            continue
        match, _ = route.matches(request.scope)
        if match == Match.FULL:
            return route.path
    return None


@app.middleware("http")
async def record_request_metrics(request: Request, call_next):
    """Count requests and observe latency per /api route template."""
    endpoint = route_template(request)
    if endpoint is None:
        return await call_next(request)

    start = time.perf_counter()
    status_code = 500
    try:
        response = await call_next(request)
        status_code = response.status_code
        return response
    finally:
        metrics.http_request_duration_seconds.observe(time.perf_counter() - start, endpoint=endpoint)
        metrics.http_requests_total.inc(endpoint=endpoint, status=str(status_code))


# Operational endpoints - NO authentication
@app.get("/health")
async def health_check():
    """Health check endpoint. Not authenticated."""
    return {"status": "ok", "version": __version__}


@app.get("/metrics", response_class=PlainTextResponse)
async def metrics_endpoint():
    """Prometheus text exposition of request and expression counters."""
    return PlainTextResponse(
        metrics.REGISTRY.export(),
        media_type="text/plain; version=0.0.4; charset=utf-8",
    )


# /api routers carry the key check; it is a no-op while auth is disabled
auth_dependency = [Depends(verify_api_key)]

app.include_router(
    convert.router, prefix="/api", tags=["convert"], dependencies=auth_dependency
)
app.include_router(
    expressions.router, prefix="/api/expressions", tags=["expressions"], dependencies=auth_dependency
)

# Front page; mounted last so it never shadows API routes
_static_dir = get_static_dir()
if _static_dir.is_dir():
    app.mount("/", StaticFiles(directory=str(_static_dir), html=True), name="static")
else:
    logger.info(f"[API] Static directory not found, front page disabled: {_static_dir}")


if __name__ == "__main__":
    import uvicorn
    from cronops.infra.settings import get_host, get_port
    uvicorn.run(app, host=get_host(), port=get_port())
