"""
Prominence HTTP Service
FastAPI application exposing palette extraction.
"""
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from prominence import __version__
from prominence.api.v1 import router as v1_router
from prominence.config import config
from prominence.schemas import HealthResponse
from prominence.utils.logging import configure_logging
from prominence.utils.metrics import get_metrics

configure_logging()

app = FastAPI(
    title="Prominence",
    description="Prominent color extraction: color-cut quantization and palette targets",
    version=__version__,
)

allowed_origins = config.allowed_origins()
if allowed_origins:
    app.add_middleware(
        CORSMiddleware,
        allow_origins=allowed_origins,
        allow_methods=["GET", "POST", "OPTIONS"],
        allow_headers=["*"],
    )

app.include_router(v1_router)


@app.get("/healthz", response_model=HealthResponse)
def health_check():
    """Liveness probe."""
    return HealthResponse(ok=True, version=__version__)


@app.get("/metrics")
def metrics_summary():
    """In-process counters and timings."""
    if not config.METRICS_ENABLED:
        return {"enabled": False}
    return get_metrics().get_summary()
