"""
Module 08 - Health Check Route

Simple health check endpoint for liveness probes.
"""

from pathlib import Path

from fastapi import APIRouter, Depends

from api.deps import get_runtime_config
from api.models.responses import HealthResponse
from core.config import RuntimeConfig


router = APIRouter(tags=["health"])


def _health(config: RuntimeConfig) -> HealthResponse:
    path = config.api.snapshot_path
    return HealthResponse(
        ok=True,
        service="dropledger-api",
        version="v1",
        snapshot_loaded=bool(path) and Path(path).exists(),
    )


@router.get("/health", response_model=HealthResponse)
async def health_check(config: RuntimeConfig = Depends(get_runtime_config)) -> HealthResponse:
    """
    Health check endpoint.

    Returns service status for liveness probes.
    """
    return _health(config)


@router.get("/", response_model=HealthResponse)
async def root(config: RuntimeConfig = Depends(get_runtime_config)) -> HealthResponse:
    """
    Root endpoint - same as health check.
    """
    return _health(config)
