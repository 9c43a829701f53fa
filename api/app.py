"""
Module 08 - FastAPI Application

Main application setup and configuration.

Usage:
    DROPLEDGER_SNAPSHOT_PATH=snapshot.json uvicorn api.app:app --reload

    # Or run directly
    python -m api.app
"""

import logging
import os

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from api.routes import health, claims, verify
from api.errors import (
    APIError,
    api_error_handler,
    dropledger_error_handler,
    generic_error_handler,
)
from core.schemas.errors import DropLedgerException


# Configure logging, respecting DROPLEDGER_LOG_LEVEL
def _resolve_log_level() -> int:
    raw = os.getenv("DROPLEDGER_LOG_LEVEL", "INFO")
    return getattr(logging, raw.upper(), logging.INFO)


logging.basicConfig(
    level=_resolve_log_level(),
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
)


def create_app() -> FastAPI:
    """Create and configure the FastAPI application."""

    app = FastAPI(
        title="DropLedger API",
        description="""
Read-only HTTP API over a Merkle distribution snapshot.

## Endpoints

- **GET /health** - Health check
- **GET /snapshot** - Root, token total and claim count
- **GET /claims/{account}** - Index, amount, proof and flags for one account
- **POST /verify** - Check a claim against the snapshot root

The snapshot file is named by `api.snapshot_path` in the config file or
the `DROPLEDGER_SNAPSHOT_PATH` environment variable.
        """,
        version="0.1.0",
        docs_url="/docs",
        redoc_url="/redoc",
    )

    # Add CORS middleware
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Register exception handlers
    app.add_exception_handler(APIError, api_error_handler)
    app.add_exception_handler(DropLedgerException, dropledger_error_handler)
    app.add_exception_handler(Exception, generic_error_handler)

    # Include routers
    app.include_router(health.router)
    app.include_router(claims.router)
    app.include_router(verify.router)

    return app


# Create the application instance
app = create_app()


if __name__ == "__main__":
    import uvicorn
    from core.config import load_config

    api_config = load_config().api
    uvicorn.run(app, host=api_config.host, port=api_config.port)
