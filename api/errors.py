"""
Module 08 - API Error Handling

Standardized error handling for the API.
"""

from typing import Any

from fastapi import Request
from fastapi.responses import JSONResponse

from api.models.responses import ErrorResponse, ErrorDetail
from core.schemas.errors import DropLedgerException


class APIError(Exception):
    """Base API error with structured response."""

    def __init__(
        self,
        code: str,
        message: str,
        status_code: int = 400,
        details: dict[str, Any] | None = None,
    ):
        self.code = code
        self.message = message
        self.status_code = status_code
        self.details = details or {}
        super().__init__(message)

    def to_response(self) -> ErrorResponse:
        return ErrorResponse(
            ok=False,
            error=ErrorDetail(
                code=self.code,
                message=self.message,
                details=self.details,
            ),
        )


class ClaimNotFoundError(APIError):
    """No claim record for the requested account."""

    def __init__(self, account: str):
        super().__init__(
            code="CLAIM_NOT_FOUND",
            message=f"No claim for {account}",
            status_code=404,
            details={"account": account},
        )


class SnapshotUnavailableError(APIError):
    """No snapshot configured, or the configured one cannot be read."""

    def __init__(self, message: str, details: dict[str, Any] | None = None):
        super().__init__(
            code="SNAPSHOT_UNAVAILABLE",
            message=message,
            status_code=503,
            details=details,
        )


async def api_error_handler(request: Request, exc: APIError) -> JSONResponse:
    """Handle APIError exceptions."""
    return JSONResponse(
        status_code=exc.status_code,
        content=exc.to_response().model_dump(),
    )


async def dropledger_error_handler(request: Request, exc: DropLedgerException) -> JSONResponse:
    """Domain errors (bad address, malformed proof, ...) are client errors."""
    model = exc.to_error_model()
    return JSONResponse(
        status_code=400,
        content=ErrorResponse(
            ok=False,
            error=ErrorDetail(code=model.code, message=model.message, details=model.details),
        ).model_dump(),
    )


async def generic_error_handler(request: Request, exc: Exception) -> JSONResponse:
    """Handle unexpected exceptions."""
    return JSONResponse(
        status_code=500,
        content=ErrorResponse(
            ok=False,
            error=ErrorDetail(
                code="INTERNAL_ERROR",
                message="An unexpected error occurred",
                details={"type": type(exc).__name__},
            ),
        ).model_dump(),
    )
