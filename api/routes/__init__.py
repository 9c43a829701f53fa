"""API route handlers."""

from api.routes import health, claims, verify

__all__ = ["health", "claims", "verify"]
