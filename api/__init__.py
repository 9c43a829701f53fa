"""
Module 08 - Snapshot API (FastAPI)

Read-only HTTP API over a published distribution snapshot:
- GET /health - Health check
- GET /snapshot - Root, total and claim count
- GET /claims/{account} - One account's claim record
- POST /verify - Check a claim against the snapshot root

Usage:
    DROPLEDGER_SNAPSHOT_PATH=snapshot.json uvicorn api.app:app --reload
"""

__version__ = "0.1.0"
