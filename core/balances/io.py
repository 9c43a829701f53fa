"""
Module 04 - Balance Map Builder
File: io.py

Purpose: Read builder input documents and read/write snapshot documents.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any

from pydantic import ValidationError

from core.schemas.snapshot import DistributionSnapshot


logger = logging.getLogger(__name__)


class SnapshotIOError(Exception):
    """Error reading or writing a snapshot or balance document."""
    pass


def _read_json(path: Path) -> Any:
    if not path.exists():
        raise SnapshotIOError(f"File not found: {path}")
    try:
        return json.loads(path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as e:
        raise SnapshotIOError(f"Invalid JSON in {path}: {e}") from e


def load_balance_input(path: str | Path) -> Any:
    """Decoded builder input (mapping or record list); shape is checked by the parser."""
    data = _read_json(Path(path))
    if not isinstance(data, (dict, list)):
        raise SnapshotIOError(f"Invalid JSON: {path} must hold an object or a list")
    return data


def save_balance_input(data: Any, path: str | Path) -> Path:
    """Write builder input as indented JSON."""
    path = Path(path)
    path.write_text(json.dumps(data, indent=2) + "\n", encoding="utf-8")
    return path


def save_snapshot(snapshot: DistributionSnapshot, path: str | Path, *, indent: int | None = None) -> Path:
    """
    Write a snapshot document.

    Canonical (compact, sorted) JSON by default so that identical snapshots
    produce identical files.
    """
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(snapshot.to_json(indent=indent), encoding="utf-8")
    logger.info(f"Wrote snapshot {snapshot.merkle_root} ({len(snapshot.claims)} claims) to {path}")
    return path


def load_snapshot(path: str | Path) -> DistributionSnapshot:
    """
    Read and validate a snapshot document.

    Raises:
        SnapshotIOError: If the file is missing, not JSON, or not a snapshot
    """
    data = _read_json(Path(path))
    try:
        return DistributionSnapshot.model_validate(data)
    except ValidationError as e:
        raise SnapshotIOError(f"Invalid snapshot document {path}: {e}") from e
