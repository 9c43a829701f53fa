"""
Module 08 - API Dependencies

Dependency injection for the API: runtime config and the served snapshot.
"""

from __future__ import annotations

import logging
from typing import Optional

from fastapi import Depends

from api.errors import SnapshotUnavailableError
from core.balances import SnapshotIOError, load_snapshot
from core.config import RuntimeConfig, load_config
from core.schemas.snapshot import DistributionSnapshot

logger = logging.getLogger(__name__)


def get_runtime_config() -> RuntimeConfig:
    """
    Load RuntimeConfig from config file, then overlay environment variables.

    The .env file is loaded automatically by core.config.runtime on import.
    """
    return load_config()


def get_snapshot(config: RuntimeConfig = Depends(get_runtime_config)) -> DistributionSnapshot:
    """
    The snapshot named by api.snapshot_path / DROPLEDGER_SNAPSHOT_PATH.

    Read on every request so that a regenerated file is picked up without
    a restart.
    """
    path: Optional[str] = config.api.snapshot_path
    if not path:
        raise SnapshotUnavailableError(
            "No snapshot configured (set api.snapshot_path or DROPLEDGER_SNAPSHOT_PATH)"
        )
    try:
        return load_snapshot(path)
    except SnapshotIOError as e:
        logger.error(f"Failed to load snapshot: {e}")
        raise SnapshotUnavailableError(str(e), details={"path": path}) from e
