"""
Pytest configuration and shared fixtures for DropLedger tests.

This conftest.py:
1. Adds project root to sys.path for imports
2. Provides commonly-used fixtures via pytest's autodiscovery
3. Configures pytest markers and settings
"""

import sys
from pathlib import Path

import pytest

# =============================================================================
# Path Setup - Must happen before any local imports
# =============================================================================

# Get the project root (parent of tests/)
_PROJECT_ROOT = Path(__file__).resolve().parent.parent
_TESTS_ROOT = Path(__file__).resolve().parent

# Add both project root and tests root to sys.path
for _path in [str(_PROJECT_ROOT), str(_TESTS_ROOT)]:
    if _path not in sys.path:
        sys.path.insert(0, _path)

# =============================================================================
# Import fixtures using importlib (more robust for pytest loading)
# =============================================================================

import importlib

_common = importlib.import_module("fixtures.common")

make_account = _common.make_account
make_accounts = _common.make_accounts
make_balance_map = _common.make_balance_map
make_funded_registry = _common.make_funded_registry
claim_args = _common.claim_args


# =============================================================================
# Pytest Fixtures (autodiscovered by pytest)
# =============================================================================

@pytest.fixture
def owner():
    """Deployer / owner account."""
    return make_account("owner")


@pytest.fixture
def accounts():
    """Five distinct claimant accounts."""
    return make_accounts(5)


@pytest.fixture
def two_account_snapshot(accounts):
    """Snapshot for {A: 100, B: 101}."""
    a, b = accounts[:2]
    return make_balance_map({a: 100, b: 101}).snapshot


@pytest.fixture
def three_account_snapshot(accounts):
    """Snapshot for {A: 200, B: 300, C: 250} (total 0x2ee)."""
    a, b, c = accounts[:3]
    return make_balance_map({a: 200, b: 300, c: 250}).snapshot


@pytest.fixture(autouse=True)
def _isolate_env(monkeypatch, tmp_path):
    """Keep DROPLEDGER_* env vars and config files from leaking into tests."""
    for var in [
        "DROPLEDGER_CLAIM_KEY_POLICY",
        "DROPLEDGER_SNAPSHOT_PATH",
        "DROPLEDGER_API_HOST",
        "DROPLEDGER_API_PORT",
        "DROPLEDGER_LOG_LEVEL",
        "DROPLEDGER_LOG_FILE",
    ]:
        monkeypatch.delenv(var, raising=False)
    monkeypatch.chdir(tmp_path)


# =============================================================================
# Pytest Configuration
# =============================================================================

def pytest_configure(config):
    """Register custom markers."""
    config.addinivalue_line(
        "markers", "slow: marks tests as slow (deselect with '-m \"not slow\"')"
    )
    config.addinivalue_line(
        "markers", "integration: marks tests as integration tests"
    )
    config.addinivalue_line(
        "markers", "unit: marks tests as unit tests"
    )
