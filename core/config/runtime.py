"""
Runtime Configuration

Central configuration for the balance-map builder, the claim registry,
the snapshot API and logging.
"""

from __future__ import annotations

import copy
import json
import os
from dataclasses import asdict, dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any, Optional

import yaml
from dotenv import load_dotenv

load_dotenv()


# Environment variable prefix
ENV_PREFIX = "DROPLEDGER_"


class ClaimKeyPolicy(str, Enum):
    """
    How the registry keys its claimed-amount accounting.

    ACCOUNT keys by keccak256(account), stable across root updates that
    reshuffle indices. INDEX keys by leaf index.
    """
    ACCOUNT = "account"
    INDEX = "index"


DEFAULT_FLAG_REASONS: dict[str, str] = {
    "isSOCKS": "socks",
    "isLP": "lp",
    "isUser": "user",
}


@dataclass
class BuilderConfig:
    """Configuration for the balance-map builder."""
    # flag name -> keyword searched for in an entry's reasons string
    flag_reasons: dict[str, str] = field(default_factory=lambda: dict(DEFAULT_FLAG_REASONS))


@dataclass
class RegistryConfig:
    """Configuration for the claim registry."""
    claim_key_policy: ClaimKeyPolicy = ClaimKeyPolicy.ACCOUNT

    def __post_init__(self):
        if not isinstance(self.claim_key_policy, ClaimKeyPolicy):
            self.claim_key_policy = ClaimKeyPolicy(str(self.claim_key_policy).lower())


@dataclass
class ApiConfig:
    """Configuration for the snapshot HTTP API."""
    snapshot_path: Optional[str] = None
    host: str = "0.0.0.0"
    port: int = 8000


@dataclass
class LoggingConfig:
    """Logging settings."""
    log_level: str = "INFO"
    log_file: Optional[str] = None


@dataclass
class RuntimeConfig:
    """
    Complete runtime configuration.

    Can be loaded from:
    - Environment variables
    - YAML or JSON file
    - Programmatic construction
    """
    builder: BuilderConfig = field(default_factory=BuilderConfig)
    registry: RegistryConfig = field(default_factory=RegistryConfig)
    api: ApiConfig = field(default_factory=ApiConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)
    extra: dict[str, Any] = field(default_factory=dict)

    @staticmethod
    def _get_env_overrides() -> dict[str, Any]:
        """
        Get configuration overrides from environment variables.

        This is the SINGLE source of truth for all env var reading.

        Supported variables:
        - DROPLEDGER_CLAIM_KEY_POLICY: "account" or "index"
        - DROPLEDGER_SNAPSHOT_PATH: snapshot served by the API
        - DROPLEDGER_API_HOST / DROPLEDGER_API_PORT
        - DROPLEDGER_LOG_LEVEL / DROPLEDGER_LOG_FILE
        """
        overrides: dict[str, Any] = {}

        if os.getenv(f"{ENV_PREFIX}CLAIM_KEY_POLICY"):
            overrides.setdefault("registry", {})["claim_key_policy"] = os.getenv(
                f"{ENV_PREFIX}CLAIM_KEY_POLICY"
            )

        if os.getenv(f"{ENV_PREFIX}SNAPSHOT_PATH"):
            overrides.setdefault("api", {})["snapshot_path"] = os.getenv(f"{ENV_PREFIX}SNAPSHOT_PATH")
        if os.getenv(f"{ENV_PREFIX}API_HOST"):
            overrides.setdefault("api", {})["host"] = os.getenv(f"{ENV_PREFIX}API_HOST")
        if os.getenv(f"{ENV_PREFIX}API_PORT"):
            overrides.setdefault("api", {})["port"] = int(os.getenv(f"{ENV_PREFIX}API_PORT", "8000"))

        if os.getenv(f"{ENV_PREFIX}LOG_LEVEL"):
            overrides.setdefault("logging", {})["log_level"] = os.getenv(f"{ENV_PREFIX}LOG_LEVEL")
        if os.getenv(f"{ENV_PREFIX}LOG_FILE"):
            overrides.setdefault("logging", {})["log_file"] = os.getenv(f"{ENV_PREFIX}LOG_FILE")

        return overrides

    @classmethod
    def from_env(cls) -> "RuntimeConfig":
        """Load configuration purely from environment variables."""
        return cls.from_dict(cls._get_env_overrides())

    @classmethod
    def from_yaml(cls, path: str | Path) -> "RuntimeConfig":
        """Load configuration from a YAML file."""
        path = Path(path)
        if not path.exists():
            raise FileNotFoundError(f"Config file not found: {path}")

        with open(path) as f:
            data = yaml.safe_load(f) or {}

        return cls.from_dict(data)

    @classmethod
    def from_json(cls, path: str | Path) -> "RuntimeConfig":
        """Load configuration from a JSON file."""
        path = Path(path)
        if not path.exists():
            raise FileNotFoundError(f"Config file not found: {path}")

        with open(path) as f:
            data = json.load(f)

        return cls.from_dict(data)

    @classmethod
    def from_file(cls, path: str | Path) -> "RuntimeConfig":
        """Load from YAML (.yaml/.yml) or JSON (anything else)."""
        path = Path(path)
        if path.suffix.lower() in (".yaml", ".yml"):
            return cls.from_yaml(path)
        return cls.from_json(path)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "RuntimeConfig":
        """Load configuration from a dictionary (supports partial data)."""
        builder_data = data.get("builder", {})
        registry_data = data.get("registry", {})
        api_data = data.get("api", {})
        logging_data = data.get("logging", {})

        builder = BuilderConfig(**builder_data) if builder_data else BuilderConfig()
        registry = RegistryConfig(**registry_data) if registry_data else RegistryConfig()
        api = ApiConfig(**api_data) if api_data else ApiConfig()
        log_cfg = LoggingConfig(**logging_data) if logging_data else LoggingConfig()

        return cls(
            builder=builder,
            registry=registry,
            api=api,
            logging=log_cfg,
            extra=data.get("extra", {}),
        )

    def with_env_overrides(self) -> "RuntimeConfig":
        """
        Return a new config with environment variable overrides applied.

        Allows loading from a config file first, then overlaying env vars.
        """
        overrides = self._get_env_overrides()
        if not overrides:
            return self

        new_config = copy.deepcopy(self)

        if "registry" in overrides:
            for key, value in overrides["registry"].items():
                setattr(new_config.registry, key, value)
            new_config.registry.__post_init__()

        if "api" in overrides:
            for key, value in overrides["api"].items():
                setattr(new_config.api, key, value)

        if "logging" in overrides:
            for key, value in overrides["logging"].items():
                setattr(new_config.logging, key, value)

        return new_config

    def to_dict(self) -> dict[str, Any]:
        """Plain-dict form, suitable for `config --show` and templates."""
        data = asdict(self)
        data["registry"]["claim_key_policy"] = self.registry.claim_key_policy.value
        return data


def get_default_config_template() -> str:
    """YAML template written by `dropledger config --init`."""
    return yaml.safe_dump(RuntimeConfig().to_dict(), sort_keys=False)


def load_config(path: str | Path | None = None) -> RuntimeConfig:
    """
    Load configuration from a file (if given or found), then overlay env vars.

    Search order when no path is given:
      1. ./dropledger.yaml
      2. ./dropledger.json
      3. ~/.config/dropledger/config.yaml
    """
    if path is not None:
        return RuntimeConfig.from_file(path).with_env_overrides()

    search_paths = [
        Path.cwd() / "dropledger.yaml",
        Path.cwd() / "dropledger.json",
        Path.home() / ".config" / "dropledger" / "config.yaml",
    ]
    for candidate in search_paths:
        if candidate.exists():
            return RuntimeConfig.from_file(candidate).with_env_overrides()

    return RuntimeConfig().with_env_overrides()
