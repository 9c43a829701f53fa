"""
Runtime Configuration Module

Provides configuration loading and management for dropledger.
"""

from .runtime import (
    ApiConfig,
    BuilderConfig,
    ClaimKeyPolicy,
    DEFAULT_FLAG_REASONS,
    LoggingConfig,
    RegistryConfig,
    RuntimeConfig,
    get_default_config_template,
    load_config,
)

__all__ = [
    "ApiConfig",
    "BuilderConfig",
    "ClaimKeyPolicy",
    "DEFAULT_FLAG_REASONS",
    "LoggingConfig",
    "RegistryConfig",
    "RuntimeConfig",
    "get_default_config_template",
    "load_config",
]
