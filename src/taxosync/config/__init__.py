"""Application configuration helpers."""

from __future__ import annotations

from .env import env_flag, env_float, env_str
from .errors import ConfigurationError, InvalidConfigurationValueError
from .http_resilience import (
    SINGLE_ATTEMPT,
    CacheConfig,
    RateLimit,
    ResilienceConfig,
    RetryPolicy,
)
from .logging import configure_logging
from .storage import DatabaseConfig, StorageConfig, get_database_config, get_storage_config
from .vvf import VvfConfig, get_vvf_config

__all__ = [
    "SINGLE_ATTEMPT",
    "CacheConfig",
    "ConfigurationError",
    "DatabaseConfig",
    "InvalidConfigurationValueError",
    "RateLimit",
    "ResilienceConfig",
    "RetryPolicy",
    "StorageConfig",
    "VvfConfig",
    "configure_logging",
    "env_flag",
    "env_float",
    "env_str",
    "get_database_config",
    "get_storage_config",
    "get_vvf_config",
]
