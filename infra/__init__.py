"""
Infrastructure module exports.

Configuration and bootstrap for the message log store.
"""

from .config import (
    StoreConfig,
    StoreBackendType,
    StoreConfigurationError,
    get_config,
    parse_service_key,
)
from .bootstrap import InfraBootstrap, bootstrap_infrastructure

__all__ = [
    "StoreConfig",
    "StoreBackendType",
    "StoreConfigurationError",
    "get_config",
    "parse_service_key",
    "InfraBootstrap",
    "bootstrap_infrastructure",
]
