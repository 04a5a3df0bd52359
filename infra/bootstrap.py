"""
Infrastructure initialization and bootstrap.

Singleton holding the process-wide store client and the reconciler
that shares it across concurrent requests.
"""

import threading
from typing import Optional

from config import Config
from delivery.reconciler import StatusReconciler
from delivery.store import MessageLogStore

from .config import StoreConfig, get_config

# Serialises first construction; requests resolve the dependency in worker threads
_INSTANCE_LOCK = threading.Lock()


class InfraBootstrap:
    """
    Bootstrap infrastructure based on configuration.

    Singleton pattern - single instance per process.
    """

    _instance: Optional["InfraBootstrap"] = None

    def __init__(
        self,
        config: Optional[StoreConfig] = None,
        store: Optional[MessageLogStore] = None,
    ):
        """
        Initialize bootstrap with configuration.

        Args:
            config: Store configuration (defaults to environment)
            store: Ready store instance, skips building one from config
        """
        self.config = config or get_config()
        self.store = store or self.config.create_store()
        self.reconciler = StatusReconciler(
            self.store,
            display_timezone=Config.DISPLAY_TIMEZONE,
            serialize_per_message=self.config.serialize_per_message,
        )

    @classmethod
    def get_instance(cls, config: Optional[StoreConfig] = None) -> "InfraBootstrap":
        """
        Get singleton instance.

        Args:
            config: Optional custom configuration (only used first time)

        Returns:
            Singleton InfraBootstrap instance
        """
        if cls._instance is None:
            with _INSTANCE_LOCK:
                if cls._instance is None:
                    cls._instance = cls(config)
        return cls._instance

    @classmethod
    def reset(cls):
        """Reset singleton (for testing)."""
        with _INSTANCE_LOCK:
            cls._instance = None

    def get_store(self) -> MessageLogStore:
        """Get message log store."""
        return self.store

    def get_reconciler(self) -> StatusReconciler:
        """Get status reconciler."""
        return self.reconciler

    def __repr__(self) -> str:
        """String representation showing configured backend."""
        return (
            f"InfraBootstrap(store={self.store.backend_name}, "
            f"collection={self.config.collection_name}, "
            f"serialize_per_message={self.config.serialize_per_message})"
        )


def bootstrap_infrastructure(config: Optional[StoreConfig] = None) -> InfraBootstrap:
    """
    Bootstrap the message log store and reconciler.

    Args:
        config: Optional custom configuration

    Returns:
        InfraBootstrap instance with store and reconciler initialized
    """
    return InfraBootstrap.get_instance(config)
