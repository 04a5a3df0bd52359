"""
Infrastructure configuration system.

Environment-based store backend selection with sensible defaults.
Defaults to a local SQLite file; Firestore when a service key is supplied.
"""

import json
import logging
import os
from dataclasses import dataclass
from typing import Any, Dict, Literal, Optional

from delivery.store import (
    FirestoreMessageLogStore,
    InMemoryMessageLogStore,
    MessageLogStore,
    SQLiteMessageLogStore,
)

logger = logging.getLogger(__name__)

StoreBackendType = Literal["sqlite", "firestore", "stub"]

REQUIRED_SERVICE_KEY_FIELDS = ("project_id", "client_email", "private_key")


class StoreConfigurationError(Exception):
    """Selected store backend cannot be built from the configuration."""
    pass


def parse_service_key(raw: Optional[str]) -> Optional[Dict[str, Any]]:
    """
    Parse a Firebase service account JSON string.

    Returns None (and logs) for missing, unparseable or incomplete keys.
    """
    if not raw:
        return None

    try:
        service_key = json.loads(raw)
    except json.JSONDecodeError as e:
        logger.error(f"SERVICE_KEY is not valid JSON: {e}")
        return None

    if not isinstance(service_key, dict):
        logger.error("SERVICE_KEY must be a JSON object")
        return None

    missing = [name for name in REQUIRED_SERVICE_KEY_FIELDS if not service_key.get(name)]
    if missing:
        logger.error(f"SERVICE_KEY is missing fields: {', '.join(missing)}")
        return None

    return service_key


def _env_flag(name: str, default: str) -> bool:
    return os.getenv(name, default).lower() in ("1", "true", "yes")


@dataclass
class StoreConfig:
    """Message log store configuration from environment."""

    store_backend: StoreBackendType
    collection_name: str
    sqlite_db_path: str
    service_key: Optional[str]
    firebase_project_id: Optional[str]
    serialize_per_message: bool

    @classmethod
    def from_env(cls) -> "StoreConfig":
        """Load configuration from environment variables."""
        return cls(
            store_backend=os.getenv("STORE_BACKEND", "sqlite").lower(),  # type: ignore
            collection_name=os.getenv("MESSAGE_LOG_COLLECTION", "whatsappLogs"),
            sqlite_db_path=os.getenv("SQLITE_DB_PATH", "./message_logs.db"),
            service_key=os.getenv("SERVICE_KEY") or None,
            firebase_project_id=os.getenv("FIREBASE_PROJECT_ID") or None,
            serialize_per_message=_env_flag("SERIALIZE_PER_MESSAGE", "true"),
        )

    def create_store(self) -> MessageLogStore:
        """Create message log store instance based on configuration."""
        if self.store_backend == "firestore":
            service_key = parse_service_key(self.service_key)
            if service_key is None:
                raise StoreConfigurationError(
                    "STORE_BACKEND=firestore requires a valid SERVICE_KEY"
                )
            return FirestoreMessageLogStore(
                collection_name=self.collection_name,
                service_key=service_key,
                project_id=self.firebase_project_id,
            )
        elif self.store_backend == "stub":
            return InMemoryMessageLogStore()
        elif self.store_backend == "sqlite":
            return SQLiteMessageLogStore(self.sqlite_db_path)
        else:
            logger.warning(
                f"Unknown STORE_BACKEND {self.store_backend!r}, using sqlite"
            )
            return SQLiteMessageLogStore(self.sqlite_db_path)


def get_config() -> StoreConfig:
    """Get store configuration from the environment."""
    return StoreConfig.from_env()
