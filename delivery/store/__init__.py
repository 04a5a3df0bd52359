"""
Message log store exports.

The reconciler depends only on MessageLogStore, never on a backend.
"""

from delivery.store.base import MessageLogStore
from delivery.store.stub import InMemoryMessageLogStore, DisabledMessageLogStore
from delivery.store.sqlite import SQLiteMessageLogStore
from delivery.store.firestore import FirestoreMessageLogStore
from delivery.store.types import (
    MessageLogDocument,
    StoreError,
    StoreUnavailableError,
    DocumentNotFoundError,
    StaleDocumentError,
)

__all__ = [
    "MessageLogStore",
    "InMemoryMessageLogStore",
    "DisabledMessageLogStore",
    "SQLiteMessageLogStore",
    "FirestoreMessageLogStore",
    "MessageLogDocument",
    "StoreError",
    "StoreUnavailableError",
    "DocumentNotFoundError",
    "StaleDocumentError",
]
