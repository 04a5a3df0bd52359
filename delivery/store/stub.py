"""
In-memory message log stores for testing and local runs.

Deterministic, no external dependencies.
"""

import copy
import threading
from typing import Any, Dict, List, Optional
from uuid import uuid4

from delivery.store.base import MessageLogStore
from delivery.store.types import (
    DocumentNotFoundError,
    MessageLogDocument,
    StaleDocumentError,
    StoreUnavailableError,
)


class InMemoryMessageLogStore(MessageLogStore):
    """
    Dict-backed fake document store.

    Properties:
    - Insertion order is query order
    - Every write bumps an integer version per document
    - Returned documents are copies; mutating them never touches storage
    - Records every update call in `updates` for assertions
    """

    backend_name = "stub"

    def __init__(self):
        self.documents: Dict[str, Dict[str, Any]] = {}
        self.versions: Dict[str, int] = {}
        self.updates: List[Dict[str, Any]] = []
        self._lock = threading.RLock()

    def find_by_field(
        self, field: str, value: Any, limit: Optional[int] = None
    ) -> List[MessageLogDocument]:
        with self._lock:
            matches = [
                MessageLogDocument(
                    document_id=doc_id,
                    data=copy.deepcopy(data),
                    version=self.versions[doc_id],
                )
                for doc_id, data in self.documents.items()
                if field in data and data[field] == value
            ]
        if limit is not None:
            matches = matches[:limit]
        return matches

    def update(
        self,
        document_id: str,
        fields: Dict[str, Any],
        expected_version: Optional[Any] = None,
    ) -> None:
        with self._lock:
            if document_id not in self.documents:
                raise DocumentNotFoundError(f"No document {document_id}")
            if expected_version is not None and self.versions[document_id] != expected_version:
                raise StaleDocumentError(
                    f"Document {document_id} is at version "
                    f"{self.versions[document_id]}, expected {expected_version}"
                )
            self.documents[document_id].update(copy.deepcopy(fields))
            self.versions[document_id] += 1
            self.updates.append({"document_id": document_id, "fields": dict(fields)})

    def create(self, fields: Dict[str, Any]) -> str:
        document_id = uuid4().hex
        with self._lock:
            self.documents[document_id] = copy.deepcopy(fields)
            self.versions[document_id] = 1
        return document_id

    def get(self, document_id: str) -> Optional[Dict[str, Any]]:
        """Return a copy of the stored fields (test helper)."""
        with self._lock:
            data = self.documents.get(document_id)
            return copy.deepcopy(data) if data is not None else None


class DisabledMessageLogStore(MessageLogStore):
    """
    Store that is always down.

    Used to verify that store outages turn into retryable webhook responses.
    """

    backend_name = "disabled"

    def find_by_field(
        self, field: str, value: Any, limit: Optional[int] = None
    ) -> List[MessageLogDocument]:
        raise StoreUnavailableError("Message log store is disabled")

    def update(
        self,
        document_id: str,
        fields: Dict[str, Any],
        expected_version: Optional[Any] = None,
    ) -> None:
        raise StoreUnavailableError("Message log store is disabled")

    def create(self, fields: Dict[str, Any]) -> str:
        raise StoreUnavailableError("Message log store is disabled")
