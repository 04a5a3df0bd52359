"""
Abstract message log store interface.

The reconciler depends only on this interface, not on specific backends.
"""

from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional

from delivery.store.types import MessageLogDocument


class MessageLogStore(ABC):
    """
    Minimal document store boundary.

    Key properties:
    - Equality query on a single field
    - Partial update by document identity
    - Failures raise StoreError subclasses (the caller decides the outcome)
    - Single-document updates are atomic; nothing spans two calls
    """

    backend_name: str = "abstract"

    @abstractmethod
    def find_by_field(
        self, field: str, value: Any, limit: Optional[int] = None
    ) -> List[MessageLogDocument]:
        """
        Return documents whose `field` equals `value`, in store order.

        Args:
            field: Top-level field name (e.g. "messageId")
            value: Value to match
            limit: Maximum number of documents to return (None = all)

        Raises:
            StoreError: Query could not be executed
        """
        raise NotImplementedError

    @abstractmethod
    def update(
        self,
        document_id: str,
        fields: Dict[str, Any],
        expected_version: Optional[Any] = None,
    ) -> None:
        """
        Merge `fields` into an existing document. Other fields are untouched.

        Args:
            document_id: Store-assigned identity
            fields: Field values to set (None clears a field to null)
            expected_version: If given, update only when the document still
                carries this version token

        Raises:
            DocumentNotFoundError: No document with this identity
            StaleDocumentError: Version token no longer matches
            StoreError: Update could not be executed
        """
        raise NotImplementedError

    @abstractmethod
    def create(self, fields: Dict[str, Any]) -> str:
        """
        Insert a new document and return its identity.

        Raises:
            StoreError: Insert could not be executed
        """
        raise NotImplementedError
