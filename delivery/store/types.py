"""
Message log store types and errors.

Documents are plain field dicts plus the identity and version token
assigned by the backing store.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, Optional


class StoreError(Exception):
    """Message log store operation failed."""
    pass


class StoreUnavailableError(StoreError):
    """Store could not be reached."""
    pass


class DocumentNotFoundError(StoreError):
    """Update targeted a document identity that does not exist."""
    pass


class StaleDocumentError(StoreError):
    """Document changed between read and conditional update."""
    pass


@dataclass
class MessageLogDocument:
    """A message log record as read from the store."""

    document_id: str
    data: Dict[str, Any] = field(default_factory=dict)
    version: Optional[Any] = None     # Opaque; passed back for conditional updates

    @property
    def message_id(self) -> Optional[str]:
        return self.data.get("messageId")

    @property
    def checkout_id(self) -> Any:
        return self.data.get("checkoutId")
