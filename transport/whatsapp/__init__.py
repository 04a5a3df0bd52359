"""WhatsApp Transport Layer - Module Exports"""

from .normalize import (
    MalformedPayloadError,
    extract_status_error,
    extract_status_event,
)
from .schemas import StatusError, StatusEvent
from .security import verify_webhook_challenge

__all__ = [
    # Schemas
    "StatusEvent",
    "StatusError",
    # Normalization
    "extract_status_event",
    "extract_status_error",
    "MalformedPayloadError",
    # Security
    "verify_webhook_challenge",
]
