"""
WhatsApp Transport Layer - Pydantic Schemas

PURE DATA MODELS - NO LOGIC
Defines the normalized status event extracted from status webhooks.
"""

from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field


class StatusError(BaseModel):
    """First entry of a status' errors list (failed deliveries)."""

    model_config = ConfigDict(frozen=True)

    code: Optional[Any] = Field(None, description="Provider error code, e.g. 131026")
    message: Optional[str] = Field(None, description="Provider error title/message")
    details: Optional[str] = Field(None, description="error_data.details, if sent")


class StatusEvent(BaseModel):
    """
    Normalized delivery-status transition for one sent message.

    Exists only for the duration of one webhook request.
    Fields other than message_id are read permissively and may be None.
    """

    model_config = ConfigDict(frozen=True)

    message_id: str = Field(..., description="WhatsApp message ID (wamid.*)")
    recipient_id: Optional[str] = Field(None, description="Recipient WhatsApp ID")
    status: Optional[str] = Field(
        None,
        description="Provider status, opaque: sent, delivered, read, failed, ...",
    )
    timestamp: Optional[Any] = Field(
        None,
        description="Unix seconds as sent by the provider (usually a string)",
    )
    error: Optional[StatusError] = None
