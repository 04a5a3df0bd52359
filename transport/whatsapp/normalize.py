"""
WhatsApp Status Normalization

PURE CONVERSION - NO I/O

Extracts the delivery-status event from a raw WhatsApp webhook payload:
    entry[0].changes[0].value.statuses[0]

Navigation is permissive. A missing `entry` container is a malformed
request; anything missing below it simply means the payload carries no
status (inbound messages, template updates, ...).
"""

from typing import Any, Optional

from .schemas import StatusError, StatusEvent


class MalformedPayloadError(Exception):
    """Payload has no `entry` container."""
    pass


def _first(value: Any) -> Any:
    """First element of a non-empty list, else None."""
    if isinstance(value, list) and value:
        return value[0]
    return None


def _get(value: Any, key: str) -> Any:
    """Key lookup that tolerates non-dict values."""
    if isinstance(value, dict):
        return value.get(key)
    return None


def _is_absent(value: Any) -> bool:
    # Containers count as present even when empty
    if value is None:
        return True
    if isinstance(value, (list, dict)):
        return False
    return not value


def _optional_str(value: Any) -> Optional[str]:
    if value is None:
        return None
    return str(value)


def extract_status_event(payload: Any) -> Optional[StatusEvent]:
    """
    Extract the first delivery-status event from a webhook payload.

    Args:
        payload: Parsed JSON body of the webhook request

    Returns:
        StatusEvent, or None when the payload carries no status

    Raises:
        MalformedPayloadError: Payload is not an object or has no `entry`
    """
    entries = _get(payload, "entry")
    if _is_absent(entries):
        raise MalformedPayloadError("Payload has no 'entry' container")

    value = _get(_first(_get(_first(entries), "changes")), "value")
    status = _first(_get(value, "statuses"))
    if not isinstance(status, dict):
        return None

    message_id = status.get("id")
    if _is_absent(message_id):
        return None

    return StatusEvent(
        message_id=str(message_id),
        recipient_id=_optional_str(status.get("recipient_id")),
        status=_optional_str(status.get("status")),
        timestamp=status.get("timestamp"),
        error=extract_status_error(status),
    )


def extract_status_error(status: dict) -> Optional[StatusError]:
    """
    First element of `status.errors`, or None.

    Details come from `error_data.details`.
    """
    error = _first(status.get("errors"))
    if not isinstance(error, dict):
        return None

    return StatusError(
        code=error.get("code"),
        message=_optional_str(error.get("message")),
        details=_optional_str(_get(error.get("error_data"), "details")),
    )
