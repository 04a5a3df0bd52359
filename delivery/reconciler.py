"""
Status reconciler: apply a WhatsApp status webhook to its message log.

Flow:
1. Extract the status event (malformed / no event end here)
2. Locate the message log by messageId (not found ends here)
3. Merge the event into the log as a partial, conditional update

Parse, formatting and store (StoreError) failures never raise; each one
is converted into a ReconcileResult that the transport maps to an HTTP
status.
Status ordering is last-writer-wins: whatever status arrives is stored.
"""

import logging
from contextlib import nullcontext
from typing import Any, Dict, Optional

from delivery.keyed_lock import KeyedLock
from delivery.locator import RecordLocator
from delivery.store.base import MessageLogStore
from delivery.store.types import MessageLogDocument, StaleDocumentError, StoreError
from delivery.time_format import TimestampFormatError, format_clock_time
from delivery.types import ReconcileResult
from transport.whatsapp.normalize import MalformedPayloadError, extract_status_event
from transport.whatsapp.schemas import StatusEvent

logger = logging.getLogger(__name__)


def build_status_update(
    document: MessageLogDocument,
    event: StatusEvent,
    display_timezone: str = "UTC",
) -> Dict[str, Any]:
    """
    Compute the fields written for one status event.

    checkoutId is carried forward from the stored record unchanged, and
    only when the record has one; a record without it keeps its shape.
    Error fields are always written, so an event without errors clears
    any error left by an earlier event.

    Raises:
        TimestampFormatError: Event timestamp cannot be formatted
    """
    error = event.error
    fields = {}
    if "checkoutId" in document.data:
        fields["checkoutId"] = document.checkout_id
    fields.update({
        "messageId": event.message_id,
        "recipientId": event.recipient_id,
        "status": event.status,
        "formattedTime": format_clock_time(event.timestamp, display_timezone),
        "errorCode": error.code if error else None,
        "errorMessage": error.message if error else None,
        "errorDetails": error.details if error else None,
    })
    return fields


class StatusReconciler:
    """
    Orchestrates parse -> locate -> update for status webhooks.

    One instance is shared by all requests; the store handle is injected
    so tests can substitute a fake store.
    """

    def __init__(
        self,
        store: MessageLogStore,
        display_timezone: str = "UTC",
        serialize_per_message: bool = True,
    ):
        """
        Args:
            store: Shared message log store
            display_timezone: Timezone for formattedTime
            serialize_per_message: Serialise locate+update per messageId
                within this process
        """
        self.store = store
        self.locator = RecordLocator(store)
        self.display_timezone = display_timezone
        self._message_locks: Optional[KeyedLock] = (
            KeyedLock() if serialize_per_message else None
        )

    def reconcile(self, payload: Any) -> ReconcileResult:
        """
        Reconcile one webhook payload against the stored message logs.

        Args:
            payload: Parsed JSON body of the webhook request

        Returns:
            ReconcileResult with the outcome (store, parse and formatting
            failures never raise; anything else reaches the router, which
            answers 500)
        """
        try:
            event = extract_status_event(payload)
        except MalformedPayloadError as e:
            logger.warning(f"Malformed status webhook: {e}")
            return ReconcileResult(outcome="malformed", error=str(e))

        if event is None:
            logger.debug("Webhook carries no status event")
            return ReconcileResult(outcome="no_event")

        hold = (
            self._message_locks.hold(event.message_id)
            if self._message_locks is not None
            else nullcontext()
        )
        with hold:
            return self._apply(event)

    def _apply(self, event: StatusEvent) -> ReconcileResult:
        message_id = event.message_id

        try:
            document = self.locator.locate(message_id)
        except StoreError as e:
            logger.error(
                f"Message log lookup failed for messageId {message_id}: {e}",
                exc_info=True,
                extra={"message_id": message_id, "backend": self.store.backend_name},
            )
            return ReconcileResult(
                outcome="infrastructure_error", message_id=message_id, error=str(e)
            )

        if document is None:
            logger.warning(
                f"No message log found for messageId {message_id}",
                extra={"message_id": message_id, "status": event.status},
            )
            return ReconcileResult(outcome="not_found", message_id=message_id)

        try:
            fields = build_status_update(document, event, self.display_timezone)
        except TimestampFormatError as e:
            logger.error(
                f"Cannot format timestamp for messageId {message_id}: {e}",
                extra={"message_id": message_id, "timestamp": event.timestamp},
            )
            return ReconcileResult(
                outcome="infrastructure_error",
                message_id=message_id,
                document_id=document.document_id,
                error=str(e),
            )

        try:
            self.store.update(
                document.document_id, fields, expected_version=document.version
            )
        except StaleDocumentError as e:
            logger.warning(
                f"Message log {document.document_id} changed during reconciliation: {e}",
                extra={"message_id": message_id, "document_id": document.document_id},
            )
            return ReconcileResult(
                outcome="infrastructure_error",
                message_id=message_id,
                document_id=document.document_id,
                error=str(e),
            )
        except StoreError as e:
            logger.error(
                f"Message log update failed for messageId {message_id}: {e}",
                exc_info=True,
                extra={
                    "message_id": message_id,
                    "document_id": document.document_id,
                    "backend": self.store.backend_name,
                },
            )
            return ReconcileResult(
                outcome="infrastructure_error",
                message_id=message_id,
                document_id=document.document_id,
                error=str(e),
            )

        logger.info(
            f"Updated status for messageId {message_id} to \"{event.status}\" "
            f"for checkoutId {document.checkout_id}",
            extra={
                "message_id": message_id,
                "document_id": document.document_id,
                "status": event.status,
            },
        )
        return ReconcileResult(
            outcome="processed",
            message_id=message_id,
            document_id=document.document_id,
            status=event.status,
        )
