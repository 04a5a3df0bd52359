"""
Record locator: find the message log written when a message was sent.
"""

import logging
from typing import Optional

from delivery.store.base import MessageLogStore
from delivery.store.types import MessageLogDocument

logger = logging.getLogger(__name__)

MESSAGE_ID_FIELD = "messageId"


class RecordLocator:
    """Looks up the single message log record for an external message id."""

    def __init__(self, store: MessageLogStore):
        self.store = store

    def locate(self, message_id: str) -> Optional[MessageLogDocument]:
        """
        Find the message log whose messageId equals `message_id`.

        Returns None when nothing matches. When several records match
        (messageId is not unique-enforced) the first one in store order is
        used and the duplicates are logged.

        Raises:
            StoreError: Query failed
        """
        # Two results are enough to tell "unique" from "ambiguous"
        documents = self.store.find_by_field(MESSAGE_ID_FIELD, message_id, limit=2)
        if not documents:
            return None

        if len(documents) > 1:
            logger.warning(
                f"Multiple message logs share messageId {message_id}; using the first",
                extra={
                    "message_id": message_id,
                    "document_ids": [doc.document_id for doc in documents],
                },
            )
        return documents[0]
