"""
Firestore-backed message log store.

Message logs live in a single Firestore collection written by the sending
path. This store only reads them by messageId and patches status fields.

Configuration:
- service_key: parsed service account JSON (project_id, client_email, private_key)
- project_id: Firebase project (defaults to the key's project_id)
- collection_name: Collection holding the message logs
"""

import logging
from typing import Any, Dict, List, Optional

import firebase_admin
from firebase_admin import credentials, firestore
from google.api_core import exceptions as google_exceptions
from google.auth import exceptions as google_auth_exceptions
from google.cloud.firestore_v1.base_query import FieldFilter

from delivery.store.base import MessageLogStore
from delivery.store.types import (
    DocumentNotFoundError,
    MessageLogDocument,
    StaleDocumentError,
    StoreError,
    StoreUnavailableError,
)

logger = logging.getLogger(__name__)

# Errors raised by the client: API failures and credential refresh failures
CLIENT_ERRORS = (google_exceptions.GoogleAPIError, google_auth_exceptions.GoogleAuthError)

FIREBASE_APP_NAME = "delivery-status"


def create_firestore_client(
    service_key: Dict[str, Any],
    project_id: Optional[str] = None,
    app_name: str = FIREBASE_APP_NAME,
):
    """
    Initialize (once per process) a Firebase app and return its Firestore client.

    Args:
        service_key: Parsed service account JSON
        project_id: Firebase project id; falls back to service_key["project_id"]
        app_name: Firebase app name, so repeated calls reuse the same app
    """
    try:
        app = firebase_admin.get_app(app_name)
    except ValueError:
        cred = credentials.Certificate(service_key)
        app = firebase_admin.initialize_app(
            cred,
            {"projectId": project_id or service_key.get("project_id")},
            name=app_name,
        )
    return firestore.client(app=app)


class FirestoreMessageLogStore(MessageLogStore):
    """
    Firestore document store for message logs.

    The Firestore client is thread-safe and shared by all requests.
    Conditional updates use the snapshot's update_time as version token.
    """

    backend_name = "firestore"

    def __init__(
        self,
        collection_name: str = "whatsappLogs",
        client: Optional[Any] = None,
        service_key: Optional[Dict[str, Any]] = None,
        project_id: Optional[str] = None,
    ):
        """
        Initialize Firestore message log store.

        Args:
            collection_name: Collection holding message logs
            client: Ready Firestore client (tests inject a fake here)
            service_key: Parsed service account JSON, used when client is None
            project_id: Firebase project id, used when client is None
        """
        if client is None:
            if not service_key:
                raise StoreUnavailableError("Firestore store needs a client or a service key")
            client = create_firestore_client(service_key, project_id)
        self._client = client
        self.collection_name = collection_name
        logger.debug(f"Firestore message log store ready: {collection_name}")

    def _collection(self):
        return self._client.collection(self.collection_name)

    def find_by_field(
        self, field: str, value: Any, limit: Optional[int] = None
    ) -> List[MessageLogDocument]:
        query = self._collection().where(filter=FieldFilter(field, "==", value))
        if limit is not None:
            query = query.limit(limit)
        try:
            snapshots = query.get()
        except CLIENT_ERRORS as e:
            raise self._translate(e, "query") from e

        return [
            MessageLogDocument(
                document_id=snapshot.id,
                data=snapshot.to_dict() or {},
                version=snapshot.update_time,
            )
            for snapshot in snapshots
        ]

    def update(
        self,
        document_id: str,
        fields: Dict[str, Any],
        expected_version: Optional[Any] = None,
    ) -> None:
        doc_ref = self._collection().document(document_id)
        try:
            if expected_version is not None:
                option = self._client.write_option(last_update_time=expected_version)
                doc_ref.update(fields, option=option)
            else:
                doc_ref.update(fields)
        except google_exceptions.NotFound as e:
            raise DocumentNotFoundError(f"No document {document_id}") from e
        except google_exceptions.FailedPrecondition as e:
            raise StaleDocumentError(
                f"Document {document_id} changed since it was read"
            ) from e
        except CLIENT_ERRORS as e:
            raise self._translate(e, "update") from e

    def create(self, fields: Dict[str, Any]) -> str:
        try:
            _, doc_ref = self._collection().add(fields)
        except CLIENT_ERRORS as e:
            raise self._translate(e, "insert") from e
        return doc_ref.id

    @staticmethod
    def _translate(error: Exception, operation: str) -> StoreError:
        if isinstance(
            error,
            (
                google_exceptions.ServiceUnavailable,
                google_exceptions.DeadlineExceeded,
                google_exceptions.RetryError,
                google_auth_exceptions.TransportError,
            ),
        ):
            return StoreUnavailableError(f"Firestore {operation} failed: {error}")
        return StoreError(f"Firestore {operation} failed: {error}")
