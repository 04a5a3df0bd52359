"""
SQLite-backed message log store.

Stores each message log record as a JSON document, so the store keeps the
document-store contract (arbitrary fields, partial updates) on top of a
local file.

Design:
- One table: message_logs
- Columns: id, message_id, data (JSON), version, created_at, updated_at
- Index: message_id for status lookups
- Conditional updates compare the integer version column
"""

import json
import logging
import sqlite3
import threading
from typing import Any, Dict, List, Optional
from uuid import uuid4

from delivery.store.base import MessageLogStore
from delivery.store.types import (
    DocumentNotFoundError,
    MessageLogDocument,
    StaleDocumentError,
    StoreError,
    StoreUnavailableError,
)

logger = logging.getLogger(__name__)

# Field mirrored into its own indexed column
INDEXED_FIELD = "messageId"


class SQLiteMessageLogStore(MessageLogStore):
    """
    SQLite document store for message logs.

    A single connection is shared by all callers and guarded by a lock,
    so one instance can serve concurrent webhook requests.
    """

    backend_name = "sqlite"

    def __init__(self, db_path: Optional[str] = None):
        """
        Initialize SQLite message log store.

        Args:
            db_path: Path to SQLite database file.
                    If None, uses ':memory:' (in-memory, useful for testing).
        """
        self.db_path = db_path or ":memory:"
        self._lock = threading.Lock()
        try:
            self._conn = sqlite3.connect(
                self.db_path, check_same_thread=False, isolation_level=None
            )
        except sqlite3.Error as e:
            raise StoreUnavailableError(f"Cannot open SQLite store {self.db_path}: {e}") from e
        self._initialize_db()

    def _initialize_db(self) -> None:
        """Create schema if missing. WAL mode for file databases."""
        with self._lock:
            try:
                cursor = self._conn.cursor()
                if self.db_path != ":memory:":
                    cursor.execute("PRAGMA journal_mode=WAL")
                    cursor.execute("PRAGMA synchronous=FULL")

                cursor.execute("""
                    CREATE TABLE IF NOT EXISTS message_logs (
                        id TEXT PRIMARY KEY,
                        message_id TEXT,
                        data TEXT NOT NULL,
                        version INTEGER NOT NULL DEFAULT 1,
                        created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP,
                        updated_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
                    )
                """)
                cursor.execute("""
                    CREATE INDEX IF NOT EXISTS idx_message_logs_message_id
                    ON message_logs(message_id)
                """)
            except sqlite3.Error as e:
                raise StoreUnavailableError(f"Failed to initialize SQLite store: {e}") from e

        logger.debug(f"SQLite message log store initialized: {self.db_path}")

    def find_by_field(
        self, field: str, value: Any, limit: Optional[int] = None
    ) -> List[MessageLogDocument]:
        try:
            with self._lock:
                cursor = self._conn.cursor()
                if field == INDEXED_FIELD:
                    cursor.execute(
                        "SELECT id, data, version FROM message_logs "
                        "WHERE message_id = ? ORDER BY rowid",
                        (value,),
                    )
                else:
                    cursor.execute(
                        "SELECT id, data, version FROM message_logs ORDER BY rowid"
                    )
                rows = cursor.fetchall()
        except sqlite3.OperationalError as e:
            raise StoreUnavailableError(f"SQLite query failed: {e}") from e
        except sqlite3.Error as e:
            raise StoreError(f"SQLite query failed: {e}") from e

        documents = []
        for doc_id, data_json, version in rows:
            data = self._decode(doc_id, data_json)
            if field in data and data[field] == value:
                documents.append(
                    MessageLogDocument(document_id=doc_id, data=data, version=version)
                )
                if limit is not None and len(documents) >= limit:
                    break
        return documents

    def update(
        self,
        document_id: str,
        fields: Dict[str, Any],
        expected_version: Optional[Any] = None,
    ) -> None:
        try:
            with self._lock:
                cursor = self._conn.cursor()
                cursor.execute("BEGIN IMMEDIATE")
                try:
                    cursor.execute(
                        "SELECT data, version FROM message_logs WHERE id = ?",
                        (document_id,),
                    )
                    row = cursor.fetchone()
                    if row is None:
                        raise DocumentNotFoundError(f"No document {document_id}")

                    data_json, version = row
                    if expected_version is not None and version != expected_version:
                        raise StaleDocumentError(
                            f"Document {document_id} is at version {version}, "
                            f"expected {expected_version}"
                        )

                    data = self._decode(document_id, data_json)
                    data.update(fields)
                    cursor.execute(
                        """
                        UPDATE message_logs
                        SET data = ?, message_id = ?, version = version + 1,
                            updated_at = CURRENT_TIMESTAMP
                        WHERE id = ? AND version = ?
                        """,
                        (json.dumps(data), data.get(INDEXED_FIELD), document_id, version),
                    )
                    cursor.execute("COMMIT")
                except Exception:
                    cursor.execute("ROLLBACK")
                    raise
        except sqlite3.OperationalError as e:
            raise StoreUnavailableError(f"SQLite update failed: {e}") from e
        except sqlite3.Error as e:
            raise StoreError(f"SQLite update failed: {e}") from e

    def create(self, fields: Dict[str, Any]) -> str:
        document_id = uuid4().hex
        try:
            with self._lock:
                self._conn.execute(
                    "INSERT INTO message_logs (id, message_id, data) VALUES (?, ?, ?)",
                    (document_id, fields.get(INDEXED_FIELD), json.dumps(fields)),
                )
        except sqlite3.OperationalError as e:
            raise StoreUnavailableError(f"SQLite insert failed: {e}") from e
        except sqlite3.Error as e:
            raise StoreError(f"SQLite insert failed: {e}") from e
        return document_id

    def close(self) -> None:
        """Close the shared connection."""
        with self._lock:
            self._conn.close()

    @staticmethod
    def _decode(document_id: str, data_json: str) -> Dict[str, Any]:
        try:
            return json.loads(data_json)
        except json.JSONDecodeError as e:
            raise StoreError(f"Corrupted JSON in document {document_id}: {e}") from e
