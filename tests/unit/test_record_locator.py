"""
Record locator tests.
"""

import logging

import pytest

from delivery.locator import RecordLocator
from delivery.store import DisabledMessageLogStore, InMemoryMessageLogStore, StoreError


@pytest.fixture
def store():
    return InMemoryMessageLogStore()


class TestRecordLocator:
    """Lookup by messageId."""

    def test_locates_unique_record(self, store):
        doc_id = store.create({"messageId": "wamid.1", "checkoutId": "co-1"})
        store.create({"messageId": "wamid.2", "checkoutId": "co-2"})

        document = RecordLocator(store).locate("wamid.1")

        assert document.document_id == doc_id
        assert document.checkout_id == "co-1"
        assert document.message_id == "wamid.1"

    def test_not_found_returns_none(self, store):
        store.create({"messageId": "wamid.1"})
        assert RecordLocator(store).locate("wamid.missing") is None

    def test_equality_match_only(self, store):
        """Prefix or case variants do not match."""
        store.create({"messageId": "wamid.10"})
        store.create({"messageId": "WAMID.1"})
        assert RecordLocator(store).locate("wamid.1") is None

    def test_duplicates_pick_first_and_warn(self, store, caplog):
        first = store.create({"messageId": "wamid.dup", "checkoutId": "co-a"})
        store.create({"messageId": "wamid.dup", "checkoutId": "co-b"})

        with caplog.at_level(logging.WARNING, logger="delivery.locator"):
            document = RecordLocator(store).locate("wamid.dup")

        assert document.document_id == first
        assert "wamid.dup" in caplog.text

    def test_store_failure_propagates(self):
        with pytest.raises(StoreError):
            RecordLocator(DisabledMessageLogStore()).locate("wamid.1")
