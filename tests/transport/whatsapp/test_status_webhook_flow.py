"""
WhatsApp Status Webhook Integration Tests

End-to-end flow: POST /webhook -> extract -> locate -> update -> status code
"""

import logging
from unittest.mock import MagicMock

import pytest
from fastapi.testclient import TestClient

from delivery.reconciler import StatusReconciler
from delivery.store import DisabledMessageLogStore, InMemoryMessageLogStore, MessageLogStore
from main import app
from transport.whatsapp.webhook import get_reconciler


@pytest.fixture
def store():
    return InMemoryMessageLogStore()


@pytest.fixture
def client(store):
    reconciler = StatusReconciler(store)
    app.dependency_overrides[get_reconciler] = lambda: reconciler
    yield TestClient(app)
    app.dependency_overrides.clear()


class TestStatusScenarios:
    """Status webhook scenarios against a seeded store."""

    def test_delivered_status_updates_log(self, client, store, make_status_payload):
        """Scenario A: existing log is updated, checkoutId kept."""
        doc_id = store.create({"messageId": "wamid.1", "checkoutId": "co-1", "status": "sent"})

        resp = client.post("/webhook", json=make_status_payload())

        assert resp.status_code == 200
        record = store.get(doc_id)
        assert record["status"] == "delivered"
        assert record["checkoutId"] == "co-1"
        assert record["recipientId"] == "111"
        assert record["formattedTime"] == "10:13 PM"
        assert record["errorCode"] is None
        assert record["errorMessage"] is None
        assert record["errorDetails"] is None

    def test_payload_without_statuses(self, client, store):
        """Scenario B: no statuses key -> 200, no store interaction."""
        resp = client.post("/webhook", json={"entry": [{"changes": [{"value": {}}]}]})

        assert resp.status_code == 200
        assert store.updates == []

    def test_payload_without_entry(self, client, store):
        """Scenario C: no entry key -> 404."""
        resp = client.post("/webhook", json={})

        assert resp.status_code == 404
        assert store.updates == []

    def test_unknown_message_id(self, client, store, make_status_payload, caplog):
        """Scenario D: no matching log -> 200, nothing written, warning logged."""
        store.create({"messageId": "wamid.other", "checkoutId": "co-2", "status": "sent"})

        with caplog.at_level(logging.WARNING):
            resp = client.post("/webhook", json=make_status_payload(message_id="wamid.404"))

        assert resp.status_code == 200
        assert store.updates == []
        assert "wamid.404" in caplog.text

    def test_failed_status_records_error(self, client, store, make_status_payload):
        """Failed deliveries store the provider error."""
        doc_id = store.create({"messageId": "wamid.1", "checkoutId": "co-1", "status": "sent"})
        payload = make_status_payload(
            status="failed",
            errors=[{
                "code": 131047,
                "message": "Re-engagement message",
                "error_data": {"details": "More than 24 hours have passed"},
            }],
        )

        resp = client.post("/webhook", json=payload)

        assert resp.status_code == 200
        record = store.get(doc_id)
        assert record["status"] == "failed"
        assert record["errorCode"] == 131047
        assert record["errorMessage"] == "Re-engagement message"
        assert record["errorDetails"] == "More than 24 hours have passed"


class TestFailureResponses:
    """Responses that ask the provider to retry (or reject the request)."""

    def test_store_down_returns_500(self, make_status_payload):
        """Store failure -> 500 so Meta re-delivers."""
        app.dependency_overrides[get_reconciler] = lambda: StatusReconciler(
            DisabledMessageLogStore()
        )
        try:
            resp = TestClient(app).post("/webhook", json=make_status_payload())
        finally:
            app.dependency_overrides.clear()

        assert resp.status_code == 500

    def test_unexpected_reconciler_error_returns_500(self, make_status_payload):
        """Bugs below the reconciler still answer 500."""
        reconciler = MagicMock()
        reconciler.reconcile.side_effect = RuntimeError("boom")
        app.dependency_overrides[get_reconciler] = lambda: reconciler
        try:
            resp = TestClient(app).post("/webhook", json=make_status_payload())
        finally:
            app.dependency_overrides.clear()

        assert resp.status_code == 500

    def test_invalid_json_returns_400(self, client):
        """Body that is not JSON -> 400."""
        resp = client.post(
            "/webhook",
            content=b"{not json",
            headers={"Content-Type": "application/json"},
        )
        assert resp.status_code == 400

    def test_non_utf8_body_returns_400(self, client, store):
        """Body bytes that are not UTF-8 -> 400, never a retryable 500."""
        resp = client.post(
            "/webhook",
            content=b'{"entry": "\xff"}',
            headers={"Content-Type": "application/json"},
        )

        assert resp.status_code == 400
        assert store.updates == []

    def test_no_event_never_touches_store(self):
        """Status-less payloads never reach the store."""
        store = MagicMock(spec=MessageLogStore)
        store.backend_name = "mock"
        app.dependency_overrides[get_reconciler] = lambda: StatusReconciler(store)
        try:
            resp = TestClient(app).post(
                "/webhook",
                json={"entry": [{"changes": [{"value": {"messages": [{"id": "wamid.in"}]}}]}]},
            )
        finally:
            app.dependency_overrides.clear()

        assert resp.status_code == 200
        store.find_by_field.assert_not_called()
        store.update.assert_not_called()


class TestDefaultWiring:
    """Without overrides the router uses the bootstrap singleton."""

    def test_bootstrap_stub_store(self, make_status_payload):
        """STORE_BACKEND=stub (set in conftest) serves requests."""
        from infra.bootstrap import bootstrap_infrastructure

        store = bootstrap_infrastructure().get_store()
        doc_id = store.create({"messageId": "wamid.1", "checkoutId": "co-9", "status": "sent"})

        resp = TestClient(app).post("/webhook", json=make_status_payload(status="read"))

        assert resp.status_code == 200
        assert store.get(doc_id)["status"] == "read"
        assert store.get(doc_id)["checkoutId"] == "co-9"
