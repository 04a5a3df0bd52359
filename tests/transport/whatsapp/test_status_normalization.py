"""
WhatsApp Status Normalization Tests

Test extraction of StatusEvent from raw webhook payloads.
"""

import pytest

from transport.whatsapp.normalize import (
    MalformedPayloadError,
    extract_status_error,
    extract_status_event,
)
from transport.whatsapp.schemas import StatusError, StatusEvent


class TestStatusExtraction:
    """Test status event extraction."""

    def test_extract_delivered_status(self, make_status_payload):
        """Status fields are copied into the event."""
        event = extract_status_event(make_status_payload())

        assert isinstance(event, StatusEvent)
        assert event.message_id == "wamid.1"
        assert event.recipient_id == "111"
        assert event.status == "delivered"
        assert event.timestamp == "1700000000"
        assert event.error is None

    def test_status_is_opaque(self, make_status_payload):
        """Unknown provider statuses pass through unchanged."""
        event = extract_status_event(make_status_payload(status="deleted"))
        assert event.status == "deleted"

    def test_only_first_status_is_used(self, make_status_payload):
        """statuses[0] wins even when more are sent."""
        payload = make_status_payload(message_id="wamid.first")
        statuses = payload["entry"][0]["changes"][0]["value"]["statuses"]
        statuses.append({"id": "wamid.second", "status": "read", "timestamp": "1"})

        event = extract_status_event(payload)
        assert event.message_id == "wamid.first"

    def test_optional_fields_default_to_none(self):
        """Only the message id is required."""
        payload = {"entry": [{"changes": [{"value": {"statuses": [{"id": "wamid.9"}]}}]}]}

        event = extract_status_event(payload)

        assert event.message_id == "wamid.9"
        assert event.recipient_id is None
        assert event.status is None
        assert event.timestamp is None

    def test_event_is_immutable(self, make_status_payload):
        """Events are frozen once extracted."""
        event = extract_status_event(make_status_payload())
        with pytest.raises(Exception):
            event.status = "read"


class TestStatusErrors:
    """Test errors[0] extraction."""

    def test_failed_status_error(self, make_status_payload):
        """code, message and error_data.details are extracted."""
        payload = make_status_payload(
            status="failed",
            errors=[{
                "code": 131026,
                "title": "Message undeliverable",
                "message": "Message undeliverable",
                "error_data": {"details": "Receiver is incapable of receiving this message"},
            }],
        )

        event = extract_status_event(payload)

        assert event.error == StatusError(
            code=131026,
            message="Message undeliverable",
            details="Receiver is incapable of receiving this message",
        )

    def test_error_without_error_data(self):
        """Missing error_data leaves details None."""
        error = extract_status_error({"errors": [{"code": 130429, "message": "Rate limit hit"}]})
        assert error.code == 130429
        assert error.details is None

    def test_empty_errors_list(self):
        """Empty errors list means no error."""
        assert extract_status_error({"errors": []}) is None

    def test_errors_not_a_list(self):
        """Unexpected errors shape is ignored."""
        assert extract_status_error({"errors": {"code": 1}}) is None


class TestNoEvent:
    """Payloads that carry no status."""

    def test_value_without_statuses(self):
        """Scenario: value present, no statuses key."""
        assert extract_status_event({"entry": [{"changes": [{"value": {}}]}]}) is None

    def test_inbound_message_payload(self):
        """Inbound text messages are not status events."""
        payload = {
            "object": "whatsapp_business_account",
            "entry": [{
                "changes": [{
                    "value": {
                        "messages": [{
                            "from": "1234567890",
                            "id": "wamid.msg_123",
                            "timestamp": "1707500000",
                            "type": "text",
                            "text": {"body": "Hello"},
                        }],
                    }
                }],
            }],
        }
        assert extract_status_event(payload) is None

    @pytest.mark.parametrize(
        "payload",
        [
            {"entry": []},
            {"entry": {}},
            {"entry": [{}]},
            {"entry": [{"changes": []}]},
            {"entry": [{"changes": [{}]}]},
            {"entry": [{"changes": [{"value": None}]}]},
            {"entry": [{"changes": [{"value": {"statuses": []}}]}]},
            {"entry": [{"changes": [{"value": {"statuses": [None]}}]}]},
            {"entry": [{"changes": [{"value": {"statuses": ["wamid.1"]}}]}]},
            {"entry": "present"},
        ],
    )
    def test_missing_inner_path(self, payload):
        """Anything missing below entry is 'no event', never an exception."""
        assert extract_status_event(payload) is None

    def test_status_without_id(self):
        """A status entry without id cannot be correlated."""
        payload = {"entry": [{"changes": [{"value": {"statuses": [{"status": "sent"}]}}]}]}
        assert extract_status_event(payload) is None


class TestMalformed:
    """Payloads without the entry container."""

    @pytest.mark.parametrize(
        "payload",
        [
            {},
            {"object": "whatsapp_business_account"},
            {"entry": None},
            {"entry": ""},
            {"entry": 0},
            [],
            None,
            "entry",
        ],
    )
    def test_missing_entry_is_malformed(self, payload):
        """Missing entry raises regardless of other content."""
        with pytest.raises(MalformedPayloadError):
            extract_status_event(payload)

    def test_statuses_outside_entry_still_malformed(self):
        """Status data at the wrong level does not rescue the payload."""
        payload = {"statuses": [{"id": "wamid.1", "status": "read"}]}
        with pytest.raises(MalformedPayloadError):
            extract_status_event(payload)
