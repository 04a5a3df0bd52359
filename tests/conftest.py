"""Pytest configuration and fixtures."""

import os
import sys
from pathlib import Path

import pytest

# Add project root to sys.path for imports
PROJECT_ROOT = Path(__file__).parent.parent
sys.path.insert(0, str(PROJECT_ROOT))

# Tests never touch a real store unless they build one explicitly
os.environ.setdefault("STORE_BACKEND", "stub")

from infra.bootstrap import InfraBootstrap  # noqa: E402


@pytest.fixture(autouse=True)
def reset_bootstrap():
    """Each test starts without a cached store/reconciler."""
    InfraBootstrap.reset()
    yield
    InfraBootstrap.reset()


def status_payload(
    message_id="wamid.1",
    status="delivered",
    timestamp="1700000000",
    recipient_id="111",
    errors=None,
):
    """WhatsApp status webhook body with a single status entry."""
    status_entry = {
        "id": message_id,
        "recipient_id": recipient_id,
        "status": status,
        "timestamp": timestamp,
    }
    if errors is not None:
        status_entry["errors"] = errors
    return {
        "object": "whatsapp_business_account",
        "entry": [{
            "id": "102290129340398",
            "changes": [{
                "field": "messages",
                "value": {
                    "messaging_product": "whatsapp",
                    "metadata": {
                        "display_phone_number": "15550783881",
                        "phone_number_id": "106540352242922",
                    },
                    "statuses": [status_entry],
                },
            }],
        }],
    }


@pytest.fixture
def make_status_payload():
    """Factory for status webhook bodies."""
    return status_payload
