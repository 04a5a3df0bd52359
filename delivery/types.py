"""
Reconciliation result types.

The reconciler never raises; every request ends in one ReconcileResult.
"""

from dataclasses import dataclass
from typing import Literal, Optional

ReconcileOutcome = Literal[
    "processed",
    "no_event",
    "not_found",
    "malformed",
    "infrastructure_error",
]

# Provider retries on non-2xx, so only store failures ask for a redelivery
HTTP_STATUS_BY_OUTCOME = {
    "processed": 200,
    "no_event": 200,
    "not_found": 200,
    "malformed": 404,
    "infrastructure_error": 500,
}


@dataclass
class ReconcileResult:
    """Outcome of reconciling one webhook payload."""

    outcome: ReconcileOutcome
    message_id: Optional[str] = None
    document_id: Optional[str] = None
    status: Optional[str] = None      # Status written (processed only)
    error: Optional[str] = None       # Failure description (malformed/infrastructure_error)

    @property
    def http_status(self) -> int:
        return HTTP_STATUS_BY_OUTCOME[self.outcome]
