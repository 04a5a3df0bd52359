"""
Delivery status module exports.

Status reconciliation for previously sent WhatsApp messages.
"""

from delivery.keyed_lock import KeyedLock
from delivery.locator import RecordLocator
from delivery.reconciler import StatusReconciler, build_status_update
from delivery.time_format import TimestampFormatError, format_clock_time
from delivery.types import ReconcileOutcome, ReconcileResult

__all__ = [
    "KeyedLock",
    "RecordLocator",
    "StatusReconciler",
    "build_status_update",
    "TimestampFormatError",
    "format_clock_time",
    "ReconcileOutcome",
    "ReconcileResult",
]
