"""
WhatsApp Status Webhook Receiver

FastAPI router for the Meta webhook:
- GET  /webhook: subscription handshake
- POST /webhook: delivery-status callbacks, reconciled against message logs

Every response body is the plain HTTP reason phrase. The provider only
looks at the status code and retries on non-2xx.
"""

import json
import logging
from http import HTTPStatus
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query, Request, Response, status
from fastapi.responses import PlainTextResponse
from starlette.concurrency import run_in_threadpool

from config import Config
from delivery.reconciler import StatusReconciler
from infra.bootstrap import bootstrap_infrastructure

from .security import verify_webhook_challenge

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/webhook", tags=["WhatsApp Transport"])


def get_reconciler() -> StatusReconciler:
    """Process-wide reconciler (overridden in tests)."""
    return bootstrap_infrastructure().get_reconciler()


def get_verify_token() -> str:
    """Configured hub.verify_token (overridden in tests)."""
    return Config.VERIFY_TOKEN


def _status_response(status_code: int) -> PlainTextResponse:
    return PlainTextResponse(HTTPStatus(status_code).phrase, status_code=status_code)


# ============================================================================
# WEBHOOK CHALLENGE (Setup only)
# ============================================================================

@router.get("")
async def whatsapp_webhook_challenge(
    hub_mode: Optional[str] = Query(None, alias="hub.mode"),
    hub_challenge: Optional[str] = Query(None, alias="hub.challenge"),
    hub_verify_token: Optional[str] = Query(None, alias="hub.verify_token"),
    expected_token: str = Depends(get_verify_token),
) -> Response:
    """
    Verify webhook subscription challenge from Meta.

    Returns:
        200 with the challenge as plain text, or an empty 403
    """
    try:
        challenge = verify_webhook_challenge(
            hub_mode, hub_challenge, hub_verify_token, expected_token
        )
    except HTTPException as e:
        logger.warning(f"Webhook verification rejected: {e.detail}")
        return Response(status_code=e.status_code)

    logger.info("Webhook verified")
    return PlainTextResponse(challenge, status_code=status.HTTP_200_OK)


# ============================================================================
# WEBHOOK RECEIVER (Status reconciliation)
# ============================================================================

@router.post("")
async def whatsapp_status_receiver(
    request: Request,
    reconciler: StatusReconciler = Depends(get_reconciler),
) -> Response:
    """
    Receive WhatsApp status callbacks.

    Flow:
    1. Parse JSON body (400 if not valid UTF-8 JSON)
    2. Reconcile in the thread pool (store clients are synchronous)
    3. Map the outcome to a status code:
       malformed -> 404, store failure -> 500, everything else -> 200
    """
    try:
        body = await request.body()
        payload = json.loads(body)
    except (json.JSONDecodeError, UnicodeDecodeError):
        logger.warning("Webhook body is not valid UTF-8 JSON")
        return _status_response(status.HTTP_400_BAD_REQUEST)

    try:
        result = await run_in_threadpool(reconciler.reconcile, payload)
    except Exception as e:
        logger.error(f"Unexpected error reconciling status webhook: {e}", exc_info=True)
        return _status_response(status.HTTP_500_INTERNAL_SERVER_ERROR)

    logger.debug(
        f"Status webhook handled: {result.outcome}",
        extra={"outcome": result.outcome, "message_id": result.message_id},
    )
    return _status_response(result.http_status)
