"""
Payment endpoints.

Payment initiation, gateway status lookups and the gateway webhook.
"""
import hashlib
import hmac
import logging
from typing import Optional

from fastapi import APIRouter, Depends, Header, Request, status
from pydantic import ValidationError

from api.dependencies import get_actor, get_payment_service, get_webhook_secret
from artmarket.application.dtos import (
    InitiatePaymentRequest,
    PaymentInitiationDTO,
    ReconcileResultDTO,
    WebhookPayload,
)
from artmarket.domain.exceptions import Unauthorized
from artmarket.domain.value_objects import Actor


logger = logging.getLogger(__name__)
router = APIRouter()


def signature_matches(secret: str, body: bytes, signature: Optional[str]) -> bool:
    """Check a Paystack x-paystack-signature header (HMAC-SHA512 of the raw body)."""
    if not signature:
        return False
    expected = hmac.new(secret.encode("utf-8"), body, hashlib.sha512).hexdigest()
    return hmac.compare_digest(expected, signature)


@router.post(
    "",
    response_model=PaymentInitiationDTO,
    status_code=status.HTTP_201_CREATED,
    summary="Start payment for a checked-out order",
)
async def initiate_payment(
    request: InitiatePaymentRequest,
    actor: Actor = Depends(get_actor),
    service=Depends(get_payment_service),
):
    return await service.initiate(request.order_id, actor, request.amount)


@router.get("/verify/{reference}", summary="Look up a gateway transaction's status")
async def verify_payment(reference: str, service=Depends(get_payment_service)):
    return {"reference": reference, "status": await service.verify_payment(reference)}


@router.post(
    "/webhook",
    response_model=ReconcileResultDTO,
    summary="Gateway webhook",
)
async def payment_webhook(
    request: Request,
    x_paystack_signature: Optional[str] = Header(None, alias="x-paystack-signature"),
    secret: str = Depends(get_webhook_secret),
    service=Depends(get_payment_service),
):
    body = await request.body()
    if secret and not signature_matches(secret, body, x_paystack_signature):
        logger.warning("❌ Rejected webhook with invalid signature")
        raise Unauthorized("Invalid webhook signature")

    try:
        payload = WebhookPayload.model_validate_json(body)
    except ValidationError as e:
        logger.warning(f"Malformed webhook body: {e}")
        return ReconcileResultDTO(status="ignored", event="malformed")

    return await service.reconcile(payload)
