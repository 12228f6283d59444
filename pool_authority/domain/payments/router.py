"""Payments router - FastAPI endpoints for Stripe Checkout"""

import logging
import math

from fastapi import APIRouter, Depends, HTTPException, Request

from ...dependencies import get_stripe_service
from ...errors import PAYMENTS_NOT_CONFIGURED
from .schemas import CheckoutRequest, CheckoutSessionResponse, PaymentStatusResponse
from .stripe_service import StripeService

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Payments"])


def _require_payments(service: StripeService) -> None:
    if not service.is_available():
        logger.warning("Payment request rejected: Stripe not configured")
        raise HTTPException(status_code=400, detail=PAYMENTS_NOT_CONFIGURED)


@router.post(
    "/create-checkout-session",
    response_model=CheckoutSessionResponse,
    response_model_by_alias=True,
)
async def create_checkout_session(
    body: CheckoutRequest,
    request: Request,
    service: StripeService = Depends(get_stripe_service),
):
    """Create a Stripe Checkout session for a one-off payment"""
    _require_payments(service)

    if not body.amount or not math.isfinite(body.amount) or body.amount <= 0:
        raise HTTPException(status_code=400, detail="Invalid amount")

    return await service.create_checkout_session(
        amount=body.amount,
        origin=request.headers.get("origin"),
        customer_email=body.customer_email,
        description=body.description,
        customer_name=body.customer_name,
        metadata=body.metadata,
    )


@router.get(
    "/payment-status/{session_id}",
    response_model=PaymentStatusResponse,
    response_model_by_alias=True,
)
async def get_payment_status(
    session_id: str,
    service: StripeService = Depends(get_stripe_service),
):
    """Get payment status for a checkout session"""
    _require_payments(service)

    if not session_id.strip():
        raise HTTPException(status_code=400, detail="Session ID required")

    return await service.get_payment_status(session_id)
