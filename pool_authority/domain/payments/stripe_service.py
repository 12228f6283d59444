"""Stripe service - Hosted Checkout sessions for one-off payments"""

import asyncio
import logging
from typing import Any, Optional

import stripe

from ...config import DEFAULT_COMPANY_NAME, Settings
from ...errors import PAYMENTS_NOT_CONFIGURED, PaymentProviderError, ProviderNotConfiguredError

logger = logging.getLogger(__name__)


def to_minor_units(amount: float) -> int:
    """Stripe amounts are integers in the smallest currency unit (cents)"""
    return int(round(float(amount) * 100))


def from_minor_units(amount: Optional[int]) -> Optional[float]:
    if amount is None:
        return None
    return amount / 100


def _provider_message(error: Exception) -> str:
    return getattr(error, "user_message", None) or str(error)


class StripeService:
    """Service for Stripe Checkout operations"""

    def __init__(self, settings: Settings, sessions_api: Any = None):
        self.api_key = settings.stripe_secret_key
        self.currency = settings.stripe_currency
        self.default_origin = settings.default_redirect_origin
        self.sessions_api = sessions_api if sessions_api is not None else stripe.checkout.Session

        if not self.api_key:
            logger.warning("STRIPE_SECRET_KEY not set; payment endpoints will fail until configured")
        else:
            logger.info(f"Stripe service initialized (currency={self.currency})")

    def is_available(self) -> bool:
        """Check if Stripe credentials are available"""
        return bool(self.api_key)

    def build_session_config(
        self,
        amount: float,
        origin: Optional[str] = None,
        customer_email: Optional[str] = None,
        description: Optional[str] = None,
        customer_name: Optional[str] = None,
        metadata: Optional[dict] = None,
    ) -> dict:
        """Single line-item checkout session parameters"""
        base_url = (origin or self.default_origin).rstrip("/")

        session_config = {
            "payment_method_types": ["card"],
            "line_items": [
                {
                    "price_data": {
                        "currency": self.currency,
                        "product_data": {
                            "name": description or DEFAULT_COMPANY_NAME,
                            "description": f"Invoice for {customer_name or 'Customer'}",
                        },
                        "unit_amount": to_minor_units(amount),
                    },
                    "quantity": 1,
                }
            ],
            "mode": "payment",
            "success_url": f"{base_url}?payment=success",
            "cancel_url": f"{base_url}?payment=cancelled",
            "metadata": metadata or {},
        }

        # Lets Stripe pre-fill the email on the hosted page
        if customer_email:
            session_config["customer_email"] = customer_email

        return session_config

    async def create_checkout_session(
        self,
        amount: float,
        origin: Optional[str] = None,
        customer_email: Optional[str] = None,
        description: Optional[str] = None,
        customer_name: Optional[str] = None,
        metadata: Optional[dict] = None,
    ) -> dict:
        """Create a Stripe Checkout session and return its id and hosted URL"""
        if not self.is_available():
            raise ProviderNotConfiguredError(PAYMENTS_NOT_CONFIGURED)

        session_config = self.build_session_config(
            amount=amount,
            origin=origin,
            customer_email=customer_email,
            description=description,
            customer_name=customer_name,
            metadata=metadata,
        )

        try:
            session = await asyncio.to_thread(
                self.sessions_api.create, api_key=self.api_key, **session_config
            )
        except Exception as e:
            logger.error(f"Stripe error: {e}")
            raise PaymentProviderError(_provider_message(e)) from e

        logger.info(f"✅ Checkout session created: {session.id}")
        return {"session_id": session.id, "url": session.url}

    async def get_payment_status(self, session_id: str) -> dict:
        """Look up a checkout session's payment status"""
        if not self.is_available():
            raise ProviderNotConfiguredError(PAYMENTS_NOT_CONFIGURED)

        try:
            session = await asyncio.to_thread(
                self.sessions_api.retrieve, session_id, api_key=self.api_key
            )
        except Exception as e:
            logger.error(f"Failed to retrieve checkout session {session_id}: {e}")
            raise PaymentProviderError(_provider_message(e)) from e

        return {
            "status": session.payment_status,
            "customer_email": session.customer_email,
            "amount_total": from_minor_units(session.amount_total),
        }
