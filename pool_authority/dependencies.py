"""FastAPI dependencies handing the start-up services to route handlers"""

from fastapi import Request

from .domain.payments.stripe_service import StripeService
from .email_service import EmailService


def get_email_service(request: Request) -> EmailService:
    return request.app.state.email_service


def get_stripe_service(request: Request) -> StripeService:
    return request.app.state.stripe_service
