"""
Email Routes - Transactional emails triggered by the front-end
"""

import logging

from fastapi import APIRouter, Depends, HTTPException

from ..dependencies import get_email_service
from ..email_service import EmailService
from ..errors import EMAIL_NOT_CONFIGURED
from ..schemas import (
    EmailSentResponse,
    InvoiceEmailRequest,
    SendEmailRequest,
    TemplatedEmailRequest,
    TestEmailRequest,
)

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Email"])


def _require_email(service: EmailService) -> None:
    if not service.is_available():
        logger.warning("Email request rejected: no email provider configured")
        raise HTTPException(status_code=400, detail=EMAIL_NOT_CONFIGURED)


def _require_recipient(to: str | None) -> str:
    if not to or not to.strip():
        raise HTTPException(status_code=400, detail="Recipient email required")
    return to.strip()


@router.post("/send-weekly-update", response_model=EmailSentResponse)
async def send_weekly_update(
    data: TemplatedEmailRequest,
    service: EmailService = Depends(get_email_service),
):
    """Send weekly service update email"""
    _require_email(service)
    to = _require_recipient(data.to)

    await service.send_weekly_update(
        to=to,
        template=data.template,
        data=data.data,
        company_settings=data.company_settings,
    )
    return {"success": True, "message": "Weekly update sent successfully"}


@router.post("/send-invoice", response_model=EmailSentResponse)
async def send_invoice(
    data: InvoiceEmailRequest,
    service: EmailService = Depends(get_email_service),
):
    """Send monthly invoice email, with a Pay Now button when a payment link is given"""
    _require_email(service)
    to = _require_recipient(data.to)

    await service.send_invoice(
        to=to,
        template=data.template,
        data=data.data,
        company_settings=data.company_settings,
        payment_link=data.payment_link,
    )
    return {"success": True, "message": "Invoice sent successfully"}


@router.post("/send-quote", response_model=EmailSentResponse)
async def send_quote(
    data: TemplatedEmailRequest,
    service: EmailService = Depends(get_email_service),
):
    """Send quote email"""
    _require_email(service)
    to = _require_recipient(data.to)

    await service.send_quote(
        to=to,
        template=data.template,
        data=data.data,
        company_settings=data.company_settings,
    )
    return {"success": True, "message": "Quote sent successfully"}


@router.post("/send-email", response_model=EmailSentResponse)
async def send_custom_email(
    data: SendEmailRequest,
    service: EmailService = Depends(get_email_service),
):
    """Send a free-form email in the company layout"""
    _require_email(service)

    if not data.to or not data.subject or not data.body:
        raise HTTPException(status_code=400, detail="to, subject, and body are required")

    await service.send_plain_email(
        to=data.to.strip(),
        subject=data.subject,
        body=data.body,
        company_settings=data.company_settings,
    )
    return {"success": True, "message": "Email sent successfully"}


@router.post("/test-email", response_model=EmailSentResponse)
async def send_test_email(
    data: TestEmailRequest | None = None,
    service: EmailService = Depends(get_email_service),
):
    """Send a test email, to the sender address unless a recipient is given"""
    _require_email(service)

    await service.send_test_email(to=data.to if data else None)
    return {"success": True, "message": "Test email sent!"}
