"""
Unified Email Service using Resend or SMTP (e.g. Gmail)
Resolves caller templates, wraps them in the company shell and hands them
to whichever provider is configured
"""

import asyncio
import logging
import smtplib
import ssl
from datetime import datetime, timezone
from email.mime.multipart import MIMEMultipart
from email.mime.text import MIMEText
from email.utils import formataddr, parseaddr
from typing import Any, Mapping, Optional, Protocol

import resend

from .config import Settings
from .email_templates import (
    TEST_EMAIL_HTML,
    TEST_EMAIL_SUBJECT,
    build_merge_data,
    convert_newlines,
    payment_button,
    render_template,
    resolve_company_settings,
    wrap_in_html_email,
)
from .errors import EMAIL_NOT_CONFIGURED, EmailDeliveryError, ProviderNotConfiguredError

logger = logging.getLogger(__name__)


class EmailBackend(Protocol):
    name: str

    def send(self, to: str, subject: str, html_content: str, from_address: str) -> dict: ...

    def verify(self) -> None: ...


class ResendBackend:
    """Send through the Resend HTTP API"""

    name = "resend"

    def __init__(self, api_key: str):
        # The Resend SDK only reads its key from module state
        resend.api_key = api_key

    def send(self, to: str, subject: str, html_content: str, from_address: str) -> dict:
        email_data = {
            "from": from_address,
            "to": [to],
            "subject": subject,
            "html": html_content,
        }
        response = resend.Emails.send(email_data)
        logger.info(f"✅ Email sent successfully via Resend: {response}")
        return dict(response) if response else {}

    def verify(self) -> None:
        # Nothing to check up front; a bad key surfaces on the first send
        return None


class SMTPBackend:
    """Send through an SMTP relay such as smtp.gmail.com"""

    name = "smtp"

    def __init__(
        self,
        host: str,
        port: int,
        username: str,
        password: str,
        use_tls: bool = True,
        timeout: int = 30,
    ):
        self.host = host
        self.port = port
        self.username = username
        self.password = password
        self.use_tls = use_tls
        self.timeout = timeout

    def _connect(self) -> smtplib.SMTP:
        if self.port == 465:
            context = ssl.create_default_context()
            server = smtplib.SMTP_SSL(self.host, self.port, context=context, timeout=self.timeout)
        else:
            server = smtplib.SMTP(self.host, self.port, timeout=self.timeout)

        try:
            if self.use_tls and self.port != 465:
                server.starttls(context=ssl.create_default_context())
            server.login(self.username, self.password)
        except Exception:
            server.close()
            raise
        return server

    def send(self, to: str, subject: str, html_content: str, from_address: str) -> dict:
        msg = MIMEMultipart("alternative")
        msg["Subject"] = subject
        msg["From"] = from_address
        msg["To"] = to
        msg.attach(MIMEText(html_content, "html"))

        envelope_from = parseaddr(from_address)[1] or self.username

        server = self._connect()
        try:
            server.sendmail(envelope_from, [to], msg.as_string())
        finally:
            server.quit()

        logger.info(f"✅ SMTP email sent successfully via {self.host}")
        return {"id": f"smtp-{datetime.now(timezone.utc).timestamp()}", "success": True}

    def verify(self) -> None:
        server = self._connect()
        try:
            server.noop()
        finally:
            server.quit()


def build_email_backend(settings: Settings) -> Optional[EmailBackend]:
    """Create the backend selected by the settings, or None if unconfigured"""
    provider = settings.resolved_email_provider
    if provider == "resend":
        return ResendBackend(settings.resend_api_key)
    if provider == "smtp":
        return SMTPBackend(
            host=settings.smtp_host,
            port=settings.smtp_port,
            username=settings.smtp_user,
            password=settings.smtp_password,
            use_tls=settings.smtp_use_tls,
        )
    return None


class EmailService:
    """Templated transactional emails for the front-end"""

    def __init__(self, settings: Settings, backend: Optional[EmailBackend] = None):
        self.sender_address = settings.sender_address
        self.backend = backend if backend is not None else build_email_backend(settings)

        if not self.is_available():
            logger.warning(
                "Email provider not configured; email endpoints will fail until configured"
            )
        else:
            logger.info(f"Email service initialized (provider={self.backend.name})")

    def is_available(self) -> bool:
        """Check if an email backend and sender address are available"""
        return self.backend is not None and bool(self.sender_address)

    def _require_backend(self) -> EmailBackend:
        if not self.is_available():
            raise ProviderNotConfiguredError(EMAIL_NOT_CONFIGURED)
        return self.backend

    def sender_for(self, company_name: Optional[str]) -> str:
        """Sender header showing the company as display name"""
        if not company_name:
            return self.sender_address
        return formataddr((company_name, self.sender_address))

    async def verify_connection(self) -> bool:
        """Check the provider accepts our credentials, logging the outcome"""
        if not self.is_available():
            return False
        try:
            await asyncio.to_thread(self.backend.verify)
            logger.info("✅ Email server ready")
            return True
        except Exception as e:
            logger.error(f"❌ Email configuration error: {e}")
            return False

    async def send_email(
        self,
        to: str,
        subject: str,
        html_content: str,
        from_address: Optional[str] = None,
    ) -> dict:
        """
        Send a fully rendered HTML email

        Args:
            to: Recipient email
            subject: Email subject line
            html_content: Complete HTML document
            from_address: Optional sender header, defaults to the configured address

        Returns:
            Provider send response dict
        """
        backend = self._require_backend()
        sender = from_address or self.sender_address

        try:
            logger.info(f"📧 Sending email via {backend.name} to: {to}")
            return await asyncio.to_thread(backend.send, to, subject, html_content, sender)
        except Exception as e:
            logger.error(f"❌ Email send error to {to}: {e}")
            raise EmailDeliveryError(str(e)) from e

    async def send_templated_email(
        self,
        to: str,
        subject_template: str,
        body_template: str,
        data: Optional[Mapping[str, Any]] = None,
        company_settings: Optional[Any] = None,
        payment_link: Optional[str] = None,
        include_payment_link: bool = False,
    ) -> dict:
        """Render a caller template with company merge tags and send it"""
        self._require_backend()
        company = resolve_company_settings(company_settings)
        merge_data = build_merge_data(
            company,
            data,
            payment_link=(payment_link or "") if include_payment_link else None,
        )

        subject = render_template(subject_template, merge_data)
        body = render_template(body_template, merge_data)
        if include_payment_link and payment_link:
            body += payment_button(payment_link)

        return await self.send_email(
            to=to,
            subject=subject,
            html_content=wrap_in_html_email(body, company),
            from_address=self.sender_for(company.company_name),
        )

    # ============================================
    # Pre-built emails for the front-end endpoints
    # ============================================

    async def send_weekly_update(self, to: str, template, data=None, company_settings=None) -> dict:
        """Send weekly service update email"""
        return await self.send_templated_email(
            to, template.subject, template.body, data, company_settings
        )

    async def send_invoice(
        self, to: str, template, data=None, company_settings=None, payment_link=None
    ) -> dict:
        """Send monthly invoice email with an optional Pay Now button"""
        return await self.send_templated_email(
            to,
            template.subject,
            template.body,
            data,
            company_settings,
            payment_link=payment_link,
            include_payment_link=True,
        )

    async def send_quote(self, to: str, template, data=None, company_settings=None) -> dict:
        """Send quote email"""
        return await self.send_templated_email(
            to, template.subject, template.body, data, company_settings
        )

    async def send_plain_email(
        self, to: str, subject: str, body: str, company_settings=None
    ) -> dict:
        """Send a free-form message; only line breaks are converted"""
        self._require_backend()
        company = resolve_company_settings(company_settings)
        return await self.send_email(
            to=to,
            subject=subject,
            html_content=wrap_in_html_email(convert_newlines(body), company),
            from_address=self.sender_for(company.company_name),
        )

    async def send_test_email(self, to: Optional[str] = None) -> dict:
        """Send the canned configuration check message"""
        self._require_backend()
        return await self.send_email(
            to=to or self.sender_address,
            subject=TEST_EMAIL_SUBJECT,
            html_content=TEST_EMAIL_HTML,
        )
