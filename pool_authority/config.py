import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv

logger = logging.getLogger(__name__)

# Load .env from project root
env_path = Path(__file__).resolve().parent.parent / ".env"

DEFAULT_COMPANY_NAME = "Pool Service"
DEFAULT_REDIRECT_ORIGIN = "http://localhost:3000"


def _env(name: str, *aliases: str, default: Optional[str] = None) -> Optional[str]:
    """Return the first non-empty value among name and its aliases"""
    for key in (name, *aliases):
        value = os.getenv(key)
        if value:
            return value
    return default


def _env_bool(name: str, default: bool) -> bool:
    value = os.getenv(name)
    if value is None or value == "":
        return default
    return value.strip().lower() in {"1", "true", "yes", "on"}


@dataclass(frozen=True)
class Settings:
    """Process-wide configuration, read once at start-up"""

    # Stripe Configuration
    stripe_secret_key: Optional[str] = None
    stripe_currency: str = "usd"

    # Resend Email Configuration
    resend_api_key: Optional[str] = None

    # SMTP Configuration (Gmail app passwords work here)
    smtp_host: str = "smtp.gmail.com"
    smtp_port: int = 587
    smtp_user: Optional[str] = None
    smtp_password: Optional[str] = None
    smtp_use_tls: bool = True

    # "resend", "smtp" or "auto"
    email_provider: str = "auto"
    email_from_address: Optional[str] = None

    default_redirect_origin: str = DEFAULT_REDIRECT_ORIGIN
    allowed_origins: list[str] = field(default_factory=lambda: ["*"])
    port: int = 3001
    log_level: str = "INFO"

    @classmethod
    def from_env(cls, load_dotenv_file: bool = True) -> "Settings":
        """Build settings from the process environment (and .env if present)"""
        if load_dotenv_file:
            load_dotenv(dotenv_path=env_path, override=False)

        smtp_user = _env("SMTP_USER", "GMAIL_USER")
        origins = _env("ALLOWED_ORIGINS", default="*")

        return cls(
            stripe_secret_key=_env("STRIPE_SECRET_KEY"),
            stripe_currency=_env("STRIPE_CURRENCY", default="usd").lower(),
            resend_api_key=_env("RESEND_API_KEY"),
            smtp_host=_env("SMTP_HOST", default="smtp.gmail.com"),
            smtp_port=int(_env("SMTP_PORT", default="587")),
            smtp_user=smtp_user,
            smtp_password=_env("SMTP_PASSWORD", "GMAIL_APP_PASSWORD"),
            smtp_use_tls=_env_bool("SMTP_USE_TLS", True),
            email_provider=_env("EMAIL_PROVIDER", default="auto").strip().lower(),
            email_from_address=_env("EMAIL_FROM_ADDRESS", default=smtp_user),
            default_redirect_origin=_env(
                "DEFAULT_REDIRECT_ORIGIN", default=DEFAULT_REDIRECT_ORIGIN
            ).rstrip("/"),
            allowed_origins=[o.strip() for o in origins.split(",") if o.strip()],
            port=int(_env("PORT", default="3001")),
            log_level=_env("LOG_LEVEL", default="INFO").upper(),
        )

    @property
    def smtp_configured(self) -> bool:
        return bool(self.smtp_user and self.smtp_password)

    @property
    def resolved_email_provider(self) -> Optional[str]:
        """
        Pick the email backend to use.
        Priority order for "auto":
        1. Resend, when RESEND_API_KEY is set
        2. SMTP, when mailbox credentials are set
        Returns None when nothing usable is configured.
        """
        if self.email_provider == "resend":
            return "resend" if self.resend_api_key else None
        if self.email_provider == "smtp":
            return "smtp" if self.smtp_configured else None
        if self.email_provider != "auto":
            logger.warning(f"Unknown EMAIL_PROVIDER '{self.email_provider}', using auto detection")

        if self.resend_api_key:
            return "resend"
        if self.smtp_configured:
            return "smtp"
        return None

    @property
    def sender_address(self) -> Optional[str]:
        return self.email_from_address or self.smtp_user
