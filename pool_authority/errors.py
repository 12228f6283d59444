"""Error types shared by the payment and email services"""


class ProviderError(Exception):
    """A call to an external provider failed; message is the provider's own"""


class PaymentProviderError(ProviderError):
    pass


class EmailDeliveryError(ProviderError):
    pass


class ProviderNotConfiguredError(Exception):
    """Credentials for a provider are missing from the environment"""


PAYMENTS_NOT_CONFIGURED = "Payments not configured. Set STRIPE_SECRET_KEY."
EMAIL_NOT_CONFIGURED = "Email not configured. Set RESEND_API_KEY or SMTP_USER and SMTP_PASSWORD."
