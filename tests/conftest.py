"""Shared pytest fixtures: settings, fake providers and a test client."""

from types import SimpleNamespace

import pytest
from fastapi.testclient import TestClient

from pool_authority.config import Settings
from pool_authority.domain.payments.stripe_service import StripeService
from pool_authority.email_service import EmailService
from pool_authority.main import create_app


class FakeEmailBackend:
    """Records every message instead of talking to a provider."""

    name = "fake"

    def __init__(self, error=None):
        self.sent = []
        self.verified = False
        self.error = error

    def send(self, to, subject, html_content, from_address):
        if self.error:
            raise self.error
        self.sent.append(
            {"to": to, "subject": subject, "html": html_content, "from": from_address}
        )
        return {"id": f"fake-{len(self.sent)}"}

    def verify(self):
        self.verified = True


class FakeCheckoutSessions:
    """Stands in for stripe.checkout.Session."""

    def __init__(self, error=None, retrieved=None):
        self.created = []
        self.retrieved_ids = []
        self.error = error
        self.retrieved = retrieved or SimpleNamespace(
            payment_status="paid", customer_email="pat@example.com", amount_total=4999
        )

    def create(self, **params):
        if self.error:
            raise self.error
        self.created.append(params)
        return SimpleNamespace(
            id=f"cs_test_{len(self.created)}",
            url=f"https://checkout.stripe.test/c/pay/cs_test_{len(self.created)}",
        )

    def retrieve(self, session_id, **params):
        if self.error:
            raise self.error
        self.retrieved_ids.append((session_id, params))
        return self.retrieved


@pytest.fixture
def settings():
    return Settings(
        stripe_secret_key="sk_test_123",
        smtp_user="owner@poolauthority.test",
        smtp_password="app-password",
        email_from_address="owner@poolauthority.test",
    )


@pytest.fixture
def unconfigured_settings():
    return Settings()


@pytest.fixture
def email_backend():
    return FakeEmailBackend()


@pytest.fixture
def checkout_sessions():
    return FakeCheckoutSessions()


@pytest.fixture
def email_service(settings, email_backend):
    return EmailService(settings, backend=email_backend)


@pytest.fixture
def stripe_service(settings, checkout_sessions):
    return StripeService(settings, sessions_api=checkout_sessions)


@pytest.fixture
def client(settings, email_service, stripe_service):
    app = create_app(settings, email_service=email_service, stripe_service=stripe_service)
    return TestClient(app)


@pytest.fixture
def unconfigured_client(unconfigured_settings):
    return TestClient(create_app(unconfigured_settings))
