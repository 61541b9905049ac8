"""Pytest fixtures for the storefront API."""

import pytest
from fastapi.testclient import TestClient

from config import Settings
from database import seeded_store
from main import create_app

SESSION_URL = "https://checkout.stripe.com/c/pay/cs_test_123"


class FakeCheckoutProvider:
    """Records create_session calls instead of talking to Stripe."""

    def __init__(self, url=SESSION_URL, error=None):
        self.url = url
        self.error = error
        self.calls = []

    def create_session(self, line_items, success_url, cancel_url):
        self.calls.append({"line_items": line_items, "success_url": success_url, "cancel_url": cancel_url})
        if self.error is not None:
            raise self.error
        return self.url


@pytest.fixture
def settings(tmp_path):
    return Settings(STRIPE_SECRET_KEY="", CLIENT_BUILD_DIR=str(tmp_path / "no-client"))


@pytest.fixture
def store():
    return seeded_store()


@pytest.fixture
def provider():
    return FakeCheckoutProvider()


@pytest.fixture
def client(settings, store, provider):
    return TestClient(create_app(settings=settings, store=store, provider=provider))


@pytest.fixture
def unconfigured_client(settings, store):
    return TestClient(create_app(settings=settings, store=store))
