"""Shared test fixtures."""

import httpx
import pytest
from ecdsa import NIST256p, SigningKey
from httpx import ASGITransport, AsyncClient

from hookguard.config import Settings
from hookguard.crypto.keys import KeyRing, load_public_key
from hookguard.models.events import EventSource

from tests.helpers import FakeSigningApi, public_pem


@pytest.fixture(scope="session")
def fordefi_signing_key() -> SigningKey:
    return SigningKey.generate(curve=NIST256p)


@pytest.fixture(scope="session")
def hypernative_signing_key() -> SigningKey:
    return SigningKey.generate(curve=NIST256p)


@pytest.fixture
def settings(fordefi_signing_key, hypernative_signing_key) -> Settings:
    return Settings(
        _env_file=None,
        fordefi_public_key=public_pem(fordefi_signing_key),
        hypernative_public_key=public_pem(hypernative_signing_key),
        fordefi_api_user_token="test-token",
        signing_trigger_url_template="https://api.test/transactions/{transaction_id}/trigger-signing",
        signing_trigger_timeout_seconds=2.0,
    )


@pytest.fixture
def key_ring(fordefi_signing_key, hypernative_signing_key) -> KeyRing:
    return KeyRing(
        fordefi=load_public_key(EventSource.FORDEFI, public_pem(fordefi_signing_key)),
        hypernative=load_public_key(EventSource.HYPERNATIVE, public_pem(hypernative_signing_key)),
    )


@pytest.fixture
def signing_api() -> FakeSigningApi:
    return FakeSigningApi()


@pytest.fixture
async def http_client(signing_api):
    async with httpx.AsyncClient(transport=httpx.MockTransport(signing_api)) as client:
        yield client


@pytest.fixture
def app(settings, key_ring, http_client):
    """Create a test application with the startup state filled in directly."""
    from hookguard.main import build_ingress, create_app

    _app = create_app(settings)
    _app.state.ingress = build_ingress(settings, key_ring, http_client)
    return _app


@pytest.fixture
async def client(app):
    """Async HTTP test client."""
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac
