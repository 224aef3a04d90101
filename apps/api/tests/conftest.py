from __future__ import annotations

import os

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

os.environ.setdefault("LIVEKIT_API_KEY", "test-api-key")
os.environ.setdefault("LIVEKIT_API_SECRET", "test-api-secret-with-enough-length-for-hs256")

from tokengen.main import app  # noqa: E402
from tokengen.routers.token import get_issuer  # noqa: E402
from tokengen.services.grants import CapabilityPolicy  # noqa: E402
from tokengen.services.issuer import JoinTokenIssuer, SigningIdentity  # noqa: E402

API_KEY = "APItestkey"
API_SECRET = "a-test-secret-that-is-long-enough-for-hs256-signing"


@pytest.fixture
def signing() -> SigningIdentity:
    return SigningIdentity(key_id=API_KEY, secret=API_SECRET)


@pytest.fixture
def issuer(signing: SigningIdentity) -> JoinTokenIssuer:
    return JoinTokenIssuer(signing=signing, policy=CapabilityPolicy.defaults())


@pytest.fixture
def use_issuer():
    """Install an issuer for the token router for the duration of a test."""

    def _install(issuer: JoinTokenIssuer) -> None:
        app.dependency_overrides[get_issuer] = lambda: issuer

    yield _install
    app.dependency_overrides.pop(get_issuer, None)


@pytest_asyncio.fixture
async def client():
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://testserver") as http_client:
        yield http_client
