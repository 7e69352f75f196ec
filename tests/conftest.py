"""Pytest configuration and fixtures for neo-jwt tests."""

import pytest
from datetime import datetime, timedelta, timezone

from cryptography.hazmat.primitives.asymmetric import ec, rsa

from neo_jwt.application import JwtBuilder, JwtParser, JwtValidator, SignatureEngine
from neo_jwt.application.validators import ValidationParameters


class FixedClock:
    """Settable clock for deterministic lifetime tests."""

    def __init__(self, now: datetime):
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    def advance(self, delta: timedelta) -> None:
        self.now = self.now + delta


@pytest.fixture
def clock():
    """Clock frozen at 2026-01-01 00:00:00 UTC."""
    return FixedClock(datetime(2026, 1, 1, tzinfo=timezone.utc))


@pytest.fixture
def hmac_key():
    """32-byte HMAC secret."""
    return bytes(range(32))


@pytest.fixture
def other_hmac_key():
    """A second, unrelated 32-byte HMAC secret."""
    return bytes(range(100, 132))


@pytest.fixture(scope="session")
def rsa_private_key():
    """2048-bit RSA private key shared by the session."""
    return rsa.generate_private_key(public_exponent=65537, key_size=2048)


@pytest.fixture(scope="session")
def ec_private_key():
    """P-256 private key shared by the session."""
    return ec.generate_private_key(ec.SECP256R1())


@pytest.fixture
def signature_engine():
    return SignatureEngine()


@pytest.fixture
def builder(clock):
    return JwtBuilder(clock=clock)


@pytest.fixture
def parser():
    return JwtParser()


@pytest.fixture
def validator(clock, signature_engine):
    return JwtValidator(signature_engine=signature_engine, clock=clock)


@pytest.fixture
def make_parameters(hmac_key):
    """Factory for parameters that check lifetime and signature only."""

    def _make(**overrides):
        values = {
            "validate_issuer": False,
            "validate_audience": False,
            "symmetric_key": hmac_key,
        }
        values.update(overrides)
        return ValidationParameters(**values)

    return _make


@pytest.fixture
def signed_token(builder, hmac_key):
    """HS256 token for user-1, valid for one hour from the fixed clock."""
    return (
        builder.set_issuer("auth.example.com")
        .set_subject("user-1")
        .set_audience("api")
        .set_jwt_id("jti-1")
        .add_lifetime_claims(timedelta(hours=1))
        .sign_hs256(hmac_key)
    )
