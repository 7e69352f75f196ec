"""Tests for the immutable token entity."""

import pytest
from datetime import datetime, timezone

from neo_jwt.core.entities import JwtToken
from neo_jwt.core.exceptions import ClaimNotFoundError, ClaimTypeMismatchError, InvalidArgumentError


@pytest.fixture
def token():
    return JwtToken(
        header={"alg": "HS256", "typ": "JWT", "kid": "k1"},
        payload={
            "iss": "issuer",
            "sub": "user-1",
            "aud": ["api", "web"],
            "exp": 1767229200,
            "iat": 1767225600,
            "roles": ["admin"],
            "age": "42",
        },
        signature="c2ln",
        raw="aaa.bbb.c2ln",
    )


class TestClaimAccess:
    """Test cases for reading claims."""

    def test_get_claim_with_type(self, token):
        """Test typed reads convert the stored value."""
        assert token.get_claim("age", int) == 42
        assert token.get_claim("exp", datetime) == datetime(2026, 1, 1, 1, tzinfo=timezone.utc)

    def test_missing_claim_raises(self, token):
        """Test absent claims raise ClaimNotFoundError."""
        with pytest.raises(ClaimNotFoundError) as exc_info:
            token.get_claim("email")
        assert exc_info.value.claim_name == "email"

    def test_type_mismatch_raises(self, token):
        """Test impossible conversions raise ClaimTypeMismatchError."""
        with pytest.raises(ClaimTypeMismatchError):
            token.get_claim("roles", int)

    def test_try_get_claim(self, token):
        """Test try_get_claim never raises."""
        assert token.try_get_claim("sub", str) == (True, "user-1")
        assert token.try_get_claim("missing") == (False, None)
        assert token.try_get_claim("roles", int) == (False, None)

    def test_header_access(self, token):
        """Test header parameters are read like claims."""
        assert token.get_header("kid") == "k1"
        with pytest.raises(ClaimNotFoundError) as exc_info:
            token.get_header("cty")
        assert exc_info.value.location == "header"

    def test_well_known_properties(self, token):
        """Test registered claims are exposed as properties."""
        assert token.issuer == "issuer"
        assert token.subject == "user-1"
        assert token.audiences == ["api", "web"]
        assert token.algorithm == "HS256"
        assert token.key_id == "k1"
        assert token.token_type == "JWT"
        assert token.issued_at == datetime(2026, 1, 1, tzinfo=timezone.utc)
        assert token.not_before is None
        assert token.jwt_id is None

    def test_single_audience_normalized(self):
        """Test a string aud becomes a one-element list."""
        token = JwtToken({"alg": "none"}, {"aud": "api"})
        assert token.audiences == ["api"]
        assert token.audience == "api"


class TestImmutability:
    """Test cases for isolation from source dicts and callers."""

    def test_source_dict_changes_do_not_leak(self):
        """Test the token copies its inputs."""
        payload = {"roles": ["a"]}
        token = JwtToken({"alg": "HS256"}, payload)
        payload["roles"].append("b")
        assert token.get_claim("roles") == ["a"]

    def test_returned_values_are_copies(self, token):
        """Test mutating a returned claim does not change the token."""
        roles = token.get_claim("roles")
        roles.append("root")
        claims = token.claims
        claims["sub"] = "someone-else"
        assert token.get_claim("roles") == ["admin"]
        assert token.subject == "user-1"

    def test_payload_is_read_only(self, token):
        """Test the payload mapping rejects writes."""
        with pytest.raises(TypeError):
            token.payload["sub"] = "x"

    def test_with_claim_returns_stale_copy(self, token):
        """Test edits produce a new token without a raw form."""
        edited = token.with_claim("sub", "user-2")
        assert edited.subject == "user-2"
        assert edited.is_stale
        assert edited.signing_input is None
        assert token.subject == "user-1"
        assert not token.is_stale

    def test_without_claims(self, token):
        """Test removing payload and header entries."""
        assert not token.without_claim("roles").has_claim("roles")
        assert not token.without_header_claim("kid").has_header("kid")

    def test_empty_claim_name_rejected(self, token):
        """Test with_claim requires a name."""
        with pytest.raises(InvalidArgumentError):
            token.with_claim("", 1)


class TestRawForm:
    """Test cases for raw-form helpers."""

    def test_signing_input(self, token):
        """Test signing input is everything before the last dot."""
        assert token.signing_input == b"aaa.bbb"

    def test_str_and_signed(self, token):
        """Test str returns raw and is_signed reflects alg/signature."""
        assert str(token) == "aaa.bbb.c2ln"
        assert token.is_signed
        assert not JwtToken({"alg": "none"}, {}).is_signed

    def test_mask_for_logging_hides_raw(self):
        """Test long raw tokens are masked."""
        raw = "x" * 40 + ".y.z"
        token = JwtToken({"alg": "HS256"}, {}, "z", raw)
        assert token.mask_for_logging() != raw
        assert "..." in token.mask_for_logging()
