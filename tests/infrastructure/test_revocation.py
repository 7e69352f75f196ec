"""Tests for the revocation registry and the repository-backed revoker."""

import pytest
from datetime import timedelta

from neo_jwt.core.exceptions import InvalidArgumentError
from neo_jwt.infrastructure.repositories import (
    DEFAULT_REVOCATION_REASON,
    REVOCATION_REASON_KEY,
    REVOKED_TOKEN_TYPE,
    JwtRevoker,
    MemoryTokenRepository,
    TokenRepositoryRevoker,
)


@pytest.fixture
def user_tokens(builder, clock, hmac_key):
    """Three tokens for user-1 issued a minute apart, plus one for user-2."""
    tokens = []
    for i in range(3):
        tokens.append(
            builder.reset().set_subject("user-1").set_jwt_id(f"t{i}").add_lifetime_claims(timedelta(hours=1)).sign_hs256(hmac_key)
        )
        clock.advance(timedelta(minutes=1))
    other = builder.reset().set_subject("user-2").add_lifetime_claims(timedelta(hours=1)).sign_hs256(hmac_key)
    return tokens, other


class TestJwtRevoker:
    """Test cases for JwtRevoker."""

    def test_revoke_and_query(self, clock, signed_token):
        """Test revocation is recorded with its reason."""
        revoker = JwtRevoker(clock=clock)
        assert not revoker.is_revoked(signed_token)
        assert revoker.try_get_revocation_reason(signed_token) == (False, None)

        assert revoker.revoke(signed_token, "compromised")
        assert revoker.is_revoked(signed_token)
        assert revoker.get_revocation_reason(signed_token) == "compromised"
        assert not revoker.revoke(signed_token, "again")
        assert revoker.get_revocation_reason(signed_token) == "compromised"

    def test_default_reason(self, clock, signed_token):
        """Test a missing reason gets the default text."""
        revoker = JwtRevoker(clock=clock)
        revoker.revoke(signed_token)
        assert revoker.get_revocation_reason(signed_token) == DEFAULT_REVOCATION_REASON

    def test_record_expiry(self, clock, signed_token):
        """Test records lapse strictly after expires_at."""
        revoker = JwtRevoker(clock=clock)
        revoker.revoke(signed_token, "r", expires_at=clock() + timedelta(minutes=1))

        clock.advance(timedelta(minutes=1))
        assert revoker.is_revoked(signed_token)
        clock.advance(timedelta(seconds=1))
        assert not revoker.is_revoked(signed_token)
        assert len(revoker) == 0

    def test_cleanup_expired(self, clock, signed_token):
        """Test the sweep purges lapsed records."""
        revoker = JwtRevoker(default_ttl=timedelta(seconds=10), clock=clock)
        revoker.revoke(signed_token)
        clock.advance(timedelta(seconds=11))
        assert revoker.cleanup_expired() == 1
        assert len(revoker) == 0

    def test_unparseable_token_not_revoked(self, clock):
        """Test garbage cannot be revoked."""
        revoker = JwtRevoker(clock=clock)
        assert not revoker.revoke("garbage")

    def test_empty_token(self, clock):
        """Test empty tokens raise."""
        revoker = JwtRevoker(clock=clock)
        with pytest.raises(InvalidArgumentError):
            revoker.is_revoked("")
        with pytest.raises(InvalidArgumentError):
            revoker.revoke("")

    def test_revoke_all_for_user(self, clock, user_tokens, builder, hmac_key):
        """Test the user cutoff covers seen and unseen earlier tokens only."""
        tokens, other = user_tokens
        revoker = JwtRevoker(clock=clock)
        revoker.revoke(tokens[0], "explicit")

        assert revoker.revoke_all_for_user("user-1", "password reset") == 1

        assert revoker.get_revocation_reason(tokens[0]) == "explicit"
        assert revoker.get_revocation_reason(tokens[2]) == "password reset"
        assert not revoker.is_revoked(other)

        clock.advance(timedelta(seconds=1))
        later = builder.reset().set_subject("user-1").add_lifetime_claims(timedelta(hours=1)).sign_hs256(hmac_key)
        assert not revoker.is_revoked(later)

    def test_revoke_all_for_user_spares_same_second_login(self, clock, builder, hmac_key):
        """Test a token issued later in the cutoff second stays valid."""
        clock.advance(timedelta(milliseconds=500))
        revoker = JwtRevoker(clock=clock)
        revoker.revoke_all_for_user("user-1")

        clock.advance(timedelta(milliseconds=100))
        fresh = builder.reset().set_subject("user-1").add_lifetime_claims(timedelta(hours=1)).sign_hs256(hmac_key)
        assert not revoker.is_revoked(fresh)

        clock.advance(timedelta(seconds=5))
        assert revoker.revoke_all_for_user("user-1") == 0
        assert revoker.is_revoked(fresh)

    def test_revoke_tokens(self, clock, user_tokens):
        """Test batch revocation counts new revocations."""
        tokens, _ = user_tokens
        revoker = JwtRevoker(clock=clock)
        revoker.revoke(tokens[0])
        assert revoker.revoke_tokens(tokens, "batch") == 2
        with pytest.raises(InvalidArgumentError):
            revoker.revoke_tokens(None)

    @pytest.mark.asyncio
    async def test_async_variants(self, clock, user_tokens):
        """Test coroutine variants."""
        tokens, _ = user_tokens
        revoker = JwtRevoker(clock=clock)
        assert await revoker.revoke_async(tokens[0], "r")
        assert await revoker.is_revoked_async(tokens[0])
        assert await revoker.get_revocation_reason_async(tokens[0]) == "r"
        assert await revoker.try_get_revocation_reason_async(tokens[1]) == (False, None)
        assert await revoker.revoke_tokens_async(tokens[1:]) == 2


class TestMemoryTokenRepository:
    """Test cases for MemoryTokenRepository."""

    @pytest.fixture
    def repository(self, clock):
        return MemoryTokenRepository(cleanup_interval=timedelta(hours=1), clock=clock)

    def test_store_and_lookup(self, repository, clock):
        """Test tokens are indexed by user and type."""
        expires = clock() + timedelta(hours=1)
        assert repository.store_token("a1", "u1", expires)
        assert repository.store_token("r1", "u1", expires, "refresh", {"device": "phone"})
        assert repository.store_token("a2", "u2", expires)
        assert not repository.store_token("a1", "u1", expires)

        assert repository.get_token("r1").metadata == {"device": "phone"}
        assert {info.token for info in repository.get_tokens_for_user("u1")} == {"a1", "r1"}
        assert [info.token for info in repository.get_tokens_for_user("u1", "refresh")] == ["r1"]
        assert repository.get_token_count() == 3
        assert repository.get_token_count(user_id="u1", token_type="access") == 1
        assert repository.token_exists("a2")

    def test_argument_checks(self, repository, clock):
        """Test empty token and user ids."""
        with pytest.raises(InvalidArgumentError):
            repository.store_token("", "u1", clock())
        with pytest.raises(InvalidArgumentError):
            repository.store_token("t", "", clock())
        with pytest.raises(InvalidArgumentError):
            repository.get_tokens_for_user("")
        assert repository.get_token("") is None
        assert not repository.remove_token("")

    def test_remove(self, repository, clock):
        """Test single and per-user removal."""
        expires = clock() + timedelta(hours=1)
        repository.store_token("a1", "u1", expires)
        repository.store_token("r1", "u1", expires, "refresh")
        repository.store_token("a2", "u2", expires)

        assert repository.remove_token("a2")
        assert repository.remove_tokens_for_user("u1", "refresh") == 1
        assert repository.remove_tokens_for_user("u1") == 1
        assert repository.get_token_count() == 0

    def test_remove_expired(self, repository, clock):
        """Test tokens expiring at or before the cutoff are removed."""
        repository.store_token("old", "u1", clock() + timedelta(minutes=1))
        repository.store_token("new", "u1", clock() + timedelta(hours=2))
        assert repository.remove_expired_tokens(clock() + timedelta(minutes=1)) == 1
        assert repository.token_exists("new")

    def test_background_cleanup(self, repository, clock):
        """Test a store after the interval sweeps expired tokens."""
        repository.store_token("old", "u1", clock() + timedelta(minutes=1))
        clock.advance(timedelta(hours=1))
        repository.store_token("fresh", "u1", clock() + timedelta(hours=1))

        assert repository.wait_for_cleanup(timeout=5)
        assert not repository.token_exists("old")
        assert repository.token_exists("fresh")

    @pytest.mark.asyncio
    async def test_async_variants(self, repository, clock):
        """Test coroutine variants."""
        expires = clock() + timedelta(hours=1)
        assert await repository.store_token_async("a1", "u1", expires)
        assert (await repository.get_token_async("a1")).user_id == "u1"
        assert len(await repository.get_tokens_for_user_async("u1")) == 1
        assert await repository.token_exists_async("a1")
        assert await repository.get_token_count_async() == 1
        assert await repository.remove_token_async("a1")
        assert await repository.remove_tokens_for_user_async("u1") == 0
        assert await repository.remove_expired_tokens_async() == 0


class TestTokenRepositoryRevoker:
    """Test cases for TokenRepositoryRevoker."""

    @pytest.fixture
    def repository(self, clock):
        return MemoryTokenRepository(clock=clock)

    def test_revoke_stores_revoked_entry(self, repository, clock, signed_token):
        """Test revocations are stored as typed entries with the reason."""
        revoker = TokenRepositoryRevoker(repository, clock=clock)
        assert revoker.revoke(signed_token, "stolen")

        info = repository.get_token(signed_token)
        assert info.token_type == REVOKED_TOKEN_TYPE
        assert info.user_id == "user-1"
        assert info.metadata[REVOCATION_REASON_KEY] == "stolen"
        assert info.expiration_time == clock() + timedelta(hours=1)
        assert revoker.is_revoked(signed_token)
        assert revoker.try_get_revocation_reason(signed_token) == (True, "stolen")
        assert not revoker.revoke(signed_token, "again")

    def test_tracked_token_is_replaced(self, repository, clock, signed_token):
        """Test revoking a tracked access token replaces its entry."""
        repository.store_token(signed_token, "user-1", clock() + timedelta(hours=1))
        revoker = TokenRepositoryRevoker(repository, clock=clock)

        assert not revoker.is_revoked(signed_token)
        assert revoker.revoke(signed_token)
        assert revoker.get_revocation_reason(signed_token) == DEFAULT_REVOCATION_REASON
        assert repository.get_token_count() == 1

    def test_entries_lapse_with_token(self, repository, clock, signed_token):
        """Test revocation entries stop counting once the token expires."""
        revoker = TokenRepositoryRevoker(repository, clock=clock)
        revoker.revoke(signed_token)
        clock.advance(timedelta(hours=1))
        assert not revoker.is_revoked(signed_token)

    def test_revoke_all_for_user(self, repository, clock, user_tokens):
        """Test every tracked token of the user is revoked."""
        tokens, other = user_tokens
        expires = clock() + timedelta(hours=1)
        for token in tokens:
            repository.store_token(token, "user-1", expires)
        repository.store_token(other, "user-2", expires)
        revoker = TokenRepositoryRevoker(repository, clock=clock)

        assert revoker.revoke_all_for_user("user-1") == 3
        assert all(revoker.is_revoked(token) for token in tokens)
        assert not revoker.is_revoked(other)
        assert revoker.get_revocation_reason(tokens[0]) == "All tokens revoked for user user-1"

    def test_null_repository(self):
        """Test a repository is required."""
        with pytest.raises(InvalidArgumentError):
            TokenRepositoryRevoker(None)

    def test_as_validator_revoker(self, repository, clock, validator, make_parameters, signed_token):
        """Test the validator consults the repository-backed revoker."""
        revoker = TokenRepositoryRevoker(repository, clock=clock)
        revoker.revoke(signed_token, "logout")
        parameters = make_parameters(validate_revocation=True, token_revoker=revoker)
        result = validator.validate(signed_token, parameters)
        assert result.first_error.message == "Token has been revoked. Reason: logout"

    @pytest.mark.asyncio
    async def test_async_variants(self, repository, clock, user_tokens):
        """Test coroutine variants."""
        tokens, _ = user_tokens
        revoker = TokenRepositoryRevoker(repository, clock=clock)
        assert await revoker.revoke_async(tokens[0], "r")
        assert await revoker.is_revoked_async(tokens[0])
        assert await revoker.get_revocation_reason_async(tokens[0]) == "r"
        assert await revoker.revoke_tokens_async(tokens) == 2
