"""JWT validation pipeline.

Validation is a fixed-order, short-circuit pipeline:

    token type -> revocation -> lifetime -> issuer -> audience
    -> signature -> jti -> custom validators

The first failing stage's result is returned. Failures are returned as
ValidationResult data; the validator only raises for caller misuse
(missing token) and cancellation.
"""

import asyncio
import hashlib
import inspect
import logging
from datetime import timedelta
from typing import Any, Awaitable, Callable, Dict, Iterable, List, Optional, Tuple, Union

from ...config.logging_config import mask_token
from ...core.constants import (
    ALGORITHM_NONE,
    CLAIM_AUDIENCE,
    CLAIM_EXPIRATION_TIME,
    CLAIM_ISSUER,
    CLAIM_JWT_ID,
    CLAIM_NOT_BEFORE,
    HEADER_TYPE,
)
from ...core.entities import JwtToken
from ...core.exceptions import DecodeError, FormatError, InvalidArgumentError
from ...core.protocols import ClaimsTransformer, TokenCache
from ...core.value_objects import ClaimValue, SecurityKey, ValidationCode
from ...utils import base64url
from ...utils.clock import Clock, resolve_clock
from ..parser import JwtParser
from ..signing import SignatureEngine, is_key_compatible, key_kind_for
from .context import ValidationContext
from .parameters import ValidationParameters
from .result import ValidationResult

logger = logging.getLogger(__name__)

TokenValidatorFn = Callable[[JwtToken], ValidationResult]
AsyncTokenValidatorFn = Callable[[JwtToken], Awaitable[ValidationResult]]
Stage = Callable[[JwtToken, ValidationParameters], Optional[ValidationResult]]


class JwtValidator:
    """Validates tokens against ValidationParameters.

    Thread-safe for concurrent ``validate`` calls once configured; the
    fluent setters and ``add_validator`` are configuration-time only.
    """

    def __init__(
        self,
        parser: Optional[JwtParser] = None,
        signature_engine: Optional[SignatureEngine] = None,
        clock: Optional[Clock] = None,
    ):
        self._parser = parser or JwtParser()
        self._signature_engine = signature_engine or SignatureEngine()
        self._clock = resolve_clock(clock)
        self._validators: List[TokenValidatorFn] = []
        self._async_validators: List[AsyncTokenValidatorFn] = []

        # Fluent configuration used when no parameters are passed
        self._hmac_key: Optional[SecurityKey] = None
        self._issuer: Optional[str] = None
        self._audience: Optional[str] = None
        self._clock_skew = timedelta(minutes=5)
        self._validate_expiration = True
        self._validate_not_before = True

    @property
    def signature_engine(self) -> SignatureEngine:
        return self._signature_engine

    @property
    def parser(self) -> JwtParser:
        return self._parser

    # Fluent configuration

    def set_hmac_key(self, key: Union[bytes, str, SecurityKey]) -> "JwtValidator":
        """Set the fallback HMAC key used when parameters supply no key."""
        if key is None:
            raise InvalidArgumentError("HMAC key cannot be null.")
        self._hmac_key = key if isinstance(key, SecurityKey) else SecurityKey.symmetric(key)
        return self

    def set_issuer(self, issuer: Optional[str]) -> "JwtValidator":
        self._issuer = issuer
        return self

    def set_audience(self, audience: Optional[str]) -> "JwtValidator":
        self._audience = audience
        return self

    def set_clock_skew(self, clock_skew: timedelta) -> "JwtValidator":
        """Set the tolerance for ``exp``/``nbf`` checks.

        Raises:
            InvalidArgumentError: If the skew is negative
        """
        if clock_skew < timedelta(0):
            raise InvalidArgumentError("Clock skew cannot be negative.")
        self._clock_skew = clock_skew
        return self

    def validate_expiration(self, validate: bool = True) -> "JwtValidator":
        self._validate_expiration = validate
        return self

    def validate_not_before(self, validate: bool = True) -> "JwtValidator":
        self._validate_not_before = validate
        return self

    def add_validator(self, validator: TokenValidatorFn) -> "JwtValidator":
        """Register a custom check run after the built-in stages."""
        if validator is None:
            raise InvalidArgumentError("Validator cannot be null.")
        self._validators.append(validator)
        return self

    def add_async_validator(self, validator: AsyncTokenValidatorFn) -> "JwtValidator":
        """Register a coroutine check; only ``validate_async`` runs these."""
        if validator is None:
            raise InvalidArgumentError("Validator cannot be null.")
        self._async_validators.append(validator)
        return self

    def build_parameters(self) -> ValidationParameters:
        """Parameters equivalent to the fluent configuration."""
        return ValidationParameters(
            valid_issuer=self._issuer,
            validate_issuer=bool(self._issuer),
            valid_audience=self._audience,
            validate_audience=bool(self._audience),
            validate_lifetime=self._validate_expiration or self._validate_not_before,
            validate_expiration=self._validate_expiration,
            validate_not_before=self._validate_not_before,
            validate_signature=True,
            clock_skew=self._clock_skew,
        )

    # Entry points

    def validate(
        self,
        token: Union[str, JwtToken],
        parameters: Optional[ValidationParameters] = None,
        cache: Optional[TokenCache] = None,
    ) -> ValidationResult:
        """Validate a raw token string or a parsed token.

        Args:
            token: Raw compact token or JwtToken
            parameters: What to validate; the fluent configuration when None
            cache: Optional cache for parsed tokens and successful results

        Returns:
            ValidationResult; malformed raw tokens yield ``invalid_token``

        Raises:
            InvalidArgumentError: If ``token`` is None or empty
        """
        parameters = parameters or self.build_parameters()

        if isinstance(token, JwtToken):
            if cache is not None and token.raw is not None:
                return self._validate_with_cache(token.raw, parameters, cache)
            return self.validate_token(token, parameters)

        self._require_raw(token)
        size_failure = self._check_size(token, parameters)
        if size_failure is not None:
            return size_failure
        if cache is not None:
            return self._validate_with_cache(token, parameters, cache)

        parsed, failure = self._parse(token)
        if failure is not None:
            return failure
        return self.validate_token(parsed, parameters)

    def validate_token(self, token: JwtToken, parameters: Optional[ValidationParameters] = None) -> ValidationResult:
        """Run the pipeline on a parsed token (no cache involved)."""
        if token is None:
            raise InvalidArgumentError("Token cannot be null.")
        parameters = parameters or self.build_parameters()

        for stage in self._stages():
            result = stage(token, parameters)
            if result is not None:
                return self._log_failure(token, result)

        for validator in self._validators:
            result = validator(token)
            if not result.is_valid:
                return self._log_failure(token, result)

        return ValidationResult.success()

    def try_validate(
        self, token: Union[str, JwtToken], parameters: Optional[ValidationParameters] = None
    ) -> Tuple[bool, ValidationResult]:
        """Validate without raising; returns (is_valid, result)."""
        if not token:
            return False, ValidationResult.failure(ValidationCode.INVALID_TOKEN, "Token cannot be null or empty.")
        result = self.validate(token, parameters)
        return result.is_valid, result

    async def validate_async(
        self,
        token: Union[str, JwtToken],
        parameters: Optional[ValidationParameters] = None,
        cancel_event: Optional[Any] = None,
    ) -> ValidationResult:
        """Async pipeline with cooperative cancellation.

        ``cancel_event`` is any object with ``is_set()`` (asyncio.Event or
        threading.Event). It is checked before each stage and before each
        custom validator.

        Raises:
            asyncio.CancelledError: If the event is set
            InvalidArgumentError: If ``token`` is None or empty
        """
        self._check_cancelled(cancel_event)
        parameters = parameters or self.build_parameters()

        if isinstance(token, JwtToken):
            parsed = token
        else:
            self._require_raw(token)
            size_failure = self._check_size(token, parameters)
            if size_failure is not None:
                return size_failure
            parsed, failure = self._parse(token)
            if failure is not None:
                return failure

        for stage in self._stages():
            self._check_cancelled(cancel_event)
            await asyncio.sleep(0)
            result = stage(parsed, parameters)
            if result is not None:
                return self._log_failure(parsed, result)

        for validator in self._validators:
            self._check_cancelled(cancel_event)
            result = validator(parsed)
            if not result.is_valid:
                return self._log_failure(parsed, result)

        for async_validator in self._async_validators:
            self._check_cancelled(cancel_event)
            result = await async_validator(parsed)
            if not result.is_valid:
                return self._log_failure(parsed, result)

        return ValidationResult.success()

    async def try_validate_async(
        self,
        token: Union[str, JwtToken],
        parameters: Optional[ValidationParameters] = None,
        cancel_event: Optional[Any] = None,
    ) -> Tuple[bool, ValidationResult]:
        if not token:
            return False, ValidationResult.failure(ValidationCode.INVALID_TOKEN, "Token cannot be null or empty.")
        result = await self.validate_async(token, parameters, cancel_event)
        return result.is_valid, result

    # Claims transformation

    def validate_and_transform(
        self,
        token: Union[str, JwtToken],
        parameters: Optional[ValidationParameters] = None,
        transformers: Iterable[ClaimsTransformer] = (),
    ) -> Tuple[ValidationResult, Optional[Dict[str, Any]]]:
        """Validate, then pass a copy of the claims through each transformer.

        Returns:
            Tuple of (result, claims); claims is None when validation fails
        """
        parameters = parameters or self.build_parameters()
        parsed, failure = self._resolve(token, parameters)
        if failure is not None:
            return failure, None

        result = self.validate_token(parsed, parameters)
        if not result.is_valid:
            return result, None

        context = ValidationContext(parsed, parameters, self._clock())
        claims = parsed.claims
        for transformer in transformers:
            claims = transformer.transform_claims(claims, context)
        return result, claims

    async def transform_claims_async(
        self,
        token: Union[str, JwtToken],
        parameters: Optional[ValidationParameters] = None,
        transformers: Iterable[ClaimsTransformer] = (),
        cancel_event: Optional[Any] = None,
    ) -> Tuple[ValidationResult, Optional[Dict[str, Any]]]:
        """Async ``validate_and_transform``; transformers may return awaitables."""
        parameters = parameters or self.build_parameters()
        parsed, failure = self._resolve(token, parameters)
        if failure is not None:
            return failure, None

        result = await self.validate_async(parsed, parameters, cancel_event)
        if not result.is_valid:
            return result, None

        context = ValidationContext(parsed, parameters, self._clock())
        claims = parsed.claims
        for transformer in transformers:
            self._check_cancelled(cancel_event)
            transformed = transformer.transform_claims(claims, context)
            if inspect.isawaitable(transformed):
                transformed = await transformed
            claims = transformed
        return result, claims

    # Cache-aware path

    @staticmethod
    def cache_key(raw: str, parameters: ValidationParameters) -> str:
        """Fingerprint of a raw token under a parameter set."""
        token_hash = hashlib.sha256(raw.encode("utf-8")).hexdigest()
        return f"validation:{token_hash}:{parameters.fingerprint()}"

    def _validate_with_cache(self, raw: str, parameters: ValidationParameters, cache: TokenCache) -> ValidationResult:
        use_result_cache = parameters.enable_caching and not parameters.uses_external_state
        key = self.cache_key(raw, parameters) if use_result_cache else None

        if key is not None:
            cached = cache.get_validation_result(key)
            if cached is not None:
                logger.debug(f"Validation cache hit for {mask_token(raw)}")
                return ValidationResult.success()

        token = cache.get_parsed_token(raw)
        if token is None:
            token, failure = self._parse(raw)
            if failure is not None:
                return failure
            cache.set_parsed_token(raw, token)

        result = self.validate_token(token, parameters)
        if result.is_valid and key is not None:
            ttl = self._result_ttl(token, parameters)
            if ttl > timedelta(0):
                cache.set_validation_result(key, result, ttl)
        return result

    def _result_ttl(self, token: JwtToken, parameters: ValidationParameters) -> timedelta:
        ttl = parameters.cache_duration
        found, exp = token.try_get_claim(CLAIM_EXPIRATION_TIME, int)
        if found:
            now = int(self._clock().timestamp())
            remaining = timedelta(seconds=exp - now) + parameters.clock_skew
            ttl = min(ttl, remaining)
        return ttl

    # Pipeline stages

    def _stages(self) -> List[Stage]:
        return [
            self._check_token_type,
            self._check_revocation,
            self._check_lifetime,
            self._check_issuer,
            self._check_audience,
            self._check_signature,
            self._check_jti,
        ]

    def _check_token_type(self, token: JwtToken, parameters: ValidationParameters) -> Optional[ValidationResult]:
        if not parameters.require_token_type:
            return None
        token_type = token.header.get(HEADER_TYPE)
        if token_type != parameters.required_token_type:
            return ValidationResult.failure(
                ValidationCode.INVALID_CLAIM_VALUE,
                f"Invalid token type. Expected '{parameters.required_token_type}', got '{token_type}'.",
                {"claim": HEADER_TYPE},
            )
        return None

    def _check_revocation(self, token: JwtToken, parameters: ValidationParameters) -> Optional[ValidationResult]:
        revoker = parameters.token_revoker
        if not parameters.validate_revocation or revoker is None or token.raw is None:
            return None
        if not revoker.is_revoked(token.raw):
            return None
        _, reason = revoker.try_get_revocation_reason(token.raw)
        return ValidationResult.failure(
            ValidationCode.TOKEN_REVOKED,
            f"Token has been revoked. Reason: {reason or 'Not specified'}",
        )

    def _check_lifetime(self, token: JwtToken, parameters: ValidationParameters) -> Optional[ValidationResult]:
        if not parameters.validate_lifetime:
            return None

        now = int(self._clock().timestamp())
        skew = int(parameters.clock_skew.total_seconds())

        if parameters.validate_expiration:
            if CLAIM_EXPIRATION_TIME not in token.payload:
                return ValidationResult.failure(
                    ValidationCode.TOKEN_EXPIRED,
                    f"Token is missing the required '{CLAIM_EXPIRATION_TIME}' claim.",
                )
            converted, exp = ClaimValue.of(token.payload[CLAIM_EXPIRATION_TIME]).try_convert(int)
            if not converted:
                return ValidationResult.failure(ValidationCode.TOKEN_EXPIRED, "Invalid expiration time format.")
            if now > exp + skew:
                return ValidationResult.failure(
                    ValidationCode.TOKEN_EXPIRED,
                    "Token has expired.",
                    {"exp": exp, "now": now},
                )

        if parameters.validate_not_before and CLAIM_NOT_BEFORE in token.payload:
            converted, nbf = ClaimValue.of(token.payload[CLAIM_NOT_BEFORE]).try_convert(int)
            if not converted:
                return ValidationResult.failure(ValidationCode.TOKEN_NOT_YET_VALID, "Invalid not-before time format.")
            if now < nbf - skew:
                return ValidationResult.failure(
                    ValidationCode.TOKEN_NOT_YET_VALID,
                    "Token is not yet valid.",
                    {"nbf": nbf, "now": now},
                )
        return None

    def _check_issuer(self, token: JwtToken, parameters: ValidationParameters) -> Optional[ValidationResult]:
        if not parameters.validate_issuer:
            return None
        if CLAIM_ISSUER not in token.payload:
            return ValidationResult.failure(
                ValidationCode.INVALID_ISSUER,
                f"Token is missing the required '{CLAIM_ISSUER}' claim.",
            )
        issuer = ClaimValue.of(token.payload[CLAIM_ISSUER]).as_text()
        if not issuer:
            return ValidationResult.failure(ValidationCode.INVALID_ISSUER, "Token issuer is empty.")
        if parameters.valid_issuer and issuer != parameters.valid_issuer:
            return ValidationResult.failure(
                ValidationCode.INVALID_ISSUER,
                f"Invalid issuer. Expected '{parameters.valid_issuer}', got '{issuer}'.",
            )
        if parameters.valid_issuers and issuer not in parameters.valid_issuers:
            return ValidationResult.failure(
                ValidationCode.INVALID_ISSUER,
                f"Invalid issuer '{issuer}'. Not in the list of valid issuers.",
            )
        return None

    def _check_audience(self, token: JwtToken, parameters: ValidationParameters) -> Optional[ValidationResult]:
        if not parameters.validate_audience:
            return None
        if CLAIM_AUDIENCE not in token.payload:
            return ValidationResult.failure(
                ValidationCode.INVALID_AUDIENCE,
                f"Token is missing the required '{CLAIM_AUDIENCE}' claim.",
            )
        audiences = [aud for aud in token.audiences if aud]
        if not audiences:
            return ValidationResult.failure(ValidationCode.INVALID_AUDIENCE, "Token audience is empty.")
        if parameters.valid_audience and parameters.valid_audience not in audiences:
            return ValidationResult.failure(
                ValidationCode.INVALID_AUDIENCE,
                f"Invalid audience. Expected '{parameters.valid_audience}'.",
            )
        if parameters.valid_audiences and not any(aud in parameters.valid_audiences for aud in audiences):
            return ValidationResult.failure(
                ValidationCode.INVALID_AUDIENCE,
                "Invalid audience. Not in the list of valid audiences.",
            )
        return None

    def _check_signature(self, token: JwtToken, parameters: ValidationParameters) -> Optional[ValidationResult]:
        if not parameters.validate_signature:
            return None
        if token.is_stale:
            return ValidationResult.failure(
                ValidationCode.INVALID_SIGNATURE,
                "Token was modified after it was produced; its signature cannot be verified.",
            )

        algorithm = token.algorithm
        if not algorithm:
            return ValidationResult.failure(ValidationCode.INVALID_SIGNATURE, "Token is missing the 'alg' header.")
        if algorithm == ALGORITHM_NONE:
            if parameters.allow_none_algorithm and not token.signature:
                return None
            return ValidationResult.failure(
                ValidationCode.INVALID_SIGNATURE,
                "Unsecured tokens (alg 'none') are not accepted.",
            )
        if key_kind_for(algorithm) is None:
            return ValidationResult.failure(
                ValidationCode.INVALID_SIGNATURE,
                f"Unsupported algorithm: {algorithm}",
            )
        if not token.signature:
            return ValidationResult.failure(ValidationCode.INVALID_SIGNATURE, "Token signature is missing.")

        key, failure = self._resolve_key(token, parameters, algorithm)
        if failure is not None:
            return failure

        try:
            signature = base64url.decode(token.signature)
        except DecodeError:
            return ValidationResult.failure(
                ValidationCode.INVALID_SIGNATURE,
                "Token signature is not valid base64url.",
            )

        if not self._signature_engine.verify(token.signing_input, signature, algorithm, key):
            return ValidationResult.failure(ValidationCode.INVALID_SIGNATURE, "Invalid token signature.")
        return None

    def _resolve_key(
        self, token: JwtToken, parameters: ValidationParameters, algorithm: str
    ) -> Tuple[Optional[SecurityKey], Optional[ValidationResult]]:
        """Pick the verification key.

        A ``kid`` header with configured ``security_keys`` must resolve to one
        of them. Otherwise the single key of the algorithm's family wins,
        then any single key, then the fluent HMAC key.
        """
        key_id = token.key_id
        if key_id and parameters.security_keys:
            key = parameters.security_keys.get(key_id)
            if key is None:
                return None, ValidationResult.failure(
                    ValidationCode.INVALID_SIGNATURE,
                    f"Key ID not found: {key_id}",
                )
        else:
            candidates = [parameters.symmetric_key, parameters.rsa_key, parameters.ecdsa_key]
            key = next((k for k in candidates if is_key_compatible(algorithm, k)), None)
            if key is None:
                key = next((k for k in candidates if k is not None), None)
            if key is None:
                key = self._hmac_key
            if key is None:
                return None, ValidationResult.failure(
                    ValidationCode.INVALID_SIGNATURE,
                    "No valid security key found for validation",
                )

        if not is_key_compatible(algorithm, key):
            return None, ValidationResult.failure(
                ValidationCode.INVALID_SIGNATURE,
                f"Key of kind '{key.kind.value}' cannot verify {algorithm} signatures.",
            )
        return key, None

    def _check_jti(self, token: JwtToken, parameters: ValidationParameters) -> Optional[ValidationResult]:
        if not parameters.validate_jti:
            return None
        found, jti = token.try_get_claim(CLAIM_JWT_ID, str)
        if not found or not jti:
            return ValidationResult.failure(
                ValidationCode.JTI_MISSING,
                f"Token is missing the required '{CLAIM_JWT_ID}' claim.",
            )
        used_jtis = parameters.used_jtis
        if jti in used_jtis:
            return ValidationResult.failure(
                ValidationCode.JTI_ALREADY_USED,
                f"Token ID '{jti}' has already been used.",
            )
        if parameters.jti_validator is not None and not parameters.jti_validator(jti):
            return ValidationResult.failure(
                ValidationCode.INVALID_CLAIM_VALUE,
                f"Token ID '{jti}' was rejected by the JTI validator.",
                {"claim": CLAIM_JWT_ID},
            )
        used_jtis.add(jti)
        return None

    # Helpers

    def _resolve(
        self, token: Union[str, JwtToken], parameters: ValidationParameters
    ) -> Tuple[Optional[JwtToken], Optional[ValidationResult]]:
        if isinstance(token, JwtToken):
            return token, None
        self._require_raw(token)
        size_failure = self._check_size(token, parameters)
        if size_failure is not None:
            return None, size_failure
        return self._parse(token)

    def _parse(self, raw: str) -> Tuple[Optional[JwtToken], Optional[ValidationResult]]:
        try:
            return self._parser.parse(raw), None
        except FormatError as e:
            logger.debug(f"Token {mask_token(raw)} failed to parse: {e.message}")
            return None, ValidationResult.failure(
                ValidationCode.INVALID_TOKEN,
                f"Failed to parse token: {e.message}",
            )

    @staticmethod
    def _check_size(raw: str, parameters: ValidationParameters) -> Optional[ValidationResult]:
        size = len(raw.encode("utf-8"))
        if size > parameters.max_token_size_bytes:
            return ValidationResult.failure(
                ValidationCode.INVALID_TOKEN,
                f"Token exceeds the maximum size of {parameters.max_token_size_bytes} bytes.",
                {"size": size},
            )
        return None

    @staticmethod
    def _require_raw(raw: Any) -> None:
        if not raw:
            raise InvalidArgumentError("Token cannot be null or empty.")
        if not isinstance(raw, str):
            raise InvalidArgumentError(f"Token must be a string or JwtToken, got {type(raw).__name__}.")

    @staticmethod
    def _check_cancelled(cancel_event: Optional[Any]) -> None:
        if cancel_event is not None and cancel_event.is_set():
            raise asyncio.CancelledError("Token validation was cancelled.")

    @staticmethod
    def _log_failure(token: JwtToken, result: ValidationResult) -> ValidationResult:
        error = result.first_error
        if error is not None:
            logger.debug(f"Token {token.mask_for_logging()} failed validation: {error.code.value}: {error.message}")
        return result
