"""Header parameter, claim and algorithm names used on the wire."""

# Header parameters
HEADER_TYPE = "typ"
HEADER_ALGORITHM = "alg"
HEADER_KEY_ID = "kid"

# Registered claims (RFC 7519 section 4.1)
CLAIM_ISSUER = "iss"
CLAIM_SUBJECT = "sub"
CLAIM_AUDIENCE = "aud"
CLAIM_EXPIRATION_TIME = "exp"
CLAIM_NOT_BEFORE = "nbf"
CLAIM_ISSUED_AT = "iat"
CLAIM_JWT_ID = "jti"

REGISTERED_CLAIMS = frozenset({
    CLAIM_ISSUER,
    CLAIM_SUBJECT,
    CLAIM_AUDIENCE,
    CLAIM_EXPIRATION_TIME,
    CLAIM_NOT_BEFORE,
    CLAIM_ISSUED_AT,
    CLAIM_JWT_ID,
})

# Time-based claims rewritten whenever a token is re-issued
TEMPORAL_CLAIMS = frozenset({
    CLAIM_EXPIRATION_TIME,
    CLAIM_NOT_BEFORE,
    CLAIM_ISSUED_AT,
})

# Token types
TOKEN_TYPE_JWT = "JWT"
TOKEN_TYPE_REFRESH = "refresh"

# Algorithms
ALGORITHM_HS256 = "HS256"
ALGORITHM_HS384 = "HS384"
ALGORITHM_HS512 = "HS512"
ALGORITHM_RS256 = "RS256"
ALGORITHM_RS384 = "RS384"
ALGORITHM_RS512 = "RS512"
ALGORITHM_ES256 = "ES256"
ALGORITHM_ES384 = "ES384"
ALGORITHM_ES512 = "ES512"
ALGORITHM_NONE = "none"

HMAC_ALGORITHMS = frozenset({ALGORITHM_HS256, ALGORITHM_HS384, ALGORITHM_HS512})
RSA_ALGORITHMS = frozenset({ALGORITHM_RS256, ALGORITHM_RS384, ALGORITHM_RS512})
ECDSA_ALGORITHMS = frozenset({ALGORITHM_ES256, ALGORITHM_ES384, ALGORITHM_ES512})
SIGNING_ALGORITHMS = HMAC_ALGORITHMS | RSA_ALGORITHMS | ECDSA_ALGORITHMS

# IANA registered profile claims; stored and returned verbatim
CLAIM_NAME = "name"
CLAIM_GIVEN_NAME = "given_name"
CLAIM_FAMILY_NAME = "family_name"
CLAIM_MIDDLE_NAME = "middle_name"
CLAIM_NICKNAME = "nickname"
CLAIM_PREFERRED_USERNAME = "preferred_username"
CLAIM_PROFILE = "profile"
CLAIM_PICTURE = "picture"
CLAIM_WEBSITE = "website"
CLAIM_EMAIL = "email"
CLAIM_EMAIL_VERIFIED = "email_verified"
CLAIM_GENDER = "gender"
CLAIM_BIRTHDATE = "birthdate"
CLAIM_ZONEINFO = "zoneinfo"
CLAIM_LOCALE = "locale"
CLAIM_PHONE_NUMBER = "phone_number"
CLAIM_PHONE_NUMBER_VERIFIED = "phone_number_verified"
CLAIM_ADDRESS = "address"
CLAIM_UPDATED_AT = "updated_at"
CLAIM_AUTHORIZED_PARTY = "azp"
CLAIM_AUTHENTICATION_TIME = "auth_time"
CLAIM_NONCE = "nonce"
CLAIM_ACR = "acr"
CLAIM_AMR = "amr"
CLAIM_ACCESS_TOKEN_HASH = "at_hash"
CLAIM_CODE_HASH = "c_hash"
CLAIM_STATE_HASH = "s_hash"
CLAIM_SESSION_ID = "sid"
CLAIM_SCOPE = "scope"
CLAIM_CLIENT_ID = "client_id"
CLAIM_USERNAME = "username"

# Binds a refresh token to the access token it was issued for
CLAIM_ACCESS_TOKEN_BINDING = "ath"
