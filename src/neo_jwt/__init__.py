"""Neo-JWT - JSON Web Token lifecycle library.

Builds, signs, parses and validates compact JWTs (HMAC, RSA and ECDSA),
with in-memory caching, revocation tracking and refresh token rotation.
"""

import logging

from .__version__ import __version__

# Library logging stays silent until the application configures it
logging.getLogger(__name__).addHandler(logging.NullHandler())

# Configuration
from .config import JwtSettings, get_settings, setup_logging

# Core
from .core.exceptions import (
    NeoJwtError,
    FormatError,
    DecodeError,
    ClaimNotFoundError,
    ClaimTypeMismatchError,
    InvalidArgumentError,
    SerializationError,
    InvalidKeyError,
    UnsupportedAlgorithmError,
)
from .core.value_objects import (
    ClaimKind,
    ClaimValue,
    KeyKind,
    SecurityKey,
    ValidationCode,
)
from .core.entities import JwtToken, RevocationRecord, TokenInfo
from .core.protocols import (
    ClaimSerializer,
    ClaimsTransformer,
    TokenCache,
    TokenRefresher,
    TokenRepository,
    TokenRevoker,
    TokenStore,
)

# Application
from .application import (
    JwtBuilder,
    JwtParser,
    SignatureEngine,
    JwtValidator,
    ValidationContext,
    ValidationError,
    ValidationParameters,
    ValidationResult,
    JwtRefresher,
    RefreshResult,
)

# Infrastructure
from .infrastructure.serializers import JsonClaimSerializer, create_json_serializer
from .infrastructure.cache import (
    BoundedCache,
    MemoryTokenCache,
    MemoryTokenStore,
    SerializedTokenStorage,
)
from .infrastructure.repositories import (
    JwtRevoker,
    MemoryTokenRepository,
    TokenRepositoryRevoker,
)

__all__ = [
    "__version__",

    # Configuration
    "JwtSettings",
    "get_settings",
    "setup_logging",

    # Exceptions
    "NeoJwtError",
    "FormatError",
    "DecodeError",
    "ClaimNotFoundError",
    "ClaimTypeMismatchError",
    "InvalidArgumentError",
    "SerializationError",
    "InvalidKeyError",
    "UnsupportedAlgorithmError",

    # Value objects and entities
    "ClaimKind",
    "ClaimValue",
    "KeyKind",
    "SecurityKey",
    "ValidationCode",
    "JwtToken",
    "RevocationRecord",
    "TokenInfo",

    # Protocols
    "ClaimSerializer",
    "ClaimsTransformer",
    "TokenCache",
    "TokenRefresher",
    "TokenRepository",
    "TokenRevoker",
    "TokenStore",

    # Application
    "JwtBuilder",
    "JwtParser",
    "SignatureEngine",
    "JwtValidator",
    "ValidationContext",
    "ValidationError",
    "ValidationParameters",
    "ValidationResult",
    "JwtRefresher",
    "RefreshResult",

    # Infrastructure
    "JsonClaimSerializer",
    "create_json_serializer",
    "BoundedCache",
    "MemoryTokenCache",
    "MemoryTokenStore",
    "SerializedTokenStorage",
    "JwtRevoker",
    "MemoryTokenRepository",
    "TokenRepositoryRevoker",
]
