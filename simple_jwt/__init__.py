"""
simple-jwt: compact signed tokens with refresh and revocation.

Building blocks:

- manager: JWTManager issues, parses, refreshes and revokes tokens
- token: immutable Token value with wire rendering
- signers: hash and HMAC signing strategies
- codec: URL-safe base64 segment codec
- revocation: memory, filesystem and redis marker stores
- config: settings via pydantic-settings
- logging: structured logging with trace correlation
- metrics: Prometheus counters
- errors: error taxonomy and responses
"""

from .codec import Base64UrlSafeCodec, Codec
from .config import JWTSettings, get_settings
from .errors import (
    ConfigurationError,
    DecodeError,
    ErrorResponse,
    InvalidTokenError,
    JWTException,
    RevocationStoreError,
    SignatureError,
    TokenBlacklistError,
    TokenExpiredError,
    TokenNotActiveError,
    TokenRefreshExpiredError,
)
from .manager import JWTManager, create_manager
from .metrics import TokenMetrics
from .revocation import (
    FilesystemRevocationStore,
    MemoryRevocationStore,
    RedisRevocationStore,
    RevocationStore,
)
from .signers import HashSigner, HmacSigner, Signer, make_signer
from .token import Token

__all__ = [
    "Base64UrlSafeCodec",
    "Codec",
    "ConfigurationError",
    "DecodeError",
    "ErrorResponse",
    "FilesystemRevocationStore",
    "HashSigner",
    "HmacSigner",
    "InvalidTokenError",
    "JWTException",
    "JWTManager",
    "JWTSettings",
    "MemoryRevocationStore",
    "RedisRevocationStore",
    "RevocationStore",
    "RevocationStoreError",
    "SignatureError",
    "Signer",
    "Token",
    "TokenBlacklistError",
    "TokenExpiredError",
    "TokenMetrics",
    "TokenNotActiveError",
    "TokenRefreshExpiredError",
    "create_manager",
    "get_settings",
    "make_signer",
]
