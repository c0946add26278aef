"""
Error taxonomy for simple-jwt.

Every failure the manager can surface is a distinct subclass of
``JWTException`` so callers can catch exactly the condition they care about.
Errors raised after a token was fully parsed keep a reference to it.
"""

from typing import TYPE_CHECKING, Any, Dict, Optional

from opentelemetry import trace
from pydantic import BaseModel

if TYPE_CHECKING:  # pragma: no cover - imported for typing only
    from .token import Token


class ErrorResponse(BaseModel):
    """Standard error response format."""

    trace_id: Optional[str] = None
    code: str
    message: str
    details: Dict[str, Any] = {}


class JWTException(Exception):
    """Base exception for simple-jwt."""

    def __init__(
        self,
        code: str,
        message: str,
        details: Optional[Dict[str, Any]] = None,
        token: Optional["Token"] = None,
    ):
        self.code = code
        self.message = message
        self.details = dict(details or {})
        self.token = token
        if token is not None and token.jti is not None:
            self.details.setdefault("jti", token.jti)
        super().__init__(message)

    def to_response(self) -> ErrorResponse:
        """Convert to error response."""
        trace_id = None
        current_span = trace.get_current_span()
        if current_span and current_span.is_recording():
            span_context = current_span.get_span_context()
            if span_context.trace_id != 0:
                trace_id = f"{span_context.trace_id:032x}"

        return ErrorResponse(
            trace_id=trace_id,
            code=self.code,
            message=self.message,
            details=self.details,
        )


class DecodeError(JWTException):
    """Codec-level failure. The manager never lets this escape."""

    def __init__(self, message: str = "Malformed segment", details: Optional[Dict[str, Any]] = None):
        super().__init__("DECODE_ERROR", message, details)


class ConfigurationError(JWTException):
    """Invalid manager, signer or store configuration."""

    def __init__(self, message: str = "Invalid configuration", details: Optional[Dict[str, Any]] = None):
        super().__init__("CONFIGURATION_ERROR", message, details)


class RevocationStoreError(JWTException):
    """The revocation backend could not be reached."""

    def __init__(self, message: str = "Revocation store error", details: Optional[Dict[str, Any]] = None):
        super().__init__("REVOCATION_STORE_ERROR", message, details)


class InvalidTokenError(JWTException):
    """Structural or parse failure."""

    def __init__(self, message: str = "Invalid token", details: Optional[Dict[str, Any]] = None):
        super().__init__("INVALID_TOKEN", message, details)


class SignatureError(JWTException):
    """Signature does not match the signing input."""

    def __init__(self, message: str = "Invalid signature", details: Optional[Dict[str, Any]] = None):
        super().__init__("INVALID_SIGNATURE", message, details)


class TokenExpiredError(JWTException):
    """Token is past its ``exp`` claim."""

    def __init__(
        self,
        message: str = "Token expired",
        details: Optional[Dict[str, Any]] = None,
        token: Optional["Token"] = None,
    ):
        super().__init__("TOKEN_EXPIRED", message, details, token)


class TokenNotActiveError(JWTException):
    """Token is used before its ``nbf`` claim."""

    def __init__(
        self,
        message: str = "Token not active",
        details: Optional[Dict[str, Any]] = None,
        token: Optional["Token"] = None,
    ):
        super().__init__("TOKEN_NOT_ACTIVE", message, details, token)


class TokenBlacklistError(JWTException):
    """Token id carries a revocation marker."""

    def __init__(
        self,
        message: str = "The token is already on the blacklist",
        details: Optional[Dict[str, Any]] = None,
        token: Optional["Token"] = None,
    ):
        super().__init__("TOKEN_BLACKLISTED", message, details, token)


class TokenRefreshExpiredError(JWTException):
    """Token is older than the refresh window."""

    def __init__(
        self,
        message: str = "Token expired, refresh is not supported",
        details: Optional[Dict[str, Any]] = None,
        token: Optional["Token"] = None,
    ):
        super().__init__("TOKEN_REFRESH_EXPIRED", message, details, token)
