"""
Token issuance, verification, refresh and revocation.
"""

import base64
import json
import time
from numbers import Real
from typing import Any, Callable, Dict, Mapping, Optional, Union

from pydantic import ValidationError

from .codec import Base64UrlSafeCodec, Codec
from .config import JWTSettings, get_settings
from .errors import (
    ConfigurationError,
    DecodeError,
    InvalidTokenError,
    JWTException,
    SignatureError,
    TokenBlacklistError,
    TokenExpiredError,
    TokenNotActiveError,
    TokenRefreshExpiredError,
)
from .logging import configure_logging, get_logger, loggable_id
from .metrics import TokenMetrics
from .revocation import (
    FilesystemRevocationStore,
    MemoryRevocationStore,
    RedisRevocationStore,
    RevocationStore,
)
from .signers import Secret, Signer, make_signer
from .token import Token, dump_json

Clock = Callable[[], float]
Issuer = Union[str, Callable[[], str]]

BLACKLIST_PREFIX = "jwt.blacklist:"
TEMPORAL_CLAIMS = ("exp", "iat", "nbf")


class JWTManager:
    """Issues and verifies tokens under one signer.

    ``ttl`` and ``refresh_ttl`` are minute counts. A manager holds no per-call
    state, so one instance can be shared between threads as long as its store
    can.
    """

    def __init__(
        self,
        secret: Union[Signer, Secret],
        codec: Optional[Codec] = None,
        store: Optional[RevocationStore] = None,
        *,
        algorithm: str = "md5",
        ttl: int = 60 * 60,
        refresh_ttl: int = 120 * 60,
        issuer: Issuer = "",
        clock: Clock = time.time,
        metrics: Optional[TokenMetrics] = None,
    ):
        self._signer = make_signer(secret, algorithm)
        self._codec = codec if codec is not None else Base64UrlSafeCodec()
        self._store = store if store is not None else FilesystemRevocationStore(clock=clock)
        self._ttl = self._validate_window("ttl", ttl)
        self._refresh_ttl = self._validate_window("refresh_ttl", refresh_ttl)
        self._issuer = issuer
        self._clock = clock
        self.metrics = metrics
        self.logger = get_logger("simple_jwt.manager")

    @property
    def ttl(self) -> int:
        return self._ttl

    @property
    def refresh_ttl(self) -> int:
        return self._refresh_ttl

    @property
    def signer(self) -> Signer:
        return self._signer

    @property
    def codec(self) -> Codec:
        return self._codec

    @property
    def store(self) -> RevocationStore:
        return self._store

    def set_ttl(self, minutes: int) -> "JWTManager":
        self._ttl = self._validate_window("ttl", minutes)
        return self

    def set_refresh_ttl(self, minutes: int) -> "JWTManager":
        self._refresh_ttl = self._validate_window("refresh_ttl", minutes)
        return self

    @staticmethod
    def _validate_window(name: str, minutes: int) -> int:
        if isinstance(minutes, bool) or not isinstance(minutes, int) or minutes < 0:
            raise ConfigurationError(f"{name} must be a non-negative number of minutes", details={name: minutes})
        return minutes

    def now(self) -> int:
        return int(self._clock())

    def default_claims(self, now: Optional[int] = None) -> Dict[str, Any]:
        """Claims every issued token starts from."""
        if now is None:
            now = self.now()
        issuer = self._issuer() if callable(self._issuer) else self._issuer
        return {
            "sub": "1",
            "iss": issuer or "",
            "exp": now + self._ttl * 60,
            "iat": now,
            "nbf": now,
        }

    def issue(self, claims: Optional[Mapping[str, Any]] = None, headers: Optional[Mapping[str, Any]] = None) -> Token:
        """Create a token from ``claims`` layered over the default claims."""
        payload = self.default_claims()
        payload.update(claims or {})
        headers = dict(headers or {})

        payload["jti"] = self.signer.fingerprint(base64.b64encode(dump_json([payload, headers])))

        token = Token(self, headers, payload)
        if self.metrics:
            self.metrics.record_issued()
        self.logger.debug("Token issued", jti=token.jti, sub=token.subject)
        return token

    make = issue

    def parse(self, text: str) -> Token:
        """Verify ``text`` and rebuild its token.

        Checks run in order: structure, signature, expiry, not-before,
        revocation. The first failure is raised.
        """
        segments = text.split(".") if isinstance(text, str) else []
        if len(segments) != 3:
            raise self._rejected(InvalidTokenError(details={"segments": len(segments)}))

        try:
            headers = json.loads(self.codec.decode(segments[0]))
            claims = json.loads(self.codec.decode(segments[1]))
            signature = self.codec.decode(segments[2])
        except (DecodeError, ValueError) as e:
            raise self._rejected(InvalidTokenError(details={"error": str(e)})) from e

        if not isinstance(headers, dict) or not isinstance(claims, dict):
            raise self._rejected(InvalidTokenError(details={"error": "header and claims must be objects"}))

        signing_input = f"{segments[0]}.{segments[1]}".encode("ascii")
        if not self.signer.verify(signing_input, signature):
            raise self._rejected(SignatureError())

        token = Token(self, headers, claims, raw=text)
        now = self.now()

        exp = self._timestamp(token, "exp")
        if exp is not None and exp <= now:
            raise self._rejected(TokenExpiredError(token=token))

        nbf = self._timestamp(token, "nbf")
        if nbf is not None and nbf > now:
            raise self._rejected(TokenNotActiveError(token=token))

        if self.store.contains(self._blacklist_key(token.jti if token.jti is not None else text)):
            raise self._rejected(TokenBlacklistError(token=token))

        if self.metrics:
            self.metrics.record_validation("valid")
        return token

    def refresh(self, token: Token, force: bool = False) -> Token:
        """Re-issue ``token`` with a validity window starting now."""
        claims = dict(token.claims)

        if not force:
            iat = self._timestamp(token, "iat")
            if iat is not None and iat + self._refresh_ttl * 60 <= self.now():
                self.logger.warning("Token refresh rejected", reason="TOKEN_REFRESH_EXPIRED", jti=token.jti)
                raise TokenRefreshExpiredError(token=token)

        for name in TEMPORAL_CLAIMS:
            claims.pop(name, None)

        refreshed = self.issue(claims, token.headers)
        if self.metrics:
            self.metrics.record_refresh(force)
        self.logger.debug("Token refreshed", old_jti=token.jti, jti=refreshed.jti, forced=force)
        return refreshed

    def add_revocation(self, jti: str) -> None:
        """Reject ``jti`` until removed or the refresh window passes."""
        now = self.now()
        self.store.save(self._blacklist_key(jti), now, self._refresh_ttl * 60)
        if self.metrics:
            self.metrics.record_revocation("add")
        self.logger.info("Token revoked", jti=loggable_id(jti))

    def remove_revocation(self, jti: str) -> None:
        self.store.delete(self._blacklist_key(jti))
        if self.metrics:
            self.metrics.record_revocation("remove")
        self.logger.info("Token revocation removed", jti=loggable_id(jti))

    def is_revoked(self, jti: str) -> bool:
        return self.store.contains(self._blacklist_key(jti))

    add_blacklist = add_revocation
    remove_blacklist = remove_revocation

    @staticmethod
    def _blacklist_key(jti: str) -> str:
        return f"{BLACKLIST_PREFIX}{jti}"

    def _timestamp(self, token: Token, name: str) -> Optional[Real]:
        value = token.claims.get(name)
        if value is None:
            return None
        if isinstance(value, bool) or not isinstance(value, Real):
            raise self._rejected(InvalidTokenError(f"Claim {name} must be a number", details={"claim": name}))
        return value

    def _rejected(self, error: JWTException) -> JWTException:
        if self.metrics:
            self.metrics.record_validation(error.code)
        self.logger.warning("Token rejected", reason=error.code, jti=error.details.get("jti"))
        return error


def create_manager(
    settings: Optional[JWTSettings] = None,
    *,
    clock: Clock = time.time,
    metrics: Optional[TokenMetrics] = None,
    configure_logs: bool = False,
    **overrides,
) -> JWTManager:
    """Build a manager from ``JWTSettings`` (environment by default).

    Overrides are validated like environment values. With ``configure_logs``
    the structlog pipeline is set up at ``settings.log_level``.
    """
    try:
        if settings is None:
            settings = get_settings(**overrides)
        elif overrides:
            settings = JWTSettings(**{**settings.model_dump(), **overrides})
    except ValidationError as e:
        errors = [{"loc": list(err["loc"]), "msg": err["msg"]} for err in e.errors()]
        raise ConfigurationError("Invalid settings", details={"errors": errors}) from e

    if configure_logs:
        configure_logging(settings.log_level)

    if settings.revocation_backend == "memory":
        store: RevocationStore = MemoryRevocationStore(clock=clock)
    elif settings.revocation_backend == "redis":
        store = RedisRevocationStore(url=settings.redis_url, prefix=settings.redis_prefix)
    elif settings.revocation_backend == "filesystem":
        store = FilesystemRevocationStore(settings.revocation_dir, clock=clock)
    else:
        raise ConfigurationError(
            f"Unknown revocation backend: {settings.revocation_backend}",
            details={"available": ["filesystem", "memory", "redis"]}
        )

    return JWTManager(
        settings.secret,
        store=store,
        algorithm=settings.algorithm,
        ttl=settings.ttl,
        refresh_ttl=settings.refresh_ttl,
        issuer=settings.issuer,
        clock=clock,
        metrics=metrics,
    )
