"""
Immutable token value.
"""

import copy
import json
from functools import cached_property
from types import MappingProxyType
from typing import TYPE_CHECKING, Any, Mapping, Optional

if TYPE_CHECKING:  # pragma: no cover - imported for typing only
    from .manager import JWTManager


def dump_json(value: Any) -> bytes:
    """Compact JSON that keeps mapping insertion order."""
    return json.dumps(value, separators=(",", ":"), ensure_ascii=False).encode("utf-8")


class Token:
    """Headers and claims of one issued or parsed token.

    The manager reference is only used to render, refresh and revoke the token
    with the same codec, signer and store that produced it.
    """

    def __init__(
        self,
        manager: "JWTManager",
        headers: Mapping[str, Any],
        claims: Mapping[str, Any],
        raw: Optional[str] = None,
    ):
        self._manager = manager
        self._headers = MappingProxyType(copy.deepcopy(dict(headers)))
        self._claims = MappingProxyType(copy.deepcopy(dict(claims)))
        self._raw = raw

    @property
    def manager(self) -> "JWTManager":
        return self._manager

    @property
    def headers(self) -> Mapping[str, Any]:
        return self._headers

    @property
    def claims(self) -> Mapping[str, Any]:
        return self._claims

    @property
    def jti(self) -> Optional[str]:
        return self._claims.get("jti")

    @property
    def subject(self) -> Optional[str]:
        return self._claims.get("sub")

    @property
    def issuer(self) -> Optional[str]:
        return self._claims.get("iss")

    @property
    def issued_at(self) -> Optional[int]:
        return self._claims.get("iat")

    @property
    def expires_at(self) -> Optional[int]:
        return self._claims.get("exp")

    @property
    def not_before(self) -> Optional[int]:
        return self._claims.get("nbf")

    def signing_input(self) -> bytes:
        """Encoded header and claims joined by a dot."""
        if self._raw is not None:
            head, body, _ = self._raw.split(".")
            return f"{head}.{body}".encode("ascii")

        codec = self._manager.codec
        return (
            codec.encode(dump_json(dict(self._headers)))
            + "."
            + codec.encode(dump_json(dict(self._claims)))
        ).encode("ascii")

    @cached_property
    def _encoded(self) -> str:
        if self._raw is not None:
            return self._raw
        signing_input = self.signing_input()
        signature = self._manager.signer.sign(signing_input)
        return f"{signing_input.decode('ascii')}.{self._manager.codec.encode(signature)}"

    def encode(self) -> str:
        """Full three-segment wire text."""
        return self._encoded

    def refresh(self, force: bool = False) -> "Token":
        return self._manager.refresh(self, force)

    def revoke(self) -> None:
        """Write a revocation marker for this token's id."""
        self._manager.add_revocation(self.jti if self.jti is not None else self.encode())

    def __str__(self) -> str:
        return self.encode()

    def __repr__(self) -> str:
        return f"Token(jti={self.jti!r}, sub={self.subject!r}, exp={self.expires_at!r})"
