"""
Signing strategies.

``HashSigner`` hashes ``message + secret`` and exists for compatibility with
tokens minted by older deployments (md5 by default). ``HmacSigner`` is the
recommended choice for new deployments.
"""

import hashlib
import hmac
from typing import Callable, Dict, Protocol, Union, runtime_checkable

from .errors import ConfigurationError

Secret = Union[str, bytes]


@runtime_checkable
class Signer(Protocol):
    """Computes and checks signatures under one secret."""

    def sign(self, message: bytes) -> bytes: ...

    def verify(self, message: bytes, signature: bytes) -> bool: ...

    def secret(self) -> bytes: ...

    def fingerprint(self, data: bytes) -> str: ...


def _to_bytes(secret: Secret) -> bytes:
    if isinstance(secret, str):
        secret = secret.encode("utf-8")
    if not isinstance(secret, bytes):
        raise ConfigurationError(f"Secret must be str or bytes, got {type(secret).__name__}")
    if not secret:
        raise ConfigurationError("Secret must not be empty")
    return secret


class HashSigner:
    """Hex digest of ``message + secret`` using a plain hashlib algorithm."""

    def __init__(self, secret: Secret, algorithm: str = "md5"):
        if algorithm not in hashlib.algorithms_available:
            raise ConfigurationError(f"Unknown hash algorithm: {algorithm}")
        self._secret = _to_bytes(secret)
        self.algorithm = algorithm

    def _digest(self, data: bytes) -> str:
        return hashlib.new(self.algorithm, data + self._secret).hexdigest()

    def sign(self, message: bytes) -> bytes:
        return self._digest(message).encode("ascii")

    def verify(self, message: bytes, signature: bytes) -> bool:
        return hmac.compare_digest(self.sign(message), signature)

    def secret(self) -> bytes:
        return self._secret

    def fingerprint(self, data: bytes) -> str:
        return self._digest(data)

    def __repr__(self) -> str:
        return f"HashSigner(algorithm={self.algorithm!r})"


class HmacSigner:
    """Raw HMAC digest of the message."""

    def __init__(self, secret: Secret, digestmod: str = "sha256"):
        if digestmod not in hashlib.algorithms_available:
            raise ConfigurationError(f"Unknown digest: {digestmod}")
        self._secret = _to_bytes(secret)
        self.digestmod = digestmod

    def sign(self, message: bytes) -> bytes:
        return hmac.new(self._secret, message, self.digestmod).digest()

    def verify(self, message: bytes, signature: bytes) -> bool:
        return hmac.compare_digest(self.sign(message), signature)

    def secret(self) -> bytes:
        return self._secret

    def fingerprint(self, data: bytes) -> str:
        return hmac.new(self._secret, data, self.digestmod).hexdigest()

    def __repr__(self) -> str:
        return f"HmacSigner(digestmod={self.digestmod!r})"


SIGNERS: Dict[str, Callable[[Secret], Signer]] = {
    "md5": lambda secret: HashSigner(secret, "md5"),
    "sha1": lambda secret: HashSigner(secret, "sha1"),
    "hmac-sha256": lambda secret: HmacSigner(secret, "sha256"),
    "hmac-sha384": lambda secret: HmacSigner(secret, "sha384"),
    "hmac-sha512": lambda secret: HmacSigner(secret, "sha512"),
}


def make_signer(secret: Union[Signer, Secret], algorithm: str = "md5") -> Signer:
    """Return ``secret`` if it already is a signer, else build one by name."""
    if isinstance(secret, Signer):
        return secret

    try:
        factory = SIGNERS[algorithm]
    except KeyError:
        raise ConfigurationError(
            f"Unknown signer algorithm: {algorithm}",
            details={"available": sorted(SIGNERS)}
        )
    return factory(secret)
