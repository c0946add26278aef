"""
Shared fixtures for simple-jwt tests.
"""

from typing import Any, Dict

import pytest
from prometheus_client import CollectorRegistry

from simple_jwt.manager import JWTManager
from simple_jwt.metrics import TokenMetrics
from simple_jwt.revocation import MemoryRevocationStore
from simple_jwt.token import dump_json


class FrozenClock:
    """Clock returning a settable epoch timestamp."""

    def __init__(self, now: float = 1000):
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def clock():
    """Clock frozen at t=1000."""
    return FrozenClock(1000)


@pytest.fixture
def store(clock):
    """In-memory revocation store sharing the test clock."""
    return MemoryRevocationStore(clock=clock)


@pytest.fixture
def registry():
    """Isolated Prometheus registry."""
    return CollectorRegistry()


@pytest.fixture
def metrics(registry):
    return TokenMetrics(registry=registry)


@pytest.fixture
def manager(clock, store, metrics):
    """Manager with a one hour ttl and a two hour refresh window."""
    return JWTManager("s3cret", store=store, ttl=60, refresh_ttl=120, clock=clock, metrics=metrics)


@pytest.fixture
def forge():
    """Build correctly signed wire text from arbitrary headers and claims."""
    def _forge(manager: JWTManager, headers: Any, claims: Any) -> str:
        codec = manager.codec
        signing_input = f"{codec.encode(dump_json(headers))}.{codec.encode(dump_json(claims))}"
        signature = manager.signer.sign(signing_input.encode("ascii"))
        return f"{signing_input}.{codec.encode(signature)}"

    return _forge


@pytest.fixture
def user_claims() -> Dict[str, Any]:
    return {"sub": "42", "role": "analyst", "scopes": ["read", "write"], "profile": {"tenant": "t-1"}}
