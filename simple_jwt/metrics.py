"""
Prometheus metrics for token lifecycle events.
"""

from typing import Any, Dict, Optional

from prometheus_client import CollectorRegistry, Counter, REGISTRY


class TokenMetrics:
    """Counters for issuance, validation, refresh and revocation."""

    def __init__(self, registry: Optional[CollectorRegistry] = REGISTRY, namespace: str = "jwt"):
        self.registry = registry
        self.namespace = namespace
        self._metrics: Dict[str, Any] = {}
        self._setup_metrics()

    def _setup_metrics(self):
        """Set up the token counters."""
        self._metrics["tokens_issued_total"] = Counter(
            "tokens_issued_total",
            "Total tokens issued",
            namespace=self.namespace,
            registry=self.registry
        )

        self._metrics["tokens_refreshed_total"] = Counter(
            "tokens_refreshed_total",
            "Total tokens re-issued through refresh",
            ["forced"],
            namespace=self.namespace,
            registry=self.registry
        )

        self._metrics["token_validations_total"] = Counter(
            "token_validations_total",
            "Total token validations",
            ["status"],
            namespace=self.namespace,
            registry=self.registry
        )

        self._metrics["revocations_total"] = Counter(
            "revocations_total",
            "Total revocation marker changes",
            ["action"],
            namespace=self.namespace,
            registry=self.registry
        )

    def get_metric(self, name: str):
        """Get a metric by name."""
        return self._metrics.get(name)

    def record_issued(self):
        self._metrics["tokens_issued_total"].inc()

    def record_refresh(self, forced: bool):
        self._metrics["tokens_refreshed_total"].labels(forced=str(forced).lower()).inc()

    def record_validation(self, status: str):
        """Record a parse outcome: ``valid`` or the error code."""
        self._metrics["token_validations_total"].labels(status=status).inc()

    def record_revocation(self, action: str):
        self._metrics["revocations_total"].labels(action=action).inc()
