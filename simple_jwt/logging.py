"""
Logging configuration for simple-jwt.

Library modules only call ``get_logger``. Applications (or ``create_manager``
with ``configure_logs=True``) call ``configure_logging`` once to render
events as JSON. Wire tokens never reach the output: callers pass ids through
``loggable_id`` and the ``redact_tokens`` processor masks anything that still
looks like a token.
"""

import hashlib
import logging
import re
import sys
from typing import Any, Dict

import structlog
from opentelemetry import trace

_WIRE_TOKEN = re.compile(r"[A-Za-z0-9_-]+\.[A-Za-z0-9_-]+\.[A-Za-z0-9_-]*")


def loggable_id(value: Any) -> Any:
    """Return ``value`` unless it is a wire token, then a short digest of it."""
    if isinstance(value, str) and _WIRE_TOKEN.fullmatch(value):
        return "sha256:" + hashlib.sha256(value.encode("utf-8")).hexdigest()[:16]
    return value


def configure_logging(log_level: str = "info") -> None:
    """Configure structured JSON logging."""

    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            add_component_context,
            add_trace_context,
            redact_tokens,
            structlog.processors.JSONRenderer()
        ],
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    logging.basicConfig(format="%(message)s", stream=sys.stdout)
    logging.getLogger("simple_jwt").setLevel(getattr(logging, log_level.upper()))


def add_component_context(logger: Any, method_name: str, event_dict: Dict[str, Any]) -> Dict[str, Any]:
    """Add the component (``manager``, ``revocation`` ...) to log events."""
    logger_name = event_dict.get("logger", "")
    if logger_name.startswith("simple_jwt."):
        event_dict["component"] = logger_name.split(".", 1)[1]

    return event_dict


def add_trace_context(logger: Any, method_name: str, event_dict: Dict[str, Any]) -> Dict[str, Any]:
    """Correlate events with the caller's active OpenTelemetry span."""
    span_context = trace.get_current_span().get_span_context()
    if span_context.is_valid:
        event_dict["trace_id"] = f"{span_context.trace_id:032x}"
        event_dict["span_id"] = f"{span_context.span_id:016x}"

    return event_dict


def redact_tokens(logger: Any, method_name: str, event_dict: Dict[str, Any]) -> Dict[str, Any]:
    """Replace any value shaped like a wire token with its digest."""
    for key, value in event_dict.items():
        if key != "event":
            event_dict[key] = loggable_id(value)

    return event_dict


def get_logger(name: str) -> structlog.BoundLogger:
    """Get a structured logger instance."""
    return structlog.get_logger(name)
