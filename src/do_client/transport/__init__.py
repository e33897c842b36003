"""HTTP transport layers: retries, bearer auth and diagnostic logging."""

from .auth import BearerAuthTransport, StaticTokenSource
from .backoff import default_backoff, rate_limit_backoff
from .chain import (
    Capability,
    Stage,
    build_transport_chain,
    describe_chain,
    find_stage,
    validate_order,
)
from .diagnostics import LoggingTransport
from .retry import RetryTransport

__all__ = [
    "BearerAuthTransport",
    "StaticTokenSource",
    "default_backoff",
    "rate_limit_backoff",
    "Capability",
    "Stage",
    "build_transport_chain",
    "describe_chain",
    "find_stage",
    "validate_order",
    "LoggingTransport",
    "RetryTransport",
]
