"""Ordered composition of transport stages.

Each stage wraps the transport built so far and declares the capability it
adds. The order is load-bearing, innermost first:

    RETRIES -> AUTHENTICATES -> LOGS

Authentication has to sit above retries so every re-sent request carries
the same credentials, and logging sits outermost so it sees each logical
request exactly once. The builder enforces this when the chain is built.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Callable, List, Optional, Sequence

import httpx

from do_client.core.exceptions import TransportOrderError


class Capability(str, Enum):
    """Behaviour a transport stage adds to the chain."""

    RETRIES = "retries"
    AUTHENTICATES = "authenticates"
    LOGS = "logs"


REQUIRED_ORDER = (Capability.RETRIES, Capability.AUTHENTICATES, Capability.LOGS)


@dataclass(frozen=True)
class Stage:
    """A single layer of the transport chain."""

    capability: Capability
    wrap: Callable[[httpx.BaseTransport], httpx.BaseTransport]


def validate_order(capabilities: Sequence[Capability]) -> None:
    """Check that capabilities appear at most once and in the required order.

    Raises:
        TransportOrderError: If a capability repeats or is out of order
    """
    positions = []
    for capability in capabilities:
        if capability in positions:
            raise TransportOrderError(
                f"Transport capability '{capability.value}' appears more than once"
            )
        positions.append(capability)

    ranks = [REQUIRED_ORDER.index(capability) for capability in positions]
    if ranks != sorted(ranks):
        found = " -> ".join(c.value for c in positions)
        expected = " -> ".join(c.value for c in REQUIRED_ORDER)
        raise TransportOrderError(
            f"Transport stages out of order: {found} (expected {expected})"
        )


def build_transport_chain(
    base: httpx.BaseTransport, stages: Sequence[Stage]
) -> httpx.BaseTransport:
    """Wrap a base transport with the given stages, innermost first.

    Args:
        base: Transport that performs the actual network I/O
        stages: Stages in wrapping order; the first wraps ``base``

    Returns:
        The outermost transport

    Raises:
        TransportOrderError: If the stages violate the required order, or a
            stage produces a transport declaring a different capability
    """
    validate_order([stage.capability for stage in stages])

    transport = base
    for stage in stages:
        transport = stage.wrap(transport)
        declared = getattr(transport, "capability", None)
        if declared is not stage.capability:
            raise TransportOrderError(
                f"Stage '{stage.capability.value}' produced a transport "
                f"declaring {declared!r}"
            )
    return transport


def describe_chain(transport: httpx.BaseTransport) -> List[Capability]:
    """List the capabilities of a built chain, outermost first."""
    capabilities = []
    current = transport
    while getattr(current, "capability", None) is not None:
        capabilities.append(current.capability)
        current = current.wrapped
    return capabilities


def find_stage(
    transport: httpx.BaseTransport, capability: Capability
) -> Optional[httpx.BaseTransport]:
    """Return the layer of a built chain providing a capability, if any."""
    current = transport
    while getattr(current, "capability", None) is not None:
        if current.capability is capability:
            return current
        current = current.wrapped
    return None
