"""Rate-limit-aware DigitalOcean API client with Spaces storage sessions.

This package builds an authenticated HTTP client for the DigitalOcean API
whose retries follow the server's rate-limit reset time, together with
per-region sessions for Spaces, DigitalOcean's S3-compatible object storage.

Key Features:
    - Bearer token authentication on every request, retries included
    - Rate-limit-aware backoff driven by the Ratelimit-Reset header
    - Diagnostic request logging with credentials redacted
    - Per-region Spaces sessions from a templated endpoint
    - CLI interface

Recommended Usage:
    >>> from do_client import ClientConfig, create_client
    >>> config = ClientConfig(token="dop_v1_...")
    >>> client = create_client(config)
    >>> account = client.api_client().get("/v2/account").json()
"""

__version__ = "0.1.0"

from .client import APIClient, CombinedClient, create_client
from .core.exceptions import (
    CredentialsMissingError,
    DOClientError,
    InvalidEndpointError,
    InvalidTemplateError,
    StorageSessionError,
    TransportOrderError,
)
from .schemas import ClientConfig
from .storage import EndpointTemplate, SpacesSession
from .transport import default_backoff, rate_limit_backoff

__all__ = [
    # Client construction
    "APIClient",
    "ClientConfig",
    "CombinedClient",
    "create_client",
    # Storage
    "EndpointTemplate",
    "SpacesSession",
    # Backoff strategies
    "default_backoff",
    "rate_limit_backoff",
    # Errors
    "CredentialsMissingError",
    "DOClientError",
    "InvalidEndpointError",
    "InvalidTemplateError",
    "StorageSessionError",
    "TransportOrderError",
]
