"""Core utilities and shared components for do-client."""

from .config import ProviderSettings, settings
from .exceptions import (
    CredentialsMissingError,
    DOClientError,
    InvalidEndpointError,
    InvalidTemplateError,
    StorageSessionError,
    TransportOrderError,
)
from .observability import get_logger, get_tracer, null_logger

__all__ = [
    "settings",
    "ProviderSettings",
    "DOClientError",
    "InvalidEndpointError",
    "InvalidTemplateError",
    "CredentialsMissingError",
    "StorageSessionError",
    "TransportOrderError",
    "get_logger",
    "get_tracer",
    "null_logger",
]
