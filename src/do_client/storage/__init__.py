"""Spaces object storage sessions."""

from .endpoint import EndpointTemplate
from .session import SIGNING_REGION, SpacesClientConfig, SpacesSession

__all__ = ["EndpointTemplate", "SIGNING_REGION", "SpacesClientConfig", "SpacesSession"]
