"""Spaces storage session configuration and management.

Spaces speaks the S3 protocol, so sessions are plain boto3 sessions bound to
static credentials, with every client pointed at the region's Spaces
endpoint instead of AWS.

Spaces ignores the signing region, but botocore insists on one, so the
session always signs for ``us-east-1``.
"""

from typing import Any

import boto3
from pydantic import BaseModel, ConfigDict, Field

from do_client.core import null_logger
from do_client.core.exceptions import StorageSessionError

SIGNING_REGION = "us-east-1"


class SpacesClientConfig(BaseModel):
    """Configuration for a Spaces session.

    Example:
        config = SpacesClientConfig(
            access_key_id="DO00EXAMPLE",
            secret_access_key="secret",
            endpoint_url="https://nyc3.digitaloceanspaces.com",
        )
    """

    model_config = ConfigDict(extra="forbid", frozen=True)

    access_key_id: str = Field(..., min_length=1, description="Spaces access key ID")
    secret_access_key: str = Field(
        ..., min_length=1, repr=False, description="Spaces secret access key"
    )
    endpoint_url: str = Field(..., description="Regional Spaces endpoint URL")
    region_name: str = Field(SIGNING_REGION, description="Signing region")


class SpacesSession:
    """Manages a boto3 session bound to one Spaces endpoint."""

    def __init__(self, config: SpacesClientConfig, logger: Any = None):
        """Initialize the Spaces session.

        Args:
            config: Spaces session configuration
            logger: structlog-style logger, silent by default

        Raises:
            StorageSessionError: If boto3 rejects the configuration
        """
        self.config = config
        self.logger = logger if logger is not None else null_logger()
        self._client = None

        try:
            self.session = boto3.Session(
                aws_access_key_id=config.access_key_id,
                aws_secret_access_key=config.secret_access_key,
                region_name=config.region_name,
            )
        except Exception as e:
            raise StorageSessionError(f"Failed to create Spaces session: {e}") from e

        self.logger.info("Spaces session created", endpoint=config.endpoint_url)

    @property
    def endpoint_url(self) -> str:
        return self.config.endpoint_url

    @property
    def region_name(self) -> str:
        return self.config.region_name

    def client(self, service_name: str = "s3", **kwargs):
        """Create a new boto3 client targeting the Spaces endpoint."""
        kwargs.setdefault("endpoint_url", self.config.endpoint_url)
        try:
            return self.session.client(service_name, **kwargs)
        except Exception as e:
            raise StorageSessionError(
                f"Failed to create {service_name} client for "
                f"{self.config.endpoint_url}: {e}"
            ) from e

    @property
    def s3(self):
        """Get or create the shared S3 client for this session."""
        if self._client is None:
            self._client = self.client("s3")
        return self._client

    def test_connection(self) -> bool:
        """Test the Spaces connection by listing buckets.

        Returns:
            True if connection successful

        Raises:
            StorageSessionError: If connection fails
        """
        try:
            self.s3.list_buckets()
            self.logger.info(
                "Spaces connection test successful", endpoint=self.endpoint_url
            )
            return True
        except StorageSessionError:
            raise
        except Exception as e:
            error_msg = f"Spaces connection test failed: {e}"
            self.logger.error(error_msg, endpoint=self.endpoint_url)
            raise StorageSessionError(error_msg) from e
