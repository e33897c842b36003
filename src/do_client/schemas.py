"""Client configuration schema for do-client."""

from typing import TYPE_CHECKING, Any

from pydantic import BaseModel, ConfigDict, Field, model_validator

from do_client import __version__

if TYPE_CHECKING:
    from do_client.client import CombinedClient

DEFAULT_API_ENDPOINT = "https://api.digitalocean.com"
DEFAULT_SPACES_ENDPOINT = "https://{{.Region}}.digitaloceanspaces.com"


class ClientConfig(BaseModel):
    """Validated input for building a DigitalOcean client.

    Example:
        config = ClientConfig(token="dop_v1_...", http_retry_max=2)
        client = config.client()
    """

    model_config = ConfigDict(extra="forbid", frozen=True)

    token: str = Field(..., repr=False, description="API bearer token")
    api_endpoint: str = Field(
        DEFAULT_API_ENDPOINT, description="Base URL of the DigitalOcean API"
    )
    spaces_endpoint: str = Field(
        DEFAULT_SPACES_ENDPOINT,
        description="Spaces endpoint template with a {{.Region}} placeholder",
    )
    access_id: str = Field("", description="Spaces access key ID")
    secret_key: str = Field("", repr=False, description="Spaces secret access key")
    product: str = Field("do-client", description="Product name for the User-Agent")
    version: str = Field(__version__, description="Product version for the User-Agent")
    http_retry_max: int = Field(4, ge=0, description="Retries after the first attempt")
    http_retry_wait_min: float = Field(
        1.0, ge=0, description="Minimum wait between retries in seconds"
    )
    http_retry_wait_max: float = Field(
        30.0, ge=0, description="Maximum wait between retries in seconds"
    )

    @model_validator(mode="after")
    def check_retry_waits(self) -> "ClientConfig":
        if self.http_retry_wait_min > self.http_retry_wait_max:
            raise ValueError(
                f"http_retry_wait_min ({self.http_retry_wait_min}) must not exceed "
                f"http_retry_wait_max ({self.http_retry_wait_max})"
            )
        return self

    @property
    def user_agent(self) -> str:
        return f"{self.product}/{self.version}"

    def client(self, **kwargs: Any) -> "CombinedClient":
        """Build a client from this configuration; see ``create_client``."""
        from do_client.client import create_client

        return create_client(self, **kwargs)
