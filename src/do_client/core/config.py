"""Configuration management for do-client."""

from typing import TYPE_CHECKING

from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings

if TYPE_CHECKING:
    from do_client.schemas import ClientConfig


class Settings(BaseSettings):
    """Application settings with environment variable support."""

    log_level: str = "INFO"
    otel_enabled: bool = False
    otel_service_name: str = "do-client"
    otel_exporter_endpoint: str = "http://localhost:4317"

    model_config = {
        "env_prefix": "DO_CLIENT_",
        "case_sensitive": False,
    }


class ProviderSettings(BaseSettings):
    """Provider credentials and retry tuning read from the environment.

    Variable names match the ones used by the DigitalOcean tooling, so an
    environment prepared for doctl or the Terraform provider works unchanged.
    """

    token: str = Field(
        "",
        validation_alias=AliasChoices("DIGITALOCEAN_TOKEN", "DIGITALOCEAN_ACCESS_TOKEN"),
    )
    api_endpoint: str = Field(
        "https://api.digitalocean.com",
        validation_alias=AliasChoices("DIGITALOCEAN_API_URL"),
    )
    spaces_endpoint: str = Field(
        "https://{{.Region}}.digitaloceanspaces.com",
        validation_alias=AliasChoices("SPACES_ENDPOINT_URL"),
    )
    access_id: str = Field("", validation_alias=AliasChoices("SPACES_ACCESS_KEY_ID"))
    secret_key: str = Field(
        "", validation_alias=AliasChoices("SPACES_SECRET_ACCESS_KEY")
    )
    http_retry_max: int = Field(
        4, validation_alias=AliasChoices("DIGITALOCEAN_HTTP_RETRY_MAX")
    )
    http_retry_wait_min: float = Field(
        1.0, validation_alias=AliasChoices("DIGITALOCEAN_HTTP_RETRY_WAIT_MIN")
    )
    http_retry_wait_max: float = Field(
        30.0, validation_alias=AliasChoices("DIGITALOCEAN_HTTP_RETRY_WAIT_MAX")
    )

    model_config = {
        "case_sensitive": False,
        "populate_by_name": True,
    }

    def to_client_config(self, **overrides) -> "ClientConfig":
        """Build a validated ClientConfig from these settings."""
        from do_client.schemas import ClientConfig

        values = self.model_dump()
        values.update(overrides)
        return ClientConfig(**values)


settings = Settings()
