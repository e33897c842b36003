"""Command-line interface for do-client.

This module provides a small CLI for checking a client configuration.

Commands:
    - info: Show the resolved API endpoint, user agent and retry settings
    - endpoint: Render the Spaces endpoint for a region
    - verify-spaces: Verify Spaces credentials against a region's endpoint

Configuration is read from the environment (DIGITALOCEAN_TOKEN,
DIGITALOCEAN_API_URL, SPACES_ENDPOINT_URL, SPACES_ACCESS_KEY_ID,
SPACES_SECRET_ACCESS_KEY, DIGITALOCEAN_HTTP_RETRY_*).
"""

from typing import Annotated, Optional

import typer

from . import __version__
from .client import CombinedClient, create_client
from .core import ProviderSettings, get_logger
from .transport import Capability, find_stage

app = typer.Typer(
    name="do-client",
    help="Rate-limit-aware DigitalOcean API client.",
    no_args_is_help=True,
)

logger = get_logger(__name__)


def version_callback(value: bool) -> None:
    """Display version information."""
    if value:
        typer.echo(f"do-client {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: Annotated[
        Optional[bool],
        typer.Option("--version", callback=version_callback, help="Show version."),
    ] = None,
) -> None:
    """
    do-client: DigitalOcean API and Spaces client configuration checks.
    """
    pass


ApiUrlOption = Annotated[
    Optional[str],
    typer.Option("--api-url", help="Override DIGITALOCEAN_API_URL"),
]
SpacesEndpointOption = Annotated[
    Optional[str],
    typer.Option("--spaces-endpoint", help="Override SPACES_ENDPOINT_URL"),
]


def _build_client(
    settings: ProviderSettings,
    api_url: Optional[str] = None,
    spaces_endpoint: Optional[str] = None,
) -> CombinedClient:
    """Create a client from environment settings plus CLI overrides."""
    overrides = {}
    if api_url:
        overrides["api_endpoint"] = api_url
    if spaces_endpoint:
        overrides["spaces_endpoint"] = spaces_endpoint

    config = settings.to_client_config(**overrides)
    return create_client(config, logger=logger)


@app.command("info")
def info_cmd(
    api_url: ApiUrlOption = None,
    spaces_endpoint: SpacesEndpointOption = None,
) -> None:
    """
    Show how the client would be configured.

    Examples:
        do-client info
        do-client info --api-url https://api.example.com
    """
    try:
        settings = ProviderSettings()
        with _build_client(settings, api_url, spaces_endpoint) as client:
            api = client.api_client()
            retry = find_stage(api.transport, Capability.RETRIES)

            typer.echo(f"API URL: {api.base_url}")
            typer.echo(f"User agent: {api.user_agent}")
            typer.echo(f"Spaces endpoint: {client.spaces_endpoint_template.source}")
            typer.echo(f"Retries: {retry.retry_max}")
            typer.echo(f"Retry wait: {retry.wait_min}s - {retry.wait_max}s")
            typer.echo(f"Token: {'set' if settings.token else 'not set'}")
            typer.echo(
                "Spaces credentials: "
                f"{'set' if settings.access_id and settings.secret_key else 'not set'}"
            )

    except Exception as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(1)


@app.command("endpoint")
def endpoint_cmd(
    region: Annotated[str, typer.Argument(help="Spaces region slug, e.g. nyc3")],
    spaces_endpoint: SpacesEndpointOption = None,
) -> None:
    """
    Print the Spaces endpoint for a region.

    Examples:
        do-client endpoint NYC3
        do-client endpoint ams3 --spaces-endpoint "https://{{.Region}}.example.com"
    """
    try:
        with _build_client(
            ProviderSettings(), spaces_endpoint=spaces_endpoint
        ) as client:
            typer.echo(client.spaces_endpoint(region))

    except Exception as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(1)


@app.command("verify-spaces")
def verify_spaces_cmd(
    region: Annotated[str, typer.Argument(help="Spaces region slug, e.g. nyc3")],
    spaces_endpoint: SpacesEndpointOption = None,
) -> None:
    """
    Verify Spaces credentials by listing buckets in a region.

    Examples:
        do-client verify-spaces nyc3
    """
    try:
        with _build_client(
            ProviderSettings(), spaces_endpoint=spaces_endpoint
        ) as client:
            session = client.storage_session(region)
            session.test_connection()
            typer.echo(f"✓ Spaces access verified for {session.endpoint_url}")

    except Exception as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(1)


if __name__ == "__main__":
    app()
