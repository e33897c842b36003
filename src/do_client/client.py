"""DigitalOcean API client construction.

``create_client`` is the entry point: it validates the configured endpoints,
layers retry, bearer-auth and logging transports over a single connection
pool, and hands back a ``CombinedClient`` exposing both the API client and
per-region Spaces sessions.

The resulting transport chain, innermost first::

    HTTPTransport -> RetryTransport -> BearerAuthTransport -> LoggingTransport

Example:
    >>> config = ClientConfig(token="dop_v1_...", access_id="DO00...", secret_key="...")
    >>> client = create_client(config, logger=get_logger("do_client"))
    >>> droplets = client.api_client().get("/v2/droplets").json()
    >>> s3 = client.storage_session("NYC3").s3
"""

import functools
import time
from typing import Any, Callable, Optional
from urllib.parse import urlsplit

import httpx

from do_client.core import null_logger
from do_client.core.exceptions import (
    CredentialsMissingError,
    InvalidEndpointError,
    StorageSessionError,
)
from do_client.schemas import ClientConfig
from do_client.storage import (
    SIGNING_REGION,
    EndpointTemplate,
    SpacesClientConfig,
    SpacesSession,
)
from do_client.transport import (
    BearerAuthTransport,
    Capability,
    LoggingTransport,
    RetryTransport,
    Stage,
    StaticTokenSource,
    build_transport_chain,
    rate_limit_backoff,
)

SERVICE_NAME = "DigitalOcean"


def parse_api_endpoint(endpoint: str) -> httpx.URL:
    """Parse the API base URL.

    Raises:
        InvalidEndpointError: If the URL is not an absolute http(s) URL
    """
    try:
        parts = urlsplit(endpoint)
        parts.port  # raises ValueError on a malformed port
        if parts.scheme not in ("http", "https") or not parts.hostname:
            raise InvalidEndpointError(
                f"API endpoint must be an absolute http(s) URL: '{endpoint}'"
            )
        return httpx.URL(endpoint)
    except (ValueError, httpx.InvalidURL) as e:
        raise InvalidEndpointError(
            f"Failed to parse API endpoint '{endpoint}': {e}"
        ) from e


class APIClient:
    """HTTP client bound to the DigitalOcean API base URL.

    Safe to share between threads; all requests go through one connection
    pool and one transport chain.
    """

    def __init__(
        self,
        base_url: httpx.URL,
        transport: httpx.BaseTransport,
        user_agent: str,
        timeout: Optional[float] = None,
    ):
        self.user_agent = user_agent
        self.transport = transport
        self._http = httpx.Client(
            base_url=base_url,
            transport=transport,
            headers={"User-Agent": user_agent, "Accept": "application/json"},
            timeout=timeout,
        )

    @property
    def base_url(self) -> httpx.URL:
        return self._http.base_url

    def request(self, method: str, path: str, **kwargs: Any) -> httpx.Response:
        return self._http.request(method, path, **kwargs)

    def get(self, path: str, **kwargs: Any) -> httpx.Response:
        return self.request("GET", path, **kwargs)

    def post(self, path: str, **kwargs: Any) -> httpx.Response:
        return self.request("POST", path, **kwargs)

    def put(self, path: str, **kwargs: Any) -> httpx.Response:
        return self.request("PUT", path, **kwargs)

    def patch(self, path: str, **kwargs: Any) -> httpx.Response:
        return self.request("PATCH", path, **kwargs)

    def delete(self, path: str, **kwargs: Any) -> httpx.Response:
        return self.request("DELETE", path, **kwargs)

    def close(self) -> None:
        self._http.close()

    def __enter__(self) -> "APIClient":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()


class CombinedClient:
    """Long-lived handle on the API client and Spaces session factory."""

    def __init__(
        self,
        api_client: APIClient,
        spaces_endpoint_template: EndpointTemplate,
        access_id: str = "",
        secret_key: str = "",
        logger: Any = None,
    ):
        self._api_client = api_client
        self._spaces_endpoint_template = spaces_endpoint_template
        self._access_id = access_id
        self._secret_key = secret_key
        self._logger = logger if logger is not None else null_logger()

    def api_client(self) -> APIClient:
        """Return the API client."""
        return self._api_client

    @property
    def api(self) -> APIClient:
        return self._api_client

    @property
    def spaces_endpoint_template(self) -> EndpointTemplate:
        return self._spaces_endpoint_template

    def spaces_endpoint(self, region: str) -> str:
        """Render the Spaces endpoint for a region."""
        return self._spaces_endpoint_template.render(region)

    def storage_session(self, region: str) -> SpacesSession:
        """Build a Spaces session for a region.

        A new session is built on every call.

        Args:
            region: Spaces region slug, any case (e.g. "NYC3")

        Returns:
            Session signing with static credentials against the regional endpoint

        Raises:
            CredentialsMissingError: If the access ID or secret key is empty
            StorageSessionError: If the endpoint can't be rendered or the
                session can't be constructed
        """
        if not self._access_id or not self._secret_key:
            raise CredentialsMissingError("Spaces credentials not configured")

        try:
            endpoint = self._spaces_endpoint_template.render(region)
            config = SpacesClientConfig(
                access_key_id=self._access_id,
                secret_access_key=self._secret_key,
                endpoint_url=endpoint,
                region_name=SIGNING_REGION,
            )
        except ValueError as e:
            raise StorageSessionError(
                f"Failed to build Spaces endpoint for region '{region}': {e}"
            ) from e

        return SpacesSession(config, logger=self._logger)

    def close(self) -> None:
        self._api_client.close()

    def __enter__(self) -> "CombinedClient":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()


def create_client(
    config: ClientConfig,
    *,
    logger: Any = None,
    transport: Optional[httpx.BaseTransport] = None,
    sleep: Callable[[float], None] = time.sleep,
    clock: Callable[[], float] = time.time,
    timeout: Optional[float] = None,
) -> CombinedClient:
    """Build a DigitalOcean client from a validated configuration.

    Args:
        config: Client configuration
        logger: structlog-style logger for construction, backoff and request
            diagnostics; silent by default
        transport: Base transport doing the network I/O; defaults to a
            pooled ``httpx.HTTPTransport``
        sleep: Blocking sleep used between retries
        clock: Returns the current Unix time, used against rate-limit resets
        timeout: Per-request timeout in seconds, None for no timeout

    Returns:
        Combined client handle

    Raises:
        InvalidEndpointError: If the API endpoint is malformed
        InvalidTemplateError: If the Spaces endpoint template is malformed
    """
    log = logger if logger is not None else null_logger()

    base_url = parse_api_endpoint(config.api_endpoint)
    spaces_endpoint_template = EndpointTemplate.parse(config.spaces_endpoint)

    token_source = StaticTokenSource(config.token)
    backoff = functools.partial(rate_limit_backoff, clock=clock, logger=log)

    stages = [
        Stage(
            Capability.RETRIES,
            lambda inner: RetryTransport(
                inner,
                retry_max=config.http_retry_max,
                wait_min=config.http_retry_wait_min,
                wait_max=config.http_retry_wait_max,
                backoff=backoff,
                sleep=sleep,
            ),
        ),
        Stage(
            Capability.AUTHENTICATES,
            lambda inner: BearerAuthTransport(inner, token_source),
        ),
        Stage(
            Capability.LOGS,
            lambda inner: LoggingTransport(inner, SERVICE_NAME, logger=log),
        ),
    ]
    chain = build_transport_chain(transport or httpx.HTTPTransport(), stages)

    api_client = APIClient(base_url, chain, config.user_agent, timeout=timeout)

    log.info("DigitalOcean client configured", url=str(api_client.base_url))

    return CombinedClient(
        api_client,
        spaces_endpoint_template,
        access_id=config.access_id,
        secret_key=config.secret_key,
        logger=log,
    )
