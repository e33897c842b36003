"""Bearer token authentication transport."""

from dataclasses import dataclass

import httpx

from .chain import Capability


@dataclass(frozen=True)
class StaticTokenSource:
    """Token source that always hands out the same access token."""

    access_token: str
    token_type: str = "Bearer"

    def token(self) -> str:
        return self.access_token

    def authorization(self) -> str:
        """Value for the Authorization header."""
        return f"{self.token_type} {self.access_token}"

    def __repr__(self) -> str:
        return f"StaticTokenSource(token_type={self.token_type!r}, access_token='***')"


class BearerAuthTransport(httpx.BaseTransport):
    """Transport that attaches the bearer token to every outgoing request.

    The caller's request is left untouched; a copy carrying the
    Authorization header is sent instead.
    """

    capability = Capability.AUTHENTICATES

    def __init__(self, wrapped: httpx.BaseTransport, token_source: StaticTokenSource):
        self.wrapped = wrapped
        self.token_source = token_source

    def handle_request(self, request: httpx.Request) -> httpx.Response:
        headers = request.headers.copy()
        headers["Authorization"] = self.token_source.authorization()

        authenticated = httpx.Request(
            method=request.method,
            url=request.url,
            headers=headers,
            stream=request.stream,
            extensions=request.extensions,
        )
        return self.wrapped.handle_request(authenticated)

    def close(self) -> None:
        self.wrapped.close()
