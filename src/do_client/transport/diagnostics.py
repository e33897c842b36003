"""Diagnostic logging transport.

Records request and response metadata for every call that leaves the
client. Payloads are never read or altered, and credentials are masked
before anything reaches the log.
"""

import time
from typing import Any, Dict

import httpx

from do_client.core import get_tracer, null_logger

from .chain import Capability

SENSITIVE_HEADERS = frozenset({"authorization", "proxy-authorization", "x-auth-token"})
REDACTED = "***"

tracer = get_tracer(__name__)


def redact_headers(headers: httpx.Headers) -> Dict[str, str]:
    """Copy headers into a plain dict with credential values masked."""
    return {
        key: REDACTED if key.lower() in SENSITIVE_HEADERS else value
        for key, value in headers.items()
    }


class LoggingTransport(httpx.BaseTransport):
    """Transport that logs each request/response pair passing through it."""

    capability = Capability.LOGS

    def __init__(self, wrapped: httpx.BaseTransport, name: str, logger: Any = None):
        """Initialize the logging transport.

        Args:
            wrapped: Transport to observe
            name: Service name included in every log line
            logger: structlog-style logger, silent by default
        """
        self.wrapped = wrapped
        self.name = name
        self.logger = logger if logger is not None else null_logger()

    def handle_request(self, request: httpx.Request) -> httpx.Response:
        url = str(request.url)
        self.logger.debug(
            "HTTP request",
            service=self.name,
            method=request.method,
            url=url,
            headers=redact_headers(request.headers),
        )

        with tracer.start_as_current_span(f"{self.name} {request.method}") as span:
            span.set_attribute("http.method", request.method)
            span.set_attribute("http.url", url)

            started = time.perf_counter()
            try:
                response = self.wrapped.handle_request(request)
            except httpx.HTTPError as e:
                self.logger.warning(
                    "HTTP request failed",
                    service=self.name,
                    method=request.method,
                    url=url,
                    error=str(e),
                    elapsed_ms=round((time.perf_counter() - started) * 1000, 1),
                )
                raise

            span.set_attribute("http.status_code", response.status_code)

        self.logger.debug(
            "HTTP response",
            service=self.name,
            method=request.method,
            url=url,
            status=response.status_code,
            headers=redact_headers(response.headers),
            elapsed_ms=round((time.perf_counter() - started) * 1000, 1),
        )
        return response

    def close(self) -> None:
        self.wrapped.close()
