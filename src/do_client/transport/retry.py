"""Retrying HTTP transport."""

import ssl
import time
from typing import Callable, Optional

import httpx
from tenacity import (
    RetryCallState,
    Retrying,
    retry_if_exception,
    retry_if_result,
    stop_after_attempt,
)

from .backoff import BackoffStrategy, default_backoff
from .chain import Capability

RETRYABLE_ERRORS = (
    httpx.TimeoutException,
    httpx.NetworkError,
    httpx.RemoteProtocolError,
)


def _is_certificate_error(exc: BaseException) -> bool:
    """Walk the exception chain looking for a TLS verification failure."""
    seen = set()
    current: Optional[BaseException] = exc
    while current is not None and id(current) not in seen:
        if isinstance(current, ssl.SSLCertVerificationError):
            return True
        seen.add(id(current))
        current = current.__cause__ or current.__context__
    return False


def is_retryable_error(exc: BaseException) -> bool:
    """Check if a transport error warrants another attempt."""
    if not isinstance(exc, RETRYABLE_ERRORS):
        return False
    # A certificate that fails verification won't pass on the next try either
    return not _is_certificate_error(exc)


def is_retryable_response(response: httpx.Response) -> bool:
    """Check if a response status warrants another attempt.

    Rate limiting (429) and server errors are retried; 501 Not Implemented
    is a permanent answer and is returned as-is.
    """
    status = response.status_code
    if status == httpx.codes.TOO_MANY_REQUESTS:
        return True
    return status >= 500 and status != httpx.codes.NOT_IMPLEMENTED


class RetryTransport(httpx.BaseTransport):
    """Transport that re-sends requests on transient failures.

    The wait between attempts comes from a pluggable backoff strategy that
    sees the previous response, which lets it honour server-declared rate
    limit windows.

    Once retries are exhausted the caller gets exactly what the last attempt
    produced: its response, or its exception re-raised unchanged.
    """

    capability = Capability.RETRIES

    def __init__(
        self,
        wrapped: httpx.BaseTransport,
        retry_max: int = 4,
        wait_min: float = 1.0,
        wait_max: float = 30.0,
        backoff: BackoffStrategy = default_backoff,
        sleep: Callable[[float], None] = time.sleep,
    ):
        """Initialize the retrying transport.

        Args:
            wrapped: Transport that actually sends requests
            retry_max: Number of retries after the first attempt
            wait_min: Minimum wait between attempts in seconds
            wait_max: Maximum wait between attempts in seconds
            backoff: Strategy computing each wait
            sleep: Blocking sleep function
        """
        if retry_max < 0:
            raise ValueError(f"retry_max must not be negative: {retry_max}")
        if wait_min < 0 or wait_max < 0:
            raise ValueError("retry waits must not be negative")
        if wait_min > wait_max:
            raise ValueError(
                f"wait_min ({wait_min}) must not exceed wait_max ({wait_max})"
            )

        self.wrapped = wrapped
        self.retry_max = retry_max
        self.wait_min = wait_min
        self.wait_max = wait_max
        self.backoff = backoff
        self._sleep = sleep

    def _wait(self, retry_state: RetryCallState) -> float:
        response = None
        if retry_state.outcome is not None and not retry_state.outcome.failed:
            response = retry_state.outcome.result()
        return self.backoff(
            self.wait_min, self.wait_max, retry_state.attempt_number - 1, response
        )

    @staticmethod
    def _discard(retry_state: RetryCallState) -> None:
        if retry_state.outcome is not None and not retry_state.outcome.failed:
            retry_state.outcome.result().close()

    @staticmethod
    def _give_up(retry_state: RetryCallState) -> httpx.Response:
        # Returns the last response, or re-raises the last exception as-is
        return retry_state.outcome.result()

    def handle_request(self, request: httpx.Request) -> httpx.Response:
        # Buffer the body so every attempt can send it again
        request.read()

        retrying = Retrying(
            stop=stop_after_attempt(self.retry_max + 1),
            wait=self._wait,
            retry=(
                retry_if_exception(is_retryable_error)
                | retry_if_result(is_retryable_response)
            ),
            before_sleep=self._discard,
            retry_error_callback=self._give_up,
            sleep=self._sleep,
            reraise=True,
        )
        return retrying(self.wrapped.handle_request, request)

    def close(self) -> None:
        self.wrapped.close()
