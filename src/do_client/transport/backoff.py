"""Backoff strategies for the retrying transport.

A backoff strategy is a plain function with the signature::

    backoff(min_wait, max_wait, attempt_num, response) -> seconds

``attempt_num`` is the zero-based retry index and ``response`` is the
response that triggered the retry, or ``None`` when the attempt failed
without one (connection errors, timeouts). Strategies only compute the
wait; the retry transport owns the actual sleep.
"""

import math
import time
from typing import Any, Callable, Optional

import httpx

from do_client.core import null_logger

RATE_LIMIT_RESET_HEADER = "Ratelimit-Reset"

BackoffStrategy = Callable[[float, float, int, Optional[httpx.Response]], float]


def default_backoff(
    min_wait: float,
    max_wait: float,
    attempt_num: int,
    response: Optional[httpx.Response] = None,
) -> float:
    """Exponential backoff doubling per attempt, clamped to [min_wait, max_wait]."""
    try:
        sleep = min_wait * math.pow(2, attempt_num)
    except OverflowError:
        return max_wait

    if not math.isfinite(sleep) or sleep > max_wait:
        return max_wait
    return max(sleep, min_wait)


def rate_limit_backoff(
    min_wait: float,
    max_wait: float,
    attempt_num: int,
    response: Optional[httpx.Response] = None,
    *,
    clock: Callable[[], float] = time.time,
    logger: Any = None,
) -> float:
    """Wait until the API's rate-limit window resets, else back off exponentially.

    On a 429 response the ``Ratelimit-Reset`` header holds the Unix time at
    which the request quota replenishes. That value comes from the server
    and may be stale or skewed, so the derived wait is capped at
    ``max_wait`` and a non-positive wait falls back to the exponential
    curve instead of retrying immediately.

    Args:
        min_wait: Lower bound in seconds
        max_wait: Upper bound in seconds
        attempt_num: Zero-based retry index
        response: Response that triggered the retry, if any
        clock: Returns the current Unix time
        logger: structlog-style logger, silent by default

    Returns:
        Seconds to wait before the next attempt
    """
    log = logger if logger is not None else null_logger()

    if response is not None and response.status_code == httpx.codes.TOO_MANY_REQUESTS:
        reset = response.headers.get(RATE_LIMIT_RESET_HEADER)
        if reset:
            try:
                reset_unix = int(reset.strip())
            except ValueError:
                reset_unix = None

            if reset_unix is not None:
                sleep = float(reset_unix - int(clock()))
                log.info("Reached API rate limit, waiting", wait=sleep)

                # Cap the wait so a far-off reset or a skewed clock can't stall us
                if sleep > max_wait:
                    return max_wait

                if sleep > 0:
                    return sleep

    sleep = default_backoff(min_wait, max_wait, attempt_num, response)
    log.info("API error (not rate limit), waiting", wait=sleep)
    return sleep
