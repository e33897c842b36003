"""Scripted HTTP responses for exercising transports without a network."""

import httpx

FIXED_NOW = 1_700_000_000
ACCOUNT_URL = "https://api.digitalocean.com/v2/account"


def rate_limited(reset=None, status=429):
    """Build a response carrying an optional Ratelimit-Reset header."""
    headers = {}
    if reset is not None:
        headers["Ratelimit-Reset"] = str(reset)
    return httpx.Response(status, headers=headers)


class ScriptedHandler:
    """MockTransport handler replaying a fixed sequence of outcomes.

    Each outcome is a status code, an ``httpx.Response`` or an exception to
    raise. The last outcome repeats once the script runs out.
    """

    def __init__(self, *outcomes):
        self.outcomes = list(outcomes)
        self.requests = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        index = min(len(self.requests), len(self.outcomes)) - 1
        outcome = self.outcomes[index]
        if isinstance(outcome, BaseException):
            raise outcome
        if isinstance(outcome, int):
            return httpx.Response(outcome, json={"ok": outcome < 400})
        return httpx.Response(outcome.status_code, headers=outcome.headers)

    @property
    def calls(self) -> int:
        return len(self.requests)

    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self)
