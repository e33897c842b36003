"""Tests for transport layering: order, authentication and logging."""

import httpx
import pytest

from do_client.core.exceptions import TransportOrderError
from do_client.transport import (
    BearerAuthTransport,
    Capability,
    LoggingTransport,
    RetryTransport,
    Stage,
    StaticTokenSource,
    build_transport_chain,
    describe_chain,
    find_stage,
    validate_order,
)
from do_client.transport.diagnostics import redact_headers
from mock_api import ACCOUNT_URL, ScriptedHandler, rate_limited

TOKEN = "dop_v1_secret-token"


def retry_stage(sleeps, retry_max=3):
    return Stage(
        Capability.RETRIES,
        lambda inner: RetryTransport(
            inner,
            retry_max=retry_max,
            backoff=lambda mn, mx, n, r: 0.1,
            sleep=sleeps.append,
        ),
    )


def auth_stage():
    return Stage(
        Capability.AUTHENTICATES,
        lambda inner: BearerAuthTransport(inner, StaticTokenSource(TOKEN)),
    )


def logging_stage(logger):
    return Stage(
        Capability.LOGS,
        lambda inner: LoggingTransport(inner, "DigitalOcean", logger=logger),
    )


class TestChainOrder:
    """Test construction-time order checks."""

    def test_builds_in_required_order(self, sleeps, logger):
        """Test that retry -> auth -> logging builds outermost-first as expected."""
        chain = build_transport_chain(
            ScriptedHandler(200).transport(),
            [retry_stage(sleeps), auth_stage(), logging_stage(logger)],
        )

        assert describe_chain(chain) == [
            Capability.LOGS,
            Capability.AUTHENTICATES,
            Capability.RETRIES,
        ]
        assert isinstance(chain, LoggingTransport)

    def test_auth_inside_retry_rejected(self, sleeps, logger):
        """Test that authenticating beneath the retry layer is refused."""
        with pytest.raises(TransportOrderError, match="out of order"):
            build_transport_chain(
                ScriptedHandler(200).transport(),
                [auth_stage(), retry_stage(sleeps), logging_stage(logger)],
            )

    def test_logging_inside_auth_rejected(self, sleeps, logger):
        """Test that logging beneath authentication is refused."""
        with pytest.raises(TransportOrderError):
            build_transport_chain(
                ScriptedHandler(200).transport(),
                [retry_stage(sleeps), logging_stage(logger), auth_stage()],
            )

    def test_duplicate_stage_rejected(self):
        """Test that a capability may only appear once."""
        with pytest.raises(TransportOrderError, match="more than once"):
            validate_order([Capability.RETRIES, Capability.RETRIES])

    def test_subset_in_order_allowed(self, sleeps, logger):
        """Test that a chain may omit stages as long as order holds."""
        chain = build_transport_chain(
            ScriptedHandler(200).transport(),
            [retry_stage(sleeps), logging_stage(logger)],
        )

        assert describe_chain(chain) == [Capability.LOGS, Capability.RETRIES]

    def test_mislabelled_stage_rejected(self):
        """Test that a stage must produce a transport of its declared capability."""
        stage = Stage(
            Capability.RETRIES,
            lambda inner: BearerAuthTransport(inner, StaticTokenSource(TOKEN)),
        )

        with pytest.raises(TransportOrderError, match="produced a transport"):
            build_transport_chain(ScriptedHandler(200).transport(), [stage])

    def test_find_stage(self, sleeps, logger):
        """Test looking up a layer by capability."""
        chain = build_transport_chain(
            ScriptedHandler(200).transport(),
            [retry_stage(sleeps, retry_max=7), auth_stage()],
        )

        assert find_stage(chain, Capability.RETRIES).retry_max == 7
        assert find_stage(chain, Capability.LOGS) is None


class TestAuthentication:
    """Test bearer token injection."""

    def test_every_retry_is_authenticated(self, sleeps, logger):
        """Test that each re-sent request carries the same bearer token."""
        handler = ScriptedHandler(rate_limited(), 503, 200)
        chain = build_transport_chain(
            handler.transport(),
            [retry_stage(sleeps), auth_stage(), logging_stage(logger)],
        )

        response = chain.handle_request(httpx.Request("GET", ACCOUNT_URL))

        assert response.status_code == 200
        assert handler.calls == 3
        assert [r.headers["Authorization"] for r in handler.requests] == [
            f"Bearer {TOKEN}"
        ] * 3

    def test_caller_request_not_mutated(self):
        """Test that the caller's request never gains the Authorization header."""
        handler = ScriptedHandler(200)
        transport = BearerAuthTransport(handler.transport(), StaticTokenSource(TOKEN))
        request = httpx.Request("GET", ACCOUNT_URL, headers={"X-Trace": "1"})

        transport.handle_request(request)

        assert "Authorization" not in request.headers
        assert handler.requests[0].headers["X-Trace"] == "1"

    def test_existing_authorization_replaced(self):
        """Test that the configured token wins over a caller-supplied header."""
        handler = ScriptedHandler(200)
        transport = BearerAuthTransport(handler.transport(), StaticTokenSource(TOKEN))

        transport.handle_request(
            httpx.Request("GET", ACCOUNT_URL, headers={"Authorization": "Bearer other"})
        )

        assert handler.requests[0].headers["Authorization"] == f"Bearer {TOKEN}"

    def test_body_forwarded(self):
        """Test that the request body reaches the wrapped transport."""
        handler = ScriptedHandler(201)
        transport = BearerAuthTransport(handler.transport(), StaticTokenSource(TOKEN))

        transport.handle_request(
            httpx.Request("POST", ACCOUNT_URL, content=b'{"name": "vol-1"}')
        )

        assert handler.requests[0].content == b'{"name": "vol-1"}'

    def test_token_source_repr_hides_token(self):
        """Test that the token never shows up in a repr."""
        assert TOKEN not in repr(StaticTokenSource(TOKEN))


class TestLoggingTransport:
    """Test diagnostic request logging."""

    def build(self, handler, sleeps, logger):
        return build_transport_chain(
            handler.transport(),
            [retry_stage(sleeps), auth_stage(), logging_stage(logger)],
        )

    def test_logs_request_and_response_once(self, sleeps, logger):
        """Test that one logical request is logged once, however many retries."""
        handler = ScriptedHandler(503, 503, 200)

        self.build(handler, sleeps, logger).handle_request(
            httpx.Request("GET", ACCOUNT_URL)
        )

        events = [c.args[0] for c in logger.debug.call_args_list]
        assert events == ["HTTP request", "HTTP response"]
        response_kwargs = logger.debug.call_args_list[1].kwargs
        assert response_kwargs["status"] == 200
        assert response_kwargs["method"] == "GET"
        assert response_kwargs["url"] == ACCOUNT_URL
        assert response_kwargs["service"] == "DigitalOcean"

    def test_token_never_logged(self, sleeps, logger):
        """Test that the bearer token does not appear in any log call."""
        handler = ScriptedHandler(200)
        request = httpx.Request(
            "GET", ACCOUNT_URL, headers={"Authorization": f"Bearer {TOKEN}"}
        )

        self.build(handler, sleeps, logger).handle_request(request)

        assert TOKEN not in repr(logger.mock_calls)
        request_headers = logger.debug.call_args_list[0].kwargs["headers"]
        assert request_headers["authorization"] == "***"

    def test_failure_logged_and_raised(self, sleeps, logger):
        """Test that transport errors are logged and propagate."""
        handler = ScriptedHandler(httpx.UnsupportedProtocol("gopher"))

        with pytest.raises(httpx.UnsupportedProtocol):
            self.build(handler, sleeps, logger).handle_request(
                httpx.Request("GET", ACCOUNT_URL)
            )

        logger.warning.assert_called_once()
        assert logger.warning.call_args.args[0] == "HTTP request failed"

    def test_payload_untouched(self, sleeps, logger):
        """Test that logging does not consume or change payloads."""
        handler = ScriptedHandler(200)

        response = self.build(handler, sleeps, logger).handle_request(
            httpx.Request("POST", ACCOUNT_URL, content=b"payload")
        )

        assert handler.requests[0].content == b"payload"
        response.read()
        assert response.json() == {"ok": True}

    def test_redact_headers(self):
        """Test header redaction."""
        headers = httpx.Headers(
            {"Authorization": "Bearer x", "X-Auth-Token": "y", "Accept": "application/json"}
        )

        assert redact_headers(headers) == {
            "authorization": "***",
            "x-auth-token": "***",
            "accept": "application/json",
        }
