# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

import json
import logging
import socket
import threading
from concurrent.futures import ThreadPoolExecutor

import pytest

from httpagent.builder import RequestBuilder
from httpagent.config import HttpSettings
from httpagent.errors import ErrorCategory, RequestCancelledError, TransportError
from httpagent.http.adapters import StubHttpClient
from httpagent.http.dispatch import send_async
from httpagent.http.models import HttpRequest, HttpResponse
from httpagent.utils.context import agent_context

WAIT = 5.0


class Recorder:
    def __init__(self):
        self.successes: list[tuple] = []
        self.failures: list[tuple] = []
        self.threads: list[str] = []

    def success(self, response, body, error):
        self.threads.append(threading.current_thread().name)
        self.successes.append((response, body, error))

    def failure(self, response, raw, error):
        self.threads.append(threading.current_thread().name)
        self.failures.append((response, raw, error))


def test_get_with_parameters_routes_json_to_success():
    stub = StubHttpClient()
    stub.add_json("http://x/items?q=abc", '{"items":[]}')
    rec = Recorder()

    builder = RequestBuilder.get("http://x/items", None, {"q": "abc"}, rec.success, rec.failure, client=stub)

    assert builder.wait(WAIT) is True
    assert builder.done is True
    assert len(rec.successes) == 1
    response, body, error = rec.successes[0]
    assert body == {"items": []}
    assert error is None
    assert response.status_code == 200
    assert rec.failures == []
    assert stub.requests[0].method == "GET"
    assert stub.requests[0].url == "http://x/items?q=abc"


def test_get_dns_failure_routes_to_failure():
    stub = StubHttpClient()
    stub.add_error("http://x/items?q=abc", socket.gaierror(-2, "Name or service not known"))
    rec = Recorder()

    builder = RequestBuilder.get("http://x/items", parameters={"q": "abc"}, success=rec.success, failure=rec.failure, client=stub)

    assert builder.wait(WAIT) is True
    assert rec.successes == []
    assert len(rec.failures) == 1
    response, raw, error = rec.failures[0]
    assert response is None
    assert raw is None
    assert isinstance(error, TransportError)
    assert error.category == ErrorCategory.DNS_ERROR
    assert error.error_type == "gaierror"


def test_invalid_json_body_still_routes_to_success(caplog):
    stub = StubHttpClient()
    stub.add_json("http://x/items", "not-json")
    rec = Recorder()

    with caplog.at_level(logging.WARNING, logger="httpagent.builder"):
        builder = RequestBuilder.get("http://x/items", success=rec.success, failure=rec.failure, client=stub)
        assert builder.wait(WAIT) is True

    assert rec.failures == []
    assert len(rec.successes) == 1
    response, body, error = rec.successes[0]
    assert body is None
    assert error is None
    assert response.status_code == 200
    assert "decode_error" in response.meta
    assert any("not valid JSON" in record.getMessage() for record in caplog.records)


def test_empty_body_yields_none_payload_without_decode_error():
    stub = StubHttpClient({"http://x/empty": HttpResponse(ok=True, status_code=204, url="http://x/empty")})
    rec = Recorder()
    RequestBuilder.delete("http://x/empty", success=rec.success, failure=rec.failure, client=stub).wait(WAIT)
    response, body, _ = rec.successes[0]
    assert body is None
    assert response.status_code == 204
    assert "decode_error" not in response.meta


def test_http_error_status_is_not_a_transport_failure():
    stub = StubHttpClient()
    stub.add_json("http://x/missing", '{"error":"not found"}', status_code=404)
    rec = Recorder()
    RequestBuilder.put("http://x/missing", {"A": "1"}, rec.success, rec.failure, client=stub).wait(WAIT)
    assert rec.failures == []
    response, body, _ = rec.successes[0]
    assert response.status_code == 404
    assert body == {"error": "not found"}
    assert stub.requests[0].method == "PUT"
    assert stub.requests[0].headers == {"A": "1"}


def test_post_sends_json_body():
    stub = StubHttpClient()
    stub.add_json("http://x/items", '{"id":7}', status_code=201)
    rec = Recorder()
    RequestBuilder.post("http://x/items", {"X-Trace": "t"}, {"name": "widget"}, rec.success, rec.failure, client=stub).wait(WAIT)

    sent = stub.requests[0]
    assert sent.method == "POST"
    assert json.loads(sent.body) == {"name": "widget"}
    assert sent.headers["Content-Type"] == "application/json"
    assert sent.headers["X-Trace"] == "t"
    assert rec.successes[0][1] == {"id": 7}


def test_run_returns_before_completion():
    gate = threading.Event()
    stub = StubHttpClient(gate=gate)
    stub.add_json("http://x/slow", '{"ok":true}')
    rec = Recorder()

    builder = RequestBuilder.create("GET", "http://x/slow", client=stub).set_success(rec.success).run()

    assert builder.done is False
    assert rec.successes == []
    assert builder.wait(0.05) is False

    gate.set()
    assert builder.wait(WAIT) is True
    assert len(rec.successes) == 1
    assert rec.threads[0] != threading.current_thread().name


def test_dispatch_uses_snapshot_of_request():
    gate = threading.Event()
    stub = StubHttpClient(gate=gate)
    stub.add_json("http://x/a", "{}")
    builder = RequestBuilder.create("GET", "http://x/a", {"A": "1"}, client=stub).run()

    builder.set_url("http://x/b").set_header("A", "2").set_http_method("POST")
    gate.set()
    builder.wait(WAIT)

    sent = stub.requests[0]
    assert sent.url == "http://x/a"
    assert sent.method == "GET"
    assert sent.headers == {"A": "1"}


def test_no_callbacks_registered_is_silent():
    stub = StubHttpClient()
    stub.add_json("http://x", "{}")
    builder = RequestBuilder.get("http://x", client=stub)
    assert builder.wait(WAIT) is True
    assert len(stub.requests) == 1


def test_missing_stub_response_is_transport_failure():
    rec = Recorder()
    RequestBuilder.get("http://nowhere", success=rec.success, failure=rec.failure, client=StubHttpClient()).wait(WAIT)
    assert rec.successes == []
    error = rec.failures[0][2]
    assert error.category == ErrorCategory.UNKNOWN_ERROR
    assert "No stubbed response" in str(error)


def test_cancel_while_in_flight_routes_cancellation_to_failure():
    gate = threading.Event()
    stub = StubHttpClient(gate=gate)
    stub.add_json("http://x/slow", "{}")
    rec = Recorder()

    builder = RequestBuilder.create("GET", "http://x/slow", client=stub).set_success(rec.success).set_failure(rec.failure).run()
    builder.cancel()
    gate.set()

    assert builder.wait(WAIT) is True
    assert rec.successes == []
    assert len(rec.failures) == 1
    error = rec.failures[0][2]
    assert isinstance(error, RequestCancelledError)
    assert error.category == ErrorCategory.CANCELLED


def test_cancel_before_transport_starts_skips_transport():
    stub = StubHttpClient()
    stub.add_json("http://x/queued", "{}")
    rec = Recorder()
    blocker = threading.Event()

    with ThreadPoolExecutor(max_workers=1) as queue:
        queue.submit(blocker.wait, WAIT)
        builder = (
            RequestBuilder.create("GET", "http://x/queued", client=stub, queue=queue)
            .set_success(rec.success)
            .set_failure(rec.failure)
            .run()
        )
        builder.cancel()
        blocker.set()
        assert builder.wait(WAIT) is True

    assert stub.requests == []
    assert rec.successes == []
    assert isinstance(rec.failures[0][2], RequestCancelledError)


def test_cancel_after_completion_is_noop():
    stub = StubHttpClient()
    stub.add_json("http://x", '{"a":1}')
    rec = Recorder()
    builder = RequestBuilder.get("http://x", success=rec.success, failure=rec.failure, client=stub)
    builder.wait(WAIT)
    builder.cancel()
    assert len(rec.successes) == 1
    assert rec.failures == []
    assert builder.dispatch.cancelled is False


def test_callback_exception_does_not_escape_or_trigger_failure(caplog):
    stub = StubHttpClient()
    stub.add_json("http://x", "{}")
    failures = []

    def boom(*_args):  # noqa: ANN002
        raise RuntimeError("callback exploded")

    with caplog.at_level(logging.ERROR, logger="httpagent.http.dispatch"):
        builder = RequestBuilder.get("http://x", success=boom, failure=lambda *a: failures.append(a), client=stub)
        assert builder.wait(WAIT) is True

    assert failures == []
    assert any("raised" in record.getMessage() for record in caplog.records)


def test_ambient_context_client_and_settings_are_used():
    stub = StubHttpClient()
    stub.add_json("http://x/search?term=a b", "[1]")
    rec = Recorder()
    settings = HttpSettings(encode_query=False, allow_redirects=False)

    with agent_context(http_client=stub, http_settings=settings):
        builder = RequestBuilder.get("http://x/search", parameters={"term": "a b"}, success=rec.success)
    builder.wait(WAIT)

    assert rec.successes[0][1] == [1]
    assert stub.requests[0].allow_redirects is False


def test_send_async_converts_client_exceptions():
    class Exploding:
        def request(self, request):  # noqa: ARG002
            raise ConnectionRefusedError("refused")

    seen: list[HttpResponse] = []
    with ThreadPoolExecutor(max_workers=1) as queue:
        pending = send_async(Exploding(), HttpRequest(url="http://x"), queue=queue, on_complete=seen.append)
        assert pending.wait(WAIT) is True

    assert len(seen) == 1
    assert seen[0].ok is False
    assert seen[0].error_category == ErrorCategory.CONNECTION_ERROR
    assert seen[0].error_type == "ConnectionRefusedError"
    assert pending.request.cancel_event is not None


@pytest.mark.parametrize("method", ["get", "put", "delete"])
def test_factories_dispatch_immediately(method):
    stub = StubHttpClient()
    stub.add_json("http://x/r", "{}")
    builder = getattr(RequestBuilder, method)("http://x/r", client=stub)
    builder.wait(WAIT)
    assert stub.requests[0].method == method.upper()
