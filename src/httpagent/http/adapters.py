# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""In-process HttpClient implementations."""

from __future__ import annotations

import threading

from .client import HttpClient
from .models import HttpRequest, HttpResponse


class StubHttpClient(HttpClient):
    """
    Deterministic, programmable HttpClient for tests.

    Responses and exceptions are keyed by the full request URL (query string
    included). When `gate` is given, every request blocks until the event is
    set, which makes completion timing controllable from the test.
    """

    def __init__(
        self,
        responses: dict[str, HttpResponse] | None = None,
        *,
        gate: threading.Event | None = None,
        gate_timeout: float = 5.0,
    ):
        self._responses = responses or {}
        self._errors: dict[str, BaseException] = {}
        self._lock = threading.Lock()
        self.gate = gate
        self.gate_timeout = gate_timeout
        self.requests: list[HttpRequest] = []
        self.closed = False

    def add(self, url: str, response: HttpResponse) -> None:
        self._responses[url] = response

    def add_json(self, url: str, body: str | bytes, *, status_code: int = 200) -> None:
        """Register a successful response carrying `body` as a JSON payload."""
        content = body.encode("utf-8") if isinstance(body, str) else bytes(body)
        self.add(
            url,
            HttpResponse(
                ok=True,
                status_code=status_code,
                headers={"content-type": "application/json"},
                text=content.decode("utf-8", errors="replace"),
                content=content,
                url=url,
            ),
        )

    def add_error(self, url: str, exc: BaseException) -> None:
        """Make requests to `url` raise `exc`, as a failing transport would."""
        self._errors[url] = exc

    def request(self, request: HttpRequest) -> HttpResponse:
        with self._lock:
            self.requests.append(request)
        if self.gate is not None:
            self.gate.wait(self.gate_timeout)
        if request.url in self._errors:
            raise self._errors[request.url]
        if request.url in self._responses:
            return self._responses[request.url]
        return HttpResponse(ok=False, status_code=None, url=request.url, error_message="No stubbed response configured")

    def close(self) -> None:
        self.closed = True
