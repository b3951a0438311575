# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""
Fluent request builder.

A RequestBuilder accumulates method, URL, headers and body through chainable
mutators, then `run()` hands a snapshot of the request to the transport on a
builder-owned work queue. On completion at most one of the registered
callbacks fires:

- transport failure (DNS, TLS, connection, timeout, cancellation) goes to
  `on_failure(response_or_none, raw_body_or_none, TransportError)`;
- anything else, including 4xx/5xx statuses and bodies that are not valid
  JSON, goes to `on_success(response, parsed_body_or_none, None)`.

A decode failure is therefore only visible as a `None` payload on the success
path; it is also logged and recorded in `response.meta["decode_error"]`.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Mapping
from concurrent.futures import Executor, ThreadPoolExecutor
from dataclasses import replace
from functools import partial
from typing import Any

from .codec import Codec
from .config import HttpSettings
from .errors import DecodeError, TransportError
from .http.client import HttpClient
from .http.dispatch import PendingDispatch, send_async
from .http.headers import copy_headers, header_value, set_header_value
from .http.models import HttpRequest, HttpResponse
from .http.url import append_query_string
from .utils.context import get_codec, get_http_client, get_http_settings

logger = logging.getLogger(__name__)

SuccessCallback = Callable[[HttpResponse, Any, None], None]
FailureCallback = Callable[[HttpResponse | None, bytes | None, TransportError], None]


class RequestBuilder:
    """Chainable HTTP request builder with callback-based completion."""

    def __init__(
        self,
        method: str = "GET",
        url: str = "",
        headers: Mapping[str, str] | None = None,
        *,
        client: HttpClient | None = None,
        settings: HttpSettings | None = None,
        codec: Codec | None = None,
        queue: Executor | None = None,
    ):
        self.request = HttpRequest(url=url, method=method)
        self._client = client
        self._settings = settings
        self._codec = codec
        self._queue = queue
        self._on_success: SuccessCallback | None = None
        self._on_failure: FailureCallback | None = None
        self._dispatch: PendingDispatch | None = None
        self.set_headers(headers)

    # Factories

    @classmethod
    def create(cls, method: str, url: str, headers: Mapping[str, str] | None = None, **options: Any) -> RequestBuilder:
        """Return a configured builder without dispatching it."""
        return cls(method, url, headers, **options)

    @classmethod
    def get(
        cls,
        url: str,
        headers: Mapping[str, str] | None = None,
        parameters: Mapping[str, Any] | None = None,
        success: SuccessCallback | None = None,
        failure: FailureCallback | None = None,
        **options: Any,
    ) -> RequestBuilder:
        settings = options.get("settings") or get_http_settings()
        request_url = append_query_string(url, parameters, encode=settings.encode_query)
        return cls.create("GET", request_url, headers, **options).set_success(success).set_failure(failure).run()

    @classmethod
    def post(
        cls,
        url: str,
        headers: Mapping[str, str] | None = None,
        parameters: Any = None,
        success: SuccessCallback | None = None,
        failure: FailureCallback | None = None,
        **options: Any,
    ) -> RequestBuilder:
        return (
            cls.create("POST", url, headers, **options)
            .set_success(success)
            .set_failure(failure)
            .send_json(parameters)
            .run()
        )

    @classmethod
    def put(
        cls,
        url: str,
        headers: Mapping[str, str] | None = None,
        success: SuccessCallback | None = None,
        failure: FailureCallback | None = None,
        **options: Any,
    ) -> RequestBuilder:
        return cls.create("PUT", url, headers, **options).set_success(success).set_failure(failure).run()

    @classmethod
    def delete(
        cls,
        url: str,
        headers: Mapping[str, str] | None = None,
        success: SuccessCallback | None = None,
        failure: FailureCallback | None = None,
        **options: Any,
    ) -> RequestBuilder:
        return cls.create("DELETE", url, headers, **options).set_success(success).set_failure(failure).run()

    # Accessors

    @property
    def method(self) -> str:
        return self.request.method

    @property
    def url(self) -> str:
        return self.request.url

    @property
    def headers(self) -> dict[str, str]:
        return dict(self.request.headers)

    @property
    def body(self) -> bytes | None:
        return self.request.body

    @property
    def on_success(self) -> SuccessCallback | None:
        return self._on_success

    @property
    def on_failure(self) -> FailureCallback | None:
        return self._on_failure

    @property
    def dispatch(self) -> PendingDispatch | None:
        """Handle for the most recent `run()`, if any."""
        return self._dispatch

    @property
    def done(self) -> bool:
        return self._dispatch is not None and self._dispatch.done

    def header(self, name: str, default: str = "") -> str:
        return header_value(self.request.headers, name, default)

    # Body

    def send_json(self, parameters: Any = None) -> RequestBuilder:
        """
        Encode `parameters` as the JSON request body.

        The Content-Type header is set even when `parameters` is None.
        Raises SerializationError when the value cannot be encoded.
        """
        codec = self._resolve_codec()
        data = codec.encode(parameters) if parameters is not None else None
        return self.send(data, codec.content_type)

    def send(self, data: bytes | str | None, content_type: str | None = None) -> RequestBuilder:
        """Set the Content-Type header to `content_type` and `data` as the request body."""
        if content_type:
            self.set_header("Content-Type", content_type)
        if data is not None:
            self.request.body = data.encode("utf-8") if isinstance(data, str) else bytes(data)
        return self

    # Headers, method, URL

    def set_headers(self, headers: Mapping[str, str] | None) -> RequestBuilder:
        """Replace every header with `headers`; None or empty leaves them untouched."""
        if headers:
            self.request.headers = copy_headers(headers)
        return self

    def set_header(self, name: str, value: str) -> RequestBuilder:
        set_header_value(self.request.headers, name, value)
        return self

    def set_http_method(self, method: str) -> RequestBuilder:
        self.request.method = method
        return self

    def set_url(self, url: str) -> RequestBuilder:
        self.request.url = url
        return self

    # Callbacks

    def set_success(self, success: SuccessCallback | None) -> RequestBuilder:
        if success is not None:
            self._on_success = success
        return self

    def set_failure(self, failure: FailureCallback | None) -> RequestBuilder:
        if failure is not None:
            self._on_failure = failure
        return self

    # Dispatch

    def run(self) -> RequestBuilder:
        """Dispatch a snapshot of the request and return without waiting."""
        client = self._client or get_http_client()
        settings = self._settings or get_http_settings()
        codec = self._resolve_codec()
        snapshot = replace(
            self.request,
            headers=dict(self.request.headers),
            allow_redirects=settings.allow_redirects,
        )
        on_complete = partial(self._complete, codec, self._on_success, self._on_failure)

        queue = self._queue
        if queue is not None:
            self._dispatch = send_async(client, snapshot, queue=queue, on_complete=on_complete)
            return self

        queue = ThreadPoolExecutor(max_workers=1, thread_name_prefix="httpagent")
        try:
            self._dispatch = send_async(client, snapshot, queue=queue, on_complete=on_complete)
        finally:
            # Already-submitted work still runs; the worker exits afterwards.
            queue.shutdown(wait=False)
        return self

    def cancel(self) -> RequestBuilder:
        """
        Cancel the in-flight dispatch.

        The failure callback receives a RequestCancelledError unless the
        request already completed. No-op before `run()`.
        """
        if self._dispatch is not None and self._dispatch.cancel():
            logger.debug("Cancelled %s %s", self._dispatch.request.method, self._dispatch.request.url)
        return self

    def wait(self, timeout: float | None = None) -> bool:
        """Block until the latest dispatch and its callback finish."""
        if self._dispatch is None:
            return True
        return self._dispatch.wait(timeout)

    def _resolve_codec(self) -> Codec:
        if self._codec is None:
            self._codec = get_codec()
        return self._codec

    @staticmethod
    def _complete(
        codec: Codec,
        on_success: SuccessCallback | None,
        on_failure: FailureCallback | None,
        response: HttpResponse,
    ) -> None:
        if not response.ok:
            error = TransportError.from_response(response)
            logger.debug("Transport failure for %s: %s (%s)", response.url, error, error.category.value)
            if on_failure is not None:
                on_failure(
                    response if response.status_code is not None else None,
                    response.content or None,
                    error,
                )
            return

        parsed: Any = None
        if response.content:
            try:
                parsed = codec.decode(response.content)
            except DecodeError as exc:
                logger.warning("Response body from %s is not valid JSON: %s", response.url, exc)
                response.meta["decode_error"] = str(exc)

        if on_success is not None:
            on_success(response, parsed, None)


__all__ = ["FailureCallback", "RequestBuilder", "SuccessCallback"]
