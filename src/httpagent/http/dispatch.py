# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Asynchronous dispatch of requests onto a work queue."""

from __future__ import annotations

import logging
import threading
from collections.abc import Callable
from concurrent.futures import Executor, Future
from concurrent.futures import TimeoutError as FutureTimeoutError
from dataclasses import replace

from ..errors import RequestCancelledError
from .client import HttpClient
from .models import HttpRequest, HttpResponse

logger = logging.getLogger(__name__)

CompletionHandler = Callable[[HttpResponse], None]


class PendingDispatch:
    """Handle for one submitted request."""

    def __init__(self, request: HttpRequest, future: Future, cancel_event: threading.Event):
        self.request = request
        self._future = future
        self._cancel_event = cancel_event

    @property
    def done(self) -> bool:
        return self._future.done()

    @property
    def cancelled(self) -> bool:
        return self._cancel_event.is_set()

    def cancel(self) -> bool:
        """
        Request cancellation.

        The completion handler still runs exactly once, with a cancelled
        response. Returns False when the dispatch had already completed.
        """
        if self._future.done():
            return False
        self._cancel_event.set()
        return True

    def wait(self, timeout: float | None = None) -> bool:
        """Block until the completion handler has returned."""
        try:
            self._future.result(timeout=timeout)
        except FutureTimeoutError:
            return False
        return True


def _cancelled_response(request: HttpRequest) -> HttpResponse:
    return HttpResponse.from_exception(RequestCancelledError(), url=request.url)


def _execute(client: HttpClient, request: HttpRequest, on_complete: CompletionHandler) -> None:
    if request.cancelled:
        response = _cancelled_response(request)
    else:
        try:
            response = client.request(request)
        except Exception as exc:  # noqa: BLE001
            response = HttpResponse.from_exception(exc, url=request.url)
        if request.cancelled and response.ok:
            response = _cancelled_response(request)

    logger.debug(
        "%s %s completed: ok=%s status=%s",
        request.method,
        request.url,
        response.ok,
        response.status_code,
    )
    try:
        on_complete(response)
    except Exception:  # noqa: BLE001
        logger.exception("Completion handler for %s %s raised", request.method, request.url)


def send_async(
    client: HttpClient,
    request: HttpRequest,
    *,
    queue: Executor,
    on_complete: CompletionHandler,
) -> PendingDispatch:
    """
    Submit `request` to `client` on `queue` and return immediately.

    `on_complete` is invoked exactly once on the queue's worker. Exceptions
    raised by the client become `ok=False` responses; exceptions raised by
    `on_complete` are logged and never reach the caller.
    """
    cancel_event = threading.Event()
    submitted = replace(request, headers=dict(request.headers), cancel_event=cancel_event)
    future = queue.submit(_execute, client, submitted, on_complete)
    logger.debug("Dispatched %s %s", submitted.method, submitted.url)
    return PendingDispatch(submitted, future, cancel_event)


__all__ = ["CompletionHandler", "PendingDispatch", "send_async"]
