# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""HTTP request/response data models used across httpagent."""

from __future__ import annotations

import threading
from dataclasses import dataclass, field
from typing import Any

from ..errors import ErrorCategory, categorize_exception

Headers = dict[str, str]


@dataclass
class HttpRequest:
    """Pending request state; the builder dispatches a snapshot of it."""

    url: str
    method: str = "GET"
    headers: Headers = field(default_factory=dict)
    body: bytes | None = None
    timeout: float | None = None
    allow_redirects: bool = True
    cancel_event: threading.Event | None = field(default=None, repr=False, compare=False)

    @property
    def cancelled(self) -> bool:
        return self.cancel_event is not None and self.cancel_event.is_set()


@dataclass
class HttpResponse:
    """
    Normalized HTTP response.

    `ok` reports transport-level success only; a 404 or 500 is still `ok=True`.
    """

    ok: bool
    status_code: int | None = None
    headers: Headers = field(default_factory=dict)
    text: str = ""
    content: bytes = b""
    url: str | None = None
    error_message: str | None = None
    error_type: str | None = None
    error_category: ErrorCategory | None = None
    meta: dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_exception(cls, exc: BaseException, *, url: str | None = None) -> HttpResponse:
        """Wrap a transport exception into a failed response."""
        return cls(
            ok=False,
            url=url,
            error_message=str(exc),
            error_type=type(exc).__name__,
            error_category=categorize_exception(exc),
        )


__all__ = ["Headers", "HttpRequest", "HttpResponse"]
