# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Error taxonomy and exception helpers."""

from __future__ import annotations

import socket
import ssl as ssl_module
from enum import Enum
from typing import TYPE_CHECKING

import httpx

if TYPE_CHECKING:
    from .http.models import HttpResponse


class ErrorCategory(str, Enum):
    TIMEOUT = "TIMEOUT"
    SSL_ERROR = "SSL_ERROR"
    CONNECTION_ERROR = "CONNECTION_ERROR"
    DNS_ERROR = "DNS_ERROR"
    CANCELLED = "CANCELLED"
    UNKNOWN_ERROR = "UNKNOWN_ERROR"
    NONE = "NONE"


class HttpAgentError(Exception):
    """Base class for httpagent errors."""


class SerializationError(HttpAgentError, ValueError):
    """A request body could not be encoded."""


class DecodeError(HttpAgentError, ValueError):
    """A response body could not be decoded."""


class TransportError(HttpAgentError):
    """
    The request could not be completed at the transport level.

    Delivered to failure callbacks; never raised across the dispatch boundary.
    """

    def __init__(
        self,
        message: str,
        *,
        category: ErrorCategory = ErrorCategory.UNKNOWN_ERROR,
        error_type: str | None = None,
    ):
        super().__init__(message)
        self.category = category
        self.error_type = error_type

    @property
    def reason(self) -> str:
        return error_category_to_reason(self.category)

    @classmethod
    def from_response(cls, response: HttpResponse) -> TransportError:
        """Build the error matching a failed transport response."""
        category = response.error_category or ErrorCategory.UNKNOWN_ERROR
        message = response.error_message or error_category_to_reason(category)
        error_cls = RequestCancelledError if category == ErrorCategory.CANCELLED else cls
        return error_cls(message, category=category, error_type=response.error_type)


class RequestCancelledError(TransportError):
    def __init__(self, message: str = "Request cancelled", **kwargs):
        kwargs.setdefault("category", ErrorCategory.CANCELLED)
        kwargs.setdefault("error_type", type(self).__name__)
        super().__init__(message, **kwargs)


def _exception_chain(exc: BaseException) -> list[BaseException]:
    chain: list[BaseException] = []
    current: BaseException | None = exc
    while current is not None and current not in chain:
        chain.append(current)
        current = current.__cause__ or current.__context__
    return chain


def categorize_exception(exc: BaseException) -> ErrorCategory:
    """
    Map Python/httpx exceptions to ErrorCategory.

    httpx wraps the underlying socket/ssl failure, so the cause chain is
    inspected before falling back to the httpx exception hierarchy.
    """
    chain = _exception_chain(exc)

    if any(isinstance(item, RequestCancelledError) for item in chain):
        return ErrorCategory.CANCELLED

    if any(isinstance(item, (httpx.TimeoutException, TimeoutError, socket.timeout)) for item in chain):
        return ErrorCategory.TIMEOUT

    if any(isinstance(item, (socket.gaierror, socket.herror)) for item in chain):
        return ErrorCategory.DNS_ERROR

    if any(isinstance(item, (ssl_module.SSLError, ssl_module.CertificateError)) for item in chain):
        return ErrorCategory.SSL_ERROR

    if isinstance(exc, (httpx.ConnectError, httpx.RemoteProtocolError, httpx.NetworkError, httpx.ProxyError)):
        return ErrorCategory.CONNECTION_ERROR

    if isinstance(exc, (ConnectionError, ConnectionRefusedError, ConnectionResetError)):
        return ErrorCategory.CONNECTION_ERROR

    return ErrorCategory.UNKNOWN_ERROR


def error_category_to_reason(category: ErrorCategory | None) -> str:
    """User-facing reason string."""
    mapping = {
        ErrorCategory.TIMEOUT: "Network timeout",
        ErrorCategory.SSL_ERROR: "TLS/certificate issue",
        ErrorCategory.CONNECTION_ERROR: "Network connectivity issue",
        ErrorCategory.DNS_ERROR: "DNS resolution failure",
        ErrorCategory.CANCELLED: "Request cancelled",
        ErrorCategory.UNKNOWN_ERROR: "Network error",
        ErrorCategory.NONE: "",
        None: "",
    }
    return mapping.get(category, "Request failed due to network error")


__all__ = [
    "DecodeError",
    "ErrorCategory",
    "HttpAgentError",
    "RequestCancelledError",
    "SerializationError",
    "TransportError",
    "categorize_exception",
    "error_category_to_reason",
]
