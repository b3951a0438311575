# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""HTTP transport exports."""

from .adapters import StubHttpClient
from .client import HttpClient, create_default_http_client
from .dispatch import PendingDispatch, send_async
from .headers import copy_headers, has_header, header_value, normalize_headers, set_header_value
from .httpx_client import HttpxClient
from .models import Headers, HttpRequest, HttpResponse
from .url import append_query_string, build_query_string, stringify_query_value

__all__ = [
    "Headers",
    "HttpClient",
    "HttpxClient",
    "HttpRequest",
    "HttpResponse",
    "PendingDispatch",
    "StubHttpClient",
    "append_query_string",
    "build_query_string",
    "copy_headers",
    "create_default_http_client",
    "has_header",
    "header_value",
    "normalize_headers",
    "send_async",
    "set_header_value",
    "stringify_query_value",
]
