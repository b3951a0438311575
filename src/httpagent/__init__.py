# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""
httpagent package entrypoint.

A fluent builder for ad-hoc HTTP calls with JSON payloads. Requests are
configured through chainable mutators, dispatched on a background work queue,
and completed through success/failure callbacks. The transport is abstracted
behind an injectable client interface backed by httpx by default.
"""

from .builder import FailureCallback, RequestBuilder, SuccessCallback
from .codec import Codec, JsonCodec
from .config import HttpSettings, load_http_settings
from .errors import (
    DecodeError,
    ErrorCategory,
    HttpAgentError,
    RequestCancelledError,
    SerializationError,
    TransportError,
)
from .http import (
    HttpClient,
    HttpRequest,
    HttpResponse,
    HttpxClient,
    StubHttpClient,
    create_default_http_client,
)
from .log import setup_logging
from .runtime import AgentSession
from .utils.context import agent_context
from .version import __version__

__all__ = [
    "AgentSession",
    "Codec",
    "DecodeError",
    "ErrorCategory",
    "FailureCallback",
    "HttpAgentError",
    "HttpClient",
    "HttpRequest",
    "HttpResponse",
    "HttpSettings",
    "HttpxClient",
    "JsonCodec",
    "RequestBuilder",
    "RequestCancelledError",
    "SerializationError",
    "StubHttpClient",
    "SuccessCallback",
    "TransportError",
    "agent_context",
    "create_default_http_client",
    "load_http_settings",
    "setup_logging",
    "__version__",
]
