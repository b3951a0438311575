# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""
Ambient request context.

This module provides a ContextVar-backed AgentContext that carries the
transport, settings and codec used by builders that were not given explicit
ones. Builders resolve the context when they dispatch, on the caller's side of
the queue.
"""

from __future__ import annotations

import threading
from collections.abc import Iterator
from contextlib import contextmanager
from contextvars import ContextVar
from dataclasses import dataclass, replace
from typing import Any

from ..codec import Codec, JsonCodec
from ..config import HttpSettings, load_http_settings
from ..http.client import HttpClient, create_default_http_client


@dataclass(frozen=True)
class AgentContext:
    http_client: HttpClient | None = None
    http_settings: HttpSettings | None = None
    codec: Codec | None = None


_current_agent_context: ContextVar[AgentContext | None] = ContextVar("httpagent_context", default=None)
_default_client: HttpClient | None = None
_default_client_lock = threading.Lock()


def get_agent_context() -> AgentContext:
    """Return the current ambient context."""
    return _current_agent_context.get() or AgentContext()


def get_http_settings() -> HttpSettings:
    """Return HttpSettings from context, falling back to loading defaults."""
    context = get_agent_context()
    if context.http_settings is not None:
        return context.http_settings
    return load_http_settings()


def get_codec() -> Codec:
    context = get_agent_context()
    if context.codec is not None:
        return context.codec
    return JsonCodec()


def get_default_http_client() -> HttpClient:
    """Return the process-wide httpx client, creating it on first use."""
    global _default_client
    with _default_client_lock:
        if _default_client is None:
            _default_client = create_default_http_client(load_http_settings())
        return _default_client


def close_default_http_client() -> None:
    global _default_client
    with _default_client_lock:
        client, _default_client = _default_client, None
    if client is not None:
        client.close()


def get_http_client() -> HttpClient:
    """Return the ambient HttpClient, or the shared default when none is set."""
    context = get_agent_context()
    if context.http_client is not None:
        return context.http_client
    return get_default_http_client()


@contextmanager
def agent_context(**overrides: Any) -> Iterator[AgentContext]:
    """
    Context manager that layers overrides onto the ambient AgentContext.

    None-valued overrides are ignored to preserve outer context values.
    """
    current = get_agent_context()
    filtered = {key: value for key, value in overrides.items() if value is not None}
    new_context = replace(current, **filtered) if filtered else current
    token = _current_agent_context.set(new_context)
    try:
        yield new_context
    finally:
        _current_agent_context.reset(token)


__all__ = [
    "AgentContext",
    "agent_context",
    "close_default_http_client",
    "get_agent_context",
    "get_codec",
    "get_default_http_client",
    "get_http_client",
    "get_http_settings",
]
