# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Utility exports."""

from .context import (
    AgentContext,
    agent_context,
    get_agent_context,
    get_codec,
    get_http_client,
    get_http_settings,
)

__all__ = [
    "AgentContext",
    "agent_context",
    "get_agent_context",
    "get_codec",
    "get_http_client",
    "get_http_settings",
]
