# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Query-string helpers for request URLs."""

from __future__ import annotations

import json
from collections.abc import Mapping
from typing import Any
from urllib.parse import quote, urlsplit


def stringify_query_value(value: Any) -> str:
    """
    Render a parameter value as text.

    Strings pass through, booleans become `true`/`false`, None is empty and
    containers are rendered as compact JSON.
    """
    if isinstance(value, str):
        return value
    if isinstance(value, bool):
        return "true" if value else "false"
    if value is None:
        return ""
    if isinstance(value, (list, tuple, dict)):
        return json.dumps(value, separators=(",", ":"), default=str)
    return str(value)


def build_query_string(parameters: Mapping[str, Any] | None, *, encode: bool = True) -> str:
    """
    Build a `?key=value&...` suffix from a parameter mapping.

    Pairs follow the mapping's iteration order. Returns an empty string when
    there is nothing to render. With `encode=False` keys and values are
    emitted without percent-encoding.

    Example:
      {"q": "a b", "page": 2} -> ?q=a%20b&page=2
    """
    if not parameters:
        return ""

    pairs: list[str] = []
    for key, value in parameters.items():
        name = str(key)
        text = stringify_query_value(value)
        if encode:
            name = quote(name, safe="")
            text = quote(text, safe="")
        pairs.append(f"{name}={text}")
    return "?" + "&".join(pairs)


def append_query_string(url: str, parameters: Mapping[str, Any] | None, *, encode: bool = True) -> str:
    """Append rendered parameters to a URL, extending any query it already has."""
    query = build_query_string(parameters, encode=encode)
    if not query:
        return url

    base, hash_sep, fragment = url.partition("#")
    existing = urlsplit(base).query
    if existing or base.endswith("?"):
        separator = "" if base.endswith(("?", "&")) else "&"
        base = base + separator + query[1:]
    else:
        base = base + query
    return base + hash_sep + fragment


__all__ = ["append_query_string", "build_query_string", "stringify_query_value"]
