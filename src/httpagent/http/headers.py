# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Header normalization utilities.

HTTP header field names are case-insensitive (RFC 9110). Requests keep headers as plain
dicts with the caller's casing, so lookups and upserts go through these helpers.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any


def _coerce_headers_mapping(headers: Any) -> Mapping[object, object] | None:
    """
    Best-effort coercion of "dict-like" header containers into a Mapping.

    Accepts plain dicts, httpx.Headers, and iterables of pairs.
    """
    if not headers:
        return None
    if isinstance(headers, Mapping):
        return headers

    items = getattr(headers, "items", None)
    if callable(items):
        try:
            return dict(items())
        except (TypeError, ValueError):
            pass

    try:
        return dict(headers)
    except (TypeError, ValueError):
        return None


def normalize_headers(headers: Mapping[object, object] | None) -> dict[str, str]:
    """Return a lowercase-keyed copy of a header mapping."""
    coerced = _coerce_headers_mapping(headers)
    if not coerced:
        return {}
    out: dict[str, str] = {}
    for key, value in coerced.items():
        if key is None:
            continue
        name = str(key).strip().lower()
        if not name:
            continue
        out[name] = "" if value is None else str(value)
    return out


def copy_headers(headers: Mapping[object, object] | None) -> dict[str, str]:
    """
    Return a str-keyed copy preserving caller casing.

    Keys that collide case-insensitively collapse to the last one seen.
    """
    out: dict[str, str] = {}
    coerced = _coerce_headers_mapping(headers)
    if not coerced:
        return out
    for key, value in coerced.items():
        if key is None:
            continue
        set_header_value(out, str(key), "" if value is None else str(value))
    return out


def set_header_value(headers: dict[str, str], name: str, value: str) -> dict[str, str]:
    """Upsert a header in place, replacing any key that differs only in case."""
    lower = name.lower()
    for key in [k for k in headers if k.lower() == lower]:
        del headers[key]
    headers[name] = value
    return headers


def header_value(headers: Mapping[object, object] | None, name: str, default: str = "") -> str:
    """
    Return a header value using case-insensitive key matching.

    Fast-paths common key casings before falling back to a full scan.
    """
    if not headers or not name:
        return default

    coerced = _coerce_headers_mapping(headers)
    if not coerced:
        return default

    lower = str(name).lower()
    for key in (name, lower, lower.title()):
        if key in coerced:
            value = coerced.get(key)
            return default if value is None else str(value).strip()

    for key, value in coerced.items():
        if key is None:
            continue
        if str(key).lower() == lower:
            return default if value is None else str(value).strip()

    return default


def has_header(headers: Mapping[object, object] | None, name: str) -> bool:
    coerced = _coerce_headers_mapping(headers)
    if not coerced:
        return False
    lower = name.lower()
    return any(key is not None and str(key).lower() == lower for key in coerced)


__all__ = ["copy_headers", "has_header", "header_value", "normalize_headers", "set_header_value"]
