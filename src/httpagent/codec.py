# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""JSON codec used for request bodies and response payloads."""

from __future__ import annotations

import json
from typing import Any, Protocol

from .errors import DecodeError, SerializationError


class Codec(Protocol):
    """Minimal protocol for body encoders/decoders."""

    content_type: str

    def encode(self, value: Any) -> bytes: ...

    def decode(self, data: bytes | str) -> Any: ...


class JsonCodec(Codec):
    """Standard-library JSON codec with distinct encode/decode failures."""

    content_type = "application/json"

    def __init__(self, *, sort_keys: bool = False, ensure_ascii: bool = False):
        self.sort_keys = sort_keys
        self.ensure_ascii = ensure_ascii

    def encode(self, value: Any) -> bytes:
        try:
            text = json.dumps(
                value,
                separators=(",", ":"),
                sort_keys=self.sort_keys,
                ensure_ascii=self.ensure_ascii,
                allow_nan=False,
            )
        except (TypeError, ValueError) as exc:
            raise SerializationError(f"Cannot encode {type(value).__name__} as JSON: {exc}") from exc
        return text.encode("utf-8")

    def decode(self, data: bytes | str) -> Any:
        try:
            return json.loads(data)
        except ValueError as exc:
            # JSONDecodeError and UnicodeDecodeError are both ValueErrors
            raise DecodeError(f"Invalid JSON payload: {exc}") from exc


__all__ = ["Codec", "JsonCodec"]
