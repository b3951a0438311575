# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Session facade sharing one transport across builders."""

from __future__ import annotations

from collections.abc import Mapping
from contextlib import suppress
from typing import Any

from .builder import FailureCallback, RequestBuilder, SuccessCallback
from .codec import Codec, JsonCodec
from .config import HttpSettings, load_http_settings
from .http.client import HttpClient, create_default_http_client


class AgentSession:
    """
    Convenience wrapper that wires a shared HTTP client, settings and codec into builders.

    Every builder produced by the session dispatches through the same transport,
    which the session closes on exit.
    """

    def __init__(
        self,
        http_client: HttpClient | None = None,
        *,
        settings: HttpSettings | None = None,
        codec: Codec | None = None,
    ):
        self.http_settings = settings or load_http_settings()
        self.http_client = http_client or create_default_http_client(self.http_settings)
        self.codec = codec or JsonCodec()

    def _options(self) -> dict[str, Any]:
        return {"client": self.http_client, "settings": self.http_settings, "codec": self.codec}

    def create(self, method: str, url: str, headers: Mapping[str, str] | None = None) -> RequestBuilder:
        return RequestBuilder.create(method, url, headers, **self._options())

    def get(
        self,
        url: str,
        headers: Mapping[str, str] | None = None,
        parameters: Mapping[str, Any] | None = None,
        success: SuccessCallback | None = None,
        failure: FailureCallback | None = None,
    ) -> RequestBuilder:
        return RequestBuilder.get(url, headers, parameters, success, failure, **self._options())

    def post(
        self,
        url: str,
        headers: Mapping[str, str] | None = None,
        parameters: Any = None,
        success: SuccessCallback | None = None,
        failure: FailureCallback | None = None,
    ) -> RequestBuilder:
        return RequestBuilder.post(url, headers, parameters, success, failure, **self._options())

    def put(
        self,
        url: str,
        headers: Mapping[str, str] | None = None,
        success: SuccessCallback | None = None,
        failure: FailureCallback | None = None,
    ) -> RequestBuilder:
        return RequestBuilder.put(url, headers, success, failure, **self._options())

    def delete(
        self,
        url: str,
        headers: Mapping[str, str] | None = None,
        success: SuccessCallback | None = None,
        failure: FailureCallback | None = None,
    ) -> RequestBuilder:
        return RequestBuilder.delete(url, headers, success, failure, **self._options())

    def close(self) -> None:
        with suppress(Exception):
            if hasattr(self.http_client, "close"):
                self.http_client.close()

    def __enter__(self) -> AgentSession:
        return self

    def __exit__(self, _exc_type, _exc, _tb) -> None:  # noqa: ANN001
        self.close()
