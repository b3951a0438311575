# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

import pytest

from httpagent.codec import JsonCodec
from httpagent.errors import DecodeError, HttpAgentError, SerializationError


def test_encode_is_compact_utf8():
    assert JsonCodec().encode({"name": "café", "n": [1, 2]}) == '{"name":"café","n":[1,2]}'.encode("utf-8")


def test_encode_rejects_unserializable_values():
    codec = JsonCodec()
    with pytest.raises(SerializationError) as excinfo:
        codec.encode({"when": object()})
    assert isinstance(excinfo.value.__cause__, TypeError)

    with pytest.raises(SerializationError):
        codec.encode({"nan": float("nan")})


def test_decode_bytes_and_text():
    codec = JsonCodec()
    assert codec.decode(b'{"items":[]}') == {"items": []}
    assert codec.decode("[1, 2]") == [1, 2]


def test_decode_failures_raise_decode_error():
    codec = JsonCodec()
    with pytest.raises(DecodeError):
        codec.decode(b"not-json")
    with pytest.raises(DecodeError):
        codec.decode(b"\xff\xfe\x00garbage")


def test_codec_errors_share_base_class():
    assert issubclass(SerializationError, HttpAgentError)
    assert issubclass(DecodeError, HttpAgentError)
    assert issubclass(DecodeError, ValueError)
