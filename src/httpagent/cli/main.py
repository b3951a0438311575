# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""httpagent CLI."""

from __future__ import annotations

import argparse
import json
import sys
from typing import Any

from ..config import HttpSettings, load_http_settings
from ..errors import TransportError
from ..http import HttpResponse, append_query_string, create_default_http_client
from ..log import setup_logging
from ..runtime import AgentSession

CLI_TEXT_TRUNCATION_BYTES = 4096


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Send an HTTP request and print the decoded JSON response")
    parser.add_argument("url", help="Target URL")
    parser.add_argument(
        "-X",
        "--method",
        help="HTTP method (default: GET, or POST when --data is given)",
    )
    parser.add_argument(
        "-H",
        "--header",
        action="append",
        default=[],
        metavar="NAME: VALUE",
        help="Request header, may be repeated",
    )
    parser.add_argument(
        "-p",
        "--param",
        action="append",
        default=[],
        metavar="KEY=VALUE",
        help="Query parameter, may be repeated",
    )
    parser.add_argument("-d", "--data", help="JSON request body")
    parser.add_argument("--timeout", type=float, help="Transport timeout in seconds")
    parser.add_argument(
        "--json",
        action="store_true",
        help="Output a JSON summary instead of human-friendly text",
    )
    parser.add_argument(
        "--ignore-ssl-errors",
        action="store_true",
        help="Skip TLS verification (useful for lab/self-signed targets)",
    )
    return parser


def _parse_headers(parser: argparse.ArgumentParser, raw_headers: list[str]) -> dict[str, str]:
    headers: dict[str, str] = {}
    for raw in raw_headers:
        name, sep, value = raw.partition(":")
        if not sep or not name.strip():
            parser.error(f"invalid header {raw!r}, expected 'Name: value'")
        headers[name.strip()] = value.strip()
    return headers


def _parse_params(parser: argparse.ArgumentParser, raw_params: list[str]) -> dict[str, str]:
    params: dict[str, str] = {}
    for raw in raw_params:
        key, sep, value = raw.partition("=")
        if not sep or not key:
            parser.error(f"invalid parameter {raw!r}, expected 'key=value'")
        params[key] = value
    return params


def _parse_data(parser: argparse.ArgumentParser, raw_data: str | None) -> Any:
    if raw_data is None:
        return None
    try:
        return json.loads(raw_data)
    except ValueError as exc:
        parser.error(f"--data is not valid JSON: {exc}")


def _truncate_text_bytes(text: str, max_bytes: int) -> str:
    raw = text.encode("utf-8")
    if len(raw) <= max_bytes:
        return text
    suffix = "...[truncated]"
    suffix_bytes = suffix.encode("utf-8")
    keep = max_bytes - len(suffix_bytes)
    if keep <= 0:
        return suffix_bytes[:max_bytes].decode("utf-8", errors="ignore")
    prefix = raw[:keep].decode("utf-8", errors="ignore")
    return prefix + suffix


def _print_json(data: dict[str, Any]) -> None:
    json.dump(data, sys.stdout, indent=2, sort_keys=True, default=str)
    sys.stdout.write("\n")


def _summary(method: str, url: str, outcome: dict[str, Any]) -> dict[str, Any]:
    error: TransportError | None = outcome.get("error")
    if error is not None:
        return {
            "ok": False,
            "method": method,
            "url": url,
            "error": str(error),
            "error_category": error.category.value,
            "reason": error.reason,
        }
    response: HttpResponse = outcome["response"]
    return {
        "ok": True,
        "method": method,
        "url": response.url or url,
        "status_code": response.status_code,
        "headers": response.headers,
        "body": outcome.get("body"),
        "decode_error": response.meta.get("decode_error"),
    }


def _pretty_print(summary: dict[str, Any]) -> None:
    if not summary["ok"]:
        print(
            f"[httpagent] {summary['method']} {summary['url']} failed: {summary['reason']} ({summary['error']})",
            file=sys.stderr,
        )
        return

    print(f"[httpagent] {summary['method']} {summary['url']} -> {summary['status_code']}")
    body = summary.get("body")
    if body is not None:
        print(_truncate_text_bytes(json.dumps(body, indent=2, sort_keys=True), CLI_TEXT_TRUNCATION_BYTES))
    elif summary.get("decode_error"):
        print(f"Body is not JSON: {summary['decode_error']}")


def main(argv: list[str] | None = None) -> int:
    setup_logging()
    parser = build_parser()
    args = parser.parse_args(argv)

    headers = _parse_headers(parser, args.header)
    params = _parse_params(parser, args.param)
    payload = _parse_data(parser, args.data)
    method = (args.method or ("POST" if payload is not None else "GET")).upper()

    settings: HttpSettings = load_http_settings()
    if args.ignore_ssl_errors:
        settings.verify_ssl = False
    if args.timeout is not None:
        settings.timeout = args.timeout

    outcome: dict[str, Any] = {}

    def on_success(response: HttpResponse, body: Any, _error: None) -> None:
        outcome["response"] = response
        outcome["body"] = body

    def on_failure(response: HttpResponse | None, _raw: bytes | None, error: TransportError) -> None:
        outcome["response"] = response
        outcome["error"] = error

    url = append_query_string(args.url, params, encode=settings.encode_query)
    http_client = create_default_http_client(settings)

    with AgentSession(http_client=http_client, settings=settings) as session:
        builder = session.create(method, url, headers).set_success(on_success).set_failure(on_failure)
        if payload is not None:
            builder.send_json(payload)
        builder.run().wait()

    summary = _summary(method, url, outcome)
    if args.json:
        _print_json(summary)
    else:
        _pretty_print(summary)

    return 0 if summary["ok"] else 1


if __name__ == "__main__":
    raise SystemExit(main())
