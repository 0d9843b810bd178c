"""r53simple CLI: invoke any Route 53 action from the command line.

Usage examples::

    r53simple ListHostedZones --format json
    r53simple GetHostedZone --param zone_id=Z123
    r53simple ChangeResourceRecordSets -p zone_id=Z123 --content batch.xml
    r53simple --list-actions
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from typing import Any

from r53simple.base.actions import Action
from r53simple.base.config import ClientConfig, ResponseFormat
from r53simple.base.exceptions import R53SimpleError
from r53simple.base.logger import setup_logging


# keyword arguments of Route53Client.send
_RESERVED_PARAMS = frozenset({"action", "request"})


def _build_parser() -> argparse.ArgumentParser:
    """Build the argparse parser for the ``r53simple`` CLI.

    Returns:
        Configured :class:`~argparse.ArgumentParser`.
    """
    parser = argparse.ArgumentParser(
        prog="r53simple",
        description="Minimal Route 53 REST API client",
    )
    parser.add_argument(
        "action",
        nargs="?",
        help="Action to perform (e.g. ListHostedZones)",
    )
    parser.add_argument(
        "--list-actions",
        action="store_true",
        help="Print the known actions and exit",
    )
    parser.add_argument(
        "--param", "-p",
        action="append",
        default=[],
        metavar="KEY=VALUE",
        help="Request parameter, e.g. zone_id=Z123 (repeatable)",
    )
    parser.add_argument(
        "--content", "-c",
        help="File holding the XML request body ('-' for stdin)",
    )
    parser.add_argument(
        "--format", "-f",
        dest="response_format",
        default=ResponseFormat.JSON.value,
        choices=[f.value for f in ResponseFormat],
        help="Output format",
    )
    parser.add_argument(
        "--signature-method",
        default="HmacSHA256",
        choices=["HmacSHA256", "HmacSHA1"],
    )
    parser.add_argument("--api-version", help="API version (e.g. 2013-04-01)")
    parser.add_argument("--use-ntp", action="store_true", help="Sign with NTP time")
    parser.add_argument("--ntp-server", help="NTP server for --use-ntp")
    parser.add_argument("--timeout", type=float, default=30.0, help="HTTP timeout")
    parser.add_argument("--debug", action="store_true", help="Log requests, raw errors")
    return parser


def _parse_params(pairs: list[str]) -> dict[str, str]:
    params: dict[str, str] = {}
    for pair in pairs:
        key, sep, value = pair.partition("=")
        if not sep or not key:
            raise ValueError(f"expected KEY=VALUE, got {pair!r}")
        if key.strip() in _RESERVED_PARAMS:
            raise ValueError(f"{key.strip()!r} cannot be passed as a request parameter")
        params[key.strip()] = value
    return params


def _read_content(path: str | None) -> str | None:
    if path is None:
        return None
    if path == "-":
        return sys.stdin.read()
    with open(path, encoding="utf-8") as fh:
        return fh.read()


def main(argv: list[str] | None = None) -> None:
    """CLI entry point.

    Parses arguments, builds a client from flags and environment, sends
    the requested action and prints the decoded body.  Object-mode
    results are printed as indented JSON.

    Args:
        argv: Optional argument list (defaults to ``sys.argv``).
    """
    parser = _build_parser()
    ns = parser.parse_args(argv)

    if ns.list_actions:
        print("\n".join(Action.names()))
        return
    if not ns.action:
        parser.error("an action is required (see --list-actions)")

    setup_logging(logging.DEBUG if ns.debug else logging.WARNING)

    try:
        params: dict[str, Any] = _parse_params(ns.param)
        content = _read_content(ns.content)
    except (ValueError, OSError) as e:
        print(f"Invalid arguments: {e}", file=sys.stderr)
        sys.exit(1)
    if content:
        params["content"] = content

    # Lazy-import to keep --help and --list-actions free of transport setup
    from r53simple.client import Route53Client

    config = ClientConfig(
        response_format=ns.response_format,
        signature_method=ns.signature_method,
        debug=ns.debug,
    )
    if ns.api_version:
        config = config.with_version(ns.api_version)
    if ns.use_ntp:
        config = config.with_ntp(server=ns.ntp_server)

    try:
        result = Route53Client(config, timeout=ns.timeout).send(ns.action, **params)
    except R53SimpleError as e:
        print(f"Operation failed: {e}", file=sys.stderr)
        sys.exit(1)

    if result is None:
        print("OK")
    elif isinstance(result, (dict, list)):
        print(json.dumps(result, indent=2, default=str))
    else:
        print(result)


if __name__ == "__main__":
    main()
