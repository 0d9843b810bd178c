"""Dynamic DNS: point A records at this machine's public IPv4 address.

Usage examples::

    r53ddns --zone example.com --host home --host vpn
    AWS_ACCESS_KEY=... AWS_SECRET_KEY=... r53ddns -z example.com -H www.example.com
"""

from __future__ import annotations

import argparse
import ipaddress
import logging
import sys
from typing import Any, Sequence

import requests
from pydantic import ValidationError as PydanticValidationError

from r53simple.base.config import ClientConfig
from r53simple.base.exceptions import R53SimpleError, TransportError, ValidationError
from r53simple.base.logger import setup_logging
from r53simple.changes import ResourceRecordChange
from r53simple.client import Route53Client, normalize_zone_name

logger = logging.getLogger("r53simple")

# EC2 instance metadata
DEFAULT_IP_URL = "http://169.254.169.254/latest/meta-data/public-ipv4"
DEFAULT_TTL = 300


def fetch_public_ip(url: str = DEFAULT_IP_URL, timeout: float = 5.0) -> str:
    """Ask *url* for the caller's public IPv4 address.

    Raises:
        TransportError: The service is unreachable or answers with an error
            or an empty body.
        ValidationError: The answer is not an IPv4 address.
    """
    try:
        response = requests.get(url, timeout=timeout)
        response.raise_for_status()
    except requests.RequestException as e:
        raise TransportError(f"connection failed: {e}") from e
    answer = response.text.strip()
    if not answer:
        raise TransportError(f"connection failed: empty answer from {url}")
    try:
        return str(ipaddress.IPv4Address(answer))
    except ipaddress.AddressValueError as e:
        raise ValidationError(f"not an IPv4 address: {answer!r}") from e


def qualify_host(host: str, zone: str) -> str:
    """Fully qualify *host* inside *zone*.

    ``www`` -> ``www.example.com.``; names already inside the zone
    (with or without the trailing dot) are only normalized.
    """
    zone = normalize_zone_name(zone)
    host = host.rstrip(".")
    if host == zone[:-1] or host.endswith("." + zone[:-1]):
        return f"{host}."
    return f"{host}.{zone}"


def build_upserts(
    hosts: Sequence[str], zone: str, ip: str, ttl: int = DEFAULT_TTL
) -> list[ResourceRecordChange]:
    """One ``UPSERT`` A change per host, in the given order.

    Raises:
        ValidationError: If *ttl* is negative or a host name is unusable.
    """
    try:
        return [
            ResourceRecordChange(
                action="UPSERT", name=qualify_host(h, zone), type="A", ttl=ttl, value=ip
            )
            for h in hosts
        ]
    except PydanticValidationError as e:
        raise ValidationError(f"invalid change: {e}") from e


def update_hosts(
    client: Route53Client,
    zone: str,
    hosts: Sequence[str],
    ip: str,
    ttl: int = DEFAULT_TTL,
) -> dict[str, Any]:
    """Upsert A records for every host in one change batch.

    Returns:
        ``ChangeInfo`` of the submitted batch.

    Raises:
        ValidationError: If *hosts* is empty.
        ZoneNotFoundError: If *zone* is not a hosted zone of the account.
    """
    if not hosts:
        raise ValidationError("at least one host is required")
    zone = normalize_zone_name(zone)
    changes = build_upserts(hosts, zone, ip, ttl)
    zone_id = client.find_zone_id(zone)
    info = client.change_record_sets(zone_id, changes, comment=f"r53ddns {ip}")
    logger.info(
        "upserted %d record(s) -> %s, change %s is %s",
        len(changes),
        ip,
        info.get("Id"),
        info.get("Status"),
        extra={"zone": zone},
    )
    return info


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="r53ddns",
        description="Point Route 53 A records at this host's public IPv4 address",
    )
    parser.add_argument(
        "--access-key", "--id", "-i",
        dest="access_key",
        help="AWS access key (default: $AWS_ACCESS_KEY)",
    )
    parser.add_argument(
        "--secret-key", "--secret", "-k",
        dest="secret_key",
        help="AWS secret key (default: $AWS_SECRET_KEY)",
    )
    parser.add_argument("--zone", "-z", required=True, help="Hosted zone name")
    parser.add_argument(
        "--host", "-H",
        dest="hosts",
        action="append",
        required=True,
        help="Host name to update (repeatable)",
    )
    parser.add_argument("--ttl", type=int, default=DEFAULT_TTL, help="Record TTL")
    parser.add_argument("--ip", help="Use this address instead of looking it up")
    parser.add_argument("--ip-url", default=DEFAULT_IP_URL, help="Public IP lookup URL")
    parser.add_argument("--use-ntp", action="store_true", help="Sign with NTP time")
    parser.add_argument("--ntp-server", help="NTP server for --use-ntp")
    parser.add_argument("--timeout", type=float, default=30.0, help="HTTP timeout")
    parser.add_argument("--debug", action="store_true", help="Log requests, raw errors")
    parser.add_argument("--verbose", "-v", action="store_true", help="Log progress")
    return parser


def main(argv: list[str] | None = None) -> None:
    """``r53ddns`` entry point.  Exits 1 with a message on any failure."""
    ns = _build_parser().parse_args(argv)
    level = logging.DEBUG if ns.debug else logging.INFO if ns.verbose else logging.WARNING
    setup_logging(level, structured=False)

    try:
        config = ClientConfig(
            access_key=ns.access_key,
            secret_key=ns.secret_key,
            response_format="object",
            debug=ns.debug,
        )
        if ns.use_ntp:
            config = config.with_ntp(server=ns.ntp_server)
        config.require_credentials()
        ip = ns.ip or fetch_public_ip(ns.ip_url)
        client = Route53Client(config, timeout=ns.timeout)
        info = update_hosts(client, ns.zone, ns.hosts, ip, ns.ttl)
    except R53SimpleError as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)

    print(f"{ip} {info.get('Id', '')} {info.get('Status', '')}".rstrip())


if __name__ == "__main__":
    main()
