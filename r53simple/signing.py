"""Request timestamps and the AWS3-HTTPS signature.

The signature covers the ``Date`` header value only; method, path and
body are not signed.  This is the provider's legacy scheme and is kept
exactly as is for wire compatibility.  A captured request can be
replayed while its date is within the provider's clock-skew window.
"""

from __future__ import annotations

import base64
import hashlib
import hmac
import logging
import time
from email.utils import formatdate

import ntplib

from r53simple.base.config import ClientConfig
from r53simple.base.exceptions import ConfigurationError, TransportError

logger = logging.getLogger("r53simple")

_DIGESTS = {
    "HmacSHA256": hashlib.sha256,
    "HmacSHA1": hashlib.sha1,
}


def ntp_time(server: str, timeout: float = 5.0) -> float:
    """Return the transmit timestamp reported by *server* (epoch seconds).

    Raises:
        TransportError: If the server cannot be reached or answers garbage.
    """
    try:
        response = ntplib.NTPClient().request(server, version=3, timeout=timeout)
    except (ntplib.NTPException, OSError) as e:
        raise TransportError(f"NTP query to {server} failed: {e}") from e
    return response.tx_time


def current_time(config: ClientConfig) -> float:
    """Wall-clock time for signing, from NTP when the config asks for it."""
    if config.use_ntp:
        now = ntp_time(config.ntp_server)
        logger.debug("using NTP time %.3f from %s", now, config.ntp_server)
        return now
    return time.time()


def format_timestamp(epoch: float) -> str:
    """Render *epoch* as ``Thu, 01 Jan 2015 00:00:00 GMT``."""
    return formatdate(epoch, usegmt=True)


def sign(timestamp: str, secret_key: str, method: str = "HmacSHA256") -> str:
    """Base64 HMAC of *timestamp* keyed with *secret_key*.

    Raises:
        ConfigurationError: If *method* is neither HmacSHA256 nor HmacSHA1.
    """
    digest = _DIGESTS.get(method)
    if digest is None:
        raise ConfigurationError(f"unknown signature method: {method}")
    mac = hmac.new(secret_key.encode("utf-8"), timestamp.encode("utf-8"), digest)
    return base64.b64encode(mac.digest()).decode("ascii")


def authorization_header(access_key: str, method: str, signature: str) -> str:
    """Value of the ``X-Amzn-Authorization`` header."""
    return "AWS3-HTTPS " + ",".join(
        (
            f"AWSAccessKeyId={access_key}",
            f"Algorithm={method}",
            f"Signature={signature}",
        )
    )
