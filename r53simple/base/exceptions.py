"""
r53simple exception hierarchy.

Every failure surfaces as a subclass of :class:`R53SimpleError`.
Local problems (bad config, bad parameters) are raised before any
network traffic; remote and transport failures are raised as soon as
the response (or the lack of one) is seen.  Nothing is retried.
"""

from __future__ import annotations


# ── Base ──────────────────────────────────────────────────────────────
class R53SimpleError(Exception):
    """Root exception for all r53simple errors."""


# ── Local validation ─────────────────────────────────────────────────
class ValidationError(R53SimpleError):
    """Unknown action, missing required parameter or malformed input."""


class ConfigurationError(ValidationError):
    """Missing credentials or an unusable client configuration."""


# ── Remote (provider) errors ─────────────────────────────────────────
class RemoteError(R53SimpleError):
    """The API answered with a non-success status.

    Attributes:
        status_code: HTTP status of the response, if known.
        code: Provider error code from the error envelope, if any.
    """

    def __init__(
        self,
        message: str,
        *,
        status_code: int | None = None,
        code: str | None = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.status_code = status_code
        self.code = code


class NotFoundError(RemoteError):
    """The referenced resource does not exist."""


class HostedZoneNotFoundError(NotFoundError):
    """Hosted zone not found."""


class ChangeNotFoundError(NotFoundError):
    """Change batch not found."""


class HealthCheckNotFoundError(NotFoundError):
    """Health check not found."""


class HostedZoneAlreadyExistsError(RemoteError):
    """Hosted zone already exists."""


class ThrottlingError(RemoteError):
    """Request rate exceeded."""


# ── Transport ─────────────────────────────────────────────────────────
class TransportError(R53SimpleError):
    """Network-level failure (HTTP transport, NTP, public IP lookup)."""


# ── Lookups ───────────────────────────────────────────────────────────
class ZoneNotFoundError(R53SimpleError):
    """No hosted zone matches the requested name."""
