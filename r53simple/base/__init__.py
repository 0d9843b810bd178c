"""Shared building blocks: action table, configuration, errors and logging."""

from .actions import ACTIONS, Action, ActionDescriptor
from .config import ClientConfig, ResponseFormat
from .exceptions import (
    R53SimpleError,
    ValidationError,
    ConfigurationError,
    RemoteError,
    NotFoundError,
    HostedZoneNotFoundError,
    ChangeNotFoundError,
    HealthCheckNotFoundError,
    HostedZoneAlreadyExistsError,
    ThrottlingError,
    TransportError,
    ZoneNotFoundError,
)


__all__ = [
    "ACTIONS",
    "Action",
    "ActionDescriptor",
    "ClientConfig",
    "ResponseFormat",
    "R53SimpleError",
    "ValidationError",
    "ConfigurationError",
    "RemoteError",
    "NotFoundError",
    "HostedZoneNotFoundError",
    "ChangeNotFoundError",
    "HealthCheckNotFoundError",
    "HostedZoneAlreadyExistsError",
    "ThrottlingError",
    "TransportError",
    "ZoneNotFoundError",
]
