"""r53simple: minimal Route 53 REST API client and dynamic DNS tool.

Build a client and call any action::

    from r53simple import ClientConfig, Route53Client

    client = Route53Client(ClientConfig(response_format="object"))
    zones = client.send("ListHostedZones")
"""

__version__ = "0.1.0"

from .base import (
    ACTIONS,
    Action,
    ActionDescriptor,
    ClientConfig,
    ResponseFormat,
    R53SimpleError,
    ValidationError,
    ConfigurationError,
    RemoteError,
    TransportError,
    ZoneNotFoundError,
)
from .changes import ResourceRecordChange, render_changes
from .request import build_request
from .response import decode_response, xml_to_tree
from .client import Route53Client

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
    "TransportError",
    "ZoneNotFoundError",
    "ResourceRecordChange",
    "render_changes",
    "build_request",
    "decode_response",
    "xml_to_tree",
    "Route53Client",
]
