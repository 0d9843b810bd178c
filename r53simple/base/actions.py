"""Known Route 53 actions and their wire shape.

``ACTIONS`` is a read-only table built once at import time.  Each
:class:`Action` member looks its :class:`ActionDescriptor` up there.
Path templates use ``__name__`` placeholders that the request builder
substitutes with the parameter of the same name.
"""

from __future__ import annotations

import re
from enum import Enum
from types import MappingProxyType
from typing import Literal, Mapping

from pydantic import BaseModel, ConfigDict

from r53simple.base.exceptions import ValidationError

PLACEHOLDER = re.compile(r"__([a-z][a-z0-9_]*?)__")

HttpMethod = Literal["GET", "POST", "DELETE"]


class ActionDescriptor(BaseModel):
    """HTTP method, path template and required parameters of one action."""

    model_config = ConfigDict(frozen=True)

    method: HttpMethod
    path: str
    required: frozenset[str] = frozenset()

    @property
    def placeholders(self) -> list[str]:
        """Parameter names referenced by the path template, in order."""
        return PLACEHOLDER.findall(self.path)


class Action(str, Enum):
    """Closed set of supported Route 53 API actions."""

    CREATE_HOSTED_ZONE = "CreateHostedZone"
    GET_HOSTED_ZONE = "GetHostedZone"
    LIST_HOSTED_ZONES = "ListHostedZones"
    DELETE_HOSTED_ZONE = "DeleteHostedZone"
    CHANGE_RESOURCE_RECORD_SETS = "ChangeResourceRecordSets"
    LIST_RESOURCE_RECORD_SETS = "ListResourceRecordSets"
    GET_CHANGE = "GetChange"
    CREATE_HEALTH_CHECK = "CreateHealthCheck"
    GET_HEALTH_CHECK = "GetHealthCheck"
    LIST_HEALTH_CHECKS = "ListHealthChecks"
    DELETE_HEALTH_CHECK = "DeleteHealthCheck"

    def __str__(self) -> str:
        return self.value

    @property
    def descriptor(self) -> ActionDescriptor:
        return ACTIONS[self]

    @classmethod
    def parse(cls, action: Action | str | None) -> Action:
        """Resolve an action member from a member or its wire name.

        Raises:
            ValidationError: If *action* is empty or not a known action.
        """
        if isinstance(action, cls):
            return action
        if not action:
            raise ValidationError("action is required")
        try:
            return cls(action)
        except ValueError:
            raise ValidationError(f"unknown action: {action}") from None

    @classmethod
    def names(cls) -> list[str]:
        """Wire names of every known action."""
        return [a.value for a in cls]


def _descriptor(method: HttpMethod, path: str, *required: str) -> ActionDescriptor:
    return ActionDescriptor(method=method, path=path, required=frozenset(required))


ACTIONS: Mapping[Action, ActionDescriptor] = MappingProxyType(
    {
        Action.CREATE_HOSTED_ZONE: _descriptor("POST", "hostedzone", "content"),
        Action.GET_HOSTED_ZONE: _descriptor("GET", "hostedzone/__zone_id__", "zone_id"),
        Action.LIST_HOSTED_ZONES: _descriptor("GET", "hostedzone"),
        Action.DELETE_HOSTED_ZONE: _descriptor(
            "DELETE", "hostedzone/__zone_id__", "zone_id"
        ),
        Action.CHANGE_RESOURCE_RECORD_SETS: _descriptor(
            "POST", "hostedzone/__zone_id__/rrset", "zone_id", "content"
        ),
        Action.LIST_RESOURCE_RECORD_SETS: _descriptor(
            "GET", "hostedzone/__zone_id__/rrset", "zone_id"
        ),
        Action.GET_CHANGE: _descriptor("GET", "change/__change_id__", "change_id"),
        Action.CREATE_HEALTH_CHECK: _descriptor("POST", "healthcheck", "content"),
        Action.GET_HEALTH_CHECK: _descriptor(
            "GET", "healthcheck/__health_check_id__", "health_check_id"
        ),
        Action.LIST_HEALTH_CHECKS: _descriptor("GET", "healthcheck"),
        Action.DELETE_HEALTH_CHECK: _descriptor(
            "DELETE", "healthcheck/__health_check_id__", "health_check_id"
        ),
    }
)


__all__ = [
    "ACTIONS",
    "Action",
    "ActionDescriptor",
    "PLACEHOLDER",
]
