"""Route 53 client: build, send and decode in one call."""

from __future__ import annotations

import logging
import uuid
from typing import Any, Mapping, Sequence

import requests

from r53simple import __version__
from r53simple.base.actions import Action
from r53simple.base.config import ClientConfig, ResponseFormat
from r53simple.base.exceptions import RemoteError, TransportError, ZoneNotFoundError
from r53simple.changes import ResourceRecordChange, render_changes
from r53simple.request import build_request
from r53simple.response import decode_response

logger = logging.getLogger("r53simple")


def _as_list(node: Any) -> list[Any]:
    """A decoded element that may occur once or many times, as a list."""
    if node is None:
        return []
    return node if isinstance(node, list) else [node]


def _short_id(resource_id: str) -> str:
    """``/hostedzone/Z123`` -> ``Z123``."""
    return resource_id.split("/")[-1]


def normalize_zone_name(name: str) -> str:
    """Fully qualify *name* with a single trailing dot."""
    return name if name.endswith(".") else f"{name}."


class Route53Client:
    """Route 53 REST API client.

    Attributes:
        config: Frozen client configuration.
        session: :class:`requests.Session` used as transport.
        timeout: Per-request timeout handed to the transport, in seconds.
    """

    def __init__(
        self,
        config: ClientConfig | None = None,
        session: requests.Session | None = None,
        timeout: float | None = None,
    ) -> None:
        self.config = config or ClientConfig()
        if session is None:
            session = requests.Session()
            session.headers.update({"User-Agent": f"r53simple/{__version__}"})
        self.session = session
        self.timeout = timeout

    def with_config(self, **updates: Any) -> Route53Client:
        """Client sharing this transport with an updated configuration."""
        return Route53Client(
            self.config.model_copy(update=updates), self.session, self.timeout
        )

    def with_changes(
        self,
        changes: Sequence[ResourceRecordChange | Mapping[str, Any]],
        action: Action | str = Action.CHANGE_RESOURCE_RECORD_SETS,
        comment: str | None = None,
    ) -> Route53Client:
        """Client whose configuration has *changes* staged as request body."""
        content = render_changes(
            changes,
            action,
            self.config.service,
            self.config.base_url,
            self.config.version,
            comment=comment,
        )
        return Route53Client(self.config.with_content(content), self.session, self.timeout)

    # --- Generic dispatch ---

    def send(
        self,
        action: Action | str | None = None,
        request: requests.Request | None = None,
        **params: Any,
    ) -> Any:
        """Send one API call and return the decoded body.

        Args:
            action: Action member or wire name.  Ignored when *request* is
                given.
            request: A ready-made request to send unchanged.
            **params: ``zone_id``, ``change_id``, ``health_check_id``,
                ``content``.

        Returns:
            Body decoded according to ``config.response_format``.

        Raises:
            ConfigurationError: Missing credentials or bad response format.
            ValidationError: Unknown action or missing parameter.
            RemoteError: The API answered with an error.
            TransportError: The request never got an answer.
        """
        request_id = uuid.uuid4().hex[:12]
        response_format = self.config.require_response_format()
        if request is None:
            request = build_request(action, self.config, params)  # type: ignore[arg-type]
            label = str(Action.parse(action))
        else:
            label = "prepared"
        extra = {"action": label, "request_id": request_id, "service": self.config.service}

        prepared = self.session.prepare_request(request)
        if self.config.debug:
            logger.debug(
                "request %s %s headers=%s body=%r",
                prepared.method,
                prepared.url,
                dict(prepared.headers),
                prepared.body,
                extra=extra,
            )
        logger.info("%s %s", prepared.method, prepared.url, extra=extra)

        try:
            response = self.session.send(prepared, timeout=self.timeout)
        except requests.RequestException as e:
            logger.error("transport failure: %s", e, extra=extra)
            raise TransportError(f"{label} request failed: {e}") from e

        try:
            return decode_response(response, response_format, debug=self.config.debug)
        except RemoteError as e:
            logger.error(
                "%s failed with HTTP %s (%s): %s",
                label,
                e.status_code,
                e.code,
                e.message,
                extra=extra,
            )
            raise

    def _call_tree(self, action: Action, **params: Any) -> Any:
        return self.with_config(response_format=ResponseFormat.OBJECT.value).send(
            action, **params
        )

    # --- Hosted zones ---

    def list_hosted_zones(self) -> list[dict[str, Any]]:
        """List hosted zones.

        Returns:
            List of dicts with ``zone_id``, ``name``, ``record_count``,
            ``private``.
        """
        tree = self._call_tree(Action.LIST_HOSTED_ZONES) or {}
        zones = (tree.get("HostedZones") or {}).get("HostedZone")
        return [
            {
                "zone_id": _short_id(z["Id"]),
                "name": z["Name"],
                "record_count": int(z.get("ResourceRecordSetCount") or 0),
                "private": ((z.get("Config") or {}).get("PrivateZone") == "true"),
            }
            for z in _as_list(zones)
        ]

    def find_zone_id(self, zone_name: str) -> str:
        """Return the id of the hosted zone named exactly *zone_name*.

        The trailing dot is optional.

        Raises:
            ZoneNotFoundError: If no zone has that name.
        """
        wanted = normalize_zone_name(zone_name)
        for zone in self.list_hosted_zones():
            if zone["name"] == wanted:
                logger.debug("zone %s is %s", wanted, zone["zone_id"], extra={"zone": wanted})
                return zone["zone_id"]
        raise ZoneNotFoundError(f"failed to get hosted zone ID for {wanted}")

    # --- Record sets ---

    def change_record_sets(
        self,
        zone_id: str,
        changes: Sequence[ResourceRecordChange | Mapping[str, Any]],
        comment: str | None = None,
    ) -> dict[str, Any]:
        """Submit *changes* to *zone_id* as one atomic change batch.

        Returns:
            The ``ChangeInfo`` element: ``Id``, ``Status``, ``SubmittedAt``.
        """
        client = self.with_changes(changes, comment=comment).with_config(
            response_format=ResponseFormat.OBJECT.value
        )
        tree = client.send(Action.CHANGE_RESOURCE_RECORD_SETS, zone_id=zone_id) or {}
        return tree.get("ChangeInfo") or {}

    def list_record_sets(self, zone_id: str) -> list[dict[str, Any]]:
        """List record sets of *zone_id*.

        Returns:
            List of dicts with ``name``, ``type``, ``ttl``, ``values``.
        """
        tree = self._call_tree(Action.LIST_RESOURCE_RECORD_SETS, zone_id=zone_id) or {}
        record_sets = (tree.get("ResourceRecordSets") or {}).get("ResourceRecordSet")
        result = []
        for r in _as_list(record_sets):
            records = (r.get("ResourceRecords") or {}).get("ResourceRecord")
            result.append(
                {
                    "name": r["Name"],
                    "type": r["Type"],
                    "ttl": int(r.get("TTL") or 0),
                    "values": [rr["Value"] for rr in _as_list(records)],
                }
            )
        return result

    def get_change(self, change_id: str) -> dict[str, Any]:
        """Current ``ChangeInfo`` of a submitted change batch."""
        tree = self._call_tree(Action.GET_CHANGE, change_id=_short_id(change_id)) or {}
        return tree.get("ChangeInfo") or {}
