"""Request builder: action + config + parameters -> signed HTTP request."""

from __future__ import annotations

from typing import Any, Mapping

from requests import Request

from r53simple.base.actions import PLACEHOLDER, Action, ActionDescriptor
from r53simple.base.config import ClientConfig
from r53simple.base.exceptions import ValidationError
from r53simple.signing import authorization_header, current_time, format_timestamp, sign


def _validate_parameters(action: Action, params: Mapping[str, Any]) -> None:
    for name in sorted(action.descriptor.required):
        if not params.get(name):
            raise ValidationError(f"parameter {name} is required for {action}")


def _substitute_path(descriptor: ActionDescriptor, params: Mapping[str, Any]) -> str:
    def replace(match: Any) -> str:
        value = params.get(match.group(1))
        if not value:
            raise ValidationError(f"no value for path parameter {match.group(1)}")
        return str(value)

    return PLACEHOLDER.sub(replace, descriptor.path)


def build_request(
    action: Action | str,
    config: ClientConfig,
    params: Mapping[str, Any] | None = None,
    *,
    now: float | None = None,
) -> Request:
    """Build a signed request for *action*.

    Args:
        action: Action member or wire name (e.g. ``"GetHostedZone"``).
        config: Client configuration holding credentials and endpoint.
        params: Path parameters (``zone_id``, ``change_id``,
            ``health_check_id``) and an optional ``content`` body.  When
            no ``content`` is given the body staged on *config* is used.
        now: Epoch seconds to sign with instead of the configured clock.

    Returns:
        An unprepared :class:`requests.Request`.

    Raises:
        ConfigurationError: Missing credentials or unusable response format.
        ValidationError: Unknown action or missing required parameter.
    """
    config.require_credentials()
    action = Action.parse(action)
    config.require_response_format()

    descriptor = action.descriptor
    params = dict(params or {})
    params["content"] = params.get("content") or config.content
    _validate_parameters(action, params)

    path = _substitute_path(descriptor, params)
    url = f"{config.endpoint}/{config.version}/{path}"

    timestamp = format_timestamp(current_time(config) if now is None else now)
    signature = sign(timestamp, config.secret_key, config.signature_method)  # type: ignore[arg-type]
    headers = {
        "Date": timestamp,
        "X-Amzn-Authorization": authorization_header(
            config.access_key, config.signature_method, signature  # type: ignore[arg-type]
        ),
    }

    body = params["content"]
    data = None
    if body:
        data = body.encode("utf-8") if isinstance(body, str) else body
        headers["Content-Type"] = "text/xml"

    return Request(method=descriptor.method, url=url, headers=headers, data=data)
