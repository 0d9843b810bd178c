"""Response decoder.

Route 53 answers in XML.  Depending on the configured response format
the body is handed back as a generic tree of dicts, lists and strings,
as that tree serialised to JSON, or as the untouched XML text.

Tree shape (the root element itself is dropped)::

    <ListHostedZonesResponse>
      <HostedZones>
        <HostedZone><Id>/hostedzone/Z1</Id><Name>a.com.</Name></HostedZone>
        <HostedZone><Id>/hostedzone/Z2</Id><Name>b.com.</Name></HostedZone>
      </HostedZones>
      <IsTruncated>false</IsTruncated>
    </ListHostedZonesResponse>

becomes::

    {"HostedZones": {"HostedZone": [{"Id": "/hostedzone/Z1", "Name": "a.com."},
                                    {"Id": "/hostedzone/Z2", "Name": "b.com."}]},
     "IsTruncated": "false"}

A single child stays a dict; repeated siblings become a list.
"""

from __future__ import annotations

import json
from typing import Any, Union

import requests
from lxml import etree

from r53simple.base.config import ResponseFormat
from r53simple.base.exceptions import (
    ChangeNotFoundError,
    HealthCheckNotFoundError,
    HostedZoneAlreadyExistsError,
    HostedZoneNotFoundError,
    RemoteError,
    ThrottlingError,
)

Tree = Union[dict[str, Any], list[Any], str, None]

_ERROR_MAP: dict[str, type[RemoteError]] = {
    "NoSuchHostedZone": HostedZoneNotFoundError,
    "HostedZoneAlreadyExists": HostedZoneAlreadyExistsError,
    "NoSuchChange": ChangeNotFoundError,
    "NoSuchHealthCheck": HealthCheckNotFoundError,
    "Throttling": ThrottlingError,
}

_PARSER = etree.XMLParser(resolve_entities=False, no_network=True)


def _local_name(tag: str) -> str:
    return etree.QName(tag).localname


def _element_to_tree(element: Any) -> Tree:
    children = [c for c in element if isinstance(c.tag, str)]
    text = (element.text or "").strip()
    if not children and not element.attrib:
        return text or None

    node: dict[str, Any] = {}
    for key, value in element.attrib.items():
        node[_local_name(key)] = value
    for child in children:
        key = _local_name(child.tag)
        value = _element_to_tree(child)
        if key not in node:
            node[key] = value
        elif isinstance(node[key], list):
            node[key].append(value)
        else:
            node[key] = [node[key], value]
    if text:
        node["content"] = text
    return node


def parse_xml(body: Union[bytes, str]) -> Any:
    """Parse an XML document into its root element.

    Raises:
        etree.XMLSyntaxError: If *body* is not well-formed.
    """
    if isinstance(body, str):
        body = body.encode("utf-8")
    return etree.fromstring(body, parser=_PARSER)


def xml_to_tree(body: Union[bytes, str]) -> Tree:
    """Decode an XML document into nested dicts, lists and strings."""
    return _element_to_tree(parse_xml(body))


def _body_text(response: requests.Response) -> str:
    """Body as text, UTF-8 unless the response names another charset.

    Route 53 sends a bare ``text/xml`` content type, for which requests
    would fall back to ISO-8859-1.
    """
    encoding = "utf-8"
    if "charset=" in response.headers.get("Content-Type", "").lower():
        encoding = requests.utils.get_encoding_from_headers(response.headers) or encoding
    try:
        return response.content.decode(encoding, errors="replace")
    except LookupError:
        return response.content.decode("utf-8", errors="replace")


def _error_from_response(response: requests.Response, debug: bool) -> RemoteError:
    raw = _body_text(response)
    message = raw or f"HTTP {response.status_code} {response.reason or ''}".strip()
    code = None
    try:
        envelope = xml_to_tree(response.content)
    except etree.XMLSyntaxError:
        envelope = None
    if isinstance(envelope, dict) and isinstance(envelope.get("Error"), dict):
        error = envelope["Error"]
        code = error.get("Code")
        if not debug and error.get("Message"):
            message = error["Message"]
    exc = _ERROR_MAP.get(code or "", RemoteError)
    return exc(message, status_code=response.status_code, code=code)


def decode_response(
    response: requests.Response,
    response_format: ResponseFormat | str,
    *,
    debug: bool = False,
) -> Any:
    """Validate *response* and decode its body.

    Args:
        response: Response returned by the transport.
        response_format: ``object``, ``json``, ``raw`` or ``xml``.
        debug: On failure, surface the raw body instead of the
            envelope's ``Error/Message``.

    Returns:
        A tree for ``object``, a JSON string for ``json``, the body text
        otherwise.

    Raises:
        RemoteError: Non-success status, or a body that is not XML when
            a decoded format was requested.
        ConfigurationError: Unknown *response_format*.
    """
    fmt = ResponseFormat.parse(response_format)
    if not response.ok:
        raise _error_from_response(response, debug)

    if fmt in (ResponseFormat.RAW, ResponseFormat.XML):
        return _body_text(response)

    # bodiless 2xx
    if not response.content.strip():
        return json.dumps(None) if fmt is ResponseFormat.JSON else None

    try:
        tree = xml_to_tree(response.content)
    except etree.XMLSyntaxError as e:
        raise RemoteError(
            f"malformed XML in response: {e}", status_code=response.status_code
        ) from e
    if fmt is ResponseFormat.JSON:
        return json.dumps(tree)
    return tree
