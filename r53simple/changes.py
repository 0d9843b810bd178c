"""Resource record changes and their ``ChangeBatch`` XML document.

Values are inserted into the markup verbatim.  Callers must not pass
names or values containing ``<``, ``>`` or ``&``; they are not escaped.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from typing import Any, Literal, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic import ValidationError as PydanticValidationError

from r53simple.base.actions import Action
from r53simple.base.config import DEFAULT_BASE_URL, DEFAULT_SERVICE, DEFAULT_VERSION
from r53simple.base.exceptions import ValidationError

ChangeAction = Literal["CREATE", "UPSERT", "DELETE"]


class ResourceRecordChange(BaseModel):
    """One mutation of a resource record set.

    Accepts either the Python field names or the Route 53 element names
    (``Action``, ``Name``, ``Type``, ``TTL``, ``Value``).
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    action: ChangeAction = Field(alias="Action")
    name: str = Field(alias="Name")
    type: str = Field(alias="Type")
    ttl: int = Field(default=300, ge=0, alias="TTL")
    value: Union[str, list[str]] = Field(alias="Value")

    @field_validator("action", "type", mode="before")
    @classmethod
    def _upper(cls, v: Any) -> Any:
        return v.upper() if isinstance(v, str) else v

    @field_validator("value")
    @classmethod
    def _not_empty(cls, v: Union[str, list[str]]) -> Union[str, list[str]]:
        if isinstance(v, list) and not v:
            raise ValueError("at least one value is required")
        return v

    @property
    def values(self) -> list[str]:
        return [self.value] if isinstance(self.value, str) else list(self.value)


def _coerce(change: Any) -> ResourceRecordChange:
    if isinstance(change, ResourceRecordChange):
        return change
    if not isinstance(change, Mapping):
        raise ValidationError(
            f"change must be a ResourceRecordChange or mapping, got {type(change).__name__}"
        )
    try:
        return ResourceRecordChange.model_validate(dict(change))
    except PydanticValidationError as e:
        raise ValidationError(f"invalid change: {e}") from e


def _render_record_set(change: ResourceRecordChange) -> str:
    values = "\n".join(f"<Value>{v}</Value>" for v in change.values)
    return (
        "<ResourceRecordSet>\n"
        f"<Name>{change.name}</Name>\n"
        f"<Type>{change.type}</Type>\n"
        f"<TTL>{change.ttl}</TTL>\n"
        "<ResourceRecords>\n"
        "<ResourceRecord>\n"
        f"{values}\n"
        "</ResourceRecord>\n"
        "</ResourceRecords>\n"
        "</ResourceRecordSet>\n"
    )


def _render_change(change: ResourceRecordChange) -> str:
    return (
        "<Change>\n"
        f"<Action>{change.action}</Action>\n"
        f"{_render_record_set(change)}"
        "</Change>\n"
    )


def render_changes(
    changes: Sequence[ResourceRecordChange | Mapping[str, Any]],
    action: Action | str = Action.CHANGE_RESOURCE_RECORD_SETS,
    service: str = DEFAULT_SERVICE,
    host: str = DEFAULT_BASE_URL,
    version: str = DEFAULT_VERSION,
    comment: str | None = None,
) -> str:
    """Render *changes* as one ``ChangeBatch`` request document.

    Args:
        changes: Ordered changes; rendered in the given order.
        action: Action whose ``<{action}Request>`` element wraps the batch.
        service: Service label of the namespace host.
        host: Base host of the namespace.
        version: API version in the namespace path.
        comment: Optional ``<Comment>`` for the batch.

    Returns:
        The XML document as a string.

    Raises:
        ValidationError: If *changes* is not a sequence, or an item is
            not a valid change.
    """
    if isinstance(changes, (str, bytes, Mapping)) or not isinstance(changes, Sequence):
        raise ValidationError(
            f"changes must be a sequence, got {type(changes).__name__}"
        )
    action = Action.parse(action)
    body = "".join(_render_change(_coerce(c)) for c in changes)
    comment_xml = f"<Comment>{comment}</Comment>\n" if comment else ""
    namespace = f"https://{service}.{host}/doc/{version}/"
    return (
        '<?xml version="1.0" encoding="UTF-8"?>\n'
        f'<{action.value}Request xmlns="{namespace}">\n'
        "<ChangeBatch>\n"
        f"{comment_xml}"
        "<Changes>\n"
        f"{body}"
        "</Changes>\n"
        "</ChangeBatch>\n"
        f"</{action.value}Request>\n"
    )
