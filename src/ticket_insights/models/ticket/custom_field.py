"""
Ticket custom field models.

Custom fields carry arbitrary tracker-specific values. Each is kept as a
tagged value so consumers branch on `inferred_type` instead of sniffing the
value's shape themselves.
"""

from typing import Any, Literal

from ..base import ApiModel
from ..constants import (
    EMPTY_STRING,
    FIELD_TYPE_ARRAY,
    FIELD_TYPE_BOOLEAN,
    FIELD_TYPE_NUMBER,
    FIELD_TYPE_OBJECT,
    FIELD_TYPE_OPTION,
    FIELD_TYPE_STRING,
    FIELD_TYPE_UNKNOWN,
    FIELD_TYPE_USER,
)

CustomFieldType = Literal[
    "user", "option", "array", "object", "string", "number", "boolean", "unknown"
]


def infer_field_type(value: Any) -> CustomFieldType:
    """
    Infer a coarse type tag from the shape of a custom field value.

    Args:
        value: The raw custom field value

    Returns:
        One of user, option, array, object, string, number, boolean, unknown
    """
    if isinstance(value, list):
        return FIELD_TYPE_ARRAY
    if isinstance(value, dict):
        if value.get("displayName"):
            return FIELD_TYPE_USER
        if value.get("name") and value.get("id"):
            return FIELD_TYPE_OPTION
        return FIELD_TYPE_OBJECT
    if isinstance(value, str):
        return FIELD_TYPE_STRING
    # bool is checked before number since bool subclasses int
    if isinstance(value, bool):
        return FIELD_TYPE_BOOLEAN
    if isinstance(value, int | float):
        return FIELD_TYPE_NUMBER
    return FIELD_TYPE_UNKNOWN


class TicketCustomField(ApiModel):
    """
    Model representing one custom field value with its inferred type.
    """

    id: str = EMPTY_STRING
    name: str = EMPTY_STRING
    value: Any = None
    inferred_type: CustomFieldType = FIELD_TYPE_UNKNOWN

    @classmethod
    def from_api_response(
        cls, data: dict[str, Any], **kwargs: Any
    ) -> "TicketCustomField":
        """
        Create a TicketCustomField from a raw field value.

        Args:
            data: The raw custom field value (any JSON type)
            **kwargs: `field_id` and optional `name`

        Returns:
            A TicketCustomField instance
        """
        field_id = str(kwargs.get("field_id") or EMPTY_STRING)
        return cls(
            id=field_id,
            name=str(kwargs.get("name") or field_id),
            value=data,
            inferred_type=infer_field_type(data),
        )
