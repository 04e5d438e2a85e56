"""
Base classes and helpers for ticket insights models.

Raw tracker payloads are loosely typed: any nested object may be missing,
null, or of an unexpected type. `get_path` is the single place where the
get-or-default policy is applied.
"""

from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict

from ..utils.date import parse_datetime


def get_path(data: Any, *path: str, default: Any = None) -> Any:
    """
    Walk nested mappings, returning `default` when any step is missing.

    A step whose value is None, or a container that is not a dict, counts as
    missing.

    Args:
        data: The raw payload (usually a dict)
        *path: Keys to follow in order
        default: Value returned when the path cannot be resolved

    Returns:
        The value at the end of the path, or `default`
    """
    current = data
    for key in path:
        if not isinstance(current, dict):
            return default
        current = current.get(key)
        if current is None:
            return default
    return current


def as_list(value: Any) -> list[Any]:
    """Return `value` if it is a list, otherwise an empty list."""
    return value if isinstance(value, list) else []


class ApiModel(BaseModel):
    """
    Base model for records built from tracker API responses.

    Instances are frozen: a record is built once from a raw payload and never
    changed afterward.
    """

    model_config = ConfigDict(frozen=True)

    @classmethod
    def from_api_response(cls, data: dict[str, Any], **kwargs: Any) -> "ApiModel":
        """
        Create a model instance from a raw API response.

        Args:
            data: The raw response data
            **kwargs: Additional context for subclasses

        Returns:
            A model instance
        """
        raise NotImplementedError("Subclasses must implement from_api_response")

    def to_simplified_dict(self) -> dict[str, Any]:
        """Convert to simplified dictionary for API response."""
        return self.model_dump(mode="json", exclude_none=True)


class TimestampMixin:
    """Helpers for models carrying tracker timestamps."""

    @staticmethod
    def parse_timestamp(value: Any) -> datetime | None:
        """Parse a raw timestamp, returning None when it is absent or invalid."""
        return parse_datetime(value)

    @staticmethod
    def format_timestamp(value: datetime | None) -> str | None:
        """Format a timestamp as ISO 8601, or None."""
        return value.isoformat() if value else None


def str_or_none(value: Any) -> str | None:
    """Return `value` as a string, or None when it is absent."""
    if value is None or value == "":
        return None
    return str(value)
