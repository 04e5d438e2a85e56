"""
Ticket change history models.

This module provides Pydantic models for changelog histories. Each history
entry groups the field changes one author made at one moment.
"""

import logging
from datetime import datetime
from typing import Any

from ..base import ApiModel, TimestampMixin, as_list, str_or_none
from ..constants import EMPTY_STRING, TICKET_DEFAULT_ID
from .common import TicketUser

logger = logging.getLogger(__name__)


class ChangeItem(ApiModel):
    """
    Model representing a single field change inside a history entry.
    """

    field: str = EMPTY_STRING
    field_type: str | None = None
    from_value: str | None = None
    from_string: str | None = None
    to_value: str | None = None
    to_string: str | None = None

    @classmethod
    def from_api_response(cls, data: dict[str, Any], **kwargs: Any) -> "ChangeItem":
        """Create a ChangeItem from a tracker API response."""
        if not data or not isinstance(data, dict):
            return cls()

        return cls(
            field=str(data.get("field") or EMPTY_STRING),
            field_type=str_or_none(data.get("fieldtype")),
            from_value=str_or_none(data.get("from")),
            from_string=str_or_none(data.get("fromString")),
            to_value=str_or_none(data.get("to")),
            to_string=str_or_none(data.get("toString")),
        )


class ChangeHistoryEntry(ApiModel, TimestampMixin):
    """
    Model representing one changelog history entry.
    """

    id: str = TICKET_DEFAULT_ID
    author: TicketUser = TicketUser()
    created: datetime | None = None
    items: tuple[ChangeItem, ...] = ()

    def find_item(self, field: str) -> ChangeItem | None:
        """Return the first item changing `field` (case-insensitive), if any."""
        wanted = field.lower()
        for item in self.items:
            if item.field.lower() == wanted:
                return item
        return None

    def changes_field(self, field: str) -> bool:
        """Whether this entry changes `field`."""
        return self.find_item(field) is not None

    @classmethod
    def from_api_response(
        cls, data: dict[str, Any], **kwargs: Any
    ) -> "ChangeHistoryEntry":
        """
        Create a ChangeHistoryEntry from a tracker API response.

        Args:
            data: The history data from the tracker API

        Returns:
            A ChangeHistoryEntry instance
        """
        if not data:
            return cls()

        if not isinstance(data, dict):
            logger.debug("Received non-dictionary data, returning default instance")
            return cls()

        return cls(
            id=str(data.get("id") or TICKET_DEFAULT_ID),
            author=TicketUser.from_api_response(data.get("author")),
            created=cls.parse_timestamp(data.get("created")),
            items=tuple(
                ChangeItem.from_api_response(item)
                for item in as_list(data.get("items"))
                if isinstance(item, dict)
            ),
        )

    def to_simplified_dict(self) -> dict[str, Any]:
        """Convert to simplified dictionary for API response."""
        return {
            "author": self.author.display_name,
            "created": self.format_timestamp(self.created),
            "items": [
                {
                    "field": item.field,
                    "from": item.from_string,
                    "to": item.to_string,
                }
                for item in self.items
            ],
        }
