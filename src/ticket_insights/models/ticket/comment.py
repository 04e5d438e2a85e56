"""
Ticket comment models.

This module provides Pydantic models for ticket comments.
"""

import logging
from datetime import datetime
from typing import Any

from ..adf import adf_to_text
from ..base import ApiModel, TimestampMixin
from ..constants import EMPTY_STRING, TICKET_DEFAULT_ID
from .common import TicketUser

logger = logging.getLogger(__name__)


class CommentVisibility(ApiModel):
    """
    Model representing a comment visibility restriction.
    """

    type: str = EMPTY_STRING
    value: str = EMPTY_STRING


class TicketComment(ApiModel, TimestampMixin):
    """
    Model representing a ticket comment.
    """

    id: str = TICKET_DEFAULT_ID
    author: TicketUser = TicketUser()
    body: str = EMPTY_STRING
    created: datetime | None = None
    updated: datetime | None = None
    visibility: CommentVisibility | None = None

    @classmethod
    def from_api_response(cls, data: dict[str, Any], **kwargs: Any) -> "TicketComment":
        """
        Create a TicketComment from a tracker API response.

        Args:
            data: The comment data from the tracker API

        Returns:
            A TicketComment instance
        """
        if not data:
            return cls()

        # Handle non-dictionary data by returning a default instance
        if not isinstance(data, dict):
            logger.debug("Received non-dictionary data, returning default instance")
            return cls()

        visibility = None
        visibility_data = data.get("visibility")
        if isinstance(visibility_data, dict):
            visibility = CommentVisibility(
                type=str(visibility_data.get("type") or EMPTY_STRING),
                value=str(visibility_data.get("value") or EMPTY_STRING),
            )

        body = adf_to_text(data.get("body"))

        return cls(
            id=str(data.get("id") or TICKET_DEFAULT_ID),
            author=TicketUser.from_api_response(data.get("author")),
            body=body or EMPTY_STRING,
            created=cls.parse_timestamp(data.get("created")),
            updated=cls.parse_timestamp(data.get("updated")),
            visibility=visibility,
        )

    def to_simplified_dict(self) -> dict[str, Any]:
        """Convert to simplified dictionary for API response."""
        result: dict[str, Any] = {
            "id": self.id,
            "author": self.author.display_name,
            "body": self.body,
        }

        if self.created:
            result["created"] = self.format_timestamp(self.created)

        if self.updated:
            result["updated"] = self.format_timestamp(self.updated)

        if self.visibility:
            result["visibility"] = self.visibility.to_simplified_dict()

        return result


__all__ = ["CommentVisibility", "TicketComment"]
