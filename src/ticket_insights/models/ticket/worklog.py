"""
Ticket worklog models.

This module provides Pydantic models for ticket worklogs.
"""

import logging
from datetime import datetime
from typing import Any

from ..adf import adf_to_text
from ..base import ApiModel, TimestampMixin
from ..constants import DEFAULT_TIME_SPENT, TICKET_DEFAULT_ID
from .common import TicketUser

logger = logging.getLogger(__name__)


class TicketWorklog(ApiModel, TimestampMixin):
    """
    Model representing a ticket worklog entry.
    """

    id: str = TICKET_DEFAULT_ID
    author: TicketUser = TicketUser()
    comment: str | None = None
    time_spent: str = DEFAULT_TIME_SPENT
    time_spent_seconds: int = 0
    started: datetime | None = None
    created: datetime | None = None
    updated: datetime | None = None

    @property
    def logged_at(self) -> datetime | None:
        """When the work was recorded: created, falling back to started."""
        return self.created or self.started

    @classmethod
    def from_api_response(cls, data: dict[str, Any], **kwargs: Any) -> "TicketWorklog":
        """
        Create a TicketWorklog from a tracker API response.

        Args:
            data: The worklog data from the tracker API

        Returns:
            A TicketWorklog instance
        """
        if not data:
            return cls()

        if not isinstance(data, dict):
            logger.debug("Received non-dictionary data, returning default instance")
            return cls()

        seconds = data.get("timeSpentSeconds")
        if isinstance(seconds, bool) or not isinstance(seconds, int | float):
            seconds = 0

        return cls(
            id=str(data.get("id") or TICKET_DEFAULT_ID),
            author=TicketUser.from_api_response(data.get("author")),
            comment=adf_to_text(data.get("comment")),
            time_spent=str(data.get("timeSpent") or DEFAULT_TIME_SPENT),
            time_spent_seconds=int(seconds),
            started=cls.parse_timestamp(data.get("started")),
            created=cls.parse_timestamp(data.get("created")),
            updated=cls.parse_timestamp(data.get("updated")),
        )

    def to_simplified_dict(self) -> dict[str, Any]:
        """Convert to simplified dictionary for API response."""
        result: dict[str, Any] = {
            "author": self.author.display_name,
            "time_spent": self.time_spent,
            "time_spent_seconds": self.time_spent_seconds,
        }

        if self.comment:
            result["comment"] = self.comment

        if self.started:
            result["started"] = self.format_timestamp(self.started)

        if self.created:
            result["created"] = self.format_timestamp(self.created)

        return result
