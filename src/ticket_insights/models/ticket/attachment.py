"""
Ticket attachment models.
"""

import logging
from datetime import datetime
from typing import Any

from ..base import ApiModel, TimestampMixin, str_or_none
from ..constants import EMPTY_STRING, TICKET_DEFAULT_ID
from .common import TicketUser

logger = logging.getLogger(__name__)


class TicketAttachment(ApiModel, TimestampMixin):
    """
    Model representing a ticket attachment.
    """

    id: str = TICKET_DEFAULT_ID
    filename: str = EMPTY_STRING
    size: int = 0
    mime_type: str | None = None
    created: datetime | None = None
    author: TicketUser = TicketUser()
    content: str | None = None
    thumbnail: str | None = None

    @classmethod
    def from_api_response(
        cls, data: dict[str, Any], **kwargs: Any
    ) -> "TicketAttachment":
        """
        Create a TicketAttachment from a tracker API response.

        Args:
            data: The attachment data from the tracker API

        Returns:
            A TicketAttachment instance
        """
        if not data:
            return cls()

        if not isinstance(data, dict):
            logger.debug("Received non-dictionary data, returning default instance")
            return cls()

        size = data.get("size")
        if isinstance(size, bool) or not isinstance(size, int | float):
            size = 0

        return cls(
            id=str(data.get("id") or TICKET_DEFAULT_ID),
            filename=str(data.get("filename") or EMPTY_STRING),
            size=int(size),
            mime_type=str_or_none(data.get("mimeType")),
            created=cls.parse_timestamp(data.get("created")),
            author=TicketUser.from_api_response(data.get("author")),
            content=str_or_none(data.get("content")),
            thumbnail=str_or_none(data.get("thumbnail")),
        )
