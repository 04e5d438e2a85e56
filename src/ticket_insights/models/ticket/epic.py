"""
Ticket epic models.
"""

from typing import Any

from ..base import ApiModel
from ..constants import DEFAULT_EPIC_COLOR, EMPTY_STRING, UNKNOWN


class TicketEpicInfo(ApiModel):
    """
    Model representing the epic a ticket belongs to.
    """

    key: str = EMPTY_STRING
    name: str = EMPTY_STRING
    summary: str = EMPTY_STRING
    status: str = UNKNOWN
    color: str = DEFAULT_EPIC_COLOR
