"""
Ticket link models.

A raw issue link names the related issue under `inwardIssue` or
`outwardIssue`; `TicketLinkedIssue` flattens one side of it and records the
direction relative to the subject ticket.
"""

from typing import Any, Literal

from ..base import ApiModel, get_path
from ..constants import EMPTY_STRING, INWARD, OUTWARD, UNKNOWN


class TicketLinkType(ApiModel):
    """
    Model representing a link type and its inward/outward phrasing.
    """

    name: str = EMPTY_STRING
    inward: str = EMPTY_STRING
    outward: str = EMPTY_STRING

    @classmethod
    def from_api_response(
        cls, data: dict[str, Any], **kwargs: Any
    ) -> "TicketLinkType":
        """Create a TicketLinkType from a tracker API response."""
        if not data or not isinstance(data, dict):
            return cls()

        return cls(
            name=str(data.get("name") or EMPTY_STRING),
            inward=str(data.get("inward") or EMPTY_STRING),
            outward=str(data.get("outward") or EMPTY_STRING),
        )


class TicketLinkedIssue(ApiModel):
    """
    Model representing an issue linked to the subject ticket.
    """

    key: str = EMPTY_STRING
    summary: str = EMPTY_STRING
    status: str = UNKNOWN
    issue_type: str = UNKNOWN
    priority: str = UNKNOWN
    link_type: TicketLinkType = TicketLinkType()
    direction: Literal["inward", "outward"] = OUTWARD

    @classmethod
    def from_api_response(
        cls, data: dict[str, Any], **kwargs: Any
    ) -> "TicketLinkedIssue":
        """
        Create a TicketLinkedIssue from one side of a raw issue link.

        Args:
            data: The linked issue object (`inwardIssue` or `outwardIssue`)
            **kwargs: `link_type` (raw link type dict) and `direction`

        Returns:
            A TicketLinkedIssue instance
        """
        direction = kwargs.get("direction", OUTWARD)
        if direction not in (INWARD, OUTWARD):
            direction = OUTWARD
        link_type = TicketLinkType.from_api_response(kwargs.get("link_type"))

        if not data or not isinstance(data, dict):
            return cls(link_type=link_type, direction=direction)

        return cls(
            key=str(data.get("key") or EMPTY_STRING),
            summary=str(get_path(data, "fields", "summary", default=EMPTY_STRING)),
            status=str(get_path(data, "fields", "status", "name", default=UNKNOWN)),
            issue_type=str(
                get_path(data, "fields", "issuetype", "name", default=UNKNOWN)
            ),
            priority=str(
                get_path(data, "fields", "priority", "name", default=UNKNOWN)
            ),
            link_type=link_type,
            direction=direction,
        )

    def to_simplified_dict(self) -> dict[str, Any]:
        """Convert to simplified dictionary for API response."""
        relation = (
            self.link_type.inward if self.direction == INWARD else self.link_type.outward
        )
        return {
            "key": self.key,
            "summary": self.summary,
            "status": self.status,
            "issue_type": self.issue_type,
            "priority": self.priority,
            "link_type": self.link_type.name,
            "relation": relation,
            "direction": self.direction,
        }
