"""
Ticket details aggregate.

`TicketDetails` owns everything extracted from one raw payload. It is built
once per analysis request and is immutable afterward.
"""

from datetime import datetime
from typing import Any

from ..base import ApiModel, TimestampMixin
from .attachment import TicketAttachment
from .changelog import ChangeHistoryEntry
from .comment import TicketComment
from .common import TicketTimeTracking
from .custom_field import TicketCustomField
from .epic import TicketEpicInfo
from .link import TicketLinkedIssue
from .metadata import TicketMetadata
from .sprint import TicketSprintInfo
from .worklog import TicketWorklog


class TicketDetails(ApiModel, TimestampMixin):
    """
    Model representing the complete extracted record of one ticket.
    """

    metadata: TicketMetadata
    comments: tuple[TicketComment, ...] = ()
    worklogs: tuple[TicketWorklog, ...] = ()
    linked_issues: tuple[TicketLinkedIssue, ...] = ()
    change_history: tuple[ChangeHistoryEntry, ...] = ()
    sprints: tuple[TicketSprintInfo, ...] = ()
    epic: TicketEpicInfo | None = None
    custom_fields: tuple[TicketCustomField, ...] = ()
    attachments: tuple[TicketAttachment, ...] = ()
    time_tracking: TicketTimeTracking = TicketTimeTracking()
    story_points: float | None = None
    due_date: datetime | None = None
    environment: str | None = None

    @property
    def key(self) -> str:
        """The ticket key."""
        return self.metadata.key

    @property
    def description(self) -> str:
        """The description, or an empty string."""
        return self.metadata.description or ""

    @property
    def total_time_spent_seconds(self) -> int:
        """Sum of time logged across all worklogs."""
        return sum(worklog.time_spent_seconds for worklog in self.worklogs)

    def to_simplified_dict(self) -> dict[str, Any]:
        """Convert to simplified dictionary for API response."""
        result: dict[str, Any] = {
            **self.metadata.to_simplified_dict(),
            "comments": [comment.to_simplified_dict() for comment in self.comments],
            "worklogs": [worklog.to_simplified_dict() for worklog in self.worklogs],
            "linked_issues": [
                link.to_simplified_dict() for link in self.linked_issues
            ],
            "change_history": [
                entry.to_simplified_dict() for entry in self.change_history
            ],
            "sprints": [sprint.to_simplified_dict() for sprint in self.sprints],
            "custom_fields": [
                {
                    "id": field.id,
                    "name": field.name,
                    "type": field.inferred_type,
                }
                for field in self.custom_fields
            ],
            "attachments": [a.to_simplified_dict() for a in self.attachments],
            "time_tracking": self.time_tracking.to_simplified_dict(),
        }

        if self.epic:
            result["epic"] = self.epic.to_simplified_dict()

        if self.story_points is not None:
            result["story_points"] = self.story_points

        if self.due_date:
            result["due_date"] = self.format_timestamp(self.due_date)

        if self.environment:
            result["environment"] = self.environment

        return result
