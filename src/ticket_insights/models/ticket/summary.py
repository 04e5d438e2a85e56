"""
Ticket summary model.

A flat projection of `TicketDetails` for quick display: counts, totals and
booleans.
"""

from datetime import datetime

from ..base import ApiModel


class TicketSummary(ApiModel):
    """
    Model representing the flat summary of a ticket.
    """

    key: str
    title: str
    status: str
    type: str
    priority: str
    assignee: str
    reporter: str
    created: datetime
    updated: datetime | None = None
    story_points: float | None = None

    # Activity
    comments_count: int = 0
    worklog_count: int = 0
    total_time_spent_seconds: int = 0
    attachments_count: int = 0
    changes_count: int = 0

    # Relationships
    linked_issues_count: int = 0
    sprints: tuple[str, ...] = ()
    epic: str | None = None
    labels: tuple[str, ...] = ()
    components: tuple[str, ...] = ()

    # Time tracking
    has_time_tracking: bool = False
    is_overdue: bool = False

    has_description: bool = False
    is_resolved: bool = False
    days_since_created: int = 0
    days_since_updated: int = 0
