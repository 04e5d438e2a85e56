"""
Ticket metadata models.

This module provides the identity and classification record of a ticket.
"""

import logging
from datetime import datetime
from typing import Any

from ..adf import adf_to_text
from ..base import ApiModel, TimestampMixin, as_list
from ..constants import EMPTY_STRING, TICKET_DEFAULT_ID, UNASSIGNED
from .common import (
    TicketComponent,
    TicketIssueType,
    TicketPriority,
    TicketProject,
    TicketResolution,
    TicketStatus,
    TicketUser,
    TicketVersion,
)

logger = logging.getLogger(__name__)


class TicketMetadata(ApiModel, TimestampMixin):
    """
    Model representing the identity and classification of a ticket.

    `key` and `created` are always present; the extractor refuses payloads
    without them. Everything else defaults when absent.
    """

    key: str
    created: datetime
    id: str = TICKET_DEFAULT_ID
    summary: str = EMPTY_STRING
    description: str | None = None
    status: TicketStatus = TicketStatus()
    issue_type: TicketIssueType = TicketIssueType()
    priority: TicketPriority = TicketPriority()
    assignee: TicketUser | None = None
    reporter: TicketUser = TicketUser()
    updated: datetime | None = None
    resolution_date: datetime | None = None
    resolution: TicketResolution | None = None
    project: TicketProject = TicketProject()
    components: tuple[TicketComponent, ...] = ()
    labels: tuple[str, ...] = ()
    fix_versions: tuple[TicketVersion, ...] = ()
    affects_versions: tuple[TicketVersion, ...] = ()

    @property
    def assignee_name(self) -> str:
        """Display name of the assignee, or 'Unassigned'."""
        return self.assignee.display_name if self.assignee else UNASSIGNED

    @property
    def last_updated(self) -> datetime:
        """The update timestamp, falling back to creation."""
        return self.updated or self.created

    @classmethod
    def from_api_response(
        cls, data: dict[str, Any], **kwargs: Any
    ) -> "TicketMetadata":
        """
        Create a TicketMetadata from a tracker issue response.

        Args:
            data: The issue data from the tracker API
            **kwargs: `key` and `created`, already validated by the caller

        Returns:
            A TicketMetadata instance
        """
        fields = data.get("fields") if isinstance(data, dict) else None
        if not isinstance(fields, dict):
            fields = {}

        assignee = None
        if assignee_data := fields.get("assignee"):
            assignee = TicketUser.from_api_response(assignee_data)

        resolution = None
        if resolution_data := fields.get("resolution"):
            resolution = TicketResolution.from_api_response(resolution_data)

        labels = tuple(
            str(label) for label in as_list(fields.get("labels")) if label
        )
        components = tuple(
            TicketComponent.from_api_response(component)
            for component in as_list(fields.get("components"))
            if component
        )
        fix_versions = tuple(
            TicketVersion.from_api_response(version)
            for version in as_list(fields.get("fixVersions"))
            if version
        )
        affects_versions = tuple(
            TicketVersion.from_api_response(version)
            for version in as_list(fields.get("versions"))
            if version
        )

        issue_id = data.get("id") if isinstance(data, dict) else None

        return cls(
            key=kwargs["key"],
            created=kwargs["created"],
            id=str(issue_id) if issue_id is not None else TICKET_DEFAULT_ID,
            summary=str(fields.get("summary") or EMPTY_STRING),
            description=adf_to_text(fields.get("description")),
            status=TicketStatus.from_api_response(fields.get("status")),
            issue_type=TicketIssueType.from_api_response(fields.get("issuetype")),
            priority=TicketPriority.from_api_response(fields.get("priority")),
            assignee=assignee,
            reporter=TicketUser.from_api_response(fields.get("reporter")),
            updated=cls.parse_timestamp(fields.get("updated")),
            resolution_date=cls.parse_timestamp(fields.get("resolutiondate")),
            resolution=resolution,
            project=TicketProject.from_api_response(fields.get("project")),
            components=components,
            labels=labels,
            fix_versions=fix_versions,
            affects_versions=affects_versions,
        )

    def to_simplified_dict(self) -> dict[str, Any]:
        """Convert to simplified dictionary for API response."""
        result: dict[str, Any] = {
            "key": self.key,
            "summary": self.summary,
            "status": self.status.name,
            "status_category": self.status.category,
            "issue_type": self.issue_type.name,
            "priority": self.priority.name,
            "assignee": self.assignee_name,
            "reporter": self.reporter.display_name,
            "created": self.format_timestamp(self.created),
        }

        if self.description:
            result["description"] = self.description

        if self.updated:
            result["updated"] = self.format_timestamp(self.updated)

        if self.resolution_date:
            result["resolution_date"] = self.format_timestamp(self.resolution_date)

        if self.resolution:
            result["resolution"] = self.resolution.name

        if self.project.key:
            result["project"] = self.project.key

        if self.labels:
            result["labels"] = list(self.labels)

        if self.components:
            result["components"] = [c.name for c in self.components]

        if self.fix_versions:
            result["fix_versions"] = [v.name for v in self.fix_versions]

        if self.affects_versions:
            result["affects_versions"] = [v.name for v in self.affects_versions]

        return result
