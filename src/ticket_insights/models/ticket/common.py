"""
Common ticket models.

This module provides the small value models shared by the ticket records:
users, statuses, issue types, priorities, projects, components, versions and
time tracking.
"""

from typing import Any

from ..base import ApiModel, get_path, str_or_none
from ..constants import EMPTY_STRING, UNKNOWN


class TicketUser(ApiModel):
    """
    Model representing a tracker user (assignee, reporter, author).
    """

    display_name: str = UNKNOWN
    account_id: str = EMPTY_STRING
    email: str | None = None
    avatar_url: str | None = None

    @property
    def identifier(self) -> str:
        """Stable identifier: the account id, or the display name without one."""
        return self.account_id or self.display_name

    @classmethod
    def from_api_response(cls, data: dict[str, Any], **kwargs: Any) -> "TicketUser":
        """
        Create a TicketUser from a tracker API response.

        Server/Data Center payloads carry `name`/`key` instead of `accountId`;
        those are used as the account id when present.

        Args:
            data: The user data from the tracker API

        Returns:
            A TicketUser instance
        """
        if not data or not isinstance(data, dict):
            return cls()

        account_id = data.get("accountId") or data.get("name") or data.get("key")
        avatar_url = get_path(data, "avatarUrls", "48x48")

        return cls(
            display_name=str(data.get("displayName") or UNKNOWN),
            account_id=str(account_id) if account_id else EMPTY_STRING,
            email=str_or_none(data.get("emailAddress")),
            avatar_url=avatar_url if isinstance(avatar_url, str) else None,
        )


class TicketStatus(ApiModel):
    """
    Model representing a ticket status and its category.
    """

    id: str = EMPTY_STRING
    name: str = UNKNOWN
    category: str = UNKNOWN

    @classmethod
    def from_api_response(cls, data: dict[str, Any], **kwargs: Any) -> "TicketStatus":
        """Create a TicketStatus from a tracker API response."""
        if not data or not isinstance(data, dict):
            return cls()

        return cls(
            id=str(data.get("id") or EMPTY_STRING),
            name=str(data.get("name") or UNKNOWN),
            category=str(get_path(data, "statusCategory", "name", default=UNKNOWN)),
        )


class TicketIssueType(ApiModel):
    """
    Model representing a ticket's issue type.
    """

    name: str = UNKNOWN
    icon_url: str | None = None
    subtask: bool = False

    @classmethod
    def from_api_response(
        cls, data: dict[str, Any], **kwargs: Any
    ) -> "TicketIssueType":
        """Create a TicketIssueType from a tracker API response."""
        if not data or not isinstance(data, dict):
            return cls()

        return cls(
            name=str(data.get("name") or UNKNOWN),
            icon_url=str_or_none(data.get("iconUrl")),
            subtask=bool(data.get("subtask", False)),
        )


class TicketPriority(ApiModel):
    """
    Model representing a ticket priority.
    """

    id: str = EMPTY_STRING
    name: str = UNKNOWN
    icon_url: str | None = None

    @classmethod
    def from_api_response(
        cls, data: dict[str, Any], **kwargs: Any
    ) -> "TicketPriority":
        """Create a TicketPriority from a tracker API response."""
        if not data or not isinstance(data, dict):
            return cls()

        return cls(
            id=str(data.get("id") or EMPTY_STRING),
            name=str(data.get("name") or UNKNOWN),
            icon_url=str_or_none(data.get("iconUrl")),
        )


class TicketResolution(ApiModel):
    """
    Model representing a ticket resolution.
    """

    name: str = UNKNOWN
    description: str | None = None

    @classmethod
    def from_api_response(
        cls, data: dict[str, Any], **kwargs: Any
    ) -> "TicketResolution":
        """Create a TicketResolution from a tracker API response."""
        if not data or not isinstance(data, dict):
            return cls()

        return cls(
            name=str(data.get("name") or UNKNOWN),
            description=str_or_none(data.get("description")),
        )


class TicketProject(ApiModel):
    """
    Model representing the project a ticket belongs to.
    """

    id: str = EMPTY_STRING
    key: str = EMPTY_STRING
    name: str = EMPTY_STRING

    @classmethod
    def from_api_response(cls, data: dict[str, Any], **kwargs: Any) -> "TicketProject":
        """Create a TicketProject from a tracker API response."""
        if not data or not isinstance(data, dict):
            return cls()

        return cls(
            id=str(data.get("id") or EMPTY_STRING),
            key=str(data.get("key") or EMPTY_STRING),
            name=str(data.get("name") or EMPTY_STRING),
        )


class TicketComponent(ApiModel):
    """
    Model representing a project component.
    """

    id: str = EMPTY_STRING
    name: str = EMPTY_STRING

    @classmethod
    def from_api_response(
        cls, data: dict[str, Any], **kwargs: Any
    ) -> "TicketComponent":
        """Create a TicketComponent from a tracker API response."""
        if not data:
            return cls()

        # Some payloads list components as bare names
        if isinstance(data, str):
            return cls(name=data)

        if not isinstance(data, dict):
            return cls()

        return cls(
            id=str(data.get("id") or EMPTY_STRING),
            name=str(data.get("name") or EMPTY_STRING),
        )


class TicketVersion(ApiModel):
    """
    Model representing a fix or affects version.
    """

    id: str = EMPTY_STRING
    name: str = EMPTY_STRING
    released: bool = False
    release_date: str | None = None

    @classmethod
    def from_api_response(cls, data: dict[str, Any], **kwargs: Any) -> "TicketVersion":
        """Create a TicketVersion from a tracker API response."""
        if not data:
            return cls()

        if isinstance(data, str):
            return cls(name=data)

        if not isinstance(data, dict):
            return cls()

        return cls(
            id=str(data.get("id") or EMPTY_STRING),
            name=str(data.get("name") or EMPTY_STRING),
            released=bool(data.get("released", False)),
            release_date=str_or_none(data.get("releaseDate")),
        )


class TicketTimeTracking(ApiModel):
    """
    Model representing time tracking totals of a ticket.
    """

    original_estimate: str | None = None
    remaining_estimate: str | None = None
    time_spent: str | None = None
    original_estimate_seconds: int | None = None
    remaining_estimate_seconds: int | None = None
    time_spent_seconds: int | None = None

    @property
    def has_data(self) -> bool:
        """Whether any time was estimated or logged."""
        return bool(self.time_spent_seconds or self.original_estimate_seconds)

    @classmethod
    def from_api_response(
        cls, data: dict[str, Any], **kwargs: Any
    ) -> "TicketTimeTracking":
        """Create a TicketTimeTracking from a tracker API response."""
        if not data or not isinstance(data, dict):
            return cls()

        def seconds(name: str) -> int | None:
            value = data.get(name)
            if isinstance(value, bool) or not isinstance(value, int | float):
                return None
            return int(value)

        return cls(
            original_estimate=str_or_none(data.get("originalEstimate")),
            remaining_estimate=str_or_none(data.get("remainingEstimate")),
            time_spent=str_or_none(data.get("timeSpent")),
            original_estimate_seconds=seconds("originalEstimateSeconds"),
            remaining_estimate_seconds=seconds("remainingEstimateSeconds"),
            time_spent_seconds=seconds("timeSpentSeconds"),
        )
