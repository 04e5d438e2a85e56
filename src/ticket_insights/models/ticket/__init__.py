"""
Ticket data models.

This package provides Pydantic models for the records extracted from raw
tracker payloads, organized by entity type.
"""

from .attachment import TicketAttachment
from .changelog import ChangeHistoryEntry, ChangeItem
from .comment import CommentVisibility, TicketComment
from .common import (
    TicketComponent,
    TicketIssueType,
    TicketPriority,
    TicketProject,
    TicketResolution,
    TicketStatus,
    TicketTimeTracking,
    TicketUser,
    TicketVersion,
)
from .custom_field import CustomFieldType, TicketCustomField, infer_field_type
from .details import TicketDetails
from .epic import TicketEpicInfo
from .link import TicketLinkedIssue, TicketLinkType
from .metadata import TicketMetadata
from .sprint import TicketSprintInfo
from .summary import TicketSummary
from .worklog import TicketWorklog

__all__ = [
    # Common models
    "TicketUser",
    "TicketStatus",
    "TicketIssueType",
    "TicketPriority",
    "TicketResolution",
    "TicketProject",
    "TicketComponent",
    "TicketVersion",
    "TicketTimeTracking",
    # Entity-specific models
    "TicketMetadata",
    "TicketComment",
    "CommentVisibility",
    "TicketWorklog",
    "TicketLinkType",
    "TicketLinkedIssue",
    "ChangeItem",
    "ChangeHistoryEntry",
    "TicketSprintInfo",
    "TicketEpicInfo",
    "CustomFieldType",
    "TicketCustomField",
    "infer_field_type",
    "TicketAttachment",
    # Aggregates
    "TicketDetails",
    "TicketSummary",
]
