"""
Pydantic models for ticket insights.

This package provides the records extracted from tracker payloads, the
insights derived from them, and the bulk/report aggregates.
"""

from .base import ApiModel, TimestampMixin
from .insights import (
    ActivityPattern,
    CollaborationMetrics,
    CycleTimeMetrics,
    PredictiveMetrics,
    QualityMetrics,
    RiskIndicators,
    RiskLevel,
    StatusTransition,
    TicketInsights,
)
from .report import (
    BulkAnalysisResult,
    FilterCriteria,
    GroupBy,
    PortfolioReport,
    ReportGroup,
    ReportMetric,
    ReportTicket,
    TicketAnalysis,
)
from .ticket import (
    ChangeHistoryEntry,
    ChangeItem,
    TicketAttachment,
    TicketComment,
    TicketCustomField,
    TicketDetails,
    TicketEpicInfo,
    TicketLinkedIssue,
    TicketLinkType,
    TicketMetadata,
    TicketSprintInfo,
    TicketSummary,
    TicketTimeTracking,
    TicketUser,
    TicketWorklog,
)

__all__ = [
    # Base models
    "ApiModel",
    "TimestampMixin",
    # Ticket models
    "TicketUser",
    "TicketMetadata",
    "TicketComment",
    "TicketWorklog",
    "TicketLinkType",
    "TicketLinkedIssue",
    "ChangeItem",
    "ChangeHistoryEntry",
    "TicketSprintInfo",
    "TicketEpicInfo",
    "TicketCustomField",
    "TicketAttachment",
    "TicketTimeTracking",
    "TicketDetails",
    "TicketSummary",
    # Insight models
    "RiskLevel",
    "StatusTransition",
    "CycleTimeMetrics",
    "ActivityPattern",
    "CollaborationMetrics",
    "QualityMetrics",
    "RiskIndicators",
    "PredictiveMetrics",
    "TicketInsights",
    # Report models
    "GroupBy",
    "ReportMetric",
    "TicketAnalysis",
    "FilterCriteria",
    "BulkAnalysisResult",
    "ReportTicket",
    "ReportGroup",
    "PortfolioReport",
]
