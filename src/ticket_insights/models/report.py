"""
Bulk analysis and portfolio report models.
"""

from datetime import datetime
from typing import Any, Literal

from pydantic import Field

from .base import ApiModel
from .insights import RiskLevel, TicketInsights
from .ticket import TicketDetails

GroupBy = Literal["status", "assignee", "priority", "epic", "sprint", "risk"]
ReportMetric = Literal["cycle_time", "activity", "collaboration", "quality", "velocity"]


class TicketAnalysis(ApiModel):
    """A ticket's extracted details paired with its insights."""

    details: TicketDetails
    insights: TicketInsights

    @property
    def key(self) -> str:
        """The ticket key."""
        return self.details.metadata.key

    def to_simplified_dict(self) -> dict[str, Any]:
        """Convert to simplified dictionary for API response."""
        return {
            "details": self.details.to_simplified_dict(),
            "insights": self.insights.to_simplified_dict(),
        }


class FilterCriteria(ApiModel):
    """Criteria a ticket analysis must meet to be kept in a bulk result."""

    min_story_points: float | None = None
    max_story_points: float | None = None
    status_categories: tuple[str, ...] | None = None
    issue_types: tuple[str, ...] | None = None
    risk_levels: tuple[RiskLevel, ...] | None = None


class BulkAnalysisResult(ApiModel):
    """Results of analysing several tickets, with per-ticket failures."""

    analyses: tuple[TicketAnalysis, ...] = ()
    errors: tuple[dict[str, str], ...] = ()
    total_count: int = 0
    filtered_count: int = 0

    @property
    def success_count(self) -> int:
        """Number of tickets analysed and kept."""
        return len(self.analyses)

    @property
    def error_count(self) -> int:
        """Number of tickets that failed."""
        return len(self.errors)

    def to_simplified_dict(self) -> dict[str, Any]:
        """Convert to simplified dictionary for API response."""
        result: dict[str, Any] = {
            "analyses": [a.to_simplified_dict() for a in self.analyses],
            "total_count": self.total_count,
            "success_count": self.success_count,
            "error_count": self.error_count,
            "filtered_count": self.filtered_count,
        }
        if self.errors:
            result["errors"] = list(self.errors)
        return result


class ReportTicket(ApiModel):
    """One line of a report group."""

    key: str
    summary: str
    status: str
    assignee: str
    story_points: float | None = None
    risk_level: RiskLevel = "low"


class ReportGroup(ApiModel):
    """Tickets sharing a group key, with their aggregated metrics."""

    name: str
    ticket_count: int
    tickets: tuple[ReportTicket, ...] = ()
    metrics: dict[str, dict[str, float]] = Field(default_factory=dict)
    insights: tuple[str, ...] = ()


class PortfolioReport(ApiModel):
    """Grouped metrics and recommendations over a set of ticket analyses."""

    total_tickets: int
    generated_at: datetime
    group_by: GroupBy
    metrics: tuple[ReportMetric, ...] = ()
    groups: tuple[ReportGroup, ...] = ()
    recommendations: tuple[str, ...] = ()
