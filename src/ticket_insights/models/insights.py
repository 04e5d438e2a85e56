"""
Ticket insight models.

This module provides the Pydantic models produced by the analyzer. They are
derived records: created fresh on every analysis and never mutated.
"""

from datetime import datetime
from typing import Any, Literal

from pydantic import Field

from .base import ApiModel, TimestampMixin

RiskLevel = Literal["low", "medium", "high"]


class StatusTransition(ApiModel, TimestampMixin):
    """A recorded status change with the time spent in the previous status."""

    from_status: str
    to_status: str
    date: datetime
    author: str
    duration_in_previous_status: int  # milliseconds

    def to_simplified_dict(self) -> dict[str, Any]:
        """Convert to simplified dictionary for API response."""
        return {
            "from": self.from_status,
            "to": self.to_status,
            "date": self.format_timestamp(self.date),
            "author": self.author,
            "duration_in_previous_status": self.duration_in_previous_status,
        }


class CycleTimeMetrics(ApiModel):
    """Cycle time decomposition, all durations in milliseconds."""

    created_to_in_progress: int | None = None
    in_progress_to_review: int | None = None
    review_to_testing: int | None = None
    testing_to_done: int | None = None
    total_cycle_time: int | None = None
    lead_time: int | None = None  # created to resolved
    active_time: int | None = None  # time in 'active' statuses
    wait_time: int | None = None  # time in 'waiting' statuses
    buckets: dict[str, int] = Field(default_factory=dict)


class ActivityPattern(ApiModel):
    """When and how often a ticket sees activity."""

    most_active_day: str | None = None
    most_active_hour: int | None = None
    day_histogram: dict[str, int] = Field(default_factory=dict)
    hour_histogram: dict[int, int] = Field(default_factory=dict)
    comment_frequency: float = 0.0  # comments per day
    worklog_frequency: float = 0.0  # worklogs per day
    last_activity: datetime | None = None
    total_activities: int = 0
    recent_activity_count: int = 0
    activity_score: float = 0.0  # 0-100 based on recent activity


class CollaborationMetrics(ApiModel):
    """Who takes part in a ticket and how."""

    unique_commentators: int = 0
    comment_threads: int = 0
    average_comment_length: float = 0.0
    unique_workloggers: int = 0
    handoff_count: int = 0  # how many times the assignee changed
    stakeholder_engagement: float = 0.0  # 0-100 score


class QualityMetrics(ApiModel):
    """Documentation and rework signals."""

    description_quality: int = 0  # 0-100 score
    has_acceptance_criteria: bool = False
    has_test_cases: bool = False
    linked_to_requirements: bool = False
    reopen_count: int = 0
    bug_fix_related: bool = False
    documentation_complete: bool = False


class RiskIndicators(ApiModel):
    """Bucketed risk classification with the scores behind it."""

    is_blocked: bool = False
    has_blockers: bool = False
    overdue_risk: RiskLevel = "low"
    complexity_risk: RiskLevel = "low"
    stakeholder_risk: RiskLevel = "low"
    technical_debt_risk: RiskLevel = "low"
    overall_risk: RiskLevel = "low"
    days_overdue: int | None = None
    complexity_score: int = 0
    days_since_update: int = 0
    technical_debt_indicators: int = 0
    risk_score: int = 0


class PredictiveMetrics(ApiModel):
    """Coarse heuristic impact estimates, each in [-1, 1]."""

    velocity_impact: float = 0.0
    burndown_impact: float = 0.0


class TicketInsights(ApiModel):
    """
    Model representing the complete analysis of one ticket.
    """

    key: str
    analyzed_at: datetime
    transitions: tuple[StatusTransition, ...] = ()
    cycle_time: CycleTimeMetrics = CycleTimeMetrics()
    activity_pattern: ActivityPattern = ActivityPattern()
    collaboration: CollaborationMetrics = CollaborationMetrics()
    quality: QualityMetrics = QualityMetrics()
    risks: RiskIndicators = RiskIndicators()
    predictive: PredictiveMetrics = PredictiveMetrics()
    recommendations: tuple[str, ...] = ()
    tags: tuple[str, ...] = ()

    def to_simplified_dict(self) -> dict[str, Any]:
        """Convert to simplified dictionary for API response."""
        result = self.model_dump(mode="json", exclude={"transitions"})
        result["transitions"] = [t.to_simplified_dict() for t in self.transitions]
        return result
