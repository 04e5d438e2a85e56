"""Risk analysis."""

from datetime import datetime

from ..models.constants import INWARD, RISK_HIGH, RISK_LOW, RISK_MEDIUM
from ..models.insights import RiskIndicators, RiskLevel
from ..models.ticket import TicketDetails
from ..utils.date import days_between
from .base import AnalyzerBase

RISK_WEIGHTS: dict[str, int] = {RISK_LOW: 1, RISK_MEDIUM: 2, RISK_HIGH: 3}
BLOCKED_WEIGHT = 3
HAS_BLOCKERS_WEIGHT = 2

LINKED_ISSUES_POINTS = 2
STORY_POINTS_POINTS = 3
COMMENTS_POINTS = 2
CHANGES_POINTS = 2
DESCRIPTION_POINTS = 1


def bucket_risk(value: float, medium_above: float, high_above: float) -> RiskLevel:
    """Bucket a value: above `high_above` is high, above `medium_above` medium."""
    if value > high_above:
        return RISK_HIGH
    if value > medium_above:
        return RISK_MEDIUM
    return RISK_LOW


def compute_overall_risk(
    overdue_risk: RiskLevel,
    complexity_risk: RiskLevel,
    stakeholder_risk: RiskLevel,
    technical_debt_risk: RiskLevel,
    is_blocked: bool,
    has_blockers: bool,
    medium_above: int = 6,
    high_above: int = 10,
) -> tuple[RiskLevel, int]:
    """
    Combine the sub-risks into an overall risk level.

    Each sub-risk is weighted low=1, medium=2, high=3; being blocked adds 3
    and having inward blockers adds 2.

    Returns:
        Tuple of (overall risk level, weighted score)
    """
    score = (
        RISK_WEIGHTS[overdue_risk]
        + RISK_WEIGHTS[complexity_risk]
        + RISK_WEIGHTS[stakeholder_risk]
        + RISK_WEIGHTS[technical_debt_risk]
        + (BLOCKED_WEIGHT if is_blocked else 0)
        + (HAS_BLOCKERS_WEIGHT if has_blockers else 0)
    )
    return bucket_risk(score, medium_above, high_above), score


class RisksMixin(AnalyzerBase):
    """Mixin for multi-factor risk classification."""

    def complexity_score(self, details: TicketDetails) -> int:
        """Additive complexity score from links, size, discussion and churn."""
        config = self.config
        score = 0
        if len(details.linked_issues) > config.many_linked_issues:
            score += LINKED_ISSUES_POINTS
        if details.story_points and details.story_points > config.large_story_points:
            score += STORY_POINTS_POINTS
        if len(details.comments) > config.many_comments:
            score += COMMENTS_POINTS
        if len(details.change_history) > config.many_changes:
            score += CHANGES_POINTS
        if len(details.description) > config.long_description_length:
            score += DESCRIPTION_POINTS
        return score

    @staticmethod
    def technical_debt_indicators(details: TicketDetails) -> int:
        """Count the independent technical debt signals of a ticket."""
        metadata = details.metadata
        summary = metadata.summary.lower()
        indicators = (
            "technical debt" in summary,
            "refactor" in summary,
            any("debt" in label.lower() for label in metadata.labels),
            any("legacy" in c.name.lower() for c in metadata.components),
        )
        return sum(indicators)

    def analyze_risks(self, details: TicketDetails, as_of: datetime) -> RiskIndicators:
        """
        Classify the risks of a ticket.

        Args:
            details: The extracted ticket
            as_of: Reference time for overdue and staleness computations

        Returns:
            RiskIndicators for the ticket
        """
        config = self.config
        metadata = details.metadata

        is_blocked = "blocked" in metadata.status.name.lower() or any(
            "blocked" in label.lower() for label in metadata.labels
        )
        has_blockers = any(
            link.direction == INWARD and "block" in link.link_type.name.lower()
            for link in details.linked_issues
        )

        days_overdue = None
        overdue_risk: RiskLevel = RISK_LOW
        if details.due_date:
            days_overdue = days_between(details.due_date, as_of)
            if days_overdue > 0:
                overdue_risk = (
                    RISK_HIGH if days_overdue > config.overdue_high_days else RISK_MEDIUM
                )

        complexity = self.complexity_score(details)
        complexity_risk = bucket_risk(
            complexity, config.complexity_medium_score, config.complexity_high_score
        )

        days_since_update = days_between(metadata.last_updated, as_of)
        stakeholder_risk = bucket_risk(
            days_since_update, config.stale_medium_days, config.stale_high_days
        )

        debt_indicators = self.technical_debt_indicators(details)
        technical_debt_risk = bucket_risk(debt_indicators, 0, 2)

        overall_risk, risk_score = compute_overall_risk(
            overdue_risk,
            complexity_risk,
            stakeholder_risk,
            technical_debt_risk,
            is_blocked,
            has_blockers,
            medium_above=config.overall_medium_score,
            high_above=config.overall_high_score,
        )

        return RiskIndicators(
            is_blocked=is_blocked,
            has_blockers=has_blockers,
            overdue_risk=overdue_risk,
            complexity_risk=complexity_risk,
            stakeholder_risk=stakeholder_risk,
            technical_debt_risk=technical_debt_risk,
            overall_risk=overall_risk,
            days_overdue=days_overdue,
            complexity_score=complexity,
            days_since_update=days_since_update,
            technical_debt_indicators=debt_indicators,
            risk_score=risk_score,
        )
