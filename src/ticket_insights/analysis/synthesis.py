"""Predictive scalars, recommendations and insight tags.

These are rule tables over metrics the other passes already derived; nothing
here reads the raw timeline again.
"""

from ..models.constants import RISK_HIGH, RISK_LOW, RISK_MEDIUM
from ..models.insights import (
    ActivityPattern,
    PredictiveMetrics,
    RiskIndicators,
    TicketInsights,
)
from ..models.ticket import TicketDetails
from ..utils.date import MS_PER_DAY
from .base import AnalyzerBase

# Coarse heuristics, not a learned model
VELOCITY_IMPACT = {RISK_HIGH: -0.5, RISK_MEDIUM: -0.2, RISK_LOW: 0.1}
BURNDOWN_IMPACT_ACTIVE = 0.2
BURNDOWN_IMPACT_QUIET = -0.1

REC_HIGH_RISK = "High risk ticket: consider breaking it down or prioritizing it"
REC_BLOCKED = "Ticket is blocked: escalate blocker resolution"
REC_OVERDUE = "Overdue ticket: review scope and timeline"
REC_ACCEPTANCE_CRITERIA = "Add acceptance criteria to improve clarity"
REC_DESCRIPTION = "Improve the ticket description with more details"
REC_ENGAGEMENT = "Low stakeholder engagement: consider reaching out"
REC_HANDOFFS = "Multiple handoffs detected: review the assignment strategy"
REC_LOW_ACTIVITY = "Low recent activity: check whether the ticket is still active"
REC_LEAD_TIME = "Long lead time: consider breaking the work into smaller tasks"


class SynthesisMixin(AnalyzerBase):
    """Mixin for predictive scalars, recommendations and tags."""

    def predict(
        self, risks: RiskIndicators, activity: ActivityPattern
    ) -> PredictiveMetrics:
        """Estimate velocity and burndown impact from risk and activity."""
        burndown = (
            BURNDOWN_IMPACT_ACTIVE
            if activity.activity_score > self.config.burndown_activity_score
            else BURNDOWN_IMPACT_QUIET
        )
        return PredictiveMetrics(
            velocity_impact=VELOCITY_IMPACT[risks.overall_risk],
            burndown_impact=burndown,
        )

    def generate_recommendations(
        self, details: TicketDetails, insights: TicketInsights
    ) -> tuple[str, ...]:
        """
        Map derived metrics to advice, in a fixed rule order.

        Args:
            details: The extracted ticket
            insights: Insights with every metric pass filled in

        Returns:
            Recommendation strings
        """
        config = self.config
        risks = insights.risks
        quality = insights.quality
        collaboration = insights.collaboration
        lead_time = insights.cycle_time.lead_time

        rules = (
            (risks.overall_risk == RISK_HIGH, REC_HIGH_RISK),
            (risks.is_blocked, REC_BLOCKED),
            (risks.overdue_risk == RISK_HIGH, REC_OVERDUE),
            (not quality.has_acceptance_criteria, REC_ACCEPTANCE_CRITERIA),
            (quality.description_quality < config.low_description_quality, REC_DESCRIPTION),
            (collaboration.stakeholder_engagement < config.low_engagement, REC_ENGAGEMENT),
            (
                collaboration.handoff_count > config.handoff_recommendation_count,
                REC_HANDOFFS,
            ),
            (
                insights.activity_pattern.activity_score < config.stale_activity_score,
                REC_LOW_ACTIVITY,
            ),
            (
                lead_time is not None
                and lead_time > config.long_lead_time_days * MS_PER_DAY,
                REC_LEAD_TIME,
            ),
        )
        return tuple(message for applies, message in rules if applies)

    def generate_insight_tags(
        self, details: TicketDetails, insights: TicketInsights
    ) -> tuple[str, ...]:
        """
        Map derived metrics to short categorical tags.

        Returns:
            Unique tags in rule order
        """
        config = self.config
        risks = insights.risks
        activity_score = insights.activity_pattern.activity_score
        quality = insights.quality
        collaboration = insights.collaboration
        lead_time = insights.cycle_time.lead_time

        rules = (
            (risks.overall_risk == RISK_HIGH, "high-risk"),
            (risks.is_blocked, "blocked"),
            (risks.overdue_risk != RISK_LOW, "overdue"),
            (activity_score > config.high_activity_score, "high-activity"),
            (activity_score < config.stale_activity_score, "stale"),
            (quality.documentation_complete, "well-documented"),
            (quality.reopen_count > 0, "reopened"),
            (quality.bug_fix_related, "bug-related"),
            (collaboration.stakeholder_engagement > config.high_engagement, "collaborative"),
            (collaboration.handoff_count > config.handoff_tag_count, "multiple-handoffs"),
            (risks.complexity_risk == RISK_HIGH, "complex"),
            (
                details.story_points is not None
                and details.story_points > config.large_story_points,
                "large-story",
            ),
            (
                lead_time is not None
                and lead_time > config.long_cycle_days * MS_PER_DAY,
                "long-cycle",
            ),
        )
        # dict.fromkeys keeps first-seen order
        return tuple(dict.fromkeys(tag for applies, tag in rules if applies))
