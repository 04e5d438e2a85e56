"""Ticket analyzer composed from the analysis passes."""

import logging
from datetime import datetime, timezone

from ..models.insights import TicketInsights
from ..models.ticket import TicketDetails
from .activity import ActivityMixin
from .collaboration import CollaborationMixin
from .quality import QualityMixin
from .risks import RisksMixin
from .synthesis import SynthesisMixin
from .transitions import TransitionsMixin

logger = logging.getLogger("ticket-insights.analysis")


class TicketAnalyzer(
    TransitionsMixin,
    ActivityMixin,
    CollaborationMixin,
    QualityMixin,
    RisksMixin,
    SynthesisMixin,
):
    """
    Analyzer deriving TicketInsights from TicketDetails.

    Every pass is a pure function of the ticket and an explicit reference
    time, so analysing the same ticket with the same `as_of` gives the same
    insights.
    """

    def analyze_ticket(
        self, details: TicketDetails, as_of: datetime | None = None
    ) -> TicketInsights:
        """
        Run every analysis pass over one ticket.

        Passes run in a fixed order: transitions and cycle time, activity,
        collaboration, quality, risk, predictive scalars, recommendations,
        tags.

        Args:
            details: The extracted ticket
            as_of: Reference time; defaults to now (UTC)

        Returns:
            TicketInsights for the ticket
        """
        if as_of is None:
            as_of = datetime.now(timezone.utc)
        elif as_of.tzinfo is None:
            as_of = as_of.replace(tzinfo=timezone.utc)

        transitions, cycle_time = self.analyze_status_transitions(details)
        activity_pattern = self.analyze_activity_pattern(details, as_of)
        collaboration = self.analyze_collaboration(details)
        quality = self.analyze_quality(details)
        risks = self.analyze_risks(details, as_of)
        predictive = self.predict(risks, activity_pattern)

        insights = TicketInsights(
            key=details.key,
            analyzed_at=as_of,
            transitions=transitions,
            cycle_time=cycle_time,
            activity_pattern=activity_pattern,
            collaboration=collaboration,
            quality=quality,
            risks=risks,
            predictive=predictive,
        )
        recommendations = self.generate_recommendations(details, insights)
        tags = self.generate_insight_tags(details, insights)

        logger.debug(
            f"Analyzed {details.key}: overall risk {risks.overall_risk}, "
            f"{len(transitions)} transitions, tags {list(tags)}"
        )
        return insights.model_copy(
            update={"recommendations": recommendations, "tags": tags}
        )
