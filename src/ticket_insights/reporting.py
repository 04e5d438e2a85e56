"""Portfolio reporting over many analysed tickets.

Pure aggregation: filter, group, summarize. Nothing here fetches or analyses
tickets.
"""

import logging
import statistics
from collections.abc import Iterable, Sequence
from datetime import datetime

from .config import AnalyzerConfig
from .models.constants import NO_EPIC, NO_SPRINT, RISK_HIGH
from .models.report import (
    FilterCriteria,
    GroupBy,
    PortfolioReport,
    ReportGroup,
    ReportMetric,
    ReportTicket,
    TicketAnalysis,
)
from .utils.date import millis_to_days

logger = logging.getLogger("ticket-insights.reporting")

AVAILABLE_METRICS: tuple[ReportMetric, ...] = (
    "cycle_time",
    "activity",
    "collaboration",
    "quality",
    "velocity",
)
ALL_GROUP = "All"

STALE_GROUP_SHARE = 0.3
HIGH_RISK_PORTFOLIO_SHARE = 0.2
STALE_PORTFOLIO_SHARE = 0.3


def matches_filter_criteria(
    analysis: TicketAnalysis, criteria: FilterCriteria | None
) -> bool:
    """
    Check whether an analysed ticket meets the filter criteria.

    A minimum story point bound excludes unestimated tickets; a maximum bound
    does not.
    """
    if criteria is None:
        return True

    details = analysis.details
    metadata = details.metadata
    points = details.story_points

    if criteria.min_story_points is not None and (
        points is None or points < criteria.min_story_points
    ):
        return False

    if (
        criteria.max_story_points is not None
        and points is not None
        and points > criteria.max_story_points
    ):
        return False

    if (
        criteria.status_categories is not None
        and metadata.status.category not in criteria.status_categories
    ):
        return False

    if (
        criteria.issue_types is not None
        and metadata.issue_type.name not in criteria.issue_types
    ):
        return False

    if (
        criteria.risk_levels is not None
        and analysis.insights.risks.overall_risk not in criteria.risk_levels
    ):
        return False

    return True


def group_key(analysis: TicketAnalysis, group_by: str) -> str:
    """Return the name of the report group an analysed ticket belongs to."""
    details = analysis.details
    metadata = details.metadata

    match group_by:
        case "status":
            return metadata.status.name
        case "assignee":
            return metadata.assignee_name
        case "priority":
            return metadata.priority.name
        case "epic":
            return details.epic.name if details.epic and details.epic.name else NO_EPIC
        case "sprint":
            return details.sprints[-1].name if details.sprints else NO_SPRINT
        case "risk":
            return analysis.insights.risks.overall_risk
        case _:
            return ALL_GROUP


def _mean(values: Sequence[float]) -> float:
    return sum(values) / len(values)


def calculate_group_metrics(
    analyses: Sequence[TicketAnalysis],
    metrics: Iterable[str],
    config: AnalyzerConfig | None = None,
) -> dict[str, dict[str, float]]:
    """
    Aggregate the requested metrics over a group of analysed tickets.

    Sections without data (no tickets, no resolved tickets for cycle time, no
    estimates for velocity) are left out.

    Args:
        analyses: The analysed tickets of one group
        metrics: Metric names out of AVAILABLE_METRICS
        config: Thresholds shared with the per-ticket tags; defaults to
            AnalyzerConfig()

    Returns:
        Mapping of metric name to its aggregated values
    """
    result: dict[str, dict[str, float]] = {}
    if not analyses:
        return result
    metrics = set(metrics)
    config = config if config is not None else AnalyzerConfig()

    if "cycle_time" in metrics:
        lead_times = [
            a.insights.cycle_time.lead_time
            for a in analyses
            if a.insights.cycle_time.lead_time is not None
        ]
        if lead_times:
            result["cycle_time"] = {
                "average_days": millis_to_days(_mean(lead_times)),
                "median_days": millis_to_days(statistics.median(lead_times)),
                "min_days": millis_to_days(min(lead_times)),
                "max_days": millis_to_days(max(lead_times)),
            }

    if "activity" in metrics:
        scores = [a.insights.activity_pattern.activity_score for a in analyses]
        result["activity"] = {
            "average_score": _mean(scores),
            "high_activity_count": sum(
                1 for s in scores if s > config.high_activity_score
            ),
            "stale_count": sum(1 for s in scores if s < config.stale_activity_score),
        }

    if "collaboration" in metrics:
        contributors = {
            comment.author.identifier
            for a in analyses
            for comment in a.details.comments
        }
        result["collaboration"] = {
            "average_engagement": _mean(
                [a.insights.collaboration.stakeholder_engagement for a in analyses]
            ),
            "total_comments": sum(len(a.details.comments) for a in analyses),
            "unique_contributors": len(contributors),
        }

    if "quality" in metrics:
        result["quality"] = {
            "average_description_quality": _mean(
                [a.insights.quality.description_quality for a in analyses]
            ),
            "documentation_complete_count": sum(
                1 for a in analyses if a.insights.quality.documentation_complete
            ),
            "reopen_count": sum(a.insights.quality.reopen_count for a in analyses),
        }

    if "velocity" in metrics:
        points = [
            a.details.story_points
            for a in analyses
            if a.details.story_points is not None
        ]
        if points:
            result["velocity"] = {
                "total_story_points": sum(points),
                "average_story_points": _mean(points),
                "completed_tickets": sum(
                    1 for a in analyses if a.details.metadata.resolution is not None
                ),
            }

    return result


def generate_group_insights(
    analyses: Sequence[TicketAnalysis], config: AnalyzerConfig | None = None
) -> tuple[str, ...]:
    """Summarize risk, activity and documentation problems within a group."""
    config = config if config is not None else AnalyzerConfig()
    insights: list[str] = []

    high_risk = sum(1 for a in analyses if a.insights.risks.overall_risk == RISK_HIGH)
    blocked = sum(1 for a in analyses if a.insights.risks.is_blocked)
    stale = sum(
        1
        for a in analyses
        if a.insights.activity_pattern.activity_score < config.stale_activity_score
    )
    poorly_documented = sum(
        1
        for a in analyses
        if a.insights.quality.description_quality < config.low_description_quality
    )

    if high_risk:
        insights.append(f"{high_risk} high-risk tickets require attention")
    if blocked:
        insights.append(f"{blocked} tickets are currently blocked")
    if stale > len(analyses) * STALE_GROUP_SHARE:
        insights.append(f"{stale} tickets show low activity and should be reviewed")
    if poorly_documented:
        insights.append(f"{poorly_documented} tickets need better documentation")

    return tuple(insights)


def generate_report_recommendations(
    analyses: Sequence[TicketAnalysis], config: AnalyzerConfig | None = None
) -> tuple[str, ...]:
    """Recommend portfolio-level actions from the share of risky, stale and blocked tickets."""
    config = config if config is not None else AnalyzerConfig()
    recommendations: list[str] = []
    total = len(analyses)

    high_risk = sum(1 for a in analyses if a.insights.risks.overall_risk == RISK_HIGH)
    stale = sum(
        1
        for a in analyses
        if a.insights.activity_pattern.activity_score < config.stale_activity_score
    )
    blocked = sum(1 for a in analyses if a.insights.risks.is_blocked)

    if high_risk > total * HIGH_RISK_PORTFOLIO_SHARE:
        recommendations.append(
            "High proportion of risky tickets: consider risk mitigation strategies"
        )
    if stale > total * STALE_PORTFOLIO_SHARE:
        recommendations.append(
            "Many stale tickets detected: review the backlog grooming process"
        )
    if blocked:
        recommendations.append(
            "Blocked tickets identified: prioritize blocker resolution"
        )

    return tuple(recommendations)


def _report_ticket(analysis: TicketAnalysis) -> ReportTicket:
    metadata = analysis.details.metadata
    return ReportTicket(
        key=metadata.key,
        summary=metadata.summary,
        status=metadata.status.name,
        assignee=metadata.assignee_name,
        story_points=analysis.details.story_points,
        risk_level=analysis.insights.risks.overall_risk,
    )


def build_report(
    analyses: Sequence[TicketAnalysis],
    group_by: GroupBy,
    metrics: Sequence[ReportMetric] = AVAILABLE_METRICS,
    generated_at: datetime | None = None,
    config: AnalyzerConfig | None = None,
) -> PortfolioReport:
    """
    Build a portfolio report over analysed tickets.

    Groups appear in the order their first ticket appears.

    Args:
        analyses: The analysed tickets
        group_by: The grouping dimension
        metrics: Metrics to aggregate per group
        generated_at: Report timestamp; defaults to the latest analysis time
        config: Thresholds shared with the per-ticket tags; defaults to
            AnalyzerConfig()

    Returns:
        PortfolioReport with one group per distinct group key
    """
    unknown = [m for m in metrics if m not in AVAILABLE_METRICS]
    if unknown:
        msg = (
            f"Unknown report metrics: {', '.join(unknown)}. "
            f"Available: {', '.join(AVAILABLE_METRICS)}"
        )
        raise ValueError(msg)

    grouped: dict[str, list[TicketAnalysis]] = {}
    for analysis in analyses:
        grouped.setdefault(group_key(analysis, group_by), []).append(analysis)

    groups = tuple(
        ReportGroup(
            name=name,
            ticket_count=len(members),
            tickets=tuple(_report_ticket(member) for member in members),
            metrics=calculate_group_metrics(members, metrics, config),
            insights=generate_group_insights(members, config),
        )
        for name, members in grouped.items()
    )

    if generated_at is None:
        timestamps = [a.insights.analyzed_at for a in analyses]
        generated_at = max(timestamps) if timestamps else datetime.now().astimezone()

    logger.debug(
        f"Built report over {len(analyses)} tickets in {len(groups)} groups "
        f"by {group_by}"
    )

    return PortfolioReport(
        total_tickets=len(analyses),
        generated_at=generated_at,
        group_by=group_by,
        metrics=tuple(metrics),
        groups=groups,
        recommendations=generate_report_recommendations(analyses, config),
    )
