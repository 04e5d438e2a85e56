"""Activity pattern analysis."""

from collections import Counter
from datetime import datetime, timedelta

from ..models.insights import ActivityPattern
from ..models.ticket import TicketDetails
from ..utils.date import days_between
from .base import AnalyzerBase

DAY_NAMES = (
    "Monday",
    "Tuesday",
    "Wednesday",
    "Thursday",
    "Friday",
    "Saturday",
    "Sunday",
)


class ActivityMixin(AnalyzerBase):
    """Mixin for activity histograms, frequencies and the activity score."""

    def activity_stream(self, details: TicketDetails) -> list[datetime]:
        """
        Collect the timestamps of all comments, worklogs and changelog entries.

        Entries without a timestamp are left out.

        Returns:
            Timestamps sorted ascending
        """
        timestamps = [comment.created for comment in details.comments]
        timestamps += [worklog.logged_at for worklog in details.worklogs]
        timestamps += [entry.created for entry in details.change_history]
        return sorted(ts for ts in timestamps if ts is not None)

    def analyze_activity_pattern(
        self, details: TicketDetails, as_of: datetime
    ) -> ActivityPattern:
        """
        Analyze when and how often a ticket sees activity.

        Args:
            details: The extracted ticket
            as_of: Reference time for ticket age and recent activity

        Returns:
            ActivityPattern for the ticket
        """
        activities = self.activity_stream(details)
        tz = self.config.tzinfo

        day_counts: Counter[str] = Counter()
        hour_counts: Counter[int] = Counter()
        for timestamp in activities:
            local = timestamp.astimezone(tz)
            day_counts[DAY_NAMES[local.weekday()]] += 1
            hour_counts[local.hour] += 1

        most_active_day = None
        if day_counts:
            # max() keeps the first maximum: Monday first
            most_active_day = max(DAY_NAMES, key=lambda day: day_counts[day])
        most_active_hour = None
        if hour_counts:
            most_active_hour = max(range(24), key=lambda hour: hour_counts[hour])

        ticket_age_days = max(1, days_between(details.metadata.created, as_of))

        window_days = self.config.activity_window_days
        window = timedelta(days=window_days)
        recent_activity_count = sum(
            1 for timestamp in activities if timedelta(0) <= as_of - timestamp < window
        )
        activity_score = min(
            100.0,
            recent_activity_count
            / window_days
            * self.config.activity_score_per_daily_event,
        )
        activity_score = max(0.0, activity_score)

        return ActivityPattern(
            most_active_day=most_active_day,
            most_active_hour=most_active_hour,
            day_histogram={day: day_counts[day] for day in DAY_NAMES if day in day_counts},
            hour_histogram=dict(sorted(hour_counts.items())),
            comment_frequency=len(details.comments) / ticket_age_days,
            worklog_frequency=len(details.worklogs) / ticket_age_days,
            last_activity=activities[-1] if activities else details.metadata.created,
            total_activities=len(activities),
            recent_activity_count=recent_activity_count,
            activity_score=activity_score,
        )
