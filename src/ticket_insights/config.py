"""Configuration module for ticket extraction and analysis.

Every scoring weight, threshold and window used by the analyzer is a named
field here. The defaults are tuning choices, not calibrated values.
"""

import os
from dataclasses import dataclass, field
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from .utils.env import getenv_float, getenv_int, getenv_list

DEFAULT_STORY_POINT_FIELDS = (
    "customfield_10004",
    "customfield_10002",
    "customfield_10016",
)
DEFAULT_STORY_POINT_NAMES = ("story points", "story point estimate")

# Status name -> cycle time bucket
DEFAULT_STATUS_BUCKETS = {
    "in progress": "in_progress",
    "in development": "in_progress",
    "code review": "review",
    "in review": "review",
    "testing": "testing",
    "in testing": "testing",
    "qa": "testing",
    "done": "done",
    "resolved": "done",
    "closed": "done",
}
CYCLE_TIME_BUCKETS = ("in_progress", "review", "testing", "done")


def _lower_all(values: tuple[str, ...] | list[str]) -> tuple[str, ...]:
    return tuple(value.strip().lower() for value in values if value.strip())


def parse_status_buckets(raw: str) -> dict[str, str]:
    """Parse `Status=bucket,Other Status=bucket` into a status->bucket map.

    Raises:
        ValueError: If an entry is not `status=bucket` or names an unknown bucket
    """
    buckets: dict[str, str] = {}
    for entry in raw.split(","):
        if not entry.strip():
            continue
        status, sep, bucket = entry.partition("=")
        if not sep or not status.strip() or not bucket.strip():
            msg = f"Invalid TICKET_INSIGHTS_STATUS_BUCKETS entry: '{entry.strip()}'"
            raise ValueError(msg)
        bucket = bucket.strip().lower()
        if bucket not in CYCLE_TIME_BUCKETS:
            msg = (
                f"Invalid TICKET_INSIGHTS_STATUS_BUCKETS bucket '{bucket}'. "
                f"Must be one of {', '.join(CYCLE_TIME_BUCKETS)}"
            )
            raise ValueError(msg)
        buckets[status.strip().lower()] = bucket
    return buckets


@dataclass
class ExtractionConfig:
    """Field locations used when extracting tickets.

    Custom field ids differ between tracker instances; these defaults match a
    stock Jira Cloud site.
    """

    story_point_fields: tuple[str, ...] = DEFAULT_STORY_POINT_FIELDS
    story_point_names: tuple[str, ...] = DEFAULT_STORY_POINT_NAMES
    epic_link_field: str = "customfield_10014"
    epic_name_field: str = "customfield_10011"
    epic_color_field: str = "customfield_10013"

    def __post_init__(self) -> None:
        """Normalize story point names for case-insensitive lookup."""
        self.story_point_fields = tuple(self.story_point_fields)
        self.story_point_names = _lower_all(self.story_point_names)

    @classmethod
    def from_env(cls) -> "ExtractionConfig":
        """Create extraction configuration from environment variables.

        Returns:
            ExtractionConfig with values from environment variables
        """
        return cls(
            story_point_fields=getenv_list(
                "TICKET_INSIGHTS_STORY_POINT_FIELDS", DEFAULT_STORY_POINT_FIELDS
            ),
            story_point_names=getenv_list(
                "TICKET_INSIGHTS_STORY_POINT_NAMES", DEFAULT_STORY_POINT_NAMES
            ),
            epic_link_field=os.getenv(
                "TICKET_INSIGHTS_EPIC_LINK_FIELD", "customfield_10014"
            ),
            epic_name_field=os.getenv(
                "TICKET_INSIGHTS_EPIC_NAME_FIELD", "customfield_10011"
            ),
            epic_color_field=os.getenv(
                "TICKET_INSIGHTS_EPIC_COLOR_FIELD", "customfield_10013"
            ),
        )


@dataclass
class AnalyzerConfig:
    """Analysis configuration.

    Status names are compared case-insensitively; they are lower-cased on
    construction.
    """

    timezone: str = "UTC"  # IANA timezone for day/hour histograms

    # Activity
    activity_window_days: int = 7
    activity_score_per_daily_event: float = 20.0
    thread_window_minutes: int = 60

    # Status workflow
    status_buckets: dict[str, str] = field(
        default_factory=lambda: dict(DEFAULT_STATUS_BUCKETS)
    )
    active_statuses: tuple[str, ...] = ("in progress", "code review", "testing")
    wait_statuses: tuple[str, ...] = ("to do", "backlog", "blocked", "waiting")
    resolved_statuses: tuple[str, ...] = ("resolved", "done")
    closed_statuses: tuple[str, ...] = ("closed",)

    # Quality
    description_short_length: int = 100
    description_long_length: int = 300
    documentation_min_length: int = 200

    # Risk
    overdue_high_days: int = 7
    stale_medium_days: int = 7
    stale_high_days: int = 14
    many_linked_issues: int = 5
    large_story_points: float = 8
    many_comments: int = 20
    many_changes: int = 15
    long_description_length: int = 1000
    complexity_medium_score: int = 3
    complexity_high_score: int = 6
    overall_medium_score: int = 6
    overall_high_score: int = 10

    # Recommendations and tags
    low_description_quality: int = 50
    low_engagement: float = 30
    high_engagement: float = 70
    handoff_recommendation_count: int = 3
    handoff_tag_count: int = 2
    stale_activity_score: float = 20
    high_activity_score: float = 70
    burndown_activity_score: float = 50
    long_lead_time_days: int = 30
    long_cycle_days: int = 14

    def __post_init__(self) -> None:
        """Normalize status names and validate the configuration.

        Raises:
            ValueError: If the timezone, windows or thresholds are invalid
        """
        self.status_buckets = {
            status.strip().lower(): bucket
            for status, bucket in self.status_buckets.items()
        }
        invalid_buckets = sorted(
            {b for b in self.status_buckets.values() if b not in CYCLE_TIME_BUCKETS}
        )
        if invalid_buckets:
            msg = (
                f"Invalid status buckets: {invalid_buckets}. "
                f"Must be one of {', '.join(CYCLE_TIME_BUCKETS)}"
            )
            raise ValueError(msg)

        self.active_statuses = _lower_all(self.active_statuses)
        self.wait_statuses = _lower_all(self.wait_statuses)
        self.resolved_statuses = _lower_all(self.resolved_statuses)
        self.closed_statuses = _lower_all(self.closed_statuses)

        try:
            ZoneInfo(self.timezone)
        except (ZoneInfoNotFoundError, ValueError) as e:
            msg = f"Invalid timezone: '{self.timezone}'"
            raise ValueError(msg) from e

        if self.activity_window_days <= 0:
            msg = "activity_window_days must be positive"
            raise ValueError(msg)
        if self.thread_window_minutes <= 0:
            msg = "thread_window_minutes must be positive"
            raise ValueError(msg)
        if self.complexity_medium_score >= self.complexity_high_score:
            msg = "complexity_medium_score must be below complexity_high_score"
            raise ValueError(msg)
        if self.overall_medium_score >= self.overall_high_score:
            msg = "overall_medium_score must be below overall_high_score"
            raise ValueError(msg)
        if self.stale_medium_days >= self.stale_high_days:
            msg = "stale_medium_days must be below stale_high_days"
            raise ValueError(msg)

    @property
    def tzinfo(self) -> ZoneInfo:
        """The configured timezone."""
        return ZoneInfo(self.timezone)

    @property
    def terminal_statuses(self) -> tuple[str, ...]:
        """Statuses that end the workflow: resolved-like plus closed."""
        return self.resolved_statuses + self.closed_statuses

    @classmethod
    def from_env(cls) -> "AnalyzerConfig":
        """Create analyzer configuration from environment variables.

        Returns:
            AnalyzerConfig with values from environment variables

        Raises:
            ValueError: If an environment variable holds an invalid value
        """
        defaults = cls()

        status_buckets = defaults.status_buckets
        if raw_buckets := os.getenv("TICKET_INSIGHTS_STATUS_BUCKETS"):
            status_buckets = parse_status_buckets(raw_buckets)

        return cls(
            timezone=os.getenv("TICKET_INSIGHTS_TIMEZONE", defaults.timezone),
            activity_window_days=getenv_int(
                "TICKET_INSIGHTS_ACTIVITY_WINDOW_DAYS", defaults.activity_window_days
            ),
            activity_score_per_daily_event=getenv_float(
                "TICKET_INSIGHTS_ACTIVITY_SCORE_PER_EVENT",
                defaults.activity_score_per_daily_event,
            ),
            thread_window_minutes=getenv_int(
                "TICKET_INSIGHTS_THREAD_WINDOW_MINUTES",
                defaults.thread_window_minutes,
            ),
            status_buckets=status_buckets,
            active_statuses=getenv_list(
                "TICKET_INSIGHTS_ACTIVE_STATUSES", defaults.active_statuses
            ),
            wait_statuses=getenv_list(
                "TICKET_INSIGHTS_WAIT_STATUSES", defaults.wait_statuses
            ),
        )
