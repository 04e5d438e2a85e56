"""Collaboration analysis."""

from datetime import timedelta

from ..models.insights import CollaborationMetrics
from ..models.ticket import TicketComment, TicketDetails
from .base import AnalyzerBase

STAKEHOLDER_WEIGHT = 20
COMMENT_WEIGHT = 2


class CollaborationMixin(AnalyzerBase):
    """Mixin for participation, handoffs and comment threads."""

    def analyze_collaboration(self, details: TicketDetails) -> CollaborationMetrics:
        """
        Analyze who takes part in a ticket and how.

        Args:
            details: The extracted ticket

        Returns:
            CollaborationMetrics for the ticket
        """
        comments = details.comments
        unique_commentators = len({c.author.identifier for c in comments})
        unique_workloggers = len({w.author.identifier for w in details.worklogs})

        handoff_count = sum(
            1 for entry in details.change_history if entry.changes_field("assignee")
        )

        average_comment_length = 0.0
        if comments:
            average_comment_length = sum(len(c.body) for c in comments) / len(comments)

        engagement = (
            unique_commentators + unique_workloggers
        ) * STAKEHOLDER_WEIGHT + len(comments) * COMMENT_WEIGHT

        return CollaborationMetrics(
            unique_commentators=unique_commentators,
            comment_threads=self._count_comment_threads(comments),
            average_comment_length=average_comment_length,
            unique_workloggers=unique_workloggers,
            handoff_count=handoff_count,
            stakeholder_engagement=float(min(100, engagement)),
        )

    def _count_comment_threads(self, comments: tuple[TicketComment, ...]) -> int:
        """
        Count runs of comments posted close together.

        A thread starts whenever a comment follows the previous one within the
        thread window after a gap (or at the start); the run continues until a
        gap at least as long as the window.
        """
        timestamps = sorted(c.created for c in comments if c.created is not None)
        window = timedelta(minutes=self.config.thread_window_minutes)

        threads = 0
        in_thread = False
        for previous, current in zip(timestamps, timestamps[1:]):
            close = current - previous < window
            if close and not in_thread:
                threads += 1
            in_thread = close
        return threads
