"""Quality analysis."""

import re

from ..models.insights import QualityMetrics
from ..models.ticket import TicketDetails
from .base import AnalyzerBase

ACCEPTANCE_CRITERIA_PATTERN = re.compile(
    r"acceptance criteria|AC:|given.*when.*then", re.IGNORECASE | re.DOTALL
)
TEST_CASES_PATTERN = re.compile(
    r"test case|test scenario|verify|validate", re.IGNORECASE
)

SHORT_DESCRIPTION_POINTS = 30
LONG_DESCRIPTION_POINTS = 20
ACCEPTANCE_MARKER_POINTS = 25
TEST_MARKER_POINTS = 25


class QualityMixin(AnalyzerBase):
    """Mixin for documentation quality and rework signals."""

    def score_description(self, description: str) -> int:
        """
        Score a description from 0 to 100 on length and content markers.

        Markers are matched case-insensitively.
        """
        text = description.lower()
        score = 0
        if len(description) > self.config.description_short_length:
            score += SHORT_DESCRIPTION_POINTS
        if len(description) > self.config.description_long_length:
            score += LONG_DESCRIPTION_POINTS
        if "acceptance criteria" in text or "ac:" in text:
            score += ACCEPTANCE_MARKER_POINTS
        if "test" in text or "verify" in text:
            score += TEST_MARKER_POINTS
        return min(100, score)

    def count_reopens(self, details: TicketDetails) -> int:
        """Count status changes leaving a resolved-like status for an open one."""
        terminal = self.config.terminal_statuses
        count = 0
        for entry in details.change_history:
            item = entry.find_item("status")
            if item is None:
                continue
            if self._status_in(
                item.from_string, self.config.resolved_statuses
            ) and not self._status_in(item.to_string, terminal):
                count += 1
        return count

    def analyze_quality(self, details: TicketDetails) -> QualityMetrics:
        """
        Analyze documentation quality and rework signals.

        Args:
            details: The extracted ticket

        Returns:
            QualityMetrics for the ticket
        """
        description = details.description
        metadata = details.metadata

        has_acceptance_criteria = bool(ACCEPTANCE_CRITERIA_PATTERN.search(description))
        has_test_cases = bool(TEST_CASES_PATTERN.search(description))

        linked_to_requirements = any(
            "requirement" in link.link_type.name.lower()
            or "requirement" in link.issue_type.lower()
            or "epic" in link.issue_type.lower()
            for link in details.linked_issues
        )

        summary = metadata.summary.lower()
        bug_fix_related = (
            "bug" in metadata.issue_type.name.lower()
            or "bug" in summary
            or "fix" in summary
            or any("bug" in link.issue_type.lower() for link in details.linked_issues)
        )

        return QualityMetrics(
            description_quality=self.score_description(description),
            has_acceptance_criteria=has_acceptance_criteria,
            has_test_cases=has_test_cases,
            linked_to_requirements=linked_to_requirements,
            reopen_count=self.count_reopens(details),
            bug_fix_related=bug_fix_related,
            documentation_complete=(
                has_acceptance_criteria
                and has_test_cases
                and len(description) > self.config.documentation_min_length
            ),
        )
