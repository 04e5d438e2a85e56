"""Tests for status transition and cycle time analysis."""

from datetime import timedelta

from ticket_insights.analysis import TicketAnalyzer
from ticket_insights.config import AnalyzerConfig
from ticket_insights.extractor import extract_complete
from ticket_insights.models.insights import CycleTimeMetrics
from ticket_insights.utils.date import MS_PER_DAY, MS_PER_HOUR
from tests.utils.factories import ChangelogFactory, TicketPayloadFactory


def _ticket(changelog=None, **fields):
    payload = TicketPayloadFactory.create(fields=fields)
    return extract_complete(payload, changelog=changelog)


class TestAnalyzeStatusTransitions:
    """Tests for analyze_status_transitions."""

    def test_full_flow(self, analyzer, ticket):
        transitions, _ = analyzer.analyze_status_transitions(ticket)

        assert [(t.from_status, t.to_status) for t in transitions] == [
            ("Created", "In Progress"),
            ("In Progress", "Code Review"),
            ("Code Review", "Testing"),
            ("Testing", "Done"),
        ]
        assert all(t.duration_in_previous_status == MS_PER_DAY for t in transitions)
        assert transitions[0].author == "Test User"

    def test_durations_sum_to_elapsed_time(self, analyzer, ticket):
        transitions, cycle_time = analyzer.analyze_status_transitions(ticket)

        elapsed = transitions[-1].date - ticket.metadata.created
        total = sum(t.duration_in_previous_status for t in transitions)
        assert total == elapsed / timedelta(milliseconds=1)
        assert cycle_time.total_cycle_time == total

    def test_millisecond_durations_are_exact(self, analyzer):
        ticket = _ticket(
            changelog=ChangelogFactory.status_flow(
                ("2024-01-01T10:00:01.001+0000", "Open", "In Progress"),
                ("2024-01-01T10:00:02.003+0000", "In Progress", "Done"),
            ),
            created="2024-01-01T10:00:00.000+0000",
        )
        transitions, cycle_time = analyzer.analyze_status_transitions(ticket)

        assert [t.duration_in_previous_status for t in transitions] == [1001, 1002]
        assert cycle_time.total_cycle_time == 2003

    def test_unsorted_history_is_sorted(self, analyzer):
        ticket = _ticket(
            changelog=ChangelogFactory.status_flow(
                ("2024-01-03T09:00:00.000+0000", "In Progress", "Done"),
                ("2024-01-02T09:00:00.000+0000", "Open", "In Progress"),
            )
        )
        transitions, _ = analyzer.analyze_status_transitions(ticket)

        assert [t.to_status for t in transitions] == ["In Progress", "Done"]
        assert transitions[1].from_status == "In Progress"
        assert all(t.duration_in_previous_status >= 0 for t in transitions)

    def test_non_status_entries_are_ignored(self, analyzer):
        changelog = {
            "histories": [
                ChangelogFactory.history(
                    "2024-01-02T09:00:00.000+0000",
                    field="assignee",
                    to_string="Bob",
                ),
                ChangelogFactory.history(
                    "2024-01-02T10:00:00.000+0000",
                    from_string="Open",
                    to_string=None,
                ),
                ChangelogFactory.history(
                    "2024-01-02T11:00:00.000+0000",
                    from_string="Open",
                    to_string="In Progress",
                ),
            ]
        }
        transitions, _ = analyzer.analyze_status_transitions(_ticket(changelog))

        assert len(transitions) == 1
        assert transitions[0].duration_in_previous_status == 26 * MS_PER_HOUR

    def test_same_timestamp_keeps_payload_order(self, analyzer):
        ticket = _ticket(
            changelog=ChangelogFactory.status_flow(
                ("2024-01-02T09:00:00.000+0000", "Open", "In Progress"),
                ("2024-01-02T09:00:00.000+0000", "In Progress", "Blocked"),
            )
        )
        transitions, _ = analyzer.analyze_status_transitions(ticket)

        assert [t.to_status for t in transitions] == ["In Progress", "Blocked"]
        assert transitions[1].duration_in_previous_status == 0

    def test_no_change_history(self, analyzer):
        ticket = extract_complete(TicketPayloadFactory.create_minimal())
        transitions, cycle_time = analyzer.analyze_status_transitions(ticket)

        assert transitions == ()
        assert cycle_time == CycleTimeMetrics()

    def test_no_change_history_resolved_has_only_lead_time(self, analyzer):
        ticket = _ticket(resolutiondate="2024-01-03T09:00:00.000+0000")
        transitions, cycle_time = analyzer.analyze_status_transitions(ticket)

        assert transitions == ()
        assert cycle_time == CycleTimeMetrics(lead_time=2 * MS_PER_DAY)


class TestCycleTime:
    """Tests for the cycle time decomposition."""

    def test_buckets_by_target_status(self, analyzer, ticket):
        _, cycle_time = analyzer.analyze_status_transitions(ticket)

        assert cycle_time.buckets == {
            "in_progress": MS_PER_DAY,
            "review": MS_PER_DAY,
            "testing": MS_PER_DAY,
            "done": MS_PER_DAY,
        }
        assert cycle_time.created_to_in_progress == MS_PER_DAY
        assert cycle_time.in_progress_to_review == MS_PER_DAY
        assert cycle_time.review_to_testing == MS_PER_DAY
        assert cycle_time.testing_to_done == MS_PER_DAY
        assert cycle_time.lead_time == 4 * MS_PER_DAY
        assert cycle_time.total_cycle_time == 4 * MS_PER_DAY

    def test_active_and_wait_time(self, analyzer):
        ticket = _ticket(
            changelog=ChangelogFactory.status_flow(
                ("2024-01-02T09:00:00.000+0000", "Open", "Backlog"),
                ("2024-01-04T09:00:00.000+0000", "Backlog", "In Progress"),
                ("2024-01-05T09:00:00.000+0000", "In Progress", "Blocked"),
            )
        )
        _, cycle_time = analyzer.analyze_status_transitions(ticket)

        # Durations are attributed to the target status of each transition
        assert cycle_time.wait_time == 1 * MS_PER_DAY + 1 * MS_PER_DAY
        assert cycle_time.active_time == 2 * MS_PER_DAY
        assert cycle_time.lead_time is None
        assert cycle_time.total_cycle_time == 4 * MS_PER_DAY

    def test_status_names_are_case_insensitive(self, analyzer):
        ticket = _ticket(
            changelog=ChangelogFactory.status_flow(
                ("2024-01-02T09:00:00.000+0000", "Open", "IN PROGRESS"),
            )
        )
        _, cycle_time = analyzer.analyze_status_transitions(ticket)

        assert cycle_time.buckets == {"in_progress": MS_PER_DAY}
        assert cycle_time.active_time == MS_PER_DAY

    def test_configured_status_buckets(self):
        analyzer = TicketAnalyzer(
            AnalyzerConfig(status_buckets={"Doing": "in_progress"})
        )
        ticket = _ticket(
            changelog=ChangelogFactory.status_flow(
                ("2024-01-02T09:00:00.000+0000", "Open", "Doing"),
                ("2024-01-03T09:00:00.000+0000", "Doing", "Done"),
            )
        )
        _, cycle_time = analyzer.analyze_status_transitions(ticket)

        assert cycle_time.buckets == {"in_progress": MS_PER_DAY}
        assert cycle_time.testing_to_done is None
