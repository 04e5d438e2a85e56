"""Tests for TicketInsightsService."""

import logging

import pytest

from ticket_insights.exceptions import TicketSourceError
from ticket_insights.models.report import FilterCriteria
from ticket_insights.service import TicketInsightsService
from tests.utils.factories import ChangelogFactory, TicketPayloadFactory


@pytest.fixture
def service(mock_source):
    return TicketInsightsService(source=mock_source)


class TestAnalyzePayload:
    """Tests for analyze_payload."""

    def test_works_without_source(self, issue_payload, as_of):
        analysis = TicketInsightsService().analyze_payload(issue_payload, as_of=as_of)

        assert analysis.key == "PROJ-42"
        assert analysis.insights.analyzed_at == as_of
        assert len(analysis.insights.transitions) == 4

    def test_separate_changelog_wins(self, as_of):
        payload = TicketPayloadFactory.create()
        changelog = ChangelogFactory.status_flow(
            ("2024-01-02T09:00:00.000+0000", "Open", "Done")
        )
        analysis = TicketInsightsService().analyze_payload(
            payload, changelog=changelog, as_of=as_of
        )
        assert [t.to_status for t in analysis.insights.transitions] == ["Done"]


class TestAnalyzeTicket:
    """Tests for analyze_ticket."""

    def test_fetches_issue_changelog_and_field_names(self, service, mock_source, as_of):
        analysis = service.analyze_ticket("PROJ-7", as_of=as_of)

        assert analysis.key == "PROJ-7"
        mock_source.get_issue.assert_called_once_with("PROJ-7")
        mock_source.get_changelog.assert_called_once_with("PROJ-7")
        mock_source.get_field_names.assert_called_once()
        names = {f.id: f.name for f in analysis.details.custom_fields}
        assert names["customfield_10016"] == "Story Points"

    def test_changelog_can_be_skipped(self, service, mock_source, as_of):
        service.analyze_ticket("PROJ-7", include_changelog=False, as_of=as_of)
        mock_source.get_changelog.assert_not_called()

    def test_changelog_failure_is_tolerated(self, service, mock_source, as_of, caplog):
        mock_source.get_changelog.side_effect = TicketSourceError("boom")

        with caplog.at_level(logging.WARNING, logger="ticket-insights.service"):
            analysis = service.analyze_ticket("PROJ-7", as_of=as_of)

        assert len(analysis.insights.transitions) == 4
        assert "Could not fetch changelog for PROJ-7: boom" in caplog.text

    def test_field_name_failure_is_tolerated(self, service, mock_source, as_of):
        mock_source.get_field_names.side_effect = TicketSourceError("denied")

        analysis = service.analyze_ticket("PROJ-7", as_of=as_of)
        assert analysis.details.story_points == 5

    def test_issue_failure_propagates(self, service, mock_source, as_of):
        mock_source.get_issue.side_effect = TicketSourceError("Issue PROJ-7 not found")

        with pytest.raises(TicketSourceError, match="not found"):
            service.analyze_ticket("PROJ-7", as_of=as_of)

    def test_requires_source(self):
        with pytest.raises(TicketSourceError, match="No ticket source configured"):
            TicketInsightsService().analyze_ticket("PROJ-7")


class TestBulkAnalyze:
    """Tests for bulk_analyze."""

    def test_results_keep_input_order(self, service, as_of):
        keys = [f"PROJ-{i}" for i in range(12)]
        result = service.bulk_analyze(keys, batch_size=5, as_of=as_of)

        assert [a.key for a in result.analyses] == keys
        assert result.total_count == 12
        assert result.success_count == 12
        assert result.error_count == 0
        assert all(a.insights.analyzed_at == as_of for a in result.analyses)

    def test_field_names_fetched_once(self, service, mock_source, as_of):
        service.bulk_analyze(["PROJ-1", "PROJ-2", "PROJ-3"], as_of=as_of)
        mock_source.get_field_names.assert_called_once()

    def test_failures_are_recorded(self, service, mock_source, issue_payload, as_of):
        def get_issue(key):
            if key == "PROJ-2":
                raise TicketSourceError("Issue PROJ-2 not found")
            return {**issue_payload, "key": key}

        mock_source.get_issue.side_effect = get_issue
        result = service.bulk_analyze(["PROJ-1", "PROJ-2", "PROJ-3"], as_of=as_of)

        assert [a.key for a in result.analyses] == ["PROJ-1", "PROJ-3"]
        assert result.errors == (
            {"issue_key": "PROJ-2", "error": "Issue PROJ-2 not found"},
        )
        assert result.total_count == 3

    def test_extraction_failure_is_recorded(self, service, mock_source, as_of):
        mock_source.get_issue.side_effect = lambda key: {"key": key, "fields": {}}

        result = service.bulk_analyze(["PROJ-1"], as_of=as_of)

        assert result.analyses == ()
        assert result.errors[0]["issue_key"] == "PROJ-1"

    def test_filter_criteria(self, service, as_of):
        result = service.bulk_analyze(
            ["PROJ-1", "PROJ-2"],
            criteria=FilterCriteria(min_story_points=8),
            as_of=as_of,
        )

        assert result.analyses == ()
        assert result.filtered_count == 2
        assert result.error_count == 0

    def test_empty_input(self, service, mock_source, as_of):
        result = service.bulk_analyze([], as_of=as_of)

        assert result.total_count == 0
        mock_source.get_field_names.assert_not_called()

    @pytest.mark.parametrize("batch_size", [0, -1])
    def test_invalid_batch_size(self, service, batch_size):
        with pytest.raises(ValueError, match="batch_size must be at least 1"):
            service.bulk_analyze(["PROJ-1"], batch_size=batch_size)

    def test_simplified_dict(self, service, as_of):
        simplified = service.bulk_analyze(["PROJ-1"], as_of=as_of).to_simplified_dict()

        assert simplified["success_count"] == 1
        assert "errors" not in simplified


class TestSearchAndAnalyze:
    """Tests for search_and_analyze."""

    def test_analyzes_search_results(self, service, mock_source, as_of):
        result = service.search_and_analyze(
            "project = PROJ", max_results=10, as_of=as_of
        )

        mock_source.search_issue_keys.assert_called_once_with(
            "project = PROJ", limit=10
        )
        assert [a.key for a in result.analyses] == ["PROJ-1", "PROJ-2"]

    def test_search_failure_propagates(self, service, mock_source):
        mock_source.search_issue_keys.side_effect = TicketSourceError("bad JQL")

        with pytest.raises(TicketSourceError, match="bad JQL"):
            service.search_and_analyze("project = ")


class TestGenerateReport:
    """Tests for generate_report."""

    def test_report_over_successful_analyses(self, service, as_of):
        report, result = service.generate_report(
            ["PROJ-1", "PROJ-2"], "sprint", ["velocity"], as_of=as_of
        )

        assert result.success_count == 2
        assert report.total_tickets == 2
        assert report.generated_at == as_of
        assert [g.name for g in report.groups] == ["Sprint 7"]
        assert report.groups[0].metrics["velocity"]["total_story_points"] == 10
