"""Tests for portfolio reporting."""

from datetime import datetime, timezone

import pytest

from ticket_insights.analysis import TicketAnalyzer
from ticket_insights.config import AnalyzerConfig
from ticket_insights.extractor import extract_complete
from ticket_insights.models.report import FilterCriteria, TicketAnalysis
from ticket_insights.reporting import (
    AVAILABLE_METRICS,
    build_report,
    calculate_group_metrics,
    generate_group_insights,
    generate_report_recommendations,
    group_key,
    matches_filter_criteria,
)
from tests.conftest import AS_OF
from tests.utils.factories import TicketPayloadFactory


def _analysis(key="TEST-1", changelog=None, config=None, **fields):
    details = extract_complete(
        TicketPayloadFactory.create(key=key, fields=fields), changelog=changelog
    )
    return TicketAnalysis(
        details=details,
        insights=TicketAnalyzer(config).analyze_ticket(details, AS_OF),
    )


@pytest.fixture
def resolved_analysis():
    return _analysis(
        "TEST-1",
        status={"name": "Done", "statusCategory": {"name": "Done"}},
        resolution={"name": "Fixed"},
        resolutiondate="2024-01-03T09:00:00.000+0000",
        customfield_10016=3,
    )


@pytest.fixture
def blocked_analysis():
    return _analysis(
        "TEST-2",
        summary="Refactor legacy billing",
        status={"name": "Blocked", "statusCategory": {"name": "In Progress"}},
        duedate="2024-01-01",
        customfield_10016=8,
        issuelinks=[
            TicketPayloadFactory.link("DEP-1", link_type="Blocks", direction="inward")
        ],
    )


class TestMatchesFilterCriteria:
    """Tests for matches_filter_criteria."""

    def test_no_criteria_matches(self, resolved_analysis):
        assert matches_filter_criteria(resolved_analysis, None) is True
        assert matches_filter_criteria(resolved_analysis, FilterCriteria()) is True

    def test_story_point_bounds(self, resolved_analysis):
        assert matches_filter_criteria(
            resolved_analysis, FilterCriteria(min_story_points=3, max_story_points=5)
        )
        assert not matches_filter_criteria(
            resolved_analysis, FilterCriteria(min_story_points=4)
        )
        assert not matches_filter_criteria(
            resolved_analysis, FilterCriteria(max_story_points=2)
        )

    def test_unestimated_ticket_fails_minimum_only(self):
        analysis = _analysis()
        assert not matches_filter_criteria(analysis, FilterCriteria(min_story_points=1))
        assert matches_filter_criteria(analysis, FilterCriteria(max_story_points=1))

    def test_status_category_issue_type_and_risk(self, resolved_analysis, blocked_analysis):
        criteria = FilterCriteria(
            status_categories=("Done",), issue_types=("Task",), risk_levels=("low",)
        )
        assert matches_filter_criteria(resolved_analysis, criteria)
        assert not matches_filter_criteria(blocked_analysis, criteria)
        assert matches_filter_criteria(
            blocked_analysis, FilterCriteria(risk_levels=("high",))
        )


class TestGroupKey:
    """Tests for group_key."""

    @pytest.mark.parametrize(
        ("group_by", "expected"),
        [
            ("status", "Done"),
            ("assignee", "Test User"),
            ("priority", "Medium"),
            ("epic", "No Epic"),
            ("sprint", "No Sprint"),
            ("risk", "low"),
            ("unknown", "All"),
        ],
    )
    def test_group_key(self, resolved_analysis, group_by, expected):
        assert group_key(resolved_analysis, group_by) == expected

    def test_epic_and_last_sprint(self):
        analysis = _analysis(
            parent={"key": "EP-1", "fields": {"summary": "Billing"}},
            customfield_10020=[
                {"id": 1, "name": "Sprint 1", "state": "closed"},
                {"id": 2, "name": "Sprint 2", "state": "active"},
            ],
        )
        assert group_key(analysis, "epic") == "Billing"
        assert group_key(analysis, "sprint") == "Sprint 2"


class TestCalculateGroupMetrics:
    """Tests for calculate_group_metrics."""

    def test_all_metrics(self, resolved_analysis, blocked_analysis):
        metrics = calculate_group_metrics(
            [resolved_analysis, blocked_analysis], AVAILABLE_METRICS
        )

        assert metrics["cycle_time"] == {
            "average_days": 2.0,
            "median_days": 2.0,
            "min_days": 2.0,
            "max_days": 2.0,
        }
        assert metrics["activity"]["stale_count"] == 2
        assert metrics["collaboration"]["total_comments"] == 0
        assert metrics["quality"]["reopen_count"] == 0
        assert metrics["velocity"] == {
            "total_story_points": 11.0,
            "average_story_points": 5.5,
            "completed_tickets": 1,
        }

    def test_sections_without_data_are_omitted(self):
        metrics = calculate_group_metrics([_analysis()], ["cycle_time", "velocity"])
        assert metrics == {}

    def test_activity_counts_follow_analyzer_config(self):
        config = AnalyzerConfig(
            stale_activity_score=0, high_activity_score=-1, low_description_quality=0
        )
        analyses = [_analysis(key, config=config) for key in ("TEST-1", "TEST-2")]

        activity = calculate_group_metrics(analyses, ["activity"], config)["activity"]

        tags = [a.insights.tags for a in analyses]
        assert activity["stale_count"] == sum("stale" in t for t in tags) == 0
        assert activity["high_activity_count"] == sum(
            "high-activity" in t for t in tags
        )
        assert activity["high_activity_count"] == 2
        insights = generate_group_insights(analyses, config)
        assert not any("low activity" in i for i in insights)
        assert not any("documentation" in i for i in insights)

    def test_empty_group(self):
        assert calculate_group_metrics([], AVAILABLE_METRICS) == {}

    def test_only_requested_metrics(self, resolved_analysis):
        metrics = calculate_group_metrics([resolved_analysis], ["activity"])
        assert list(metrics) == ["activity"]


class TestInsightsAndRecommendations:
    """Tests for group insights and report recommendations."""

    def test_group_insights(self, resolved_analysis, blocked_analysis):
        insights = generate_group_insights([resolved_analysis, blocked_analysis])

        assert "1 high-risk tickets require attention" in insights
        assert "1 tickets are currently blocked" in insights
        assert "2 tickets show low activity and should be reviewed" in insights

    def test_report_recommendations(self, resolved_analysis, blocked_analysis):
        recommendations = generate_report_recommendations(
            [resolved_analysis, blocked_analysis]
        )
        assert len(recommendations) == 3

    def test_no_recommendations_for_empty_portfolio(self):
        assert generate_report_recommendations([]) == ()


class TestBuildReport:
    """Tests for build_report."""

    def test_groups_keep_first_seen_order(self, resolved_analysis, blocked_analysis):
        report = build_report(
            [blocked_analysis, resolved_analysis, _analysis("TEST-3")],
            "status",
            generated_at=AS_OF,
        )

        assert report.total_tickets == 3
        assert report.group_by == "status"
        assert [g.name for g in report.groups] == ["Blocked", "Done", "Open"]
        assert report.groups[0].tickets[0].key == "TEST-2"
        assert report.groups[0].tickets[0].risk_level == "high"
        assert report.generated_at == AS_OF
        assert report.metrics == AVAILABLE_METRICS

    def test_generated_at_defaults_to_latest_analysis(self, resolved_analysis):
        report = build_report([resolved_analysis], "risk")
        assert report.generated_at == AS_OF

    def test_unknown_metric_raises(self, resolved_analysis):
        with pytest.raises(ValueError, match="Unknown report metrics: speed"):
            build_report([resolved_analysis], "status", ["speed"])

    def test_empty_report(self):
        report = build_report([], "assignee", generated_at=AS_OF)

        assert report.total_tickets == 0
        assert report.groups == ()
        assert report.recommendations == ()

    def test_serializes_to_json_types(self, resolved_analysis):
        report = build_report(
            [resolved_analysis],
            "assignee",
            ["velocity"],
            generated_at=datetime(2024, 1, 20, tzinfo=timezone.utc),
        )
        simplified = report.to_simplified_dict()

        assert simplified["generated_at"] == "2024-01-20T00:00:00Z"
        assert simplified["groups"][0]["name"] == "Test User"
        assert simplified["groups"][0]["metrics"]["velocity"]["total_story_points"] == 3.0
