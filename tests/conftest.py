"""
Shared test fixtures.

Every analysis test uses a fixed reference time so results do not depend on
the wall clock.
"""

from datetime import datetime, timezone
from unittest.mock import MagicMock

import pytest

from ticket_insights.analysis import TicketAnalyzer
from ticket_insights.config import AnalyzerConfig
from ticket_insights.extractor import extract_complete
from tests.utils.factories import ChangelogFactory, TicketPayloadFactory

AS_OF = datetime(2024, 1, 20, 12, 0, tzinfo=timezone.utc)


@pytest.fixture
def as_of():
    """Fixed reference time for analyses."""
    return AS_OF


@pytest.fixture
def analyzer():
    """Analyzer with the default configuration."""
    return TicketAnalyzer(AnalyzerConfig())


@pytest.fixture
def issue_payload():
    """A resolved ticket with comments, a worklog, links, a sprint and a full status flow."""
    return TicketPayloadFactory.create(
        key="PROJ-42",
        fields={
            "summary": "Fix login timeout",
            "issuetype": {"name": "Bug"},
            "status": {
                "id": "5",
                "name": "Done",
                "statusCategory": {"key": "done", "name": "Done"},
            },
            "resolution": {"name": "Fixed"},
            "resolutiondate": "2024-01-05T09:00:00.000+0000",
            "updated": "2024-01-05T09:00:00.000+0000",
            "labels": ["backend"],
            "components": [{"id": "1", "name": "Auth"}],
            "comment": {
                "comments": [
                    TicketPayloadFactory.comment(
                        "2024-01-02T10:00:00.000+0000", author="alice", comment_id="1"
                    ),
                    TicketPayloadFactory.comment(
                        "2024-01-02T10:20:00.000+0000", author="bob", comment_id="2"
                    ),
                ]
            },
            "worklog": {
                "worklogs": [
                    TicketPayloadFactory.worklog("2024-01-03T15:00:00.000+0000")
                ]
            },
            "issuelinks": [TicketPayloadFactory.link("PROJ-1", issue_type="Epic")],
            "customfield_10016": 5,
            "customfield_10020": [
                {"id": 7, "name": "Sprint 7", "state": "closed", "boardId": 1}
            ],
        },
        changelog=ChangelogFactory.status_flow(
            ("2024-01-02T09:00:00.000+0000", "Open", "In Progress"),
            ("2024-01-03T09:00:00.000+0000", "In Progress", "Code Review"),
            ("2024-01-04T09:00:00.000+0000", "Code Review", "Testing"),
            ("2024-01-05T09:00:00.000+0000", "Testing", "Done"),
        ),
    )


@pytest.fixture
def ticket(issue_payload):
    """The extracted record of `issue_payload`."""
    return extract_complete(issue_payload)


@pytest.fixture
def mock_source(issue_payload):
    """A ticket source returning `issue_payload` for every key."""
    source = MagicMock()
    source.get_issue.side_effect = lambda key: {**issue_payload, "key": key}
    source.get_changelog.return_value = None
    source.get_field_names.return_value = {"customfield_10016": "Story Points"}
    source.search_issue_keys.return_value = ["PROJ-1", "PROJ-2"]
    return source
