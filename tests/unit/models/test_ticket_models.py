"""
Tests for the ticket record models.

Each model must build from a well-formed payload and fall back to defaults
for missing, null or wrongly-typed data.
"""

from datetime import datetime, timezone

import pytest
from pydantic import ValidationError

from ticket_insights.models.constants import (
    DEFAULT_TIME_SPENT,
    EMPTY_STRING,
    TICKET_DEFAULT_ID,
    UNKNOWN,
)
from ticket_insights.models.ticket import (
    ChangeHistoryEntry,
    TicketAttachment,
    TicketComment,
    TicketComponent,
    TicketLinkedIssue,
    TicketSprintInfo,
    TicketStatus,
    TicketTimeTracking,
    TicketUser,
    TicketVersion,
    TicketWorklog,
    infer_field_type,
)


class TestTicketUser:
    """Tests for the TicketUser model."""

    def test_from_api_response_with_cloud_user(self):
        user = TicketUser.from_api_response(
            {
                "accountId": "abc-123",
                "displayName": "Alice",
                "emailAddress": "alice@example.com",
                "avatarUrls": {"48x48": "https://example.com/a.png"},
            }
        )
        assert user.account_id == "abc-123"
        assert user.display_name == "Alice"
        assert user.email == "alice@example.com"
        assert user.avatar_url == "https://example.com/a.png"
        assert user.identifier == "abc-123"

    def test_server_user_falls_back_to_name(self):
        user = TicketUser.from_api_response({"name": "alice", "displayName": "Alice"})
        assert user.account_id == "alice"

    def test_identifier_falls_back_to_display_name(self):
        user = TicketUser.from_api_response({"displayName": "Alice"})
        assert user.account_id == EMPTY_STRING
        assert user.identifier == "Alice"

    @pytest.mark.parametrize("data", [None, {}, "alice", []])
    def test_defaults_for_invalid_data(self, data):
        user = TicketUser.from_api_response(data)
        assert user.display_name == UNKNOWN
        assert user.account_id == EMPTY_STRING

    def test_models_are_frozen(self):
        user = TicketUser(display_name="Alice")
        with pytest.raises(ValidationError):
            user.display_name = "Bob"


class TestTicketStatus:
    """Tests for the TicketStatus model."""

    def test_category_comes_from_status_category(self):
        status = TicketStatus.from_api_response(
            {"id": "3", "name": "In Progress", "statusCategory": {"name": "In Progress"}}
        )
        assert status.name == "In Progress"
        assert status.category == "In Progress"

    def test_missing_category(self):
        status = TicketStatus.from_api_response({"name": "Open"})
        assert status.category == UNKNOWN


class TestComponentsAndVersions:
    """Tests for components and versions given as objects or bare names."""

    def test_component_from_string(self):
        assert TicketComponent.from_api_response("Backend").name == "Backend"

    def test_version_from_dict(self):
        version = TicketVersion.from_api_response(
            {"id": "1", "name": "1.0", "released": True, "releaseDate": "2024-01-01"}
        )
        assert version.released is True
        assert version.release_date == "2024-01-01"


class TestTicketTimeTracking:
    """Tests for the TicketTimeTracking model."""

    def test_from_api_response_with_valid_data(self):
        tracking = TicketTimeTracking.from_api_response(
            {
                "originalEstimate": "2h",
                "remainingEstimate": "1h 30m",
                "timeSpent": "30m",
                "originalEstimateSeconds": 7200,
                "remainingEstimateSeconds": 5400,
                "timeSpentSeconds": 1800,
            }
        )
        assert tracking.original_estimate == "2h"
        assert tracking.time_spent_seconds == 1800
        assert tracking.has_data is True

    def test_non_numeric_seconds_are_dropped(self):
        tracking = TicketTimeTracking.from_api_response(
            {"timeSpentSeconds": "1800", "originalEstimateSeconds": True}
        )
        assert tracking.time_spent_seconds is None
        assert tracking.original_estimate_seconds is None
        assert tracking.has_data is False

    def test_from_api_response_with_none_data(self):
        assert TicketTimeTracking.from_api_response(None) == TicketTimeTracking()


class TestTicketComment:
    """Tests for the TicketComment model."""

    def test_from_api_response_with_valid_data(self):
        comment = TicketComment.from_api_response(
            {
                "id": "10",
                "author": {"accountId": "u1", "displayName": "Alice"},
                "body": "Looks good",
                "created": "2024-01-02T10:00:00.000+0000",
                "visibility": {"type": "role", "value": "Developers"},
            }
        )
        assert comment.id == "10"
        assert comment.body == "Looks good"
        assert comment.created == datetime(2024, 1, 2, 10, 0, tzinfo=timezone.utc)
        assert comment.visibility.value == "Developers"

    def test_adf_body_is_flattened(self):
        comment = TicketComment.from_api_response(
            {
                "body": {
                    "type": "doc",
                    "content": [
                        {"type": "paragraph", "content": [{"type": "text", "text": "Hi"}]}
                    ],
                }
            }
        )
        assert comment.body == "Hi"

    def test_invalid_data(self):
        comment = TicketComment.from_api_response("not a comment")
        assert comment.id == TICKET_DEFAULT_ID
        assert comment.body == EMPTY_STRING
        assert comment.created is None

    def test_to_simplified_dict(self):
        comment = TicketComment(
            id="1",
            author=TicketUser(display_name="Alice"),
            body="Hi",
            created=datetime(2024, 1, 2, tzinfo=timezone.utc),
        )
        simplified = comment.to_simplified_dict()
        assert simplified["author"] == "Alice"
        assert simplified["created"] == "2024-01-02T00:00:00+00:00"
        assert "updated" not in simplified


class TestTicketWorklog:
    """Tests for the TicketWorklog model."""

    def test_logged_at_prefers_created(self):
        worklog = TicketWorklog.from_api_response(
            {
                "started": "2024-01-02T08:00:00.000+0000",
                "created": "2024-01-02T17:00:00.000+0000",
                "timeSpentSeconds": 3600,
            }
        )
        assert worklog.logged_at.hour == 17
        assert worklog.time_spent_seconds == 3600

    def test_logged_at_falls_back_to_started(self):
        worklog = TicketWorklog.from_api_response(
            {"started": "2024-01-02T08:00:00.000+0000"}
        )
        assert worklog.logged_at.hour == 8

    def test_defaults(self):
        worklog = TicketWorklog.from_api_response({})
        assert worklog.time_spent == DEFAULT_TIME_SPENT
        assert worklog.time_spent_seconds == 0
        assert worklog.logged_at is None


class TestChangeHistoryEntry:
    """Tests for the ChangeHistoryEntry model."""

    def test_find_item_is_case_insensitive(self):
        entry = ChangeHistoryEntry.from_api_response(
            {
                "id": "1",
                "created": "2024-01-02T09:00:00.000+0000",
                "items": [
                    {"field": "Assignee", "fromString": None, "toString": "Bob"},
                    {"field": "status", "fromString": "Open", "toString": "Done"},
                ],
            }
        )
        assert entry.changes_field("assignee")
        assert entry.find_item("STATUS").to_string == "Done"
        assert entry.find_item("priority") is None

    def test_non_dict_items_are_skipped(self):
        entry = ChangeHistoryEntry.from_api_response({"items": ["bad", None]})
        assert entry.items == ()

    def test_to_simplified_dict(self):
        entry = ChangeHistoryEntry.from_api_response(
            {
                "author": {"displayName": "Alice"},
                "created": "2024-01-02T09:00:00.000+0000",
                "items": [{"field": "status", "fromString": "Open", "toString": "Done"}],
            }
        )
        assert entry.to_simplified_dict() == {
            "author": "Alice",
            "created": "2024-01-02T09:00:00+00:00",
            "items": [{"field": "status", "from": "Open", "to": "Done"}],
        }


class TestTicketLinkedIssue:
    """Tests for the TicketLinkedIssue model."""

    def test_relation_follows_direction(self):
        link_type = {"name": "Blocks", "inward": "is blocked by", "outward": "blocks"}
        inward = TicketLinkedIssue.from_api_response(
            {"key": "A-1", "fields": {"summary": "Blocker"}},
            link_type=link_type,
            direction="inward",
        )
        assert inward.to_simplified_dict()["relation"] == "is blocked by"
        assert inward.status == UNKNOWN

    def test_invalid_direction_defaults_to_outward(self):
        link = TicketLinkedIssue.from_api_response({"key": "A-1"}, direction="sideways")
        assert link.direction == "outward"


class TestTicketSprintInfo:
    """Tests for the TicketSprintInfo model."""

    def test_from_api_response(self):
        sprint = TicketSprintInfo.from_api_response(
            {"id": "12", "name": "Sprint 12", "state": "ACTIVE", "rapidViewId": "3"}
        )
        assert sprint.id == 12
        assert sprint.state == "active"
        assert sprint.board_id == 3


class TestTicketAttachment:
    """Tests for the TicketAttachment model."""

    def test_from_api_response(self):
        attachment = TicketAttachment.from_api_response(
            {
                "id": "99",
                "filename": "log.txt",
                "size": 120,
                "mimeType": "text/plain",
                "created": "2024-01-02T09:00:00.000+0000",
            }
        )
        assert attachment.filename == "log.txt"
        assert attachment.size == 120
        assert attachment.mime_type == "text/plain"


class TestInferFieldType:
    """Tests for custom field type inference."""

    @pytest.mark.parametrize(
        ("value", "expected"),
        [
            ({"displayName": "Alice"}, "user"),
            ({"id": "1", "name": "High"}, "option"),
            ({"value": "x"}, "object"),
            ([1, 2], "array"),
            ("text", "string"),
            (3.5, "number"),
            (True, "boolean"),
            (None, "unknown"),
        ],
    )
    def test_infer_field_type(self, value, expected):
        assert infer_field_type(value) == expected
