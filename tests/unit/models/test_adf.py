"""Tests for flattening Atlassian Document Format content."""

from ticket_insights.models.adf import adf_to_text


class TestAdfToText:
    """Tests for adf_to_text."""

    def test_none_and_empty(self):
        assert adf_to_text(None) is None
        assert adf_to_text("") is None
        assert adf_to_text({"type": "doc", "content": []}) is None

    def test_plain_string_is_returned_unchanged(self):
        assert adf_to_text("Already plain text") == "Already plain text"

    def test_paragraphs_are_separate_lines(self):
        doc = {
            "type": "doc",
            "version": 1,
            "content": [
                {
                    "type": "paragraph",
                    "content": [
                        {"type": "text", "text": "Acceptance criteria"},
                        {"type": "text", "text": " below"},
                    ],
                },
                {"type": "paragraph", "content": [{"type": "text", "text": "AC: works"}]},
            ],
        }
        assert adf_to_text(doc) == "Acceptance criteria below\nAC: works"

    def test_mentions_and_hard_breaks(self):
        doc = {
            "type": "doc",
            "content": [
                {
                    "type": "paragraph",
                    "content": [
                        {"type": "mention", "attrs": {"id": "abc", "text": "@Alice"}},
                        {"type": "text", "text": " please verify"},
                        {"type": "hardBreak"},
                        {"type": "text", "text": "thanks"},
                    ],
                }
            ],
        }
        assert adf_to_text(doc) == "@Alice please verify\nthanks"

    def test_nested_lists(self):
        doc = {
            "type": "doc",
            "content": [
                {
                    "type": "bulletList",
                    "content": [
                        {
                            "type": "listItem",
                            "content": [
                                {
                                    "type": "paragraph",
                                    "content": [{"type": "text", "text": "one"}],
                                }
                            ],
                        },
                        {
                            "type": "listItem",
                            "content": [
                                {
                                    "type": "paragraph",
                                    "content": [{"type": "text", "text": "two"}],
                                }
                            ],
                        },
                    ],
                }
            ],
        }
        assert adf_to_text(doc) == "one\ntwo"

    def test_unknown_shapes_yield_none(self):
        assert adf_to_text(42) is None
        assert adf_to_text({"type": "doc"}) is None
