"""
Atlassian Document Format (ADF) utilities.

Jira Cloud's v3 API returns rich-text fields (description, comment bodies,
worklog comments, environment) as ADF documents instead of strings. The
analyzer only needs their text, so documents are flattened on extraction.
"""

from typing import Any

# Nodes whose children are separate lines of text
_BLOCK_NODES = {
    "doc",
    "paragraph",
    "heading",
    "blockquote",
    "codeBlock",
    "bulletList",
    "orderedList",
    "listItem",
    "panel",
    "table",
    "tableRow",
    "tableCell",
    "tableHeader",
}


def _flatten(node: Any) -> str:
    if isinstance(node, str):
        return node
    if isinstance(node, list):
        return "".join(_flatten(child) for child in node)
    if not isinstance(node, dict):
        return ""

    node_type = node.get("type")
    if node_type == "text":
        return str(node.get("text") or "")
    if node_type == "hardBreak":
        return "\n"
    if node_type == "mention":
        return str((node.get("attrs") or {}).get("text") or "")

    children = node.get("content")
    if not isinstance(children, list):
        return ""
    if node_type in _BLOCK_NODES:
        parts = [_flatten(child) for child in children]
        return "\n".join(part for part in parts if part)
    return "".join(_flatten(child) for child in children)


def adf_to_text(content: Any) -> str | None:
    """
    Convert rich-text field content to plain text.

    Args:
        content: An ADF document (dict), a plain string, or None

    Returns:
        The plain text, or None when there is no text
    """
    if content is None:
        return None
    if isinstance(content, str):
        return content or None
    text = _flatten(content).strip()
    return text or None
