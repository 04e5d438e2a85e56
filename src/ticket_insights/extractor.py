"""Extraction of normalized ticket records from raw tracker payloads.

Every function here is pure: it reads a raw issue payload (the JSON returned
by the tracker's issue endpoint, optionally with an embedded or separate
changelog) and returns frozen models. Missing or wrongly-typed optional data
falls back to defaults; only the required-field invariant (key and creation
timestamp) and malformed changelogs raise.
"""

import logging
import math
import re
from datetime import datetime
from typing import Any

from .config import ExtractionConfig
from .exceptions import MalformedChangelogError, TicketExtractionError
from .models.adf import adf_to_text
from .models.base import as_list, get_path
from .models.constants import DEFAULT_EPIC_COLOR, EMPTY_STRING, INWARD, OUTWARD, UNKNOWN
from .models.ticket import (
    ChangeHistoryEntry,
    TicketAttachment,
    TicketComment,
    TicketCustomField,
    TicketDetails,
    TicketEpicInfo,
    TicketLinkedIssue,
    TicketMetadata,
    TicketSprintInfo,
    TicketSummary,
    TicketTimeTracking,
    TicketWorklog,
)
from .utils.date import days_between, parse_datetime

logger = logging.getLogger("ticket-insights.extractor")

CUSTOM_FIELD_PREFIX = "customfield_"

# Legacy sprint descriptors look like
# com.atlassian.greenhopper.service.sprint.Sprint@1a2b[id=12,state=ACTIVE,name=Sprint 21,...]
_SPRINT_BODY_PATTERN = re.compile(r"\[(?P<body>.*)\]\s*$", re.DOTALL)
_SPRINT_PAIR_PATTERN = re.compile(r"(\w+)=(.*?)(?=,\w+=|$)", re.DOTALL)
_SPRINT_REQUIRED_KEYS = ("id", "name", "state")


def _fields(raw: dict[str, Any]) -> dict[str, Any]:
    fields = raw.get("fields") if isinstance(raw, dict) else None
    return fields if isinstance(fields, dict) else {}


def _custom_fields(raw: dict[str, Any]) -> list[tuple[str, Any]]:
    return [
        (field_id, value)
        for field_id, value in _fields(raw).items()
        if field_id.startswith(CUSTOM_FIELD_PREFIX) and value is not None
    ]


def _as_number(value: Any) -> float | None:
    if isinstance(value, bool):
        return None
    if isinstance(value, int | float):
        number = float(value)
    elif isinstance(value, str):
        try:
            number = float(value.strip())
        except ValueError:
            return None
    else:
        return None
    return number if math.isfinite(number) else None


def extract_metadata(raw: dict[str, Any]) -> TicketMetadata:
    """
    Extract the identity and classification of a ticket.

    Args:
        raw: The raw issue payload

    Returns:
        TicketMetadata for the issue

    Raises:
        TicketExtractionError: If the payload is not a mapping, has neither a
            key nor an id, or lacks a parseable creation timestamp
    """
    if not isinstance(raw, dict):
        msg = f"Issue payload must be a mapping, got {type(raw).__name__}"
        raise TicketExtractionError(msg)

    key = raw.get("key") or raw.get("id")
    if not key:
        msg = "Issue payload has neither 'key' nor 'id'"
        raise TicketExtractionError(msg)

    created_raw = get_path(raw, "fields", "created")
    created = parse_datetime(created_raw)
    if created is None:
        msg = f"Issue {key} has a missing or invalid 'created' timestamp: {created_raw!r}"
        raise TicketExtractionError(msg)

    return TicketMetadata.from_api_response(raw, key=str(key), created=created)


def extract_comments(raw: dict[str, Any]) -> tuple[TicketComment, ...]:
    """Extract the comments of an issue in payload order."""
    comments = as_list(get_path(raw, "fields", "comment", "comments"))
    return tuple(
        TicketComment.from_api_response(comment)
        for comment in comments
        if isinstance(comment, dict)
    )


def extract_worklogs(raw: dict[str, Any]) -> tuple[TicketWorklog, ...]:
    """Extract the worklogs of an issue in payload order."""
    worklogs = as_list(get_path(raw, "fields", "worklog", "worklogs"))
    return tuple(
        TicketWorklog.from_api_response(worklog)
        for worklog in worklogs
        if isinstance(worklog, dict)
    )


def extract_linked_issues(raw: dict[str, Any]) -> tuple[TicketLinkedIssue, ...]:
    """
    Extract linked issues, one entry per populated direction of each link.

    A link carrying both an outward and an inward issue yields two entries,
    outward first.
    """
    linked: list[TicketLinkedIssue] = []
    for link in as_list(get_path(raw, "fields", "issuelinks")):
        if not isinstance(link, dict):
            continue
        link_type = link.get("type")
        if outward := link.get("outwardIssue"):
            linked.append(
                TicketLinkedIssue.from_api_response(
                    outward, link_type=link_type, direction=OUTWARD
                )
            )
        if inward := link.get("inwardIssue"):
            linked.append(
                TicketLinkedIssue.from_api_response(
                    inward, link_type=link_type, direction=INWARD
                )
            )
    return tuple(linked)


def extract_change_history(changelog: Any) -> tuple[ChangeHistoryEntry, ...]:
    """
    Extract changelog histories in payload order.

    Accepts either a changelog object (`{"histories": [...]}`, or the paged
    `{"values": [...]}` shape of the changelog endpoint) or a full issue
    payload with an embedded `changelog`. Entries are not sorted.

    Args:
        changelog: The changelog payload, or None

    Returns:
        Tuple of change history entries, empty when no changelog is given

    Raises:
        MalformedChangelogError: If the changelog is not a mapping or its
            histories are not a list
    """
    if changelog is None:
        return ()

    if not isinstance(changelog, dict):
        msg = f"Changelog must be a mapping, got {type(changelog).__name__}"
        raise MalformedChangelogError(msg)

    if "histories" not in changelog and "values" not in changelog:
        embedded = changelog.get("changelog")
        if isinstance(embedded, dict):
            changelog = embedded

    histories = changelog.get("histories", changelog.get("values"))
    if not isinstance(histories, list):
        msg = (
            "Changelog histories must be a list, got "
            f"{type(histories).__name__}"
        )
        raise MalformedChangelogError(msg)

    entries = []
    for history in histories:
        if not isinstance(history, dict):
            logger.debug(f"Skipping non-mapping changelog entry: {history!r}")
            continue
        entries.append(ChangeHistoryEntry.from_api_response(history))
    return tuple(entries)


def parse_sprint_descriptor(descriptor: Any) -> TicketSprintInfo | None:
    """
    Parse one sprint custom-field element.

    Jira Cloud returns sprint objects; older servers return descriptor
    strings of `key=value` pairs. Either form must carry an id, a name and a
    state.

    Args:
        descriptor: A sprint object or a legacy descriptor string

    Returns:
        TicketSprintInfo, or None if the element is not a valid sprint
    """
    if isinstance(descriptor, dict):
        values = descriptor
    elif isinstance(descriptor, str):
        match = _SPRINT_BODY_PATTERN.search(descriptor)
        body = match.group("body") if match else descriptor
        values = {
            key: value
            for key, value in _SPRINT_PAIR_PATTERN.findall(body)
            if value and value != "<null>"
        }
    else:
        return None

    if any(values.get(key) in (None, "") for key in _SPRINT_REQUIRED_KEYS):
        return None

    sprint = TicketSprintInfo.from_api_response(values)
    if sprint.id is None:
        return None
    return sprint


def extract_sprints(raw: dict[str, Any]) -> tuple[TicketSprintInfo, ...]:
    """
    Extract sprints from any custom field holding a list of sprint elements.

    Elements that look like sprints but cannot be parsed are skipped.
    """
    sprints: list[TicketSprintInfo] = []
    for field_id, value in _custom_fields(raw):
        if not isinstance(value, list):
            continue
        for item in value:
            looks_like_sprint = (isinstance(item, str) and "name=" in item) or (
                isinstance(item, dict) and "state" in item and "name" in item
            )
            if not looks_like_sprint:
                continue
            sprint = parse_sprint_descriptor(item)
            if sprint is None:
                logger.debug(f"Skipping unparseable sprint in {field_id}: {item!r}")
                continue
            sprints.append(sprint)
    return tuple(sprints)


def extract_epic(
    raw: dict[str, Any], config: ExtractionConfig | None = None
) -> TicketEpicInfo | None:
    """
    Extract the epic a ticket belongs to.

    The epic link field may hold just the epic key or the epic issue itself;
    the issue's parent is used when the link field is empty.
    """
    config = config or ExtractionConfig()
    fields = _fields(raw)
    epic_link = fields.get(config.epic_link_field) or fields.get("parent")
    if not epic_link:
        return None

    if isinstance(epic_link, str):
        return TicketEpicInfo(key=epic_link)

    if not isinstance(epic_link, dict):
        logger.debug(f"Ignoring epic link of type {type(epic_link).__name__}")
        return None

    epic_fields = epic_link.get("fields")
    if not isinstance(epic_fields, dict):
        epic_fields = {}
    summary = str(epic_fields.get("summary") or EMPTY_STRING)

    return TicketEpicInfo(
        key=str(epic_link.get("key") or EMPTY_STRING),
        name=str(epic_fields.get(config.epic_name_field) or summary),
        summary=summary,
        status=str(get_path(epic_fields, "status", "name", default=UNKNOWN)),
        color=str(epic_fields.get(config.epic_color_field) or DEFAULT_EPIC_COLOR),
    )


def extract_custom_fields(
    raw: dict[str, Any], field_names: dict[str, str] | None = None
) -> tuple[TicketCustomField, ...]:
    """
    Extract every non-null custom field in payload order.

    Args:
        raw: The raw issue payload
        field_names: Optional mapping of field id to display name

    Returns:
        Tuple of typed custom field values
    """
    field_names = field_names or {}
    return tuple(
        TicketCustomField.from_api_response(
            value, field_id=field_id, name=field_names.get(field_id)
        )
        for field_id, value in _custom_fields(raw)
    )


def extract_attachments(raw: dict[str, Any]) -> tuple[TicketAttachment, ...]:
    """Extract attachment metadata in payload order."""
    return tuple(
        TicketAttachment.from_api_response(attachment)
        for attachment in as_list(get_path(raw, "fields", "attachment"))
        if isinstance(attachment, dict)
    )


def extract_time_tracking(raw: dict[str, Any]) -> TicketTimeTracking:
    """Extract estimate and time-spent totals."""
    return TicketTimeTracking.from_api_response(
        get_path(raw, "fields", "timetracking")
    )


def extract_story_points(
    raw: dict[str, Any],
    field_names: dict[str, str] | None = None,
    config: ExtractionConfig | None = None,
) -> float | None:
    """
    Extract the story point estimate.

    The configured story point field ids are tried first, in order; then any
    custom field whose display name is a configured story point name.

    Returns:
        The first numeric value found, or None
    """
    config = config or ExtractionConfig()
    fields = _fields(raw)

    for field_id in config.story_point_fields:
        points = _as_number(fields.get(field_id))
        if points is not None:
            return points

    if field_names:
        for field_id, value in _custom_fields(raw):
            name = str(field_names.get(field_id) or "").strip().lower()
            if name in config.story_point_names:
                points = _as_number(value)
                if points is not None:
                    return points

    return None


def extract_complete(
    raw: dict[str, Any],
    changelog: Any = None,
    field_names: dict[str, str] | None = None,
    config: ExtractionConfig | None = None,
) -> TicketDetails:
    """
    Extract the complete record of one ticket.

    Args:
        raw: The raw issue payload
        changelog: Optional changelog payload; when None, a changelog
            embedded in the issue (`expand=changelog`) is used if present
        field_names: Optional mapping of custom field id to display name
        config: Field locations; defaults to ExtractionConfig()

    Returns:
        TicketDetails for the issue

    Raises:
        TicketExtractionError: If the required-field invariant is violated
        MalformedChangelogError: If the changelog has an unexpected shape
    """
    config = config or ExtractionConfig()
    metadata = extract_metadata(raw)

    if changelog is None:
        changelog = raw.get("changelog")

    fields = _fields(raw)
    details = TicketDetails(
        metadata=metadata,
        comments=extract_comments(raw),
        worklogs=extract_worklogs(raw),
        linked_issues=extract_linked_issues(raw),
        change_history=extract_change_history(changelog),
        sprints=extract_sprints(raw),
        epic=extract_epic(raw, config),
        custom_fields=extract_custom_fields(raw, field_names),
        attachments=extract_attachments(raw),
        time_tracking=extract_time_tracking(raw),
        story_points=extract_story_points(raw, field_names, config),
        due_date=parse_datetime(fields.get("duedate")),
        environment=adf_to_text(fields.get("environment")),
    )

    logger.debug(
        f"Extracted {metadata.key}: {len(details.comments)} comments, "
        f"{len(details.worklogs)} worklogs, "
        f"{len(details.change_history)} changelog entries"
    )
    return details


def generate_summary(details: TicketDetails, as_of: datetime) -> TicketSummary:
    """
    Build the flat summary of a ticket.

    Args:
        details: The extracted ticket
        as_of: Reference time for overdue and age computations

    Returns:
        TicketSummary of the ticket
    """
    metadata = details.metadata
    return TicketSummary(
        key=metadata.key,
        title=metadata.summary,
        status=metadata.status.name,
        type=metadata.issue_type.name,
        priority=metadata.priority.name,
        assignee=metadata.assignee_name,
        reporter=metadata.reporter.display_name,
        created=metadata.created,
        updated=metadata.updated,
        story_points=details.story_points,
        comments_count=len(details.comments),
        worklog_count=len(details.worklogs),
        total_time_spent_seconds=details.total_time_spent_seconds,
        attachments_count=len(details.attachments),
        changes_count=len(details.change_history),
        linked_issues_count=len(details.linked_issues),
        sprints=tuple(sprint.name for sprint in details.sprints),
        epic=details.epic.name if details.epic else None,
        labels=metadata.labels,
        components=tuple(component.name for component in metadata.components),
        has_time_tracking=details.time_tracking.has_data,
        is_overdue=bool(details.due_date and details.due_date < as_of),
        has_description=bool(metadata.description),
        is_resolved=metadata.resolution is not None,
        days_since_created=max(0, days_between(metadata.created, as_of)),
        days_since_updated=max(0, days_between(metadata.last_updated, as_of)),
    )
