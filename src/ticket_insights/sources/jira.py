"""Jira REST ticket source."""

import logging
from typing import Any, NoReturn

from atlassian import Jira
from requests.exceptions import HTTPError, RequestException

from ..exceptions import TicketSourceAuthenticationError, TicketSourceError
from .config import JiraConfig

logger = logging.getLogger("ticket-insights.sources")

CHANGELOG_PAGE_SIZE = 100
CLOUD_SEARCH_PAGE_SIZE = 100  # v3 API max per request
SERVER_SEARCH_PAGE_SIZE = 50  # Server/DC maximum


class JiraTicketSource:
    """Ticket source reading raw issue payloads from the Jira REST API."""

    def __init__(self, config: JiraConfig | None = None) -> None:
        """Initialize the Jira client with a given configuration.

        Args:
            config: Jira configuration object. If None, will be loaded from
                environment variables.

        Raises:
            ValueError: If the configuration cannot be loaded from the environment
        """
        self.config = config if config is not None else JiraConfig.from_env()

        if self.config.auth_type == "token":
            self.jira = Jira(
                url=self.config.url,
                token=self.config.personal_token,
                cloud=self.config.is_cloud,
                verify_ssl=self.config.ssl_verify,
            )
        else:  # basic auth
            self.jira = Jira(
                url=self.config.url,
                username=self.config.username,
                password=self.config.api_token,
                cloud=self.config.is_cloud,
                verify_ssl=self.config.ssl_verify,
            )

        self._field_names: dict[str, str] | None = None

    def _raise_source_error(self, action: str, error: Exception) -> NoReturn:
        """Translate a transport failure into a TicketSourceError."""
        if isinstance(error, HTTPError) and error.response is not None:
            status = error.response.status_code
            if status in (401, 403):
                msg = (
                    f"Authentication failed for Jira API ({status}) while {action}. "
                    "Token may be expired or invalid. Please verify credentials."
                )
                logger.error(msg)
                raise TicketSourceAuthenticationError(msg) from error
            msg = f"Jira API returned {status} while {action}: {error}"
        else:
            msg = f"Error while {action}: {error}"
        logger.error(msg)
        raise TicketSourceError(msg) from error

    def get_issue(self, issue_key: str) -> dict[str, Any]:
        """Fetch an issue with all fields and its embedded changelog."""
        try:
            issue = self.jira.issue(issue_key, fields="*all", expand="changelog")
        except RequestException as e:
            self._raise_source_error(f"fetching issue {issue_key}", e)

        if not isinstance(issue, dict) or not issue:
            msg = f"Issue {issue_key} not found"
            raise TicketSourceError(msg)
        return issue

    def get_changelog(self, issue_key: str) -> dict[str, Any] | None:
        """
        Fetch the complete changelog of an issue.

        Jira Cloud pages the changelog (`values` plus `isLast`); Server/Data
        Center returns it in one `histories` object.
        """
        histories: list[Any] = []
        start = 0
        received = False
        try:
            while True:
                page = self.jira.get_issue_changelog(
                    issue_key, start=start, limit=CHANGELOG_PAGE_SIZE
                )
                if not isinstance(page, dict):
                    break
                received = True

                values = page.get("values", page.get("histories"))
                if not isinstance(values, list) or not values:
                    break
                histories.extend(values)

                if "values" not in page or page.get("isLast", True):
                    break
                start += len(values)
        except RequestException as e:
            self._raise_source_error(f"fetching changelog of {issue_key}", e)

        if not received:
            return None
        return {"histories": histories}

    def get_field_names(self) -> dict[str, str]:
        """Return the field id to display name mapping, cached after the first call."""
        if self._field_names is not None:
            return self._field_names

        try:
            fields = self.jira.get_all_fields()
        except RequestException as e:
            self._raise_source_error("fetching field definitions", e)

        names: dict[str, str] = {}
        for field in fields if isinstance(fields, list) else []:
            if isinstance(field, dict) and field.get("id") and field.get("name"):
                names[str(field["id"])] = str(field["name"])

        self._field_names = names
        logger.debug(f"Loaded {len(names)} field names")
        return names

    def search_issue_keys(self, jql: str, limit: int = 50) -> list[str]:
        """
        Search issues with JQL and return their keys.

        Raises:
            ValueError: If the JQL query is empty
            TicketSourceError: If the search fails
        """
        if not jql or not jql.strip():
            raise ValueError("JQL query cannot be empty")

        try:
            if self.config.is_cloud:
                issues = self._search_cloud(jql, limit)
            else:
                issues = self._search_server(jql, limit)
        except RequestException as e:
            self._raise_source_error(f"searching issues with JQL '{jql}'", e)

        keys = [str(issue["key"]) for issue in issues if issue.get("key")]
        return keys[:limit]

    def _search_cloud(self, jql: str, limit: int) -> list[dict[str, Any]]:
        """Search with the v3 JQL endpoint and nextPageToken pagination."""
        request_body: dict[str, Any] = {
            "jql": jql,
            "maxResults": min(limit, CLOUD_SEARCH_PAGE_SIZE),
            "fields": ["key"],
        }
        issues: list[dict[str, Any]] = []

        while len(issues) < limit:
            response = self.jira.post("rest/api/3/search/jql", json=request_body)
            if not isinstance(response, dict):
                msg = f"Unexpected return value type from v3 search API: {type(response)}"
                raise TicketSourceError(msg)

            issues.extend(i for i in response.get("issues", []) if isinstance(i, dict))

            next_token = response.get("nextPageToken")
            if not next_token:
                break
            request_body["nextPageToken"] = next_token

        return issues

    def _search_server(self, jql: str, limit: int) -> list[dict[str, Any]]:
        """Search with the v2 JQL endpoint and startAt pagination."""
        issues: list[dict[str, Any]] = []
        start = 0

        while len(issues) < limit:
            page_size = min(limit - len(issues), SERVER_SEARCH_PAGE_SIZE)
            response = self.jira.jql(jql, fields="key", start=start, limit=page_size)
            if not isinstance(response, dict):
                msg = f"Unexpected return value type from `jira.jql`: {type(response)}"
                raise TicketSourceError(msg)

            page = [i for i in response.get("issues", []) if isinstance(i, dict)]
            issues.extend(page)

            total = response.get("total", 0)
            start += len(page)
            if not page or start >= total:
                break

        return issues
