"""Module for ticket source protocol definitions."""

from abc import abstractmethod
from typing import Any, Protocol, runtime_checkable


@runtime_checkable
class TicketSource(Protocol):
    """Protocol defining where raw ticket payloads come from."""

    @abstractmethod
    def get_issue(self, issue_key: str) -> dict[str, Any]:
        """
        Fetch the raw payload of one issue, with all fields.

        Args:
            issue_key: The issue key (e.g., PROJECT-123)

        Returns:
            The raw issue payload

        Raises:
            TicketSourceError: If the issue cannot be fetched
        """

    @abstractmethod
    def get_changelog(self, issue_key: str) -> dict[str, Any] | None:
        """
        Fetch the complete changelog of one issue.

        Args:
            issue_key: The issue key (e.g., PROJECT-123)

        Returns:
            A changelog payload (`{"histories": [...]}`), or None if the
            source has none

        Raises:
            TicketSourceError: If the changelog cannot be fetched
        """

    @abstractmethod
    def get_field_names(self) -> dict[str, str]:
        """
        Return the mapping of field id to display name.

        Raises:
            TicketSourceError: If the field list cannot be fetched
        """

    @abstractmethod
    def search_issue_keys(self, jql: str, limit: int = 50) -> list[str]:
        """
        Search issues with JQL and return their keys.

        Args:
            jql: JQL query string
            limit: Maximum number of keys to return

        Returns:
            Issue keys in search order

        Raises:
            TicketSourceError: If the search fails
        """
