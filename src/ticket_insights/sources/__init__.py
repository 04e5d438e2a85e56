"""Ticket sources: where raw issue payloads come from."""

from .config import JiraConfig
from .jira import JiraTicketSource
from .protocols import TicketSource

__all__ = ["JiraConfig", "JiraTicketSource", "TicketSource"]
