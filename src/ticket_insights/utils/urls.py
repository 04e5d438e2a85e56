"""URL-related utility functions for ticket insights."""

import re
from urllib.parse import urlparse

_PRIVATE_HOST_PATTERN = re.compile(
    r"^(localhost$|127\.|10\.|192\.168\.|172\.(1[6-9]|2[0-9]|3[0-1])\.)"
)
_CLOUD_DOMAINS = (
    ".atlassian.net",
    ".jira.com",
    ".jira-dev.com",
    "api.atlassian.com",
    ".atlassian-us-gov-mod.net",
    ".atlassian-us-gov.net",
)


def is_atlassian_cloud_url(url: str | None) -> bool:
    """Determine if a URL belongs to Atlassian Cloud or Server/Data Center.

    Localhost and private-network addresses are always Server/Data Center.

    Args:
        url: The URL to check

    Returns:
        True if the URL is for an Atlassian Cloud instance
    """
    if not url:
        return False

    hostname = urlparse(url).hostname or ""
    if _PRIVATE_HOST_PATTERN.match(hostname):
        return False
    return any(domain in hostname for domain in _CLOUD_DOMAINS)
