"""Configuration module for the Jira ticket source."""

import os
from dataclasses import dataclass
from typing import Literal

from ..utils.env import is_env_ssl_verify
from ..utils.urls import is_atlassian_cloud_url


@dataclass
class JiraConfig:
    """Jira API configuration.

    Handles authentication for both Jira Cloud (using username/API token)
    and Jira Server/Data Center (using personal access token).
    """

    url: str  # Base URL for Jira
    auth_type: Literal["basic", "token"]  # Authentication type
    username: str | None = None  # Email or username (Cloud)
    api_token: str | None = None  # API token (Cloud)
    personal_token: str | None = None  # Personal access token (Server/DC)
    ssl_verify: bool = True  # Whether to verify SSL certificates

    @property
    def is_cloud(self) -> bool:
        """Check if this is a cloud instance.

        Returns:
            True if this is a cloud instance (atlassian.net), False otherwise.
            Localhost URLs are always considered non-cloud (Server/Data Center).
        """
        return is_atlassian_cloud_url(self.url)

    @classmethod
    def from_env(cls) -> "JiraConfig":
        """Create configuration from environment variables.

        Returns:
            JiraConfig with values from environment variables

        Raises:
            ValueError: If required environment variables are missing or invalid
        """
        url = os.getenv("JIRA_URL")
        if not url:
            msg = "Missing required JIRA_URL environment variable"
            raise ValueError(msg)

        username = os.getenv("JIRA_USERNAME")
        api_token = os.getenv("JIRA_API_TOKEN")
        personal_token = os.getenv("JIRA_PERSONAL_TOKEN")

        match (is_atlassian_cloud_url(url), bool(username and api_token), bool(personal_token)):
            case (True, True, _):
                auth_type = "basic"
            case (True, False, _):
                msg = "Cloud authentication requires JIRA_USERNAME and JIRA_API_TOKEN"
                raise ValueError(msg)
            case (False, _, True):
                auth_type = "token"
            case (False, True, False):
                auth_type = "basic"
            case _:
                msg = (
                    "Server/Data Center authentication requires JIRA_PERSONAL_TOKEN "
                    "or JIRA_USERNAME and JIRA_API_TOKEN"
                )
                raise ValueError(msg)

        # SSL verification (for Server/DC)
        ssl_verify = is_env_ssl_verify("JIRA_SSL_VERIFY")

        return cls(
            url=url,
            auth_type=auth_type,
            username=username,
            api_token=api_token,
            personal_token=personal_token,
            ssl_verify=ssl_verify,
        )
