"""
Utility functions for ticket insights.
This package provides date parsing, environment and URL helpers used throughout
the codebase.
"""

from .date import (
    MS_PER_DAY,
    MS_PER_HOUR,
    MS_PER_MINUTE,
    days_between,
    millis_to_days,
    parse_datetime,
    to_millis,
)
from .env import getenv_float, getenv_int, getenv_list, is_env_ssl_verify
from .urls import is_atlassian_cloud_url

__all__ = [
    "MS_PER_DAY",
    "MS_PER_HOUR",
    "MS_PER_MINUTE",
    "days_between",
    "getenv_float",
    "getenv_int",
    "getenv_list",
    "is_atlassian_cloud_url",
    "is_env_ssl_verify",
    "millis_to_days",
    "parse_datetime",
    "to_millis",
]
