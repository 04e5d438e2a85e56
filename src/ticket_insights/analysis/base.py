"""Base class for ticket analysis passes."""

import logging

from ..config import AnalyzerConfig

logger = logging.getLogger("ticket-insights.analysis")


class AnalyzerBase:
    """Base for the analysis mixins: holds configuration and status lookups."""

    def __init__(self, config: AnalyzerConfig | None = None) -> None:
        """Initialize the analyzer with a given configuration.

        Args:
            config: Analysis configuration. Defaults to AnalyzerConfig().
        """
        self.config = config if config is not None else AnalyzerConfig()

    def _status_bucket(self, status: str) -> str | None:
        """Return the cycle time bucket of a status name, if it has one."""
        return self.config.status_buckets.get(status.strip().lower())

    @staticmethod
    def _status_in(status: str | None, statuses: tuple[str, ...]) -> bool:
        """Whether a status name is in a lower-cased status list."""
        return bool(status) and status.strip().lower() in statuses
