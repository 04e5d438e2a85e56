"""Ticket analysis over a ticket source: single, bulk and search-driven."""

import logging
from collections.abc import Sequence
from concurrent.futures import ThreadPoolExecutor
from datetime import datetime, timezone
from typing import Any

from .analysis import TicketAnalyzer
from .config import AnalyzerConfig, ExtractionConfig
from .exceptions import TicketSourceError
from .extractor import extract_complete
from .logging_config import log_operation
from .models.report import (
    BulkAnalysisResult,
    FilterCriteria,
    GroupBy,
    PortfolioReport,
    ReportMetric,
    TicketAnalysis,
)
from .reporting import AVAILABLE_METRICS, build_report, matches_filter_criteria
from .sources.protocols import TicketSource

logger = logging.getLogger("ticket-insights.service")

DEFAULT_BATCH_SIZE = 5
DEFAULT_SEARCH_LIMIT = 50


class TicketInsightsService:
    """Fetches tickets from a source, extracts them and analyses them."""

    def __init__(
        self,
        source: TicketSource | None = None,
        extraction_config: ExtractionConfig | None = None,
        analyzer_config: AnalyzerConfig | None = None,
    ) -> None:
        """
        Initialize the service.

        Args:
            source: Where raw payloads come from; only analyze_payload works
                without one
            extraction_config: Field locations; defaults to ExtractionConfig()
            analyzer_config: Analysis configuration; defaults to AnalyzerConfig()
        """
        self.source = source
        self.extraction_config = extraction_config or ExtractionConfig()
        self.analyzer = TicketAnalyzer(analyzer_config)

    def _require_source(self) -> TicketSource:
        if self.source is None:
            msg = "No ticket source configured"
            raise TicketSourceError(msg)
        return self.source

    def analyze_payload(
        self,
        raw: dict[str, Any],
        changelog: Any = None,
        field_names: dict[str, str] | None = None,
        as_of: datetime | None = None,
    ) -> TicketAnalysis:
        """
        Extract and analyse one raw payload.

        Raises:
            TicketExtractionError: If the payload violates the required-field
                invariant or the changelog is malformed
        """
        details = extract_complete(
            raw,
            changelog=changelog,
            field_names=field_names,
            config=self.extraction_config,
        )
        insights = self.analyzer.analyze_ticket(details, as_of=as_of)
        return TicketAnalysis(details=details, insights=insights)

    def _field_names(self) -> dict[str, str] | None:
        try:
            return self._require_source().get_field_names()
        except TicketSourceError as e:
            logger.warning(f"Could not fetch field names: {str(e)}")
            return None

    def analyze_ticket(
        self,
        issue_key: str,
        include_changelog: bool = True,
        as_of: datetime | None = None,
        field_names: dict[str, str] | None = None,
    ) -> TicketAnalysis:
        """
        Fetch and analyse one ticket.

        A changelog that cannot be fetched is logged and skipped; the changelog
        embedded in the issue payload is used instead, when present.

        Args:
            issue_key: The issue key (e.g., PROJECT-123)
            include_changelog: Whether to fetch the complete changelog
            as_of: Reference time; defaults to now (UTC)
            field_names: Field id to name mapping; fetched from the source
                when None

        Returns:
            TicketAnalysis for the ticket

        Raises:
            TicketSourceError: If the issue cannot be fetched
            TicketExtractionError: If the payload cannot be extracted
        """
        source = self._require_source()
        raw = source.get_issue(issue_key)

        changelog = None
        if include_changelog:
            try:
                changelog = source.get_changelog(issue_key)
            except TicketSourceError as e:
                logger.warning(f"Could not fetch changelog for {issue_key}: {str(e)}")

        if field_names is None:
            field_names = self._field_names()

        return self.analyze_payload(
            raw, changelog=changelog, field_names=field_names, as_of=as_of
        )

    def bulk_analyze(
        self,
        issue_keys: Sequence[str],
        batch_size: int = DEFAULT_BATCH_SIZE,
        max_workers: int | None = None,
        criteria: FilterCriteria | None = None,
        as_of: datetime | None = None,
        include_changelog: bool = True,
    ) -> BulkAnalysisResult:
        """
        Analyse many tickets concurrently.

        Tickets are processed batch by batch, each batch on a thread pool with
        one task per ticket. A failing ticket is recorded in `errors` and the
        run continues. All tickets share one reference time.

        Args:
            issue_keys: Issue keys to analyse
            batch_size: Number of tickets per batch
            max_workers: Threads per batch; defaults to batch_size
            criteria: Optional filter applied to successful analyses
            as_of: Reference time; defaults to now (UTC)
            include_changelog: Whether to fetch complete changelogs

        Returns:
            BulkAnalysisResult with analyses in input order
        """
        if batch_size < 1:
            msg = "batch_size must be at least 1"
            raise ValueError(msg)

        keys = list(issue_keys)
        as_of = as_of or datetime.now(timezone.utc)
        workers = max_workers or batch_size
        analyses: list[TicketAnalysis] = []
        errors: list[dict[str, str]] = []
        filtered_count = 0

        with log_operation(logger, "bulk_analyze", ticket_count=len(keys)):
            field_names = self._field_names() if keys else None

            def analyze(issue_key: str) -> TicketAnalysis | Exception:
                try:
                    return self.analyze_ticket(
                        issue_key,
                        include_changelog=include_changelog,
                        as_of=as_of,
                        field_names=field_names,
                    )
                except Exception as e:
                    return e

            with ThreadPoolExecutor(max_workers=workers) as executor:
                for start in range(0, len(keys), batch_size):
                    batch = keys[start : start + batch_size]
                    # map() yields results in submission order
                    for issue_key, outcome in zip(batch, executor.map(analyze, batch)):
                        if isinstance(outcome, Exception):
                            logger.warning(f"Error analyzing {issue_key}: {str(outcome)}")
                            errors.append({"issue_key": issue_key, "error": str(outcome)})
                        elif matches_filter_criteria(outcome, criteria):
                            analyses.append(outcome)
                        else:
                            filtered_count += 1

            logger.info(
                f"Analyzed {len(analyses)} of {len(keys)} tickets "
                f"({len(errors)} errors, {filtered_count} filtered out)"
            )

        return BulkAnalysisResult(
            analyses=tuple(analyses),
            errors=tuple(errors),
            total_count=len(keys),
            filtered_count=filtered_count,
        )

    def search_and_analyze(
        self,
        jql: str,
        max_results: int = DEFAULT_SEARCH_LIMIT,
        criteria: FilterCriteria | None = None,
        as_of: datetime | None = None,
        batch_size: int = DEFAULT_BATCH_SIZE,
    ) -> BulkAnalysisResult:
        """
        Search tickets with JQL and analyse every match.

        Raises:
            TicketSourceError: If the search fails
        """
        keys = self._require_source().search_issue_keys(jql, limit=max_results)
        logger.debug(f"JQL search returned {len(keys)} issues")
        return self.bulk_analyze(
            keys, batch_size=batch_size, criteria=criteria, as_of=as_of
        )

    def generate_report(
        self,
        issue_keys: Sequence[str],
        group_by: GroupBy,
        metrics: Sequence[ReportMetric] = AVAILABLE_METRICS,
        as_of: datetime | None = None,
    ) -> tuple[PortfolioReport, BulkAnalysisResult]:
        """
        Analyse tickets and build a portfolio report over the successful ones.

        Returns:
            Tuple of (report, the underlying bulk result)
        """
        as_of = as_of or datetime.now(timezone.utc)
        result = self.bulk_analyze(issue_keys, as_of=as_of)
        report = build_report(
            result.analyses,
            group_by,
            metrics,
            generated_at=as_of,
            config=self.analyzer.config,
        )
        return report, result
