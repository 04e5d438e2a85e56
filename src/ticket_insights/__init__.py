import json
import logging
import os
import sys
from datetime import datetime, timezone
from typing import Any

import click
from dotenv import load_dotenv

__version__ = "0.1.0"

from .analysis import TicketAnalyzer
from .config import AnalyzerConfig, ExtractionConfig
from .exceptions import TicketInsightsError
from .extractor import extract_complete, generate_summary
from .logging_config import log_operation, setup_logger
from .models.report import FilterCriteria
from .reporting import AVAILABLE_METRICS, build_report
from .service import DEFAULT_SEARCH_LIMIT, TicketInsightsService
from .sources import JiraTicketSource
from .utils.date import parse_datetime

logger = logging.getLogger("ticket-insights")

GROUP_BY_CHOICES = ("status", "assignee", "priority", "epic", "sprint", "risk")
RISK_LEVEL_CHOICES = ("low", "medium", "high")


def _echo_json(data: Any) -> None:
    click.echo(json.dumps(data, indent=2, ensure_ascii=False))


def _load_json_file(path: str) -> Any:
    try:
        with open(path, encoding="utf-8") as f:
            return json.load(f)
    except json.JSONDecodeError as e:
        msg = f"{path} is not valid JSON: {e}"
        raise click.ClickException(msg) from e


def _parse_as_of(
    ctx: click.Context, param: click.Parameter, value: str | None
) -> datetime:
    """Parse --as-of, defaulting to now (UTC)."""
    if value is None:
        return datetime.now(timezone.utc)
    parsed = parse_datetime(value)
    if parsed is None:
        msg = f"'{value}' is not a valid timestamp"
        raise click.BadParameter(msg)
    return parsed


def _field_names_from_json(data: Any) -> dict[str, str]:
    """Accept either an id->name mapping or the field list of the /field endpoint."""
    if isinstance(data, dict):
        return {str(k): str(v) for k, v in data.items()}
    if isinstance(data, list):
        return {
            str(f["id"]): str(f["name"])
            for f in data
            if isinstance(f, dict) and f.get("id") and f.get("name")
        }
    msg = "Field names must be a JSON object or a list of field definitions"
    raise click.ClickException(msg)


def _build_service() -> TicketInsightsService:
    try:
        return TicketInsightsService(
            source=JiraTicketSource(),
            extraction_config=ExtractionConfig.from_env(),
            analyzer_config=AnalyzerConfig.from_env(),
        )
    except ValueError as e:
        raise click.ClickException(str(e)) from e


@click.group()
@click.version_option(__version__, prog_name="ticket-insights")
@click.option(
    "-v",
    "--verbose",
    count=True,
    help="Increase verbosity (can be used multiple times)",
)
@click.option(
    "--env-file", type=click.Path(exists=True, dir_okay=False), help="Path to .env file"
)
@click.option(
    "--log-dir",
    help="Directory to store log files",
)
@click.option(
    "--log-to-file/--no-log-to-file",
    default=False,
    help="Enable/disable file logging",
)
@click.option(
    "--jira-url",
    help="Jira URL (e.g., https://your-domain.atlassian.net or https://jira.your-company.com)",
)
@click.option("--jira-username", help="Jira username/email (for Jira Cloud)")
@click.option("--jira-token", help="Jira API token (for Jira Cloud)")
@click.option(
    "--jira-personal-token",
    help="Jira Personal Access Token (for Jira Server/Data Center)",
)
@click.option(
    "--jira-ssl-verify/--no-jira-ssl-verify",
    default=None,
    help="Verify SSL certificates for Jira Server/Data Center (default: verify)",
)
def main(
    verbose: int,
    env_file: str | None,
    log_dir: str | None,
    log_to_file: bool,
    jira_url: str | None,
    jira_username: str | None,
    jira_token: str | None,
    jira_personal_token: str | None,
    jira_ssl_verify: bool | None,
) -> None:
    """Ticket Insights - analytics for Jira tickets.

    Extracts normalized records from Jira issue payloads and derives cycle
    time, activity, collaboration, quality and risk insights.
    """
    # Configure logging based on verbosity
    logging_level = None
    if verbose == 1:
        logging_level = "INFO"
    elif verbose >= 2:
        logging_level = "DEBUG"

    setup_logger(
        name="ticket-insights",
        level=logging_level,
        log_to_file=log_to_file,
        log_dir=log_dir,
    )

    # Load environment variables from file if specified, otherwise try default .env
    if env_file:
        logger.info(f"Loading environment from file: {env_file}")
        load_dotenv(env_file)
    else:
        logger.debug("Attempting to load environment from default .env file")
        load_dotenv()

    # Set environment variables from command line arguments if provided
    if jira_url:
        os.environ["JIRA_URL"] = jira_url
    if jira_username:
        os.environ["JIRA_USERNAME"] = jira_username
    if jira_token:
        os.environ["JIRA_API_TOKEN"] = jira_token
    if jira_personal_token:
        os.environ["JIRA_PERSONAL_TOKEN"] = jira_personal_token
    if jira_ssl_verify is not None:
        os.environ["JIRA_SSL_VERIFY"] = str(jira_ssl_verify).lower()


@main.command()
@click.argument("issue_json", type=click.Path(exists=True, dir_okay=False))
@click.option(
    "--changelog",
    "changelog_path",
    type=click.Path(exists=True, dir_okay=False),
    help="Changelog JSON (defaults to the changelog embedded in the issue)",
)
@click.option(
    "--field-names",
    "field_names_path",
    type=click.Path(exists=True, dir_okay=False),
    help="Field id to name mapping, or the output of the /field endpoint",
)
@click.option(
    "--as-of",
    callback=_parse_as_of,
    help="Reference time for age and risk computations (default: now)",
)
@click.option("--summary", is_flag=True, help="Include the flat ticket summary")
def analyze(
    issue_json: str,
    changelog_path: str | None,
    field_names_path: str | None,
    as_of: datetime,
    summary: bool,
) -> None:
    """Analyze an issue payload saved as JSON."""
    raw = _load_json_file(issue_json)
    changelog = _load_json_file(changelog_path) if changelog_path else None
    field_names = (
        _field_names_from_json(_load_json_file(field_names_path))
        if field_names_path
        else None
    )

    try:
        extraction_config = ExtractionConfig.from_env()
        analyzer = TicketAnalyzer(AnalyzerConfig.from_env())
    except ValueError as e:
        raise click.ClickException(str(e)) from e

    try:
        details = extract_complete(
            raw, changelog=changelog, field_names=field_names, config=extraction_config
        )
    except TicketInsightsError as e:
        raise click.ClickException(str(e)) from e

    insights = analyzer.analyze_ticket(details, as_of=as_of)

    output: dict[str, Any] = {"insights": insights.to_simplified_dict()}
    if summary:
        output["summary"] = generate_summary(details, as_of).to_simplified_dict()
    _echo_json(output)


@main.command()
@click.argument("issue_keys", nargs=-1, required=True)
@click.option(
    "--as-of",
    callback=_parse_as_of,
    help="Reference time for age and risk computations (default: now)",
)
@click.option(
    "--changelog/--no-changelog",
    default=True,
    help="Fetch the complete changelog of each issue",
)
@click.option("--batch-size", default=5, show_default=True, type=click.IntRange(min=1))
def fetch(
    issue_keys: tuple[str, ...], as_of: datetime, changelog: bool, batch_size: int
) -> None:
    """Fetch issues from Jira and analyze them."""
    service = _build_service()

    with log_operation(logger, "fetch", ticket_count=len(issue_keys)):
        result = service.bulk_analyze(
            issue_keys,
            batch_size=batch_size,
            as_of=as_of,
            include_changelog=changelog,
        )

    _echo_json(result.to_simplified_dict())
    if result.error_count and not result.success_count:
        sys.exit(1)


@main.command()
@click.option("--jql", required=True, help="JQL query selecting the tickets")
@click.option(
    "--group-by",
    type=click.Choice(GROUP_BY_CHOICES),
    default="status",
    show_default=True,
)
@click.option(
    "--metric",
    "metrics",
    type=click.Choice(AVAILABLE_METRICS),
    multiple=True,
    help="Metric to aggregate (repeatable; default: all)",
)
@click.option(
    "--max-results",
    default=DEFAULT_SEARCH_LIMIT,
    show_default=True,
    type=click.IntRange(min=1),
)
@click.option(
    "--risk-level",
    "risk_levels",
    type=click.Choice(RISK_LEVEL_CHOICES),
    multiple=True,
    help="Only keep tickets with this overall risk (repeatable)",
)
@click.option(
    "--as-of",
    callback=_parse_as_of,
    help="Reference time for age and risk computations (default: now)",
)
def report(
    jql: str,
    group_by: str,
    metrics: tuple[str, ...],
    max_results: int,
    risk_levels: tuple[str, ...],
    as_of: datetime,
) -> None:
    """Search issues with JQL and print a grouped portfolio report."""
    service = _build_service()
    criteria = FilterCriteria(risk_levels=risk_levels) if risk_levels else None

    try:
        result = service.search_and_analyze(
            jql, max_results=max_results, criteria=criteria, as_of=as_of
        )
    except (TicketInsightsError, ValueError) as e:
        raise click.ClickException(str(e)) from e

    portfolio = build_report(
        result.analyses,
        group_by,
        metrics or AVAILABLE_METRICS,
        generated_at=as_of,
        config=service.analyzer.config,
    )
    output = portfolio.to_simplified_dict()
    if result.errors:
        output["errors"] = list(result.errors)
    _echo_json(output)


__all__ = [
    "main",
    "__version__",
    "setup_logger",
    "log_operation",
    "TicketAnalyzer",
    "TicketInsightsService",
    "extract_complete",
    "generate_summary",
]

if __name__ == "__main__":
    main()
