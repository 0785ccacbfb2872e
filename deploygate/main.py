"""deploygate - Main Entry Point."""

import asyncio
import json
import sys

import click
import structlog
from dotenv import load_dotenv
from rich.console import Console
from rich.panel import Panel
from rich.text import Text

from deploygate import __version__, evaluator, static_analysis
from deploygate.config import load_settings
from deploygate.errors import MalformedReportError
from deploygate.tools.artifacts import archive_static_analysis_run, archive_validation_run

EXIT_MALFORMED = 2

load_dotenv()


def _log_processors(log_format: str) -> list:
    renderer = (
        structlog.dev.ConsoleRenderer()
        if log_format == "console"
        else structlog.processors.JSONRenderer()
    )
    return [structlog.processors.TimeStamper(fmt="iso"), renderer]


# Configure structured logging; stdout is reserved for verdicts
structlog.configure(
    processors=_log_processors("json"),
    context_class=dict,
    logger_factory=structlog.PrintLoggerFactory(file=sys.stderr),
)

logger = structlog.get_logger()
console = Console()
err_console = Console(stderr=True)


def _source_name(stream) -> str:
    # stdin arrives as a bare binary buffer without a name
    return getattr(stream, "name", "<stdin>")


def _print_verdict(summary: str, blocking: bool) -> None:
    console.print(
        Panel.fit(
            Text(summary),
            border_style="red" if blocking else "green",
        )
    )


def _fail_malformed(source: str, error: Exception) -> None:
    logger.error("report_malformed", source=source, error=str(error))
    err_console.print(Text(f"✗ Malformed report: {error}", style="red"))
    sys.exit(EXIT_MALFORMED)


@click.group()
@click.version_option(version=__version__)
@click.pass_context
def cli(ctx):
    """deploygate - merge gate for check-only deploy and PMD reports."""
    ctx.obj = load_settings()
    # Only the renderer changes; the stderr logger factory stays in place
    structlog.configure(processors=_log_processors(ctx.obj.log_format))


@cli.command()
@click.argument("report", type=click.File("rb"), default="-")
@click.option("--json", "as_json", is_flag=True, help="Print the verdict as JSON")
@click.option("--archive-dir", default=None, help="Archive report and verdict under this directory")
@click.option("--build-id", default=None, help="Archive folder name for this run")
@click.pass_obj
def evaluate(settings, report, as_json: bool, archive_dir: str | None, build_id: str | None):
    """Evaluate a deploy/validate JSON report (file path or - for stdin)."""
    raw = report.read()
    source = _source_name(report)
    logger.info("report_loaded", source=source, size=len(raw))

    try:
        verdict = evaluator.evaluate(raw)
    except MalformedReportError as e:
        _fail_malformed(source, e)

    logger.info(
        "verdict_computed",
        outcome=verdict.outcome,
        component_failures=verdict.component_failure_count,
        test_failures=verdict.test_failure_count,
    )

    if as_json:
        click.echo(verdict.model_dump_json(indent=2))
    else:
        _print_verdict(verdict.summary(), verdict.blocking)

    archive_dir = archive_dir or settings.archive_dir
    if archive_dir:
        try:
            output_dir = asyncio.run(
                archive_validation_run(
                    raw_report=raw,
                    verdict=verdict,
                    archive_dir=archive_dir,
                    build_id=build_id or settings.build_id,
                )
            )
        except (OSError, ValueError) as e:
            logger.error("archive_failed", archive_dir=archive_dir, error=str(e))
            err_console.print(Text(f"✗ Could not archive artifacts: {e}", style="red"))
            sys.exit(EXIT_MALFORMED)
        if not as_json:
            console.print(f"[green]✓ Artifacts saved:[/green] {output_dir}")

    sys.exit(verdict.exit_code)


@cli.command()
@click.argument("report", type=click.File("rb"))
@click.option(
    "--max-priority",
    type=click.IntRange(1, 5),
    default=None,
    help="Least severe PMD priority that blocks (default 2)",
)
@click.option("--json", "as_json", is_flag=True, help="Print the verdict as JSON")
@click.option("--archive-dir", default=None, help="Archive report and verdict under this directory")
@click.option("--build-id", default=None, help="Archive folder name for this run")
@click.pass_obj
def pmd(
    settings,
    report,
    max_priority: int | None,
    as_json: bool,
    archive_dir: str | None,
    build_id: str | None,
):
    """Evaluate a PMD JSON report."""
    raw = report.read()
    max_priority = max_priority or settings.pmd_max_priority
    source = _source_name(report)
    logger.info("pmd_report_loaded", source=source, size=len(raw), max_priority=max_priority)

    try:
        verdict = static_analysis.evaluate_pmd(raw, max_priority=max_priority)
    except MalformedReportError as e:
        _fail_malformed(source, e)

    logger.info(
        "pmd_verdict_computed",
        outcome=verdict.outcome,
        blocking=verdict.blocking_count,
        violations=verdict.violation_count,
        processing_errors=verdict.processing_error_count,
    )

    if as_json:
        click.echo(verdict.model_dump_json(indent=2))
    else:
        _print_verdict(verdict.summary(), verdict.blocking)

    archive_dir = archive_dir or settings.archive_dir
    if archive_dir:
        try:
            output_dir = asyncio.run(
                archive_static_analysis_run(
                    raw_report=raw,
                    verdict=verdict,
                    archive_dir=archive_dir,
                    build_id=build_id or settings.build_id,
                )
            )
        except (OSError, ValueError) as e:
            logger.error("archive_failed", archive_dir=archive_dir, error=str(e))
            err_console.print(Text(f"✗ Could not archive artifacts: {e}", style="red"))
            sys.exit(EXIT_MALFORMED)
        if not as_json:
            console.print(f"[green]✓ Artifacts saved:[/green] {output_dir}")

    sys.exit(verdict.exit_code)


@cli.command()
@click.option("--reason", default="no_metadata", help="Why there is nothing to validate")
@click.option("--output", type=click.File("w"), default="-", help="Marker file (default stdout)")
def skip(reason: str, output):
    """Write a skip marker for a delta with no deployable metadata."""
    output.write(json.dumps({"skipped": True, "reason": reason}) + "\n")
    logger.info("skip_marker_written", reason=reason, output=_source_name(output))


@cli.command()
def version():
    """Show version information."""
    console.print(
        Panel(
            "[bold]deploygate[/bold]\n"
            f"Version: {__version__}\n"
            "Gates: check-only deploy ✓ PMD static analysis ✓",
            border_style="cyan",
        )
    )


if __name__ == "__main__":
    try:
        cli()
    except KeyboardInterrupt:
        console.print("\n[yellow]Interrupted by user[/yellow]")
        sys.exit(130)
    except Exception as e:
        logger.error("deploygate_failed", error=str(e), exc_info=True)
        console.print(f"\n[red]Error: {e}[/red]")
        sys.exit(1)
