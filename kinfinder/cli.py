"""
kinfinder CLI

Examples:
    # Basic search
    kinfinder search CASE-1042

    # Parents and siblings only, CSV to a file
    kinfinder search CASE-1042 -r Parent -r Sibling -f csv -o parents.csv

    # JSON output, piped to jq
    kinfinder search CASE-1042 -f json -q | jq '.results[:5]'

    # Demo scenario
    kinfinder sources enable gilmore-girls-demo
    kinfinder search GG-2000-01 -s gilmore-girls-demo

    # Catalog management
    kinfinder sources list
    kinfinder sources set-priority clearview-data 5
"""

import asyncio
import json
import logging
import sys
from typing import Optional

import click
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from .api import build_request
from .catalog import CatalogError, SourceCatalog
from .config import Settings, load_config
from .constants import GENDERS, MESSAGES, RELATIONSHIP_TYPES, SORT_KEYS, WILLINGNESS_LEVELS
from .export import export_csv_string, export_json_string, export_results
from .models import CandidateRecord, SearchResult, SearchStatus
from .orchestrator import build_default_orchestrator
from .store import JsonFileStore
from .validation import ValidationError

# Progress to stderr, data to stdout
console = Console(stderr=True)
logger = logging.getLogger(__name__)


def setup_logging(verbose: bool, quiet: bool, debug: bool) -> None:
    """Configure logging based on CLI flags."""
    if quiet:
        level = logging.ERROR
    elif debug:
        level = logging.DEBUG
    elif verbose:
        level = logging.INFO
    else:
        level = logging.WARNING

    logging.basicConfig(
        level=level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        handlers=[logging.StreamHandler(sys.stderr)],
    )


def _settings(config: Optional[str], sources_file: Optional[str]) -> Settings:
    settings = load_config(config) if config else load_config()
    if sources_file:
        settings.sources_store_path = sources_file
    return settings


def _score_color(score: int) -> str:
    return "green" if score >= 85 else "yellow" if score >= 70 else "red"


def build_results_table(candidates: list[CandidateRecord], title: str = "Candidates") -> Table:
    """Rich table of candidates in display order."""
    table = Table(title=title, show_header=True, header_style="bold magenta")

    table.add_column("Name", style="cyan", max_width=28)
    table.add_column("Relationship", max_width=20)
    table.add_column("Age", justify="right")
    table.add_column("Match", justify="right")
    table.add_column("Conf", justify="right")
    table.add_column("Miles", justify="right")
    table.add_column("Willing")
    table.add_column("Source", max_width=24)

    for c in candidates:
        color = _score_color(c.match_score)
        table.add_row(
            c.full_name[:28],
            c.relationship_label or c.relationship_type,
            str(c.age),
            f"[{color}]{c.match_score}[/{color}]",
            f"{c.confidence}%",
            f"{c.distance:g}",
            c.willingness,
            c.source_name or c.source_id,
        )

    return table


def format_output(result: SearchResult, output_format: str) -> str:
    """Format a result for stdout (csv/json)."""
    if output_format == "json":
        return export_json_string(result)
    elif output_format == "csv":
        return export_csv_string(result.results)
    else:
        raise ValueError(f"Unknown format: {output_format}")


# ============================================================================
# CLI Group
# ============================================================================

@click.group(invoke_without_command=True)
@click.pass_context
@click.version_option(version="1.0.0")
def cli(ctx):
    """Kinship candidate discovery: find, score and rank relatives and supports."""
    if ctx.invoked_subcommand is None:
        click.echo(ctx.get_help())


# ============================================================================
# Search Command
# ============================================================================

@cli.command()
@click.argument("case_id")
@click.option("-r", "--relationship", "relationship_types", multiple=True,
              type=click.Choice(RELATIONSHIP_TYPES), help="Relationship type (repeatable)")
@click.option("-s", "--source", "sources", multiple=True, help="Source id or 'all-enabled' (repeatable)")
@click.option("--min-confidence", type=int, default=None, help="Minimum confidence (0-100)")
@click.option("--age-min", type=int, default=None, help="Minimum age (inclusive)")
@click.option("--age-max", type=int, default=None, help="Maximum age (inclusive)")
@click.option("-g", "--gender", "genders", multiple=True, type=click.Choice(GENDERS), help="Gender (repeatable)")
@click.option("--religion", "religions", multiple=True, help="Religion (repeatable)")
@click.option("--language", "languages", multiple=True, help="Spoken language (repeatable)")
@click.option("-w", "--willingness", "willingness_levels", multiple=True,
              type=click.Choice(WILLINGNESS_LEVELS), help="Willingness level (repeatable)")
@click.option("--query", "relationship_query", help="Substring of relationship type or label")
@click.option("--sort", "sort_by", type=click.Choice(SORT_KEYS), default="matchScore", help="Sort key")
@click.option("-l", "--limit", type=int, default=None, help="Max candidates to return")
@click.option("--focus-age", type=int, default=35, help="Age of the focus person")
@click.option("--focus-name", help="Full name of the focus person")
@click.option("--seed", type=int, default=None, help="Seed for reproducible synthetic pools")
@click.option("-f", "--format", "output_format",
              type=click.Choice(["table", "csv", "json"]), default="table", help="Output format")
@click.option("-o", "--output", type=click.Path(), help="Output file (csv or json)")
@click.option("-q", "--quiet", is_flag=True, help="Suppress progress, only emit data")
@click.option("-v", "--verbose", is_flag=True, help="Verbose output")
@click.option("--debug", is_flag=True, help="Enable debug logging")
@click.option("--config", type=click.Path(exists=True), help="YAML config file")
@click.option("--sources-file", type=click.Path(), help="Source catalog JSON file")
def search(
    case_id: str,
    relationship_types: tuple,
    sources: tuple,
    min_confidence: Optional[int],
    age_min: Optional[int],
    age_max: Optional[int],
    genders: tuple,
    religions: tuple,
    languages: tuple,
    willingness_levels: tuple,
    relationship_query: Optional[str],
    sort_by: str,
    limit: Optional[int],
    focus_age: int,
    focus_name: Optional[str],
    seed: Optional[int],
    output_format: str,
    output: Optional[str],
    quiet: bool,
    verbose: bool,
    debug: bool,
    config: Optional[str],
    sources_file: Optional[str],
):
    """
    Search for kinship candidates for a case.

    Output goes to stdout by default (use -o for file).
    Progress goes to stderr (use -q to suppress).

    Exit codes: 0 results found, 1 no results, 2 invalid filters,
    3 every queried source unavailable.

    Examples:

        kinfinder search CASE-1042 -r Parent -r Grandparent

        kinfinder search CASE-1042 --language Spanish -f json -q
    """
    setup_logging(verbose, quiet, debug)
    settings = _settings(config, sources_file)

    orchestrator = build_default_orchestrator(
        settings,
        store=JsonFileStore(settings.sources_store_path),
        seed=seed,
    )

    age_range = (
        settings.default_age_min if age_min is None else age_min,
        settings.default_age_max if age_max is None else age_max,
    )

    try:
        request = build_request(
            case_id,
            settings=settings,
            relationship_types=list(relationship_types) or None,
            sources=list(sources) or None,
            min_confidence=min_confidence,
            age_range=age_range,
            genders=list(genders) or None,
            religions=list(religions),
            languages=list(languages),
            sort_by=sort_by,
            max_results=limit if limit is not None else settings.default_max_results,
            focus_age=focus_age,
            focus_name=focus_name,
            willingness_levels=list(willingness_levels),
            relationship_query=relationship_query,
        )
        if quiet:
            result = asyncio.run(orchestrator.search(request))
        else:
            with console.status(f"Searching providers for case {case_id}..."):
                result = asyncio.run(orchestrator.search(request))
    except ValidationError as e:
        console.print(f"[red]Invalid filter[/red] {e.field}: {e.reason}")
        sys.exit(2)

    if not quiet:
        for error in result.errors:
            console.print(f"[yellow]Provider failed:[/yellow] {error}")
        console.print(
            f"[dim]{MESSAGES[result.status.value]}: {len(result.results)} of "
            f"{result.total_count} candidates from {len(result.sources_queried)} source(s)[/dim]"
        )

    if result.status == SearchStatus.UNAVAILABLE:
        sys.exit(3)

    if output:
        output_path = export_results(result, output, "json" if output_format == "json" else "csv")
        if not quiet:
            console.print(f"\n[green]Saved:[/green] {output_path}")
    elif output_format == "table":
        Console().print(build_results_table(result.results, title=f"Candidates for {case_id}"))
    else:
        click.echo(format_output(result, output_format))

    # Exit code: 0 if results, 1 if empty
    sys.exit(0 if result.results else 1)


# ============================================================================
# Sources Commands
# ============================================================================

@cli.group()
@click.option("--config", type=click.Path(exists=True), help="YAML config file")
@click.option("--sources-file", type=click.Path(), help="Source catalog JSON file")
@click.pass_context
def sources(ctx, config: Optional[str], sources_file: Optional[str]):
    """Inspect and configure discovery sources."""
    settings = _settings(config, sources_file)
    ctx.obj = SourceCatalog(JsonFileStore(settings.sources_store_path))


def _update_source(catalog: SourceCatalog, source_id: str, patch: dict) -> None:
    try:
        source = catalog.update(source_id, patch)
    except CatalogError as e:
        console.print(f"[red]{e}[/red]")
        sys.exit(1)
    except ValidationError as e:
        console.print(f"[red]Invalid value[/red] {e.field}: {e.reason}")
        sys.exit(2)

    state = "[green]enabled[/green]" if source.enabled else "[red]disabled[/red]"
    console.print(f"{source.id}: {state}, priority {source.priority}")


@sources.command("list")
@click.pass_obj
def list_sources(catalog: SourceCatalog):
    """List configured sources in catalog order."""
    table = Table(title="Sources", show_header=True, header_style="bold magenta")
    table.add_column("Id", style="cyan")
    table.add_column("Name")
    table.add_column("Type")
    table.add_column("Priority", justify="right")
    table.add_column("Enabled", justify="center")
    table.add_column("Cost", justify="right")

    for source in catalog.list():
        cost = "-" if source.cost_per_search is None else f"${source.cost_per_search:.2f}"
        table.add_row(
            source.id,
            source.name,
            source.type,
            str(source.priority),
            "[green]yes[/green]" if source.enabled else "[red]no[/red]",
            cost,
        )

    Console().print(table)


@sources.command("show")
@click.argument("source_id")
@click.pass_obj
def show_source(catalog: SourceCatalog, source_id: str):
    """Show one source as JSON."""
    try:
        source = catalog.require(source_id)
    except CatalogError as e:
        console.print(f"[red]{e}[/red]")
        sys.exit(1)
    click.echo(json.dumps(source.to_dict(), indent=2))


@sources.command("enable")
@click.argument("source_id")
@click.pass_obj
def enable_source(catalog: SourceCatalog, source_id: str):
    """Enable a source."""
    _update_source(catalog, source_id, {"enabled": True})


@sources.command("disable")
@click.argument("source_id")
@click.pass_obj
def disable_source(catalog: SourceCatalog, source_id: str):
    """Disable a source."""
    _update_source(catalog, source_id, {"enabled": False})


@sources.command("set-priority")
@click.argument("source_id")
@click.argument("priority")
@click.pass_obj
def set_priority(catalog: SourceCatalog, source_id: str, priority: str):
    """Set a source's priority (lower runs first)."""
    _update_source(catalog, source_id, {"priority": priority})


# ============================================================================
# Version Command
# ============================================================================

@cli.command()
def version():
    """Show version info."""
    from kinfinder import __version__
    click.echo(f"kinfinder {__version__}")


# ============================================================================
# Web Command
# ============================================================================

@cli.command()
@click.option("--host", default="127.0.0.1", help="Host to bind to.")
@click.option("--port", default=8000, help="Port to bind to.")
@click.option("--reload", is_flag=True, help="Enable auto-reload for development.")
def web(host: str, port: int, reload: bool) -> None:
    """Start the HTTP API."""
    import uvicorn

    console.print(
        Panel.fit(
            f"[bold]kinfinder API[/bold]\n"
            f"Running at: [cyan]http://{host}:{port}/api/v1[/cyan]",
            border_style="blue",
        )
    )
    console.print("Press Ctrl+C to stop\n")

    uvicorn.run(
        "kinfinder.web.app:app",
        host=host,
        port=port,
        reload=reload,
        log_level="info",
    )


if __name__ == "__main__":
    cli()
