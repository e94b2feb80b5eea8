"""dpl search command - query a snapshot without starting the server."""

import json
from pathlib import Path

import click
from rich.console import Console
from rich.table import Table

from driveplane.core.errors import BuildError, ConfigError
from driveplane.directory import load_snapshot
from driveplane.index.models import SearchCategory
from driveplane.index.ops import SearchCoordinator

_CATEGORY_CHOICES = [category.value for category in SearchCategory]


@click.command()
@click.argument("query")
@click.option(
    "--snapshot",
    required=True,
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    help="Directory snapshot to index",
)
@click.option("-n", "--limit", default=10, show_default=True, type=click.IntRange(min=0))
@click.option(
    "-c",
    "--category",
    "categories",
    multiple=True,
    type=click.Choice(_CATEGORY_CHOICES, case_sensitive=False),
    help="Restrict results (repeatable)",
)
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
def search_command(
    query: str,
    snapshot: Path,
    limit: int,
    categories: tuple[str, ...],
    as_json: bool,
) -> None:
    """Build an index from SNAPSHOT and run QUERY against it."""
    try:
        coordinator = SearchCoordinator(load_snapshot(snapshot))
        stats = coordinator.reindex()
    except (ConfigError, BuildError) as e:
        raise click.ClickException(str(e)) from e

    wanted = [SearchCategory(category.upper()) for category in categories]
    results = coordinator.search(query, limit, wanted or None)

    if as_json:
        click.echo(json.dumps([result.to_dict() for result in results]))
        return

    console = Console()
    if not results:
        console.print(f"No matches for [bold]{query!r}[/bold] in {stats.indexed_count} paths")
        return

    table = Table(title=f"{len(results)} match(es) for {query!r}")
    table.add_column("Path", style="cyan", no_wrap=True)
    table.add_column("Category")
    table.add_column("Resource ID", style="dim")
    table.add_column("Score", justify="right")
    for result in results:
        table.add_row(result.path, result.category.value, result.resource_ref.id, str(result.score))
    console.print(table)
