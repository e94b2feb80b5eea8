"""DrivePlane CLI - dpl command."""

import click

from driveplane.cli.search import search_command
from driveplane.cli.serve import serve_command
from driveplane.cli.status import status_command
from driveplane.core.logging import configure_logging


@click.group()
@click.version_option(version="0.1.0", prog_name="dpl")
@click.option("-v", "--verbose", is_flag=True, help="Enable debug logging")
@click.pass_context
def cli(ctx: click.Context, verbose: bool) -> None:
    """DrivePlane - path search for a virtual drive."""
    ctx.ensure_object(dict)
    ctx.obj["verbose"] = verbose
    configure_logging(level="DEBUG" if verbose else "WARNING")


cli.add_command(serve_command, name="serve")
cli.add_command(search_command, name="search")
cli.add_command(status_command, name="status")


if __name__ == "__main__":
    cli()
