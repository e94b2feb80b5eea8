"""dpl serve command - start the REST server."""

from pathlib import Path

import click

from driveplane.config.loader import load_config
from driveplane.core.errors import ConfigError
from driveplane.core.logging import configure_logging
from driveplane.daemon.lifecycle import build_coordinator, run_server


@click.command()
@click.option(
    "--config",
    "config_path",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    help="YAML config file",
)
@click.option(
    "--snapshot",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    help="Directory snapshot to serve (overrides directory.snapshot_path)",
)
@click.option("--host", help="Bind address (overrides server.host)")
@click.option("--port", type=int, help="Port (overrides server.port)")
@click.pass_context
def serve_command(
    ctx: click.Context,
    config_path: Path | None,
    snapshot: Path | None,
    host: str | None,
    port: int | None,
) -> None:
    """Serve search over a drive snapshot."""
    overrides: dict[str, dict[str, object]] = {}
    if snapshot is not None:
        overrides["directory"] = {"snapshot_path": str(snapshot)}
    server: dict[str, object] = {}
    if host is not None:
        server["host"] = host
    if port is not None:
        server["port"] = port
    if server:
        overrides["server"] = server

    try:
        config = load_config(config_path, **overrides)
    except ConfigError as e:
        raise click.ClickException(str(e)) from e

    verbose = bool(ctx.obj and ctx.obj.get("verbose"))
    if verbose:
        config.logging.level = "DEBUG"
    configure_logging(config=config.logging)

    try:
        coordinator = build_coordinator(config)
    except ConfigError as e:
        raise click.ClickException(str(e)) from e

    run_server(config, coordinator)
