"""dpl status command - show index status of a running server."""

import json

import click
import httpx

from driveplane.config.loader import load_config
from driveplane.core.errors import ConfigError


@click.command()
@click.option("--host", help="Server address (default: server.host from config)")
@click.option("--port", type=int, help="Server port (default: server.port from config)")
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
def status_command(host: str | None, port: int | None, as_json: bool) -> None:
    """Show index freshness reported by a running DrivePlane server."""
    try:
        config = load_config()
    except ConfigError as e:
        raise click.ClickException(str(e)) from e

    host = host or config.server.host
    port = port or config.server.port

    try:
        response = httpx.get(f"http://{host}:{port}/status", timeout=5.0)
        payload = response.json()
    except (httpx.RequestError, json.JSONDecodeError) as e:
        if as_json:
            click.echo(json.dumps({"running": False, "error": str(e)}))
        else:
            click.echo(f"Server: not reachable at {host}:{port} ({e})")
        return

    error = payload.get("err")
    if error:
        message = error.get("message", "unknown error")
        if as_json:
            click.echo(json.dumps({"running": True, "error": error}))
        else:
            click.echo(f"Server: running ({host}:{port})")
            click.echo(f"Server error: {message}")
        return

    data = payload.get("ok", {}).get("data", {})
    if as_json:
        click.echo(json.dumps({"running": True, **data}))
        return

    index = data.get("index", {})
    tree = data.get("tree", {})
    click.echo(f"Server: running ({host}:{port}, version {data.get('version', 'unknown')})")
    if not index.get("built"):
        click.echo("Index: not built")
    else:
        click.echo(f"Index: {index.get('indexed_count', 0)} paths")
        click.echo(f"  Last update: {index.get('last_index_update_ms', 0)} ms")
        if index.get("stale"):
            click.echo("  Stale: tree changed since last reindex")
    click.echo(f"Tree: {tree.get('size', 0)} records")
