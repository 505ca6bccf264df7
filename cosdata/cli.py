# cosdata/cli.py
"""
Cosdata CLI.

Commands:
    cosdata collections          List collections
    cosdata create-collection    Create a collection
    cosdata create-index         Create a dense HNSW index on a collection
    cosdata upsert               Upsert vectors from a JSON / JSON Lines file
    cosdata query                Nearest-neighbor search
    cosdata fetch                Fetch one vector by id

Connection settings come from --config (YAML), else COSDATA_* environment
variables; explicit options override both.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Dict, List, NoReturn, Optional

import typer
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from cosdata.client import Client
from cosdata.config import ClientConfig, ConfigError, load_config
from cosdata.exceptions import CosdataError
from cosdata.index import Index
from cosdata.logging import configure_logging, get_logger
from cosdata.logging_tags import CLI

logger = get_logger(__name__)

console = Console()

app = typer.Typer(
    name="cosdata",
    help="Command line client for the Cosdata vector database.",
    no_args_is_help=True,
    add_completion=False,
)


# =============================================================================
# Helpers
# =============================================================================


def _fail(message: str) -> NoReturn:
    console.print(f"[red]✗[/red] {escape(message)}", highlight=False)
    raise typer.Exit(code=1)


def _config(ctx: typer.Context) -> ClientConfig:
    return ctx.obj["config"]


def _open_client(config: ClientConfig) -> Client:
    """Create the client used by a command."""
    return Client.from_config(config)


def _parse_vector(raw: str) -> List[float]:
    """Parse '0.1,0.2,0.3' (or a JSON array) into floats."""
    text = raw.strip()
    try:
        if text.startswith("["):
            return [float(v) for v in json.loads(text)]
        return [float(v) for v in text.split(",") if v.strip()]
    except (ValueError, TypeError) as e:
        raise typer.BadParameter(f"Invalid vector {raw!r}: {e}") from e


def _read_vectors(path: Path) -> List[Dict[str, Any]]:
    """Read vectors from a JSON array file or a JSON Lines file."""
    text = path.read_text(encoding="utf-8").strip()
    if not text:
        return []

    if text.startswith("["):
        data = json.loads(text)
    else:
        data = [json.loads(line) for line in text.splitlines() if line.strip()]

    for i, item in enumerate(data):
        if not isinstance(item, dict) or "id" not in item or "values" not in item:
            raise ValueError(f"Entry {i} must be an object with 'id' and 'values'")
    return data


def _print_json(data: Any) -> None:
    console.print_json(json.dumps(data, default=str))


# =============================================================================
# Global options
# =============================================================================


@app.callback()
def main(
    ctx: typer.Context,
    config_path: Optional[Path] = typer.Option(None, "--config", "-c", help="YAML config file."),
    host: Optional[str] = typer.Option(None, "--host", help="Server URL."),
    username: Optional[str] = typer.Option(None, "--username", "-u", help="Username."),
    password: Optional[str] = typer.Option(None, "--password", "-p", help="Password."),
    verify_ssl: Optional[bool] = typer.Option(
        None, "--verify-ssl/--no-verify-ssl", help="Verify TLS certificates."
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Show debug logging."),
) -> None:
    """Cosdata vector database client."""
    configure_logging(
        level=logging.DEBUG if verbose else logging.WARNING,
        http_level=logging.INFO if verbose else logging.WARNING,
    )

    try:
        config = load_config(config_path) if config_path else ClientConfig.from_env()
    except ConfigError as e:
        _fail(str(e))

    overrides = {
        "host": host,
        "username": username,
        "password": password,
        "verify_ssl": verify_ssl,
    }
    config = config.model_copy(update={k: v for k, v in overrides.items() if v is not None})

    logger.debug(f"{CLI} Using server {config.host}")
    ctx.obj = {"config": config}


# =============================================================================
# Commands
# =============================================================================


@app.command("collections")
def collections(ctx: typer.Context) -> None:
    """List collections."""
    try:
        with _open_client(_config(ctx)) as client:
            items = client.collections()
    except CosdataError as e:
        _fail(str(e))

    if not items:
        console.print("[dim]No collections.[/dim]")
        return

    table = Table(show_header=True, header_style="bold")
    table.add_column("#", style="dim", width=3)
    table.add_column("Collection", style="cyan")
    table.add_column("Dimension", justify="right")

    for i, coll in enumerate(items, 1):
        table.add_row(str(i), coll.name, str(coll.dimension))

    console.print(table)


@app.command("create-collection")
def create_collection(
    ctx: typer.Context,
    name: str = typer.Argument(..., help="Collection name."),
    dimension: int = typer.Option(1024, "--dimension", "-d", min=1, help="Vector dimension."),
    description: Optional[str] = typer.Option(None, "--description", help="Description."),
) -> None:
    """Create a collection for dense vectors."""
    try:
        with _open_client(_config(ctx)) as client:
            client.create_collection(name, dimension=dimension, description=description)
    except CosdataError as e:
        _fail(str(e))

    console.print(f"[green]✓[/green] Created collection '{name}' (dimension={dimension})")


@app.command("create-index")
def create_index(
    ctx: typer.Context,
    name: str = typer.Argument(..., help="Collection name."),
    metric: str = typer.Option("cosine", "--metric", "-m", help="Distance metric."),
    num_layers: int = typer.Option(7, "--num-layers", help="HNSW layers."),
    max_cache_size: int = typer.Option(1000, "--max-cache-size", help="Maximum cache size."),
    ef_construction: int = typer.Option(512, "--ef-construction", help="ef at build time."),
    ef_search: int = typer.Option(256, "--ef-search", help="ef at search time."),
    neighbors_count: int = typer.Option(32, "--neighbors", help="Neighbors per node."),
    level_0_neighbors_count: int = typer.Option(64, "--level-0-neighbors", help="Neighbors at level 0."),
) -> None:
    """Create a dense HNSW index on a collection."""
    try:
        with _open_client(_config(ctx)) as client:
            collection = client.get_collection(name)
            collection.create_index(
                distance_metric=metric,
                num_layers=num_layers,
                max_cache_size=max_cache_size,
                ef_construction=ef_construction,
                ef_search=ef_search,
                neighbors_count=neighbors_count,
                level_0_neighbors_count=level_0_neighbors_count,
            )
    except CosdataError as e:
        _fail(str(e))

    console.print(f"[green]✓[/green] Created {metric} index on '{name}'")


@app.command("upsert")
def upsert(
    ctx: typer.Context,
    name: str = typer.Argument(..., help="Collection name."),
    source: Path = typer.Argument(..., exists=True, dir_okay=False, help="JSON or JSON Lines file."),
) -> None:
    """Upsert vectors from a file in a single transaction."""
    try:
        vectors = _read_vectors(source)
    except ValueError as e:
        _fail(f"Cannot read {source}: {e}")

    if not vectors:
        console.print("[dim]Nothing to upsert.[/dim]")
        return

    try:
        with _open_client(_config(ctx)) as client:
            index = Index(client, client.get_collection(name))
            index.transaction(lambda txn: txn.upsert(vectors))
    except CosdataError as e:
        _fail(str(e))

    console.print(f"[green]✓[/green] Upserted {len(vectors)} vectors into '{name}'")


@app.command("query")
def query(
    ctx: typer.Context,
    name: str = typer.Argument(..., help="Collection name."),
    vector: str = typer.Option(..., "--vector", help="Query vector, e.g. 0,0,0,1"),
    nn_count: int = typer.Option(5, "--nn-count", "-k", min=1, help="Neighbors to return."),
) -> None:
    """Search a collection for nearest neighbors."""
    values = _parse_vector(vector)

    try:
        with _open_client(_config(ctx)) as client:
            index = Index(client, client.get_collection(name))
            results = index.query(vector=values, nn_count=nn_count)
    except CosdataError as e:
        _fail(str(e))

    _print_json(results)


@app.command("fetch")
def fetch(
    ctx: typer.Context,
    name: str = typer.Argument(..., help="Collection name."),
    vector_id: str = typer.Argument(..., help="Vector id, sent as a string unless --int-id is given."),
    int_id: bool = typer.Option(False, "--int-id", help="Send the id as an integer."),
) -> None:
    """Fetch one vector by id."""
    key: Any = vector_id
    if int_id:
        try:
            key = int(vector_id)
        except ValueError as e:
            raise typer.BadParameter(f"{vector_id!r} is not an integer", param_hint="VECTOR_ID") from e

    try:
        with _open_client(_config(ctx)) as client:
            index = Index(client, client.get_collection(name))
            result = index.fetch_vector(key)
    except CosdataError as e:
        _fail(str(e))

    _print_json(result)


if __name__ == "__main__":
    app()
