"""Main entry point for the filepool command-line interface.

Sets up the Typer CLI application, performs dependency injection (Composition
Root), defines CLI commands, and delegates execution to the CommandHandler.
"""

import logging
from pathlib import Path
from typing import Any, Dict, List, Optional

import typer
from typing_extensions import Annotated

from filepool import open_pool
from filepool.core.command_handler import CommandHandler
from filepool.infrastructure.cli.display import ConsoleDisplay
from filepool.infrastructure.config.settings import get_cache_directory, get_default_ttl, load_configuration
from filepool.infrastructure.monitoring.logger_setup import configure_logging

logger = logging.getLogger(__name__)


# --- Dependency Injection Container (Manual) ---

def create_dependencies(directory: Optional[Path] = None, verbose: bool = False) -> Dict[str, Any]:
    """Creates and wires up all dependencies for one CLI invocation.

    This acts as the Composition Root.
    """
    # 1. Load Configuration First
    load_configuration()
    configure_logging(verbose=verbose)

    # 2. Infrastructure adapters and the pool
    cache_dir = directory or get_cache_directory()
    dependencies: Dict[str, Any] = {}
    dependencies["ui"] = ConsoleDisplay()
    dependencies["pool"] = open_pool(cache_dir)

    # 3. Command Handler
    dependencies["command_handler"] = CommandHandler(
        pool=dependencies["pool"],
        ui=dependencies["ui"],
        default_ttl=get_default_ttl(),
    )
    logger.debug(f"Dependencies initialized for cache directory {cache_dir}")
    return dependencies


# --- Typer App Definition ---
app = typer.Typer(
    name="filepool",
    help="Persistent file-backed cache: one file per key in a directory.",
    add_completion=False,
    no_args_is_help=True,
)

TtlOption = Annotated[
    Optional[int],
    typer.Option("--ttl", "-t", min=0, help="Seconds until the value expires. Uses cache.default_ttl if not set."),
]
JsonOption = Annotated[
    bool,
    typer.Option("--json", help="Parse values as JSON instead of storing them as strings."),
]


def _handler(ctx: typer.Context) -> CommandHandler:
    return ctx.obj["command_handler"]


def _finish(code: int) -> None:
    if code:
        raise typer.Exit(code=code)


@app.callback()
def main_callback(
    ctx: typer.Context,
    directory: Annotated[
        Optional[Path],
        typer.Option("--dir", "-d", file_okay=False, help="Cache directory. Overrides cache.directory."),
    ] = None,
    verbose: Annotated[bool, typer.Option("--verbose", "-v", help="Enable debug logging.")] = False,
):
    """Manage a filepool cache directory."""
    ctx.obj = create_dependencies(directory=directory, verbose=verbose)


@app.command()
def get(ctx: typer.Context, key: Annotated[str, typer.Argument(help="Key to look up.")]):
    """Show a cached value. Exits with 1 on a miss."""
    _finish(_handler(ctx).handle_get(key))


@app.command(name="set")
def set_command(
    ctx: typer.Context,
    key: Annotated[str, typer.Argument(help="Key to store under.")],
    value: Annotated[str, typer.Argument(help="Value to store.")],
    ttl: TtlOption = None,
    as_json: JsonOption = False,
):
    """Store a value immediately."""
    _finish(_handler(ctx).handle_set(key, value, ttl=ttl, as_json=as_json))


@app.command(name="set-many")
def set_many_command(
    ctx: typer.Context,
    pairs: Annotated[List[str], typer.Argument(help="KEY=VALUE pairs, committed as one batch.")],
    ttl: TtlOption = None,
    as_json: JsonOption = False,
):
    """Queue several values and commit them together."""
    _finish(_handler(ctx).handle_set_many(pairs, ttl=ttl, as_json=as_json))


@app.command()
def has(ctx: typer.Context, key: Annotated[str, typer.Argument(help="Key to check.")]):
    """Check whether a key is stored (expiry is not checked). Exits with 1 when absent."""
    _finish(_handler(ctx).handle_has(key))


@app.command()
def delete(ctx: typer.Context, keys: Annotated[List[str], typer.Argument(help="Keys to delete, in order.")]):
    """Delete keys, stopping at the first one that cannot be removed."""
    _finish(_handler(ctx).handle_delete(keys))


@app.command()
def clear(ctx: typer.Context):
    """Delete every stored item."""
    _finish(_handler(ctx).handle_clear())


@app.command(name="list")
def list_command(ctx: typer.Context):
    """List stored keys with their hit state and expiration."""
    _finish(_handler(ctx).handle_list())


# --- Main Execution Guard ---

def cli_entry_point():
    """Function to be called by the script entry point in pyproject.toml."""
    app()


if __name__ == "__main__":
    cli_entry_point()
