import asyncio
import logging
from pathlib import Path

import typer
import yaml
from rich.console import Console

from skilltree.config import AppConfig, Config, generate_default_config, load_config
from skilltree.logging import configure_cli_logging
from skilltree.store.cache import get_cache
from skilltree.store.exceptions import NodeNotFoundError, StorageError
from skilltree.store.keys import normalize_topic
from skilltree.tree.builder import TreeBuilder

console = Console()

_cli = typer.Typer(
    name="skilltree",
    help="Generate and inspect cached skill trees.",
    no_args_is_help=True,
)


def _resolve_config(config_file: Path | None) -> AppConfig:
    if config_file is None:
        return Config.get()
    try:
        return load_config(config_file)
    except FileNotFoundError as e:
        raise typer.BadParameter(str(e)) from e


@_cli.command("build", help="Build the skill tree for a topic")
def build(
    topic: str = typer.Argument(..., help="Topic to build or expand"),
    ancestors: list[str] | None = typer.Option(
        None,
        "--ancestor",
        "-a",
        help="Ancestor name, root first. Repeat for each level.",
    ),
    max_depth: int | None = typer.Option(
        None, "--max-depth", min=0, help="Levels of children to hydrate"
    ),
    config_file: Path | None = typer.Option(
        None, "--config", help="Path to the configuration file"
    ),
    compact: bool = typer.Option(False, "--compact", help="Print JSON on one line"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Debug logging"),
) -> None:
    configure_cli_logging(logging.DEBUG if verbose else logging.INFO)
    config = _resolve_config(config_file)
    if not topic.strip():
        raise typer.BadParameter("Topic must not be empty")

    builder = TreeBuilder(config)
    node = asyncio.run(builder.build_tree(topic, ancestors or [], max_depth))
    typer.echo(node.to_json(indent=None if compact else 2))


@_cli.command("show", help="Print the cached node for a topic")
def show(
    topic: str = typer.Argument(..., help="Topic to look up"),
    config_file: Path | None = typer.Option(
        None, "--config", help="Path to the configuration file"
    ),
) -> None:
    config = _resolve_config(config_file)
    cache = get_cache(config)
    try:
        node = asyncio.run(cache.load(normalize_topic(topic)))
    except (NodeNotFoundError, ValueError) as e:
        console.print(f"[red]{e}[/red]")
        raise typer.Exit(1)
    typer.echo(node.to_json())


@_cli.command("init-config", help="Write a default YAML configuration file")
def init_config(
    output: Path = typer.Argument(
        Path("skilltree.yaml"), help="Where to write the configuration"
    ),
) -> None:
    if output.exists():
        console.print(f"[red]{output} already exists[/red]")
        raise typer.Exit(1)
    with open(output, "w") as f:
        yaml.safe_dump(generate_default_config(), f, sort_keys=False)
    console.print(f"Wrote default configuration to {output}")


def _instrument() -> None:
    # Traces model calls; only sends data when LOGFIRE_TOKEN is present.
    try:
        import logfire

        logfire.configure(send_to_logfire="if-token-present", console=False)
        logfire.instrument_pydantic_ai()
    except ImportError:
        pass


def cli() -> None:
    _instrument()
    try:
        _cli()
    except StorageError as e:
        console.print(f"[red]Storage error: {e}[/red]")
        raise SystemExit(1)


if __name__ == "__main__":
    cli()
