"""Typer CLI for barrelroll."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Annotated

import typer
from dotenv import load_dotenv
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from barrelroll.config import DEFAULT_CONFIG_TEMPLATE, BarrelrollConfig
from barrelroll.models import BarrelResult, GenerationMode

load_dotenv()

app = typer.Typer(
    name="barrelroll",
    help="Generate TypeScript barrel (index.ts) files that re-export a directory.",
    no_args_is_help=True,
)
console = Console()


def _configure_logging(config: BarrelrollConfig, debug: bool) -> None:
    barrelroll_logger = logging.getLogger("barrelroll")
    barrelroll_logger.setLevel(logging.DEBUG if debug else config.logging.resolve_level())

    if config.logging.file:
        file_handler = logging.FileHandler(config.logging.file, mode="w")
        file_handler.setFormatter(
            logging.Formatter("%(asctime)s %(name)s %(levelname)s %(message)s")
        )
        barrelroll_logger.addHandler(file_handler)

    if debug:
        stream_handler = logging.StreamHandler()
        stream_handler.setFormatter(logging.Formatter("%(name)s %(levelname)s %(message)s"))
        barrelroll_logger.addHandler(stream_handler)


def _resolve_directory(target: Path) -> Path:
    """Barrels are generated for directories; a file selects its parent."""
    target = target.resolve()
    if target.is_file():
        return target.parent
    return target


def _run(
    directory: Path,
    *,
    recursive: bool,
    update_existing: bool,
    dry_run: bool,
    use_cache: bool,
    config_path: Path | None,
    debug: bool,
) -> None:
    from barrelroll.pipeline import run_pipeline

    try:
        config = BarrelrollConfig.load(config_path)
        # Logger.setLevel rejects unknown level names with ValueError
        _configure_logging(config, debug)
    except ValueError as e:
        console.print(f"[red]barrelroll: invalid config: {escape(str(e))}[/red]")
        raise typer.Exit(1) from e

    if recursive:
        config.generation.recursive = True
    if update_existing:
        config.generation.mode = GenerationMode.UPDATE_EXISTING.value
    if use_cache:
        config.cache.enabled = True

    options = config.generation.to_options()
    try:
        with console.status("[bold green]Generating barrels..."):
            results = run_pipeline(
                _resolve_directory(directory),
                options,
                use_cache=config.cache.enabled,
                cache_max_entries=config.cache.max_entries,
                dry_run=dry_run,
            )
    except RuntimeError as e:
        console.print(f"[red]barrelroll: {escape(str(e))}[/red]")
        raise typer.Exit(1) from e

    _report(results, dry_run)


def _report(results: list[BarrelResult], dry_run: bool) -> None:
    written = [r for r in results if r.written]

    if dry_run:
        for r in written:
            console.print(f"\n[bold]{r.index_path}[/bold]")
            console.print(r.content, end="", markup=False, highlight=False, soft_wrap=True)
        console.print("\n[dim]Dry run: no files written.[/dim]")
        return

    if not written:
        console.print("[yellow]No barrel files written.[/yellow]")
        return

    console.print(f"[bold green]Done![/bold green] Wrote {len(written)} files:")
    for r in written:
        console.print(f"  {r.index_path}")


@app.command()
def generate(
    directory: Annotated[Path, typer.Argument(help="Directory to barrel")] = Path("."),
    recursive: Annotated[
        bool, typer.Option("--recursive", "-r", help="Also barrel subdirectories")
    ] = False,
    update_existing: Annotated[
        bool,
        typer.Option("--update-existing", help="Only rewrite directories that already have index.ts"),
    ] = False,
    dry_run: Annotated[
        bool, typer.Option("--dry-run", help="Print barrels without writing files")
    ] = False,
    use_cache: Annotated[
        bool, typer.Option("--cache", help="Cache extracted exports")
    ] = False,
    config_path: Annotated[
        Path | None, typer.Option("--config", "-c", help="Path to barrelroll.toml")
    ] = None,
    debug: Annotated[bool, typer.Option("--debug", help="Log to stderr at debug level")] = False,
) -> None:
    """Generate or refresh the index.ts barrel for a directory."""
    _run(
        directory,
        recursive=recursive,
        update_existing=update_existing,
        dry_run=dry_run,
        use_cache=use_cache,
        config_path=config_path,
        debug=debug,
    )


@app.command()
def update(
    directory: Annotated[Path, typer.Argument(help="Directory to update")] = Path("."),
    dry_run: Annotated[
        bool, typer.Option("--dry-run", help="Print barrels without writing files")
    ] = False,
    config_path: Annotated[
        Path | None, typer.Option("--config", "-c", help="Path to barrelroll.toml")
    ] = None,
    debug: Annotated[bool, typer.Option("--debug", help="Log to stderr at debug level")] = False,
) -> None:
    """Recursively refresh existing barrels, keeping hand-written lines."""
    _run(
        directory,
        recursive=True,
        update_existing=True,
        dry_run=dry_run,
        use_cache=False,
        config_path=config_path,
        debug=debug,
    )


@app.command()
def exports(
    file: Annotated[Path, typer.Argument(help="TypeScript module to inspect")],
) -> None:
    """Show the exports barrelroll would pick up from one file."""
    from barrelroll.extractors.exports import extract_exports
    from barrelroll.filesystem import read_text

    try:
        content = read_text(file)
    except RuntimeError as e:
        console.print(f"[red]barrelroll: {escape(str(e))}[/red]")
        raise typer.Exit(1) from e

    found = extract_exports(content)
    if not found:
        console.print(f"[yellow]No exports found in {file}.[/yellow]")
        return

    table = Table(title=str(file))
    table.add_column("Name")
    table.add_column("Kind")
    for e in found:
        kind = "default" if e.is_default else ("type" if e.type_only else "value")
        table.add_row(e.name, kind)
    console.print(table)


@app.command()
def init(
    path: Annotated[
        Path, typer.Option("--path", "-p", help="Where to create barrelroll.toml")
    ] = Path("."),
) -> None:
    """Create a barrelroll.toml config file."""
    target = path / "barrelroll.toml"
    if target.exists():
        console.print(f"[yellow]{target} already exists.[/yellow]")
        raise typer.Exit(1)
    target.write_text(DEFAULT_CONFIG_TEMPLATE)
    console.print(f"[green]Created {target}[/green]")
