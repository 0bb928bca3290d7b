"""CLI interface for mediahub."""

import logging
import mimetypes
import re
from pathlib import Path
from typing import Annotated, Optional

import typer
from rich.console import Console
from rich.table import Table

from mediahub.config import load_config, merge_cli_overrides
from mediahub.media.errors import MediaError
from mediahub.media.manager import MediaManager, create_manager
from mediahub.media.models import Dimension, RawFile
from mediahub.storage.local import LocalStorage

app = typer.Typer(
    name="mediahub",
    help="Resolve media types and generate thumbnails.",
)

console = Console()

_SIZE_RE = re.compile(r"^(?P<code>[^=]+)=(?P<width>\d+)x(?P<height>\d+)$")


def version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        from mediahub import __version__

        console.print(f"mediahub {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: Annotated[
        bool,
        typer.Option(
            "--version",
            "-v",
            help="Show version and exit.",
            callback=version_callback,
            is_eager=True,
        ),
    ] = False,
    verbose: Annotated[
        bool,
        typer.Option("--verbose", help="Enable debug logging."),
    ] = False,
) -> None:
    """mediahub - media type registry and thumbnail pipeline."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )


def _manager(
    config_path: Path | None, root: Path | None
) -> tuple[MediaManager, LocalStorage]:
    config = load_config(config_path)
    config = merge_cli_overrides(
        config,
        storage_root=str(root) if root is not None else None,
    )
    storage = LocalStorage(
        Path(config.storage.root), default_disk=config.storage.default_disk
    )
    return create_manager(config, storage), storage


def _parse_sizes(sizes: list[str] | None) -> dict[str, Dimension] | None:
    if not sizes:
        return None
    parsed: dict[str, Dimension] = {}
    for raw in sizes:
        match = _SIZE_RE.match(raw.strip())
        if match is None:
            raise typer.BadParameter(f"Expected CODE=WIDTHxHEIGHT, got {raw!r}")
        parsed[match["code"]] = Dimension(
            width=int(match["width"]), height=int(match["height"])
        )
    return parsed


ConfigOption = Annotated[
    Optional[Path],
    typer.Option("--config", "-c", help="Path to a .mediahub.toml file."),
]
RootOption = Annotated[
    Optional[Path],
    typer.Option("--root", "-r", help="Storage root directory."),
]


@app.command()
def types(
    config: ConfigOption = None,
    root: RootOption = None,
) -> None:
    """List registered media types in lookup order."""
    manager, _ = _manager(config, root)
    for position, media_type in enumerate(manager.handler_types, start=1):
        handler = manager.get_handler(media_type)
        console.print(f"{position}. [bold]{media_type}[/bold] ({type(handler).__name__})")


@app.command()
def inspect(
    file: Annotated[
        Path,
        typer.Argument(exists=True, dir_okay=False, resolve_path=True),
    ],
    config: ConfigOption = None,
    root: RootOption = None,
) -> None:
    """Report which media type handles FILE."""
    manager, _ = _manager(config, root)
    mime, _ = mimetypes.guess_type(file.name)
    raw = RawFile(id=file.name, mime=mime or "", filename=file.name)

    media_type = manager.get_file_type(raw)
    if media_type is None:
        console.print(f"[yellow]Unsupported:[/yellow] {file.name} ({mime or 'unknown mime'})")
        raise typer.Exit(1)
    console.print(f"{file.name}: [green]{media_type}[/green] ({mime})")


@app.command()
def thumbnails(
    file: Annotated[
        Path,
        typer.Argument(exists=True, dir_okay=False, resolve_path=True),
    ],
    thumbnail_type: Annotated[
        Optional[str],
        typer.Option("--type", "-t", help="Thumbnail command (fit, letter, widen, spill, crop)."),
    ] = None,
    path: Annotated[
        Optional[str],
        typer.Option("--path", "-p", help="Directory to store thumbnails in."),
    ] = None,
    disk: Annotated[
        Optional[str],
        typer.Option("--disk", help="Storage disk for thumbnails."),
    ] = None,
    size: Annotated[
        Optional[list[str]],
        typer.Option("--size", "-s", help="Size as CODE=WIDTHxHEIGHT. Repeatable."),
    ] = None,
    config: ConfigOption = None,
    root: RootOption = None,
) -> None:
    """Import FILE into storage and generate its thumbnails."""
    manager, storage = _manager(config, root)
    dimensions = _parse_sizes(size)

    mime, _ = mimetypes.guess_type(file.name)
    candidate = RawFile(id=file.name, mime=mime or "", filename=file.name)
    if not manager.is_supported(candidate):
        console.print(f"[red]Error:[/red] Unsupported media type: {mime or 'unknown'}")
        raise typer.Exit(1)

    stored = storage.add(file)
    try:
        media = manager.make(stored)
        results = manager.create_thumbnail_results(
            media,
            thumbnail_type=thumbnail_type,
            dimensions=dimensions,
            path=path,
            disk=disk,
        )
    except (MediaError, ValueError) as exc:
        manager.meta_store.delete(stored.id)
        storage.delete(stored)
        console.print(f"[red]Error:[/red] {exc}")
        raise typer.Exit(1)

    if not results:
        console.print(f"[yellow]No picture available for {media.get_type()} media.[/yellow]")
        raise typer.Exit(0)

    table = Table(title=f"Thumbnails for {file.name}")
    table.add_column("Code")
    table.add_column("Size")
    table.add_column("Stored as")
    failed = False
    for result in results:
        if result.ok and result.thumbnail is not None:
            meta = result.thumbnail.get_meta()
            dims = f"{meta.width}x{meta.height}" if meta else "?"
            table.add_row(result.code, dims, result.thumbnail.file.filename)
        else:
            failed = True
            table.add_row(result.code, "-", f"[red]{result.error}[/red]")
    console.print(table)

    if failed:
        raise typer.Exit(1)
