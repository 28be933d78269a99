"""CLI interface for dusk."""

import logging
import os
import sys
from pathlib import Path
from typing import Optional, TextIO

import typer
from rich.logging import RichHandler
from rich.markup import escape

from dusk import __version__, crossdev
from dusk.aggregate import aggregate
from dusk.config import load_config
from dusk.display import console, err_console, show_statistics
from dusk.models import ByteFormat, WalkOptions
from dusk.walk import EntryMetadata

logger = logging.getLogger(__name__)

app = typer.Typer(
    name="dusk",
    help="Summarize disk usage of the given paths",
    add_completion=False,
)


def version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        console.print(f"dusk version {__version__}")
        raise typer.Exit()


def setup_logging(verbose: bool) -> None:
    """Route dusk's log records to stderr through rich."""
    package_logger = logging.getLogger("dusk")
    package_logger.handlers.clear()
    package_logger.addHandler(RichHandler(console=err_console, show_path=False))
    package_logger.setLevel(logging.DEBUG if verbose else logging.WARNING)
    package_logger.propagate = False


def stderr_if_tty() -> Optional[TextIO]:
    """Progress goes to stderr, but only when someone is watching it."""
    return sys.stderr if sys.stderr.isatty() else None


def cwd_dirlist() -> list[Path]:
    """Sorted entries of the working directory, leaving out symlinks."""
    paths = []
    with os.scandir(".") as entries:
        for entry in entries:
            try:
                is_link = entry.is_symlink()
            except OSError as e:
                logger.debug("Cannot tell whether %s is a symlink, keeping it: %s", entry.name, e)
                is_link = False
            if not is_link:
                paths.append(Path(entry.name))
    paths.sort()
    return paths


def paths_from(paths: list[Path], cross_filesystems: bool) -> list[Path]:
    """
    Roots to aggregate: the given paths, or the working directory's entries.

    When staying on one filesystem, listed entries on another device are
    dropped. If the working directory's own device cannot be determined,
    nothing is dropped, and neither is an entry whose metadata cannot be read.

    Raises:
        OSError: if the working directory cannot be listed
    """
    if paths:
        return list(paths)

    listing = cwd_dirlist()
    if cross_filesystems:
        return listing

    try:
        device_id = crossdev.init(Path.cwd())
    except OSError as e:
        logger.debug("Cannot resolve device of working directory, keeping all entries: %s", e)
        return listing

    kept = []
    for path in listing:
        try:
            meta = EntryMetadata.from_stat(path, os.stat(path))
        except OSError:
            kept.append(path)
            continue
        if crossdev.is_same_device(device_id, meta):
            kept.append(path)
    return kept


@app.command()
def main(
    input: Optional[list[Path]] = typer.Argument(
        None, help="Paths to summarize. Defaults to the entries of the working directory."
    ),
    threads: Optional[int] = typer.Option(
        None, "--threads", "-t", min=0, help="Thread count hint, 0 means automatic"
    ),
    byte_format: Optional[ByteFormat] = typer.Option(
        None, "--format", "-f", case_sensitive=False, help="How sizes are displayed"
    ),
    apparent_size: Optional[bool] = typer.Option(
        None,
        "--apparent-size/--no-apparent-size",
        "-A",
        help="Show apparent size instead of size on disk",
    ),
    count_hard_links: Optional[bool] = typer.Option(
        None,
        "--count-hard-links/--no-count-hard-links",
        "-l",
        help="Count every hard link to a file",
    ),
    stay_on_filesystem: Optional[bool] = typer.Option(
        None,
        "--stay-on-filesystem/--cross-filesystems",
        "-x",
        help="Do not cross filesystem boundaries",
    ),
    ignore_dirs: Optional[list[Path]] = typer.Option(
        None, "--ignore-dirs", "-i", help="Directories to list without entering"
    ),
    no_total: bool = typer.Option(False, "--no-total", help="Do not print the total line"),
    no_sort: bool = typer.Option(False, "--no-sort", help="Print paths in the order given"),
    statistics: bool = typer.Option(
        False, "--stats", "-s", help="Print traversal statistics to stderr"
    ),
    config_file: Optional[Path] = typer.Option(
        None, "--config", help="Read defaults from this file instead of ~/.dusk/config.json"
    ),
    verbose: bool = typer.Option(False, "--verbose", help="Log every error as it happens"),
    version: bool = typer.Option(
        None,
        "--version",
        "-v",
        help="Show version and exit.",
        callback=version_callback,
        is_eager=True,
    ),
) -> None:
    """Summarize the disk space used by each path, largest last."""
    setup_logging(verbose)
    settings = load_config(config_file)

    # Flags left unset fall back to the config file
    if apparent_size is None:
        apparent_size = settings.apparent_size
    if count_hard_links is None:
        count_hard_links = settings.count_hard_links
    if stay_on_filesystem is None:
        stay_on_filesystem = settings.stay_on_filesystem

    cross_filesystems = not stay_on_filesystem
    dirs = ignore_dirs if ignore_dirs is not None else settings.ignore_dirs
    walk_options = WalkOptions(
        threads=threads if threads is not None else settings.threads,
        byte_format=byte_format or settings.format,
        apparent_size=apparent_size,
        count_hard_links=count_hard_links,
        cross_filesystems=cross_filesystems,
        ignore_dirs=frozenset(Path(os.path.abspath(d)) for d in dirs),
    )

    try:
        roots = paths_from(input or [], cross_filesystems)
        res, stats = aggregate(
            console,
            stderr_if_tty(),
            walk_options,
            not no_total,
            not no_sort,
            roots,
        )
    except OSError as e:
        err_console.print(f"[red]Error: {escape(str(e))}[/red]")
        raise typer.Exit(1)

    if statistics:
        show_statistics(stats)

    raise typer.Exit(res.to_exit_code())


if __name__ == "__main__":
    app()
