"""Rich terminal display for dusk."""

from pathlib import Path
from typing import Optional

from rich.console import Console
from rich.table import Table
from rich.text import Text

from dusk import byte_format
from dusk.models import SMALLEST_FILE_SENTINEL, ByteFormat, Statistics

console = Console(highlight=False)
err_console = Console(stderr=True, highlight=False)


def path_color_of(path: str | Path) -> Optional[str]:
    """Color for a path: anything that is not a regular file is cyan."""
    return None if Path(path).is_file() else "cyan"


def format_errors(num_errors: int) -> str:
    """Suffix appended to a result line when errors occurred."""
    if num_errors == 0:
        return ""
    plural_s = "s" if num_errors > 1 else ""
    return f"  <{num_errors} IO Error{plural_s}>"


def output_colored_path(
    out: Console,
    fmt: ByteFormat,
    path: str | Path,
    num_bytes: int,
    num_errors: int,
    path_color: Optional[str],
) -> None:
    """
    Write one result line: right-aligned size, path, and any error count.

    Args:
        out: Console bound to the results stream
        fmt: Byte format to render the size in
        path: Label to show, usually the root path as given
        num_bytes: Size attributed to the path
        num_errors: IO errors seen while walking the path
        path_color: Style for the path, or None for plain text

    Raises:
        OSError: if writing to the underlying stream fails
    """
    size = byte_format.display(fmt, num_bytes).rjust(byte_format.width(fmt))
    line = Text.assemble(
        (size, "green"),
        " ",
        (str(path), path_color or ""),
        format_errors(num_errors),
    )
    out.print(line, soft_wrap=True)


def show_statistics(stats: Statistics, out: Console = err_console) -> None:
    """Display run statistics."""
    table = Table(title="Statistics", show_header=False)
    table.add_column("Metric", style="bold")
    table.add_column("Value", justify="right")

    smallest = stats.smallest_file_in_bytes
    table.add_row("Entries traversed", str(stats.entries_traversed))
    table.add_row(
        "Smallest file",
        "n/a" if smallest == SMALLEST_FILE_SENTINEL else f"{smallest} b",
    )
    table.add_row("Largest file", f"{stats.largest_file_in_bytes} b")

    out.print(table)
