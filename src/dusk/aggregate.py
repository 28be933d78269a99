"""Aggregate disk usage of root paths into one line each.

For every root the walker is driven to completion, each entry is turned into a
byte contribution, and the per-root total is written to the results console,
either immediately or after sorting all roots by size. Filesystem problems are
counted, never raised; only failures writing results reach the caller.
"""

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Iterable, Iterator, Optional, TextIO

from rich.console import Console

from dusk import crossdev
from dusk.display import output_colored_path, path_color_of
from dusk.inodes import InodeFilter
from dusk.models import Aggregate, Statistics, WalkOptions, WalkResult
from dusk.progress import ThrottledWriter
from dusk.walk import Entry, EntryMetadata, iter_from_path

logger = logging.getLogger(__name__)

PROGRESS_INTERVAL = 0.1
CLEAR_LINE = "\x1b[2K\r"
TOTAL_LABEL = "total"

Walker = Callable[[Path, WalkOptions], Iterator[Entry]]
DeviceResolver = Callable[[Path], int]


@dataclass(frozen=True)
class Contribution:
    """Bytes one entry adds to its root, and whether measuring it failed."""

    num_bytes: int = 0
    error: bool = False


def classify_entry(
    meta: EntryMetadata,
    options: WalkOptions,
    root_device: int,
    inodes: InodeFilter,
) -> Contribution:
    """
    Decide how much a single entry counts towards its root.

    Directories count nothing. Files count when they are the first sighting of
    their inode (or hard links are counted) and they live on the root's device
    (or crossing filesystems is allowed). Skipped entries are not errors.

    Args:
        meta: Metadata of the entry
        options: Run configuration
        root_device: Device id of the root being walked
        inodes: Inodes seen so far in this run, updated in place

    Returns:
        The entry's contribution; error is set if its on-disk size was unavailable
    """
    if meta.is_dir:
        return Contribution()
    if not (options.count_hard_links or inodes.add(meta)):
        return Contribution()
    if not (options.cross_filesystems or crossdev.is_same_device(root_device, meta)):
        return Contribution()

    if options.apparent_size:
        return Contribution(num_bytes=meta.len)
    try:
        return Contribution(num_bytes=meta.size_on_disk())
    except OSError as e:
        logger.debug("Cannot query size on disk of %s: %s", meta.path, e)
        return Contribution(error=True)


def _write_progress_count(count: int) -> Callable[[TextIO], None]:
    def write(out: TextIO) -> None:
        # Progress writes never abort the run
        try:
            out.write(f"Enumerating {count} entries\r")
            out.flush()
        except OSError:
            pass

    return write


def _output_aggregate(out: Console, options: WalkOptions, agg: Aggregate) -> None:
    output_colored_path(
        out,
        options.byte_format,
        agg.path,
        agg.num_bytes,
        agg.num_errors,
        path_color_of(agg.path),
    )


def _clear_progress_line(out: TextIO) -> None:
    try:
        out.write(CLEAR_LINE)
        out.flush()
    except OSError:
        pass


def aggregate(
    out: Console,
    err: Optional[TextIO],
    walk_options: WalkOptions,
    compute_total: bool,
    sort_by_size_in_bytes: bool,
    paths: Iterable[str | Path],
    *,
    walker: Walker = iter_from_path,
    device_of: DeviceResolver = crossdev.init,
    progress_interval: float = PROGRESS_INTERVAL,
) -> tuple[WalkResult, Statistics]:
    """
    Aggregate the given paths and write one human-readable line per path to out.

    Args:
        out: Console receiving the result lines
        err: Optional stream for throttled progress, usually stderr on a TTY
        walk_options: Run configuration
        compute_total: Write a final "total" line when more than one path is given
        sort_by_size_in_bytes: Write the lines sorted ascending by size, after all
            paths are walked, instead of as each path finishes
        paths: Root paths, in the order they should be walked
        walker: Produces the entries below a root
        device_of: Resolves the device id of a root
        progress_interval: Seconds between progress updates on err

    Returns:
        Tuple of (WalkResult with the total error count, Statistics)

    Raises:
        OSError: if writing to out fails
    """
    res = WalkResult()
    stats = Statistics.fresh()
    inodes = InodeFilter()
    aggregates: list[Aggregate] = []
    total = 0
    num_roots = 0

    with ThrottledWriter(err, progress_interval) as progress:
        for path in paths:
            num_roots += 1
            num_bytes = 0
            num_errors = 0

            try:
                device_id = device_of(Path(path))
            except OSError as e:
                logger.debug("Cannot resolve device of %s: %s", path, e)
                res.num_errors += 1
                failed = Aggregate(path=str(path), num_bytes=0, num_errors=1)
                if sort_by_size_in_bytes:
                    aggregates.append(failed)
                else:
                    _output_aggregate(out, walk_options, failed)
                continue

            for entry in walker(Path(path), walk_options):
                stats.entries_traversed += 1
                progress.throttled(_write_progress_count(stats.entries_traversed))

                if entry.metadata is None:
                    num_errors += 1
                    continue

                contribution = classify_entry(entry.metadata, walk_options, device_id, inodes)
                if contribution.error:
                    num_errors += 1
                stats.observe(contribution.num_bytes)
                num_bytes += contribution.num_bytes

            progress.unthrottled(_clear_progress_line)

            agg = Aggregate(path=str(path), num_bytes=num_bytes, num_errors=num_errors)
            if sort_by_size_in_bytes:
                aggregates.append(agg)
            else:
                _output_aggregate(out, walk_options, agg)
            total += num_bytes
            res.num_errors += num_errors

    if stats.entries_traversed == 0:
        stats.smallest_file_in_bytes = 0

    if sort_by_size_in_bytes:
        aggregates.sort(key=lambda a: a.num_bytes)
        for agg in aggregates:
            _output_aggregate(out, walk_options, agg)

    if num_roots > 1 and compute_total:
        output_colored_path(
            out,
            walk_options.byte_format,
            TOTAL_LABEL,
            total,
            res.num_errors,
            None,
        )

    return res, stats
