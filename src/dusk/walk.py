"""Directory traversal producing entries with metadata.

The walker yields the root itself followed by everything below it, depth first.
Symlinks are reported but never followed. Directories listed in
``WalkOptions.ignore_dirs`` are yielded like any other entry, but their
children are not read. A root is always entered. The walk keeps an explicit
stack of open listings, so tree depth is not bounded by the interpreter's
recursion limit.
"""

import logging
import os
import stat
from dataclasses import dataclass
from pathlib import Path
from typing import Generator, Iterator, Optional

from dusk.models import WalkOptions

logger = logging.getLogger(__name__)

# st_blocks is always counted in 512-byte units, regardless of the filesystem block size
BLOCK_SIZE = 512


@dataclass(frozen=True)
class EntryMetadata:
    """The parts of an lstat result the aggregation needs."""

    path: Path
    is_dir: bool
    device: int
    inode: int
    nlink: int
    len: int
    blocks: Optional[int] = None

    @classmethod
    def from_stat(cls, path: Path, st: os.stat_result) -> "EntryMetadata":
        return cls(
            path=path,
            is_dir=stat.S_ISDIR(st.st_mode),
            device=st.st_dev,
            inode=st.st_ino,
            nlink=st.st_nlink,
            len=st.st_size,
            blocks=getattr(st, "st_blocks", None),
        )

    @property
    def inode_key(self) -> tuple[int, int]:
        """Identity shared by all hard links to the same file."""
        return (self.device, self.inode)

    def size_on_disk(self) -> int:
        """Bytes actually allocated for this entry.

        Platforms without st_blocks fall back to a fresh stat of the path.

        Raises:
            OSError: if the fallback stat fails
        """
        if self.blocks is not None:
            return self.blocks * BLOCK_SIZE
        return os.stat(self.path, follow_symlinks=False).st_size


@dataclass(frozen=True)
class Entry:
    """One traversal result: metadata on success, the error otherwise."""

    path: Path
    metadata: Optional[EntryMetadata] = None
    error: Optional[OSError] = None


def _is_ignored(path: Path, ignore_dirs: frozenset[Path]) -> bool:
    if not ignore_dirs:
        return False
    return Path(os.path.abspath(path)) in ignore_dirs


def _read_dir(path: Path) -> list[os.DirEntry]:
    with os.scandir(path) as it:
        return list(it)


def _walk_dir(path: Path, options: WalkOptions) -> Generator[Entry, None, None]:
    # One pending listing per open directory level, deepest last
    stack: list[Iterator[os.DirEntry]] = []
    try:
        stack.append(iter(_read_dir(path)))
    except OSError as e:
        logger.debug("Cannot read directory %s: %s", path, e)
        yield Entry(path=path, error=e)
        return

    while stack:
        child = next(stack[-1], None)
        if child is None:
            stack.pop()
            continue

        child_path = Path(child.path)
        try:
            meta = EntryMetadata.from_stat(child_path, child.stat(follow_symlinks=False))
        except OSError as e:
            logger.debug("Cannot stat %s: %s", child_path, e)
            yield Entry(path=child_path, error=e)
            continue

        yield Entry(path=child_path, metadata=meta)

        if not meta.is_dir or _is_ignored(child_path, options.ignore_dirs):
            continue
        try:
            stack.append(iter(_read_dir(child_path)))
        except OSError as e:
            logger.debug("Cannot read directory %s: %s", child_path, e)
            yield Entry(path=child_path, error=e)


def iter_from_path(root: str | Path, options: WalkOptions) -> Generator[Entry, None, None]:
    """
    Walk root and everything below it.

    The root is always entered, even when it is listed in ignore_dirs.

    Args:
        root: Path to start from; a file yields a single entry
        options: Run configuration, only ignore_dirs is consulted

    Yields:
        An Entry per visited path, with either metadata or the error hit
    """
    root_path = Path(root)
    try:
        meta = EntryMetadata.from_stat(root_path, os.lstat(root_path))
    except OSError as e:
        logger.debug("Cannot stat root %s: %s", root_path, e)
        yield Entry(path=root_path, error=e)
        return

    yield Entry(path=root_path, metadata=meta)

    if meta.is_dir:
        yield from _walk_dir(root_path, options)
