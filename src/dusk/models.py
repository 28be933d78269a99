"""Data models for dusk."""

from enum import Enum
from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field

# Largest value a u128 byte counter can hold; starting point for the smallest-file tracker
SMALLEST_FILE_SENTINEL = 2**128 - 1


class ByteFormat(str, Enum):
    """How byte counts are rendered."""

    METRIC = "metric"  # adaptive, 1000-based
    BINARY = "binary"  # adaptive, 1024-based
    BYTES = "bytes"
    GB = "gb"
    GIB = "gib"
    MB = "mb"
    MIB = "mib"


class WalkOptions(BaseModel):
    """Configuration for a single run, immutable once built."""

    model_config = ConfigDict(frozen=True)

    threads: int = Field(0, ge=0, description="Thread count hint, 0 means automatic")
    byte_format: ByteFormat = Field(ByteFormat.METRIC, description="Display format for sizes")
    apparent_size: bool = Field(
        False, description="Use the logical file length instead of allocated blocks"
    )
    count_hard_links: bool = Field(
        False, description="Count every hard link instead of each inode once"
    )
    cross_filesystems: bool = Field(
        True, description="Descend into entries living on another device"
    )
    ignore_dirs: frozenset[Path] = Field(
        default_factory=frozenset, description="Directories that are listed but not entered"
    )


class WalkResult(BaseModel):
    """Outcome of a run, used by the caller to pick an exit status."""

    num_errors: int = Field(0, ge=0, description="IO errors across all roots")

    def to_exit_code(self) -> int:
        """Exit status for the process: 1 if anything failed."""
        return 1 if self.num_errors > 0 else 0


class Statistics(BaseModel):
    """Statistics obtained during a filesystem walk."""

    entries_traversed: int = Field(0, description="Entries seen during traversal")
    smallest_file_in_bytes: int = Field(0, description="Smallest contribution seen")
    largest_file_in_bytes: int = Field(0, description="Largest contribution seen")

    @classmethod
    def fresh(cls) -> "Statistics":
        """Statistics ready for a new run, smallest set to the sentinel."""
        return cls(smallest_file_in_bytes=SMALLEST_FILE_SENTINEL)

    def observe(self, size: int) -> None:
        """Fold one size contribution into the min/max trackers."""
        if size > self.largest_file_in_bytes:
            self.largest_file_in_bytes = size
        if size < self.smallest_file_in_bytes:
            self.smallest_file_in_bytes = size


class Aggregate(BaseModel):
    """Accumulated result for one root path."""

    path: str = Field(..., description="Root path as given")
    num_bytes: int = Field(0, ge=0, description="Bytes attributed to this root")
    num_errors: int = Field(0, ge=0, description="IO errors while walking this root")
