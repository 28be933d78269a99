"""Tests for data models."""

from pathlib import Path

import pytest
from pydantic import ValidationError

from dusk.models import (
    SMALLEST_FILE_SENTINEL,
    Aggregate,
    ByteFormat,
    Statistics,
    WalkOptions,
    WalkResult,
)


class TestByteFormat:
    def test_values(self):
        assert ByteFormat.METRIC.value == "metric"
        assert ByteFormat.BINARY.value == "binary"
        assert ByteFormat.BYTES.value == "bytes"
        assert ByteFormat.GIB.value == "gib"

    def test_from_string(self):
        assert ByteFormat("mb") == ByteFormat.MB


class TestWalkOptions:
    def test_defaults(self):
        options = WalkOptions()
        assert options.threads == 0
        assert options.byte_format == ByteFormat.METRIC
        assert not options.apparent_size
        assert not options.count_hard_links
        assert options.cross_filesystems
        assert options.ignore_dirs == frozenset()

    def test_ignore_dirs_become_paths(self):
        options = WalkOptions(ignore_dirs={"/proc", "/sys"})
        assert options.ignore_dirs == frozenset({Path("/proc"), Path("/sys")})

    def test_is_immutable(self):
        options = WalkOptions()
        with pytest.raises(ValidationError):
            options.apparent_size = True

    def test_rejects_negative_threads(self):
        with pytest.raises(ValidationError):
            WalkOptions(threads=-1)


class TestWalkResult:
    def test_success_exit_code(self):
        assert WalkResult().to_exit_code() == 0

    def test_error_exit_code(self):
        assert WalkResult(num_errors=3).to_exit_code() == 1


class TestStatistics:
    def test_fresh_starts_at_sentinel(self):
        stats = Statistics.fresh()
        assert stats.entries_traversed == 0
        assert stats.smallest_file_in_bytes == SMALLEST_FILE_SENTINEL
        assert stats.largest_file_in_bytes == 0

    def test_observe_tracks_extremes(self):
        stats = Statistics.fresh()
        for size in (50, 10, 200, 30):
            stats.observe(size)
        assert stats.smallest_file_in_bytes == 10
        assert stats.largest_file_in_bytes == 200

    def test_observe_never_raises_smallest(self):
        stats = Statistics.fresh()
        stats.observe(0)
        stats.observe(100)
        assert stats.smallest_file_in_bytes == 0
        assert stats.largest_file_in_bytes == 100


class TestAggregate:
    def test_defaults(self):
        agg = Aggregate(path="/tmp")
        assert agg.num_bytes == 0
        assert agg.num_errors == 0

    def test_rejects_negative_bytes(self):
        with pytest.raises(ValidationError):
            Aggregate(path="/tmp", num_bytes=-1)
