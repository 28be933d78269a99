"""Device identification for staying on one filesystem."""

import os
from pathlib import Path

from dusk.walk import EntryMetadata


def init(path: str | Path) -> int:
    """Return the device id of the filesystem holding path.

    Raises:
        OSError: if path cannot be stat'ed
    """
    return os.stat(path).st_dev


def is_same_device(device_id: int, meta: EntryMetadata) -> bool:
    """True if meta lives on the device identified by device_id."""
    return meta.device == device_id
