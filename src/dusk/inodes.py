"""Hard link tracking so each inode is counted once per run."""

from dusk.walk import EntryMetadata


class InodeFilter:
    """Remembers inodes that have more than one link."""

    def __init__(self) -> None:
        self._seen: set[tuple[int, int]] = set()

    def __len__(self) -> int:
        return len(self._seen)

    def add(self, meta: EntryMetadata) -> bool:
        """Return True the first time an inode is offered, False afterwards."""
        # A single link can never show up again
        if meta.nlink <= 1:
            return True
        key = meta.inode_key
        if key in self._seen:
            return False
        self._seen.add(key)
        return True
