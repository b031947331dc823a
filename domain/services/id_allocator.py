"""
Identity allocator for workout tree nodes.

Every Block, Superset, and Exercise created by the editor (or repaired by
the normalizer) gets its identifier from an IdAllocator. Allocators are
plain objects passed in by the caller so that tests and concurrent
sessions can each use their own.
"""

import itertools
import secrets
import threading

# Shared by every allocator so two allocators in one process never collide
# even if they are given the same prefix.
_counter = itertools.count(1)
_counter_lock = threading.Lock()


class IdAllocator:
    """
    Produces process-unique string identifiers.

    Identifiers look like ``<prefix><counter>-<random>``: the counter part
    guarantees uniqueness within the process and the 64-bit random part
    (from ``secrets``) keeps ids from separate processes apart.

    Usage:
        >>> allocator = IdAllocator()
        >>> allocator.allocate()
        '1a-3f9c2e7d41b0a655'
    """

    def __init__(self, prefix: str = "") -> None:
        """
        Initialize the allocator.

        Args:
            prefix: Optional string prepended to every identifier
        """
        self._prefix = prefix

    @property
    def prefix(self) -> str:
        return self._prefix

    def allocate(self) -> str:
        """
        Return a new identifier, distinct from every one allocated before.

        Returns:
            Non-empty identifier string
        """
        with _counter_lock:
            sequence = next(_counter)
        return f"{self._prefix}{sequence:x}-{secrets.token_hex(8)}"

    def __call__(self) -> str:
        return self.allocate()
