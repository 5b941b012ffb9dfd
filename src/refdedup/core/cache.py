"""
Copyright (c) 2025 initumX (initum.x@gmail.com)
Licensed under the MIT License

core/cache.py
Session-scoped memo of reference-tree listings.

Re-running a comparison against the same (unchanged) reference tree with
different candidate trees should not walk the reference tree again. The cache
is an explicit object owned by the caller (one per operator session).
"""

import logging
from collections import OrderedDict
from typing import Callable, Iterable, List, Tuple, FrozenSet

from refdedup.core.models import File, normalize_root, is_under

logger = logging.getLogger(__name__)


class ReferenceCache:
    """
    LRU map: reference root -> (skip roots used for the listing, files).
    Skip roots outside the reference root are ignored. A lookup whose skip
    roots inside the reference root differ refreshes the entry, because the
    cached listing would otherwise miss files under formerly skipped roots.
    """

    def __init__(self, capacity: int = 8):
        if capacity < 1:
            raise ValueError("Cache capacity must be positive")
        self.capacity = capacity
        self._entries: "OrderedDict[str, Tuple[FrozenSet[str], List[File]]]" = OrderedDict()

    def __contains__(self, root: str) -> bool:
        return normalize_root(root) in self._entries

    def __len__(self) -> int:
        return len(self._entries)

    def get_or_scan(
            self,
            root: str,
            skip_roots: Iterable[str],
            scan: Callable[[str, List[str]], List[File]]
    ) -> List[File]:
        """Return the cached listing of root, calling scan(root, skip_roots) on a miss."""
        root = normalize_root(root)
        # Only skip roots inside the reference tree shape its listing
        skip = frozenset(s for s in map(normalize_root, skip_roots) if is_under(s, root))

        entry = self._entries.get(root)
        if entry is not None and entry[0] == skip:
            self._entries.move_to_end(root)
            logger.info(f"Reusing cached listing of '{root}' ({len(entry[1])} files).")
            return entry[1]

        if entry is not None:
            logger.info(f"Skipped paths changed for '{root}', listing it again.")

        files = scan(root, sorted(skip))
        self._entries[root] = (skip, files)
        self._entries.move_to_end(root)
        while len(self._entries) > self.capacity:
            evicted, _ = self._entries.popitem(last=False)
            logger.debug(f"Evicted cached listing of '{evicted}'")
        return files

    def invalidate(self, root: str) -> None:
        self._entries.pop(normalize_root(root), None)

    def clear(self) -> None:
        self._entries.clear()
