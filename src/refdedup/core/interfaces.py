"""
Copyright (c) 2025 initumX (initum.x@gmail.com)
Licensed under the MIT License

interfaces.py

Defines core interfaces (Protocols) used throughout the comparison engine.
These protocols enforce structural typing using Python's `typing.Protocol` so the
pipeline stages can be swapped or mocked independently.

Key Components:
---------------
- HashAlgorithm: Standardized interface for hash functions (e.g., xxHash).
- ContentComparator: Byte-exact equality between two existing files.
- FileScanner: Recursive, filtered, sorted listing of regular files.
- Operation: Selection rule applied to each candidate file of a group.
- Confirmer: Confirmation capability called before destructive actions.
"""

from typing import Protocol, List, Optional, Callable, FrozenSet, Iterable
from refdedup.core.models import File


class HashAlgorithm(Protocol):
    """
    Interface for generic hash algorithms.
    """

    @staticmethod
    def hash(data: bytes) -> bytes:
        """Computes the hash of the provided byte data."""
        ...


class ContentComparator(Protocol):
    """Interface for byte-exact file comparison."""

    def equal(self, path_a: str, path_b: str) -> bool:
        """
        True if both files have identical content.

        Raises:
            MissingFileError: if either file no longer exists.
            ContentReadError: if reading either file fails.
        """
        ...


class FileScanner(Protocol):
    """
    Interface for scanning file systems and collecting file metadata.
    """
    def scan(
        self,
        root: str,
        skip_roots: Iterable[str] = (),
        stopped_flag: Optional[Callable[[], bool]] = None,
        progress_callback: Optional[Callable[[str, int, object], None]] = None
    ) -> List[File]:
        """
        Scan every regular file under root, skipping any directory in skip_roots.

        Returns:
            Files sorted by absolute path.
        """
        ...


class Operation(Protocol):
    """
    Selection rule for a candidate file against the originals of its group.
    """
    def select(self, originals: FrozenSet[str], candidate: str) -> bool:
        ...


# Receives a description of the pending destructive action, returns approval
Confirmer = Callable[[str], bool]
