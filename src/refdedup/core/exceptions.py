"""
Copyright (c) 2025 initumX (initum.x@gmail.com)
Licensed under the MIT License

core/exceptions.py
Error taxonomy for the comparison engine.

Fatal errors (abort the run before anything is deleted):
- ValidationError: a supplied root is not a directory
- FilesystemError: a directory could not be listed

Comparison errors (the comparison premise is stale or unreadable):
- MissingFileError: a file vanished between enumeration and comparison
- ContentReadError: reading file content failed mid-comparison
"""


class RefDedupError(Exception):
    """Base class for all refdedup errors."""


class ValidationError(RefDedupError, ValueError):
    """A root path or parameter is invalid."""


class FilesystemError(RefDedupError, OSError):
    """A directory listing or stat call failed during enumeration."""


class MissingFileError(RefDedupError, FileNotFoundError):
    """A file that was enumerated no longer exists."""


class ContentReadError(RefDedupError, OSError):
    """Reading file content failed while comparing."""


class OperationCancelled(RefDedupError):
    """Raised when stopped_flag requests cancellation."""
