"""
refdedup — find files of candidate folders that already exist in a reference folder.

Core features:
- Two operations: DUPLICATE (candidate content exists in the reference tree)
  and ORIGINALS (candidate content missing from the reference tree)
- Size bucketing before byte-exact comparison (no O(n²) content checks)
- Safe deletion to system trash (via send2trash) with empty-directory pruning
- CLI interface for interactive and batch usage
"""

from importlib.metadata import version as _version, PackageNotFoundError

try:
    __version__ = _version("refdedup")
except PackageNotFoundError:
    __version__ = "0.0.0"

# Public API: only what users should import directly
from refdedup.commands import ComparisonCommand
from refdedup.core import (
    ComparisonParams, ComparisonStats, OperationKind, File, SizeGroup,
    DeletionReport, ReferenceCache)
from refdedup.utils.convert_utils import ConvertUtils
from refdedup.services import DeletionService, FileService

__all__ = [
    "ComparisonCommand",
    "ComparisonParams",
    "ComparisonStats",
    "OperationKind",
    "File",
    "SizeGroup",
    "DeletionReport",
    "ReferenceCache",
    "ConvertUtils",
    "DeletionService",
    "FileService",
    "__version__",
]
