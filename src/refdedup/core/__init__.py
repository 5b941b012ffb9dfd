"""
Core comparison engine — scanner, size grouper, comparator, operations and pipeline.

This package contains the performance-critical foundation of refdedup:
- FileScannerImpl: recursive, sorted directory enumeration with skipped subtrees
- SizeIndexBuilder + GroupFilter: size bucketing and plausible-group pruning
- ContentComparatorImpl + FrontHasher: byte-exact comparison with an xxHash pre-filter
- DuplicateOperation / OriginalsOperation: per-candidate selection rules
- Classifier: throttled confirmation pass
- ReferenceDuplicateDetector: the pipeline tying the stages together
- ReferenceCache: session-scoped memo of reference-tree listings

All components are pure Python with no UI dependencies.
"""

from .exceptions import (
    RefDedupError, ValidationError, FilesystemError, MissingFileError,
    ContentReadError, OperationCancelled)
from .models import (
    File, SizeGroup, RootSet, OperationKind, ThrottlePolicy, ComparisonParams,
    ComparisonStats, DeletionReport, DeletionResult, is_under)
from .scanner import FileScannerImpl
from .cache import ReferenceCache
from .hasher import FrontHasher, XXHashAlgorithmImpl
from .comparator import ContentComparatorImpl
from .grouper import SizeIndexBuilder, GroupFilter
from .operations import DuplicateOperation, OriginalsOperation, create_operation
from .classifier import Classifier
from .detector import ReferenceDuplicateDetector

__all__ = [
    "RefDedupError",
    "ValidationError",
    "FilesystemError",
    "MissingFileError",
    "ContentReadError",
    "OperationCancelled",
    "File",
    "SizeGroup",
    "RootSet",
    "OperationKind",
    "ThrottlePolicy",
    "ComparisonParams",
    "ComparisonStats",
    "DeletionReport",
    "DeletionResult",
    "is_under",
    "FileScannerImpl",
    "ReferenceCache",
    "FrontHasher",
    "XXHashAlgorithmImpl",
    "ContentComparatorImpl",
    "SizeIndexBuilder",
    "GroupFilter",
    "DuplicateOperation",
    "OriginalsOperation",
    "create_operation",
    "Classifier",
    "ReferenceDuplicateDetector",
]
