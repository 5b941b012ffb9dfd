"""
Copyright (c) 2025 initumX (initum.x@gmail.com)
Licensed under the MIT License

core/models.py
Data models and domain logic for reference-tree comparison.
"""

from dataclasses import dataclass, field
from typing import List, Dict, Optional, Union, Callable, FrozenSet, Iterable
import os
import logging
from enum import Enum

from refdedup.core.exceptions import ValidationError
from refdedup.utils.convert_utils import ConvertUtils

logger = logging.getLogger(__name__)

# Size reported for empty directory-marker files on some filesystems
DEFAULT_EXCLUDED_SIZES = frozenset({4096})


# =============================
# Path helpers
# =============================

def normalize_root(path: str) -> str:
    """Absolute, normalized form used for every root and file path."""
    return os.path.normpath(os.path.abspath(os.path.expanduser(path)))


def is_under(path: str, root: str) -> bool:
    """
    Component-wise containment: True if `path` is `root` or lies inside it.
    "/photos2/a.jpg" is NOT under "/photos".
    """
    if path == root:
        return True
    prefix = root if root.endswith(os.sep) else root + os.sep
    return path.startswith(prefix)


def is_under_any(path: str, roots: Iterable[str]) -> bool:
    return any(is_under(path, root) for root in roots)


# =============================
# Enums
# =============================

class OperationKind(Enum):
    """
    Selection rule applied to each candidate file of a group.
    """
    DUPLICATE = "duplicate"
    ORIGINALS = "originals"

    @property
    def display_name(self) -> str:
        """Human-readable name for UI display."""
        mapping = {
            OperationKind.DUPLICATE: "Duplicates",
            OperationKind.ORIGINALS: "Originals",
        }
        return mapping.get(self, self.value)

    @property
    def description(self) -> str:
        """Detailed description for help text."""
        mapping = {
            OperationKind.DUPLICATE:
                "Candidate files whose content exists in the reference tree",
            OperationKind.ORIGINALS:
                "Candidate files with no byte-equal counterpart in the reference tree",
        }
        return mapping.get(self, self.value)

    def __repr__(self) -> str:
        return self.value


class Stage(str, Enum):
    REFERENCE_SCAN = "Reference scan"
    CANDIDATE_SCAN = "Candidate scan"
    SIZE = "Size grouping"
    CONFIRM = "Confirming"

    @classmethod
    def get_all(cls):
        return [cls.REFERENCE_SCAN, cls.CANDIDATE_SCAN, cls.SIZE, cls.CONFIRM]


# ======================
#  Core Data Models
# ======================

@dataclass(frozen=True)
class File:
    """
    A regular file found during enumeration.
    Path is absolute; size is cached at enumeration time.
    """
    path: str
    size: int  # in bytes

    @property
    def name(self) -> str:
        return os.path.basename(self.path)

    def __repr__(self):
        return f"<File path={self.path}, size={self.size}>"


@dataclass
class SizeGroup:
    """
    Files sharing one exact byte size: a plausible duplicate set.
    Paths keep index insertion order (candidate files first).
    """
    size: int
    paths: List[str]

    @property
    def count(self) -> int:
        return len(self.paths)

    @property
    def first_path(self) -> str:
        return self.paths[0]

    def originals(self, reference_root: str, candidate_roots: List[str]) -> FrozenSet[str]:
        """Members under the reference root and under none of the candidate roots."""
        return frozenset(
            p for p in self.paths
            if is_under(p, reference_root) and not is_under_any(p, candidate_roots)
        )

    def candidates(self, originals: FrozenSet[str]) -> List[str]:
        """Every member not in the original set, in member order."""
        return [p for p in self.paths if p not in originals]

    def __repr__(self):
        return f"<SizeGroup size={self.size}, count={len(self.paths)}>"


@dataclass
class RootSet:
    """One reference root plus the ordered candidate roots compared against it."""
    reference_root: str
    candidate_roots: List[str]

    def __post_init__(self):
        self.reference_root = normalize_root(self.reference_root)
        self.candidate_roots = [normalize_root(p) for p in self.candidate_roots]

    def validate(self) -> None:
        """
        Check every root independently. Raises ValidationError if a root is not
        a directory. A candidate root nested in the reference root is accepted
        with a warning: its files never count as originals.
        """
        for root in [self.reference_root] + self.candidate_roots:
            if not os.path.isdir(root):
                logger.error(f"Provide directories, not files: {root}")
                raise ValidationError(f"Not a directory: {root}")

        for candidate_root in self.candidate_roots:
            if is_under(candidate_root, self.reference_root):
                logger.warning(
                    f"Candidate path {candidate_root} lies inside reference path "
                    f"{self.reference_root}; its files are excluded from originals"
                )


@dataclass
class ThrottlePolicy:
    """
    Bounds the confirmation pass: at most `window * max(1, n // divisor)` groups
    are processed. Progress is reported every `max(1, n // divisor)` groups.
    """
    skip_groups: int = 0
    divisor: int = 100
    window: int = 128
    enabled: bool = True

    def __post_init__(self):
        if self.skip_groups < 0:
            raise ValidationError("Skip count cannot be negative")
        if self.divisor < 1 or self.window < 1:
            raise ValidationError("Throttle divisor and window must be positive")

    def sample_rate(self, group_count: int) -> int:
        return max(1, group_count // self.divisor)

    def limit(self, group_count: int) -> int:
        if not self.enabled:
            return group_count
        return min(group_count, self.sample_rate(group_count) * self.window)


@dataclass
class DeletionResult:
    path: str
    success: bool
    error: Optional[str] = None


@dataclass
class DeletionReport:
    """Per-file and per-directory outcome of a deletion run."""
    file_results: List[DeletionResult] = field(default_factory=list)
    directory_results: List[DeletionResult] = field(default_factory=list)
    skipped: List[str] = field(default_factory=list)
    cancelled: bool = False

    @property
    def deleted_count(self) -> int:
        return sum(1 for r in self.file_results if r.success)

    @property
    def failed(self) -> List[DeletionResult]:
        return [r for r in self.file_results if not r.success]

    @property
    def pruned_count(self) -> int:
        return sum(1 for r in self.directory_results if r.success)

    @property
    def failed_directories(self) -> List[DeletionResult]:
        return [r for r in self.directory_results if not r.success]


class ComparisonStats:
    """
    Statistics collected during a comparison run.
    """
    def __init__(self):
        self.total_time: float = 0.0
        self.reference_files: int = 0
        self.candidate_files: int = 0
        self.group_count: int = 0
        self.total_group_bytes: int = 0
        self.groups_processed: int = 0
        self.selected: int = 0
        self.stage_stats: Dict[str, Dict[str, Union[int, float]]] = {}
        self._listeners: List[Callable[[str, Dict], None]] = []

    def add_listener(self, listener: Callable[[str, Dict], None]):
        """Adds a listener to receive updates when stats are updated."""
        self._listeners.append(listener)

    def update_stage(
            self,
            stage_name: str,
            groups_found: int,
            files_processed: int,
            duration: float
    ) -> None:
        if stage_name not in self.stage_stats:
            self.stage_stats[stage_name] = {
                "groups": 0,
                "files": 0,
                "time": 0.0
            }
        self.stage_stats[stage_name]["groups"] += groups_found
        self.stage_stats[stage_name]["files"] += files_processed
        self.stage_stats[stage_name]["time"] += duration

        for listener in self._listeners:
            try:
                listener(stage_name, self.stage_stats[stage_name])
            except Exception as e:
                logger.warning(f"Error in stats event handler: {e}")

    def print_summary(self) -> str:
        lines = [
            "Comparison Statistics:",
            f"Total Execution Time: {self.total_time:.3f}s",
            f"Reference files: {self.reference_files}",
            f"Candidate files: {self.candidate_files}",
            f"Size groups to investigate: {self.group_count} "
            f"({ConvertUtils.bytes_to_human(self.total_group_bytes)} in total)",
            f"Groups confirmed: {self.groups_processed}",
            f"Files selected: {self.selected}",
            "",
            "Stage: GROUPS / FILES / TIME",
        ]

        for stage, data in self.stage_stats.items():
            lines.append(f"{stage}: {data['groups']} / {data['files']} / {data['time']:.3f}s")

        return "\n".join(lines)


"""
DTO for comparison parameters with built-in validation.
Interface-agnostic — used by the CLI and by library callers.
"""

@dataclass
class ComparisonParams:
    """Parameters for a comparison run with validation."""
    reference_root: str
    candidate_roots: List[str]
    operation: OperationKind = OperationKind.DUPLICATE
    skip_groups: int = 0
    excluded_sizes: FrozenSet[int] = field(default=DEFAULT_EXCLUDED_SIZES)
    throttle: bool = True

    def __post_init__(self):
        """Validate parameters immediately after creation."""
        if not self.reference_root:
            raise ValidationError("Reference directory cannot be empty")

        if not self.candidate_roots or any(not p for p in self.candidate_roots):
            raise ValidationError("At least one candidate directory is required")

        if self.skip_groups < 0:
            raise ValidationError("Skip count cannot be negative")

        if any(size < 0 for size in self.excluded_sizes):
            raise ValidationError("Excluded sizes cannot be negative")

        self.excluded_sizes = frozenset(self.excluded_sizes)
        self.reference_root = normalize_root(self.reference_root)
        self.candidate_roots = [normalize_root(p) for p in self.candidate_roots]

    @property
    def roots(self) -> RootSet:
        return RootSet(self.reference_root, list(self.candidate_roots))

    @property
    def throttle_policy(self) -> ThrottlePolicy:
        return ThrottlePolicy(skip_groups=self.skip_groups, enabled=self.throttle)

    @staticmethod
    def from_human_readable(
            reference_root: str,
            candidate_roots: List[str],
            operation: OperationKind = OperationKind.DUPLICATE,
            skip_groups: int = 0,
            excluded_sizes: Optional[List[str]] = None,
            throttle: bool = True,
    ) -> 'ComparisonParams':
        """
        Factory method to create params from human-readable inputs.
        Excluded sizes accept the same formats as ConvertUtils.human_to_bytes.
        """
        if excluded_sizes is None:
            sizes = DEFAULT_EXCLUDED_SIZES
        else:
            try:
                sizes = frozenset(ConvertUtils.human_to_bytes(s) for s in excluded_sizes if s.strip())
            except ValueError as e:
                raise ValidationError(str(e)) from e

        return ComparisonParams(
            reference_root=reference_root,
            candidate_roots=list(candidate_roots),
            operation=operation,
            skip_groups=skip_groups,
            excluded_sizes=sizes,
            throttle=throttle,
        )
