"""
Copyright (c) 2025 initumX (initum.x@gmail.com)
Licensed under the MIT License

core/grouper.py
Size-based bucketing of enumerated files and pruning of the buckets down to
plausible duplicate groups.

The index is seeded asymmetrically: candidate-tree files create buckets,
reference-tree files only join buckets that already exist. A reference file
whose size never occurs among candidates cannot duplicate anything and is
never kept in memory.
"""

import logging
from typing import List, Dict, Iterable, Optional, FrozenSet

from refdedup.core.models import File, SizeGroup, ComparisonStats, DEFAULT_EXCLUDED_SIZES, is_under, is_under_any
from refdedup.utils.convert_utils import ConvertUtils

logger = logging.getLogger(__name__)

SizeIndex = Dict[int, List[str]]


class SizeIndexBuilder:
    """Builds the size → paths index."""

    @staticmethod
    def build_index(candidate_files: Iterable[File], reference_files: Iterable[File]) -> SizeIndex:
        index: SizeIndex = {}
        SizeIndexBuilder._put_entries(candidate_files, index, only_existing=False)
        SizeIndexBuilder._put_entries(reference_files, index, only_existing=True)
        return index

    @staticmethod
    def _put_entries(files: Iterable[File], index: SizeIndex, only_existing: bool) -> None:
        for file in files:
            bucket = index.get(file.size)
            if bucket is not None:
                bucket.append(file.path)
            elif not only_existing:
                index[file.size] = [file.path]


class GroupFilter:
    """
    Keeps buckets that may hold a duplicate pair across the trees.

    A bucket survives iff it has at least two members, its size is positive
    and not excluded, and it holds at least one candidate-tree file and at
    least one reference-tree file.
    """

    def __init__(self, excluded_sizes: FrozenSet[int] = DEFAULT_EXCLUDED_SIZES):
        self.excluded_sizes = frozenset(excluded_sizes)

    def filter_groups(
            self,
            index: SizeIndex,
            reference_root: str,
            candidate_roots: List[str],
            stats: Optional[ComparisonStats] = None
    ) -> List[SizeGroup]:
        groups = [
            SizeGroup(size=size, paths=list(paths))
            for size, paths in index.items()
            if self._keep(size, paths, reference_root, candidate_roots)
        ]
        groups.sort(key=lambda g: g.size)
        self._statistics(groups, stats)
        return groups

    def _keep(self, size: int, paths: List[str], reference_root: str, candidate_roots: List[str]) -> bool:
        if len(paths) < 2:
            return False
        if size <= 0 or size in self.excluded_sizes:
            return False
        if not any(is_under_any(p, candidate_roots) for p in paths):
            return False
        return any(is_under(p, reference_root) for p in paths)

    @staticmethod
    def _statistics(groups: List[SizeGroup], stats: Optional[ComparisonStats]) -> None:
        for group in groups:
            logger.debug(f"{group.count:>2,d} files, {group.size:>8,d} B each.")

        total = sum(g.size for g in groups)
        logger.info(f"Total file groups to investigate: {len(groups)}")
        logger.info(f"In total potential duplicities reaching over "
                    f"{total} Bytes ({ConvertUtils.bytes_to_human(total)})!")

        if stats is not None:
            stats.group_count = len(groups)
            stats.total_group_bytes = total
