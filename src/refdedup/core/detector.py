"""
Copyright (c) 2025 initumX (initum.x@gmail.com)
Licensed under the MIT License

detector.py
Implements the comparison pipeline:
    reference scan → candidate scans → size index → group filter → confirmation
"""
import time
import logging
from typing import List, Tuple, Optional, Callable

from refdedup.core.models import ComparisonParams, ComparisonStats, File, Stage, is_under
from refdedup.core.scanner import FileScannerImpl
from refdedup.core.cache import ReferenceCache
from refdedup.core.grouper import SizeIndexBuilder, GroupFilter
from refdedup.core.classifier import Classifier
from refdedup.core.comparator import ContentComparatorImpl
from refdedup.core.hasher import FrontHasher
from refdedup.core.operations import create_operation
from refdedup.core.interfaces import FileScanner, ContentComparator

logger = logging.getLogger(__name__)


# =============================
# Main Detector Class
# =============================
class ReferenceDuplicateDetector:
    """
    Runs one comparison of candidate trees against a reference tree.
    Collects per-stage statistics.
    """
    def __init__(
            self,
            scanner: Optional[FileScanner] = None,
            cache: Optional[ReferenceCache] = None,
            comparator: Optional[ContentComparator] = None
    ):
        self.scanner = scanner or FileScannerImpl()
        self.cache = cache
        self.comparator = comparator

    def find(
        self,
        params: ComparisonParams,
        stopped_flag: Optional[Callable[[], bool]] = None,
        progress_callback: Optional[Callable[[str, int, object], None]] = None
    ) -> Tuple[List[str], ComparisonStats]:
        """
        Args:
            params: validated comparison parameters
            stopped_flag: returns True if the operation should be cancelled
            progress_callback: (stage, current, total) progress reports
        Returns:
            (selected candidate paths, statistics)
        Raises:
            ValidationError, FilesystemError, MissingFileError, ContentReadError,
            OperationCancelled
        """
        stats = ComparisonStats()
        total_start_time = time.time()

        roots = params.roots
        roots.validate()
        reference_root = roots.reference_root
        candidate_roots = roots.candidate_roots

        logger.info(f"Retrieving listing of files of '{reference_root}' and {candidate_roots}, "
                    f"might take several minutes to complete ...")

        # Reference tree, skipping the candidate trees nested in it
        start_time = time.time()
        reference_files = self._scan_reference(reference_root, candidate_roots, stopped_flag, progress_callback)
        stats.reference_files = len(reference_files)
        stats.update_stage(Stage.REFERENCE_SCAN.value, 0, len(reference_files), time.time() - start_time)
        logger.info(f"Original path '{reference_root}' contains {len(reference_files)} files.")

        # Candidate trees, skipping the reference tree and candidate trees nested
        # in the one being listed, so every file is listed once
        start_time = time.time()
        candidate_files: List[File] = []
        for candidate_root in dict.fromkeys(candidate_roots):
            nested = [r for r in candidate_roots if r != candidate_root and is_under(r, candidate_root)]
            candidate_files.extend(self.scanner.scan(
                candidate_root,
                skip_roots=[reference_root] + nested,
                stopped_flag=stopped_flag,
                progress_callback=progress_callback
            ))
        stats.candidate_files = len(candidate_files)
        stats.update_stage(Stage.CANDIDATE_SCAN.value, 0, len(candidate_files), time.time() - start_time)
        logger.info(f"Other paths {candidate_roots} contain {len(candidate_files)} files.")

        logger.info("Now processing the duplicate entries by comparing file sizes.")
        start_time = time.time()
        index = SizeIndexBuilder.build_index(candidate_files, reference_files)
        groups = GroupFilter(params.excluded_sizes).filter_groups(index, reference_root, candidate_roots, stats)
        stats.update_stage(Stage.SIZE.value, len(groups), sum(g.count for g in groups), time.time() - start_time)
        if progress_callback:
            progress_callback(Stage.SIZE.value, len(groups), len(groups))

        start_time = time.time()
        comparator = self.comparator or ContentComparatorImpl(FrontHasher())
        operation = create_operation(params.operation, comparator)
        selected = Classifier(params.throttle_policy).classify(
            groups,
            reference_root,
            candidate_roots,
            operation,
            stats=stats,
            stopped_flag=stopped_flag,
            progress_callback=progress_callback
        )
        stats.update_stage(Stage.CONFIRM.value, stats.groups_processed, len(selected), time.time() - start_time)

        stats.total_time = time.time() - total_start_time
        return selected, stats

    def _scan_reference(
            self,
            reference_root: str,
            candidate_roots: List[str],
            stopped_flag: Optional[Callable[[], bool]],
            progress_callback: Optional[Callable[[str, int, object], None]]
    ) -> List[File]:
        def scan(root: str, skip_roots: List[str]) -> List[File]:
            return self.scanner.scan(
                root,
                skip_roots=skip_roots,
                stopped_flag=stopped_flag,
                progress_callback=progress_callback
            )

        if self.cache is None:
            return scan(reference_root, candidate_roots)
        return self.cache.get_or_scan(reference_root, candidate_roots, scan)
