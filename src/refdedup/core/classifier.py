"""
Copyright (c) 2025 initumX (initum.x@gmail.com)
Licensed under the MIT License

core/classifier.py
Confirmation pass: turns filtered size groups into a flat list of selected
candidate files.

THROTTLING
----------
For n groups the pass computes
  sample_rate = max(1, n // 100)
  limit       = min(n, sample_rate * 128)
and then, in this exact order:
  1. keeps the first `limit` groups (size order, as filtered),
  2. skips `skip_groups` of those,
  3. sorts the rest by the first member path.
Skipping therefore moves within the truncated window, not within the full
group list. Every `sample_rate`-th processed group reports progress.

PER GROUP
---------
  originals  = members under the reference root and under no candidate root
  candidates = all other members, in member order
Each candidate for which operation.select(originals, candidate) is true is
appended to the result.
"""

import logging
from typing import List, Optional, Callable

from refdedup.core.models import SizeGroup, ThrottlePolicy, ComparisonStats, Stage
from refdedup.core.interfaces import Operation
from refdedup.core.exceptions import OperationCancelled

logger = logging.getLogger(__name__)


class Classifier:

    def __init__(self, policy: Optional[ThrottlePolicy] = None):
        self.policy = policy or ThrottlePolicy()

    def select_window(self, groups: List[SizeGroup]) -> List[SizeGroup]:
        """Limit, then skip, then sort by first member path."""
        limit = self.policy.limit(len(groups))
        window = groups[:limit][self.policy.skip_groups:]
        return sorted(window, key=lambda g: g.first_path)

    def classify(
            self,
            groups: List[SizeGroup],
            reference_root: str,
            candidate_roots: List[str],
            operation: Operation,
            stats: Optional[ComparisonStats] = None,
            stopped_flag: Optional[Callable[[], bool]] = None,
            progress_callback: Optional[Callable[[str, int, object], None]] = None
    ) -> List[str]:
        total = len(groups)
        sample_rate = self.policy.sample_rate(total)
        limit = self.policy.limit(total)

        if limit < total:
            logger.info(f"Only the first {limit} of {total} groups will be confirmed "
                        f"(skipping {self.policy.skip_groups}).")

        selected: List[str] = []
        checks = 0

        for group in self.select_window(groups):
            if stopped_flag and stopped_flag():
                logger.debug("Confirmation interrupted by user")
                raise OperationCancelled("Confirmation cancelled")

            if checks % sample_rate == 0:
                self._report_progress(checks + 1, total, limit, progress_callback)
            checks += 1

            originals = group.originals(reference_root, candidate_roots)
            for candidate in group.candidates(originals):
                if operation.select(originals, candidate):
                    selected.append(candidate)

        if stats is not None:
            stats.groups_processed = checks
            stats.selected = len(selected)

        return selected

    @staticmethod
    def _report_progress(
            current: int,
            total: int,
            limit: int,
            progress_callback: Optional[Callable[[str, int, object], None]]
    ) -> None:
        percent = current * 100 // limit if limit else 100
        logger.info(f"=== Just passing processing {current}th out of {total} groups "
                    f"({percent:3d}%) [limit {limit}] ===")
        if progress_callback:
            progress_callback(Stage.CONFIRM.value, current, limit)
