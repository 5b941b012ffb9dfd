"""
Copyright (c) 2025 initumX (initum.x@gmail.com)
Licensed under the MIT License

services/deletion_service.py
Deletes confirmed candidate files and prunes directories left empty.

SAFETY RULES
------------
• Only paths under a candidate root are touched; anything else is skipped.
• Pruning walks upward from the deleted file's parent and stops at the first
  non-empty directory, at the reference root, at the candidate root the file
  came from (which is kept), or on a negative confirmation.
• A failed file deletion is recorded and the run continues with the next file.
• A failed directory removal is recorded and ends that ancestor chain only.
"""
import os
import logging
from typing import List, Optional, Callable

from refdedup.core.models import DeletionReport, DeletionResult, is_under
from refdedup.core.interfaces import Confirmer
from refdedup.services.file_service import FileService

logger = logging.getLogger(__name__)


def always_confirm(description: str) -> bool:
    """Batch mode: every destructive action is approved."""
    logger.info(f"Confirmation skipped: {description}")
    return True


class DeletionService:

    def __init__(
            self,
            confirm: Confirmer = always_confirm,
            remover: Optional[Callable[[str], None]] = None
    ):
        self.confirm = confirm
        self.remover = remover or FileService.move_to_trash

    @staticmethod
    def order_for_deletion(paths: List[str]) -> List[str]:
        """Reverse path order: children before their parents' siblings."""
        return sorted(paths, reverse=True)

    def delete_all(
            self,
            paths: List[str],
            candidate_roots: List[str],
            reference_root: str,
            stopped_flag: Optional[Callable[[], bool]] = None
    ) -> DeletionReport:
        report = DeletionReport()

        deletable = []
        for path in self.order_for_deletion(paths):
            if not self._may_delete(path, candidate_roots, reference_root):
                logger.warning(f"Refusing to delete '{path}': not under any candidate path or inside the reference path")
                report.skipped.append(path)
            else:
                deletable.append(path)

        if not deletable:
            logger.info("No files found to DELETE, skipping.")
            return report

        logger.warning("Files will be DELETED after passing this point.")
        if not self.confirm(f"DELETE {len(deletable)} files from {candidate_roots}?"):
            logger.info("Per your choice files were NOT DELETED.")
            report.cancelled = True
            return report

        for path in deletable:
            if stopped_flag and stopped_flag():
                logger.info("Deletion interrupted by user")
                report.cancelled = True
                break

            try:
                self.remover(path)
            except Exception as e:
                logger.warning(f"File '{path}' DELETED NOT SUCCESSFULLY: {e}")
                report.file_results.append(DeletionResult(path, False, str(e)))
                continue

            logger.info(f"File '{path}' deleted successfully!")
            report.file_results.append(DeletionResult(path, True))
            self._prune_parents(path, self._owning_root(path, candidate_roots), reference_root, report)

        return report

    def _prune_parents(self, path: str, candidate_root: str, reference_root: str, report: DeletionReport) -> None:
        """
        Remove directories emptied by deleting path, walking upward.
        The candidate root is kept even when empty: the user passed it in, so
        only directories strictly inside it are pruned, and never the reference root.
        """
        directory = os.path.dirname(path)
        logger.info(f"Checking path '{directory}' for deletion ...")

        while directory != candidate_root \
                and directory != reference_root \
                and is_under(directory, candidate_root) \
                and FileService.is_empty_directory(directory):
            if not self.confirm(f"Delete empty directory '{directory}'?"):
                break
            try:
                FileService.remove_empty_directory(directory)
            except RuntimeError as e:
                logger.warning(f"Parent path was empty '{directory}', DELETE WAS NOT SUCCESSFUL: {e}")
                report.directory_results.append(DeletionResult(directory, False, str(e)))
                return

            logger.info(f"Parent path was empty '{directory}', deleted!")
            report.directory_results.append(DeletionResult(directory, True))
            directory = os.path.dirname(directory)
            logger.info(f"Checking path '{directory}' for deletion ...")

        logger.info(f"Non-empty parent directory or a directory to keep found at '{directory}'.")

    @staticmethod
    def _owning_root(path: str, candidate_roots: List[str]) -> Optional[str]:
        """Deepest candidate root containing path."""
        owners = [root for root in candidate_roots if is_under(path, root) and path != root]
        return max(owners, key=len) if owners else None

    @classmethod
    def _may_delete(cls, path: str, candidate_roots: List[str], reference_root: str) -> bool:
        """Under a candidate root, and not in reference-tree territory outside nested candidates."""
        owner = cls._owning_root(path, candidate_roots)
        if owner is None:
            return False
        return not is_under(path, reference_root) or is_under(owner, reference_root)
