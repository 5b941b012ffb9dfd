"""
Unified command orchestrator for reference comparison.
This is the SINGLE source of truth for business logic used by the CLI and by
library callers.
"""
import logging
from typing import List, Optional, Callable, Tuple

from refdedup.core.models import ComparisonParams, ComparisonStats, DeletionReport
from refdedup.core.cache import ReferenceCache
from refdedup.core.detector import ReferenceDuplicateDetector
from refdedup.core.interfaces import Confirmer
from refdedup.services.deletion_service import DeletionService, always_confirm
from refdedup.services.file_service import FileService

logger = logging.getLogger(__name__)


class ComparisonCommand:
    """
    Orchestrates the comparison workflow for one operator session:
    1. Validate roots and scan the trees (reference listing cached per session)
    2. Group by size and confirm with the chosen operation
    3. Optionally delete the selected files

    Usage:
        params = ComparisonParams(reference_root="~/Photos", candidate_roots=["/mnt/usb"])
        command = ComparisonCommand()
        paths, stats = command.execute(params, progress_callback=printer)
        report = command.delete(paths, params, confirm=ask_user)

        # Re-running with other candidate roots reuses the reference listing
        paths, stats = command.execute(other_params)
    """

    def __init__(self, cache: Optional[ReferenceCache] = None):
        self.cache = cache if cache is not None else ReferenceCache()
        self._detector = ReferenceDuplicateDetector(cache=self.cache)

    def execute(
            self,
            params: ComparisonParams,
            progress_callback: Optional[Callable[[str, int, Optional[int]], None]] = None,
            stopped_flag: Optional[Callable[[], bool]] = None
    ) -> Tuple[List[str], ComparisonStats]:
        """
        Execute a comparison with given parameters.

        Args:
            params: Validated comparison parameters
            progress_callback: (stage: str, current: int, total: Optional[int]) -> None
            stopped_flag: () -> bool (returns True if operation should stop)

        Returns:
            Tuple of (selected candidate paths, statistics)

        Raises:
            ValidationError: If a root is not a directory
            FilesystemError: If a directory cannot be listed
            MissingFileError / ContentReadError: If a comparison fails
            OperationCancelled: If stopped_flag requested cancellation
        """
        logger.info(f"Original path is '{params.reference_root}', other paths to be processed with "
                    f"{params.operation.value} operation are {params.candidate_roots}.")
        return self._detector.find(
            params,
            stopped_flag=stopped_flag,
            progress_callback=progress_callback
        )

    @staticmethod
    def delete(
            paths: List[str],
            params: ComparisonParams,
            confirm: Confirmer = always_confirm,
            permanent: bool = False,
            stopped_flag: Optional[Callable[[], bool]] = None
    ) -> DeletionReport:
        """Delete selected files (trash by default) and prune emptied directories."""
        remover = FileService.delete_permanently if permanent else FileService.move_to_trash
        service = DeletionService(confirm=confirm, remover=remover)
        return service.delete_all(
            paths,
            params.candidate_roots,
            params.reference_root,
            stopped_flag=stopped_flag
        )
