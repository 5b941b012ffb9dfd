"""
Copyright (c) 2025 initumX (initum.x@gmail.com)
Licensed under the MIT License

core/scanner.py
Implements recursive file enumeration.
Features:
- Walks directories top-down with os.walk
- Skips whole subtrees listed in skip_roots
- Does not follow or report symbolic links
- Returns files sorted by absolute path (deterministic across runs)
- Listing failures raise FilesystemError instead of silently shrinking the result
"""

import os
import stat
from typing import List, Optional, Callable, Iterable
import time
import logging

logger = logging.getLogger(__name__)

# Local imports
from refdedup.core.models import File, normalize_root
from refdedup.core.interfaces import FileScanner
from refdedup.core.exceptions import FilesystemError, OperationCancelled


class FileScannerImpl(FileScanner):
    """
    Scans directory trees recursively and collects every regular file.

    Attributes:
        progress_interval: number of files between progress callbacks
    """

    def __init__(self, progress_interval: int = 5000):
        self.progress_interval = progress_interval

    def scan(self,
             root: str,
             skip_roots: Iterable[str] = (),
             stopped_flag: Optional[Callable[[], bool]] = None,
             progress_callback: Optional[Callable[[str, int, object], None]] = None) -> List[File]:
        """
        Single-pass scanner with throttled progress updates.
        Returns every regular file under root sorted by absolute path.
        """
        root = normalize_root(root)
        skip = {normalize_root(p) for p in skip_roots}

        logger.debug(f"Starting scan of {root} (skipping {sorted(skip)})")

        if root in skip:
            logger.warning(f"Skipping the path '{root}' as requested.")
            return []

        found_files: List[File] = []
        progress_counter = 0
        start_time = time.time()

        for current, dirs, files in os.walk(root, onerror=self._raise_listing_error):
            if stopped_flag and stopped_flag():
                logger.debug("Scan interrupted by user")
                raise OperationCancelled("Scan cancelled")

            # Prune subdirectories BEFORE os.walk enters them
            dirs[:] = [d for d in dirs if self._prefilter_dir(os.path.join(current, d), skip)]

            logger.debug(f"Listing '{current}' with {len(dirs)} directories and {len(files)} files.")

            for filename in files:
                file_info = self._process_file(os.path.join(current, filename))
                if file_info is None:
                    continue
                found_files.append(file_info)
                progress_counter += 1

                if progress_callback and progress_counter >= self.progress_interval:
                    progress_callback('Scanning', len(found_files), None)
                    progress_counter = 0

        if progress_callback and progress_counter > 0:
            progress_callback('Scanning', len(found_files), None)

        found_files.sort(key=lambda f: f.path)

        logger.debug(f"Scan of {root} completed in {time.time() - start_time:.2f}s: "
                     f"{len(found_files)} files.")
        return found_files

    @staticmethod
    def _raise_listing_error(error: OSError) -> None:
        """os.walk error hook: a directory that cannot be listed aborts the scan."""
        logger.error(f"Cannot list directory {error.filename}: {error}")
        raise FilesystemError(error.errno, f"Cannot list directory: {error.strerror}", error.filename) from error

    @staticmethod
    def _prefilter_dir(path: str, skip: set) -> bool:
        """Skip requested subtrees and symlinked directories."""
        if path in skip:
            logger.warning(f"Skipping the path '{path}' as requested.")
            return False
        if os.path.islink(path):
            logger.debug(f"Skipping symbolic link: {path}")
            return False
        return True

    @staticmethod
    def _process_file(path: str) -> Optional[File]:
        """
        Stat a listed entry and return a File for regular files.
        A file that vanished since listing is skipped; other stat failures raise.
        """
        try:
            if os.path.islink(path):
                logger.debug(f"Skipping symbolic link: {path}")
                return None
            stat_result = os.stat(path)
        except FileNotFoundError:
            logger.warning(f"File disappeared during scan: {path}")
            return None
        except OSError as e:
            logger.error(f"Could not stat {path}: {e}")
            raise FilesystemError(e.errno, f"Cannot stat file: {e.strerror}", path) from e

        if not stat.S_ISREG(stat_result.st_mode):
            logger.debug(f"Skipping non-regular file: {path}")
            return None

        return File(path=path, size=stat_result.st_size)
