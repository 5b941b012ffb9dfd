"""
Copyright (c) 2025 initumX (initum.x@gmail.com)
Licensed under the MIT License

core/comparator.py
Byte-exact content comparison between two existing files.
"""

import os
import logging
from typing import Optional

from refdedup.core.interfaces import ContentComparator
from refdedup.core.hasher import FrontHasher
from refdedup.core.exceptions import MissingFileError, ContentReadError

logger = logging.getLogger(__name__)

BUFFER_SIZE = 64 * 1024


class ContentComparatorImpl(ContentComparator):
    """
    Compares two files byte by byte.

    Cheap rejections happen first (different stat size, different cached
    front-chunk digest); equality is only ever reported after comparing every
    byte of both files.
    """

    def __init__(self, hasher: Optional[FrontHasher] = None, buffer_size: int = BUFFER_SIZE):
        self.hasher = hasher
        self.buffer_size = buffer_size

    def equal(self, path_a: str, path_b: str) -> bool:
        for path in (path_a, path_b):
            if not os.path.isfile(path):
                message = f"File 'original' or 'other' does not exist: {path_a}, {path_b}"
                logger.error(message)
                raise MissingFileError(message)

        try:
            if os.path.getsize(path_a) != os.path.getsize(path_b):
                return False

            if self.hasher is not None and \
                    self.hasher.front_hash(path_a) != self.hasher.front_hash(path_b):
                return False

            return self._compare_bytes(path_a, path_b)
        except FileNotFoundError as e:
            raise MissingFileError(f"File vanished during comparison: {e.filename}") from e
        except OSError as e:
            raise ContentReadError(
                e.errno, f"Files {path_a} and {path_b} couldn't be compared: {e.strerror}", e.filename
            ) from e

    def _compare_bytes(self, path_a: str, path_b: str) -> bool:
        with open(path_a, 'rb') as fa, open(path_b, 'rb') as fb:
            while True:
                chunk_a = fa.read(self.buffer_size)
                chunk_b = fb.read(self.buffer_size)
                if chunk_a != chunk_b:
                    return False
                if not chunk_a:
                    return True
