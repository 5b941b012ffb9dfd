"""
Copyright (c) 2025 initumX (initum.x@gmail.com)
Licensed under the MIT License

hasher.py
Front-chunk digests used as a cheap pre-filter before byte comparison.

Digests are cached per path for the lifetime of the hasher, so an original
compared against many candidates of its size group is only read once for
the pre-filter. A digest mismatch proves the files differ; a digest match
proves nothing and the comparator still compares every byte.
"""

from typing import Dict

import xxhash
from refdedup.core.interfaces import HashAlgorithm

FRONT_CHUNK_SIZE = 64 * 1024


# Use the same way to implement and use any other hashing algorithm
class XXHashAlgorithmImpl(HashAlgorithm):
    @staticmethod
    def hash(data: bytes) -> bytes:
        return xxhash.xxh64(data).digest()


class FrontHasher:
    """
    Computes and caches the hash of the first chunk of a file.
    Read errors propagate to the caller as OSError.
    """

    def __init__(self, algorithm: HashAlgorithm = None, chunk_size: int = FRONT_CHUNK_SIZE):
        self.algorithm = algorithm or XXHashAlgorithmImpl()
        self.chunk_size = chunk_size
        self._cache: Dict[str, bytes] = {}

    def front_hash(self, path: str) -> bytes:
        """Computes and caches hash of the first N bytes of a file."""
        cached = self._cache.get(path)
        if cached is not None:
            return cached
        with open(path, 'rb') as f:
            data = f.read(self.chunk_size)
        result = self.algorithm.hash(data)
        self._cache[path] = result
        return result

    def clear(self) -> None:
        self._cache.clear()
