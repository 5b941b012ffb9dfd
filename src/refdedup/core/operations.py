"""
Copyright (c) 2025 initumX (initum.x@gmail.com)
Licensed under the MIT License

core/operations.py
Selection rules applied to each candidate file of a size group.

Each rule is a small strategy with one method, `select(originals, candidate)`.
Adding an operation means adding an OperationKind member and a variant here.
"""

import logging
from typing import FrozenSet, Dict, Type

from refdedup.core.interfaces import Operation, ContentComparator
from refdedup.core.models import OperationKind

logger = logging.getLogger(__name__)


class OperationBase(Operation):
    kind: OperationKind

    def __init__(self, comparator: ContentComparator):
        self.comparator = comparator

    def select(self, originals: FrozenSet[str], candidate: str) -> bool:
        raise NotImplementedError


class DuplicateOperation(OperationBase):
    """Selects a candidate that some other original is byte-equal to."""
    kind = OperationKind.DUPLICATE

    def select(self, originals: FrozenSet[str], candidate: str) -> bool:
        logger.debug(f"Suggested duplicate {candidate}")
        for original in sorted(originals):
            if original == candidate:
                logger.warning(
                    f"Paths of file '{original}' and '{candidate}' should differ, "
                    f"this might be a serious issue!"
                )
                continue
            if self.comparator.equal(original, candidate):
                logger.info(f"{candidate:>50} duplicates original {original}")
                return True
        return False


class OriginalsOperation(OperationBase):
    """Selects a candidate that no original is byte-equal to."""
    kind = OperationKind.ORIGINALS

    def select(self, originals: FrozenSet[str], candidate: str) -> bool:
        logger.debug(f"Suggested original {candidate}")
        for original in sorted(originals):
            if self.comparator.equal(original, candidate):
                return False
        return True


OPERATIONS: Dict[OperationKind, Type[OperationBase]] = {
    OperationKind.DUPLICATE: DuplicateOperation,
    OperationKind.ORIGINALS: OriginalsOperation,
}


def create_operation(kind: OperationKind, comparator: ContentComparator) -> OperationBase:
    try:
        return OPERATIONS[kind](comparator)
    except KeyError:
        raise ValueError(f"Unknown operation: {kind!r}")
