"""File removal and deletion services."""

from .file_service import FileService
from .deletion_service import DeletionService, always_confirm

__all__ = ["FileService", "DeletionService", "always_confirm"]
