"""
Copyright (c) 2025 initumX (initum.x@gmail.com)
Licensed under the MIT License

services/file_service.py
File system mutations used by the deletion executor.
Every method raises RuntimeError with a readable message on failure.
"""
import os
from pathlib import Path
from send2trash import send2trash


class FileService:
    """
    Cross-platform file removal helpers.
    """

    @staticmethod
    def move_to_trash(file_path: str):
        """Moves a file to the system trash."""
        path = Path(file_path)

        if not path.exists():
            raise RuntimeError(f"File not found: {path}")

        try:
            send2trash(str(path))
        except Exception as e:
            raise RuntimeError(f"Failed to move to trash: {e}") from e

    @staticmethod
    def delete_permanently(file_path: str):
        """Unlinks a file. There is no way back."""
        path = Path(file_path)

        if not path.exists():
            raise RuntimeError(f"File not found: {path}")

        try:
            path.unlink()
        except OSError as e:
            raise RuntimeError(f"Failed to delete: {e}") from e

    @staticmethod
    def is_empty_directory(dir_path: str) -> bool:
        """True only for an existing, readable directory with no entries."""
        try:
            with os.scandir(dir_path) as it:
                return next(it, None) is None
        except OSError:
            return False

    @staticmethod
    def remove_empty_directory(dir_path: str):
        """Removes an empty directory (never recursive)."""
        try:
            os.rmdir(dir_path)
        except OSError as e:
            raise RuntimeError(f"Failed to remove directory: {e}") from e
