"""
Tests for file service — trash, permanent deletion and empty-directory helpers.
"""
import pytest
from unittest import mock
from refdedup.services.file_service import FileService


class TestMoveToTrash:

    def test_delegates_to_send2trash(self, tmp_path):
        f = tmp_path / "photo.jpg"
        f.write_text("content")
        with mock.patch("refdedup.services.file_service.send2trash") as trash:
            FileService.move_to_trash(str(f))
        trash.assert_called_once_with(str(f))

    def test_raises_runtime_error_for_nonexistent_file(self, tmp_path):
        with pytest.raises(RuntimeError, match="File not found"):
            FileService.move_to_trash(str(tmp_path / "does_not_exist.txt"))

    def test_wraps_send2trash_errors(self, tmp_path):
        f = tmp_path / "photo.jpg"
        f.write_text("content")
        with mock.patch("refdedup.services.file_service.send2trash", side_effect=OSError("no trash")):
            with pytest.raises(RuntimeError, match="Failed to move to trash"):
                FileService.move_to_trash(str(f))


class TestDeletePermanently:

    def test_removes_file(self, tmp_path):
        f = tmp_path / "my photo.jpg"
        f.write_text("content")
        FileService.delete_permanently(str(f))
        assert not f.exists()

    def test_preserves_other_files_in_directory(self, tmp_path):
        keep = tmp_path / "keep_me.txt"
        drop = tmp_path / "delete_me.txt"
        keep.write_text("preserve this")
        drop.write_text("delete this")
        FileService.delete_permanently(str(drop))
        assert keep.exists()
        assert not drop.exists()

    def test_raises_runtime_error_for_nonexistent_file(self, tmp_path):
        with pytest.raises(RuntimeError, match="File not found"):
            FileService.delete_permanently(str(tmp_path / "missing.jpg"))


class TestDirectories:

    def test_is_empty_directory(self, tmp_path):
        empty = tmp_path / "empty"
        empty.mkdir()
        full = tmp_path / "full"
        full.mkdir()
        (full / "a.jpg").write_bytes(b"x")
        assert FileService.is_empty_directory(str(empty)) is True
        assert FileService.is_empty_directory(str(full)) is False
        assert FileService.is_empty_directory(str(tmp_path / "missing")) is False

    def test_remove_empty_directory(self, tmp_path):
        empty = tmp_path / "empty"
        empty.mkdir()
        FileService.remove_empty_directory(str(empty))
        assert not empty.exists()

    def test_remove_non_empty_directory_fails(self, tmp_path):
        full = tmp_path / "full"
        full.mkdir()
        (full / "a.jpg").write_bytes(b"x")
        with pytest.raises(RuntimeError, match="Failed to remove directory"):
            FileService.remove_empty_directory(str(full))
        assert (full / "a.jpg").exists()
