"""
Unit tests for FileScannerImpl.
Verifies recursive discovery, skipped subtrees, deterministic ordering and
error propagation.
"""
import os
import pytest
from pathlib import Path
from refdedup.core.scanner import FileScannerImpl
from refdedup.core.exceptions import FilesystemError, OperationCancelled


class TestFileScannerImpl:
    """Test file enumeration and error handling."""

    def test_scans_subdirectories_recursively(self, trees):
        files = FileScannerImpl().scan(str(trees["candidate"]))
        assert [f.path for f in files] == [str(trees["b"]), str(trees["c"])]
        assert all(f.size == 10 for f in files)

    def test_result_sorted_by_absolute_path(self, tmp_path):
        """Files from deeper levels are merged and re-sorted, not appended per directory."""
        (tmp_path / "b").mkdir()
        (tmp_path / "b" / "1.jpg").write_bytes(b"x")
        (tmp_path / "a.jpg").write_bytes(b"x")
        (tmp_path / "c.jpg").write_bytes(b"x")
        (tmp_path / "a").mkdir()
        (tmp_path / "a" / "z.jpg").write_bytes(b"x")

        paths = [f.path for f in FileScannerImpl().scan(str(tmp_path))]
        assert paths == sorted(paths)
        assert len(paths) == 4

    def test_includes_zero_byte_files(self, tmp_path):
        """Empty files are enumerated; size filtering happens at group level."""
        (tmp_path / "empty.jpg").write_bytes(b"")
        files = FileScannerImpl().scan(str(tmp_path))
        assert len(files) == 1
        assert files[0].size == 0

    def test_skips_requested_subtree(self, nested_trees, caplog):
        """A skipped root contributes zero entries and is logged."""
        with caplog.at_level("WARNING"):
            files = FileScannerImpl().scan(
                str(nested_trees["reference"]),
                skip_roots=[str(nested_trees["candidate"])]
            )
        assert [f.path for f in files] == [str(nested_trees["a"])]
        assert "Skipping the path" in caplog.text

    def test_skipping_the_root_itself_returns_nothing(self, trees):
        files = FileScannerImpl().scan(str(trees["candidate"]), skip_roots=[str(trees["candidate"])])
        assert files == []

    def test_skip_roots_are_normalized(self, nested_trees):
        skip = str(nested_trees["candidate"]) + os.sep
        files = FileScannerImpl().scan(str(nested_trees["reference"]), skip_roots=[skip])
        assert len(files) == 1

    def test_skips_symlinks(self, tmp_path):
        real_file = tmp_path / "real.jpg"
        real_file.write_bytes(b"content")
        try:
            (tmp_path / "link.jpg").symlink_to(real_file)
            (tmp_path / "dirlink").symlink_to(tmp_path, target_is_directory=True)
        except (OSError, NotImplementedError):
            pytest.skip("Symlinks not supported")

        files = FileScannerImpl().scan(str(tmp_path))
        assert [f.path for f in files] == [str(real_file)]

    def test_listing_failure_raises(self, tmp_path, monkeypatch):
        """A directory that cannot be listed must abort the scan, not shrink the result."""
        locked = tmp_path / "locked"
        locked.mkdir()
        (locked / "hidden.jpg").write_bytes(b"x")

        original_scandir = os.scandir

        def mocked_scandir(path=None):
            if str(path) == str(locked):
                raise PermissionError(13, "Permission denied", str(path))
            return original_scandir(path)

        monkeypatch.setattr(os, "scandir", mocked_scandir)

        with pytest.raises(FilesystemError, match="Cannot list directory"):
            FileScannerImpl().scan(str(tmp_path))

    def test_stat_failure_raises(self, tmp_path, monkeypatch):
        target = tmp_path / "denied.jpg"
        target.write_bytes(b"x")
        original_stat = os.stat

        def mocked_stat(path, *args, **kwargs):
            if str(path) == str(target):
                raise PermissionError(13, "Permission denied", str(path))
            return original_stat(path, *args, **kwargs)

        monkeypatch.setattr(os, "stat", mocked_stat)

        with pytest.raises(FilesystemError):
            FileScannerImpl().scan(str(tmp_path))

    def test_vanished_file_is_skipped(self, tmp_path, monkeypatch):
        (tmp_path / "kept.jpg").write_bytes(b"x")
        gone = tmp_path / "gone.jpg"
        gone.write_bytes(b"x")
        original_stat = os.stat

        def mocked_stat(path, *args, **kwargs):
            if str(path) == str(gone):
                raise FileNotFoundError(2, "No such file", str(path))
            return original_stat(path, *args, **kwargs)

        monkeypatch.setattr(os, "stat", mocked_stat)

        files = FileScannerImpl().scan(str(tmp_path))
        assert [Path(f.path).name for f in files] == ["kept.jpg"]

    def test_cancellation_raises(self, trees):
        with pytest.raises(OperationCancelled):
            FileScannerImpl().scan(str(trees["candidate"]), stopped_flag=lambda: True)

    def test_progress_callback_reports_scanned_files(self, trees):
        calls = []
        FileScannerImpl(progress_interval=1).scan(
            str(trees["candidate"]),
            progress_callback=lambda stage, current, total: calls.append((stage, current, total))
        )
        assert calls == [("Scanning", 1, None), ("Scanning", 2, None)]
