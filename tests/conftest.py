"""
Shared fixtures for comparison engine tests.
Creates isolated reference/candidate trees with controlled file contents.
"""
import pytest
from pathlib import Path
from typing import Dict


CONTENT_SAME = b"0123456789"      # 10 bytes
CONTENT_OTHER = b"abcdefghij"     # 10 bytes, different content


@pytest.fixture
def trees(tmp_path) -> Dict[str, Path]:
    """
    reference/a.jpg      10 bytes
    candidate/x/b.jpg    10 bytes, same content as a.jpg
    candidate/y/c.jpg    10 bytes, different content
    """
    reference = tmp_path / "reference"
    candidate = tmp_path / "candidate"
    (candidate / "x").mkdir(parents=True)
    (candidate / "y").mkdir()
    reference.mkdir()

    files = {
        "reference": reference,
        "candidate": candidate,
        "a": reference / "a.jpg",
        "b": candidate / "x" / "b.jpg",
        "c": candidate / "y" / "c.jpg",
    }
    files["a"].write_bytes(CONTENT_SAME)
    files["b"].write_bytes(CONTENT_SAME)
    files["c"].write_bytes(CONTENT_OTHER)
    return files


@pytest.fixture
def nested_trees(tmp_path) -> Dict[str, Path]:
    """
    Candidate root nested inside the reference root:
    reference/a.jpg          original
    reference/sub/b.jpg      same content, candidate root is reference/sub
    reference/sub/d/c.jpg    different content
    """
    reference = tmp_path / "reference"
    sub = reference / "sub"
    (sub / "d").mkdir(parents=True)

    files = {
        "reference": reference,
        "candidate": sub,
        "a": reference / "a.jpg",
        "b": sub / "b.jpg",
        "c": sub / "d" / "c.jpg",
    }
    files["a"].write_bytes(CONTENT_SAME)
    files["b"].write_bytes(CONTENT_SAME)
    files["c"].write_bytes(CONTENT_OTHER)
    return files
