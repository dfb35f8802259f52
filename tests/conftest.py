"""Shared test fixtures."""

import os
import tempfile
from pathlib import Path

import pytest

from treefold.models import FileRecord


def write_file(path: Path, content, mtime: float = None) -> Path:
    """Write `content` (str or bytes) to `path`, creating parents, optionally setting mtime."""
    path.parent.mkdir(parents=True, exist_ok=True)
    if isinstance(content, bytes):
        path.write_bytes(content)
    else:
        path.write_text(content)
    if mtime is not None:
        os.utime(path, (mtime, mtime))
    return path


@pytest.fixture
def temp_dir():
    """Create a temporary directory for tests."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir).resolve()


@pytest.fixture
def sample_trees(temp_dir):
    """Create a source and destination tree covering every merge outcome."""
    source = temp_dir / "source"
    dest = temp_dir / "dest"

    # Only in source: will be moved
    write_file(source / "only_in_source.txt", "only in source")
    write_file(source / "subdir" / "nested.txt", "nested in source")

    # Same content on both sides: source copy will be removed
    write_file(source / "identical.txt", "same content")
    write_file(dest / "identical.txt", "same content")

    # Same path, different content: conflict
    write_file(source / "keep" / "conflict.txt", "content from source")
    write_file(dest / "keep" / "conflict.txt", "content from dest")

    # Only in destination: untouched
    write_file(dest / "only_in_dest.txt", "only in dest")

    return source, dest


@pytest.fixture
def dupe_tree(temp_dir):
    """Create a tree with one group of three duplicates and two unique files."""
    root = temp_dir / "tree"
    write_file(root / "a.txt", "duplicate", mtime=1_000_000_000)
    write_file(root / "sub" / "b.txt", "duplicate", mtime=1_100_000_000)
    write_file(root / "sub" / "deeper" / "c.txt", "duplicate", mtime=1_200_000_000)
    write_file(root / "unique1.txt", "unique one")
    write_file(root / "sub" / "unique2.txt", "unique two")
    return root


@pytest.fixture
def sample_file_record():
    """Create a sample FileRecord for testing."""
    return FileRecord(
        path="/absolute/test/file.txt",
        size=1024,
        modified_time=1700000000.0
    )
