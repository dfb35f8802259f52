"""Directory tree scanning and content hashing."""

import hashlib
import os
from enum import Enum
from typing import Callable, Iterator, Optional, Union

import xxhash
from tqdm import tqdm

from .models import FileRecord

PathLike = Union[str, os.PathLike]

CRYPTOGRAPHIC_ALGORITHMS = ("sha1", "sha256", "sha512", "blake2b")
XXHASH_ALGORITHMS = {
    "xxh64": xxhash.xxh64,
    "xxh128": xxhash.xxh3_128,
}
HASH_ALGORITHMS = CRYPTOGRAPHIC_ALGORITHMS + tuple(XXHASH_ALGORITHMS)


class WalkEvent(Enum):
    """What a step of a tree walk reports."""
    FILE = "file"
    LEAVE_DIR = "leave_dir"


class ScanError(Exception):
    """A directory in the tree could not be read."""

    def __init__(self, path: str, error: str):
        self.path = path
        self.error = error
        super().__init__(f"Cannot read directory {path}: {error}")


def _long_path(path: PathLike) -> str:
    """Convert path to long path format on Windows to handle paths > 260 chars."""
    path_str = os.path.abspath(path)
    if os.name == 'nt' and not path_str.startswith('\\\\?\\'):
        return '\\\\?\\' + path_str
    return path_str


def new_hasher(algorithm: str):
    """Return a fresh digest object for `algorithm`."""
    if algorithm in XXHASH_ALGORITHMS:
        return XXHASH_ALGORITHMS[algorithm]()
    if algorithm in CRYPTOGRAPHIC_ALGORITHMS:
        return hashlib.new(algorithm)
    raise ValueError(f"Unsupported hash algorithm: {algorithm}")


def compute_file_hash(file_path: PathLike, algorithm: str = "sha1", chunk_size: int = 65536) -> str:
    """Stream a file through `algorithm` and return the hex digest."""
    hasher = new_hasher(algorithm)
    with open(_long_path(file_path), 'rb') as f:
        while chunk := f.read(chunk_size):
            hasher.update(chunk)
    return hasher.hexdigest()


def get_file_record(path: PathLike) -> FileRecord:
    """
    Stat a path into a FileRecord without hashing it.

    Size, mtime and identity describe the content a symlink points to;
    `is_symlink` records whether the path itself is a link.
    """
    long_path = _long_path(path)
    stat = os.stat(long_path)
    return FileRecord(
        path=os.fspath(path),
        size=stat.st_size,
        modified_time=stat.st_mtime,
        device=stat.st_dev,
        inode=stat.st_ino,
        is_symlink=os.path.islink(long_path)
    )


def is_dangling_link(path: PathLike) -> bool:
    """True for a symlink whose target does not exist."""
    long_path = _long_path(path)
    return os.path.islink(long_path) and not os.path.exists(long_path)


def ensure_hash(record: FileRecord, algorithm: str = "sha1") -> str:
    """Fill in and return the record's content hash, hashing at most once."""
    if record.hash is None:
        record.hash = compute_file_hash(record.path, algorithm)
    return record.hash


def _list_dir(directory: str) -> tuple[list[str], list[str]]:
    """Split a directory's entries into (files, subdirectories), both sorted."""
    files = []
    dirs = []
    try:
        with os.scandir(directory) as entries:
            for entry in entries:
                # Symlinks are never descended; they are reported as files.
                if entry.is_dir(follow_symlinks=False):
                    dirs.append(entry.path)
                else:
                    files.append(entry.path)
    except OSError as e:
        raise ScanError(directory, e.strerror or str(e)) from e
    return sorted(files), sorted(dirs)


def walk_tree(
    root: PathLike,
    path_filter: Optional[Callable[[str], bool]] = None
) -> Iterator[tuple[WalkEvent, str]]:
    """
    Walk a tree depth-first without recursion.

    Yields (WalkEvent.FILE, path) for every non-directory entry accepted by
    `path_filter`, and (WalkEvent.LEAVE_DIR, path) for each directory once
    everything below it has been yielded. The root gets a LEAVE_DIR too.

    A directory's entries are listed once, when it is entered, so callers may
    move or delete the files they are handed while the walk is in progress.

    Raises:
        ScanError: if any directory cannot be opened.
    """
    visited = set()
    stack = [(os.fspath(root), False)]

    while stack:
        directory, entered = stack.pop()
        if entered:
            yield WalkEvent.LEAVE_DIR, directory
            continue

        try:
            stat = os.stat(directory)
        except OSError as e:
            raise ScanError(directory, e.strerror or str(e)) from e
        key = (stat.st_dev, stat.st_ino)
        if key in visited:
            continue
        visited.add(key)

        files, dirs = _list_dir(directory)
        stack.append((directory, True))
        stack.extend((d, False) for d in reversed(dirs))

        for file_path in files:
            if path_filter is None or path_filter(file_path):
                yield WalkEvent.FILE, file_path


def iter_files(
    root: PathLike,
    path_filter: Optional[Callable[[str], bool]] = None
) -> Iterator[str]:
    """Lazily yield every file path under `root` accepted by `path_filter`."""
    for event, path in walk_tree(root, path_filter):
        if event is WalkEvent.FILE:
            yield path


def scan_tree(
    root: PathLike,
    path_filter: Optional[Callable[[str], bool]] = None,
    desc: str = "Scanning",
    show_progress: bool = True
) -> list[FileRecord]:
    """
    Scan a tree and return a FileRecord per accepted file, in walk order.

    Args:
        root: Directory to scan
        path_filter: Optional predicate deciding which file paths are kept
        desc: Description for the progress bar
        show_progress: Set to False to silence the progress bar

    Returns:
        List of FileRecord, hashes not yet computed. Dangling symlinks
        have no content and are left out.
    """
    records = []
    with tqdm(iter_files(root, path_filter), desc=desc, unit="file",
              disable=None if show_progress else True) as pbar:
        for path in pbar:
            if is_dangling_link(path):
                continue
            records.append(get_file_record(path))
    return records
