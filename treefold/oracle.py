"""
Content-identity oracle: are two files byte-identical?

Sizes are compared first. Equal-size files at or below the threshold are read
fully and compared byte-for-byte; larger ones are compared by a streamed
cryptographic digest, accepting the (negligible) collision risk in exchange for
never holding two large files in memory.

Read errors propagate to the caller; a file that cannot be read aborts the run
rather than being guessed at.
"""

import os

from .config import COMPARE_THRESHOLD
from .models import ConfigError
from .scanner import CRYPTOGRAPHIC_ALGORITHMS, PathLike, _long_path, compute_file_hash


def file_size(path: PathLike) -> int:
    return os.stat(_long_path(path)).st_size


def read_bytes(path: PathLike) -> bytes:
    with open(_long_path(path), 'rb') as f:
        return f.read()


def identical(
    path_a: PathLike,
    path_b: PathLike,
    threshold: int = COMPARE_THRESHOLD,
    algorithm: str = "sha1"
) -> bool:
    """Return True if both files have the same content."""
    if algorithm not in CRYPTOGRAPHIC_ALGORITHMS:
        raise ConfigError(f"Identity checks require a cryptographic hash, got: {algorithm}")

    size = file_size(path_a)
    if size != file_size(path_b):
        return False

    if size <= threshold:
        return read_bytes(path_a) == read_bytes(path_b)

    return compute_file_hash(path_a, algorithm) == compute_file_hash(path_b, algorithm)
