"""Grouping of scanned files by content hash."""

from collections import defaultdict
from typing import Iterable

from tqdm import tqdm

from .models import DuplicateGroup, FileRecord
from .scanner import ensure_hash


def group_by_hash(
    records: Iterable[FileRecord],
    algorithm: str = "sha1",
    show_progress: bool = True
) -> dict[str, list[FileRecord]]:
    """
    Hash every record once and bucket them by digest.

    Buckets keep the order records were given in. Equal digests are taken as
    equal content; no byte-level confirmation follows.
    """
    records = list(records)
    groups = defaultdict(list)
    with tqdm(records, desc="Hashing", unit="file",
              disable=None if show_progress else True) as pbar:
        for record in pbar:
            groups[ensure_hash(record, algorithm)].append(record)
    return dict(groups)


def duplicate_groups(groups: dict[str, list[FileRecord]]) -> list[DuplicateGroup]:
    """Keep only the buckets holding two or more files."""
    return [
        DuplicateGroup(hash=digest, files=files)
        for digest, files in groups.items()
        if len(files) >= 2
    ]
