"""Per-file merge decisions."""

import os
from pathlib import Path

from .config import COMPARE_THRESHOLD
from .models import Disposition, MergeDisposition
from .oracle import identical
from .scanner import PathLike


def destination_for(source: PathLike, source_root: PathLike, dest_root: PathLike) -> str:
    """Map a path under `source_root` to the same relative path under `dest_root`."""
    relative = Path(source).relative_to(source_root)
    return str(Path(dest_root) / relative)


def plan(
    source: PathLike,
    source_root: PathLike,
    dest_root: PathLike,
    threshold: int = COMPARE_THRESHOLD,
    algorithm: str = "sha1"
) -> MergeDisposition:
    """
    Decide what happens to one source file.

    - nothing at the destination: MOVE it there
    - an identical file at the destination: DELETE_SOURCE
    - anything else at the destination: CONFLICT, the source is left alone

    A destination that resolves to the source file itself (a symlink or hard
    link to it) is a CONFLICT: deleting the source would delete the content.
    """
    destination = destination_for(source, source_root, dest_root)

    if not os.path.lexists(destination):
        action = Disposition.MOVE
    elif not os.path.exists(source) or not os.path.exists(destination):
        action = Disposition.CONFLICT
    elif os.path.samefile(source, destination):
        action = Disposition.CONFLICT
    elif os.path.isfile(destination) and identical(source, destination, threshold, algorithm):
        action = Disposition.DELETE_SOURCE
    else:
        action = Disposition.CONFLICT

    return MergeDisposition(
        source=os.fspath(source),
        destination=destination,
        action=action
    )
