"""Choosing the survivor of a duplicate group."""

from typing import Callable, Union

from .models import DuplicateGroup, FileRecord, KeepPolicy, RetentionDecision


def _sort_key(policy: KeepPolicy) -> Callable[[FileRecord], tuple]:
    """Sort key for `policy`: real files before symlinks, then the criterion, then the path."""
    if policy is KeepPolicy.OLDEST:
        return lambda f: (f.is_symlink, f.modified_time, f.path)
    if policy is KeepPolicy.NEWEST:
        return lambda f: (f.is_symlink, -f.modified_time, f.path)
    if policy is KeepPolicy.HIGHEST:
        return lambda f: (f.is_symlink, f.depth, f.path)
    raise ValueError(f"Unhandled keep policy: {policy}")


def order_group(files: list[FileRecord], policy: Union[KeepPolicy, str]) -> list[FileRecord]:
    """Return the files sorted by preference, survivor first."""
    if isinstance(policy, str):
        policy = KeepPolicy.parse(policy)
    return sorted(files, key=_sort_key(policy))


def decide(group: DuplicateGroup, policy: Union[KeepPolicy, str]) -> RetentionDecision:
    """
    Pick exactly one file to keep; the rest are duplicates of it.

    A symlink is only kept when the group has no regular file. Paths that
    resolve to the survivor's own inode (symlinks to it, hard links) are not
    duplicates: removing them frees nothing, and removing the survivor's
    target would lose the content.
    """
    if len(group.files) < 2:
        raise ValueError(f"Not a duplicate group: {len(group.files)} file(s)")
    keep, *rest = order_group(group.files, policy)
    same = keep.identity
    duplicates = [f for f in rest if same is None or f.identity != same]
    return RetentionDecision(keep=keep, duplicates=duplicates)
