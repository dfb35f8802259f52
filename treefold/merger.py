"""Folding one tree into another and pruning what the fold empties."""

from dataclasses import dataclass, field
from typing import Optional

from .actions import ActionExecutor
from .config import MergeConfig
from .models import Disposition, MergeDisposition
from .planner import plan
from .scanner import WalkEvent, walk_tree


@dataclass
class MergeResult:
    """Counts of what a merge did, plus the conflicts left behind."""
    moved: int = 0
    deleted: int = 0
    removed_dirs: int = 0
    conflicts: list[MergeDisposition] = field(default_factory=list)

    @property
    def changed(self) -> int:
        return self.moved + self.deleted + self.removed_dirs


def apply_disposition(disposition: MergeDisposition, executor: ActionExecutor, result: MergeResult) -> None:
    """Carry out one merge decision and record it."""
    if disposition.action is Disposition.MOVE:
        executor.move(disposition.source, disposition.destination)
        result.moved += 1
    elif disposition.action is Disposition.DELETE_SOURCE:
        executor.delete(disposition.source)
        result.deleted += 1
    else:
        executor.report_conflict(disposition.source, disposition.destination)
        result.conflicts.append(disposition)


def merge_trees(config: MergeConfig, executor: Optional[ActionExecutor] = None) -> MergeResult:
    """
    Fold `config.source` into `config.destination`.

    Files are handled depth-first as the walk reaches them. Each directory of
    the source tree, the root included, is removed once the walk has left it
    and nothing remains inside. Directories still holding conflicting files
    stay where they are.

    Raises:
        ScanError: a source directory could not be read
        ActionError: a move, delete or rmdir failed
        OSError: a file could not be read while comparing
    """
    if executor is None:
        executor = ActionExecutor(dry_run=config.dry_run)

    source_root = config.source.absolute()
    dest_root = config.destination.absolute()
    result = MergeResult()

    for event, path in walk_tree(source_root):
        if event is WalkEvent.FILE:
            disposition = plan(
                path,
                source_root,
                dest_root,
                threshold=config.threshold,
                algorithm=config.hash_algorithm
            )
            apply_disposition(disposition, executor, result)
        elif executor.remove_dir_if_empty(path):
            result.removed_dirs += 1

    return result
