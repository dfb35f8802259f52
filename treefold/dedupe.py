"""Collapsing duplicate files inside a single tree."""

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable, Optional

from .actions import ActionExecutor
from .config import DedupeConfig
from .grouper import duplicate_groups, group_by_hash
from .models import RetentionDecision
from .retention import decide
from .scanner import scan_tree

MIB = 1024 * 1024


@dataclass
class DedupeSummary:
    """What a dedupe run found and, outside report-only mode, acted on."""
    scanned: int = 0
    unique_hashes: int = 0
    decisions: list[RetentionDecision] = field(default_factory=list)

    @property
    def duplicates(self) -> int:
        return sum(len(d.duplicates) for d in self.decisions)

    @property
    def reclaimable(self) -> int:
        return sum(d.reclaimable for d in self.decisions)

    @property
    def reclaimable_mib(self) -> float:
        return self.reclaimable / MIB


def _scan_filter(config: DedupeConfig, root: Path) -> Optional[Callable[[str], bool]]:
    """Combine the configured filter with skipping a backup directory under `root`."""
    path_filter = config.path_filter
    if config.backup_dir is None:
        return path_filter

    try:
        relative = config.backup_dir.resolve().relative_to(root.resolve())
    except ValueError:
        return path_filter

    # Scanned paths are spelled under `root`, which may itself sit behind a symlink.
    prefix = str(root / relative) + os.sep

    def accept(path: str) -> bool:
        if path.startswith(prefix):
            return False
        return path_filter is None or path_filter(path)

    return accept


def backup_path(file_path: str, root: Path, backup_dir: Path) -> Path:
    """Where a duplicate goes under the backup directory, keeping its relative path."""
    return backup_dir.absolute() / Path(file_path).relative_to(root)


def report_decision(decision: RetentionDecision, executor: ActionExecutor) -> None:
    print(f"Keeping {decision.keep.path}", file=executor.out)
    for duplicate in decision.duplicates:
        print(f"  duplicate {duplicate.path}", file=executor.out)


def print_summary(summary: DedupeSummary, executor: ActionExecutor) -> None:
    out = executor.out
    print("\n--- Dedupe Summary ---", file=out)
    print(f"Files scanned: {summary.scanned}", file=out)
    print(f"Duplicates: {summary.duplicates}", file=out)
    print(f"Unique hashes: {summary.unique_hashes}", file=out)
    print(f"Reclaimable: {summary.reclaimable_mib:.1f} MiB", file=out)
    print("-" * 20, file=out)


def run_dedupe(config: DedupeConfig, executor: Optional[ActionExecutor] = None) -> DedupeSummary:
    """
    Scan `config.root`, group files by content hash and handle the duplicates.

    Every scanned file is hashed once; files sharing a digest are treated as
    identical without a byte comparison. Each group keeps one survivor chosen
    by `config.keep`. The others are deleted, moved under the backup directory,
    or only listed when neither --delete nor --backup was given.

    Raises:
        ScanError: a directory could not be read
        ActionError: a delete or move failed
        OSError: a file could not be hashed
    """
    if executor is None:
        executor = ActionExecutor()

    root = config.root.absolute()
    records = scan_tree(root, _scan_filter(config, root), show_progress=config.show_progress)
    groups = group_by_hash(records, config.hash_algorithm, show_progress=config.show_progress)

    summary = DedupeSummary(scanned=len(records), unique_hashes=len(groups))

    for group in duplicate_groups(groups):
        decision = decide(group, config.keep)
        if not decision.duplicates:
            continue
        summary.decisions.append(decision)

        if config.report_only:
            report_decision(decision, executor)
            continue

        for duplicate in decision.duplicates:
            if config.delete:
                executor.delete(duplicate.path)
            else:
                executor.backup(duplicate.path, backup_path(duplicate.path, root, config.backup_dir))

    print_summary(summary, executor)
    return summary
