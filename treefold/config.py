"""Run configuration for the merge and dedupe tools."""

import re
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Optional

from .models import ConfigError, KeepPolicy
from .scanner import CRYPTOGRAPHIC_ALGORITHMS, HASH_ALGORITHMS

# Files at or below this size are compared byte-for-byte; larger ones by digest.
COMPARE_THRESHOLD = 1_000_000


class PathFilter:
    """
    Include/exclude predicate over a path's text.

    A path is accepted if it matches the include pattern (when one is set)
    and does not match the exclude pattern (when one is set).
    Patterns are case-insensitive regular expressions searched anywhere in the path.
    """

    def __init__(self, match: Optional[str] = None, exclude: Optional[str] = None):
        self.match = self._compile(match, "match")
        self.exclude = self._compile(exclude, "exclude")

    @staticmethod
    def _compile(pattern: Optional[str], label: str) -> Optional[re.Pattern]:
        if pattern is None:
            return None
        try:
            return re.compile(pattern, re.IGNORECASE)
        except re.error as e:
            raise ConfigError(f"Invalid {label} pattern {pattern!r}: {e}") from None

    def __call__(self, path: str) -> bool:
        if self.match is not None and not self.match.search(path):
            return False
        if self.exclude is not None and self.exclude.search(path):
            return False
        return True

    @property
    def is_noop(self) -> bool:
        return self.match is None and self.exclude is None


def _is_within(inner: Path, outer: Path) -> bool:
    try:
        inner.relative_to(outer)
        return True
    except ValueError:
        return False


@dataclass
class DedupeConfig:
    """Settings for one dedupe run."""
    root: Path
    keep: KeepPolicy = KeepPolicy.OLDEST
    backup_dir: Optional[Path] = None
    delete: bool = False
    path_filter: Optional[Callable[[str], bool]] = None
    hash_algorithm: str = "sha1"
    show_progress: bool = True

    @property
    def report_only(self) -> bool:
        return self.backup_dir is None and not self.delete

    def validate(self) -> None:
        """Raise ConfigError if the settings cannot be run."""
        if self.backup_dir is not None and self.delete:
            raise ConfigError("Only one of --backup and --delete may be given")
        if not self.root.is_dir():
            raise ConfigError(f"Root is not a directory: {self.root}")
        if self.backup_dir is not None and not self.backup_dir.is_dir():
            raise ConfigError(f"Backup directory does not exist: {self.backup_dir}")
        if self.backup_dir is not None and self.backup_dir.resolve() == self.root.resolve():
            raise ConfigError(f"Backup directory must not be the scanned root: {self.backup_dir}")
        if self.hash_algorithm not in HASH_ALGORITHMS:
            raise ConfigError(f"Unknown hash algorithm: {self.hash_algorithm}")


@dataclass
class MergeConfig:
    """Settings for folding `source` into `destination`."""
    source: Path
    destination: Path
    hash_algorithm: str = "sha1"
    threshold: int = COMPARE_THRESHOLD
    dry_run: bool = False

    def validate(self) -> None:
        """Raise ConfigError if the settings cannot be run."""
        if not self.source.exists():
            raise ConfigError(f"Source folder does not exist: {self.source}")
        if not self.source.is_dir():
            raise ConfigError(f"Source folder is not a directory: {self.source}")
        if self.destination.exists() and not self.destination.is_dir():
            raise ConfigError(f"Destination is not a directory: {self.destination}")
        if self.hash_algorithm not in CRYPTOGRAPHIC_ALGORITHMS:
            raise ConfigError(
                f"Merge requires a cryptographic hash, got: {self.hash_algorithm}"
            )

        src = self.source.resolve()
        dst = self.destination.resolve()
        if _is_within(dst, src) or _is_within(src, dst):
            raise ConfigError(f"Folders must not contain each other: {src} and {dst}")
