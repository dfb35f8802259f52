"""Data models for treefold."""

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Optional


class ConfigError(Exception):
    """Invalid or conflicting configuration, detected before any scan."""


class KeepPolicy(Enum):
    """Which member of a duplicate group survives."""
    OLDEST = "oldest"
    NEWEST = "newest"
    HIGHEST = "highest"

    @classmethod
    def parse(cls, name: str) -> "KeepPolicy":
        try:
            return cls(name.strip().lower())
        except (ValueError, AttributeError):
            choices = ", ".join(p.value for p in cls)
            raise ConfigError(f"Unknown keep policy: {name!r} (choose from {choices})") from None


class Disposition(Enum):
    """Action assigned to a single source file during a merge."""
    MOVE = "move"
    DELETE_SOURCE = "delete_source"
    CONFLICT = "conflict"


@dataclass
class FileRecord:
    """A scanned file: path, size, mtime and a lazily computed content hash."""
    path: str
    size: int
    modified_time: float
    hash: Optional[str] = None
    device: Optional[int] = None
    inode: Optional[int] = None
    is_symlink: bool = False

    @property
    def depth(self) -> int:
        """Number of path components, counted from the filesystem root."""
        return len(Path(self.path).parts)

    @property
    def identity(self) -> Optional[tuple[int, int]]:
        """(st_dev, st_ino) of the content this path resolves to, if it was statted."""
        if self.device is None or self.inode is None:
            return None
        return self.device, self.inode


@dataclass
class DuplicateGroup:
    """Files within one tree sharing a content hash."""
    hash: str
    files: list[FileRecord] = field(default_factory=list)


@dataclass
class RetentionDecision:
    """One survivor for a duplicate group; everything else duplicates it."""
    keep: FileRecord
    duplicates: list[FileRecord]

    @property
    def reclaimable(self) -> int:
        return sum(f.size for f in self.duplicates)


@dataclass
class MergeDisposition:
    """Decision for one source file when folding a tree into another."""
    source: str
    destination: str
    action: Disposition
