"""Filesystem mutations and the per-action lines reported to the operator."""

import os
import shutil
import sys
from typing import Optional, TextIO

from .scanner import PathLike, _long_path


class ActionError(Exception):
    """A move, delete or directory operation failed; the run must stop."""

    def __init__(self, path: str, error: str):
        self.path = path
        self.error = error
        super().__init__(f"{path}: {error}")


def _error_text(e: OSError) -> str:
    return e.strerror or str(e)


class ActionExecutor:
    """
    Performs filesystem changes and prints one line per successful change.

    With `dry_run` set nothing is touched, but the same lines are printed so
    the operator can see what a real run would do.
    """

    def __init__(self, dry_run: bool = False, out: Optional[TextIO] = None, err: Optional[TextIO] = None):
        self.dry_run = dry_run
        self._out = out
        self._err = err

    @property
    def out(self) -> TextIO:
        return self._out if self._out is not None else sys.stdout

    @property
    def err(self) -> TextIO:
        return self._err if self._err is not None else sys.stderr

    def make_parents(self, path: PathLike) -> None:
        """Create any missing ancestor directories of `path`."""
        parent = os.path.dirname(_long_path(path))
        try:
            os.makedirs(parent, exist_ok=True)
        except OSError as e:
            raise ActionError(os.path.dirname(os.fspath(path)), _error_text(e)) from e

    def move(self, src: PathLike, dst: PathLike) -> None:
        """Relocate `src` to `dst`, creating parent directories as needed."""
        if not self.dry_run:
            self.make_parents(dst)
            try:
                shutil.move(_long_path(src), _long_path(dst))
            except (OSError, shutil.Error) as e:
                raise ActionError(os.fspath(src), _error_text(e)) from e
        print(f"{os.fspath(src)} => {os.fspath(dst)}", file=self.out)

    def backup(self, src: PathLike, dst: PathLike) -> None:
        """Move `src` to `dst`, never replacing a file already at `dst`."""
        if os.path.lexists(dst):
            raise ActionError(os.fspath(dst), "backup target already exists")
        self.move(src, dst)

    def delete(self, path: PathLike) -> None:
        """Permanently remove a file."""
        if not self.dry_run:
            try:
                os.unlink(_long_path(path))
            except OSError as e:
                raise ActionError(os.fspath(path), _error_text(e)) from e
        print(f"Removed {os.fspath(path)}", file=self.out)

    def remove_dir_if_empty(self, path: PathLike) -> bool:
        """Remove `path` if it has no entries left. Returns True if it was removed."""
        if self.dry_run:
            return False
        try:
            with os.scandir(_long_path(path)) as entries:
                if any(True for _ in entries):
                    return False
            os.rmdir(_long_path(path))
        except OSError as e:
            raise ActionError(os.fspath(path), _error_text(e)) from e
        print(f"Removed {os.fspath(path)}", file=self.out)
        return True

    def report_conflict(self, src: PathLike, dst: PathLike) -> None:
        print(f"{os.fspath(src)} differs from {os.fspath(dst)}", file=self.err)
