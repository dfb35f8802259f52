"""Command-line interfaces for the merge and dedupe tools."""

import argparse
import sys
from pathlib import Path
from typing import NoReturn, Optional, Sequence

from .actions import ActionError
from .config import DedupeConfig, MergeConfig, PathFilter
from .dedupe import run_dedupe
from .merger import merge_trees
from .models import ConfigError, KeepPolicy
from .scanner import CRYPTOGRAPHIC_ALGORITHMS, HASH_ALGORITHMS, ScanError


def fail(message) -> NoReturn:
    """Print an error on stderr and exit with status 1."""
    print(f"Error: {message}", file=sys.stderr)
    sys.exit(1)


def parse_merge_args(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    """Parse command-line arguments for the merge tool."""
    parser = argparse.ArgumentParser(
        prog="treefold-merge",
        description="Fold FROM_DIR into TO_DIR, moving new files and removing proven duplicates.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Files missing from TO_DIR are moved there. Files already present with identical
content are removed from FROM_DIR. Files present with different content are
reported and left in place. Directories emptied along the way are removed.

Examples:
  %(prog)s /path/to/incoming /path/to/archive
  %(prog)s --dry-run old_photos photos
        """
    )

    parser.add_argument("from_dir", type=Path, metavar="FROM_DIR", help="Tree to fold away")
    parser.add_argument("to_dir", type=Path, metavar="TO_DIR", help="Tree receiving the files")

    parser.add_argument(
        "--dry-run", "-n",
        action="store_true",
        help="Print what would be done without changing anything"
    )

    parser.add_argument(
        "--hash",
        default="sha1",
        help=f"Digest used for files over the byte-compare threshold "
             f"({', '.join(CRYPTOGRAPHIC_ALGORITHMS)}; default: sha1)"
    )

    return parser.parse_args(argv)


def parse_dedupe_args(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    """Parse command-line arguments for the dedupe tool."""
    parser = argparse.ArgumentParser(
        prog="treefold-dedupe",
        description="Find files with identical content in a tree and collapse them.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Without --delete or --backup nothing is changed: each duplicate group is listed
with the file that would be kept.

Examples:
  %(prog)s ~/Pictures
  %(prog)s --keep newest --delete .
  %(prog)s --backup /mnt/spare --match '\\.jpe?g$' ~/Pictures
        """
    )

    parser.add_argument(
        "root",
        nargs="?",
        type=Path,
        default=Path.cwd(),
        help="Directory to scan (default: current directory)"
    )

    parser.add_argument(
        "--backup", "-b",
        type=Path,
        metavar="DIR",
        help="Move duplicates under DIR, keeping their relative paths"
    )

    parser.add_argument(
        "--delete", "-d",
        action="store_true",
        help="Permanently remove duplicates"
    )

    parser.add_argument(
        "--exclude", "-x",
        metavar="PATTERN",
        help="Skip paths matching PATTERN (case-insensitive regex)"
    )

    parser.add_argument(
        "--match", "-m",
        metavar="PATTERN",
        help="Only consider paths matching PATTERN (case-insensitive regex)"
    )

    parser.add_argument(
        "--keep", "-k",
        default=KeepPolicy.OLDEST.value,
        help="Which copy survives: oldest, newest or highest (default: oldest)"
    )

    parser.add_argument(
        "--hash",
        default="sha1",
        help=f"Digest used to group files ({', '.join(HASH_ALGORITHMS)}; default: sha1)"
    )

    parser.add_argument(
        "--no-progress",
        action="store_true",
        help="Do not show progress bars"
    )

    return parser.parse_args(argv)


def build_merge_config(args: argparse.Namespace) -> MergeConfig:
    """Turn parsed arguments into a validated MergeConfig."""
    config = MergeConfig(
        source=args.from_dir.absolute(),
        destination=args.to_dir.absolute(),
        hash_algorithm=args.hash,
        dry_run=args.dry_run
    )
    config.validate()
    return config


def build_dedupe_config(args: argparse.Namespace) -> DedupeConfig:
    """Turn parsed arguments into a validated DedupeConfig."""
    path_filter = PathFilter(match=args.match, exclude=args.exclude)
    config = DedupeConfig(
        root=args.root.absolute(),
        keep=KeepPolicy.parse(args.keep),
        backup_dir=args.backup.absolute() if args.backup is not None else None,
        delete=args.delete,
        path_filter=None if path_filter.is_noop else path_filter,
        hash_algorithm=args.hash,
        show_progress=not args.no_progress
    )
    config.validate()
    return config


def _run(operation, config) -> None:
    """Run a tool, turning fatal errors into a diagnostic and exit status 1."""
    try:
        operation(config)
    except (ScanError, ActionError) as e:
        fail(e)
    except OSError as e:
        fail(f"{e.filename}: {e.strerror}" if e.filename else e)
    except KeyboardInterrupt:
        print("\n\nInterrupted!", file=sys.stderr)
        sys.exit(1)


def merge_main(argv: Optional[Sequence[str]] = None) -> None:
    """Entry point of the merge tool."""
    args = parse_merge_args(argv)
    try:
        config = build_merge_config(args)
    except ConfigError as e:
        fail(e)
    _run(merge_trees, config)


def dedupe_main(argv: Optional[Sequence[str]] = None) -> None:
    """Entry point of the dedupe tool."""
    args = parse_dedupe_args(argv)
    try:
        config = build_dedupe_config(args)
    except ConfigError as e:
        fail(e)
    _run(run_dedupe, config)


main = merge_main
