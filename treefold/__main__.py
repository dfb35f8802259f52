"""Entry point for `python -m treefold`, which runs the merge tool."""

from .cli import merge_main as main

if __name__ == "__main__":
    main()
