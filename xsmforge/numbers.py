"""Write a file of consecutive integers, one per line."""

from __future__ import annotations

import argparse
import os
from collections.abc import Sequence

DEFAULT_PATH = "numbers.dat"
DEFAULT_COUNT = 2048


def write_numbers(
    path: str | os.PathLike[str] = DEFAULT_PATH, count: int = DEFAULT_COUNT
) -> None:
    """Write the integers from 0 up to ``count - 1`` to ``path``."""
    with open(path, "w", encoding="ascii") as handle:
        handle.writelines(f"{i}\n" for i in range(count))


def main(argv: Sequence[str] | None = None) -> int:
    """Write the numbers file and return the exit status."""
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument("path", nargs="?", default=DEFAULT_PATH)
    parser.add_argument("--count", type=int, default=DEFAULT_COUNT)
    args = parser.parse_args(argv)
    write_numbers(args.path, args.count)
    return 0