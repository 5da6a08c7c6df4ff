"""File-name helpers for the SPL compiler."""

from __future__ import annotations

import os
from collections.abc import Mapping

FILENAME_MAX_LEN = 200


def expand_path(path: str, environ: Mapping[str, str] | None = None) -> str:
    """Replace the first path component by the environment variable it names.

    The first character of the component (normally ``$``) is dropped to form
    the variable name; if no such variable is set the component is kept.
    """
    env = os.environ if environ is None else environ
    first, sep, rest = path.partition("/")
    name = first[1:]
    value = env.get(name) if name else None
    head = value if value is not None else first
    return f"{head}/{rest}" if sep else head


def remove_extension(pathname: str) -> str:
    """Cut everything after the last dot, keeping the dot itself."""
    return pathname[: pathname.rfind(".") + 1]


def output_filename(inpfname: str) -> str:
    """Return the name of the ``.xsm`` file produced for an input file."""
    return remove_extension(inpfname) + "xsm"