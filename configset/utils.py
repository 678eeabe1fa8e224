# configset/utils.py
"""
configset.utils
---------------

Shared helpers for path handling and environment capture.
Used internally by configset and available for downstream consumers.
"""

import os
from typing import List, Optional

from dotenv import dotenv_values


def expand_path(path: Optional[str]) -> Optional[str]:
    """Expand ~ and environment variables in a path string.

    Args:
        path: Path string to expand, or None.

    Returns:
        Expanded path string, or None if input was None.

    Examples:
        >>> expand_path("~/etc/myapp")
        '/home/user/etc/myapp'
        >>> expand_path("$HOME/etc/myapp")
        '/home/user/etc/myapp'
    """
    if path is None:
        return None
    return os.path.expandvars(os.path.expanduser(path))


def environ_lines() -> List[str]:
    """Render the process environment as ``NAME=VALUE`` strings."""
    return [f"{name}={value}" for name, value in os.environ.items()]


def dotenv_lines(dotenv_path: str) -> List[str]:
    """Render the entries of a ``.env`` file as ``NAME=VALUE`` strings.

    Entries are returned in file order. Keys declared without a value
    (``FOO`` on its own line) carry no assignment and are skipped.

    Args:
        dotenv_path: Path to the ``.env`` file; ~ and $VARS are expanded.

    Raises:
        FileNotFoundError: If the file does not exist.
    """
    path = expand_path(dotenv_path)
    if not os.path.isfile(path):
        raise FileNotFoundError(f".env file not found: {path}")
    return [f"{name}={value}" for name, value in dotenv_values(path).items() if value is not None]
