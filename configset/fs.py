# configset/fs.py
"""
configset.fs
------------

File-tree readers consumed by `ConfigSet.load`.

A reader lists the files of one directory that match a glob pattern and
returns the raw contents of a file. A missing directory or file is reported
by raising `FileNotFoundError`; every other failure is some other `OSError`.

`LocalFileReader` reads the real file system. `MemoryFileReader` keeps a
file tree in memory, which is handy for tests and for embedding configs in
an application.
"""

from __future__ import annotations

import errno
import fnmatch
import os
import posixpath
from typing import Dict, List, Optional, Protocol, Set

from .utils import expand_path


class FileReader(Protocol):
    """Structural contract for the file tree a config set is loaded from."""

    def glob(self, dir_path: str, pattern: str) -> List[str]:
        """Return paths of the files directly under *dir_path* whose names match *pattern*."""

    def read(self, file_path: str) -> bytes:
        """Return the full contents of *file_path*."""


class LocalFileReader:
    """Reads config files from the local file system."""

    def glob(self, dir_path: str, pattern: str) -> List[str]:
        dir_path = expand_path(dir_path)
        # listdir, unlike glob.glob, raises when the directory itself is missing.
        names = os.listdir(dir_path)
        paths = []
        for name in fnmatch.filter(names, pattern):
            path = os.path.join(dir_path, name)
            if os.path.isfile(path):
                paths.append(path)
        return sorted(paths)

    def read(self, file_path: str) -> bytes:
        with open(file_path, mode="rb") as f:
            return f.read()


class MemoryFileReader:
    """
    In-memory file tree using POSIX-style paths.

    Directories are implied by the files they contain, can be created
    explicitly with `make_dir`, and the root ``/`` always exists.

    Example:
        reader = MemoryFileReader({"/etc/app/db.yaml": "host: localhost\\n"})
        reader.glob("/etc/app", "*.yaml")  # ['/etc/app/db.yaml']
    """

    def __init__(self, files: Optional[Dict[str, object]] = None):
        self._files: Dict[str, bytes] = {}
        self._dirs: Set[str] = {"/"}
        for path, data in (files or {}).items():
            self.add_file(path, data)

    @staticmethod
    def _normalize(path: str) -> str:
        return posixpath.normpath(posixpath.join("/", path))

    def make_dir(self, dir_path: str) -> None:
        """Create *dir_path* and its parents."""
        path = self._normalize(dir_path)
        while path not in self._dirs:
            self._dirs.add(path)
            path = posixpath.dirname(path)

    def add_file(self, file_path: str, data) -> None:
        """Create or replace *file_path*; `str` data is stored UTF-8 encoded."""
        path = self._normalize(file_path)
        if isinstance(data, str):
            data = data.encode("utf-8")
        self._files[path] = bytes(data)
        self.make_dir(posixpath.dirname(path))

    def glob(self, dir_path: str, pattern: str) -> List[str]:
        path = self._normalize(dir_path)
        if path not in self._dirs:
            if path in self._files:
                raise NotADirectoryError(errno.ENOTDIR, os.strerror(errno.ENOTDIR), dir_path)
            raise FileNotFoundError(errno.ENOENT, os.strerror(errno.ENOENT), dir_path)
        return sorted(
            file_path
            for file_path in self._files
            if posixpath.dirname(file_path) == path
            and fnmatch.fnmatchcase(posixpath.basename(file_path), pattern)
        )

    def read(self, file_path: str) -> bytes:
        path = self._normalize(file_path)
        if path in self._files:
            return self._files[path]
        if path in self._dirs:
            raise IsADirectoryError(errno.EISDIR, os.strerror(errno.EISDIR), file_path)
        raise FileNotFoundError(errno.ENOENT, os.strerror(errno.ENOENT), file_path)
