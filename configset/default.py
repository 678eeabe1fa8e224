# configset/default.py
"""
configset.default
-----------------

Process-wide default `ConfigSet` for applications that want zero-argument
access after a single load at start-up:

    import configset.default as config

    config.load("/etc/myapp")
    db = config.read_value("db", DatabaseSettings)

The default set reads the real file system and the process environment.
Both come from module-level factories so tests can swap them out.

Calling `load` again replaces the default set. This is not thread-safe:
reload only while no other thread is reading.
"""

from typing import Any, Callable, List, Optional

from .fs import FileReader, LocalFileReader
from .loader import ConfigSet
from .exceptions import NotLoadedError
from .utils import dotenv_lines, environ_lines

file_reader_factory: Callable[[], FileReader] = LocalFileReader
environment_factory: Callable[[], List[str]] = environ_lines

_default: Optional[ConfigSet] = None


def load(dir_path: str, dotenv_path: Optional[str] = None) -> ConfigSet:
    """
    Load the default config set from `dir_path`.

    Args:
        dir_path: Directory holding the ``*.yaml`` files.
        dotenv_path: Optional ``.env`` file whose entries are considered
                     before the process environment, so the process
                     environment wins for the same override path.

    Returns:
        The new default set. On failure the previous one stays in place.
    """
    global _default
    environment = environment_factory()
    if dotenv_path:
        environment = dotenv_lines(dotenv_path) + list(environment)
    cs = ConfigSet()
    cs.load(file_reader_factory(), dir_path, environment)
    _default = cs
    return cs


def get_default() -> ConfigSet:
    """Return the default config set, raising `NotLoadedError` before `load`."""
    if _default is None:
        raise NotLoadedError()
    return _default


def dump(prefix: str = "", indent: str = "") -> bytes:
    """Shortcut for ``get_default().dump(...)``."""
    return get_default().dump(prefix, indent)


def read_value(path: str, target_type: Any = Any) -> Any:
    """Shortcut for ``get_default().read_value(...)``."""
    return get_default().read_value(path, target_type)
