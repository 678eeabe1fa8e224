# configset/exceptions.py
"""
configset.exceptions
--------------------

Custom exceptions for configset.

Every failure raised while loading or reading a config set derives from
`ConfigSetError`. Wrapping errors keep the underlying exception as their
``__cause__`` so callers can still inspect it.
"""

from typing import Any, Optional


class ConfigSetError(Exception):
    """
    Base class for all configset errors.
    """


class DirectoryReadError(ConfigSetError):
    """
    Raised when the configuration directory cannot be listed.

    `not_found` tells a missing directory apart from other I/O failures
    (permission denied, not a directory, ...).
    """

    def __init__(self, dir_path: str, not_found: bool = False, reason: str = ""):
        message = f"Cannot read config directory '{dir_path}'"
        if reason:
            message = f"{message}: {reason}"
        super().__init__(message)
        self.dir_path = dir_path
        self.not_found = not_found


class FileReadError(ConfigSetError):
    """
    Raised when a matched config file cannot be read.
    """

    def __init__(self, file_path: str, reason: str = ""):
        message = f"Cannot read config file '{file_path}'"
        if reason:
            message = f"{message}: {reason}"
        super().__init__(message)
        self.file_path = file_path


class ConversionError(ConfigSetError):
    """
    Raised when YAML text cannot be converted to a JSON-like tree.

    The converter raises it with the parser diagnostic only. When the text
    came from an environment override, the error is re-raised with the
    offending `key` and `value` attached.
    """

    def __init__(self, diagnostic: str, key: Optional[str] = None, value: Optional[str] = None):
        if key is None:
            message = diagnostic
        else:
            message = f"Cannot convert override {key}={value!r}: {diagnostic}"
        super().__init__(message)
        self.diagnostic = diagnostic
        self.key = key
        self.value = value


class FileConversionError(ConfigSetError):
    """
    Raised when a config file does not hold convertible YAML.
    """

    def __init__(self, file_path: str, diagnostic: str):
        super().__init__(f"Cannot convert config file '{file_path}': {diagnostic}")
        self.file_path = file_path
        self.diagnostic = diagnostic


class PathError(ConfigSetError):
    """
    Raised when an override path is empty or conflicts with the document structure.
    """

    def __init__(self, path: str, reason: str):
        super().__init__(f"Invalid path '{path}': {reason}")
        self.path = path
        self.reason = reason


class ValueNotFound(ConfigSetError, LookupError):
    """
    Raised when nothing exists at the requested path.

    This is the error callers are expected to branch on, e.g. to fall back
    to a default value.
    """

    def __init__(self, path: str):
        super().__init__(f"Value not found at path '{path}'")
        self.path = path


class DecodeError(ConfigSetError):
    """
    Raised when the value at a path does not fit the requested target type.
    """

    def __init__(self, path: str, target_type: Any, diagnostic: str):
        type_name = getattr(target_type, "__name__", None) or repr(target_type)
        super().__init__(f"Cannot decode value at path '{path}' as {type_name}: {diagnostic}")
        self.path = path
        self.target_type = target_type
        self.diagnostic = diagnostic


class NotLoadedError(ConfigSetError):
    """
    Raised when a config set is read before it was loaded successfully.
    """

    def __init__(self):
        super().__init__("Config set has not been loaded")
