# configset/loader.py
"""
configset.loader
----------------

Core config set loader.

All ``*.yaml`` files of one directory are converted to JSON-like trees and
merged into a single document keyed by file name (without extension).
Environment entries of the form ``CONFIGSET.<path>=<yaml>`` then overwrite
individual values of that document, and the result can be dumped as JSON or
read back path by path into typed values.

Paths are dot-separated. A segment made of digits indexes a list, any other
segment names a dict key, and ``\\.`` puts a literal dot inside a key:

    aaa.numbers.1        -> second element of the "numbers" list
    hosts.db\\.primary   -> key "db.primary" under "hosts"
"""

import copy
import json
import logging
import os
import re
from typing import Any, Iterable, List, Optional, Sequence, Tuple

from pydantic import TypeAdapter, ValidationError

from .converter import convert
from .exceptions import (
    ConversionError,
    DecodeError,
    DirectoryReadError,
    FileConversionError,
    FileReadError,
    NotLoadedError,
    PathError,
    ValueNotFound,
)
from .fs import FileReader

log = logging.getLogger(__name__)

DEFAULT_PREFIX = "CONFIGSET."
DEFAULT_SUFFIX = ".yaml"

_INDEX_RE = re.compile(r"[0-9]+\Z")
_MISSING = object()

# --- Path Helpers ---

def split_path(path: str) -> List[str]:
    """
    Split a dot-notated path into its segments.

    A backslash escapes the next character, so ``a\\.b`` is the single
    segment ``a.b``. Empty segments are kept: ``a..b`` -> ``["a", "", "b"]``.
    """
    segments = []
    current = []
    chars = iter(path)
    for ch in chars:
        if ch == "\\":
            current.append(next(chars, "\\"))
        elif ch == ".":
            segments.append("".join(current))
            current = []
        else:
            current.append(ch)
    segments.append("".join(current))
    return segments


def join_path(segments: Sequence[str]) -> str:
    """Inverse of `split_path`."""
    return ".".join(s.replace("\\", "\\\\").replace(".", "\\.") for s in segments)


def _is_index(segment: str) -> bool:
    return _INDEX_RE.match(segment) is not None


def get_by_path(tree: Any, segments: Sequence[str]) -> Any:
    """
    Retrieve the value addressed by `segments`.

    Digit segments index lists and are plain keys on dicts. An empty
    sequence addresses the whole tree.

    Raises:
        KeyError: If any segment does not exist, including indices past the
                  end of a list and any segment below a scalar.
    """
    node = tree
    for i, segment in enumerate(segments):
        if isinstance(node, dict) and segment in node:
            node = node[segment]
        elif isinstance(node, list) and _is_index(segment) and int(segment) < len(node):
            node = node[int(segment)]
        else:
            raise KeyError(join_path(segments[:i + 1]))
    return node


def _child(node: Any, segment: str, segments: Sequence[str], depth: int) -> Any:
    if isinstance(node, dict):
        return node.get(segment, _MISSING)
    if not _is_index(segment):
        raise PathError(join_path(segments[:depth + 1]), f"field '{segment}' cannot address an array")
    index = int(segment)
    return node[index] if index < len(node) else _MISSING


def _assign(node: Any, segment: str, value: Any, segments: Sequence[str], depth: int):
    if isinstance(node, dict):
        node[segment] = value
        return
    if not _is_index(segment):
        raise PathError(join_path(segments[:depth + 1]), f"field '{segment}' cannot address an array")
    index = int(segment)
    if index >= len(node):
        node.extend([None] * (index + 1 - len(node)))
    node[index] = value


def set_by_path(tree: dict, segments: Sequence[str], value: Any):
    """
    Set a nested value in place, creating containers along the way.

    Missing intermediate positions get a new list when the next segment is
    a digit string and a new dict otherwise. A scalar sitting on the way is
    replaced by such a container (a warning is logged). Lists grow as
    needed, padding skipped positions with None. Siblings of every touched
    position are left alone.

    Args:
        tree: The root dict to modify.
        segments: Non-empty list of path segments.
        value: The value to store at the final segment.

    Raises:
        PathError: If a non-digit segment has to address a list.
    """
    node = tree
    for depth, segment in enumerate(segments[:-1]):
        child = _child(node, segment, segments, depth)
        if not isinstance(child, (dict, list)):
            if child is not _MISSING:
                log.warning(
                    f"Overwriting non-container value at '{join_path(segments[:depth + 1])}' "
                    f"(type: {type(child).__name__}) while setting '{join_path(segments)}'."
                )
            child = [] if _is_index(segments[depth + 1]) else {}
            _assign(node, segment, child, segments, depth)
        node = child
    _assign(node, segments[-1], value, segments, len(segments) - 1)

# --- Load Stages ---

def aggregate(file_reader: FileReader, dir_path: str, suffix: str = DEFAULT_SUFFIX) -> dict:
    """
    Merge every ``*<suffix>`` file of `dir_path` into one dict.

    Each file becomes the value of a top-level key named after the file with
    `suffix` stripped (``aaa.yaml`` -> ``aaa``). Files are processed in name
    order, so if two files yield the same key the later one wins.

    Returns:
        The aggregate document; ``{}`` when no file matches.

    Raises:
        DirectoryReadError: If the directory cannot be listed. `not_found` is
                            set when it does not exist.
        FileReadError: If a matched file cannot be read.
        FileConversionError: If a matched file does not hold convertible YAML.
    """
    pattern = f"*{suffix}"
    try:
        file_paths = file_reader.glob(dir_path, pattern)
    except OSError as e:
        raise DirectoryReadError(dir_path, not_found=isinstance(e, FileNotFoundError), reason=str(e)) from e
    log.debug(f"DEBUG [configset.aggregate]: Found {len(file_paths)} file(s) matching '{pattern}' in '{dir_path}'")

    configs = {}
    for file_path in sorted(file_paths):
        config_name = os.path.basename(file_path)
        if suffix and config_name.endswith(suffix):
            config_name = config_name[:-len(suffix)]
        try:
            raw_config = file_reader.read(file_path)
        except OSError as e:
            raise FileReadError(file_path, str(e)) from e
        try:
            config = convert(raw_config)
        except ConversionError as e:
            raise FileConversionError(file_path, e.diagnostic) from e
        if config_name in configs:
            log.warning(f"Config name '{config_name}' from '{file_path}' replaces an earlier file with the same name.")
        configs[config_name] = config
        log.debug(f"DEBUG [configset.aggregate]: Loaded '{file_path}' as '{config_name}'")
    return configs


def extract_overrides(environment: Iterable[str], prefix: str = DEFAULT_PREFIX) -> List[Tuple[str, str]]:
    """
    Pick the ``NAME=VALUE`` entries whose name starts with `prefix`.

    The entry is split at its first ``=``; entries without one are skipped.
    The returned keys keep the prefix and the input order is preserved.
    Path validity is not checked here.
    """
    overrides = []
    for raw_kv in environment:
        if not raw_kv.startswith(prefix):
            continue
        key, sep, value = raw_kv.partition("=")
        if not sep:
            continue
        overrides.append((key, value))
    return overrides


def apply_overrides(tree: dict, overrides: Iterable[Tuple[str, str]], prefix: str = DEFAULT_PREFIX) -> dict:
    """
    Apply override pairs to a copy of `tree`.

    Each value is converted as YAML and stored at the path obtained by
    stripping `prefix` from its key.

    Values are converted and paths checked in input order, so the reported
    failure is always the first bad pair. Converted pairs are then applied
    from the shallowest path to the deepest, so ``a.b={"x": 1}`` never erases
    ``a.b.x=2`` whatever their order. Pairs of equal depth keep their input
    order and later pairs overwrite earlier ones.

    Processing stops at the first failing pair. The working copy it was
    being applied to is simply discarded: `tree` itself is never modified.

    Returns:
        The patched copy.

    Raises:
        ConversionError: If a value is not convertible YAML (key and value
                         are attached to the error).
        PathError: If a path is empty or collides with the document structure.
    """
    patched = copy.deepcopy(tree)
    converted = []
    for key, value in overrides:
        try:
            data = convert(value)
        except ConversionError as e:
            raise ConversionError(e.diagnostic, key=key, value=value) from e
        path = key[len(prefix):]
        if not path:
            raise PathError(path, "path cannot be empty")
        converted.append((key, split_path(path), data))

    # sorted() is stable: equal depths stay in input order.
    for key, segments, data in sorted(converted, key=lambda item: len(item[1])):
        set_by_path(patched, segments, data)
        log.debug(f"DEBUG [configset.apply_overrides]: Set '{join_path(segments)}' from '{key}'")
    return patched

# --- ConfigSet Class ---

class ConfigSet:
    """
    A directory of YAML configs merged into one document, with environment overrides.

    Loading:
        1.  Every ``*.yaml`` file in the directory becomes a top-level key
            named after the file (``db.yaml`` -> ``db``).
        2.  Environment entries ``CONFIGSET.<path>=<yaml value>`` overwrite
            the value at ``<path>``; for the same path the last entry wins
            and deeper paths refine shallower ones. Values are YAML, so
            a string that looks like a number must be quoted:
            ``CONFIGSET.db.password='"1234"'``.

    Reading:
        `dump` serializes the whole document as JSON and `read_value` decodes
        the value at one path into any type pydantic can validate (models,
        dataclasses, TypedDicts, builtin containers...).

    The document is replaced only when a load succeeds completely, and it is
    never modified afterwards, so reads need no locking as long as no reload
    runs concurrently.

    Example:
        cs = ConfigSet()
        cs.load(LocalFileReader(), "/etc/myapp", environ_lines())
        port = cs.read_value("db.port", int)
    """

    def __init__(self, prefix: str = DEFAULT_PREFIX, suffix: str = DEFAULT_SUFFIX):
        self.prefix = prefix
        self.suffix = suffix
        self._tree: Optional[dict] = None

    @property
    def is_loaded(self) -> bool:
        return self._tree is not None

    def load(self, file_reader: FileReader, dir_path: str, environment: Iterable[str] = ()):
        """
        Build the document from `dir_path` and `environment`.

        On failure the previously loaded document, if any, is kept as is.

        Raises:
            DirectoryReadError, FileReadError, FileConversionError: From aggregation.
            ConversionError, PathError: From applying overrides.
        """
        tree = aggregate(file_reader, dir_path, self.suffix)
        overrides = extract_overrides(environment, self.prefix)
        tree = apply_overrides(tree, overrides, self.prefix)
        self._tree = tree
        log.info(f"Loaded config set from '{dir_path}': {len(tree)} config(s), {len(overrides)} override(s)")

    def _require_tree(self) -> dict:
        if self._tree is None:
            raise NotLoadedError()
        return self._tree

    def dump(self, prefix: str = "", indent: str = "") -> bytes:
        """
        Serialize the document as UTF-8 JSON with sorted keys.

        With both arguments empty the output is compact and has no trailing
        newline. Otherwise it is pretty-printed: every line after the first
        starts with `prefix`, each nesting level adds `indent`, and the
        output ends with exactly one newline.
        """
        tree = self._require_tree()
        if not prefix and not indent:
            text = json.dumps(tree, sort_keys=True, separators=(",", ":"), ensure_ascii=False)
            return text.encode("utf-8")
        text = json.dumps(tree, sort_keys=True, indent=indent, separators=(",", ": "), ensure_ascii=False)
        # JSON strings never hold a raw newline, so every newline is a line break.
        text = text.replace("\n", "\n" + prefix)
        return (text + "\n").encode("utf-8")

    def read_value(self, path: str, target_type: Any = Any) -> Any:
        """
        Decode the value at `path` into `target_type`.

        Decoding is strict (no str/number coercion) and honours field
        aliases, so ``Field(alias="user_id")`` matches the ``user_id`` key
        whatever the attribute is called. Unknown keys are ignored unless the
        target forbids them.

        Args:
            path: Dot-notated path; ``""`` addresses the whole document.
            target_type: Any type accepted by `pydantic.TypeAdapter`. The
                         default returns a plain JSON-like copy.

        Raises:
            ValueNotFound: If nothing exists at `path`.
            DecodeError: If the value does not fit `target_type`.
        """
        tree = self._require_tree()
        try:
            value = get_by_path(tree, split_path(path) if path else [])
        except KeyError:
            raise ValueNotFound(path) from None
        try:
            return TypeAdapter(target_type).validate_json(json.dumps(value), strict=True)
        except ValidationError as e:
            raise DecodeError(path, target_type, str(e)) from e
