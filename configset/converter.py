# configset/converter.py
"""
configset.converter
-------------------

Strict YAML to JSON-like tree conversion.

A config file, or a single override value, is parsed with a hardened
`yaml.SafeLoader` and re-encoded as plain dicts, lists and scalars. Anything
without a lossless JSON representation is rejected instead of being coerced:

- more than one document in the stream
- duplicate mapping keys
- non-string mapping keys (including YAML 1.1 booleans like ``yes:``)
- merge keys (``<<``)
- binary, set, ordered-map and timestamp tagged values
- NaN and infinite floats
- recursive aliases

Plain scalars that look like dates are kept as strings.
"""

import logging
import math
import re
from typing import Any, Union

import yaml
from yaml.constructor import ConstructorError

from .exceptions import ConversionError

log = logging.getLogger(__name__)

_TIMESTAMP_TAG = "tag:yaml.org,2002:timestamp"
_MERGE_TAG = "tag:yaml.org,2002:merge"


class StrictLoader(yaml.SafeLoader):
    """SafeLoader that refuses ambiguous mappings and leaves timestamps as strings."""

    def construct_mapping(self, node, deep=False):
        if not isinstance(node, yaml.MappingNode):
            raise ConstructorError(
                None, None,
                f"expected a mapping node, but found {node.id}",
                node.start_mark,
            )
        mapping = {}
        for key_node, value_node in node.value:
            if key_node.tag == _MERGE_TAG:
                raise ConstructorError(
                    "while constructing a mapping", node.start_mark,
                    "found unsupported merge key", key_node.start_mark,
                )
            # Built deep so a rejected complex key is reported whole.
            key = self.construct_object(key_node, deep=True)
            if not isinstance(key, str):
                raise ConstructorError(
                    "while constructing a mapping", node.start_mark,
                    f"found non-string key {key!r}", key_node.start_mark,
                )
            if key in mapping:
                raise ConstructorError(
                    "while constructing a mapping", node.start_mark,
                    f"found duplicate key {key!r}", key_node.start_mark,
                )
            mapping[key] = self.construct_object(value_node, deep=deep)
        return mapping


# Copy the inherited resolver table without the implicit timestamp rule so
# that SafeLoader itself is left untouched.
StrictLoader.yaml_implicit_resolvers = {
    first: [(tag, regexp) for tag, regexp in resolvers if tag != _TIMESTAMP_TAG]
    for first, resolvers in yaml.SafeLoader.yaml_implicit_resolvers.items()
}

# YAML 1.1 floats need a dot; exponent-only numbers such as 1e3 are floats too.
StrictLoader.add_implicit_resolver(
    "tag:yaml.org,2002:float",
    re.compile(r"^[-+]?[0-9][0-9_]*[eE][-+]?[0-9]+$"),
    list("-+0123456789"),
)

# Integral floats at or above this magnitude are not exact ints.
_MAX_EXACT_INT = 2 ** 53


def _canonicalize(value: Any, active: set) -> Any:
    """Rebuild `value` from plain JSON types, rejecting everything else."""
    # bool is a subclass of int, so it passes through here unchanged.
    if value is None or isinstance(value, (str, bool, int)):
        return value
    if isinstance(value, float):
        if math.isnan(value) or math.isinf(value):
            raise ConversionError(f"cannot represent {value!r} as JSON")
        # JSON has a single number type: 1.0 and 1 are the same value.
        if value.is_integer() and abs(value) < _MAX_EXACT_INT:
            return int(value)
        return value
    if isinstance(value, (dict, list)):
        if id(value) in active:
            raise ConversionError("found recursive alias")
        active.add(id(value))
        try:
            if isinstance(value, dict):
                return {key: _canonicalize(item, active) for key, item in value.items()}
            return [_canonicalize(item, active) for item in value]
        finally:
            active.discard(id(value))
    raise ConversionError(f"cannot represent value of type {type(value).__name__} as JSON")


def convert(text: Union[str, bytes]) -> Any:
    """
    Convert one unit of YAML text into a canonical JSON-like tree.

    Args:
        text: YAML source, as text or raw bytes (UTF-8/UTF-16 with BOM).

    Returns:
        A dict, list, str, int, float, bool or None. Empty input yields None.

    Raises:
        ConversionError: If the text does not parse, or parses into something
                         with no lossless JSON representation. The message is
                         the parser diagnostic, including line and column when
                         the parser reports them.
    """
    try:
        data = yaml.load(text, Loader=StrictLoader)
    except yaml.YAMLError as e:
        log.debug("YAML parse failure: %s", e)
        raise ConversionError(str(e)) from e
    return _canonicalize(data, set())
