# configset/__init__.py
"""
configset – A directory of YAML files as one config document.

Import `ConfigSet` from `configset.loader`, the file readers from
`configset.fs` and the errors from `configset.exceptions`. For a
process-wide instance use `configset.default`.

Overview:
    - Every ``*.yaml`` file of a directory becomes a top-level key
    - ``CONFIGSET.<path>=<yaml value>`` environment entries override single values
    - ``dump()`` returns the merged document as JSON
    - ``read_value(path, type)`` decodes one value through pydantic
"""

__version__ = "0.1.0"
