"""
Getting caller-supplied values into JXA scripts.

Two strategies:

1. ``escape_jxa`` - escape one string for splicing between single quotes.
   Only for single-field substitutions such as an identifier lookup.
2. ``bind_data`` - serialize the whole parameter record once and declare it
   as ``__DATA__`` ahead of the script body. Templates read fields off that
   object, so the values are evaluated as a data literal and never re-parsed
   as code. Required whenever more than one field or any free text (notes,
   names) is involved.
"""

import json
from typing import Any, Dict

DATA_VARIABLE = "__DATA__"

_LINE_TERMINATORS = (
    ("\n", "\\n"),
    ("\r", "\\r"),
    ("\u2028", "\\u2028"),
    ("\u2029", "\\u2029"),
)


def escape_jxa(value: str) -> str:
    """
    Escape a string for use inside a single-quoted JXA literal.

    Backslashes are escaped first so the backslashes added for quotes are
    not themselves doubled. Line terminators become escapes, since a raw one
    ends the literal.
    """
    if not isinstance(value, str):
        raise TypeError(f"escape_jxa expects str, got {type(value).__name__}")
    escaped = value.replace("\\", "\\\\").replace("'", "\\'")
    for raw, escape in _LINE_TERMINATORS:
        escaped = escaped.replace(raw, escape)
    return escaped


def encode_data(data: Dict[str, Any]) -> str:
    """
    Serialize a parameter record as a JSON literal.

    ensure_ascii keeps U+2028/U+2029 and every other non-ASCII character as
    \\u escapes, so the literal is valid in any JavaScript parser.
    """
    if not isinstance(data, dict):
        raise TypeError(f"Script data must be a dict, got {type(data).__name__}")
    return json.dumps(data, ensure_ascii=True, separators=(",", ":"))


def bind_data(script: str, data: Dict[str, Any]) -> str:
    """Prefix a script body with ``const __DATA__ = <json>;``."""
    return f"const {DATA_VARIABLE} = {encode_data(data)};\n{script}"
