"""Lua table serialization for description documents.

This module renders nested mapping/list structures as Lua table constructors
with a stable key order, and verifies freshly written output by parsing it
back.
"""

from __future__ import annotations

import math
import re
from collections.abc import Callable, Mapping
from itertools import chain, count
from typing import Any

from apidesc.core.ranks import desc_sort_key
from apidesc.core.reader import TableParseError, loads

SortKey = Callable[[Any], Any]

_LUA_KEYWORDS = frozenset({
    "and", "break", "do", "else", "elseif", "end", "false", "for", "function",
    "goto", "if", "in", "local", "nil", "not", "or", "repeat", "return", "then",
    "true", "until", "while",
})
_IDENTIFIER_RE = re.compile(r"[A-Za-z_][A-Za-z0-9_]*\Z")

_QUOTE_ESCAPES = {
    '"': '\\"',
    "\\": "\\\\",
    "\n": "\\n",
    "\r": "\\r",
    "\t": "\\t",
}


class SerializationError(Exception):
    """Error during serialization or deserialization."""

    def __init__(self, message: str, details: str | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.details = details


class MalformedKeyTypeError(SerializationError):
    """A table key cannot be represented in the output."""


class MalformedValueTypeError(SerializationError):
    """A table value cannot be represented in the output."""


class RoundTripError(SerializationError):
    """Serialized output did not parse back to the serialized value."""


def quote_string(value: str) -> str:
    """Quote a string as a double-quoted Lua literal.

    Quotes, backslashes and line breaks get their short escapes, other
    control characters use three-digit decimal escapes.
    """
    parts = ['"']
    for ch in value:
        escaped = _QUOTE_ESCAPES.get(ch)
        if escaped is not None:
            parts.append(escaped)
        elif ord(ch) < 32 or ord(ch) == 127:
            parts.append(f"\\{ord(ch):03d}")
        else:
            parts.append(ch)
    parts.append('"')
    return "".join(parts)


def long_bracket_string(value: str) -> str | None:
    """Render a string as a Lua long-bracket literal.

    Uses ``[[...]]`` when the content allows it, otherwise the lowest level
    from ``[==[...]==]`` upwards that the content cannot terminate early.

    Returns:
        The literal, or None when the content holds a carriage return
        (long brackets normalize line ends, so it would not read back) or
        a NUL character (the reader rejects it outside escapes).
    """
    if "\r" in value or "\x00" in value:
        return None
    for level in chain((0,), count(2)):
        equals = "=" * level
        opening, closing = f"[{equals}[", f"]{equals}]"
        if level == 0 and "[[" in value:
            continue
        if (value + closing).find(closing) == len(value):
            # The newline after the opening bracket is skipped by Lua
            return f"{opening}\n{value}{closing}"
    return None  # unreachable: count() is unbounded


def format_key(key: Any) -> str:
    """Format a table key for a named ``key = value`` entry."""
    if isinstance(key, bool):
        raise MalformedKeyTypeError(
            message="Unsupported key type in table to serialize",
            details=f"bool key {key!r}",
        )
    if isinstance(key, str):
        if _IDENTIFIER_RE.match(key) and key not in _LUA_KEYWORDS:
            return key
        return f"[{quote_string(key)}]"
    if isinstance(key, int):
        return f"[{key}]"
    if isinstance(key, float) and math.isfinite(key):
        return f"[{key!r}]"
    raise MalformedKeyTypeError(
        message="Unsupported key type in table to serialize",
        details=f"{type(key).__name__} key {key!r}",
    )


def format_scalar(value: Any) -> str:
    """Format a string, number or boolean value."""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, int):
        return str(value)
    if isinstance(value, float):
        if not math.isfinite(value):
            raise MalformedValueTypeError(
                message="Unsupported value in table to serialize",
                details=f"non-finite number {value!r}",
            )
        return repr(value)
    if isinstance(value, str):
        if "\t" in value:
            # Tabs only appear in long descriptions, keep them readable
            literal = long_bracket_string(value)
            if literal is not None:
                return literal
        return quote_string(value)
    raise MalformedValueTypeError(
        message="Unsupported value type in table to serialize",
        details=type(value).__name__,
    )


def _is_table(value: Any) -> bool:
    return isinstance(value, (Mapping, list, tuple))


def _is_sequence_keys(keys: list[Any]) -> bool:
    if not all(isinstance(k, int) and not isinstance(k, bool) for k in keys):
        return False
    return sorted(keys) == list(range(1, len(keys) + 1))


def _table_items(table: Any, sort_key: SortKey) -> tuple[bool, list[tuple[Any, Any]]]:
    """Return (is_positional, ordered items) for a table value."""
    if isinstance(table, (list, tuple)):
        return True, list(enumerate(table, 1))
    if not isinstance(table, Mapping):
        raise MalformedValueTypeError(
            message="Unsupported value type in table to serialize",
            details=type(table).__name__,
        )

    keys = list(table.keys())
    for key in keys:
        if isinstance(key, bool) or not isinstance(key, (str, int, float)):
            raise MalformedKeyTypeError(
                message="Unsupported key type in table to serialize",
                details=f"{type(key).__name__} key {key!r}",
            )
    if keys and _is_sequence_keys(keys):
        return True, [(k, table[k]) for k in sorted(keys)]
    ordered = sorted(keys, key=lambda k: (sort_key(k), str(k), isinstance(k, str)))
    return False, [(k, table[k]) for k in ordered]


def _serialize_into(
    table: Any,
    indent: str,
    indent_unit: str,
    sort_key: SortKey,
    lines: list[str],
) -> None:
    positional, items = _table_items(table, sort_key)
    for key, value in items:
        key_text = "" if positional else format_key(key)
        if _is_table(value):
            if not positional:
                lines.append(f"{indent}{key_text} =")
            lines.append(f"{indent}{{")
            _serialize_into(value, indent + indent_unit, indent_unit, sort_key, lines)
            lines.append(f"{indent}}},")
        else:
            prefix = indent if positional else f"{indent}{key_text} = "
            lines.append(f"{prefix}{format_scalar(value)},")


def serialize(
    value: Any,
    indent: str = "\t",
    sort_key: SortKey = desc_sort_key,
    indent_unit: str = "\t",
) -> str:
    """Serialize the contents of a table (without the outer braces).

    Args:
        value: Mapping or list to serialize. Keys must be strings or numbers,
            values tables, strings, numbers or booleans.
        indent: Indent of the top-level entries.
        sort_key: Key function ordering named entries.
        indent_unit: Indent added for each nesting level.

    Returns:
        The serialized entries, one per line, without a trailing newline.

    Raises:
        MalformedKeyTypeError: If a key cannot be represented.
        MalformedValueTypeError: If a value cannot be represented.
    """
    lines: list[str] = []
    _serialize_into(value, indent, indent_unit, sort_key, lines)
    return "\n".join(lines)


def serialize_document(document: Any, indent_unit: str = "\t") -> str:
    """Serialize a whole description document as a ``return { ... }`` chunk."""
    if not _is_table(document):
        raise MalformedValueTypeError(
            message="Document must be a table",
            details=type(document).__name__,
        )
    body = serialize(document, indent=indent_unit, indent_unit=indent_unit)
    if not body:
        return "return\n{\n}\n"
    return f"return\n{{\n{body}\n}}\n"


def normalize_table(value: Any) -> Any:
    """Bring a value into the shape the reader produces for it.

    Tuples become lists, mappings keyed 1..n become lists and empty tables
    become empty dicts.
    """
    if isinstance(value, Mapping):
        keys = list(value.keys())
        if keys and _is_sequence_keys(keys):
            return [normalize_table(value[k]) for k in sorted(keys)]
        return {k: normalize_table(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        if not value:
            return {}
        return [normalize_table(v) for v in value]
    return value


def verify_round_trip(text: str, expected: Any) -> Any:
    """Parse serialized text back and compare it with the serialized value.

    Args:
        text: Output of serialize_document.
        expected: The value that was serialized.

    Returns:
        The parsed value.

    Raises:
        RoundTripError: If the text does not parse or parses to another value.
    """
    try:
        parsed = loads(text)
    except TableParseError as e:
        raise RoundTripError(
            message="Serialized output does not parse",
            details=f"{e.message}: {e.details}" if e.details else e.message,
        ) from e
    if parsed != normalize_table(expected):
        raise RoundTripError(
            message="Serialized output does not parse back to the same value",
        )
    return parsed
