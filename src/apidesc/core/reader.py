"""Lua table reader using tree-sitter-lua.

This module parses the data subset of Lua used by description files
(``return { ... }`` chunks of nested table constructors holding strings,
numbers and booleans) into plain Python values. Tables keyed 1..n become
lists, every other table becomes a dict.
"""

from __future__ import annotations

import logging
import re
from functools import lru_cache
from pathlib import Path
from typing import Any, Iterator

import tree_sitter_lua as tslua
from tree_sitter import Language, Node, Parser

logger = logging.getLogger(__name__)

_LONG_BRACKET_RE = re.compile(r"\[(=*)\[(.*)\]\1\]\Z", re.DOTALL)
_ESCAPE_RE = re.compile(
    r"\\(?:(\d{1,3})|x([0-9A-Fa-f]{2})|u\{([0-9A-Fa-f]+)\}|(z\s*)|(\r\n|\n\r|\n|\r)|(.))",
    re.DOTALL,
)
_SIMPLE_ESCAPES = {
    "a": "\a",
    "b": "\b",
    "f": "\f",
    "n": "\n",
    "r": "\r",
    "t": "\t",
    "v": "\v",
    "\\": "\\",
    '"': '"',
    "'": "'",
}


class TableParseError(Exception):
    """Error while reading a Lua table."""

    def __init__(self, message: str, details: str | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.details = details


def _location(node: Node) -> str:
    row, column = node.start_point
    return f"line {row + 1}, column {column + 1}"


def decode_string_literal(text: str) -> str:
    """Decode the source text of a Lua string literal.

    Args:
        text: The literal including its delimiters, e.g. ``"a\\tb"`` or
            ``[==[ ... ]==]``.

    Returns:
        The string value.

    Raises:
        TableParseError: If the literal or one of its escapes is invalid.
    """
    match = _LONG_BRACKET_RE.match(text)
    if match:
        body = match.group(2)
        # A line break directly after the opening bracket is not part of the string
        for newline in ("\r\n", "\n\r", "\n", "\r"):
            if body.startswith(newline):
                body = body[len(newline):]
                break
        return re.sub(r"\r\n|\n\r|\r", "\n", body)

    if len(text) < 2 or text[0] not in "\"'" or text[-1] != text[0]:
        raise TableParseError("Invalid string literal", details=text[:40])

    body = text[1:-1]
    out = bytearray()
    pos = 0
    for escape in _ESCAPE_RE.finditer(body):
        out += body[pos:escape.start()].encode("utf-8")
        pos = escape.end()
        decimal, hex_byte, codepoint, skip_space, newline, char = escape.groups()
        if decimal is not None:
            value = int(decimal)
            if value > 255:
                raise TableParseError("Decimal escape too large", details=escape.group(0))
            out.append(value)
        elif hex_byte is not None:
            out.append(int(hex_byte, 16))
        elif codepoint is not None:
            out += chr(int(codepoint, 16)).encode("utf-8")
        elif skip_space is not None:
            continue
        elif newline is not None:
            out += b"\n"
        elif char in _SIMPLE_ESCAPES:
            out += _SIMPLE_ESCAPES[char].encode("utf-8")
        else:
            raise TableParseError("Invalid escape sequence", details=escape.group(0))
    out += body[pos:].encode("utf-8")

    try:
        return out.decode("utf-8")
    except UnicodeDecodeError as e:
        raise TableParseError("String literal is not valid UTF-8", details=str(e)) from e


def decode_number(text: str) -> int | float:
    """Decode the source text of a Lua number literal."""
    lowered = text.lower()
    try:
        if lowered.startswith("0x"):
            if "." in lowered or "p" in lowered:
                return float.fromhex(lowered)
            return int(lowered, 16)
        if "." in lowered or "e" in lowered:
            return float(lowered)
        return int(lowered)
    except ValueError as e:
        raise TableParseError("Invalid number literal", details=text) from e


class LuaTableReader:
    """Reads Lua table constructors into Python values."""

    def __init__(self) -> None:
        self._language = Language(tslua.language())
        self._parser = Parser(self._language)

    def read(self, text: str) -> Any:
        """Parse a ``return <table>`` chunk, or a bare table constructor.

        Args:
            text: Lua source.

        Returns:
            The decoded table.

        Raises:
            TableParseError: On syntax errors or unsupported expressions.
        """
        if text.lstrip().startswith("{"):
            text = "return " + text
        content = text.encode("utf-8")
        tree = self._parser.parse(content)
        root = tree.root_node

        if root.has_error:
            error_node = self._first_error(root)
            where = _location(error_node) if error_node is not None else "unknown location"
            raise TableParseError("Invalid Lua syntax", details=where)

        expressions = self._returned_expressions(root)
        if len(expressions) != 1:
            raise TableParseError(
                "Expected a chunk returning exactly one value",
                details=f"found {len(expressions)}",
            )
        value = self._decode(expressions[0], content)
        if not isinstance(value, (dict, list)):
            raise TableParseError(
                "Chunk does not return a table",
                details=type(value).__name__,
            )
        return value

    def read_file(self, path: Path) -> Any:
        """Parse a Lua file returning a table."""
        logger.debug(f"Reading {path}")
        return self.read(path.read_text(encoding="utf-8"))

    def _first_error(self, node: Node) -> Node | None:
        if node.type == "ERROR" or node.is_missing:
            return node
        for child in node.children:
            if child.has_error or child.is_missing:
                found = self._first_error(child)
                if found is not None:
                    return found
        return None

    def _returned_expressions(self, root: Node) -> list[Node]:
        statements = [c for c in root.named_children if c.type != "comment"]
        if len(statements) != 1 or statements[0].type != "return_statement":
            raise TableParseError(
                "Expected a single return statement",
                details=", ".join(s.type for s in statements) or "empty chunk",
            )
        expressions: list[Node] = []
        for child in statements[0].named_children:
            if child.type == "comment":
                continue
            if child.type == "expression_list":
                expressions.extend(c for c in child.named_children if c.type != "comment")
            else:
                expressions.append(child)
        return expressions

    def _iter_fields(self, node: Node) -> Iterator[Node]:
        for child in node.named_children:
            if child.type == "field":
                yield child
            elif child.type != "comment":
                yield from self._iter_fields(child)

    def _decode(self, node: Node, content: bytes) -> Any:
        node_type = node.type

        if node_type == "table_constructor":
            return self._decode_table(node, content)

        if node_type == "string":
            return decode_string_literal(self._text(node, content))

        if node_type == "number":
            return decode_number(self._text(node, content))

        if node_type == "true":
            return True

        if node_type == "false":
            return False

        if node_type == "nil":
            return None

        if node_type == "parenthesized_expression":
            inner = [c for c in node.named_children if c.type != "comment"]
            return self._decode(inner[0], content)

        if node_type == "unary_expression":
            operator = self._text(node.children[0], content)
            operand = node.child_by_field_name("operand")
            if operand is None:
                operand = node.named_children[-1]
            value = self._decode(operand, content)
            if operator == "-" and isinstance(value, (int, float)) and not isinstance(value, bool):
                return -value
            raise TableParseError(
                "Unsupported unary expression",
                details=f"{operator!r} at {_location(node)}",
            )

        if node_type == "binary_expression":
            return self._decode_concat(node, content)

        raise TableParseError(
            "Unsupported expression",
            details=f"{node_type} at {_location(node)}",
        )

    def _decode_concat(self, node: Node, content: bytes) -> str:
        operands = [c for c in node.named_children if c.type != "comment"]
        operators = [c.type for c in node.children if not c.is_named]
        if operators != [".."] or len(operands) != 2:
            raise TableParseError(
                "Unsupported binary expression",
                details=f"{' '.join(operators)!r} at {_location(node)}",
            )
        left, right = operands
        parts = [self._decode(left, content), self._decode(right, content)]
        if not all(isinstance(p, str) for p in parts):
            raise TableParseError(
                "Only strings can be concatenated",
                details=_location(node),
            )
        return parts[0] + parts[1]

    def _decode_table(self, node: Node, content: bytes) -> dict[Any, Any] | list[Any]:
        entries: dict[Any, Any] = {}
        next_index = 1
        for field in self._iter_fields(node):
            value_node = field.child_by_field_name("value")
            name_node = field.child_by_field_name("name")
            if value_node is None:
                raise TableParseError("Table field without a value", details=_location(field))

            if name_node is None:
                key: Any = next_index
                next_index += 1
            elif field.children[0].type == "[":
                key = self._decode(name_node, content)
                if isinstance(key, bool) or not isinstance(key, (str, int, float)):
                    raise TableParseError("Unsupported table key", details=_location(name_node))
                if isinstance(key, float) and key.is_integer():
                    key = int(key)
            else:
                key = self._text(name_node, content)

            value = self._decode(value_node, content)
            if value is None:
                entries.pop(key, None)
                continue
            entries[key] = value

        keys = list(entries)
        if (
            keys
            and all(isinstance(k, int) for k in keys)
            and sorted(keys) == list(range(1, len(keys) + 1))
        ):
            return [entries[k] for k in sorted(keys)]
        return entries

    @staticmethod
    def _text(node: Node, content: bytes) -> str:
        return content[node.start_byte:node.end_byte].decode("utf-8")


@lru_cache
def _get_reader() -> LuaTableReader:
    return LuaTableReader()


def loads(text: str) -> Any:
    """Parse Lua source returning a table. See LuaTableReader.read."""
    return _get_reader().read(text)


def load(path: Path) -> Any:
    """Parse a Lua file returning a table."""
    return _get_reader().read_file(path)
