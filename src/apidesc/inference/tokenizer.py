"""Splitting of old-format parameter strings into individual tokens."""

from __future__ import annotations


def split_param_string(param_string: str) -> list[str]:
    """Split a comma-separated parameter description into trimmed tokens.

    Commas are not escaped or nested; empty pieces (doubled or trailing
    commas, whitespace-only entries) are dropped. Order is preserved.

    Example:
        >>> split_param_string("BlockX, BlockY,, [Callback] ")
        ['BlockX', 'BlockY', '[Callback]']
    """
    tokens = []
    for piece in param_string.split(","):
        token = piece.strip()
        if token:
            tokens.append(token)
    return tokens


def is_optional_token(token: str) -> bool:
    """Check if a token is wrapped entirely in one matching pair of brackets.

    ``[Name]`` and ``[{{cPlayer|Player}}]`` are optional, ``[A] [B]`` is not
    (the first bracket closes before the end of the token).
    """
    if len(token) < 2 or token[0] != "[" or token[-1] != "]":
        return False
    depth = 0
    for idx, ch in enumerate(token):
        if ch == "[":
            depth += 1
        elif ch == "]":
            depth -= 1
            if depth == 0:
                return idx == len(token) - 1
    return False


def strip_optional_brackets(token: str) -> str:
    """Remove the brackets around an optional token, leave others unchanged."""
    if is_optional_token(token):
        return token[1:-1]
    return token
