"""Property tests for conversion idempotency.

For any signature, converting the converted signature again SHALL yield the
same signature, and tokenizing a joined parameter list SHALL give back its
tokens in order.
"""

from __future__ import annotations

from hypothesis import given, strategies as st

from apidesc.inference.converter import SignatureConverter
from apidesc.inference.rules import KNOWN_TYPES_MAP
from apidesc.inference.tokenizer import split_param_string


KNOWN_CLASSES = {"cPlayer": {}, "cWorld": {}, "cEntity": {}}

# Strategies for generating parameter descriptions
simple_identifier = st.from_regex(r"[A-Za-z][A-Za-z0-9_]{0,12}", fullmatch=True)
template = st.builds(
    lambda cls, name: f"{{{{{cls}|{name}}}}}",
    st.sampled_from(sorted(KNOWN_CLASSES)),
    simple_identifier,
)
param_token = st.one_of(
    simple_identifier,
    st.sampled_from(sorted(KNOWN_TYPES_MAP)),
    st.sampled_from(sorted(KNOWN_CLASSES)),
    template,
)
maybe_optional = st.builds(
    lambda token, optional: f"[{token}]" if optional else token,
    param_token,
    st.booleans(),
)
param_lists = st.lists(maybe_optional, max_size=6)


@st.composite
def signatures(draw: st.DrawFn) -> dict[str, object]:
    """Generate an old-format signature with optional Params and Returns."""
    signature: dict[str, object] = {}
    if draw(st.booleans()):
        signature["Params"] = ", ".join(draw(param_lists))
    returns_key = draw(st.sampled_from(["Returns", "Return", None]))
    if returns_key is not None:
        signature[returns_key] = ", ".join(draw(param_lists))
    if draw(st.booleans()):
        signature["Notes"] = draw(st.text(max_size=20))
    return signature


@given(tokens=param_lists)
def test_tokenizer_keeps_tokens(tokens: list[str]) -> None:
    """Joining tokens with commas and splitting again is lossless."""
    assert split_param_string(", ".join(tokens)) == tokens


@given(signature=signatures())
def test_signature_conversion_idempotent(signature: dict[str, object]) -> None:
    """A converted signature is a fixed point of conversion."""
    converter = SignatureConverter(KNOWN_CLASSES)
    once = converter.convert_signature(signature)
    assert converter.convert_signature(once) == once


@given(signature=signatures())
def test_param_count_preserved(signature: dict[str, object]) -> None:
    """Every token becomes exactly one parameter record."""
    converter = SignatureConverter(KNOWN_CLASSES)
    converted = converter.convert_signature(signature)
    raw = signature.get("Params")
    expected = len(split_param_string(raw)) if isinstance(raw, str) else 0
    assert len(converted.get("Params", [])) == expected
