"""Property tests for serializer round-trips.

For any table of strings, numbers and booleans, the serialized document
SHALL parse back to the same value, and the output SHALL not depend on the
insertion order of named keys.
"""

from __future__ import annotations

from typing import Any

from hypothesis import HealthCheck, given, settings, strategies as st

from apidesc.core.reader import loads
from apidesc.core.serializer import normalize_table, serialize, serialize_document


# Strategies for generating table data
table_keys = st.one_of(
    st.text(max_size=12),
    st.from_regex(r"[A-Za-z_][A-Za-z0-9_]{0,10}", fullmatch=True),
    st.integers(min_value=-1000, max_value=1000),
)
scalars = st.one_of(
    st.text(max_size=40),
    st.text(alphabet="\t\n[]=ab", max_size=20),
    st.integers(min_value=-(2**53), max_value=2**53),
    st.floats(allow_nan=False, allow_infinity=False),
    st.booleans(),
)
tables = st.recursive(
    st.one_of(
        st.dictionaries(table_keys, scalars, max_size=5),
        st.lists(scalars, max_size=5),
    ),
    lambda children: st.one_of(
        st.dictionaries(table_keys, st.one_of(scalars, children), max_size=5),
        st.lists(st.one_of(scalars, children), max_size=5),
    ),
    max_leaves=20,
)


@given(table=tables)
@settings(suppress_health_check=[HealthCheck.too_slow])
def test_document_parses_back(table: Any) -> None:
    """A serialized document parses back to the normalized input."""
    assert loads(serialize_document(table)) == normalize_table(table)


@given(table=st.dictionaries(table_keys, scalars, min_size=1, max_size=8))
def test_named_key_order_independent(table: dict[Any, Any]) -> None:
    """Reversing the insertion order of keys does not change the output."""
    reordered = dict(reversed(list(table.items())))
    assert serialize(reordered) == serialize(table)


@given(table=tables)
@settings(suppress_health_check=[HealthCheck.too_slow])
def test_reserialization_is_stable(table: Any) -> None:
    """Serializing the parsed output again yields the same text."""
    text = serialize_document(table)
    assert serialize_document(loads(text)) == text
