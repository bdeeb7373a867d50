"""Unit tests for Lua table serialization."""

import pytest

from apidesc.core.serializer import (
    MalformedKeyTypeError,
    MalformedValueTypeError,
    RoundTripError,
    SerializationError,
    format_key,
    format_scalar,
    long_bracket_string,
    normalize_table,
    quote_string,
    serialize,
    serialize_document,
    verify_round_trip,
)


class TestKeyOrder:
    """Tests for rank-based key ordering."""

    def test_class_level_rank_order(self) -> None:
        text = serialize({"Variables": {}, "Desc": "x", "Functions": {}}, indent="\t")
        assert text.splitlines() == [
            '\tDesc = "x",',
            "\tFunctions =",
            "\t{",
            "\t},",
            "\tVariables =",
            "\t{",
            "\t},",
        ]

    def test_param_level_rank_order(self) -> None:
        text = serialize({"IsOptional": True, "Type": "number", "Name": "BlockX"}, indent="")
        assert text.splitlines() == ['Name = "BlockX",', 'Type = "number",', "IsOptional = true,"]

    def test_unknown_keys_after_ranked_and_before_high_ranks(self) -> None:
        text = serialize({"IgnoreClasses": {}, "Zeta": 1, "Classes": {}}, indent="")
        keys = [line.split(" ")[0] for line in text.splitlines() if "=" in line]
        assert keys == ["Classes", "Zeta", "IgnoreClasses"]

    def test_same_rank_case_insensitive(self) -> None:
        text = serialize({"beta": 1, "Alpha": 2, "gamma": 3}, indent="")
        assert text.splitlines() == ["Alpha = 2,", "beta = 1,", "gamma = 3,"]

    def test_custom_sort_key(self) -> None:
        text = serialize({"a": 1, "b": 2}, indent="", sort_key=lambda k: 0 if k == "b" else 1)
        assert text.splitlines() == ["b = 2,", "a = 1,"]

    def test_insertion_order_irrelevant(self) -> None:
        first = serialize({"Returns": [], "Params": [], "IsStatic": True})
        second = serialize({"IsStatic": True, "Params": [], "Returns": []})
        assert first == second


class TestPositionalTables:
    """Tests for list rendering."""

    def test_nested_param_list(self) -> None:
        text = serialize({"Params": [{"Name": "BlockX", "Type": "number"}]}, indent="")
        assert text.splitlines() == [
            "Params =",
            "{",
            "\t{",
            '\t\tName = "BlockX",',
            '\t\tType = "number",',
            "\t},",
            "},",
        ]

    def test_list_order_kept(self) -> None:
        items = [f"item{i}" for i in range(1, 13)]
        text = serialize(items, indent="")
        assert text.splitlines() == [f'"item{i}",' for i in range(1, 13)]

    def test_integer_keyed_mapping_is_positional(self) -> None:
        assert serialize({2: "b", 1: "a"}, indent="").splitlines() == ['"a",', '"b",']

    def test_sparse_integer_keys_are_named(self) -> None:
        assert serialize({3: "x"}, indent="") == '[3] = "x",'

    def test_custom_indent_unit(self) -> None:
        text = serialize({"A": [1]}, indent="  ", indent_unit="  ")
        assert text.splitlines() == ["  A =", "  {", "    1,", "  },"]


class TestScalars:
    """Tests for scalar formatting."""

    def test_booleans_and_numbers(self) -> None:
        assert format_scalar(True) == "true"
        assert format_scalar(False) == "false"
        assert format_scalar(42) == "42"
        assert format_scalar(-3) == "-3"
        assert format_scalar(1.5) == "1.5"

    def test_plain_string(self) -> None:
        assert format_scalar("hello") == '"hello"'

    def test_quote_escapes(self) -> None:
        assert quote_string('say "hi"') == '"say \\"hi\\""'
        assert quote_string("back\\slash") == '"back\\\\slash"'
        assert quote_string("two\nlines") == '"two\\nlines"'
        assert quote_string("bell\a") == '"bell\\007"'

    def test_tab_string_uses_long_bracket(self) -> None:
        assert format_scalar("\tIndented text") == "[[\n\tIndented text]]"

    def test_long_bracket_level_for_brackets_in_content(self) -> None:
        assert long_bracket_string("x[[y\t") == "[==[\nx[[y\t]==]"
        assert long_bracket_string("a\t]") == "[==[\na\t]]==]"

    def test_long_bracket_level_skips_conflicting_level(self) -> None:
        assert long_bracket_string("a\t]==]") == "[===[\na\t]==]]===]"

    def test_carriage_return_falls_back_to_quotes(self) -> None:
        assert long_bracket_string("a\tb\r") is None
        assert format_scalar("a\tb\r") == '"a\\tb\\r"'

    def test_nul_falls_back_to_quotes(self) -> None:
        assert long_bracket_string("a\tb\x00") is None
        assert format_scalar("a\tb\x00") == '"a\\tb\\000"'

    def test_nul_with_tab_round_trips(self) -> None:
        document = {"Desc": "line\t\x00x"}
        assert verify_round_trip(serialize_document(document), document) == document


class TestKeys:
    """Tests for key formatting."""

    def test_identifier(self) -> None:
        assert format_key("Desc") == "Desc"

    def test_reserved_word(self) -> None:
        assert format_key("end") == '["end"]'

    def test_non_identifier_string(self) -> None:
        assert format_key("my key") == '["my key"]'
        assert format_key("1st") == '["1st"]'

    def test_number(self) -> None:
        assert format_key(7) == "[7]"


class TestMalformedInput:
    """Tests for rejection of values the output cannot represent."""

    def test_none_value(self) -> None:
        with pytest.raises(MalformedValueTypeError):
            serialize({"a": None})

    def test_object_value(self) -> None:
        with pytest.raises(MalformedValueTypeError):
            serialize({"a": object()})

    def test_non_finite_number(self) -> None:
        with pytest.raises(MalformedValueTypeError):
            serialize({"a": float("nan")})

    def test_tuple_key(self) -> None:
        with pytest.raises(MalformedKeyTypeError):
            serialize({("a",): 1})

    def test_bool_key(self) -> None:
        with pytest.raises(MalformedKeyTypeError):
            serialize({True: 1, "a": 2})

    def test_nested_error_aborts(self) -> None:
        with pytest.raises(SerializationError):
            serialize_document({"Classes": {"cWorld": {"Functions": {"Foo": {"Bad": {1.5, 2.5}}}}}})

    def test_document_must_be_table(self) -> None:
        with pytest.raises(MalformedValueTypeError):
            serialize_document("return")


class TestDocument:
    """Tests for whole-document output."""

    def test_document_wrapper(self) -> None:
        assert serialize_document({"a": 1}) == "return\n{\n\ta = 1,\n}\n"

    def test_empty_document(self) -> None:
        assert serialize_document({}) == "return\n{\n}\n"

    def test_normalize_table(self) -> None:
        assert normalize_table({1: "a", 2: ("b",)}) == ["a", ["b"]]
        assert normalize_table({"Params": []}) == {"Params": {}}


class TestRoundTrip:
    """Tests for the self-test re-parse."""

    def test_round_trip(self) -> None:
        document = {
            "Classes": {
                "cWorld": {
                    "Desc": "\tMulti-line\n\tdescription with [[links]]",
                    "Functions": {
                        "GetBlock": {
                            "Params": [
                                {"Name": "BlockX", "Type": "number"},
                                {"Name": "Callback", "Type": "function", "IsOptional": True},
                            ],
                            "Returns": [{"Type": "number"}],
                            "Notes": 'Quotes " and \\ backslashes',
                        },
                    },
                },
            },
            "IgnoreClasses": ["^cBlock", "end"],
        }
        text = serialize_document(document)
        assert verify_round_trip(text, document) == document

    def test_unparseable_output(self) -> None:
        with pytest.raises(RoundTripError):
            verify_round_trip("return\n{\n\ta = ,\n}\n", {"a": 1})

    def test_mismatching_output(self) -> None:
        with pytest.raises(RoundTripError):
            verify_round_trip("return\n{\n\ta = 1,\n}\n", {"a": 2})
