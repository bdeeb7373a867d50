"""Core module containing data models, key ranks, the Lua table reader and serializer."""

from apidesc.core.models import (
    UNKNOWN_TYPE,
    ParamSource,
    ParamSpec,
    RawParams,
    SignatureSection,
    StructuredParams,
    UnknownParam,
)
from apidesc.core.ranks import DEFAULT_RANK, KEY_RANKS, RankContext, desc_sort_key, key_rank
from apidesc.core.reader import LuaTableReader, TableParseError, load, loads
from apidesc.core.serializer import (
    MalformedKeyTypeError,
    MalformedValueTypeError,
    RoundTripError,
    SerializationError,
    serialize,
    serialize_document,
    verify_round_trip,
)

__all__ = [
    "DEFAULT_RANK",
    "KEY_RANKS",
    "LuaTableReader",
    "MalformedKeyTypeError",
    "MalformedValueTypeError",
    "ParamSource",
    "ParamSpec",
    "RankContext",
    "RawParams",
    "RoundTripError",
    "SerializationError",
    "SignatureSection",
    "StructuredParams",
    "TableParseError",
    "UNKNOWN_TYPE",
    "UnknownParam",
    "desc_sort_key",
    "key_rank",
    "load",
    "loads",
    "serialize",
    "serialize_document",
    "verify_round_trip",
]
