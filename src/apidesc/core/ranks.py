"""Key ordering for serialized description documents.

Keys are sorted by rank, then alphabetically (case-insensitive). Ranks are
grouped by the level of the document they appear at; key names never collide
across levels, so a single merged lookup serves every level.
"""

from __future__ import annotations

from collections.abc import Mapping
from enum import Enum
from types import MappingProxyType

DEFAULT_RANK = 1000


class RankContext(str, Enum):
    """Document levels that carry ranked keys."""

    DOCUMENT = "document"
    CLASS = "class"
    FUNCTION = "function"
    PARAM = "param"
    ADDITIONAL_INFO = "additional_info"


KEY_RANKS: Mapping[RankContext, Mapping[str, int]] = MappingProxyType({
    RankContext.DOCUMENT: MappingProxyType({
        "Classes": 100,
        "ExtraPages": 2000,
        "IgnoreClasses": 2100,
        "IgnoreFunctions": 2200,
        "IgnoreConstants": 2300,
        "IgnoreVariables": 2400,
    }),
    RankContext.CLASS: MappingProxyType({
        "Desc": 100,
        "Functions": 200,
        "Constants": 300,
        "ConstantGroups": 400,
        "Variables": 500,
        "AdditionalInfo": 600,
    }),
    RankContext.FUNCTION: MappingProxyType({
        "IsStatic": 100,
        "Params": 200,
        "Returns": 300,
        "Notes": 400,
    }),
    RankContext.PARAM: MappingProxyType({
        "Name": 100,
        "Type": 200,
        "IsOptional": 300,
    }),
    RankContext.ADDITIONAL_INFO: MappingProxyType({
        "Header": 100,
        "Contents": 200,
    }),
})


def _merge_ranks(ranks: Mapping[RankContext, Mapping[str, int]]) -> Mapping[str, int]:
    merged: dict[str, int] = {}
    for context, table in ranks.items():
        for key, rank in table.items():
            if merged.get(key, rank) != rank:
                raise ValueError(f"Conflicting rank for key '{key}' in {context.value} context")
            merged[key] = rank
    return MappingProxyType(merged)


_MERGED_RANKS = _merge_ranks(KEY_RANKS)


def key_rank(key: str | int) -> int:
    """Return the sort rank of a key, DEFAULT_RANK for unknown keys."""
    if isinstance(key, str):
        return _MERGED_RANKS.get(key, DEFAULT_RANK)
    return DEFAULT_RANK


def desc_sort_key(key: str | int) -> tuple[int, str]:
    """Sort key for table keys: rank first, then case-insensitive name."""
    return key_rank(key), str(key).lower()
