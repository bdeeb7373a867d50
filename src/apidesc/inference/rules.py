"""Static tables used to guess parameter types from their descriptions.

KNOWN_TYPES_MAP is consulted for exact matches. KNOWN_TYPES_MATCHERS is an
ordered list of regular expressions searched anywhere in the description; the
first one that matches decides the type, so the order below is significant.
"""

from __future__ import annotations

import re
from collections.abc import Mapping
from dataclasses import dataclass
from types import MappingProxyType

KNOWN_TYPES_MAP: Mapping[str, str] = MappingProxyType({
    "AngleDegrees": "number",
    "Biome": "number",
    "BlockFace": "eBlockFace",
    "BlockLight": "number",
    "BlockSkyLight": "number",
    "BlockMeta": "number",
    "BlockType": "number",
    "BLOCKTYPE": "number",
    "BlockX": "number",
    "BlockY": "number",
    "BlockZ": "number",
    "bool": "boolean",
    "boolean": "boolean",
    "CallbackFunction": "function",
    "CraftingGrid": "cCraftingGrid",
    "DamageType": "eDamageType",
    "eBiome": "EMCSBiome",
    "eDimension": "eDimension",
    "eGameMode": "eGameMode",
    "EMCSBiome": "EMCSBiome",
    "Eps": "number",
    "eWeather": "eWeather",
    "IniFile": "cIniFile",
    "ItemDamage": "number",
    "ItemType": "number",
    "max": "number",
    "min": "number",
    "NIBBLETYPE": "number",
    "Number": "number",
    "number": "number",
    "self": "self",
    "short": "number",
    "table": "table",
    "Vector3i": "Vector3i",
    "Vector3f": "Vector3f",
    "Vector3d": "Vector3d",
    "World": "cWorld",
    "x": "number",
    "X": "number",
    "y": "number",
    "Y": "number",
    "z": "number",
    "Z": "number",
})


@dataclass(frozen=True)
class TypeMatcher:
    """A pattern that, when found in a description, decides its type."""

    pattern: re.Pattern[str]
    type: str

    def matches(self, text: str) -> bool:
        return self.pattern.search(text) is not None


def _matcher(pattern: str, type_name: str) -> TypeMatcher:
    return TypeMatcher(pattern=re.compile(pattern), type=type_name)


KNOWN_TYPES_MATCHERS: tuple[TypeMatcher, ...] = (
    _matcher(r"Add[XYZ]", "number"),
    _matcher(r"Are[A-Z]", "boolean"),
    _matcher(r"BlockArea", "cBlockArea"),
    _matcher(r"Block[XYZ]", "number"),
    _matcher(r"BoundingBox", "cBoundingBox"),
    _matcher(r"[Cc]allback$", "function"),
    _matcher(r"[Cc]allbackFn", "function"),
    _matcher(r"[Cc]allbacks", "table"),
    _matcher(r"Can[A-Z]", "boolean"),
    _matcher(r"Center[XYZ]", "number"),
    _matcher(r"Chunk[XZ]", "number"),
    _matcher(r"Coeff", "number"),
    _matcher(r"Count", "number"),
    _matcher(r"Cuboid", "cCuboid"),
    _matcher(r"Data", "string"),
    _matcher(r"Does[A-Z]", "boolean"),
    _matcher(r"Enchantments", "cEnchantments"),
    _matcher(r"End[XYZ]", "number"),
    _matcher(r"Expand[XYZ]", "number"),
    _matcher(r"Face", "eBlockFace"),
    _matcher(r"Height", "number"),
    _matcher(r"[a-z]ID", "number"),
    _matcher(r"Index", "number"),
    _matcher(r"Is[A-Z]", "boolean"),
    _matcher(r"Length", "number"),
    _matcher(r"Max", "number"),
    _matcher(r"Message", "string"),
    _matcher(r"Min", "number"),
    _matcher(r"Name", "string"),
    _matcher(r"Num", "number"),
    _matcher(r"Offset[XYZ]", "number"),
    _matcher(r"Origin[XYZ]", "number"),
    _matcher(r"Path", "string"),
    _matcher(r"Pixel[XYZ]", "number"),
    _matcher(r"Pos[XYZ]", "number"),
    _matcher(r"Point[XYZ]", "number"),
    _matcher(r"Radius", "number"),
    _matcher(r"Rel[XYZ]", "number"),
    _matcher(r"Should[A-Z]", "boolean"),
    _matcher(r"Size[XYZ]", "number"),
    _matcher(r"Speed[XYZ]", "number"),
    _matcher(r"Start[XYZ]", "number"),
    _matcher(r"Str", "string"),
    _matcher(r"str", "string"),
    _matcher(r"Text", "string"),
    _matcher(r"Tick[A-Zs]", "number"),  # both TickTimer and AgeInTicks
    _matcher(r"Use[A-Z]", "boolean"),
    _matcher(r"UUID", "string"),
    _matcher(r"Width", "number"),
    _matcher(r"[XYZ][12]", "number"),
)
