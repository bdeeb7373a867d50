"""Data models for API description conversion.

This module defines the structured records produced when old-format parameter
strings are converted, and the tagged variant distinguishing raw parameter
strings from already-structured parameter lists.
"""

from __future__ import annotations

from enum import Enum
from typing import Any, Union

from pydantic import BaseModel, ConfigDict, Field

UNKNOWN_TYPE = "<unknown>"


class SignatureSection(str, Enum):
    """Sections of a function signature holding parameter records."""

    PARAMS = "Params"
    RETURNS = "Returns"


class ParamSpec(BaseModel):
    """One parameter or return value of a function signature.

    Field aliases are the key names used in the description files.
    """

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    name: str | None = Field(None, alias="Name", description="Parameter name")
    type: str = Field(..., alias="Type", min_length=1, description="Lua type or class name")
    is_optional: bool = Field(False, alias="IsOptional", description="Parameter may be omitted")

    @property
    def is_unknown(self) -> bool:
        """Check if the type could not be inferred."""
        return self.type == UNKNOWN_TYPE

    def to_table(self) -> dict[str, Any]:
        """Convert to the mapping written into the description document.

        Name is left out when absent and IsOptional when false.
        """
        return self.model_dump(by_alias=True, exclude_defaults=True)


class RawParams(BaseModel):
    """Old-format parameter list: a single comma-separated string."""

    model_config = ConfigDict(frozen=True)

    text: str


class StructuredParams(BaseModel):
    """Parameter list already in the structured format, passed through as-is."""

    model_config = ConfigDict(frozen=True)

    value: Any


ParamSource = Union[RawParams, StructuredParams]


class UnknownParam(BaseModel):
    """A parameter whose type could not be inferred and needs manual review."""

    class_name: str
    function_name: str
    overload: int = Field(..., ge=1, description="1-based overload index")
    section: SignatureSection
    position: int = Field(..., ge=1, description="1-based position within the section")
    token: str = Field(..., description="Name recorded for the parameter")
