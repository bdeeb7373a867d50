"""Type inference and signature conversion for old-format descriptions."""

from apidesc.inference.converter import (
    ConversionError,
    ConversionStats,
    DocumentConversion,
    SignatureConverter,
    convert_params,
    convert_signature,
    resolve_params,
)
from apidesc.inference.rules import KNOWN_TYPES_MAP, KNOWN_TYPES_MATCHERS, TypeMatcher
from apidesc.inference.tokenizer import (
    is_optional_token,
    split_param_string,
    strip_optional_brackets,
)
from apidesc.inference.type_inferrer import InferenceRule, TypeInferrer

__all__ = [
    "ConversionError",
    "ConversionStats",
    "DocumentConversion",
    "InferenceRule",
    "KNOWN_TYPES_MAP",
    "KNOWN_TYPES_MATCHERS",
    "SignatureConverter",
    "TypeInferrer",
    "TypeMatcher",
    "convert_params",
    "convert_signature",
    "is_optional_token",
    "resolve_params",
    "split_param_string",
    "strip_optional_brackets",
]
