"""Conversion of old-format function signatures to structured parameter lists.

Old description files list parameters as one string (``"BlockX, BlockY,
[Callback]"``); the new format uses one record per parameter
(``{Name = "BlockX", Type = "number"}``). Conversion is idempotent:
already-structured parameter lists pass through unchanged.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any

from apidesc.core.models import (
    UNKNOWN_TYPE,
    ParamSource,
    ParamSpec,
    RawParams,
    SignatureSection,
    StructuredParams,
    UnknownParam,
)
from apidesc.inference.tokenizer import is_optional_token, split_param_string
from apidesc.inference.type_inferrer import TypeInferrer

logger = logging.getLogger(__name__)


class ConversionError(Exception):
    """Error while converting a description document."""

    def __init__(self, message: str, details: str | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.details = details


@dataclass
class ConversionStats:
    """Counters collected while converting one document."""

    classes: int = 0
    functions: int = 0
    signatures: int = 0
    params_converted: int = 0
    unknown_params: list[UnknownParam] = field(default_factory=list)


@dataclass
class DocumentConversion:
    """A converted document and what was done to it."""

    document: Any
    stats: ConversionStats


def resolve_params(value: Any) -> ParamSource | None:
    """Classify a Params/Returns value as a raw string or a structured list.

    Raises:
        ConversionError: If the value is neither.
    """
    if value is None:
        return None
    if isinstance(value, str):
        return RawParams(text=value)
    if isinstance(value, (list, tuple, Mapping)):
        return StructuredParams(value=value)
    raise ConversionError(
        message="Unsupported parameter description",
        details=f"expected a string or a table, got {type(value).__name__}",
    )


def _is_empty(value: Any) -> bool:
    return isinstance(value, (list, tuple, Mapping)) and len(value) == 0


def _elide_return_names(returns: Any) -> Any:
    """Drop Name from return values whose Name is a copy of their Type."""
    if not isinstance(returns, (list, tuple)):
        return returns
    elided = []
    for ret in returns:
        if isinstance(ret, Mapping) and "Name" in ret and ret.get("Name") == ret.get("Type"):
            ret = {k: v for k, v in ret.items() if k != "Name"}
        elided.append(ret)
    return elided


def _has_overload_slots(entry: Any) -> bool:
    return isinstance(entry, Mapping) and 1 in entry


def _overloads(entry: Any) -> list[Any]:
    """List the signatures of a function entry, in overload order."""
    if isinstance(entry, (list, tuple)):
        return list(entry)
    if _has_overload_slots(entry):
        signatures = []
        index = 1
        while index in entry:
            signatures.append(entry[index])
            index += 1
        return signatures
    return [entry]


class SignatureConverter:
    """Converts signatures, function entries and whole documents."""

    def __init__(self, known_classes: Mapping[str, Any] | None = None) -> None:
        """Initialize the converter.

        Args:
            known_classes: Classes exported by the API, keyed by class name.
        """
        self._inferrer = TypeInferrer(known_classes)

    @property
    def inferrer(self) -> TypeInferrer:
        """The type inferrer used for raw parameter strings."""
        return self._inferrer

    def convert_params(self, raw_params: Any) -> Any:
        """Convert a Params or Returns value to the structured format.

        Args:
            raw_params: None, a comma-separated string, or an already
                structured list.

        Returns:
            None for None, the same object for structured input, otherwise a
            list of parameter tables in token order.
        """
        source = resolve_params(raw_params)
        if source is None:
            return None
        if isinstance(source, StructuredParams):
            return source.value
        return [spec.to_table() for spec in self.parse_param_string(source.text)]

    def parse_param_string(self, param_string: str) -> list[ParamSpec]:
        """Tokenize a raw parameter string and infer every parameter."""
        specs = []
        for token in split_param_string(param_string):
            is_optional = is_optional_token(token)
            if is_optional:
                token = token[1:-1]
            name, type_name = self._inferrer.infer(token)
            specs.append(ParamSpec(name=name, type=type_name, is_optional=is_optional))
        return specs

    def convert_signature(self, signature: Mapping[str, Any]) -> dict[str, Any]:
        """Convert a single signature.

        Params and Returns are converted (Returns falling back to the legacy
        Return key, which is removed), return values lose names that merely
        repeat their type, and empty Params/Returns are removed. Every other
        key is copied unchanged.

        Args:
            signature: The signature table.

        Returns:
            A new signature table.
        """
        if not isinstance(signature, Mapping):
            raise ConversionError(
                message="Function signature must be a table",
                details=type(signature).__name__,
            )
        result = dict(signature)

        params = self.convert_params(result.get("Params"))
        raw_returns = result.get("Returns")
        if raw_returns is None:
            raw_returns = result.get("Return")
        returns = _elide_return_names(self.convert_params(raw_returns))
        result.pop("Return", None)

        for key, value in (("Params", params), ("Returns", returns)):
            if value is None or _is_empty(value):
                result.pop(key, None)
            else:
                result[key] = value
        return result

    def convert_function_entry(self, entry: Any) -> Any:
        """Convert a function entry, keeping its single-signature or overload-list shape.

        A table holding overloads at 1..n next to named keys (such as a shared
        Notes) converts the overloads and keeps the named keys as they are.
        """
        if isinstance(entry, (list, tuple)):
            return [self.convert_signature(signature) for signature in entry]
        if _has_overload_slots(entry):
            converted = dict(entry)
            for index, signature in enumerate(_overloads(entry), 1):
                converted[index] = self.convert_signature(signature)
            return converted
        return self.convert_signature(entry)

    def convert_document(self, document: Mapping[Any, Any]) -> DocumentConversion:
        """Convert every function signature in a description document.

        The document either lists classes under a Classes key or is itself a
        mapping of class names to class descriptions. Only the Functions of
        each class are converted; everything else is copied as-is.

        Returns:
            DocumentConversion holding the new document and statistics.
        """
        if not isinstance(document, Mapping):
            raise ConversionError(
                message="Description document must be a table",
                details=type(document).__name__,
            )
        stats = ConversionStats()

        has_classes_key = isinstance(document.get("Classes"), Mapping)
        classes = document["Classes"] if has_classes_key else document
        converted_classes: dict[Any, Any] = {}
        for class_name, class_desc in classes.items():
            converted_classes[class_name] = self._convert_class(class_name, class_desc, stats)

        if has_classes_key:
            converted = dict(document)
            converted["Classes"] = converted_classes
        else:
            converted = converted_classes

        logger.info(
            f"Converted {stats.signatures} signatures of {stats.functions} functions "
            f"in {stats.classes} classes, {len(stats.unknown_params)} unknown parameter types"
        )
        return DocumentConversion(document=converted, stats=stats)

    def _convert_class(self, class_name: Any, class_desc: Any, stats: ConversionStats) -> Any:
        if not isinstance(class_desc, Mapping):
            logger.debug(f"Skipping non-table class entry {class_name!r}")
            return class_desc
        stats.classes += 1

        functions = class_desc.get("Functions")
        if not isinstance(functions, Mapping):
            return class_desc

        converted_functions: dict[Any, Any] = {}
        for fn_name, fn_desc in functions.items():
            try:
                converted_entry = self.convert_function_entry(fn_desc)
            except ConversionError as e:
                raise ConversionError(
                    message=e.message,
                    details=f"{class_name}.{fn_name}: {e.details}" if e.details else f"{class_name}.{fn_name}",
                ) from e
            converted_functions[fn_name] = converted_entry
            stats.functions += 1
            self._record(str(class_name), str(fn_name), fn_desc, converted_entry, stats)

        converted = dict(class_desc)
        converted["Functions"] = converted_functions
        return converted

    def _record(
        self,
        class_name: str,
        fn_name: str,
        original: Any,
        converted: Any,
        stats: ConversionStats,
    ) -> None:
        originals = _overloads(original)
        signatures = _overloads(converted)
        for overload, (before, after) in enumerate(zip(originals, signatures), 1):
            stats.signatures += 1
            for section in SignatureSection:
                raw = before.get(section.value)
                if section is SignatureSection.RETURNS and raw is None:
                    raw = before.get("Return")
                entries = after.get(section.value)
                if not isinstance(entries, list):
                    continue
                if isinstance(raw, str):
                    stats.params_converted += len(entries)
                for position, entry in enumerate(entries, 1):
                    if isinstance(entry, Mapping) and entry.get("Type") == UNKNOWN_TYPE:
                        stats.unknown_params.append(
                            UnknownParam(
                                class_name=class_name,
                                function_name=fn_name,
                                overload=overload,
                                section=section,
                                position=position,
                                token=str(entry.get("Name", "")),
                            )
                        )


def convert_params(raw_params: Any, known_classes: Mapping[str, Any] | None = None) -> Any:
    """Convert a Params or Returns value. See SignatureConverter.convert_params."""
    return SignatureConverter(known_classes).convert_params(raw_params)


def convert_signature(
    signature: Mapping[str, Any],
    known_classes: Mapping[str, Any] | None = None,
) -> dict[str, Any]:
    """Convert a single signature. See SignatureConverter.convert_signature."""
    return SignatureConverter(known_classes).convert_signature(signature)
