"""Heuristic type inference for parameter descriptions.

This module provides the TypeInferrer class that guesses a parameter's name
and Lua type from its old-format description, such as ``"BlockX"`` or
``"{{cPlayer|Player}}"``, by running an ordered chain of rules.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Callable, Mapping
from dataclasses import dataclass
from types import MappingProxyType
from typing import Any

from apidesc.core.models import UNKNOWN_TYPE
from apidesc.inference.rules import KNOWN_TYPES_MAP, KNOWN_TYPES_MATCHERS
from apidesc.inference.tokenizer import strip_optional_brackets

logger = logging.getLogger(__name__)

# {{ClassName|ParamName}} -> ParamName
_TEMPLATE_PARAM_RE = re.compile(r"\{\{[^|}]+\|(.*)\}\}")
# {{ClassName}} or {{ClassName|ParamName}} -> ClassName
_TEMPLATE_CLASS_RE = re.compile(r"\{\{([^|}]+)\|?.*\}\}")


@dataclass(frozen=True)
class InferenceRule:
    """One step of the inference chain.

    ``resolve`` is only called for descriptions ``applies`` accepted.
    """

    name: str
    applies: Callable[[str], bool]
    resolve: Callable[[str], tuple[str, str]]


def template_param_name(text: str) -> str | None:
    """Extract ParamName from an embedded ``{{ClassName|ParamName}}``."""
    match = _TEMPLATE_PARAM_RE.search(text)
    return match.group(1) if match else None


def template_class_name(text: str) -> str | None:
    """Extract ClassName from an embedded ``{{ClassName}}`` or ``{{ClassName|ParamName}}``."""
    match = _TEMPLATE_CLASS_RE.search(text)
    return match.group(1) if match else None


class TypeInferrer:
    """Guesses (name, type) pairs for parameter descriptions.

    Rules are tried in a fixed order and the first applicable one wins:
    exact known types, name patterns, known API classes, then wiki-style
    ``{{Class|Name}}`` templates. Descriptions no rule applies to get the
    ``"<unknown>"`` type and are left for manual review.
    """

    def __init__(self, known_classes: Mapping[str, Any] | None = None) -> None:
        """Initialize the type inferrer.

        Args:
            known_classes: Classes exported by the API, keyed by class name.
                Only membership is used; the mapping is never modified.
        """
        self._known_classes: Mapping[str, Any] = MappingProxyType(
            dict(known_classes) if known_classes is not None else {}
        )
        self._rules: tuple[InferenceRule, ...] = (
            InferenceRule("known_type", self._is_known_type, self._resolve_known_type),
            InferenceRule("pattern", self._has_pattern, self._resolve_pattern),
            InferenceRule("known_class", self._is_known_class, self._resolve_known_class),
            InferenceRule("template", self._has_template, self._resolve_template),
        )

    @property
    def rules(self) -> tuple[InferenceRule, ...]:
        """The inference chain, in evaluation order."""
        return self._rules

    @property
    def known_classes(self) -> Mapping[str, Any]:
        """Read-only view of the known classes."""
        return self._known_classes

    def infer(self, description: str) -> tuple[str, str]:
        """Infer the name and type of a single parameter description.

        Args:
            description: One token of a parameter string, optionally wrapped
                in brackets.

        Returns:
            Tuple of (name, type). The type is ``"<unknown>"`` when no rule
            applies.
        """
        text = strip_optional_brackets(description)
        for rule in self._rules:
            if rule.applies(text):
                return rule.resolve(text)

        logger.debug(f"No type inferred for parameter description: {text!r}")
        return text, UNKNOWN_TYPE

    def _is_known_type(self, text: str) -> bool:
        return text in KNOWN_TYPES_MAP

    def _resolve_known_type(self, text: str) -> tuple[str, str]:
        return text, KNOWN_TYPES_MAP[text]

    def _has_pattern(self, text: str) -> bool:
        return any(matcher.matches(text) for matcher in KNOWN_TYPES_MATCHERS)

    def _resolve_pattern(self, text: str) -> tuple[str, str]:
        for matcher in KNOWN_TYPES_MATCHERS:
            if matcher.matches(text):
                param_name = template_param_name(text)
                return (text if param_name is None else param_name), matcher.type
        raise ValueError(f"No pattern matches {text!r}")

    def _is_known_class(self, text: str) -> bool:
        return text in self._known_classes

    def _resolve_known_class(self, text: str) -> tuple[str, str]:
        return text, text

    def _has_template(self, text: str) -> bool:
        return template_class_name(text) is not None

    def _resolve_template(self, text: str) -> tuple[str, str]:
        class_name = template_class_name(text)
        if class_name is None:
            raise ValueError(f"No template in {text!r}")
        param_name = template_param_name(text)
        if param_name is None:
            # Derive a name from the class or enum, dropping "Globals#"-style prefixes
            param_name = class_name.rsplit("#", 1)[-1]
        return param_name, class_name
