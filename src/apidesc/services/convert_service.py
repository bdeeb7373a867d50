"""Convert service for rewriting description files.

This module provides the ConvertService for loading description documents,
converting their function signatures, writing the serialized result next to
the input file and verifying it by parsing it back.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from apidesc.core.config import ApiDescConfig, get_config
from apidesc.core.serializer import SerializationError, serialize_document, verify_round_trip
from apidesc.inference.converter import (
    ConversionError,
    ConversionStats,
    DocumentConversion,
    SignatureConverter,
)
from apidesc.services.loader import LoaderError, load_document

logger = logging.getLogger(__name__)


@dataclass
class ConvertResult:
    """Result of converting one description file."""

    source: Path
    output: Path | None = None
    stats: ConversionStats | None = None
    self_tested: bool = False
    errors: list[str] = field(default_factory=list)

    @property
    def success(self) -> bool:
        """Check if conversion was successful."""
        return len(self.errors) == 0


def _describe(e: LoaderError | ConversionError | SerializationError) -> str:
    return f"{e.message}: {e.details}" if e.details else e.message


class ConvertService:
    """Service for converting description files to the structured format.

    Files are independent; a failure in one file is recorded in its result
    and does not stop the others.
    """

    def __init__(
        self,
        known_classes: Mapping[str, Any] | None = None,
        config: ApiDescConfig | None = None,
    ) -> None:
        """Initialize convert service.

        Args:
            known_classes: AutoAPI classes keyed by class name.
            config: Settings; defaults to the global configuration.
        """
        self._config = config or get_config()
        self._converter = SignatureConverter(known_classes)

    @property
    def converter(self) -> SignatureConverter:
        """The signature converter."""
        return self._converter

    def output_path(self, source: Path) -> Path:
        """Path the converted output of ``source`` is written to."""
        return source.with_name(source.name + self._config.output_suffix)

    def convert_document(self, document: Any) -> tuple[str, DocumentConversion]:
        """Convert a loaded document and serialize it.

        Returns:
            Tuple of (serialized text, conversion).

        Raises:
            ConversionError: If the document structure cannot be converted.
            SerializationError: If the converted document cannot be serialized.
        """
        conversion = self._converter.convert_document(document)
        text = serialize_document(conversion.document, indent_unit=self._config.indent)
        return text, conversion

    def convert_file(self, source: Path, self_test: bool | None = None) -> ConvertResult:
        """Convert a single description file.

        Nothing is written when loading, conversion or serialization fails.

        Args:
            source: Description file to convert.
            self_test: Parse the written output back; defaults to the
                configured setting.

        Returns:
            ConvertResult with statistics and any errors.
        """
        result = ConvertResult(source=source)
        run_self_test = self._config.self_test if self_test is None else self_test
        logger.info(f"Converting file {source}")

        try:
            document = load_document(source)
            text, conversion = self.convert_document(document)
        except (LoaderError, ConversionError, SerializationError) as e:
            result.errors.append(_describe(e))
            logger.warning(f"Failed to convert {source}: {_describe(e)}")
            return result

        result.stats = conversion.stats
        output = self.output_path(source)
        try:
            output.write_text(text, encoding="utf-8")
        except OSError as e:
            result.errors.append(f"Cannot write {output}: {e}")
            logger.warning(f"Failed to write {output}: {e}")
            return result
        result.output = output

        if run_self_test:
            try:
                verify_round_trip(output.read_text(encoding="utf-8"), conversion.document)
                result.self_tested = True
            except SerializationError as e:
                result.errors.append(f"Self-test failed for {output}: {_describe(e)}")
                logger.warning(f"Self-test failed for {output}: {_describe(e)}")

        return result

    def convert_files(self, sources: Iterable[Path], self_test: bool | None = None) -> list[ConvertResult]:
        """Convert several description files, one result per file."""
        return [self.convert_file(source, self_test=self_test) for source in sources]
