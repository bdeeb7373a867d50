"""Loading of description documents and AutoAPI class listings."""

from __future__ import annotations

import logging
from collections.abc import Mapping
from pathlib import Path
from typing import Any

from apidesc.core.reader import TableParseError, load

logger = logging.getLogger(__name__)

AUTO_API_INDEX = "_files.lua"


class LoaderError(Exception):
    """Error while loading input files."""

    def __init__(self, message: str, details: str | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.details = details


def load_document(path: Path) -> Any:
    """Load a description document (a Lua file returning a table).

    Raises:
        LoaderError: If the file cannot be read or parsed.
    """
    try:
        return load(path)
    except OSError as e:
        raise LoaderError(message=f"Cannot read {path}", details=str(e)) from e
    except TableParseError as e:
        raise LoaderError(
            message=f"Cannot parse {path}",
            details=f"{e.message}: {e.details}" if e.details else e.message,
        ) from e


def load_known_classes(auto_api_dir: Path) -> dict[str, Any]:
    """Load the AutoAPI class descriptions into a single dictionary.

    The directory holds an index file, ``_files.lua``, returning the list of
    class files; each class file returns a table keyed by class name.

    Args:
        auto_api_dir: The AutoAPI directory.

    Returns:
        Class descriptions keyed by class name.

    Raises:
        LoaderError: If a file is missing or malformed, or a class name
            appears in more than one file.
    """
    logger.info(f"Loading AutoAPI from {auto_api_dir}")
    index = load_document(auto_api_dir / AUTO_API_INDEX)
    if not isinstance(index, list) or not all(isinstance(name, str) for name in index):
        raise LoaderError(
            message=f"{AUTO_API_INDEX} must return a list of file names",
            details=str(auto_api_dir),
        )

    classes: dict[str, Any] = {}
    origins: dict[str, str] = {}
    for filename in index:
        api = load_document(auto_api_dir / filename)
        if not isinstance(api, Mapping):
            raise LoaderError(
                message="AutoAPI file must return a table keyed by class name",
                details=filename,
            )
        for class_name, class_desc in api.items():
            if class_name in classes:
                raise LoaderError(
                    message=f"Duplicate AutoAPI class '{class_name}'",
                    details=f"defined in {origins[class_name]} and {filename}",
                )
            classes[class_name] = class_desc
            origins[class_name] = filename

    logger.info(f"Loaded {len(classes)} AutoAPI classes from {len(index)} files")
    return classes
