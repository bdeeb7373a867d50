"""Business services for apidesc."""

from apidesc.services.convert_service import ConvertResult, ConvertService
from apidesc.services.loader import LoaderError, load_document, load_known_classes

__all__ = [
    "ConvertResult",
    "ConvertService",
    "LoaderError",
    "load_document",
    "load_known_classes",
]
