"""OpenAPI <-> IR schema translation

A Python package for translating OpenAPI v3 schema objects and paths into a
compact intermediate type-declaration language, and back.
"""

__version__ = "0.1.0"

from .config import ConverterConfig, ExportDocumentConfig
from .diagnostics import Diagnostic, Diagnostics, Severity
from .errors import ConversionError
from .exporter import IrToSchemaConverter
from .importer import ImportResult, OpenApiImporter, ServiceConverter, TypeConverter
from .ir import IntermediateRepresentation, TypeDeclaration, TypeReference, TypeRegistry

__all__ = [
    "ConverterConfig",
    "ExportDocumentConfig",
    "Diagnostic",
    "Diagnostics",
    "Severity",
    "ConversionError",
    "OpenApiImporter",
    "ImportResult",
    "TypeConverter",
    "ServiceConverter",
    "IrToSchemaConverter",
    "IntermediateRepresentation",
    "TypeDeclaration",
    "TypeReference",
    "TypeRegistry",
]
