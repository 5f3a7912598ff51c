"""
Import direction: OpenAPI v3 schemas and paths to IR declarations.
"""

from __future__ import annotations

from .importer import ImportResult, OpenApiImporter
from .schema_shape import SchemaShape, classify_schema
from .service_converter import ServiceConversion, ServiceConverter
from .type_converter import NestedConversion, TypeConversion, TypeConverter

__all__ = [
    "OpenApiImporter",
    "ImportResult",
    "SchemaShape",
    "classify_schema",
    "ServiceConverter",
    "ServiceConversion",
    "TypeConverter",
    "TypeConversion",
    "NestedConversion",
]
