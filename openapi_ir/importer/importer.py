"""
Batch import of a whole OpenAPI v3 document.

Per-entity converters raise on hard failures; this driver catches them per
schema and per operation, records a diagnostic and keeps going, so one bad
entity never hides the rest of the document.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any

from ..config import ConverterConfig
from ..diagnostics import CONVERSION_FAILED, UNRESOLVED_REFERENCE, Diagnostic, Diagnostics, Severity
from ..errors import ConversionError, UnresolvedReferenceError, UnsupportedDocumentError
from ..ir.declarations import HttpEndpoint, HttpService, IntermediateRepresentation
from ..ir.registry import RegistryBuilder, TypeRegistry
from ..naming import ref_for_type_name
from .service_converter import ServiceConverter, add_endpoint, operation_location
from .type_converter import TypeConverter

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ImportResult:
    """Everything imported from one document."""

    types: TypeRegistry
    service: HttpService
    diagnostics: tuple[Diagnostic, ...] = ()

    @property
    def has_errors(self) -> bool:
        return any(d.severity is Severity.ERROR for d in self.diagnostics)

    def to_ir(self, name: str = "") -> IntermediateRepresentation:
        return IntermediateRepresentation(name=name, types=self.types.declarations(), services=(self.service,))


class OpenApiImporter:
    """Imports components.schemas and paths of an OpenAPI v3 document."""

    def __init__(self, config: ConverterConfig | None = None):
        self.config = config or ConverterConfig()
        self.type_converter = TypeConverter(self.config)
        self.service_converter = ServiceConverter(self.config)

    def import_document(self, document: dict[str, Any]) -> ImportResult:
        """
        Import a parsed OpenAPI document.

        Args:
            document: The document as loaded from JSON or YAML

        Returns:
            ImportResult with the type registry, the service and all diagnostics
        """
        version = str(document.get("openapi", ""))
        if not version.startswith("3."):
            raise UnsupportedDocumentError(f"Not an OpenAPI v3 document (openapi={document.get('openapi')!r})")

        diagnostics = Diagnostics()
        schemas = (document.get("components") or {}).get("schemas") or {}
        types = self.import_schemas(schemas, diagnostics)
        service = self.import_paths(document.get("paths") or {}, diagnostics)
        self._check_references(types, service, diagnostics)

        logger.debug("Imported %d types and %d endpoints", len(types), len(service.endpoints))
        return ImportResult(types, service, diagnostics.freeze())

    def import_schemas(self, schemas: dict[str, Any], diagnostics: Diagnostics) -> TypeRegistry:
        builder = RegistryBuilder()
        for name, schema in schemas.items():
            try:
                conversion = self.type_converter.convert(name, schema)
                builder.extend(conversion.declarations)
            except ConversionError as e:
                diagnostics.error(CONVERSION_FAILED, str(e), ref_for_type_name(name))
                continue
            diagnostics.extend(conversion.diagnostics)
        return builder.build()

    def import_paths(self, paths: dict[str, Any], diagnostics: Diagnostics) -> HttpService:
        endpoints: dict[str, HttpEndpoint] = {}
        for path, method, operation, shared_parameters in self.service_converter.iter_operations(paths, diagnostics):
            location = operation_location(path, method)
            try:
                endpoint = self.service_converter.convert_operation(path, method, operation, shared_parameters)
                add_endpoint(endpoints, endpoint, location)
            except ConversionError as e:
                diagnostics.error(CONVERSION_FAILED, str(e), location)
        return HttpService(self.config.service_name, endpoints)

    def _check_references(self, types: TypeRegistry, service: HttpService, diagnostics: Diagnostics) -> None:
        unresolved = types.unresolved_references([service])
        if not unresolved:
            return
        if self.config.strict_references:
            raise UnresolvedReferenceError(unresolved)
        for owner, name in unresolved:
            diagnostics.error(UNRESOLVED_REFERENCE, f"{owner} references undeclared type {name}", owner)
