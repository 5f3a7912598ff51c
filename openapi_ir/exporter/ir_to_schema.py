"""
Conversion of IR declarations back into OpenAPI v3 schema objects.

Object inheritance is expressed as allOf composition, requiredness comes
from optional<T> wrapping, and unions become oneOf lists whose members
assert the discriminant value.
"""

from __future__ import annotations

from typing import Any, Iterable

from ..config import ConverterConfig
from ..errors import ConversionError, UnsupportedShapeError
from ..ir.declarations import (
    AliasShape,
    EnumShape,
    HttpEndpoint,
    HttpService,
    IntermediateRepresentation,
    ObjectShape,
    TypeDeclaration,
    UnionMember,
    UnionShape,
)
from ..ir.registry import TypeRegistry
from ..ir.types import TypeKind, TypeReference
from ..mapping import SchemaConversion, primitive_to_schema, type_reference_to_schema
from ..naming import ref_for_type_name


class IrToSchemaConverter:
    """Converts an intermediate representation to an OpenAPI document."""

    def __init__(self, config: ConverterConfig | None = None):
        self.config = config or ConverterConfig()

    def convert(self, ir: IntermediateRepresentation) -> dict[str, Any]:
        """
        Convert a whole IR into an OpenAPI v3 document.

        Args:
            ir: The intermediate representation

        Returns:
            Document with openapi, info, paths and components.schemas
        """
        registry = TypeRegistry(ir.types)
        registry.check_references(ir.services)

        document_config = self.config.document
        return {
            "openapi": document_config.openapi_version,
            "info": {
                "title": ir.name or document_config.title,
                "version": document_config.api_version,
            },
            "paths": self.convert_services(ir.services),
            "components": {"schemas": self.convert_schemas(registry.declarations())},
        }

    def convert_schemas(self, declarations: Iterable[TypeDeclaration]) -> dict[str, dict[str, Any]]:
        """Return components.schemas entries keyed by declaration name."""
        return {declaration.name: self.convert_declaration(declaration) for declaration in declarations}

    def convert_declaration(self, declaration: TypeDeclaration) -> dict[str, Any]:
        shape = declaration.shape
        if isinstance(shape, ObjectShape):
            schema = self._convert_object(shape)
        elif isinstance(shape, AliasShape):
            schema = dict(self.convert_type_reference(shape.alias_of).schema)
        elif isinstance(shape, EnumShape):
            schema = {"type": "string", "enum": list(shape.values)}
        elif isinstance(shape, UnionShape):
            schema = self._convert_union(declaration.name, shape)
        else:
            raise UnsupportedShapeError(type(shape).__name__, ref_for_type_name(declaration.name))

        if declaration.docs:
            schema["description"] = declaration.docs
        return schema

    def convert_type_reference(self, reference: TypeReference) -> SchemaConversion:
        """Convert a type reference to a schema and whether it is required."""
        return type_reference_to_schema(reference)

    def _convert_object(self, shape: ObjectShape) -> dict[str, Any]:
        properties = {}
        required = []
        for object_field in shape.fields:
            conversion = self.convert_type_reference(object_field.value_type)
            property_schema = dict(conversion.schema)
            if object_field.docs:
                property_schema["description"] = object_field.docs
            properties[object_field.key] = property_schema
            if conversion.required and object_field.required:
                required.append(object_field.key)

        schema: dict[str, Any] = {"type": "object", "properties": properties}
        if required:
            schema["required"] = required
        if shape.extends:
            schema["allOf"] = [{"$ref": ref_for_type_name(name)} for name in shape.extends]
        return schema

    def _convert_union(self, name: str, shape: UnionShape) -> dict[str, Any]:
        value_key = self.config.union_value_key
        if shape.discriminant == value_key and any(_carries_value(member) for member in shape.members):
            raise ConversionError(
                f"Union {name} uses {value_key!r} both as discriminant and as value key", ref_for_type_name(name)
            )
        schema: dict[str, Any] = {"oneOf": [self._convert_union_member(shape.discriminant, member) for member in shape.members]}
        if self.config.include_discriminator:
            discriminator: dict[str, Any] = {"propertyName": shape.discriminant}
            mapping = {
                member.discriminant_value: ref_for_type_name(member.value_type.name)
                for member in shape.members
                if member.value_type.kind is TypeKind.NAMED
            }
            if mapping:
                discriminator["mapping"] = mapping
            schema["discriminator"] = discriminator
        return schema

    def _convert_union_member(self, discriminant: str, member: UnionMember) -> dict[str, Any]:
        """
        Convert one union member.

        Every member asserts that the discriminant equals its literal value.
        A named member composes that assertion with the referenced type; any
        other payload is carried under the configured value key.
        """
        discriminant_object: dict[str, Any] = {
            "type": "object",
            "properties": {discriminant: {"type": "string", "enum": [member.discriminant_value]}},
            "required": [discriminant],
        }
        value_type = member.value_type

        if value_type.kind is TypeKind.NAMED:
            schema: dict[str, Any] = {
                "type": "object",
                "allOf": [{"$ref": ref_for_type_name(value_type.name)}, discriminant_object],
            }
        elif value_type.kind is TypeKind.VOID:
            schema = discriminant_object
        else:
            value_key = self.config.union_value_key
            conversion = self.convert_type_reference(value_type)
            schema = discriminant_object
            schema["properties"][value_key] = conversion.schema
            if conversion.required:
                schema["required"].append(value_key)

        if member.docs:
            schema["description"] = member.docs
        return schema

    def convert_services(self, services: Iterable[HttpService]) -> dict[str, dict[str, Any]]:
        """Return the paths object for every endpoint of every service."""
        paths: dict[str, dict[str, Any]] = {}
        for service in services:
            for endpoint in service.endpoints.values():
                path_item = paths.setdefault(endpoint.path, {})
                method_key = endpoint.method.value.lower()
                if method_key in path_item:
                    raise ConversionError(f"Duplicate operation {endpoint.method.value} {endpoint.path}", endpoint.operation_id)
                path_item[method_key] = self._convert_endpoint(endpoint)
        return paths

    def _convert_endpoint(self, endpoint: HttpEndpoint) -> dict[str, Any]:
        operation: dict[str, Any] = {"operationId": endpoint.operation_id}
        if endpoint.docs:
            operation["description"] = endpoint.docs

        if endpoint.parameters:
            parameters = []
            for parameter in endpoint.parameters:
                parameter_object: dict[str, Any] = {
                    "name": parameter.name,
                    "in": "path",
                    "required": True,
                    "schema": primitive_to_schema(parameter.value_type),
                }
                if parameter.docs:
                    parameter_object["description"] = parameter.docs
                parameters.append(parameter_object)
            operation["parameters"] = parameters

        if endpoint.request is not None:
            operation["requestBody"] = {
                "required": True,
                "content": self._json_content(endpoint.request),
            }

        if endpoint.response is None or endpoint.response.kind is TypeKind.VOID:
            operation["responses"] = {"204": {"description": "No content"}}
        else:
            operation["responses"] = {
                "200": {
                    "description": "Successful response",
                    "content": self._json_content(endpoint.response),
                }
            }
        return operation

    def _json_content(self, reference: TypeReference) -> dict[str, Any]:
        return {self.config.json_media_type: {"schema": self.convert_type_reference(reference).schema}}


def _carries_value(member: UnionMember) -> bool:
    # Named members compose the payload via allOf, void members have none
    return member.value_type.kind not in (TypeKind.NAMED, TypeKind.VOID)
