"""
Primitive and container mapping tables between IR types and OpenAPI schemas.

    IR primitive   schema
    boolean        {"type": "boolean"}
    integer        {"type": "integer"}
    long           {"type": "integer", "format": "int64"}
    double         {"type": "number", "format": "double"}
    string         {"type": "string"}
    datetime       {"type": "string", "format": "date-time"}
    uuid           {"type": "string", "format": "uuid"}

Containers: list/set become arrays (sets add uniqueItems), map<K, V>
becomes an object with additionalProperties (keys are always strings),
optional<T> becomes the schema of T and is reported as not required.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from .errors import UnsupportedShapeError
from .ir.types import PrimitiveType, TypeKind, TypeReference
from .naming import ref_for_type_name

PRIMITIVE_SCHEMAS: dict[PrimitiveType, dict[str, str]] = {
    PrimitiveType.BOOLEAN: {"type": "boolean"},
    PrimitiveType.INTEGER: {"type": "integer"},
    PrimitiveType.LONG: {"type": "integer", "format": "int64"},
    PrimitiveType.DOUBLE: {"type": "number", "format": "double"},
    PrimitiveType.STRING: {"type": "string"},
    PrimitiveType.DATETIME: {"type": "string", "format": "date-time"},
    PrimitiveType.UUID: {"type": "string", "format": "uuid"},
}

# (type, format) -> primitive; a format not listed falls back to (type, None)
SCHEMA_PRIMITIVES: dict[tuple[str, str | None], PrimitiveType] = {
    ("boolean", None): PrimitiveType.BOOLEAN,
    ("integer", None): PrimitiveType.INTEGER,
    ("integer", "int32"): PrimitiveType.INTEGER,
    ("integer", "int64"): PrimitiveType.LONG,
    ("number", None): PrimitiveType.DOUBLE,
    ("number", "double"): PrimitiveType.DOUBLE,
    ("number", "float"): PrimitiveType.DOUBLE,
    ("string", None): PrimitiveType.STRING,
    ("string", "date-time"): PrimitiveType.DATETIME,
    ("string", "uuid"): PrimitiveType.UUID,
}

SCALAR_SCHEMA_TYPES = frozenset(schema_type for schema_type, _ in SCHEMA_PRIMITIVES)


@dataclass(frozen=True)
class SchemaConversion:
    """A converted type reference and whether its field is required."""

    schema: dict[str, Any]
    required: bool = True


def primitive_to_schema(primitive: PrimitiveType) -> dict[str, str]:
    """Return a fresh schema for an IR primitive."""
    schema = PRIMITIVE_SCHEMAS.get(primitive)
    if schema is None:
        raise UnsupportedShapeError(primitive)
    return dict(schema)


def schema_to_primitive(schema: dict[str, Any], location: str = "") -> PrimitiveType:
    """Return the IR primitive for a scalar schema, honoring its format."""
    schema_type = schema.get("type")
    schema_format = schema.get("format")
    if not isinstance(schema_type, str):
        raise UnsupportedShapeError(schema_type, location)
    primitive = SCHEMA_PRIMITIVES.get((schema_type, schema_format))
    if primitive is None:
        primitive = SCHEMA_PRIMITIVES.get((schema_type, None))
    if primitive is None:
        raise UnsupportedShapeError(schema_type, location)
    return primitive


def type_reference_to_schema(reference: TypeReference) -> SchemaConversion:
    """Convert a type reference to a schema (or $ref) plus its requiredness."""
    kind = reference.kind
    if kind is TypeKind.PRIMITIVE:
        return SchemaConversion(primitive_to_schema(reference.primitive))
    if kind is TypeKind.NAMED:
        return SchemaConversion({"$ref": ref_for_type_name(reference.name)})
    if kind is TypeKind.VOID:
        return SchemaConversion({"type": "object"})
    if kind is TypeKind.LIST:
        items = type_reference_to_schema(reference.item_type).schema
        return SchemaConversion({"type": "array", "items": items})
    if kind is TypeKind.SET:
        items = type_reference_to_schema(reference.item_type).schema
        return SchemaConversion({"type": "array", "items": items, "uniqueItems": True})
    if kind is TypeKind.MAP:
        key_type, value_type = reference.type_args
        if not _is_string_like(key_type):
            raise UnsupportedShapeError(f"map key {key_type}")
        values = type_reference_to_schema(value_type).schema
        return SchemaConversion({"type": "object", "additionalProperties": values})
    if kind is TypeKind.OPTIONAL:
        inner = type_reference_to_schema(reference.item_type)
        return SchemaConversion(inner.schema, required=False)
    raise UnsupportedShapeError(kind)


_STRING_LIKE_PRIMITIVES = frozenset({PrimitiveType.STRING, PrimitiveType.UUID, PrimitiveType.DATETIME})


def _is_string_like(reference: TypeReference) -> bool:
    # Named keys are usually enums, which export as strings
    if reference.kind is TypeKind.NAMED:
        return True
    return reference.kind is TypeKind.PRIMITIVE and reference.primitive in _STRING_LIKE_PRIMITIVES
