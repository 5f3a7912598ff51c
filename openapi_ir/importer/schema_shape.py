"""
Classification of OpenAPI schema objects.

Each schema is classified once into a SchemaShape, then converters match on
the shape. The order of the checks in classify_schema is the priority order
of the import direction: reference, empty, oneOf, enum, scalar type, array,
object.
"""

from __future__ import annotations

from enum import Enum
from typing import Any

from ..mapping import SCALAR_SCHEMA_TYPES


class SchemaShape(Enum):
    """Shape of a schema object as seen by the importer."""

    REFERENCE = "reference"  # {"$ref": ...}
    EMPTY = "empty"  # no type, properties, enum or composition
    ONE_OF = "one_of"  # oneOf / anyOf, not importable
    ENUM = "enum"
    SCALAR = "scalar"  # boolean, integer, number, string
    ARRAY = "array"
    MAP = "map"  # object whose only content is an additionalProperties schema
    OBJECT = "object"  # properties, allOf or type: object
    UNRECOGNIZED = "unrecognized"


# Keys that give a schema a shape; a schema with none of them is empty
_SHAPE_KEYS = frozenset({"type", "properties", "enum", "oneOf", "anyOf", "allOf", "items", "additionalProperties"})


def classify_schema(schema: Any) -> SchemaShape:
    """Return the shape of a schema object."""
    if not isinstance(schema, dict):
        return SchemaShape.UNRECOGNIZED

    if "$ref" in schema:
        return SchemaShape.REFERENCE

    if not _SHAPE_KEYS.intersection(schema):
        return SchemaShape.EMPTY

    if "oneOf" in schema or "anyOf" in schema:
        return SchemaShape.ONE_OF

    if "enum" in schema:
        return SchemaShape.ENUM

    schema_type = schema.get("type")
    if schema_type is not None:
        if schema_type == "array":
            return SchemaShape.ARRAY
        if schema_type == "object":
            return _classify_object(schema)
        if isinstance(schema_type, str) and schema_type in SCALAR_SCHEMA_TYPES:
            return SchemaShape.SCALAR
        return SchemaShape.UNRECOGNIZED

    if "properties" in schema or "allOf" in schema or "additionalProperties" in schema:
        return _classify_object(schema)

    return SchemaShape.UNRECOGNIZED


def _classify_object(schema: dict[str, Any]) -> SchemaShape:
    additional = schema.get("additionalProperties")
    if isinstance(additional, dict) and not schema.get("properties") and "allOf" not in schema:
        return SchemaShape.MAP
    return SchemaShape.OBJECT
