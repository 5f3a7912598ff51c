"""
Conversion of named OpenAPI schema objects into IR type declarations.

Inline schemas nested inside a declaration (object properties, array items,
map values) that need a name of their own are hoisted: they become separate
declarations named after their nesting path, e.g. property "author" of
"Blog" becomes "BlogAuthor" and the items of "Post.comments" become
"PostCommentsItem".
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from ..config import ConverterConfig
from ..diagnostics import (
    DROPPED_ENUM_VALUE,
    SKIPPED_ONE_OF,
    SKIPPED_REFERENCE_SCHEMA,
    Diagnostic,
    Diagnostics,
)
from ..errors import UnrecognizedSchemaShapeError
from ..ir.declarations import (
    AliasShape,
    EnumShape,
    ObjectField,
    ObjectShape,
    TypeDeclaration,
)
from ..ir.registry import RegistryBuilder
from ..ir.types import PrimitiveType, TypeReference
from ..mapping import schema_to_primitive
from ..naming import is_reference, ref_for_type_name, synthesize_type_name, type_name_from_ref
from .schema_shape import SchemaShape, classify_schema

ITEM_SEGMENT = "Item"
VALUE_SEGMENT = "Value"


@dataclass(frozen=True)
class TypeConversion:
    """Result of converting one named schema.

    Attributes:
        declaration: The declaration for the requested name, None when skipped
        hoisted: Declarations synthesized for nested inline schemas
        diagnostics: Soft skips and coercions recorded along the way
    """

    declaration: TypeDeclaration | None
    hoisted: tuple[TypeDeclaration, ...] = ()
    diagnostics: tuple[Diagnostic, ...] = ()

    @property
    def skipped(self) -> bool:
        return self.declaration is None

    @property
    def declarations(self) -> tuple[TypeDeclaration, ...]:
        if self.declaration is None:
            return ()
        return (self.declaration, *self.hoisted)


@dataclass(frozen=True)
class NestedConversion:
    """A nested schema converted to a reference plus what it hoisted."""

    type_reference: TypeReference
    hoisted: tuple[TypeDeclaration, ...] = ()


def _docs(schema: Any) -> str | None:
    if isinstance(schema, dict):
        return schema.get("description")
    return None


def _location(path: tuple[str, ...]) -> str:
    root, *rest = path
    return "/".join([ref_for_type_name(root), *rest])


def _keyword(schema: dict[str, Any], key: str, expected: type, path: tuple[str, ...]) -> Any:
    """Return schema[key], or an empty value of the expected type when it is absent or null."""
    value = schema.get(key)
    if value is None:
        return expected()
    if not isinstance(value, expected):
        raise UnrecognizedSchemaShapeError(schema, path, f"{key} must be a {expected.__name__}, got {type(value).__name__}")
    return value


class TypeConverter:
    """Converts named schema objects into type declarations."""

    def __init__(self, config: ConverterConfig | None = None):
        self.config = config or ConverterConfig()

    def convert(self, name: str, schema: dict[str, Any]) -> TypeConversion:
        """
        Convert one entry of components.schemas.

        Args:
            name: Registry key of the schema
            schema: The schema object (or a reference object, which is skipped)

        Returns:
            TypeConversion holding the declaration and every hoisted declaration
        """
        diagnostics = Diagnostics()
        path = (name,)
        location = ref_for_type_name(name)
        shape = classify_schema(schema)
        docs = _docs(schema)
        hoisted: tuple[TypeDeclaration, ...] = ()

        if shape is SchemaShape.REFERENCE:
            diagnostics.warning(SKIPPED_REFERENCE_SCHEMA, f"Skipping reference object {name}", location)
            return TypeConversion(None, diagnostics=diagnostics.freeze())
        if shape is SchemaShape.ONE_OF:
            diagnostics.warning(SKIPPED_ONE_OF, f"Skipping oneOf/anyOf schema {name}", location)
            return TypeConversion(None, diagnostics=diagnostics.freeze())

        if shape is SchemaShape.EMPTY:
            declaration = TypeDeclaration(name, ObjectShape(), docs)
        elif shape is SchemaShape.ENUM:
            declaration = TypeDeclaration(name, self._enum_shape(path, schema, diagnostics), docs)
        elif shape is SchemaShape.SCALAR:
            primitive = schema_to_primitive(schema, location)
            declaration = TypeDeclaration(name, AliasShape(TypeReference.of_primitive(primitive)), docs)
        elif shape is SchemaShape.ARRAY:
            nested = self._convert_array(path, schema, diagnostics)
            declaration = TypeDeclaration(name, AliasShape(nested.type_reference), docs)
            hoisted = nested.hoisted
        elif shape is SchemaShape.MAP:
            nested = self._convert_map(path, schema, diagnostics)
            declaration = TypeDeclaration(name, AliasShape(nested.type_reference), docs)
            hoisted = nested.hoisted
        elif shape is SchemaShape.OBJECT:
            object_shape, hoisted = self._object_shape(path, schema, diagnostics)
            declaration = TypeDeclaration(name, object_shape, docs)
        else:
            raise UnrecognizedSchemaShapeError(schema, path)

        # Fails on two nesting paths synthesizing the same name
        RegistryBuilder().extend((declaration, *hoisted))

        return TypeConversion(declaration, hoisted, diagnostics.freeze())

    def _convert_nested(
        self,
        hierarchy: tuple[str, ...],
        segment: str,
        schema: Any,
        diagnostics: Diagnostics,
    ) -> NestedConversion:
        """Convert a schema found at hierarchy + segment."""
        path = (*hierarchy, segment)
        shape = classify_schema(schema)

        if shape is SchemaShape.REFERENCE:
            return NestedConversion(TypeReference.named(type_name_from_ref(schema["$ref"], _location(path))))

        if shape is SchemaShape.SCALAR:
            return NestedConversion(TypeReference.of_primitive(schema_to_primitive(schema, _location(path))))

        if shape is SchemaShape.ARRAY:
            return self._convert_array(path, schema, diagnostics)

        if shape is SchemaShape.MAP:
            return self._convert_map(path, schema, diagnostics)

        if shape is SchemaShape.ENUM:
            enum_name = synthesize_type_name(path)
            declaration = TypeDeclaration(enum_name, self._enum_shape(path, schema, diagnostics), _docs(schema))
            return NestedConversion(TypeReference.named(enum_name), (declaration,))

        if shape is SchemaShape.OBJECT:
            object_name = synthesize_type_name(path)
            object_shape, hoisted = self._object_shape(path, schema, diagnostics)
            declaration = TypeDeclaration(object_name, object_shape, _docs(schema))
            return NestedConversion(TypeReference.named(object_name), (declaration, *hoisted))

        raise UnrecognizedSchemaShapeError(schema, path)

    def _convert_array(self, path: tuple[str, ...], schema: dict[str, Any], diagnostics: Diagnostics) -> NestedConversion:
        items = schema.get("items")
        if not isinstance(items, dict):
            raise UnrecognizedSchemaShapeError(schema, path, "array without items")
        item = self._convert_nested(path, ITEM_SEGMENT, items, diagnostics)
        if schema.get("uniqueItems"):
            return NestedConversion(TypeReference.set_of(item.type_reference), item.hoisted)
        return NestedConversion(TypeReference.list_of(item.type_reference), item.hoisted)

    def _convert_map(self, path: tuple[str, ...], schema: dict[str, Any], diagnostics: Diagnostics) -> NestedConversion:
        value = self._convert_nested(path, VALUE_SEGMENT, schema["additionalProperties"], diagnostics)
        key = TypeReference.of_primitive(PrimitiveType.STRING)
        return NestedConversion(TypeReference.map_of(key, value.type_reference), value.hoisted)

    def _enum_shape(self, path: tuple[str, ...], schema: dict[str, Any], diagnostics: Diagnostics) -> EnumShape:
        values = []
        if not isinstance(schema["enum"], list):
            raise UnrecognizedSchemaShapeError(schema, path, "enum must be a list")
        for value in schema["enum"]:
            if isinstance(value, str):
                values.append(value)
            elif self.config.report_dropped_enum_values:
                diagnostics.warning(DROPPED_ENUM_VALUE, f"Dropping non-string enum value {value!r}", _location(path))
        return EnumShape(tuple(values))

    def _object_shape(
        self,
        path: tuple[str, ...],
        schema: dict[str, Any],
        diagnostics: Diagnostics,
    ) -> tuple[ObjectShape, tuple[TypeDeclaration, ...]]:
        """Build the object shape of a schema and collect what its properties hoist."""
        properties = dict(_keyword(schema, "properties", dict, path))
        required = set(_keyword(schema, "required", list, path))
        extends = []

        # allOf: references are extended types, inline objects contribute fields
        for i, member in enumerate(_keyword(schema, "allOf", list, path)):
            member_path = (*path, "allOf", str(i))
            if is_reference(member):
                extends.append(type_name_from_ref(member["$ref"], _location(member_path)))
            elif classify_schema(member) in (SchemaShape.OBJECT, SchemaShape.EMPTY):
                properties.update(_keyword(member, "properties", dict, member_path))
                required.update(_keyword(member, "required", list, member_path))
            else:
                raise UnrecognizedSchemaShapeError(member, member_path)

        fields = []
        hoisted: list[TypeDeclaration] = []
        for key, property_schema in properties.items():
            nested = self._convert_nested(path, key, property_schema, diagnostics)
            hoisted.extend(nested.hoisted)
            fields.append(ObjectField(key, nested.type_reference, key in required, _docs(property_schema)))

        return ObjectShape(tuple(fields), tuple(extends)), tuple(hoisted)
