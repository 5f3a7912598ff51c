"""
Type and service declarations of the intermediate representation.

A TypeDeclaration pairs a registry key with one of four shapes (object,
alias, enum, union). Services group HTTP endpoints keyed by operation id.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Iterator, Union

from .types import PrimitiveType, TypeReference


@dataclass(frozen=True)
class ObjectField:
    """A field of an object declaration."""

    key: str
    value_type: TypeReference
    required: bool = True
    docs: str | None = None


@dataclass(frozen=True)
class ObjectShape:
    """Fields plus the names of object types whose fields are merged in."""

    fields: tuple[ObjectField, ...] = ()
    extends: tuple[str, ...] = ()

    @property
    def keys(self) -> list[str]:
        return [f.key for f in self.fields]

    def get_field(self, key: str) -> ObjectField | None:
        for object_field in self.fields:
            if object_field.key == key:
                return object_field
        return None


@dataclass(frozen=True)
class AliasShape:
    """A name standing for another type reference."""

    alias_of: TypeReference


@dataclass(frozen=True)
class EnumShape:
    """Ordered string values."""

    values: tuple[str, ...] = ()


@dataclass(frozen=True)
class UnionMember:
    """One alternative of a discriminated union."""

    discriminant_value: str
    value_type: TypeReference
    docs: str | None = None


@dataclass(frozen=True)
class UnionShape:
    """A discriminated union."""

    discriminant: str
    members: tuple[UnionMember, ...] = ()


Shape = Union[ObjectShape, AliasShape, EnumShape, UnionShape]


@dataclass(frozen=True)
class TypeDeclaration:
    """A named entry of the type registry."""

    name: str
    shape: Shape
    docs: str | None = None

    def referenced_names(self) -> Iterator[str]:
        """Yield every declaration name this declaration depends on."""
        shape = self.shape
        if isinstance(shape, ObjectShape):
            yield from shape.extends
            for object_field in shape.fields:
                yield from object_field.value_type.named_references()
        elif isinstance(shape, AliasShape):
            yield from shape.alias_of.named_references()
        elif isinstance(shape, UnionShape):
            for member in shape.members:
                yield from member.value_type.named_references()


class HttpMethod(str, Enum):
    """HTTP methods an endpoint can use. PATCH is not supported."""

    GET = "GET"
    POST = "POST"
    PUT = "PUT"
    DELETE = "DELETE"


@dataclass(frozen=True)
class PathParameter:
    """A path template variable."""

    name: str
    value_type: PrimitiveType
    docs: str | None = None


@dataclass(frozen=True)
class HttpEndpoint:
    """An HTTP endpoint keyed by its operation id."""

    operation_id: str
    method: HttpMethod
    path: str
    parameters: tuple[PathParameter, ...] = ()
    request: TypeReference | None = None
    response: TypeReference | None = None
    docs: str | None = None
    errors: tuple[str, ...] = ()

    def get_parameter(self, name: str) -> PathParameter | None:
        for parameter in self.parameters:
            if parameter.name == name:
                return parameter
        return None

    def referenced_names(self) -> Iterator[str]:
        for body in (self.request, self.response):
            if body is not None:
                yield from body.named_references()


@dataclass(frozen=True)
class HttpService:
    """Endpoints in declaration order, keyed by operation id."""

    name: str
    endpoints: dict[str, HttpEndpoint] = field(default_factory=dict)


@dataclass(frozen=True)
class IntermediateRepresentation:
    """Everything a translation direction consumes or produces."""

    name: str = ""
    types: tuple[TypeDeclaration, ...] = ()
    services: tuple[HttpService, ...] = ()
