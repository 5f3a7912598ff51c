"""
Intermediate representation: type references, declarations and services.
"""

from __future__ import annotations

from .declarations import (
    AliasShape,
    EnumShape,
    HttpEndpoint,
    HttpMethod,
    HttpService,
    IntermediateRepresentation,
    ObjectField,
    ObjectShape,
    PathParameter,
    TypeDeclaration,
    UnionMember,
    UnionShape,
)
from .registry import RegistryBuilder, TypeRegistry
from .serialization import ir_from_dict, ir_to_dict
from .types import PrimitiveType, TypeKind, TypeReference, parse_type_reference

__all__ = [
    "PrimitiveType",
    "TypeKind",
    "TypeReference",
    "parse_type_reference",
    "ObjectField",
    "ObjectShape",
    "AliasShape",
    "EnumShape",
    "UnionMember",
    "UnionShape",
    "TypeDeclaration",
    "HttpMethod",
    "PathParameter",
    "HttpEndpoint",
    "HttpService",
    "IntermediateRepresentation",
    "TypeRegistry",
    "RegistryBuilder",
    "ir_to_dict",
    "ir_from_dict",
]
