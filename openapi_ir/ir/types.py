"""
Type references of the intermediate representation.

A TypeReference says where a value's type comes from: a primitive, a
container of other references, a named declaration, or nothing (void).
Named references are resolved by name only, so recursive types are fine.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from enum import Enum
from typing import Iterator

from ..errors import TypeReferenceSyntaxError


class PrimitiveType(Enum):
    """Primitive kinds of the IR."""

    BOOLEAN = "boolean"
    INTEGER = "integer"
    LONG = "long"
    DOUBLE = "double"
    STRING = "string"
    DATETIME = "datetime"
    UUID = "uuid"


class TypeKind(Enum):
    """Kind of type reference."""

    PRIMITIVE = "primitive"
    NAMED = "named"
    LIST = "list"  # list<T>
    SET = "set"  # set<T>
    MAP = "map"  # map<K, V>
    OPTIONAL = "optional"  # optional<T>
    VOID = "void"


CONTAINER_KINDS = frozenset({TypeKind.LIST, TypeKind.SET, TypeKind.MAP, TypeKind.OPTIONAL})

_CONTAINER_ARITY = {
    TypeKind.LIST: 1,
    TypeKind.SET: 1,
    TypeKind.MAP: 2,
    TypeKind.OPTIONAL: 1,
}


@dataclass(frozen=True)
class TypeReference:
    """A reference to a type."""

    kind: TypeKind
    primitive: PrimitiveType | None = None  # For PRIMITIVE
    name: str = ""  # For NAMED
    type_args: tuple[TypeReference, ...] = ()  # For containers, map is (key, value)

    @staticmethod
    def of_primitive(primitive: PrimitiveType) -> TypeReference:
        return TypeReference(TypeKind.PRIMITIVE, primitive=primitive)

    @staticmethod
    def named(name: str) -> TypeReference:
        return TypeReference(TypeKind.NAMED, name=name)

    @staticmethod
    def list_of(item: TypeReference) -> TypeReference:
        return TypeReference(TypeKind.LIST, type_args=(item,))

    @staticmethod
    def set_of(item: TypeReference) -> TypeReference:
        return TypeReference(TypeKind.SET, type_args=(item,))

    @staticmethod
    def map_of(key: TypeReference, value: TypeReference) -> TypeReference:
        return TypeReference(TypeKind.MAP, type_args=(key, value))

    @staticmethod
    def optional(inner: TypeReference) -> TypeReference:
        return TypeReference(TypeKind.OPTIONAL, type_args=(inner,))

    @staticmethod
    def void() -> TypeReference:
        return TypeReference(TypeKind.VOID)

    @property
    def is_container(self) -> bool:
        return self.kind in CONTAINER_KINDS

    @property
    def item_type(self) -> TypeReference:
        """Element of a list/set, wrapped type of an optional, value of a map."""
        if not self.is_container:
            raise TypeError(f"{self} is not a container type")
        return self.type_args[-1]

    def named_references(self) -> Iterator[str]:
        """Yield every declaration name this reference mentions, depth first."""
        if self.kind is TypeKind.NAMED:
            yield self.name
        for arg in self.type_args:
            yield from arg.named_references()

    def __str__(self) -> str:
        if self.kind is TypeKind.PRIMITIVE:
            return self.primitive.value
        if self.kind is TypeKind.NAMED:
            return self.name
        if self.kind is TypeKind.VOID:
            return "void"
        return f"{self.kind.value}<{', '.join(str(arg) for arg in self.type_args)}>"


_TOKEN_PATTERN = re.compile(r"\s*(?:([A-Za-z_][A-Za-z0-9_.\-]*)|([<>,]))")
_PRIMITIVES_BY_NAME = {p.value: p for p in PrimitiveType}
_CONTAINERS_BY_NAME = {k.value: k for k in CONTAINER_KINDS}


def _tokenize(text: str) -> list[str]:
    tokens = []
    pos = 0
    stripped = text.rstrip()
    while pos < len(stripped):
        match = _TOKEN_PATTERN.match(stripped, pos)
        if match is None:
            raise TypeReferenceSyntaxError(f"Unexpected character {stripped[pos]!r} in type reference {text!r}")
        tokens.append(match.group(1) or match.group(2))
        pos = match.end()
    return tokens


def parse_type_reference(text: str) -> TypeReference:
    """Parse the textual form produced by str(TypeReference).

    Examples:
        "string" -> primitive string
        "list<Post>" -> list of named Post
        "map<string, optional<long>>" -> map of string to optional long
    """
    tokens = _tokenize(text)
    if not tokens:
        raise TypeReferenceSyntaxError("Empty type reference")
    reference, pos = _parse_tokens(tokens, 0, text)
    if pos != len(tokens):
        raise TypeReferenceSyntaxError(f"Trailing input {' '.join(tokens[pos:])!r} in type reference {text!r}")
    return reference


def _parse_tokens(tokens: list[str], pos: int, text: str) -> tuple[TypeReference, int]:
    if pos >= len(tokens):
        raise TypeReferenceSyntaxError(f"Unexpected end of type reference {text!r}")
    word = tokens[pos]
    if word in "<>,":
        raise TypeReferenceSyntaxError(f"Expected a type name, got {word!r} in {text!r}")
    pos += 1

    kind = _CONTAINERS_BY_NAME.get(word)
    if kind is None or pos >= len(tokens) or tokens[pos] != "<":
        if word in _PRIMITIVES_BY_NAME:
            return TypeReference.of_primitive(_PRIMITIVES_BY_NAME[word]), pos
        if word == "void":
            return TypeReference.void(), pos
        return TypeReference.named(word), pos

    args = []
    pos += 1  # "<"
    while True:
        arg, pos = _parse_tokens(tokens, pos, text)
        args.append(arg)
        if pos >= len(tokens):
            raise TypeReferenceSyntaxError(f"Unclosed '<' in type reference {text!r}")
        if tokens[pos] == ">":
            pos += 1
            break
        if tokens[pos] != ",":
            raise TypeReferenceSyntaxError(f"Expected ',' or '>' in type reference {text!r}")
        pos += 1

    if len(args) != _CONTAINER_ARITY[kind]:
        raise TypeReferenceSyntaxError(f"{kind.value} takes {_CONTAINER_ARITY[kind]} type argument(s) in {text!r}")
    return TypeReference(kind, type_args=tuple(args)), pos
