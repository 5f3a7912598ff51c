"""
Plain-dict form of the intermediate representation.

The dict form is what gets written as YAML or JSON. Type references use
their textual form ("list<Post>", "map<string, optional<long>>").

    name: Blog
    types:
      Post:
        docs: A blog post
        fields:
          id: {type: long, required: true}
          tags: {type: list<string>, required: false}
        extends: [Entity]
      Status:
        enum: [draft, published]
    services:
      Service:
        endpoints:
          getPost:
            method: GET
            path: /posts/{id}
            parameters: {id: long}
            response: Post
"""

from __future__ import annotations

from typing import Any

from ..errors import IrFormatError, TypeReferenceSyntaxError
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
from .types import TypeKind, TypeReference, parse_type_reference


def _with_docs(data: dict[str, Any], docs: str | None) -> dict[str, Any]:
    if docs:
        data["docs"] = docs
    return data


def declaration_to_dict(declaration: TypeDeclaration) -> dict[str, Any]:
    shape = declaration.shape
    data: dict[str, Any] = {}
    if isinstance(shape, ObjectShape):
        data["fields"] = {
            f.key: _with_docs({"type": str(f.value_type), "required": f.required}, f.docs) for f in shape.fields
        }
        if shape.extends:
            data["extends"] = list(shape.extends)
    elif isinstance(shape, AliasShape):
        data["alias"] = str(shape.alias_of)
    elif isinstance(shape, EnumShape):
        data["enum"] = list(shape.values)
    elif isinstance(shape, UnionShape):
        data["discriminant"] = shape.discriminant
        data["union"] = {m.discriminant_value: _with_docs({"type": str(m.value_type)}, m.docs) for m in shape.members}
    return _with_docs(data, declaration.docs)


def _parse(text: Any, where: str) -> TypeReference:
    if not isinstance(text, str):
        raise IrFormatError(f"Expected a type reference string at {where}, got {text!r}")
    try:
        return parse_type_reference(text)
    except TypeReferenceSyntaxError as e:
        raise IrFormatError(f"{e} (at {where})") from e


def declaration_from_dict(name: str, data: Any) -> TypeDeclaration:
    """Build a declaration; a bare string is shorthand for an alias."""
    if isinstance(data, str):
        return TypeDeclaration(name, AliasShape(_parse(data, name)))
    if not isinstance(data, dict):
        raise IrFormatError(f"Expected a mapping for type {name}, got {data!r}")

    docs = data.get("docs")
    if "fields" in data:
        fields = []
        for key, value in (data["fields"] or {}).items():
            where = f"{name}.{key}"
            if isinstance(value, str):
                fields.append(ObjectField(key, _parse(value, where)))
            elif not isinstance(value, dict):
                raise IrFormatError(f"Expected a type reference or mapping at {where}, got {value!r}")
            else:
                fields.append(ObjectField(key, _parse(value.get("type"), where), value.get("required", True), value.get("docs")))
        return TypeDeclaration(name, ObjectShape(tuple(fields), tuple(data.get("extends") or ())), docs)
    if "alias" in data:
        return TypeDeclaration(name, AliasShape(_parse(data["alias"], name)), docs)
    if "enum" in data:
        return TypeDeclaration(name, EnumShape(tuple(str(v) for v in data["enum"])), docs)
    if "union" in data:
        if "discriminant" not in data:
            raise IrFormatError(f"Union {name} has no discriminant")
        members = []
        for value, member in (data["union"] or {}).items():
            where = f"{name}.{value}"
            if isinstance(member, str):
                members.append(UnionMember(str(value), _parse(member, where)))
            elif member is None:
                members.append(UnionMember(str(value), TypeReference.void()))
            elif not isinstance(member, dict):
                raise IrFormatError(f"Expected a type reference or mapping at {where}, got {member!r}")
            else:
                members.append(UnionMember(str(value), _parse(member.get("type", "void"), where), member.get("docs")))
        return TypeDeclaration(name, UnionShape(data["discriminant"], tuple(members)), docs)
    raise IrFormatError(f"Type {name} has no fields, alias, enum or union")


def endpoint_to_dict(endpoint: HttpEndpoint) -> dict[str, Any]:
    data: dict[str, Any] = {"method": endpoint.method.value, "path": endpoint.path}
    if endpoint.parameters:
        data["parameters"] = {
            p.name: _with_docs({"type": p.value_type.value}, p.docs) if p.docs else p.value_type.value for p in endpoint.parameters
        }
    if endpoint.request is not None:
        data["request"] = str(endpoint.request)
    if endpoint.response is not None:
        data["response"] = str(endpoint.response)
    data["errors"] = list(endpoint.errors)
    return _with_docs(data, endpoint.docs)


def endpoint_from_dict(operation_id: str, data: dict[str, Any]) -> HttpEndpoint:
    try:
        method = HttpMethod(str(data.get("method", "")).upper())
    except ValueError as e:
        raise IrFormatError(f"Unsupported method {data.get('method')!r} for endpoint {operation_id}") from e

    parameters = []
    for name, value in (data.get("parameters") or {}).items():
        where = f"{operation_id}.{name}"
        docs = None
        if isinstance(value, dict):
            docs = value.get("docs")
            value = value.get("type")
        reference = _parse(value, where)
        if reference.kind is not TypeKind.PRIMITIVE:
            raise IrFormatError(f"Path parameter {where} must be a primitive, got {reference}")
        parameters.append(PathParameter(name, reference.primitive, docs))

    request = _parse(data["request"], f"{operation_id}.request") if data.get("request") else None
    response = _parse(data["response"], f"{operation_id}.response") if data.get("response") else None
    return HttpEndpoint(
        operation_id=operation_id,
        method=method,
        path=data.get("path", ""),
        parameters=tuple(parameters),
        request=request,
        response=response,
        docs=data.get("docs"),
        errors=tuple(data.get("errors") or ()),
    )


def service_to_dict(service: HttpService) -> dict[str, Any]:
    return {"endpoints": {operation_id: endpoint_to_dict(e) for operation_id, e in service.endpoints.items()}}


def ir_to_dict(ir: IntermediateRepresentation) -> dict[str, Any]:
    """Return the YAML/JSON-ready form of an IR."""
    return {
        "name": ir.name,
        "types": {declaration.name: declaration_to_dict(declaration) for declaration in ir.types},
        "services": {service.name: service_to_dict(service) for service in ir.services},
    }


def ir_from_dict(data: dict[str, Any]) -> IntermediateRepresentation:
    """Build an IR from its dict form."""
    if not isinstance(data, dict):
        raise IrFormatError(f"Expected a mapping at the top level, got {type(data).__name__}")
    types = tuple(declaration_from_dict(name, value) for name, value in (data.get("types") or {}).items())
    services = []
    for service_name, service_data in (data.get("services") or {}).items():
        endpoints = {
            operation_id: endpoint_from_dict(operation_id, endpoint)
            for operation_id, endpoint in ((service_data or {}).get("endpoints") or {}).items()
        }
        services.append(HttpService(service_name, endpoints))
    return IntermediateRepresentation(name=data.get("name") or "", types=types, services=tuple(services))


__all__ = [
    "declaration_to_dict",
    "declaration_from_dict",
    "endpoint_to_dict",
    "endpoint_from_dict",
    "service_to_dict",
    "ir_to_dict",
    "ir_from_dict",
]
