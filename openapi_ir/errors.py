"""
Exceptions raised while translating between OpenAPI schemas and the IR.

Every translation failure derives from ConversionError so batch drivers can
catch one type per entity and keep converting the rest of a document.
"""

from __future__ import annotations

from typing import Any


class ConversionError(Exception):
    """Raised when an entity cannot be translated.

    Attributes:
        location: Where the offending input lives (e.g. "#/components/schemas/Blog"
            or "paths./posts/{id}.get"), empty when unknown
    """

    def __init__(self, message: str, location: str = ""):
        self.location = location
        if location:
            message = f"{message} (at {location})"
        super().__init__(message)


class UnsupportedShapeError(ConversionError):
    """Raised for a primitive or container kind outside the mapping tables."""

    def __init__(self, kind: Any, location: str = ""):
        self.kind = kind
        super().__init__(f"Unsupported type kind: {kind!r}", location)


class UnrecognizedSchemaShapeError(ConversionError):
    """Raised when a nested schema matches no convertible shape."""

    def __init__(self, schema: Any, path: list[str] | tuple[str, ...], reason: str = ""):
        self.schema = schema
        self.path = tuple(path)
        message = f"Unrecognized schema shape at {'.'.join(self.path)}: {schema!r}"
        if reason:
            message = f"{message} ({reason})"
        super().__init__(message)


class UnsupportedReferenceError(ConversionError):
    """Raised for a $ref that does not point into #/components/schemas."""

    def __init__(self, ref: str, location: str = ""):
        self.ref = ref
        super().__init__(f"Unsupported reference: {ref!r}", location)


class UnsupportedDocumentError(ConversionError):
    """Raised when a document is not an OpenAPI v3 document."""


class MissingOperationIdError(ConversionError):
    """Raised when an operation has no operationId."""

    def __init__(self, path: str, method: str):
        self.path = path
        self.method = method
        super().__init__(f"Operation {method.upper()} {path} has no operationId", f"paths.{path}.{method.lower()}")


class DuplicateOperationIdError(ConversionError):
    """Raised when two operations share an operationId."""

    def __init__(self, operation_id: str, location: str = ""):
        self.operation_id = operation_id
        super().__init__(f"Duplicate operationId: {operation_id}", location)


class MissingSuccessResponseError(ConversionError):
    """Raised when an operation declares neither a 200 nor a 201 response."""

    def __init__(self, operation_id: str):
        self.operation_id = operation_id
        super().__init__(f"Expected operation to contain 200 or 201 response. operationId={operation_id}")


class MissingRequestBodyError(ConversionError):
    """Raised when a POST or PUT operation has no requestBody."""

    def __init__(self, operation_id: str):
        self.operation_id = operation_id
        super().__init__(f"Expected operation to contain request body. operationId={operation_id}")


class UnsupportedParameterLocationError(ConversionError):
    """Raised for query, header and cookie parameters."""

    def __init__(self, parameter_name: str, parameter_location: str, operation_id: str = ""):
        self.parameter_name = parameter_name
        self.parameter_location = parameter_location
        self.operation_id = operation_id
        super().__init__(
            f"Converting non path parameters is unsupported. Parameter={parameter_name} in={parameter_location} operationId={operation_id}"
        )


class UnsupportedParameterShapeError(ConversionError):
    """Raised for parameters that are references, lists or untyped."""

    def __init__(self, parameter_name: str, reason: str, operation_id: str = ""):
        self.parameter_name = parameter_name
        self.reason = reason
        self.operation_id = operation_id
        super().__init__(f"Unsupported parameter shape: {reason}. Parameter={parameter_name} operationId={operation_id}")


class InlineBodyUnsupportedError(ConversionError):
    """Raised when a request or response body schema is not a $ref."""

    def __init__(self, operation_id: str, body: str):
        self.operation_id = operation_id
        self.body = body
        super().__init__(f"Converting inlined {body} types is unsupported. operationId={operation_id}")


class UnsupportedMediaTypeError(ConversionError):
    """Raised when a body does not resolve to exactly one JSON media entry."""

    def __init__(self, operation_id: str, body: str, reason: str):
        self.operation_id = operation_id
        self.body = body
        super().__init__(f"Failed to convert {body}: {reason}. operationId={operation_id}")


class DuplicateTypeNameError(ConversionError):
    """Raised when two declarations claim the same registry key."""

    def __init__(self, name: str):
        self.name = name
        super().__init__(f"Type name collision: {name} is already declared")


class UnresolvedReferenceError(ConversionError):
    """Raised when named references do not resolve inside one registry.

    Attributes:
        unresolved: (owner, referenced name) pairs
    """

    def __init__(self, unresolved: list[tuple[str, str]]):
        self.unresolved = list(unresolved)
        details = ", ".join(f"{owner} -> {name}" for owner, name in self.unresolved)
        super().__init__(f"Unresolved type references: {details}")


class TypeReferenceSyntaxError(ValueError):
    """Raised when a textual type reference (e.g. "list<Foo>") cannot be parsed."""


class IrFormatError(ValueError):
    """Raised when a serialized IR document is malformed."""
