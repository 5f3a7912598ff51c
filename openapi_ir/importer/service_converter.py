"""
Conversion of an OpenAPI paths map into an IR HTTP service.

Only GET, POST, PUT and DELETE are converted. Bodies must be references to
declared schemas and parameters must be scalar path parameters.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Iterator

from ..config import ConverterConfig
from ..diagnostics import SKIPPED_METHOD, SKIPPED_PATCH, Diagnostic, Diagnostics
from ..errors import (
    DuplicateOperationIdError,
    InlineBodyUnsupportedError,
    MissingOperationIdError,
    MissingRequestBodyError,
    MissingSuccessResponseError,
    UnsupportedMediaTypeError,
    UnsupportedParameterLocationError,
    UnsupportedParameterShapeError,
)
from ..ir.declarations import HttpEndpoint, HttpMethod, HttpService, PathParameter
from ..ir.types import TypeReference
from ..mapping import SCALAR_SCHEMA_TYPES, schema_to_primitive
from ..naming import is_reference, type_name_from_ref

# Path item key -> method, in conversion order
OPERATION_METHODS = {
    "get": HttpMethod.GET,
    "post": HttpMethod.POST,
    "put": HttpMethod.PUT,
    "delete": HttpMethod.DELETE,
}

_REQUEST_METHODS = frozenset({HttpMethod.POST, HttpMethod.PUT})
_RESPONSE_METHODS = frozenset({HttpMethod.GET, HttpMethod.POST, HttpMethod.PUT})

_UNSUPPORTED_METHODS = ("head", "options", "trace")

SUCCESS_STATUSES = ("200", "201")


@dataclass(frozen=True)
class ServiceConversion:
    """Result of converting a whole paths map."""

    service: HttpService
    diagnostics: tuple[Diagnostic, ...] = ()


def operation_location(path: str, method: HttpMethod | str) -> str:
    key = method.value if isinstance(method, HttpMethod) else method
    return f"paths.{path}.{key.lower()}"


def add_endpoint(endpoints: dict[str, HttpEndpoint], endpoint: HttpEndpoint, location: str) -> None:
    """Add an endpoint under its operation id, which must not be taken yet."""
    if endpoint.operation_id in endpoints:
        raise DuplicateOperationIdError(endpoint.operation_id, location)
    endpoints[endpoint.operation_id] = endpoint


class ServiceConverter:
    """Converts path items into HTTP endpoints."""

    def __init__(self, config: ConverterConfig | None = None):
        self.config = config or ConverterConfig()

    def convert(self, paths: dict[str, Any]) -> ServiceConversion:
        """
        Convert every supported operation of a paths map.

        Hard failures propagate; PATCH and other unsupported methods are
        skipped with a diagnostic.

        Args:
            paths: The OpenAPI paths object

        Returns:
            ServiceConversion with endpoints keyed by operation id
        """
        diagnostics = Diagnostics()
        endpoints: dict[str, HttpEndpoint] = {}
        for path, method, operation, shared_parameters in self.iter_operations(paths, diagnostics):
            endpoint = self.convert_operation(path, method, operation, shared_parameters)
            add_endpoint(endpoints, endpoint, operation_location(path, method))
        return ServiceConversion(HttpService(self.config.service_name, endpoints), diagnostics.freeze())

    def iter_operations(
        self, paths: dict[str, Any] | None, diagnostics: Diagnostics
    ) -> Iterator[tuple[str, HttpMethod, dict[str, Any], list[dict[str, Any]] | None]]:
        """Yield (path, method, operation, path item parameters) for every convertible operation."""
        for path, path_item in (paths or {}).items():
            shared_parameters = (path_item or {}).get("parameters")
            for method, operation in self.operations(path, path_item, diagnostics):
                yield path, method, operation, shared_parameters

    def operations(self, path: str, path_item: dict[str, Any] | None, diagnostics: Diagnostics) -> list[tuple[HttpMethod, dict[str, Any]]]:
        """Return the convertible operations of a path item, recording skipped ones."""
        if not path_item:
            return []

        if path_item.get("patch") is not None:
            diagnostics.warning(SKIPPED_PATCH, "Skipping patch endpoint", operation_location(path, "patch"))
        for key in _UNSUPPORTED_METHODS:
            if path_item.get(key) is not None:
                diagnostics.info(SKIPPED_METHOD, f"Skipping {key} endpoint", operation_location(path, key))

        return [(method, path_item[key]) for key, method in OPERATION_METHODS.items() if path_item.get(key) is not None]

    def convert_operation(
        self,
        path: str,
        method: HttpMethod,
        operation: dict[str, Any],
        shared_parameters: list[dict[str, Any]] | None = None,
    ) -> HttpEndpoint:
        """
        Convert one operation object.

        Args:
            path: Path template, e.g. "/posts/{id}"
            method: HTTP method of the operation
            operation: The operation object
            shared_parameters: Parameters declared on the path item

        Returns:
            The endpoint
        """
        operation_id = operation.get("operationId")
        if not operation_id:
            raise MissingOperationIdError(path, method.value)

        response = None
        if method in _RESPONSE_METHODS:
            response = self._convert_response(operation_id, operation)

        request = None
        if method in _REQUEST_METHODS:
            request = self._convert_request(operation_id, operation)

        return HttpEndpoint(
            operation_id=operation_id,
            method=method,
            path=path,
            parameters=self._convert_parameters(operation_id, shared_parameters, operation.get("parameters")),
            request=request,
            response=response,
            docs=operation.get("description") or operation.get("summary"),
        )

    def _convert_response(self, operation_id: str, operation: dict[str, Any]) -> TypeReference:
        responses = operation.get("responses") or {}
        for status in SUCCESS_STATUSES:
            # YAML loaders turn unquoted status codes into ints
            response = responses.get(status, responses.get(int(status)))
            if response is not None:
                return self._resolve_body(operation_id, response, "response")
        raise MissingSuccessResponseError(operation_id)

    def _convert_request(self, operation_id: str, operation: dict[str, Any]) -> TypeReference:
        request_body = operation.get("requestBody")
        if request_body is None:
            raise MissingRequestBodyError(operation_id)
        return self._resolve_body(operation_id, request_body, "request")

    def _resolve_body(self, operation_id: str, body: dict[str, Any], kind: str) -> TypeReference:
        """Resolve a request body or response object to the type it references."""
        if is_reference(body):
            return TypeReference.named(type_name_from_ref(body["$ref"], operation_id))

        names = []
        for media_type, media in (body.get("content") or {}).items():
            if "json" not in media_type.lower():
                continue
            schema = (media or {}).get("schema")
            if schema is None:
                continue
            if not is_reference(schema):
                raise InlineBodyUnsupportedError(operation_id, kind)
            names.append(type_name_from_ref(schema["$ref"], operation_id))

        if not names:
            raise UnsupportedMediaTypeError(operation_id, kind, "no JSON media type with a schema")
        if len(set(names)) > 1:
            raise UnsupportedMediaTypeError(operation_id, kind, f"JSON media types reference different schemas {sorted(set(names))}")
        return TypeReference.named(names[0])

    def _convert_parameters(
        self,
        operation_id: str,
        shared_parameters: list[dict[str, Any]] | None,
        parameters: list[dict[str, Any]] | None,
    ) -> tuple[PathParameter, ...]:
        # Operation parameters override path item parameters with the same name and location
        merged: dict[tuple[str, str], dict[str, Any]] = {}
        for parameter in [*(shared_parameters or []), *(parameters or [])]:
            if is_reference(parameter):
                raise UnsupportedParameterShapeError(parameter["$ref"], "reference parameters are unsupported", operation_id)
            merged[(parameter.get("name", ""), parameter.get("in", ""))] = parameter
        return tuple(self._convert_parameter(operation_id, parameter) for parameter in merged.values())

    def _convert_parameter(self, operation_id: str, parameter: dict[str, Any]) -> PathParameter:
        name = parameter.get("name", "")
        location = parameter.get("in")
        if location != "path":
            raise UnsupportedParameterLocationError(name, str(location), operation_id)

        schema = parameter.get("schema")
        if schema is None:
            raise UnsupportedParameterShapeError(name, "parameter has no schema", operation_id)
        if is_reference(schema):
            raise UnsupportedParameterShapeError(name, "reference schemas are unsupported", operation_id)

        schema_type = schema.get("type")
        if schema_type is None:
            raise UnsupportedParameterShapeError(name, "parameter schema has no type", operation_id)
        if schema_type == "array":
            raise UnsupportedParameterShapeError(name, "list parameters are unsupported", operation_id)
        if not isinstance(schema_type, str) or schema_type not in SCALAR_SCHEMA_TYPES:
            raise UnsupportedParameterShapeError(name, f"unsupported parameter type {schema_type!r}", operation_id)

        return PathParameter(name, schema_to_primitive(schema), parameter.get("description"))
