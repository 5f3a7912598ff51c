import pytest

from openapi_ir.diagnostics import SKIPPED_METHOD, SKIPPED_PATCH, Diagnostics, Severity
from openapi_ir.errors import (
    DuplicateOperationIdError,
    InlineBodyUnsupportedError,
    MissingOperationIdError,
    MissingRequestBodyError,
    MissingSuccessResponseError,
    UnsupportedMediaTypeError,
    UnsupportedParameterLocationError,
    UnsupportedParameterShapeError,
)
from openapi_ir.importer.service_converter import ServiceConverter, add_endpoint
from openapi_ir.ir.declarations import HttpEndpoint, HttpMethod, PathParameter
from openapi_ir.ir.types import PrimitiveType, TypeReference


def json_body(name, status_description=None):
    body = {"content": {"application/json": {"schema": {"$ref": f"#/components/schemas/{name}"}}}}
    if status_description:
        body["description"] = status_description
    return body


ID_PARAMETER = {"name": "id", "in": "path", "required": True, "schema": {"type": "integer", "format": "int64"}}


@pytest.fixture
def converter():
    return ServiceConverter()


class TestConvertOperation:
    """Test conversion of single operations"""

    def test_get_post(self, converter):
        operation = {
            "operationId": "getPost",
            "parameters": [ID_PARAMETER],
            "responses": {"200": json_body("Post", "OK")},
        }
        endpoint = converter.convert_operation("/posts/{id}", HttpMethod.GET, operation)
        assert endpoint == HttpEndpoint(
            operation_id="getPost",
            method=HttpMethod.GET,
            path="/posts/{id}",
            parameters=(PathParameter("id", PrimitiveType.LONG),),
            response=TypeReference.named("Post"),
        )

    def test_post_with_created_response(self, converter):
        operation = {
            "operationId": "createPost",
            "summary": "Create a post",
            "requestBody": json_body("CreatePostRequest"),
            "responses": {201: json_body("Post")},
        }
        endpoint = converter.convert_operation("/posts", HttpMethod.POST, operation)
        assert endpoint.request == TypeReference.named("CreatePostRequest")
        assert endpoint.response == TypeReference.named("Post")
        assert endpoint.docs == "Create a post"

    def test_description_wins_over_summary(self, converter):
        operation = {"operationId": "deletePost", "summary": "short", "description": "long"}
        endpoint = converter.convert_operation("/posts", HttpMethod.DELETE, operation)
        assert endpoint.docs == "long"
        assert endpoint.request is None
        assert endpoint.response is None

    def test_delete_ignores_bodies(self, converter):
        operation = {"operationId": "deletePost", "requestBody": {"content": {"text/plain": {}}}, "responses": {}}
        endpoint = converter.convert_operation("/posts", HttpMethod.DELETE, operation)
        assert endpoint.request is None
        assert endpoint.response is None

    def test_missing_operation_id(self, converter):
        with pytest.raises(MissingOperationIdError) as exc_info:
            converter.convert_operation("/posts", HttpMethod.GET, {"responses": {"200": json_body("PostList")}})
        assert exc_info.value.location == "paths./posts.get"

    def test_query_parameter(self, converter):
        operation = {
            "operationId": "searchPosts",
            "parameters": [{"name": "q", "in": "query", "schema": {"type": "string"}}],
            "responses": {"200": json_body("PostList")},
        }
        with pytest.raises(UnsupportedParameterLocationError) as exc_info:
            converter.convert_operation("/posts/search", HttpMethod.GET, operation)
        assert exc_info.value.parameter_location == "query"
        assert "Converting non path parameters is unsupported" in str(exc_info.value)

    @pytest.mark.parametrize(
        "parameter",
        [
            {"name": "id", "in": "path"},
            {"name": "id", "in": "path", "schema": {"$ref": "#/components/schemas/Id"}},
            {"name": "id", "in": "path", "schema": {"format": "int64"}},
            {"name": "id", "in": "path", "schema": {"type": "array", "items": {"type": "string"}}},
            {"name": "id", "in": "path", "schema": {"type": "object"}},
            {"$ref": "#/components/parameters/Id"},
        ],
    )
    def test_unsupported_parameter_shapes(self, converter, parameter):
        operation = {"operationId": "getPost", "parameters": [parameter], "responses": {"200": json_body("Post")}}
        with pytest.raises(UnsupportedParameterShapeError):
            converter.convert_operation("/posts/{id}", HttpMethod.GET, operation)

    def test_operation_parameter_overrides_path_item_parameter(self, converter):
        operation = {
            "operationId": "getPost",
            "parameters": [{"name": "id", "in": "path", "schema": {"type": "string", "format": "uuid"}}],
            "responses": {"200": json_body("Post")},
        }
        endpoint = converter.convert_operation("/posts/{id}", HttpMethod.GET, operation, [ID_PARAMETER])
        assert endpoint.parameters == (PathParameter("id", PrimitiveType.UUID),)

    def test_inline_response_body(self, converter):
        operation = {
            "operationId": "getPost",
            "responses": {"200": {"content": {"application/json": {"schema": {"type": "object"}}}}},
        }
        with pytest.raises(InlineBodyUnsupportedError) as exc_info:
            converter.convert_operation("/posts/{id}", HttpMethod.GET, operation)
        assert exc_info.value.body == "response"

    def test_inline_request_body(self, converter):
        operation = {
            "operationId": "createPost",
            "requestBody": {"content": {"application/json": {"schema": {"type": "string"}}}},
            "responses": {"200": json_body("Post")},
        }
        with pytest.raises(InlineBodyUnsupportedError) as exc_info:
            converter.convert_operation("/posts", HttpMethod.POST, operation)
        assert exc_info.value.body == "request"

    def test_missing_success_response(self, converter):
        operation = {"operationId": "getPost", "responses": {"404": json_body("NotFound")}}
        with pytest.raises(MissingSuccessResponseError) as exc_info:
            converter.convert_operation("/posts/{id}", HttpMethod.GET, operation)
        assert "Expected operation to contain 200 or 201 response. operationId=getPost" in str(exc_info.value)

    def test_missing_request_body(self, converter):
        operation = {"operationId": "updatePost", "responses": {"200": json_body("Post")}}
        with pytest.raises(MissingRequestBodyError):
            converter.convert_operation("/posts/{id}", HttpMethod.PUT, operation)

    def test_non_json_body(self, converter):
        operation = {
            "operationId": "getPost",
            "responses": {"200": {"content": {"text/plain": {"schema": {"type": "string"}}}}},
        }
        with pytest.raises(UnsupportedMediaTypeError):
            converter.convert_operation("/posts/{id}", HttpMethod.GET, operation)

    def test_json_variants_must_agree(self, converter):
        content = {
            "application/json": {"schema": {"$ref": "#/components/schemas/Post"}},
            "application/vnd.api+json": {"schema": {"$ref": "#/components/schemas/Post"}},
        }
        operation = {"operationId": "getPost", "responses": {"200": {"content": content}}}
        endpoint = converter.convert_operation("/posts/{id}", HttpMethod.GET, operation)
        assert endpoint.response == TypeReference.named("Post")

        content["application/vnd.api+json"] = {"schema": {"$ref": "#/components/schemas/PostDocument"}}
        with pytest.raises(UnsupportedMediaTypeError):
            converter.convert_operation("/posts/{id}", HttpMethod.GET, operation)

    def test_response_reference(self, converter):
        operation = {"operationId": "getPost", "responses": {"200": {"$ref": "#/components/schemas/Post"}}}
        endpoint = converter.convert_operation("/posts/{id}", HttpMethod.GET, operation)
        assert endpoint.response == TypeReference.named("Post")


class TestConvertPaths:
    """Test conversion of a whole paths map"""

    def test_methods_and_skips(self, converter):
        paths = {
            "/posts/{id}": {
                "parameters": [ID_PARAMETER],
                "get": {"operationId": "getPost", "responses": {"200": json_body("Post")}},
                "delete": {"operationId": "deletePost", "responses": {"204": {"description": "Deleted"}}},
                "patch": {"operationId": "patchPost", "responses": {"200": json_body("Post")}},
                "head": {"operationId": "headPost", "responses": {"200": {"description": "OK"}}},
            }
        }
        conversion = converter.convert(paths)
        assert list(conversion.service.endpoints) == ["getPost", "deletePost"]
        assert conversion.service.name == "Service"
        assert conversion.service.endpoints["deletePost"].get_parameter("id").value_type is PrimitiveType.LONG

        patch, head = conversion.diagnostics
        assert (patch.code, patch.severity, patch.location) == (SKIPPED_PATCH, Severity.WARNING, "paths./posts/{id}.patch")
        assert (head.code, head.severity) == (SKIPPED_METHOD, Severity.INFO)

    def test_duplicate_operation_id(self, converter):
        paths = {
            "/posts": {"get": {"operationId": "listPosts", "responses": {"200": json_body("PostList")}}},
            "/drafts": {"get": {"operationId": "listPosts", "responses": {"200": json_body("PostList")}}},
        }
        with pytest.raises(DuplicateOperationIdError) as exc_info:
            converter.convert(paths)
        assert exc_info.value.location == "paths./drafts.get"

    def test_empty_path_item(self, converter):
        diagnostics = Diagnostics()
        assert list(converter.iter_operations({"/empty": None}, diagnostics)) == []
        assert len(diagnostics) == 0

    def test_iter_operations_carries_path_item_parameters(self, converter):
        paths = {"/posts/{id}": {"parameters": [ID_PARAMETER], "delete": {"operationId": "deletePost"}}}
        operations = list(converter.iter_operations(paths, Diagnostics()))
        assert operations == [("/posts/{id}", HttpMethod.DELETE, {"operationId": "deletePost"}, [ID_PARAMETER])]

    def test_add_endpoint(self):
        endpoints = {}
        first = HttpEndpoint("clear", HttpMethod.DELETE, "/posts")
        add_endpoint(endpoints, first, "paths./posts.delete")
        with pytest.raises(DuplicateOperationIdError) as exc_info:
            add_endpoint(endpoints, HttpEndpoint("clear", HttpMethod.DELETE, "/drafts"), "paths./drafts.delete")
        assert exc_info.value.location == "paths./drafts.delete"
        assert endpoints == {"clear": first}
