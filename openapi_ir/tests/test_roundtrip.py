from pathlib import Path

import yaml

from openapi_ir.exporter import IrToSchemaConverter
from openapi_ir.importer import OpenApiImporter
from openapi_ir.ir.declarations import (
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
)
from openapi_ir.ir.types import PrimitiveType, parse_type_reference

T = parse_type_reference

TEST_DATA = Path(__file__).parent / "test_data"


def reimport(ir):
    document = IrToSchemaConverter().convert(ir)
    result = OpenApiImporter().import_document(document)
    assert result.diagnostics == ()
    return result.to_ir(ir.name)


class TestRoundTrip:
    """Exporting then importing gives back the same IR"""

    def test_types_and_endpoints(self):
        types = (
            TypeDeclaration("Entity", ObjectShape((ObjectField("id", T("long")),))),
            TypeDeclaration(
                "Post",
                ObjectShape(
                    fields=(
                        ObjectField("title", T("string"), docs="Headline"),
                        ObjectField("author", T("Author"), required=False),
                        ObjectField("tags", T("set<string>")),
                        ObjectField("scores", T("map<string, list<double>>"), required=False),
                        ObjectField("status", T("Status")),
                    ),
                    extends=("Entity",),
                ),
                docs="A blog post",
            ),
            TypeDeclaration("Author", ObjectShape((ObjectField("id", T("uuid")),))),
            TypeDeclaration("Status", EnumShape(("draft", "published"))),
            TypeDeclaration("PostList", AliasShape(T("list<Post>"))),
            TypeDeclaration("Nothing", ObjectShape()),
        )
        post_id = PathParameter("id", PrimitiveType.LONG, "Post id")
        endpoints = {
            "getPost": HttpEndpoint("getPost", HttpMethod.GET, "/posts/{id}", (post_id,), response=T("Post"), docs="Get a post"),
            "deletePost": HttpEndpoint("deletePost", HttpMethod.DELETE, "/posts/{id}", (post_id,)),
            "createPost": HttpEndpoint("createPost", HttpMethod.POST, "/posts", request=T("Post"), response=T("Post")),
            "listPosts": HttpEndpoint("listPosts", HttpMethod.GET, "/posts", response=T("PostList")),
        }
        ir = IntermediateRepresentation("Blog", types, (HttpService("Service", endpoints),))

        assert reimport(ir) == ir

    def test_blog_fixture_is_stable(self):
        with open(TEST_DATA / "blog.openapi.yaml") as f:
            document = yaml.safe_load(f)
        ir = OpenApiImporter().import_document(document).to_ir("Blog API")

        again = reimport(ir)
        assert again.types == ir.types
        assert again.services[0].endpoints == ir.services[0].endpoints
