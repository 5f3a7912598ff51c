import pytest

from openapi_ir.errors import TypeReferenceSyntaxError
from openapi_ir.ir.types import PrimitiveType, TypeKind, TypeReference, parse_type_reference

STRING = TypeReference.of_primitive(PrimitiveType.STRING)
LONG = TypeReference.of_primitive(PrimitiveType.LONG)


class TestTypeReference:
    """Test the textual form of type references"""

    def test_str(self):
        assert str(STRING) == "string"
        assert str(TypeReference.named("Post")) == "Post"
        assert str(TypeReference.void()) == "void"
        assert str(TypeReference.list_of(TypeReference.named("Post"))) == "list<Post>"
        assert str(TypeReference.map_of(STRING, TypeReference.optional(LONG))) == "map<string, optional<long>>"

    @pytest.mark.parametrize(
        "text,expected",
        [
            ("datetime", TypeReference.of_primitive(PrimitiveType.DATETIME)),
            ("Post", TypeReference.named("Post")),
            ("void", TypeReference.void()),
            ("set<uuid>", TypeReference.set_of(TypeReference.of_primitive(PrimitiveType.UUID))),
            (" list< list<Post> > ", TypeReference.list_of(TypeReference.list_of(TypeReference.named("Post")))),
            ("map<string,Post>", TypeReference.map_of(STRING, TypeReference.named("Post"))),
            ("list", TypeReference.named("list")),
        ],
    )
    def test_parse(self, text, expected):
        assert parse_type_reference(text) == expected

    @pytest.mark.parametrize("text", ["", "list<", "list<Post", "map<string>", "list<Post>>", "list<,>", "Post Author", "list<Po$t>"])
    def test_parse_errors(self, text):
        with pytest.raises(TypeReferenceSyntaxError):
            parse_type_reference(text)

    def test_named_references_walk_containers(self):
        reference = TypeReference.map_of(STRING, TypeReference.list_of(TypeReference.optional(TypeReference.named("Node"))))
        assert list(reference.named_references()) == ["Node"]
        assert reference.kind is TypeKind.MAP
        assert reference.item_type == TypeReference.list_of(TypeReference.optional(TypeReference.named("Node")))

    def test_item_type_of_non_container(self):
        with pytest.raises(TypeError):
            STRING.item_type
