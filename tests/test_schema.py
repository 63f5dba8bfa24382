"""Tests for the schema compiler and operation builders."""

from __future__ import annotations

import pytest

from jbschema import (
    AnnotationData,
    ArrayNode,
    ComponentSchemaCompiler,
    CompilerConfig,
    DictLoader,
    ObjectNode,
    PartialNode,
    PropertyNode,
    SchemaCompiler,
    TemplateCompiler,
    build_operation,
    build_response,
    parse_annotation,
    validate_schema,
)
from jbschema.annotations import MISSING_DESCRIPTION
from jbschema.schema import coerce_example


class TestScenarios:
    """End-to-end template → schema scenarios."""

    def test_id_and_tags(self, compile_schema) -> None:
        """Scalar plus annotated iteration block."""
        schema = compile_schema(
            "# @openapi id:integer\n"
            "json.id @post.id\n"
            "# @openapi tags:array\n"
            "json.tags @post.tags do |tag|\n"
            "  # @openapi name:string\n"
            "  json.name tag.name\n"
            "end\n"
        )
        assert schema == {
            "type": "object",
            "properties": {
                "id": {"type": "integer"},
                "tags": {
                    "type": "array",
                    "items": {
                        "type": "object",
                        "properties": {"name": {"type": "string"}},
                        "required": ["name"],
                    },
                },
            },
            "required": ["id", "tags"],
        }

    def test_address_partial_inside_shipping(self, compiler) -> None:
        """Partial keys appear directly in shipping, with no wrapper."""
        result = compiler.compile("api/orders/show.json.jbuilder")
        schema = SchemaCompiler().compile(result.root).schema
        shipping = schema["properties"]["shipping"]
        assert set(shipping["properties"]) == {"street", "city"}
        assert shipping["description"] == "Shipping address"

    def test_date_time(self, compile_schema) -> None:
        """type:date-time is a string with date-time format."""
        schema = compile_schema("# @openapi created_at:date-time\njson.created_at @x\n")
        assert schema["properties"]["created_at"] == {"type": "string", "format": "date-time"}

    def test_missing_annotation_fallback(self, compile_schema) -> None:
        """Unannotated keys are strings with the placeholder description."""
        schema = compile_schema("json.id @user.id\n")
        assert schema["properties"]["id"] == {"type": "string", "description": MISSING_DESCRIPTION}

    def test_conditional_not_required(self, compile_schema) -> None:
        """required:true inside a branch is left out of required."""
        schema = compile_schema(
            "# @openapi id:integer\njson.id 1\n"
            "if @admin\n  # @openapi role:string required:true\n  json.role 'admin'\nend\n"
        )
        assert schema["required"] == ["id"]
        assert "role" in schema["properties"]

    @pytest.mark.parametrize(
        ("source", "expected_type"),
        [
            ("json.array! @posts do |post|\n  json.id post.id\nend\n", "array"),
            ("json.id 1\n", "object"),
            ("json.id 1\njson.array! @posts, :id\n", "object"),
        ],
    )
    def test_root_type(self, compile_schema, source: str, expected_type: str) -> None:
        """Only a lone array! makes the document an array."""
        assert compile_schema(source)["type"] == expected_type


class TestObjects:
    """Object schemas."""

    def test_required_omitted_when_empty(self, compile_schema) -> None:
        """No required key when nothing is required."""
        schema = compile_schema("# @openapi bio:string required:false\njson.bio @bio\n")
        assert "required" not in schema

    def test_duplicate_keys_last_wins(self, compile_schema) -> None:
        """if/else emitting the same key yields one property."""
        schema = compile_schema(
            "if a\n  # @openapi v:integer\n  json.v 1\nelse\n  # @openapi v:string\n  json.v 'x'\nend\n"
        )
        assert schema["properties"] == {"v": {"type": "string"}}
        assert "required" not in schema

    def test_missing_object_description_not_emitted(self) -> None:
        """Objects and arrays never carry the placeholder description."""
        node = ObjectNode(1, 0, "meta", (PropertyNode(2, 0, "a"),))
        schema = SchemaCompiler().visit(node)
        assert "description" not in schema

    def test_empty_object_is_degenerate(self) -> None:
        """A root object without properties is flagged."""
        root = ObjectNode(1, 0, None, (), AnnotationData(type="object"))
        document = SchemaCompiler().compile(root)
        assert document.degenerate
        assert document.schema == {"type": "object"}


class TestArrays:
    """Array schemas."""

    def test_declared_items_without_nodes(self) -> None:
        """Without item nodes the declared items type is used."""
        node = ArrayNode(1, 0, "ids", (), AnnotationData(type="array", items={"type": "integer"}))
        assert SchemaCompiler().visit(node) == {"type": "array", "items": {"type": "integer"}}

    def test_bare_object_items(self) -> None:
        """Without nodes or declaration, items are a bare object."""
        document = SchemaCompiler().compile(ArrayNode(1, 0, None, (), is_root_array=True))
        assert document.schema == {"type": "array", "items": {"type": "object"}}
        assert document.is_root_array
        assert document.degenerate

    def test_several_items_one_of(self) -> None:
        """Several item nodes become oneOf."""
        node = ArrayNode(
            1, 0, "mixed", (PropertyNode(1, 0, "a"), ObjectNode(1, 0, None, ()))
        )
        schema = SchemaCompiler().visit(node)
        assert len(schema["items"]["oneOf"]) == 2

    def test_property_with_array_type(self) -> None:
        """A scalar call declared as array gets an items schema."""
        node = PropertyNode(1, 0, "tags", AnnotationData(type="array", items={"type": "date"}))
        assert SchemaCompiler().visit(node) == {
            "type": "array",
            "items": {"type": "string", "format": "date"},
        }


class TestProperties:
    """Property schemas."""

    def test_enum_and_description(self) -> None:
        """enum and description are emitted."""
        declaration = parse_annotation('# @openapi status:string enum:[a,b] description:"State"')
        schema = SchemaCompiler().visit(PropertyNode(1, 0, "status", declaration.annotation))
        assert schema == {"type": "string", "description": "State", "enum": ["a", "b"]}

    def test_enum_values_follow_type(self) -> None:
        """Enum values are converted to the declared JSON type."""
        declaration = parse_annotation("# @openapi priority:integer enum:[1,2,3]")
        schema = SchemaCompiler().visit(PropertyNode(1, 0, "priority", declaration.annotation))
        assert schema == {"type": "integer", "enum": [1, 2, 3]}

    @pytest.mark.parametrize(
        ("text", "schema_type", "expected"),
        [
            ("42", "integer", 42),
            ("4.5", "number", 4.5),
            ("true", "boolean", True),
            ("abc", "integer", "abc"),
            ("42", "string", "42"),
        ],
    )
    def test_example_coercion(self, text: str, schema_type: str, expected) -> None:
        """Examples follow the declared type when they parse."""
        assert coerce_example(text, schema_type) == expected


class TestComponentMode:
    """PartialNode rendering in the two compiler variants."""

    def _partial(self) -> PartialNode:
        return PartialNode(
            1, 0, "address", "shared/_address.json.jbuilder",
            (PropertyNode(1, 0, "street"), PropertyNode(2, 0, "city")),
        )

    def test_inline_expansion(self) -> None:
        """SchemaCompiler expands the partial as an object."""
        schema = SchemaCompiler().visit(self._partial())
        assert set(schema["properties"]) == {"street", "city"}

    def test_placeholder(self) -> None:
        """ComponentSchemaCompiler leaves a placeholder object."""
        assert ComponentSchemaCompiler().visit(self._partial()) == {"type": "object"}

    def test_component_mode_end_to_end(self, loader) -> None:
        """Compiled with inline_partials off, shipping holds a placeholder."""
        compiler = TemplateCompiler(loader, CompilerConfig(inline_partials=False))
        result = compiler.compile("api/orders/show.json.jbuilder")
        schema = ComponentSchemaCompiler().compile(result.root).schema
        assert schema["properties"]["shipping"]["properties"]["address"] == {"type": "object"}
        component = SchemaCompiler().compile(result.components["ApiSharedAddress"]).schema
        assert set(component["properties"]) == {"street", "city"}

    def test_partial_collection_index_is_not_degenerate(self) -> None:
        """An array of placeholder partial items still describes its items."""
        loader = DictLoader({
            "posts/index.json.jbuilder": "json.array! @posts, partial: 'posts/post', as: :post\n",
            "posts/_post.json.jbuilder": "# @openapi id:integer\njson.id post.id\n",
        })
        compiler = TemplateCompiler(loader, CompilerConfig(inline_partials=False))
        result = compiler.compile("posts/index.json.jbuilder")
        document = ComponentSchemaCompiler().compile(result.root)
        assert document.schema == {"type": "array", "items": {"type": "object"}}
        assert document.is_root_array
        assert not document.degenerate


class TestOperations:
    """Response/operation wrappers and validation."""

    def test_build_response_default_status(self) -> None:
        """Status defaults to 200."""
        document = SchemaCompiler().compile(ObjectNode(1, 0, None, (PropertyNode(1, 0, "id"),)))
        response = build_response(document)
        assert list(response) == ["200"]
        assert response["200"]["content"]["application/json"]["schema"] == document.schema

    def test_build_operation(self, compiler) -> None:
        """Operation metadata, parameters and the response are combined."""
        result = compiler.compile("api/users/show.json.jbuilder")
        document = SchemaCompiler().compile(result.root)
        parameters = [
            parse_annotation("# @openapi_param id:integer"),
            parse_annotation("# @openapi_body name:string required:false"),
        ]
        operation = build_operation(document, result.operation, parameters)
        assert operation["summary"] == "Show user"
        assert operation["tags"] == ["Users"]
        assert operation["parameters"][0]["in"] == "path"
        body = operation["requestBody"]["content"]["application/json"]["schema"]
        assert body["properties"] == {"name": {"type": "string"}}
        assert "required" not in body
        assert "200" in operation["responses"]

    def test_validate_compiled_schema(self, compiler) -> None:
        """Compiled schemas validate cleanly."""
        result = compiler.compile("api/users/index.json.jbuilder")
        assert validate_schema(SchemaCompiler().compile(result.root).schema) == []

    def test_validate_reports_problems(self) -> None:
        """Missing types and non-mapping schemas are reported with paths."""
        errors = validate_schema(
            {"type": "object", "properties": {"a": {}, "b": "x"}, "required": ["c"]}
        )
        assert "Schema at root.a is missing type" in errors
        assert "Schema at root.b must be a mapping" in errors
        assert any("'c'" in error for error in errors)
