"""jbschema: response schemas recovered from Jbuilder templates.

Reads Jbuilder (``*.json.jbuilder``) templates statically, never executing
them, and recovers the JSON shape they emit. ``# @openapi`` comments supply
types, descriptions, enums and formats that cannot be read off the calls.

Quickstart:
    >>> from jbschema import DictLoader, SchemaCompiler, TemplateCompiler
    >>> loader = DictLoader({"users/show.json.jbuilder": (
    ...     "# @openapi id:integer description:\\"User ID\\"\\n"
    ...     "json.id @user.id\\n"
    ... )})
    >>> result = TemplateCompiler(loader).compile("users/show.json.jbuilder")
    >>> SchemaCompiler().compile(result.root).schema
    {'type': 'object', 'properties': {'id': {'type': 'integer', 'description': 'User ID'}}, 'required': ['id']}

Architecture:
Template Source → tree-sitter Ruby → Call Classifier → Template Compiler → Node tree → Schema Compiler → dict

Pipeline stages:
1. **Parser**: tree-sitter builds a concrete syntax tree; comments are kept
2. **Classifier**: Each call is mapped to a templating primitive
3. **Template Compiler**: Primitives and annotations become an immutable node tree
4. **Schema Compiler**: The node tree becomes a plain nested mapping

Partials:
By default partials are spliced into the including template. With
``CompilerConfig(inline_partials=False)`` they stay as `PartialNode`
references and every compiled partial is also returned as a component.

"""

from jbschema.annotations import (
    AnnotationData,
    ConditionalMarker,
    FieldDeclaration,
    OperationDeclaration,
    ParameterDeclaration,
    parse_annotation,
    render_field,
    render_operation,
    render_properties,
)
from jbschema.classifier import CallArgument, CallShape, Primitive, classify
from jbschema.environment import (
    DEFAULT_CONFIG,
    ChoiceLoader,
    CompilerConfig,
    ConfigurationError,
    DictLoader,
    ErrorCode,
    FileSystemLoader,
    SchemaGenError,
    TemplateNotFoundError,
)
from jbschema.nodes import ArrayNode, Node, ObjectNode, PartialNode, PropertyNode
from jbschema.schema import (
    ComponentSchemaCompiler,
    SchemaCompiler,
    SchemaDocument,
    build_operation,
    build_response,
    validate_schema,
)

__version__ = "0.1.0"

__all__ = [
    "DEFAULT_CONFIG",
    "AnnotationData",
    "ArrayNode",
    "CallArgument",
    "CallShape",
    "ChoiceLoader",
    "CompilationResult",
    "CompilerConfig",
    "ComponentSchemaCompiler",
    "ConditionalMarker",
    "ConfigurationError",
    "DictLoader",
    "ErrorCode",
    "FieldDeclaration",
    "FileSystemLoader",
    "Node",
    "ObjectNode",
    "OperationDeclaration",
    "ParameterDeclaration",
    "PartialNode",
    "Primitive",
    "PropertyNode",
    "SchemaCompiler",
    "SchemaDocument",
    "SchemaGenError",
    "TemplateCompiler",
    "TemplateNotFoundError",
    "__version__",
    "build_operation",
    "build_response",
    "classify",
    "find_missing_annotations",
    "format_tree",
    "parse_annotation",
    "render_field",
    "render_operation",
    "render_properties",
    "validate_schema",
]


# Lazy-loaded symbols (avoids importing tree_sitter and its grammar on
# `from jbschema import parse_annotation`).
_LAZY_COMPILER = frozenset({"CompilationResult", "TemplateCompiler"})
_LAZY_ANALYSIS = frozenset({"find_missing_annotations", "format_tree"})


def __getattr__(name: str) -> object:
    """Module-level getattr for lazy imports."""
    if name in _LAZY_COMPILER:
        from jbschema.compiler import CompilationResult, TemplateCompiler

        # Populate globals so subsequent access is direct (no __getattr__)
        globals().update(CompilationResult=CompilationResult, TemplateCompiler=TemplateCompiler)
        return globals()[name]
    if name in _LAZY_ANALYSIS:
        from jbschema.analysis import find_missing_annotations, format_tree

        globals().update(find_missing_annotations=find_missing_annotations, format_tree=format_tree)
        return globals()[name]
    raise AttributeError(f"module 'jbschema' has no attribute {name!r}")
