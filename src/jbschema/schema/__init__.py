"""Schema documents from compiled node trees."""

from jbschema.schema.core import (
    ComponentSchemaCompiler,
    Schema,
    SchemaCompiler,
    SchemaDocument,
    coerce_example,
    item_schema,
)
from jbschema.schema.operation import build_operation, build_response, validate_schema

__all__ = [
    "ComponentSchemaCompiler",
    "Schema",
    "SchemaCompiler",
    "SchemaDocument",
    "build_operation",
    "build_response",
    "coerce_example",
    "item_schema",
    "validate_schema",
]
