"""Posts API -- OpenAPI paths from a views directory.

Compiles the Jbuilder views under ``views/`` into response schemas, wraps
them into OpenAPI operations and lists the keys that still need an
``@openapi`` comment.

Run:
    python app.py
"""

import json
from pathlib import Path

from jbschema import (
    FileSystemLoader,
    ParameterDeclaration,
    SchemaCompiler,
    TemplateCompiler,
    build_operation,
    parse_annotation,
    validate_schema,
)

VIEWS = Path(__file__).parent / "views"

ROUTES = {
    "/api/posts": "api/posts/index.json.jbuilder",
    "/api/posts/{id}": "api/posts/show.json.jbuilder",
}

loader = FileSystemLoader(VIEWS)
compiler = TemplateCompiler(loader)
schema_compiler = SchemaCompiler()


def request_parameters(template: str) -> list[ParameterDeclaration]:
    """Parameter declarations written in the template's own comments."""
    source, _ = loader.get_source(template)
    parsed = (parse_annotation(line) for line in source.splitlines())
    return [p for p in parsed if isinstance(p, ParameterDeclaration)]


paths = {}
documents = {}
coverage = {}
for route, template in ROUTES.items():
    result = compiler.compile(template)
    document = schema_compiler.compile(result.root)
    documents[route] = document
    coverage[route] = [m.path for m in result.missing_annotations()]
    paths[route] = {
        "get": build_operation(document, result.operation, request_parameters(template))
    }

problems = {route: validate_schema(doc.schema) for route, doc in documents.items()}
output = json.dumps({"paths": paths}, indent=2)


def main() -> None:
    print(output)
    for route, missing in coverage.items():
        for path in missing:
            print(f"missing annotation: {route} {path}")


if __name__ == "__main__":
    main()
