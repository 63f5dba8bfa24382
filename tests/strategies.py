"""Shared hypothesis strategies for jbschema property-based testing.

Provides reusable strategies at two levels:

- **Annotations**: well-formed and arbitrary ``@openapi`` comment lines
- **Templates**: small Jbuilder sources made of annotated property calls

These are building blocks -- individual test modules compose them into
property-specific strategies.
"""

from __future__ import annotations

from hypothesis import strategies as st

# ---------------------------------------------------------------------------
# Annotation strategies
# ---------------------------------------------------------------------------

_RUBY_KEYWORDS = frozenset(
    {
        "alias", "and", "begin", "break", "case", "class", "def", "defined", "do", "else",
        "elsif", "end", "ensure", "false", "for", "if", "in", "module", "next", "nil", "not",
        "or", "redo", "rescue", "retry", "return", "self", "super", "then", "true", "undef",
        "unless", "until", "when", "while", "yield",
    }
)

identifier = st.from_regex(r"[a-z][a-z0-9_]{0,12}", fullmatch=True).filter(
    lambda name: name not in _RUBY_KEYWORDS
)

schema_type = st.sampled_from(
    ["string", "integer", "number", "boolean", "object", "array", "date", "date-time"]
)

_bare_value = st.from_regex(r"[A-Za-z0-9_.\-]{1,12}", fullmatch=True)
_quoted_value = st.from_regex(r"[A-Za-z0-9 ]{0,20}", fullmatch=True).map(lambda s: f'"{s}"')

required_flag = st.sampled_from([None, True, False])
conditional_flag = st.sampled_from([None, True, False])


@st.composite
def field_annotation(draw: st.DrawFn) -> tuple[str, dict[str, object]]:
    """A well-formed field annotation line and the values it declares."""
    name = draw(identifier)
    declared_type = draw(schema_type)
    required = draw(required_flag)
    conditional = draw(conditional_flag)
    description = draw(st.one_of(st.none(), _quoted_value))

    parts = [f"# @openapi {name}:{declared_type}"]
    if required is not None:
        parts.append(f"required:{str(required).lower()}")
    if conditional is not None:
        parts.append(f"conditional:{str(conditional).lower()}")
    if description is not None:
        parts.append(f"description:{description}")

    expected = {
        "name": name,
        "type": declared_type,
        "required": required,
        "conditional": conditional,
        "description": description.strip('"') if description is not None else None,
    }
    return " ".join(parts), expected


# Arbitrary comment text, sentinel included or not
arbitrary_comment = st.one_of(
    st.text(alphabet=st.characters(blacklist_categories=("Cs",)), max_size=120),
    st.tuples(
        st.sampled_from(["@openapi", "@openapi_operation", "@openapi_query", "@openapi_x"]),
        st.text(alphabet=st.characters(blacklist_categories=("Cs",)), max_size=80),
    ).map(lambda pair: f"# {pair[0]} {pair[1]}"),
    st.lists(st.tuples(identifier, st.one_of(_bare_value, _quoted_value)), max_size=4).map(
        lambda pairs: "# @openapi " + " ".join(f"{k}:{v}" for k, v in pairs)
    ),
)

_word = st.from_regex(r"[A-Za-z0-9_.\-]{1,10}", fullmatch=True)
_phrase = st.from_regex(r"[A-Za-z0-9_.\-]{1,8}( [A-Za-z0-9_.\-]{1,8}){0,2}", fullmatch=True)


@st.composite
def property_schema(draw: st.DrawFn) -> tuple[str, dict[str, object], bool]:
    """A property name, an OpenAPI property schema and its required flag."""
    schema: dict[str, object] = {"type": draw(schema_type)}
    if schema["type"] == "array":
        schema["items"] = {"type": draw(schema_type)}
    description = draw(st.one_of(st.none(), _phrase))
    if description is not None:
        schema["description"] = description
    enum = draw(st.lists(_phrase, max_size=4, unique=True))
    if enum:
        schema["enum"] = enum
    schema_format = draw(st.one_of(st.none(), _word))
    if schema_format is not None:
        schema["format"] = schema_format
    example = draw(st.one_of(st.none(), _phrase))
    if example is not None:
        schema["example"] = example
    return draw(identifier), schema, draw(st.booleans())


@st.composite
def operation_object(draw: st.DrawFn) -> dict[str, object]:
    """An OpenAPI operation object with some of the renderable keys."""
    operation: dict[str, object] = {}
    for key, strategy in (
        ("summary", _phrase),
        ("description", _phrase),
        ("operationId", _word),
    ):
        value = draw(st.one_of(st.none(), strategy))
        if value is not None:
            operation[key] = value
    tags = draw(st.lists(_phrase, max_size=3, unique=True))
    if tags:
        operation["tags"] = tags
    return operation


# ---------------------------------------------------------------------------
# Template strategies
# ---------------------------------------------------------------------------

property_line = st.tuples(identifier, st.one_of(st.none(), field_annotation()))


@st.composite
def flat_template(draw: st.DrawFn) -> tuple[str, list[tuple[str, dict[str, object] | None]]]:
    """Jbuilder source of distinct property calls, some annotated.

    Returns the source and, per call, its key and the annotation values
    (None for unannotated calls).
    """
    names = draw(st.lists(identifier, min_size=1, max_size=6, unique=True))
    lines: list[str] = []
    declared: list[tuple[str, dict[str, object] | None]] = []
    for name in names:
        annotation = draw(st.one_of(st.none(), field_annotation()))
        if annotation is not None:
            line, expected = annotation
            lines.append(line)
            declared.append((name, expected))
        else:
            declared.append((name, None))
        lines.append(f"json.{name} @record.{name}")
    return "\n".join(lines) + "\n", declared
