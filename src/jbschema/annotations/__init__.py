"""``@openapi`` annotation comments: parsing, rendering and the metadata they carry."""

from jbschema.annotations.data import (
    FORMAT_ALIASES,
    MISSING_ANNOTATION,
    MISSING_DESCRIPTION,
    AnnotationData,
)
from jbschema.annotations.parser import (
    Annotation,
    ConditionalMarker,
    FieldDeclaration,
    OperationDeclaration,
    ParameterDeclaration,
    parse_annotation,
)
from jbschema.annotations.render import render_field, render_operation, render_properties

__all__ = [
    "FORMAT_ALIASES",
    "MISSING_ANNOTATION",
    "MISSING_DESCRIPTION",
    "Annotation",
    "AnnotationData",
    "ConditionalMarker",
    "FieldDeclaration",
    "OperationDeclaration",
    "ParameterDeclaration",
    "parse_annotation",
    "render_field",
    "render_operation",
    "render_properties",
]
