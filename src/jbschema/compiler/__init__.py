"""Template compiler: Jbuilder source to node tree."""

from jbschema.compiler.context import CompileSession, Frame, SourceFile
from jbschema.compiler.core import CompilationResult, TemplateCompiler
from jbschema.compiler.partials import (
    component_name,
    partial_property_name,
    resolve_partial_name,
)

__all__ = [
    "CompilationResult",
    "CompileSession",
    "Frame",
    "SourceFile",
    "TemplateCompiler",
    "component_name",
    "partial_property_name",
    "resolve_partial_name",
]
