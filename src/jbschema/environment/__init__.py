"""Environment for jbschema: loaders, configuration and exceptions."""

from jbschema.environment.config import DEFAULT_CONFIG, DIRECTIVE_METHODS, CompilerConfig
from jbschema.environment.exceptions import (
    ConfigurationError,
    ErrorCode,
    SchemaGenError,
    TemplateNotFoundError,
)
from jbschema.environment.loaders import (
    ChoiceLoader,
    DictLoader,
    FileSystemLoader,
    Loader,
)

__all__ = [
    "DEFAULT_CONFIG",
    "DIRECTIVE_METHODS",
    "ChoiceLoader",
    "CompilerConfig",
    "ConfigurationError",
    "DictLoader",
    "ErrorCode",
    "FileSystemLoader",
    "Loader",
    "SchemaGenError",
    "TemplateNotFoundError",
]
