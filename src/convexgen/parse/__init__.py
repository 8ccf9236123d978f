"""Parsing of Convex TypeScript sources into descriptors."""

from convexgen.parse.arguments import (
    ArgsAnalysis,
    analyze_args_block,
    classify_argument,
    resolve_args_value,
)
from convexgen.parse.functions import parse_function_file
from convexgen.parse.models import (
    ArgumentClass,
    ArgumentDescriptor,
    DeclarationStyle,
    FunctionDescriptor,
    FunctionKind,
    SchemaFile,
    SourceFile,
    TableDescriptor,
)
from convexgen.parse.schema import parse_schema, parse_schema_file
from convexgen.parse.source import read_source, strip_comments
from convexgen.parse.treesitter import TypeScriptParser
from convexgen.parse.validators import ValidatorSymbolTable, build_validator_cache

__all__ = [
    # Models
    "ArgumentClass",
    "ArgumentDescriptor",
    "DeclarationStyle",
    "FunctionDescriptor",
    "FunctionKind",
    "SchemaFile",
    "SourceFile",
    "TableDescriptor",
    # Parsing
    "ArgsAnalysis",
    "TypeScriptParser",
    "ValidatorSymbolTable",
    "analyze_args_block",
    "build_validator_cache",
    "classify_argument",
    "parse_function_file",
    "parse_schema",
    "parse_schema_file",
    "read_source",
    "resolve_args_value",
    "strip_comments",
]
