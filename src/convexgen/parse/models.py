"""Descriptors produced by scanning and parsing Convex source.

Everything here is plain data: the scanner produces SourceFile/SchemaFile,
the parser produces FunctionDescriptor/TableDescriptor, and the generators
consume them without touching the file system again.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path


class FunctionKind(Enum):
    """Kind of a client-callable Convex function."""

    QUERY = "query"
    MUTATION = "mutation"
    ACTION = "action"


class DeclarationStyle(Enum):
    """How functions are declared in the backend source."""

    STANDARD_CALL = "standard"  # export const f = query({ args, handler })
    FLUENT_CHAIN = "fluent"  # export const f = authedQuery.input({...}).handler(...).public()


class ArgumentClass(Enum):
    """Argument classification, in precedence order (first match wins)."""

    OPTIONAL_ID_ARRAY = "optional_id_array"
    ID_ARRAY = "id_array"
    OPTIONAL_ID = "optional_id"
    ID = "id"
    OPTIONAL_PRIMITIVE = "optional_primitive"
    PRIMITIVE = "primitive"
    PRIMITIVE_ARRAY = "primitive_array"
    UNKNOWN = "unknown"


@dataclass(frozen=True, slots=True)
class SourceFile:
    """A candidate function file found by the scanner."""

    path: Path
    namespace: str  # posix, "/"-separated, no extension
    base_name: str


@dataclass(frozen=True, slots=True)
class SchemaFile:
    """A candidate schema file with its domain label."""

    path: Path
    domain: str  # "main", "root", subdirectory or de-suffixed file name


@dataclass(frozen=True, slots=True)
class ArgumentDescriptor:
    """One entry of a function's argument object."""

    name: str
    type: str  # TypeScript type: string, Id<"t">, Id<"t">[], string[], unknown
    optional: bool
    classification: ArgumentClass
    is_reference_id: bool = False
    is_reference_id_array: bool = False
    referenced_table: str | None = None

    @property
    def is_id_like(self) -> bool:
        return self.is_reference_id or self.is_reference_id_array


@dataclass(slots=True)
class FunctionDescriptor:
    """A client-callable Convex function."""

    name: str
    kind: FunctionKind
    namespace: str
    source_file: Path
    arguments: list[ArgumentDescriptor] = field(default_factory=list)
    is_paginated: bool = False
    uses_opaque_args: bool = False

    @property
    def top_level_namespace(self) -> str:
        return self.namespace.split("/", 1)[0]

    @property
    def sub_namespace(self) -> str:
        """Namespace below the top level ("" for single-segment namespaces)."""
        parts = self.namespace.split("/", 1)
        return parts[1] if len(parts) > 1 else ""

    @property
    def required_arguments(self) -> list[ArgumentDescriptor]:
        return [a for a in self.arguments if not a.optional]

    @property
    def optional_arguments(self) -> list[ArgumentDescriptor]:
        return [a for a in self.arguments if a.optional]

    @property
    def required_reference_ids(self) -> list[ArgumentDescriptor]:
        """Required ID and ID-array arguments; the query is skipped until all are set."""
        return [a for a in self.arguments if a.is_id_like and not a.optional]


@dataclass(frozen=True, slots=True)
class TableDescriptor:
    """A table declared in the schema."""

    name: str
    type_name: str
    domain: str
