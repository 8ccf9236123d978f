"""Table document and ID type aliases."""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING

from convexgen.core.logging import get_logger
from convexgen.generate.naming import to_singular
from convexgen.generate.output import INDEX_FILE, prepare_output_dir, write_file
from convexgen.parse.models import TableDescriptor

if TYPE_CHECKING:
    from convexgen.config.models import ConvexGenConfig

log = get_logger(__name__)

TYPES_FILE = "convex"

_RULE = "// " + "=" * 76

_HEADER = """\
/**
 * Auto-generated Convex Types
 *
 * DO NOT EDIT MANUALLY - Run 'convex-gen generate' to regenerate
 *
 * This file exports TypeScript types derived from your Convex schema.
 * The Convex schema is the source of truth - these types are auto-generated
 * to prevent manual duplication and drift.
 *
 * Usage:
 * - Use Doc<"tableName"> for document types
 * - Use Id<"tableName"> for ID types
 * - Use derived types for specific fields
 */

"""

_INDEX = """\
/**
 * Generated Types Index
 * Auto-generated barrel export file
 *
 * DO NOT EDIT MANUALLY
 * Run 'convex-gen generate' to regenerate this file.
 */

export * from './convex';
"""


def _section(title: str) -> str:
    return f"{_RULE}\n// {title}\n{_RULE}\n\n"


def _union(values: list[str]) -> str:
    return " | ".join(f'"{v}"' for v in values) if values else "never"


def render_types(tables: list[TableDescriptor], data_model_import: str) -> str:
    tables = sorted(tables, key=lambda t: t.name)

    out = _HEADER
    out += f"import type {{ Doc, Id }} from '{data_model_import}';\n\n"
    out += "// Re-export Doc and Id types so they can be imported from this file\n"
    out += "export type { Doc, Id };\n\n"

    out += _section("TABLE DOCUMENT TYPES")
    for table in tables:
        out += f"/** {table.name} table */\n"
        out += f'export type {table.type_name} = Doc<"{table.name}">;\n\n'

    out += _section("TABLE ID TYPES")
    for table in tables:
        out += f'export type {table.type_name}Id = Id<"{table.name}">;\n'
    out += "\n"

    out += _section("UTILITY TYPES")
    out += "/** Union of all table names */\n"
    out += f"export type TableName = {_union([t.name for t in tables])};\n\n"
    out += "/** Union of all entity types (singular form) */\n"
    out += f"export type EntityType = {_union([to_singular(t.name) for t in tables])};\n\n"

    out += "/**\n"
    out += f" * Generated {len(tables)} table types from Convex schema\n"
    out += " *\n"
    out += " * Tables:\n"
    for table in tables:
        out += f" * - {table.name}\n"
    out += " */\n"
    return out


class TypesGenerator:
    """Writes `convex.ts` and its barrel."""

    def __init__(self, output_dir: Path, *, data_model_import: str) -> None:
        self.output_dir = output_dir
        self.data_model_import = data_model_import

    @classmethod
    def from_config(cls, config: ConvexGenConfig) -> TypesGenerator:
        return cls(config.types_output_dir, data_model_import=config.data_model_import)

    def generate(self, tables: list[TableDescriptor]) -> list[Path]:
        """Write the types file and barrel. Returns the written paths.

        Raises:
            GenerateError: On any file-system failure.
        """
        prepare_output_dir(self.output_dir)

        types_path = self.output_dir / f"{TYPES_FILE}.ts"
        write_file(types_path, render_types(tables, self.data_model_import))
        index_path = self.output_dir / INDEX_FILE
        write_file(index_path, _INDEX)

        log.info("types_generated", output_dir=str(self.output_dir), tables=len(tables))
        return [types_path, index_path]
