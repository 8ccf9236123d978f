"""Schema table extraction.

A main schema file declares every table in one `defineSchema({...})` call:

    export default defineSchema({ users, posts: postsTable, ...issueTables })

Per-domain files declare tables individually:

    export const issues = defineTable({ ... }).index("by_project", ["projectId"])

When the main object is mostly spreads of per-domain maps (more than
SCHEMA_SPREAD_THRESHOLD, and more spreads than direct entries), it is
abandoned and the per-domain files are used instead.
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator
from typing import Any

from convexgen.config.constants import SCHEMA_SPREAD_THRESHOLD
from convexgen.core.errors import ParseError
from convexgen.core.logging import get_logger
from convexgen.generate.naming import is_valid_identifier, to_pascal_case
from convexgen.parse.models import SchemaFile, TableDescriptor
from convexgen.parse.source import read_source
from convexgen.parse.treesitter import (
    TypeScriptParser,
    callee_name,
    first_argument,
    flatten_chain,
    named_children,
    node_text,
    string_value,
    walk,
)

log = get_logger(__name__)

MAIN_DOMAIN = "main"
DEFINE_SCHEMA = "defineSchema"
DEFINE_TABLE = "defineTable"


def _table(name: str, domain: str) -> TableDescriptor:
    return TableDescriptor(name=name, type_name=to_pascal_case(name), domain=domain)


def _find_define_schema(root: Any) -> Any | None:
    for node in walk(root):
        if node.type == "call_expression" and callee_name(node) == DEFINE_SCHEMA:
            return node
    return None


def _entry_name(entry: Any) -> str | None:
    if entry.type == "shorthand_property_identifier":
        return node_text(entry)
    if entry.type == "pair":
        key = entry.child_by_field_name("key")
        if key is None:
            return None
        if key.type == "property_identifier":
            return node_text(key)
        if key.type == "string":
            return string_value(key)
    return None


def _main_tables(define_schema: Any) -> list[TableDescriptor]:
    schema_obj = first_argument(define_schema)
    if schema_obj is None or schema_obj.type != "object":
        return []

    names: list[str] = []
    spreads = 0
    direct = 0
    for entry in named_children(schema_obj):
        if entry.type == "spread_element":
            spreads += 1
            continue
        name = _entry_name(entry)
        if name is None or not is_valid_identifier(name):
            continue
        direct += 1
        if name not in names:
            names.append(name)

    if spreads > SCHEMA_SPREAD_THRESHOLD and spreads > direct:
        log.debug("schema_spreads_dominate", spreads=spreads, direct=direct)
        return []
    return [_table(name, MAIN_DOMAIN) for name in names]


def _is_define_table(value: Any) -> bool:
    chain = flatten_chain(value) if value is not None else None
    return chain is not None and chain.root_called and chain.root == DEFINE_TABLE


def _defined_tables(root: Any, domain: str) -> Iterator[TableDescriptor]:
    """`const NAME = defineTable(...)` and `NAME: defineTable(...)`, in source order."""
    for node in walk(root):
        if node.type == "variable_declarator":
            name_node = node.child_by_field_name("name")
            value = node.child_by_field_name("value")
            if name_node is not None and name_node.type == "identifier" and _is_define_table(value):
                yield _table(node_text(name_node), domain)
        elif node.type == "pair":
            name = _entry_name(node)
            if name is not None and _is_define_table(node.child_by_field_name("value")):
                yield _table(name, domain)


def parse_schema_file(file: SchemaFile, parser: TypeScriptParser) -> list[TableDescriptor]:
    """Extract tables from one schema file.

    Raises:
        ParseError: If the file cannot be read.
    """
    source = read_source(file.path)
    result = parser.parse(file.path, source)

    define_schema = _find_define_schema(result.root_node)
    if define_schema is not None:
        tables = _main_tables(define_schema)
    else:
        tables = list(_defined_tables(result.root_node, file.domain))

    log.debug("schema_file_parsed", path=str(file.path), domain=file.domain, tables=len(tables))
    return tables


def _dedupe(tables: Iterable[TableDescriptor]) -> list[TableDescriptor]:
    seen: set[str] = set()
    unique: list[TableDescriptor] = []
    for table in tables:
        if table.name not in seen:
            seen.add(table.name)
            unique.append(table)
    return unique


def parse_schema(
    files: list[SchemaFile],
    parser: TypeScriptParser,
    skipped: list[str] | None = None,
) -> list[TableDescriptor]:
    """Resolve the table set for a run.

    The first main-domain file that yields tables wins outright; otherwise
    every file contributes. Tables are de-duplicated by name, first wins.
    Unreadable files are logged and appended to `skipped` when given.
    """

    def _parse(file: SchemaFile) -> list[TableDescriptor]:
        try:
            return parse_schema_file(file, parser)
        except ParseError as e:
            log.warning("schema_file_skipped", path=str(file.path), error=e.message)
            if skipped is not None and str(file.path) not in skipped:
                skipped.append(str(file.path))
            return []

    for file in files:
        if file.domain != MAIN_DOMAIN:
            continue
        tables = _parse(file)
        if tables:
            return _dedupe(tables)

    collected: list[TableDescriptor] = []
    for file in files:
        collected.extend(_parse(file))
    return _dedupe(collected)
