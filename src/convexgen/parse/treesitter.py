"""Tree-sitter parsing for Convex TypeScript sources.

This module provides the TypeScript parser shared by every extractor and
a handful of small node helpers:
- Node text decoding and string literal unquoting
- Comment-free child iteration (comments are extras and can appear anywhere)
- Expression unwrapping (parentheses, `as`, `satisfies`, non-null `!`)
- Recognition of validator calls such as `v.id("projects")`
- Flattening of builder chains (`root.a(...).b(...).c()`)
- Top-level `export const` declarator iteration

Note: nothing here knows about Convex semantics beyond the `v.` validator
namespace; classification lives in arguments.py, functions.py and schema.py.
"""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import tree_sitter
import tree_sitter_typescript

# Wrappers that do not change the value of the wrapped expression
_TRANSPARENT_WRAPPERS = frozenset(
    {
        "parenthesized_expression",
        "as_expression",
        "satisfies_expression",
        "non_null_expression",
    }
)


@dataclass
class ParseResult:
    """Result of parsing a file."""

    tree: Any  # Tree-sitter Tree (not serializable)
    root_node: Any  # Tree-sitter Node
    error_count: int
    path: Path | None = None


@dataclass
class ChainCall:
    """One `.method(args)` link of a builder chain."""

    method: str
    arguments: list[Any]  # Argument nodes, comments removed


@dataclass
class Chain:
    """A flattened builder chain.

    For `adminQuery.input({...}).handler(fn).public()` the root is
    `adminQuery`, `root_called` is False and `calls` holds input, handler and
    public in source order. For `defineTable({...}).index(...)` the root is
    `defineTable`, `root_called` is True and `root_arguments` holds the object.
    """

    root: str
    root_called: bool = False
    root_arguments: list[Any] = field(default_factory=list)
    calls: list[ChainCall] = field(default_factory=list)


@dataclass
class TypeScriptParser:
    """
    Tree-sitter parser for TypeScript sources.

    Usage::

        parser = TypeScriptParser()

        # Parse a file
        result = parser.parse(Path("convex/issues/queries.ts"))

        # Parse a snippet (e.g. a cached validator definition)
        result = parser.parse_text('v.object({ id: v.id("issues") })')
    """

    _parser: Any = field(default=None, repr=False)
    _language: Any = field(default=None, repr=False)

    def __post_init__(self) -> None:
        """Initialize the parser."""
        self._language = tree_sitter.Language(tree_sitter_typescript.language_typescript())
        self._parser = tree_sitter.Parser()
        self._parser.language = self._language

    def parse(self, path: Path, content: bytes | None = None) -> ParseResult:
        """
        Parse a file with Tree-sitter.

        Args:
            path: Path to file (recorded on the result)
            content: File content as bytes. If None, reads from path.

        Returns:
            ParseResult with tree and error info.
        """
        if content is None:
            content = path.read_bytes()
        result = self._parse_bytes(content)
        result.path = path
        return result

    def parse_text(self, text: str) -> ParseResult:
        """Parse source held in memory."""
        return self._parse_bytes(text.encode("utf-8"))

    def _parse_bytes(self, content: bytes) -> ParseResult:
        tree = self._parser.parse(content)

        error_count = 0

        def count_errors(node: Any) -> None:
            nonlocal error_count
            if node.type == "ERROR" or node.is_missing:
                error_count += 1
            for child in node.children:
                count_errors(child)

        if tree.root_node.has_error:
            count_errors(tree.root_node)

        return ParseResult(tree=tree, root_node=tree.root_node, error_count=error_count)


def node_text(node: Any) -> str:
    """Decode a node's source text."""
    return node.text.decode("utf-8") if node is not None and node.text else ""


def string_value(node: Any) -> str | None:
    """Return the contents of a string literal node, or None for other nodes."""
    if node is None or node.type != "string":
        return None
    return "".join(
        node_text(c)
        for c in node.named_children
        if c.type in ("string_fragment", "escape_sequence")
    )


def named_children(node: Any) -> list[Any]:
    """Named children with comment nodes removed."""
    return [c for c in node.named_children if c.type != "comment"]


def unwrap(node: Any) -> Any:
    """Strip parentheses and type-only wrappers around an expression."""
    while node is not None and node.type in _TRANSPARENT_WRAPPERS:
        inner = named_children(node)
        if not inner:
            break
        node = inner[0]
    return node


def call_arguments(call: Any) -> list[Any]:
    """Argument expressions of a call_expression."""
    args = call.child_by_field_name("arguments")
    if args is None:
        return []
    return named_children(args)


def first_argument(call: Any) -> Any | None:
    args = call_arguments(call)
    return unwrap(args[0]) if args else None


def callee_name(call: Any) -> str | None:
    """Name of a plain identifier callee (`query(...)` -> "query")."""
    if call is None or call.type != "call_expression":
        return None
    fn = call.child_by_field_name("function")
    if fn is not None and fn.type == "identifier":
        return node_text(fn)
    return None


def validator_method(node: Any) -> str | None:
    """Method name of a `v.<method>(...)` call, else None."""
    node = unwrap(node)
    if node is None or node.type != "call_expression":
        return None
    fn = node.child_by_field_name("function")
    if fn is None or fn.type != "member_expression":
        return None
    obj = fn.child_by_field_name("object")
    prop = fn.child_by_field_name("property")
    if obj is None or prop is None or obj.type != "identifier" or node_text(obj) != "v":
        return None
    return node_text(prop)


def reference_name(node: Any) -> str | None:
    """Dotted name of an identifier or member access (`Issues.listValidator`)."""
    node = unwrap(node)
    if node is None:
        return None
    if node.type == "identifier":
        return node_text(node)
    if node.type == "member_expression":
        obj = reference_name(node.child_by_field_name("object"))
        prop = node.child_by_field_name("property")
        if obj is None or prop is None:
            return None
        return f"{obj}.{node_text(prop)}"
    return None


def flatten_chain(node: Any) -> Chain | None:
    """Flatten `root.a(...).b(...)` into its root identifier and ordered calls.

    Returns None when the expression does not bottom out in an identifier.
    Bare property accesses between calls are passed through.
    """
    calls: list[ChainCall] = []
    node = unwrap(node)
    while node is not None:
        if node.type == "call_expression":
            fn = unwrap(node.child_by_field_name("function"))
            if fn is None:
                return None
            if fn.type == "identifier":
                calls.reverse()
                return Chain(
                    root=node_text(fn),
                    root_called=True,
                    root_arguments=call_arguments(node),
                    calls=calls,
                )
            if fn.type != "member_expression":
                return None
            prop = fn.child_by_field_name("property")
            calls.append(ChainCall(method=node_text(prop), arguments=call_arguments(node)))
            node = unwrap(fn.child_by_field_name("object"))
        elif node.type == "member_expression":
            node = unwrap(node.child_by_field_name("object"))
        elif node.type == "identifier":
            calls.reverse()
            return Chain(root=node_text(node), calls=calls)
        else:
            return None
    return None


def exported_declarators(root: Any) -> Iterator[tuple[str, Any]]:
    """Yield `(name, value)` for each `export const NAME = value` at top level.

    Re-export lists (`export { a } from "./b"`) and default exports carry no
    declaration and are not yielded.
    """
    for stmt in named_children(root):
        if stmt.type != "export_statement":
            continue
        decl = stmt.child_by_field_name("declaration")
        if decl is None or decl.type != "lexical_declaration":
            continue
        for declarator in named_children(decl):
            if declarator.type != "variable_declarator":
                continue
            name = declarator.child_by_field_name("name")
            value = declarator.child_by_field_name("value")
            if name is None or value is None or name.type != "identifier":
                continue
            yield node_text(name), unwrap(value)


def walk(node: Any) -> Iterator[Any]:
    """Pre-order traversal (document order)."""
    stack = [node]
    while stack:
        current = stack.pop()
        yield current
        stack.extend(reversed(current.children))
