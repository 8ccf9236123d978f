"""Function declaration extraction.

Two declaration styles are supported, selected once per run:

Standard call (DeclarationStyle.STANDARD_CALL)::

    export const list = query({ args: { projectId: v.id("projects") }, handler })

Fluent chain (DeclarationStyle.FLUENT_CHAIN)::

    export const list = adminQuery
      .input({ projectId: v.id("projects") })
      .handler(async (ctx, args) => { ... })
      .public();

Both styles hand their args value to resolve_args_value(), so argument
classification is identical.
"""

from __future__ import annotations

from collections.abc import Callable, Iterator
from typing import Any

from convexgen.core.logging import get_logger
from convexgen.parse.arguments import ArgsAnalysis, resolve_args_value
from convexgen.parse.models import (
    DeclarationStyle,
    FunctionDescriptor,
    FunctionKind,
    SourceFile,
)
from convexgen.parse.source import read_source
from convexgen.parse.treesitter import (
    Chain,
    TypeScriptParser,
    callee_name,
    exported_declarators,
    first_argument,
    flatten_chain,
    named_children,
    node_text,
)
from convexgen.parse.validators import ValidatorSymbolTable

log = get_logger(__name__)

STANDARD_CALLEES: dict[str, FunctionKind] = {
    "query": FunctionKind.QUERY,
    "mutation": FunctionKind.MUTATION,
    "action": FunctionKind.ACTION,
}

INTERNAL_CALLEES = frozenset({"internalQuery", "internalMutation", "internalAction"})

FLUENT_ROOTS: dict[str, FunctionKind] = {
    "authedQuery": FunctionKind.QUERY,
    "userQuery": FunctionKind.QUERY,
    "adminQuery": FunctionKind.QUERY,
    "authedMutation": FunctionKind.MUTATION,
    "userMutation": FunctionKind.MUTATION,
    "adminMutation": FunctionKind.MUTATION,
    "superAdminMutation": FunctionKind.MUTATION,
    "authedAction": FunctionKind.ACTION,
}

# Generic builder; the kind comes from a .query() / .mutation() / .action() call
FLUENT_GENERIC_ROOT = "convex"

PUBLIC_MARKER = "public"
INTERNAL_MARKER = "internal"
INPUT_METHOD = "input"

# (kind, args value node or None) for one declaration, or None to skip it
_Extracted = tuple[FunctionKind, Any | None] | None


def _find_pair_value(obj: Any, key: str) -> Any | None:
    for entry in named_children(obj):
        if entry.type != "pair":
            continue
        k = entry.child_by_field_name("key")
        if k is not None and node_text(k).strip("'\"") == key:
            return entry.child_by_field_name("value")
    return None


def _extract_standard(name: str, value: Any) -> _Extracted:
    callee = callee_name(value)
    if callee in INTERNAL_CALLEES:
        log.debug("internal_function_skipped", name=name, callee=callee)
        return None
    kind = STANDARD_CALLEES.get(callee or "")
    if kind is None:
        return None

    config = first_argument(value)
    if config is None or config.type != "object":
        return kind, None
    return kind, _find_pair_value(config, "args")


def _fluent_kind(chain: Chain, calls: list[Any]) -> FunctionKind | None:
    if chain.root in FLUENT_ROOTS:
        return FLUENT_ROOTS[chain.root]
    if chain.root == FLUENT_GENERIC_ROOT:
        for call in calls:
            kind = STANDARD_CALLEES.get(call.method)
            if kind is not None:
                return kind
    return None


def _extract_fluent(name: str, value: Any) -> _Extracted:
    chain = flatten_chain(value)
    if chain is None or chain.root_called:
        return None

    marker_idx = next(
        (
            i
            for i, call in enumerate(chain.calls)
            if call.method in (PUBLIC_MARKER, INTERNAL_MARKER)
        ),
        None,
    )
    if marker_idx is None:
        # A builder, middleware or callable rather than a registered function
        return None
    if chain.calls[marker_idx].method == INTERNAL_MARKER:
        log.debug("internal_function_skipped", name=name, root=chain.root)
        return None

    calls = chain.calls[:marker_idx]
    kind = _fluent_kind(chain, calls)
    if kind is None:
        return None

    for call in calls:
        if call.method == INPUT_METHOD and call.arguments:
            return kind, call.arguments[0]
    return kind, None


_EXTRACTORS: dict[DeclarationStyle, Callable[[str, Any], _Extracted]] = {
    DeclarationStyle.STANDARD_CALL: _extract_standard,
    DeclarationStyle.FLUENT_CHAIN: _extract_fluent,
}


def iter_functions(
    root_node: Any,
    file: SourceFile,
    style: DeclarationStyle,
    validators: ValidatorSymbolTable,
    parser: TypeScriptParser,
) -> Iterator[FunctionDescriptor]:
    """Yield one descriptor per registered function in a parsed file."""
    extract = _EXTRACTORS[style]
    for name, value in exported_declarators(root_node):
        extracted = extract(name, value)
        if extracted is None:
            continue
        kind, args_value = extracted
        analysis = (
            resolve_args_value(args_value, validators, parser)
            if args_value is not None
            else ArgsAnalysis()
        )
        yield FunctionDescriptor(
            name=name,
            kind=kind,
            namespace=file.namespace,
            source_file=file.path,
            arguments=analysis.arguments,
            is_paginated=analysis.is_paginated,
            uses_opaque_args=analysis.uses_opaque_args,
        )


def parse_function_file(
    file: SourceFile,
    style: DeclarationStyle,
    validators: ValidatorSymbolTable,
    parser: TypeScriptParser,
) -> list[FunctionDescriptor]:
    """Extract every client-callable function declared in `file`.

    Raises:
        ParseError: If the file cannot be read.
    """
    source = read_source(file.path)
    result = parser.parse(file.path, source)
    if result.error_count:
        log.debug("syntax_errors", path=str(file.path), count=result.error_count)
    functions = list(iter_functions(result.root_node, file, style, validators, parser))
    log.debug("file_parsed", path=str(file.path), style=style.value, functions=len(functions))
    return functions
