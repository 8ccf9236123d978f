"""Argument classification.

Shared by both declaration styles: whatever form the arguments take (inline
object, `v.object({...})`, or a reference into the validator symbol table),
they end up as an object literal node analysed by analyze_args_block().

Classification precedence (first match wins):

    v.optional(v.array(v.id("t")))   -> OPTIONAL_ID_ARRAY
    v.array(v.id("t"))               -> ID_ARRAY
    v.optional(v.id("t"))            -> OPTIONAL_ID
    v.id("t")                        -> ID
    v.optional(v.<primitive>())      -> OPTIONAL_PRIMITIVE
    v.<primitive>()                  -> PRIMITIVE
    [v.optional(]v.array(v.<primitive>())[)] -> PRIMITIVE_ARRAY
    anything else                    -> UNKNOWN (marks the function opaque)
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from convexgen.core.logging import get_logger
from convexgen.parse.models import ArgumentClass, ArgumentDescriptor
from convexgen.parse.treesitter import (
    TypeScriptParser,
    call_arguments,
    first_argument,
    named_children,
    node_text,
    reference_name,
    string_value,
    unwrap,
    validator_method,
    walk,
)
from convexgen.parse.validators import ValidatorSymbolTable

log = get_logger(__name__)

PRIMITIVES = frozenset({"string", "number", "boolean", "bigint"})
PAGINATION_KEY = "paginationOpts"
PAGINATION_VALIDATOR = "paginationOptsValidator"

# Any of these inside an args block means the shape is too rich to synthesise
_OPAQUE_VALIDATORS = frozenset({"object", "union"})


@dataclass
class ArgsAnalysis:
    """Result of analysing one args block."""

    arguments: list[ArgumentDescriptor] = field(default_factory=list)
    is_paginated: bool = False
    uses_opaque_args: bool = False


def _id_table(node: Any) -> str | None:
    """Table name of `v.id("t")`, else None."""
    if validator_method(node) != "id":
        return None
    return string_value(first_argument(unwrap(node)))


def _primitive(node: Any) -> str | None:
    method = validator_method(node)
    if method in PRIMITIVES and not call_arguments(unwrap(node)):
        return method
    return None


def classify_argument(name: str, value: Any) -> ArgumentDescriptor:
    """Classify a single `name: <validator>` entry."""
    value = unwrap(value)
    optional = validator_method(value) == "optional"
    inner = first_argument(value) if optional else value

    if validator_method(inner) == "array":
        element = first_argument(unwrap(inner))
        table = _id_table(element)
        if table is not None:
            return ArgumentDescriptor(
                name=name,
                type=f'Id<"{table}">[]',
                optional=optional,
                classification=(
                    ArgumentClass.OPTIONAL_ID_ARRAY if optional else ArgumentClass.ID_ARRAY
                ),
                is_reference_id_array=True,
                referenced_table=table,
            )

    table = _id_table(inner)
    if table is not None:
        return ArgumentDescriptor(
            name=name,
            type=f'Id<"{table}">',
            optional=optional,
            classification=ArgumentClass.OPTIONAL_ID if optional else ArgumentClass.ID,
            is_reference_id=True,
            referenced_table=table,
        )

    primitive = _primitive(inner)
    if primitive is not None:
        return ArgumentDescriptor(
            name=name,
            type=primitive,
            optional=optional,
            classification=(
                ArgumentClass.OPTIONAL_PRIMITIVE if optional else ArgumentClass.PRIMITIVE
            ),
        )

    if validator_method(inner) == "array":
        element_type = _primitive(first_argument(unwrap(inner)))
        if element_type is not None:
            return ArgumentDescriptor(
                name=name,
                type=f"{element_type}[]",
                optional=optional,
                classification=ArgumentClass.PRIMITIVE_ARRAY,
            )

    return ArgumentDescriptor(
        name=name,
        type="unknown",
        optional=optional,
        classification=ArgumentClass.UNKNOWN,
    )


def _pair_key(pair: Any) -> str | None:
    key = pair.child_by_field_name("key")
    if key is None:
        return None
    if key.type == "property_identifier":
        return node_text(key)
    if key.type == "string":
        return string_value(key)
    return None


def analyze_args_block(block: Any) -> ArgsAnalysis:
    """Classify every entry of an args object literal.

    - `paginationOpts` is dropped and marks the function paginated; so does
      `paginationOptsValidator` appearing anywhere in the block.
    - Unknown values, spreads, shorthand entries, methods, computed keys and
      nested `v.object(...)` / `v.union(...)` calls make the args opaque.
    """
    analysis = ArgsAnalysis()

    for entry in named_children(block):
        if entry.type == "pair":
            key = _pair_key(entry)
            if key is None:
                analysis.uses_opaque_args = True
                continue
            if key == PAGINATION_KEY:
                analysis.is_paginated = True
                continue
            arg = classify_argument(key, entry.child_by_field_name("value"))
            if arg.classification is ArgumentClass.UNKNOWN:
                analysis.uses_opaque_args = True
            analysis.arguments.append(arg)
        elif entry.type == "shorthand_property_identifier":
            if node_text(entry) == PAGINATION_KEY:
                analysis.is_paginated = True
            else:
                analysis.uses_opaque_args = True
        else:
            # spread_element, method_definition, ...
            analysis.uses_opaque_args = True

    for node in walk(block):
        if node.type == "identifier" and node_text(node) == PAGINATION_VALIDATOR:
            analysis.is_paginated = True
        elif node.type == "call_expression" and validator_method(node) in _OPAQUE_VALIDATORS:
            analysis.uses_opaque_args = True

    return analysis


def _analyze_definition(definition: str, parser: TypeScriptParser) -> ArgsAnalysis | None:
    """Analyse cached validator source; None unless it is `v.object({...})`."""
    result = parser.parse_text(definition)
    statements = named_children(result.root_node)
    if not statements or statements[0].type != "expression_statement":
        return None
    exprs = named_children(statements[0])
    if not exprs:
        return None
    return _analyze_object_call(unwrap(exprs[0]))


def _analyze_object_call(node: Any) -> ArgsAnalysis | None:
    if validator_method(node) != "object":
        return None
    inner = first_argument(node)
    if inner is None or inner.type != "object":
        return None
    return analyze_args_block(inner)


def resolve_args_value(
    value: Any,
    validators: ValidatorSymbolTable,
    parser: TypeScriptParser,
) -> ArgsAnalysis:
    """Turn the value of `args:` or `.input(...)` into an analysis.

    Accepts an inline object literal, a `v.object({...})` call, or a
    reference (`name` / `Module.name`) into the validator table. An
    unresolved reference, or one whose definition is not `v.object({...})`,
    yields no arguments. Any other expression shape is treated as opaque.
    """
    value = unwrap(value)
    if value is None:
        return ArgsAnalysis()

    if value.type == "object":
        return analyze_args_block(value)

    if validator_method(value) is not None:
        analysis = _analyze_object_call(value)
        return analysis if analysis is not None else ArgsAnalysis(uses_opaque_args=True)

    reference = reference_name(value)
    if reference is not None:
        definition = validators.resolve(reference)
        if definition is None:
            log.debug("validator_unresolved", reference=reference)
            return ArgsAnalysis()
        analysis = _analyze_definition(definition, parser)
        if analysis is None:
            log.debug("validator_not_object", reference=reference)
            return ArgsAnalysis()
        return analysis

    log.debug("args_shape_unrecognized", node_type=value.type)
    return ArgsAnalysis(uses_opaque_args=True)
