"""React hook generation.

Output layout::

    <hooks_dir>/
        queries/    useIssues.ts, ..., index.ts
        mutations/  ...
        actions/    ...

Query hooks gate the call on their required ID arguments (or on an explicit
`shouldSkip` flag when there are none) by passing Convex's "skip" sentinel;
mutation and action hooks are one-line wrappers.
"""

from __future__ import annotations

from collections import Counter
from collections.abc import Iterable
from pathlib import Path
from typing import TYPE_CHECKING

from convexgen.config.constants import DEFAULT_INITIAL_NUM_ITEMS
from convexgen.core.logging import get_logger
from convexgen.generate.naming import (
    api_path,
    capitalize,
    grouped_hook_file_name,
    hook_base_name,
    qualified_hook_name,
    section_label,
    split_hook_file_name,
    to_natural_language,
)
from convexgen.generate.output import prepare_output_dir, write_file, write_index
from convexgen.parse.models import ArgumentDescriptor, FunctionDescriptor, FunctionKind

if TYPE_CHECKING:
    from convexgen.config.models import ConvexGenConfig, FileStructure

log = get_logger(__name__)

KIND_DIRS: dict[FunctionKind, str] = {
    FunctionKind.QUERY: "queries",
    FunctionKind.MUTATION: "mutations",
    FunctionKind.ACTION: "actions",
}

_REACT_HOOKS: dict[FunctionKind, str] = {
    FunctionKind.MUTATION: "useMutation",
    FunctionKind.ACTION: "useAction",
}

SKIP = '"skip"'
TS_IGNORE = "  // @ts-ignore - TS2589: Deep type instantiation with nested API path"
SHOULD_SKIP_PARAM = "shouldSkip?: boolean"
OPTIONS_PARAM = "options?: { initialNumItems?: number }"


# =============================================================================
# Per-hook rendering
# =============================================================================


def param_type(arg: ArgumentDescriptor) -> str:
    """TypeScript parameter type for one argument."""
    if arg.is_id_like:
        base = f'Id<"{arg.referenced_table}">'
        if arg.is_reference_id_array:
            base += "[]"
        return f"{base} | null" if arg.optional else f"{base} | null | undefined"
    return f"{arg.type} | null" if arg.optional else arg.type


def _uses_should_skip(fn: FunctionDescriptor) -> bool:
    return (
        fn.kind is FunctionKind.QUERY
        and not fn.uses_opaque_args
        and not fn.is_paginated
        and not fn.required_reference_ids
    )


def render_params(fn: FunctionDescriptor) -> str:
    """Parameter list: required, optional, then shouldSkip or options."""
    if fn.kind is not FunctionKind.QUERY:
        return ""

    if fn.uses_opaque_args:
        params = [f"args: FunctionArgs<typeof {api_path(fn.namespace, fn.name)}> | null"]
    else:
        params = [f"{a.name}: {param_type(a)}" for a in fn.required_arguments]
        params += [f"{a.name}?: {param_type(a)}" for a in fn.optional_arguments]
        if _uses_should_skip(fn):
            params.append(SHOULD_SKIP_PARAM)

    if fn.is_paginated:
        params.append(OPTIONS_PARAM)
    return ", ".join(params)


def render_args_object(fn: FunctionDescriptor) -> str:
    """Inner object literal; optional args are spread only when set."""
    parts = [a.name for a in fn.required_arguments]
    parts += [
        f"...({a.name} !== null && {a.name} !== undefined ? {{ {a.name} }} : {{}})"
        for a in fn.optional_arguments
    ]
    return f"{{ {', '.join(parts)} }}" if parts else "{}"


def render_query_args(fn: FunctionDescriptor) -> tuple[str, bool]:
    """Second argument of useQuery/usePaginatedQuery.

    Returns (expression, needs_cast) where needs_cast means the whole call
    is cast with `as any` (the shouldSkip form widens the argument type).
    """
    obj = render_args_object(fn)
    required_ids = fn.required_reference_ids
    if required_ids:
        condition = " && ".join(a.name for a in required_ids)
        return f"{condition} ? {obj} as any : {SKIP}", False
    if fn.is_paginated:
        return obj, False
    return f"shouldSkip ? {SKIP} : {obj} as any", True


def render_body(fn: FunctionDescriptor) -> str:
    path = api_path(fn.namespace, fn.name)

    if fn.kind is not FunctionKind.QUERY:
        return f"  return {_REACT_HOOKS[fn.kind]}({path});\n"

    if fn.uses_opaque_args:
        args_expr, cast = f"args ?? {SKIP}", False
    else:
        args_expr, cast = render_query_args(fn)

    if fn.is_paginated:
        return (
            "  return usePaginatedQuery(\n"
            f"    {path},\n"
            f"    {args_expr},\n"
            f"    {{ initialNumItems: options?.initialNumItems || {DEFAULT_INITIAL_NUM_ITEMS} }}\n"
            "  );\n"
        )
    suffix = " as any" if cast else ""
    return f"  return useQuery({path}, {args_expr}){suffix};\n"


def render_jsdoc(fn: FunctionDescriptor) -> str:
    lines = ["/**", f" * Hook to {to_natural_language(fn.name)}"]
    is_query = fn.kind is FunctionKind.QUERY

    if is_query and fn.uses_opaque_args:
        lines += [" *", " * @param args - Function arguments, or null to skip the query"]
    elif is_query and fn.arguments:
        lines.append(" *")
        for arg in fn.arguments:
            suffix = " (optional)" if arg.optional else ""
            if arg.referenced_table:
                lines.append(f" * @param {arg.name} - ID of {arg.referenced_table}{suffix}")
            else:
                lines.append(f" * @param {arg.name} - {arg.type} value{suffix}")

    if _uses_should_skip(fn):
        if not fn.arguments:
            lines.append(" *")
        lines.append(
            " * @param shouldSkip - Skip the query if true (e.g., when user not authenticated)"
        )
    if is_query and fn.is_paginated:
        lines.append(" * @param options - Pagination options (optional)")

    lines.append(" */")
    return "\n".join(lines) + "\n"


def render_hook(fn: FunctionDescriptor, hook_name: str) -> str:
    """One exported hook, followed by a blank line."""
    return (
        render_jsdoc(fn)
        + f"export function {hook_name}({render_params(fn)}) {{\n"
        + TS_IGNORE
        + "\n"
        + render_body(fn)
        + "}\n\n"
    )


# =============================================================================
# Per-file rendering
# =============================================================================


def render_imports(
    kind: FunctionKind,
    functions: Iterable[FunctionDescriptor],
    api_import: str,
    data_model_import: str,
) -> str:
    functions = list(functions)
    lines: list[str] = []

    if kind is FunctionKind.QUERY:
        paginated = any(fn.is_paginated for fn in functions)
        regular = any(not fn.is_paginated for fn in functions)
        names = [n for n, used in (("useQuery", regular), ("usePaginatedQuery", paginated)) if used]
        lines.append(f'import {{ {", ".join(names)} }} from "convex/react";')
    else:
        lines.append(f'import {{ {_REACT_HOOKS[kind]} }} from "convex/react";')

    lines.append(f'import {{ api }} from "{api_import}";')

    if kind is FunctionKind.QUERY:
        needs_id = any(
            a.is_id_like for fn in functions if not fn.uses_opaque_args for a in fn.arguments
        )
        if needs_id:
            lines.append(f'import type {{ Id }} from "{data_model_import}";')
        if any(fn.uses_opaque_args for fn in functions):
            lines.append('import type { FunctionArgs } from "convex/server";')

    return "\n".join(lines) + "\n\n"


def _plural(kind: FunctionKind) -> str:
    return KIND_DIRS[kind]


def grouped_hook_names(top: str, functions: list[FunctionDescriptor]) -> list[str]:
    """Hook names for one grouped file, qualifying only the colliding ones.

    Pass one counts unqualified names; pass two qualifies every name whose
    count exceeds one. The result does not depend on input order.
    """
    counts = Counter(hook_base_name(top, fn.name) for fn in functions)
    names: list[str] = []
    for fn in functions:
        base = hook_base_name(top, fn.name)
        if counts[base] > 1:
            names.append(qualified_hook_name(top, fn.sub_namespace, fn.name))
        else:
            names.append(base)
    return names


def render_grouped_file(
    top: str,
    kind: FunctionKind,
    functions: list[FunctionDescriptor],
    api_import: str,
    data_model_import: str,
) -> str:
    header = [
        "/**",
        f" * {capitalize(top)} {capitalize(kind.value)} Hooks",
        " * Auto-generated React hooks for Convex functions",
        " *",
        " * DO NOT EDIT MANUALLY - Run 'convex-gen generate' to regenerate",
        " *",
        " * Features:",
        " * - Typed parameters with null safety",
        ' * - Conditional queries with "skip"',
    ]
    if kind is FunctionKind.QUERY:
        header.append(" * - Paginated queries with usePaginatedQuery")
    header += [" * - JSDoc documentation", " */", "", ""]

    out = "\n".join(header)
    out += render_imports(kind, functions, api_import, data_model_import)

    sections: dict[str, list[tuple[FunctionDescriptor, str]]] = {}
    for fn, name in zip(functions, grouped_hook_names(top, functions), strict=True):
        sections.setdefault(fn.sub_namespace or top, []).append((fn, name))

    for section in sorted(sections):
        out += section_label(section, _plural(kind)) + "\n\n"
        for fn, name in sections[section]:
            out += render_hook(fn, name)
    return out


def render_split_file(
    namespace: str,
    kind: FunctionKind,
    functions: list[FunctionDescriptor],
    api_import: str,
    data_model_import: str,
) -> str:
    out = (
        "/**\n"
        f" * AUTO-GENERATED {kind.value.upper()} HOOKS - DO NOT EDIT\n"
        f" * Namespace: {namespace}\n"
        " *\n"
        " * Run 'convex-gen generate' to regenerate this file.\n"
        " */\n\n"
    )
    out += render_imports(kind, functions, api_import, data_model_import)
    for fn in functions:
        name = qualified_hook_name(fn.top_level_namespace, fn.sub_namespace, fn.name)
        out += render_hook(fn, name)
    return out


# =============================================================================
# Generator
# =============================================================================


class HooksGenerator:
    """Writes React hooks for every query, mutation and action."""

    def __init__(
        self,
        output_dir: Path,
        *,
        api_import: str,
        data_model_import: str,
        file_structure: FileStructure = "grouped",
    ) -> None:
        self.output_dir = output_dir
        self.api_import = api_import
        self.data_model_import = data_model_import
        self.file_structure = file_structure

    @classmethod
    def from_config(cls, config: ConvexGenConfig) -> HooksGenerator:
        return cls(
            config.hooks_output_dir,
            api_import=config.api_import,
            data_model_import=config.data_model_import,
            file_structure=config.data_layer.file_structure,
        )

    def kind_dir(self, kind: FunctionKind) -> Path:
        return self.output_dir / KIND_DIRS[kind]

    def generate(self, functions: list[FunctionDescriptor]) -> list[Path]:
        """Write all hook files and barrels. Returns the written paths.

        Raises:
            GenerateError: On any file-system failure.
        """
        for kind in FunctionKind:
            prepare_output_dir(self.kind_dir(kind))

        written: list[Path] = []
        for kind in FunctionKind:
            by_top: dict[str, list[FunctionDescriptor]] = {}
            for fn in functions:
                if fn.kind is kind:
                    by_top.setdefault(fn.top_level_namespace, []).append(fn)

            names = self._write_kind(kind, by_top, written)
            written.append(write_index(self.kind_dir(kind), names))

        log.info(
            "hooks_generated",
            output_dir=str(self.output_dir),
            functions=len(functions),
            files=len(written),
        )
        return written

    def _write_kind(
        self,
        kind: FunctionKind,
        by_top: dict[str, list[FunctionDescriptor]],
        written: list[Path],
    ) -> list[str]:
        directory = self.kind_dir(kind)
        produced: list[str] = []

        if self.file_structure in ("grouped", "both"):
            for top in sorted(by_top):
                name = grouped_hook_file_name(top)
                content = render_grouped_file(
                    top, kind, by_top[top], self.api_import, self.data_model_import
                )
                path = directory / f"{name}.ts"
                write_file(path, content)
                written.append(path)
                produced.append(name)

        if self.file_structure in ("split", "both"):
            by_namespace: dict[str, list[FunctionDescriptor]] = {}
            for top in sorted(by_top):
                for fn in by_top[top]:
                    by_namespace.setdefault(fn.namespace, []).append(fn)
            for namespace in sorted(by_namespace):
                name = split_hook_file_name(namespace)
                if name in produced:
                    log.debug("split_file_shadowed", file=name, kind=kind.value)
                    continue
                content = render_split_file(
                    namespace,
                    kind,
                    by_namespace[namespace],
                    self.api_import,
                    self.data_model_import,
                )
                path = directory / f"{name}.ts"
                write_file(path, content)
                written.append(path)
                produced.append(name)

        return produced
