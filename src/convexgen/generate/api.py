"""Typed function-reference objects.

Each file exports up to three records, one per function kind present::

    export const IssuesQueries: Record<string, FunctionReference<"query">> = {
      list: api.issues.queries.list as unknown as FunctionReference<"query">,
    };

The barrel re-exports `api` itself before the per-file exports.
"""

from __future__ import annotations

from collections import Counter
from pathlib import Path
from typing import TYPE_CHECKING

from convexgen.core.logging import get_logger
from convexgen.generate.naming import (
    api_path,
    capitalize,
    collision_prefix,
    grouped_api_export_base,
    grouped_api_file_name,
    split_api_export_base,
    split_api_file_name,
)
from convexgen.generate.output import prepare_output_dir, write_file, write_index
from convexgen.parse.models import FunctionDescriptor, FunctionKind

if TYPE_CHECKING:
    from convexgen.config.models import ConvexGenConfig, FileStructure

log = get_logger(__name__)

_RECORD_SUFFIX: dict[FunctionKind, str] = {
    FunctionKind.QUERY: "Queries",
    FunctionKind.MUTATION: "Mutations",
    FunctionKind.ACTION: "Actions",
}


def unique_export_names(top: str, functions: list[FunctionDescriptor]) -> list[str]:
    """Mapping keys for one record of a grouped file.

    Pass one counts plain function names. Colliding names are prefixed with
    their cleaned sub-namespace; a per-record seen set then falls back to a
    numeric suffix starting at 2.
    """
    counts = Counter(fn.name for fn in functions)
    seen: set[str] = set()
    names: list[str] = []
    for fn in functions:
        candidate = fn.name
        if counts[fn.name] > 1:
            prefix = collision_prefix(fn.namespace, top)
            if prefix:
                candidate = prefix + capitalize(fn.name)
        if candidate in seen:
            i = 2
            while f"{fn.name}{i}" in seen:
                i += 1
            candidate = f"{fn.name}{i}"
        seen.add(candidate)
        names.append(candidate)
    return names


def _render_record(
    base: str,
    kind: FunctionKind,
    entries: list[tuple[str, FunctionDescriptor]],
) -> str:
    ref = f'FunctionReference<"{kind.value}">'
    lines = [f"export const {base}{_RECORD_SUFFIX[kind]}: Record<string, {ref}> = {{"]
    for key, fn in entries:
        lines.append(f"  {key}: {api_path(fn.namespace, fn.name)} as unknown as {ref},")
    lines.append("};")
    return "\n".join(lines) + "\n\n"


def _render_header(title: str, api_import: str) -> str:
    return (
        "/**\n"
        f" * {title} API References\n"
        " * Auto-generated from Convex backend functions\n"
        " *\n"
        " * DO NOT EDIT MANUALLY\n"
        " * Run 'convex-gen generate' to regenerate this file.\n"
        " */\n\n"
        "import type { FunctionReference } from 'convex/server';\n"
        f"import {{ api }} from '{api_import}';\n\n"
    )


def render_grouped_file(top: str, functions: list[FunctionDescriptor], api_import: str) -> str:
    out = _render_header(capitalize(top), api_import)
    base = grouped_api_export_base(top)
    for kind in FunctionKind:
        of_kind = [fn for fn in functions if fn.kind is kind]
        if of_kind:
            keys = unique_export_names(top, of_kind)
            out += _render_record(base, kind, list(zip(keys, of_kind, strict=True)))
    return out


def render_split_file(namespace: str, functions: list[FunctionDescriptor], api_import: str) -> str:
    out = _render_header(capitalize(namespace), api_import)
    base = split_api_export_base(namespace)
    for kind in FunctionKind:
        of_kind = [fn for fn in functions if fn.kind is kind]
        if of_kind:
            out += _render_record(base, kind, [(fn.name, fn) for fn in of_kind])
    return out


class APIGenerator:
    """Writes function-reference records for every namespace."""

    def __init__(
        self,
        output_dir: Path,
        *,
        api_import: str,
        file_structure: FileStructure = "grouped",
    ) -> None:
        self.output_dir = output_dir
        self.api_import = api_import
        self.file_structure = file_structure

    @classmethod
    def from_config(cls, config: ConvexGenConfig) -> APIGenerator:
        return cls(
            config.api_output_dir,
            api_import=config.api_import,
            file_structure=config.data_layer.file_structure,
        )

    def generate(self, functions: list[FunctionDescriptor]) -> list[Path]:
        """Write all API files and the barrel. Returns the written paths.

        Raises:
            GenerateError: On any file-system failure.
        """
        prepare_output_dir(self.output_dir)

        # Stable sort keeps scan order within a namespace
        ordered = sorted(functions, key=lambda fn: fn.namespace)
        written: list[Path] = []
        produced: list[str] = []

        if self.file_structure in ("grouped", "both"):
            by_top: dict[str, list[FunctionDescriptor]] = {}
            for fn in ordered:
                by_top.setdefault(fn.top_level_namespace, []).append(fn)
            for top in sorted(by_top):
                name = grouped_api_file_name(top)
                self._write(name, render_grouped_file(top, by_top[top], self.api_import), written)
                produced.append(name)

        if self.file_structure in ("split", "both"):
            by_namespace: dict[str, list[FunctionDescriptor]] = {}
            for fn in ordered:
                by_namespace.setdefault(fn.namespace, []).append(fn)
            for namespace in sorted(by_namespace):
                name = split_api_file_name(namespace)
                if name in produced:
                    log.debug("split_file_shadowed", file=name)
                    continue
                content = render_split_file(namespace, by_namespace[namespace], self.api_import)
                self._write(name, content, written)
                produced.append(name)

        preamble = [f"export {{ api }} from '{self.api_import}';"] if produced else []
        written.append(write_index(self.output_dir, produced, preamble))

        log.info(
            "api_generated",
            output_dir=str(self.output_dir),
            functions=len(functions),
            files=len(written),
        )
        return written

    def _write(self, name: str, content: str, written: list[Path]) -> None:
        path = self.output_dir / f"{name}.ts"
        write_file(path, content)
        written.append(path)
