"""Validator symbol table.

Convex functions often declare their arguments by reference:

    export const list = query({ args: Issues.listValidator, handler })

with the definition living in `model/issues/validators.ts`:

    export const listValidator = v.object({ status: v.string() })

build_validator_cache() walks every `model/` directory once before parsing
and records the source text of each exported `v.<...>(...)` initializer under
both `Issues.listValidator` and `listValidator`. The resulting table is
read-only and passed explicitly into every parsing call.
"""

from __future__ import annotations

import os
from collections.abc import Iterator, Mapping
from pathlib import Path
from types import MappingProxyType

from convexgen.config.constants import VALIDATOR_DIR_NAME, VALIDATOR_FILE_SUFFIXES
from convexgen.core.errors import ParseError
from convexgen.core.logging import get_logger
from convexgen.generate.naming import to_pascal_case
from convexgen.parse.source import read_source
from convexgen.parse.treesitter import (
    TypeScriptParser,
    exported_declarators,
    node_text,
    validator_method,
)

log = get_logger(__name__)

# Never descend into these while looking for model/ directories
_PRUNED_DIRS = frozenset({"node_modules", "_generated", ".turbo", ".git"})


class ValidatorSymbolTable(Mapping[str, str]):
    """Immutable mapping of validator reference -> definition source text."""

    def __init__(self, entries: Mapping[str, str] | None = None) -> None:
        self._entries = MappingProxyType(dict(entries or {}))

    def __getitem__(self, key: str) -> str:
        return self._entries[key]

    def __iter__(self) -> Iterator[str]:
        return iter(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def resolve(self, reference: str) -> str | None:
        """Look up `Module.name`, falling back to the bare name after the last dot."""
        found = self._entries.get(reference)
        if found is not None:
            return found
        if "." in reference:
            return self._entries.get(reference.rsplit(".", 1)[1])
        return None


def _iter_validator_files(root: Path) -> Iterator[tuple[Path, str]]:
    """Yield (file, namespace) for validator files under any model/ directory."""
    for dirpath, dirnames, filenames in os.walk(root):
        dirnames[:] = sorted(d for d in dirnames if d not in _PRUNED_DIRS)
        rel_parts = Path(dirpath).relative_to(root).parts
        if VALIDATOR_DIR_NAME not in rel_parts:
            continue
        model_idx = rel_parts.index(VALIDATOR_DIR_NAME)
        below = rel_parts[model_idx + 1 :]
        namespace = to_pascal_case(below[0]) if below else ""
        for filename in sorted(filenames):
            if filename.endswith(VALIDATOR_FILE_SUFFIXES):
                yield Path(dirpath) / filename, namespace


def build_validator_cache(
    root: Path,
    parser: TypeScriptParser,
    skipped: list[str] | None = None,
) -> ValidatorSymbolTable:
    """Scan `root` for validator definitions.

    Args:
        root: Convex functions directory.
        parser: Shared TypeScript parser.
        skipped: Unreadable files are appended here when given.

    Returns:
        Read-only symbol table. Later files overwrite earlier entries for the
        same key; files are visited in sorted order.
    """
    entries: dict[str, str] = {}
    if not root.is_dir():
        return ValidatorSymbolTable()

    for path, namespace in _iter_validator_files(root):
        try:
            source = read_source(path)
        except ParseError as e:
            log.warning("validator_file_skipped", path=str(path), error=e.message)
            if skipped is not None and str(path) not in skipped:
                skipped.append(str(path))
            continue

        result = parser.parse(path, source)
        count = 0
        for name, value in exported_declarators(result.root_node):
            if validator_method(value) is None:
                continue
            definition = node_text(value)
            if namespace:
                entries[f"{namespace}.{name}"] = definition
            entries[name] = definition
            count += 1
        log.debug("validator_file_parsed", path=str(path), namespace=namespace, count=count)

    return ValidatorSymbolTable(entries)
