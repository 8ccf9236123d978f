"""Discovery of Convex function and schema files.

Function files: every `.ts` file under the Convex root, minus declaration
files, skip-pattern matches and framework files (crons.ts, http.ts, ...).
The namespace is the path relative to the root without extension
(`issues/queries.ts` -> `issues/queries`).

Schema files: the main `defineSchema` file if present, plus the per-domain
files of a schema directory.
"""

from __future__ import annotations

import os
import re
from collections.abc import Iterable, Sequence
from pathlib import Path
from typing import TYPE_CHECKING

from convexgen.config.constants import SCHEMA_DIR_NAMES, SPECIAL_FILES
from convexgen.core.errors import ConfigError
from convexgen.core.logging import get_logger
from convexgen.parse.models import SchemaFile, SourceFile
from convexgen.parse.source import strip_comments

if TYPE_CHECKING:
    from convexgen.config.models import ConvexGenConfig, Structure

log = get_logger(__name__)

_DEFINE_SCHEMA_RE = re.compile(r"\bdefineSchema\s*\(")

TS_SUFFIX = ".ts"
DECLARATION_SUFFIX = ".d.ts"
INDEX_FILE = "index.ts"


def compile_patterns(patterns: Iterable[str]) -> list[re.Pattern[str]]:
    """Compile skip patterns.

    Raises:
        ConfigError: If a pattern is not a valid regular expression.
    """
    compiled: list[re.Pattern[str]] = []
    for pattern in patterns:
        try:
            compiled.append(re.compile(pattern))
        except re.error as e:
            raise ConfigError.invalid_value("skip.patterns", pattern, str(e)) from e
    return compiled


def _walk_with_pruning(root: Path, skip_dirs: frozenset[str]) -> list[tuple[str, str]]:
    """Walk files in sorted order, pruning skipped dirs. Returns (rel_dir_posix, filename)."""
    results: list[tuple[str, str]] = []
    for dirpath, dirnames, filenames in os.walk(root):
        dirnames[:] = sorted(d for d in dirnames if d not in skip_dirs)
        rel_dir_posix = Path(dirpath).relative_to(root).as_posix()
        if rel_dir_posix == ".":
            rel_dir_posix = ""
        for filename in sorted(filenames):
            results.append((rel_dir_posix, filename))
    return results


def _is_candidate(filename: str, patterns: Sequence[re.Pattern[str]]) -> bool:
    if not filename.endswith(TS_SUFFIX) or filename.endswith(DECLARATION_SUFFIX):
        return False
    if any(p.search(filename) for p in patterns):
        return False
    return filename not in SPECIAL_FILES


def scan(
    root: Path,
    structure: Structure = "nested",
    skip_dirs: Iterable[str] = (),
    skip_patterns: Iterable[str | re.Pattern[str]] = (),
) -> list[SourceFile]:
    """Find candidate function files under `root`.

    The namespace formula does not depend on `structure`; flat and nested
    layouts differ only in how deep files usually sit.
    """
    if not root.is_dir():
        return []

    pruned = frozenset(skip_dirs) | SCHEMA_DIR_NAMES
    patterns = [p if isinstance(p, re.Pattern) else re.compile(p) for p in skip_patterns]

    files: list[SourceFile] = []
    for rel_dir, filename in _walk_with_pruning(root, pruned):
        if not _is_candidate(filename, patterns):
            continue
        base_name = filename.removesuffix(TS_SUFFIX)
        namespace = f"{rel_dir}/{base_name}" if rel_dir else base_name
        files.append(
            SourceFile(
                path=root / rel_dir / filename,
                namespace=namespace,
                base_name=base_name,
            )
        )

    log.debug("scan_complete", root=str(root), structure=structure, files=len(files))
    return files


def _defines_schema(path: Path) -> bool:
    if not path.is_file():
        return False
    try:
        text = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        log.warning("schema_file_unreadable", path=str(path), error=str(e))
        return False
    return bool(_DEFINE_SCHEMA_RE.search(strip_comments(text)))


def _schema_domain(rel_dir: str, filename: str) -> str:
    if rel_dir:
        return rel_dir
    return filename.removesuffix(TS_SUFFIX).removesuffix(".schema")


def scan_schema(schema_path: Path) -> list[SchemaFile]:
    """Find schema files.

    Order of preference for the main file: `<schema_path>.ts`, then
    `<schema_path>/index.ts`; it is kept only if it calls defineSchema.
    A missing path is not an error.
    """
    files: list[SchemaFile] = []

    main_candidates = (
        schema_path.with_name(schema_path.name + TS_SUFFIX),
        schema_path / INDEX_FILE,
    )
    main_file = next((p for p in main_candidates if _defines_schema(p)), None)
    if main_file is not None:
        files.append(SchemaFile(path=main_file, domain="main"))

    if not schema_path.exists():
        return files

    if not schema_path.is_dir():
        if not files:
            files.append(SchemaFile(path=schema_path, domain="root"))
        return files

    for rel_dir, filename in _walk_with_pruning(schema_path, frozenset()):
        if not filename.endswith(TS_SUFFIX) or filename == INDEX_FILE:
            continue
        path = schema_path / rel_dir / filename
        files.append(SchemaFile(path=path, domain=_schema_domain(rel_dir, filename)))

    return files


class Scanner:
    """Binds scanning to a resolved configuration."""

    def __init__(self, config: ConvexGenConfig) -> None:
        self.config = config
        self.skip_dirs = frozenset(config.skip.directories)
        self.skip_patterns = compile_patterns(config.skip.patterns)

    def scan(self) -> list[SourceFile]:
        return scan(
            self.config.convex.path,
            self.config.convex.structure,
            self.skip_dirs,
            self.skip_patterns,
        )

    def scan_schema(self) -> list[SchemaFile]:
        schema_path = self.config.convex.schema_path
        if schema_path is None:
            return []
        return scan_schema(schema_path)
