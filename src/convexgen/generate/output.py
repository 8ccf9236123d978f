"""Output directory handling shared by all generators.

Every generator owns its output directories outright: they are created if
absent and every `*.ts` file directly inside is deleted before writing, so
stale output never survives a run.
"""

from __future__ import annotations

from collections.abc import Iterable
from pathlib import Path

from convexgen.core.errors import GenerateError
from convexgen.core.logging import get_logger

log = get_logger(__name__)

INDEX_FILE = "index.ts"
INDEX_HEADER = "/**\n * AUTO-GENERATED INDEX - DO NOT EDIT\n */\n\n"
EMPTY_INDEX = "// No files generated\nexport {};\n"


def prepare_output_dir(directory: Path) -> None:
    """Create `directory` and remove previously generated `.ts` files.

    Raises:
        GenerateError: On any file-system failure.
    """
    try:
        directory.mkdir(parents=True, exist_ok=True)
    except OSError as e:
        raise GenerateError.output_failed(str(directory), "create", str(e)) from e

    removed = 0
    for path in sorted(directory.glob("*.ts")):
        if not path.is_file():
            continue
        try:
            path.unlink()
        except OSError as e:
            raise GenerateError.output_failed(str(path), "remove", str(e)) from e
        removed += 1
    log.debug("output_dir_prepared", path=str(directory), removed=removed)


def write_file(path: Path, content: str) -> None:
    """Write a generated file.

    Raises:
        GenerateError: If the file cannot be written.
    """
    try:
        path.write_text(content, encoding="utf-8")
    except OSError as e:
        raise GenerateError.output_failed(str(path), "write", str(e)) from e


def render_index(files: Iterable[str], preamble: Iterable[str] = ()) -> str:
    """Barrel content re-exporting every file (sorted, de-duplicated)."""
    names = sorted(set(files))
    if not names:
        return EMPTY_INDEX
    lines = [*preamble, *(f"export * from './{name}';" for name in names)]
    return INDEX_HEADER + "\n".join(lines) + "\n"


def write_index(directory: Path, files: Iterable[str], preamble: Iterable[str] = ()) -> Path:
    """Write `index.ts` re-exporting `files` (module names without extension)."""
    path = directory / INDEX_FILE
    write_file(path, render_index(files, preamble))
    return path
