"""End-to-end generation run.

Steps run strictly one after another:

1. Scan function files, build the validator symbol table and parse
   functions (when hooks or API generation is enabled)
2. Scan and parse the schema (when types generation is enabled)
3. Run each enabled generator

A file that cannot be parsed is logged, recorded in the report and skipped.
Generator failures propagate as GenerateError.
"""

from __future__ import annotations

from collections import Counter
from collections.abc import Callable
from dataclasses import dataclass, field
from pathlib import Path

from convexgen.config.models import ConvexGenConfig
from convexgen.core.errors import ParseError
from convexgen.core.logging import get_logger
from convexgen.generate.api import APIGenerator
from convexgen.generate.hooks import HooksGenerator
from convexgen.generate.types import TypesGenerator
from convexgen.parse.functions import parse_function_file
from convexgen.parse.models import FunctionDescriptor, FunctionKind, TableDescriptor
from convexgen.parse.schema import parse_schema
from convexgen.parse.treesitter import TypeScriptParser
from convexgen.parse.validators import build_validator_cache
from convexgen.scan.scanner import Scanner

log = get_logger(__name__)


@dataclass
class GenerationReport:
    """What a run found and wrote."""

    source_files: int = 0
    schema_files: int = 0
    validators: int = 0
    functions: list[FunctionDescriptor] = field(default_factory=list)
    tables: list[TableDescriptor] = field(default_factory=list)
    skipped_files: list[str] = field(default_factory=list)
    files_written: dict[str, list[Path]] = field(default_factory=dict)
    output_dirs: dict[str, Path] = field(default_factory=dict)

    @property
    def counts_by_kind(self) -> dict[FunctionKind, int]:
        counts = Counter(fn.kind for fn in self.functions)
        return {kind: counts.get(kind, 0) for kind in FunctionKind}


def run_pipeline(
    config: ConvexGenConfig,
    *,
    on_step: Callable[[str], None] | None = None,
) -> GenerationReport:
    """Scan, parse and generate according to `config`.

    Args:
        config: Fully resolved configuration (see load_config).
        on_step: Called with a short description before each step.

    Returns:
        GenerationReport for the run.

    Raises:
        ConfigError: If skip patterns are invalid.
        GenerateError: If an output directory cannot be prepared or written.
    """

    def step(message: str) -> None:
        log.info("pipeline_step", step=message)
        if on_step is not None:
            on_step(message)

    report = GenerationReport()
    gens = config.generators
    parser = TypeScriptParser()
    scanner = Scanner(config)

    if gens.hooks or gens.api:
        step("Scanning Convex functions")
        files = scanner.scan()
        report.source_files = len(files)

        step("Building validator cache")
        validators = build_validator_cache(config.convex.path, parser, report.skipped_files)
        report.validators = len(validators)

        step(f"Parsing {len(files)} files")
        style = config.declaration_style
        for file in files:
            try:
                report.functions.extend(parse_function_file(file, style, validators, parser))
            except ParseError as e:
                log.warning("source_file_skipped", path=str(file.path), error=e.message)
                if str(file.path) not in report.skipped_files:
                    report.skipped_files.append(str(file.path))

    if gens.types:
        step("Scanning schema")
        schema_files = scanner.scan_schema()
        report.schema_files = len(schema_files)
        report.tables = parse_schema(schema_files, parser, report.skipped_files)

    if gens.hooks:
        step("Generating hooks")
        hooks = HooksGenerator.from_config(config)
        report.files_written["hooks"] = hooks.generate(report.functions)
        report.output_dirs["hooks"] = hooks.output_dir

    if gens.api:
        step("Generating API references")
        api = APIGenerator.from_config(config)
        report.files_written["api"] = api.generate(report.functions)
        report.output_dirs["api"] = api.output_dir

    if gens.types:
        step("Generating types")
        types = TypesGenerator.from_config(config)
        report.files_written["types"] = types.generate(report.tables)
        report.output_dirs["types"] = types.output_dir

    log.info(
        "pipeline_complete",
        functions=len(report.functions),
        tables=len(report.tables),
        validators=report.validators,
        skipped=len(report.skipped_files),
    )
    return report
