"""convex-gen generate command - run the generation pipeline."""

import time
from pathlib import Path

import click

from convexgen.config.loader import load_config
from convexgen.core.errors import ConvexGenError
from convexgen.core.logging import configure_logging
from convexgen.core.progress import get_console, pluralize, spinner, status
from convexgen.parse.models import FunctionKind
from convexgen.pipeline import GenerationReport, run_pipeline

_KIND_LABELS = {
    FunctionKind.QUERY: ("query", "queries"),
    FunctionKind.MUTATION: ("mutation", "mutations"),
    FunctionKind.ACTION: ("action", "actions"),
}


def _print_summary(report: GenerationReport, elapsed: float) -> None:
    console = get_console()
    console.print()

    kinds = ", ".join(
        pluralize(count, *_KIND_LABELS[kind]) for kind, count in report.counts_by_kind.items()
    )
    status(
        f"{pluralize(len(report.functions), 'function')} in "
        f"{pluralize(report.source_files, 'file')} ({kinds})",
        style="info",
    )
    if report.schema_files:
        status(
            f"{pluralize(len(report.tables), 'table')} from "
            f"{pluralize(report.schema_files, 'schema file')}",
            style="info",
        )
    for path in report.skipped_files:
        status(f"Skipped unreadable file: {path}", style="warning")

    for name, paths in report.files_written.items():
        status(
            f"{name}: {pluralize(len(paths), 'file')} -> {report.output_dirs[name]}",
            style="info",
        )

    console.print()
    status(f"Generation complete ({elapsed:.1f}s)", style="success")


@click.command()
@click.option(
    "--config",
    "config_path",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    help="Config file (default: searched in the project root)",
)
@click.option(
    "--root",
    default=".",
    type=click.Path(exists=True, file_okay=False, path_type=Path),
    help="Project root",
)
@click.pass_context
def generate_command(ctx: click.Context, config_path: Path | None, root: Path) -> None:
    """Generate hooks, API references and types from the Convex backend."""
    verbose = bool(ctx.obj and ctx.obj.get("verbose"))
    start_time = time.time()

    try:
        config = load_config(root=root, config_path=config_path)
        configure_logging(config=config.logging, level="DEBUG" if verbose else None)

        status(f"Generating Convex bindings for {config.org}", style="none")
        with spinner("Generating bindings"):
            report = run_pipeline(
                config, on_step=lambda message: status(f"{message}...", indent=2)
            )
    except ConvexGenError as e:
        status(e.message, style="error")
        ctx.exit(1)

    _print_summary(report, time.time() - start_time)
