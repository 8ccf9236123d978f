"""convex-gen init command - write a starter config file."""

from pathlib import Path

import click

from convexgen.config.constants import CONFIG_FILE_NAMES, DEFAULT_CONFIG_FILE
from convexgen.config.loader import write_default_config
from convexgen.core.progress import status


@click.command()
@click.option("--org", default="@acme", show_default=True, help="Package scope, e.g. @acme")
@click.option(
    "--root",
    default=".",
    type=click.Path(exists=True, file_okay=False, path_type=Path),
    help="Project root",
)
@click.option("--force", is_flag=True, help="Overwrite an existing config file")
def init_command(org: str, root: Path, force: bool) -> None:
    """Write a starter .convex-gen.json in the project root."""
    root = root.resolve()
    existing = [root / name for name in CONFIG_FILE_NAMES if (root / name).exists()]
    if existing and not force:
        status(f"Config already exists: {existing[0]}", style="info")
        status("Use --force to overwrite", style="info")
        return

    if not org.startswith("@"):
        status(f"Org {org!r} does not look like a package scope", style="warning")

    path = root / DEFAULT_CONFIG_FILE
    try:
        write_default_config(path, org)
    except OSError as e:
        raise click.ClickException(f"Cannot write {path}: {e}") from e

    status(f"Created {path}", style="success")
    status("Run 'convex-gen generate' to generate bindings", style="info")
