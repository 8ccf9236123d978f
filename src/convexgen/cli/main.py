"""convex-gen CLI."""

import click

from convexgen import __version__
from convexgen.cli.generate import generate_command
from convexgen.cli.init import init_command
from convexgen.core.logging import configure_logging


@click.group()
@click.version_option(version=__version__, prog_name="convex-gen")
@click.option("-v", "--verbose", is_flag=True, help="Enable debug logging")
@click.pass_context
def cli(ctx: click.Context, verbose: bool) -> None:
    """convex-gen - Typed React hooks, API references and types for Convex."""
    ctx.ensure_object(dict)
    ctx.obj["verbose"] = verbose
    configure_logging(level="DEBUG" if verbose else "WARNING")


cli.add_command(generate_command, name="generate")
cli.add_command(init_command, name="init")


if __name__ == "__main__":
    cli()
