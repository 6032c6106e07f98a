"""unfence CLI - rebuild project files from generated markdown."""

import logging
import os

import click

from .commands.config import config as config_group
from .commands.export import extract_cmd
from .commands.export import zip_cmd
from .commands.inspect import parse_cmd
from .commands.inspect import show_cmd
from .commands.inspect import tree_cmd
from .logging_setup import init_json_logging

logger = logging.getLogger(__name__)


@click.group(invoke_without_command=True)
@click.version_option(package_name="unfence")
@click.option(
    "--log-file",
    type=click.Path(dir_okay=False),
    default=None,
    help="Write JSONL logs to this file (default: $UNFENCE_LOG_PATH when set)",
)
@click.option(
    "--log-level",
    type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR"], case_sensitive=False),
    default=None,
    help="Log level for the JSONL log (default: $UNFENCE_LOG_LEVEL or INFO)",
)
@click.pass_context
def cli(ctx: click.Context, log_file: str | None, log_level: str | None):
    """unfence - turn code blocks in AI replies into files."""
    ctx.ensure_object(dict)

    log_path = log_file or os.environ.get("UNFENCE_LOG_PATH")
    if log_path:
        init_json_logging(log_path, log_level or os.environ.get("UNFENCE_LOG_LEVEL"))
        logger.debug(f"Logging to {log_path}")

    if ctx.invoked_subcommand is None:
        click.echo(ctx.get_help())
        ctx.exit()


cli.add_command(parse_cmd)
cli.add_command(tree_cmd)
cli.add_command(show_cmd)
cli.add_command(extract_cmd)
cli.add_command(zip_cmd)
cli.add_command(config_group)


def main():
    """Main entry point."""
    cli()


if __name__ == "__main__":
    main()
