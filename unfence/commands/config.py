"""Settings commands: show and set."""

from __future__ import annotations

import click
import yaml
from pydantic import ValidationError

from ..console import console
from ..parser import ParserOptions
from ..utils.error_format import escape_markup
from .common import get_settings
from .common import handle_errors


@click.group(invoke_without_command=True)
@click.pass_context
def config(ctx: click.Context):
    """Show or change unfence settings."""
    if ctx.invoked_subcommand is None:
        click.echo("\n" + ctx.get_help())
        ctx.exit()


@config.command(name="show")
@click.pass_context
def config_show(ctx: click.Context):
    """Show merged settings from all scopes."""
    settings = get_settings(ctx)
    merged = settings.get_merged_settings()
    if not merged:
        console.print("[dim]No settings configured (defaults in use).[/dim]")
        return
    console.print(escape_markup(yaml.safe_dump(merged, default_flow_style=False).rstrip()))


@config.command(name="set")
@click.argument("key")
@click.argument("value")
@click.option(
    "--scope",
    type=click.Choice(["local", "project", "global"]),
    default="project",
    help="Settings scope to write",
)
@click.pass_context
def config_set(ctx: click.Context, key: str, value: str, scope: str):
    """Set KEY (dotted, e.g. parser.fallback_stem) to VALUE."""
    try:
        parsed_value = yaml.safe_load(value) if value else value
    except yaml.YAMLError:
        parsed_value = value

    if key.startswith("parser."):
        field = key.split(".", 1)[1]
        if field not in ParserOptions.model_fields:
            console.print(f"[red]Error:[/red] Unknown parser setting: {escape_markup(field)}")
            ctx.exit(1)
        try:
            ParserOptions(**{field: parsed_value})
        except ValidationError as e:
            console.print(f"[red]Error:[/red] Invalid value for {escape_markup(key)}: {escape_markup(e.errors()[0]['msg'])}")
            ctx.exit(1)

    settings = get_settings(ctx)
    with handle_errors():
        settings.set_value(key, parsed_value, scope=scope)  # type: ignore[arg-type]
    console.print(f"[green]✓ Set {escape_markup(key)} = {escape_markup(parsed_value)} ({scope})[/green]")
