"""Commands that show what a parse produces: parse, tree, show."""

from __future__ import annotations

import json
import sys

import click
from rich.panel import Panel
from rich.syntax import Syntax
from rich.table import Table

from ..console import console
from ..tree import render_file_tree
from ..utils.error_format import escape_markup
from .common import clipboard_option
from .common import get_settings
from .common import handle_errors
from .common import load_result
from .common import source_argument


@click.command(name="parse")
@source_argument
@clipboard_option
@click.option("--json", "as_json", is_flag=True, help="Print the parsed files as JSON")
@click.option(
    "--fallback-stem",
    type=click.Choice(["untitled", "generated_file"]),
    default=None,
    help="Stem for synthesized file names (overrides settings)",
)
@click.pass_context
def parse_cmd(ctx: click.Context, source: str, clipboard: bool, as_json: bool, fallback_stem: str | None):
    """List the files found in SOURCE (a file, or - for stdin)."""
    with handle_errors():
        options = get_settings(ctx).get_parser_options()
        if fallback_stem:
            options = options.model_copy(update={"fallback_stem": fallback_stem})
        result = load_result(ctx, source, clipboard, options)

    if as_json:
        click.echo(json.dumps(result.to_dict(), indent=2, ensure_ascii=False))
        return

    if not result.files:
        console.print("[yellow]No code blocks found.[/yellow]")
        return

    table = Table(title=f"Parsed Files ({len(result.files)})", show_header=True, header_style="bold cyan")
    table.add_column("Path", style="green")
    table.add_column("Language", style="magenta")
    table.add_column("Lines", justify="right")

    for parsed in result.files:
        line_count = len(parsed.content.split("\n")) if parsed.content else 0
        table.add_row(escape_markup(parsed.path), parsed.language, str(line_count))

    console.print(table)

    if result.folder_structure:
        console.print(Panel(escape_markup(result.folder_structure), title="Folder Structure", border_style="dim"))


@click.command(name="tree")
@source_argument
@clipboard_option
@click.pass_context
def tree_cmd(ctx: click.Context, source: str, clipboard: bool):
    """Show the parsed files as a folder tree."""
    with handle_errors():
        result = load_result(ctx, source, clipboard)

    if not result.files:
        console.print("[yellow]No code blocks found.[/yellow]")
        return

    console.print(render_file_tree(result.files))


@click.command(name="show")
@click.argument("source")
@click.argument("path")
@click.option("--plain", is_flag=True, help="Print raw content without highlighting")
@click.option("--line-numbers/--no-line-numbers", default=True, help="Show line numbers")
@click.pass_context
def show_cmd(ctx: click.Context, source: str, path: str, plain: bool, line_numbers: bool):
    """Preview the parsed file PATH from SOURCE."""
    with handle_errors():
        result = load_result(ctx, source, False)

    parsed = result.get(path)
    if parsed is None:
        console.print(f"[red]Error:[/red] No parsed file named '{escape_markup(path)}'")
        if result.files:
            console.print("[dim]Available: " + ", ".join(escape_markup(p) for p in result.paths()) + "[/dim]")
        sys.exit(1)

    if plain:
        click.echo(parsed.content)
        return

    console.print(
        Panel(
            Syntax(parsed.content, parsed.language, line_numbers=line_numbers, word_wrap=False),
            title=f"[bold]{escape_markup(parsed.path)}[/bold] [dim]({parsed.language})[/dim]",
            border_style="cyan",
        )
    )
