"""Commands that write parsed files out: extract and zip."""

from __future__ import annotations

from pathlib import Path

import click
from rich.table import Table

from ..archive import build_zip
from ..archive import safe_relative_path
from ..archive import write_files
from ..console import console
from ..utils.error_format import escape_markup
from .common import clipboard_option
from .common import get_settings
from .common import handle_errors
from .common import load_result
from .common import source_argument


@click.command(name="extract")
@source_argument
@clipboard_option
@click.option("--output", "-o", "output_dir", type=click.Path(file_okay=False), default=None, help="Output directory")
@click.option("--force", "-f", is_flag=True, help="Overwrite existing files")
@click.option("--dry-run", is_flag=True, help="Show what would be written without writing")
@click.pass_context
def extract_cmd(
    ctx: click.Context, source: str, clipboard: bool, output_dir: str | None, force: bool, dry_run: bool
):
    """Write every file parsed from SOURCE under an output directory."""
    export = get_settings(ctx).get_export_settings()
    root = Path(output_dir or export["output_dir"])
    overwrite = force or export["overwrite"]

    with handle_errors():
        result = load_result(ctx, source, clipboard)

        if not result.files:
            console.print("[yellow]No code blocks found. Nothing to write.[/yellow]")
            return

        if dry_run:
            table = Table(title=f"Would write to {escape_markup(root)}", show_header=True, header_style="bold cyan")
            table.add_column("Path", style="green")
            table.add_column("Status")
            for parsed in result.files:
                target = root / safe_relative_path(parsed.path)
                status = "[yellow]exists[/yellow]" if target.exists() else "new"
                table.add_row(escape_markup(parsed.path), status)
            console.print(table)
            return

        written = write_files(result.files, root, overwrite=overwrite)

    for path in written:
        console.print(f"  [green]✓[/green] {escape_markup(path)}")
    console.print(f"\n[green]✓ Wrote {len(written)} file(s) to {escape_markup(root)}[/green]")


@click.command(name="zip")
@source_argument
@clipboard_option
@click.option("--output", "-o", "output", type=click.Path(dir_okay=False), default=None, help="Archive path")
@click.option("--force", "-f", is_flag=True, help="Overwrite an existing archive")
@click.pass_context
def zip_cmd(ctx: click.Context, source: str, clipboard: bool, output: str | None, force: bool):
    """Package every file parsed from SOURCE into a zip archive."""
    export = get_settings(ctx).get_export_settings()
    destination = Path(output or f"{export['zip_name']}.zip")
    overwrite = force or export["overwrite"]

    with handle_errors():
        result = load_result(ctx, source, clipboard)

        if not result.files:
            console.print("[yellow]No code blocks found. Nothing to package.[/yellow]")
            return

        archive = build_zip(result.files, destination, overwrite=overwrite)

    console.print(f"[green]✓ Packaged {len(result.files)} file(s) into {escape_markup(archive)}[/green]")
