"""Helpers shared by the CLI commands."""

from __future__ import annotations

import sys
from collections.abc import Iterator
from contextlib import contextmanager

import click

from ..console import err_console
from ..errors import UnfenceError
from ..models import ParseResult
from ..parser import ParserOptions
from ..parser import parse
from ..settings import AppSettings
from ..sources import read_source
from ..utils.error_format import escape_markup
from ..utils.error_format import format_error_message

source_argument = click.argument("source", required=False, default="-", metavar="[SOURCE]")
clipboard_option = click.option(
    "--clipboard", "-c", is_flag=True, help="Read input from the system clipboard instead of SOURCE"
)


def get_settings(ctx: click.Context) -> AppSettings:
    """Settings from the context object, created on first use."""
    obj = ctx.ensure_object(dict)
    if "settings" not in obj:
        obj["settings"] = AppSettings()
    return obj["settings"]


def load_result(
    ctx: click.Context, source: str, from_clipboard: bool, options: ParserOptions | None = None
) -> ParseResult:
    """Read the input and parse it with options from settings."""
    text = read_source(source, from_clipboard=from_clipboard)
    return parse(text, options or get_settings(ctx).get_parser_options())


@contextmanager
def handle_errors() -> Iterator[None]:
    """Turn UnfenceError and filesystem errors into one error line and exit status 1."""
    try:
        yield
    except (UnfenceError, OSError) as e:
        message = escape_markup(format_error_message(e, include_type=False))
        err_console.print(f"[red]Error:[/red] {message}")
        sys.exit(1)
