"""Read input text from a file, standard input, or the clipboard."""

from __future__ import annotations

import logging
import sys
from pathlib import Path

from .clipboard_handler import ClipboardTextHandler
from .errors import SourceError

logger = logging.getLogger(__name__)

STDIN_SOURCE = "-"


def read_source(source: str | None = STDIN_SOURCE, *, from_clipboard: bool = False) -> str:
    """Read the text to parse.

    Args:
        source: File path, or "-" / None for standard input
        from_clipboard: Read the system clipboard instead of source

    Returns:
        The input text

    Raises:
        SourceError: If the file cannot be read or the clipboard is empty
    """
    if from_clipboard:
        text = ClipboardTextHandler().read_clipboard_text()
        if text is None:
            raise SourceError("Clipboard is empty or no clipboard tool is available")
        logger.debug(f"Read {len(text)} characters from clipboard")
        return text

    if source is None or source == STDIN_SOURCE:
        return sys.stdin.read()

    path = Path(source)
    if not path.is_file():
        raise SourceError(f"Input file not found: {source}")
    try:
        return path.read_text(encoding="utf-8", errors="replace")
    except OSError as e:
        raise SourceError(f"Cannot read {source}: {e}") from e
