"""Fenced code block scanner.

Tokenizes raw text into an ordered list of fenced code blocks. A fence is a
line whose trimmed text starts with three or more backticks or three or more
tildes. Only a fence of the same character closes an open block, so a
backtick block can carry tilde fences as ordinary content and vice versa.

Unterminated blocks are dropped: a block still open at end of input produces
no CodeBlock.
"""

from __future__ import annotations

import logging
import re

from .associator import looks_like_path
from .associator import normalize_path
from .models import CodeBlock

logger = logging.getLogger(__name__)

LINE_SPLIT_RE = re.compile(r"\r?\n")
FENCE_RE = re.compile(r"^(?P<marker>`{3,}|~{3,})(?P<info>.*)$")
INFO_ATTR_RE = re.compile(r"""\b(?:title|filename|file|path)=(?P<quote>["']?)(?P<path>[^"'\s]+)(?P=quote)""")


def split_lines(text: str) -> list[str]:
    """Split text on ``\\n`` and ``\\r\\n`` only."""
    return LINE_SPLIT_RE.split(text)


def match_fence(line: str) -> tuple[str, str] | None:
    """Match a fence line.

    Returns:
        (fence_char, info_string) or None if the line is not a fence
    """
    match = FENCE_RE.match(line.strip())
    if not match:
        return None
    marker = match.group("marker")
    info = match.group("info").strip()
    # Backtick fences cannot carry backticks in the info string
    if marker[0] == "`" and "`" in info:
        return None
    return marker[0], info


def parse_info_string(info: str) -> tuple[str, str | None]:
    """Split an info string into (language, explicit_path).

    Handles ``lang``, ``lang:path``, a bare path (``src/app.py``) and
    ``title="path"``/``filename=path`` attributes.
    """
    info = info.strip()
    if not info:
        return "", None

    head, colon, tail = info.partition(":")
    words = head.split()
    language = words[0].lower() if words else ""

    if colon:
        explicit = normalize_path(tail.strip().strip("\"'`"))
        return language, explicit or None

    attr = INFO_ATTR_RE.search(info)
    if attr:
        explicit = normalize_path(attr.group("path"))
        if explicit:
            return language, explicit

    # A lone path in place of the language tag: ```src/app.py
    if len(words) == 1 and looks_like_path(words[0]):
        return "", normalize_path(words[0])

    return language, None


def scan_blocks(text: str) -> list[CodeBlock]:
    """Scan text into fenced code blocks, in document order.

    Args:
        text: Raw input text

    Returns:
        Closed code blocks; unterminated trailing blocks are not included
    """
    blocks: list[CodeBlock] = []
    lines = split_lines(text)

    fence_char: str | None = None
    info = ""
    start_idx = 0
    body: list[str] = []

    for idx, line in enumerate(lines):
        fence = match_fence(line)

        if fence_char is None:
            if fence is None:
                continue
            fence_char, info = fence
            start_idx = idx
            body = []
            continue

        if fence is not None and fence[0] == fence_char:
            language, explicit_path = parse_info_string(info)
            blocks.append(
                CodeBlock(
                    language=language,
                    explicit_path=explicit_path,
                    content="\n".join(body),
                    first_line_idx=start_idx,
                    last_line_idx=idx,
                    fence_char=fence_char,
                    info=info,
                )
            )
            fence_char = None
            continue

        body.append(line)

    if fence_char is not None:
        logger.debug(f"Dropping unterminated fence opened at line {start_idx}")

    return blocks
