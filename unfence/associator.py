"""Path association for fenced code blocks.

Finds path evidence for blocks in two places:
- inside the block: a leading line that is only a path annotation
  (``// src/app.ts``, ``# File: main.py``, ``<!-- index.html -->``)
- around the blocks: headings, bold text, ``File:``/``Path:`` labels and
  backticked paths at the start of a line, collected as PathHints

All patterns are matched line by line with local cursors, so nothing is
carried from one call to the next.
"""

from __future__ import annotations

import re
from collections.abc import Sequence

from .languages import EXTENSIONLESS_NAMES
from .languages import accepts_extension
from .languages import path_extension
from .models import CodeBlock
from .models import PathHint

# One path segment: word characters, dots and dashes
_SEGMENT = r"[\w.\-]+"
PATH_TOKEN = rf"(?:\.{{1,2}}/|/)?(?:{_SEGMENT}/)*{_SEGMENT}"

PATH_TOKEN_RE = re.compile(rf"^{PATH_TOKEN}$")
FILE_NAME_RE = re.compile(r"^(?:[\w\-.]*[\w\-]\.[A-Za-z][\w\-]*|\.[A-Za-z][\w.\-]*)$")

LABEL = r"(?:File|Path|Filename|File\s+name|File\s+path)"

# Whole-line path annotation inside a block
LEADING_PATH_RE = re.compile(
    rf"""^\s*
    (?P<marker>//|\#|/\*|<!--|--|;)?\s*
    (?P<label>{LABEL}(?:\s*:\s*|\s+))?
    `?(?P<path>{PATH_TOKEN})`?
    \s*(?:\*/|-->)?\s*$""",
    re.VERBOSE | re.IGNORECASE,
)

HEADING_RE = re.compile(r"^\s{0,3}(?P<hashes>#{1,6})\s*(?P<text>.*?)\s*#*\s*$")
BACKTICKED_RE = re.compile(r"`(?P<path>[^`\n]+)`")
HEADING_BARE_PATH_RE = re.compile(
    rf"^(?:\d+[.)]\s*)?(?:{LABEL}\s*:\s*)?(?P<path>{PATH_TOKEN})\s*:?$", re.IGNORECASE
)
BOLD_RE = re.compile(
    rf"\*\*(?:{LABEL}\s*:\s*)?`?(?P<path>{PATH_TOKEN})`?:?\*\*", re.IGNORECASE
)
LABEL_RE = re.compile(rf"\b{LABEL}\s*:\s*[`*]*(?P<path>{PATH_TOKEN})", re.IGNORECASE)
LINE_START_BACKTICK_RE = re.compile(rf"^\s*(?:[-*+]\s+|\d+[.)]\s+)?`(?P<path>{PATH_TOKEN})`")


def normalize_path(path: str) -> str:
    """Normalize a path to forward-slash, relative form.

    Backslashes become ``/``, repeated slashes collapse, and a leading
    ``./`` or ``/`` is removed. Surrounding whitespace is stripped.
    """
    path = path.strip().replace("\\", "/")
    path = re.sub(r"/{2,}", "/", path)
    while path.startswith("./"):
        path = path[2:]
    return path.lstrip("/")


def looks_like_path(token: str) -> bool:
    """Check whether a token reads as a relative file path.

    The last segment must have an extension starting with a letter, be a
    dotfile, or be a known extensionless name (Dockerfile, Makefile, ...).
    URLs, ``..`` segments and whitespace are rejected.
    """
    token = token.strip()
    if not token or "://" in token or any(ch.isspace() for ch in token):
        return False
    if not PATH_TOKEN_RE.match(token):
        return False
    normalized = normalize_path(token)
    if not normalized or ".." in normalized.split("/"):
        return False
    name = normalized.rpartition("/")[2]
    return name in EXTENSIONLESS_NAMES or bool(FILE_NAME_RE.match(name))


def hint_matches_language(hint: PathHint, language: str) -> bool:
    """Check whether a hint may be assigned to a block of the given language."""
    return accepts_extension(language, hint.path)


def find_leading_path(block: CodeBlock) -> tuple[str, str] | None:
    """Look for a path annotation on the first non-empty content line.

    A bare path with no comment marker and no label is accepted only when
    its extension belongs to the block's language, so an expression like
    ``np.array`` is never taken for a file name.

    Args:
        block: The code block to inspect

    Returns:
        (path, content_without_annotation) or None if no annotation found
    """
    lines = block.content.split("\n")
    first = next((i for i, line in enumerate(lines) if line.strip()), None)
    if first is None:
        return None

    match = LEADING_PATH_RE.match(lines[first])
    if not match:
        return None

    candidate = match.group("path")
    if not looks_like_path(candidate):
        return None

    path = normalize_path(candidate)
    if not match.group("marker") and not match.group("label"):
        if not block.language or not accepts_extension(block.language, path):
            return None
        if not path_extension(path):
            return None

    rest = lines[first + 1 :]
    while rest and not rest[0].strip():
        rest = rest[1:]
    return path, "\n".join(rest)


def _clean(candidate: str) -> str | None:
    """Trim sentence punctuation from a candidate and check it reads as a path."""
    candidate = candidate.strip().rstrip(".,;")
    return candidate if looks_like_path(candidate) else None


def _hints_in_heading(text: str) -> list[tuple[int, str, str]]:
    found: list[tuple[int, str, str]] = []
    for match in BACKTICKED_RE.finditer(text):
        candidate = _clean(match.group("path"))
        if candidate:
            found.append((match.start("path"), candidate, "heading"))
    if not found:
        bare = HEADING_BARE_PATH_RE.match(text)
        candidate = _clean(bare.group("path")) if bare else None
        if candidate:
            found.append((bare.start("path"), candidate, "heading"))
    return found


def _hints_in_line(line: str) -> list[tuple[int, str, str]]:
    """Collect (column, path, kind) candidates from one prose line."""
    found: list[tuple[int, str, str]] = []

    heading = HEADING_RE.match(line)
    if heading:
        offset = heading.start("text")
        for column, path, kind in _hints_in_heading(heading.group("text")):
            found.append((offset + column, path, kind))

    for pattern, kind in ((BOLD_RE, "bold"), (LABEL_RE, "label")):
        for match in pattern.finditer(line):
            candidate = _clean(match.group("path"))
            if candidate:
                found.append((match.start("path"), candidate, kind))

    if not heading:
        match = LINE_START_BACKTICK_RE.match(line)
        candidate = _clean(match.group("path")) if match else None
        if candidate:
            found.append((match.start("path"), candidate, "backtick"))

    return found


def scan_hints(text_or_lines: str | Sequence[str], blocks: Sequence[CodeBlock]) -> list[PathHint]:
    """Scan the prose around code blocks for candidate paths.

    Lines inside a closed block (fence lines included) are never scanned,
    so a path mentioned in one block's code is not offered to another block.

    Args:
        text_or_lines: Raw input text, or its lines as split by the fence scanner
        blocks: Blocks found in the same text

    Returns:
        Unconsumed hints ordered by position in the text
    """
    if isinstance(text_or_lines, str):
        lines = re.split(r"\r?\n", text_or_lines)
    else:
        lines = list(text_or_lines)

    covered: set[int] = set()
    for block in blocks:
        if block.last_line_idx is not None:
            covered.update(range(block.first_line_idx, block.last_line_idx + 1))

    hints: list[PathHint] = []
    for idx, line in enumerate(lines):
        if idx in covered or not line.strip():
            continue
        seen: set[str] = set()
        ends_with_colon = line.rstrip().rstrip("*`").endswith(":")
        for column, candidate, kind in sorted(_hints_in_line(line)):
            path = normalize_path(candidate)
            if path in seen:
                continue
            seen.add(path)
            hints.append(
                PathHint(
                    path=path,
                    source_line_idx=idx,
                    column=column,
                    kind=kind,
                    introduces=kind == "heading" or ends_with_colon,
                )
            )

    return hints


def nearest_hint_before(
    hints: Sequence[PathHint], block: CodeBlock, language: str | None = None
) -> PathHint | None:
    """Nearest unconsumed, language-compatible hint above a block."""
    language = block.language if language is None else language
    for hint in reversed(hints):
        if hint.source_line_idx >= block.first_line_idx:
            continue
        if not hint.consumed and hint_matches_language(hint, language):
            return hint
    return None


def nearest_hint_after(
    hints: Sequence[PathHint],
    block: CodeBlock,
    limit_line_idx: int | None = None,
    language: str | None = None,
    skip_introductions: bool = False,
) -> PathHint | None:
    """Nearest unconsumed, language-compatible hint below a block.

    Args:
        hints: Hints ordered by position
        block: The block looking for a path
        limit_line_idx: Stop before this line (the next block's opening fence)
        language: Override for the block's language tag
        skip_introductions: Ignore hints that introduce the content below them
    """
    language = block.language if language is None else language
    end = block.last_line_idx if block.last_line_idx is not None else block.first_line_idx
    for hint in hints:
        if hint.source_line_idx <= end:
            continue
        if limit_line_idx is not None and hint.source_line_idx >= limit_line_idx:
            break
        if skip_introductions and hint.introduces:
            continue
        if not hint.consumed and hint_matches_language(hint, language):
            return hint
    return None
