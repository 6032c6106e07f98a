"""Parse generated markdown into a list of files.

Runs the fence scanner, gathers path evidence for every block, links blocks
to prose hints and synthesizes names for whatever is left:

1. Explicit fence header path (```lang:path)
2. Leading path annotation inside the block (// path, # File: path, ...)
3. Nearest unconsumed prose hint before the block, then after it
4. Fallback name: untitled_<n>.<ext>

Every closed block ends up as exactly one file. Output is sorted by path,
so the order blocks appear in never leaks into the result.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Sequence
from dataclasses import dataclass
from typing import Literal

from pydantic import BaseModel
from pydantic import Field

from .associator import find_leading_path
from .associator import nearest_hint_after
from .associator import nearest_hint_before
from .associator import scan_hints
from .fences import scan_blocks
from .fences import split_lines
from .languages import FALLBACK_LANGUAGE
from .languages import extension_for_language
from .languages import language_for_path
from .models import CodeBlock
from .models import ParsedFile
from .models import ParseResult
from .models import PathHint

logger = logging.getLogger(__name__)

FOLDER_STRUCTURE_LANGUAGES = frozenset({"text", "tree"})

TREE_GLYPH_RE = re.compile(r"[├└]──")
TREE_ENTRY_RE = re.compile(r"^(?P<indent>[\s│]*)(?:[├└]──\s*)?(?P<name>[\w.\-@]+/?)\s*(?:#.*)?$")


class ParserOptions(BaseModel):
    """Options for a parse call."""

    fallback_stem: Literal["untitled", "generated_file"] = Field(
        default="untitled", description="Stem for synthesized file names"
    )
    detect_folder_structure: bool = Field(
        default=True, description="Set aside a directory-tree text block instead of emitting it as a file"
    )
    strip_path_comments: bool = Field(
        default=True, description="Remove a leading path annotation line from file content"
    )


@dataclass
class _Slot:
    """Working state for one block while paths are being resolved."""

    block: CodeBlock
    content: str
    path: str | None = None
    source: str = ""


def looks_like_folder_tree(content: str) -> bool:
    """Check whether a text block is a directory listing rather than a file.

    Accepts box-drawing trees (``├──``/``└──`` on at least half the lines) and
    plain indented listings with at least one ``name/`` directory entry and
    one nested entry. ASCII pipes and dashes are not tree glyphs, so markdown
    tables stay files.
    """
    lines = [line for line in content.split("\n") if line.strip()]
    if len(lines) < 2:
        return False

    glyph_lines = sum(1 for line in lines if TREE_GLYPH_RE.search(line))
    if glyph_lines >= max(1, len(lines) // 2):
        return True

    entries = [TREE_ENTRY_RE.match(line) for line in lines]
    if not all(entries):
        return False
    has_dir = any(m.group("name").endswith("/") for m in entries if m)
    has_nesting = len({len(m.group("indent")) for m in entries if m}) > 1
    return has_dir and has_nesting


def _split_folder_structure(
    blocks: list[CodeBlock], options: ParserOptions
) -> tuple[list[CodeBlock], str | None]:
    if not options.detect_folder_structure:
        return blocks, None
    for i, block in enumerate(blocks):
        if block.explicit_path or block.language not in FOLDER_STRUCTURE_LANGUAGES:
            continue
        if looks_like_folder_tree(block.content):
            logger.debug(f"Folder structure block at line {block.first_line_idx}")
            return blocks[:i] + blocks[i + 1 :], block.content.strip("\n")
    return blocks, None


def _resolve_in_block(slot: _Slot, options: ParserOptions) -> None:
    block = slot.block
    if block.explicit_path:
        slot.path = block.explicit_path
        slot.source = "header"
        return

    found = find_leading_path(block)
    if found:
        slot.path, stripped = found
        slot.source = "comment"
        if options.strip_path_comments:
            slot.content = stripped


def _link_hints(slots: Sequence[_Slot], hints: list[PathHint]) -> None:
    claimed = {slot.path for slot in slots if slot.path}
    for hint in hints:
        if hint.path in claimed:
            hint.consumed = True

    for i, slot in enumerate(slots):
        if slot.path:
            continue
        next_start = slots[i + 1].block.first_line_idx if i + 1 < len(slots) else None

        hint = nearest_hint_before(hints, slot.block)
        direction = "before"
        if hint is None:
            hint = nearest_hint_after(
                hints, slot.block, limit_line_idx=next_start, skip_introductions=next_start is not None
            )
            direction = "after"
        if hint is None:
            continue

        hint.consumed = True
        slot.path = hint.path
        slot.source = f"hint-{direction}"
        logger.debug(
            f"Block at line {slot.block.first_line_idx} linked to {hint.path!r} "
            f"({hint.kind} hint {direction}, line {hint.source_line_idx})"
        )


def _suffixed(path: str, n: int) -> str:
    folder, slash, name = path.rpartition("/")
    stem, dot, ext = name.rpartition(".")
    if not dot or not stem:
        stem, ext = name, ""
    renamed = f"{stem}_{n}.{ext}" if ext else f"{stem}_{n}"
    return f"{folder}{slash}{renamed}"


def _resolve_collisions(slots: Sequence[_Slot]) -> None:
    taken = {slot.path for slot in slots if slot.path}
    used: set[str] = set()
    for slot in slots:
        if not slot.path:
            continue
        if slot.path not in used:
            used.add(slot.path)
            continue
        n = 2
        while _suffixed(slot.path, n) in taken or _suffixed(slot.path, n) in used:
            n += 1
        renamed = _suffixed(slot.path, n)
        logger.warning(
            f"Path {slot.path!r} already claimed; block at line {slot.block.first_line_idx} saved as {renamed!r}"
        )
        slot.path = renamed
        slot.source = "collision"
        used.add(renamed)


def _assign_fallback_names(slots: Sequence[_Slot], options: ParserOptions) -> None:
    used = {slot.path for slot in slots if slot.path}
    counter = 1
    for slot in slots:
        if slot.path:
            continue
        ext = extension_for_language(slot.block.language)
        while True:
            candidate = f"{options.fallback_stem}_{counter}.{ext}"
            counter += 1
            if candidate not in used:
                break
        used.add(candidate)
        slot.path = candidate
        slot.source = "fallback"


def parse(text: str, options: ParserOptions | None = None) -> ParseResult:
    """Reconstruct files from free-form text with fenced code blocks.

    Never raises for any input string: unterminated fences are dropped,
    blocks without a recoverable path get a fallback name, and colliding
    paths get a numeric suffix.

    Args:
        text: Raw text, typically an assistant's markdown reply
        options: Parser options (defaults used if None)

    Returns:
        ParseResult with files sorted by path and the folder structure, if any
    """
    options = options or ParserOptions()
    if not text or not text.strip():
        return ParseResult()

    lines = split_lines(text)
    all_blocks = scan_blocks(text)
    blocks, folder_structure = _split_folder_structure(all_blocks, options)

    slots = [_Slot(block=block, content=block.content) for block in blocks]
    for slot in slots:
        _resolve_in_block(slot, options)

    hints = scan_hints(lines, all_blocks)
    _link_hints(slots, hints)
    _resolve_collisions(slots)
    _assign_fallback_names(slots, options)

    files = [
        ParsedFile(
            path=slot.path or "",
            content=slot.content,
            language=slot.block.language or language_for_path(slot.path or "") or FALLBACK_LANGUAGE,
        )
        for slot in slots
    ]
    files.sort(key=lambda f: f.path)

    logger.debug(f"Parsed {len(files)} file(s) from {len(lines)} line(s)")
    return ParseResult(files=tuple(files), folder_structure=folder_structure)
