"""Data models for the code-block extractor.

Defines the records that flow between the parsing stages:
- CodeBlock: one fenced region found by the fence scanner
- PathHint: a candidate path found in the prose around the blocks
- ParsedFile: one reconstructed file
- ParseResult: everything a single parse call returns
"""

from __future__ import annotations

from dataclasses import dataclass
from dataclasses import field
from typing import Any


@dataclass(frozen=True)
class CodeBlock:
    """One fenced code region.

    Attributes:
        language: Lowercase language tag from the info string (may be empty)
        explicit_path: Path given in the fence header (``lang:path``), if any
        content: Text between the fence lines, joined with ``\\n``
        first_line_idx: 0-based line index of the opening fence
        last_line_idx: 0-based line index of the closing fence, None if never closed
        fence_char: The fence character, a backtick or a tilde
        info: The raw info string following the opening fence
    """

    language: str
    explicit_path: str | None
    content: str
    first_line_idx: int
    last_line_idx: int | None
    fence_char: str = "`"
    info: str = ""

    @property
    def is_closed(self) -> bool:
        return self.last_line_idx is not None

    def covers(self, line_idx: int) -> bool:
        """Check whether a source line belongs to this block, fence lines included."""
        if self.last_line_idx is None:
            return False
        return self.first_line_idx <= line_idx <= self.last_line_idx


@dataclass
class PathHint:
    """A candidate path discovered outside any fence header.

    ``introduces`` marks hints that lead into what follows them (headings and
    lines ending in a colon); they are not offered to the block above when a
    block below exists.

    Only ``consumed`` changes after construction: it flips to True once the
    hint has been handed to a block, so each hint is used at most once.
    """

    path: str
    source_line_idx: int
    column: int = 0
    kind: str = "backtick"
    introduces: bool = False
    consumed: bool = False

    @property
    def position(self) -> tuple[int, int]:
        return (self.source_line_idx, self.column)


@dataclass(frozen=True)
class ParsedFile:
    """A reconstructed file: relative path, language tag and content."""

    path: str
    content: str
    language: str

    @property
    def folder(self) -> str:
        """Folder part of the path ('' for files at the root)."""
        head, _, _ = self.path.rpartition("/")
        return head

    @property
    def name(self) -> str:
        return self.path.rpartition("/")[2]

    def to_dict(self) -> dict[str, Any]:
        """Serialize to dictionary."""
        return {"path": self.path, "language": self.language, "content": self.content}


@dataclass(frozen=True)
class ParseResult:
    """Result of one parse call.

    Attributes:
        files: Parsed files sorted by path
        folder_structure: Directory-tree listing set aside from the input, if any
    """

    files: tuple[ParsedFile, ...] = field(default_factory=tuple)
    folder_structure: str | None = None

    def __len__(self) -> int:
        return len(self.files)

    def __iter__(self):
        return iter(self.files)

    def paths(self) -> list[str]:
        return [f.path for f in self.files]

    def get(self, path: str) -> ParsedFile | None:
        """Look up a parsed file by its exact path."""
        for parsed in self.files:
            if parsed.path == path:
                return parsed
        return None

    def to_dict(self) -> dict[str, Any]:
        """Serialize to dictionary."""
        return {
            "files": [f.to_dict() for f in self.files],
            "folder_structure": self.folder_structure,
        }
