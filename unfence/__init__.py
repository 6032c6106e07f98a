"""unfence - rebuild files from fenced code blocks in generated markdown."""

from .associator import find_leading_path
from .associator import scan_hints
from .fences import scan_blocks
from .models import CodeBlock
from .models import ParsedFile
from .models import ParseResult
from .models import PathHint
from .parser import ParserOptions
from .parser import parse

__all__ = [
    "CodeBlock",
    "ParseResult",
    "ParsedFile",
    "ParserOptions",
    "PathHint",
    "find_leading_path",
    "parse",
    "scan_blocks",
    "scan_hints",
]
