"""Folder-tree views of parsed files."""

from __future__ import annotations

from collections.abc import Iterable

from rich.text import Text
from rich.tree import Tree

from .models import ParsedFile


def build_file_tree(files: Iterable[ParsedFile]) -> dict[str, list[ParsedFile]]:
    """Group files by folder.

    Args:
        files: Parsed files

    Returns:
        Mapping of folder path ('' for the root) to the files directly inside it,
        in input order
    """
    tree: dict[str, list[ParsedFile]] = {}
    for parsed in files:
        tree.setdefault(parsed.folder, []).append(parsed)
    return tree


def _nested(files: Iterable[ParsedFile]) -> dict:
    root: dict = {}
    for parsed in files:
        node = root
        *folders, name = parsed.path.split("/")
        for folder in folders:
            child = node.get(folder)
            if not isinstance(child, dict):
                child = {}
                node[folder] = child
            node = child
        node.setdefault(name, parsed)
    return root


def _add_nodes(branch: Tree, node: dict) -> None:
    folders = sorted(k for k, v in node.items() if isinstance(v, dict))
    names = sorted(k for k, v in node.items() if not isinstance(v, dict))
    for folder in folders:
        child = branch.add(Text(f"{folder}/", style="bold blue"))
        _add_nodes(child, node[folder])
    for name in names:
        parsed = node[name]
        label = Text(name)
        label.append(f"  {parsed.language}", style="dim")
        branch.add(label)


def render_file_tree(files: Iterable[ParsedFile], title: str = ".") -> Tree:
    """Build a Rich tree: folders first, then files, each alphabetical."""
    tree = Tree(Text(title, style="bold"), guide_style="dim")
    _add_nodes(tree, _nested(files))
    return tree
