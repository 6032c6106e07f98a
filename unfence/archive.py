"""Write parsed files to a directory or a zip archive."""

from __future__ import annotations

import contextlib
import io
import logging
import re
import tempfile
import zipfile
from collections.abc import Iterable
from pathlib import Path

from .errors import OutputExistsError
from .errors import PathConflictError
from .errors import UnsafePathError
from .models import ParsedFile

logger = logging.getLogger(__name__)

_DRIVE_RE = re.compile(r"^[A-Za-z]:")


def safe_relative_path(path: str) -> str:
    """Validate that a parsed path stays inside its destination.

    Args:
        path: Forward-slash relative path

    Returns:
        The path unchanged

    Raises:
        UnsafePathError: If the path is empty, absolute, has a drive letter,
            or contains empty or ``..`` segments
    """
    if not path or path.startswith(("/", "\\")) or _DRIVE_RE.match(path):
        raise UnsafePathError(path)
    parts = path.replace("\\", "/").split("/")
    if any(part in ("", ".", "..") for part in parts):
        raise UnsafePathError(path)
    return path


def check_path_conflicts(paths: Iterable[str]) -> None:
    """Reject a path that is also used as a folder by another path.

    Raises:
        PathConflictError: If e.g. both ``src`` and ``src/app.py`` are present
    """
    paths = list(paths)
    folders: dict[str, str] = {}
    for path in paths:
        parts = path.split("/")
        for depth in range(1, len(parts)):
            folders.setdefault("/".join(parts[:depth]), path)
    for path in paths:
        if path in folders:
            raise PathConflictError(path, folders[path])


def write_files(
    files: Iterable[ParsedFile],
    output_dir: str | Path,
    *,
    overwrite: bool = False,
) -> list[Path]:
    """Write parsed files under a directory.

    All paths are validated before anything is written, so an unsafe path,
    a file/folder conflict or an existing file leaves the directory untouched.

    Args:
        files: Parsed files
        output_dir: Root directory for the files (created if missing)
        overwrite: Replace files that already exist

    Returns:
        Paths of the files written

    Raises:
        UnsafePathError: If a path would escape output_dir
        PathConflictError: If a path is needed as both a file and a folder,
            in the parsed files or on disk
        OutputExistsError: If a file exists and overwrite is False
    """
    root = Path(output_dir)
    files = list(files)
    check_path_conflicts(safe_relative_path(parsed.path) for parsed in files)

    planned: list[tuple[Path, ParsedFile]] = []
    for parsed in files:
        target = root / parsed.path
        if target.is_dir():
            raise PathConflictError(parsed.path, str(target))
        for parent in target.relative_to(root).parents:
            if parent != Path(".") and (root / parent).is_file():
                raise PathConflictError(parent.as_posix(), parsed.path)
        if target.exists() and not overwrite:
            raise OutputExistsError(str(target))
        planned.append((target, parsed))

    written: list[Path] = []
    for target, parsed in planned:
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_text(parsed.content, encoding="utf-8", newline="")
        written.append(target)
        logger.debug(f"Wrote {target}")

    logger.info(f"Wrote {len(written)} file(s) to {root}")
    return written


def zip_bytes(files: Iterable[ParsedFile]) -> bytes:
    """Build a zip archive in memory, one entry per file at its path."""
    files = list(files)
    check_path_conflicts(safe_relative_path(parsed.path) for parsed in files)
    buffer = io.BytesIO()
    with zipfile.ZipFile(buffer, "w", compression=zipfile.ZIP_DEFLATED) as archive:
        for parsed in files:
            archive.writestr(safe_relative_path(parsed.path), parsed.content.encode("utf-8"))
    return buffer.getvalue()


def build_zip(files: Iterable[ParsedFile], destination: str | Path, *, overwrite: bool = False) -> Path:
    """Write a zip archive of the parsed files.

    The archive is written to a temp file next to the destination and
    renamed into place, so a failed write never leaves a partial archive.

    Raises:
        UnsafePathError: If a path would escape the archive root
        PathConflictError: If a path is needed as both a file and a folder
        OutputExistsError: If destination exists and overwrite is False
    """
    target = Path(destination)
    if target.exists() and not overwrite:
        raise OutputExistsError(str(target))

    payload = zip_bytes(files)
    target.parent.mkdir(parents=True, exist_ok=True)

    with tempfile.NamedTemporaryFile(
        mode="wb", dir=target.parent, prefix=f"{target.stem}_", suffix=".tmp", delete=False
    ) as tmp_file:
        temp_path = Path(tmp_file.name)
        try:
            tmp_file.write(payload)
            tmp_file.flush()
        except Exception as e:
            with contextlib.suppress(Exception):
                temp_path.unlink()
            raise OSError(f"Failed to write archive: {e}") from e

    temp_path.replace(target)
    logger.info(f"Wrote archive {target} ({len(payload)} bytes)")
    return target
