"""Exceptions raised by the input and export layers.

The parser itself never raises; these cover reading sources and writing
parsed files to disk.
"""


class UnfenceError(Exception):
    """Base class for unfence errors."""


class SourceError(UnfenceError):
    """Input text could not be read (missing file, empty clipboard)."""


class UnsafePathError(UnfenceError):
    """A parsed path would escape the output directory."""

    def __init__(self, path: str):
        super().__init__(f"Refusing to write unsafe path: {path!r}")
        self.path = path


class OutputExistsError(UnfenceError):
    """An output target exists and overwriting was not requested."""

    def __init__(self, path: str):
        super().__init__(f"Output already exists: {path} (use --force to overwrite)")
        self.path = path


class PathConflictError(UnfenceError):
    """A parsed path is needed both as a file and as a folder."""

    def __init__(self, path: str, other: str):
        super().__init__(f"Path {path!r} is needed both as a file and as a folder (for {other!r})")
        self.path = path
        self.other = other


class SettingsError(UnfenceError):
    """A settings file cannot be read back for an update."""
