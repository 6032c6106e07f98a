"""CLI commands for unfence."""

__all__ = [
    "config",
    "export",
    "inspect",
]
