"""Settings management for unfence.

Simple, scope-aware YAML settings:
1. local (.unfence/settings.local.yaml) - gitignored, machine-specific
2. project (.unfence/settings.yaml) - committed, team-shared
3. global (~/.unfence/settings.yaml) - user defaults

Most specific scope wins.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any
from typing import Literal

import yaml
from pydantic import ValidationError

from .errors import SettingsError
from .parser import ParserOptions

logger = logging.getLogger(__name__)

Scope = Literal["local", "project", "global"]

DEFAULT_OUTPUT_DIR = "unfenced"
DEFAULT_ZIP_NAME = "project"


@dataclass
class SettingsPaths:
    """Standard paths for settings files."""

    global_settings: Path
    project_settings: Path
    local_settings: Path

    @classmethod
    def default(cls) -> SettingsPaths:
        """Create default paths for the standard unfence layout."""
        return cls(
            global_settings=Path.home() / ".unfence" / "settings.yaml",
            project_settings=Path.cwd() / ".unfence" / "settings.yaml",
            local_settings=Path.cwd() / ".unfence" / "settings.local.yaml",
        )


class AppSettings:
    """Settings manager with scope-aware merging.

    Usage:
        settings = AppSettings()
        options = settings.get_parser_options()
        settings.set_value("export.output_dir", "out", scope="project")
    """

    def __init__(self, paths: SettingsPaths | None = None) -> None:
        self.paths = paths or SettingsPaths.default()

    def get_merged_settings(self) -> dict[str, Any]:
        """Load and merge settings from all scopes."""
        result: dict[str, Any] = {}
        for path in [self.paths.global_settings, self.paths.project_settings, self.paths.local_settings]:
            if path.exists():
                try:
                    with open(path, encoding="utf-8") as f:
                        content = yaml.safe_load(f) or {}
                except (OSError, yaml.YAMLError) as e:
                    logger.warning(f"Skipping unreadable settings file {path}: {e}")
                    continue
                if not isinstance(content, dict):
                    logger.warning(f"Skipping settings file {path}: top level is not a mapping")
                    continue
                result = self._deep_merge(result, content)
        return result

    # ----- Parser settings -----

    def get_parser_options(self) -> ParserOptions:
        """Build ParserOptions from the merged ``parser`` section."""
        section = self.get_merged_settings().get("parser") or {}
        if not isinstance(section, dict):
            logger.warning("Ignoring 'parser' settings: expected a mapping")
            return ParserOptions()
        try:
            return ParserOptions.model_validate(section)
        except ValidationError as e:
            logger.warning(f"Invalid parser settings, using defaults: {e}")
            return ParserOptions()

    # ----- Export settings -----

    def get_export_settings(self) -> dict[str, Any]:
        """Get export section with defaults filled in."""
        section = self.get_merged_settings().get("export") or {}
        if not isinstance(section, dict):
            section = {}
        return {
            "output_dir": section.get("output_dir", DEFAULT_OUTPUT_DIR),
            "zip_name": section.get("zip_name", DEFAULT_ZIP_NAME),
            "overwrite": bool(section.get("overwrite", False)),
        }

    # ----- Generic dotted-key access -----

    def get_value(self, key: str) -> Any:
        """Get a merged value by dotted key (e.g. ``parser.fallback_stem``)."""
        node: Any = self.get_merged_settings()
        for part in key.split("."):
            if not isinstance(node, dict) or part not in node:
                return None
            node = node[part]
        return node

    def set_value(self, key: str, value: Any, scope: Scope = "global") -> None:
        """Set a value by dotted key at the specified scope.

        Raises:
            SettingsError: If the scope's file exists but cannot be parsed
        """
        settings = self._read_scope(scope)
        node = settings
        *parents, leaf = key.split(".")
        for part in parents:
            child = node.get(part)
            if not isinstance(child, dict):
                child = {}
                node[part] = child
            node = child
        node[leaf] = value
        self._write_scope(scope, settings)

    # ----- Scope utilities -----

    def _get_scope_path(self, scope: Scope) -> Path:
        """Get settings file path for scope."""
        return {
            "local": self.paths.local_settings,
            "project": self.paths.project_settings,
            "global": self.paths.global_settings,
        }[scope]

    def _read_scope(self, scope: Scope) -> dict[str, Any]:
        """Read settings from a specific scope for an update.

        Raises:
            SettingsError: If the file is not valid YAML or not a mapping, so an
                update never replaces a file it could not read
        """
        path = self._get_scope_path(scope)
        if not path.exists():
            return {}
        try:
            with open(path, encoding="utf-8") as f:
                content = yaml.safe_load(f) or {}
        except yaml.YAMLError as e:
            raise SettingsError(f"Cannot update {path}: invalid YAML ({e})") from e
        if not isinstance(content, dict):
            raise SettingsError(f"Cannot update {path}: top level is not a mapping")
        return content

    def _write_scope(self, scope: Scope, settings: dict[str, Any]) -> None:
        """Write settings to a specific scope."""
        path = self._get_scope_path(scope)
        path.parent.mkdir(parents=True, exist_ok=True)
        with open(path, "w", encoding="utf-8") as f:
            yaml.safe_dump(settings, f, default_flow_style=False)

    def _deep_merge(self, base: dict[str, Any], overlay: dict[str, Any]) -> dict[str, Any]:
        """Deep merge two dicts, overlay wins."""
        result = base.copy()
        for key, value in overlay.items():
            if key in result and isinstance(result[key], dict) and isinstance(value, dict):
                result[key] = self._deep_merge(result[key], value)
            else:
                result[key] = value
        return result
