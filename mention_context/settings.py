"""Settings manager for settings.yaml files.

Manages three-scope settings system:
- User global (~/.mention-context/settings.yaml)
- Project (.mention-context/settings.yaml)
- Local (.mention-context/settings.local.yaml)

Two sections are understood: ``engine`` (heuristic constants shared by the
resolution and optimization engines) and ``optimization`` (the default
strategy used by the pipeline and CLI).
"""

import logging
from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel
from pydantic import ConfigDict
from pydantic import Field
from pydantic import ValidationError

from .errors import SettingsError
from .estimator import CharRatioEstimator

logger = logging.getLogger(__name__)

SETTINGS_DIR_NAME = ".mention-context"
TRUNCATION_MARKER = "... [content truncated by context optimizer] ..."


class EngineSettings(BaseModel):
    """Heuristic constants. Defaults are relied upon by callers; change with care."""

    model_config = ConfigDict(frozen=True)

    chars_per_token: int = Field(default=4, gt=0)
    lines_per_minute: int = Field(default=50, gt=0)
    default_folder_limit: int = Field(default=10, gt=0)
    truncate_ratio: float = Field(default=0.7, gt=0, lt=1)
    head_ratio: float = Field(default=0.6, ge=0, le=1)
    min_truncated_lines: int = Field(default=2, ge=1)
    symbol_budget_ratio: float = Field(default=0.2, ge=0, le=1)
    symbol_overhead: int = Field(default=20, ge=0)
    truncation_marker: str = TRUNCATION_MARKER

    def estimator(self) -> CharRatioEstimator:
        return CharRatioEstimator(self.chars_per_token)


class OptimizationDefaults(BaseModel):
    """Strategy defaults applied when a caller does not pass its own."""

    model_config = ConfigDict(frozen=True)

    max_context_tokens: int = Field(default=100_000, gt=0)
    prioritize_recent_files: bool = True
    include_file_metadata: bool = True
    truncate_content: bool = True
    preserve_symbols: bool = True


class SettingsManager:
    """Manages settings across user/project/local scopes."""

    def __init__(self, settings_dir: Path | None = None, user_dir: Path | None = None):
        """Initialize settings manager with standard paths.

        Args:
            settings_dir: Base directory for project/local settings (for testing).
                If None, uses .mention-context in current directory.
            user_dir: Base directory for user settings (for testing).
                If None, uses ~/.mention-context.
        """
        if settings_dir is None:
            settings_dir = Path(SETTINGS_DIR_NAME)
        if user_dir is None:
            user_dir = Path.home() / SETTINGS_DIR_NAME

        self.user_settings_file = user_dir / "settings.yaml"
        self.project_settings_file = settings_dir / "settings.yaml"
        self.local_settings_file = settings_dir / "settings.local.yaml"

    def get_engine_settings(self) -> EngineSettings:
        return self._load_section("engine", EngineSettings)

    def get_optimization_defaults(self) -> OptimizationDefaults:
        return self._load_section("optimization", OptimizationDefaults)

    def set_value(self, section: str, key: str, value: Any, scope: str = "project") -> None:
        """Write a single setting.

        Args:
            section: Top-level section, e.g. "engine"
            key: Key within the section
            value: Value to store
            scope: "user", "project", or "local"
        """
        file_map = {
            "user": self.user_settings_file,
            "project": self.project_settings_file,
            "local": self.local_settings_file,
        }
        if scope not in file_map:
            raise ValueError(f"Unknown settings scope: {scope}")

        self._update_settings(file_map[scope], {section: {key: value}})
        logger.info(f"Set {section}.{key} in {scope} settings")

    def get_merged_settings(self) -> dict[str, Any]:
        """Get merged settings from all scopes.

        Merge order (later overrides earlier):
        1. User settings
        2. Project settings
        3. Local settings

        Returns:
            Merged settings dictionary
        """
        merged: dict[str, Any] = {}
        for path in (self.user_settings_file, self.project_settings_file, self.local_settings_file):
            data = self._read_settings(path)
            if data:
                merged = self._deep_merge(merged, data)
        return merged

    def _load_section(self, section: str, model: type[BaseModel]) -> Any:
        data = self.get_merged_settings().get(section) or {}
        if not isinstance(data, dict):
            raise SettingsError(f"Settings section '{section}' must be a mapping, got {type(data).__name__}")
        try:
            return model.model_validate(data)
        except ValidationError as e:
            raise SettingsError(f"Invalid '{section}' settings: {e}") from e

    def _read_settings(self, path: Path) -> dict[str, Any] | None:
        """Read settings from YAML file.

        Args:
            path: Path to settings file

        Returns:
            Settings dict or None if file doesn't exist or cannot be parsed
        """
        if not path.exists():
            return None

        try:
            with open(path, encoding="utf-8") as f:
                data = yaml.safe_load(f)
                return data if data else {}
        except (OSError, yaml.YAMLError) as e:
            logger.warning(f"Failed to read settings from {path}: {e}")
            return None

    def _write_settings(self, path: Path, settings: dict[str, Any]) -> None:
        path.parent.mkdir(parents=True, exist_ok=True)
        try:
            with open(path, "w", encoding="utf-8") as f:
                yaml.dump(settings, f, default_flow_style=False, sort_keys=False)
        except OSError as e:
            logger.error(f"Failed to write settings to {path}: {e}")
            raise

    def _update_settings(self, path: Path, updates: dict[str, Any]) -> None:
        """Update settings file with new values (deep merge)."""
        existing = self._read_settings(path) or {}
        merged = self._deep_merge(existing, updates)
        self._write_settings(path, merged)

    def _deep_merge(self, base: dict[str, Any], overlay: dict[str, Any]) -> dict[str, Any]:
        """Deep merge two dictionaries; overlay wins on conflicts."""
        result = base.copy()
        for key, value in overlay.items():
            if key in result and isinstance(result[key], dict) and isinstance(value, dict):
                result[key] = self._deep_merge(result[key], value)
            else:
                result[key] = value
        return result
