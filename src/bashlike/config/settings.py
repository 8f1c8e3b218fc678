"""Configuration system for bashlike.

Implements layered configuration with the following priority (high → low):
1) CLI overrides (explicit flags)
2) Environment variables (prefix: BASHLIKE_, sections split on "__")
3) User config file (~/.bashlike/config.yaml)
4) Project config file (bashlike.yaml in the working directory)
5) Default config file (configs/default.yaml)
6) Built-in defaults (fallback)
"""

from __future__ import annotations

import json
import os
from pathlib import Path
from typing import Any, Literal

import yaml
from pydantic import BaseModel, Field, ValidationError

from bashlike.config.defaults import (
    DEFAULT_CONFIG,
    DEFAULT_CONFIG_RELATIVE_PATH,
    ENV_PREFIX,
    PROJECT_CONFIG_FILENAME,
    USER_CONFIG_PATH,
)


class GeneralSettings(BaseModel):
    verbosity: str = Field(default="warning")
    output_format: str = Field(default="text")
    color_enabled: bool = Field(default=True)


class ExecutionSettings(BaseModel):
    timeout_seconds: float = Field(default=0, ge=0)
    poll_interval_seconds: float = Field(default=0.05, gt=0)


class FilesSettings(BaseModel):
    encoding: str = Field(default="utf-8")
    dir_mode: int = Field(default=0o755, ge=0, le=0o7777)
    file_mode: int = Field(default=0o644, ge=0, le=0o7777)


class Settings(BaseModel):
    general: GeneralSettings = Field(default_factory=GeneralSettings)
    execution: ExecutionSettings = Field(default_factory=ExecutionSettings)
    files: FilesSettings = Field(default_factory=FilesSettings)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Settings:
        return cls.model_validate(data)


def _deep_merge(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    """Recursively merge override into base, returning a new dict."""

    result = {**base}
    for key, value in override.items():
        if isinstance(value, dict) and isinstance(result.get(key), dict):
            result[key] = _deep_merge(result[key], value)
        else:
            result[key] = value
    return result


def _load_yaml(path: Path) -> dict[str, Any]:
    if not path.exists():
        return {}
    try:
        with path.open("r", encoding="utf-8") as handle:
            return yaml.safe_load(handle) or {}
    except yaml.YAMLError as exc:
        raise ValueError(f"Failed to parse YAML config at {path}: {exc}") from exc


def _ensure_dir(path: Path) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)


def _parse_scalar(value: str) -> Any:
    """Best-effort parsing for CLI/env string values."""

    trimmed = value.strip()
    try:
        return json.loads(trimmed)
    except json.JSONDecodeError:
        pass

    lowered = trimmed.lower()
    if lowered in {"true", "false"}:
        return lowered == "true"
    if lowered in {"none", "null"}:
        return None
    return trimmed


def _set_nested(target: dict[str, Any], path: list[str], value: Any) -> None:
    current = target
    for key in path[:-1]:
        current = current.setdefault(key, {})
    current[path[-1]] = value


def _get_nested(data: dict[str, Any], path: list[str]) -> Any:
    current: Any = data
    for key in path:
        if not isinstance(current, dict) or key not in current:
            raise KeyError(".".join(path))
        current = current[key]
    return current


def _validate(data: dict[str, Any]) -> Settings:
    try:
        return Settings.from_dict(data)
    except ValidationError as exc:
        raise ValueError(f"Invalid configuration: {exc}") from exc


def _check_known_key(parts: list[str]) -> None:
    """Raise KeyError unless ``parts`` names a leaf field of Settings."""

    model: type[BaseModel] | None = Settings
    for part in parts:
        field = model.model_fields.get(part) if model is not None else None
        if field is None:
            raise KeyError(".".join(parts))
        annotation = field.annotation
        model = (
            annotation
            if isinstance(annotation, type) and issubclass(annotation, BaseModel)
            else None
        )
    if model is not None:
        raise KeyError(".".join(parts))


class ConfigService:
    """Loads, merges, and persists bashlike configuration.

    The project file is looked up in ``project_dir``, or in the current
    working directory when that is unset.
    """

    def __init__(
        self,
        env_prefix: str = ENV_PREFIX,
        root_dir: Path | None = None,
        user_config_path: Path | None = None,
        project_dir: Path | None = None,
    ):
        self.env_prefix = env_prefix
        self.root_dir = root_dir or self._compute_project_root()
        self.default_config_path = self.root_dir / DEFAULT_CONFIG_RELATIVE_PATH
        self.user_config_path = user_config_path or USER_CONFIG_PATH
        self.project_dir = project_dir

    @property
    def project_config_path(self) -> Path:
        return (self.project_dir or Path.cwd()) / PROJECT_CONFIG_FILENAME

    def file_layers(self) -> list[tuple[str, Path]]:
        """Config files in merge order, lowest priority first."""
        return [
            ("default", self.default_config_path),
            ("project", self.project_config_path),
            ("user", self.user_config_path),
        ]

    def load(self, cli_overrides: dict[str, Any] | None = None) -> Settings:
        data = DEFAULT_CONFIG
        for _, path in self.file_layers():
            data = _deep_merge(data, _load_yaml(path))

        data = _deep_merge(data, self._env_overrides())
        if cli_overrides:
            data = _deep_merge(data, cli_overrides)

        return _validate(data)

    def save(self, settings: Settings, scope: Literal["user", "project"] = "user") -> Path:
        target = self._scope_path(scope)
        _ensure_dir(target)
        with target.open("w", encoding="utf-8") as handle:
            yaml.safe_dump(settings.model_dump(), handle, sort_keys=False)
        return target

    def set_value(
        self, key_path: str, value: Any, scope: Literal["user", "project"] = "user"
    ) -> Path:
        """Write one value into the scoped file.

        Raises KeyError for a path that is not a settings field and
        ValueError for a value that fails validation; the file is left
        untouched in both cases.
        """
        parts = self._normalize_key_path(key_path)
        _check_known_key(parts)

        target = self._scope_path(scope)
        current_data = _load_yaml(target)
        _set_nested(current_data, parts, value)
        _validate(_deep_merge(DEFAULT_CONFIG, current_data))

        _ensure_dir(target)
        with target.open("w", encoding="utf-8") as handle:
            yaml.safe_dump(current_data, handle, sort_keys=False)
        return target

    def get_value(self, key_path: str, cli_overrides: dict[str, Any] | None = None) -> Any:
        data = self.load(cli_overrides=cli_overrides).model_dump()
        parts = self._normalize_key_path(key_path)
        return _get_nested(data, parts)

    def reset(self, scope: Literal["user", "project"] = "user") -> None:
        target = self._scope_path(scope)
        if target.exists():
            target.unlink()

    def _scope_path(self, scope: str) -> Path:
        return self.user_config_path if scope == "user" else self.project_config_path

    def _env_overrides(self) -> dict[str, Any]:
        """Collect ``<PREFIX>_<SECTION>__<KEY>`` variables.

        Names without the ``__`` separator are ignored, since field names
        themselves contain single underscores.
        """
        overrides: dict[str, Any] = {}
        prefix = f"{self.env_prefix}_"
        for key, raw_value in os.environ.items():
            if not key.startswith(prefix):
                continue
            segments = key[len(prefix) :].split("__")
            if len(segments) < 2 or not all(segments):
                continue
            path = [segment.lower() for segment in segments]
            _set_nested(overrides, path, _parse_scalar(raw_value))
        return overrides

    def _normalize_key_path(self, key_path: str) -> list[str]:
        if not key_path:
            raise ValueError("Key path cannot be empty")
        return [segment.strip() for segment in key_path.split(".") if segment.strip()]

    def _compute_project_root(self) -> Path:
        # settings.py -> config -> bashlike -> src -> project
        return Path(__file__).resolve().parents[3]


config_service = ConfigService()


_cached_settings: Settings | None = None


def get_settings() -> Settings:
    """Get the global settings instance."""
    global _cached_settings
    if _cached_settings is None:
        _cached_settings = config_service.load()
    return _cached_settings


def reload_settings() -> Settings:
    """Reload settings from configuration sources."""
    global _cached_settings
    _cached_settings = config_service.load()
    return _cached_settings


def set_settings(settings: Settings) -> None:
    """Install ``settings`` as the global instance (e.g. after CLI overrides)."""
    global _cached_settings
    _cached_settings = settings
