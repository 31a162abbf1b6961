"""Configuration loading for apidocgen (.apidocgen.yml)."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence

import yaml

CONFIG_FILENAME = ".apidocgen.yml"
DEFAULT_TITLE = "API Documentation"
DEFAULT_OUTPUT_SUBDIR = "docs"


class ConfigError(RuntimeError):
    """Raised when the configuration file cannot be parsed."""


@dataclass
class ApiDocConfig:
    """Represents the settings defined in .apidocgen.yml."""

    root: Path
    title: str = DEFAULT_TITLE
    output_dir: Optional[Path] = None
    output_subdir: str = DEFAULT_OUTPUT_SUBDIR
    templates_dir: Optional[Path] = None
    extensions: List[str] = field(default_factory=list)
    exclude_paths: List[str] = field(default_factory=list)
    packages: Dict[str, str] = field(default_factory=dict)


def load_config(config_path: Path) -> ApiDocConfig:
    """Load configuration from disk; a missing file yields defaults."""
    config_file = _resolve_config_path(config_path)
    root = config_file.parent.resolve()

    if not config_file.exists():
        return ApiDocConfig(root=root)

    data = _read_config(config_file)
    if not isinstance(data, dict):
        raise ConfigError(f"{CONFIG_FILENAME} must contain a mapping at the root")

    config = ApiDocConfig(root=root)

    title = _as_str(data.get("title"))
    if title:
        config.title = title

    output_dir = _as_str(data.get("output_dir"))
    if output_dir:
        config.output_dir = root / output_dir

    output_subdir = _as_str(data.get("output_subdir"))
    if output_subdir:
        config.output_subdir = output_subdir

    templates_dir = _as_str(data.get("templates_dir"))
    if templates_dir:
        config.templates_dir = root / templates_dir

    config.extensions = [_normalise_suffix(item) for item in _as_str_list(data.get("extensions"))]
    config.exclude_paths = _as_str_list(data.get("exclude_paths"))
    config.packages = _as_str_mapping(data.get("packages"))
    return config


def _resolve_config_path(config_path: Path) -> Path:
    config_path = config_path.expanduser()
    if config_path.is_dir():
        return (config_path / CONFIG_FILENAME).resolve()
    if config_path.name != CONFIG_FILENAME:
        return (config_path.parent / CONFIG_FILENAME).resolve()
    return config_path.resolve()


def _read_config(path: Path) -> Any:
    try:
        text = path.read_text(encoding="utf-8")
    except OSError as exc:
        raise ConfigError(f"Failed to read {path}: {exc}") from exc
    if not text.strip():
        return {}
    try:
        loaded = yaml.safe_load(text)
    except yaml.YAMLError as exc:
        raise ConfigError(f"Failed to parse {path.name}: {exc}") from exc
    return {} if loaded is None else loaded


def _normalise_suffix(value: str) -> str:
    value = value.strip().lower()
    return value if value.startswith(".") else f".{value}"


def _as_str(value: Any) -> Optional[str]:
    return str(value) if isinstance(value, (str, int, float)) and not isinstance(value, bool) else None


def _as_str_list(value: Any) -> List[str]:
    if value is None:
        return []
    if isinstance(value, str):
        return [value]
    if isinstance(value, Sequence):
        return [str(item) for item in value if isinstance(item, (str, int, float))]
    return []


def _as_str_mapping(value: Any) -> Dict[str, str]:
    if not isinstance(value, dict):
        return {}
    result: Dict[str, str] = {}
    for key, item in value.items():
        text = _as_str(item)
        if text is not None:
            result[str(key)] = text.strip()
    return result


__all__ = ["ApiDocConfig", "CONFIG_FILENAME", "ConfigError", "load_config"]
