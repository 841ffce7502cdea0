"""Configuration loading for moddoc (.moddoc.yml)."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Optional

import yaml

from .errors import ConfigError
from .specifier import has_scheme

CONFIG_FILENAME = ".moddoc.yml"

_COLOR_MODES = ("auto", "always", "never")


@dataclass
class ModdocConfig:
    """Represents the settings defined in .moddoc.yml."""

    root: Path
    import_map: Optional[str] = None
    unstable: bool = False
    private: bool = False
    request_timeout: float = 60.0
    color: str = "auto"
    user_agent: Optional[str] = None


def load_config(config_path: Optional[Path] = None) -> ModdocConfig:
    """Load configuration from disk; a missing file yields the defaults."""
    config_file = _resolve_config_path(config_path or Path.cwd())
    root = config_file.parent.resolve()

    if not config_file.exists():
        return ModdocConfig(root=root)

    data = _read_config(config_file)
    if not isinstance(data, dict):
        raise ConfigError(f"{config_file.name} must contain a mapping at the root")

    config = ModdocConfig(root=root)
    import_map = _as_str(data.get("import_map"))
    if import_map:
        config.import_map = import_map if has_scheme(import_map) else str((root / import_map).resolve())
    config.unstable = _as_bool(data.get("unstable")) or False
    config.private = _as_bool(data.get("private")) or False

    timeout = data.get("request_timeout")
    if timeout is not None:
        parsed_timeout = _as_float(timeout)
        if parsed_timeout is None or parsed_timeout <= 0:
            raise ConfigError(f"request_timeout must be a positive number, got {timeout!r}")
        config.request_timeout = parsed_timeout

    color = data.get("color")
    if color is not None:
        # YAML reads a bare ``never``/``always`` as strings but ``yes``/``no`` as booleans.
        if isinstance(color, bool):
            color = "always" if color else "never"
        color_mode = str(color).strip().lower()
        if color_mode not in _COLOR_MODES:
            raise ConfigError(f"color must be one of {', '.join(_COLOR_MODES)}, got {color!r}")
        config.color = color_mode

    config.user_agent = _as_str(data.get("user_agent"))
    return config


def _resolve_config_path(config_path: Path) -> Path:
    config_path = config_path.expanduser()
    if config_path.is_dir():
        return (config_path / CONFIG_FILENAME).resolve()
    return config_path.resolve()


def _read_config(path: Path) -> Dict[str, Any]:
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
    return loaded if loaded is not None else {}


def _as_str(value: Any) -> Optional[str]:
    return str(value) if isinstance(value, (str, int, float)) and not isinstance(value, bool) else None


def _as_float(value: Any) -> Optional[float]:
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        return float(value)
    if isinstance(value, str):
        try:
            return float(value)
        except ValueError:
            return None
    return None


def _as_bool(value: Any) -> Optional[bool]:
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        lowered = value.strip().lower()
        if lowered in {"true", "yes", "1"}:
            return True
        if lowered in {"false", "no", "0"}:
            return False
    return None


__all__ = ["CONFIG_FILENAME", "ModdocConfig", "load_config"]
