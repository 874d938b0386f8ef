"""Configuration loading for roleinfer (roleinfer.yaml)."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence

import yaml

from .inference.engine import EngineOptions
from .inference.overrides import match_glob
from .models import Role

CONFIG_CANDIDATES = (
    "roleinfer.yaml",
    "roleinfer.yml",
    ".roleinfer.yaml",
    ".roleinfer.yml",
)

DEFAULT_EXCLUDE = ("vendor/**", "node_modules/**", ".git/**")


class ConfigError(RuntimeError):
    """Raised when the configuration file cannot be parsed."""


@dataclass
class InferenceOptions:
    """Classification switches from the ``options`` section."""

    header_probe: bool = False
    neighborhood: bool = True


@dataclass
class RoleInferConfig:
    """Represents the settings defined in roleinfer.yaml."""

    root: Path
    overrides: Dict[Role, List[str]] = field(default_factory=dict)
    exclude: List[str] = field(default_factory=lambda: list(DEFAULT_EXCLUDE))
    options: InferenceOptions = field(default_factory=InferenceOptions)
    source: Optional[Path] = None

    def engine_options(self, max_workers: Optional[int] = None) -> EngineOptions:
        return EngineOptions(
            header_probe=self.options.header_probe,
            neighborhood=self.options.neighborhood,
            overrides={role: list(patterns) for role, patterns in self.overrides.items()}
            or None,
            max_workers=max_workers,
        )

    def is_excluded(self, path: str) -> bool:
        return any(match_glob(pattern, path) for pattern in self.exclude)


def load_config(config_path: Path) -> RoleInferConfig:
    """Load configuration from a file, or from the first candidate inside a directory."""
    config_path = config_path.expanduser()
    if config_path.is_dir():
        root = config_path.resolve()
        config_file = _find_config(root)
        if config_file is None:
            return RoleInferConfig(root=root)
    else:
        config_file = config_path.resolve()
        root = config_file.parent
        if not config_file.exists():
            raise ConfigError(f"Config file not found: {config_path}")

    data = _read_config(config_file)
    if not isinstance(data, dict):
        raise ConfigError(f"{config_file.name} must contain a mapping at the root")

    config = RoleInferConfig(root=root, source=config_file)
    config.overrides = _parse_overrides(data.get("overrides"))

    if "exclude" in data:
        config.exclude = _as_str_list(data.get("exclude"))

    options_data = _as_dict(data.get("options"))
    if options_data:
        header_probe = _as_bool(options_data.get("header_probe"))
        neighborhood = _as_bool(options_data.get("neighborhood"))
        if header_probe is not None:
            config.options.header_probe = header_probe
        if neighborhood is not None:
            config.options.neighborhood = neighborhood

    return config


def _find_config(root: Path) -> Optional[Path]:
    for name in CONFIG_CANDIDATES:
        candidate = root / name
        if candidate.is_file():
            return candidate
    return None


def _read_config(path: Path) -> Dict[str, Any]:
    try:
        text = path.read_text(encoding="utf-8")
    except OSError as exc:
        raise ConfigError(f"Failed to read {path.name}: {exc}") from exc
    if not text.strip():
        return {}

    try:
        loaded = yaml.safe_load(text)
    except yaml.YAMLError as exc:
        raise ConfigError(f"Failed to parse {path.name}: {exc}") from exc
    return loaded or {}


def _parse_overrides(value: Any) -> Dict[Role, List[str]]:
    if value is None:
        return {}
    if not isinstance(value, dict):
        raise ConfigError("overrides must map role names to glob lists")

    overrides: Dict[Role, List[str]] = {}
    for key, patterns in value.items():
        role = parse_role(key)
        overrides.setdefault(role, []).extend(_as_str_list(patterns))
    return overrides


def parse_role(value: Any) -> Role:
    """Return the role named by ``value`` (case-insensitive)."""
    name = str(value).strip().lower()
    try:
        return Role(name)
    except ValueError as exc:
        known = ", ".join(role.value for role in Role)
        raise ConfigError(f"Unknown role '{value}' (expected one of: {known})") from exc


def _as_dict(value: Any) -> Dict[str, Any]:
    return value if isinstance(value, dict) else {}


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


def _as_str_list(value: Any) -> List[str]:
    if value is None:
        return []
    if isinstance(value, str):
        return [value]
    if isinstance(value, Sequence):
        return [str(item) for item in value if isinstance(item, (str, int, float, bool))]
    return []


__all__ = [
    "CONFIG_CANDIDATES",
    "ConfigError",
    "InferenceOptions",
    "RoleInferConfig",
    "load_config",
    "parse_role",
]
