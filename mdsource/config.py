"""Configuration loading for mdsource projects (.mdsource.yml)."""

from __future__ import annotations

from dataclasses import dataclass, field
from logging import Logger
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence

import yaml

from .errors import ConfigError
from .forceignore import DEFAULT_IGNORE_FILE
from .logging import configure_logging
from .registry import DEFAULT_REGISTRY_PATH, RegistryAccess, read_registry_file

CONFIG_FILE_NAME = ".mdsource.yml"


@dataclass
class LoggingSettings:
    """Log output requested by the `logging` section."""

    verbose: bool = False
    log_file: Optional[Path] = None


@dataclass
class ProjectConfig:
    """Represents the settings defined in .mdsource.yml."""

    root: Path
    package_directories: List[Path] = field(default_factory=list)
    api_version: Optional[str] = None
    registry: Optional[Path] = None
    ignore_file: str = DEFAULT_IGNORE_FILE
    logging: LoggingSettings = field(default_factory=LoggingSettings)

    def create_registry(self) -> RegistryAccess:
        """Load the configured registry, applying the API version override."""
        data = read_registry_file(self.registry or DEFAULT_REGISTRY_PATH)
        if self.api_version:
            data["api_version"] = self.api_version
        return RegistryAccess(data)

    def configure_logging(self) -> Logger:
        return configure_logging(verbose=self.logging.verbose, log_file=self.logging.log_file)


def load_config(config_path: Path | str) -> ProjectConfig:
    """Load configuration from disk; a missing file yields defaults."""
    config_file = _resolve_config_path(Path(config_path))
    root = config_file.parent.resolve()

    if not config_file.exists():
        return ProjectConfig(root=root)

    data = _read_config(config_file)
    if not isinstance(data, dict):
        raise ConfigError(f"{CONFIG_FILE_NAME} must contain a mapping at the root")

    registry_str = _as_str(data.get("registry"))
    logging_data = _as_dict(data.get("logging"))
    log_file_str = _as_str(logging_data.get("file"))
    return ProjectConfig(
        root=root,
        package_directories=[root / entry for entry in _as_str_list(data.get("package_directories"))],
        api_version=_as_str(data.get("api_version")),
        registry=(root / registry_str) if registry_str else None,
        ignore_file=_as_str(data.get("ignore_file")) or DEFAULT_IGNORE_FILE,
        logging=LoggingSettings(
            verbose=_as_bool(logging_data.get("verbose")) or False,
            log_file=(root / log_file_str) if log_file_str else None,
        ),
    )


def _resolve_config_path(config_path: Path) -> Path:
    config_path = config_path.expanduser()
    if config_path.is_dir():
        return (config_path / CONFIG_FILE_NAME).resolve()
    if config_path.name != CONFIG_FILE_NAME:
        return (config_path.parent / CONFIG_FILE_NAME).resolve()
    return config_path.resolve()


def _read_config(path: Path) -> Dict[str, Any]:
    text = path.read_text(encoding="utf-8")
    if not text.strip():
        return {}
    try:
        loaded = yaml.safe_load(text)
    except yaml.YAMLError as exc:
        raise ConfigError(f"Failed to parse {path.name}: {exc}") from exc
    return loaded if loaded is not None else {}


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


def _as_str(value: Any) -> Optional[str]:
    return str(value) if isinstance(value, (str, int, float, bool)) else None


def _as_str_list(value: Any) -> List[str]:
    if value is None:
        return []
    if isinstance(value, str):
        return [value]
    if isinstance(value, Sequence):
        return [str(item) for item in value if isinstance(item, (str, int, float, bool))]
    return []


__all__ = ["CONFIG_FILE_NAME", "LoggingSettings", "ProjectConfig", "load_config"]
