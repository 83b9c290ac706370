"""
Settings for Permset
=====================
YAML settings merged from a global and a local file.

    # ~/.permset/config.yaml or ./.permset/config.yaml
    log_level: INFO
    log_to_file: true
    log_dir: ~/.permset/logs
    universe: universe.yaml
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional

import yaml

from .errors import ConfigError
from .utils.logger import DEFAULT_LOG_DIR, LogConfig

# Configure module logger
logger = logging.getLogger(__name__)

# Environment variable naming an explicit settings file
CONFIG_ENV = "PERMSET_CONFIG"

# Settings file relative to a workspace or the home directory
CONFIG_FILE = Path(".permset") / "config.yaml"


@dataclass
class Settings:
    """Permset settings"""
    log_level: str = "WARNING"
    log_to_file: bool = False
    log_dir: Path = field(default_factory=lambda: DEFAULT_LOG_DIR)
    universe: Optional[Path] = None

    def update(self, data: Dict[str, Any], source: Path):
        """
        Apply the values of a settings document.

        Relative paths are resolved against the directory of `source`.
        """
        for key, value in data.items():
            if key == "log_level":
                level = str(value).upper()
                if not isinstance(logging.getLevelName(level), int):
                    raise ConfigError(f"Invalid log_level '{value}' in {source}")
                self.log_level = level
            elif key == "log_to_file":
                if not isinstance(value, bool):
                    raise ConfigError(f"log_to_file must be true or false in {source}")
                self.log_to_file = value
            elif key == "log_dir":
                self.log_dir = _resolve_path(value, source)
            elif key == "universe":
                self.universe = _resolve_path(value, source) if value else None
            else:
                logger.warning(f"Unknown setting '{key}' in {source}")

    def to_log_config(self, verbose: bool = False) -> LogConfig:
        """Logging configuration for these settings"""
        return LogConfig(
            level=logging.getLevelName(self.log_level),
            log_dir=self.log_dir,
            enable_file=self.log_to_file,
            debug_mode=verbose
        )


def _resolve_path(value: Any, source: Path) -> Path:
    path = Path(str(value)).expanduser()
    if not path.is_absolute():
        path = source.parent / path
    return path


def _read_config(path: Path) -> Dict[str, Any]:
    """Read a settings file into a dictionary"""
    try:
        with open(path, encoding='utf-8') as f:
            data = yaml.safe_load(f) or {}
    except (yaml.YAMLError, RecursionError) as e:
        raise ConfigError(f"Invalid YAML in {path}: {e}") from e
    except OSError as e:
        raise ConfigError(f"Failed to read settings from {path}: {e}") from e

    if not isinstance(data, dict):
        raise ConfigError(f"Settings in {path} must be a mapping")

    return data


def config_paths(workspace: Optional[Path] = None) -> List[Path]:
    """Global and local settings files, in the order they are applied"""
    workspace = workspace or Path.cwd()
    return [Path.home() / CONFIG_FILE, workspace / CONFIG_FILE]


def load_settings(
    path: Optional[Path] = None,
    workspace: Optional[Path] = None
) -> Settings:
    """
    Load settings.

    An explicit path (argument or PERMSET_CONFIG) is the only file read and
    must exist. Otherwise the global then the local file are applied, local
    values overriding global ones, and missing files are skipped.

    Raises:
        ConfigError: A settings file is missing, unreadable or invalid
    """
    settings = Settings()

    if path is None and os.environ.get(CONFIG_ENV):
        path = Path(os.environ[CONFIG_ENV])

    if path is not None:
        path = Path(path).expanduser()
        if not path.exists():
            raise ConfigError(f"Settings file not found: {path}")
        settings.update(_read_config(path), path)
        return settings

    for config_path in config_paths(workspace):
        if config_path.exists():
            logger.debug(f"Loading settings from {config_path}")
            settings.update(_read_config(config_path), config_path)

    return settings


__all__ = ['Settings', 'load_settings', 'config_paths', 'CONFIG_ENV', 'CONFIG_FILE']
