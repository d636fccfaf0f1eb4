"""
Configuration management for the PaperID pack builder.

Settings live in a JSON file (``paperid.json`` in the working directory,
or the path in ``PAPERID_CONFIG``); command line flags override them.
"""

from __future__ import annotations

import json
import logging
import os
import threading
from dataclasses import asdict, dataclass, fields, replace
from pathlib import Path
from typing import Any, Optional

from .. import __version__
from .logger import ConfigurationError

logger = logging.getLogger(__name__)

CONFIG_ENV = "PAPERID_CONFIG"
DEFAULT_CONFIG_NAME = "paperid.json"


@dataclass
class PackConfig:
    """Pack build configuration settings."""

    # Paths
    input_dir: str = "input"
    output_dir: str = "output"

    # Static tables / templates (None = bundled defaults)
    tiles_path: Optional[str] = None
    glyphs_path: Optional[str] = None
    manifest_path: Optional[str] = None

    # Static assets (None = skipped)
    font_dir: Optional[str] = None
    pack_icon: Optional[str] = None

    # Pack identity
    pack_name: str = "PaperID"
    version: str = __version__

    # Archive settings
    make_archive: bool = True
    compression_level: int = 9

    # Diagnostics
    suggest_unknown: bool = True
    suggest_cutoff: float = 80.0
    log_file: Optional[str] = None

    def __post_init__(self):
        """Validate field values after initialization."""
        if not 0 <= self.compression_level <= 9:
            clamped = min(9, max(0, self.compression_level))
            logger.warning(f"compression_level must be 0-9, got {self.compression_level}, using {clamped}")
            self.compression_level = clamped
        if not 0.0 <= self.suggest_cutoff <= 100.0:
            logger.warning(f"suggest_cutoff must be 0-100, got {self.suggest_cutoff}, using 80")
            self.suggest_cutoff = 80.0
        if not self.pack_name.strip():
            raise ConfigurationError("pack_name must not be empty", config_key="pack_name")
        # 版本号格式在此处提前校验，避免构建到一半才失败
        self.version_tuple()

    def version_tuple(self) -> list[int]:
        """Return the version as ``[major, minor, patch]`` integers."""
        parts = self.version.split(".")
        if len(parts) != 3 or not all(p.isdigit() for p in parts):
            raise ConfigurationError(
                f"version must look like MAJOR.MINOR.PATCH, got '{self.version}'",
                config_key="version"
            )
        return [int(p) for p in parts]

    def merged(self, **overrides: Any) -> "PackConfig":
        """Return a copy with the non-None overrides applied."""
        data = asdict(self)
        for key, value in overrides.items():
            if key not in data:
                raise ConfigurationError(f"Unknown config key: {key}", config_key=key)
            if value is not None:
                data[key] = value
        return PackConfig(**data)


def default_config_path() -> Path:
    """获取默认配置文件路径，支持环境变量覆盖"""
    p = os.environ.get(CONFIG_ENV)
    if p:
        return Path(p)
    return Path.cwd() / DEFAULT_CONFIG_NAME


class ConfigManager:
    """Load and save the pack configuration file."""

    def __init__(self, config_path: Optional[str | Path] = None):
        """
        Initialize config manager.

        Args:
            config_path: Path to config file. Defaults to ``default_config_path()``
        """
        self.config_path = Path(config_path) if config_path else default_config_path()
        self._lock = threading.Lock()
        self.config = self.load()

    def load(self) -> PackConfig:
        """Load configuration from file, falling back to defaults."""
        if not self.config_path.exists():
            return PackConfig()

        try:
            with open(self.config_path, 'r', encoding='utf-8') as f:
                data = json.load(f)
        except json.JSONDecodeError as e:
            logger.warning(f"Failed to load config {self.config_path}: {e}, using defaults")
            return PackConfig()
        except OSError as e:
            logger.warning(f"Config file I/O error: {e}, using defaults")
            return PackConfig()

        if not isinstance(data, dict):
            logger.warning(f"Config {self.config_path} is not a JSON object, using defaults")
            return PackConfig()

        # Filter out unknown keys to avoid TypeError
        valid_fields = {f.name for f in fields(PackConfig)}
        unknown = sorted(set(data) - valid_fields)
        if unknown:
            logger.warning(f"Ignoring unknown config keys: {', '.join(unknown)}")
        return PackConfig(**{k: v for k, v in data.items() if k in valid_fields})

    def save(self) -> bool:
        """Save configuration to file."""
        try:
            with self._lock:
                data = asdict(self.config)
                self.config_path.parent.mkdir(parents=True, exist_ok=True)
                with open(self.config_path, 'w', encoding='utf-8') as f:
                    json.dump(data, f, indent=2, ensure_ascii=False)
            return True
        except OSError as e:
            logger.error(f"Failed to save config: {e}")
            return False

    def get(self, key: str, default: Any = None) -> Any:
        """Get configuration value."""
        return getattr(self.config, key, default)

    def set(self, key: str, value: Any, auto_save: bool = True) -> bool:
        """Set configuration value."""
        if not hasattr(self.config, key):
            logger.warning(f"Unknown config key: {key}")
            return False

        with self._lock:
            self.config = replace(self.config, **{key: value})

        if auto_save:
            return self.save()

        return True
