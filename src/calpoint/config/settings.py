"""Application settings loaded from YAML."""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from datetime import date, datetime
from pathlib import Path
from typing import Optional
from zoneinfo import ZoneInfo

import yaml

# Environment variable pointing at an alternate config.yaml
CONFIG_ENV_VAR = "CALPOINT_CONFIG"

VALID_OUTPUT_FORMATS = ("table", "json")


def _default_config_dir() -> Path:
    return Path.home() / ".calpoint"


def _default_db_path() -> Path:
    return _default_config_dir() / "calpoint.db"


def _default_config_path() -> Path:
    env_path = os.environ.get(CONFIG_ENV_VAR)
    if env_path:
        return Path(env_path).expanduser()
    return _default_config_dir() / "config.yaml"


def _check_timezone(name: str) -> str:
    try:
        ZoneInfo(name)
    except (KeyError, ValueError) as e:
        # ZoneInfoNotFoundError subclasses KeyError
        raise ValueError(f"Unknown timezone '{name}'") from e
    return name


@dataclass
class DatabaseConfig:
    """Where the SQLite file lives."""

    path: Path = field(default_factory=_default_db_path)

    @classmethod
    def from_dict(cls, data: dict) -> "DatabaseConfig":
        config = cls()
        if "path" in data:
            config.path = Path(data["path"]).expanduser()
        return config

    def to_dict(self) -> dict:
        return {"path": str(self.path)}


@dataclass
class TrackingConfig:
    """Tracking configuration.

    The timezone decides what "today" is for days elapsed, projected
    completion dates and default log dates.
    """

    timezone: str = "UTC"

    @classmethod
    def from_dict(cls, data: dict) -> "TrackingConfig":
        config = cls()
        if "timezone" in data:
            config.timezone = _check_timezone(str(data["timezone"]))
        return config

    def to_dict(self) -> dict:
        return {"timezone": self.timezone}


@dataclass
class DefaultsConfig:
    """Defaults for CLI output."""

    output_format: str = "table"

    @classmethod
    def from_dict(cls, data: dict) -> "DefaultsConfig":
        config = cls()
        if "output_format" in data:
            output_format = data["output_format"]
            if output_format not in VALID_OUTPUT_FORMATS:
                raise ValueError(
                    f"output_format must be one of {VALID_OUTPUT_FORMATS}, "
                    f"got '{output_format}'"
                )
            config.output_format = output_format
        return config

    def to_dict(self) -> dict:
        return {"output_format": self.output_format}


@dataclass
class Settings:
    """Main application settings."""

    database: DatabaseConfig = field(default_factory=DatabaseConfig)
    tracking: TrackingConfig = field(default_factory=TrackingConfig)
    defaults: DefaultsConfig = field(default_factory=DefaultsConfig)

    def today(self) -> date:
        """Current date in the configured timezone."""
        return datetime.now(ZoneInfo(self.tracking.timezone)).date()

    @classmethod
    def load(cls, config_path: Optional[Path] = None) -> "Settings":
        """Load settings from YAML file or return defaults.

        Missing sections (or an empty file) fall back to defaults.

        Args:
            config_path: Path to config.yaml. If None, uses $CALPOINT_CONFIG
                         or ~/.calpoint/config.yaml

        Raises:
            ValueError: If the timezone or output format is not recognised
        """
        if config_path is None:
            config_path = _default_config_path()

        if not config_path.exists():
            return cls()

        with open(config_path) as f:
            data = yaml.safe_load(f) or {}

        return cls(
            database=DatabaseConfig.from_dict(data.get("database") or {}),
            tracking=TrackingConfig.from_dict(data.get("tracking") or {}),
            defaults=DefaultsConfig.from_dict(data.get("defaults") or {}),
        )

    def save(self, config_path: Optional[Path] = None) -> None:
        """Write settings as YAML, creating the directory if needed."""
        if config_path is None:
            config_path = _default_config_path()

        config_path.parent.mkdir(parents=True, exist_ok=True)

        data = {
            "database": self.database.to_dict(),
            "tracking": self.tracking.to_dict(),
            "defaults": self.defaults.to_dict(),
        }

        with open(config_path, "w") as f:
            yaml.dump(data, f, default_flow_style=False, sort_keys=False)


# Global settings instance (lazy loaded)
_settings: Optional[Settings] = None


def get_settings() -> Settings:
    """Get the global settings instance, loading from disk if needed."""
    global _settings
    if _settings is None:
        _settings = Settings.load()
    return _settings


def reload_settings() -> Settings:
    """Force reload settings from disk."""
    global _settings
    _settings = Settings.load()
    return _settings
