"""
Configuration loader for stream-progress.

Loads settings from a YAML config file with sensible defaults.
"""

import logging
from dataclasses import asdict, dataclass, field
from pathlib import Path
from typing import Optional

import yaml

from .error_handler import InvalidConfiguration

logger = logging.getLogger(__name__)


DEFAULT_INTERVAL = 1000
# Largest interval whose percent math (100 * interval) fits a signed 32-bit int
MAX_INTERVAL = 2**31 // 100 - 1

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


def validate_progress_settings(
    interval: int,
    display_id: int = 0,
    total_expected: Optional[int] = None,
    max_interval: int = MAX_INTERVAL,
) -> None:
    """Raise InvalidConfiguration if any session setting is out of range."""
    if isinstance(interval, bool) or not isinstance(interval, int):
        raise InvalidConfiguration("interval", interval, "must be an integer")
    if interval < 1:
        raise InvalidConfiguration("interval", interval, "must be at least 1")
    if interval > max_interval:
        raise InvalidConfiguration("interval", interval, f"must not exceed {max_interval}")
    if isinstance(display_id, bool) or not isinstance(display_id, int) or display_id < 0:
        raise InvalidConfiguration("display_id", display_id, "must be a non-negative integer")
    if total_expected is not None:
        if isinstance(total_expected, bool) or not isinstance(total_expected, int) or total_expected < 0:
            raise InvalidConfiguration("total_expected", total_expected, "must be a non-negative integer")


@dataclass
class ProgressConfig:
    """Defaults for progress sessions."""
    interval: int = DEFAULT_INTERVAL
    max_interval: int = MAX_INTERVAL
    display_id: int = 0
    status_suffix: str = "items processed"
    show_progress: bool = True


@dataclass
class LoggingConfig:
    """Configuration for logging."""
    level: str = "INFO"
    log_file: str = ""
    debug_mode: bool = False


@dataclass
class Config:
    """Main configuration container."""
    progress: ProgressConfig = field(default_factory=ProgressConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)

    @classmethod
    def load(cls, config_path: Optional[Path] = None) -> "Config":
        """
        Load configuration from YAML file.

        If no path is provided, uses default values.
        Missing keys in the config file will use defaults.
        Raises InvalidConfiguration for unparsable YAML or non-mapping sections.
        """
        config = cls()

        if config_path and config_path.exists():
            logger.info(f"Loading configuration from {config_path}")
            with open(config_path, 'r', encoding='utf-8') as f:
                try:
                    data = yaml.safe_load(f) or {}
                except yaml.YAMLError as e:
                    raise InvalidConfiguration("config", str(config_path), f"is not valid YAML ({e})") from e

            if not isinstance(data, dict):
                raise InvalidConfiguration("config", str(config_path), "must be a mapping of sections")

            for section_name in ('progress', 'logging'):
                values = data.get(section_name) or {}
                if not isinstance(values, dict):
                    raise InvalidConfiguration(section_name, values, "must be a mapping of settings")
                section = getattr(config, section_name)
                for key, value in values.items():
                    if hasattr(section, key):
                        setattr(section, key, value)
                    else:
                        logger.warning(f"Ignoring unknown config key {section_name}.{key}")

        return config

    def validate(self) -> None:
        """Check settings types and ranges; raises InvalidConfiguration."""
        if isinstance(self.progress.max_interval, bool) or not isinstance(self.progress.max_interval, int) \
                or self.progress.max_interval < 1:
            raise InvalidConfiguration("max_interval", self.progress.max_interval, "must be a positive integer")
        validate_progress_settings(
            self.progress.interval,
            self.progress.display_id,
            max_interval=self.progress.max_interval,
        )
        if not isinstance(self.progress.status_suffix, str):
            raise InvalidConfiguration("status_suffix", self.progress.status_suffix, "must be a string")
        if not isinstance(self.progress.show_progress, bool):
            raise InvalidConfiguration("show_progress", self.progress.show_progress, "must be true or false")

        level = self.logging.level
        if not isinstance(level, str) or level.upper() not in LOG_LEVELS:
            raise InvalidConfiguration("level", level, f"must be one of {', '.join(LOG_LEVELS)}")
        if not isinstance(self.logging.log_file, str):
            raise InvalidConfiguration("log_file", self.logging.log_file, "must be a path string")
        if not isinstance(self.logging.debug_mode, bool):
            raise InvalidConfiguration("debug_mode", self.logging.debug_mode, "must be true or false")

    def save(self, config_path: Path) -> None:
        """Save configuration to YAML file."""
        data = asdict(self)
        logger.info(f"Saving configuration to {config_path}")

        with open(config_path, 'w', encoding='utf-8') as f:
            yaml.dump(data, f, default_flow_style=False)
