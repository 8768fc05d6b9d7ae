"""
Configuration for jobmatch.

Settings come from an optional YAML file plus environment variables
(a ``.env`` file in the working directory is honoured via
python-dotenv).  The file is located through, in order, the explicit
``path`` argument, the ``JOBMATCH_CONFIG`` environment variable, or
nothing at all, in which case the defaults below apply.  See
``config.example.yaml`` for the layout.

``LOG_LEVEL`` in the environment overrides ``logging.level``.
"""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Any, Dict, Optional

import yaml
from dotenv import load_dotenv

logger = logging.getLogger(__name__)

DEFAULTS: Dict[str, Dict[str, Any]] = {
    "logging": {"level": "INFO"},
    "ranking": {
        "min_score": 30,
        "limit": 10,
        "batch_size": 100,
        "feed_batch_size": 50,
        "display_count": 5,
        "trending_limit": 5,
    },
    "search": {"page_size": 10, "similar_limit": 5, "exact_similar_location": True},
    "skills": {"tables": None},
}


class Settings:
    """Merged configuration: defaults, then the YAML file, then environment."""

    def __init__(self, config: Optional[Dict[str, Any]] = None, source: Optional[str] = None) -> None:
        self.source = source
        self.config: Dict[str, Dict[str, Any]] = {name: dict(values) for name, values in DEFAULTS.items()}
        for section, values in (config or {}).items():
            if not isinstance(values, dict):
                raise ValueError(f"Configuration section {section!r} must be a mapping")
            self.config.setdefault(section, {}).update(values)
        env_level = os.getenv("LOG_LEVEL")
        if env_level:
            self.config["logging"]["level"] = env_level

    def get(self, section: str, key: Optional[str] = None, default: Any = None) -> Any:
        """
        Get configuration value.

        Args:
            section: Configuration section name
            key: Key within section (optional)
            default: Default value if not found

        Returns:
            Configuration value or default
        """
        if key is None:
            return self.config.get(section, default)
        value = self.config.get(section, {}).get(key)
        return default if value is None else value

    @property
    def log_level(self) -> str:
        return str(self.get("logging", "level", "INFO")).upper()

    @property
    def skills_tables(self) -> Optional[str]:
        return self.get("skills", "tables")


def _read_yaml(path: Path) -> Dict[str, Any]:
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except yaml.YAMLError as exc:
        raise ValueError(f"Failed to parse YAML configuration {path}: {exc}") from exc
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ValueError(f"Configuration file {path} must contain a mapping")
    return data


def load_settings(path: Optional[str] = None) -> Settings:
    """Load settings.

    Raises:
        FileNotFoundError: If an explicitly requested file is missing.
        ValueError: If the file is not valid YAML or not a mapping.
    """
    load_dotenv()
    path = path or os.getenv("JOBMATCH_CONFIG")
    if not path:
        logger.debug("No configuration file given, using defaults")
        return Settings()
    config_path = Path(path)
    if not config_path.exists():
        raise FileNotFoundError(f"Configuration file not found: {config_path}")
    data = _read_yaml(config_path)
    missing = [section for section in DEFAULTS if section not in data]
    if missing:
        logger.warning("Missing configuration sections: %s; using defaults", ", ".join(missing))
    logger.info("Loaded configuration from %s", config_path)
    return Settings(data, source=str(config_path))
