"""Logging setup for docgraph stores, repositories and the CLI.

Loggers come from Prefect's ``get_logger`` so docgraph output shares Prefect's
handlers and formatting when both run in one process. The dictConfig applied
on first use is read from YAML when a config file is named, otherwise built
from defaults.

Environment variables:
    DOCGRAPH_LOGGING_CONFIG: Path to a logging.yml in dictConfig format
    PREFECT_LOGGING_SETTINGS_PATH: Fallback config path shared with Prefect
    DOCGRAPH_LOG_LEVEL: Level for docgraph loggers under the default config
"""

import logging.config
import os
from pathlib import Path
from typing import Any, Dict, Optional

import yaml
from prefect.logging import get_logger

# Loggers adjusted by setup_logging(level=...)
DEFAULT_LOG_LEVELS = {
    "docgraph": "INFO",
    "docgraph.document_store": "INFO",
    "docgraph.documents": "INFO",
}

_CONFIG_PATH_VARS = ("DOCGRAPH_LOGGING_CONFIG", "PREFECT_LOGGING_SETTINGS_PATH")


def _config_path_from_env() -> Optional[Path]:
    for var in _CONFIG_PATH_VARS:
        if value := os.environ.get(var):
            return Path(value)
    return None


def _default_config() -> Dict[str, Any]:
    level = os.environ.get("DOCGRAPH_LOG_LEVEL", "INFO").upper()
    return {
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": {
            "standard": {
                "format": "%(asctime)s.%(msecs)03d | %(levelname)-7s | %(name)s - %(message)s",
                "datefmt": "%H:%M:%S",
            },
        },
        "handlers": {
            # stderr keeps CLI stdout parseable
            "console": {
                "class": "logging.StreamHandler",
                "formatter": "standard",
                "stream": "ext://sys.stderr",
            },
        },
        "loggers": {
            "docgraph": {"level": level, "handlers": ["console"], "propagate": False},
        },
        "root": {"level": "WARNING", "handlers": ["console"]},
    }


class LoggingConfig:
    """A dictConfig mapping plus the file it was read from.

    The file is chosen from, in order: the ``config_path`` argument,
    DOCGRAPH_LOGGING_CONFIG, PREFECT_LOGGING_SETTINGS_PATH. A path that does
    not exist falls back to the built-in defaults.

    Example:
        >>> LoggingConfig(Path("logging.yml")).apply()
    """

    def __init__(self, config_path: Optional[Path] = None):
        self.config_path = config_path or _config_path_from_env()
        self._config: Optional[Dict[str, Any]] = None

    def load_config(self) -> Dict[str, Any]:
        """Return the configuration, reading it on the first call only.

        Raises:
            ValueError: If the YAML file does not hold a mapping.
        """
        if self._config is not None:
            return self._config

        if self.config_path is None or not self.config_path.exists():
            self._config = _default_config()
            return self._config

        with open(self.config_path, "r") as f:
            loaded = yaml.safe_load(f)
        if not isinstance(loaded, dict):
            raise ValueError(f"logging config {self.config_path} must be a mapping, got {type(loaded).__name__}")
        self._config = loaded
        return self._config

    def apply(self):
        """Install the configuration.

        A ``prefect`` logger entry also seeds PREFECT_LOGGING_LEVEL, unless the
        environment already sets it.
        """
        config = self.load_config()
        logging.config.dictConfig(config)

        prefect_logger = config.get("loggers", {}).get("prefect")
        if prefect_logger is not None:
            os.environ.setdefault("PREFECT_LOGGING_LEVEL", prefect_logger.get("level", "INFO"))


_logging_config: Optional[LoggingConfig] = None


def setup_logging(config_path: Optional[Path] = None, level: Optional[str] = None):
    """Configure logging now, replacing any earlier configuration.

    ``level`` overrides the level of every logger in DEFAULT_LOG_LEVELS after
    the configuration is applied.
    """
    global _logging_config

    _logging_config = LoggingConfig(config_path)
    _logging_config.apply()

    if not level:
        return
    for name in DEFAULT_LOG_LEVELS:
        get_logger(name).setLevel(level)


def get_pipeline_logger(name: str):
    """Logger for a docgraph module; configures logging on the first call."""
    if _logging_config is None:
        setup_logging()
    return get_logger(name)
