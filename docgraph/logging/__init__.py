"""Prefect-backed loggers for docgraph modules.

Example:
    >>> from docgraph.logging import get_pipeline_logger
    >>> logger = get_pipeline_logger(__name__)
    >>> logger.info("Created document 1")

Modules call get_pipeline_logger() rather than logging.getLogger() so the
docgraph configuration is installed before their first record.
"""

from .logging_config import DEFAULT_LOG_LEVELS, LoggingConfig, get_pipeline_logger, setup_logging

__all__ = [
    "DEFAULT_LOG_LEVELS",
    "LoggingConfig",
    "get_pipeline_logger",
    "setup_logging",
]
