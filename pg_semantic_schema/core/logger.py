"""
pg-semantic-schema Logging System

This module provides centralized logging for the inference engine.
Records go to the console and, when configured, to a log file.
"""

import logging
import sys
from typing import Optional

from .config import Config


class Logger:
    """Centralized logging system for pg-semantic-schema."""

    def __init__(self, name: str = "pg_semantic_schema", level: str = "INFO", config: Optional[Config] = None):
        """Initialize logger.

        Args:
            name: Logger name
            level: Log level used when the configuration has none
            config: Optional Config instance (defaults to config.json in the working directory)
        """
        self.name = name
        self.config = config or Config()

        config_level = self.config.get('logging.level', level) or level
        self.level = getattr(logging, str(config_level).upper(), logging.INFO)
        self.log_file = self.config.get('logging.file')

        self.logger = self._setup_logger()

    def _setup_logger(self) -> logging.Logger:
        """Set up logger with console and optional file handlers."""
        logger = logging.getLogger(f"pg_semantic_schema.{self.name}")
        logger.setLevel(self.level)

        # Clear existing handlers
        logger.handlers.clear()

        formatter = logging.Formatter(
            '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
        )

        console_handler = logging.StreamHandler(sys.stdout)
        console_handler.setLevel(self.level)
        console_handler.setFormatter(formatter)
        logger.addHandler(console_handler)

        if self.log_file:
            file_handler = logging.FileHandler(self.log_file)
            file_handler.setLevel(self.level)
            file_handler.setFormatter(formatter)
            logger.addHandler(file_handler)

        return logger

    def info(self, message: str, **kwargs) -> None:
        """Log info message."""
        self.logger.info(message, extra=kwargs)

    def warning(self, message: str, **kwargs) -> None:
        """Log warning message."""
        self.logger.warning(message, extra=kwargs)

    def error(self, message: str, **kwargs) -> None:
        """Log error message."""
        self.logger.error(message, extra=kwargs)

    def debug(self, message: str, **kwargs) -> None:
        """Log debug message."""
        self.logger.debug(message, extra=kwargs)

    def critical(self, message: str, **kwargs) -> None:
        """Log critical message."""
        self.logger.critical(message, extra=kwargs)

    def log_phase_start(self, phase: str, **kwargs) -> None:
        """Log stage start."""
        self.info(f"Starting {phase}", phase=phase, **kwargs)

    def log_phase_complete(self, phase: str, **kwargs) -> None:
        """Log stage completion."""
        self.info(f"Completed {phase}", phase=phase, **kwargs)
