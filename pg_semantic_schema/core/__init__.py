"""
pg-semantic-schema Core Components

This module provides functionality shared across all stages:
- Configuration management
- Logging
- Exceptions
- Data models
- The in-memory input table
"""

from .config import Config, InferenceConfig, PatternRule
from .logger import Logger
from .exceptions import SchemaInferenceError, InputValidationError, ConfigurationError
from .table import Table

__all__ = [
    'Config',
    'InferenceConfig',
    'PatternRule',
    'Logger',
    'SchemaInferenceError',
    'InputValidationError',
    'ConfigurationError',
    'Table'
]
