"""
pg-semantic-schema - Semantic Schema Inference Engine

Infers a PostgreSQL star/snowflake schema design from raw tabular data in
five forward-only stages:
1. Profile - semantic type detection and cardinality statistics
2. Discover - functional dependencies, hierarchies and foreign key candidates
3. Classify - column roles, fact vs dimension, star vs snowflake
4. Synthesize - table definitions, indexes, comments and SCD Type 2 maintenance
5. Advise - data quality scores and naming suggestions

Version: 0.1.0
Author: pg-semantic-schema Development Team
"""

from .core.config import Config, InferenceConfig
from .core.exceptions import SchemaInferenceError, InputValidationError, ConfigurationError
from .core.table import Table
from .pipeline import SchemaInferenceEngine, infer_schema

__version__ = "0.1.0"
__author__ = "pg-semantic-schema Development Team"

__all__ = [
    'Config',
    'InferenceConfig',
    'SchemaInferenceError',
    'InputValidationError',
    'ConfigurationError',
    'Table',
    'SchemaInferenceEngine',
    'infer_schema'
]
