"""
pg-semantic-schema Model Stage

This module provides the modelling stages of schema inference:
- Table shape classification and schema pattern selection
- PostgreSQL DDL generation
- Naming suggestions
"""

from .schema_classifier import SchemaClassifier
from .ddl_generator import DDLGenerator, column_identifier, postgres_type, varchar_length
from .naming import NamingAdvisor

__all__ = [
    'SchemaClassifier',
    'DDLGenerator',
    'column_identifier',
    'postgres_type',
    'varchar_length',
    'NamingAdvisor'
]
