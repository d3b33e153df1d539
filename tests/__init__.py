"""
pg-semantic-schema Test Suite

This package contains all test modules for the inference engine:
- test_core.py: Configuration, logging and input table testing
- test_discover.py: Profiling, relationship, role and quality testing
- test_model.py: Schema classification, DDL generation and naming testing
- test_pipeline.py: End-to-end inference testing
"""

__version__ = "0.1.0"
