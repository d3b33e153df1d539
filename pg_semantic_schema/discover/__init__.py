"""
pg-semantic-schema Discover Stage

This module provides the discovery stages of schema inference:
- Column profiling and semantic type detection
- Relationship discovery
- Column role classification
- Data quality assessment
"""

from .column_profiler import ColumnProfiler, detect_primitive_type
from .relationship_finder import RelationshipFinder
from .role_classifier import RoleClassifier
from .quality_assessor import QualityAssessor

__all__ = [
    'ColumnProfiler',
    'detect_primitive_type',
    'RelationshipFinder',
    'RoleClassifier',
    'QualityAssessor'
]
