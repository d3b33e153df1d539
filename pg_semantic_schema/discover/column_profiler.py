"""
pg-semantic-schema Column Profiler

This module provides semantic type detection and cardinality statistics
for the columns of an input table.

Detection works on a sample of the non-blank values of a column:
1. Every configured pattern is matched against every sampled value
2. The semantic type with the most matches becomes the candidate
3. The candidate is accepted when its share of the sample reaches the
   confidence threshold, otherwise the column stays 'unknown'
"""

import re
from collections import Counter
from typing import Dict, List, Optional, Sequence, Tuple

from ..core.config import Config, InferenceConfig
from ..core.logger import Logger
from ..core.models import ColumnProfile, PrimitiveType, SemanticType
from ..core.table import Table, is_blank


PRIMITIVE_PATTERNS = [
    (PrimitiveType.INTEGER, re.compile(r'-?\d+')),
    (PrimitiveType.DECIMAL, re.compile(r'-?\d+\.\d+')),
    (PrimitiveType.BOOLEAN, re.compile(r'(?i)true|false')),
    (PrimitiveType.DATE, re.compile(r'\d{4}-\d{2}-\d{2}')),
    (PrimitiveType.TIMESTAMP, re.compile(r'\d{4}-\d{2}-\d{2}T\d{2}:\d{2}:\d{2}')),
    (PrimitiveType.TIME, re.compile(r'\d{2}:\d{2}:\d{2}')),
]

SAMPLE_VALUE_LIMIT = 5


def detect_primitive_type(value: str) -> PrimitiveType:
    """Guess the storage type of a single value."""
    stripped = value.strip()
    for primitive_type, regex in PRIMITIVE_PATTERNS:
        if regex.fullmatch(stripped):
            return primitive_type
    return PrimitiveType.STRING


class ColumnProfiler:
    """
    Column profiler producing a ColumnProfile per input column.
    """

    def __init__(self, config: Optional[InferenceConfig] = None, settings: Optional[Config] = None):
        """Initialize the column profiler.

        Args:
            config (InferenceConfig): Options of the current run
            settings (Config): Configuration file manager, for logging
        """
        self.config = config or InferenceConfig()
        self.logger = Logger("column_profiler", config=settings)

    def profile_table(self, table: Table) -> List[ColumnProfile]:
        """
        Profile every column of a table.

        Args:
            table (Table): The input table

        Returns:
            List[ColumnProfile]: One profile per column, in header order
        """
        self.logger.info(f"Profiling {len(table.headers)} columns of table '{table.name}'")
        profiles = [self.profile_column(name, values) for name, values in table.columns().items()]

        typed = sum(1 for p in profiles if p.semantic_type != SemanticType.UNKNOWN)
        self.logger.info(f"Detected semantic types for {typed}/{len(profiles)} columns")
        return profiles

    def profile_column(self, name: str, values: Sequence[Optional[str]]) -> ColumnProfile:
        """
        Profile a single column.

        Args:
            name (str): Column name
            values (Sequence[Optional[str]]): Raw cell values, None for missing

        Returns:
            ColumnProfile: Semantic type and statistics of the column
        """
        non_blank = [v.strip() for v in values if not is_blank(v)]
        sample = non_blank[:self.config.sample_size]
        distinct = list(dict.fromkeys(non_blank))

        detections = self._count_detections(sample)
        semantic_type, confidence = self._select_type(detections, len(sample))
        pattern_confidence = (
            self.config.patterns[semantic_type].base_confidence
            if semantic_type != SemanticType.UNKNOWN else 0.0
        )

        lengths = [len(v) for v in non_blank]
        profile = ColumnProfile(
            name=name,
            semantic_type=semantic_type,
            confidence=confidence,
            unique_count=len(distinct),
            null_count=len(values) - len(non_blank),
            total_count=len(values),
            non_null_count=len(non_blank),
            sample_count=len(sample),
            primitive_type=self._majority_primitive_type(sample),
            pattern_confidence=pattern_confidence,
            semantic_detections={t.value: c for t, c in detections.items()},
            sample_values=distinct[:SAMPLE_VALUE_LIMIT],
            min_length=min(lengths) if lengths else 0,
            max_length=max(lengths) if lengths else 0,
        )
        self.logger.debug(
            f"Column '{name}': {semantic_type.value} ({confidence:.2f}), "
            f"{profile.unique_count} distinct, {profile.null_count} null"
        )
        return profile

    def detect_value_type(self, value: Optional[str]) -> Tuple[SemanticType, float]:
        """
        Detect the semantic type of a single value.

        Args:
            value (Optional[str]): The value to classify

        Returns:
            Tuple[SemanticType, float]: Best matching type and its base confidence,
            ('unknown', 0.0) when nothing matches
        """
        if is_blank(value):
            return SemanticType.UNKNOWN, 0.0

        best_type, best_confidence = SemanticType.UNKNOWN, 0.0
        for semantic_type, rule in self.config.patterns.items():
            if rule.matches(value) and rule.base_confidence > best_confidence:
                best_type, best_confidence = semantic_type, rule.base_confidence
        return best_type, best_confidence

    def _count_detections(self, sample: List[str]) -> Dict[SemanticType, int]:
        """Count full matches per semantic type, in rule order."""
        detections = {}
        for semantic_type, rule in self.config.patterns.items():
            count = sum(1 for value in sample if rule.matches(value))
            if count:
                detections[semantic_type] = count
        return detections

    def _select_type(self, detections: Dict[SemanticType, int], sample_count: int) -> Tuple[SemanticType, float]:
        """Pick the most detected type and accept it against the threshold."""
        if not detections or sample_count == 0:
            return SemanticType.UNKNOWN, 0.0

        # max() keeps the first of equal counts, i.e. the first declared rule
        candidate = max(detections, key=detections.get)
        confidence = detections[candidate] / sample_count

        if confidence >= self.config.confidence_threshold:
            return candidate, confidence
        return SemanticType.UNKNOWN, confidence

    def _majority_primitive_type(self, sample: List[str]) -> PrimitiveType:
        if not sample:
            return PrimitiveType.STRING
        counts = Counter(detect_primitive_type(v) for v in sample)
        order = [t for t, _ in PRIMITIVE_PATTERNS] + [PrimitiveType.STRING]
        return max(order, key=lambda t: counts.get(t, 0))
