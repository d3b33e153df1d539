"""
pg-semantic-schema Quality Assessor

This module provides data quality assessment of an inferred model:
completeness and uniqueness per column, consistency per foreign key
candidate and validity per semantically typed column.
"""

from typing import Dict, List, Optional

import numpy as np

from ..core.config import Config
from ..core.logger import Logger
from ..core.models import (
    ColumnProfile, ColumnQuality, ColumnRole, ColumnRoleAssignment,
    DataQualityReport, QualityIssue, QualityLevel, RelationshipReport, SemanticType
)


class QualityAssessor:
    """
    Data quality assessor for profiled tables.
    """

    def __init__(self, settings: Optional[Config] = None):
        """Initialize the quality assessor."""
        self.logger = Logger("quality_assessor", config=settings)

    def assess(self, roles: List[ColumnRoleAssignment], relationships: RelationshipReport,
               profiles: List[ColumnProfile]) -> DataQualityReport:
        """
        Assess data quality of one table.

        Args:
            roles (List[ColumnRoleAssignment]): Column roles
            relationships (RelationshipReport): Discovered relationships
            profiles (List[ColumnProfile]): Column profiles

        Returns:
            DataQualityReport: Quality scores, level and issues
        """
        self.logger.info("Assessing data quality")
        role_by_column = {r.column: r.role for r in roles}

        columns = [self._assess_column(profile) for profile in profiles]
        consistency = {
            f"{fk.source}->{fk.target}": fk.similarity for fk in relationships.foreign_keys
        }

        scores = [c.completeness for c in columns] + [c.validity for c in columns if c.validity is not None]
        overall_score = float(np.mean(scores)) if scores else 0.0

        typed = sum(1 for p in profiles if p.semantic_type != SemanticType.UNKNOWN)
        report = DataQualityReport(
            columns=columns,
            consistency=consistency,
            issues=self._find_issues(profiles, role_by_column),
            overall_score=overall_score,
            quality_level=self._quality_level(overall_score),
            semantic_type_coverage=typed / len(profiles) if profiles else 0.0,
        )

        self.logger.info(f"Quality assessment completed. Overall score: {overall_score:.2f}")
        return report

    def _assess_column(self, profile: ColumnProfile) -> ColumnQuality:
        completeness = (
            (profile.total_count - profile.null_count) / profile.total_count
            if profile.total_count else 0.0
        )
        validity = profile.confidence if profile.semantic_type != SemanticType.UNKNOWN else None
        return ColumnQuality(
            column=profile.name,
            completeness=completeness,
            uniqueness=profile.uniqueness_ratio,
            validity=validity,
        )

    def _find_issues(self, profiles: List[ColumnProfile], roles: Dict[str, ColumnRole]) -> List[QualityIssue]:
        """Collect column level issues, most severe first."""
        issues = []
        for profile in profiles:
            null_percentage = profile.null_ratio * 100
            if null_percentage > 50:
                issues.append(QualityIssue(
                    type="high_nulls",
                    severity="high",
                    message=f"Column {profile.name} has {null_percentage:.1f}% null values",
                    column=profile.name,
                ))

            if roles.get(profile.name) == ColumnRole.DIMENSION and profile.unique_count < 10:
                issues.append(QualityIssue(
                    type="low_cardinality",
                    severity="medium",
                    message=f"Dimension column {profile.name} has very low cardinality ({profile.unique_count})",
                    column=profile.name,
                ))

            if profile.semantic_type == SemanticType.UNKNOWN and 0 < profile.confidence < 1.0:
                issues.append(QualityIssue(
                    type="mixed_formats",
                    severity="low",
                    message=f"Column {profile.name} partially matches a semantic type ({profile.confidence:.0%})",
                    column=profile.name,
                ))

        severity_order = {"high": 0, "medium": 1, "low": 2}
        return sorted(issues, key=lambda i: severity_order[i.severity])

    def _quality_level(self, score: float) -> QualityLevel:
        if score >= 0.8:
            return QualityLevel.HIGH
        if score >= 0.5:
            return QualityLevel.MEDIUM
        return QualityLevel.LOW
