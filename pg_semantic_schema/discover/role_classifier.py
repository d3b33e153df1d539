"""
pg-semantic-schema Role Classifier

This module assigns a structural role (identifier, measure or one of
the dimension roles) to every profiled column.
"""

from typing import List, Optional

from ..core.config import Config, InferenceConfig
from ..core.logger import Logger
from ..core.models import ColumnProfile, ColumnRole, ColumnRoleAssignment, SemanticType


DESCRIPTIVE_TYPES = frozenset([SemanticType.EMAIL, SemanticType.PHONE, SemanticType.URL])
TEMPORAL_TYPES = frozenset([SemanticType.DATE, SemanticType.TIME])


class RoleClassifier:
    """
    Role classifier mapping column profiles to structural roles.
    """

    def __init__(self, config: Optional[InferenceConfig] = None, settings: Optional[Config] = None):
        """Initialize the role classifier."""
        self.config = config or InferenceConfig()
        self.logger = Logger("role_classifier", config=settings)

    def classify(self, profiles: List[ColumnProfile]) -> List[ColumnRoleAssignment]:
        """
        Classify every column.

        Args:
            profiles (List[ColumnProfile]): Column profiles in header order

        Returns:
            List[ColumnRoleAssignment]: One assignment per profile, same order
        """
        assignments = [self.classify_column(profile) for profile in profiles]
        self.logger.info(
            "Assigned roles: " + ", ".join(f"{a.column}={a.role.value}" for a in assignments)
        )
        return assignments

    def classify_column(self, profile: ColumnProfile) -> ColumnRoleAssignment:
        """Assign the role of a single column."""
        return ColumnRoleAssignment(
            column=profile.name,
            role=self.determine_role(profile),
            semantic_type=profile.semantic_type,
            uniqueness_ratio=profile.uniqueness_ratio,
            unique_count=profile.unique_count,
            null_count=profile.null_count,
        )

    def determine_role(self, profile: ColumnProfile) -> ColumnRole:
        """
        Determine a column's role; the first matching rule wins.

        Args:
            profile (ColumnProfile): The column profile

        Returns:
            ColumnRole: The structural role
        """
        if profile.uniqueness_ratio > self.config.identifier_uniqueness_threshold:
            return ColumnRole.IDENTIFIER
        if profile.semantic_type in DESCRIPTIVE_TYPES:
            return ColumnRole.DIMENSION
        if profile.semantic_type in TEMPORAL_TYPES:
            return ColumnRole.TEMPORAL_DIMENSION
        if profile.semantic_type == SemanticType.CURRENCY:
            return ColumnRole.MEASURE
        if profile.unique_count < self.config.categorical_cardinality_cutoff:
            return ColumnRole.CATEGORICAL_DIMENSION
        if profile.unique_count < self.config.dimension_cardinality_cutoff:
            return ColumnRole.DIMENSION
        return ColumnRole.MEASURE
