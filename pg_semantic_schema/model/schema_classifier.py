"""
pg-semantic-schema Schema Classifier

This module classifies a table as fact or dimension shaped and picks
the schema pattern to model it with:
- Star schema (fact table referencing denormalized dimensions)
- Snowflake schema (star schema with normalized dimension hierarchies)
- Dimension table (descriptive attributes keyed by a natural key)
- Simple table (fallback when no pattern is convincing)
"""

import re
from typing import List, Optional

from ..core.config import Config, InferenceConfig
from ..core.logger import Logger
from ..core.models import (
    DIMENSION_ROLES, ColumnRole, ColumnRoleAssignment, DimensionStructure,
    FactStructure, HierarchyCandidate, PatternHypothesis, RelationshipReport,
    SchemaPattern, SnowflakeDimension, SnowflakeTable, TableClassification, TableType
)


SIMPLE_TABLE_CONFIDENCE = 0.3
LOW_CONFIDENCE_RECOMMENDATION = "Consider manual schema design due to low pattern confidence"


class SchemaClassifier:
    """
    Schema classifier selecting a schema pattern for one table.
    """

    def __init__(self, config: Optional[InferenceConfig] = None, settings: Optional[Config] = None):
        """Initialize the schema classifier."""
        self.config = config or InferenceConfig()
        self.logger = Logger("schema_classifier", config=settings)

    def classify(self, table_name: str, roles: List[ColumnRoleAssignment],
                 relationships: RelationshipReport) -> TableClassification:
        """
        Classify a table and select its schema pattern.

        Args:
            table_name (str): Source table name
            roles (List[ColumnRoleAssignment]): Column roles in header order
            relationships (RelationshipReport): Discovered relationships

        Returns:
            TableClassification: Table type, selected pattern and the hypotheses considered
        """
        table_type = self.determine_table_type(roles, relationships)
        hierarchies = self.retained_hierarchies(relationships.hierarchies)

        star = self.detect_star_pattern(table_name, table_type, roles, relationships)
        dimension = self.detect_dimension_pattern(table_name, table_type, roles, relationships)
        snowflake = self.detect_snowflake_pattern(table_name, table_type, roles, relationships, hierarchies)

        selected = self._select_pattern(star, snowflake, dimension)
        classification = TableClassification(
            table_name=table_name,
            table_type=table_type,
            schema_pattern=selected.schema_pattern,
            confidence=selected.confidence,
            central_structure=selected.central_structure,
            dimension_structure=selected.dimension_structure,
            snowflake_dimensions=selected.snowflake_dimensions,
            recommendations=selected.recommendations,
            detected_patterns={"star": star, "snowflake": snowflake, "dimension": dimension},
            retained_hierarchies=hierarchies,
        )

        self.logger.info(
            f"Table '{table_name}' is a {table_type.value}; best pattern "
            f"{classification.schema_pattern.value} with confidence {classification.confidence:.2f}"
        )
        return classification

    def determine_table_type(self, roles: List[ColumnRoleAssignment],
                             relationships: RelationshipReport) -> TableType:
        """
        Determine if a table is a fact table or dimension table.

        Args:
            roles (List[ColumnRoleAssignment]): Column roles
            relationships (RelationshipReport): Discovered relationships

        Returns:
            TableType: 'fact-table' or 'dimension-table'
        """
        identifiers = sum(1 for r in roles if r.role == ColumnRole.IDENTIFIER)
        measures = sum(1 for r in roles if r.role == ColumnRole.MEASURE)
        dimensions = sum(1 for r in roles if r.role in DIMENSION_ROLES)
        foreign_keys = len(relationships.foreign_keys)

        # Many measures and foreign keys
        if measures > 2 and foreign_keys > 1:
            return TableType.FACT_TABLE
        # Descriptive columns dominate
        if dimensions > measures and foreign_keys < 2:
            return TableType.DIMENSION_TABLE
        # Lookup tables
        if identifiers > self.config.identifier_share_threshold * len(roles):
            return TableType.DIMENSION_TABLE
        return TableType.FACT_TABLE

    def retained_hierarchies(self, hierarchies: List[HierarchyCandidate]) -> List[HierarchyCandidate]:
        """Keep hierarchies above the coverage threshold, one per parent->child chain."""
        retained = {}
        for hierarchy in hierarchies:
            if hierarchy.coverage > self.config.hierarchy_coverage_threshold:
                retained.setdefault((hierarchy.parent, hierarchy.child), hierarchy)
        return list(retained.values())

    def fact_structure(self, table_name: str, roles: List[ColumnRoleAssignment],
                       relationships: RelationshipReport) -> FactStructure:
        return FactStructure(
            table_name=table_name,
            measures=[r for r in roles if r.role == ColumnRole.MEASURE],
            dimension_references=[r for r in roles if r.role in DIMENSION_ROLES],
            natural_keys=[r for r in roles if r.role == ColumnRole.IDENTIFIER],
            foreign_key_candidates=relationships.foreign_keys,
        )

    def dimension_structure(self, table_name: str, roles: List[ColumnRoleAssignment],
                            relationships: RelationshipReport) -> DimensionStructure:
        identifiers = [r for r in roles if r.role == ColumnRole.IDENTIFIER]
        lowered = table_name.lower()
        return DimensionStructure(
            table_name=table_name,
            natural_key=identifiers[0] if identifiers else None,
            attributes=[r for r in roles if r.role in DIMENSION_ROLES],
            measures=[r for r in roles if r.role == ColumnRole.MEASURE],
            hierarchies=[
                h for h in relationships.hierarchies
                if lowered in h.parent.lower() or lowered in h.child.lower()
            ],
        )

    def detect_star_pattern(self, table_name: str, table_type: TableType, roles: List[ColumnRoleAssignment],
                            relationships: RelationshipReport) -> Optional[PatternHypothesis]:
        """Star hypothesis, only for fact-shaped tables."""
        if table_type != TableType.FACT_TABLE:
            return None
        structure = self.fact_structure(table_name, roles, relationships)
        return PatternHypothesis(
            schema_pattern=SchemaPattern.STAR,
            confidence=self.star_confidence(structure),
            central_structure=structure,
            recommendations=self._star_recommendations(structure),
        )

    def detect_dimension_pattern(self, table_name: str, table_type: TableType, roles: List[ColumnRoleAssignment],
                                 relationships: RelationshipReport) -> Optional[PatternHypothesis]:
        """Dimension hypothesis, only for dimension-shaped tables."""
        if table_type != TableType.DIMENSION_TABLE:
            return None
        structure = self.dimension_structure(table_name, roles, relationships)
        return PatternHypothesis(
            schema_pattern=SchemaPattern.DIMENSION_TABLE,
            confidence=self.dimension_confidence(structure),
            dimension_structure=structure,
            recommendations=self._dimension_recommendations(structure),
        )

    def detect_snowflake_pattern(self, table_name: str, table_type: TableType, roles: List[ColumnRoleAssignment],
                                 relationships: RelationshipReport,
                                 hierarchies: List[HierarchyCandidate]) -> Optional[PatternHypothesis]:
        """Snowflake hypothesis, for fact-shaped tables with retained hierarchies."""
        if table_type != TableType.FACT_TABLE or not hierarchies:
            return None
        structure = self.fact_structure(table_name, roles, relationships)
        return PatternHypothesis(
            schema_pattern=SchemaPattern.SNOWFLAKE,
            confidence=self.snowflake_confidence(structure, hierarchies),
            central_structure=structure,
            snowflake_dimensions=[self._snowflake_dimension(h) for h in hierarchies],
            recommendations=self._snowflake_recommendations(structure),
        )

    def star_confidence(self, structure: FactStructure) -> float:
        measures = len(structure.measures)
        dimensions = len(structure.dimension_references)
        foreign_keys = len(structure.foreign_key_candidates)

        if measures >= 2 and dimensions >= 3 and foreign_keys >= 2:
            return 0.9
        if measures >= 1 and dimensions >= 2 and foreign_keys >= 1:
            return 0.7
        if measures >= 1 and dimensions >= 1:
            return 0.5
        return 0.2

    def dimension_confidence(self, structure: DimensionStructure) -> float:
        has_natural_key = structure.natural_key is not None
        attributes = len(structure.attributes)

        if has_natural_key and attributes >= 3:
            return 0.8
        if has_natural_key and attributes >= 2:
            return 0.6
        if has_natural_key:
            return 0.4
        return 0.2

    def snowflake_confidence(self, structure: FactStructure, hierarchies: List[HierarchyCandidate]) -> float:
        bonus = min(0.2, 0.05 * len(hierarchies))
        return min(1.0, self.star_confidence(structure) + bonus)

    def _select_pattern(self, star: Optional[PatternHypothesis], snowflake: Optional[PatternHypothesis],
                        dimension: Optional[PatternHypothesis]) -> PatternHypothesis:
        star_confidence = star.confidence if star else 0.0

        if snowflake and snowflake.confidence > star_confidence:
            return snowflake
        if star and star.confidence > 0.5:
            return star
        if dimension and dimension.confidence > 0.5:
            return dimension
        return PatternHypothesis(
            schema_pattern=SchemaPattern.SIMPLE_TABLE,
            confidence=SIMPLE_TABLE_CONFIDENCE,
            recommendations=[LOW_CONFIDENCE_RECOMMENDATION],
        )

    def _snowflake_dimension(self, hierarchy: HierarchyCandidate) -> SnowflakeDimension:
        parent_name = self.dimension_table_name(hierarchy.parent)
        return SnowflakeDimension(
            dimension_name=parent_name,
            parent_table=SnowflakeTable(name=parent_name, key_column=hierarchy.parent),
            child_table=SnowflakeTable(
                name=self.dimension_table_name(hierarchy.child),
                key_column=hierarchy.child,
                foreign_key=hierarchy.parent,
            ),
            coverage=hierarchy.coverage,
        )

    def dimension_table_name(self, name: str) -> str:
        return self.config.dim_table_prefix + re.sub(r'[^a-zA-Z0-9_]', '_', name).lower()

    def _star_recommendations(self, structure: FactStructure) -> List[str]:
        recommendations = ["Add surrogate key (auto-incrementing ID) as primary key"]
        if structure.measures:
            recommendations.append(
                f"Configure {len(structure.measures)} measure columns with appropriate aggregation functions"
            )
        if structure.foreign_key_candidates:
            recommendations.append("Create foreign key relationships to dimension tables")
        recommendations.append("Create composite indexes on foreign key combinations for query performance")
        if any(r.role == ColumnRole.TEMPORAL_DIMENSION for r in structure.dimension_references):
            recommendations.append("Consider date-based partitioning for improved query performance")
        return recommendations

    def _dimension_recommendations(self, structure: DimensionStructure) -> List[str]:
        recommendations = [
            "Add surrogate key as primary key, keep natural key as alternate key",
            "Consider Slowly Changing Dimension (SCD) Type 2 for historical tracking",
        ]
        if structure.attributes:
            recommendations.append("Create descriptive attributes with proper data types and constraints")
        if structure.hierarchies:
            recommendations.append("Implement hierarchical relationships with bridge tables if needed")
        return recommendations

    def _snowflake_recommendations(self, structure: FactStructure) -> List[str]:
        return self._star_recommendations(structure) + [
            "Normalize dimension hierarchies into separate tables to reduce redundancy",
            "Consider impact on query performance due to additional joins",
            "Implement proper referential integrity between normalized dimension tables",
        ]
