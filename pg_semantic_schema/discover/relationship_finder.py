"""
pg-semantic-schema Relationship Finder

This module provides relationship discovery between the columns
of a single table:
- Functional dependencies (determinant -> dependent)
- Inclusion relationships suggesting parent/child hierarchies
- Value overlap suggesting foreign key references
"""

from itertools import combinations, permutations
from typing import Dict, List, Optional, Set

import pandas as pd

from ..core.config import Config, InferenceConfig
from ..core.logger import Logger
from ..core.models import (
    ForeignKeyCandidate, FunctionalDependency, HierarchyCandidate,
    OverlapType, RelationshipReport, RelationshipType
)
from ..core.table import Table


class RelationshipFinder:
    """
    Relationship finder for discovering column relationships within a table.
    """

    def __init__(self, config: Optional[InferenceConfig] = None, settings: Optional[Config] = None):
        """Initialize the relationship finder."""
        self.config = config or InferenceConfig()
        self.logger = Logger("relationship_finder", config=settings)

    def find_relationships(self, table: Table) -> RelationshipReport:
        """
        Find all relationship candidates of a table.

        Args:
            table (Table): The input table

        Returns:
            RelationshipReport: Candidates sorted by descending score
        """
        self.logger.info(f"Finding relationships in table '{table.name}'")
        df = table.to_dataframe()
        value_sets = self._value_sets(df)

        report = RelationshipReport(
            functional_dependencies=self.find_functional_dependencies(df),
            hierarchies=self.find_hierarchies(value_sets),
            foreign_keys=self.find_foreign_keys(value_sets),
        )

        self.logger.info(
            f"Found {len(report.functional_dependencies)} functional dependencies, "
            f"{len(report.hierarchies)} hierarchies, {len(report.foreign_keys)} foreign key candidates"
        )
        return report

    def find_functional_dependencies(self, df: pd.DataFrame) -> List[FunctionalDependency]:
        """
        Find functional dependencies over ordered column pairs.

        Rows are grouped by the determinant value, blank being a group of its
        own. Every extra distinct dependent value inside a group counts as a
        violation.

        Args:
            df (pd.DataFrame): Table data, blanks as None

        Returns:
            List[FunctionalDependency]: Dependencies above the strength threshold
        """
        rows = len(df)
        if rows == 0:
            return []

        distinct = {col: df[col].nunique(dropna=False) for col in df.columns}
        dependencies = []
        for determinant, dependent in permutations(df.columns, 2):
            per_group = df.groupby(determinant, dropna=False, sort=False)[dependent].nunique()
            violations = int((per_group - 1).clip(lower=0).sum())
            strength = 1.0 - violations / rows

            if strength > self.config.fd_strength_threshold:
                dependencies.append(FunctionalDependency(
                    determinant=determinant,
                    dependent=dependent,
                    strength=strength,
                    full=violations == 0,
                    cardinality=self._cardinality(distinct[determinant], distinct[dependent], rows),
                ))

        return sorted(dependencies, key=lambda d: -d.strength)

    def find_hierarchies(self, value_sets: Dict[str, Set[str]]) -> List[HierarchyCandidate]:
        """
        Find inclusion relationships over ordered column pairs.

        Every child set contained in a parent set is reported with
        coverage |child| / |parent|; callers apply the coverage threshold.

        Args:
            value_sets (Dict[str, Set[str]]): Distinct non-blank values per column

        Returns:
            List[HierarchyCandidate]: Candidates sorted by descending coverage
        """
        candidates = [
            HierarchyCandidate(parent=parent, child=child, coverage=len(value_sets[child]) / len(value_sets[parent]))
            for child, parent in permutations(value_sets, 2)
            if value_sets[child] and value_sets[parent] and value_sets[child] <= value_sets[parent]
        ]
        return sorted(candidates, key=lambda h: -h.coverage)

    def find_foreign_keys(self, value_sets: Dict[str, Set[str]]) -> List[ForeignKeyCandidate]:
        """
        Find strongly overlapping column pairs.

        Args:
            value_sets (Dict[str, Set[str]]): Distinct non-blank values per column

        Returns:
            List[ForeignKeyCandidate]: Candidates sorted by descending similarity
        """
        candidates = []
        for source, target in combinations(value_sets, 2):
            source_values, target_values = value_sets[source], value_sets[target]
            if not source_values or not target_values:
                continue

            shared = source_values & target_values
            similarity = len(shared) / len(source_values | target_values)
            is_subset = source_values <= target_values
            is_superset = source_values >= target_values

            if similarity > self.config.jaccard_threshold or is_subset or is_superset:
                if is_subset:
                    overlap = OverlapType.SUBSET
                elif is_superset:
                    overlap = OverlapType.SUPERSET
                else:
                    overlap = OverlapType.OVERLAP
                candidates.append(ForeignKeyCandidate(
                    source=source,
                    target=target,
                    similarity=similarity,
                    shared_values=len(shared),
                    overlap=overlap,
                ))

        return sorted(candidates, key=lambda c: -c.similarity)

    def _value_sets(self, df: pd.DataFrame) -> Dict[str, Set[str]]:
        return {col: {v.strip() for v in df[col].dropna()} for col in df.columns}

    def _cardinality(self, determinant_distinct: int, dependent_distinct: int, rows: int) -> RelationshipType:
        if determinant_distinct == rows and dependent_distinct == rows:
            return RelationshipType.ONE_TO_ONE
        if determinant_distinct < dependent_distinct:
            return RelationshipType.ONE_TO_MANY
        if determinant_distinct > dependent_distinct:
            return RelationshipType.MANY_TO_ONE
        return RelationshipType.MANY_TO_MANY
