"""
pg-semantic-schema DDL Generator

This module turns a table classification into PostgreSQL DDL:
- Fact tables with surrogate keys, measures and dimension references
- Dimension tables with SCD Type 2 metadata columns
- Snowflake parent/child dimension pairs
- Simple tables for unclassified data
- Indexes, comments and the SCD maintenance procedure
"""

import re
from typing import Dict, List, Optional

from ..core.config import Config, InferenceConfig
from ..core.logger import Logger
from ..core.models import (
    ColumnDefinition, ColumnProfile, ColumnRole, ColumnRoleAssignment, ColumnType,
    DimensionStructure, FactStructure, PrimitiveType, SchemaDDL, SchemaPattern,
    SemanticType, SnowflakeDimension, TableClassification, TableDefinition
)


# Semantic types without a dedicated PostgreSQL type map to None and fall
# back to the primitive type.
SEMANTIC_TYPE_MAP: Dict[SemanticType, Optional[ColumnType]] = {
    SemanticType.EMAIL: ColumnType(name="VARCHAR", length=255),
    SemanticType.PHONE: ColumnType(name="VARCHAR", length=20),
    SemanticType.CURRENCY: ColumnType(name="DECIMAL", precision=15, scale=2),
    SemanticType.DATE: ColumnType(name="DATE"),
    SemanticType.TIME: ColumnType(name="TIME"),
    SemanticType.URL: ColumnType(name="TEXT"),
    SemanticType.ZIP_CODE: ColumnType(name="VARCHAR", length=10),
    SemanticType.SSN: ColumnType(name="CHAR", length=11),
    SemanticType.UNKNOWN: None,
}

PRIMITIVE_TYPE_MAP: Dict[PrimitiveType, ColumnType] = {
    PrimitiveType.INTEGER: ColumnType(name="BIGINT"),
    PrimitiveType.DECIMAL: ColumnType(name="DECIMAL", precision=15, scale=4),
    PrimitiveType.BOOLEAN: ColumnType(name="BOOLEAN"),
    PrimitiveType.DATE: ColumnType(name="DATE"),
    PrimitiveType.TIMESTAMP: ColumnType(name="TIMESTAMP"),
    PrimitiveType.TIME: ColumnType(name="TIME"),
    PrimitiveType.STRING: ColumnType(name="TEXT"),
}

SEMANTIC_WIDTHS = {
    SemanticType.EMAIL: 255,
    SemanticType.PHONE: 20,
    SemanticType.ZIP_CODE: 10,
    SemanticType.SSN: 11,
}

SIZED_TEXT_ROLES = frozenset([
    ColumnRole.IDENTIFIER,
    ColumnRole.CATEGORICAL_DIMENSION,
    ColumnRole.DIMENSION,
])

UNIQUE_NAME_TOKENS = ("id", "key", "code", "number")

SCD_END_OF_TIME = "'9999-12-31'"


def column_identifier(name: str) -> str:
    """Lower-case a source name and replace characters outside [a-zA-Z0-9_] with '_'."""
    return re.sub(r'[^a-zA-Z0-9_]', '_', name).lower()


def postgres_type(semantic_type: SemanticType, primitive_type: PrimitiveType = PrimitiveType.STRING) -> ColumnType:
    """
    Map a column's types to a PostgreSQL type.

    Args:
        semantic_type (SemanticType): Detected semantic type, takes priority
        primitive_type (PrimitiveType): Storage type used for 'unknown'

    Returns:
        ColumnType: The PostgreSQL type descriptor
    """
    mapped = SEMANTIC_TYPE_MAP[semantic_type]
    if mapped is not None:
        return mapped
    return PRIMITIVE_TYPE_MAP[primitive_type]


def varchar_length(role: ColumnRole, unique_count: int, semantic_type: SemanticType = SemanticType.UNKNOWN) -> int:
    """
    Size a variable-length column.

    Args:
        role (ColumnRole): Column role
        unique_count (int): Distinct non-blank values
        semantic_type (SemanticType): Semantic type, fixed widths take priority

    Returns:
        int: The VARCHAR length
    """
    if semantic_type in SEMANTIC_WIDTHS:
        return SEMANTIC_WIDTHS[semantic_type]
    if role == ColumnRole.IDENTIFIER:
        return max(50, min(255, unique_count * 2))
    if role == ColumnRole.CATEGORICAL_DIMENSION:
        return max(50, min(100, unique_count))
    if role == ColumnRole.DIMENSION:
        return max(100, min(500, unique_count * 3))
    return 255


class DDLGenerator:
    """
    DDL generator producing PostgreSQL statements for a classified table.
    """

    def __init__(self, config: Optional[InferenceConfig] = None, settings: Optional[Config] = None):
        """Initialize the DDL generator."""
        self.config = config or InferenceConfig()
        self.logger = Logger("ddl_generator", config=settings)

    def generate(self, classification: TableClassification, profiles: List[ColumnProfile],
                 roles: List[ColumnRoleAssignment], schema_name: str,
                 table_name: Optional[str] = None) -> SchemaDDL:
        """
        Generate the complete DDL of one table.

        Args:
            classification (TableClassification): The selected pattern and its structures
            profiles (List[ColumnProfile]): Column profiles
            roles (List[ColumnRoleAssignment]): Column roles
            schema_name (str): Target PostgreSQL schema
            table_name (Optional[str]): Base name of generated tables, defaults to the classified table

        Returns:
            SchemaDDL: Table definitions and the ordered script
        """
        table_name = table_name or classification.table_name
        pattern = classification.schema_pattern
        self.logger.info(f"Generating PostgreSQL DDL for table '{table_name}' in schema '{schema_name}'")

        profile_by_name = {p.name: p for p in profiles}

        if pattern == SchemaPattern.STAR:
            tables = [self.fact_table(classification.central_structure, profile_by_name, schema_name, table_name)]
        elif pattern == SchemaPattern.SNOWFLAKE:
            tables = [self.fact_table(classification.central_structure, profile_by_name, schema_name, table_name)]
            for dimension in classification.snowflake_dimensions:
                for table in self.snowflake_tables(dimension, profile_by_name, schema_name):
                    # Chained hierarchies share their middle table
                    if all(t.table_name != table.table_name for t in tables):
                        tables.append(table)
                    else:
                        self.logger.warning(
                            f"Dimension table '{table.table_name}' of hierarchy "
                            f"{dimension.parent_table.key_column} -> {dimension.child_table.key_column} "
                            f"already generated, keeping the first definition"
                        )
        elif pattern == SchemaPattern.DIMENSION_TABLE:
            tables = [self.dimension_table(classification.dimension_structure, profile_by_name, schema_name, table_name)]
        else:
            tables = [self.simple_table(roles, profile_by_name, schema_name, table_name)]

        schema_statements = [
            f"CREATE SCHEMA IF NOT EXISTS {schema_name};",
            f"SET search_path TO {schema_name}, public;",
        ]
        comment_statements = [c for t in tables for c in self.comment_statements(t, schema_name)]

        dimension_tables = [t for t in tables if t.column("is_current") is not None]
        maintenance_procedure = self.maintenance_procedure(schema_name) if dimension_tables else None
        trigger_statements = [
            statement for t in dimension_tables
            for statement in [self.scd_trigger(t, schema_name)] if statement
        ]

        statements = list(schema_statements)
        # Dimension tables are created before the fact table referencing them
        fact_tables = [t for t in tables if t.columns and t.columns[0].name == "fact_id"]
        statements.extend(t.create_statement for t in tables if t not in fact_tables)
        statements.extend(t.create_statement for t in fact_tables)
        statements.extend(s for t in tables for s in t.constraint_statements)
        statements.extend(i for t in tables for i in t.indexes)
        statements.extend(comment_statements)
        if maintenance_procedure:
            statements.append(maintenance_procedure)
        statements.extend(trigger_statements)

        self.logger.info(f"Generated {len(statements)} DDL statements for pattern {pattern.value}")
        return SchemaDDL(
            schema_name=schema_name,
            schema_statements=schema_statements,
            tables=tables,
            comment_statements=comment_statements,
            maintenance_procedure=maintenance_procedure,
            trigger_statements=trigger_statements,
            statements=statements,
        )

    def column_definition(self, assignment: ColumnRoleAssignment,
                          profile: Optional[ColumnProfile] = None) -> ColumnDefinition:
        """
        Build the definition of one source column.

        Args:
            assignment (ColumnRoleAssignment): Column role
            profile (Optional[ColumnProfile]): Column profile, for primitive type and totals

        Returns:
            ColumnDefinition: Type and constraints of the column
        """
        name = column_identifier(assignment.column)
        semantic_type = assignment.semantic_type
        role = assignment.role
        primitive_type = profile.primitive_type if profile else PrimitiveType.STRING

        column_type = postgres_type(semantic_type, primitive_type)
        if column_type.is_variable_width:
            column_type = ColumnType(name="VARCHAR", length=varchar_length(role, assignment.unique_count, semantic_type))
        elif (self.config.bounded_text_columns and column_type.name == "TEXT"
              and semantic_type == SemanticType.UNKNOWN and role in SIZED_TEXT_ROLES):
            column_type = ColumnType(name="VARCHAR", length=varchar_length(role, assignment.unique_count))

        total = profile.total_count if profile else assignment.unique_count + assignment.null_count
        constraints = []
        if total > 0 and assignment.null_count / total < self.config.not_null_ratio:
            constraints.append("NOT NULL")
        if (role == ColumnRole.IDENTIFIER
                and semantic_type == SemanticType.UNKNOWN
                and assignment.unique_count > self.config.unique_min_distinct
                and any(token in name for token in UNIQUE_NAME_TOKENS)):
            constraints.append("UNIQUE")

        return ColumnDefinition(
            name=name,
            column_type=column_type,
            constraints=constraints,
            role=role,
            semantic_type=semantic_type,
            source_column=assignment.column,
        )

    def fact_table(self, structure: Optional[FactStructure], profiles: Dict[str, ColumnProfile],
                   schema_name: str, table_name: str) -> TableDefinition:
        """Fact table with surrogate key, measures and one foreign key per dimension reference."""
        measures = structure.measures if structure else []
        references = structure.dimension_references if structure else []
        name = f"{self.config.schema_prefix}{column_identifier(table_name)}{self.config.fact_table_suffix}"

        measure_columns = [self.column_definition(m, profiles.get(m.column)) for m in measures]
        key_columns = []
        for reference in references:
            base = self.column_definition(reference, profiles.get(reference.column))
            key_columns.append(ColumnDefinition(
                name=f"{base.name}_key",
                column_type=ColumnType(name="BIGINT"),
                constraints=[c for c in base.constraints if c == "NOT NULL"],
                role=ColumnRole.FOREIGN_KEY,
                semantic_type=base.semantic_type,
                source_column=base.source_column,
                references_table=f"{self.config.dim_table_prefix}{base.name}",
            ))

        source_columns = self._distinct_names(measure_columns + key_columns, reserved=["fact_id"])
        measure_columns = source_columns[:len(measure_columns)]
        key_columns = source_columns[len(measure_columns):]
        columns = [self._surrogate_key("fact_id")] + source_columns
        foreign_keys = [
            f"    CONSTRAINT fk_{name}_{col.name} FOREIGN KEY ({col.name}) "
            f"REFERENCES {schema_name}.{col.references_table}(dim_id)"
            for col in key_columns
        ]

        indexes = []
        if measure_columns:
            indexes.append(
                f"CREATE INDEX idx_{name}_measures ON {schema_name}.{name} "
                f"({', '.join(c.name for c in measure_columns)});"
            )
        if key_columns:
            indexes.append(
                f"CREATE INDEX idx_{name}_dimensions ON {schema_name}.{name} "
                f"({', '.join(c.name for c in key_columns)});"
            )

        return TableDefinition(
            table_name=name,
            create_statement=self._create_statement(schema_name, name, columns, foreign_keys),
            indexes=indexes,
            columns=columns,
        )

    def dimension_table(self, structure: Optional[DimensionStructure], profiles: Dict[str, ColumnProfile],
                        schema_name: str, table_name: str, extra_columns: Optional[List[ColumnDefinition]] = None,
                        constraint_statements: Optional[List[str]] = None) -> TableDefinition:
        """Dimension table with surrogate key, natural key, attributes and SCD Type 2 columns."""
        name = f"{self.config.dim_table_prefix}{column_identifier(table_name)}"
        if structure is None:
            return self.minimal_dimension_table(schema_name, name)

        source_columns = []
        if structure.natural_key is not None:
            base = self.column_definition(structure.natural_key, profiles.get(structure.natural_key.column))
            source_columns.append(base.model_copy(update={
                "role": ColumnRole.NATURAL_KEY,
                "constraints": ["NOT NULL", "UNIQUE"],
            }))
        source_columns.extend(self.column_definition(a, profiles.get(a.column)) for a in structure.attributes)

        extra_columns = extra_columns or []
        scd_columns = self._scd_columns()
        reserved = ["dim_id"] + [c.name for c in extra_columns + scd_columns]
        source_columns = self._distinct_names(source_columns, reserved)
        natural_key = next((c for c in source_columns if c.role == ColumnRole.NATURAL_KEY), None)

        columns = [self._surrogate_key("dim_id")] + source_columns + extra_columns + scd_columns

        indexes = []
        if natural_key is not None:
            indexes.append(f"CREATE INDEX idx_{name}_natural_key ON {schema_name}.{name} ({natural_key.name});")
        indexes.append(f"CREATE INDEX idx_{name}_current ON {schema_name}.{name} (is_current) WHERE is_current = TRUE;")

        return TableDefinition(
            table_name=name,
            create_statement=self._create_statement(schema_name, name, columns),
            indexes=indexes,
            columns=columns,
            constraint_statements=constraint_statements or [],
        )

    def minimal_dimension_table(self, schema_name: str, name: str) -> TableDefinition:
        """Placeholder dimension table used when no structure was classified."""
        self.logger.warning(f"No dimension structure available, generating minimal table '{name}'")
        columns = [
            self._surrogate_key("dim_id"),
            ColumnDefinition(
                name="created_at",
                column_type=ColumnType(name="TIMESTAMP"),
                constraints=["DEFAULT CURRENT_TIMESTAMP"],
                role=ColumnRole.METADATA,
            ),
        ]
        return TableDefinition(
            table_name=name,
            create_statement=self._create_statement(schema_name, name, columns),
            columns=columns,
        )

    def snowflake_tables(self, dimension: SnowflakeDimension, profiles: Dict[str, ColumnProfile],
                         schema_name: str) -> List[TableDefinition]:
        """
        Normalize one hierarchy into a parent and a child dimension table.

        Args:
            dimension (SnowflakeDimension): The parent/child pair
            profiles (Dict[str, ColumnProfile]): Column profiles by source name
            schema_name (str): Target PostgreSQL schema

        Returns:
            List[TableDefinition]: Parent table followed by child table
        """
        parent = self.dimension_table(
            self._key_structure(dimension.parent_table.key_column, profiles),
            profiles, schema_name, dimension.parent_table.key_column,
        )

        child_name = f"{self.config.dim_table_prefix}{column_identifier(dimension.child_table.key_column)}"
        parent_reference = ColumnDefinition(
            name="parent_dim_id",
            column_type=ColumnType(name="BIGINT"),
            role=ColumnRole.FOREIGN_KEY,
            source_column=dimension.child_table.foreign_key,
            references_table=parent.table_name,
        )
        foreign_key = (
            f"ALTER TABLE {schema_name}.{child_name} ADD CONSTRAINT fk_{child_name}_parent "
            f"FOREIGN KEY (parent_dim_id) REFERENCES {schema_name}.{parent.table_name}(dim_id);"
        )
        child = self.dimension_table(
            self._key_structure(dimension.child_table.key_column, profiles),
            profiles, schema_name, dimension.child_table.key_column,
            extra_columns=[parent_reference],
            constraint_statements=[foreign_key],
        )
        return [parent, child]

    def simple_table(self, roles: List[ColumnRoleAssignment], profiles: Dict[str, ColumnProfile],
                     schema_name: str, table_name: str) -> TableDefinition:
        """Plain table holding every profiled column."""
        name = column_identifier(table_name)
        source_columns = self._distinct_names(
            [self.column_definition(r, profiles.get(r.column)) for r in roles],
            reserved=["id", "created_at"],
        )
        columns = [self._surrogate_key("id")] + source_columns
        columns.append(ColumnDefinition(
            name="created_at",
            column_type=ColumnType(name="TIMESTAMP"),
            constraints=["DEFAULT CURRENT_TIMESTAMP"],
            role=ColumnRole.METADATA,
        ))
        return TableDefinition(
            table_name=name,
            create_statement=self._create_statement(schema_name, name, columns),
            columns=columns,
        )

    def comment_statements(self, table: TableDefinition, schema_name: str) -> List[str]:
        comments = [
            f"COMMENT ON TABLE {schema_name}.{table.table_name} IS 'Auto-generated table from semantic analysis';"
        ]
        comments.extend(
            f"COMMENT ON COLUMN {schema_name}.{table.table_name}.{col.name} "
            f"IS 'Semantic type: {col.semantic_type.value}';"
            for col in table.columns
            if col.semantic_type is not None and col.semantic_type != SemanticType.UNKNOWN
        )
        return comments

    def maintenance_procedure(self, schema_name: str) -> str:
        """
        PL/pgSQL trigger function implementing SCD Type 2 inserts.

        The natural key column is passed as the first trigger argument. The
        current row for the incoming key is closed before the new row is
        stored as current. The key is read from NEW in the column's own type.
        """
        return "\n".join([
            f"CREATE OR REPLACE FUNCTION {schema_name}.update_dimension_scd()",
            "RETURNS TRIGGER AS $$",
            "BEGIN",
            "    -- Close current record",
            "    EXECUTE format(",
            "        'UPDATE %I.%I SET expiry_date = CURRENT_DATE, is_current = FALSE '",
            "        'WHERE %I = ($1).%I AND is_current = TRUE',",
            "        TG_TABLE_SCHEMA, TG_TABLE_NAME, TG_ARGV[0], TG_ARGV[0])",
            "    USING NEW;",
            "",
            "    -- Insert new record",
            "    NEW.effective_date := CURRENT_DATE;",
            f"    NEW.expiry_date := {SCD_END_OF_TIME};",
            "    NEW.is_current := TRUE;",
            "",
            "    RETURN NEW;",
            "END;",
            "$$ LANGUAGE plpgsql;",
        ])

    def scd_trigger(self, table: TableDefinition, schema_name: str) -> Optional[str]:
        """Trigger wiring a dimension table to the maintenance procedure, when it has a natural key."""
        natural_key = next((c for c in table.columns if c.role == ColumnRole.NATURAL_KEY), None)
        if natural_key is None:
            return None
        return (
            f"CREATE TRIGGER trg_{table.table_name}_scd BEFORE INSERT ON {schema_name}.{table.table_name} "
            f"FOR EACH ROW EXECUTE FUNCTION {schema_name}.update_dimension_scd('{natural_key.name}');"
        )

    def _key_structure(self, column: str, profiles: Dict[str, ColumnProfile]) -> DimensionStructure:
        profile = profiles.get(column)
        key = ColumnRoleAssignment(
            column=column,
            role=ColumnRole.IDENTIFIER,
            semantic_type=profile.semantic_type if profile else SemanticType.UNKNOWN,
            uniqueness_ratio=profile.uniqueness_ratio if profile else 0.0,
            unique_count=profile.unique_count if profile else 0,
            null_count=profile.null_count if profile else 0,
        )
        return DimensionStructure(table_name=column, natural_key=key)

    def _distinct_names(self, columns: List[ColumnDefinition], reserved: List[str]) -> List[ColumnDefinition]:
        """Suffix source columns whose identifier is generated or already taken."""
        taken = set(reserved)
        renamed = []
        for col in columns:
            name, suffix = col.name, 1
            while name in taken:
                name = f"{col.name}_{suffix}"
                suffix += 1
            taken.add(name)
            if name != col.name:
                self.logger.warning(f"Column '{col.source_column}' renamed to '{name}' to avoid a duplicate identifier")
                col = col.model_copy(update={"name": name})
            renamed.append(col)
        return renamed

    def _surrogate_key(self, name: str) -> ColumnDefinition:
        return ColumnDefinition(
            name=name,
            column_type=ColumnType(name="BIGSERIAL"),
            constraints=["PRIMARY KEY"],
            role=ColumnRole.SURROGATE_KEY,
        )

    def _scd_columns(self) -> List[ColumnDefinition]:
        return [
            ColumnDefinition(
                name="effective_date",
                column_type=ColumnType(name="DATE"),
                constraints=["NOT NULL", "DEFAULT CURRENT_DATE"],
                role=ColumnRole.SCD_METADATA,
            ),
            ColumnDefinition(
                name="expiry_date",
                column_type=ColumnType(name="DATE"),
                constraints=[f"DEFAULT {SCD_END_OF_TIME}"],
                role=ColumnRole.SCD_METADATA,
            ),
            ColumnDefinition(
                name="is_current",
                column_type=ColumnType(name="BOOLEAN"),
                constraints=["NOT NULL", "DEFAULT TRUE"],
                role=ColumnRole.SCD_METADATA,
            ),
        ]

    def _create_statement(self, schema_name: str, name: str, columns: List[ColumnDefinition],
                          table_constraints: Optional[List[str]] = None) -> str:
        body = [col.render() for col in columns] + list(table_constraints or [])
        return f"CREATE TABLE {schema_name}.{name} (\n" + ",\n".join(body) + "\n);"
