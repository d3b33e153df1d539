"""
pg-semantic-schema Data Models

This module provides the Pydantic models shared by every stage:
- Enumerations for semantic types, roles, table types and patterns
- Column profiles and relationship candidates
- Classification structures
- Column, table and schema definitions
"""

from typing import Annotated, Dict, List, Literal, Optional, Union
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field


class SemanticType(str, Enum):
    """Domain meaning of a column's values."""
    EMAIL = "email"
    PHONE = "phone"
    CURRENCY = "currency"
    DATE = "date"
    TIME = "time"
    URL = "url"
    ZIP_CODE = "zip-code"
    SSN = "ssn"
    UNKNOWN = "unknown"


class PrimitiveType(str, Enum):
    """Storage level type guessed from a value's shape."""
    INTEGER = "integer"
    DECIMAL = "decimal"
    BOOLEAN = "boolean"
    DATE = "date"
    TIMESTAMP = "timestamp"
    TIME = "time"
    STRING = "string"


class ColumnRole(str, Enum):
    """Structural role of a column."""
    IDENTIFIER = "identifier"
    MEASURE = "measure"
    DIMENSION = "dimension"
    CATEGORICAL_DIMENSION = "categorical-dimension"
    TEMPORAL_DIMENSION = "temporal-dimension"
    # Roles only produced by DDL synthesis
    SURROGATE_KEY = "surrogate-key"
    NATURAL_KEY = "natural-key"
    FOREIGN_KEY = "foreign-key"
    SCD_METADATA = "scd-metadata"
    METADATA = "metadata"


DIMENSION_ROLES = frozenset([
    ColumnRole.DIMENSION,
    ColumnRole.CATEGORICAL_DIMENSION,
    ColumnRole.TEMPORAL_DIMENSION,
])


class TableType(str, Enum):
    """Overall shape of a table."""
    FACT_TABLE = "fact-table"
    DIMENSION_TABLE = "dimension-table"


class SchemaPattern(str, Enum):
    """Recommended schema design."""
    STAR = "star"
    SNOWFLAKE = "snowflake"
    DIMENSION_TABLE = "dimension-table"
    SIMPLE_TABLE = "simple-table"


class RelationshipType(str, Enum):
    """Cardinality between a determinant and its dependent."""
    ONE_TO_ONE = "one-to-one"
    ONE_TO_MANY = "one-to-many"
    MANY_TO_ONE = "many-to-one"
    MANY_TO_MANY = "many-to-many"


class OverlapType(str, Enum):
    """How two value sets of a foreign key candidate relate."""
    SUBSET = "subset"
    SUPERSET = "superset"
    OVERLAP = "overlap"


class QualityLevel(str, Enum):
    """Data quality levels."""
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


class FrozenModel(BaseModel):
    """Base for immutable stage outputs."""
    model_config = ConfigDict(frozen=True)


# Profiling Models
class ColumnProfile(FrozenModel):
    """Semantic type and cardinality statistics of one column."""
    name: str = Field(..., description="Column name")
    semantic_type: SemanticType = Field(SemanticType.UNKNOWN, description="Accepted semantic type")
    confidence: float = Field(0.0, description="Share of sampled values matching the candidate type")
    unique_count: int = Field(0, description="Distinct non-blank values")
    null_count: int = Field(0, description="Blank values")
    total_count: int = Field(0, description="All values")
    non_null_count: int = Field(0, description="Non-blank values")
    sample_count: int = Field(0, description="Values used for type detection")
    primitive_type: PrimitiveType = Field(PrimitiveType.STRING, description="Most frequent primitive type")
    pattern_confidence: float = Field(0.0, description="Base confidence of the accepted rule")
    semantic_detections: Dict[str, int] = Field(default_factory=dict, description="Matches per semantic type")
    sample_values: List[str] = Field(default_factory=list, description="First distinct values")
    min_length: int = Field(0, description="Shortest non-blank value")
    max_length: int = Field(0, description="Longest non-blank value")

    @property
    def uniqueness_ratio(self) -> float:
        denominator = self.unique_count + self.null_count
        return self.unique_count / denominator if denominator else 0.0

    @property
    def null_ratio(self) -> float:
        return self.null_count / self.total_count if self.total_count else 0.0


# Relationship Models
class FunctionalDependency(FrozenModel):
    """Determinant column (nearly) determines the dependent column."""
    kind: Literal["functional-dependency"] = "functional-dependency"
    determinant: str = Field(..., description="Determinant column")
    dependent: str = Field(..., description="Dependent column")
    strength: float = Field(..., description="1 - violations / rows")
    full: bool = Field(False, description="True when strength is exactly 1.0")
    cardinality: RelationshipType = Field(RelationshipType.MANY_TO_MANY, description="Cardinality of the pair")


class HierarchyCandidate(FrozenModel):
    """Child value set is contained in the parent value set."""
    kind: Literal["hierarchy"] = "hierarchy"
    parent: str = Field(..., description="Column holding the superset")
    child: str = Field(..., description="Column holding the subset")
    coverage: float = Field(..., description="|child| / |parent|")


class ForeignKeyCandidate(FrozenModel):
    """Two columns whose value sets overlap strongly."""
    kind: Literal["foreign-key"] = "foreign-key"
    source: str = Field(..., description="First column")
    target: str = Field(..., description="Second column")
    similarity: float = Field(..., description="Jaccard similarity of the value sets")
    shared_values: int = Field(0, description="Size of the intersection")
    overlap: OverlapType = Field(OverlapType.OVERLAP, description="Set relation of source to target")


RelationshipCandidate = Annotated[
    Union[FunctionalDependency, HierarchyCandidate, ForeignKeyCandidate],
    Field(discriminator="kind")
]


class RelationshipReport(FrozenModel):
    """All relationship candidates of one table."""
    functional_dependencies: List[FunctionalDependency] = Field(default_factory=list)
    hierarchies: List[HierarchyCandidate] = Field(default_factory=list)
    foreign_keys: List[ForeignKeyCandidate] = Field(default_factory=list)

    @property
    def candidates(self) -> List[RelationshipCandidate]:
        return [*self.functional_dependencies, *self.hierarchies, *self.foreign_keys]


# Classification Models
class ColumnRoleAssignment(FrozenModel):
    """Structural role of one column."""
    column: str = Field(..., description="Column name")
    role: ColumnRole = Field(..., description="Assigned role")
    semantic_type: SemanticType = Field(SemanticType.UNKNOWN, description="Semantic type of the column")
    uniqueness_ratio: float = Field(0.0, description="distinct / (distinct + null)")
    unique_count: int = Field(0, description="Distinct non-blank values")
    null_count: int = Field(0, description="Blank values")


class FactStructure(FrozenModel):
    """Central structure of a fact-shaped table."""
    table_name: str = Field(..., description="Source table name")
    measures: List[ColumnRoleAssignment] = Field(default_factory=list)
    dimension_references: List[ColumnRoleAssignment] = Field(default_factory=list)
    natural_keys: List[ColumnRoleAssignment] = Field(default_factory=list)
    foreign_key_candidates: List[ForeignKeyCandidate] = Field(default_factory=list)


class DimensionStructure(FrozenModel):
    """Structure of a dimension-shaped table."""
    table_name: str = Field(..., description="Source table name")
    natural_key: Optional[ColumnRoleAssignment] = Field(None, description="First identifier column")
    attributes: List[ColumnRoleAssignment] = Field(default_factory=list)
    measures: List[ColumnRoleAssignment] = Field(default_factory=list)
    hierarchies: List[HierarchyCandidate] = Field(default_factory=list)


class SnowflakeTable(FrozenModel):
    """One side of a normalized hierarchy."""
    name: str = Field(..., description="Dimension table name")
    key_column: str = Field(..., description="Source column keyed by the table")
    foreign_key: Optional[str] = Field(None, description="Parent source column, for the child side")


class SnowflakeDimension(FrozenModel):
    """A hierarchy normalized into a parent/child dimension pair."""
    dimension_name: str = Field(..., description="Name of the parent dimension")
    parent_table: SnowflakeTable
    child_table: SnowflakeTable
    coverage: float = Field(..., description="Coverage of the underlying hierarchy")


class PatternHypothesis(FrozenModel):
    """One candidate schema pattern with its confidence."""
    schema_pattern: SchemaPattern
    confidence: float
    central_structure: Optional[FactStructure] = None
    dimension_structure: Optional[DimensionStructure] = None
    snowflake_dimensions: List[SnowflakeDimension] = Field(default_factory=list)
    recommendations: List[str] = Field(default_factory=list)


class TableClassification(FrozenModel):
    """Final shape of a table and the recommended pattern."""
    table_name: str
    table_type: TableType
    schema_pattern: SchemaPattern
    confidence: float
    central_structure: Optional[FactStructure] = None
    dimension_structure: Optional[DimensionStructure] = None
    snowflake_dimensions: List[SnowflakeDimension] = Field(default_factory=list)
    recommendations: List[str] = Field(default_factory=list)
    detected_patterns: Dict[str, Optional[PatternHypothesis]] = Field(default_factory=dict)
    retained_hierarchies: List[HierarchyCandidate] = Field(default_factory=list)


# Definition Models
class ColumnType(FrozenModel):
    """PostgreSQL type descriptor."""
    name: str = Field(..., description="Base type name, e.g. VARCHAR")
    length: Optional[int] = Field(None, description="Width of VARCHAR/CHAR types")
    precision: Optional[int] = Field(None, description="DECIMAL precision")
    scale: Optional[int] = Field(None, description="DECIMAL scale")

    @property
    def is_variable_width(self) -> bool:
        return self.name == "VARCHAR"

    @property
    def sql(self) -> str:
        if self.length is not None:
            return f"{self.name}({self.length})"
        if self.precision is not None:
            return f"{self.name}({self.precision},{self.scale or 0})"
        return self.name


class ColumnDefinition(FrozenModel):
    """A synthesized output column."""
    name: str = Field(..., description="Column identifier")
    column_type: ColumnType
    constraints: List[str] = Field(default_factory=list)
    role: ColumnRole
    semantic_type: Optional[SemanticType] = None
    source_column: Optional[str] = Field(None, description="Input column the definition derives from")
    references_table: Optional[str] = Field(None, description="Dimension table referenced by a foreign key")

    @property
    def target_type(self) -> str:
        return self.column_type.sql

    @property
    def length(self) -> Optional[int]:
        return self.column_type.length

    def render(self) -> str:
        parts = [self.name, self.target_type] + list(self.constraints)
        return "    " + " ".join(parts)


class TableDefinition(FrozenModel):
    """A synthesized output table."""
    table_name: str
    create_statement: str
    indexes: List[str] = Field(default_factory=list)
    columns: List[ColumnDefinition] = Field(default_factory=list)
    constraint_statements: List[str] = Field(default_factory=list)

    def column(self, name: str) -> Optional[ColumnDefinition]:
        return next((col for col in self.columns if col.name == name), None)


class SchemaDDL(FrozenModel):
    """All statements synthesized for one inference run."""
    schema_name: str
    schema_statements: List[str] = Field(default_factory=list)
    tables: List[TableDefinition] = Field(default_factory=list)
    comment_statements: List[str] = Field(default_factory=list)
    maintenance_procedure: Optional[str] = None
    trigger_statements: List[str] = Field(default_factory=list)
    statements: List[str] = Field(default_factory=list)

    @property
    def script(self) -> str:
        return "\n\n".join(self.statements)


# Quality and Naming Models
class ColumnQuality(FrozenModel):
    """Quality scores of one column."""
    column: str
    completeness: float
    uniqueness: float
    validity: Optional[float] = None


class QualityIssue(FrozenModel):
    """A data quality finding on one column."""
    type: str
    severity: str
    message: str
    column: str


class DataQualityReport(FrozenModel):
    """Quality assessment of an inferred model."""
    columns: List[ColumnQuality] = Field(default_factory=list)
    consistency: Dict[str, float] = Field(default_factory=dict, description="Foreign key pair -> similarity")
    issues: List[QualityIssue] = Field(default_factory=list)
    overall_score: float = 0.0
    quality_level: QualityLevel = QualityLevel.LOW
    semantic_type_coverage: float = 0.0


class NamingSuggestion(FrozenModel):
    """Business domain and suggested names."""
    detected_domain: str
    domain_confidence: float
    table_purpose: str
    schema_name: str
    table_name: str
    suggested_columns: Dict[str, str] = Field(default_factory=dict)
    domain_scores: Dict[str, int] = Field(default_factory=dict)


class InferenceResult(FrozenModel):
    """Everything an inference run produces."""
    table_name: str
    schema_name: str
    profiles: List[ColumnProfile]
    relationships: RelationshipReport
    roles: List[ColumnRoleAssignment]
    classification: TableClassification
    ddl: SchemaDDL
    data_quality: DataQualityReport
    naming: NamingSuggestion

    @property
    def tables(self) -> List[TableDefinition]:
        return self.ddl.tables

    def profile(self, name: str) -> Optional[ColumnProfile]:
        return next((p for p in self.profiles if p.name == name), None)
