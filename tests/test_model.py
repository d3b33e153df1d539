"""
Tests for pg-semantic-schema Model Stage

This module contains tests for schema classification, DDL generation
and naming suggestions.
"""

import logging
import re

import pytest

from pg_semantic_schema.core.config import InferenceConfig
from pg_semantic_schema.core.models import (
    ColumnRole, DimensionStructure, FactStructure, HierarchyCandidate, PrimitiveType,
    RelationshipReport, SchemaPattern, SemanticType, TableClassification, TableType
)
from pg_semantic_schema.model.ddl_generator import (
    SEMANTIC_TYPE_MAP, DDLGenerator, column_identifier, postgres_type, varchar_length
)
from pg_semantic_schema.model.naming import NamingAdvisor
from pg_semantic_schema.model.schema_classifier import LOW_CONFIDENCE_RECOMMENDATION, SchemaClassifier

from tests.factories import make_foreign_key, make_profile, make_role


def star_profiles():
    return [
        make_profile("quantity", unique_count=150, primitive_type=PrimitiveType.INTEGER),
        make_profile("amount", SemanticType.CURRENCY, unique_count=180, confidence=1.0),
        make_profile("region", unique_count=4, null_count=2),
        make_profile("product", unique_count=40, null_count=20),
        make_profile("order_date", SemanticType.DATE, unique_count=30, null_count=10, confidence=1.0),
    ]


class TestSchemaClassifier:
    """Test cases for SchemaClassifier."""

    def test_star_schema(self, config, star_roles, star_relationships):
        """Test 2 measures, 3 dimensions and 2 foreign keys select a star at 0.9."""
        classification = SchemaClassifier(config).classify("sales", star_roles, star_relationships)

        assert classification.table_type == TableType.FACT_TABLE
        assert classification.schema_pattern == SchemaPattern.STAR
        assert classification.confidence == 0.9
        assert classification.detected_patterns["snowflake"] is None
        assert len(classification.central_structure.measures) == 2
        assert len(classification.central_structure.dimension_references) == 3
        assert "Consider date-based partitioning for improved query performance" in classification.recommendations

    def test_classification_is_idempotent(self, config, star_roles, star_relationships):
        """Test that classifying identical input twice gives identical output."""
        classifier = SchemaClassifier(config)
        first = classifier.classify("sales", star_roles, star_relationships)
        second = classifier.classify("sales", star_roles, star_relationships)

        assert first == second
        assert (first.table_type, first.schema_pattern, first.confidence) == \
            (second.table_type, second.schema_pattern, second.confidence)

    def test_snowflake_schema(self, config, star_roles, snowflake_relationships):
        """Test that retained hierarchies lift a star into a snowflake."""
        classification = SchemaClassifier(config).classify("sales", star_roles, snowflake_relationships)

        assert classification.schema_pattern == SchemaPattern.SNOWFLAKE
        assert classification.confidence == pytest.approx(1.0)
        assert len(classification.retained_hierarchies) == 2
        assert [d.dimension_name for d in classification.snowflake_dimensions] == ["dim_product", "dim_order_date"]
        child = classification.snowflake_dimensions[0].child_table
        assert child.name == "dim_region"
        assert child.foreign_key == "product"

    def test_simple_table_fallback(self, config):
        """Test that one identifier and one dimension fall back to a simple table."""
        roles = [
            make_role("code", ColumnRole.IDENTIFIER),
            make_role("label", ColumnRole.DIMENSION, unique_count=30, null_count=30),
        ]
        classification = SchemaClassifier(config).classify("things", roles, RelationshipReport())

        assert classification.detected_patterns["star"] is None
        assert classification.detected_patterns["dimension"].confidence == 0.4
        assert classification.schema_pattern == SchemaPattern.SIMPLE_TABLE
        assert classification.confidence == 0.3
        assert classification.recommendations == [LOW_CONFIDENCE_RECOMMENDATION]

    def test_dimension_table(self, config):
        """Test that a natural key with three attributes selects a dimension table."""
        roles = [
            make_role("customer_code", ColumnRole.IDENTIFIER),
            make_role("region", ColumnRole.CATEGORICAL_DIMENSION, unique_count=2, null_count=2),
            make_role("segment", ColumnRole.CATEGORICAL_DIMENSION, unique_count=2, null_count=2),
            make_role("signup", ColumnRole.TEMPORAL_DIMENSION, SemanticType.DATE, unique_count=3, null_count=1),
        ]
        classification = SchemaClassifier(config).classify("customers", roles, RelationshipReport())

        assert classification.table_type == TableType.DIMENSION_TABLE
        assert classification.schema_pattern == SchemaPattern.DIMENSION_TABLE
        assert classification.confidence == 0.8
        assert classification.dimension_structure.natural_key.column == "customer_code"

    def test_table_type_rules(self, config):
        """Test the fact/dimension decision rules in order."""
        classifier = SchemaClassifier(config)
        two_fks = RelationshipReport(foreign_keys=[make_foreign_key("a", "b"), make_foreign_key("b", "c")])

        measures = [make_role(f"m{i}", ColumnRole.MEASURE) for i in range(3)]
        assert classifier.determine_table_type(measures, two_fks) == TableType.FACT_TABLE

        lookup = [make_role("a", ColumnRole.IDENTIFIER), make_role("b", ColumnRole.IDENTIFIER),
                  make_role("c", ColumnRole.MEASURE), make_role("d", ColumnRole.MEASURE)]
        assert classifier.determine_table_type(lookup, RelationshipReport()) == TableType.DIMENSION_TABLE

        narrow = [make_role("a", ColumnRole.IDENTIFIER), make_role("b", ColumnRole.MEASURE),
                  make_role("c", ColumnRole.MEASURE), make_role("d", ColumnRole.MEASURE),
                  make_role("e", ColumnRole.MEASURE)]
        assert classifier.determine_table_type(narrow, RelationshipReport()) == TableType.FACT_TABLE

    def test_star_confidence_tiers(self, config):
        """Test each star confidence tier."""
        classifier = SchemaClassifier(config)
        measure = make_role("m", ColumnRole.MEASURE)
        dimension = make_role("d", ColumnRole.DIMENSION)
        fk = make_foreign_key("a", "b")

        assert classifier.star_confidence(FactStructure(
            table_name="t", measures=[measure], dimension_references=[dimension, dimension],
            foreign_key_candidates=[fk])) == 0.7
        assert classifier.star_confidence(FactStructure(
            table_name="t", measures=[measure], dimension_references=[dimension])) == 0.5
        assert classifier.star_confidence(FactStructure(table_name="t", measures=[measure])) == 0.2

    def test_retained_hierarchies(self, config):
        """Test the coverage threshold and de-duplication per chain."""
        hierarchies = [
            HierarchyCandidate(parent="state", child="city", coverage=0.9),
            HierarchyCandidate(parent="state", child="city", coverage=0.8),
            HierarchyCandidate(parent="country", child="state", coverage=0.7),
        ]
        retained = SchemaClassifier(config).retained_hierarchies(hierarchies)

        assert [(h.parent, h.child, h.coverage) for h in retained] == [("state", "city", 0.9)]


class TestDDLGenerator:
    """Test cases for DDLGenerator."""

    def test_semantic_mapping_is_total(self):
        """Test that every semantic type has a mapping entry."""
        assert set(SEMANTIC_TYPE_MAP) == set(SemanticType)
        for semantic_type in SemanticType:
            assert postgres_type(semantic_type).sql

    def test_type_mapping(self):
        """Test semantic types take priority over primitive types."""
        assert postgres_type(SemanticType.EMAIL).sql == "VARCHAR(255)"
        assert postgres_type(SemanticType.CURRENCY, PrimitiveType.INTEGER).sql == "DECIMAL(15,2)"
        assert postgres_type(SemanticType.SSN).sql == "CHAR(11)"
        assert postgres_type(SemanticType.URL).sql == "TEXT"
        assert postgres_type(SemanticType.UNKNOWN, PrimitiveType.INTEGER).sql == "BIGINT"
        assert postgres_type(SemanticType.UNKNOWN, PrimitiveType.DECIMAL).sql == "DECIMAL(15,4)"
        assert postgres_type(SemanticType.UNKNOWN, PrimitiveType.TIMESTAMP).sql == "TIMESTAMP"
        assert postgres_type(SemanticType.UNKNOWN).sql == "TEXT"

    def test_varchar_length(self):
        """Test semantic widths and role based clamping."""
        assert varchar_length(ColumnRole.MEASURE, 10, SemanticType.PHONE) == 20
        assert varchar_length(ColumnRole.IDENTIFIER, 10) == 50
        assert varchar_length(ColumnRole.IDENTIFIER, 100) == 200
        assert varchar_length(ColumnRole.IDENTIFIER, 500) == 255
        assert varchar_length(ColumnRole.CATEGORICAL_DIMENSION, 70) == 70
        assert varchar_length(ColumnRole.CATEGORICAL_DIMENSION, 500) == 100
        assert varchar_length(ColumnRole.DIMENSION, 10) == 100
        assert varchar_length(ColumnRole.DIMENSION, 1000) == 500
        assert varchar_length(ColumnRole.MEASURE, 10) == 255

    def test_bounded_text_columns(self):
        """Test optional VARCHAR sizing of plain text columns."""
        generator = DDLGenerator(InferenceConfig(bounded_text_columns=True))
        role = make_role("city", ColumnRole.DIMENSION, unique_count=50, null_count=50)

        assert generator.column_definition(role, make_profile("city", unique_count=50, null_count=50)).target_type \
            == "VARCHAR(150)"
        assert DDLGenerator().column_definition(role).target_type == "TEXT"

    def test_not_null_threshold(self, config):
        """Test NOT NULL at a 5% null ratio and its absence at 15%."""
        generator = DDLGenerator(config)
        sparse = make_role("kind", ColumnRole.CATEGORICAL_DIMENSION, unique_count=5, null_count=1)
        sparser = make_role("kind", ColumnRole.CATEGORICAL_DIMENSION, unique_count=5, null_count=3)

        with_not_null = generator.column_definition(sparse, make_profile("kind", unique_count=5, null_count=1,
                                                                          total_count=20))
        without = generator.column_definition(sparser, make_profile("kind", unique_count=5, null_count=3,
                                                                     total_count=20))

        assert "NOT NULL" in with_not_null.constraints
        assert "NOT NULL" not in without.constraints

    def test_unique_constraint(self, config):
        """Test UNIQUE only for id-like unknown identifiers with enough distinct values."""
        generator = DDLGenerator(config)

        assert "UNIQUE" in generator.column_definition(make_role("Customer Code", ColumnRole.IDENTIFIER)).constraints
        assert "UNIQUE" not in generator.column_definition(make_role("label", ColumnRole.IDENTIFIER)).constraints
        assert "UNIQUE" not in generator.column_definition(
            make_role("email_id", ColumnRole.IDENTIFIER, SemanticType.EMAIL)).constraints
        assert "UNIQUE" not in generator.column_definition(
            make_role("order_id", ColumnRole.IDENTIFIER, unique_count=5)).constraints
        assert "UNIQUE" not in generator.column_definition(
            make_role("order_id", ColumnRole.DIMENSION, unique_count=50, null_count=50)).constraints

    def test_column_identifier(self):
        """Test identifier sanitizing."""
        assert column_identifier("Order Date!") == "order_date_"
        assert column_identifier("customer-id") == "customer_id"
        assert column_identifier("Amount_USD") == "amount_usd"

    def test_star_ddl(self, config, star_roles, star_relationships):
        """Test the fact table of a star schema."""
        classification = SchemaClassifier(config).classify("sales", star_roles, star_relationships)
        ddl = DDLGenerator(config).generate(classification, star_profiles(), star_roles, "dw")

        assert [t.table_name for t in ddl.tables] == ["semantic_sales_fact"]
        fact = ddl.tables[0]
        assert [c.name for c in fact.columns] == [
            "fact_id", "quantity", "amount", "region_key", "product_key", "order_date_key"
        ]
        assert fact.column("fact_id").target_type == "BIGSERIAL"
        assert fact.column("fact_id").constraints == ["PRIMARY KEY"]
        assert fact.column("quantity").target_type == "BIGINT"
        assert fact.column("amount").target_type == "DECIMAL(15,2)"
        assert fact.column("region_key").target_type == "BIGINT"
        assert fact.column("region_key").references_table == "dim_region"
        assert ("CONSTRAINT fk_semantic_sales_fact_region_key FOREIGN KEY (region_key) "
                "REFERENCES dw.dim_region(dim_id)") in fact.create_statement
        assert fact.indexes == [
            "CREATE INDEX idx_semantic_sales_fact_measures ON dw.semantic_sales_fact (quantity, amount);",
            "CREATE INDEX idx_semantic_sales_fact_dimensions ON dw.semantic_sales_fact "
            "(region_key, product_key, order_date_key);",
        ]
        assert ddl.maintenance_procedure is None
        assert ddl.schema_statements == ["CREATE SCHEMA IF NOT EXISTS dw;", "SET search_path TO dw, public;"]
        assert "COMMENT ON COLUMN dw.semantic_sales_fact.amount IS 'Semantic type: currency';" \
            in ddl.comment_statements

    def test_fact_indexes_skip_empty_lists(self, config):
        """Test that no index is emitted over an empty column list."""
        structure = FactStructure(table_name="t", measures=[make_role("m", ColumnRole.MEASURE)])
        table = DDLGenerator(config).fact_table(structure, {}, "dw", "t")

        assert table.indexes == ["CREATE INDEX idx_semantic_t_fact_measures ON dw.semantic_t_fact (m);"]

    def test_fact_column_collisions(self, config):
        """Test that a measure named like the fact surrogate key is suffixed."""
        structure = FactStructure(table_name="t", measures=[make_role("fact_id", ColumnRole.MEASURE)])
        table = DDLGenerator(config).fact_table(structure, {}, "dw", "t")

        assert [c.name for c in table.columns] == ["fact_id", "fact_id_1"]
        assert table.indexes == ["CREATE INDEX idx_semantic_t_fact_measures ON dw.semantic_t_fact (fact_id_1);"]

    def test_dimension_ddl(self, config):
        """Test surrogate key, natural key and SCD Type 2 columns."""
        structure = DimensionStructure(
            table_name="customers",
            natural_key=make_role("customer_code", ColumnRole.IDENTIFIER),
            attributes=[make_role("region", ColumnRole.CATEGORICAL_DIMENSION, unique_count=2, null_count=2)],
        )
        classification = TableClassification(
            table_name="customers", table_type=TableType.DIMENSION_TABLE,
            schema_pattern=SchemaPattern.DIMENSION_TABLE, confidence=0.8, dimension_structure=structure,
        )
        ddl = DDLGenerator(config).generate(classification, [], [], "crm")

        table = ddl.tables[0]
        assert table.table_name == "dim_customers"
        assert table.columns[0].name == "dim_id"
        assert table.columns[0].constraints == ["PRIMARY KEY"]
        assert table.column("customer_code").role == ColumnRole.NATURAL_KEY
        assert table.column("customer_code").constraints == ["NOT NULL", "UNIQUE"]

        scd = [c for c in table.columns if c.role == ColumnRole.SCD_METADATA]
        assert [c.name for c in scd] == ["effective_date", "expiry_date", "is_current"]
        assert table.column("effective_date").render() == "    effective_date DATE NOT NULL DEFAULT CURRENT_DATE"
        assert table.column("expiry_date").render() == "    expiry_date DATE DEFAULT '9999-12-31'"
        assert table.column("is_current").render() == "    is_current BOOLEAN NOT NULL DEFAULT TRUE"

        assert table.indexes == [
            "CREATE INDEX idx_dim_customers_natural_key ON crm.dim_customers (customer_code);",
            "CREATE INDEX idx_dim_customers_current ON crm.dim_customers (is_current) WHERE is_current = TRUE;",
        ]
        assert "CREATE OR REPLACE FUNCTION crm.update_dimension_scd()" in ddl.maintenance_procedure
        assert "is_current = FALSE" in ddl.maintenance_procedure
        assert ddl.trigger_statements == [
            "CREATE TRIGGER trg_dim_customers_scd BEFORE INSERT ON crm.dim_customers "
            "FOR EACH ROW EXECUTE FUNCTION crm.update_dimension_scd('customer_code');"
        ]

    def test_minimal_dimension_table(self, config):
        """Test that a dimension pattern without structure degrades to a minimal table."""
        classification = TableClassification(
            table_name="odd", table_type=TableType.DIMENSION_TABLE,
            schema_pattern=SchemaPattern.DIMENSION_TABLE, confidence=0.6,
        )
        ddl = DDLGenerator(config).generate(classification, [], [], "dw")

        assert [c.name for c in ddl.tables[0].columns] == ["dim_id", "created_at"]
        assert ddl.tables[0].table_name == "dim_odd"

    def test_snowflake_ddl(self, config, star_roles, snowflake_relationships):
        """Test parent/child dimension pairs of a snowflake schema."""
        classification = SchemaClassifier(config).classify("sales", star_roles, snowflake_relationships)
        ddl = DDLGenerator(config).generate(classification, star_profiles(), star_roles, "dw")

        names = [t.table_name for t in ddl.tables]
        assert names == ["semantic_sales_fact", "dim_product", "dim_region", "dim_order_date"]

        child = ddl.tables[2]
        assert child.column("parent_dim_id").target_type == "BIGINT"
        assert child.constraint_statements == [
            "ALTER TABLE dw.dim_region ADD CONSTRAINT fk_dim_region_parent "
            "FOREIGN KEY (parent_dim_id) REFERENCES dw.dim_product(dim_id);"
        ]
        for table in ddl.tables[1:]:
            scd = [c.name for c in table.columns if c.role == ColumnRole.SCD_METADATA]
            assert scd == ["effective_date", "expiry_date", "is_current"]
        assert ddl.maintenance_procedure is not None

    def test_statement_order(self, config, star_roles, snowflake_relationships):
        """Test the script order: schema, tables, constraints, indexes, comments, maintenance."""
        classification = SchemaClassifier(config).classify("sales", star_roles, snowflake_relationships)
        ddl = DDLGenerator(config).generate(classification, star_profiles(), star_roles, "dw")
        statements = ddl.statements

        first_create = next(i for i, s in enumerate(statements) if s.startswith("CREATE TABLE"))
        first_alter = next(i for i, s in enumerate(statements) if s.startswith("ALTER TABLE"))
        first_index = next(i for i, s in enumerate(statements) if s.startswith("CREATE INDEX"))
        first_comment = next(i for i, s in enumerate(statements) if s.startswith("COMMENT ON"))
        function = next(i for i, s in enumerate(statements) if s.startswith("CREATE OR REPLACE FUNCTION"))

        assert statements[:2] == ddl.schema_statements
        assert 2 == first_create < first_alter < first_index < first_comment < function
        assert ddl.script.startswith("CREATE SCHEMA IF NOT EXISTS dw;")

    def test_referenced_tables_created_first(self, config, star_roles, snowflake_relationships):
        """Test that every table referenced in a CREATE TABLE is created earlier in the script."""
        classification = SchemaClassifier(config).classify("sales", star_roles, snowflake_relationships)
        ddl = DDLGenerator(config).generate(classification, star_profiles(), star_roles, "dw")

        creates = [s for s in ddl.statements if s.startswith("CREATE TABLE")]
        position = {re.match(r"CREATE TABLE dw\.(\w+)", s).group(1): i for i, s in enumerate(creates)}
        for i, statement in enumerate(creates):
            for referenced in re.findall(r"REFERENCES dw\.(\w+)\(", statement):
                assert position[referenced] < i
        assert creates[-1].startswith("CREATE TABLE dw.semantic_sales_fact (")
        assert [t.table_name for t in ddl.tables][0] == "semantic_sales_fact"

    def test_shared_child_table_is_reported(self, config, star_roles, snowflake_relationships, caplog):
        """Test that a second hierarchy into an existing child table is logged and skipped."""
        classification = SchemaClassifier(config).classify("sales", star_roles, snowflake_relationships)
        with caplog.at_level(logging.WARNING):
            ddl = DDLGenerator(config).generate(classification, star_profiles(), star_roles, "dw")

        assert [t.table_name for t in ddl.tables].count("dim_region") == 1
        warnings = [r.getMessage() for r in caplog.records if r.levelno == logging.WARNING]
        assert any("dim_region" in m and "order_date -> region" in m for m in warnings)

    def test_maintenance_procedure_compares_typed_keys(self, config):
        """Test that the natural key is matched in its column type, not as text."""
        procedure = DDLGenerator(config).maintenance_procedure("dw")

        assert "'WHERE %I = ($1).%I AND is_current = TRUE'" in procedure
        assert "TG_TABLE_SCHEMA, TG_TABLE_NAME, TG_ARGV[0], TG_ARGV[0])" in procedure
        assert "USING NEW;" in procedure
        assert "::text" not in procedure

    def test_simple_table_column_collisions(self, config):
        """Test that source columns never repeat generated or sanitized column names."""
        roles = [
            make_role("id", ColumnRole.IDENTIFIER),
            make_role("Name", ColumnRole.DIMENSION, unique_count=30, null_count=30),
            make_role("created_at", ColumnRole.IDENTIFIER),
            make_role("name", ColumnRole.DIMENSION, unique_count=30, null_count=30),
        ]
        classification = TableClassification(
            table_name="people", table_type=TableType.DIMENSION_TABLE,
            schema_pattern=SchemaPattern.SIMPLE_TABLE, confidence=0.3,
        )
        table = DDLGenerator(config).generate(classification, [], roles, "dw").tables[0]

        assert [c.name for c in table.columns] == ["id", "id_1", "name", "created_at_1", "name_1", "created_at"]
        assert table.column("id").role == ColumnRole.SURROGATE_KEY
        assert table.column("id_1").source_column == "id"
        assert table.column("name_1").source_column == "name"
        assert "    id_1 TEXT NOT NULL" in table.create_statement

    def test_dimension_column_collisions(self, config):
        """Test that natural key and attributes avoid surrogate and SCD column names."""
        structure = DimensionStructure(
            table_name="accounts",
            natural_key=make_role("dim_id", ColumnRole.IDENTIFIER),
            attributes=[make_role("is_current", ColumnRole.CATEGORICAL_DIMENSION, unique_count=2, null_count=2)],
        )
        classification = TableClassification(
            table_name="accounts", table_type=TableType.DIMENSION_TABLE,
            schema_pattern=SchemaPattern.DIMENSION_TABLE, confidence=0.6, dimension_structure=structure,
        )
        ddl = DDLGenerator(config).generate(classification, [], [], "dw")
        table = ddl.tables[0]
        names = [c.name for c in table.columns]

        assert len(names) == len(set(names))
        assert names[:3] == ["dim_id", "dim_id_1", "is_current_1"]
        assert table.column("dim_id_1").role == ColumnRole.NATURAL_KEY
        assert table.indexes[0] == "CREATE INDEX idx_dim_accounts_natural_key ON dw.dim_accounts (dim_id_1);"
        assert ddl.trigger_statements[0].endswith("update_dimension_scd('dim_id_1');")

    def test_simple_table_ddl(self, config):
        """Test the simple table wraps every column."""
        roles = [make_role("code", ColumnRole.IDENTIFIER), make_role("label", ColumnRole.DIMENSION,
                                                                       unique_count=30, null_count=30)]
        classification = SchemaClassifier(config).classify("things", roles, RelationshipReport())
        ddl = DDLGenerator(config).generate(classification, [], roles, "dw")

        table = ddl.tables[0]
        assert table.table_name == "things"
        assert [c.name for c in table.columns] == ["id", "code", "label", "created_at"]
        assert table.column("created_at").render() == "    created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP"
        assert ddl.maintenance_procedure is None


class TestNamingAdvisor:
    """Test cases for NamingAdvisor."""

    def test_sales_domain(self):
        """Test that order, price and quantity columns point to the sales domain."""
        roles = [
            make_role("order_id", ColumnRole.IDENTIFIER),
            make_role("price", ColumnRole.MEASURE, SemanticType.CURRENCY),
            make_role("quantity", ColumnRole.MEASURE),
        ]
        suggestion = NamingAdvisor().suggest("raw_orders", roles)

        assert suggestion.detected_domain == "sales"
        assert suggestion.domain_scores["sales"] == 5
        assert suggestion.schema_name == "sales_analytics"
        assert suggestion.table_purpose == "general"
        assert suggestion.table_name == "order_price_data"
        assert suggestion.suggested_columns == {
            "order_id": "order_id",
            "price": "amount_usd",
            "quantity": "quantity",
        }

    def test_general_domain_fallback(self):
        """Test the table based schema name when no domain matches."""
        roles = [make_role("foo", ColumnRole.IDENTIFIER)]
        suggestion = NamingAdvisor().suggest("My Table", roles)

        assert suggestion.detected_domain == "general"
        assert suggestion.domain_confidence == 0.0
        assert suggestion.schema_name == "my_table_schema"
        assert suggestion.table_purpose == "lookup"
        assert suggestion.suggested_columns == {"foo": "foo_id"}

    def test_purpose_from_classification(self, config, star_roles, star_relationships):
        """Test that a fact classification yields a fact purpose."""
        classification = SchemaClassifier(config).classify("sales", star_roles, star_relationships)
        suggestion = NamingAdvisor().suggest("sales", star_roles, classification)

        assert suggestion.table_purpose == "fact"
        assert suggestion.table_name.endswith("_fact")
