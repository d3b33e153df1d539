"""
Pytest configuration for pg-semantic-schema test suite.

This module provides shared fixtures and configuration for all tests.
"""

import pytest
import sys
from pathlib import Path

# Add the project root to the Python path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from pg_semantic_schema.core.config import InferenceConfig
from pg_semantic_schema.core.models import (
    ColumnRole, HierarchyCandidate, RelationshipReport, SemanticType
)
from pg_semantic_schema.core.table import Table

from tests.factories import make_foreign_key, make_role


@pytest.fixture(scope="session")
def project_root_path():
    """Return the project root path."""
    return project_root


@pytest.fixture
def config():
    """Return the default inference options."""
    return InferenceConfig()


@pytest.fixture
def customers_table():
    """A dimension-shaped table: one key column plus three sparse attributes."""
    headers = ["customer_code", "region", "segment", "signup_date"]
    rows = [
        ["C001", "north", "retail", "2024-01-01"],
        ["C002", "south", "corporate", "2024-01-02"],
        ["C003", "north", "retail", "2024-01-03"],
        ["C004", "south", "corporate", "2024-01-01"],
        ["C005", "north", "retail", "2024-01-02"],
        ["C006", "south", "corporate", "2024-01-03"],
        ["C007", "north", None, "2024-01-01"],
        ["C008", "south", "", "2024-01-02"],
        ["C009", None, "retail", "2024-01-03"],
        ["C010", "  ", "corporate", None],
    ]
    return Table("customers", headers, rows)


@pytest.fixture
def contacts_table():
    """A table of two unrelated unique columns, too weak for any pattern."""
    headers = ["customer_email", "customer_code"]
    rows = [[f"user{i}@example.com", f"C{i:03d}"] for i in range(1, 9)]
    return Table("contacts", headers, rows)


@pytest.fixture
def star_roles():
    """Two measures and three dimension references."""
    return [
        make_role("quantity", ColumnRole.MEASURE, unique_count=150),
        make_role("amount", ColumnRole.MEASURE, SemanticType.CURRENCY, unique_count=180),
        make_role("region", ColumnRole.CATEGORICAL_DIMENSION, unique_count=4, null_count=2),
        make_role("product", ColumnRole.DIMENSION, unique_count=40, null_count=20),
        make_role("order_date", ColumnRole.TEMPORAL_DIMENSION, SemanticType.DATE, unique_count=30, null_count=10),
    ]


@pytest.fixture
def star_relationships():
    """Two foreign key candidates and no hierarchies."""
    return RelationshipReport(foreign_keys=[
        make_foreign_key("region", "product", 0.9),
        make_foreign_key("product", "order_date", 0.75),
    ])


@pytest.fixture
def snowflake_relationships(star_relationships):
    """The star relationships plus two strong hierarchies and a weak one."""
    return RelationshipReport(
        foreign_keys=star_relationships.foreign_keys,
        hierarchies=[
            HierarchyCandidate(parent="product", child="region", coverage=0.9),
            HierarchyCandidate(parent="order_date", child="region", coverage=0.8),
            HierarchyCandidate(parent="quantity", child="amount", coverage=0.5),
        ],
    )
