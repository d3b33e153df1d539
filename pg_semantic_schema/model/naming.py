"""
pg-semantic-schema Naming Advisor

This module suggests business-friendly names for an inferred schema.
The business domain is detected by matching column names against
per-domain vocabularies, boosted by the semantic types present.
"""

import re
from collections import Counter
from typing import Dict, List, Optional

from ..core.config import Config
from ..core.logger import Logger
from ..core.models import (
    DIMENSION_ROLES, ColumnRole, ColumnRoleAssignment, NamingSuggestion,
    SemanticType, TableClassification, TableType
)


DOMAIN_VOCABULARIES: Dict[str, List[str]] = {
    "sales": ["orderNumber", "orderDate", "totalPrice", "discount", "quantity", "price"],
    "finance": ["amount", "currency", "accountNumber", "balance", "interestRate"],
    "customer": ["email", "telephone", "address", "name", "contactType"],
    "product": ["sku", "gtin", "brand", "category", "description", "model"],
    "organization": ["employee", "department", "jobTitle", "worksFor", "salary", "manager",
                     "hire", "position", "ssn", "commission"],
    "location": ["address", "latitude", "longitude", "postalCode", "addressCountry"],
    "time": ["startDate", "endDate", "dateCreated", "dateModified"],
    "energy": ["consumption", "meter", "energy", "power", "kwh", "demand", "tariff", "grid", "solar", "wind"],
    "food": ["inspection", "establishment", "food", "restaurant", "license", "violation", "safety", "kitchen"],
    "healthcare": ["patient", "medical", "diagnosis", "treatment", "medication", "hospital", "physician",
                   "insurance"],
    "transportation": ["shipment", "tracking", "delivery", "carrier", "logistics", "freight", "warehouse",
                       "route"],
    "manufacturing": ["production", "quality", "inspection", "batch", "manufacturing", "defect", "tolerance",
                      "standard"],
}

SEMANTIC_WEIGHTS = {
    SemanticType.EMAIL: 2,
    SemanticType.PHONE: 2,
    SemanticType.CURRENCY: 3,
    SemanticType.DATE: 1,
    SemanticType.SSN: 2,
}

BOOSTED_DOMAINS = frozenset(["customer", "sales", "finance"])

SCHEMA_NAMES = {
    "sales": "sales_analytics",
    "finance": "financial_data",
    "customer": "customer_data",
    "product": "product_catalog",
    "organization": "organizational_data",
    "location": "location_data",
    "time": "temporal_data",
    "energy": "energy_data",
    "food": "food_safety",
    "healthcare": "patient_data",
    "transportation": "supply_chain",
    "manufacturing": "manufacturing_data",
}

PURPOSE_SUFFIXES = {
    "fact": "_fact",
    "dimension": "_dim",
    "bridge": "_bridge",
    "lookup": "_lookup",
    "transaction": "_log",
    "general": "_data",
}

SEMANTIC_COLUMN_NAMES = {
    SemanticType.EMAIL: "email_address",
    SemanticType.PHONE: "phone_number",
    SemanticType.CURRENCY: "amount_usd",
    SemanticType.DATE: "event_date",
    SemanticType.SSN: "social_security_number",
    SemanticType.URL: "website_url",
    SemanticType.ZIP_CODE: "postal_code",
}

STOP_WORDS = frozenset(["and", "the", "for", "with", "from"])

GENERAL_DOMAIN = "general"


def _sanitize(name: str) -> str:
    return re.sub(r'[^a-zA-Z0-9]', '_', name).lower()


class NamingAdvisor:
    """
    Naming advisor deriving domain, purpose and names from column roles.
    """

    def __init__(self, settings: Optional[Config] = None):
        """Initialize the naming advisor."""
        self.logger = Logger("naming", config=settings)

    def suggest(self, table_name: str, roles: List[ColumnRoleAssignment],
                classification: Optional[TableClassification] = None) -> NamingSuggestion:
        """
        Suggest names for a classified table.

        Args:
            table_name (str): Source table name
            roles (List[ColumnRoleAssignment]): Column roles
            classification (Optional[TableClassification]): Table classification, for the table type

        Returns:
            NamingSuggestion: Domain, purpose and suggested names
        """
        table_type = classification.table_type if classification else None
        scores = self.domain_scores(roles)
        domain, best_score = self._best_domain(scores)
        purpose = self.table_purpose(roles, table_type)

        suggestion = NamingSuggestion(
            detected_domain=domain,
            domain_confidence=best_score / max(1, len(roles)),
            table_purpose=purpose,
            schema_name=self.schema_name(domain, table_name),
            table_name=self.table_name(roles, purpose, table_name),
            suggested_columns={r.column: self.column_name(r) for r in roles},
            domain_scores=scores,
        )

        self.logger.info(
            f"Detected domain '{domain}' (score {best_score}), purpose '{purpose}', "
            f"schema '{suggestion.schema_name}', table '{suggestion.table_name}'"
        )
        return suggestion

    def domain_scores(self, roles: List[ColumnRoleAssignment]) -> Dict[str, int]:
        """
        Score every domain by vocabulary matches plus the semantic type boost.

        Args:
            roles (List[ColumnRoleAssignment]): Column roles

        Returns:
            Dict[str, int]: Score per domain, in vocabulary order
        """
        names = [r.column.lower().replace("_", "") for r in roles]
        present_types = {r.semantic_type for r in roles}
        boost = sum(SEMANTIC_WEIGHTS.get(t, 0) for t in present_types)

        scores = {}
        for domain, terms in DOMAIN_VOCABULARIES.items():
            lowered = [t.lower() for t in terms]
            matches = sum(1 for name in names if any(term in name for term in lowered))
            scores[domain] = matches + (boost if domain in BOOSTED_DOMAINS else 0)
        return scores

    def table_purpose(self, roles: List[ColumnRoleAssignment], table_type: Optional[TableType] = None) -> str:
        """Classify the purpose of the table from its roles and type."""
        measures = sum(1 for r in roles if r.role == ColumnRole.MEASURE)
        dimensions = sum(1 for r in roles if r.role in DIMENSION_ROLES)
        identifiers = sum(1 for r in roles if r.role == ColumnRole.IDENTIFIER)

        if measures > 1 and dimensions > 2:
            return "fact"
        if table_type == TableType.FACT_TABLE:
            return "fact"
        if dimensions > measures and identifiers >= 1:
            return "dimension"
        if table_type == TableType.DIMENSION_TABLE:
            return "dimension"
        if identifiers > 2 and measures < 2:
            return "bridge"
        if identifiers == 1 and measures < 1:
            return "lookup"
        if identifiers > 1 and any(r.role == ColumnRole.TEMPORAL_DIMENSION for r in roles):
            return "transaction"
        return "general"

    def schema_name(self, domain: str, table_name: str) -> str:
        return SCHEMA_NAMES.get(domain, f"{_sanitize(table_name)}_schema")

    def key_concepts(self, roles: List[ColumnRoleAssignment]) -> List[str]:
        """Up to three most frequent meaningful words of the column names."""
        words = []
        for role in roles:
            name = role.column.lower().replace("_", " ")
            name = re.sub(r'id$|key$|date$|time$|created|updated|modified', '', name)
            words.extend(w for w in re.split(r'\s+', name) if len(w) > 2)

        # most_common keeps first-seen order among equal counts
        top = [word for word, _ in Counter(words).most_common(3)]
        return [word for word in top if word not in STOP_WORDS]

    def table_name(self, roles: List[ColumnRoleAssignment], purpose: str, table_name: str) -> str:
        concepts = self.key_concepts(roles)
        base = "_".join(concepts[:2]) if concepts else _sanitize(table_name)
        name = re.sub(r'_+', '_', base + PURPOSE_SUFFIXES[purpose])
        return name.strip("_").lower()

    def column_name(self, role: ColumnRoleAssignment) -> str:
        """Suggested name of one column from its semantic type and role."""
        name = SEMANTIC_COLUMN_NAMES.get(role.semantic_type, role.column)
        if role.role == ColumnRole.IDENTIFIER and not name.endswith("_id"):
            return f"{name}_id"
        if role.role == ColumnRole.FOREIGN_KEY:
            return f"{name}_key"
        return name

    def _best_domain(self, scores: Dict[str, int]):
        best_domain, best_score = GENERAL_DOMAIN, 0
        for domain, score in scores.items():
            if score > best_score:
                best_domain, best_score = domain, score
        return best_domain, best_score
