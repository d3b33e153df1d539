"""
pg-semantic-schema Configuration Management

This module handles configuration for the inference engine.

Two layers are provided:
- Config: a JSON-file backed settings manager with dotted key access
- InferenceConfig: the typed, immutable option set passed explicitly to
  every stage of an inference run
"""

import os
import re
import json
import copy
from typing import Dict, Any, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from .exceptions import ConfigurationError
from .models import SemanticType


class PatternRule(BaseModel):
    """A semantic type detection rule: full-match regex plus base confidence."""

    model_config = ConfigDict(frozen=True)

    pattern: str = Field(..., description="Regular expression matched against the whole value")
    base_confidence: float = Field(0.8, description="Confidence of a single-value match")
    description: str = Field("", description="Human readable description")

    @field_validator('pattern')
    @classmethod
    def validate_pattern(cls, v):
        try:
            re.compile(v)
        except re.error as e:
            raise ConfigurationError(f"Invalid semantic type pattern {v!r}: {e}")
        return v

    def matches(self, value: str) -> bool:
        """Return True when the stripped value fully matches the pattern."""
        return re.fullmatch(self.pattern, value.strip()) is not None


DEFAULT_PATTERNS: Dict[SemanticType, PatternRule] = {
    SemanticType.EMAIL: PatternRule(
        pattern=r"[a-zA-Z0-9._%+-]+@[a-zA-Z0-9.-]+\.[a-zA-Z]{2,}",
        base_confidence=0.9,
        description="Email address"),
    SemanticType.PHONE: PatternRule(
        pattern=r"(\+?1[-.\s]?)?\(?[0-9]{3}\)?[-.\s]?[0-9]{3}[-.\s]?[0-9]{4}",
        base_confidence=0.85,
        description="Phone number (US format)"),
    SemanticType.CURRENCY: PatternRule(
        pattern=r"\$?\d+\.?\d*",
        base_confidence=0.9,
        description="Currency amount"),
    SemanticType.DATE: PatternRule(
        pattern=r"\d{4}-\d{2}-\d{2}|\d{2}/\d{2}/\d{4}|\d{2}-\d{2}-\d{4}",
        base_confidence=0.95,
        description="Date (ISO, US or day-first)"),
    SemanticType.TIME: PatternRule(
        pattern=r"\d{2}:\d{2}(:\d{2})?",
        base_confidence=0.9,
        description="24-hour time"),
    SemanticType.URL: PatternRule(
        pattern=r"https?://[^\s/$.?#].[^\s]*",
        base_confidence=0.9,
        description="HTTP/HTTPS URL"),
    SemanticType.ZIP_CODE: PatternRule(
        pattern=r"\d{5}(-\d{4})?",
        base_confidence=0.9,
        description="US ZIP code"),
    SemanticType.SSN: PatternRule(
        pattern=r"\d{3}-\d{2}-\d{4}",
        base_confidence=0.95,
        description="US Social Security Number"),
}


class InferenceConfig(BaseModel):
    """Options for a single inference run.

    Every threshold is a configurable default; the values mirror the ones
    the engine has always used.
    """

    model_config = ConfigDict(frozen=True)

    # Profiling
    sample_size: int = Field(1000, description="Non-blank values considered per column")
    confidence_threshold: float = Field(0.8, description="Minimum share of matches to accept a semantic type")
    patterns: Dict[SemanticType, PatternRule] = Field(
        default_factory=lambda: dict(DEFAULT_PATTERNS),
        description="Semantic type rules in priority order"
    )

    # Consumed by the upstream parser only
    delimiter: str = Field(",", description="Field delimiter of the source file")
    quote: str = Field('"', description="Quote character of the source file")

    # Relationship discovery
    fd_strength_threshold: float = Field(0.8, description="Minimum functional dependency strength")
    hierarchy_coverage_threshold: float = Field(0.7, description="Minimum coverage of a retained hierarchy")
    jaccard_threshold: float = Field(0.7, description="Minimum Jaccard similarity of a foreign key candidate")

    # Role classification
    identifier_uniqueness_threshold: float = Field(0.8, description="Uniqueness ratio above which a column is an identifier")
    categorical_cardinality_cutoff: int = Field(20, description="Distinct count below which a column is categorical")
    dimension_cardinality_cutoff: int = Field(100, description="Distinct count below which a column is a dimension")
    identifier_share_threshold: float = Field(0.3, description="Identifier share above which a table is a dimension")

    # DDL synthesis
    not_null_ratio: float = Field(0.10, description="Null ratio below which NOT NULL is emitted")
    unique_min_distinct: int = Field(5, description="Distinct count a UNIQUE identifier must exceed")
    schema_prefix: str = Field("semantic_", description="Prefix of generated fact table names")
    fact_table_suffix: str = Field("_fact", description="Suffix of generated fact table names")
    dim_table_prefix: str = Field("dim_", description="Prefix of generated dimension table names")
    bounded_text_columns: bool = Field(False, description="Size plain text key and dimension columns as VARCHAR")

    @field_validator('patterns', mode='before')
    @classmethod
    def validate_patterns(cls, v):
        if not isinstance(v, dict):
            raise ConfigurationError("patterns must be a mapping of semantic type to rule")
        rules = {}
        for key, rule in v.items():
            try:
                semantic_type = SemanticType(key)
            except ValueError:
                raise ConfigurationError(f"Unknown semantic type in patterns: {key!r}")
            if semantic_type == SemanticType.UNKNOWN:
                raise ConfigurationError("The 'unknown' semantic type cannot have a pattern")
            if isinstance(rule, str):
                rule = PatternRule(pattern=rule)
            elif isinstance(rule, (list, tuple)):
                rule = PatternRule(pattern=rule[0], base_confidence=rule[1])
            rules[semantic_type] = rule
        return rules

    @model_validator(mode='after')
    def validate_ranges(self):
        if self.sample_size < 1:
            raise ConfigurationError(f"sample_size must be positive, got {self.sample_size}")
        for name in ('confidence_threshold', 'fd_strength_threshold', 'hierarchy_coverage_threshold',
                     'jaccard_threshold', 'identifier_uniqueness_threshold', 'identifier_share_threshold',
                     'not_null_ratio'):
            value = getattr(self, name)
            if not 0.0 <= value <= 1.0:
                raise ConfigurationError(f"{name} must be within [0, 1], got {value}")
        if self.categorical_cardinality_cutoff > self.dimension_cardinality_cutoff:
            raise ConfigurationError("categorical_cardinality_cutoff cannot exceed dimension_cardinality_cutoff")
        return self


class Config:
    """Configuration manager for pg-semantic-schema."""

    def __init__(self, config_file: str = "config.json"):
        """Initialize configuration."""
        self.config_file = config_file
        self.config = self._load_config()
        self.environment = os.getenv("PG_SEMANTIC_SCHEMA_ENV", "development")

    def _load_config(self) -> Dict[str, Any]:
        """Load configuration from file, layered over the defaults."""
        config = self._get_default_config()
        if not os.path.exists(self.config_file):
            return config
        try:
            with open(self.config_file, 'r') as f:
                loaded = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            raise ConfigurationError(f"Error loading config {self.config_file}: {e}")
        return self._merge(config, loaded)

    def _merge(self, base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
        merged = copy.deepcopy(base)
        for key, value in override.items():
            if isinstance(value, dict) and isinstance(merged.get(key), dict):
                merged[key] = self._merge(merged[key], value)
            else:
                merged[key] = value
        return merged

    def _get_default_config(self) -> Dict[str, Any]:
        """Get default configuration."""
        return {
            "inference": {
                "sample_size": 1000,
                "confidence_threshold": 0.8,
                "delimiter": ",",
                "quote": '"',
                "fd_strength_threshold": 0.8,
                "hierarchy_coverage_threshold": 0.7,
                "jaccard_threshold": 0.7
            },
            "postgres": {
                "schema_name": None,
                "schema_prefix": "semantic_",
                "fact_table_suffix": "_fact",
                "dim_table_prefix": "dim_"
            },
            "logging": {
                "level": "INFO",
                "file": None
            }
        }

    def get(self, key: str, default: Any = None) -> Any:
        """Get configuration value by key."""
        keys = key.split('.')
        value = self.config

        for k in keys:
            if isinstance(value, dict) and k in value:
                value = value[k]
            else:
                return default

        return value

    def set(self, key: str, value: Any) -> None:
        """Set configuration value."""
        keys = key.split('.')
        config = self.config

        for k in keys[:-1]:
            if k not in config:
                config[k] = {}
            config = config[k]

        config[keys[-1]] = value

    def save(self) -> None:
        """Save configuration to file."""
        with open(self.config_file, 'w') as f:
            json.dump(self.config, f, indent=2)

    def inference_config(self, **overrides) -> InferenceConfig:
        """Build the typed options for an inference run.

        Args:
            **overrides: Field values taking precedence over the file

        Returns:
            InferenceConfig: Validated, immutable options
        """
        options = dict(self.get("inference", {}) or {})
        postgres = self.get("postgres", {}) or {}
        for key in ("schema_prefix", "fact_table_suffix", "dim_table_prefix"):
            if key in postgres:
                options[key] = postgres[key]
        options.update(overrides)

        unknown = set(options) - set(InferenceConfig.model_fields)
        if unknown:
            raise ConfigurationError(f"Unknown inference options: {sorted(unknown)}")
        return InferenceConfig(**options)
