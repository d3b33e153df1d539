"""
pg-semantic-schema Inference Pipeline

This module runs the inference stages for one table, or for many
independent tables on a worker pool:

1. Column profiling
2. Relationship discovery
3. Role classification
4. Schema pattern classification
5. Data quality assessment
6. Naming suggestions
7. DDL generation
"""

import time
from concurrent.futures import ThreadPoolExecutor
from typing import Any, Callable, List, Optional, Sequence

from .core.config import Config, InferenceConfig
from .core.exceptions import InputValidationError
from .core.logger import Logger
from .core.models import InferenceResult
from .core.table import Table
from .discover import ColumnProfiler, QualityAssessor, RelationshipFinder, RoleClassifier
from .model import DDLGenerator, NamingAdvisor, SchemaClassifier


class SchemaInferenceEngine:
    """
    Schema inference engine chaining every stage for a table.
    """

    def __init__(self, config: Optional[InferenceConfig] = None, settings: Optional[Config] = None):
        """Initialize the inference engine.

        Args:
            config (InferenceConfig): Options of every run; built from settings when omitted
            settings (Config): Configuration file manager
        """
        self.settings = settings or Config()
        self.config = config or self.settings.inference_config()
        self.logger = Logger("pipeline", config=self.settings)

        self.profiler = ColumnProfiler(self.config, self.settings)
        self.relationship_finder = RelationshipFinder(self.config, self.settings)
        self.role_classifier = RoleClassifier(self.config, self.settings)
        self.schema_classifier = SchemaClassifier(self.config, self.settings)
        self.quality_assessor = QualityAssessor(self.settings)
        self.naming_advisor = NamingAdvisor(self.settings)
        self.ddl_generator = DDLGenerator(self.config, self.settings)

    def infer(self, table: Table, schema_name: Optional[str] = None) -> InferenceResult:
        """
        Infer the schema of one table.

        Args:
            table (Table): Validated input table
            schema_name (Optional[str]): Target schema; the configured or suggested name is used when omitted

        Returns:
            InferenceResult: Every stage output of the run

        Raises:
            InputValidationError: When the input is not a Table
        """
        if not isinstance(table, Table):
            raise InputValidationError(f"Expected a Table, got {type(table).__name__}")

        self.logger.log_phase_start(f"schema inference for '{table.name}'")
        start_time = time.time()

        profiles = self._pipeline_step("column profiling", self.profiler.profile_table, table)
        relationships = self._pipeline_step(
            "relationship discovery", self.relationship_finder.find_relationships, table
        )
        roles = self._pipeline_step("role classification", self.role_classifier.classify, profiles)
        classification = self._pipeline_step(
            "schema classification", self.schema_classifier.classify, table.name, roles, relationships
        )
        data_quality = self._pipeline_step(
            "quality assessment", self.quality_assessor.assess, roles, relationships, profiles
        )
        naming = self._pipeline_step(
            "naming", self.naming_advisor.suggest, table.name, roles, classification
        )

        schema_name = schema_name or self.settings.get("postgres.schema_name") or naming.schema_name
        ddl = self._pipeline_step(
            "DDL generation", self.ddl_generator.generate,
            classification, profiles, roles, schema_name, table.name
        )

        self.logger.log_phase_complete(
            f"schema inference for '{table.name}'", duration=time.time() - start_time
        )
        return InferenceResult(
            table_name=table.name,
            schema_name=schema_name,
            profiles=profiles,
            relationships=relationships,
            roles=roles,
            classification=classification,
            ddl=ddl,
            data_quality=data_quality,
            naming=naming,
        )

    def infer_many(self, tables: Sequence[Table], max_workers: Optional[int] = None,
                   schema_name: Optional[str] = None) -> List[InferenceResult]:
        """
        Infer the schemas of independent tables in parallel.

        Args:
            tables (Sequence[Table]): Input tables
            max_workers (Optional[int]): Worker threads, executor default when omitted
            schema_name (Optional[str]): Target schema shared by every table

        Returns:
            List[InferenceResult]: Results in input order
        """
        self.logger.info(f"Inferring schemas for {len(tables)} tables")
        with ThreadPoolExecutor(max_workers=max_workers) as executor:
            return list(executor.map(lambda t: self.infer(t, schema_name), tables))

    def _pipeline_step(self, step: str, func: Callable[..., Any], *args) -> Any:
        """Run one stage, logging its duration and re-raising failures."""
        start_time = time.time()
        try:
            result = func(*args)
        except Exception as e:
            self.logger.error(f"Error during {step}: {str(e)}", step=step)
            raise
        self.logger.debug(f"{step} took {time.time() - start_time:.3f}s", step=step)
        return result


def infer_schema(name: str, headers: Sequence[str], rows: Sequence[Sequence[Optional[str]]],
                 config: Optional[InferenceConfig] = None, schema_name: Optional[str] = None) -> InferenceResult:
    """
    Validate raw tabular data and infer its schema.

    Args:
        name (str): Table name
        headers (Sequence[str]): Column names
        rows (Sequence[Sequence[Optional[str]]]): Rectangular rows
        config (Optional[InferenceConfig]): Options of the run
        schema_name (Optional[str]): Target schema

    Returns:
        InferenceResult: Every stage output of the run
    """
    table = Table(name, headers, rows)
    return SchemaInferenceEngine(config).infer(table, schema_name)
