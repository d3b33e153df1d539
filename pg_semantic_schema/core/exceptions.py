"""Exceptions raised by the schema inference engine."""


class SchemaInferenceError(Exception):
    """Base class for all inference errors."""

    pass


class InputValidationError(SchemaInferenceError):
    """Raised when the input table is missing, empty or not rectangular."""

    pass


class ConfigurationError(SchemaInferenceError):
    """Raised when an inference configuration value is invalid."""

    pass
