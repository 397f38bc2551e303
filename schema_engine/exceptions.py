"""Engine exceptions. Ordinary validation outcomes are returned as values, not raised."""

from pydantic import ValidationError


class SchemaEngineError(Exception):
    """Base class for schema engine errors."""
    pass


class InvalidSchemaDefinitionError(SchemaEngineError):
    """Raised when a definition handed to a registry does not validate."""

    def __init__(self, schema_type: str, error: ValidationError):
        self.schema_type = schema_type
        self.error = error
        super().__init__(f"Invalid schema definition '{schema_type}': {error}")
