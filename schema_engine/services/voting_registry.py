"""
Voting Schema Registry - named VotingSchemaDefinitions + schema-type resolution.

One registry instance is built at startup (create_voting_registry) and passed
to whoever needs it. Registration is last-writer-wins and unsynchronized:
register from a single thread (normally at startup) before serving traffic.

Type resolution, in order:
1. explicit `schemaType` on the data, if that type is registered
2. first registered matcher that accepts the data (registration order)
3. the literal 'default'; process_schema then uses the configured default definition
"""

import logging
from collections.abc import Callable, Mapping
from typing import Any, Optional, Union

from pydantic import ValidationError

from schema_engine.bindings import matches_schema_type, process_with_schema
from schema_engine.config import EngineSettings
from schema_engine.definitions import DEFAULT_SCHEMA, VOTING_SCHEMA_DEFINITIONS
from schema_engine.exceptions import InvalidSchemaDefinitionError
from schema_engine.schemas import SchemaProcessResult, SchemaType, VotingSchemaDefinition

logger = logging.getLogger(__name__)

SchemaMatcher = Callable[[Any], bool]


class VotingSchemaRegistry:
    """String-keyed map of voting definitions plus one designated default."""

    def __init__(self, default_schema: VotingSchemaDefinition = DEFAULT_SCHEMA,
                 definitions: tuple = ()):
        self._schemas: dict[str, VotingSchemaDefinition] = {}
        self._matchers: dict[str, SchemaMatcher] = {}
        self._default_schema_type = default_schema.schema_type

        for definition in definitions:
            self.register_schema(definition)
        if self._default_schema_type not in self._schemas:
            self.register_schema(default_schema)

    def register_schema(self, definition: Union[VotingSchemaDefinition, Mapping],
                        matcher: Optional[SchemaMatcher] = None) -> VotingSchemaDefinition:
        """
        Register (or replace) a definition under its schema_type.

        Args:
            definition: VotingSchemaDefinition, or a mapping in stored camelCase shape
            matcher: structural predicate used during type detection;
                     defaults to schemaType equality

        Raises:
            InvalidSchemaDefinitionError: if a mapping fails validation
        """
        if not isinstance(definition, VotingSchemaDefinition):
            try:
                definition = VotingSchemaDefinition.model_validate(definition)
            except ValidationError as e:
                schema_type = definition.get("schemaType", "?") if isinstance(definition, Mapping) else "?"
                raise InvalidSchemaDefinitionError(str(schema_type), e) from e

        schema_type = definition.schema_type
        if schema_type in self._schemas:
            logger.warning(f"Overwriting registered voting schema '{schema_type}'")

        self._schemas[schema_type] = definition
        self._matchers[schema_type] = matcher or (
            lambda data, _definition=definition: matches_schema_type(data, _definition)
        )
        logger.info(f"Registered voting schema '{schema_type}' ({definition.name})")
        return definition

    def get_schema(self, schema_type: str) -> Optional[VotingSchemaDefinition]:
        return self._schemas.get(schema_type)

    def get_schema_or_default(self, schema_type: str) -> VotingSchemaDefinition:
        definition = self._schemas.get(schema_type)
        if definition is None:
            return self.default_schema
        return definition

    @property
    def default_schema(self) -> VotingSchemaDefinition:
        return self._schemas[self._default_schema_type]

    def get_all_schemas(self) -> list[VotingSchemaDefinition]:
        return list(self._schemas.values())

    def get_all_schema_types(self) -> list[str]:
        return list(self._schemas.keys())

    def _resolve_schema_type(self, data: Any) -> Optional[str]:
        """Registered type for data, or None when nothing identifies it."""
        if isinstance(data, Mapping) and "schemaType" in data:
            explicit = data["schemaType"]
            if isinstance(explicit, str) and explicit in self._schemas:
                return explicit

        for schema_type, matcher in self._matchers.items():
            if matcher(data):
                return schema_type

        return None

    def detect_schema_type(self, data: Any) -> str:
        schema_type = self._resolve_schema_type(data)
        if schema_type is None:
            logger.debug("No registered schema matched; falling back to 'default'")
            return SchemaType.DEFAULT.value
        return schema_type

    def process_schema(self, form_data: Any) -> SchemaProcessResult:
        """
        Detect the type, pick the definition and derive configs.

        Data that no registered type identifies is processed with the
        configured default definition.
        """
        schema_type = self._resolve_schema_type(form_data)
        if schema_type is None:
            definition = self.default_schema
        else:
            definition = self.get_schema_or_default(schema_type)

        # non-mapping submissions carry no values; defaults apply
        values = form_data if isinstance(form_data, Mapping) else {}
        return process_with_schema(values, definition)


def create_voting_registry(settings: Optional[EngineSettings] = None) -> VotingSchemaRegistry:
    """
    Build a registry holding the built-in definitions.

    The configured default_schema_type picks the fallback definition; an
    unknown type falls back to the built-in 'default' with a warning.
    """
    settings = settings or EngineSettings()

    builtins = {definition.schema_type: definition for definition in VOTING_SCHEMA_DEFINITIONS}
    default_schema = builtins.get(settings.default_schema_type)
    if default_schema is None:
        logger.warning(
            f"Unknown default schema type '{settings.default_schema_type}', using '{DEFAULT_SCHEMA.schema_type}'"
        )
        default_schema = DEFAULT_SCHEMA

    return VotingSchemaRegistry(
        default_schema=default_schema,
        definitions=tuple(VOTING_SCHEMA_DEFINITIONS),
    )
