"""
Deprecated SchemaRegistry - old handler-based API on top of VotingSchemaRegistry.

Kept so existing call sites keep working during migration. Lookups and
processing delegate to the voting registry; the handler-registration
methods are no-ops that warn and hand back a reduced default handler.
They never raise.

Use VotingSchemaRegistry (services/voting_registry.py) for new code.
"""

import logging
import warnings
from collections.abc import Mapping
from typing import Any, Optional

from schema_engine.config import EngineSettings
from schema_engine.legacy import LegacySchemaHandler, create_legacy_handler
from schema_engine.schemas import (
    LegacyProcessResult,
    ProposalConfig,
    SchemaProcessResult,
    SchemaType,
    SchemaValidationResult,
    VotingConfig,
)
from schema_engine.services.voting_registry import VotingSchemaRegistry

logger = logging.getLogger(__name__)


def to_legacy_result(result: SchemaProcessResult, form_data: Any = None) -> LegacyProcessResult:
    """Convert a voting-registry result into the old processSchema() shape."""
    voting = result.voting_config
    proposal = result.proposal_config
    supported_properties = list(form_data.keys()) if isinstance(form_data, Mapping) else []

    return LegacyProcessResult(
        schema_type=result.schema_type,
        is_valid=result.is_valid,
        voting_config=VotingConfig(
            allow_proposals=voting.allow_proposals,
            allow_decisions=voting.allow_decisions,
            max_votes_per_member=voting.max_votes_per_member,
            schema_type=voting.schema_type,
            additional_config=dict(voting.additional_config) or None,
        ),
        proposal_config=ProposalConfig(
            required_fields=list(proposal.required_fields),
            optional_fields=list(proposal.optional_fields),
            field_constraints=dict(proposal.field_constraints),
            schema_type=proposal.schema_type,
            allow_proposals=proposal.allow_proposals,
        ),
        validation_result=SchemaValidationResult(
            is_valid=result.is_valid,
            schema_type=result.schema_type,
            errors=list(result.errors),
            supported_properties=supported_properties,
        ),
    )


class SchemaRegistry:
    """
    Deprecated facade preserving the handler-registration API.

    Args:
        voting_registry: the registry every call is delegated to
        settings: engine settings; deprecation_warnings additionally emits
                  Python DeprecationWarnings next to the log warning
    """

    def __init__(self, voting_registry: VotingSchemaRegistry, settings: Optional[EngineSettings] = None):
        self._voting_registry = voting_registry
        self._settings = settings or EngineSettings()

    def _deprecated(self, method: str, replacement: str) -> None:
        message = f"SchemaRegistry.{method}() is deprecated. Use {replacement} instead."
        logger.warning(message)
        if self._settings.deprecation_warnings:
            warnings.warn(message, DeprecationWarning, stacklevel=3)

    # ------------------------------------------------------------------
    # Delegated to VotingSchemaRegistry
    # ------------------------------------------------------------------

    def get_all_schema_types(self) -> list[str]:
        return self._voting_registry.get_all_schema_types()

    def detect_schema_type(self, data: Any) -> str:
        return self._voting_registry.detect_schema_type(data)

    def process_schema(self, data: Any) -> LegacyProcessResult:
        return to_legacy_result(self._voting_registry.process_schema(data), data)

    # ------------------------------------------------------------------
    # Deprecated handler API
    # ------------------------------------------------------------------

    def register_handler(self, handler: LegacySchemaHandler) -> None:
        """No-op. Register a VotingSchemaDefinition instead."""
        self._deprecated("register_handler", "VotingSchemaRegistry.register_schema() with a schema definition")
        logger.debug(f"Ignored legacy handler registration for '{handler.schema_type}'")

    def get_handler(self, schema_type: str) -> Optional[LegacySchemaHandler]:
        """Always None."""
        self._deprecated("get_handler", "VotingSchemaRegistry.get_schema()")
        return None

    def get_handler_or_default(self, schema_type: str) -> LegacySchemaHandler:
        """A minimal 'default' handler whatever schema_type is asked for."""
        self._deprecated("get_handler_or_default", "VotingSchemaRegistry.get_schema_or_default()")
        return create_legacy_handler(SchemaType.DEFAULT.value, require_tag=False)
