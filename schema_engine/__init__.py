"""
schema_engine — Decision Schema Engine.

Defines what a decision process is (phases, rules, voting definitions),
compiles proposal/rubric templates into ordered field descriptors, and
derives runtime voting/proposal configs from form submissions and from
legacy stored process schemas.

Typical startup:

    settings = EngineSettings.from_env()
    configure_logging(settings)
    registry = create_voting_registry(settings)
"""

from schema_engine.config import EngineSettings, configure_logging
from schema_engine.exceptions import InvalidSchemaDefinitionError, SchemaEngineError
from schema_engine.field_compiler import (
    compile_proposal_schema,
    compile_rubric_schema,
    get_rubric_scoring_info,
)
from schema_engine.legacy import process_legacy_schema
from schema_engine.services.voting_registry import VotingSchemaRegistry, create_voting_registry

__all__ = [
    "EngineSettings",
    "configure_logging",
    "SchemaEngineError",
    "InvalidSchemaDefinitionError",
    "compile_proposal_schema",
    "compile_rubric_schema",
    "get_rubric_scoring_info",
    "process_legacy_schema",
    "VotingSchemaRegistry",
    "create_voting_registry",
]
