"""
schema_engine/schemas — Decision Schema Engine model package.

Re-exports all models from domain.py so callers can write
`from schema_engine.schemas import VotingSchemaDefinition, ...`.
"""

from schema_engine.schemas.domain import (
    DIRECT_TRANSFORM,
    SchemaType,
    PhasePosition,
    AdvancementMethod,
    FieldBinding,
    VotingSchemaDefinition,
    ActionRules,
    AdvancementRule,
    PhaseRules,
    PhaseDefinition,
    DecisionSchemaDefinition,
    FieldDescriptor,
    FieldOrder,
    RubricCriterionInfo,
    RubricScoringInfo,
    ProcessedVotingConfig,
    ProcessedProposalConfig,
    SchemaProcessResult,
    LegacyInstanceData,
    DecisionProcessSchemaBase,
    SchemaValidationResult,
    VotingConfig,
    ProposalConfig,
    LegacyProcessResult,
    VoteSelectionResult,
    SchemaCompatibility,
)

__all__ = [
    "DIRECT_TRANSFORM",
    "SchemaType",
    "PhasePosition",
    "AdvancementMethod",
    "FieldBinding",
    "VotingSchemaDefinition",
    "ActionRules",
    "AdvancementRule",
    "PhaseRules",
    "PhaseDefinition",
    "DecisionSchemaDefinition",
    "FieldDescriptor",
    "FieldOrder",
    "RubricCriterionInfo",
    "RubricScoringInfo",
    "ProcessedVotingConfig",
    "ProcessedProposalConfig",
    "SchemaProcessResult",
    "LegacyInstanceData",
    "DecisionProcessSchemaBase",
    "SchemaValidationResult",
    "VotingConfig",
    "ProposalConfig",
    "LegacyProcessResult",
    "VoteSelectionResult",
    "SchemaCompatibility",
]
