"""
Binding Processor - form data → process schema shape and runtime configs.

Note: form validation is expected to happen upstream (the UI layer validates
against `form_schema`). This module only merges, binds and extracts.

Flow for a submission:
1. merge_with_defaults: definition defaults overlaid by form values
2. apply_bindings: direct bindings written into a fresh process-schema dict
3. extract_*_config: read-only snapshots consumed by process-instance rules
"""

import logging
from collections.abc import Mapping
from typing import Any, Optional

from schema_engine.paths import set_value_by_path
from schema_engine.schemas import (
    FieldBinding,
    ProcessedProposalConfig,
    ProcessedVotingConfig,
    SchemaProcessResult,
    VotingSchemaDefinition,
)

logger = logging.getLogger(__name__)

VOTING_CONFIG_KEYS = ("allowProposals", "allowDecisions", "maxVotesPerMember")

DEFAULT_ALLOW_PROPOSALS = True
DEFAULT_ALLOW_DECISIONS = True
DEFAULT_MAX_VOTES_PER_MEMBER = 3

PROPOSAL_REQUIRED_FIELDS = ("title", "description")
PROPOSAL_OPTIONAL_FIELDS = ("amount", "category", "schemaSpecificData")


def proposal_field_constraints() -> dict[str, dict[str, Any]]:
    """Fixed per-field constraints, identical for every schema type."""
    return {
        "title": {"type": "string", "minLength": 1, "maxLength": 200},
        "description": {"type": "string", "minLength": 1, "maxLength": 5000},
        "amount": {"type": "number", "min": 0},
        "category": {"type": "string"},
    }


def _coalesce(value: Optional[Any], default: Any) -> Any:
    return default if value is None else value


# ==================== BINDINGS ====================

def apply_binding(result: dict, field_name: str, value: Any, binding: FieldBinding) -> None:
    """Write value at binding.target. Non-direct transforms are left to the caller."""
    if not binding.is_direct:
        return
    set_value_by_path(result, binding.target, value)


def apply_bindings(form_data: Mapping[str, Any], schema: VotingSchemaDefinition) -> dict:
    """
    Apply every binding of the definition to form_data.

    Fields absent from form_data are skipped; an explicit None is a value
    and is written. form_data itself is never mutated.
    """
    result: dict = {}

    for field_name, binding in schema.bindings.items():
        if field_name not in form_data:
            continue
        apply_binding(result, field_name, form_data[field_name], binding)

    return result


def get_special_bindings(schema: VotingSchemaDefinition) -> dict[str, FieldBinding]:
    """Bindings with a non-direct transform (e.g. 'stateConfig') for caller-side handling."""
    return {
        field_name: binding
        for field_name, binding in schema.bindings.items()
        if not binding.is_direct
    }


def merge_with_defaults(form_data: Mapping[str, Any], schema: VotingSchemaDefinition) -> dict:
    """Shallow merge; form values win over definition defaults."""
    return {**schema.defaults, **form_data}


# ==================== CONFIG EXTRACTION ====================

def extract_voting_config(form_data: Mapping[str, Any], schema: VotingSchemaDefinition) -> ProcessedVotingConfig:
    merged = merge_with_defaults(form_data, schema)

    return ProcessedVotingConfig(
        allow_proposals=_coalesce(merged.get("allowProposals"), DEFAULT_ALLOW_PROPOSALS),
        allow_decisions=_coalesce(merged.get("allowDecisions"), DEFAULT_ALLOW_DECISIONS),
        max_votes_per_member=_coalesce(merged.get("maxVotesPerMember"), DEFAULT_MAX_VOTES_PER_MEMBER),
        schema_type=schema.schema_type,
        additional_config={
            key: value for key, value in merged.items()
            if key not in VOTING_CONFIG_KEYS
        },
    )


def extract_proposal_config(form_data: Mapping[str, Any], schema: VotingSchemaDefinition) -> ProcessedProposalConfig:
    merged = merge_with_defaults(form_data, schema)

    return ProcessedProposalConfig(
        required_fields=list(PROPOSAL_REQUIRED_FIELDS),
        optional_fields=list(PROPOSAL_OPTIONAL_FIELDS),
        field_constraints=proposal_field_constraints(),
        schema_type=schema.schema_type,
        allow_proposals=_coalesce(merged.get("allowProposals"), DEFAULT_ALLOW_PROPOSALS),
    )


def process_with_schema(form_data: Mapping[str, Any], schema: VotingSchemaDefinition) -> SchemaProcessResult:
    """
    Derive both runtime configs from already-validated form data.

    Always reports is_valid=True; field-level validation is not done here.
    """
    logger.debug(f"Processing form data with schema '{schema.schema_type}'")
    return SchemaProcessResult(
        schema_type=schema.schema_type,
        is_valid=True,
        errors=[],
        voting_config=extract_voting_config(form_data, schema),
        proposal_config=extract_proposal_config(form_data, schema),
    )


def matches_schema_type(data: Any, schema: VotingSchemaDefinition) -> bool:
    """True when data is a mapping whose schemaType equals the definition's."""
    if not isinstance(data, Mapping):
        return False
    return data.get("schemaType") == schema.schema_type
