"""
Legacy Validator/Extractor - flat process schemas that predate the
voting definition registry.

A stored legacy schema looks like:

    {
      "schemaType": "advanced",
      "allowProposals": true,
      "allowDecisions": true,
      "instanceData": {"maxVotesPerElector": 3},
      "advancedVotingConfig": {...},
      ...any other keys...
    }

Unknown top-level keys are preserved and surfaced as additional config.
Both vote-cap spellings (maxVotesPerElector / maxVotesPerMember) appear in
production rows and are read verbatim; neither is rewritten into the other.
"""

import base64
import json
import logging
from collections.abc import Callable, Iterable, Mapping
from dataclasses import dataclass
from functools import partial
from typing import Any, Optional, Sequence

from pydantic import ValidationError

from schema_engine.bindings import (
    PROPOSAL_OPTIONAL_FIELDS,
    PROPOSAL_REQUIRED_FIELDS,
    proposal_field_constraints,
)
from schema_engine.schemas import (
    DecisionProcessSchemaBase,
    LegacyProcessResult,
    ProposalConfig,
    SchemaCompatibility,
    SchemaType,
    SchemaValidationResult,
    VoteSelectionResult,
    VotingConfig,
)

logger = logging.getLogger(__name__)

LEGACY_BASE_KEYS = ("allowProposals", "allowDecisions", "instanceData")
VOTE_CAP_KEYS = ("maxVotesPerElector", "maxVotesPerMember")

UNKNOWN_SCHEMA_TYPE = "unknown"
INVALID_SCHEMA_TYPE = "invalid"


def _is_non_negative_int(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool) and value >= 0


def _dedupe(values: Iterable) -> list:
    return list(dict.fromkeys(values))


# ==================== VALIDATION ====================

def is_valid_decision_process_schema(data: Any) -> bool:
    """
    Type guard for the legacy shape.

    Requires boolean allowProposals/allowDecisions and an instanceData
    mapping holding at least one vote cap; every vote cap present must be a
    non-negative integer.
    """
    if not isinstance(data, Mapping):
        return False

    if not isinstance(data.get("allowProposals"), bool):
        return False
    if not isinstance(data.get("allowDecisions"), bool):
        return False

    instance_data = data.get("instanceData")
    if not isinstance(instance_data, Mapping):
        return False

    caps = [instance_data[key] for key in VOTE_CAP_KEYS if key in instance_data]
    return bool(caps) and all(_is_non_negative_int(cap) for cap in caps)


def extract_supported_properties(data: Mapping[str, Any]) -> list[str]:
    """Base keys first, then every other top-level key in stored order."""
    return [*LEGACY_BASE_KEYS, *(key for key in data if key not in LEGACY_BASE_KEYS)]


def validate_schema_structure(data: Any) -> SchemaValidationResult:
    """
    Parse data against the legacy base shape (DecisionProcessSchemaBase).

    Failures collapse into one aggregated message with schema_type 'invalid'.
    """
    try:
        DecisionProcessSchemaBase.model_validate(data)
    except ValidationError as e:
        logger.info(f"Legacy schema failed structural validation ({e.error_count()} errors)")
        return SchemaValidationResult(
            is_valid=False,
            schema_type=INVALID_SCHEMA_TYPE,
            errors=[str(e)],
            supported_properties=[],
        )

    schema_type = data.get("schemaType")
    return SchemaValidationResult(
        is_valid=True,
        schema_type=str(schema_type) if schema_type is not None else UNKNOWN_SCHEMA_TYPE,
        errors=[],
        supported_properties=extract_supported_properties(data),
    )


# ==================== CONFIG EXTRACTION ====================

def extract_voting_config(schema: Mapping[str, Any], schema_type: str = UNKNOWN_SCHEMA_TYPE) -> VotingConfig:
    """
    Read the voting config from a valid legacy schema.

    Every non-base top-level key lands in additional_config. For 'advanced'
    schemas the nested advancedVotingConfig is overlaid on top.
    """
    instance_data = schema.get("instanceData") or {}

    additional_config = {
        key: value for key, value in schema.items()
        if key not in LEGACY_BASE_KEYS
    }

    advanced = schema.get("advancedVotingConfig")
    if schema_type == SchemaType.ADVANCED and isinstance(advanced, Mapping):
        additional_config.update(advanced)

    return VotingConfig(
        allow_proposals=schema["allowProposals"],
        allow_decisions=schema["allowDecisions"],
        max_votes_per_elector=instance_data.get("maxVotesPerElector"),
        max_votes_per_member=instance_data.get("maxVotesPerMember"),
        schema_type=schema_type,
        additional_config=additional_config or None,
    )


def _overlay_proposal_config(config: dict, overlay: Any) -> None:
    """Union field lists (first occurrence wins) and shallow-merge constraints."""
    if not isinstance(overlay, Mapping):
        return

    for key, overlay_key in (("required_fields", "requiredFields"), ("optional_fields", "optionalFields")):
        extra = overlay.get(overlay_key)
        if isinstance(extra, list):
            config[key] = _dedupe([*config[key], *extra])

    constraints = overlay.get("fieldConstraints")
    if isinstance(constraints, Mapping):
        config["field_constraints"] = {**config["field_constraints"], **constraints}


def extract_proposal_config(schema: Mapping[str, Any], schema_type: str = UNKNOWN_SCHEMA_TYPE) -> ProposalConfig:
    """
    Read the proposal config from a valid legacy schema.

    A top-level proposalConfig overlay applies to every schema type;
    advancedProposalConfig applies to 'advanced' schemas only.
    """
    config = {
        "required_fields": list(PROPOSAL_REQUIRED_FIELDS),
        "optional_fields": list(PROPOSAL_OPTIONAL_FIELDS),
        "field_constraints": proposal_field_constraints(),
    }

    _overlay_proposal_config(config, schema.get("proposalConfig"))
    if schema_type == SchemaType.ADVANCED:
        _overlay_proposal_config(config, schema.get("advancedProposalConfig"))

    return ProposalConfig(
        **config,
        schema_type=schema_type,
        allow_proposals=schema["allowProposals"],
    )


# ==================== VOTES & FINGERPRINTS ====================

def validate_vote_selection(selected_proposal_ids: Sequence[str], max_votes: int,
                            available_proposal_ids: Iterable[str]) -> VoteSelectionResult:
    """
    Check a ballot before it is recorded.

    Every applicable problem is reported; checks never short-circuit.
    """
    errors = []
    available = set(available_proposal_ids)

    if len(selected_proposal_ids) == 0:
        errors.append("At least one proposal must be selected")

    if len(selected_proposal_ids) > max_votes:
        errors.append(f"Cannot select more than {max_votes} proposals")

    invalid = [pid for pid in selected_proposal_ids if pid not in available]
    if invalid:
        errors.append(f"Invalid proposal IDs: {', '.join(invalid)}")

    seen = set()
    duplicates = []
    for pid in selected_proposal_ids:
        if pid in seen:
            duplicates.append(pid)
        seen.add(pid)
    if duplicates:
        errors.append(f"Duplicate proposal IDs: {', '.join(duplicates)}")

    return VoteSelectionResult(is_valid=len(errors) == 0, errors=errors)


def create_schema_signature(schema: Mapping[str, Any]) -> str:
    """
    Deterministic fingerprint of the voting-relevant subset of a schema.

    base64(JSON({allowProposals, allowDecisions, maxVotesPerElector})), keys
    in that fixed order. Absent keys are omitted; an explicit None stays
    null. Other keys never affect it.
    """
    instance_data = schema.get("instanceData")
    if not isinstance(instance_data, Mapping):
        instance_data = {}

    normalized = {
        key: source[key]
        for key, source in (
            ("allowProposals", schema),
            ("allowDecisions", schema),
            ("maxVotesPerElector", instance_data),
        )
        if key in source
    }

    payload = json.dumps(normalized, separators=(",", ":"))
    return base64.b64encode(payload.encode("utf-8")).decode("ascii")


def validate_schema_compatibility(schema: Mapping[str, Any],
                                  required_properties: Iterable[str]) -> SchemaCompatibility:
    missing = [prop for prop in required_properties if prop not in schema]
    return SchemaCompatibility(is_compatible=len(missing) == 0, missing_properties=missing)


# ==================== LEGACY HANDLERS ====================

@dataclass(frozen=True)
class LegacySchemaHandler:
    """Old-style bundle of validate/extract callables for one schema type."""
    schema_type: str
    validate: Callable[[Any], bool]
    extract_voting_config: Callable[[Mapping], VotingConfig]
    extract_proposal_config: Callable[[Mapping], ProposalConfig]
    validate_schema: Callable[[Any], SchemaValidationResult] = validate_schema_structure


def create_legacy_handler(schema_type: str, require_tag: bool = True) -> LegacySchemaHandler:
    """
    Build a handler whose extractors are bound to schema_type.

    With require_tag, validate() additionally demands data['schemaType'] == schema_type.
    """
    def validate(data: Any) -> bool:
        if not is_valid_decision_process_schema(data):
            return False
        return not require_tag or data.get("schemaType") == schema_type

    return LegacySchemaHandler(
        schema_type=schema_type,
        validate=validate,
        extract_voting_config=partial(extract_voting_config, schema_type=schema_type),
        extract_proposal_config=partial(extract_proposal_config, schema_type=schema_type),
    )


DEFAULT_LEGACY_HANDLER = create_legacy_handler(SchemaType.DEFAULT.value, require_tag=False)

LEGACY_HANDLERS: dict[str, LegacySchemaHandler] = {
    SchemaType.DEFAULT.value: DEFAULT_LEGACY_HANDLER,
    SchemaType.SIMPLE.value: create_legacy_handler(SchemaType.SIMPLE.value),
    SchemaType.ADVANCED.value: create_legacy_handler(SchemaType.ADVANCED.value),
}


def detect_legacy_schema_type(data: Any,
                              handlers: Optional[Mapping[str, LegacySchemaHandler]] = None) -> str:
    """Explicit schemaType wins; otherwise the first handler that validates; else 'unknown'."""
    handlers = LEGACY_HANDLERS if handlers is None else handlers

    if isinstance(data, Mapping) and "schemaType" in data:
        return str(data["schemaType"])

    for schema_type, handler in handlers.items():
        if handler.validate(data):
            return schema_type

    return UNKNOWN_SCHEMA_TYPE


def process_legacy_schema(data: Any,
                          handlers: Optional[Mapping[str, LegacySchemaHandler]] = None) -> LegacyProcessResult:
    """
    Validate a stored legacy schema and extract its runtime configs.

    Malformed data short-circuits: no partial extraction is attempted.
    """
    handlers = LEGACY_HANDLERS if handlers is None else handlers

    schema_type = detect_legacy_schema_type(data, handlers)
    handler = handlers.get(schema_type, DEFAULT_LEGACY_HANDLER)

    validation_result = handler.validate_schema(data)
    if not validation_result.is_valid or not handler.validate(data):
        logger.info(f"Legacy schema rejected (detected type '{schema_type}')")
        return LegacyProcessResult(
            schema_type=schema_type,
            is_valid=False,
            validation_result=validation_result,
        )

    return LegacyProcessResult(
        schema_type=schema_type,
        is_valid=True,
        voting_config=handler.extract_voting_config(data),
        proposal_config=handler.extract_proposal_config(data),
        validation_result=validation_result,
    )
